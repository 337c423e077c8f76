from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import structlog

# IMPORT ROUTERS
from band_estimator.routers.health import router as health_router
from band_estimator.routers.essays import router as essays_router
from band_estimator.config import settings
from band_estimator.logging_config import configure_logging
load_dotenv()

logger = structlog.get_logger(__name__)


# SWAGGER UI - tag display order
_OPENAPI_TAGS = [
    {"name": "Root"},
    {"name": "Health"},
    {"name": "Essays"},
]

# FASTAPI APPLICATION CONFIGURATION
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=_OPENAPI_TAGS,
)

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

# REGISTER ROUTERS (order matches _OPENAPI_TAGS / Swagger UI display order)
app.include_router(health_router)   # Health
app.include_router(essays_router)   # Essays


# ROOT ENDPOINT
@app.get("/", tags=["Root"], summary="Root endpoint")
async def root():
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc"
        },
        "status": "running"
    }


# STARTUP EVENT
@app.on_event("startup")
async def startup_event():
    configure_logging(settings)
    logger.info(
        "service_starting",
        service=settings.APP_NAME,
        env=settings.APP_ENV,
        model_configured=settings.model_configured,
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("band_estimator.main:app", host="0.0.0.0", port=8000, reload=True)

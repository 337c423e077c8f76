"""
Health Check Router - IELTS Band Estimator
band_estimator/routers/health.py

Reports cache connectivity and whether a scoring model is configured.
Neither being unavailable makes the service unhealthy: the pipeline
degrades to cache misses and heuristic scoring.
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import Dict
from datetime import datetime, timezone

from band_estimator.config import settings
from band_estimator.core.dependencies import get_scoring_pipeline
from band_estimator.services.scoring_pipeline import ScoringPipeline

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str
    dependencies: Dict[str, str]


async def check_cache(pipeline: ScoringPipeline) -> str:
    """Cache health; an unreachable Redis only means every lookup misses."""
    if not pipeline.cache.enabled:
        return "disabled"
    if await pipeline.cache.ping():
        return "healthy"
    return "unavailable (serving without cache)"


def check_model(pipeline: ScoringPipeline) -> str:
    if pipeline.model_configured:
        return f"configured ({pipeline.invoker.model})"
    return "not configured (heuristic fallback)"


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check cache connectivity and scoring model configuration.",
)
async def health_check(pipeline: ScoringPipeline = Depends(get_scoring_pipeline)):
    dependencies = {
        "cache": await check_cache(pipeline),
        "model": check_model(pipeline),
    }
    fully_available = (
        dependencies["cache"] == "healthy" and pipeline.model_configured
    )
    return HealthResponse(
        status="healthy" if fully_available else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=settings.APP_VERSION,
        dependencies=dependencies,
    )

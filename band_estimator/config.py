"""Application configuration with comprehensive validation."""
from typing import Optional, Literal
from functools import lru_cache
from pydantic import AliasChoices, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with production-grade validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "IELTS Band Estimator"
    APP_VERSION: str = "1.0.0"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "json"

    # API
    API_V1_PREFIX: str = "/api/v1"

    # Scoring model (optional; every request falls back to heuristics without it)
    OPENAI_API_KEY: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "AI_KEY"),
    )
    DEFAULT_LLM_MODEL: str = "gpt-3.5-turbo"
    LLM_TEMPERATURE: float = Field(default=0.2, ge=0.0, le=2.0)
    LLM_MAX_TOKENS: int = Field(default=500, ge=50, le=4000)
    MODEL_DEADLINE_SECONDS: float = Field(default=30.0, ge=1.0, le=120.0)

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_TTL_SCORES: int = Field(default=86400, ge=1)  # 24 hours
    CACHE_KEY_PREFIX: str = "essay_cache"
    CACHE_FINGERPRINT_LENGTH: int = Field(default=16, ge=8, le=64)
    CACHE_OP_TIMEOUT_SECONDS: float = Field(default=0.5, gt=0.0, le=10.0)

    # Submission length window (inclusive)
    MIN_WORDS: int = Field(default=150, ge=1)
    MAX_WORDS: int = Field(default=320, ge=1)

    @field_validator("OPENAI_API_KEY", mode="before")
    @classmethod
    def blank_key_means_unset(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def validate_word_window(self):
        """Validate the accepted word window is not inverted."""
        if self.MIN_WORDS > self.MAX_WORDS:
            raise ValueError(
                f"MIN_WORDS ({self.MIN_WORDS}) must not exceed MAX_WORDS ({self.MAX_WORDS})"
            )
        return self

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure production does not run in debug mode."""
        if self.APP_ENV == "production" and self.DEBUG:
            raise ValueError("DEBUG must be False in production")
        return self

    @property
    def model_configured(self) -> bool:
        """True when a scoring-model credential is available."""
        return self.OPENAI_API_KEY is not None


@lru_cache
def get_settings() -> Settings:
    return Settings()

settings = get_settings()

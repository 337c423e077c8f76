"""
Dependencies - IELTS Band Estimator
band_estimator/core/dependencies.py

FastAPI dependency injection for the scoring pipeline.
"""

from functools import lru_cache

from band_estimator.config import get_settings
from band_estimator.services.cache import get_cache
from band_estimator.services.model_invoker import build_model_invoker
from band_estimator.services.scoring_pipeline import ScoringPipeline


@lru_cache()
def get_scoring_pipeline() -> ScoringPipeline:
    """Get cached ScoringPipeline instance."""
    config = get_settings()
    return ScoringPipeline(
        cache=get_cache(),
        invoker=build_model_invoker(config),
        min_words=config.MIN_WORDS,
        max_words=config.MAX_WORDS,
    )

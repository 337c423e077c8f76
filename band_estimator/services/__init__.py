"""
Services module for the IELTS Band Estimator.
"""

from band_estimator.services.cache import ContentCache, get_cache
from band_estimator.services.redis_cache import RedisCache
from band_estimator.services.model_invoker import InvocationResult, ModelInvoker, build_model_invoker
from band_estimator.services.scoring_pipeline import PipelineState, ScoringPipeline

__all__ = [
    "ContentCache",
    "InvocationResult",
    "ModelInvoker",
    "PipelineState",
    "RedisCache",
    "ScoringPipeline",
    "build_model_invoker",
    "get_cache",
]

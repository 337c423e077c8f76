"""
Content Cache - IELTS Band Estimator
band_estimator/services/cache.py

Maps a fingerprint of (task category, essay text) to a previously computed
ScoreResult for a fixed TTL. Gracefully handles Redis unavailability: every
failure is logged and treated as a miss or a skipped write.

Key format:
    essay_cache:<first 16 hex chars of sha256("<category>:<text>")>

The fingerprint is a truncated hash, so a collision is possible in principle;
that trade-off is accepted. Concurrent writers for one key simply overwrite
each other (last write wins).
"""
import asyncio
import hashlib
from typing import Optional

import redis
import structlog
from pydantic import ValidationError

from band_estimator.config import settings
from band_estimator.models.enumerations import TaskCategory
from band_estimator.models.score import ScoreResult
from band_estimator.services.redis_cache import RedisCache

logger = structlog.get_logger(__name__)

# TTL constants (in seconds)
TTL_SCORES = settings.CACHE_TTL_SCORES   # 24 hours by default

_CACHE_ERRORS = (redis.RedisError, OSError, asyncio.TimeoutError, ValidationError)


def fingerprint(
    task_category: TaskCategory,
    text: str,
    length: int = settings.CACHE_FINGERPRINT_LENGTH,
) -> str:
    """Truncated sha256 over "<category>:<text>" (text is not normalised)."""
    category = TaskCategory.parse(task_category).value
    digest = hashlib.sha256(f"{category}:{text}".encode("utf-8")).hexdigest()
    return digest[:length]


class ContentCache:
    """Best-effort score cache; never raises to its caller."""

    def __init__(
        self,
        backend: Optional[RedisCache],
        ttl_seconds: int = TTL_SCORES,
        key_prefix: str = settings.CACHE_KEY_PREFIX,
        op_timeout: float = settings.CACHE_OP_TIMEOUT_SECONDS,
    ):
        self.backend = backend
        self.ttl_seconds = ttl_seconds
        self.key_prefix = key_prefix
        self.op_timeout = op_timeout

    @property
    def enabled(self) -> bool:
        return self.backend is not None

    def key_for(self, task_category: TaskCategory, text: str) -> str:
        return f"{self.key_prefix}:{fingerprint(task_category, text)}"

    async def get(self, task_category: TaskCategory, text: str) -> Optional[ScoreResult]:
        """Cached result, or None on a miss or any backend failure."""
        if self.backend is None:
            return None
        key = self.key_for(task_category, text)
        try:
            return await asyncio.wait_for(
                self.backend.get(key, ScoreResult), timeout=self.op_timeout
            )
        except _CACHE_ERRORS as e:
            logger.warning("cache_unavailable", op="get", key=key, error=str(e))
            return None

    async def put(
        self,
        task_category: TaskCategory,
        text: str,
        result: ScoreResult,
        ttl: Optional[int] = None,
    ) -> None:
        """Write-once-per-TTL store; failures are logged and dropped."""
        if self.backend is None:
            return
        key = self.key_for(task_category, text)
        try:
            await asyncio.wait_for(
                self.backend.set(key, result, ttl or self.ttl_seconds),
                timeout=self.op_timeout,
            )
        except _CACHE_ERRORS as e:
            logger.warning("cache_unavailable", op="put", key=key, error=str(e))

    async def ping(self) -> bool:
        if self.backend is None:
            return False
        try:
            return await asyncio.wait_for(self.backend.ping(), timeout=self.op_timeout)
        except _CACHE_ERRORS:
            return False


# Singleton instance
_cache: Optional[ContentCache] = None


def get_cache() -> ContentCache:
    """
    Get or create the shared ContentCache.

    Returns:
        ContentCache backed by Redis, or a disabled ContentCache when the
        Redis client cannot even be constructed (e.g. malformed REDIS_URL).

    Note:
        No connection is made here; an unreachable Redis only shows up as
        misses at request time (graceful degradation).
    """
    global _cache
    if _cache is None:
        try:
            _cache = ContentCache(RedisCache())
        except (redis.RedisError, ValueError) as e:
            logger.warning("cache_disabled", error=str(e))
            _cache = ContentCache(None)
    return _cache


def reset_cache() -> None:
    """
    Reset the cache singleton.

    Useful for testing or when Redis connection needs to be re-established.
    """
    global _cache
    _cache = None

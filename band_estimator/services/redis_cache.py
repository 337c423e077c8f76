import redis.asyncio as redis
from typing import Optional, TypeVar, Type
from pydantic import BaseModel
from band_estimator.config import settings

T = TypeVar("T", bound=BaseModel)


class RedisCache:
    def __init__(self, url: Optional[str] = None):
        self.client = redis.from_url(
            url or settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=settings.CACHE_OP_TIMEOUT_SECONDS,
            socket_timeout=settings.CACHE_OP_TIMEOUT_SECONDS,
        )

    async def ping(self) -> bool:
        return bool(await self.client.ping())

    async def get(self, key: str, model: Type[T]) -> Optional[T]:
        """Get cached item and deserialize to Pydantic model."""
        data = await self.client.get(key)
        if data:
            return model.model_validate_json(data)
        return None

    async def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        """Cache Pydantic model with TTL."""
        await self.client.setex(
            key,
            ttl_seconds,
            value.model_dump_json(),
        )

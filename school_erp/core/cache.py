# school_erp/core/cache.py
"""Redis caching implementation."""
import json
import logging
from typing import Any, Optional
import redis.asyncio as redis

from .config import settings

logger = logging.getLogger(__name__)

class CacheManager:
    def __init__(self, url: str, enabled: bool = True, prefix: str = "school_erp"):
        self.url = url
        self.enabled = enabled
        self.prefix = prefix
        self.redis: Optional[redis.Redis] = None

    async def initialize(self):
        """Initialize Redis connection."""
        if self.enabled and not self.redis:
            self.redis = redis.from_url(
                self.url,
                encoding="utf-8",
                decode_responses=True
            )

    async def close(self):
        """Close Redis connection."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None

    async def ping(self) -> bool:
        await self.initialize()
        try:
            return bool(await self.redis.ping())
        except redis.RedisError as e:
            logger.warning(f"Cache ping failed: {e}")
            return False

    def make_key(self, *parts: Any) -> str:
        return ":".join([self.prefix, *[str(part) for part in parts]])

    async def get(self, key: str) -> Optional[Any]:
        """Get value from cache; a miss or an unreachable Redis both return None."""
        if not self.enabled:
            return None
        await self.initialize()
        try:
            value = await self.redis.get(key)
            return json.loads(value) if value else None
        except redis.RedisError as e:
            logger.warning(f"Cache get error for {key}: {e}")
            return None

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Set value in cache."""
        if not self.enabled:
            return False
        await self.initialize()
        try:
            return bool(await self.redis.set(key, json.dumps(value, default=str), ex=ttl or settings.cache_ttl))
        except redis.RedisError as e:
            logger.warning(f"Cache set error for {key}: {e}")
            return False

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching the pattern."""
        if not self.enabled:
            return 0
        await self.initialize()
        deleted = 0
        try:
            async for key in self.redis.scan_iter(match=self.make_key(pattern)):
                deleted += await self.redis.delete(key)
        except redis.RedisError as e:
            logger.warning(f"Cache invalidation error for {pattern}: {e}")
        return deleted

# Global cache instance
cache_manager = CacheManager(settings.redis_url, enabled=settings.cache_enabled)

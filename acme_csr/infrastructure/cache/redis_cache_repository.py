"""Redis-backed cache repository, namespaced per tenant"""

import json
import logging
import time
from typing import Any, Dict, Iterable, List, Optional

import redis

from ...core.config import settings
from ...core.context import current_tenant_id
from ...domain.exceptions import CacheWarmingException
from ...domain.repositories.cache_repository import ICacheRepository
from ...domain.value_objects.cache import CacheKey

logger = logging.getLogger(__name__)

HEALTH_CHECK_KEY = "health_check"
SCAN_COUNT = 500


def human_readable_size(size: int) -> str:
    for unit in ("B", "KB", "MB"):
        if size < 1024:
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.2f} {unit}"
        size /= 1024
    return f"{size:.2f} GB"


def _json_default(value):
    # Decimals, UUIDs and datetimes from the stats queries
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


class RedisCacheRepository(ICacheRepository):
    """Stores JSON payloads under {CACHE_PREFIX}{tenant_<id>:|central:}{key}

    Localized keys get a trailing `:{locale}` segment so each language keeps
    its own copy.
    """

    def __init__(self, client: redis.Redis, data_generator=None, prefix: Optional[str] = None, locale: Optional[str] = None):
        self.client = client
        self.data_generator = data_generator
        self.prefix = prefix if prefix is not None else settings.CACHE_PREFIX
        self.locale = locale or getattr(data_generator, "locale", None) or settings.FALLBACK_LOCALE

    @classmethod
    def from_url(cls, url: Optional[str] = None, data_generator=None, locale: Optional[str] = None) -> "RedisCacheRepository":
        client = redis.from_url(url or settings.REDIS_URL, decode_responses=True)
        return cls(client, data_generator=data_generator, locale=locale)

    def namespace(self) -> str:
        tenant_id = current_tenant_id()
        scope = f"tenant_{tenant_id}" if tenant_id else "central"
        return f"{self.prefix}{scope}:"

    def redis_key(self, key: CacheKey) -> str:
        if key.is_localized():
            return f"{self.namespace()}{key}:{self.locale}"
        return f"{self.namespace()}{key}"

    async def exists(self, key: CacheKey) -> bool:
        try:
            return bool(self.client.exists(self.redis_key(key)))
        except redis.RedisError as e:
            logger.error(f"Redis error checking key existence: {e}", extra={"cache_key": str(key)})
            return False

    async def get(self, key: CacheKey) -> Optional[Any]:
        try:
            value = self.client.get(self.redis_key(key))
        except redis.RedisError as e:
            logger.error(f"Error retrieving cache value: {e}", extra={"cache_key": str(key)})
            return None
        if value is None:
            return None
        try:
            return json.loads(value)
        except (TypeError, ValueError):
            return value

    async def set(self, key: CacheKey, data: Any, ttl: Optional[int] = None) -> None:
        ttl = ttl or settings.CACHE_FALLBACK_TTL
        self.client.setex(self.redis_key(key), ttl, json.dumps(data, default=_json_default))

    async def forget(self, key: CacheKey) -> bool:
        try:
            return self.client.delete(self.redis_key(key)) > 0
        except redis.RedisError as e:
            logger.error(f"Error deleting cache key: {e}", extra={"cache_key": str(key)})
            return False

    def _scan_delete(self, pattern: str) -> int:
        deleted = 0
        batch: List[str] = []
        for redis_key in self.client.scan_iter(match=pattern, count=SCAN_COUNT):
            batch.append(redis_key)
            if len(batch) >= SCAN_COUNT:
                deleted += self.client.delete(*batch)
                batch = []
        if batch:
            deleted += self.client.delete(*batch)
        return deleted

    async def flush(self) -> int:
        pattern = f"{self.namespace()}*"
        deleted = self._scan_delete(pattern)
        logger.info(f"Cache flush completed: {deleted} keys deleted", extra={"pattern": pattern})
        return deleted

    async def get_ttl(self, key: CacheKey) -> Optional[int]:
        try:
            ttl = self.client.ttl(self.redis_key(key))
        except redis.RedisError as e:
            logger.error(f"Error getting TTL for key: {e}", extra={"cache_key": str(key)})
            return None
        # -2 missing, -1 no expiry
        if not isinstance(ttl, int) or ttl < 0:
            return None
        return ttl

    async def is_healthy(self) -> bool:
        test_key = f"{self.prefix}{HEALTH_CHECK_KEY}"
        test_value = f"ping_{int(time.time())}"
        try:
            self.client.setex(test_key, 10, test_value)
            retrieved = self.client.get(test_key)
            self.client.delete(test_key)
        except redis.RedisError as e:
            logger.error(f"Redis health check failed: {e}")
            return False
        return retrieved == test_value

    async def get_stats(self) -> Dict[str, Any]:
        try:
            info = self.client.info()
            keys = list(self.client.scan_iter(match=f"{self.namespace()}*", count=SCAN_COUNT))
        except redis.RedisError as e:
            logger.error(f"Error getting Redis stats: {e}")
            return {"error": str(e), "healthy": False}
        hits = int(info.get("keyspace_hits", 0))
        misses = int(info.get("keyspace_misses", 0))
        return {
            "redis_version": info.get("redis_version", "unknown"),
            "connected_clients": int(info.get("connected_clients", 0)),
            "used_memory": info.get("used_memory_human", "0B"),
            "total_keys": len(keys),
            "keyspace_hits": hits,
            "keyspace_misses": misses,
            "hit_rate": round(hits / (hits + misses) * 100, 2) if hits + misses else 0.0,
            "healthy": True,
        }

    async def warm_cache(self, key: CacheKey) -> None:
        if self.data_generator is None:
            raise CacheWarmingException.empty_data(str(key))
        started = time.monotonic()
        logger.info("Starting cache warm operation", extra={"cache_key": str(key)})
        try:
            data = await self.data_generator.generate(key)
            if not data:
                raise CacheWarmingException.empty_data(str(key))
            await self.set(key, data, settings.CACHE_DEFAULT_TTL)
        except Exception as e:
            logger.error(f"Failed to warm cache {key}: {e}", extra={"cache_key": str(key)})
            raise
        duration_ms = round((time.monotonic() - started) * 1000, 2)
        logger.info(f"Cache warmed in {duration_ms} ms", extra={"cache_key": str(key)})

    async def warm_batch(self, keys: List[CacheKey]) -> Dict[str, bool]:
        results: Dict[str, bool] = {}
        batch_size = settings.CACHE_WARMING_BATCH_SIZE
        for start in range(0, len(keys), batch_size):
            for key in keys[start:start + batch_size]:
                try:
                    await self.warm_cache(key)
                    results[str(key)] = True
                except Exception as e:
                    logger.warning(f"Batch warm failed for {key}: {e}", extra={"cache_key": str(key)})
                    results[str(key)] = False
        return results

    async def get_key_info(self, key: CacheKey) -> Dict[str, Any]:
        redis_key = self.redis_key(key)
        exists = await self.exists(key)
        info: Dict[str, Any] = {
            "key": str(key),
            "redis_key": redis_key,
            "exists": exists,
            "ttl": None,
            "size": None,
            "size_human": None,
        }
        if not exists:
            return info
        try:
            size = self.client.strlen(redis_key)
        except redis.RedisError as e:
            logger.error(f"Error reading key size: {e}", extra={"cache_key": str(key)})
            size = 0
        info.update({"ttl": await self.get_ttl(key), "size": size, "size_human": human_readable_size(size)})
        return info

    def invalidate_patterns_sync(self, patterns: Iterable[str]) -> int:
        """Deletes every key matching the patterns, in all locales"""
        namespace = self.namespace()
        deleted = 0
        for pattern in patterns:
            deleted += self._scan_delete(f"{namespace}{pattern}")
            if not pattern.endswith("*"):
                deleted += self._scan_delete(f"{namespace}{pattern}:*")
        return deleted

    async def invalidate_patterns(self, patterns: Iterable[str]) -> int:
        return self.invalidate_patterns_sync(patterns)

"""Coordinates warming of widget, system and page caches"""

import logging
from typing import Callable, Dict, List, Optional

from ...domain.enums import CacheWarmingStrategy
from ...domain.exceptions import CacheWarmingException
from ...domain.repositories.cache_repository import ICacheRepository
from ...domain.value_objects.cache import CacheKey, CacheWarmingProgress

logger = logging.getLogger(__name__)

PRIORITY_WIDGETS = ("campaign_performance", "average_donation")

ProgressCallback = Callable[[CacheWarmingProgress, CacheKey], None]


class CacheWarmingOrchestrator:
    """Warms cache keys one at a time, tracking progress"""

    def __init__(self, cache_repository: ICacheRepository):
        self.cache_repository = cache_repository

    async def warm_all(self, on_progress: Optional[ProgressCallback] = None) -> CacheWarmingProgress:
        return await self.warm_caches(self.all_keys(), on_progress=on_progress)

    async def warm_widgets(self, on_progress: Optional[ProgressCallback] = None) -> CacheWarmingProgress:
        return await self.warm_caches(CacheKey.widget_keys(), on_progress=on_progress)

    async def warm_system(self, on_progress: Optional[ProgressCallback] = None) -> CacheWarmingProgress:
        return await self.warm_caches(CacheKey.system_keys(), on_progress=on_progress)

    async def warm_caches(
        self,
        keys: List[CacheKey],
        continue_on_failure: bool = True,
        on_progress: Optional[ProgressCallback] = None,
    ) -> CacheWarmingProgress:
        """Warms keys in order; keys that fail are listed on the returned progress"""
        if not keys:
            raise CacheWarmingException.empty_key_list()

        progress = CacheWarmingProgress.create(len(keys))
        if not await self.cache_repository.is_healthy():
            logger.error("Cache repository is not healthy, aborting warm operation")
            return progress.with_failure()

        progress = progress.start()
        for index, key in enumerate(keys, start=1):
            try:
                await self.cache_repository.warm_cache(key)
            except Exception as e:
                progress = progress.with_failed_key(key)
                logger.warning(f"Failed to warm cache key {key}: {e}", extra={"cache_key": str(key)})
                if not continue_on_failure:
                    return progress.with_progress(index - 1).with_failure()
            progress = progress.with_progress(index)
            if on_progress is not None:
                on_progress(progress, key)

        if len(progress.failed_keys) == len(keys):
            logger.error("All cache keys failed to warm", extra={"keys": len(keys)})
            return progress.with_failure()
        if progress.failed_keys:
            logger.warning(f"Cache warming finished with {len(progress.failed_keys)} failures", extra={"keys": len(keys)})
        return progress.complete()

    async def warm_single_cache(self, key: CacheKey) -> bool:
        try:
            await self.cache_repository.warm_cache(key)
        except Exception as e:
            logger.error(f"Failed to warm cache key {key}: {e}", extra={"cache_key": str(key)})
            return False
        return True

    def all_keys(self) -> List[CacheKey]:
        return CacheKey.system_keys() + CacheKey.widget_keys()

    async def get_cache_status(self) -> Dict[str, List[str]]:
        warmed: List[str] = []
        cold: List[str] = []
        for key in self.all_keys():
            if await self.cache_repository.exists(key):
                warmed.append(str(key))
            else:
                cold.append(str(key))
        return {"warmed": warmed, "cold": cold}

    async def get_warming_recommendations(self) -> Dict[str, List[str]]:
        status = await self.get_cache_status()
        system_keys = {str(key) for key in CacheKey.system_keys()}
        return {
            "priority_keys": [key for key in status["cold"] if key in system_keys],
            "optional_keys": [key for key in status["cold"] if key not in system_keys],
            "skip_keys": status["warmed"],
        }

    def create_warming_strategy(self, strategy) -> List[CacheKey]:
        if not isinstance(strategy, CacheWarmingStrategy):
            try:
                strategy = CacheWarmingStrategy.from_option(strategy)
            except ValueError:
                raise CacheWarmingException.unknown_strategy(strategy)
        if strategy == CacheWarmingStrategy.SYSTEM:
            return CacheKey.system_keys()
        if strategy == CacheWarmingStrategy.WIDGET:
            return CacheKey.widget_keys()
        if strategy == CacheWarmingStrategy.PRIORITY:
            return CacheKey.system_keys() + [CacheKey(key) for key in PRIORITY_WIDGETS]
        return self.all_keys()

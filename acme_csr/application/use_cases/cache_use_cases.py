"""Cache warming use cases"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from ...domain.enums import CacheWarmingStatus, WarmingJobStatus
from ...domain.exceptions import CacheWarmingException
from ...domain.repositories.cache_repository import ICacheRepository
from ...domain.repositories.job_queue import IJobQueue
from ...domain.value_objects.cache import CacheKey
from ..dtos.cache_dtos import (
    CacheRecommendationsDTO,
    CacheStatusDTO,
    CacheWarmJobDTO,
    CacheWarmJobStatusDTO,
    CacheWarmRequestDTO,
)
from ..services.cache_warming_orchestrator import CacheWarmingOrchestrator

logger = logging.getLogger(__name__)


def _parse_keys(keys: Optional[List[str]]) -> Optional[List[CacheKey]]:
    if not keys:
        return None
    try:
        return [CacheKey(key) for key in keys]
    except ValueError as e:
        raise CacheWarmingException(str(e), code="unknown_cache_key", status_code=422)


class StartCacheWarmingUseCase:
    """Validates the request, records a starting job and queues the warm-up"""

    def __init__(self, cache_repository: ICacheRepository, job_queue: IJobQueue, tracker):
        self.orchestrator = CacheWarmingOrchestrator(cache_repository)
        self.job_queue = job_queue
        self.tracker = tracker

    async def execute(self, request: CacheWarmRequestDTO, locale: Optional[str] = None) -> CacheWarmJobDTO:
        keys = _parse_keys(request.keys) or self.orchestrator.create_warming_strategy(request.strategy)
        job_id = str(uuid.uuid4())
        self.tracker.update(job_id, WarmingJobStatus.STARTING, total_items=len(keys), message="Queued")
        self.job_queue.enqueue(
            "warm_cache",
            job_id=job_id,
            strategy=request.strategy,
            keys=request.keys,
            locale=locale,
        )
        logger.info(f"Cache warming job {job_id} queued", extra={"strategy": request.strategy, "keys": len(keys)})
        return CacheWarmJobDTO(job_id=job_id, strategy=request.strategy)


class RunCacheWarmingUseCase:
    """Warms the keys of a strategy, reporting progress to the tracker when a job id is given"""

    def __init__(self, cache_repository: ICacheRepository, tracker=None):
        self.orchestrator = CacheWarmingOrchestrator(cache_repository)
        self.tracker = tracker

    async def execute(self, strategy: str = "all", keys: Optional[List[str]] = None, job_id: Optional[str] = None) -> CacheWarmJobStatusDTO:
        cache_keys = _parse_keys(keys) or self.orchestrator.create_warming_strategy(strategy)
        total = len(cache_keys)
        job_id = job_id or str(uuid.uuid4())

        def report(progress, key):
            if self.tracker is not None:
                self.tracker.update(
                    job_id, WarmingJobStatus.WARMING, progress.current_item, total,
                    message=f"Warmed {key}", failed_keys=list(progress.failed_keys),
                )

        if self.tracker is not None:
            self.tracker.update(job_id, WarmingJobStatus.WARMING, 0, total, message="Warming started")
        progress = await self.orchestrator.warm_caches(cache_keys, on_progress=report)

        failed = list(progress.failed_keys)
        if progress.status == CacheWarmingStatus.FAILED:
            status, message = WarmingJobStatus.FAILED, "Cache warming failed"
        elif failed:
            status, message = WarmingJobStatus.PARTIAL, f"{len(failed)} of {total} keys failed"
        else:
            status, message = WarmingJobStatus.COMPLETED, "Cache warming completed"

        record = {
            "job_id": job_id,
            "status": status.value,
            "percentage": progress.percentage,
            "current_item": progress.current_item,
            "total_items": total,
            "message": message,
            "failed_keys": failed,
        }
        if self.tracker is not None:
            record = self.tracker.update(job_id, status, progress.current_item, total, message, failed)
        return CacheWarmJobStatusDTO(**record)


class GetCacheWarmingJobUseCase:

    def __init__(self, tracker):
        self.tracker = tracker

    async def execute(self, job_id: str) -> CacheWarmJobStatusDTO:
        record = self.tracker.get(job_id)
        if record is None:
            raise CacheWarmingException.job_not_found(job_id)
        return CacheWarmJobStatusDTO(**record)


class GetCacheStatusUseCase:

    def __init__(self, cache_repository: ICacheRepository):
        self.cache_repository = cache_repository

    async def execute(self) -> CacheStatusDTO:
        status = await CacheWarmingOrchestrator(self.cache_repository).get_cache_status()
        return CacheStatusDTO(warmed=status["warmed"], cold=status["cold"], stats=await self.cache_repository.get_stats())


class GetCacheRecommendationsUseCase:

    def __init__(self, cache_repository: ICacheRepository):
        self.cache_repository = cache_repository

    async def execute(self) -> CacheRecommendationsDTO:
        recommendations = await CacheWarmingOrchestrator(self.cache_repository).get_warming_recommendations()
        return CacheRecommendationsDTO(**recommendations)


class ClearCacheUseCase:

    def __init__(self, cache_repository: ICacheRepository):
        self.cache_repository = cache_repository

    async def execute(self) -> int:
        removed = await self.cache_repository.flush()
        logger.info(f"Cleared {removed} cache entries")
        return removed


class GetDashboardWidgetsUseCase:
    """Dashboard widget payloads, computing the ones missing from the cache"""

    def __init__(self, cache_repository: ICacheRepository):
        self.cache_repository = cache_repository

    async def execute(self) -> Dict[str, Any]:
        widgets: Dict[str, Any] = {}
        for key in CacheKey.widget_keys():
            data = await self.cache_repository.get(key)
            if data is None:
                await self.cache_repository.warm_cache(key)
                data = await self.cache_repository.get(key)
            widgets[key.value] = data
        return widgets

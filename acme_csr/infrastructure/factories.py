"""Builders for the adapters shared by the worker, the CLI and the API"""

from typing import Callable, Optional

from ..application.services.cache_data_generator import CacheDataGenerator
from ..application.services.event_dispatcher import EventDispatcher
from ..core.config import settings
from ..domain.repositories.unit_of_work import IUnitOfWork
from .cache.redis_cache_repository import RedisCacheRepository
from .cache.warming_job_tracker import WarmingJobTracker
from .external_services.storage_service import StorageService
from .queue.celery_job_queue import CeleryJobQueue
from .repositories.unit_of_work_impl import unit_of_work_factory
from .search.meilisearch_engine import MeilisearchSearchEngine


def dispatching_unit_of_work_factory(job_queue=None) -> Callable[[], IUnitOfWork]:
    """Units of work whose committed domain events are turned into queued jobs"""
    dispatcher = EventDispatcher(job_queue or CeleryJobQueue())
    return unit_of_work_factory(dispatcher.publish)


def build_cache_repository(locale: Optional[str] = None) -> RedisCacheRepository:
    generator = CacheDataGenerator(unit_of_work_factory(), locale=locale)
    return RedisCacheRepository.from_url(settings.REDIS_URL, data_generator=generator, locale=generator.locale)


def build_warming_tracker() -> WarmingJobTracker:
    return WarmingJobTracker.from_url(settings.REDIS_URL)


def build_search_engine() -> MeilisearchSearchEngine:
    return MeilisearchSearchEngine(timeout=settings.MEILISEARCH_TASK_TIMEOUT)


def build_storage() -> StorageService:
    return StorageService()


def install_cache_invalidation() -> None:
    """Route ORM change notifications to the Redis cache"""
    from . import observers

    repository = RedisCacheRepository.from_url(settings.REDIS_URL)
    observers.set_cache_invalidator(repository.invalidate_patterns_sync)

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .application.use_cases.cache_use_cases import RunCacheWarmingUseCase
from .application.use_cases.campaign_use_cases import ExpireCampaignsUseCase
from .application.use_cases.currency_use_cases import UpdateExchangeRatesUseCase
from .application.use_cases.export_use_cases import CleanupExpiredExportsUseCase, ProcessExportUseCase
from .application.use_cases.import_use_cases import ProcessImportUseCase
from .application.use_cases.notification_use_cases import (
    DeliverNotificationEmailUseCase,
    SendEventNotificationUseCase,
)
from .application.use_cases.search_use_cases import (
    IndexEntityUseCase,
    ReindexEntityUseCase,
    RemoveEntityUseCase,
    entities_for,
)
from .application.use_cases.tenant_use_cases import ProvisionTenantUseCase
from .celery_app import celery_app
from .core.context import tenant_scope
from .db.database import SessionLocal
from .domain.enums import NotificationType, SearchableEntity, TenantStatus, WarmingJobStatus
from .domain.exceptions import DomainException
from .infrastructure.exports.row_sources import ExportRowSource
from .infrastructure.external_services.email_service import EmailService
from .infrastructure.external_services.exchange_rate_service import ExchangeRateService
from .infrastructure.factories import (
    build_cache_repository,
    build_search_engine,
    build_storage,
    build_warming_tracker,
    dispatching_unit_of_work_factory,
    install_cache_invalidation,
)
from .infrastructure.queue.celery_job_queue import CeleryJobQueue
from .infrastructure.repositories.unit_of_work_impl import unit_of_work_factory
from .infrastructure.tenancy.provisioner import TenantDatabaseProvisioner
from .infrastructure.tenancy.resolver import tenant_context_by_id
from .infrastructure.tenancy.search_index_manager import TenantSearchIndexManager

logger = logging.getLogger(__name__)

install_cache_invalidation()


def run_in_tenant(tenant_id: Optional[str], work: Callable[[], Awaitable[Any]]) -> Any:
    """Run a coroutine inside the tenant's context (central when tenant_id is None)"""

    async def runner():
        context = await tenant_context_by_id(tenant_id, SessionLocal)
        with tenant_scope(context):
            return await work()

    return asyncio.run(runner())


async def _active_tenant_ids() -> List[str]:
    async with unit_of_work_factory()() as uow:
        tenants = await uow.tenants.list(TenantStatus.ACTIVE)
    return [str(tenant.id) for tenant in tenants]


def _for_every_scope(task, **kwargs) -> int:
    """Queue task for the central database and each active tenant"""
    queue = CeleryJobQueue(celery_app)
    tenant_ids = [None] + run_in_tenant(None, _active_tenant_ids)
    for tenant_id in tenant_ids:
        queue.enqueue(task, tenant_id=tenant_id, **kwargs)
    return len(tenant_ids)


@celery_app.task(bind=True, max_retries=3, time_limit=900)
def warm_cache(self, job_id: Optional[str] = None, strategy: str = "all", keys: Optional[List[str]] = None, tenant_id: Optional[str] = None, locale: Optional[str] = None):
    """Background task to warm the cache keys of a strategy in one locale."""
    tracker = build_warming_tracker()

    async def work():
        return await RunCacheWarmingUseCase(build_cache_repository(locale), tracker).execute(strategy, keys, job_id)

    try:
        result = run_in_tenant(tenant_id, work)
    except DomainException as e:
        logger.error(f"Cache warming job {job_id} rejected: {e.message}")
        if job_id:
            tracker.update(job_id, WarmingJobStatus.FAILED, message=e.message)
        return {"job_id": job_id, "status": WarmingJobStatus.FAILED.value}
    except Exception as exc:
        logger.error(f"Error warming cache for job {job_id}: {exc}", extra={"tenant_id": tenant_id})
        if job_id:
            tracker.update(job_id, WarmingJobStatus.FAILED, message=str(exc))
        raise self.retry(countdown=60 * (self.request.retries + 1))

    logger.info(f"Cache warming job {result.job_id} finished: {result.status}", extra={"tenant_id": tenant_id})
    return result.model_dump()


@celery_app.task
def warm_all_tenants(strategy: str = "all"):
    """Periodic warm-up of every scope."""
    return _for_every_scope("warm_cache", strategy=strategy)


@celery_app.task(bind=True, max_retries=3)
def provision_tenant(self, target_tenant_id: str, tenant_id: Optional[str] = None):
    """Background task to create a tenant's database, indexes and administrator."""

    async def work():
        use_case = ProvisionTenantUseCase(
            unit_of_work_factory(),
            TenantDatabaseProvisioner(),
            TenantSearchIndexManager(build_search_engine()),
        )
        return await use_case.execute(target_tenant_id)

    try:
        result = run_in_tenant(tenant_id, work)
    except DomainException as e:
        logger.error(f"Provisioning of tenant {target_tenant_id} rejected: {e.message}")
        return None
    except Exception as exc:
        logger.error(f"Error provisioning tenant {target_tenant_id}: {exc}")
        raise self.retry(countdown=60 * (self.request.retries + 1))
    return result.model_dump(mode="json")


@celery_app.task(bind=True, max_retries=3)
def index_entity(self, entity: str, entity_id: str, tenant_id: Optional[str] = None):
    async def work():
        return await IndexEntityUseCase(unit_of_work_factory()(), build_search_engine()).execute(SearchableEntity(entity), entity_id)

    try:
        return run_in_tenant(tenant_id, work)
    except Exception as exc:
        logger.error(f"Error indexing {entity} {entity_id}: {exc}", extra={"tenant_id": tenant_id})
        raise self.retry(countdown=30 * (self.request.retries + 1))


@celery_app.task(bind=True, max_retries=3)
def remove_entity(self, entity: str, entity_id: str, tenant_id: Optional[str] = None):
    async def work():
        return await RemoveEntityUseCase(build_search_engine()).execute(SearchableEntity(entity), entity_id)

    try:
        return run_in_tenant(tenant_id, work)
    except Exception as exc:
        logger.error(f"Error removing {entity} {entity_id} from the index: {exc}", extra={"tenant_id": tenant_id})
        raise self.retry(countdown=30 * (self.request.retries + 1))


@celery_app.task
def reindex(entity: Optional[str] = None, tenant_id: Optional[str] = None):
    """Rebuild one index, or all of them, from the database."""

    async def work():
        engine = build_search_engine()
        results = []
        for searchable in entities_for(entity):
            results.append(await ReindexEntityUseCase(unit_of_work_factory()(), engine).execute(searchable))
        return [result.model_dump() for result in results]

    return run_in_tenant(tenant_id, work)


@celery_app.task(bind=True, max_retries=3)
def send_event_notification(self, notification_type: str, data: Dict[str, Any], user_id: Optional[str] = None, tenant_id: Optional[str] = None):
    async def work():
        use_case = SendEventNotificationUseCase(unit_of_work_factory()(), CeleryJobQueue(celery_app))
        return await use_case.execute(NotificationType(notification_type), data, user_id)

    try:
        notification = run_in_tenant(tenant_id, work)
    except DomainException as e:
        logger.warning(f"Notification {notification_type} skipped: {e.message}")
        return None
    except Exception as exc:
        logger.error(f"Error creating {notification_type} notification: {exc}", extra={"tenant_id": tenant_id})
        raise self.retry(countdown=60)
    return str(notification.id) if notification else None


@celery_app.task(bind=True, max_retries=3)
def send_notification_email(self, notification_id: str, tenant_id: Optional[str] = None):
    """Background task to email a notification."""

    async def work():
        return await DeliverNotificationEmailUseCase(unit_of_work_factory()(), EmailService()).execute(notification_id)

    try:
        sent = run_in_tenant(tenant_id, work)
    except DomainException as e:
        logger.warning(f"Notification email {notification_id} skipped: {e.message}")
        return False
    except Exception as exc:
        logger.error(f"Error sending notification email {notification_id}: {exc}")
        raise self.retry(countdown=60)
    if not sent and self.request.retries < self.max_retries:
        raise self.retry(countdown=60 * (self.request.retries + 1))
    return sent


@celery_app.task(bind=True, max_retries=2)
def process_export(self, export_id: str, tenant_id: Optional[str] = None):
    """Background task to build an export file."""

    async def work():
        use_case = ProcessExportUseCase(
            dispatching_unit_of_work_factory(CeleryJobQueue(celery_app))(),
            build_storage(),
            lambda uow: ExportRowSource(uow.session),
        )
        return await use_case.execute(export_id)

    try:
        result = run_in_tenant(tenant_id, work)
    except DomainException as e:
        logger.error(f"Export {export_id} rejected: {e.message}")
        return None
    except Exception as exc:
        logger.error(f"Error processing export {export_id}: {exc}", extra={"tenant_id": tenant_id})
        raise self.retry(countdown=60 * (self.request.retries + 1))
    return result.status


@celery_app.task(bind=True, max_retries=2)
def process_import(self, import_id: str, tenant_id: Optional[str] = None):
    """Background task to create records from an uploaded CSV file."""

    async def work():
        use_case = ProcessImportUseCase(
            dispatching_unit_of_work_factory(CeleryJobQueue(celery_app))(),
            build_storage(),
        )
        return await use_case.execute(import_id)

    try:
        result = run_in_tenant(tenant_id, work)
    except DomainException as e:
        logger.error(f"Import {import_id} rejected: {e.message}")
        return None
    except Exception as exc:
        logger.error(f"Error processing import {import_id}: {exc}", extra={"tenant_id": tenant_id})
        raise self.retry(countdown=60 * (self.request.retries + 1))
    return result.status


@celery_app.task
def cleanup_exports(tenant_id: Optional[str] = None, fan_out: bool = True):
    """Delete expired export files; the scheduled run fans out to every tenant."""
    if fan_out and tenant_id is None:
        return _for_every_scope("cleanup_exports", fan_out=False)

    async def work():
        return await CleanupExpiredExportsUseCase(unit_of_work_factory()(), build_storage()).execute()

    return run_in_tenant(tenant_id, work)


@celery_app.task(bind=True, max_retries=3)
def update_exchange_rates(self, tenant_id: Optional[str] = None, fan_out: bool = True):
    if fan_out and tenant_id is None:
        return _for_every_scope("update_exchange_rates", fan_out=False)

    async def work():
        return await UpdateExchangeRatesUseCase(unit_of_work_factory()(), ExchangeRateService()).execute()

    try:
        result = run_in_tenant(tenant_id, work)
    except Exception as exc:
        logger.error(f"Error updating exchange rates: {exc}", extra={"tenant_id": tenant_id})
        raise self.retry(countdown=300)
    return result.model_dump(mode="json")


@celery_app.task
def expire_campaigns(tenant_id: Optional[str] = None, fan_out: bool = True):
    """Complete active campaigns whose end date has passed."""
    if fan_out and tenant_id is None:
        return _for_every_scope("expire_campaigns", fan_out=False)

    async def work():
        job_queue = CeleryJobQueue(celery_app)
        return await ExpireCampaignsUseCase(dispatching_unit_of_work_factory(job_queue)()).execute()

    return run_in_tenant(tenant_id, work)

from celery import Celery
from celery.schedules import crontab

from .core.config import settings
from .core.logging import configure_logging

configure_logging()

# Create Celery instance
celery_app = Celery(
    "acme_csr",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=["acme_csr.tasks"]
)

# Configure Celery
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    result_expires=3600,  # 1 hour
    task_routes={
        "acme_csr.tasks.warm_cache": {"queue": "cache_warming"},
        "acme_csr.tasks.warm_all_tenants": {"queue": "cache_warming"},
        "acme_csr.tasks.provision_tenant": {"queue": "tenancy"},
        "acme_csr.tasks.index_entity": {"queue": "search"},
        "acme_csr.tasks.remove_entity": {"queue": "search"},
        "acme_csr.tasks.reindex": {"queue": "search"},
        "acme_csr.tasks.process_export": {"queue": "exports"},
        "acme_csr.tasks.cleanup_exports": {"queue": "exports"},
        "acme_csr.tasks.process_import": {"queue": "imports"},
        "acme_csr.tasks.send_event_notification": {"queue": "notifications"},
        "acme_csr.tasks.expire_campaigns": {"queue": "notifications"},
        "acme_csr.tasks.send_notification_email": {"queue": "emails"},
        "acme_csr.tasks.update_exchange_rates": {"queue": "currency"},
    },
    beat_schedule={
        "update-exchange-rates": {
            "task": "acme_csr.tasks.update_exchange_rates",
            "schedule": crontab(hour=6, minute=0),
        },
        "warm-caches": {
            "task": "acme_csr.tasks.warm_all_tenants",
            "schedule": crontab(minute=5),
        },
        "cleanup-exports": {
            "task": "acme_csr.tasks.cleanup_exports",
            "schedule": crontab(hour=3, minute=0),
        },
        "expire-campaigns": {
            "task": "acme_csr.tasks.expire_campaigns",
            "schedule": crontab(hour=0, minute=15),
        },
    },
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    worker_max_tasks_per_child=1000,
)

"""Celery-backed job queue"""

import logging
from typing import Optional

from kombu.exceptions import OperationalError

from ...core.context import current_tenant_id
from ...domain.repositories.job_queue import IJobQueue

logger = logging.getLogger(__name__)

TASK_PREFIX = "acme_csr.tasks"


class CeleryJobQueue(IJobQueue):
    """Sends tasks by name so the web process never imports the task modules"""

    def __init__(self, app=None):
        if app is None:
            from ...celery_app import celery_app as app
        self.app = app

    def enqueue(self, task_name: str, countdown: Optional[int] = None, **kwargs) -> Optional[str]:
        kwargs.setdefault("tenant_id", current_tenant_id())
        try:
            result = self.app.send_task(f"{TASK_PREFIX}.{task_name}", kwargs=kwargs, countdown=countdown)
        except OperationalError as e:
            logger.error(f"Failed to queue {task_name}: {e}", extra={"tenant_id": kwargs.get("tenant_id")})
            raise
        logger.debug(f"Queued {task_name}", extra={"task_id": result.id, "tenant_id": kwargs.get("tenant_id")})
        return result.id

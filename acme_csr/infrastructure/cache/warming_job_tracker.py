"""Progress records for background cache warming jobs"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import redis

from ...core.config import settings
from ...domain.enums import WarmingJobStatus

logger = logging.getLogger(__name__)

KEY_TEMPLATE = "cache_warming_progress:{job_id}"


class WarmingJobTracker:
    """Keeps one short-lived JSON record per job id"""

    def __init__(self, client: redis.Redis, ttl: Optional[int] = None):
        self.client = client
        self.ttl = ttl or settings.CACHE_WARMING_PROGRESS_TTL

    @classmethod
    def from_url(cls, url: Optional[str] = None) -> "WarmingJobTracker":
        return cls(redis.from_url(url or settings.REDIS_URL, decode_responses=True))

    def update(
        self,
        job_id: str,
        status: WarmingJobStatus,
        current_item: int = 0,
        total_items: int = 0,
        message: Optional[str] = None,
        failed_keys: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        percentage = round(current_item / total_items * 100, 2) if total_items else 0.0
        record = {
            "job_id": job_id,
            "status": status.value,
            "percentage": max(0.0, min(100.0, percentage)),
            "current_item": current_item,
            "total_items": total_items,
            "message": message,
            "failed_keys": failed_keys or [],
            "updated_at": datetime.utcnow().isoformat(),
        }
        try:
            self.client.setex(KEY_TEMPLATE.format(job_id=job_id), self.ttl, json.dumps(record))
        except redis.RedisError as e:
            logger.warning(f"Could not store warming progress for {job_id}: {e}")
        return record

    def get(self, job_id: str) -> Optional[Dict[str, Any]]:
        try:
            value = self.client.get(KEY_TEMPLATE.format(job_id=job_id))
        except redis.RedisError as e:
            logger.error(f"Could not read warming progress for {job_id}: {e}")
            return None
        return json.loads(value) if value else None

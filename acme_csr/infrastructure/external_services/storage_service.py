"""Object storage for export and import files using MinIO"""

import logging
from datetime import timedelta
from io import BytesIO
from typing import Optional

from minio import Minio
from minio.error import S3Error

from ...core.config import settings

logger = logging.getLogger(__name__)


class StorageService:

    def __init__(self, client: Optional[Minio] = None, bucket: Optional[str] = None):
        self.client = client or Minio(
            endpoint=settings.MINIO_ENDPOINT,
            access_key=settings.MINIO_ACCESS_KEY,
            secret_key=settings.MINIO_SECRET_KEY,
            secure=settings.MINIO_SECURE,
        )
        self.bucket = bucket or settings.MINIO_BUCKET_NAME
        self._bucket_checked = False

    def _ensure_bucket_exists(self) -> None:
        if self._bucket_checked:
            return
        if not self.client.bucket_exists(self.bucket):
            self.client.make_bucket(self.bucket)
        self._bucket_checked = True

    async def upload_bytes(self, object_name: str, data: bytes, content_type: str) -> str:
        """Store data under object_name and return the object name"""
        self._ensure_bucket_exists()
        self.client.put_object(
            bucket_name=self.bucket,
            object_name=object_name,
            data=BytesIO(data),
            length=len(data),
            content_type=content_type,
        )
        logger.info(f"Stored {object_name} ({len(data)} bytes)")
        return object_name

    async def download_bytes(self, object_name: str) -> bytes:
        response = self.client.get_object(self.bucket, object_name)
        try:
            return response.read()
        finally:
            response.close()
            response.release_conn()

    async def delete(self, object_name: str) -> bool:
        try:
            self.client.remove_object(self.bucket, object_name)
        except S3Error as e:
            logger.warning(f"Failed to delete {object_name}: {e}")
            return False
        return True

    async def get_presigned_url(self, object_name: str, expires_minutes: Optional[int] = None) -> str:
        expires = timedelta(minutes=expires_minutes or settings.EXPORT_DOWNLOAD_URL_EXPIRY_MINUTES)
        return self.client.presigned_get_object(bucket_name=self.bucket, object_name=object_name, expires=expires)

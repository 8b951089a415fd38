"""Export job entity"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from ..enums import ExportFormat, ExportResourceType, ExportStatus
from ..exceptions import ExportException
from ..value_objects.entity_ids import ExportId, OrganizationId, UserId
from ..value_objects.export_progress import ExportProgress
from ..events.job_events import ExportRequested, ExportCompleted, ExportFailed


@dataclass
class ExportJob:
    id: ExportId
    user_id: UserId
    resource_type: ExportResourceType
    format: ExportFormat
    status: ExportStatus = ExportStatus.PENDING
    organization_id: Optional[OrganizationId] = None
    filters: Dict[str, Any] = field(default_factory=dict)
    progress: ExportProgress = field(default_factory=lambda: ExportProgress.start("Waiting to start"))
    file_path: Optional[str] = None
    file_size: Optional[int] = None
    error_message: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    # Domain events
    _events: List = field(default_factory=list, init=False)

    @classmethod
    def create(
        cls,
        user_id: UserId,
        resource_type: ExportResourceType,
        export_format: ExportFormat,
        filters: Optional[Dict[str, Any]] = None,
        organization_id: Optional[OrganizationId] = None,
    ) -> "ExportJob":
        job = cls(
            id=ExportId.generate(),
            user_id=user_id,
            resource_type=resource_type,
            format=export_format,
            filters=filters or {},
            organization_id=organization_id,
        )
        job._events.append(ExportRequested(export_id=job.id, user_id=user_id))
        return job

    def _change_status(self, new_status: ExportStatus) -> None:
        if not self.status.can_transition_to(new_status):
            raise ExportException.invalid_transition(self.status, new_status)
        self.status = new_status
        self.updated_at = datetime.utcnow()

    def start_processing(self) -> None:
        self._change_status(ExportStatus.PROCESSING)
        self.started_at = datetime.utcnow()
        self.progress = ExportProgress.start("Export started")

    def update_progress(self, progress: ExportProgress) -> None:
        if self.status != ExportStatus.PROCESSING:
            return
        self.progress = progress
        self.updated_at = datetime.utcnow()

    def complete(self, file_path: str, file_size: int, ttl_hours: int = 168) -> None:
        if file_size > self.format.max_file_size_bytes:
            raise ExportException.file_too_large(file_size, self.format.max_file_size_bytes)
        self._change_status(ExportStatus.COMPLETED)
        self.file_path = file_path
        self.file_size = file_size
        self.completed_at = datetime.utcnow()
        self.expires_at = self.completed_at + timedelta(hours=ttl_hours)
        self.progress = ExportProgress.completed(self.progress.total_records)
        self._events.append(ExportCompleted(export_id=self.id, user_id=self.user_id, file_size=file_size))

    def fail(self, reason: str) -> None:
        self._change_status(ExportStatus.FAILED)
        self.error_message = reason
        self.completed_at = datetime.utcnow()
        self._events.append(ExportFailed(export_id=self.id, user_id=self.user_id, reason=reason))

    def cancel(self) -> None:
        self._change_status(ExportStatus.CANCELLED)
        self.completed_at = datetime.utcnow()

    def reset_for_retry(self) -> None:
        if self.status != ExportStatus.FAILED:
            raise ExportException.invalid_transition(self.status, ExportStatus.PENDING)
        self.status = ExportStatus.PENDING
        self.error_message = None
        self.started_at = None
        self.completed_at = None
        self.progress = ExportProgress.start("Waiting to start")
        self.updated_at = datetime.utcnow()

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        return (now or datetime.utcnow()) >= self.expires_at

    def can_be_downloaded(self) -> bool:
        return self.status == ExportStatus.COMPLETED and bool(self.file_path) and not self.is_expired()

    @property
    def filename(self) -> str:
        stamp = self.created_at.strftime("%Y%m%d_%H%M%S")
        return f"{self.resource_type.value}_export_{stamp}.{self.format.extension}"

    def get_events(self) -> List:
        """Get and clear domain events"""
        events = self._events.copy()
        self._events.clear()
        return events

"""Export and import job DTOs"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel

from ...domain.enums import ExportFormat, ExportResourceType


class ExportRequestDTO(BaseModel):
    resource_type: ExportResourceType
    format: ExportFormat = ExportFormat.CSV
    filters: Dict[str, Any] = {}


class ExportJobDTO(BaseModel):
    id: UUID
    resource_type: str
    format: str
    format_label: str
    status: str
    status_color: str
    filters: Dict[str, Any]
    progress: Dict[str, Any]
    filename: str
    file_size: Optional[int] = None
    error_message: Optional[str] = None
    can_be_downloaded: bool
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, job):
        return cls(
            id=job.id.value,
            resource_type=job.resource_type.value,
            format=job.format.value,
            format_label=job.format.label,
            status=job.status.value,
            status_color=job.status.color,
            filters=job.filters,
            progress=job.progress.to_dict(),
            filename=job.filename,
            file_size=job.file_size,
            error_message=job.error_message,
            can_be_downloaded=job.can_be_downloaded(),
            started_at=job.started_at,
            completed_at=job.completed_at,
            expires_at=job.expires_at,
            created_at=job.created_at,
        )


class DownloadLinkDTO(BaseModel):
    url: str
    filename: str
    expires_in_minutes: int


class ImportJobDTO(BaseModel):
    id: UUID
    import_type: str
    original_filename: str
    status: str
    total_records: int
    processed_records: int
    successful_records: int
    failed_records: int
    skipped_records: int
    progress_percentage: int
    errors: List[Dict[str, Any]]
    error_message: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, job):
        return cls(
            id=job.id.value,
            import_type=job.import_type.value,
            original_filename=job.original_filename,
            status=job.status.value,
            total_records=job.total_records,
            processed_records=job.processed_records,
            successful_records=job.successful_records,
            failed_records=job.failed_records,
            skipped_records=job.skipped_records,
            progress_percentage=job.progress_percentage,
            errors=job.errors,
            error_message=job.error_message,
            started_at=job.started_at,
            completed_at=job.completed_at,
            created_at=job.created_at,
        )

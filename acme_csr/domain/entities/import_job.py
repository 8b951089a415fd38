"""Import job entity"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..enums import ImportRecordStatus, ImportStatus, ImportType
from ..exceptions import ImportException
from ..value_objects.entity_ids import ImportId, OrganizationId, UserId
from ..events.job_events import ImportCompleted

MAX_STORED_ERRORS = 100


@dataclass
class ImportJob:
    id: ImportId
    user_id: UserId
    import_type: ImportType
    file_path: str
    original_filename: str
    status: ImportStatus = ImportStatus.PENDING
    organization_id: Optional[OrganizationId] = None
    options: Dict[str, Any] = field(default_factory=dict)
    total_records: int = 0
    processed_records: int = 0
    successful_records: int = 0
    failed_records: int = 0
    skipped_records: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)
    error_message: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    # Domain events
    _events: List = field(default_factory=list, init=False)

    @classmethod
    def create(
        cls,
        user_id: UserId,
        import_type: ImportType,
        file_path: str,
        original_filename: str,
        organization_id: Optional[OrganizationId] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> "ImportJob":
        return cls(
            id=ImportId.generate(),
            user_id=user_id,
            import_type=import_type,
            file_path=file_path,
            original_filename=original_filename,
            organization_id=organization_id,
            options=options or {},
        )

    def start(self, total_records: int) -> None:
        if self.status != ImportStatus.PENDING:
            raise ImportException.already_finished(self.id.value)
        self.status = ImportStatus.PROCESSING
        self.total_records = total_records
        self.started_at = datetime.utcnow()
        self.updated_at = datetime.utcnow()

    def record(self, row_number: int, status: ImportRecordStatus, message: Optional[str] = None) -> None:
        self.processed_records += 1
        if status == ImportRecordStatus.SUCCESS:
            self.successful_records += 1
        elif status == ImportRecordStatus.SKIPPED:
            self.skipped_records += 1
        elif status == ImportRecordStatus.FAILED:
            self.failed_records += 1
            if len(self.errors) < MAX_STORED_ERRORS:
                self.errors.append({"row": row_number, "message": message or "Unknown error"})
        self.updated_at = datetime.utcnow()

    def complete(self) -> None:
        if self.status != ImportStatus.PROCESSING:
            raise ImportException.already_finished(self.id.value)
        self.status = ImportStatus.COMPLETED
        self.completed_at = datetime.utcnow()
        self.updated_at = datetime.utcnow()
        self._events.append(ImportCompleted(
            import_id=self.id,
            user_id=self.user_id,
            successful=self.successful_records,
            failed=self.failed_records,
        ))

    def fail(self, reason: str) -> None:
        if self.status.is_final():
            raise ImportException.already_finished(self.id.value)
        self.status = ImportStatus.FAILED
        self.error_message = reason
        self.completed_at = datetime.utcnow()
        self.updated_at = datetime.utcnow()
        self._events.append(ImportCompleted(
            import_id=self.id,
            user_id=self.user_id,
            successful=self.successful_records,
            failed=self.failed_records,
            error=reason,
        ))

    def cancel(self) -> None:
        if self.status.is_final():
            raise ImportException.already_finished(self.id.value)
        self.status = ImportStatus.CANCELLED
        self.completed_at = datetime.utcnow()
        self.updated_at = datetime.utcnow()

    @property
    def progress_percentage(self) -> int:
        if self.total_records <= 0:
            return 100 if self.status == ImportStatus.COMPLETED else 0
        return min(100, round(self.processed_records / self.total_records * 100))

    def get_events(self) -> List:
        """Get and clear domain events"""
        events = self._events.copy()
        self._events.clear()
        return events

"""Export and import job events"""

from dataclasses import dataclass
from typing import Optional

from ..value_objects.entity_ids import ExportId, ImportId, UserId


@dataclass(frozen=True)
class ExportRequested:
    export_id: ExportId
    user_id: UserId


@dataclass(frozen=True)
class ExportCompleted:
    export_id: ExportId
    user_id: UserId
    file_size: int


@dataclass(frozen=True)
class ExportFailed:
    export_id: ExportId
    user_id: UserId
    reason: str


@dataclass(frozen=True)
class ImportCompleted:
    import_id: ImportId
    user_id: UserId
    successful: int
    failed: int
    error: Optional[str] = None

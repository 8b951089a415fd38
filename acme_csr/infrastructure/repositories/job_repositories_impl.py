"""Export and import job repository implementations"""

from datetime import datetime
from typing import Optional, List
from sqlalchemy.orm import Session

from ...domain.entities.export_job import ExportJob
from ...domain.entities.import_job import ImportJob
from ...domain.enums import ExportFormat, ExportResourceType, ExportStatus, ImportStatus, ImportType
from ...domain.repositories.job_repositories import IExportJobRepository, IImportJobRepository
from ...domain.value_objects.entity_ids import ExportId, ImportId, OrganizationId, UserId
from ...domain.value_objects.export_progress import ExportProgress
from ...domain.value_objects.pagination import Page, PageRequest
from ..orm.job_models import ExportJobModel, ImportJobModel
from ._paging import paginate

_ACTIVE_EXPORT_STATUSES = (ExportStatus.PENDING.value, ExportStatus.PROCESSING.value)


class ExportJobRepositoryImpl(IExportJobRepository):

    def __init__(self, session: Session):
        self.session = session

    def _get_model(self, export_id: ExportId) -> Optional[ExportJobModel]:
        return self.session.query(ExportJobModel).filter(ExportJobModel.id == export_id.value).first()

    async def get_by_id(self, export_id: ExportId) -> Optional[ExportJob]:
        model = self._get_model(export_id)
        return self._map_to_entity(model) if model else None

    async def add(self, job: ExportJob) -> ExportJob:
        model = ExportJobModel(id=job.id.value, user_id=job.user_id.value, created_at=job.created_at)
        self._update_model_from_entity(model, job)
        self.session.add(model)
        self.session.flush()
        return job

    async def update(self, job: ExportJob) -> ExportJob:
        model = self._get_model(job.id)
        if model:
            self._update_model_from_entity(model, job)
            self.session.flush()
        return job

    async def delete(self, export_id: ExportId) -> bool:
        model = self._get_model(export_id)
        if not model:
            return False
        self.session.delete(model)
        self.session.flush()
        return True

    async def list_for_user(self, user_id: UserId, page: PageRequest) -> Page[ExportJob]:
        query = self.session.query(ExportJobModel).filter(
            ExportJobModel.user_id == user_id.value
        ).order_by(ExportJobModel.created_at.desc())
        return paginate(query, page, self._map_to_entity)

    async def count_active_for_user(self, user_id: UserId) -> int:
        return self.session.query(ExportJobModel).filter(
            ExportJobModel.user_id == user_id.value,
            ExportJobModel.status.in_(_ACTIVE_EXPORT_STATUSES),
        ).count()

    async def list_expired(self, now: datetime) -> List[ExportJob]:
        models = self.session.query(ExportJobModel).filter(
            ExportJobModel.expires_at.isnot(None),
            ExportJobModel.expires_at <= now,
        ).all()
        return [self._map_to_entity(model) for model in models]

    def _update_model_from_entity(self, model: ExportJobModel, job: ExportJob) -> None:
        model.organization_id = job.organization_id.value if job.organization_id else None
        model.resource_type = job.resource_type.value
        model.format = job.format.value
        model.status = job.status.value
        model.filters = dict(job.filters)
        model.progress_percentage = job.progress.percentage
        model.progress_message = job.progress.message
        model.processed_records = job.progress.processed_records
        model.total_records = job.progress.total_records
        model.file_path = job.file_path
        model.file_size = job.file_size
        model.error_message = job.error_message
        model.started_at = job.started_at
        model.completed_at = job.completed_at
        model.expires_at = job.expires_at
        model.updated_at = job.updated_at

    def _map_to_entity(self, model: ExportJobModel) -> ExportJob:
        return ExportJob(
            id=ExportId(model.id),
            user_id=UserId(model.user_id),
            resource_type=ExportResourceType(model.resource_type),
            format=ExportFormat(model.format),
            status=ExportStatus(model.status),
            organization_id=OrganizationId(model.organization_id) if model.organization_id else None,
            filters=dict(model.filters or {}),
            progress=ExportProgress(
                percentage=model.progress_percentage or 0,
                message=model.progress_message or "",
                processed_records=model.processed_records or 0,
                total_records=model.total_records or 0,
            ),
            file_path=model.file_path,
            file_size=model.file_size,
            error_message=model.error_message,
            started_at=model.started_at,
            completed_at=model.completed_at,
            expires_at=model.expires_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


class ImportJobRepositoryImpl(IImportJobRepository):

    _COUNTERS = ("total_records", "processed_records", "successful_records", "failed_records", "skipped_records")

    def __init__(self, session: Session):
        self.session = session

    def _get_model(self, import_id: ImportId) -> Optional[ImportJobModel]:
        return self.session.query(ImportJobModel).filter(ImportJobModel.id == import_id.value).first()

    async def get_by_id(self, import_id: ImportId) -> Optional[ImportJob]:
        model = self._get_model(import_id)
        return self._map_to_entity(model) if model else None

    async def add(self, job: ImportJob) -> ImportJob:
        model = ImportJobModel(
            id=job.id.value,
            user_id=job.user_id.value,
            import_type=job.import_type.value,
            file_path=job.file_path,
            original_filename=job.original_filename,
            organization_id=job.organization_id.value if job.organization_id else None,
            created_at=job.created_at,
        )
        self._update_model_from_entity(model, job)
        self.session.add(model)
        self.session.flush()
        return job

    async def update(self, job: ImportJob) -> ImportJob:
        model = self._get_model(job.id)
        if model:
            self._update_model_from_entity(model, job)
            self.session.flush()
        return job

    async def list_for_user(self, user_id: UserId, page: PageRequest) -> Page[ImportJob]:
        query = self.session.query(ImportJobModel).filter(
            ImportJobModel.user_id == user_id.value
        ).order_by(ImportJobModel.created_at.desc())
        return paginate(query, page, self._map_to_entity)

    def _update_model_from_entity(self, model: ImportJobModel, job: ImportJob) -> None:
        model.status = job.status.value
        model.options = dict(job.options)
        for counter in self._COUNTERS:
            setattr(model, counter, getattr(job, counter))
        model.errors = list(job.errors)
        model.error_message = job.error_message
        model.started_at = job.started_at
        model.completed_at = job.completed_at
        model.updated_at = job.updated_at

    def _map_to_entity(self, model: ImportJobModel) -> ImportJob:
        return ImportJob(
            id=ImportId(model.id),
            user_id=UserId(model.user_id),
            import_type=ImportType(model.import_type),
            file_path=model.file_path,
            original_filename=model.original_filename,
            status=ImportStatus(model.status),
            organization_id=OrganizationId(model.organization_id) if model.organization_id else None,
            options=dict(model.options or {}),
            errors=list(model.errors or []),
            error_message=model.error_message,
            started_at=model.started_at,
            completed_at=model.completed_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
            **{counter: getattr(model, counter) or 0 for counter in self._COUNTERS},
        )

"""Export use cases"""

import logging
from datetime import datetime
from typing import Callable

from ...core.config import settings
from ...domain.entities.export_job import ExportJob
from ...domain.entities.user import User
from ...domain.enums import ExportStatus, Permission
from ...domain.exceptions import ExportException
from ...domain.repositories.job_queue import IJobQueue
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import ExportId
from ...domain.value_objects.export_progress import ExportProgress
from ...domain.value_objects.pagination import Page, PageRequest
from ...infrastructure.exports.writers import writer_for
from ..dtos.job_dtos import DownloadLinkDTO, ExportJobDTO, ExportRequestDTO
from ..services.audit_service import AuditService

logger = logging.getLogger(__name__)


async def _get_export(unit_of_work: IUnitOfWork, export_id, user: User = None) -> ExportJob:
    job = await unit_of_work.exports.get_by_id(ExportId.coerce(export_id))
    if not job or (user is not None and job.user_id != user.id and not user.is_admin()):
        raise ExportException.not_found(export_id)
    return job


def _object_name(job: ExportJob) -> str:
    return f"exports/{job.user_id.value}/{job.id.value}/{job.filename}"


def _scoped_filters(request: ExportRequestDTO, user: User) -> dict:
    filters = {key: value for key, value in request.filters.items() if value not in (None, "")}
    # Non-admins only ever see their own organization's rows
    if not user.is_admin():
        filters["organization_id"] = str(user.organization_id.value) if user.organization_id else None
    return filters


class RequestExportUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, request: ExportRequestDTO, user: User) -> ExportJobDTO:
        if not user.has_permission(Permission.VIEW_ANALYTICS):
            raise ExportException.forbidden()
        if request.format.extension not in ("csv", "xlsx"):
            raise ExportException.unsupported_format(request.format)

        async with self.unit_of_work:
            active = await self.unit_of_work.exports.count_active_for_user(user.id)
            if active >= settings.EXPORT_MAX_CONCURRENT_PER_USER:
                raise ExportException.too_many_concurrent(settings.EXPORT_MAX_CONCURRENT_PER_USER)

            job = ExportJob.create(
                user_id=user.id,
                resource_type=request.resource_type,
                export_format=request.format,
                filters=_scoped_filters(request, user),
                organization_id=user.organization_id,
            )
            await self.unit_of_work.exports.add(job)
            await AuditService(self.unit_of_work).log(
                "export.requested", "export", str(job.id),
                new_values={"resource_type": job.resource_type.value, "format": job.format.value},
            )
            self.unit_of_work.collect(job)
            await self.unit_of_work.commit()
            return ExportJobDTO.from_entity(job)


class ProcessExportUseCase:
    """Streams rows chunk by chunk into a file and uploads it to object storage

    ``row_source_factory`` receives the unit of work and returns an object with
    ``headers``, ``count`` and ``chunks`` for the job's resource type.
    """

    def __init__(self, unit_of_work: IUnitOfWork, storage, row_source_factory: Callable, chunk_size: int = None):
        self.unit_of_work = unit_of_work
        self.storage = storage
        self.row_source_factory = row_source_factory
        self.chunk_size = chunk_size or settings.EXPORT_CHUNK_SIZE

    async def execute(self, export_id) -> ExportJobDTO:
        async with self.unit_of_work:
            job = await _get_export(self.unit_of_work, export_id)
            if job.status != ExportStatus.PENDING:
                logger.info(f"Export {job.id} is {job.status.value}, skipping")
                return ExportJobDTO.from_entity(job)

            job.start_processing()
            await self.unit_of_work.exports.update(job)
            await self.unit_of_work.commit()

            try:
                await self._write(job)
            except Exception as e:
                logger.error(f"Export {job.id} failed: {e}")
                await self.unit_of_work.rollback()
                job.fail(str(e))
                await self.unit_of_work.exports.update(job)
                self.unit_of_work.collect(job)
                await self.unit_of_work.commit()
                return ExportJobDTO.from_entity(job)

            await self.unit_of_work.exports.update(job)
            self.unit_of_work.collect(job)
            await self.unit_of_work.commit()
            logger.info(f"Export {job.id} completed ({job.file_size} bytes)")
            return ExportJobDTO.from_entity(job)

    async def _write(self, job: ExportJob) -> None:
        source = self.row_source_factory(self.unit_of_work)
        writer = writer_for(job.format, sheet_title=job.resource_type.value.title())
        writer.write_header(source.headers(job.resource_type))

        total = source.count(job.resource_type, job.filters)
        progress = ExportProgress.processing(0, total)
        job.update_progress(progress)
        for rows in source.chunks(job.resource_type, job.filters, self.chunk_size):
            writer.write_rows(rows)
            progress = progress.advance(len(rows))
            job.update_progress(progress)
            await self.unit_of_work.exports.update(job)
            await self.unit_of_work.commit()

        content = writer.close()
        if len(content) > job.format.max_file_size_bytes:
            raise ExportException.file_too_large(len(content), job.format.max_file_size_bytes)
        object_name = await self.storage.upload_bytes(_object_name(job), content, job.format.mime_type)
        job.complete(object_name, len(content), ttl_hours=settings.EXPORT_TTL_HOURS)


class GetExportUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, export_id, user: User) -> ExportJobDTO:
        async with self.unit_of_work:
            return ExportJobDTO.from_entity(await _get_export(self.unit_of_work, export_id, user))


class ListMyExportsUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, user: User, page: PageRequest) -> Page[ExportJobDTO]:
        async with self.unit_of_work:
            result = await self.unit_of_work.exports.list_for_user(user.id, page)
            return Page(
                items=[ExportJobDTO.from_entity(job) for job in result.items],
                total=result.total,
                page=result.page,
                per_page=result.per_page,
            )


class CancelExportUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, export_id, user: User) -> ExportJobDTO:
        async with self.unit_of_work:
            job = await _get_export(self.unit_of_work, export_id, user)
            job.cancel()
            await self.unit_of_work.exports.update(job)
            await AuditService(self.unit_of_work).log("export.cancelled", "export", str(job.id))
            await self.unit_of_work.commit()
            return ExportJobDTO.from_entity(job)


class RetryExportUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, job_queue: IJobQueue):
        self.unit_of_work = unit_of_work
        self.job_queue = job_queue

    async def execute(self, export_id, user: User) -> ExportJobDTO:
        async with self.unit_of_work:
            job = await _get_export(self.unit_of_work, export_id, user)
            job.reset_for_retry()
            await self.unit_of_work.exports.update(job)
            await self.unit_of_work.commit()
        self.job_queue.enqueue("process_export", export_id=str(job.id.value))
        return ExportJobDTO.from_entity(job)


class GetExportDownloadUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, storage):
        self.unit_of_work = unit_of_work
        self.storage = storage

    async def execute(self, export_id, user: User) -> DownloadLinkDTO:
        async with self.unit_of_work:
            job = await _get_export(self.unit_of_work, export_id, user)
        if not job.can_be_downloaded():
            raise ExportException.not_downloadable(export_id)
        minutes = settings.EXPORT_DOWNLOAD_URL_EXPIRY_MINUTES
        url = await self.storage.get_presigned_url(job.file_path, minutes)
        return DownloadLinkDTO(url=url, filename=job.filename, expires_in_minutes=minutes)


class CleanupExpiredExportsUseCase:
    """Deletes expired export files and their job rows; returns how many were removed"""

    def __init__(self, unit_of_work: IUnitOfWork, storage):
        self.unit_of_work = unit_of_work
        self.storage = storage

    async def execute(self, now: datetime = None) -> int:
        now = now or datetime.utcnow()
        removed = 0
        async with self.unit_of_work:
            for job in await self.unit_of_work.exports.list_expired(now):
                if job.file_path:
                    await self.storage.delete(job.file_path)
                await self.unit_of_work.exports.delete(job.id)
                removed += 1
            if removed:
                await AuditService(self.unit_of_work).log_system_action(
                    "exports_cleaned", "export", data={"removed": removed}
                )
            await self.unit_of_work.commit()
        logger.info(f"Removed {removed} expired exports")
        return removed

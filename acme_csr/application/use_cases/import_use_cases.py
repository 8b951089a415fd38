"""Import use cases: CSV upload, background row processing and job queries"""

import logging
import secrets
from typing import Optional

from pydantic import ValidationError

from ...core.config import settings
from ...core.security import get_password_hash
from ...domain.entities.campaign import Campaign
from ...domain.entities.import_job import ImportJob
from ...domain.entities.user import User
from ...domain.enums import ImportRecordStatus, ImportStatus, ImportType, Permission
from ...domain.exceptions import DomainException, ImportException
from ...domain.repositories.job_queue import IJobQueue
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.email import Email
from ...domain.value_objects.entity_ids import ImportId, OrganizationId
from ...domain.value_objects.money import Money
from ...domain.value_objects.pagination import Page, PageRequest
from ...domain.value_objects.translatable import TranslatableText
from ...infrastructure.imports.csv_reader import CsvImportReader
from ...infrastructure.imports.row_schemas import describe_errors, schema_for
from ..dtos.job_dtos import ImportJobDTO
from ..services.audit_service import AuditService

logger = logging.getLogger(__name__)

IMPORT_PERMISSIONS = {
    ImportType.USERS: Permission.MANAGE_USERS,
    ImportType.EMPLOYEES: Permission.MANAGE_USERS,
    ImportType.CAMPAIGNS: Permission.CREATE_CAMPAIGNS,
}


async def _get_import(unit_of_work: IUnitOfWork, import_id, user: User = None) -> ImportJob:
    job = await unit_of_work.imports.get_by_id(ImportId.coerce(import_id))
    if not job or (user is not None and job.user_id != user.id and not user.is_admin()):
        raise ImportException.not_found(import_id)
    return job


class UploadImportUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, storage, job_queue: IJobQueue):
        self.unit_of_work = unit_of_work
        self.storage = storage
        self.job_queue = job_queue

    async def execute(self, import_type: ImportType, filename: str, content: bytes, user: User, options: Optional[dict] = None) -> ImportJobDTO:
        permission = IMPORT_PERMISSIONS.get(import_type)
        if permission is None:
            raise ImportException.unsupported_type(import_type)
        if not user.has_permission(permission):
            raise ImportException.forbidden()
        if not filename.lower().endswith(".csv"):
            raise ImportException.invalid_file("Only CSV files are accepted")
        if len(content) > settings.MAX_IMPORT_FILE_SIZE:
            raise ImportException.invalid_file(f"File exceeds {settings.MAX_IMPORT_FILE_SIZE} bytes")

        # Parse the header now so a broken file never reaches the queue
        _, required = schema_for(import_type)
        CsvImportReader(content, required_columns=required)

        import_id = ImportId.generate()
        object_name = await self.storage.upload_bytes(f"imports/{user.id.value}/{import_id.value}.csv", content, "text/csv")
        async with self.unit_of_work:
            job = ImportJob.create(
                user_id=user.id,
                import_type=import_type,
                file_path=object_name,
                original_filename=filename,
                organization_id=user.organization_id,
                options=options,
            )
            job.id = import_id
            await self.unit_of_work.imports.add(job)
            await AuditService(self.unit_of_work).log(
                "import.uploaded", "import", str(job.id), new_values={"type": import_type.value, "filename": filename}
            )
            await self.unit_of_work.commit()

        self.job_queue.enqueue("process_import", import_id=str(job.id.value))
        return ImportJobDTO.from_entity(job)


class ProcessImportUseCase:
    """Validates and creates rows chunk by chunk; each chunk commits on its own"""

    def __init__(self, unit_of_work: IUnitOfWork, storage, chunk_size: int = None):
        self.unit_of_work = unit_of_work
        self.storage = storage
        self.chunk_size = chunk_size or settings.IMPORT_CHUNK_SIZE

    async def execute(self, import_id) -> ImportJobDTO:
        async with self.unit_of_work:
            job = await _get_import(self.unit_of_work, import_id)
            if job.status != ImportStatus.PENDING:
                logger.info(f"Import {job.id} is {job.status.value}, skipping")
                return ImportJobDTO.from_entity(job)

            try:
                schema, required = schema_for(job.import_type)
                reader = CsvImportReader(await self.storage.download_bytes(job.file_path), required_columns=required)
                job.start(reader.count())
                await self.unit_of_work.imports.update(job)
                await self.unit_of_work.commit()

                owner = await self.unit_of_work.users.get_by_id(job.user_id)
                for chunk in reader.chunks(self.chunk_size):
                    for row_number, row in chunk:
                        status, message = await self._import_row(job, schema, row, owner)
                        job.record(row_number, status, message)
                    await self.unit_of_work.imports.update(job)
                    await self.unit_of_work.commit()

                job.complete()
            except DomainException as e:
                await self.unit_of_work.rollback()
                logger.warning(f"Import {job.id} failed: {e.message}")
                job.fail(e.message)
            except Exception as e:
                await self.unit_of_work.rollback()
                logger.error(f"Import {job.id} failed: {e}")
                job.fail(str(e))

            await self.unit_of_work.imports.update(job)
            self.unit_of_work.collect(job)
            await self.unit_of_work.commit()
            logger.info(
                f"Import {job.id} {job.status.value}: {job.successful_records} created, "
                f"{job.skipped_records} skipped, {job.failed_records} failed"
            )
            return ImportJobDTO.from_entity(job)

    async def _import_row(self, job: ImportJob, schema, row: dict, owner: Optional[User]):
        try:
            record = schema.model_validate(row)
        except ValidationError as e:
            return ImportRecordStatus.FAILED, describe_errors(e)

        try:
            if job.import_type == ImportType.CAMPAIGNS:
                return await self._import_campaign(job, record, owner)
            return await self._import_user(job, record)
        except (DomainException, ValueError) as e:
            return ImportRecordStatus.FAILED, getattr(e, "message", str(e))

    async def _import_user(self, job: ImportJob, record):
        email = Email(record.email)
        if await self.unit_of_work.users.exists_by_email(email):
            return ImportRecordStatus.SKIPPED, "User already exists"
        user = User.create(
            email=email,
            name=record.name,
            # Imported accounts get a random password and are expected to reset it
            hashed_password=get_password_hash(secrets.token_urlsafe(16)),
            role=record.role,
            organization_id=job.organization_id,
            department=record.department,
            job_title=record.job_title,
        )
        await self.unit_of_work.users.add(user)
        self.unit_of_work.collect(user)
        return ImportRecordStatus.SUCCESS, None

    async def _import_campaign(self, job: ImportJob, record, owner: Optional[User]):
        organization_id = job.organization_id or OrganizationId.coerce(job.options.get("organization_id"))
        if await self.unit_of_work.campaigns.exists_with_title(organization_id, record.title):
            return ImportRecordStatus.SKIPPED, "Campaign already exists"

        category_id = None
        if record.category:
            category = await self.unit_of_work.categories.get_by_slug(record.category)
            if not category:
                return ImportRecordStatus.FAILED, f"Unknown category {record.category}"
            category_id = category.id

        campaign = Campaign.create(
            title=TranslatableText.of(record.title),
            description=TranslatableText.of(record.description),
            goal_amount=Money(record.goal_amount, record.currency),
            start_date=record.start_date,
            end_date=record.end_date,
            organization_id=organization_id,
            user_id=owner.id if owner else job.user_id,
            category_id=category_id,
        )
        await self.unit_of_work.campaigns.add(campaign)
        self.unit_of_work.collect(campaign)
        return ImportRecordStatus.SUCCESS, None


class GetImportUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, import_id, user: User) -> ImportJobDTO:
        async with self.unit_of_work:
            return ImportJobDTO.from_entity(await _get_import(self.unit_of_work, import_id, user))


class ListImportsUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, user: User, page: PageRequest) -> Page[ImportJobDTO]:
        async with self.unit_of_work:
            result = await self.unit_of_work.imports.list_for_user(user.id, page)
            return Page(
                items=[ImportJobDTO.from_entity(job) for job in result.items],
                total=result.total,
                page=result.page,
                per_page=result.per_page,
            )


class CancelImportUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, import_id, user: User) -> ImportJobDTO:
        async with self.unit_of_work:
            job = await _get_import(self.unit_of_work, import_id, user)
            job.cancel()
            await self.unit_of_work.imports.update(job)
            await AuditService(self.unit_of_work).log("import.cancelled", "import", str(job.id))
            await self.unit_of_work.commit()
            return ImportJobDTO.from_entity(job)

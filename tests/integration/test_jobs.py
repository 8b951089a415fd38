"""Export and import jobs end to end with in-memory object storage"""

import csv
import io

import pytest
import pytest_asyncio

from acme_csr.application.dtos.job_dtos import ExportRequestDTO
from acme_csr.application.use_cases.export_use_cases import (
    CancelExportUseCase,
    GetExportDownloadUseCase,
    GetExportUseCase,
    ProcessExportUseCase,
    RequestExportUseCase,
)
from acme_csr.application.use_cases.import_use_cases import (
    CancelImportUseCase,
    ProcessImportUseCase,
    UploadImportUseCase,
)
from acme_csr.domain.enums import ExportFormat, ExportResourceType, ImportType, UserRole
from acme_csr.domain.exceptions import ExportException, ImportException
from acme_csr.domain.value_objects.email import Email
from acme_csr.infrastructure.exports.row_sources import ExportRowSource

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


@pytest_asyncio.fixture
async def admin(make_user):
    return await make_user("admin@example.com", UserRole.ADMIN)


def _rows(content: bytes):
    return list(csv.reader(io.StringIO(content.decode("utf-8-sig"))))


class TestExports:

    async def test_campaign_export_is_written_to_storage(self, uow_factory, storage, admin, make_organization, make_campaign):
        organization = await make_organization()
        await make_campaign(organization.id, admin.id)
        await make_campaign(organization.id, admin.id, goal="250")

        job = await RequestExportUseCase(uow_factory()).execute(
            ExportRequestDTO(resource_type=ExportResourceType.CAMPAIGNS), admin
        )
        assert job.status == "pending"

        result = await ProcessExportUseCase(
            uow_factory(), storage, lambda uow: ExportRowSource(uow.session), chunk_size=1
        ).execute(job.id)

        assert result.status == "completed"
        assert result.progress["processed_records"] == 2
        (object_name, (content, content_type)), = storage.objects.items()
        assert object_name.endswith(".csv")
        assert content_type == "text/csv"
        rows = _rows(content)
        assert rows[0][:3] == ["ID", "Title", "Status"]
        assert len(rows) == 3
        assert {row[1] for row in rows[1:]} == {"Clean Water"}

    async def test_download_link_for_completed_export(self, uow_factory, storage, admin):
        job = await RequestExportUseCase(uow_factory()).execute(
            ExportRequestDTO(resource_type=ExportResourceType.USERS), admin
        )
        await ProcessExportUseCase(uow_factory(), storage, lambda uow: ExportRowSource(uow.session)).execute(job.id)

        link = await GetExportDownloadUseCase(uow_factory(), storage).execute(job.id, admin)

        assert link.url.startswith("https://storage.test/exports/")
        assert link.filename.endswith(".csv")

    async def test_pending_export_cannot_be_downloaded(self, uow_factory, storage, admin):
        job = await RequestExportUseCase(uow_factory()).execute(
            ExportRequestDTO(resource_type=ExportResourceType.USERS), admin
        )

        with pytest.raises(ExportException):
            await GetExportDownloadUseCase(uow_factory(), storage).execute(job.id, admin)

    async def test_employees_cannot_export(self, uow_factory, make_user):
        employee = await make_user()

        with pytest.raises(ExportException) as exc_info:
            await RequestExportUseCase(uow_factory()).execute(
                ExportRequestDTO(resource_type=ExportResourceType.DONATIONS), employee
            )
        assert exc_info.value.status_code == 403

    async def test_pdf_is_not_supported(self, uow_factory, admin):
        with pytest.raises(ExportException) as exc_info:
            await RequestExportUseCase(uow_factory()).execute(
                ExportRequestDTO(resource_type=ExportResourceType.DONATIONS, format=ExportFormat.PDF), admin
            )
        assert exc_info.value.code == "unsupported_format"

    async def test_managers_are_scoped_to_their_organization(self, uow_factory, make_organization, make_user):
        organization = await make_organization()
        manager = await make_user("manager@example.com", UserRole.MANAGER, organization.id)

        job = await RequestExportUseCase(uow_factory()).execute(
            ExportRequestDTO(resource_type=ExportResourceType.CAMPAIGNS, filters={"organization_id": "someone-else"}),
            manager,
        )

        assert job.filters["organization_id"] == str(organization.id.value)

    async def test_other_users_cannot_see_export(self, uow_factory, admin, make_organization, make_user):
        organization = await make_organization()
        manager = await make_user("manager@example.com", UserRole.MANAGER, organization.id)
        job = await RequestExportUseCase(uow_factory()).execute(
            ExportRequestDTO(resource_type=ExportResourceType.CAMPAIGNS), admin
        )

        with pytest.raises(ExportException) as exc_info:
            await GetExportUseCase(uow_factory()).execute(job.id, manager)
        assert exc_info.value.status_code == 404

    async def test_cancelled_export_is_skipped_by_worker(self, uow_factory, storage, admin):
        job = await RequestExportUseCase(uow_factory()).execute(
            ExportRequestDTO(resource_type=ExportResourceType.USERS), admin
        )
        await CancelExportUseCase(uow_factory()).execute(job.id, admin)

        result = await ProcessExportUseCase(uow_factory(), storage, lambda uow: ExportRowSource(uow.session)).execute(job.id)

        assert result.status == "cancelled"
        assert storage.objects == {}


USERS_CSV = (
    "Email,Name,Role,Department\n"
    "ana@example.com,Ana,employee,Finance\n"
    "admin@example.com,Existing Admin,,\n"
    "not-an-email,Broken,,\n"
    "boss@example.com,Boss,admin,\n"
    "\n"
    "li@example.com,Li,manager,\n"
).encode()


class TestImports:

    async def test_upload_stores_file_and_queues_processing(self, uow_factory, storage, job_queue, admin):
        job = await UploadImportUseCase(uow_factory(), storage, job_queue).execute(
            ImportType.USERS, "people.csv", USERS_CSV, admin
        )

        assert job.status == "pending"
        assert len(storage.objects) == 1
        job_queue.enqueue.assert_called_once_with("process_import", import_id=str(job.id))

    @pytest.mark.parametrize("filename,content,message", [
        ("people.xlsx", USERS_CSV, "CSV"),
        ("people.csv", b"", "empty"),
        ("people.csv", b"name\nAna\n", "email"),
    ])
    async def test_broken_uploads_never_reach_the_queue(self, uow_factory, storage, job_queue, admin, filename, content, message):
        with pytest.raises(ImportException) as exc_info:
            await UploadImportUseCase(uow_factory(), storage, job_queue).execute(ImportType.USERS, filename, content, admin)

        assert message in exc_info.value.message
        job_queue.enqueue.assert_not_called()
        assert storage.objects == {}

    async def test_employees_cannot_import_users(self, uow_factory, storage, job_queue, make_user):
        employee = await make_user()

        with pytest.raises(ImportException):
            await UploadImportUseCase(uow_factory(), storage, job_queue).execute(ImportType.USERS, "people.csv", USERS_CSV, employee)

    async def test_processing_counts_every_row(self, uow_factory, storage, job_queue, admin):
        job = await UploadImportUseCase(uow_factory(), storage, job_queue).execute(
            ImportType.USERS, "people.csv", USERS_CSV, admin
        )

        result = await ProcessImportUseCase(uow_factory(), storage, chunk_size=2).execute(job.id)

        assert result.status == "completed"
        assert result.total_records == 5
        assert result.successful_records == 2
        assert result.skipped_records == 1
        assert result.failed_records == 2
        assert [error["row"] for error in result.errors] == [4, 5]
        assert result.progress_percentage == 100

        uow = uow_factory()
        async with uow:
            assert await uow.users.exists_by_email(Email("ana@example.com"))
            assert await uow.users.exists_by_email(Email("li@example.com"))

    async def test_cancelled_import_is_not_processed(self, uow_factory, storage, job_queue, admin):
        job = await UploadImportUseCase(uow_factory(), storage, job_queue).execute(
            ImportType.USERS, "people.csv", USERS_CSV, admin
        )
        await CancelImportUseCase(uow_factory()).execute(job.id, admin)

        result = await ProcessImportUseCase(uow_factory(), storage).execute(job.id)

        assert result.status == "cancelled"
        assert result.processed_records == 0

"""Export routes"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from ...api.dependencies import get_current_user, get_job_queue, get_pagination, get_storage_service, get_unit_of_work, paginated
from ...application.dtos.job_dtos import DownloadLinkDTO, ExportJobDTO, ExportRequestDTO
from ...application.use_cases.export_use_cases import (
    CancelExportUseCase,
    GetExportDownloadUseCase,
    GetExportUseCase,
    ListMyExportsUseCase,
    RequestExportUseCase,
    RetryExportUseCase,
)
from ...domain.entities.user import User
from ...domain.repositories.job_queue import IJobQueue
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.pagination import PageRequest
from ...infrastructure.external_services.storage_service import StorageService

router = APIRouter()


@router.post("", response_model=ExportJobDTO, status_code=status.HTTP_202_ACCEPTED)
async def request_export(
    request: ExportRequestDTO,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Queue an export; poll the job for progress"""
    return await RequestExportUseCase(unit_of_work).execute(request, current_user)


@router.get("")
async def list_exports(
    page: PageRequest = Depends(get_pagination),
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return paginated(await ListMyExportsUseCase(unit_of_work).execute(current_user, page))


@router.get("/{export_id}", response_model=ExportJobDTO)
async def get_export(
    export_id: UUID,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await GetExportUseCase(unit_of_work).execute(export_id, current_user)


@router.post("/{export_id}/cancel", response_model=ExportJobDTO)
async def cancel_export(
    export_id: UUID,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await CancelExportUseCase(unit_of_work).execute(export_id, current_user)


@router.post("/{export_id}/retry", response_model=ExportJobDTO, status_code=status.HTTP_202_ACCEPTED)
async def retry_export(
    export_id: UUID,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    job_queue: IJobQueue = Depends(get_job_queue)
):
    """Re-queue a failed export"""
    return await RetryExportUseCase(unit_of_work, job_queue).execute(export_id, current_user)


@router.get("/{export_id}/download", response_model=DownloadLinkDTO)
async def download_export(
    export_id: UUID,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    storage: StorageService = Depends(get_storage_service)
):
    """Presigned link to the finished file"""
    return await GetExportDownloadUseCase(unit_of_work, storage).execute(export_id, current_user)

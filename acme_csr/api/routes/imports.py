"""Import routes"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from ...api.dependencies import get_current_user, get_job_queue, get_pagination, get_storage_service, get_unit_of_work, paginated
from ...application.dtos.job_dtos import ImportJobDTO
from ...application.use_cases.import_use_cases import (
    CancelImportUseCase,
    GetImportUseCase,
    ListImportsUseCase,
    UploadImportUseCase,
)
from ...domain.entities.user import User
from ...domain.enums import ImportType
from ...domain.repositories.job_queue import IJobQueue
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.pagination import PageRequest
from ...infrastructure.external_services.storage_service import StorageService

router = APIRouter()


@router.post("", response_model=ImportJobDTO, status_code=status.HTTP_202_ACCEPTED)
async def upload_import(
    import_type: ImportType = Form(...),
    organization_id: Optional[UUID] = Form(None),
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    storage: StorageService = Depends(get_storage_service),
    job_queue: IJobQueue = Depends(get_job_queue)
):
    """Upload a CSV file; rows are imported in the background"""
    content = await file.read()
    return await UploadImportUseCase(unit_of_work, storage, job_queue).execute(
        import_type,
        file.filename or "",
        content,
        current_user,
        options={"organization_id": str(organization_id)} if organization_id else None,
    )


@router.get("")
async def list_imports(
    page: PageRequest = Depends(get_pagination),
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return paginated(await ListImportsUseCase(unit_of_work).execute(current_user, page))


@router.get("/{import_id}", response_model=ImportJobDTO)
async def get_import(
    import_id: UUID,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await GetImportUseCase(unit_of_work).execute(import_id, current_user)


@router.post("/{import_id}/cancel", response_model=ImportJobDTO)
async def cancel_import(
    import_id: UUID,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await CancelImportUseCase(unit_of_work).execute(import_id, current_user)

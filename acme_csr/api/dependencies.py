"""API dependencies"""

from typing import Any, Dict, Iterator, Optional

from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..core.config import settings
from ..core.context import ActorContext, current_tenant_id, set_current_actor, set_current_locale
from ..core.localization import resolve_locale
from ..core.security import decode_token
from ..domain.entities.user import User
from ..domain.enums import Permission
from ..domain.repositories.job_queue import IJobQueue
from ..domain.repositories.unit_of_work import IUnitOfWork
from ..domain.value_objects.entity_ids import UserId
from ..domain.value_objects.pagination import Page, PageRequest
from ..infrastructure.cache.redis_cache_repository import RedisCacheRepository
from ..infrastructure.cache.warming_job_tracker import WarmingJobTracker
from ..infrastructure.external_services.storage_service import StorageService
from ..infrastructure.factories import (
    build_cache_repository,
    build_search_engine,
    build_storage,
    build_warming_tracker,
    dispatching_unit_of_work_factory,
)
from ..infrastructure.queue.celery_job_queue import CeleryJobQueue
from ..infrastructure.search.meilisearch_engine import MeilisearchSearchEngine


security = HTTPBearer(auto_error=False)


def get_job_queue() -> IJobQueue:
    """Get job queue"""
    return CeleryJobQueue()


def get_unit_of_work(job_queue: IJobQueue = Depends(get_job_queue)) -> Iterator[IUnitOfWork]:
    """Unit of work bound to the request's tenant; committed events become queued jobs"""
    unit_of_work = dispatching_unit_of_work_factory(job_queue)()
    try:
        yield unit_of_work
    finally:
        unit_of_work.session.close()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
) -> User:
    """Get current authenticated user"""
    if credentials is None:
        raise _unauthorized("Not authenticated")
    payload = decode_token(credentials.credentials)
    if not payload or payload.get("type") != "access" or not payload.get("sub"):
        raise _unauthorized("Invalid token")
    # Tokens only work on the tenant that issued them
    if payload.get("tenant") != current_tenant_id():
        raise _unauthorized("Token was issued for another tenant")

    try:
        user_id = UserId.from_str(payload["sub"])
    except ValueError:
        raise _unauthorized("Invalid token")
    async with unit_of_work:
        user = await unit_of_work.users.get_by_id(user_id)
    if not user:
        raise _unauthorized("User not found")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User account is not active")

    set_current_actor(ActorContext(
        user_id=str(user.id),
        name=user.name,
        email=str(user.email),
        role=user.role.value,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
        url=str(request.url),
        method=request.method,
    ))
    return user


async def get_current_admin_user(current_user: User = Depends(get_current_user)) -> User:
    """Get current admin user"""
    if not current_user.is_admin():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return current_user


def require_permission(permission: Permission):
    """Admins pass; everyone else needs the permission"""

    async def checker(current_user: User = Depends(get_current_user)) -> User:
        if not current_user.is_admin() and not current_user.has_permission(permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission '{permission.value}' required"
            )
        return current_user

    return checker


def get_locale(request: Request, locale: Optional[str] = Query(None, max_length=10)) -> str:
    resolved = resolve_locale(locale, request.headers.get("accept-language"))
    set_current_locale(resolved)
    return resolved


def get_pagination(
    page: int = Query(1, ge=1),
    items_per_page: int = Query(settings.DEFAULT_ITEMS_PER_PAGE, ge=1, alias="itemsPerPage"),
) -> PageRequest:
    """Oversized page sizes are capped rather than rejected"""
    return PageRequest(page=page, per_page=min(items_per_page, settings.MAX_ITEMS_PER_PAGE))


def paginated(result: Page) -> Dict[str, Any]:
    return {
        "data": result.items,
        "meta": {
            "page": result.page,
            "itemsPerPage": result.per_page,
            "totalItems": result.total,
            "totalPages": result.total_pages,
        },
    }


def get_storage_service() -> StorageService:
    """Get storage service"""
    return build_storage()


def get_search_engine() -> MeilisearchSearchEngine:
    return build_search_engine()


def get_cache_repository(locale: str = Depends(get_locale)) -> RedisCacheRepository:
    return build_cache_repository(locale)


def get_warming_tracker() -> WarmingJobTracker:
    return build_warming_tracker()

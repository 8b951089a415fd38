"""Maps request hosts to tenant contexts"""

import logging
from typing import Callable, Optional

from sqlalchemy.orm import Session

from ...core.config import settings
from ...core.context import TenantContext
from ...domain.entities.tenant import Tenant
from ...domain.exceptions import TenantException
from ...domain.value_objects.entity_ids import TenantId
from ..repositories.tenant_repository_impl import TenantRepositoryImpl

logger = logging.getLogger(__name__)


def normalize_host(host: str) -> str:
    host = (host or "").strip().lower()
    if host.startswith("["):
        return host
    return host.split(":", 1)[0]


def tenant_context_for(tenant: Tenant) -> TenantContext:
    return TenantContext(
        tenant_id=str(tenant.id),
        subdomain=str(tenant.subdomain),
        database=tenant.database,
        organization_id=str(tenant.organization_id),
    )


class TenantResolver:
    """Central hosts resolve to None; {sub}.{APP_DOMAIN} resolves to an active tenant"""

    def __init__(self, session_factory: Callable[[], Session], central_domains=None, app_domain: Optional[str] = None):
        self.session_factory = session_factory
        self.central_domains = {domain.lower() for domain in (central_domains or settings.CENTRAL_DOMAINS)}
        self.app_domain = (app_domain or settings.APP_DOMAIN).lower()

    def is_central(self, host: str) -> bool:
        return normalize_host(host) in self.central_domains

    def subdomain_of(self, host: str) -> Optional[str]:
        host = normalize_host(host)
        suffix = f".{self.app_domain}"
        if not host.endswith(suffix):
            return None
        subdomain = host[: -len(suffix)]
        if not subdomain or "." in subdomain:
            return None
        return subdomain

    async def resolve(self, host: str) -> Optional[TenantContext]:
        if self.is_central(host):
            return None
        subdomain = self.subdomain_of(host)
        if subdomain is None:
            raise TenantException.not_found(normalize_host(host))

        session = self.session_factory()
        try:
            tenant = await TenantRepositoryImpl(session).get_by_subdomain(subdomain)
        finally:
            session.close()

        if tenant is None:
            raise TenantException.not_found(subdomain)
        if not tenant.is_active():
            logger.info(f"Rejected request for {tenant.status.value} tenant", extra={"tenant_id": str(tenant.id)})
            raise TenantException.unavailable(subdomain)
        return tenant_context_for(tenant)


async def tenant_context_by_id(tenant_id: Optional[str], session_factory: Callable[[], Session]) -> Optional[TenantContext]:
    """Context for background work addressed to a tenant by id; None means central"""
    if not tenant_id:
        return None
    session = session_factory()
    try:
        tenant = await TenantRepositoryImpl(session).get_by_id(TenantId.coerce(tenant_id))
    finally:
        session.close()
    if tenant is None:
        raise TenantException.not_found(tenant_id)
    return tenant_context_for(tenant)

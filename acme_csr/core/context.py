"""Request-scoped context: the active tenant, the acting user and the locale"""

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Optional, Iterator


@dataclass(frozen=True)
class TenantContext:
    tenant_id: str
    subdomain: str
    database: str
    organization_id: Optional[str] = None


@dataclass(frozen=True)
class ActorContext:
    user_id: Optional[str]
    name: str = "System"
    email: str = "system@acme-corp.com"
    role: str = "system"
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    url: Optional[str] = None
    method: Optional[str] = None


SYSTEM_ACTOR = ActorContext(user_id=None)

_current_tenant: ContextVar[Optional[TenantContext]] = ContextVar("current_tenant", default=None)
_current_actor: ContextVar[ActorContext] = ContextVar("current_actor", default=SYSTEM_ACTOR)
_current_locale: ContextVar[Optional[str]] = ContextVar("current_locale", default=None)


def current_tenant() -> Optional[TenantContext]:
    return _current_tenant.get()


def current_tenant_id() -> Optional[str]:
    tenant = _current_tenant.get()
    return tenant.tenant_id if tenant else None


@contextmanager
def tenant_scope(tenant: Optional[TenantContext]) -> Iterator[Optional[TenantContext]]:
    """Run a block inside a tenant (or central, when None) context"""
    token = _current_tenant.set(tenant)
    try:
        yield tenant
    finally:
        _current_tenant.reset(token)


def current_actor() -> ActorContext:
    return _current_actor.get()


def set_current_actor(actor: ActorContext):
    return _current_actor.set(actor)


def reset_current_actor(token) -> None:
    _current_actor.reset(token)


def current_locale() -> Optional[str]:
    return _current_locale.get()


def set_current_locale(locale: str):
    return _current_locale.set(locale)

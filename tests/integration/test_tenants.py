"""Tenant provisioning, lifecycle and host resolution"""

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from acme_csr.application.dtos.organization_dtos import SuspendTenantDTO
from acme_csr.application.use_cases.tenant_use_cases import (
    ProvisionTenantUseCase,
    ReactivateTenantUseCase,
    RetryTenantProvisioningUseCase,
    SuspendTenantUseCase,
)
from acme_csr.core.security import get_password_hash
from acme_csr.db.database import SessionLocal
from acme_csr.domain.entities.tenant import Tenant
from acme_csr.domain.enums import TenantStatus
from acme_csr.domain.events.organization_events import TenantProvisioningRequested
from acme_csr.domain.exceptions import TenantException
from acme_csr.domain.value_objects.email import Email
from acme_csr.domain.value_objects.slug import Subdomain
from acme_csr.infrastructure.repositories.unit_of_work_impl import unit_of_work_factory
from acme_csr.infrastructure.tenancy.resolver import TenantResolver

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


@pytest_asyncio.fixture
async def tenant(uow_factory, make_organization):
    organization = await make_organization("Helping Hands")
    tenant = Tenant.create(
        organization.id,
        Subdomain("hands"),
        "tenant_",
        admin_data={"email": "owner@hands.org", "name": "Owner", "password_hash": get_password_hash("password123")},
    )
    uow = uow_factory()
    async with uow:
        await uow.tenants.add(tenant)
        await uow.commit()
    return tenant


def _index_manager(result=None, error=None):
    manager = MagicMock()
    manager.create_indexes = AsyncMock(return_value=result or {"campaigns": True}, side_effect=error)
    return manager


async def _status(uow_factory, tenant_id) -> Tenant:
    uow = uow_factory()
    async with uow:
        return await uow.tenants.get_by_id(tenant_id)


class TestProvisioning:

    async def test_successful_provisioning_activates_tenant(self, uow_factory, tenant):
        provisioner = MagicMock()

        result = await ProvisionTenantUseCase(uow_factory, provisioner, _index_manager()).execute(tenant.id.value)

        provisioner.create_database.assert_called_once_with(tenant.database)
        assert result.tenant.status == TenantStatus.ACTIVE.value
        assert result.details["admin_email"] == "owner@hands.org"
        assert result.details["indexes"] == ["campaigns"]

        uow = uow_factory()
        async with uow:
            admin = await uow.users.get_by_email(Email("owner@hands.org"))
        assert admin is not None and admin.is_admin()

    async def test_failure_marks_tenant_failed(self, uow_factory, tenant):
        provisioner = MagicMock()
        provisioner.create_database.side_effect = RuntimeError("disk full")

        with pytest.raises(RuntimeError):
            await ProvisionTenantUseCase(uow_factory, provisioner, _index_manager()).execute(tenant.id.value)

        stored = await _status(uow_factory, tenant.id)
        assert stored.status == TenantStatus.FAILED
        assert stored.provisioning_error == "disk full"

    async def test_index_failure_marks_tenant_failed(self, uow_factory, tenant):
        manager = _index_manager(error=TenantException.index_creation_failed(tenant.id, "meilisearch down"))

        with pytest.raises(TenantException):
            await ProvisionTenantUseCase(uow_factory, MagicMock(), manager).execute(tenant.id.value)

        assert (await _status(uow_factory, tenant.id)).status == TenantStatus.FAILED

    async def test_retry_requests_provisioning_again(self, database, uow_factory, tenant):
        provisioner = MagicMock()
        provisioner.create_database.side_effect = RuntimeError("timeout")
        with pytest.raises(RuntimeError):
            await ProvisionTenantUseCase(uow_factory, provisioner, _index_manager()).execute(tenant.id.value)

        publisher = MagicMock()
        result = await RetryTenantProvisioningUseCase(unit_of_work_factory(publisher)()).execute(tenant.id.value)

        assert result.status == TenantStatus.PENDING.value
        (events,), _ = publisher.call_args
        assert any(isinstance(event, TenantProvisioningRequested) for event in events)

    async def test_retry_only_from_failed(self, uow_factory, tenant):
        with pytest.raises(TenantException) as exc_info:
            await RetryTenantProvisioningUseCase(uow_factory()).execute(tenant.id.value)
        assert exc_info.value.status_code == 409


class TestResolution:

    @pytest.fixture
    def resolver(self):
        return TenantResolver(SessionLocal, central_domains=["acme-csr.local"], app_domain="acme-csr.local")

    async def _activate(self, uow_factory, tenant):
        await ProvisionTenantUseCase(uow_factory, MagicMock(), _index_manager()).execute(tenant.id.value)

    async def test_pending_tenant_is_unavailable(self, resolver, tenant):
        with pytest.raises(TenantException) as exc_info:
            await resolver.resolve("hands.acme-csr.local")
        assert exc_info.value.status_code == 503

    async def test_active_tenant_resolves(self, resolver, uow_factory, tenant):
        await self._activate(uow_factory, tenant)

        context = await resolver.resolve("Hands.acme-csr.local:8000")

        assert context.tenant_id == str(tenant.id)
        assert context.database == tenant.database
        assert context.subdomain == "hands"

    async def test_suspended_tenant_is_unavailable_until_reactivated(self, resolver, uow_factory, tenant):
        await self._activate(uow_factory, tenant)
        await SuspendTenantUseCase(uow_factory()).execute(tenant.id.value, SuspendTenantDTO(reason="Unpaid invoice"))

        with pytest.raises(TenantException) as exc_info:
            await resolver.resolve("hands.acme-csr.local")
        assert exc_info.value.code == "tenant_unavailable"

        await ReactivateTenantUseCase(uow_factory()).execute(tenant.id.value)
        assert (await resolver.resolve("hands.acme-csr.local")).subdomain == "hands"

    async def test_unknown_subdomain_is_not_found(self, resolver, tenant):
        with pytest.raises(TenantException) as exc_info:
            await resolver.resolve("ghost.acme-csr.local")
        assert exc_info.value.status_code == 404

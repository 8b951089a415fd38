"""Tenant middleware with a stubbed resolver"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from acme_csr.api.middleware import TenantMiddleware
from acme_csr.core.context import TenantContext, current_tenant_id
from acme_csr.domain.exceptions import TenantException
from acme_csr.infrastructure.tenancy.resolver import TenantResolver, normalize_host

pytestmark = pytest.mark.unit

TENANT = TenantContext(tenant_id="t-1", subdomain="acme", database="tenant_abc", organization_id="o-1")


def build_client(resolve):
    resolver = MagicMock()
    resolver.resolve = AsyncMock(side_effect=resolve) if isinstance(resolve, Exception) else AsyncMock(return_value=resolve)

    app = FastAPI()
    app.add_middleware(TenantMiddleware, resolver=resolver)

    @app.get("/whoami")
    async def whoami():
        return {"tenant": current_tenant_id()}

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return TestClient(app), resolver


class TestTenantMiddleware:

    def test_central_host_runs_without_tenant(self):
        client, resolver = build_client(None)

        response = client.get("/whoami")

        assert response.status_code == 200
        assert response.json() == {"tenant": None}
        assert "X-Tenant" not in response.headers
        resolver.resolve.assert_awaited_once_with("testserver")

    def test_tenant_host_sets_scope_and_header(self):
        client, _ = build_client(TENANT)

        response = client.get("/whoami", headers={"host": "acme.acme-csr.local"})

        assert response.json() == {"tenant": "t-1"}
        assert response.headers["X-Tenant"] == "acme"

    def test_unknown_tenant_is_404(self):
        client, _ = build_client(TenantException.not_found("ghost"))

        response = client.get("/whoami")

        assert response.status_code == 404
        assert response.json()["code"] == "tenant_not_found"

    def test_inactive_tenant_is_503(self):
        client, _ = build_client(TenantException.unavailable("acme"))

        response = client.get("/whoami")

        assert response.status_code == 503
        assert response.json()["code"] == "tenant_unavailable"

    def test_health_is_not_resolved(self):
        client, resolver = build_client(TenantException.not_found("ghost"))

        response = client.get("/health")

        assert response.status_code == 200
        resolver.resolve.assert_not_awaited()


class TestHostParsing:

    @pytest.fixture
    def resolver(self):
        return TenantResolver(MagicMock(), central_domains=["acme-csr.local", "localhost"], app_domain="acme-csr.local")

    @pytest.mark.parametrize("host,expected", [
        ("Acme.ACME-csr.local:8000", "acme.acme-csr.local"),
        ("localhost", "localhost"),
        ("[::1]:8000", "[::1]:8000"),
        ("", ""),
    ])
    def test_normalize_host(self, host, expected):
        assert normalize_host(host) == expected

    def test_central_hosts(self, resolver):
        assert resolver.is_central("localhost:8000")
        assert resolver.is_central("ACME-CSR.local")
        assert not resolver.is_central("acme.acme-csr.local")

    @pytest.mark.parametrize("host,expected", [
        ("acme.acme-csr.local", "acme"),
        ("acme.acme-csr.local:443", "acme"),
        ("deep.acme.acme-csr.local", None),
        ("acme.example.com", None),
    ])
    def test_subdomain_of(self, resolver, host, expected):
        assert resolver.subdomain_of(host) == expected

    @pytest.mark.asyncio
    async def test_foreign_host_is_not_found(self, resolver):
        with pytest.raises(TenantException) as exc_info:
            await resolver.resolve("acme.example.com")

        assert exc_info.value.status_code == 404
        resolver.session_factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_central_host_resolves_to_none(self, resolver):
        assert await resolver.resolve("localhost") is None

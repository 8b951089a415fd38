from unittest.mock import patch

import pytest
import redis

pytestmark = pytest.mark.api


def test_health_reports_dependencies(client):
    with patch("acme_csr.main.redis.from_url") as from_url:
        response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "healthy", "redis": "healthy", "version": "1.0.0"}
    from_url.return_value.ping.assert_called_once()


def test_redis_outage_is_reported(client):
    with patch("acme_csr.main.redis.from_url") as from_url:
        from_url.return_value.ping.side_effect = redis.ConnectionError("refused")
        response = client.get("/health")

    body = response.json()
    assert body["redis"] == "unhealthy"
    assert body["status"] == "healthy"


def test_health_skips_tenant_resolution(client):
    with patch("acme_csr.main.redis.from_url"):
        response = client.get("/health", headers={"host": "unknown.example.com"})

    assert response.status_code == 200
    assert "X-Tenant" not in response.headers


def test_unknown_host_is_not_found(client):
    response = client.get("/api/campaigns/statuses", headers={"host": "ghost.acme-csr.local"})

    assert response.status_code == 404
    assert response.json()["code"] == "tenant_not_found"

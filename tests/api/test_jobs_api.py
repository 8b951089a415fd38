import pytest
import pytest_asyncio

from acme_csr.api.dependencies import get_storage_service
from acme_csr.domain.enums import UserRole
from acme_csr.main import app

pytestmark = [pytest.mark.api, pytest.mark.asyncio]


@pytest.fixture
def stored(storage):
    app.dependency_overrides[get_storage_service] = lambda: storage
    yield storage
    app.dependency_overrides.pop(get_storage_service, None)


@pytest_asyncio.fixture
async def admin(make_user):
    return await make_user("admin@example.com", UserRole.ADMIN)


class TestExportsApi:

    async def test_request_queues_processing(self, client, admin, auth_headers, job_queue):
        response = client.post("/api/exports", json={"resource_type": "donations", "format": "excel"}, headers=auth_headers(admin))

        assert response.status_code == 202
        body = response.json()
        assert body["status"] == "pending"
        assert body["filename"].endswith(".xlsx")
        job_queue.enqueue.assert_any_call("process_export", export_id=body["id"])

    async def test_concurrent_exports_are_limited(self, client, admin, auth_headers):
        for _ in range(3):
            client.post("/api/exports", json={"resource_type": "users"}, headers=auth_headers(admin))

        response = client.post("/api/exports", json={"resource_type": "users"}, headers=auth_headers(admin))

        assert response.status_code == 429

    async def test_listing_own_exports(self, client, admin, auth_headers):
        client.post("/api/exports", json={"resource_type": "users"}, headers=auth_headers(admin))

        body = client.get("/api/exports", headers=auth_headers(admin)).json()

        assert body["meta"]["totalItems"] == 1
        assert body["data"][0]["resource_type"] == "users"

    async def test_download_before_completion(self, client, admin, auth_headers, stored):
        export_id = client.post("/api/exports", json={"resource_type": "users"}, headers=auth_headers(admin)).json()["id"]

        response = client.get(f"/api/exports/{export_id}/download", headers=auth_headers(admin))

        assert response.status_code == 409


class TestImportsApi:

    async def test_upload_csv(self, client, admin, auth_headers, job_queue, stored):
        response = client.post(
            "/api/imports",
            data={"import_type": "users"},
            files={"file": ("people.csv", b"email,name\nana@example.com,Ana\n", "text/csv")},
            headers=auth_headers(admin),
        )

        assert response.status_code == 202
        assert response.json()["original_filename"] == "people.csv"
        job_queue.enqueue.assert_any_call("process_import", import_id=response.json()["id"])
        assert len(stored.objects) == 1

    async def test_upload_rejects_other_files(self, client, admin, auth_headers, stored):
        response = client.post(
            "/api/imports",
            data={"import_type": "users"},
            files={"file": ("people.txt", b"email,name\n", "text/plain")},
            headers=auth_headers(admin),
        )

        assert response.status_code == 422
        assert response.json()["code"] == "invalid_file"

import pytest

from acme_csr.domain.enums import UserRole

pytestmark = pytest.mark.api

REGISTRATION = {"email": "new.hire@example.com", "password": "s3cret-pass", "name": "New Hire"}


class TestRegistration:

    def test_register_returns_user_and_tokens(self, client):
        response = client.post("/api/auth/register", json=REGISTRATION)

        assert response.status_code == 201
        body = response.json()
        assert body["user"]["email"] == "new.hire@example.com"
        assert body["user"]["role"] == UserRole.EMPLOYEE.value
        assert body["tokens"]["token_type"] == "bearer"

    def test_duplicate_email_conflicts(self, client):
        client.post("/api/auth/register", json=REGISTRATION)

        response = client.post("/api/auth/register", json={**REGISTRATION, "email": "NEW.HIRE@example.com"})

        assert response.status_code == 409
        assert response.json()["code"] == "email_taken"

    def test_short_password_is_rejected(self, client):
        response = client.post("/api/auth/register", json={**REGISTRATION, "password": "short"})

        assert response.status_code == 422

    def test_unknown_organization_is_not_found(self, client):
        response = client.post(
            "/api/auth/register",
            json={**REGISTRATION, "organization_id": "00000000-0000-0000-0000-000000000001"},
        )

        assert response.status_code == 404


class TestLogin:

    def test_login_and_fetch_profile(self, client):
        client.post("/api/auth/register", json=REGISTRATION)

        response = client.post("/api/auth/login", json={"email": REGISTRATION["email"], "password": REGISTRATION["password"]})
        assert response.status_code == 200
        token = response.json()["tokens"]["access_token"]

        profile = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
        assert profile.status_code == 200
        assert profile.json()["name"] == "New Hire"
        assert profile.json()["last_login"] is not None

    def test_wrong_password(self, client):
        client.post("/api/auth/register", json=REGISTRATION)

        response = client.post("/api/auth/login", json={"email": REGISTRATION["email"], "password": "wrong-password"})

        assert response.status_code == 401
        assert response.json()["code"] == "invalid_credentials"

    def test_refresh_issues_new_pair(self, client):
        tokens = client.post("/api/auth/register", json=REGISTRATION).json()["tokens"]

        response = client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})

        assert response.status_code == 200
        assert response.json()["access_token"]

    def test_access_token_cannot_refresh(self, client):
        tokens = client.post("/api/auth/register", json=REGISTRATION).json()["tokens"]

        response = client.post("/api/auth/refresh", json={"refresh_token": tokens["access_token"]})

        assert response.status_code == 401


class TestAuthentication:

    def test_missing_token(self, client):
        response = client.get("/api/users/me")

        assert response.status_code == 401

    def test_garbage_token(self, client):
        response = client.get("/api/users/me", headers={"Authorization": "Bearer not-a-token"})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_token_from_another_tenant_is_refused(self, client, make_user, auth_headers):
        user = await make_user()

        response = client.get("/api/users/me", headers=auth_headers(user, tenant_id="another-tenant"))

        assert response.status_code == 401
        assert "another tenant" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_admin_routes_need_permission(self, client, make_user, auth_headers):
        employee = await make_user()

        response = client.get("/api/admin/tenants", headers=auth_headers(employee))

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_can_list_tenants(self, client, make_user, auth_headers):
        admin = await make_user("admin@example.com", UserRole.ADMIN)

        response = client.get("/api/admin/tenants", headers=auth_headers(admin))

        assert response.status_code == 200
        assert response.json() == []

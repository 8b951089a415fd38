from datetime import datetime, timedelta

import pytest
import pytest_asyncio

from acme_csr.domain.enums import UserRole

pytestmark = [pytest.mark.api, pytest.mark.asyncio]


@pytest_asyncio.fixture
async def world(make_organization, make_user, make_campaign):
    organization = await make_organization(is_verified=True)
    manager = await make_user("manager@example.com", UserRole.MANAGER, organization.id)
    employee = await make_user("employee@example.com", UserRole.EMPLOYEE, organization.id)
    active = [await make_campaign(organization.id, manager.id) for _ in range(3)]
    draft = await make_campaign(organization.id, employee.id, active=False)
    return {
        "organization": organization, "manager": manager, "employee": employee,
        "active": active, "draft": draft, "make_user": make_user,
    }


def _campaign_payload(**overrides):
    now = datetime.utcnow()
    payload = {
        "title": {"en": "School supplies", "fr": "Fournitures scolaires"},
        "description": "Backpacks for the new school year",
        "goal_amount": "2500.00",
        "start_date": (now + timedelta(days=1)).isoformat(),
        "end_date": (now + timedelta(days=60)).isoformat(),
    }
    payload.update(overrides)
    return payload


class TestListing:

    async def test_pagination_meta(self, client, world, auth_headers):
        response = client.get("/api/campaigns", params={"itemsPerPage": 2}, headers=auth_headers(world["manager"]))

        assert response.status_code == 200
        body = response.json()
        assert len(body["data"]) == 2
        assert body["meta"] == {"page": 1, "itemsPerPage": 2, "totalItems": 4, "totalPages": 2}

    async def test_page_size_is_capped(self, client, world, auth_headers):
        response = client.get("/api/campaigns", params={"itemsPerPage": 1000}, headers=auth_headers(world["manager"]))

        assert response.json()["meta"]["itemsPerPage"] == 100

    @pytest.mark.parametrize("params", [{"itemsPerPage": 0}, {"page": 0}, {"sort": "password"}])
    async def test_invalid_query_is_rejected(self, client, world, auth_headers, params):
        response = client.get("/api/campaigns", params=params, headers=auth_headers(world["manager"]))

        assert response.status_code == 422

    async def test_employees_only_see_public_campaigns(self, client, world, auth_headers):
        response = client.get("/api/campaigns", headers=auth_headers(world["employee"]))

        ids = {item["id"] for item in response.json()["data"]}
        assert ids == {str(campaign.id.value) for campaign in world["active"]}

    async def test_mine_includes_own_drafts(self, client, world, auth_headers):
        response = client.get("/api/campaigns", params={"mine": "true"}, headers=auth_headers(world["employee"]))

        data = response.json()["data"]
        assert [item["id"] for item in data] == [str(world["draft"].id.value)]
        assert data[0]["status"]["value"] == "draft"

    async def test_statuses_are_listed(self, client, world):
        response = client.get("/api/campaigns/statuses")

        values = [item["value"] for item in response.json()]
        assert "active" in values and "pending_approval" in values


class TestCampaignWrites:

    async def test_create_draft_in_request_locale(self, client, world, auth_headers):
        response = client.post(
            "/api/campaigns",
            params={"locale": "fr"},
            json=_campaign_payload(),
            headers=auth_headers(world["employee"]),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Fournitures scolaires"
        assert body["status"]["value"] == "draft"
        assert body["goal_amount"]["currency"] == "EUR"

    async def test_dates_out_of_order(self, client, world, auth_headers):
        now = datetime.utcnow()
        payload = _campaign_payload(start_date=(now + timedelta(days=10)).isoformat(), end_date=now.isoformat())

        response = client.post("/api/campaigns", json=payload, headers=auth_headers(world["employee"]))

        assert response.status_code == 422

    async def test_unverified_organization_cannot_create(self, client, make_organization, make_user, auth_headers):
        organization = await make_organization("Pending Org")
        employee = await make_user(organization_id=organization.id)

        response = client.post("/api/campaigns", json=_campaign_payload(), headers=auth_headers(employee))

        assert response.status_code == 409
        assert response.json()["code"] == "organization_cannot_create_campaigns"

    async def test_owner_moves_draft_to_trash(self, client, world, auth_headers):
        campaign_id = world["draft"].id.value

        response = client.delete(f"/api/campaigns/{campaign_id}", headers=auth_headers(world["employee"]))

        assert response.status_code == 200
        assert client.get(f"/api/campaigns/{campaign_id}", headers=auth_headers(world["employee"])).status_code == 404

    async def test_unpublished_campaigns_are_hidden_from_colleagues(self, client, world, auth_headers):
        campaign_id = world["draft"].id.value

        assert client.get(f"/api/campaigns/{campaign_id}", headers=auth_headers(world["employee"])).status_code == 200
        assert client.get(f"/api/campaigns/{campaign_id}", headers=auth_headers(world["manager"])).status_code == 200

        colleague = await world["make_user"]("colleague@example.com", UserRole.EMPLOYEE, world["organization"].id)
        response = client.get(f"/api/campaigns/{campaign_id}", headers=auth_headers(colleague))

        assert response.status_code == 404
        assert response.json()["code"] == "campaign_not_found"

    async def test_strangers_cannot_delete(self, client, world, auth_headers):
        campaign_id = world["active"][0].id.value

        response = client.delete(f"/api/campaigns/{campaign_id}", headers=auth_headers(world["employee"]))

        assert response.status_code == 403

    async def test_unknown_action(self, client, world, auth_headers):
        campaign_id = world["draft"].id.value

        response = client.post(f"/api/campaigns/{campaign_id}/explode", headers=auth_headers(world["employee"]))

        assert response.status_code == 422

    async def test_submit_then_approve(self, client, world, make_user, auth_headers):
        admin = await make_user("admin@example.com", UserRole.ADMIN)
        campaign_id = world["draft"].id.value

        submitted = client.post(f"/api/campaigns/{campaign_id}/submit", headers=auth_headers(world["employee"]))
        assert submitted.json()["status"]["value"] == "pending_approval"

        pending = client.get("/api/admin/campaigns/pending", headers=auth_headers(admin))
        assert [item["id"] for item in pending.json()["data"]] == [str(campaign_id)]

        approved = client.post(f"/api/admin/campaigns/{campaign_id}/approve", headers=auth_headers(admin))
        assert approved.status_code == 200
        assert approved.json()["status"]["value"] == "active"

import pytest
import pytest_asyncio

from acme_csr.domain.enums import UserRole

pytestmark = [pytest.mark.api, pytest.mark.asyncio]


@pytest_asyncio.fixture
async def people(make_organization, make_user, make_campaign):
    organization = await make_organization(is_verified=True)
    manager = await make_user("manager@example.com", UserRole.MANAGER, organization.id)
    donor = await make_user("donor@example.com", UserRole.EMPLOYEE, organization.id)
    colleague = await make_user("colleague@example.com", UserRole.EMPLOYEE, organization.id)
    admin = await make_user("admin@example.com", UserRole.ADMIN)
    campaign = await make_campaign(organization.id, manager.id, goal="300")
    return {"donor": donor, "colleague": colleague, "admin": admin, "campaign": campaign}


def _pledge(client, headers, campaign, amount="50.00", **extra):
    payload = {"campaign_id": str(campaign.id.value), "amount": amount, "payment_method": "card", **extra}
    return client.post("/api/donations", json=payload, headers=headers)


class TestDonationFlow:

    async def test_pledge_process_complete(self, client, people, auth_headers, job_queue):
        donor = auth_headers(people["donor"])
        admin = auth_headers(people["admin"])

        pledged = _pledge(client, donor, people["campaign"])
        assert pledged.status_code == 201
        donation_id = pledged.json()["id"]
        assert pledged.json()["status"] == "pending"

        processed = client.post(f"/api/donations/{donation_id}/process", json={"transaction_id": "pi_123"}, headers=donor)
        assert processed.json()["status"] == "processing"

        completed = client.post(f"/api/donations/{donation_id}/complete", headers=admin)
        assert completed.status_code == 200
        assert completed.json()["status"] == "completed"

        campaign = client.get(f"/api/campaigns/{people['campaign'].id.value}", headers=donor).json()
        assert campaign["current_amount"]["amount"] == "50.00"
        assert campaign["donations_count"] == 1
        assert job_queue.enqueue.called

    async def test_donor_cannot_complete_own_donation(self, client, people, auth_headers):
        donor = auth_headers(people["donor"])
        donation_id = _pledge(client, donor, people["campaign"]).json()["id"]
        client.post(f"/api/donations/{donation_id}/process", json={"transaction_id": "pi_456"}, headers=donor)

        response = client.post(f"/api/donations/{donation_id}/complete", headers=donor)

        assert response.status_code == 404

    async def test_pending_donation_cannot_complete(self, client, people, auth_headers):
        donation_id = _pledge(client, auth_headers(people["donor"]), people["campaign"]).json()["id"]

        response = client.post(f"/api/donations/{donation_id}/complete", headers=auth_headers(people["admin"]))

        assert response.status_code == 409

    async def test_colleagues_cannot_see_each_others_donations(self, client, people, auth_headers):
        donation_id = _pledge(client, auth_headers(people["donor"]), people["campaign"]).json()["id"]

        response = client.get(f"/api/donations/{donation_id}", headers=auth_headers(people["colleague"]))

        assert response.status_code == 404

    async def test_mine_lists_only_own(self, client, people, auth_headers):
        _pledge(client, auth_headers(people["donor"]), people["campaign"])
        _pledge(client, auth_headers(people["colleague"]), people["campaign"], amount="20.00")

        body = client.get("/api/donations/mine", headers=auth_headers(people["donor"])).json()

        assert body["meta"]["totalItems"] == 1
        assert body["data"][0]["amount"]["amount"] == "50.00"

    @pytest.mark.parametrize("extra", [{"amount": "0"}, {"recurring": True}, {"payment_method": "cash"}])
    async def test_invalid_pledges(self, client, people, auth_headers, extra):
        response = _pledge(client, auth_headers(people["donor"]), people["campaign"], **extra)

        assert response.status_code == 422

    async def test_cancel_pending_pledge(self, client, people, auth_headers):
        donor = auth_headers(people["donor"])
        donation_id = _pledge(client, donor, people["campaign"]).json()["id"]

        response = client.post(f"/api/donations/{donation_id}/cancel", json={"reason": "Changed my mind"}, headers=donor)

        assert response.json()["status"] == "cancelled"

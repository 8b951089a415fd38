"""Teams and in-app notifications against the SQLite schema"""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from acme_csr.application.dtos.donation_dtos import DonationCreateDTO, DonationProcessDTO
from acme_csr.application.dtos.team_dtos import TeamCreateDTO, TeamMemberAddDTO
from acme_csr.application.use_cases.donation_use_cases import (
    CompleteDonationUseCase,
    CreateDonationUseCase,
    ProcessDonationUseCase,
)
from acme_csr.application.use_cases.notification_use_cases import (
    DeliverNotificationEmailUseCase,
    GetUnreadCountUseCase,
    ListMyNotificationsUseCase,
    MarkAllNotificationsReadUseCase,
    MarkNotificationUseCase,
    SendEventNotificationUseCase,
    SendSampleNotificationsUseCase,
)
from acme_csr.application.use_cases.team_use_cases import (
    AddTeamMemberUseCase,
    CreateTeamUseCase,
    GetTeamStatsUseCase,
    RemoveTeamMemberUseCase,
)
from acme_csr.domain.enums import NotificationType, PaymentMethod, UserRole
from acme_csr.domain.exceptions import NotificationException, TeamException, UserException
from acme_csr.domain.value_objects.pagination import PageRequest

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


@pytest_asyncio.fixture
async def people(make_organization, make_user, make_campaign):
    organization = await make_organization(is_verified=True)
    other = await make_organization("Other Org", is_verified=True)
    leader = await make_user("leader@example.com", UserRole.MANAGER, organization.id)
    member = await make_user("member@example.com", UserRole.EMPLOYEE, organization.id)
    outsider = await make_user("outsider@example.com", UserRole.EMPLOYEE, other.id)
    campaign = await make_campaign(organization.id, leader.id, goal="5000")
    return {"leader": leader, "member": member, "outsider": outsider, "campaign": campaign}


class TestTeams:

    async def _team(self, uow_factory, people):
        return await CreateTeamUseCase(uow_factory()).execute(TeamCreateDTO(name="Green Office"), people["leader"])

    async def test_creator_leads_the_team(self, uow_factory, people):
        team = await self._team(uow_factory, people)

        assert team.leader_id == people["leader"].id.value
        assert team.member_count == 1
        assert team.members[0].role == "leader"

    async def test_members_come_from_the_same_organization(self, uow_factory, people):
        team = await self._team(uow_factory, people)

        updated = await AddTeamMemberUseCase(uow_factory()).execute(
            team.id, TeamMemberAddDTO(user_id=people["member"].id.value), people["leader"]
        )
        assert updated.member_count == 2

        with pytest.raises(UserException):
            await AddTeamMemberUseCase(uow_factory()).execute(
                team.id, TeamMemberAddDTO(user_id=people["outsider"].id.value), people["leader"]
            )

    async def test_only_the_leader_manages_members(self, uow_factory, people):
        team = await self._team(uow_factory, people)

        with pytest.raises(TeamException) as exc_info:
            await AddTeamMemberUseCase(uow_factory()).execute(
                team.id, TeamMemberAddDTO(user_id=people["member"].id.value), people["member"]
            )

        assert exc_info.value.status_code == 404

    async def test_leader_cannot_be_removed(self, uow_factory, people):
        team = await self._team(uow_factory, people)

        with pytest.raises(TeamException) as exc_info:
            await RemoveTeamMemberUseCase(uow_factory()).execute(team.id, people["leader"].id.value, people["leader"])

        assert exc_info.value.code == "cannot_remove_leader"

    async def test_stats_sum_completed_member_donations(self, uow_factory, people):
        team = await self._team(uow_factory, people)
        await AddTeamMemberUseCase(uow_factory()).execute(team.id, TeamMemberAddDTO(user_id=people["member"].id.value), people["leader"])
        for amount in ("40.00", "60.00"):
            donation = await CreateDonationUseCase(uow_factory()).execute(
                DonationCreateDTO(campaign_id=people["campaign"].id.value, amount=Decimal(amount), payment_method=PaymentMethod.CARD),
                people["member"],
            )
            await ProcessDonationUseCase(uow_factory()).execute(donation.id, DonationProcessDTO(transaction_id=f"tx-{amount}"), people["member"])
            await CompleteDonationUseCase(uow_factory()).execute(donation.id)

        stats = await GetTeamStatsUseCase(uow_factory()).execute(team.id)

        assert stats.total_raised == Decimal("100.00")
        assert stats.donations_count == 2
        assert stats.participating_members == 1


class TestNotifications:

    async def test_samples_are_created_for_a_user(self, uow_factory, people):
        created = await SendSampleNotificationsUseCase(uow_factory()).execute("member@example.com", count=3)

        assert len(created) == 3
        unread = await GetUnreadCountUseCase(uow_factory()).execute(people["member"])
        assert unread.unread == 3

    async def test_samples_need_a_known_user(self, uow_factory, people):
        with pytest.raises(UserException):
            await SendSampleNotificationsUseCase(uow_factory()).execute("nobody@example.com")

    async def test_mark_read_and_mark_all(self, uow_factory, people):
        first, _ = await SendSampleNotificationsUseCase(uow_factory()).execute("member@example.com", count=2)

        marked = await MarkNotificationUseCase(uow_factory()).execute(first.id, people["member"])
        assert marked.read is True
        assert (await GetUnreadCountUseCase(uow_factory()).execute(people["member"])).unread == 1

        assert await MarkAllNotificationsReadUseCase(uow_factory()).execute(people["member"]) == 1
        unread_page = await ListMyNotificationsUseCase(uow_factory()).execute(people["member"], PageRequest(), unread_only=True)
        assert unread_page.total == 0

    async def test_other_users_notifications_are_forbidden(self, uow_factory, people):
        notification, = await SendSampleNotificationsUseCase(uow_factory()).execute("member@example.com", count=1)

        with pytest.raises(NotificationException) as exc_info:
            await MarkNotificationUseCase(uow_factory()).execute(notification.id, people["outsider"])

        assert exc_info.value.status_code == 403

    async def test_event_notification_reaches_campaign_owner_by_mail(self, uow_factory, people, job_queue):
        campaign_id = str(people["campaign"].id)

        notification = await SendEventNotificationUseCase(uow_factory(), job_queue).execute(
            NotificationType.CAMPAIGN_APPROVED, {"campaign_id": campaign_id}
        )

        assert notification.channel == "mail"
        assert notification.data["action_path"] == f"/campaigns/{campaign_id}"
        job_queue.enqueue.assert_called_once_with("send_notification_email", countdown=None, notification_id=str(notification.id))
        owner_page = await ListMyNotificationsUseCase(uow_factory()).execute(people["leader"], PageRequest())
        assert owner_page.total == 1

    async def test_rejection_message_includes_reason(self, uow_factory, people):
        notification = await SendEventNotificationUseCase(uow_factory()).execute(
            NotificationType.CAMPAIGN_REJECTED, {"campaign_id": str(people["campaign"].id), "reason": "Missing budget"}
        )

        assert notification.message == "Your campaign was rejected: Missing budget"

    async def test_delivery_marks_notification_sent(self, uow_factory, people, job_queue):
        notification = await SendEventNotificationUseCase(uow_factory(), job_queue).execute(
            NotificationType.CAMPAIGN_APPROVED, {"campaign_id": str(people["campaign"].id)}
        )
        email_service = AsyncMock()
        email_service.send_notification_email.return_value = True

        assert await DeliverNotificationEmailUseCase(uow_factory(), email_service).execute(notification.id) is True
        # A second delivery is a no-op
        assert await DeliverNotificationEmailUseCase(uow_factory(), email_service).execute(notification.id) is True

        email_service.send_notification_email.assert_awaited_once()
        assert email_service.send_notification_email.await_args.kwargs["to_email"] == "leader@example.com"

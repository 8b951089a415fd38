"""Chunked row queries feeding the export writers"""

from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Tuple
from uuid import UUID

from sqlalchemy.orm import Query, Session

from ...domain.enums import ExportResourceType
from ...domain.value_objects.translatable import TranslatableText
from ..orm.campaign_model import CampaignModel
from ..orm.donation_model import DonationModel
from ..orm.organization_model import OrganizationModel
from ..orm.user_model import UserModel

HEADERS: Dict[ExportResourceType, Tuple[str, ...]] = {
    ExportResourceType.DONATIONS: (
        "ID", "Campaign", "Donor", "Amount", "Currency", "Payment Method", "Status", "Donated At", "Completed At",
    ),
    ExportResourceType.CAMPAIGNS: (
        "ID", "Title", "Status", "Goal Amount", "Current Amount", "Currency", "Goal %", "Donations",
        "Start Date", "End Date",
    ),
    ExportResourceType.USERS: ("ID", "Name", "Email", "Role", "Status", "Department", "Job Title", "Last Login"),
    ExportResourceType.ORGANIZATIONS: (
        "ID", "Name", "Registration Number", "Email", "Country", "Subdomain", "Active", "Verified",
    ),
}


def _date(value: datetime) -> str:
    return value.isoformat(sep=" ", timespec="seconds") if value else ""


def _amount(value) -> str:
    return f"{value:.2f}" if value is not None else ""


def _uuid(value) -> UUID:
    return value if isinstance(value, UUID) else UUID(str(value))


def _moment(value) -> datetime:
    # Filters travel through the job row as JSON strings
    return value if isinstance(value, datetime) else datetime.fromisoformat(str(value))


class ExportRowSource:
    """Builds the filtered query for a resource type and pages through it"""

    def __init__(self, session: Session, locale: str = "en"):
        self.session = session
        self.locale = locale

    def headers(self, resource_type: ExportResourceType) -> Tuple[str, ...]:
        return HEADERS[resource_type]

    def _text(self, value) -> str:
        return TranslatableText.of(value).get(self.locale)

    def _donations(self, filters: Dict[str, Any]) -> Query:
        query = (
            self.session.query(DonationModel, CampaignModel.title, UserModel.name)
            .join(CampaignModel, CampaignModel.id == DonationModel.campaign_id)
            .outerjoin(UserModel, UserModel.id == DonationModel.user_id)
        )
        if filters.get("organization_id"):
            query = query.filter(CampaignModel.organization_id == _uuid(filters["organization_id"]))
        if filters.get("campaign_id"):
            query = query.filter(DonationModel.campaign_id == _uuid(filters["campaign_id"]))
        if filters.get("status"):
            query = query.filter(DonationModel.status == filters["status"])
        if filters.get("date_from"):
            query = query.filter(DonationModel.donated_at >= _moment(filters["date_from"]))
        if filters.get("date_to"):
            query = query.filter(DonationModel.donated_at <= _moment(filters["date_to"]))
        return query.order_by(DonationModel.donated_at, DonationModel.id)

    def _donation_row(self, result) -> List[Any]:
        donation, campaign_title, donor_name = result
        return [
            str(donation.id),
            self._text(campaign_title),
            "Anonymous" if donation.anonymous else (donor_name or ""),
            _amount(donation.amount),
            donation.currency,
            donation.payment_method,
            donation.status,
            _date(donation.donated_at),
            _date(donation.completed_at),
        ]

    def _campaigns(self, filters: Dict[str, Any]) -> Query:
        query = self.session.query(CampaignModel).filter(CampaignModel.deleted_at.is_(None))
        if filters.get("organization_id"):
            query = query.filter(CampaignModel.organization_id == _uuid(filters["organization_id"]))
        if filters.get("status"):
            query = query.filter(CampaignModel.status == filters["status"])
        if filters.get("category_id"):
            query = query.filter(CampaignModel.category_id == _uuid(filters["category_id"]))
        return query.order_by(CampaignModel.created_at, CampaignModel.id)

    def _campaign_row(self, campaign: CampaignModel) -> List[Any]:
        return [
            str(campaign.id),
            self._text(campaign.title),
            campaign.status,
            _amount(campaign.goal_amount),
            _amount(campaign.current_amount),
            campaign.currency,
            _amount(campaign.goal_percentage),
            campaign.donations_count,
            _date(campaign.start_date),
            _date(campaign.end_date),
        ]

    def _users(self, filters: Dict[str, Any]) -> Query:
        query = self.session.query(UserModel)
        if filters.get("organization_id"):
            query = query.filter(UserModel.organization_id == _uuid(filters["organization_id"]))
        if filters.get("role"):
            query = query.filter(UserModel.role == filters["role"])
        if filters.get("status"):
            query = query.filter(UserModel.status == filters["status"])
        return query.order_by(UserModel.created_at, UserModel.id)

    def _user_row(self, user: UserModel) -> List[Any]:
        return [
            str(user.id), user.name, user.email, user.role, user.status,
            user.department or "", user.job_title or "", _date(user.last_login),
        ]

    def _organizations(self, filters: Dict[str, Any]) -> Query:
        query = self.session.query(OrganizationModel).filter(OrganizationModel.deleted_at.is_(None))
        if filters.get("is_verified") is not None:
            query = query.filter(OrganizationModel.is_verified.is_(bool(filters["is_verified"])))
        return query.order_by(OrganizationModel.created_at, OrganizationModel.id)

    def _organization_row(self, organization: OrganizationModel) -> List[Any]:
        return [
            str(organization.id),
            self._text(organization.name),
            organization.registration_number or "",
            organization.email or "",
            organization.country or "",
            organization.subdomain or "",
            "yes" if organization.is_active else "no",
            "yes" if organization.is_verified else "no",
        ]

    def _plan(self, resource_type: ExportResourceType) -> Tuple[Callable[[Dict[str, Any]], Query], Callable]:
        return {
            ExportResourceType.DONATIONS: (self._donations, self._donation_row),
            ExportResourceType.CAMPAIGNS: (self._campaigns, self._campaign_row),
            ExportResourceType.USERS: (self._users, self._user_row),
            ExportResourceType.ORGANIZATIONS: (self._organizations, self._organization_row),
        }[resource_type]

    def count(self, resource_type: ExportResourceType, filters: Dict[str, Any]) -> int:
        build, _ = self._plan(resource_type)
        return build(filters).order_by(None).count()

    def chunks(self, resource_type: ExportResourceType, filters: Dict[str, Any], chunk_size: int) -> Iterator[List[List[Any]]]:
        build, to_row = self._plan(resource_type)
        query = build(filters)
        offset = 0
        while True:
            results = query.offset(offset).limit(chunk_size).all()
            if not results:
                return
            yield [to_row(result) for result in results]
            if len(results) < chunk_size:
                return
            offset += chunk_size

"""Campaign repository implementation using SQLAlchemy ORM"""

from datetime import datetime
from typing import Optional, List
from sqlalchemy import String, cast, or_
from sqlalchemy.orm import Session

from ...domain.entities.campaign import Campaign
from ...domain.enums import CampaignStatus
from ...domain.repositories.campaign_repository import ICampaignRepository, CampaignFilters, SORTABLE_FIELDS
from ...domain.value_objects.entity_ids import CampaignId, CategoryId, OrganizationId, TeamId, UserId
from ...domain.value_objects.money import Money
from ...domain.value_objects.pagination import Page, PageRequest
from ...domain.value_objects.translatable import TranslatableText
from ..orm.campaign_model import CampaignModel
from ._paging import paginate, like_pattern


class CampaignRepositoryImpl(ICampaignRepository):
    """Repository implementation for Campaign aggregate"""

    def __init__(self, session: Session):
        self.session = session

    def _query(self, with_trashed: bool = False):
        query = self.session.query(CampaignModel)
        if not with_trashed:
            query = query.filter(CampaignModel.deleted_at.is_(None))
        return query

    async def get_by_id(self, campaign_id: CampaignId, with_trashed: bool = False) -> Optional[Campaign]:
        model = self._query(with_trashed).filter(CampaignModel.id == campaign_id.value).first()
        return self._map_to_entity(model) if model else None

    async def add(self, campaign: Campaign) -> Campaign:
        self.session.add(self._create_model_from_entity(campaign))
        self.session.flush()
        return campaign

    async def update(self, campaign: Campaign) -> Campaign:
        model = self._query(with_trashed=True).filter(CampaignModel.id == campaign.id.value).first()
        if model:
            self._update_model_from_entity(model, campaign)
            self.session.flush()
        return campaign

    async def soft_delete(self, campaign_id: CampaignId) -> bool:
        model = self._query().filter(CampaignModel.id == campaign_id.value).first()
        if not model:
            return False
        model.deleted_at = datetime.utcnow()
        self.session.flush()
        return True

    async def restore(self, campaign_id: CampaignId) -> bool:
        model = self._query(with_trashed=True).filter(
            CampaignModel.id == campaign_id.value,
            CampaignModel.deleted_at.isnot(None),
        ).first()
        if not model:
            return False
        model.deleted_at = None
        self.session.flush()
        return True

    async def force_delete(self, campaign_id: CampaignId) -> bool:
        model = self._query(with_trashed=True).filter(CampaignModel.id == campaign_id.value).first()
        if not model:
            return False
        self.session.delete(model)
        self.session.flush()
        return True

    async def list(self, filters: CampaignFilters, page: PageRequest) -> Page[Campaign]:
        query = self.session.query(CampaignModel)
        if filters.only_trashed:
            query = query.filter(CampaignModel.deleted_at.isnot(None))
        elif not filters.with_trashed:
            query = query.filter(CampaignModel.deleted_at.is_(None))

        if filters.statuses:
            query = query.filter(CampaignModel.status.in_([status.value for status in filters.statuses]))
        if filters.organization_id is not None:
            query = query.filter(CampaignModel.organization_id == filters.organization_id.value)
        if filters.category_id is not None:
            query = query.filter(CampaignModel.category_id == filters.category_id.value)
        if filters.user_id is not None:
            query = query.filter(CampaignModel.user_id == filters.user_id.value)
        if filters.search:
            pattern = like_pattern(filters.search)
            query = query.filter(or_(
                cast(CampaignModel.title, String).ilike(pattern, escape="\\"),
                cast(CampaignModel.description, String).ilike(pattern, escape="\\"),
            ))

        query = query.order_by(*self._ordering(filters.sort))
        return paginate(query, page, self._map_to_entity)

    def _ordering(self, sort: str):
        descending = sort.startswith("-")
        column_name = sort.lstrip("-")
        if column_name not in SORTABLE_FIELDS:
            column_name, descending = "created_at", True
        column = getattr(CampaignModel, column_name)
        primary = column.desc() if descending else column.asc()
        # Stable ordering for equal sort keys
        return [primary, CampaignModel.id.asc()]

    async def count_by_category(self, category_id: CategoryId) -> int:
        return self._query().filter(CampaignModel.category_id == category_id.value).count()

    async def count_by_status(self, status: CampaignStatus) -> int:
        return self._query().filter(CampaignModel.status == status.value).count()

    async def list_expired_active(self) -> List[Campaign]:
        models = self._query().filter(
            CampaignModel.status == CampaignStatus.ACTIVE.value,
            CampaignModel.end_date <= datetime.utcnow(),
        ).all()
        return [self._map_to_entity(model) for model in models]

    async def exists_with_title(self, organization_id: OrganizationId, title: str, locale: str = "en") -> bool:
        titles = self._query().with_entities(CampaignModel.title).filter(
            CampaignModel.organization_id == organization_id.value,
        ).all()
        wanted = title.strip().lower()
        return any((row.title or {}).get(locale, "").strip().lower() == wanted for row in titles)

    def _create_model_from_entity(self, campaign: Campaign) -> CampaignModel:
        model = CampaignModel(id=campaign.id.value, created_at=campaign.created_at)
        self._update_model_from_entity(model, campaign)
        return model

    def _update_model_from_entity(self, model: CampaignModel, campaign: Campaign) -> None:
        model.title = campaign.title.to_dict()
        model.description = campaign.description.to_dict()
        model.goal_amount = campaign.goal_amount.amount
        model.current_amount = campaign.current_amount.amount
        model.currency = campaign.goal_amount.currency
        model.start_date = campaign.start_date
        model.end_date = campaign.end_date
        model.status = campaign.status.value
        model.organization_id = campaign.organization_id.value
        model.category_id = campaign.category_id.value if campaign.category_id else None
        model.user_id = campaign.user_id.value
        model.team_id = campaign.team_id.value if campaign.team_id else None
        model.featured_image = campaign.featured_image
        model.submitted_for_approval_at = campaign.submitted_for_approval_at
        model.approved_by = campaign.approved_by.value if campaign.approved_by else None
        model.approved_at = campaign.approved_at
        model.rejected_by = campaign.rejected_by.value if campaign.rejected_by else None
        model.rejected_at = campaign.rejected_at
        model.rejection_reason = campaign.rejection_reason
        model.completed_at = campaign.completed_at
        model.updated_at = campaign.updated_at
        model.deleted_at = campaign.deleted_at
        # donations_count is owned by the donation observer

    def _map_to_entity(self, model: CampaignModel) -> Campaign:
        return Campaign(
            id=CampaignId(model.id),
            title=TranslatableText(model.title or {}),
            description=TranslatableText(model.description or {}),
            goal_amount=Money(model.goal_amount, model.currency),
            current_amount=Money(model.current_amount or 0, model.currency),
            start_date=model.start_date,
            end_date=model.end_date,
            organization_id=OrganizationId(model.organization_id),
            user_id=UserId(model.user_id),
            status=CampaignStatus(model.status),
            category_id=CategoryId(model.category_id) if model.category_id else None,
            team_id=TeamId(model.team_id) if model.team_id else None,
            donations_count=model.donations_count or 0,
            featured_image=model.featured_image,
            submitted_for_approval_at=model.submitted_for_approval_at,
            approved_by=UserId(model.approved_by) if model.approved_by else None,
            approved_at=model.approved_at,
            rejected_by=UserId(model.rejected_by) if model.rejected_by else None,
            rejected_at=model.rejected_at,
            rejection_reason=model.rejection_reason,
            completed_at=model.completed_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
            deleted_at=model.deleted_at,
        )

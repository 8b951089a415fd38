"""Donation repository implementation using SQLAlchemy ORM"""

from typing import Optional, List
from sqlalchemy.orm import Session

from ...domain.entities.donation import Donation
from ...domain.enums import DonationStatus, PaymentMethod, RecurringFrequency
from ...domain.repositories.donation_repository import IDonationRepository
from ...domain.value_objects.entity_ids import CampaignId, DonationId, UserId
from ...domain.value_objects.money import Money
from ...domain.value_objects.pagination import Page, PageRequest
from ..orm.donation_model import DonationModel
from ._paging import paginate, ids


class DonationRepositoryImpl(IDonationRepository):
    """Repository implementation for Donation aggregate"""

    def __init__(self, session: Session):
        self.session = session

    def _query(self):
        return self.session.query(DonationModel)

    async def get_by_id(self, donation_id: DonationId) -> Optional[Donation]:
        model = self._query().filter(DonationModel.id == donation_id.value).first()
        return self._map_to_entity(model) if model else None

    async def get_by_transaction_id(self, transaction_id: str) -> Optional[Donation]:
        model = self._query().filter(DonationModel.transaction_id == transaction_id).first()
        return self._map_to_entity(model) if model else None

    async def add(self, donation: Donation) -> Donation:
        self.session.add(self._create_model_from_entity(donation))
        self.session.flush()
        return donation

    async def update(self, donation: Donation) -> Donation:
        model = self._query().filter(DonationModel.id == donation.id.value).first()
        if model:
            self._update_model_from_entity(model, donation)
            self.session.flush()
        return donation

    async def list_by_user(self, user_id: UserId, page: PageRequest) -> Page[Donation]:
        query = self._query().filter(DonationModel.user_id == user_id.value).order_by(DonationModel.donated_at.desc())
        return paginate(query, page, self._map_to_entity)

    async def list_by_campaign(self, campaign_id: CampaignId, page: PageRequest, status: Optional[DonationStatus] = None) -> Page[Donation]:
        query = self._query().filter(DonationModel.campaign_id == campaign_id.value)
        if status is not None:
            query = query.filter(DonationModel.status == status.value)
        query = query.order_by(DonationModel.donated_at.desc())
        return paginate(query, page, self._map_to_entity)

    async def list(self, page: PageRequest, status: Optional[DonationStatus] = None) -> Page[Donation]:
        query = self._query()
        if status is not None:
            query = query.filter(DonationModel.status == status.value)
        query = query.order_by(DonationModel.donated_at.desc())
        return paginate(query, page, self._map_to_entity)

    async def count_completed_by_campaign(self, campaign_id: CampaignId) -> int:
        return self._query().filter(
            DonationModel.campaign_id == campaign_id.value,
            DonationModel.status == DonationStatus.COMPLETED.value,
        ).count()

    async def list_completed_by_users(self, user_ids: List[UserId]) -> List[Donation]:
        if not user_ids:
            return []
        models = self._query().filter(
            DonationModel.user_id.in_(ids(user_ids)),
            DonationModel.status == DonationStatus.COMPLETED.value,
        ).order_by(DonationModel.donated_at.desc()).all()
        return [self._map_to_entity(model) for model in models]

    def _create_model_from_entity(self, donation: Donation) -> DonationModel:
        model = DonationModel(
            id=donation.id.value,
            campaign_id=donation.campaign_id.value,
            user_id=donation.user_id.value,
            created_at=donation.created_at,
        )
        self._update_model_from_entity(model, donation)
        return model

    def _update_model_from_entity(self, model: DonationModel, donation: Donation) -> None:
        model.amount = donation.amount.amount
        model.currency = donation.amount.currency
        model.payment_method = donation.payment_method.value
        model.payment_gateway = donation.payment_gateway
        model.transaction_id = donation.transaction_id
        model.status = donation.status.value
        model.anonymous = donation.anonymous
        model.recurring = donation.recurring
        model.recurring_frequency = donation.recurring_frequency.value if donation.recurring_frequency else None
        model.notes = donation.notes
        model.failure_reason = donation.failure_reason
        model.refund_reason = donation.refund_reason
        model.donated_at = donation.donated_at
        model.processed_at = donation.processed_at
        model.completed_at = donation.completed_at
        model.cancelled_at = donation.cancelled_at
        model.refunded_at = donation.refunded_at
        model.updated_at = donation.updated_at

    def _map_to_entity(self, model: DonationModel) -> Donation:
        return Donation(
            id=DonationId(model.id),
            campaign_id=CampaignId(model.campaign_id),
            user_id=UserId(model.user_id),
            amount=Money(model.amount, model.currency),
            payment_method=PaymentMethod(model.payment_method),
            status=DonationStatus(model.status),
            payment_gateway=model.payment_gateway,
            transaction_id=model.transaction_id,
            anonymous=bool(model.anonymous),
            recurring=bool(model.recurring),
            recurring_frequency=RecurringFrequency(model.recurring_frequency) if model.recurring_frequency else None,
            notes=model.notes,
            failure_reason=model.failure_reason,
            refund_reason=model.refund_reason,
            donated_at=model.donated_at,
            processed_at=model.processed_at,
            completed_at=model.completed_at,
            cancelled_at=model.cancelled_at,
            refunded_at=model.refunded_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

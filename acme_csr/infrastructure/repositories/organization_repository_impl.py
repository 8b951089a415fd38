"""Organization repository implementation"""

from datetime import datetime
from typing import Optional
from sqlalchemy import String, cast, or_
from sqlalchemy.orm import Session

from ...domain.entities.organization import Organization
from ...domain.repositories.organization_repository import IOrganizationRepository
from ...domain.value_objects.email import Email
from ...domain.value_objects.entity_ids import OrganizationId
from ...domain.value_objects.pagination import Page, PageRequest
from ...domain.value_objects.slug import Subdomain
from ...domain.value_objects.translatable import TranslatableText
from ..orm.organization_model import OrganizationModel
from ._paging import paginate, like_pattern

_DETAIL_FIELDS = (
    "registration_number", "tax_id", "category", "website", "phone",
    "address", "city", "postal_code", "country", "logo_url",
    "is_active", "is_verified", "verification_date",
)


class OrganizationRepositoryImpl(IOrganizationRepository):

    def __init__(self, session: Session):
        self.session = session

    def _query(self, with_trashed: bool = False):
        query = self.session.query(OrganizationModel)
        if not with_trashed:
            query = query.filter(OrganizationModel.deleted_at.is_(None))
        return query

    async def get_by_id(self, organization_id: OrganizationId, with_trashed: bool = False) -> Optional[Organization]:
        model = self._query(with_trashed).filter(OrganizationModel.id == organization_id.value).first()
        return self._map_to_entity(model) if model else None

    async def get_by_subdomain(self, subdomain: str) -> Optional[Organization]:
        model = self._query().filter(OrganizationModel.subdomain == subdomain.lower()).first()
        return self._map_to_entity(model) if model else None

    async def get_by_registration_number(self, registration_number: str) -> Optional[Organization]:
        model = self._query(with_trashed=True).filter(
            OrganizationModel.registration_number == registration_number
        ).first()
        return self._map_to_entity(model) if model else None

    async def add(self, organization: Organization) -> Organization:
        self.session.add(self._create_model_from_entity(organization))
        self.session.flush()
        return organization

    async def update(self, organization: Organization) -> Organization:
        model = self._query(with_trashed=True).filter(OrganizationModel.id == organization.id.value).first()
        if model:
            self._update_model_from_entity(model, organization)
            self.session.flush()
        return organization

    async def soft_delete(self, organization_id: OrganizationId) -> bool:
        model = self._query().filter(OrganizationModel.id == organization_id.value).first()
        if not model:
            return False
        model.deleted_at = datetime.utcnow()
        self.session.flush()
        return True

    async def restore(self, organization_id: OrganizationId) -> bool:
        model = self._query(with_trashed=True).filter(
            OrganizationModel.id == organization_id.value,
            OrganizationModel.deleted_at.isnot(None),
        ).first()
        if not model:
            return False
        model.deleted_at = None
        self.session.flush()
        return True

    async def list(
        self,
        page: PageRequest,
        search: Optional[str] = None,
        verified: Optional[bool] = None,
        active: Optional[bool] = None,
    ) -> Page[Organization]:
        query = self._query()
        if verified is not None:
            query = query.filter(OrganizationModel.is_verified == verified)
        if active is not None:
            query = query.filter(OrganizationModel.is_active == active)
        if search:
            pattern = like_pattern(search)
            query = query.filter(or_(
                cast(OrganizationModel.name, String).ilike(pattern, escape="\\"),
                OrganizationModel.registration_number.ilike(pattern, escape="\\"),
            ))
        query = query.order_by(OrganizationModel.created_at.desc())
        return paginate(query, page, self._map_to_entity)

    def _create_model_from_entity(self, organization: Organization) -> OrganizationModel:
        model = OrganizationModel(id=organization.id.value, created_at=organization.created_at)
        self._update_model_from_entity(model, organization)
        return model

    def _update_model_from_entity(self, model: OrganizationModel, organization: Organization) -> None:
        model.name = organization.name.to_dict()
        model.description = organization.description.to_dict()
        model.mission = organization.mission.to_dict()
        model.email = str(organization.email) if organization.email else None
        model.subdomain = str(organization.subdomain) if organization.subdomain else None
        for attribute in _DETAIL_FIELDS:
            setattr(model, attribute, getattr(organization, attribute))
        model.updated_at = organization.updated_at
        model.deleted_at = organization.deleted_at

    def _map_to_entity(self, model: OrganizationModel) -> Organization:
        details = {attribute: getattr(model, attribute) for attribute in _DETAIL_FIELDS}
        return Organization(
            id=OrganizationId(model.id),
            name=TranslatableText(model.name or {}),
            description=TranslatableText(model.description or {}),
            mission=TranslatableText(model.mission or {}),
            email=Email(model.email) if model.email else None,
            subdomain=Subdomain(model.subdomain) if model.subdomain else None,
            created_at=model.created_at,
            updated_at=model.updated_at,
            deleted_at=model.deleted_at,
            **details,
        )

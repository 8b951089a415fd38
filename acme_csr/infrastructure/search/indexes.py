"""Index naming, settings and document builders for the searchable entities"""

from typing import Any, Dict, Optional

from ...core.config import settings
from ...core.context import current_tenant_id
from ...domain.entities.campaign import Campaign
from ...domain.entities.donation import Donation
from ...domain.entities.organization import Organization
from ...domain.entities.user import User
from ...domain.enums import SearchableEntity

INDEX_SETTINGS: Dict[SearchableEntity, Dict[str, Any]] = {
    SearchableEntity.CAMPAIGNS: {
        "searchableAttributes": ["title", "description", "organization_name", "category"],
        "filterableAttributes": ["status", "organization_id", "category", "created_at", "is_active"],
        "sortableAttributes": ["created_at", "updated_at", "goal_amount", "current_amount", "end_date"],
    },
    SearchableEntity.ORGANIZATIONS: {
        "searchableAttributes": ["name", "description", "mission", "category", "city"],
        "filterableAttributes": ["is_active", "is_verified", "category", "country"],
        "sortableAttributes": ["created_at", "name"],
    },
    SearchableEntity.USERS: {
        "searchableAttributes": ["name", "email", "department", "job_title"],
        "filterableAttributes": ["role", "status", "organization_id", "department"],
        "sortableAttributes": ["created_at", "name"],
    },
    SearchableEntity.DONATIONS: {
        "searchableAttributes": ["campaign_title", "notes"],
        "filterableAttributes": ["status", "campaign_id", "user_id", "payment_method", "currency"],
        "sortableAttributes": ["amount", "donated_at"],
    },
}

# Attribute returned by suggest() for each index
SUGGEST_ATTRIBUTES: Dict[SearchableEntity, str] = {
    SearchableEntity.CAMPAIGNS: "title",
    SearchableEntity.ORGANIZATIONS: "name",
    SearchableEntity.USERS: "name",
    SearchableEntity.DONATIONS: "campaign_title",
}


def index_name(entity: SearchableEntity, tenant_id: Optional[str] = None) -> str:
    """{prefix}{tenant}_{entity} inside a tenant, {prefix}{entity} centrally"""
    entity = SearchableEntity(entity)
    tenant_id = tenant_id or current_tenant_id()
    if tenant_id:
        return f"{settings.MEILISEARCH_PREFIX}{tenant_id}_{entity.value}"
    return f"{settings.MEILISEARCH_PREFIX}{entity.value}"


def entity_for_index(name: str) -> Optional[SearchableEntity]:
    for entity in SearchableEntity:
        if name.endswith(entity.value):
            return entity
    return None


def _timestamp(value) -> Optional[int]:
    return int(value.timestamp()) if value else None


def campaign_document(campaign: Campaign, organization_name: str = "", category: Optional[str] = None) -> Dict[str, Any]:
    return {
        "id": str(campaign.id),
        "title": campaign.title.get(),
        "title_translations": campaign.title.to_dict(),
        "description": campaign.description.get(),
        "organization_id": str(campaign.organization_id),
        "organization_name": organization_name,
        "category": category,
        "status": campaign.status.value,
        "is_active": campaign.is_active(),
        "goal_amount": float(campaign.goal_amount.amount),
        "current_amount": float(campaign.current_amount.amount),
        "currency": campaign.goal_amount.currency,
        "progress_percentage": campaign.progress_percentage,
        "end_date": _timestamp(campaign.end_date),
        "created_at": _timestamp(campaign.created_at),
        "updated_at": _timestamp(campaign.updated_at),
    }


def organization_document(organization: Organization) -> Dict[str, Any]:
    return {
        "id": str(organization.id),
        "name": organization.display_name,
        "name_translations": organization.name.to_dict(),
        "description": organization.description.get(),
        "mission": organization.mission.get(),
        "category": organization.category,
        "city": organization.city,
        "country": organization.country,
        "is_active": organization.is_active,
        "is_verified": organization.is_verified,
        "created_at": _timestamp(organization.created_at),
    }


def user_document(user: User) -> Dict[str, Any]:
    return {
        "id": str(user.id),
        "name": user.name,
        "email": str(user.email),
        "department": user.department,
        "job_title": user.job_title,
        "role": user.role.value,
        "status": user.status.value,
        "organization_id": str(user.organization_id) if user.organization_id else None,
        "created_at": _timestamp(user.created_at),
    }


def donation_document(donation: Donation, campaign_title: str = "") -> Dict[str, Any]:
    return {
        "id": str(donation.id),
        "campaign_id": str(donation.campaign_id),
        "campaign_title": campaign_title,
        # Anonymous donors are never indexed by identity
        "user_id": None if donation.anonymous else str(donation.user_id),
        "amount": float(donation.amount.amount),
        "currency": donation.amount.currency,
        "status": donation.status.value,
        "payment_method": donation.payment_method.value,
        "notes": donation.notes,
        "donated_at": _timestamp(donation.donated_at),
    }

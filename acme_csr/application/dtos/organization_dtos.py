"""Organization and tenant DTOs"""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from .common import TranslatableInput


class TenantAdminDTO(BaseModel):
    """First administrator seeded into a new tenant"""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)


class OrganizationCreateDTO(BaseModel):
    name: TranslatableInput
    description: Optional[TranslatableInput] = None
    mission: Optional[TranslatableInput] = None
    registration_number: Optional[str] = Field(None, max_length=100)
    tax_id: Optional[str] = Field(None, max_length=100)
    category: Optional[str] = Field(None, max_length=100)
    website: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, min_length=2, max_length=2)
    subdomain: Optional[str] = Field(None, max_length=63)
    logo_url: Optional[str] = Field(None, max_length=512)
    admin: Optional[TenantAdminDTO] = None


class OrganizationUpdateDTO(BaseModel):
    name: Optional[TranslatableInput] = None
    description: Optional[TranslatableInput] = None
    mission: Optional[TranslatableInput] = None
    registration_number: Optional[str] = Field(None, max_length=100)
    tax_id: Optional[str] = Field(None, max_length=100)
    category: Optional[str] = Field(None, max_length=100)
    website: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, min_length=2, max_length=2)
    logo_url: Optional[str] = Field(None, max_length=512)


class OrganizationDTO(BaseModel):
    id: UUID
    name: str
    description: str
    mission: str
    translations: Dict[str, Dict[str, str]]
    registration_number: Optional[str] = None
    tax_id: Optional[str] = None
    category: Optional[str] = None
    website: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    subdomain: Optional[str] = None
    logo_url: Optional[str] = None
    is_active: bool
    is_verified: bool
    verification_date: Optional[datetime] = None
    status: str
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, organization, locale: str = "en"):
        return cls(
            id=organization.id.value,
            name=organization.name.get(locale),
            description=organization.description.get(locale),
            mission=organization.mission.get(locale),
            translations={
                "name": organization.name.to_dict(),
                "description": organization.description.to_dict(),
                "mission": organization.mission.to_dict(),
            },
            registration_number=organization.registration_number,
            tax_id=organization.tax_id,
            category=organization.category,
            website=organization.website,
            email=str(organization.email) if organization.email else None,
            phone=organization.phone,
            address=organization.address,
            city=organization.city,
            postal_code=organization.postal_code,
            country=organization.country,
            subdomain=str(organization.subdomain) if organization.subdomain else None,
            logo_url=organization.logo_url,
            is_active=organization.is_active,
            is_verified=organization.is_verified,
            verification_date=organization.verification_date,
            status=organization.status.value,
            created_at=organization.created_at,
            updated_at=organization.updated_at,
            deleted_at=organization.deleted_at,
        )


class OrganizationStatsDTO(BaseModel):
    organization_id: UUID
    campaigns: int
    active_campaigns: int
    total_raised: float
    employees: int


class TenantDTO(BaseModel):
    id: UUID
    organization_id: UUID
    subdomain: str
    database: str
    status: str
    features: Dict[str, bool]
    provisioning_error: Optional[str] = None
    provisioned_at: Optional[datetime] = None
    suspended_at: Optional[datetime] = None
    suspension_reason: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, tenant):
        return cls(
            id=tenant.id.value,
            organization_id=tenant.organization_id.value,
            subdomain=str(tenant.subdomain),
            database=tenant.database,
            status=tenant.status.value,
            features=dict(tenant.features),
            provisioning_error=tenant.provisioning_error,
            provisioned_at=tenant.provisioned_at,
            suspended_at=tenant.suspended_at,
            suspension_reason=tenant.suspension_reason,
            created_at=tenant.created_at,
        )


class SuspendTenantDTO(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500)


class TenantFeatureDTO(BaseModel):
    feature: str = Field(..., min_length=1, max_length=64)
    enabled: bool = True


class ProvisioningResultDTO(BaseModel):
    tenant: TenantDTO
    details: Dict[str, Any] = {}

"""Organization entity"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List

from ..enums import OrganizationStatus
from ..exceptions import OrganizationException
from ..value_objects.email import Email
from ..value_objects.entity_ids import OrganizationId
from ..value_objects.slug import Subdomain
from ..value_objects.translatable import TranslatableText
from ..events.organization_events import (
    OrganizationCreated,
    OrganizationDeactivated,
    OrganizationUpdated,
    OrganizationVerified,
)

UNNAMED_ORGANIZATION = "Unnamed Organization"


@dataclass
class Organization:
    id: OrganizationId
    name: TranslatableText
    description: TranslatableText = field(default_factory=TranslatableText)
    mission: TranslatableText = field(default_factory=TranslatableText)
    registration_number: Optional[str] = None
    tax_id: Optional[str] = None
    category: Optional[str] = None
    website: Optional[str] = None
    email: Optional[Email] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    subdomain: Optional[Subdomain] = None
    logo_url: Optional[str] = None
    is_active: bool = True
    is_verified: bool = False
    verification_date: Optional[datetime] = None

    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
    deleted_at: Optional[datetime] = None

    # Domain events
    _events: List = field(default_factory=list, init=False)

    @classmethod
    def create(cls, name: TranslatableText, **details) -> "Organization":
        if name.is_blank():
            raise ValueError("Organization name cannot be empty")
        organization = cls(id=OrganizationId.generate(), name=name, **details)
        organization._events.append(OrganizationCreated(organization_id=organization.id))
        return organization

    @property
    def display_name(self) -> str:
        return self.name.get() or UNNAMED_ORGANIZATION

    @property
    def status(self) -> OrganizationStatus:
        if not self.is_active:
            return OrganizationStatus.INACTIVE
        if not self.is_verified:
            return OrganizationStatus.UNVERIFIED
        return OrganizationStatus.ACTIVE

    def can_create_campaigns(self) -> bool:
        return self.is_active and self.is_verified and self.deleted_at is None

    def activate(self) -> None:
        if self.is_active:
            raise OrganizationException.already_active(self.id.value)
        self.is_active = True
        self.updated_at = datetime.utcnow()

    def deactivate(self) -> None:
        if not self.is_active:
            raise OrganizationException.already_inactive(self.id.value)
        self.is_active = False
        self.updated_at = datetime.utcnow()
        self._events.append(OrganizationDeactivated(organization_id=self.id))

    def is_eligible_for_verification(self) -> bool:
        name = self.name.get().strip()
        return all([
            self.is_active,
            bool(name) and name != UNNAMED_ORGANIZATION,
            bool(self.registration_number),
            bool(self.tax_id),
            self.email is not None,
            bool(self.category),
        ])

    def verify(self) -> None:
        if self.is_verified:
            raise OrganizationException.already_verified(self.id.value)
        if not self.is_eligible_for_verification():
            raise OrganizationException.not_eligible_for_verification(self.id.value)
        self.is_verified = True
        self.verification_date = datetime.utcnow()
        self.updated_at = datetime.utcnow()
        self._events.append(OrganizationVerified(organization_id=self.id))

    def unverify(self) -> None:
        if not self.is_verified:
            raise OrganizationException.not_verified(self.id.value)
        self.is_verified = False
        self.verification_date = None
        self.updated_at = datetime.utcnow()

    def update_details(self, **changes) -> None:
        for attribute in ("name", "description", "mission"):
            value = changes.pop(attribute, None)
            if value is not None:
                setattr(self, attribute, getattr(self, attribute).merge(value))
        if self.name.is_blank():
            raise ValueError("Organization name cannot be empty")
        for attribute, value in changes.items():
            if not hasattr(self, attribute) or attribute.startswith("_") or attribute == "id":
                raise ValueError(f"Unknown organization field: {attribute}")
            if value is not None:
                setattr(self, attribute, value)
        self.updated_at = datetime.utcnow()
        self._events.append(OrganizationUpdated(organization_id=self.id))

    def get_events(self) -> List:
        """Get and clear domain events"""
        events = self._events.copy()
        self._events.clear()
        return events

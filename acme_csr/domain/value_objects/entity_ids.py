"""Entity ID value objects"""

from dataclasses import dataclass
from uuid import UUID, uuid4
from typing import Type, TypeVar, Union

T = TypeVar("T", bound="EntityId")


@dataclass(frozen=True)
class EntityId:
    value: UUID

    entity_name = "Entity"

    def __post_init__(self):
        if not isinstance(self.value, UUID):
            raise ValueError(f"{self.entity_name} ID must be a valid UUID")

    @classmethod
    def generate(cls: Type[T]) -> T:
        """Generate a new random UUID"""
        return cls(uuid4())

    @classmethod
    def from_str(cls: Type[T], uuid_str: str) -> T:
        """Create ID from string representation"""
        try:
            return cls(UUID(str(uuid_str)))
        except (TypeError, AttributeError):
            raise ValueError(f"{cls.entity_name} ID must be a valid UUID")

    @classmethod
    def coerce(cls: Type[T], value: Union[T, UUID, str]) -> T:
        if isinstance(value, cls):
            return value
        if isinstance(value, UUID):
            return cls(value)
        return cls.from_str(value)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class UserId(EntityId):
    entity_name = "User"


@dataclass(frozen=True)
class OrganizationId(EntityId):
    entity_name = "Organization"


@dataclass(frozen=True)
class CampaignId(EntityId):
    entity_name = "Campaign"


@dataclass(frozen=True)
class DonationId(EntityId):
    entity_name = "Donation"


@dataclass(frozen=True)
class CategoryId(EntityId):
    entity_name = "Category"


@dataclass(frozen=True)
class TeamId(EntityId):
    entity_name = "Team"


@dataclass(frozen=True)
class TenantId(EntityId):
    entity_name = "Tenant"


@dataclass(frozen=True)
class NotificationId(EntityId):
    entity_name = "Notification"


@dataclass(frozen=True)
class ExportId(EntityId):
    entity_name = "Export"


@dataclass(frozen=True)
class ImportId(EntityId):
    entity_name = "Import"


@dataclass(frozen=True)
class AuditLogId(EntityId):
    entity_name = "Audit log"

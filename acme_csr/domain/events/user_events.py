"""User domain events"""

from dataclasses import dataclass

from ..enums import UserRole
from ..value_objects.email import Email
from ..value_objects.entity_ids import UserId


@dataclass(frozen=True)
class UserRegistered:
    user_id: UserId
    email: Email


@dataclass(frozen=True)
class UserRoleChanged:
    user_id: UserId
    previous_role: UserRole
    new_role: UserRole


@dataclass(frozen=True)
class UserSuspended:
    user_id: UserId
    reason: str

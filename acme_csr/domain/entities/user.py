"""User entity with business logic"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List

from ..value_objects.email import Email
from ..value_objects.entity_ids import OrganizationId, UserId
from ..enums import UserStatus, UserRole
from ..exceptions import UserException
from ..events.user_events import UserRegistered, UserRoleChanged, UserSuspended


@dataclass
class User:
    id: UserId
    email: Email
    name: str
    hashed_password: str
    role: UserRole = UserRole.EMPLOYEE
    status: UserStatus = UserStatus.ACTIVE
    organization_id: Optional[OrganizationId] = None
    department: Optional[str] = None
    job_title: Optional[str] = None
    locale: str = "en"
    email_verified_at: Optional[datetime] = None
    suspension_reason: Optional[str] = None

    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
    last_login: Optional[datetime] = None

    # Domain events
    _events: List = field(default_factory=list, init=False)

    @classmethod
    def create(
        cls,
        email: Email,
        name: str,
        hashed_password: str,
        role: UserRole = UserRole.EMPLOYEE,
        organization_id: Optional[OrganizationId] = None,
        department: Optional[str] = None,
        job_title: Optional[str] = None,
        locale: str = "en",
    ) -> "User":
        """Factory method to create a new user with proper defaults"""
        if not name or not name.strip():
            raise ValueError("Name cannot be empty")
        user = cls(
            id=UserId.generate(),
            email=email,
            name=name.strip(),
            hashed_password=hashed_password,
            role=role,
            status=UserStatus.ACTIVE,
            organization_id=organization_id,
            department=department,
            job_title=job_title,
            locale=locale,
        )
        user._events.append(UserRegistered(user_id=user.id, email=email))
        return user

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    def has_permission(self, permission) -> bool:
        return self.is_active and self.role.has_permission(permission)

    def is_admin(self) -> bool:
        return self.role.is_admin()

    def record_login(self) -> None:
        self.last_login = datetime.utcnow()
        self.updated_at = datetime.utcnow()

    def verify_email(self) -> None:
        if self.email_verified_at is not None:
            raise ValueError("Email already verified")
        self.email_verified_at = datetime.utcnow()
        if self.status == UserStatus.PENDING_VERIFICATION:
            self.status = UserStatus.ACTIVE
        self.updated_at = datetime.utcnow()

    def change_role(self, new_role: UserRole, changed_by: "User") -> None:
        """Business logic: nobody grants a role above their own"""
        if not changed_by.role.can_manage_users():
            raise UserException.cannot_assign_role(new_role)
        if new_role.is_higher_than(changed_by.role):
            raise UserException.cannot_assign_role(new_role)
        if self.role.is_higher_than(changed_by.role):
            raise UserException.cannot_assign_role(new_role)
        if new_role == self.role:
            return
        previous = self.role
        self.role = new_role
        self.updated_at = datetime.utcnow()
        self._events.append(UserRoleChanged(user_id=self.id, previous_role=previous, new_role=new_role))

    def activate(self) -> None:
        if self.status == UserStatus.ACTIVE:
            raise UserException.already_in_status(UserStatus.ACTIVE)
        self.status = UserStatus.ACTIVE
        self.suspension_reason = None
        self.updated_at = datetime.utcnow()

    def suspend(self, reason: str) -> None:
        if self.status == UserStatus.SUSPENDED:
            raise UserException.already_in_status(UserStatus.SUSPENDED)
        self.status = UserStatus.SUSPENDED
        self.suspension_reason = reason
        self.updated_at = datetime.utcnow()
        self._events.append(UserSuspended(user_id=self.id, reason=reason))

    def update_profile(self, **changes) -> None:
        allowed = {"name", "department", "job_title", "locale"}
        for attribute, value in changes.items():
            if attribute not in allowed:
                raise ValueError(f"Field {attribute} cannot be updated")
            if value is None:
                continue
            if attribute == "name" and not value.strip():
                raise ValueError("Name cannot be empty")
            setattr(self, attribute, value.strip() if isinstance(value, str) else value)
        self.updated_at = datetime.utcnow()

    def get_events(self) -> List:
        """Get and clear domain events"""
        events = self._events.copy()
        self._events.clear()
        return events

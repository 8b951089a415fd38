"""User and authentication DTOs"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from ...domain.enums import UserRole


class RegisterUserDTO(BaseModel):
    """DTO for user registration"""
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    name: str = Field(..., min_length=1, max_length=255)
    organization_id: Optional[UUID] = None
    department: Optional[str] = Field(None, max_length=100)
    job_title: Optional[str] = Field(None, max_length=100)
    locale: Optional[str] = None


class LoginUserDTO(BaseModel):
    """DTO for user login"""
    email: EmailStr
    password: str


class RefreshTokenDTO(BaseModel):
    refresh_token: str


class UpdateProfileDTO(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    department: Optional[str] = Field(None, max_length=100)
    job_title: Optional[str] = Field(None, max_length=100)
    locale: Optional[str] = None


class ChangeRoleDTO(BaseModel):
    role: UserRole


class SuspendUserDTO(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500)


class UserDTO(BaseModel):
    """DTO for user response"""
    id: UUID
    email: str
    name: str
    role: str
    role_label: str
    status: str
    organization_id: Optional[UUID] = None
    department: Optional[str] = None
    job_title: Optional[str] = None
    locale: str
    email_verified: bool
    created_at: datetime
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_entity(cls, user):
        return cls(
            id=user.id.value,
            email=str(user.email),
            name=user.name,
            role=user.role.value,
            role_label=user.role.label,
            status=user.status.value,
            organization_id=user.organization_id.value if user.organization_id else None,
            department=user.department,
            job_title=user.job_title,
            locale=user.locale,
            email_verified=user.email_verified_at is not None,
            created_at=user.created_at,
            last_login=user.last_login,
        )


class TokenDTO(BaseModel):
    """DTO for authentication tokens"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class AuthResponseDTO(BaseModel):
    """User response with tokens"""
    user: UserDTO
    tokens: TokenDTO


class EmployeeStatsDTO(BaseModel):
    user_id: UUID
    total_donated: Decimal
    currency: str
    donations_count: int
    campaigns_supported: int

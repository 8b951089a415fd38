"""Validation schemas for imported rows"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional, Tuple, Type

from pydantic import BaseModel, EmailStr, ValidationError, field_validator, model_validator

from ...domain.enums import ImportType, UserRole
from ...domain.exceptions import ImportException


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class UserImportRow(BaseModel):
    email: EmailStr
    name: str
    role: UserRole = UserRole.EMPLOYEE
    department: Optional[str] = None
    job_title: Optional[str] = None

    @field_validator("department", "job_title", mode="before")
    @classmethod
    def empty_as_none(cls, value):
        return _blank_to_none(value)

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value):
        if _blank_to_none(value) is None:
            return UserRole.EMPLOYEE
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("role")
    @classmethod
    def not_privileged(cls, value: UserRole):
        if value.is_admin():
            raise ValueError("Administrators cannot be imported")
        return value

    @field_validator("name")
    @classmethod
    def name_required(cls, value: str):
        if not value.strip():
            raise ValueError("Name is required")
        return value.strip()


class CampaignImportRow(BaseModel):
    title: str
    description: str = ""
    goal_amount: Decimal
    currency: str = "EUR"
    start_date: datetime
    end_date: datetime
    category: Optional[str] = None

    @field_validator("category", mode="before")
    @classmethod
    def empty_as_none(cls, value):
        return _blank_to_none(value)

    @field_validator("description", mode="before")
    @classmethod
    def description_default(cls, value):
        return _blank_to_none(value) or ""

    @field_validator("currency", mode="before")
    @classmethod
    def currency_default(cls, value):
        return (_blank_to_none(value) or "EUR").strip().upper()

    @field_validator("title")
    @classmethod
    def title_required(cls, value: str):
        if not value.strip():
            raise ValueError("Title is required")
        return value.strip()

    @field_validator("goal_amount")
    @classmethod
    def positive_goal(cls, value: Decimal):
        if value <= 0:
            raise ValueError("Goal amount must be greater than zero")
        return value

    @model_validator(mode="after")
    def dates_in_order(self):
        if self.start_date > self.end_date:
            raise ValueError("Start date must be before end date")
        return self


ROW_SCHEMAS: Dict[ImportType, Tuple[Type[BaseModel], Tuple[str, ...]]] = {
    ImportType.USERS: (UserImportRow, ("email", "name")),
    ImportType.EMPLOYEES: (UserImportRow, ("email", "name")),
    ImportType.CAMPAIGNS: (CampaignImportRow, ("title", "goal_amount", "start_date", "end_date")),
}


def schema_for(import_type: ImportType) -> Tuple[Type[BaseModel], Tuple[str, ...]]:
    if import_type not in ROW_SCHEMAS:
        raise ImportException.unsupported_type(import_type)
    return ROW_SCHEMAS[import_type]


def describe_errors(error: ValidationError) -> str:
    parts = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail.get("loc", ()) if part != "__root__")
        message = detail.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)

"""Category DTOs"""

from datetime import datetime
from typing import Dict, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from .common import TranslatableInput


class CategoryCreateDTO(BaseModel):
    name: TranslatableInput
    description: Optional[TranslatableInput] = None
    slug: Optional[str] = Field(None, max_length=120)
    sort_order: int = 0
    color: Optional[str] = Field(None, max_length=32)
    icon: Optional[str] = Field(None, max_length=64)


class CategoryUpdateDTO(BaseModel):
    name: Optional[TranslatableInput] = None
    description: Optional[TranslatableInput] = None
    sort_order: Optional[int] = None
    color: Optional[str] = Field(None, max_length=32)
    icon: Optional[str] = Field(None, max_length=64)


class CategoryDTO(BaseModel):
    id: UUID
    name: str
    description: str
    translations: Dict[str, Dict[str, str]]
    slug: str
    status: str
    status_label: str
    status_color: str
    sort_order: int
    color: Optional[str] = None
    icon: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, category, locale: str = "en"):
        return cls(
            id=category.id.value,
            name=category.name.get(locale),
            description=category.description.get(locale),
            translations={"name": category.name.to_dict(), "description": category.description.to_dict()},
            slug=str(category.slug),
            status=category.status.value,
            status_label=category.status.label,
            status_color=category.status.color,
            sort_order=category.sort_order,
            color=category.color,
            icon=category.icon,
            created_at=category.created_at,
        )

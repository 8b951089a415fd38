"""Category entity"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..enums import CategoryStatus
from ..exceptions import CategoryException
from ..value_objects.entity_ids import CategoryId
from ..value_objects.slug import Slug
from ..value_objects.translatable import TranslatableText


@dataclass
class Category:
    id: CategoryId
    name: TranslatableText
    slug: Slug
    description: TranslatableText = field(default_factory=TranslatableText)
    status: CategoryStatus = CategoryStatus.ACTIVE
    sort_order: int = 0
    color: Optional[str] = None
    icon: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def create(
        cls,
        name: TranslatableText,
        slug: Optional[str] = None,
        description: Optional[TranslatableText] = None,
        sort_order: int = 0,
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> "Category":
        if name.is_blank():
            raise CategoryException.invalid_name()
        return cls(
            id=CategoryId.generate(),
            name=name,
            slug=Slug(slug) if slug else Slug.from_text(name.get("en")),
            description=description or TranslatableText(),
            sort_order=sort_order,
            color=color,
            icon=icon,
        )

    def is_active(self) -> bool:
        return self.status == CategoryStatus.ACTIVE

    def activate(self) -> None:
        self.status = CategoryStatus.ACTIVE
        self.updated_at = datetime.utcnow()

    def deactivate(self) -> None:
        self.status = CategoryStatus.INACTIVE
        self.updated_at = datetime.utcnow()

    def rename(self, name: TranslatableText) -> None:
        merged = self.name.merge(name)
        if merged.is_blank():
            raise CategoryException.invalid_name()
        self.name = merged
        self.updated_at = datetime.utcnow()

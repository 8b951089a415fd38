"""Category repository implementation"""

from typing import Optional, List
from sqlalchemy.orm import Session

from ...domain.entities.category import Category
from ...domain.enums import CategoryStatus
from ...domain.repositories.category_repository import ICategoryRepository
from ...domain.value_objects.entity_ids import CategoryId
from ...domain.value_objects.slug import Slug
from ...domain.value_objects.translatable import TranslatableText
from ..orm.category_model import CategoryModel


class CategoryRepositoryImpl(ICategoryRepository):

    def __init__(self, session: Session):
        self.session = session

    async def get_by_id(self, category_id: CategoryId) -> Optional[Category]:
        model = self.session.query(CategoryModel).filter(CategoryModel.id == category_id.value).first()
        return self._map_to_entity(model) if model else None

    async def get_by_slug(self, slug: str) -> Optional[Category]:
        model = self.session.query(CategoryModel).filter(CategoryModel.slug == slug).first()
        return self._map_to_entity(model) if model else None

    async def add(self, category: Category) -> Category:
        model = CategoryModel(id=category.id.value, created_at=category.created_at)
        self._update_model_from_entity(model, category)
        self.session.add(model)
        self.session.flush()
        return category

    async def update(self, category: Category) -> Category:
        model = self.session.query(CategoryModel).filter(CategoryModel.id == category.id.value).first()
        if model:
            self._update_model_from_entity(model, category)
            self.session.flush()
        return category

    async def delete(self, category_id: CategoryId) -> bool:
        model = self.session.query(CategoryModel).filter(CategoryModel.id == category_id.value).first()
        if not model:
            return False
        self.session.delete(model)
        self.session.flush()
        return True

    async def list(self, active_only: bool = True) -> List[Category]:
        query = self.session.query(CategoryModel)
        if active_only:
            query = query.filter(CategoryModel.status == CategoryStatus.ACTIVE.value)
        models = query.order_by(CategoryModel.sort_order.asc(), CategoryModel.slug.asc()).all()
        return [self._map_to_entity(model) for model in models]

    def _update_model_from_entity(self, model: CategoryModel, category: Category) -> None:
        model.name = category.name.to_dict()
        model.description = category.description.to_dict()
        model.slug = str(category.slug)
        model.status = category.status.value
        model.sort_order = category.sort_order
        model.color = category.color
        model.icon = category.icon
        model.updated_at = category.updated_at

    def _map_to_entity(self, model: CategoryModel) -> Category:
        return Category(
            id=CategoryId(model.id),
            name=TranslatableText(model.name or {}),
            slug=Slug(model.slug),
            description=TranslatableText(model.description or {}),
            status=CategoryStatus(model.status),
            sort_order=model.sort_order or 0,
            color=model.color,
            icon=model.icon,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

"""Category use cases"""

from typing import List
from uuid import UUID

from ...domain.entities.category import Category
from ...domain.exceptions import CategoryException
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import CategoryId
from ...domain.value_objects.slug import Slug
from ..dtos.category_dtos import CategoryCreateDTO, CategoryDTO, CategoryUpdateDTO
from ..dtos.common import to_translatable
from ..services.audit_service import AuditService


async def _get_category(unit_of_work: IUnitOfWork, category_id) -> Category:
    category = await unit_of_work.categories.get_by_id(CategoryId.coerce(category_id))
    if not category:
        raise CategoryException.not_found(category_id)
    return category


class CreateCategoryUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, request: CategoryCreateDTO, locale: str) -> CategoryDTO:
        async with self.unit_of_work:
            name = to_translatable(request.name, locale)
            if name is None or name.is_blank():
                raise CategoryException.invalid_name()
            try:
                slug = Slug(request.slug) if request.slug else Slug.from_text(name.get("en"))
            except ValueError:
                raise CategoryException.invalid_name()
            if await self.unit_of_work.categories.get_by_slug(slug.value):
                raise CategoryException.duplicate_slug(slug.value)

            category = Category.create(
                name=name,
                slug=slug.value,
                description=to_translatable(request.description, locale),
                sort_order=request.sort_order,
                color=request.color,
                icon=request.icon,
            )
            await self.unit_of_work.categories.add(category)
            await AuditService(self.unit_of_work).log("category.created", "category", str(category.id), new_values={"slug": slug.value})
            await self.unit_of_work.commit()
            return CategoryDTO.from_entity(category, locale)


class UpdateCategoryUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, category_id: UUID, request: CategoryUpdateDTO, locale: str) -> CategoryDTO:
        async with self.unit_of_work:
            category = await _get_category(self.unit_of_work, category_id)
            if request.name is not None:
                category.rename(to_translatable(request.name, locale))
            if request.description is not None:
                category.description = category.description.merge(to_translatable(request.description, locale))
            for attribute in ("sort_order", "color", "icon"):
                value = getattr(request, attribute)
                if value is not None:
                    setattr(category, attribute, value)
            await self.unit_of_work.categories.update(category)
            await AuditService(self.unit_of_work).log("category.updated", "category", str(category.id), new_values=request.model_dump(exclude_none=True))
            await self.unit_of_work.commit()
            return CategoryDTO.from_entity(category, locale)


class SetCategoryStatusUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, category_id: UUID, active: bool, locale: str) -> CategoryDTO:
        async with self.unit_of_work:
            category = await _get_category(self.unit_of_work, category_id)
            previous = category.status
            if active:
                category.activate()
            else:
                category.deactivate()
            await self.unit_of_work.categories.update(category)
            await AuditService(self.unit_of_work).log(
                "category.activated" if active else "category.deactivated", "category", str(category.id),
                {"status": previous.value}, {"status": category.status.value},
            )
            await self.unit_of_work.commit()
            return CategoryDTO.from_entity(category, locale)


class DeleteCategoryUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, category_id: UUID) -> bool:
        async with self.unit_of_work:
            category = await _get_category(self.unit_of_work, category_id)
            campaigns = await self.unit_of_work.campaigns.count_by_category(category.id)
            if campaigns:
                raise CategoryException.has_campaigns(category.id.value, campaigns)
            deleted = await self.unit_of_work.categories.delete(category.id)
            await AuditService(self.unit_of_work).log("category.deleted", "category", str(category.id), {"slug": str(category.slug)})
            await self.unit_of_work.commit()
            return deleted


class GetCategoryUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, category_id: UUID, locale: str) -> CategoryDTO:
        async with self.unit_of_work:
            return CategoryDTO.from_entity(await _get_category(self.unit_of_work, category_id), locale)


class ListCategoriesUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, locale: str, active_only: bool = True) -> List[CategoryDTO]:
        async with self.unit_of_work:
            categories = await self.unit_of_work.categories.list(active_only=active_only)
            return [CategoryDTO.from_entity(category, locale) for category in categories]

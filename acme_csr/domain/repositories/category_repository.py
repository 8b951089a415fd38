"""Category repository interface"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..entities.category import Category
from ..value_objects.entity_ids import CategoryId


class ICategoryRepository(ABC):

    @abstractmethod
    async def get_by_id(self, category_id: CategoryId) -> Optional[Category]:
        pass

    @abstractmethod
    async def get_by_slug(self, slug: str) -> Optional[Category]:
        pass

    @abstractmethod
    async def add(self, category: Category) -> Category:
        pass

    @abstractmethod
    async def update(self, category: Category) -> Category:
        pass

    @abstractmethod
    async def delete(self, category_id: CategoryId) -> bool:
        pass

    @abstractmethod
    async def list(self, active_only: bool = True) -> List[Category]:
        pass

"""Currency repository interface"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..entities.currency import Currency


class ICurrencyRepository(ABC):

    @abstractmethod
    async def get_by_code(self, code: str) -> Optional[Currency]:
        pass

    @abstractmethod
    async def get_default(self) -> Optional[Currency]:
        pass

    @abstractmethod
    async def add(self, currency: Currency) -> Currency:
        pass

    @abstractmethod
    async def update(self, currency: Currency) -> Currency:
        pass

    @abstractmethod
    async def list(self, active_only: bool = True) -> List[Currency]:
        pass

"""Cache repository interface"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from ..value_objects.cache import CacheKey


class ICacheRepository(ABC):

    @abstractmethod
    async def exists(self, key: CacheKey) -> bool:
        pass

    @abstractmethod
    async def get(self, key: CacheKey) -> Optional[Any]:
        pass

    @abstractmethod
    async def set(self, key: CacheKey, data: Any, ttl: Optional[int] = None) -> None:
        pass

    @abstractmethod
    async def forget(self, key: CacheKey) -> bool:
        pass

    @abstractmethod
    async def flush(self) -> int:
        pass

    @abstractmethod
    async def get_ttl(self, key: CacheKey) -> Optional[int]:
        pass

    @abstractmethod
    async def is_healthy(self) -> bool:
        pass

    @abstractmethod
    async def get_stats(self) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def warm_cache(self, key: CacheKey) -> None:
        pass

    @abstractmethod
    async def warm_batch(self, keys: List[CacheKey]) -> Dict[str, bool]:
        pass

    @abstractmethod
    async def get_key_info(self, key: CacheKey) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def invalidate_patterns(self, patterns: Iterable[str]) -> int:
        pass

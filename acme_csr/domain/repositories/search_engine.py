"""Search engine port"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..value_objects.search import SearchQuery, SearchResult


class ISearchEngine(ABC):

    @abstractmethod
    async def search(self, query: SearchQuery) -> SearchResult:
        pass

    @abstractmethod
    async def index(self, index_name: str, documents: List[Dict[str, Any]]) -> bool:
        pass

    @abstractmethod
    async def bulk_index(self, index_name: str, documents: List[Dict[str, Any]], batch_size: int = 1000) -> bool:
        pass

    @abstractmethod
    async def delete(self, index_name: str, document_id: str) -> bool:
        pass

    @abstractmethod
    async def delete_index(self, index_name: str) -> bool:
        pass

    @abstractmethod
    async def create_index(self, index_name: str, settings: Dict[str, Any], primary_key: str = "id") -> bool:
        pass

    @abstractmethod
    async def update_index_settings(self, index_name: str, settings: Dict[str, Any]) -> bool:
        pass

    @abstractmethod
    async def index_exists(self, index_name: str) -> bool:
        pass

    @abstractmethod
    async def suggest(self, index_name: str, query: str, limit: int = 10, filter_expression: Optional[str] = None) -> List[str]:
        pass

    @abstractmethod
    async def health(self) -> Dict[str, Any]:
        pass

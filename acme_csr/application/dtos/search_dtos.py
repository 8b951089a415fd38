"""Search DTOs"""

from typing import Any, Dict, List

from pydantic import BaseModel


class SearchResultDTO(BaseModel):
    hits: List[Dict[str, Any]]
    total_hits: int
    processing_time_ms: float
    query: str
    limit: int
    offset: int
    page: int
    total_pages: int
    has_more: bool
    facets: Dict[str, Any] = {}

    @classmethod
    def from_result(cls, result):
        return cls(
            hits=result.hits,
            total_hits=result.total_hits,
            processing_time_ms=result.processing_time_ms,
            query=result.query,
            limit=result.limit,
            offset=result.offset,
            page=result.page,
            total_pages=result.total_pages,
            has_more=result.has_more,
            facets=result.facets,
        )


class SuggestionsDTO(BaseModel):
    query: str
    suggestions: List[str]


class ReindexResultDTO(BaseModel):
    entity: str
    index: str
    documents: int

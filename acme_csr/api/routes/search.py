"""Search routes"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ...api.dependencies import get_current_user, get_search_engine
from ...application.dtos.search_dtos import SearchResultDTO, SuggestionsDTO
from ...application.use_cases.search_use_cases import SearchUseCase, SuggestUseCase
from ...domain.entities.user import User
from ...domain.enums import SearchableEntity
from ...domain.value_objects.search import MAX_SEARCH_LIMIT, SearchQuery, SearchSort
from ...infrastructure.search.meilisearch_engine import MeilisearchSearchEngine

router = APIRouter()


@router.get("", response_model=SearchResultDTO)
async def search(
    q: str = Query("", max_length=255),
    index: List[SearchableEntity] = Query([SearchableEntity.CAMPAIGNS]),
    status: Optional[List[str]] = Query(None),
    organization_id: Optional[str] = None,
    category_id: Optional[str] = None,
    sort: Optional[List[str]] = Query(None),
    limit: int = Query(20, ge=1, le=MAX_SEARCH_LIMIT),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    engine: MeilisearchSearchEngine = Depends(get_search_engine)
):
    """Full-text search across one or more indexes; `sort` takes `field:asc|desc`"""
    query = SearchQuery(
        query=q,
        indexes=tuple(index),
        filters={"status": status, "organization_id": organization_id, "category_id": category_id},
        sort=tuple(SearchSort.parse(raw) for raw in sort or ()),
        limit=limit,
        offset=offset,
    )
    return await SearchUseCase(engine).execute(query, current_user)


@router.get("/suggest", response_model=SuggestionsDTO)
async def suggest(
    q: str = Query(..., max_length=255),
    index: SearchableEntity = SearchableEntity.CAMPAIGNS,
    limit: int = Query(10, ge=1, le=50),
    current_user: User = Depends(get_current_user),
    engine: MeilisearchSearchEngine = Depends(get_search_engine)
):
    return await SuggestUseCase(engine).execute(q, index, current_user, limit)

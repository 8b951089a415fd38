"""Search query and result value objects"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from ..enums import SearchableEntity

MAX_SEARCH_LIMIT = 100


@dataclass(frozen=True)
class SearchSort:
    attribute: str
    direction: str = "asc"

    def __post_init__(self):
        if not self.attribute:
            raise ValueError("Sort field cannot be empty")
        if self.direction not in ("asc", "desc"):
            raise ValueError("Sort direction must be 'asc' or 'desc'")

    @classmethod
    def parse(cls, raw: str) -> "SearchSort":
        field_name, _, direction = raw.partition(":")
        return cls(field_name.strip(), (direction or "asc").strip().lower())

    def __str__(self) -> str:
        return f"{self.attribute}:{self.direction}"


@dataclass(frozen=True)
class SearchQuery:
    query: str
    indexes: Tuple[SearchableEntity, ...]
    filters: Dict[str, Any] = field(default_factory=dict)
    sort: Tuple[SearchSort, ...] = ()
    limit: int = 20
    offset: int = 0
    facets: Tuple[str, ...] = ()
    highlight: bool = True
    # Extra filters that apply to one index only, ANDed with `filters`
    index_filters: Dict[SearchableEntity, Dict[str, Any]] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "query", (self.query or "").strip())
        if not self.indexes:
            raise ValueError("At least one index is required")
        object.__setattr__(self, "indexes", tuple(SearchableEntity(index) for index in self.indexes))
        if self.limit < 1 or self.limit > MAX_SEARCH_LIMIT:
            raise ValueError(f"Limit must be between 1 and {MAX_SEARCH_LIMIT}")
        if self.offset < 0:
            raise ValueError("Offset cannot be negative")

    @property
    def page(self) -> int:
        return self.offset // self.limit + 1

    def is_multi_index(self) -> bool:
        return len(self.indexes) > 1

    def restricted(self, entity: SearchableEntity, **filters: Any) -> "SearchQuery":
        scoped = {**self.index_filters.get(entity, {}), **filters}
        return replace(self, index_filters={**self.index_filters, entity: scoped})

    def filter_expression(self, entity: Optional[SearchableEntity] = None) -> Optional[str]:
        scoped = self.index_filters.get(entity, {}) if entity is not None else {}
        return build_filter_expression(list(self.filters.items()) + list(scoped.items()))


def build_filter_expression(filters) -> Optional[str]:
    """Meilisearch filter syntax: scalars use =, lists use IN, dicts carry min/max"""
    if isinstance(filters, dict):
        filters = filters.items()
    clauses: List[str] = []
    for key, value in filters:
        if value is None:
            continue
        if isinstance(value, (list, tuple, set)):
            joined = ", ".join(_quote(item) for item in value)
            clauses.append(f"{key} IN [{joined}]")
        elif isinstance(value, dict):
            if value.get("min") is not None:
                clauses.append(f"{key} >= {value['min']}")
            if value.get("max") is not None:
                clauses.append(f"{key} <= {value['max']}")
        else:
            clauses.append(f"{key} = {_quote(value)}")
    return " AND ".join(clauses) if clauses else None


def _quote(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    escaped = str(value).replace('"', '\\"')
    return f'"{escaped}"'


@dataclass(frozen=True)
class SearchResult:
    hits: List[Dict[str, Any]]
    total_hits: int
    processing_time_ms: float
    query: str
    limit: int
    offset: int
    facets: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def empty(cls, query: str, limit: int = 20, offset: int = 0) -> "SearchResult":
        return cls(hits=[], total_hits=0, processing_time_ms=0.0, query=query, limit=limit, offset=offset)

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.hits) < self.total_hits

    @property
    def page(self) -> int:
        return self.offset // self.limit + 1 if self.limit else 1

    @property
    def total_pages(self) -> int:
        if not self.limit:
            return 0
        return (self.total_hits + self.limit - 1) // self.limit

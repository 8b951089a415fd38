"""Query helpers shared by the repository implementations"""

from typing import Callable, List, TypeVar

from sqlalchemy.orm import Query

from ...domain.value_objects.pagination import Page, PageRequest

T = TypeVar("T")


def paginate(query: Query, page: PageRequest, mapper: Callable[..., T]) -> Page[T]:
    """Count then slice a query into a Page of mapped entities"""
    total = query.order_by(None).count()
    models = query.offset(page.offset).limit(page.per_page).all()
    return Page(
        items=[mapper(model) for model in models],
        total=total,
        page=page.page,
        per_page=page.per_page,
    )


def like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def ids(values) -> List:
    return [value.value for value in values]

from dataclasses import dataclass, field
from typing import Generic, List, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    per_page: int = 30

    def __post_init__(self):
        if self.page < 1:
            raise ValueError("Page must be at least 1")
        if self.per_page < 1:
            raise ValueError("Items per page must be at least 1")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    per_page: int = 30

    @property
    def total_pages(self) -> int:
        if self.per_page <= 0:
            return 0
        return (self.total + self.per_page - 1) // self.per_page

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

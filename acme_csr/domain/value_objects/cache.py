"""Cache warming value objects"""

import re
from dataclasses import dataclass, replace
from typing import List, Tuple

from ..enums import CacheWarmingStatus
from ..exceptions import CacheWarmingException

WIDGET_KEYS = (
    "average_donation",
    "campaign_categories",
    "campaign_performance",
    "comparative_metrics",
    "donation_methods",
    "donation_trends",
    "employee_participation",
    "goal_completion",
    "organization_stats",
    "revenue_summary",
    "success_rate",
    "total_donations",
)

SYSTEM_KEYS = (
    "page:home",
    "system:active_currencies",
    "system:campaigns_list",
)

# Payloads that render translatable fields; cached once per locale
LOCALIZED_KEYS = (
    "campaign_categories",
    "campaign_performance",
    "page:home",
    "system:campaigns_list",
)

CAMPAIGN_PAGE_PATTERN = re.compile(r"^campaigns:page:([1-9][0-9]*)$")


@dataclass(frozen=True)
class CacheKey:
    value: str

    def __post_init__(self):
        if not self.value:
            raise ValueError("Cache key cannot be empty")
        if not (self.value in WIDGET_KEYS or self.value in SYSTEM_KEYS or CAMPAIGN_PAGE_PATTERN.match(self.value)):
            raise ValueError(f"Unknown cache key: {self.value}")

    @classmethod
    def widget_keys(cls) -> List["CacheKey"]:
        return [cls(key) for key in WIDGET_KEYS]

    @classmethod
    def system_keys(cls) -> List["CacheKey"]:
        return [cls(key) for key in SYSTEM_KEYS]

    @classmethod
    def campaign_page(cls, page: int) -> "CacheKey":
        return cls(f"campaigns:page:{page}")

    def is_widget(self) -> bool:
        return self.value in WIDGET_KEYS

    def is_system(self) -> bool:
        return self.value in SYSTEM_KEYS

    def is_localized(self) -> bool:
        return self.value in LOCALIZED_KEYS or bool(CAMPAIGN_PAGE_PATTERN.match(self.value))

    def is_page(self) -> bool:
        return self.value.startswith("page:") or bool(CAMPAIGN_PAGE_PATTERN.match(self.value))

    @property
    def page_number(self) -> int:
        match = CAMPAIGN_PAGE_PATTERN.match(self.value)
        return int(match.group(1)) if match else 0

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class CacheWarmingProgress:
    total_items: int
    current_item: int = 0
    status: CacheWarmingStatus = CacheWarmingStatus.PENDING
    failed_keys: Tuple[str, ...] = ()

    def __post_init__(self):
        if self.total_items <= 0:
            raise ValueError("Total items must be greater than zero")
        if self.current_item < 0 or self.current_item > self.total_items:
            raise ValueError("Current item must be between 0 and total items")

    @classmethod
    def create(cls, total_items: int) -> "CacheWarmingProgress":
        return cls(total_items=total_items)

    def _transition(self, status: CacheWarmingStatus, current_item: int = None) -> "CacheWarmingProgress":
        if status != self.status and not self.status.can_transition_to(status):
            raise CacheWarmingException.invalid_transition(self.status, status)
        return replace(
            self,
            current_item=self.current_item if current_item is None else current_item,
            status=status,
        )

    def start(self) -> "CacheWarmingProgress":
        if self.status != CacheWarmingStatus.PENDING:
            raise CacheWarmingException.invalid_transition(self.status, CacheWarmingStatus.IN_PROGRESS)
        return self._transition(CacheWarmingStatus.IN_PROGRESS, 0)

    def with_progress(self, current_item: int) -> "CacheWarmingProgress":
        if self.status != CacheWarmingStatus.IN_PROGRESS:
            raise CacheWarmingException.invalid_transition(self.status, CacheWarmingStatus.IN_PROGRESS)
        clamped = max(0, min(current_item, self.total_items))
        return self._transition(CacheWarmingStatus.IN_PROGRESS, clamped)

    def complete(self) -> "CacheWarmingProgress":
        if self.current_item != self.total_items:
            raise ValueError("Cannot complete before all items are processed")
        return self._transition(CacheWarmingStatus.COMPLETED)

    def with_failure(self) -> "CacheWarmingProgress":
        return self._transition(CacheWarmingStatus.FAILED)

    def with_failed_key(self, key) -> "CacheWarmingProgress":
        return replace(self, failed_keys=self.failed_keys + (str(key),))

    @property
    def percentage(self) -> float:
        return round(self.current_item / self.total_items * 100, 2)

    @property
    def remaining_items(self) -> int:
        return self.total_items - self.current_item

    def is_complete(self) -> bool:
        return self.status == CacheWarmingStatus.COMPLETED

    def is_failed(self) -> bool:
        return self.status == CacheWarmingStatus.FAILED

    def is_in_progress(self) -> bool:
        return self.status == CacheWarmingStatus.IN_PROGRESS

    def to_dict(self) -> dict:
        return {
            "total_items": self.total_items,
            "current_item": self.current_item,
            "status": self.status.value,
            "percentage": self.percentage,
            "failed_keys": list(self.failed_keys),
        }

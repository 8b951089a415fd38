"""SQLAlchemy event listeners keeping denormalized counters and caches fresh"""

import logging
from typing import Callable, Dict, Iterable, Optional, Set, Tuple

from sqlalchemy import event, func, inspect, select, update
from sqlalchemy.orm import Session

from ..domain.enums import DonationStatus
from ..domain.value_objects.cache import WIDGET_KEYS
from .orm import CampaignModel, CategoryModel, CurrencyModel, DonationModel, OrganizationModel

logger = logging.getLogger(__name__)

_DIRTY_PATTERNS_KEY = "acme_cache_dirty_patterns"

CAMPAIGN_PAGE_PATTERNS: Tuple[str, ...] = ("campaigns:page:*", "system:campaigns_list", "page:home")

# Cache key patterns invalidated when rows of a model change
INVALIDATION_PATTERNS: Dict[type, Tuple[str, ...]] = {
    DonationModel: tuple(WIDGET_KEYS) + CAMPAIGN_PAGE_PATTERNS,
    CampaignModel: (
        "campaign_performance", "campaign_categories", "goal_completion",
        "success_rate", "organization_stats",
    ) + CAMPAIGN_PAGE_PATTERNS,
    CategoryModel: ("campaign_categories",) + CAMPAIGN_PAGE_PATTERNS,
    CurrencyModel: ("system:active_currencies", "page:home"),
    OrganizationModel: ("organization_stats", "page:home"),
}

_cache_invalidator: Optional[Callable[[Iterable[str]], int]] = None


def set_cache_invalidator(invalidator: Optional[Callable[[Iterable[str]], int]]) -> None:
    """Install the callable that deletes cache keys matching patterns"""
    global _cache_invalidator
    _cache_invalidator = invalidator


def _recount_donations(connection, campaign_id) -> None:
    completed = select(func.count(DonationModel.id)).where(
        DonationModel.campaign_id == campaign_id,
        DonationModel.status == DonationStatus.COMPLETED.value,
    ).scalar_subquery()
    connection.execute(
        update(CampaignModel.__table__)
        .where(CampaignModel.__table__.c.id == campaign_id)
        .values(donations_count=completed)
    )


@event.listens_for(DonationModel, "after_insert")
@event.listens_for(DonationModel, "after_update")
@event.listens_for(DonationModel, "after_delete")
def recount_campaign_donations(mapper, connection, target) -> None:
    campaign_ids = {target.campaign_id}
    # Previous campaign of a donation moved elsewhere
    campaign_ids.update(inspect(target).attrs.campaign_id.history.deleted)
    for campaign_id in campaign_ids:
        if campaign_id is not None:
            _recount_donations(connection, campaign_id)


@event.listens_for(Session, "after_flush")
def collect_dirty_cache_patterns(session, flush_context) -> None:
    patterns: Set[str] = session.info.setdefault(_DIRTY_PATTERNS_KEY, set())
    for instance in list(session.new) + list(session.dirty) + list(session.deleted):
        patterns.update(INVALIDATION_PATTERNS.get(type(instance), ()))


@event.listens_for(Session, "after_commit")
def invalidate_dirty_caches(session) -> None:
    patterns = session.info.pop(_DIRTY_PATTERNS_KEY, None)
    if not patterns or _cache_invalidator is None:
        return
    try:
        deleted = _cache_invalidator(sorted(patterns))
        logger.debug("Invalidated %s cache keys", deleted, extra={"patterns": sorted(patterns)})
    except Exception as e:
        logger.warning(f"Cache invalidation failed: {e}")


@event.listens_for(Session, "after_rollback")
def discard_dirty_cache_patterns(session) -> None:
    session.info.pop(_DIRTY_PATTERNS_KEY, None)

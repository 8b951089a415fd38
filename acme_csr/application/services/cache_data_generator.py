"""Builds the payloads stored under the warmable cache keys"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Callable, Dict, List

from ...core.config import settings
from ...domain.enums import CampaignStatus, DonationStatus
from ...domain.repositories.campaign_repository import CampaignFilters
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.cache import CacheKey
from ...domain.value_objects.money import Money
from ...domain.value_objects.pagination import PageRequest
from ...domain.value_objects.translatable import TranslatableText
from ..dtos.campaign_dtos import CampaignDTO

logger = logging.getLogger(__name__)

CACHE_VERSION = "1.0"


def _format(amount) -> str:
    return Money(Decimal(str(amount)), settings.BASE_CURRENCY).format()


def _growth(current: float, previous: float) -> float:
    if previous <= 0:
        return 100.0 if current > 0 else 0.0
    return round((current - previous) / previous * 100, 2)


def _trend(growth: float) -> str:
    if growth > 0:
        return "up"
    if growth < 0:
        return "down"
    return "neutral"


def _month_start(moment: datetime) -> datetime:
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


class CacheDataGenerator:
    """Each call opens its own unit of work in the current tenant scope"""

    def __init__(self, unit_of_work_factory: Callable[[], IUnitOfWork], locale: str = None):
        self.unit_of_work_factory = unit_of_work_factory
        self.locale = locale or settings.FALLBACK_LOCALE
        self._widgets = {
            "average_donation": self._average_donation,
            "campaign_categories": self._campaign_categories,
            "campaign_performance": self._campaign_performance,
            "comparative_metrics": self._comparative_metrics,
            "donation_methods": self._donation_methods,
            "donation_trends": self._donation_trends,
            "employee_participation": self._employee_participation,
            "goal_completion": self._goal_completion,
            "organization_stats": self._organization_stats,
            "revenue_summary": self._revenue_summary,
            "success_rate": self._success_rate,
            "total_donations": self._total_donations,
        }
        self._pages = {
            "page:home": self._homepage,
            "system:active_currencies": self._active_currencies,
            "system:campaigns_list": self._campaigns_list,
        }

    async def generate(self, key: CacheKey) -> Dict[str, Any]:
        async with self.unit_of_work_factory() as uow:
            if key.is_widget():
                return await self._widgets[key.value](uow)
            if key.value in self._pages:
                return await self._pages[key.value](uow)
            return await self._campaign_page(uow, key.page_number)

    def _meta(self, key: str, hours: int = 1) -> Dict[str, Any]:
        now = datetime.utcnow()
        return {
            "generated_at": now.isoformat(),
            "expires_at": (now + timedelta(hours=hours)).isoformat(),
            "cache_key": key,
            "version": CACHE_VERSION,
        }

    # Widgets

    async def _average_donation(self, uow: IUnitOfWork) -> Dict[str, Any]:
        totals = await uow.stats.donation_totals()
        return {
            "average_donation": totals["average_amount"],
            "total_amount": totals["total_amount"],
            "total_donors": totals["unique_donors"],
            "formatted_average": _format(totals["average_amount"]),
        }

    async def _campaign_categories(self, uow: IUnitOfWork) -> Dict[str, Any]:
        rows = await uow.stats.campaigns_by_category()
        categories = [
            {**row, "name": TranslatableText.of(row["name"]).get(self.locale)}
            for row in rows
        ]
        return {
            "categories": categories,
            "total_categories": len(categories),
            "most_popular_category": categories[0]["name"] if categories else None,
        }

    async def _campaign_performance(self, uow: IUnitOfWork) -> Dict[str, Any]:
        by_status = await uow.stats.campaigns_by_status()
        totals = await uow.stats.donation_totals()
        total_campaigns = sum(by_status.values())
        active = by_status.get(CampaignStatus.ACTIVE.value, 0)
        completed = by_status.get(CampaignStatus.COMPLETED.value, 0)
        raised = await uow.stats.raised_by_campaign_status()
        top = await uow.stats.top_campaigns(limit=5)
        return {
            "active_campaigns": active,
            "total_campaigns": total_campaigns,
            "active_raised": round(raised[CampaignStatus.ACTIVE.value], 2),
            "total_raised": totals["total_amount"],
            "average_per_campaign": round(totals["total_amount"] / total_campaigns, 2) if total_campaigns else 0.0,
            "completion_rate": round(completed / total_campaigns * 100, 2) if total_campaigns else 0.0,
            "top_campaigns": [self._localized_campaign(row) for row in top],
        }

    async def _comparative_metrics(self, uow: IUnitOfWork) -> Dict[str, Any]:
        this_month = _month_start(datetime.utcnow())
        last_month = _month_start(this_month - timedelta(days=1))
        current = await uow.stats.donation_totals(since=this_month)
        previous = await uow.stats.donation_totals(since=last_month, until=this_month)
        growth = _growth(current["total_amount"], previous["total_amount"])
        return {
            "current_month": current["total_amount"],
            "previous_month": previous["total_amount"],
            "current_month_donations": current["donation_count"],
            "previous_month_donations": previous["donation_count"],
            "growth_rate": growth,
            "trend": _trend(growth),
        }

    async def _donation_methods(self, uow: IUnitOfWork) -> Dict[str, Any]:
        methods = await uow.stats.donations_by_payment_method()
        return {
            "methods": methods,
            "most_popular": methods[0]["method"] if methods else None,
        }

    async def _donation_trends(self, uow: IUnitOfWork) -> Dict[str, Any]:
        months = await uow.stats.monthly_donation_totals(12)
        peak = max(months, key=lambda month: month["total_amount"]) if months else None
        direction = "neutral"
        if len(months) >= 2:
            direction = _trend(months[-1]["total_amount"] - months[-2]["total_amount"])
        return {
            "monthly_trends": months,
            "trend_direction": direction,
            "peak_month": peak["month"] if peak and peak["total_amount"] > 0 else None,
            "total_growth": _growth(months[-1]["total_amount"], months[0]["total_amount"]) if months else 0.0,
        }

    async def _employee_participation(self, uow: IUnitOfWork) -> Dict[str, Any]:
        participation = await uow.stats.employee_participation()
        return {
            **participation,
            "non_participating": max(0, participation["total_employees"] - participation["participating_employees"]),
        }

    async def _goal_completion(self, uow: IUnitOfWork) -> Dict[str, Any]:
        return await uow.stats.goal_completion()

    async def _organization_stats(self, uow: IUnitOfWork) -> Dict[str, Any]:
        organizations = await uow.stats.organization_counts()
        by_status = await uow.stats.campaigns_by_status()
        totals = await uow.stats.donation_totals()
        return {
            "total_organizations": organizations["total"],
            "active_organizations": organizations["active"],
            "verified_organizations": organizations["verified"],
            "total_campaigns": sum(by_status.values()),
            "total_raised": totals["total_amount"],
        }

    async def _revenue_summary(self, uow: IUnitOfWork) -> Dict[str, Any]:
        now = datetime.utcnow()
        all_time = await uow.stats.donation_totals()
        this_month = await uow.stats.donation_totals(since=_month_start(now))
        this_year = await uow.stats.donation_totals(since=now.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0))
        return {
            "total_revenue": all_time["total_amount"],
            "formatted_total": _format(all_time["total_amount"]),
            "this_month": this_month["total_amount"],
            "this_year": this_year["total_amount"],
            "donation_count": all_time["donation_count"],
            "currency": settings.BASE_CURRENCY,
        }

    async def _success_rate(self, uow: IUnitOfWork) -> Dict[str, Any]:
        counts = await uow.stats.donations_by_status()
        successful = counts.get(DonationStatus.COMPLETED.value, 0)
        failed = sum(counts.get(status.value, 0) for status in DonationStatus.failed_statuses())
        settled = successful + failed + counts.get(DonationStatus.REFUNDED.value, 0)
        return {
            "successful": successful,
            "failed": failed,
            "total_settled": settled,
            "success_rate": round(successful / settled * 100, 2) if settled else 0.0,
        }

    async def _total_donations(self, uow: IUnitOfWork) -> Dict[str, Any]:
        totals = await uow.stats.donation_totals()
        return {
            **totals,
            "formatted_total": _format(totals["total_amount"]),
            "by_status": await uow.stats.donations_by_status(),
        }

    # Pages

    def _localized_campaign(self, row: Dict[str, Any]) -> Dict[str, Any]:
        return {**row, "title": TranslatableText.of(row["title"]).get(self.locale)}

    async def _homepage(self, uow: IUnitOfWork) -> Dict[str, Any]:
        totals = await uow.stats.donation_totals()
        by_status = await uow.stats.campaigns_by_status()
        participation = await uow.stats.employee_participation()
        featured = await uow.stats.top_campaigns(limit=6)
        return {
            "impact": {
                "total_raised": _format(totals["total_amount"]),
                "total_raised_raw": totals["total_amount"],
                "active_campaigns": by_status.get(CampaignStatus.ACTIVE.value, 0),
                "participating_employees": f"{participation['participating_employees']:,}",
                "participating_employees_raw": participation["participating_employees"],
            },
            "featured_campaigns": [self._localized_campaign(row) for row in featured],
            "employee_stats": {
                "total_employees": f"{participation['total_employees']:,}+",
                "total_employees_raw": participation["total_employees"],
                "total_raised_all_time": _format(totals["total_amount"]),
                "total_raised_all_time_raw": totals["total_amount"],
                "total_campaigns": f"{sum(by_status.values()):,}",
                "total_campaigns_raw": sum(by_status.values()),
            },
            "cache_meta": self._meta("page:home"),
        }

    async def _active_currencies(self, uow: IUnitOfWork) -> Dict[str, Any]:
        currencies = await uow.currencies.list(active_only=True)
        rows = [
            {
                "code": currency.code,
                "symbol": currency.symbol,
                "name": currency.name,
                "rate": float(currency.exchange_rate),
                "is_default": currency.is_default,
            }
            for currency in currencies
        ]
        default = next((row for row in rows if row["is_default"]), None)
        return {
            "currencies": rows,
            "total_currencies": len(rows),
            "default_currency": (
                {key: default[key] for key in ("code", "symbol", "name")} if default else None
            ),
            "cache_meta": self._meta("system:active_currencies", hours=6),
        }

    async def _active_campaigns(self, uow: IUnitOfWork, page: int, per_page: int) -> Dict[str, Any]:
        result = await uow.campaigns.list(
            CampaignFilters(statuses=(CampaignStatus.ACTIVE,), sort="-created_at"),
            PageRequest(page=page, per_page=per_page),
        )
        return {
            "data": [CampaignDTO.from_entity(campaign, self.locale).model_dump(mode="json") for campaign in result.items],
            "meta": {
                "page": result.page,
                "itemsPerPage": result.per_page,
                "totalItems": result.total,
                "totalPages": result.total_pages,
            },
        }

    async def _campaigns_list(self, uow: IUnitOfWork) -> Dict[str, Any]:
        listing = await self._active_campaigns(uow, 1, settings.MAX_ITEMS_PER_PAGE)
        return {**listing, "cache_meta": self._meta("system:campaigns_list")}

    async def _campaign_page(self, uow: IUnitOfWork, page: int) -> Dict[str, Any]:
        listing = await self._active_campaigns(uow, page, settings.DEFAULT_ITEMS_PER_PAGE)
        return {**listing, "cache_meta": self._meta(f"campaigns:page:{page}")}

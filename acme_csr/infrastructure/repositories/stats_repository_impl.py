"""Aggregate queries backing dashboard widgets and cached pages"""

from collections import OrderedDict
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import func, distinct
from sqlalchemy.orm import Session

from ...domain.enums import CampaignStatus, DonationStatus, UserRole
from ...domain.repositories.stats_repository import IStatsRepository
from ...domain.value_objects.entity_ids import OrganizationId
from ..orm import CampaignModel, CategoryModel, DonationModel, OrganizationModel, UserModel


def _money(value) -> float:
    return float(Decimal(str(value or 0)).quantize(Decimal("0.01")))


class StatsRepositoryImpl(IStatsRepository):

    def __init__(self, session: Session):
        self.session = session

    def _completed(self):
        return self.session.query(DonationModel).filter(DonationModel.status == DonationStatus.COMPLETED.value)

    def _campaigns(self):
        return self.session.query(CampaignModel).filter(CampaignModel.deleted_at.is_(None))

    async def donation_totals(self, since: Optional[datetime] = None, until: Optional[datetime] = None) -> Dict[str, Any]:
        query = self.session.query(
            func.coalesce(func.sum(DonationModel.amount), 0),
            func.count(DonationModel.id),
            func.count(distinct(DonationModel.user_id)),
        ).filter(DonationModel.status == DonationStatus.COMPLETED.value)
        if since is not None:
            query = query.filter(DonationModel.donated_at >= since)
        if until is not None:
            query = query.filter(DonationModel.donated_at < until)
        total, count, donors = query.one()
        return {
            "total_amount": _money(total),
            "donation_count": count,
            "unique_donors": donors,
            "average_amount": _money(Decimal(str(total)) / count) if count else 0.0,
        }

    async def donations_by_status(self) -> Dict[str, int]:
        rows = self.session.query(DonationModel.status, func.count(DonationModel.id)).group_by(DonationModel.status).all()
        counts = {status.value: 0 for status in DonationStatus}
        counts.update({status: count for status, count in rows})
        return counts

    async def raised_by_campaign_status(self) -> Dict[str, float]:
        rows = self._campaigns().with_entities(
            CampaignModel.status, func.coalesce(func.sum(CampaignModel.current_amount), 0)
        ).group_by(CampaignModel.status).all()
        raised = {status.value: 0.0 for status in CampaignStatus}
        raised.update({status: _money(amount) for status, amount in rows})
        return raised

    async def donations_by_payment_method(self) -> List[Dict[str, Any]]:
        rows = self.session.query(
            DonationModel.payment_method,
            func.count(DonationModel.id),
            func.coalesce(func.sum(DonationModel.amount), 0),
        ).filter(
            DonationModel.status == DonationStatus.COMPLETED.value
        ).group_by(DonationModel.payment_method).order_by(func.count(DonationModel.id).desc()).all()
        return [{"method": method, "count": count, "total_amount": _money(total)} for method, count, total in rows]

    async def monthly_donation_totals(self, months: int = 12) -> List[Dict[str, Any]]:
        now = datetime.utcnow()
        buckets: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
        for offset in range(months - 1, -1, -1):
            year, month = divmod(now.year * 12 + now.month - 1 - offset, 12)
            label = f"{year:04d}-{month + 1:02d}"
            buckets[label] = {"month": label, "total_amount": 0.0, "count": 0}
        start = datetime.strptime(next(iter(buckets)), "%Y-%m")

        # Bucketed in Python to stay portable across SQLite and PostgreSQL
        rows = self.session.query(DonationModel.donated_at, DonationModel.amount).filter(
            DonationModel.status == DonationStatus.COMPLETED.value,
            DonationModel.donated_at >= start,
        ).all()
        for donated_at, amount in rows:
            bucket = buckets.get(donated_at.strftime("%Y-%m"))
            if bucket is not None:
                bucket["total_amount"] = _money(Decimal(str(bucket["total_amount"])) + Decimal(str(amount)))
                bucket["count"] += 1
        return list(buckets.values())

    async def campaigns_by_status(self) -> Dict[str, int]:
        rows = self._campaigns().with_entities(CampaignModel.status, func.count(CampaignModel.id)).group_by(CampaignModel.status).all()
        counts = {status.value: 0 for status in CampaignStatus}
        counts.update({status: count for status, count in rows})
        return counts

    async def campaigns_by_category(self) -> List[Dict[str, Any]]:
        rows = self.session.query(
            CategoryModel.slug,
            CategoryModel.name,
            func.count(CampaignModel.id),
            func.coalesce(func.sum(CampaignModel.current_amount), 0),
        ).join(
            CampaignModel, CampaignModel.category_id == CategoryModel.id
        ).filter(
            CampaignModel.deleted_at.is_(None)
        ).group_by(CategoryModel.id, CategoryModel.slug, CategoryModel.name).all()
        return sorted(
            [
                {"slug": slug, "name": name, "campaigns": count, "total_raised": _money(raised)}
                for slug, name, count, raised in rows
            ],
            key=lambda row: row["campaigns"],
            reverse=True,
        )

    async def top_campaigns(self, limit: int = 10) -> List[Dict[str, Any]]:
        models = self._campaigns().filter(
            CampaignModel.status == CampaignStatus.ACTIVE.value
        ).order_by(CampaignModel.current_amount.desc()).limit(limit).all()
        return [
            {
                "id": str(model.id),
                "title": model.title,
                "goal_amount": _money(model.goal_amount),
                "current_amount": _money(model.current_amount),
                "currency": model.currency,
                "goal_percentage": float(model.goal_percentage or 0),
                "donations_count": model.donations_count,
                "end_date": model.end_date.isoformat(),
            }
            for model in models
        ]

    async def goal_completion(self) -> Dict[str, Any]:
        total = self._campaigns().count()
        reached = self._campaigns().filter(CampaignModel.current_amount >= CampaignModel.goal_amount).count()
        average = self._campaigns().with_entities(func.avg(CampaignModel.goal_percentage)).scalar()
        return {
            "total_campaigns": total,
            "goals_reached": reached,
            "completion_rate": round(reached / total * 100, 2) if total else 0.0,
            "average_progress": round(float(average or 0), 2),
        }

    async def employee_participation(self) -> Dict[str, Any]:
        employees = self.session.query(UserModel).filter(UserModel.role == UserRole.EMPLOYEE.value).count()
        participating = self._completed().with_entities(func.count(distinct(DonationModel.user_id))).scalar() or 0
        return {
            "total_employees": employees,
            "participating_employees": participating,
            "participation_rate": round(min(100.0, participating / employees * 100), 2) if employees else 0.0,
        }

    async def organization_counts(self) -> Dict[str, int]:
        query = self.session.query(OrganizationModel).filter(OrganizationModel.deleted_at.is_(None))
        return {
            "total": query.count(),
            "active": query.filter(OrganizationModel.is_active.is_(True)).count(),
            "verified": query.filter(OrganizationModel.is_verified.is_(True)).count(),
        }

    async def organization_summary(self, organization_id: OrganizationId) -> Dict[str, Any]:
        campaigns = self._campaigns().filter(CampaignModel.organization_id == organization_id.value)
        raised = campaigns.with_entities(func.coalesce(func.sum(CampaignModel.current_amount), 0)).scalar()
        return {
            "campaigns": campaigns.count(),
            "active_campaigns": campaigns.filter(CampaignModel.status == CampaignStatus.ACTIVE.value).count(),
            "total_raised": _money(raised),
            "employees": self.session.query(UserModel).filter(UserModel.organization_id == organization_id.value).count(),
        }

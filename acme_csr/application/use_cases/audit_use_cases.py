"""Audit log queries for administrators"""

from datetime import datetime, timedelta
from typing import List

from ...domain.repositories.audit_repository import AuditFilters
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import UserId
from ...domain.value_objects.pagination import Page, PageRequest
from ..dtos.audit_dtos import AuditLogDTO, AuditStatsDTO

STATS_WINDOW_DAYS = 30


class ListAuditLogsUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, filters: AuditFilters, page: PageRequest) -> Page[AuditLogDTO]:
        async with self.unit_of_work:
            result = await self.unit_of_work.audit_logs.list(filters, page)
            return Page(
                items=[AuditLogDTO.from_entity(entry) for entry in result.items],
                total=result.total,
                page=result.page,
                per_page=result.per_page,
            )


class GetEntityHistoryUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, entity_type: str, entity_id: str) -> List[AuditLogDTO]:
        async with self.unit_of_work:
            entries = await self.unit_of_work.audit_logs.entity_history(entity_type, str(entity_id))
            return [AuditLogDTO.from_entity(entry) for entry in entries]


class GetUserAuditTrailUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, user_id, page: PageRequest) -> Page[AuditLogDTO]:
        filters = AuditFilters(user_id=UserId.coerce(user_id))
        return await ListAuditLogsUseCase(self.unit_of_work).execute(filters, page)


class GetAuditStatsUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, days: int = STATS_WINDOW_DAYS) -> AuditStatsDTO:
        since = datetime.utcnow() - timedelta(days=days)
        async with self.unit_of_work:
            by_action = await self.unit_of_work.audit_logs.count_by_action(since)
        return AuditStatsDTO(since=since, total=sum(by_action.values()), by_action=by_action)

"""Audit log repository implementation"""

from datetime import datetime
from typing import Dict, List
from sqlalchemy import func
from sqlalchemy.orm import Session

from ...domain.entities.audit_log import AuditLog
from ...domain.repositories.audit_repository import IAuditLogRepository, AuditFilters
from ...domain.value_objects.entity_ids import AuditLogId, UserId
from ...domain.value_objects.pagination import Page, PageRequest
from ..orm.audit_log_model import AuditLogModel
from ._paging import paginate


class AuditLogRepositoryImpl(IAuditLogRepository):
    """Append-only: entries are never updated once written"""

    def __init__(self, session: Session):
        self.session = session

    async def add(self, entry: AuditLog) -> AuditLog:
        self.session.add(AuditLogModel(
            id=entry.id.value,
            user_id=entry.user_id.value if entry.user_id else None,
            user_name=entry.user_name,
            user_email=entry.user_email,
            user_role=entry.user_role,
            action=entry.action,
            entity_type=entry.entity_type,
            entity_id=entry.entity_id,
            old_values=entry.old_values,
            new_values=entry.new_values,
            meta=entry.metadata,
            performed_at=entry.performed_at,
        ))
        self.session.flush()
        return entry

    async def list(self, filters: AuditFilters, page: PageRequest) -> Page[AuditLog]:
        query = self.session.query(AuditLogModel)
        if filters.entity_type:
            query = query.filter(AuditLogModel.entity_type == filters.entity_type)
        if filters.entity_id:
            query = query.filter(AuditLogModel.entity_id == filters.entity_id)
        if filters.action:
            query = query.filter(AuditLogModel.action == filters.action)
        if filters.user_id is not None:
            query = query.filter(AuditLogModel.user_id == filters.user_id.value)
        if filters.date_from:
            query = query.filter(AuditLogModel.performed_at >= filters.date_from)
        if filters.date_to:
            query = query.filter(AuditLogModel.performed_at <= filters.date_to)
        query = query.order_by(AuditLogModel.performed_at.desc())
        return paginate(query, page, self._map_to_entity)

    async def entity_history(self, entity_type: str, entity_id: str) -> List[AuditLog]:
        models = self.session.query(AuditLogModel).filter(
            AuditLogModel.entity_type == entity_type,
            AuditLogModel.entity_id == entity_id,
        ).order_by(AuditLogModel.performed_at.asc()).all()
        return [self._map_to_entity(model) for model in models]

    async def count_by_action(self, since: datetime) -> Dict[str, int]:
        rows = self.session.query(AuditLogModel.action, func.count(AuditLogModel.id)).filter(
            AuditLogModel.performed_at >= since
        ).group_by(AuditLogModel.action).all()
        return {action: count for action, count in rows}

    def _map_to_entity(self, model: AuditLogModel) -> AuditLog:
        return AuditLog(
            id=AuditLogId(model.id),
            action=model.action,
            entity_type=model.entity_type,
            entity_id=model.entity_id,
            user_id=UserId(model.user_id) if model.user_id else None,
            user_name=model.user_name,
            user_email=model.user_email,
            user_role=model.user_role,
            old_values=dict(model.old_values or {}),
            new_values=dict(model.new_values or {}),
            metadata=dict(model.meta or {}),
            performed_at=model.performed_at,
        )

"""Audit log DTOs"""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel


class AuditLogDTO(BaseModel):
    id: UUID
    action: str
    entity_type: str
    entity_id: Optional[str] = None
    user_id: Optional[UUID] = None
    user_name: str
    user_email: str
    user_role: str
    old_values: Dict[str, Any]
    new_values: Dict[str, Any]
    changes: Dict[str, Dict[str, Any]]
    metadata: Dict[str, Any]
    performed_at: datetime

    @classmethod
    def from_entity(cls, entry):
        return cls(
            id=entry.id.value,
            action=entry.action,
            entity_type=entry.entity_type,
            entity_id=entry.entity_id,
            user_id=entry.user_id.value if entry.user_id else None,
            user_name=entry.user_name,
            user_email=entry.user_email,
            user_role=entry.user_role,
            old_values=entry.old_values,
            new_values=entry.new_values,
            changes=entry.changed_fields(),
            metadata=entry.metadata,
            performed_at=entry.performed_at,
        )


class AuditStatsDTO(BaseModel):
    since: datetime
    total: int
    by_action: Dict[str, int]

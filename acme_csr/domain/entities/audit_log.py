"""Audit log entry"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ..value_objects.entity_ids import AuditLogId, UserId


@dataclass
class AuditLog:
    id: AuditLogId
    action: str
    entity_type: str
    entity_id: Optional[str] = None
    user_id: Optional[UserId] = None
    user_name: str = "System"
    user_email: str = "system@acme-corp.com"
    user_role: str = "system"
    old_values: Dict[str, Any] = field(default_factory=dict)
    new_values: Dict[str, Any] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)
    performed_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self):
        if not self.action or "." not in self.action:
            raise ValueError("Audit action must look like '<entity>.<verb>'")

    @property
    def verb(self) -> str:
        return self.action.split(".", 1)[1]

    def changed_fields(self) -> Dict[str, Dict[str, Any]]:
        keys = set(self.old_values) | set(self.new_values)
        return {
            key: {"old": self.old_values.get(key), "new": self.new_values.get(key)}
            for key in sorted(keys)
            if self.old_values.get(key) != self.new_values.get(key)
        }

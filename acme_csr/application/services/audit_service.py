"""Records audit log entries for state changes"""

import logging
from typing import Any, Dict, Optional

from ...core.context import ActorContext, SYSTEM_ACTOR, current_actor
from ...domain.entities.audit_log import AuditLog
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import AuditLogId, UserId

logger = logging.getLogger(__name__)


def _json_safe(values: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    safe = {}
    for key, value in (values or {}).items():
        if hasattr(value, "value") and not isinstance(value, (str, int, float, bool)):
            value = value.value
        if hasattr(value, "isoformat"):
            value = value.isoformat()
        elif value is not None and not isinstance(value, (str, int, float, bool, list, dict)):
            value = str(value)
        safe[key] = value
    return safe


class AuditService:
    """Writes entries inside the caller's unit of work so they commit with the change"""

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def log(
        self,
        action: str,
        entity_type: str,
        entity_id: Optional[str] = None,
        old_values: Optional[Dict[str, Any]] = None,
        new_values: Optional[Dict[str, Any]] = None,
        metadata: Optional[Dict[str, Any]] = None,
        actor: Optional[ActorContext] = None,
    ) -> AuditLog:
        actor = actor or current_actor()
        entry = AuditLog(
            id=AuditLogId.generate(),
            action=action,
            entity_type=entity_type,
            entity_id=str(entity_id) if entity_id is not None else None,
            user_id=UserId.from_str(actor.user_id) if actor.user_id else None,
            user_name=actor.name,
            user_email=actor.email,
            user_role=actor.role,
            old_values=_json_safe(old_values),
            new_values=_json_safe(new_values),
            metadata={
                "ip_address": actor.ip_address,
                "user_agent": actor.user_agent,
                "url": actor.url,
                "method": actor.method,
                **_json_safe(metadata),
            },
        )
        await self.unit_of_work.audit_logs.add(entry)
        logger.debug(f"Audit {action} on {entity_type} {entity_id}")
        return entry

    async def log_campaign_action(self, action: str, campaign_id, old_values=None, new_values=None) -> AuditLog:
        return await self.log(f"campaign.{action}", "campaign", str(campaign_id), old_values, new_values)

    async def log_donation_action(self, action: str, donation_id, old_values=None, new_values=None) -> AuditLog:
        return await self.log(f"donation.{action}", "donation", str(donation_id), old_values, new_values)

    async def log_organization_action(self, action: str, organization_id, old_values=None, new_values=None) -> AuditLog:
        return await self.log(f"organization.{action}", "organization", str(organization_id), old_values, new_values)

    async def log_user_action(self, action: str, user_id, old_values=None, new_values=None) -> AuditLog:
        return await self.log(f"user.{action}", "user", str(user_id), old_values, new_values)

    async def log_system_action(self, action: str, entity_type: str = "system", entity_id=None, data=None) -> AuditLog:
        return await self.log(
            f"system.{action}",
            entity_type,
            str(entity_id) if entity_id is not None else None,
            new_values=data,
            actor=SYSTEM_ACTOR,
        )

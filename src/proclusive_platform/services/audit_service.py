"""Audit logging for admin actions. Call on every admin state change."""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from proclusive_platform.domain.enums import AuditEntityType
from proclusive_platform.domain.models import AdminAuditLog


def log_admin_action(
    db: AsyncSession,
    admin_id: str,
    action: str,
    entity_type: AuditEntityType,
    entity_id: str,
    details: Optional[dict] = None,
) -> AdminAuditLog:
    """Append one audit log entry. Caller must commit."""
    entry = AdminAuditLog(
        admin_id=admin_id,
        action=action,
        entity_type=entity_type.value,
        entity_id=entity_id,
        details=details,
    )
    db.add(entry)
    return entry

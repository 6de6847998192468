"""Audit trail helper"""

from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from hostmate.models.audit import AuditLog


def record_action(
    db: AsyncSession,
    action: str,
    actor_id: Optional[UUID] = None,
    resource_type: Optional[str] = None,
    resource_id: Optional[UUID] = None,
    data: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """Add an audit entry to the session; the caller commits"""
    entry = AuditLog(
        actor_id=actor_id,
        actor_type="user" if actor_id else "system",
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        data_json=data or {},
    )
    db.add(entry)
    return entry

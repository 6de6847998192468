"""Audit log model"""

import uuid
from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.dialects.postgresql import UUID

from hostmate.database import Base, utc_now


class AuditLog(Base):
    """Audit trail for linking and retention actions"""
    __tablename__ = "audit_logs"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Actor information
    actor_id = Column(UUID(as_uuid=True))  # User ID or null for system
    actor_type = Column(String(50))  # user, system

    # Action details
    action = Column(String(100), nullable=False)  # link_guest_reservations, cleanup_past_reservations
    resource_type = Column(String(50))
    resource_id = Column(UUID(as_uuid=True))

    data_json = Column(JSON)

    created_at = Column(DateTime, default=utc_now)

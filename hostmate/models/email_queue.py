"""Outgoing email queue model"""

import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Text
from sqlalchemy.dialects.postgresql import UUID

from hostmate.database import Base, utc_now


class EmailQueueEntry(Base):
    """Email waiting to be delivered by the queue processor"""
    __tablename__ = "email_queue"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    to_email = Column(String(255), nullable=False)
    subject = Column(String(255), nullable=False)
    body = Column(Text, nullable=False)
    email_type = Column(String(50), nullable=False)  # confirmation, cancellation, verification

    # No ON DELETE CASCADE: rows must be removed before their reservation
    reservation_id = Column(UUID(as_uuid=True), ForeignKey("reservations.id"), index=True)

    status = Column(String(20), default="pending", nullable=False)  # pending, sent, failed
    error_message = Column(Text)

    created_at = Column(DateTime, default=utc_now)
    sent_at = Column(DateTime)

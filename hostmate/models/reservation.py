"""Reservation model"""

import uuid
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, CheckConstraint, Index, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from hostmate.database import Base, utc_now


ACTIVE_STATUSES = ("pending", "confirmed")


def new_reservation_token() -> str:
    return uuid.uuid4().hex


class Reservation(Base):
    """Table reservations, owned either by a user account or by a guest"""
    __tablename__ = "reservations"
    __table_args__ = (
        # Exactly one owner: an account or a guest contact trio
        CheckConstraint(
            "(user_id IS NULL AND guest_email IS NOT NULL) "
            "OR (user_id IS NOT NULL AND guest_email IS NULL)",
            name="ck_reservations_single_owner",
        ),
        # One active booking per table and start time
        Index(
            "uq_reservations_active_table_slot",
            "table_id",
            "datetime",
            unique=True,
            postgresql_where=text("status IN ('pending', 'confirmed')"),
            sqlite_where=text("status IN ('pending', 'confirmed')"),
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    table_id = Column(UUID(as_uuid=True), ForeignKey("tables.id"), nullable=False)

    # Scheduled instant, naive UTC
    datetime = Column(DateTime, nullable=False, index=True)
    party_size = Column(Integer, nullable=False)

    # Status
    status = Column(String(20), default="pending", nullable=False)  # pending, confirmed, cancelled

    # Account-owned reservation
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), index=True)
    contact_name = Column(String(255))
    contact_email = Column(String(255))
    contact_phone = Column(String(30))

    # Guest reservation
    guest_name = Column(String(255))
    guest_email = Column(String(255), index=True)
    guest_phone = Column(String(30))

    reservation_token = Column(String(64), unique=True, nullable=False, default=new_reservation_token)

    # Metadata
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    # Relationships
    table = relationship("DiningTable", back_populates="reservations")
    user = relationship("User", back_populates="reservations")

    @property
    def is_guest(self) -> bool:
        return self.user_id is None

    @property
    def display_name(self):
        return self.guest_name if self.is_guest else self.contact_name

    @property
    def display_email(self):
        return self.guest_email if self.is_guest else self.contact_email

    @property
    def display_phone(self):
        return self.guest_phone if self.is_guest else self.contact_phone

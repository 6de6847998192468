"""User model for authentication"""

import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Enum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import enum

from hostmate.database import Base, utc_now


class UserRole(str, enum.Enum):
    """User roles"""
    ADMIN = "admin"
    CUSTOMER = "customer"


class User(Base):
    """Guests with an account and restaurant staff"""
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Authentication
    email = Column(String(255), unique=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)

    # Profile
    full_name = Column(String(255))
    phone = Column(String(30))

    # Role
    role = Column(Enum(UserRole), default=UserRole.CUSTOMER)

    # Status
    is_active = Column(Boolean, default=True)
    # Set only by the email verification step
    email_verified = Column(Boolean, default=False, nullable=False)

    # Timestamps
    last_login = Column(DateTime)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    # Relationships
    reservations = relationship("Reservation", back_populates="user")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

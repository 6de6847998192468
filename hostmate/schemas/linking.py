"""Guest reservation linking schemas"""

import enum
from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel


class LinkableReservation(BaseModel):
    """Guest reservation whose email matches the signed-in account"""
    id: UUID
    table_id: UUID
    datetime: datetime
    party_size: int
    guest_name: Optional[str]

    class Config:
        from_attributes = True


class LinkCheckStatus(str, enum.Enum):
    FOUND = "found"
    NONE = "none"
    FAILED = "failed"


class LinkCheckResult(BaseModel):
    status: LinkCheckStatus
    reservations: List[LinkableReservation] = []
    error: Optional[str] = None


class LinkResult(BaseModel):
    success: bool
    linked_count: int = 0
    error: Optional[str] = None

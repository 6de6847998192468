"""Retention sweep schemas"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, Field


class ReservationSummary(BaseModel):
    """Reservation removed (or eligible for removal) by the sweep"""
    id: UUID
    datetime: datetime
    name: Optional[str] = None
    status: str
    party_size: int


class CleanupResult(BaseModel):
    success: bool
    deleted_count: int = Field(default=0, alias="deletedCount")
    deleted_reservations: List[ReservationSummary] = Field(default_factory=list, alias="deletedReservations")
    message: Optional[str] = None
    error: Optional[str] = None

    class Config:
        populate_by_name = True


class CleanupPreview(BaseModel):
    success: bool
    past_reservations_count: int = Field(default=0, alias="pastReservationsCount")
    past_reservations: List[ReservationSummary] = Field(default_factory=list, alias="pastReservations")
    cutoff_date: datetime = Field(alias="cutoffDate")
    current_time: datetime = Field(alias="currentTime")
    message: Optional[str] = None

    class Config:
        populate_by_name = True

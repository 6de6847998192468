"""Reservation schemas"""

from datetime import datetime
from typing import Optional, List, Literal
from uuid import UUID
from pydantic import BaseModel, Field


ReservationStatus = Literal["pending", "confirmed", "cancelled"]


class BookingRequest(BaseModel):
    """Booking form submission; date and time are local restaurant time"""
    customer_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    party_size: Optional[int] = None
    date: Optional[str] = None  # YYYY-MM-DD
    time: Optional[str] = None  # HH:MM


class ReservationResponse(BaseModel):
    """Reservation response"""
    id: UUID
    table_id: UUID
    datetime: datetime
    party_size: int
    status: str
    user_id: Optional[UUID]
    display_name: Optional[str]
    display_email: Optional[str]
    display_phone: Optional[str]
    guest_name: Optional[str]
    guest_email: Optional[str]
    guest_phone: Optional[str]
    reservation_token: str
    created_at: datetime

    class Config:
        from_attributes = True


class BookingResult(BaseModel):
    """Outcome of the booking transaction"""
    success: bool
    reservation: Optional[ReservationResponse] = None
    error: Optional[str] = None
    error_code: Optional[str] = None  # missing_fields, invalid_party_size, invalid_datetime, outside_hours, duplicate, no_table


class ReservationListResponse(BaseModel):
    """Paginated reservation list"""
    items: List[ReservationResponse]
    total: int
    page: int
    page_size: int


class ReservationStatusUpdate(BaseModel):
    """Staff status change"""
    status: ReservationStatus


class ReservationLookupCancel(BaseModel):
    """Guest cancellation by token and email"""
    token: str
    email: str


class ReservationsPerDay(BaseModel):
    """Daily reservation count"""
    date: str
    count: int = Field(ge=0)

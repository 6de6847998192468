"""Booking transaction: validation, table allocation and reservation creation"""

import re
from datetime import datetime, time, timedelta, timezone
from typing import List, Optional, Sequence
from uuid import UUID
from zoneinfo import ZoneInfo

from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from hostmate.config import settings
from hostmate.models.reservation import ACTIVE_STATUSES, Reservation
from hostmate.models.table import DiningTable
from hostmate.schemas.auth import UserIdentity
from hostmate.schemas.reservation import BookingRequest, BookingResult, ReservationResponse
from hostmate.services.email import queue_reservation_email

logger = structlog.get_logger()

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_PATTERN = re.compile(r"^\d{1,2}:\d{2}$")


def _failure(error_code: str, error: str) -> BookingResult:
    logger.info("Booking rejected", error_code=error_code)
    return BookingResult(success=False, error=error, error_code=error_code)


def _parse_clock(value: str) -> time:
    return datetime.strptime(value, "%H:%M").time()


def to_utc(local_date: str, local_time: str) -> datetime:
    """Restaurant-local date and time as a naive UTC datetime"""
    local = datetime.strptime(f"{local_date} {local_time}", "%Y-%m-%d %H:%M")
    aware = local.replace(tzinfo=ZoneInfo(settings.restaurant_timezone))
    return aware.astimezone(timezone.utc).replace(tzinfo=None)


def _busy_tables(start: datetime):
    """Tables holding an active reservation within one duration of ``start``"""
    window = timedelta(minutes=settings.reservation_duration_minutes)
    return (
        select(Reservation.table_id)
        .where(
            Reservation.status.in_(ACTIVE_STATUSES),
            Reservation.datetime > start - window,
            Reservation.datetime < start + window,
        )
    )


async def find_free_table(
    db: AsyncSession,
    party_size: int,
    start: datetime,
    exclude: Sequence[UUID] = (),
) -> Optional[DiningTable]:
    """Smallest active table that seats the party and is free around ``start``"""
    query = (
        select(DiningTable)
        .where(
            DiningTable.is_active == True,
            DiningTable.capacity >= party_size,
            DiningTable.id.not_in(_busy_tables(start)),
        )
        .order_by(DiningTable.capacity, DiningTable.number)
        .limit(1)
    )
    if exclude:
        query = query.where(DiningTable.id.not_in(exclude))
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def claim_table(db: AsyncSession, party_size: int, start: datetime) -> Optional[DiningTable]:
    """
    Lock a free table for ``start`` until the current transaction ends.

    The candidate row is locked first and its availability checked again, so
    a booking committed meanwhile on the same table is seen.
    """
    taken: List[UUID] = []
    while True:
        candidate = await find_free_table(db, party_size, start, exclude=taken)
        if candidate is None:
            return None

        locked = await db.execute(
            select(DiningTable).where(DiningTable.id == candidate.id).with_for_update()
        )
        table = locked.scalar_one()

        busy = await db.execute(
            _busy_tables(start).where(Reservation.table_id == table.id).limit(1)
        )
        if busy.first() is None:
            return table
        taken.append(table.id)


async def _has_duplicate(db: AsyncSession, email: str, phone: str, start: datetime) -> bool:
    result = await db.execute(
        select(Reservation.id)
        .where(
            Reservation.status.in_(ACTIVE_STATUSES),
            Reservation.datetime == start,
            or_(
                Reservation.guest_email == email,
                Reservation.contact_email == email,
                Reservation.guest_phone == phone,
                Reservation.contact_phone == phone,
            ),
        )
        .limit(1)
    )
    return result.first() is not None


async def book_reservation(
    db: AsyncSession,
    request: BookingRequest,
    identity: Optional[UserIdentity] = None,
) -> BookingResult:
    """
    Validate and persist a reservation.

    Signed-in bookings are owned by the account (``user_id`` plus
    ``contact_*``); anonymous ones carry ``guest_*`` details. A confirmation
    email is queued afterwards; queueing problems never fail the booking.
    """
    name = (request.customer_name or "").strip()
    email = (request.email or "").strip()
    phone = (request.phone or "").strip()
    if not (name and email and phone):
        return _failure("missing_fields", "Name, email and phone are required")

    if request.party_size is None or not 1 <= request.party_size <= settings.max_party_size:
        return _failure(
            "invalid_party_size",
            f"Party size must be between 1 and {settings.max_party_size}",
        )

    date_value = (request.date or "").strip()
    time_value = (request.time or "").strip()
    if not DATE_PATTERN.match(date_value) or not TIME_PATTERN.match(time_value):
        return _failure("invalid_datetime", "Date must be YYYY-MM-DD and time HH:MM")
    try:
        requested_clock = _parse_clock(time_value)
        start = to_utc(date_value, time_value)
    except ValueError:
        return _failure("invalid_datetime", "Invalid date or time")

    opening = _parse_clock(settings.opening_time)
    last_seating = _parse_clock(settings.last_seating_time)
    if not opening <= requested_clock <= last_seating:
        return _failure(
            "outside_hours",
            f"Reservations are available between {settings.opening_time} and {settings.last_seating_time}",
        )

    if await _has_duplicate(db, email, phone, start):
        return _failure("duplicate", "A reservation already exists for this contact at that time")

    table = await claim_table(db, request.party_size, start)
    if table is None:
        # Releases any row locks taken while searching
        await db.commit()
        return _failure("no_table", "No table is available for that time and party size")
    table_number = table.number

    reservation = Reservation(
        table_id=table.id,
        datetime=start,
        party_size=request.party_size,
        status="pending",
    )
    if identity is not None:
        reservation.user_id = identity.id
        reservation.contact_name = name
        reservation.contact_email = email
        reservation.contact_phone = phone
    else:
        reservation.guest_name = name
        reservation.guest_email = email
        reservation.guest_phone = phone

    db.add(reservation)
    try:
        await db.commit()
    except IntegrityError:
        # Another booking took the same table and start time first
        await db.rollback()
        return _failure("no_table", "No table is available for that time and party size")
    await db.refresh(reservation)

    logger.info(
        "Reservation created",
        reservation_id=str(reservation.id),
        table_number=table_number,
        party_size=reservation.party_size,
        guest=identity is None,
    )

    response = ReservationResponse.model_validate(reservation)
    await queue_reservation_email(db, reservation, "confirmation")

    return BookingResult(success=True, reservation=response)

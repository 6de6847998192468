"""Reservation lookup, cancellation and reporting helpers"""

from datetime import date, timedelta
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from hostmate.database import utc_now
from hostmate.models.reservation import Reservation
from hostmate.schemas.reservation import ReservationResponse, ReservationsPerDay
from hostmate.services.email import queue_reservation_email

logger = structlog.get_logger()


async def find_by_token(db: AsyncSession, token: str, email: str) -> Optional[Reservation]:
    """Reservation matching a lookup token and its contact email"""
    normalized = email.strip().lower()
    result = await db.execute(
        select(Reservation).where(
            Reservation.reservation_token == token.strip(),
            or_(
                func.lower(Reservation.guest_email) == normalized,
                func.lower(Reservation.contact_email) == normalized,
            ),
        )
    )
    return result.scalar_one_or_none()


async def cancel_reservation(db: AsyncSession, reservation: Reservation) -> ReservationResponse:
    """Mark a reservation cancelled and queue the cancellation email"""
    reservation.status = "cancelled"
    await db.commit()
    await db.refresh(reservation)

    logger.info("Reservation cancelled", reservation_id=str(reservation.id))
    response = ReservationResponse.model_validate(reservation)
    await queue_reservation_email(db, reservation, "cancellation")
    return response


async def list_user_reservations(db: AsyncSession, user_id: UUID) -> List[Reservation]:
    result = await db.execute(
        select(Reservation)
        .where(Reservation.user_id == user_id)
        .order_by(Reservation.datetime.desc())
    )
    return list(result.scalars().all())


async def get_reservations_per_day(db: AsyncSession, days: int = 30) -> List[ReservationsPerDay]:
    """Reservation counts per calendar day (UTC) over the last ``days`` days"""
    since = utc_now() - timedelta(days=days)
    result = await db.execute(
        select(Reservation.datetime).where(Reservation.datetime >= since)
    )

    counts = {}
    for (scheduled,) in result.all():
        day: date = scheduled.date()
        counts[day] = counts.get(day, 0) + 1

    return [
        ReservationsPerDay(date=day.isoformat(), count=count)
        for day, count in sorted(counts.items())
    ]

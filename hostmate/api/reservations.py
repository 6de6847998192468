"""Reservation API endpoints"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from hostmate.config import settings
from hostmate.database import get_db
from hostmate.models.reservation import Reservation
from hostmate.models.user import User
from hostmate.schemas.auth import UserIdentity
from hostmate.schemas.reservation import (
    BookingRequest,
    BookingResult,
    ReservationListResponse,
    ReservationLookupCancel,
    ReservationResponse,
    ReservationsPerDay,
    ReservationStatusUpdate,
)
from hostmate.api.auth import get_current_user, get_optional_identity, require_admin
from hostmate.services.booking import book_reservation
from hostmate.services.cleanup import cleanup_past_reservations
from hostmate.services.email import queue_reservation_email
from hostmate.services.reservations import (
    cancel_reservation,
    find_by_token,
    get_reservations_per_day,
    list_user_reservations,
)

router = APIRouter()
logger = structlog.get_logger()

CONFLICT_CODES = {"duplicate", "no_table"}


@router.post("", response_model=BookingResult, status_code=201)
async def create_reservation(
    request: BookingRequest,
    identity: Optional[UserIdentity] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db),
):
    """Submit the booking form as a guest or signed-in user"""
    result = await book_reservation(db, request, identity)
    if not result.success:
        status_code = 409 if result.error_code in CONFLICT_CODES else 400
        raise HTTPException(
            status_code=status_code,
            detail={"error": result.error, "error_code": result.error_code},
        )
    return result


@router.get("/mine", response_model=List[ReservationResponse])
async def my_reservations(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Reservations owned by the signed-in user"""
    return await list_user_reservations(db, current_user.id)


@router.get("/lookup", response_model=ReservationResponse)
async def lookup_reservation(
    token: str,
    email: str,
    db: AsyncSession = Depends(get_db),
):
    """Find a reservation by its lookup token and contact email"""
    reservation = await find_by_token(db, token, email)
    if not reservation:
        raise HTTPException(status_code=404, detail="Reservation not found")
    return reservation


@router.post("/lookup/cancel", response_model=ReservationResponse)
async def cancel_by_lookup(
    request: ReservationLookupCancel,
    db: AsyncSession = Depends(get_db),
):
    """Cancel a reservation using its lookup token and contact email"""
    reservation = await find_by_token(db, request.token, request.email)
    if not reservation:
        raise HTTPException(status_code=404, detail="Reservation not found")
    if reservation.status == "cancelled":
        raise HTTPException(status_code=400, detail="Reservation is already cancelled")

    return await cancel_reservation(db, reservation)


@router.post("/{reservation_id}/cancel", response_model=ReservationResponse)
async def cancel_my_reservation(
    reservation_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Cancel a reservation owned by the signed-in user"""
    result = await db.execute(
        select(Reservation).where(
            Reservation.id == reservation_id,
            Reservation.user_id == current_user.id,
        )
    )
    reservation = result.scalar_one_or_none()

    if not reservation:
        raise HTTPException(status_code=404, detail="Reservation not found")
    if reservation.status == "cancelled":
        raise HTTPException(status_code=400, detail="Reservation is already cancelled")

    return await cancel_reservation(db, reservation)


@router.get("", response_model=ReservationListResponse)
async def list_reservations(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    status: Optional[str] = None,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """List all reservations with pagination (staff view)"""
    if settings.cleanup_on_admin_load:
        sweep = await cleanup_past_reservations(db, actor_id=admin.id)
        if not sweep.success:
            logger.warning("Sweep before reservation list failed", error=sweep.error)

    query = select(Reservation)
    count_query = select(func.count(Reservation.id))

    if status:
        query = query.where(Reservation.status == status)
        count_query = count_query.where(Reservation.status == status)

    # Get total
    total_result = await db.execute(count_query)
    total = total_result.scalar()

    # Get paginated results
    offset = (page - 1) * page_size
    query = query.order_by(Reservation.datetime).offset(offset).limit(page_size)

    result = await db.execute(query)
    reservations = result.scalars().all()

    return ReservationListResponse(
        items=reservations,
        total=total,
        page=page,
        page_size=page_size,
    )


@router.patch("/{reservation_id}/status", response_model=ReservationResponse)
async def update_reservation_status(
    reservation_id: UUID,
    update: ReservationStatusUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Change a reservation's status (staff)"""
    result = await db.execute(select(Reservation).where(Reservation.id == reservation_id))
    reservation = result.scalar_one_or_none()

    if not reservation:
        raise HTTPException(status_code=404, detail="Reservation not found")

    previous = reservation.status
    reservation.status = update.status
    await db.commit()
    await db.refresh(reservation)

    logger.info(
        "Reservation status changed",
        reservation_id=str(reservation.id),
        previous=previous,
        status=update.status,
    )

    response = ReservationResponse.model_validate(reservation)
    if update.status == "cancelled" and previous != "cancelled":
        await queue_reservation_email(db, reservation, "cancellation")

    return response


@router.get("/stats/per-day", response_model=List[ReservationsPerDay])
async def reservations_per_day(
    days: int = Query(30, ge=1, le=365),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Daily reservation counts for the last ``days`` days"""
    return await get_reservations_per_day(db, days)

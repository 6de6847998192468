"""
Retention sweep for past reservations.

Every reservation scheduled before today's UTC midnight is removed together
with its queued emails. ``email_queue.reservation_id`` has no cascade, so the
queue rows go first, inside the same transaction as the reservation delete.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from hostmate.database import utc_now
from hostmate.models.email_queue import EmailQueueEntry
from hostmate.models.reservation import Reservation
from hostmate.schemas.cleanup import CleanupPreview, CleanupResult, ReservationSummary
from hostmate.services.audit import record_action

logger = structlog.get_logger()


def cutoff_for(now: datetime) -> datetime:
    """Start of the UTC day containing ``now``"""
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def _summary(id, scheduled, guest_name, contact_name, status, party_size) -> ReservationSummary:
    return ReservationSummary(
        id=id,
        datetime=scheduled,
        name=guest_name or contact_name,
        status=status,
        party_size=party_size,
    )


_SUMMARY_COLUMNS = (
    Reservation.id,
    Reservation.datetime,
    Reservation.guest_name,
    Reservation.contact_name,
    Reservation.status,
    Reservation.party_size,
)


async def preview_past_reservations(db: AsyncSession, now: Optional[datetime] = None) -> CleanupPreview:
    """Reservations the next sweep would remove; nothing is modified"""
    now = now or utc_now()
    cutoff = cutoff_for(now)

    result = await db.execute(
        select(*_SUMMARY_COLUMNS)
        .where(Reservation.datetime < cutoff)
        .order_by(Reservation.datetime)
    )
    rows = [_summary(*row) for row in result.all()]

    return CleanupPreview(
        success=True,
        past_reservations_count=len(rows),
        past_reservations=rows,
        cutoff_date=cutoff,
        current_time=now,
        message=f"Found {len(rows)} past reservations that would be deleted",
    )


async def cleanup_past_reservations(
    db: AsyncSession,
    now: Optional[datetime] = None,
    actor_id=None,
) -> CleanupResult:
    """
    Delete every reservation scheduled before today's UTC midnight.

    Both deletes run in one transaction. The reported rows come from the
    reservation DELETE itself, so concurrent sweeps never double count.
    Database errors roll back and are reported in the result.
    """
    now = now or utc_now()
    cutoff = cutoff_for(now)

    try:
        result = await db.execute(select(Reservation.id).where(Reservation.datetime < cutoff))
        eligible_ids = [row[0] for row in result.all()]

        if not eligible_ids:
            await db.commit()
            logger.info("No past reservations to clean up", cutoff=cutoff.isoformat())
            return CleanupResult(success=True, message="No past reservations to clean up")

        await db.execute(
            delete(EmailQueueEntry).where(EmailQueueEntry.reservation_id.in_(eligible_ids))
        )
        deleted = await db.execute(
            delete(Reservation)
            .where(Reservation.id.in_(eligible_ids))
            .returning(*_SUMMARY_COLUMNS)
        )
        deleted_rows: List[ReservationSummary] = [_summary(*row) for row in deleted.all()]

        record_action(
            db,
            action="cleanup_past_reservations",
            actor_id=actor_id,
            resource_type="reservation",
            data={"deleted_count": len(deleted_rows), "cutoff": cutoff.isoformat()},
        )
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error("Cleanup of past reservations failed", error=str(e))
        return CleanupResult(success=False, error=str(e), message="Failed to delete past reservations")

    logger.info(
        "Past reservations cleaned up",
        deleted_count=len(deleted_rows),
        cutoff=cutoff.isoformat(),
    )
    return CleanupResult(
        success=True,
        deleted_count=len(deleted_rows),
        deleted_reservations=deleted_rows,
        message=f"Successfully deleted {len(deleted_rows)} past reservations",
    )

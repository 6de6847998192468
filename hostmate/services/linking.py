"""
Guest reservation linking.

A guest reservation carries its contact details in ``guest_*`` with no
owning account. When a user signs in with a verified email that matches,
they can claim those reservations: ownership moves to the account and the
guest details become the account contact details.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from hostmate.models.reservation import Reservation
from hostmate.schemas.auth import UserIdentity
from hostmate.schemas.linking import LinkableReservation, LinkCheckResult, LinkCheckStatus, LinkResult
from hostmate.services.audit import record_action

logger = structlog.get_logger()


def _linkable_query(email: str):
    return (
        select(Reservation)
        .where(Reservation.guest_email == email, Reservation.user_id.is_(None))
        .order_by(Reservation.datetime)
    )


async def get_linkable_reservations(db: AsyncSession, email: str) -> List[LinkableReservation]:
    """Guest reservations matching ``email`` exactly that no account owns yet"""
    result = await db.execute(_linkable_query(email))
    return [LinkableReservation.model_validate(row) for row in result.scalars().all()]


async def link_guest_reservations(db: AsyncSession, email: str, user_id: UUID) -> int:
    """
    Attach every linkable guest reservation for ``email`` to ``user_id``.

    Runs as one transaction and returns the number of rows linked; a second
    call finds nothing left to link.
    """
    try:
        result = await db.execute(_linkable_query(email).with_for_update())
        reservations = result.scalars().all()

        for reservation in reservations:
            reservation.user_id = user_id
            reservation.contact_name = reservation.guest_name
            reservation.contact_email = reservation.guest_email
            reservation.contact_phone = reservation.guest_phone
            reservation.guest_name = None
            reservation.guest_email = None
            reservation.guest_phone = None

        if reservations:
            record_action(
                db,
                action="link_guest_reservations",
                actor_id=user_id,
                resource_type="reservation",
                data={"linked_count": len(reservations), "reservation_ids": [str(r.id) for r in reservations]},
            )

        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("Guest reservations linked", user_id=str(user_id), linked_count=len(reservations))
    return len(reservations)


async def check_linkable(db: AsyncSession, email: str) -> LinkCheckResult:
    try:
        reservations = await get_linkable_reservations(db, email)
    except Exception as e:
        logger.error("Linkable reservation check failed", error=str(e))
        return LinkCheckResult(status=LinkCheckStatus.FAILED, error=str(e))

    if not reservations:
        return LinkCheckResult(status=LinkCheckStatus.NONE)
    return LinkCheckResult(status=LinkCheckStatus.FOUND, reservations=reservations)


async def link(db: AsyncSession, email: str, user_id: UUID) -> LinkResult:
    try:
        linked_count = await link_guest_reservations(db, email, user_id)
    except Exception as e:
        logger.error("Linking guest reservations failed", user_id=str(user_id), error=str(e))
        return LinkResult(success=False, error=str(e))
    return LinkResult(success=True, linked_count=linked_count)


class GuestLinkingSession:
    """
    Per-session linking state for one signed-in user.

    ``check`` and ``link`` only act for an identity with a verified email;
    ``check`` runs at most once per session. ``link`` and ``dismiss`` both
    clear the pending candidates.
    """

    def __init__(self, identity: UserIdentity):
        self.identity = identity
        self.has_checked = False
        self.candidates: List[LinkableReservation] = []
        self.last_error: Optional[str] = None

    @property
    def has_candidates(self) -> bool:
        return bool(self.candidates)

    async def check(self, db: AsyncSession) -> LinkCheckResult:
        if self.has_checked:
            status = LinkCheckStatus.FOUND if self.candidates else LinkCheckStatus.NONE
            return LinkCheckResult(status=status, reservations=self.candidates)

        if not (self.identity.email_verified and self.identity.email):
            return LinkCheckResult(status=LinkCheckStatus.NONE)

        self.has_checked = True
        result = await check_linkable(db, self.identity.email)
        self.candidates = list(result.reservations)
        self.last_error = result.error
        return result

    async def link(self, db: AsyncSession) -> LinkResult:
        if not (self.identity.email_verified and self.identity.email):
            return LinkResult(success=False, error="A verified email is required to link reservations")

        result = await link(db, self.identity.email, self.identity.id)
        if result.success:
            self.candidates = []
            self.last_error = None
        else:
            self.last_error = result.error
        return result

    def dismiss(self) -> None:
        self.candidates = []

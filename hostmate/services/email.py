"""Reservation email rendering, queueing and queue processing"""

from abc import ABC, abstractmethod
from datetime import timezone
from typing import Optional
from urllib.parse import urlencode
from uuid import UUID
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from hostmate.config import settings
from hostmate.database import utc_now
from hostmate.models.email_queue import EmailQueueEntry
from hostmate.models.reservation import Reservation
from hostmate.schemas.email import EmailType, ProcessedEmail, ProcessQueueResponse, RenderedEmail

logger = structlog.get_logger()

SUBJECTS = {
    "confirmation": "{restaurant} - Reservation Confirmation #{ref}",
    "cancellation": "{restaurant} - Reservation Cancelled #{ref}",
}

CONFIRMATION_BODY = """Hello {name},

Your reservation at {restaurant} is received.

Reference: #{ref}
Date: {date}
Time: {time}
Party size: {party_size}
Status: {status}

View or cancel your reservation at any time:
{lookup_url}

We look forward to seeing you!
{restaurant}
"""

CANCELLATION_BODY = """Hello {name},

Your reservation at {restaurant} has been cancelled.

Reference: #{ref}
Date: {date}
Time: {time}
Party size: {party_size}

Reservation details:
{lookup_url}

We hope to welcome you another time.
{restaurant}
"""


def lookup_url(token: str, email: str) -> str:
    query = urlencode({"token": token, "email": email})
    return f"{settings.public_base_url.rstrip('/')}/reservation-lookup?{query}"


def render_email(reservation: Reservation, email_type: EmailType) -> RenderedEmail:
    """Render the confirmation or cancellation email for a reservation"""
    ref = reservation.reservation_token[-8:]
    local = (
        reservation.datetime.replace(tzinfo=timezone.utc)
        .astimezone(ZoneInfo(settings.restaurant_timezone))
    )
    to_email = reservation.display_email
    template = CONFIRMATION_BODY if email_type == "confirmation" else CANCELLATION_BODY

    body = template.format(
        name=reservation.display_name or "Guest",
        restaurant=settings.restaurant_name,
        ref=ref,
        date=local.strftime("%A, %B %d, %Y"),
        time=local.strftime("%I:%M %p"),
        party_size=reservation.party_size,
        status=reservation.status,
        lookup_url=lookup_url(reservation.reservation_token, to_email or ""),
    )

    return RenderedEmail(
        to_email=to_email or "",
        subject=SUBJECTS[email_type].format(restaurant=settings.restaurant_name, ref=ref),
        body=body,
    )


async def queue_email(
    db: AsyncSession,
    to_email: str,
    subject: str,
    body: str,
    email_type: str,
    reservation_id: Optional[UUID] = None,
) -> EmailQueueEntry:
    """Insert a pending email into the queue"""
    entry = EmailQueueEntry(
        to_email=to_email,
        subject=subject,
        body=body,
        email_type=email_type,
        reservation_id=reservation_id,
        status="pending",
    )
    db.add(entry)
    await db.commit()
    await db.refresh(entry)

    logger.info("Email queued", queue_id=str(entry.id), email_type=email_type)
    return entry


async def queue_reservation_email(
    db: AsyncSession,
    reservation: Reservation,
    email_type: EmailType,
) -> Optional[EmailQueueEntry]:
    """
    Render and queue a reservation email.

    A queue failure is logged and the rendered email written to the log
    instead; it never fails the caller.
    """
    rendered = render_email(reservation, email_type)
    reservation_id = reservation.id
    try:
        return await queue_email(
            db,
            to_email=rendered.to_email,
            subject=rendered.subject,
            body=rendered.body,
            email_type=email_type,
            reservation_id=reservation_id,
        )
    except Exception as e:
        await db.rollback()
        logger.error(
            "Failed to queue email",
            reservation_id=str(reservation_id),
            email_type=email_type,
            error=str(e),
        )
        logger.info(
            "Email fallback",
            to_email=rendered.to_email,
            subject=rendered.subject,
            body=rendered.body,
        )
        return None


VERIFICATION_SUBJECT = "{restaurant} - Confirm your email address"

VERIFICATION_BODY = """Hello {name},

Please confirm your email address to finish setting up your {restaurant} account:
{verify_url}

Once confirmed, reservations you made as a guest with this address can be
added to your account.

{restaurant}
"""


def verification_url(token: str) -> str:
    query = urlencode({"token": token})
    return f"{settings.public_base_url.rstrip('/')}/verify-email?{query}"


async def queue_verification_email(
    db: AsyncSession,
    to_email: str,
    name: Optional[str],
    token: str,
) -> Optional[EmailQueueEntry]:
    """Queue the account email verification link; failures are logged only"""
    subject = VERIFICATION_SUBJECT.format(restaurant=settings.restaurant_name)
    body = VERIFICATION_BODY.format(
        name=name or "there",
        restaurant=settings.restaurant_name,
        verify_url=verification_url(token),
    )
    try:
        return await queue_email(db, to_email, subject, body, "verification")
    except Exception as e:
        await db.rollback()
        logger.error("Failed to queue verification email", error=str(e))
        return None


class EmailSender(ABC):
    """Delivers a single email"""

    @abstractmethod
    async def send(self, to_email: str, subject: str, body: str) -> None:
        pass


class LoggingEmailSender(EmailSender):
    """Writes outgoing emails to the log"""

    async def send(self, to_email: str, subject: str, body: str) -> None:
        logger.info("Email sent", to_email=to_email, subject=subject, body_length=len(body))


async def process_email_queue(
    db: AsyncSession,
    sender: Optional[EmailSender] = None,
    batch_size: Optional[int] = None,
) -> ProcessQueueResponse:
    """Deliver the oldest pending emails, marking each sent or failed"""
    sender = sender or LoggingEmailSender()
    batch_size = batch_size or settings.email_batch_size

    result = await db.execute(
        select(EmailQueueEntry)
        .where(EmailQueueEntry.status == "pending")
        .order_by(EmailQueueEntry.created_at)
        .limit(batch_size)
    )
    entries = result.scalars().all()

    if not entries:
        return ProcessQueueResponse(success=True, processed=0)

    processed = []
    for entry in entries:
        try:
            await sender.send(entry.to_email, entry.subject, entry.body)
            entry.status = "sent"
            entry.sent_at = utc_now()
            entry.error_message = None
            processed.append(ProcessedEmail(id=entry.id, status="sent"))
        except Exception as e:
            entry.status = "failed"
            entry.error_message = str(e)
            processed.append(ProcessedEmail(id=entry.id, status="failed", error=str(e)))
            logger.error("Email delivery failed", queue_id=str(entry.id), error=str(e))

    await db.commit()

    logger.info("Email queue processed", processed=len(processed))
    return ProcessQueueResponse(success=True, processed=len(processed), results=processed)

"""Email queue endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from hostmate.api.auth import get_optional_user
from hostmate.config import settings
from hostmate.database import get_db
from hostmate.models.reservation import Reservation
from hostmate.models.user import User
from hostmate.schemas.email import ProcessQueueResponse, SendEmailRequest, SendEmailResponse
from hostmate.services.email import (
    EmailSender,
    LoggingEmailSender,
    process_email_queue,
    queue_reservation_email,
)

router = APIRouter()
logger = structlog.get_logger()


def get_email_sender() -> EmailSender:
    return LoggingEmailSender()


@router.post("/send-email", response_model=SendEmailResponse)
async def send_email(
    request: SendEmailRequest,
    x_api_key: Optional[str] = Header(default=None),
    current_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    """Render and queue a reservation email"""
    has_key = x_api_key == settings.email_processor_api_key
    if not has_key and current_user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")

    result = await db.execute(select(Reservation).where(Reservation.id == request.reservation.id))
    reservation = result.scalar_one_or_none()

    if not reservation:
        raise HTTPException(status_code=404, detail="Reservation not found")
    if not (has_key or current_user.is_admin or reservation.user_id == current_user.id):
        raise HTTPException(status_code=403, detail="Not allowed to email this reservation")
    if not reservation.display_email:
        raise HTTPException(status_code=400, detail="Reservation has no email address")

    entry = await queue_reservation_email(db, reservation, request.type)
    if entry is None:
        # Rendered email already written to the log
        return SendEmailResponse(success=True, message="Email logged (queue unavailable)")

    return SendEmailResponse(success=True, message="Email queued successfully", queue_id=entry.id)


@router.post("/process-email-queue", response_model=ProcessQueueResponse)
async def process_queue(
    x_api_key: Optional[str] = Header(default=None),
    sender: EmailSender = Depends(get_email_sender),
    db: AsyncSession = Depends(get_db),
):
    """Deliver pending emails (called by a scheduler)"""
    if x_api_key != settings.email_processor_api_key:
        raise HTTPException(status_code=401, detail="Unauthorized")

    return await process_email_queue(db, sender, settings.email_batch_size)

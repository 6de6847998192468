"""Conversational reservation agent endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from hostmate.database import get_db
from hostmate.llm import get_llm_adapter
from hostmate.schemas.agent import (
    AgentTurnRequest,
    AgentTurnResponse,
    FieldEditRequest,
    FieldEditResult,
    FinalizeRequest,
    FinalizeResponse,
    Ready,
)
from hostmate.schemas.auth import UserIdentity
from hostmate.schemas.reservation import BookingRequest
from hostmate.api.auth import get_optional_identity
from hostmate.agent import ReservationAgent, draft_state, edit_field
from hostmate.services.booking import book_reservation

router = APIRouter()
logger = structlog.get_logger()


def get_reservation_agent() -> ReservationAgent:
    return ReservationAgent(llm=get_llm_adapter())


def _hint_identity(request: AgentTurnRequest) -> Optional[UserIdentity]:
    profile = request.user_profile
    if profile is None or profile.id is None:
        return None
    return UserIdentity(
        id=profile.id,
        email=profile.email,
        name=profile.full_name or profile.name or profile.username,
    )


@router.post("", response_model=AgentTurnResponse)
async def reservation_turn(
    request: AgentTurnRequest,
    identity: Optional[UserIdentity] = Depends(get_optional_identity),
    agent: ReservationAgent = Depends(get_reservation_agent),
):
    """Handle one guest message in the reservation conversation"""
    # Profile hints from the client only pre-fill the draft
    return await agent.handle_turn(
        message=request.message,
        history=request.conversation_history,
        draft=request.reservation_data,
        identity=identity or _hint_identity(request),
    )


@router.post("/edit", response_model=FieldEditResult)
async def edit_reservation_field(request: FieldEditRequest):
    """Manually correct one field of the draft"""
    return edit_field(request.reservation_data, request.field, request.value)


@router.post("/finalize", response_model=FinalizeResponse)
async def finalize_reservation(
    request: FinalizeRequest,
    identity: Optional[UserIdentity] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db),
):
    """Book a completed draft"""
    draft = request.reservation_data
    if not isinstance(draft_state(draft), Ready):
        raise HTTPException(status_code=400, detail="Reservation details are incomplete or already booked")

    booking = await book_reservation(
        db,
        BookingRequest(
            customer_name=draft.customer_name,
            email=draft.email,
            phone=draft.phone,
            party_size=draft.party_size,
            date=draft.date,
            time=draft.time,
        ),
        identity,
    )

    if booking.success:
        draft = draft.model_copy(update={"reservation_id": booking.reservation.id})
        logger.info("Agent draft finalized", reservation_id=str(booking.reservation.id))

    return FinalizeResponse(booking=booking, reservation_data=draft, state=draft_state(draft))

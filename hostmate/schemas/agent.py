"""Reservation agent schemas: draft, provenance, turn request and response"""

import enum
from typing import Dict, List, Literal, Optional, Union
from uuid import UUID
from pydantic import BaseModel, Field

from hostmate.schemas.reservation import BookingResult


class FieldSource(str, enum.Enum):
    """Where a draft value came from"""
    USER = "user"
    INFERRED = "inferred"


class AgentAction(str, enum.Enum):
    CONTINUE = "CONTINUE"
    COMPLETE_RESERVATION = "COMPLETE_RESERVATION"


class ReservationDraft(BaseModel):
    """
    Partially collected reservation, held by the client and sent back each turn.

    Serialised with camelCase keys; ``_sources`` maps each field key to its
    provenance.
    """
    party_size: Optional[int] = Field(default=None, alias="partySize")
    date: Optional[str] = None
    time: Optional[str] = None
    customer_name: Optional[str] = Field(default=None, alias="customerName")
    email: Optional[str] = None
    phone: Optional[str] = None
    sources: Dict[str, FieldSource] = Field(default_factory=dict, alias="_sources")
    reservation_id: Optional[UUID] = Field(default=None, alias="reservationId")

    class Config:
        populate_by_name = True


class Collecting(BaseModel):
    kind: Literal["collecting"] = "collecting"
    missing: List[str]


class Ready(BaseModel):
    kind: Literal["ready"] = "ready"


class Finalized(BaseModel):
    kind: Literal["finalized"] = "finalized"
    reservation_id: UUID


DraftState = Union[Collecting, Ready, Finalized]


class ConversationMessage(BaseModel):
    role: Literal["user", "agent"]
    content: str


class UserProfileHint(BaseModel):
    """Identity hints sent by the client; used only to pre-fill the draft"""
    id: Optional[UUID] = None
    email: Optional[str] = None
    name: Optional[str] = None
    full_name: Optional[str] = None
    username: Optional[str] = None


class AgentTurnRequest(BaseModel):
    message: str
    conversation_history: List[ConversationMessage] = Field(default_factory=list, alias="conversationHistory")
    reservation_data: ReservationDraft = Field(default_factory=ReservationDraft, alias="reservationData")
    user_profile: Optional[UserProfileHint] = Field(default=None, alias="userProfile")

    class Config:
        populate_by_name = True


class AgentTurnResponse(BaseModel):
    reply: str
    reservation_data: ReservationDraft = Field(alias="reservationData")
    action: AgentAction
    state: DraftState

    class Config:
        populate_by_name = True


class FieldEditRequest(BaseModel):
    reservation_data: ReservationDraft = Field(alias="reservationData")
    field: str
    value: str

    class Config:
        populate_by_name = True


class FieldEditResult(BaseModel):
    """Outcome of a manual draft edit; a rejected edit carries the unchanged draft"""
    accepted: bool
    reservation_data: ReservationDraft = Field(alias="reservationData")
    error: Optional[str] = None

    class Config:
        populate_by_name = True


class FinalizeRequest(BaseModel):
    reservation_data: ReservationDraft = Field(alias="reservationData")

    class Config:
        populate_by_name = True


class FinalizeResponse(BaseModel):
    booking: BookingResult
    reservation_data: ReservationDraft = Field(alias="reservationData")
    state: DraftState

    class Config:
        populate_by_name = True

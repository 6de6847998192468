"""Pydantic schemas for request/response validation"""

from hostmate.schemas.auth import (
    Token,
    UserCreate,
    UserResponse,
    UserIdentity,
)
from hostmate.schemas.reservation import (
    BookingRequest,
    BookingResult,
    ReservationResponse,
    ReservationListResponse,
)
from hostmate.schemas.agent import (
    ReservationDraft,
    FieldSource,
    AgentAction,
    AgentTurnRequest,
    AgentTurnResponse,
)
from hostmate.schemas.linking import (
    LinkableReservation,
    LinkCheckResult,
    LinkResult,
)
from hostmate.schemas.cleanup import (
    CleanupResult,
    CleanupPreview,
)
from hostmate.schemas.email import (
    SendEmailRequest,
    SendEmailResponse,
)
from hostmate.schemas.llm import (
    LLMMessage,
    LLMCompletion,
)

__all__ = [
    "Token",
    "UserCreate",
    "UserResponse",
    "UserIdentity",
    "BookingRequest",
    "BookingResult",
    "ReservationResponse",
    "ReservationListResponse",
    "ReservationDraft",
    "FieldSource",
    "AgentAction",
    "AgentTurnRequest",
    "AgentTurnResponse",
    "LinkableReservation",
    "LinkCheckResult",
    "LinkResult",
    "CleanupResult",
    "CleanupPreview",
    "SendEmailRequest",
    "SendEmailResponse",
    "LLMMessage",
    "LLMCompletion",
]

"""Email queue schemas"""

from typing import List, Literal, Optional
from uuid import UUID
from pydantic import BaseModel


EmailType = Literal["confirmation", "cancellation"]


class ReservationRef(BaseModel):
    id: UUID


class SendEmailRequest(BaseModel):
    reservation: ReservationRef
    type: EmailType


class SendEmailResponse(BaseModel):
    success: bool
    message: str
    queue_id: Optional[UUID] = None


class RenderedEmail(BaseModel):
    to_email: str
    subject: str
    body: str


class ProcessedEmail(BaseModel):
    id: UUID
    status: str
    error: Optional[str] = None


class ProcessQueueResponse(BaseModel):
    success: bool
    processed: int
    results: List[ProcessedEmail] = []

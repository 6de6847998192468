"""Conversational slot-filling engine for reservations"""

import re
from datetime import date, datetime
from typing import Callable, List, Optional
from zoneinfo import ZoneInfo
import structlog

from hostmate.config import settings
from hostmate.llm import LLMAdapter
from hostmate.schemas.agent import (
    AgentAction,
    AgentTurnResponse,
    ConversationMessage,
    FieldSource,
    ReservationDraft,
)
from hostmate.schemas.auth import UserIdentity
from hostmate.schemas.llm import LLMMessage
from hostmate.agent.draft import REQUIRED_FIELDS, draft_state, get_field, is_complete, merge_fields, missing_fields
from hostmate.agent.extraction import extract_reservation_fields
from hostmate.agent.prompts import APOLOGY_REPLY, FIELD_PROMPTS, READY_REPLY, SYSTEM_PROMPT

logger = structlog.get_logger()

GENERAL_QUESTION_PATTERN = re.compile(
    r"\b(hours?|open|close|closing|menu|vegan|vegetarian|gluten|allerg\w*|parking|park|"
    r"valet|location|address|where|dress|code|price|cost|kids?|children|dogs?|pets?|"
    r"patio|wifi|wi-fi|accessib\w*|wheelchair|private|events?|happy hour|wine|cocktails?|"
    r"payment|pay|cards?|deposit|cancellation policy)\b"
)


def restaurant_today() -> date:
    return datetime.now(ZoneInfo(settings.restaurant_timezone)).date()


def is_general_question(message: str) -> bool:
    text = message.strip().lower()
    return text.endswith("?") or bool(GENERAL_QUESTION_PATTERN.search(text))


class ReservationAgent:
    """
    Drives one conversational turn: extract fields, consult the LLM, pick the reply.

    The agent never persists anything; finalized drafts go through the
    booking service.
    """

    def __init__(self, llm: LLMAdapter, today: Optional[Callable[[], date]] = None):
        self.llm = llm
        self.today = today or restaurant_today

    def _prefill_from_identity(
        self, draft: ReservationDraft, identity: Optional[UserIdentity]
    ) -> ReservationDraft:
        if identity is None:
            return draft

        values = {}
        if not draft.customer_name:
            name = identity.name
            if not name and identity.email:
                name = identity.email.split("@")[0]
            if name:
                values["customerName"] = name
        if not draft.email and identity.email:
            values["email"] = identity.email

        # Only empty fields are filled, so any earlier provenance is stale
        prefilled, _ = merge_fields(draft, values, FieldSource.INFERRED)
        return prefilled

    def _context_message(
        self,
        message: str,
        history: List[ConversationMessage],
        draft: ReservationDraft,
        identity: Optional[UserIdentity],
    ) -> str:
        transcript = "\n".join(f"{item.role}: {item.content}" for item in history) or "(none)"
        collected = ", ".join(
            f"{field}={get_field(draft, field)}"
            for field in REQUIRED_FIELDS
            if get_field(draft, field) not in (None, "")
        ) or "(nothing yet)"
        missing = ", ".join(missing_fields(draft)) or "(none)"
        signed_in = "yes" if identity else "no"
        return (
            f"Conversation so far:\n{transcript}\n\n"
            f"Guest message: {message}\n"
            f"Collected reservation details: {collected}\n"
            f"Still missing: {missing}\n"
            f"Guest signed in: {signed_in}\n\n"
            "Respond briefly to the guest message."
        )

    def _next_prompt(self, draft: ReservationDraft) -> str:
        field = missing_fields(draft)[0]
        prompt = FIELD_PROMPTS[field]
        if field == "partySize":
            first_name = (draft.customer_name or "").split(" ")[0]
            prompt = prompt.format(name=f", {first_name}" if first_name else "")
        return prompt

    def _ready_reply(self, draft: ReservationDraft) -> str:
        return READY_REPLY.format(
            party_size=draft.party_size,
            date=draft.date,
            time=draft.time,
            name=draft.customer_name,
            email=draft.email,
            phone=draft.phone,
        )

    async def handle_turn(
        self,
        message: str,
        history: List[ConversationMessage],
        draft: ReservationDraft,
        identity: Optional[UserIdentity] = None,
    ) -> AgentTurnResponse:
        """Process one guest message against the current draft"""
        extracted = extract_reservation_fields(message, self.today())
        if draft.customer_name:
            extracted.pop("customerName", None)

        updated, captured = merge_fields(draft, extracted, FieldSource.USER)
        updated = self._prefill_from_identity(updated, identity)

        history_messages = [
            LLMMessage(role="assistant" if item.role == "agent" else "user", content=item.content)
            for item in history
        ]
        history_messages.append(
            LLMMessage(role="user", content=self._context_message(message, history, updated, identity))
        )

        try:
            completion = await self.llm.complete(
                system_prompt=SYSTEM_PROMPT,
                messages=history_messages,
                temperature=settings.llm_temperature,
                max_tokens=settings.llm_max_tokens,
            )
        except Exception as e:
            logger.error("Reservation agent LLM call failed", error=str(e) or type(e).__name__)
            return AgentTurnResponse(
                reply=APOLOGY_REPLY,
                reservation_data=draft,
                action=AgentAction.CONTINUE,
                state=draft_state(draft),
            )

        logger.info(
            "Reservation agent turn",
            captured=captured,
            missing=missing_fields(updated),
            provider=completion.provider,
        )

        if is_complete(updated):
            return AgentTurnResponse(
                reply=self._ready_reply(updated),
                reservation_data=updated,
                action=AgentAction.COMPLETE_RESERVATION,
                state=draft_state(updated),
            )

        reply = self._next_prompt(updated)
        answer = completion.content.strip()
        if not captured and answer and is_general_question(message):
            reply = f"{answer}\n\n{reply}"

        return AgentTurnResponse(
            reply=reply,
            reservation_data=updated,
            action=AgentAction.CONTINUE,
            state=draft_state(updated),
        )

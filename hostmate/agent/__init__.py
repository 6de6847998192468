"""Reservation slot-filling agent"""

from hostmate.agent.draft import draft_state, edit_field, missing_fields
from hostmate.agent.engine import ReservationAgent
from hostmate.agent.extraction import extract_reservation_fields

__all__ = [
    "ReservationAgent",
    "draft_state",
    "edit_field",
    "extract_reservation_fields",
    "missing_fields",
]

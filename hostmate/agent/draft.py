"""Reservation draft helpers: completeness, state, merging and manual edits"""

import re
from typing import Any, Dict, List, Optional, Tuple

from hostmate.schemas.agent import (
    Collecting,
    DraftState,
    FieldEditResult,
    FieldSource,
    Finalized,
    Ready,
    ReservationDraft,
)

# Prompt order
REQUIRED_FIELDS = ["customerName", "partySize", "date", "time", "email", "phone"]

_ATTRIBUTES = {
    "customerName": "customer_name",
    "partySize": "party_size",
    "date": "date",
    "time": "time",
    "email": "email",
    "phone": "phone",
}


def get_field(draft: ReservationDraft, field: str) -> Any:
    return getattr(draft, _ATTRIBUTES[field])


def _is_filled(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def missing_fields(draft: ReservationDraft) -> List[str]:
    return [field for field in REQUIRED_FIELDS if not _is_filled(get_field(draft, field))]


def is_complete(draft: ReservationDraft) -> bool:
    return not missing_fields(draft)


def draft_state(draft: ReservationDraft) -> DraftState:
    """Explicit state of a draft"""
    if draft.reservation_id is not None:
        return Finalized(reservation_id=draft.reservation_id)
    missing = missing_fields(draft)
    if missing:
        return Collecting(missing=missing)
    return Ready()


def merge_fields(
    draft: ReservationDraft,
    values: Dict[str, Any],
    source: FieldSource,
) -> Tuple[ReservationDraft, List[str]]:
    """
    Apply ``values`` to a copy of ``draft``.

    Fields whose value actually changed get ``source`` as provenance.
    Returns the new draft and the changed field names.
    """
    updates: Dict[str, Any] = {}
    sources = dict(draft.sources)
    changed = []

    for field, value in values.items():
        if field not in _ATTRIBUTES or not _is_filled(value):
            continue
        if get_field(draft, field) == value:
            continue
        updates[_ATTRIBUTES[field]] = value
        sources[field] = source
        changed.append(field)

    updates["sources"] = sources
    return draft.model_copy(update=updates), changed


def normalize_time_input(raw: str) -> str:
    """Bare hour becomes HH:00; anything else is returned as typed"""
    value = raw.strip()
    if re.fullmatch(r"\d{1,2}", value):
        return f"{int(value):02d}:00"
    return value


def _parse_party_size(raw: str) -> Optional[int]:
    value = raw.strip()
    if not re.fullmatch(r"\d+", value):
        return None
    size = int(value)
    if 0 < size < 100:
        return size
    return None


def edit_field(draft: ReservationDraft, field: str, raw_value: str) -> FieldEditResult:
    """
    Manually correct one draft field.

    Invalid input is reported in the result and leaves the draft unchanged.
    """
    if field not in _ATTRIBUTES:
        return FieldEditResult(accepted=False, reservation_data=draft, error=f"Unknown field: {field}")

    if field == "partySize":
        size = _parse_party_size(raw_value)
        if size is None:
            return FieldEditResult(
                accepted=False,
                reservation_data=draft,
                error="Party size must be a whole number between 1 and 99",
            )
        value: Any = size
    elif field == "time":
        value = normalize_time_input(raw_value) or None
    else:
        value = raw_value.strip() or None

    sources = dict(draft.sources)
    sources[field] = FieldSource.USER
    updated = draft.model_copy(update={_ATTRIBUTES[field]: value, "sources": sources})
    return FieldEditResult(accepted=True, reservation_data=updated)

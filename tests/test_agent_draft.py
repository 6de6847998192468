"""Tests for reservation draft state and manual field edits"""

from uuid import uuid4

import pytest

from hostmate.agent.draft import draft_state, edit_field, merge_fields, missing_fields, normalize_time_input
from hostmate.schemas.agent import Collecting, FieldSource, Finalized, Ready, ReservationDraft


def complete_draft(**overrides) -> ReservationDraft:
    values = {
        "customerName": "Jane Doe",
        "partySize": 4,
        "date": "2024-06-01",
        "time": "19:00",
        "email": "jane@example.com",
        "phone": "555-123-4567",
    }
    values.update(overrides)
    return ReservationDraft(**values)


def test_empty_draft_is_collecting_everything():
    """Missing fields are listed in prompt order"""
    state = draft_state(ReservationDraft())

    assert isinstance(state, Collecting)
    assert state.missing == ["customerName", "partySize", "date", "time", "email", "phone"]


def test_complete_draft_is_ready():
    assert isinstance(draft_state(complete_draft()), Ready)


def test_blank_string_counts_as_missing():
    draft = complete_draft(phone="   ")

    assert missing_fields(draft) == ["phone"]
    assert isinstance(draft_state(draft), Collecting)


def test_draft_with_reservation_id_is_finalized():
    reservation_id = uuid4()
    state = draft_state(complete_draft(reservationId=reservation_id))

    assert isinstance(state, Finalized)
    assert state.reservation_id == reservation_id


def test_draft_serializes_with_camel_case_keys():
    """Wire format uses camelCase and _sources"""
    draft = ReservationDraft(partySize=2, _sources={"partySize": "user"})
    data = draft.model_dump(by_alias=True)

    assert data["partySize"] == 2
    assert data["_sources"] == {"partySize": FieldSource.USER}


def test_merge_fields_marks_only_changed_fields():
    draft = ReservationDraft(partySize=4, _sources={"partySize": "inferred"})

    merged, changed = merge_fields(draft, {"partySize": 4, "date": "2024-06-01"}, FieldSource.USER)

    assert changed == ["date"]
    assert merged.date == "2024-06-01"
    assert merged.sources == {"partySize": FieldSource.INFERRED, "date": FieldSource.USER}
    # Original draft untouched
    assert draft.date is None


@pytest.mark.parametrize("raw", ["0", "-5", "abc", "150", "", "4.5"])
def test_edit_party_size_rejects_invalid_values(raw):
    """Rejected edits leave the draft unchanged"""
    draft = complete_draft(partySize=2)

    result = edit_field(draft, "partySize", raw)

    assert result.accepted is False
    assert result.error
    assert result.reservation_data == draft


def test_edit_party_size_accepts_valid_value():
    draft = complete_draft(partySize=2, _sources={"partySize": "inferred"})

    result = edit_field(draft, "partySize", "4")

    assert result.accepted is True
    assert result.reservation_data.party_size == 4
    assert result.reservation_data.sources["partySize"] == FieldSource.USER


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("7", "07:00"),
        ("19", "19:00"),
        ("7:30", "7:30"),
        ("19:45", "19:45"),
        ("7:3", "7:3"),
    ],
)
def test_normalize_time_input(raw, expected):
    """Bare hours are padded; everything else is kept as typed"""
    assert normalize_time_input(raw) == expected


def test_edit_time_pads_bare_hour():
    result = edit_field(complete_draft(), "time", "7")

    assert result.accepted is True
    assert result.reservation_data.time == "07:00"
    assert result.reservation_data.sources["time"] == FieldSource.USER


def test_edit_unknown_field_is_rejected():
    draft = complete_draft()

    result = edit_field(draft, "table", "5")

    assert result.accepted is False
    assert result.reservation_data == draft


def test_edit_blank_value_clears_field():
    result = edit_field(complete_draft(), "email", "  ")

    assert result.accepted is True
    assert result.reservation_data.email is None
    assert missing_fields(result.reservation_data) == ["email"]


def test_edit_strips_text_fields():
    result = edit_field(complete_draft(), "customerName", "  Ann Lee ")

    assert result.reservation_data.customer_name == "Ann Lee"

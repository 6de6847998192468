"""Tests for reservation email rendering and the email queue"""

from datetime import datetime, timedelta
from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from hostmate.models.email_queue import EmailQueueEntry
from hostmate.models.reservation import Reservation
from hostmate.services.email import EmailSender, process_email_queue, render_email

TOKEN = "abcdef0123456789abcdef0123456789"


class RecordingSender(EmailSender):
    """Collects sent emails; fails for addresses listed in ``failing``"""

    def __init__(self, failing=()):
        self.sent = []
        self.failing = set(failing)

    async def send(self, to_email: str, subject: str, body: str) -> None:
        if to_email in self.failing:
            raise ConnectionError("mailbox unavailable")
        self.sent.append(to_email)


def guest_reservation(**overrides) -> Reservation:
    values = dict(
        datetime=datetime(2024, 6, 1, 19, 0),
        party_size=4,
        status="pending",
        guest_name="Jane Doe",
        guest_email="jane@example.com",
        guest_phone="555-123-4567",
        reservation_token=TOKEN,
    )
    values.update(overrides)
    return Reservation(**values)


def test_confirmation_email_subject_and_lookup_link():
    email = render_email(guest_reservation(), "confirmation")

    assert email.to_email == "jane@example.com"
    assert email.subject == "HostMate - Reservation Confirmation #23456789"
    assert f"/reservation-lookup?token={TOKEN}&email=jane%40example.com" in email.body
    assert "Jane Doe" in email.body
    assert "Party size: 4" in email.body


def test_cancellation_email_subject():
    email = render_email(guest_reservation(status="cancelled"), "cancellation")

    assert email.subject == "HostMate - Reservation Cancelled #23456789"
    assert "has been cancelled" in email.body


def test_account_reservation_uses_contact_details():
    reservation = guest_reservation(
        guest_name=None,
        guest_email=None,
        guest_phone=None,
        contact_name="Sam Rivera",
        contact_email="sam@example.com",
    )
    reservation.user_id = uuid4()

    email = render_email(reservation, "confirmation")

    assert email.to_email == "sam@example.com"
    assert "Sam Rivera" in email.body


async def queue_entries(db, count, to_email="guest@example.com"):
    start = datetime(2024, 6, 1, 8, 0)
    for i in range(count):
        db.add(
            EmailQueueEntry(
                to_email=f"{i}-{to_email}",
                subject=f"Email {i}",
                body="body",
                email_type="confirmation",
                created_at=start + timedelta(minutes=i),
            )
        )
    await db.commit()


@pytest.mark.asyncio
async def test_process_queue_sends_oldest_batch(test_db):
    """At most one batch is processed, oldest first"""
    await queue_entries(test_db, 12)
    sender = RecordingSender()

    result = await process_email_queue(test_db, sender, batch_size=10)

    assert result.processed == 10
    assert sender.sent == [f"{i}-guest@example.com" for i in range(10)]

    pending = (
        await test_db.execute(select(EmailQueueEntry.subject).where(EmailQueueEntry.status == "pending"))
    ).scalars().all()
    assert sorted(pending) == ["Email 10", "Email 11"]

    sent = (
        await test_db.execute(select(EmailQueueEntry).where(EmailQueueEntry.status == "sent"))
    ).scalars().all()
    assert all(entry.sent_at is not None for entry in sent)


@pytest.mark.asyncio
async def test_process_queue_marks_failures(test_db):
    await queue_entries(test_db, 2)
    sender = RecordingSender(failing={"1-guest@example.com"})

    result = await process_email_queue(test_db, sender, batch_size=10)

    statuses = {item.status for item in result.results}
    assert statuses == {"sent", "failed"}

    failed = (
        await test_db.execute(select(EmailQueueEntry).where(EmailQueueEntry.status == "failed"))
    ).scalar_one()
    assert failed.error_message == "mailbox unavailable"
    assert failed.sent_at is None


@pytest.mark.asyncio
async def test_process_queue_with_nothing_pending(test_db):
    result = await process_email_queue(test_db, RecordingSender())

    assert result.success is True
    assert result.processed == 0


@pytest.mark.asyncio
async def test_process_queue_endpoint_requires_api_key(client: AsyncClient):
    missing = await client.post("/process-email-queue")
    wrong = await client.post("/process-email-queue", headers={"x-api-key": "nope"})

    assert missing.status_code == 401
    assert wrong.status_code == 401


@pytest.mark.asyncio
async def test_process_queue_endpoint(client: AsyncClient, test_db):
    await queue_entries(test_db, 3)

    response = await client.post("/process-email-queue", headers={"x-api-key": "change-me"})

    assert response.status_code == 200
    assert response.json()["processed"] == 3


@pytest.mark.asyncio
async def test_send_email_endpoint_queues_cancellation(client: AsyncClient, test_db, test_tables):
    reservation = guest_reservation(table_id=test_tables[0].id, status="cancelled")
    test_db.add(reservation)
    await test_db.commit()

    response = await client.post(
        "/send-email",
        headers={"x-api-key": "change-me"},
        json={"reservation": {"id": str(reservation.id)}, "type": "cancellation"},
    )

    assert response.status_code == 200
    assert response.json()["success"] is True

    entry = (await test_db.execute(select(EmailQueueEntry))).scalar_one()
    assert entry.email_type == "cancellation"
    assert entry.subject == "HostMate - Reservation Cancelled #23456789"
    assert str(entry.id) == response.json()["queue_id"]


@pytest.mark.asyncio
async def test_send_email_unknown_reservation(client: AsyncClient):
    response = await client.post(
        "/send-email",
        headers={"x-api-key": "change-me"},
        json={"reservation": {"id": "00000000-0000-0000-0000-000000000000"}, "type": "confirmation"},
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_send_email_requires_caller(client: AsyncClient, test_db, test_tables):
    reservation = guest_reservation(table_id=test_tables[0].id)
    test_db.add(reservation)
    await test_db.commit()

    anonymous = await client.post(
        "/send-email",
        json={"reservation": {"id": str(reservation.id)}, "type": "confirmation"},
    )
    wrong_key = await client.post(
        "/send-email",
        headers={"x-api-key": "nope"},
        json={"reservation": {"id": str(reservation.id)}, "type": "confirmation"},
    )

    assert anonymous.status_code == 401
    assert wrong_key.status_code == 401
    assert (await test_db.execute(select(EmailQueueEntry))).scalars().all() == []


@pytest.mark.asyncio
async def test_send_email_rejects_other_customers(authenticated_client: AsyncClient, test_db, test_tables):
    """A signed-in customer cannot trigger mail for someone else's booking"""
    reservation = guest_reservation(table_id=test_tables[0].id)
    test_db.add(reservation)
    await test_db.commit()

    response = await authenticated_client.post(
        "/send-email",
        json={"reservation": {"id": str(reservation.id)}, "type": "cancellation"},
    )

    assert response.status_code == 403
    assert (await test_db.execute(select(EmailQueueEntry))).scalars().all() == []


@pytest.mark.asyncio
async def test_send_email_allows_owner(authenticated_client: AsyncClient, test_db, test_tables, test_user):
    reservation = Reservation(
        table_id=test_tables[0].id,
        datetime=datetime(2024, 6, 1, 19, 0),
        party_size=2,
        status="pending",
        user_id=test_user.id,
        contact_name="Test User",
        contact_email="test@example.com",
        contact_phone="555-123-4567",
    )
    test_db.add(reservation)
    await test_db.commit()

    response = await authenticated_client.post(
        "/send-email",
        json={"reservation": {"id": str(reservation.id)}, "type": "confirmation"},
    )

    assert response.status_code == 200
    entry = (await test_db.execute(select(EmailQueueEntry))).scalar_one()
    assert entry.to_email == "test@example.com"


@pytest.mark.asyncio
async def test_send_email_allows_admin(admin_client: AsyncClient, test_db, test_tables):
    reservation = guest_reservation(table_id=test_tables[0].id)
    test_db.add(reservation)
    await test_db.commit()

    response = await admin_client.post(
        "/send-email",
        json={"reservation": {"id": str(reservation.id)}, "type": "confirmation"},
    )

    assert response.status_code == 200

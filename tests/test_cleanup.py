"""Tests for the past-reservation retention sweep"""

import asyncio
from datetime import datetime
from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from hostmate.models.audit import AuditLog
from hostmate.models.email_queue import EmailQueueEntry
from hostmate.models.reservation import Reservation
from hostmate.models.table import DiningTable
from hostmate.services.cleanup import cleanup_past_reservations, cutoff_for, preview_past_reservations

NOW = datetime(2024, 6, 2, 10, 0)


class BrokenSession:
    """Session whose every query fails"""

    async def execute(self, *args, **kwargs):
        raise RuntimeError("database unavailable")

    async def commit(self):
        pass

    async def rollback(self):
        pass


async def add_reservation(db, table, when, email="guest@example.com", name="Guest", status="pending"):
    reservation = Reservation(
        table_id=table.id,
        datetime=when,
        party_size=2,
        status=status,
        guest_name=name,
        guest_email=email,
        guest_phone="555-123-4567",
    )
    db.add(reservation)
    await db.commit()
    return reservation


@pytest.fixture
async def mixed_reservations(test_db, test_tables):
    """Rows either side of the 2024-06-02 cutoff, one with a queued email"""
    table = test_tables[0]
    just_before = await add_reservation(test_db, table, datetime(2024, 6, 1, 23, 59, 59, 999000), name="Just Before")
    long_ago = await add_reservation(test_db, table, datetime(2024, 5, 1, 12, 0), name="Long Ago", status="cancelled")
    at_midnight = await add_reservation(test_db, table, datetime(2024, 6, 2, 0, 0), name="At Midnight")
    future = await add_reservation(test_db, table, datetime(2024, 6, 10, 19, 0), name="Future")

    test_db.add(
        EmailQueueEntry(
            to_email="guest@example.com",
            subject="HostMate - Reservation Confirmation #12345678",
            body="...",
            email_type="confirmation",
            reservation_id=just_before.id,
        )
    )
    await test_db.commit()

    return {
        "just_before": just_before.id,
        "long_ago": long_ago.id,
        "at_midnight": at_midnight.id,
        "future": future.id,
    }


def test_cutoff_is_start_of_utc_day():
    assert cutoff_for(datetime(2024, 6, 2, 10, 30, 15, 5)) == datetime(2024, 6, 2)
    assert cutoff_for(datetime(2024, 6, 2)) == datetime(2024, 6, 2)


@pytest.mark.asyncio
async def test_sweep_deletes_only_rows_before_cutoff(test_db, mixed_reservations):
    """Exactly midnight is kept; one millisecond earlier is deleted"""
    result = await cleanup_past_reservations(test_db, NOW)

    assert result.success is True
    assert result.deleted_count == 2
    assert {r.name for r in result.deleted_reservations} == {"Just Before", "Long Ago"}

    remaining = set((await test_db.execute(select(Reservation.id))).scalars().all())
    assert remaining == {mixed_reservations["at_midnight"], mixed_reservations["future"]}


@pytest.mark.asyncio
async def test_sweep_removes_queued_emails_first(test_db, mixed_reservations):
    await cleanup_past_reservations(test_db, NOW)

    queued = (await test_db.execute(select(EmailQueueEntry))).scalars().all()
    assert queued == []


@pytest.mark.asyncio
async def test_second_sweep_deletes_nothing(test_db, mixed_reservations):
    await cleanup_past_reservations(test_db, NOW)

    again = await cleanup_past_reservations(test_db, NOW)

    assert again.success is True
    assert again.deleted_count == 0
    assert again.deleted_reservations == []


@pytest.mark.asyncio
async def test_sweep_writes_audit_entry(test_db, mixed_reservations):
    await cleanup_past_reservations(test_db, NOW)

    entry = (await test_db.execute(select(AuditLog))).scalar_one()
    assert entry.action == "cleanup_past_reservations"
    assert entry.actor_type == "system"
    assert entry.data_json["deleted_count"] == 2


@pytest.mark.asyncio
async def test_preview_does_not_modify(test_db, mixed_reservations):
    preview = await preview_past_reservations(test_db, NOW)

    assert preview.past_reservations_count == 2
    assert preview.cutoff_date == datetime(2024, 6, 2)
    assert preview.current_time == NOW
    assert len((await test_db.execute(select(Reservation.id))).all()) == 4


@pytest.mark.asyncio
async def test_sweep_reports_database_errors():
    result = await cleanup_past_reservations(BrokenSession(), NOW)

    assert result.success is False
    assert result.error == "database unavailable"


@pytest.mark.asyncio
async def test_cleanup_endpoint_requires_admin(authenticated_client: AsyncClient):
    response = await authenticated_client.post("/cleanup-past-reservations")

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_cleanup_endpoints(admin_client: AsyncClient, test_db, test_tables):
    await add_reservation(test_db, test_tables[0], datetime(2020, 1, 1, 19, 0), name="Old")
    await add_reservation(test_db, test_tables[0], datetime(2099, 1, 1, 19, 0), name="Upcoming")

    preview = await admin_client.get("/cleanup-past-reservations")

    assert preview.status_code == 200
    assert preview.json()["pastReservationsCount"] == 1

    response = await admin_client.post("/cleanup-past-reservations")

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["deletedCount"] == 1
    assert data["deletedReservations"][0]["name"] == "Old"


@pytest.mark.asyncio
async def test_admin_list_sweeps_first(admin_client: AsyncClient, test_db, test_tables):
    """Loading the staff reservation list removes past rows"""
    await add_reservation(test_db, test_tables[0], datetime(2020, 1, 1, 19, 0), name="Old")
    await add_reservation(test_db, test_tables[0], datetime(2099, 1, 1, 19, 0), name="Upcoming")

    response = await admin_client.get("/reservations")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["items"][0]["display_name"] == "Upcoming"


@pytest.mark.asyncio
async def test_concurrent_sweeps_count_each_row_once(file_sessions):
    """Overlapping sweeps split the past rows between them without errors"""
    async with file_sessions() as db:
        table = DiningTable(id=uuid4(), number=1, capacity=2)
        db.add(table)
        await db.commit()
        for day in (1, 2, 3):
            await add_reservation(db, table, datetime(2024, 5, day, 19, 0))

    async def sweep():
        async with file_sessions() as db:
            return await cleanup_past_reservations(db, NOW)

    first, second = await asyncio.gather(sweep(), sweep())

    assert first.success is True
    assert second.success is True
    assert first.deleted_count + second.deleted_count == 3
    async with file_sessions() as db:
        remaining = (await db.execute(select(Reservation))).scalars().all()
    assert remaining == []

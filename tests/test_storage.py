import json
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.models.store import StoreEntry
from src.services import report as report_service
from src.services import storage
from src.utils.constants import SessionStatus, SlotStatus, StorageKey

T0 = datetime(2025, 3, 10, 10, 0, 0, tzinfo=UTC)


async def stored_value(db_session: AsyncSession, key: StorageKey):
    entry = await db_session.get(StoreEntry, key.value)
    return None if entry is None else json.loads(entry.value)


@pytest.mark.asyncio
async def test_first_run_seeds_default_slots(db_session: AsyncSession):
    engine = await storage.load_engine(db_session, settings)

    assert [s.slot_number for s in engine.slots] == [
        f"P-{i:02d}" for i in range(1, settings.initial_slot_count + 1)
    ]
    assert [s.id for s in engine.slots] == [
        str(i) for i in range(1, settings.initial_slot_count + 1)
    ]
    assert all(s.status == SlotStatus.AVAILABLE for s in engine.slots)
    assert engine.vehicles == ()
    assert engine.sessions == ()
    assert engine.payments == ()
    assert engine.hourly_rate == settings.hourly_rate


@pytest.mark.asyncio
async def test_save_and_reload(db_session: AsyncSession):
    engine = await storage.load_engine(db_session, settings)
    engine.register_vehicle("RAC123A", "Jane")
    slot = engine.add_slot("P-10")
    finished = engine.start_session("RAC123A", slot.id, T0)
    engine.end_session(finished.id, T0 + timedelta(minutes=90))
    active = engine.start_session("RAC123A", slot.id, T0 + timedelta(hours=3))

    await storage.save_snapshot(db_session, engine)
    await db_session.commit()

    assert len(await stored_value(db_session, StorageKey.SLOTS)) == settings.initial_slot_count + 1
    assert len(await stored_value(db_session, StorageKey.VEHICLES)) == 1
    assert len(await stored_value(db_session, StorageKey.PAYMENTS)) == 1

    reloaded = await storage.load_engine(db_session, settings)
    assert reloaded.slots == engine.slots
    assert reloaded.vehicles == engine.vehicles
    assert reloaded.sessions == engine.sessions
    assert reloaded.payments == engine.payments
    assert reloaded.get_session(active.id).status == SessionStatus.ACTIVE
    assert reloaded.get_slot(slot.id).status == SlotStatus.OCCUPIED


@pytest.mark.asyncio
async def test_saving_twice_updates_in_place(db_session: AsyncSession):
    engine = await storage.load_engine(db_session, settings)
    await storage.save_snapshot(db_session, engine)
    engine.register_vehicle("RAC123A", "Jane")
    await storage.save_snapshot(db_session, engine)
    await db_session.commit()

    result = await db_session.execute(select(StoreEntry))
    assert len(result.scalars().all()) == len(StorageKey)
    assert await stored_value(db_session, StorageKey.VEHICLES) == [
        {"plate_number": "RAC123A", "driver_name": "Jane", "phone_number": None}
    ]


@pytest.mark.asyncio
async def test_stored_empty_slot_list_is_not_reseeded(db_session: AsyncSession):
    db_session.add(StoreEntry(key=StorageKey.SLOTS.value, value="[]"))
    await db_session.commit()

    engine = await storage.load_engine(db_session, settings)
    assert engine.slots == ()


@pytest.mark.asyncio
async def test_malformed_data_is_treated_as_empty(db_session: AsyncSession):
    db_session.add_all(
        [
            StoreEntry(key=StorageKey.SLOTS.value, value="{not json"),
            StoreEntry(key=StorageKey.VEHICLES.value, value='[{"plate_number": 12}]'),
            StoreEntry(key=StorageKey.SESSIONS.value, value='{"id": "TKT-1"}'),
            StoreEntry(key=StorageKey.PAYMENTS.value, value="null"),
        ]
    )
    await db_session.commit()

    engine = await storage.load_engine(db_session, settings)
    assert engine.slots == ()
    assert engine.vehicles == ()
    assert engine.sessions == ()
    assert engine.payments == ()


@pytest.mark.asyncio
async def test_stale_slot_status_is_reconciled_on_load(db_session: AsyncSession):
    slots = [{"id": "1", "slot_number": "P-01", "status": "Available"}]
    sessions = [
        {
            "id": "TKT-1",
            "plate_number": "RAC123A",
            "slot_number": "P-01",
            "driver_name": "Jane",
            "entry_time": T0.isoformat(),
            "status": "Active",
        }
    ]
    db_session.add_all(
        [
            StoreEntry(key=StorageKey.SLOTS.value, value=json.dumps(slots)),
            StoreEntry(key=StorageKey.SESSIONS.value, value=json.dumps(sessions)),
        ]
    )
    await db_session.commit()

    engine = await storage.load_engine(db_session, settings)
    assert engine.get_slot("1").status == SlotStatus.OCCUPIED
    assert engine.get_session("TKT-1").entry_time == T0


@pytest.mark.asyncio
async def test_inconsistent_sessions_are_treated_as_empty(db_session: AsyncSession):
    sessions = [
        {
            "id": "TKT-1",
            "plate_number": "RAC123A",
            "slot_number": "P-01",
            "driver_name": "Jane",
            "entry_time": T0.isoformat(),
            "status": "Completed",
        }
    ]
    db_session.add(StoreEntry(key=StorageKey.SESSIONS.value, value=json.dumps(sessions)))
    await db_session.commit()

    engine = await storage.load_engine(db_session, settings)
    assert engine.sessions == ()

    report = report_service.daily_report(engine.sessions, generated_at=T0, day=T0.date())
    assert report.sessions == []

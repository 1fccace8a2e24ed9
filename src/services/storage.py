import json
import logging

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import Settings
from src.models.store import StoreEntry
from src.schemas.parking import Slot
from src.schemas.payment import Payment
from src.schemas.session import ParkingSession
from src.schemas.vehicle import Vehicle
from src.services.engine import ParkingEngine
from src.utils.constants import SLOT_NUMBER_PREFIX, SlotStatus, StorageKey

logger = logging.getLogger(__name__)

COLLECTIONS: dict[StorageKey, TypeAdapter] = {
    StorageKey.SLOTS: TypeAdapter(list[Slot]),
    StorageKey.VEHICLES: TypeAdapter(list[Vehicle]),
    StorageKey.SESSIONS: TypeAdapter(list[ParkingSession]),
    StorageKey.PAYMENTS: TypeAdapter(list[Payment]),
}


def seed_slots(count: int) -> list[Slot]:
    return [
        Slot(
            id=str(i),
            slot_number=f"{SLOT_NUMBER_PREFIX}{i:02d}",
            status=SlotStatus.AVAILABLE,
        )
        for i in range(1, count + 1)
    ]


def decode_collection(key: StorageKey, raw: str) -> list:
    """Decode one stored collection. Anything unreadable is logged and treated as empty."""
    try:
        return COLLECTIONS[key].validate_python(json.loads(raw))
    except (ValueError, ValidationError) as exc:
        logger.warning("Discarding malformed %s data: %s", key.value, exc)
        return []


async def read_store(db: AsyncSession) -> dict[str, str]:
    result = await db.execute(
        select(StoreEntry).where(StoreEntry.key.in_([k.value for k in StorageKey]))
    )
    return {entry.key: entry.value for entry in result.scalars().all()}


async def load_engine(db: AsyncSession, settings: Settings) -> ParkingEngine:
    stored = await read_store(db)
    collections = {}
    for key in StorageKey:
        raw = stored.get(key.value)
        if raw is None:
            collections[key] = []
        else:
            collections[key] = decode_collection(key, raw)

    if StorageKey.SLOTS.value not in stored:
        logger.info("No stored slots, seeding %d default slots", settings.initial_slot_count)
        collections[StorageKey.SLOTS] = seed_slots(settings.initial_slot_count)

    return ParkingEngine(
        hourly_rate=settings.hourly_rate,
        slots=collections[StorageKey.SLOTS],
        vehicles=collections[StorageKey.VEHICLES],
        sessions=collections[StorageKey.SESSIONS],
        payments=collections[StorageKey.PAYMENTS],
    )


async def save_snapshot(db: AsyncSession, engine: ParkingEngine) -> None:
    # Taken before the first await so every key comes from the same state
    snapshot = engine.snapshot()
    for key, records in snapshot.items():
        value = json.dumps(records)
        entry = await db.get(StoreEntry, key.value)
        if entry is None:
            db.add(StoreEntry(key=key.value, value=value))
        else:
            entry.value = value
    await db.flush()
    logger.debug("Stored snapshot version %d", engine.version)

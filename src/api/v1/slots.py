from fastapi import APIRouter, Query

from src.core.dependencies import Engine, OperatorUser
from src.schemas.parking import (
    OccupancySummary,
    Slot,
    SlotCreate,
    SlotListResponse,
    SlotUpdate,
)
from src.services import report as report_service
from src.utils.constants import SlotStatus

router = APIRouter(prefix="/slots", tags=["Parking Slots"])


@router.get("", response_model=SlotListResponse)
async def list_slots(
    engine: Engine,
    operator: OperatorUser,
    status: SlotStatus | None = Query(None),
):
    slots = [s for s in engine.slots if status is None or s.status == status]
    return SlotListResponse(slots=slots, total=len(slots))


@router.post("", response_model=Slot)
async def add_slot(engine: Engine, operator: OperatorUser, data: SlotCreate):
    return engine.add_slot(data.slot_number)


@router.get("/available", response_model=list[Slot])
async def get_available_slots(engine: Engine, operator: OperatorUser):
    return engine.available_slots()


@router.get("/occupancy", response_model=OccupancySummary)
async def get_occupancy(engine: Engine, operator: OperatorUser):
    return report_service.occupancy(engine.slots)


@router.get("/{slot_id}", response_model=Slot)
async def get_slot(engine: Engine, operator: OperatorUser, slot_id: str):
    return engine.get_slot(slot_id)


@router.patch("/{slot_id}", response_model=Slot)
async def rename_slot(engine: Engine, operator: OperatorUser, slot_id: str, data: SlotUpdate):
    return engine.rename_slot(slot_id, data.slot_number)

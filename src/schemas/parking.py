from pydantic import field_validator

from src.schemas.common import BaseSchema, RecordSchema
from src.utils.constants import SlotStatus


class SlotCreate(BaseSchema):
    slot_number: str

    @field_validator("slot_number")
    @classmethod
    def validate_slot_number(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Slot number cannot be empty")
        return v.upper()


class SlotUpdate(SlotCreate):
    pass


class Slot(RecordSchema):
    id: str
    slot_number: str
    status: SlotStatus = SlotStatus.AVAILABLE


class SlotListResponse(BaseSchema):
    slots: list[Slot]
    total: int


class OccupancySummary(BaseSchema):
    total_slots: int
    occupied: int
    available: int
    occupancy_rate: float

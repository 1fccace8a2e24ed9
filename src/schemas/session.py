from datetime import datetime

from pydantic import field_validator, model_validator

from src.schemas.common import BaseSchema, RecordSchema
from src.schemas.payment import Payment
from src.utils.constants import SessionStatus


class SessionStartRequest(BaseSchema):
    plate_number: str
    slot_id: str

    @field_validator("plate_number")
    @classmethod
    def validate_plate_number(cls, v: str) -> str:
        return v.strip().upper()


class ParkingSession(RecordSchema):
    id: str
    plate_number: str
    slot_number: str
    driver_name: str
    entry_time: datetime
    exit_time: datetime | None = None
    duration: int | None = None
    amount_paid: float | None = None
    status: SessionStatus = SessionStatus.ACTIVE

    @model_validator(mode="after")
    def check_status_fields(self) -> "ParkingSession":
        billed = (self.exit_time, self.duration, self.amount_paid)
        if self.status == SessionStatus.ACTIVE:
            if any(value is not None for value in billed):
                raise ValueError("An active session has no exit time, duration or amount")
            return self
        if any(value is None for value in billed):
            raise ValueError("A completed session needs exit time, duration and amount")
        if self.duration < 1:
            raise ValueError("A completed session bills at least one hour")
        return self


class SessionListResponse(BaseSchema):
    sessions: list[ParkingSession]
    total: int


class FeeCalculation(BaseSchema):
    elapsed_seconds: int
    elapsed: str
    duration_hours: int
    hourly_rate: float
    amount: float


class LiveFeeResponse(BaseSchema):
    session_id: str
    status: SessionStatus
    entry_time: datetime
    as_of: datetime
    fee: FeeCalculation
    currency: str


class SessionExitResponse(BaseSchema):
    session: ParkingSession
    payment: Payment
    currency: str

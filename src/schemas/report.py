from datetime import date, datetime

from src.schemas.common import BaseSchema
from src.schemas.session import ParkingSession


class RevenueData(BaseSchema):
    date: date
    amount: float
    transaction_count: int


class RevenueReport(BaseSchema):
    data: list[RevenueData]
    total_revenue: float
    currency: str = ""


class SlotUsage(BaseSchema):
    slot_number: str
    session_count: int


class TopSlotsReport(BaseSchema):
    slots: list[SlotUsage]


class DailyReport(BaseSchema):
    generated_at: datetime
    day: date | None = None
    sessions: list[ParkingSession]
    total_sessions: int
    grand_total: float
    currency: str = ""

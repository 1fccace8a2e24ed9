from datetime import datetime

from src.schemas.common import BaseSchema, RecordSchema


class Payment(RecordSchema):
    id: str
    session_id: str
    plate_number: str
    amount_paid: float
    payment_date: datetime


class PaymentListResponse(BaseSchema):
    payments: list[Payment]
    total: int


class PaymentSummary(BaseSchema):
    total_amount: float
    payment_count: int
    today_count: int
    average_amount: float
    currency: str = ""

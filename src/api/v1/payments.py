from fastapi import APIRouter

from src.core.dependencies import AppSettings, Engine, OperatorUser, Today
from src.schemas.payment import PaymentListResponse, PaymentSummary
from src.services import report as report_service

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.get("", response_model=PaymentListResponse)
async def list_payments(engine: Engine, operator: OperatorUser):
    payments = list(engine.payments)
    return PaymentListResponse(payments=payments, total=len(payments))


@router.get("/summary", response_model=PaymentSummary)
async def get_payment_summary(
    engine: Engine, operator: OperatorUser, settings: AppSettings, today: Today
):
    summary = report_service.summarize_payments(engine.payments, today)
    summary.currency = settings.currency
    return summary

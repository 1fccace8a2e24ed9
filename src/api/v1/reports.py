from datetime import date

from fastapi import APIRouter, Query

from src.core.dependencies import AppSettings, Engine, Now, OperatorUser
from src.schemas.report import DailyReport, RevenueReport, TopSlotsReport
from src.services import report as report_service

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/revenue", response_model=RevenueReport)
async def get_revenue(engine: Engine, operator: OperatorUser, settings: AppSettings):
    report = report_service.revenue_by_day(engine.payments)
    report.currency = settings.currency
    return report


@router.get("/top-slots", response_model=TopSlotsReport)
async def get_top_slots(
    engine: Engine,
    operator: OperatorUser,
    settings: AppSettings,
    limit: int | None = Query(None, ge=1, le=100),
):
    slots = report_service.top_slots(engine.sessions, limit or settings.top_slots_limit)
    return TopSlotsReport(slots=slots)


@router.get("/daily", response_model=DailyReport)
async def get_daily_report(
    engine: Engine,
    operator: OperatorUser,
    settings: AppSettings,
    now: Now,
    day: date | None = Query(None),
):
    report = report_service.daily_report(engine.sessions, generated_at=now, day=day)
    report.currency = settings.currency
    return report

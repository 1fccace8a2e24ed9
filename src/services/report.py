from collections import Counter, defaultdict
from collections.abc import Iterable
from datetime import date, datetime

from src.schemas.parking import OccupancySummary, Slot
from src.schemas.payment import Payment, PaymentSummary
from src.schemas.report import DailyReport, RevenueData, RevenueReport, SlotUsage
from src.schemas.session import ParkingSession
from src.schemas.vehicle import Vehicle
from src.services.fees import as_utc
from src.utils.constants import SessionStatus, SessionStatusFilter, SlotStatus


def entry_day(session: ParkingSession) -> date:
    return as_utc(session.entry_time).date()


def filter_sessions(
    sessions: Iterable[ParkingSession],
    plate: str = "",
    status: SessionStatusFilter = SessionStatusFilter.ALL,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[ParkingSession]:
    """Plate substring, status and inclusive entry-date range, compared by calendar day."""
    status = SessionStatusFilter(status)
    needle = plate.strip().lower()
    result = []
    for session in sessions:
        if needle not in session.plate_number.lower():
            continue
        if status != SessionStatusFilter.ALL and session.status.value != status.value:
            continue
        day = entry_day(session)
        if start_date is not None and day < start_date:
            continue
        if end_date is not None and day > end_date:
            continue
        result.append(session)
    return result


def filter_vehicles(vehicles: Iterable[Vehicle], query: str = "") -> list[Vehicle]:
    needle = query.strip().lower()
    return [
        v
        for v in vehicles
        if needle in v.plate_number.lower() or needle in v.driver_name.lower()
    ]


def summarize_payments(payments: Iterable[Payment], today: date) -> PaymentSummary:
    payments = list(payments)
    total = sum(p.amount_paid for p in payments)
    today_count = sum(1 for p in payments if as_utc(p.payment_date).date() == today)
    average = total / len(payments) if payments else 0

    return PaymentSummary(
        total_amount=round(total, 2),
        payment_count=len(payments),
        today_count=today_count,
        average_amount=round(average, 2),
    )


def revenue_by_day(payments: Iterable[Payment]) -> RevenueReport:
    amounts: dict[date, float] = defaultdict(float)
    counts: Counter[date] = Counter()
    for payment in payments:
        day = as_utc(payment.payment_date).date()
        amounts[day] += payment.amount_paid
        counts[day] += 1

    data = [
        RevenueData(date=day, amount=round(amounts[day], 2), transaction_count=counts[day])
        for day in sorted(amounts)
    ]
    return RevenueReport(data=data, total_revenue=round(sum(amounts.values()), 2))


def top_slots(sessions: Iterable[ParkingSession], limit: int = 5) -> list[SlotUsage]:
    # Counter keeps first-seen order and most_common sorts stably, so ties keep it too
    usage = Counter(s.slot_number for s in sessions)
    return [
        SlotUsage(slot_number=number, session_count=count)
        for number, count in usage.most_common(limit)
    ]


def occupancy(slots: Iterable[Slot]) -> OccupancySummary:
    slots = list(slots)
    occupied = sum(1 for s in slots if s.status == SlotStatus.OCCUPIED)
    rate = (occupied / len(slots) * 100) if slots else 0
    return OccupancySummary(
        total_slots=len(slots),
        occupied=occupied,
        available=len(slots) - occupied,
        occupancy_rate=round(rate, 2),
    )


def daily_report(
    sessions: Iterable[ParkingSession],
    generated_at: datetime,
    day: date | None = None,
) -> DailyReport:
    completed = [s for s in sessions if s.status == SessionStatus.COMPLETED]
    if day is not None:
        completed = [s for s in completed if as_utc(s.exit_time).date() == day]

    return DailyReport(
        generated_at=generated_at,
        day=day,
        sessions=completed,
        total_sessions=len(completed),
        grand_total=round(sum(s.amount_paid or 0 for s in completed), 2),
    )

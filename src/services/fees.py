import math
from datetime import UTC, datetime

from src.core.exceptions import InvalidIntervalError
from src.schemas.session import FeeCalculation
from src.utils.constants import SECONDS_PER_HOUR


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def elapsed_seconds(entry_time: datetime, exit_time: datetime) -> float:
    elapsed = (as_utc(exit_time) - as_utc(entry_time)).total_seconds()
    if elapsed < 0:
        raise InvalidIntervalError(
            f"Exit time {exit_time.isoformat()} is before entry time {entry_time.isoformat()}"
        )
    return elapsed


def billable_hours(entry_time: datetime, exit_time: datetime) -> int:
    """Whole hours to bill, rounded up. Any stay, even a zero-length one, bills one hour."""
    hours = math.ceil(elapsed_seconds(entry_time, exit_time) / SECONDS_PER_HOUR)
    return max(1, hours)


def format_elapsed(entry_time: datetime, now: datetime) -> str:
    total = int(elapsed_seconds(entry_time, now))
    hours, remainder = divmod(total, SECONDS_PER_HOUR)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def calculate_fee(
    entry_time: datetime, exit_time: datetime, hourly_rate: float
) -> FeeCalculation:
    """
    Price a stay between two timestamps.

    Used both when a session is checked out and for the live fee shown while a
    session is still active, so it must not depend on any session state.
    """
    hours = billable_hours(entry_time, exit_time)
    return FeeCalculation(
        elapsed_seconds=int(elapsed_seconds(entry_time, exit_time)),
        elapsed=format_elapsed(entry_time, exit_time),
        duration_hours=hours,
        hourly_rate=hourly_rate,
        amount=round(hours * hourly_rate, 2),
    )

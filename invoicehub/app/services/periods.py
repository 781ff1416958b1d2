"""Reporting-period resolution and calendar bucketing helpers."""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Tuple

DAY = "day"
MONTH = "month"

DEFAULT_PERIOD = "12months"

# token -> (amount, unit)
PERIODS = {
    "7days": (7, DAY),
    "30days": (30, DAY),
    "3months": (3, MONTH),
    "6months": (6, MONTH),
    "12months": (12, MONTH),
    "24months": (24, MONTH),
}


@dataclass(frozen=True)
class ReportingWindow:
    period: str
    start: datetime
    end: datetime
    granularity: str
    previous_start: datetime

    def contains(self, value: date) -> bool:
        return self.start.date() <= value <= self.end.date()

    def contains_previous(self, value: date) -> bool:
        return self.previous_start.date() <= value < self.start.date()


def shift_months(value: datetime, months: int) -> datetime:
    """Move ``value`` by whole months, clamping the day to the target month's length."""
    month_index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def _step_back(value: datetime, amount: int, unit: str) -> datetime:
    if unit == DAY:
        return value - timedelta(days=amount)
    return shift_months(value, -amount)


def resolve_period(period: str, now: datetime) -> ReportingWindow:
    if period not in PERIODS:
        raise ValueError(f"Unsupported period: {period}")
    amount, unit = PERIODS[period]
    start = _step_back(now, amount, unit)
    return ReportingWindow(
        period=period,
        start=start,
        end=now,
        granularity=unit,
        previous_start=_step_back(start, amount, unit),
    )


def bucket_key(value: date, granularity: str) -> str:
    if granularity == DAY:
        return value.strftime("%Y-%m-%d")
    return value.strftime("%Y-%m")


def bucket_keys(start: date, end: date, granularity: str) -> List[str]:
    """Every day or month key from ``start`` to ``end`` inclusive, ascending."""
    keys = []
    if granularity == DAY:
        current = start
        while current <= end:
            keys.append(bucket_key(current, DAY))
            current += timedelta(days=1)
        return keys

    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        keys.append(f"{year:04d}-{month:02d}")
        month += 1
        if month == 13:
            month = 1
            year += 1
    return keys


def next_bucket_keys(last_key: str, granularity: str, count: int) -> List[str]:
    """Keys of the ``count`` buckets following ``last_key``."""
    if granularity == DAY:
        last = datetime.strptime(last_key, "%Y-%m-%d").date()
        return [bucket_key(last + timedelta(days=offset), DAY) for offset in range(1, count + 1)]

    last = datetime.strptime(last_key, "%Y-%m")
    return [bucket_key(shift_months(last, offset).date(), MONTH) for offset in range(1, count + 1)]


def last_n_months(today: date, n: int = 12) -> List[Tuple[int, int]]:
    # returns list from oldest to newest
    year = today.year
    month = today.month
    months = []
    for _ in range(n):
        months.append((year, month))
        month -= 1
        if month == 0:
            month = 12
            year -= 1
    return list(reversed(months))

"""Resolve the current occurrence of a budget period.

Everything here is pure: callers pass ``now`` explicitly, so the same inputs
always produce the same window.
"""

from __future__ import annotations

import math
from calendar import monthrange
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Optional

from ..logging_config import get_logger
from ..models.budget import BudgetPeriod

logger = get_logger("periods")

END_OF_DAY = time(23, 59, 59, 999000)
FAR_FUTURE_YEARS = 10
SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True, slots=True)
class Period:
    """A concrete ``[start, end]`` window, both ends inclusive."""

    start: datetime
    end: datetime

    @property
    def total_days(self) -> int:
        """Day-count of the window; 0 only when start == end."""
        span = (self.end - self.start).total_seconds()
        return max(0, math.ceil(span / SECONDS_PER_DAY))

    def elapsed_days(self, now: datetime) -> int:
        """Calendar days from start through ``now`` inclusive, clamped to the window."""
        if now < self.start:
            return 0
        days = (now.date() - self.start.date()).days + 1
        total = self.total_days
        return min(days, total) if total else days


def _start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def _end_of_day(value: datetime) -> datetime:
    return value.replace(
        hour=END_OF_DAY.hour,
        minute=END_OF_DAY.minute,
        second=END_OF_DAY.second,
        microsecond=END_OF_DAY.microsecond,
    )


def _align(value: datetime, now: datetime) -> datetime:
    # Stored dates come back naive from SQLite; borrow the caller's tzinfo.
    if value.tzinfo is None and now.tzinfo is not None:
        return value.replace(tzinfo=now.tzinfo)
    return value


def _open_ended(start_date: datetime, end_date: Optional[datetime], now: datetime) -> Period:
    start = _align(start_date, now)
    if end_date is not None:
        return Period(start=start, end=_align(end_date, now))
    sentinel = _end_of_day(now.replace(year=now.year + FAR_FUTURE_YEARS, month=12, day=31))
    return Period(start=start, end=sentinel)


def resolve_period(
    period: str,
    start_date: datetime,
    end_date: Optional[datetime],
    now: datetime,
    *,
    week_start: int = 0,
) -> Period:
    """Return the window of ``period`` that contains ``now``.

    Args:
        period: One of ``daily``, ``weekly``, ``monthly``, ``yearly``, ``custom``.
        start_date: Budget anchor; only used by ``custom`` (and unknown periods).
        end_date: Optional budget end; ``custom`` without it is open-ended.
        now: Current timestamp. Naive values are treated as local time.
        week_start: Weekday a weekly period begins on (Monday=0 ... Sunday=6).

    Returns:
        Period with ``start`` at 00:00:00.000 and ``end`` at 23:59:59.999,
        except ``custom`` which uses the budget's own dates.
    """
    if period == BudgetPeriod.DAILY.value:
        return Period(start=_start_of_day(now), end=_end_of_day(now))

    if period == BudgetPeriod.WEEKLY.value:
        offset = (now.weekday() - week_start) % 7
        start = _start_of_day(now - timedelta(days=offset))
        return Period(start=start, end=_end_of_day(start + timedelta(days=6)))

    if period == BudgetPeriod.MONTHLY.value:
        last_day = monthrange(now.year, now.month)[1]
        start = _start_of_day(now.replace(day=1))
        return Period(start=start, end=_end_of_day(now.replace(day=last_day)))

    if period == BudgetPeriod.YEARLY.value:
        start = _start_of_day(now.replace(month=1, day=1))
        return Period(start=start, end=_end_of_day(now.replace(month=12, day=31)))

    if period != BudgetPeriod.CUSTOM.value:
        logger.warning("Unknown budget period; using budget dates", extra={"period": period})
    return _open_ended(start_date, end_date, now)

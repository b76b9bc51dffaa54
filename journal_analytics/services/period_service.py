"""Reporting-period selection (week, month, quarter, year, all time)."""

from datetime import datetime, timedelta, tzinfo
from enum import Enum
from typing import Optional, Union

from journal_analytics.models import PeriodRange, TradeRecord
from journal_analytics.clock import wall_clock

SUNDAY = 6
MONDAY = 0

_LAST_MICROSECOND = timedelta(microseconds=1)


class PeriodKey(str, Enum):
    """Available reporting periods."""
    ALL = "all"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


PERIOD_LABELS = {
    PeriodKey.ALL: "All Time",
    PeriodKey.WEEK: "Weekly",
    PeriodKey.MONTH: "Monthly",
    PeriodKey.QUARTER: "Quarterly",
    PeriodKey.YEAR: "Yearly",
}


def parse_period(period: Union[PeriodKey, str, None]) -> PeriodKey:
    """Resolve a period key, falling back to all time for anything unknown."""
    if isinstance(period, PeriodKey):
        return period
    try:
        return PeriodKey((period or "").strip().lower())
    except ValueError:
        return PeriodKey.ALL


def parse_week_start(name: str) -> int:
    """Map 'sunday'/'monday' to a datetime.weekday() number."""
    return MONDAY if name.strip().lower() == "monday" else SUNDAY


def period_bounds(
    period: Union[PeriodKey, str, None],
    now: datetime,
    week_start: int = SUNDAY,
    tz: Optional[tzinfo] = None,
) -> Optional[tuple[datetime, datetime]]:
    """
    Compute the inclusive ``(start, end)`` of the calendar period containing ``now``.

    Both ends are naive wall-clock times in the reporting timezone; ``end`` is
    the last microsecond of the period. Returns None for all time.
    """
    key = parse_period(period)
    if key == PeriodKey.ALL:
        return None

    local_now = wall_clock(now, tz)
    midnight = local_now.replace(hour=0, minute=0, second=0, microsecond=0)

    if key == PeriodKey.WEEK:
        start = midnight - timedelta(days=(midnight.weekday() - week_start) % 7)
        next_start = start + timedelta(days=7)
    elif key == PeriodKey.MONTH:
        start = midnight.replace(day=1)
        next_start = _add_months(start, 1)
    elif key == PeriodKey.QUARTER:
        first_month = 3 * ((midnight.month - 1) // 3) + 1
        start = midnight.replace(month=first_month, day=1)
        next_start = _add_months(start, 3)
    else:
        start = midnight.replace(month=1, day=1)
        next_start = start.replace(year=start.year + 1)

    return start, next_start - _LAST_MICROSECOND


def period_range(
    period: Union[PeriodKey, str, None],
    now: datetime,
    week_start: int = SUNDAY,
    tz: Optional[tzinfo] = None,
) -> PeriodRange:
    """Describe the period containing ``now`` as a response model."""
    key = parse_period(period)
    bounds = period_bounds(key, now, week_start=week_start, tz=tz)
    if bounds is None:
        return PeriodRange(period=key.value)
    start, end = bounds
    return PeriodRange(period=key.value, start=start, end=end)


def select_period(
    trades: list[TradeRecord],
    period: Union[PeriodKey, str, None],
    now: datetime,
    week_start: int = SUNDAY,
    tz: Optional[tzinfo] = None,
) -> list[TradeRecord]:
    """
    Filter trades to those opened inside the reporting period containing ``now``.

    Args:
        trades: Trades in any order; order is preserved
        period: all, week, month, quarter or year (unknown keys mean all)
        now: Reference time, supplied by the caller
        week_start: First day of the week as a datetime.weekday() number
        tz: Reporting timezone for aware timestamps (UTC when None)

    Returns:
        The input list itself for all time, otherwise a new filtered list
    """
    bounds = period_bounds(period, now, week_start=week_start, tz=tz)
    if bounds is None:
        return trades

    start, end = bounds
    return [t for t in trades if start <= wall_clock(t.openedAt, tz) <= end]


def _add_months(moment: datetime, months: int) -> datetime:
    """Shift a first-of-month datetime forward by whole months."""
    month_index = moment.month - 1 + months
    return moment.replace(year=moment.year + month_index // 12, month=month_index % 12 + 1)

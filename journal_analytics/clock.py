"""Wall-clock helpers shared by the calendar-based builders."""

import math
from datetime import datetime, timezone, tzinfo
from typing import Optional


def wall_clock(moment: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """
    Express a timestamp as naive wall-clock time in the reporting timezone.

    Aware timestamps are converted into ``tz`` (UTC when ``tz`` is None).
    Naive timestamps are taken to already be in the reporting timezone,
    so mixed naive/aware inputs still compare.
    """
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(tz or timezone.utc).replace(tzinfo=None)


def minutes_between(start: datetime, end: datetime, tz: Optional[tzinfo] = None) -> int:
    """Whole minutes from ``start`` to ``end``, truncated toward zero. May be negative."""
    seconds = (wall_clock(end, tz) - wall_clock(start, tz)).total_seconds()
    return math.trunc(seconds / 60)

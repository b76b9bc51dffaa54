"""Chart series: equity curve, P&L distribution and holding times."""

import math
from datetime import tzinfo
from typing import Optional

from journal_analytics.models import (
    DistributionBucket,
    EquityPoint,
    HoldingTimePoint,
    TradeRecord,
)
from journal_analytics.clock import minutes_between

# Outer bounds of the histogram are snapped to this before picking a bin width
RANGE_SNAP = 50

# Above this many bins only the occupied ones are emitted
MAX_PREFILL_BUCKETS = 200


def build_equity_curve(
    trades: list[TradeRecord],
    starting_balance: float = 0.0,
) -> list[EquityPoint]:
    """
    Build the running P&L series, one point per trade.

    Trades must already be sorted by openedAt; they are not reordered here.
    """
    points = []
    cumulative = starting_balance
    for index, trade in enumerate(trades):
        pnl = trade.pnl
        cumulative += pnl
        points.append(EquityPoint(
            index=index,
            openedAt=trade.openedAt,
            tradePnL=pnl,
            cumulativeValue=cumulative,
        ))
    return points


def bin_width_for(low: float, high: float) -> int:
    """
    Pick the histogram bin width for an observed P&L range.

    The range is measured between the bounds snapped outward to 50.
    """
    snapped_range = _snap_up(high) - _snap_down(low)
    if snapped_range > 1000:
        return 100
    if snapped_range > 500:
        return 50
    return 25


def build_distribution(trades: list[TradeRecord]) -> list[DistributionBucket]:
    """
    Bucket per-trade P&L into fixed-width bins for a histogram.

    Bins are aligned to multiples of the width. Empty bins inside the
    observed range are kept so the x axis has no gaps, unless the range
    spans more than MAX_PREFILL_BUCKETS bins (an outlier P&L), in which
    case only bins holding at least one trade are returned.
    """
    if not trades:
        return []

    values = [t.pnl for t in trades]
    low, high = min(values), max(values)
    width = bin_width_for(low, high)

    counts: dict[float, int] = {}
    start = math.floor(low / width) * width
    scan_end = _snap_up(high)
    if (scan_end - start) / width <= MAX_PREFILL_BUCKETS:
        while start < scan_end:
            counts[start] = 0
            start += width

    for value in values:
        bucket_start = math.floor(value / width) * width
        counts[bucket_start] = counts.get(bucket_start, 0) + 1

    return [
        DistributionBucket(
            rangeLabel=f"{bucket_start} to {bucket_start + width}",
            bucketStart=bucket_start,
            bucketEnd=bucket_start + width,
            count=count,
        )
        for bucket_start, count in sorted(counts.items())
    ]


def build_holding_time_points(
    trades: list[TradeRecord],
    tz: Optional[tzinfo] = None,
) -> list[HoldingTimePoint]:
    """Pair holding time (minutes) with P&L for every closed trade."""
    return [
        HoldingTimePoint(
            tradeId=t.id,
            minutes=minutes_between(t.openedAt, t.closedAt, tz),
            pnl=t.pnl,
            symbol=t.symbol,
            side=t.side,
        )
        for t in trades
        if t.is_closed
    ]


def _snap_down(value: float) -> int:
    return math.floor(value / RANGE_SNAP) * RANGE_SNAP


def _snap_up(value: float) -> int:
    return math.ceil(value / RANGE_SNAP) * RANGE_SNAP

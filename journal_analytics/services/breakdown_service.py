"""P&L breakdowns by weekday, strategy and symbol."""

from datetime import tzinfo
from typing import Optional

from journal_analytics.models import StrategyStat, SymbolStat, TradeOutcome, TradeRecord, WeekdayBucket
from journal_analytics.clock import wall_clock

# Calendar order, Sunday first; indexed by (datetime.weekday() + 1) % 7
WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
WEEKEND = {"Sat", "Sun"}


def weekday_label(trade: TradeRecord, tz: Optional[tzinfo] = None) -> str:
    """Short name of the weekday the trade was opened on."""
    return WEEKDAY_LABELS[(wall_clock(trade.openedAt, tz).weekday() + 1) % 7]


def build_weekday_stats(trades: list[TradeRecord], tz: Optional[tzinfo] = None) -> list[WeekdayBucket]:
    """
    Sum P&L and count trades per day of the week.

    Monday to Friday are always present. Saturday and Sunday only appear
    when at least one trade was opened on them.
    """
    buckets = {label: WeekdayBucket(day=label) for label in WEEKDAY_LABELS}
    for trade in trades:
        bucket = buckets[weekday_label(trade, tz)]
        bucket.pnl += trade.pnl
        bucket.count += 1

    return [
        bucket for bucket in buckets.values()
        if bucket.day not in WEEKEND or bucket.count > 0
    ]


def build_strategy_stats(trades: list[TradeRecord]) -> list[StrategyStat]:
    """
    Group trades by playbook and rank by net P&L.

    Break-even trades count toward ``trades`` but neither wins nor losses,
    and the win rate is taken over decisive trades only. The full ranked
    list is returned; truncation is up to the caller.
    """
    stats: dict[str, StrategyStat] = {}
    for trade in trades:
        name = trade.strategy_label
        stat = stats.get(name)
        if stat is None:
            stat = stats[name] = StrategyStat(name=name)
        stat.trades += 1
        stat.pnl += trade.pnl
        if trade.outcome == TradeOutcome.WIN:
            stat.wins += 1
        elif trade.outcome == TradeOutcome.LOSS:
            stat.losses += 1

    for stat in stats.values():
        decisive = stat.wins + stat.losses
        stat.winRate = stat.wins / decisive * 100 if decisive else 0.0

    # sorted() is stable, so ties keep first-seen order
    return sorted(stats.values(), key=lambda s: s.pnl, reverse=True)


def build_symbol_stats(trades: list[TradeRecord]) -> list[SymbolStat]:
    """Group trades by instrument and rank by net P&L."""
    stats: dict[str, SymbolStat] = {}
    for trade in trades:
        name = trade.symbol_label
        stat = stats.get(name)
        if stat is None:
            stat = stats[name] = SymbolStat(symbol=name)
        stat.trades += 1
        stat.pnl += trade.pnl

    return sorted(stats.values(), key=lambda s: s.pnl, reverse=True)

from .trade import TradeRecord, TradeOutcome, NO_STRATEGY, UNKNOWN_SYMBOL
from .analytics import (
    MetricsSummary,
    TraderLevel,
    EquityPoint,
    DistributionBucket,
    WeekdayBucket,
    StrategyStat,
    SymbolStat,
    HoldingTimePoint,
    PeriodRange,
    PeriodTrades,
    AnalyticsReport,
)

__all__ = [
    "TradeRecord",
    "TradeOutcome",
    "NO_STRATEGY",
    "UNKNOWN_SYMBOL",
    "MetricsSummary",
    "TraderLevel",
    "EquityPoint",
    "DistributionBucket",
    "WeekdayBucket",
    "StrategyStat",
    "SymbolStat",
    "HoldingTimePoint",
    "PeriodRange",
    "PeriodTrades",
    "AnalyticsReport",
]

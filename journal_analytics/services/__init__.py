from .period_service import PeriodKey, select_period, period_range
from .metrics_service import compute_metrics, classify_trader_level
from .chart_service import build_equity_curve, build_distribution, build_holding_time_points
from .breakdown_service import build_weekday_stats, build_strategy_stats, build_symbol_stats
from .analytics_service import AnalyticsService, build_report

__all__ = [
    "PeriodKey",
    "select_period",
    "period_range",
    "compute_metrics",
    "classify_trader_level",
    "build_equity_curve",
    "build_distribution",
    "build_holding_time_points",
    "build_weekday_stats",
    "build_strategy_stats",
    "build_symbol_stats",
    "AnalyticsService",
    "build_report",
]

"""API routes for the trade journal analytics service."""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from journal_analytics.models import (
    AnalyticsReport,
    DistributionBucket,
    EquityPoint,
    HoldingTimePoint,
    MetricsSummary,
    PeriodRange,
    PeriodTrades,
    StrategyStat,
    SymbolStat,
    WeekdayBucket,
)
from journal_analytics.services import (
    AnalyticsService,
    PeriodKey,
    build_distribution,
    build_equity_curve,
    build_holding_time_points,
    build_strategy_stats,
    build_symbol_stats,
    build_weekday_stats,
    compute_metrics,
    period_range,
)
from .dependencies import get_access_token, get_analytics_service, get_reference_time

router = APIRouter(prefix="/v1")


@router.get("/periods", response_model=list[PeriodRange])
async def get_periods(
    now: datetime = Depends(get_reference_time),
    service: AnalyticsService = Depends(get_analytics_service),
) -> list[PeriodRange]:
    """
    Get the date range of every reporting period.

    Returns: period, start, end (start/end are null for all time)
    """
    return [
        period_range(key, now, week_start=service.week_start, tz=service.tz)
        for key in PeriodKey
    ]


@router.get("/trades", response_model=PeriodTrades)
async def get_trades(
    period: str = Query(
        "all",
        description="Reporting period: all, week, month, quarter or year",
        examples=["month"],
    ),
    now: datetime = Depends(get_reference_time),
    access_token: Optional[str] = Depends(get_access_token),
    service: AnalyticsService = Depends(get_analytics_service),
) -> PeriodTrades:
    """
    Get the trades opened in a reporting period, oldest first.
    """
    return await service.get_period_trades(period, now, access_token=access_token)


@router.get("/analytics", response_model=AnalyticsReport)
async def get_analytics(
    period: str = Query(
        "all",
        description="Reporting period: all, week, month, quarter or year",
        examples=["month"],
    ),
    startingBalance: float = Query(
        0.0,
        description="Balance the equity curve starts from",
        examples=[10000.0],
    ),
    now: datetime = Depends(get_reference_time),
    access_token: Optional[str] = Depends(get_access_token),
    service: AnalyticsService = Depends(get_analytics_service),
) -> AnalyticsReport:
    """
    Get the full analytics report for a reporting period.

    Returns: metrics, traderLevel, equityCurve, distribution, weekdays,
    strategies, symbols, holdingTimes
    """
    return await service.get_report(
        period,
        now,
        access_token=access_token,
        starting_balance=startingBalance,
    )


@router.get("/analytics/metrics", response_model=MetricsSummary)
async def get_metrics(
    period: str = Query(
        "all",
        description="Reporting period: all, week, month, quarter or year",
        examples=["month"],
    ),
    now: datetime = Depends(get_reference_time),
    access_token: Optional[str] = Depends(get_access_token),
    service: AnalyticsService = Depends(get_analytics_service),
) -> MetricsSummary:
    """
    Get the performance summary for a reporting period.

    profitFactor and riskReward are returned as "∞" when there are no losses.
    """
    period_trades = await service.get_period_trades(period, now, access_token=access_token)
    return compute_metrics(period_trades.trades, tz=service.tz)


@router.get("/analytics/equity-curve", response_model=list[EquityPoint])
async def get_equity_curve(
    period: str = Query(
        "all",
        description="Reporting period: all, week, month, quarter or year",
        examples=["month"],
    ),
    startingBalance: float = Query(
        0.0,
        description="Balance the equity curve starts from",
        examples=[10000.0],
    ),
    now: datetime = Depends(get_reference_time),
    access_token: Optional[str] = Depends(get_access_token),
    service: AnalyticsService = Depends(get_analytics_service),
) -> list[EquityPoint]:
    """
    Get the running P&L series, one point per trade.
    """
    period_trades = await service.get_period_trades(period, now, access_token=access_token)
    return build_equity_curve(period_trades.trades, starting_balance=startingBalance)


@router.get("/analytics/distribution", response_model=list[DistributionBucket])
async def get_distribution(
    period: str = Query(
        "all",
        description="Reporting period: all, week, month, quarter or year",
        examples=["month"],
    ),
    now: datetime = Depends(get_reference_time),
    access_token: Optional[str] = Depends(get_access_token),
    service: AnalyticsService = Depends(get_analytics_service),
) -> list[DistributionBucket]:
    """
    Get the P&L histogram buckets.
    """
    period_trades = await service.get_period_trades(period, now, access_token=access_token)
    return build_distribution(period_trades.trades)


@router.get("/analytics/weekdays", response_model=list[WeekdayBucket])
async def get_weekdays(
    period: str = Query(
        "all",
        description="Reporting period: all, week, month, quarter or year",
        examples=["month"],
    ),
    now: datetime = Depends(get_reference_time),
    access_token: Optional[str] = Depends(get_access_token),
    service: AnalyticsService = Depends(get_analytics_service),
) -> list[WeekdayBucket]:
    """
    Get P&L and trade count by day of the week.
    """
    period_trades = await service.get_period_trades(period, now, access_token=access_token)
    return build_weekday_stats(period_trades.trades, tz=service.tz)


@router.get("/analytics/strategies", response_model=list[StrategyStat])
async def get_strategies(
    period: str = Query(
        "all",
        description="Reporting period: all, week, month, quarter or year",
        examples=["month"],
    ),
    limit: Optional[int] = Query(
        None,
        ge=1,
        description="Return only the top N rows",
        examples=[8],
    ),
    now: datetime = Depends(get_reference_time),
    access_token: Optional[str] = Depends(get_access_token),
    service: AnalyticsService = Depends(get_analytics_service),
) -> list[StrategyStat]:
    """
    Get per-strategy performance ranked by net P&L.
    """
    period_trades = await service.get_period_trades(period, now, access_token=access_token)
    stats = build_strategy_stats(period_trades.trades)
    return stats[:limit] if limit else stats


@router.get("/analytics/symbols", response_model=list[SymbolStat])
async def get_symbols(
    period: str = Query(
        "all",
        description="Reporting period: all, week, month, quarter or year",
        examples=["month"],
    ),
    limit: Optional[int] = Query(
        None,
        ge=1,
        description="Return only the top N rows",
        examples=[8],
    ),
    now: datetime = Depends(get_reference_time),
    access_token: Optional[str] = Depends(get_access_token),
    service: AnalyticsService = Depends(get_analytics_service),
) -> list[SymbolStat]:
    """
    Get per-instrument P&L ranked by net P&L.
    """
    period_trades = await service.get_period_trades(period, now, access_token=access_token)
    stats = build_symbol_stats(period_trades.trades)
    return stats[:limit] if limit else stats


@router.get("/analytics/holding-times", response_model=list[HoldingTimePoint])
async def get_holding_times(
    period: str = Query(
        "all",
        description="Reporting period: all, week, month, quarter or year",
        examples=["month"],
    ),
    now: datetime = Depends(get_reference_time),
    access_token: Optional[str] = Depends(get_access_token),
    service: AnalyticsService = Depends(get_analytics_service),
) -> list[HoldingTimePoint]:
    """
    Get holding time against P&L for every closed trade.
    """
    period_trades = await service.get_period_trades(period, now, access_token=access_token)
    return build_holding_time_points(period_trades.trades, tz=service.tz)

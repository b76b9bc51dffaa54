"""Analytics service: fetch trades and run every builder for one period."""

import logging
from datetime import datetime, tzinfo
from typing import Optional, Union

from journal_analytics.datasources import DataSource
from journal_analytics.models import AnalyticsReport, PeriodTrades, TradeRecord
from .breakdown_service import build_strategy_stats, build_symbol_stats, build_weekday_stats
from .chart_service import build_distribution, build_equity_curve, build_holding_time_points
from .metrics_service import classify_trader_level, compute_metrics
from .period_service import SUNDAY, PeriodKey, parse_period, period_range, select_period

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Service for building the analytics report of a reporting period."""

    def __init__(
        self,
        datasource: DataSource,
        tz: Optional[tzinfo] = None,
        week_start: int = SUNDAY,
    ):
        self.datasource = datasource
        self.tz = tz
        self.week_start = week_start

    async def get_period_trades(
        self,
        period: Union[PeriodKey, str, None],
        now: datetime,
        access_token: Optional[str] = None,
    ) -> PeriodTrades:
        """
        Get the caller's trades opened inside a reporting period.

        Args:
            period: all, week, month, quarter or year
            now: Reference time the period is anchored on
            access_token: Caller's bearer token, forwarded to the data source

        Returns:
            PeriodTrades with the resolved range and chronological trades
        """
        key = parse_period(period)
        trades = await self.datasource.get_trades(access_token=access_token)
        selected = select_period(trades, key, now, week_start=self.week_start, tz=self.tz)
        logger.info(f"Selected {len(selected)}/{len(trades)} trades for period '{key.value}'")

        return PeriodTrades(
            range=period_range(key, now, week_start=self.week_start, tz=self.tz),
            trades=selected,
        )

    async def get_report(
        self,
        period: Union[PeriodKey, str, None],
        now: datetime,
        access_token: Optional[str] = None,
        starting_balance: float = 0.0,
    ) -> AnalyticsReport:
        """
        Build the full analytics report for a reporting period.

        Returns:
            AnalyticsReport with metrics, chart series and breakdowns
        """
        period_trades = await self.get_period_trades(period, now, access_token=access_token)
        return build_report(
            period_trades,
            tz=self.tz,
            starting_balance=starting_balance,
        )


def build_report(
    period_trades: PeriodTrades,
    tz: Optional[tzinfo] = None,
    starting_balance: float = 0.0,
) -> AnalyticsReport:
    """
    Run every builder over the same set of trades.

    This is a shared utility used by the API and the CLI report.
    """
    trades: list[TradeRecord] = period_trades.trades
    metrics = compute_metrics(trades, tz=tz)

    return AnalyticsReport(
        period=period_trades.range.period,
        range=period_trades.range,
        metrics=metrics,
        traderLevel=classify_trader_level(metrics),
        equityCurve=build_equity_curve(trades, starting_balance=starting_balance),
        distribution=build_distribution(trades),
        weekdays=build_weekday_stats(trades, tz=tz),
        strategies=build_strategy_stats(trades),
        symbols=build_symbol_stats(trades),
        holdingTimes=build_holding_time_points(trades, tz=tz),
    )

#!/usr/bin/env python3
"""
Trade Journal Report
Prints performance metrics and P&L breakdowns for journaled trades.

Usage:
    python report.py [--csv trades.csv] [--period month] [--now 2025-12-19T09:30:00]

Example:
    python report.py --csv exports/trades.csv --period quarter --top 5
"""

import argparse
import asyncio
import logging
import math
import sys
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from tabulate import tabulate

from journal_analytics.app import create_datasource
from journal_analytics.config import Config
from journal_analytics.datasources import CsvDataSource, DataSourceError
from journal_analytics.models import AnalyticsReport
from journal_analytics.services import AnalyticsService, PeriodKey
from journal_analytics.services.period_service import PERIOD_LABELS, parse_period, parse_week_start


def format_currency(value: float) -> str:
    """Format a P&L amount, abbreviating thousands and millions"""
    magnitude = abs(value)
    if magnitude >= 1_000_000:
        return f"${value / 1_000_000:.2f}M"
    if magnitude >= 1_000:
        return f"${value / 1_000:.1f}K"
    return f"${value:.2f}"


def format_ratio(value: float) -> str:
    """Format profit factor / risk reward, showing ∞ when there were no losses"""
    if math.isinf(value):
        return "∞"
    return f"{value:.2f}"


def format_minutes(minutes: float) -> str:
    """Format a holding time as minutes, hours or days"""
    if minutes < 60:
        return f"{round(minutes)}m"
    if minutes < 1440:
        return f"{minutes / 60:.1f}h"
    return f"{minutes / 1440:.1f}d"


def print_summary(report: AnalyticsReport, label: str):
    """Print summary statistics"""
    m = report.metrics
    print("=" * 80)
    print(f"PERFORMANCE SUMMARY - {label.upper()}")
    print("=" * 80)
    if report.range.start is not None:
        print(f"Range: {report.range.start:%Y-%m-%d} to {report.range.end:%Y-%m-%d}")
    print(f"Trader level: {report.traderLevel.level}")
    print()

    rows = [
        ["Total trades", m.totalTrades],
        ["Wins / Losses / Break-even", f"{m.profitableTrades} / {m.losingTrades} / {m.breakEvenTrades}"],
        ["Win rate", f"{m.winRate:.1f}%"],
        ["Profit factor", format_ratio(m.profitFactor)],
        ["Net P&L", format_currency(m.netPnL)],
        ["Average win", format_currency(m.avgWin)],
        ["Average loss", format_currency(m.avgLoss)],
        ["Risk / reward", format_ratio(m.riskReward)],
        ["Expectancy", format_currency(m.expectedValue)],
        ["Best / worst trade", f"{format_currency(m.bestTrade)} / {format_currency(m.worstTrade)}"],
        ["Current win streak", m.winStreak],
        ["Net daily P&L", format_currency(m.netDailyPnL)],
        ["Average trade time", format_minutes(m.avgTradeTimeMinutes)],
    ]
    print(tabulate(rows, tablefmt="grid"))


def print_breakdowns(report: AnalyticsReport, top: int):
    """Print strategy, symbol and weekday tables"""
    if report.strategies:
        print(f"\nSTRATEGIES ({len(report.strategies)} total, showing {min(len(report.strategies), top)}):")
        print(tabulate(
            [
                [s.name, s.trades, s.wins, s.losses, f"{s.winRate:.1f}%", format_currency(s.pnl)]
                for s in report.strategies[:top]
            ],
            headers=["Strategy", "Trades", "Wins", "Losses", "Win rate", "Net P&L"],
            tablefmt="grid",
        ))

    if report.symbols:
        print(f"\nSYMBOLS ({len(report.symbols)} total, showing {min(len(report.symbols), top)}):")
        print(tabulate(
            [[s.symbol, s.trades, format_currency(s.pnl)] for s in report.symbols[:top]],
            headers=["Symbol", "Trades", "Net P&L"],
            tablefmt="grid",
        ))

    print("\nWEEKDAYS:")
    print(tabulate(
        [[w.day, w.count, format_currency(w.pnl)] for w in report.weekdays],
        headers=["Day", "Trades", "Net P&L"],
        tablefmt="grid",
    ))

    if report.distribution:
        print("\nDISTRIBUTION:")
        print(tabulate(
            [[b.rangeLabel, b.count] for b in report.distribution if b.count],
            headers=["P&L range", "Trades"],
            tablefmt="grid",
        ))


async def run_report(
    config: Config,
    csv_path: Optional[str],
    period: PeriodKey,
    now: datetime,
    top: int,
) -> None:
    report_tz = ZoneInfo(config.report_timezone)
    datasource = CsvDataSource(csv_path) if csv_path else create_datasource(config)
    service = AnalyticsService(
        datasource,
        tz=report_tz,
        week_start=parse_week_start(config.week_start),
    )
    try:
        report = await service.get_report(period, now)
    finally:
        await datasource.close()

    print_summary(report, PERIOD_LABELS[period])
    print_breakdowns(report, top)
    print()
    print("=" * 80)


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description="Print performance analytics for journaled trades"
    )
    parser.add_argument(
        "--csv",
        help="Trades CSV export (default: TRADES_CSV, else Supabase)"
    )
    parser.add_argument(
        "--period",
        choices=[p.value for p in PeriodKey],
        default=None,
        help="Reporting period (default: DEFAULT_PERIOD or all)"
    )
    parser.add_argument(
        "--now",
        type=datetime.fromisoformat,
        default=None,
        help="Reference time as ISO 8601 (default: current time)"
    )
    parser.add_argument(
        "--top",
        type=int,
        default=8,
        help="Rows to show per breakdown table (default: 8)"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = Config.from_env()
    csv_path = args.csv or config.trades_csv
    if not csv_path and not config.supabase_url:
        print("Error: pass --csv or set TRADES_CSV / SUPABASE_URL")
        sys.exit(1)

    period = parse_period(args.period or config.default_period)
    now = args.now or datetime.now(ZoneInfo(config.report_timezone))

    try:
        asyncio.run(run_report(config, csv_path, period, now, args.top))
    except (DataSourceError, FileNotFoundError) as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

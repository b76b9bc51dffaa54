"""Shared fixtures for the journal analytics test suite."""

from datetime import datetime, timedelta
from itertools import count
from typing import Optional

import pytest

from journal_analytics.datasources import DataSource
from journal_analytics.models import TradeRecord

# 2025-01-06 is a Monday
MONDAY = datetime(2025, 1, 6, 9, 30)

_ids = count(1)


def make_trade(
    pnl: Optional[float] = None,
    opened_at: datetime = MONDAY,
    closed_at=None,
    strategy: Optional[str] = None,
    symbol: Optional[str] = None,
    **extra,
) -> TradeRecord:
    """Build a trade with only the fields a test cares about."""
    return TradeRecord(
        id=extra.pop("id", f"t{next(_ids)}"),
        openedAt=opened_at,
        closedAt=closed_at,
        profitAndLoss=pnl,
        strategyName=strategy,
        symbol=symbol,
        **extra,
    )


class FakeDataSource(DataSource):
    """In-memory data source that records the tokens it was called with."""

    def __init__(self, trades: list[TradeRecord]):
        self.trades = trades
        self.tokens: list[Optional[str]] = []
        self.closed = False

    async def get_trades(self, access_token: Optional[str] = None) -> list[TradeRecord]:
        self.tokens.append(access_token)
        return list(self.trades)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def journal() -> list[TradeRecord]:
    """A small, chronologically sorted journal spanning two weeks."""
    return [
        make_trade(100.0, MONDAY, MONDAY + timedelta(minutes=30), strategy="Breakout", symbol="ES"),
        make_trade(0.0, MONDAY + timedelta(hours=2), strategy="Reversal", symbol="ES"),
        make_trade(-50.0, MONDAY + timedelta(days=1), MONDAY + timedelta(days=1, minutes=90), strategy="Breakout", symbol="NQ"),
        make_trade(250.0, MONDAY + timedelta(days=5), MONDAY + timedelta(days=5, hours=2), strategy="Reversal", symbol="BTC"),
        make_trade(None, MONDAY + timedelta(days=8), symbol="ES"),
        make_trade(-120.0, MONDAY + timedelta(days=9), MONDAY + timedelta(days=9, minutes=15), symbol="NQ"),
    ]

"""Derived analytics models for API responses."""

import math
from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field, ConfigDict, field_serializer

from .trade import TradeRecord

INFINITY_LABEL = "∞"


class MetricsSummary(BaseModel):
    """
    Fixed-shape performance summary for a set of trades.

    Ratios with a zero denominator resolve to 0, except profitFactor and
    riskReward, which are +inf when only the numerator is positive.
    """
    model_config = ConfigDict(populate_by_name=True)

    totalTrades: int = 0
    profitableTrades: int = Field(default=0, description="Trades with P&L > 0")
    losingTrades: int = Field(default=0, description="Trades with P&L < 0")
    breakEvenTrades: int = Field(default=0, description="Trades with P&L == 0 or missing")
    nonProfitableTrades: int = Field(default=0, description="Losing plus break-even trades")
    winRate: float = Field(default=0.0, description="Win percentage over decisive trades")
    profitFactor: float = Field(default=0.0, description="Gross profit / gross loss")
    grossProfit: float = 0.0
    grossLoss: float = Field(default=0.0, description="Magnitude of summed losses")
    netPnL: float = 0.0
    avgWin: float = 0.0
    avgLoss: float = Field(default=0.0, description="Magnitude of the average loss")
    riskReward: float = Field(default=0.0, description="avgWin / avgLoss")
    expectedValue: float = Field(default=0.0, description="netPnL per trade")
    netDailyPnL: float = Field(default=0.0, description="netPnL per calendar day traded")
    tradingDays: int = 0
    avgTradeTimeMinutes: float = Field(default=0.0, description="Mean holding time of closed trades")
    bestTrade: float = Field(default=0.0, description="Largest single-trade P&L")
    worstTrade: float = Field(default=0.0, description="Smallest single-trade P&L")
    winStreak: int = Field(default=0, description="Consecutive wins ending at the most recent trade")

    @field_serializer("profitFactor", "riskReward", when_used="json")
    def _serialize_ratio(self, value: float) -> Union[float, str]:
        return INFINITY_LABEL if math.isinf(value) else value


class TraderLevel(BaseModel):
    """Experience badge derived from the metrics summary."""
    level: str
    progress: int = Field(description="Progress bar fill, 0-100")


class EquityPoint(BaseModel):
    """One point of the running P&L series."""
    index: int
    openedAt: datetime
    tradePnL: float
    cumulativeValue: float


class DistributionBucket(BaseModel):
    """A fixed-width P&L histogram bin."""
    rangeLabel: str
    bucketStart: float
    bucketEnd: float
    count: int = 0


class WeekdayBucket(BaseModel):
    """P&L and trade count for one day of the week."""
    day: str
    pnl: float = 0.0
    count: int = 0


class StrategyStat(BaseModel):
    """Per-playbook performance."""
    name: str
    trades: int = 0
    wins: int = 0
    losses: int = 0
    pnl: float = 0.0
    winRate: float = 0.0


class SymbolStat(BaseModel):
    """Per-instrument performance."""
    symbol: str
    trades: int = 0
    pnl: float = 0.0


class HoldingTimePoint(BaseModel):
    """Holding time against outcome for one closed trade."""
    tradeId: str
    minutes: float
    pnl: float
    symbol: Optional[str] = None
    side: Optional[str] = None


class PeriodRange(BaseModel):
    """Inclusive date range of a reporting period. Both ends are None for 'all'."""
    period: str
    start: Optional[datetime] = None
    end: Optional[datetime] = None


class AnalyticsReport(BaseModel):
    """Everything the analytics page renders for one period."""
    model_config = ConfigDict(populate_by_name=True)

    period: str
    range: PeriodRange
    metrics: MetricsSummary
    traderLevel: TraderLevel
    equityCurve: list[EquityPoint]
    distribution: list[DistributionBucket]
    weekdays: list[WeekdayBucket]
    strategies: list[StrategyStat]
    symbols: list[SymbolStat]
    holdingTimes: list[HoldingTimePoint]


class PeriodTrades(BaseModel):
    """Trades that fall in a reporting period."""
    range: PeriodRange
    trades: list[TradeRecord]

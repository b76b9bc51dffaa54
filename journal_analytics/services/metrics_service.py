"""Performance metrics over a set of trades."""

from datetime import tzinfo
from typing import Optional

from journal_analytics.models import MetricsSummary, TradeOutcome, TradeRecord, TraderLevel
from journal_analytics.clock import minutes_between, wall_clock


def compute_metrics(trades: list[TradeRecord], tz: Optional[tzinfo] = None) -> MetricsSummary:
    """
    Calculate the performance summary for a set of trades.

    Break-even trades (zero or missing P&L) count toward totals and
    expectancy but are left out of the win-rate denominator. Every
    zero-denominator case resolves to a number, never NaN. The win streak
    counts back from the most recent trade by openedAt and stops at the
    first trade that is not a win.

    Args:
        trades: Trades to summarize, in any order
        tz: Reporting timezone used to find calendar days (UTC when None)

    Returns:
        MetricsSummary for the trades
    """
    total_trades = len(trades)
    wins = losses = breakevens = 0
    gross_profit = 0.0
    gross_loss = 0.0
    trading_days = set()
    durations = []

    for trade in trades:
        pnl = trade.pnl
        outcome = trade.outcome
        if outcome == TradeOutcome.WIN:
            wins += 1
            gross_profit += pnl
        elif outcome == TradeOutcome.LOSS:
            losses += 1
            gross_loss += -pnl
        else:
            breakevens += 1

        trading_days.add(wall_clock(trade.openedAt, tz).date())

        if trade.is_closed:
            # Negative durations (exit before entry) are kept as-is
            durations.append(minutes_between(trade.openedAt, trade.closedAt, tz))

    net_pnl = gross_profit - gross_loss
    decisive = wins + losses
    avg_win = gross_profit / wins if wins else 0.0
    avg_loss = gross_loss / losses if losses else 0.0

    return MetricsSummary(
        totalTrades=total_trades,
        profitableTrades=wins,
        losingTrades=losses,
        breakEvenTrades=breakevens,
        nonProfitableTrades=losses + breakevens,
        winRate=wins / decisive * 100 if decisive else 0.0,
        profitFactor=safe_ratio(gross_profit, gross_loss),
        grossProfit=gross_profit,
        grossLoss=gross_loss,
        netPnL=net_pnl,
        avgWin=avg_win,
        avgLoss=avg_loss,
        riskReward=safe_ratio(avg_win, avg_loss),
        expectedValue=net_pnl / total_trades if total_trades else 0.0,
        netDailyPnL=net_pnl / len(trading_days) if trading_days else 0.0,
        tradingDays=len(trading_days),
        avgTradeTimeMinutes=sum(durations) / len(durations) if durations else 0.0,
        bestTrade=max((t.pnl for t in trades), default=0.0),
        worstTrade=min((t.pnl for t in trades), default=0.0),
        winStreak=current_win_streak(trades, tz),
    )


def current_win_streak(trades: list[TradeRecord], tz: Optional[tzinfo] = None) -> int:
    """Count consecutive wins ending at the most recent trade."""
    streak = 0
    newest_first = sorted(trades, key=lambda t: wall_clock(t.openedAt, tz), reverse=True)
    for trade in newest_first:
        if trade.outcome != TradeOutcome.WIN:
            break
        streak += 1
    return streak


def safe_ratio(gain: float, loss: float) -> float:
    """
    Ratio of a gain to a loss magnitude.

    +inf when there is gain but no loss, 0 when both are zero.
    """
    if loss > 0:
        return gain / loss
    if gain > 0:
        return float("inf")
    return 0.0


def classify_trader_level(metrics: MetricsSummary) -> TraderLevel:
    """Assign the experience badge shown next to the summary."""
    if metrics.totalTrades < 10:
        return TraderLevel(level="Beginner", progress=min(metrics.totalTrades * 10, 100))
    if metrics.winRate >= 65 and metrics.profitFactor >= 2 and metrics.netPnL > 0:
        return TraderLevel(level="Elite", progress=100)
    if metrics.winRate >= 55 and metrics.profitFactor >= 1.5 and metrics.netPnL > 0:
        return TraderLevel(level="Advanced", progress=75)
    if metrics.winRate >= 45 and metrics.profitFactor >= 1:
        return TraderLevel(level="Intermediate", progress=50)
    return TraderLevel(level="Developing", progress=25)

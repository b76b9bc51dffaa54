"""Abstract base class for data sources."""

from abc import ABC, abstractmethod
from typing import Optional

from pydantic import ValidationError

from journal_analytics.models import TradeRecord


class DataSourceError(Exception):
    """Raised when trades cannot be fetched from the backing store."""


class DataSource(ABC):
    """
    Abstract interface for journaled trade storage.

    This abstraction allows swapping between the hosted database and a
    local CSV export with no change to the analytics code.
    """

    @abstractmethod
    async def get_trades(self, access_token: Optional[str] = None) -> list[TradeRecord]:
        """
        Retrieve every trade visible to the caller.

        Args:
            access_token: The user's bearer token, forwarded so row-level
                security scopes the result. None for sources without auth.

        Returns:
            List of TradeRecord objects sorted by openedAt ascending

        Raises:
            DataSourceError: If the backing store cannot be read
        """
        pass

    async def close(self) -> None:
        """
        Clean up resources (e.g., close HTTP sessions).

        Override this if the data source holds resources that need cleanup.
        """
        pass


def row_to_trade(row: dict) -> TradeRecord:
    """
    Map a ``trades`` table row to a TradeRecord.

    The strategy name comes from the embedded ``strategies`` relation when
    present, otherwise from a flat ``strategy_name`` column.
    """
    strategy = row.get("strategies")
    strategy_name = strategy.get("name") if isinstance(strategy, dict) else row.get("strategy_name")

    return TradeRecord(
        id=str(row["id"]),
        openedAt=row["opened_at"],
        closedAt=row.get("closed_at"),
        profitAndLoss=row.get("profit_loss_currency"),
        strategyName=strategy_name,
        symbol=row.get("instrument") or row.get("symbol"),
        side=row.get("direction") or row.get("side"),
        entryPrice=row.get("entry_price"),
        exitPrice=row.get("exit_price"),
        positionSize=row.get("position_size"),
    )


def rows_to_trades(rows: list[dict]) -> list[TradeRecord]:
    """Map table rows to trades, turning a malformed row into a DataSourceError."""
    try:
        return [row_to_trade(row) for row in rows]
    except (KeyError, ValidationError) as e:
        raise DataSourceError(f"Malformed trade row: {e}") from e

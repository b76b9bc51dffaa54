"""CSV export data source implementation."""

import logging
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from journal_analytics.clock import wall_clock
from journal_analytics.models import TradeRecord
from .base import DataSource, rows_to_trades

logger = logging.getLogger(__name__)


def read_trades_frame(path: Union[str, Path]) -> pd.DataFrame:
    """
    Load a trades CSV export into a DataFrame.

    Every column is read as text so the trade model does the parsing;
    blank cells become None.
    """
    df = pd.read_csv(path, dtype=str)
    df.columns = [c.strip() for c in df.columns]
    return df.astype(object).where(df.notna(), None)


class CsvDataSource(DataSource):
    """
    Data source reading a CSV export of the trades table.

    Uses the same column names as the database rows (``opened_at``,
    ``closed_at``, ``profit_loss_currency``, ``instrument``, ...), with the
    strategy in a flat ``strategy_name`` column. The file is re-read on
    every call so edits show up without a restart.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    async def get_trades(self, access_token: Optional[str] = None) -> list[TradeRecord]:
        """Read every trade in the file. The access token is ignored."""
        if not self.path.exists():
            raise FileNotFoundError(f"Trades CSV not found: {self.path}")

        df = read_trades_frame(self.path)
        trades = rows_to_trades(df.to_dict(orient="records"))
        logger.info(f"Loaded {len(trades)} trades from {self.path}")

        trades.sort(key=lambda t: wall_clock(t.openedAt))
        return trades

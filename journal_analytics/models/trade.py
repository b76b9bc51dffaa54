"""Trade record model: the input to every analytics builder."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

NO_STRATEGY = "No Strategy"
UNKNOWN_SYMBOL = "Unknown"

_datetime_adapter = TypeAdapter(datetime)


class TradeOutcome(str, Enum):
    """Label of a trade by the sign of its P&L."""
    WIN = "win"
    LOSS = "loss"
    BREAKEVEN = "breakeven"


class TradeRecord(BaseModel):
    """
    A single journaled trade.

    Records are fetched already scoped to the user and are never mutated
    by the analytics code.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    openedAt: datetime = Field(description="Entry time")
    closedAt: Optional[datetime] = Field(default=None, description="Exit time, None while the trade is open")
    profitAndLoss: Optional[float] = Field(default=None, description="Realized P&L in account currency")
    strategyName: Optional[str] = Field(default=None, description="Name of the linked playbook")
    symbol: Optional[str] = Field(default=None, description="Traded instrument")
    side: Optional[str] = Field(default=None, description="'long' or 'short'")
    entryPrice: Optional[float] = None
    exitPrice: Optional[float] = None
    positionSize: Optional[float] = None

    @field_validator("closedAt", mode="before")
    @classmethod
    def _drop_unparseable_close(cls, value: Any) -> Any:
        # A bad exit timestamp only removes the trade from duration stats
        if value is None or isinstance(value, datetime):
            return value
        if isinstance(value, str) and not value.strip():
            return None
        try:
            return _datetime_adapter.validate_python(value)
        except ValidationError:
            return None

    @property
    def pnl(self) -> float:
        """P&L with a missing value counted as zero."""
        return self.profitAndLoss if self.profitAndLoss is not None else 0.0

    @property
    def outcome(self) -> TradeOutcome:
        """Win, loss, or break-even. Missing P&L is break-even, never a loss."""
        if self.pnl > 0:
            return TradeOutcome.WIN
        if self.pnl < 0:
            return TradeOutcome.LOSS
        return TradeOutcome.BREAKEVEN

    @property
    def is_closed(self) -> bool:
        """Check if the trade has a usable exit time."""
        return self.closedAt is not None

    @property
    def strategy_label(self) -> str:
        return self.strategyName or NO_STRATEGY

    @property
    def symbol_label(self) -> str:
        return self.symbol or UNKNOWN_SYMBOL

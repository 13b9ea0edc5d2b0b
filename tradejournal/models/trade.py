"""Trade entry data models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class TradeDirection(str, Enum):
    """Side of a trade."""

    BUY = "buy"
    SELL = "sell"


class TradeImage(BaseModel):
    """Opaque reference to a chart screenshot held by the blob store."""

    reference: str = Field(..., min_length=1, description="Blob store reference or URL")
    description: str = Field(default="", description="Caption")

    model_config = {"frozen": True}


class TradeChecklistItem(BaseModel):
    """A single pre-trade checklist item."""

    id: str = Field(..., min_length=1, description="Checklist item identifier")
    description: str = Field(..., description="What the trader confirms")
    confirmed: bool = Field(default=False, description="Whether the item was confirmed")

    model_config = {"frozen": True}


class TradeChecklist(BaseModel):
    """Ordered pre-trade checklist."""

    items: list[TradeChecklistItem] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def confirmed_count(self) -> int:
        return sum(1 for item in self.items if item.confirmed)

    @property
    def completion_percentage(self) -> float:
        """Share of confirmed items, 0-100. An empty checklist is 0."""
        if not self.items:
            return 0.0
        return self.confirmed_count / len(self.items) * 100


DEFAULT_CHECKLIST_ITEMS = [
    ("bias", "Bias - Market direction"),
    ("obs", "OBS - Order blocks"),
    ("lqs", "LQS - Liquidity sweeps"),
    ("fvg", "FVG - Fair value gaps"),
]


def default_checklist() -> TradeChecklist:
    """Build the default unconfirmed checklist."""
    return TradeChecklist(
        items=[
            TradeChecklistItem(id=item_id, description=description)
            for item_id, description in DEFAULT_CHECKLIST_ITEMS
        ]
    )


class TradeRequest(BaseModel):
    """Fields supplied by the user when adding or editing a trade.

    Numeric fields are not range-checked here; mutation-boundary
    validation lives in ``tradejournal.journal.validation``.
    """

    date: int = Field(..., description="Trade time as nanoseconds since the epoch")
    direction: TradeDirection = Field(..., description="Trade side")
    asset: str = Field(..., description="Traded symbol")
    entry_price: float = Field(..., description="Entry price")
    exit_price: float = Field(..., description="Exit price")
    position_size: float = Field(..., description="Position size in units")
    stop_loss: float = Field(..., description="Stop-loss price")
    take_profit: float = Field(..., description="Take-profit price")
    notes: str = Field(default="", description="Free text notes")
    tags: list[str] = Field(default_factory=list, description="Tags")
    before_trade_image: Optional[TradeImage] = Field(default=None)
    after_trade_image: Optional[TradeImage] = Field(default=None)
    checklist: TradeChecklist = Field(default_factory=default_checklist)

    model_config = {"frozen": True}


class TradeEntry(TradeRequest):
    """A stored trade with its derived metrics."""

    id: str = Field(..., min_length=1, description="Opaque trade identifier")
    profit_loss: float = Field(default=0.0, description="Realized P&L")
    risk_percentage: float = Field(default=0.0, description="Account risk in percent")
    risk_reward_ratio: float = Field(default=0.0, description="Reward to risk ratio")
    sequence: int = Field(
        default=0, ge=0, description="Insertion order within the journal, assigned by the store"
    )

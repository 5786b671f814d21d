"""Trade model: one logged trade under a strategy, live or backtest."""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON
from sqlmodel import SQLModel, Field, Column, Relationship

from journal.models.enums import Direction, TradeResult, TradeStatus
from journal.models.strategy import Strategy


class Trade(SQLModel, table=True):
    __tablename__ = "trade"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: int = Field(foreign_key="user.id", ondelete="CASCADE", index=True)
    strategy_id: uuid.UUID = Field(foreign_key="strategy.id", ondelete="CASCADE", index=True)
    is_backtest: bool = Field(default=False, index=True)

    status: TradeStatus = TradeStatus.ORDER_PLACED
    asset: str
    date_opened: datetime | None = None  # None while order_placed
    date_closed: datetime | None = None  # None unless closed

    # Outcome
    direction: Direction | None = None
    result: TradeResult | None = None
    profit_loss: float | None = None  # signed percentage

    notes: str = ""
    custom_values: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    strategy: Strategy | None = Relationship(back_populates="trades")

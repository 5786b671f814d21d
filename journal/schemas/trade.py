"""Pydantic schemas for Trade API."""

import uuid
from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from journal.models.enums import Direction, TradeResult, TradeStatus
from journal.schemas.common import CamelModel


class TradeCreate(CamelModel):
    strategy_id: uuid.UUID
    is_backtest: bool = False
    status: TradeStatus = TradeStatus.ORDER_PLACED
    asset: str = Field(min_length=1, max_length=32)
    date_opened: datetime | None = None
    date_closed: datetime | None = None
    direction: Direction | None = None
    result: TradeResult | None = None
    profit_loss: float | None = Field(default=None, allow_inf_nan=False)
    notes: str = Field(default="", max_length=10_000)
    custom_values: dict[str, Any] = Field(default_factory=dict)

    @field_validator("asset")
    @classmethod
    def _trim_asset(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text

    @field_validator("notes", mode="before")
    @classmethod
    def _none_notes_is_empty(cls, value):
        return "" if value is None else value

    @field_validator("custom_values", mode="before")
    @classmethod
    def _none_custom_values_is_empty(cls, value):
        return {} if value is None else value


class TradeUpdate(CamelModel):
    """Partial update. Owner, strategy and partition are fixed at creation."""

    status: TradeStatus | None = None
    asset: str | None = Field(default=None, min_length=1, max_length=32)
    date_opened: datetime | None = None
    date_closed: datetime | None = None
    direction: Direction | None = None
    result: TradeResult | None = None
    profit_loss: float | None = Field(default=None, allow_inf_nan=False)
    notes: str | None = Field(default=None, max_length=10_000)
    custom_values: dict[str, Any] | None = None

    model_config = {"extra": "forbid"}


class TradeRead(CamelModel):
    id: uuid.UUID
    strategy_id: uuid.UUID
    is_backtest: bool
    status: TradeStatus
    asset: str
    date_opened: datetime | None
    date_closed: datetime | None
    direction: Direction | None
    result: TradeResult | None
    profit_loss: float | None
    notes: str
    custom_values: dict[str, Any]
    created_at: datetime
    updated_at: datetime


class TradePage(CamelModel):
    trades: list[TradeRead]
    total_count: int
    page_count: int
    page_index: int
    page_size: int

"""Enumerations shared by models and schemas."""

from enum import Enum


class Instrument(str, Enum):
    FOREX = "forex"
    CRYPTO = "crypto"
    STOCKS = "stocks"


class FieldType(str, Enum):
    TEXT = "text"
    SELECT = "select"
    MULTI_SELECT = "multi-select"


class TradeStatus(str, Enum):
    ORDER_PLACED = "order_placed"
    OPEN = "open"
    CLOSED = "closed"


class TradeResult(str, Enum):
    WIN = "win"
    BREAK_EVEN = "break_even"
    LOSS = "loss"


class Direction(str, Enum):
    LONG = "long"
    SHORT = "short"

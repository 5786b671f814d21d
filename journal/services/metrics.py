"""Performance metrics over a strategy's trades.

- win rate: wins / (trades - break-even trades) * 100, integer
- total profit: sum of profit/loss percentages, 2 decimals
- average return: unrounded total profit / trades, 2 decimals

Break-even trades count everywhere except the win-rate denominator. Values that
are missing or not numbers contribute nothing. Rounding is half-up on exact
decimals.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from journal.models.enums import TradeResult

_ZERO = Decimal(0)
_CENTS = Decimal("0.01")
_UNITS = Decimal(1)


@dataclass(frozen=True)
class TradeMetrics:
    win_rate: int = 0
    total_profit: float = 0.0
    avg_return: float = 0.0


def _as_decimal(value) -> Decimal:
    if value is None or isinstance(value, bool):
        return _ZERO
    if isinstance(value, float) and not math.isfinite(value):
        return _ZERO
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return _ZERO
    return number if number.is_finite() else _ZERO


def _round_half_up(value: Decimal, quantum: Decimal) -> Decimal:
    return value.quantize(quantum, rounding=ROUND_HALF_UP)


def _to_float(value: Decimal) -> float:
    # float("-0.00") would serialize as -0.0
    return float(value) or 0.0


def aggregate_trade_metrics(trades: Iterable) -> TradeMetrics:
    """Reduce trades (anything with ``result`` and ``profit_loss``) to metrics."""
    total = wins = break_even = 0
    profit = _ZERO

    for trade in trades:
        total += 1
        result = getattr(trade, "result", None)
        if result == TradeResult.WIN:
            wins += 1
        elif result == TradeResult.BREAK_EVEN:
            break_even += 1
        profit += _as_decimal(getattr(trade, "profit_loss", None))

    if total == 0:
        return TradeMetrics()

    relevant = total - break_even
    win_rate = 0
    if relevant > 0:
        win_rate = int(_round_half_up(Decimal(wins * 100) / Decimal(relevant), _UNITS))

    return TradeMetrics(
        win_rate=win_rate,
        total_profit=_to_float(_round_half_up(profit, _CENTS)),
        avg_return=_to_float(_round_half_up(profit / Decimal(total), _CENTS)),
    )

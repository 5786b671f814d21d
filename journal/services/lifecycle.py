"""Trade status state machine.

    order_placed -> open -> closed

The backend accepts any transition; what it enforces is that the fields of a
trade always match its status:

- order_placed: no dates, no result, no profit/loss
- open: date_opened set (defaults to now); date_closed, result, profit/loss cleared
- closed: date_opened and date_closed set (both default to now); result and
  profit/loss kept as supplied

On top of that a closed trade must not close before it opened, and the sign of
profit/loss must agree with the result (wins positive, losses negative).
"""

from dataclasses import dataclass
from datetime import datetime

from journal.errors import ValidationFailed
from journal.models.enums import TradeResult, TradeStatus
from journal.utils.time import ensure_utc, utcnow


@dataclass(frozen=True)
class Lifecycle:
    status: TradeStatus
    date_opened: datetime | None = None
    date_closed: datetime | None = None
    result: TradeResult | None = None
    profit_loss: float | None = None

    def as_dict(self) -> dict:
        return {
            "status": self.status,
            "date_opened": self.date_opened,
            "date_closed": self.date_closed,
            "result": self.result,
            "profit_loss": self.profit_loss,
        }


def sign_policy_errors(result: TradeResult | None, profit_loss: float | None) -> dict[str, list[str]]:
    if profit_loss is None:
        return {}
    if result == TradeResult.WIN and profit_loss <= 0:
        return {"profitLoss": ["Profit must be positive for wins"]}
    if result == TradeResult.LOSS and profit_loss >= 0:
        return {"profitLoss": ["Loss must be negative"]}
    return {}


def resolve_lifecycle(
    status: TradeStatus,
    *,
    date_opened: datetime | None = None,
    date_closed: datetime | None = None,
    result: TradeResult | None = None,
    profit_loss: float | None = None,
    now: datetime | None = None,
) -> Lifecycle:
    """Apply the status rules to the requested values and validate the outcome.

    Raises ValidationFailed (keyed ``dateClosed`` / ``profitLoss``) rather than
    correcting bad input.
    """
    now = ensure_utc(now) or utcnow()
    status = TradeStatus(status)

    if status == TradeStatus.ORDER_PLACED:
        return Lifecycle(status=status)

    opened = ensure_utc(date_opened) or now
    if status == TradeStatus.OPEN:
        return Lifecycle(status=status, date_opened=opened)

    closed = ensure_utc(date_closed) or now
    result = TradeResult(result) if result is not None else None

    errors: dict[str, list[str]] = {}
    if closed < opened:
        errors["dateClosed"] = ["Close date must not be before the open date"]
    errors.update(sign_policy_errors(result, profit_loss))
    if errors:
        raise ValidationFailed(errors=errors)

    return Lifecycle(
        status=status,
        date_opened=opened,
        date_closed=closed,
        result=result,
        profit_loss=profit_loss,
    )

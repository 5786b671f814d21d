"""Trade filtering, sorting and pagination.

Callers describe what they want with a ``TradeFilter``; ``build_trade_query``
is the only place that turns one into SQL. Owner and strategy are required
fields of the filter, so a query across users cannot be expressed. The
partition must be given explicitly; None selects live and backtest together.
"""

import math
import uuid
from dataclasses import dataclass, field
from enum import Enum

from sqlalchemy import func
from sqlmodel import Session, select
from sqlmodel.sql.expression import SelectOfScalar

from journal.errors import ValidationFailed
from journal.models.trade import Trade

DEFAULT_SORT_FIELD = "created_at"

# Trade attributes a listing may be sorted by
SORTABLE_FIELDS = (
    "id",
    "status",
    "asset",
    "date_opened",
    "date_closed",
    "direction",
    "result",
    "profit_loss",
    "notes",
    "is_backtest",
    "created_at",
    "updated_at",
)


def _to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


# Accept both the attribute name and its camelCase wire form
_SORT_ALIASES: dict[str, str] = {}
for _name in SORTABLE_FIELDS:
    _SORT_ALIASES[_name] = _name
    _SORT_ALIASES[_to_camel(_name)] = _name


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


def resolve_sort_field(name: str) -> str:
    try:
        return _SORT_ALIASES[name.strip()]
    except KeyError:
        raise ValidationFailed(
            errors={"sortField": [f"Cannot sort by '{name}'"]}
        ) from None


@dataclass(frozen=True)
class SortSpec:
    key: str = DEFAULT_SORT_FIELD
    direction: SortDirection = SortDirection.DESC

    @classmethod
    def parse(cls, field_name: str | None = None, direction: str | None = None) -> "SortSpec":
        """Build a sort from request parameters.

        No field means newest first. A field without a direction sorts ascending.
        """
        if direction is not None and direction.strip():
            try:
                parsed_direction = SortDirection(direction.strip().lower())
            except ValueError:
                raise ValidationFailed(
                    errors={"sortDirection": ["must be 'asc' or 'desc'"]}
                ) from None
        else:
            parsed_direction = None

        if field_name is None or not field_name.strip():
            return cls(DEFAULT_SORT_FIELD, parsed_direction or SortDirection.DESC)
        return cls(resolve_sort_field(field_name), parsed_direction or SortDirection.ASC)


@dataclass(frozen=True)
class PageSpec:
    index: int = 0
    size: int = 10

    @property
    def offset(self) -> int:
        return self.index * self.size

    @classmethod
    def parse(cls, index: int | None, size: int | None, *, default_size: int, max_size: int) -> "PageSpec":
        errors: dict[str, list[str]] = {}
        index = 0 if index is None else index
        size = default_size if size is None else size
        if index < 0:
            errors["pageIndex"] = ["must be 0 or greater"]
        if size < 1 or size > max_size:
            errors["pageSize"] = [f"must be between 1 and {max_size}"]
        if errors:
            raise ValidationFailed(errors=errors)
        return cls(index=index, size=size)

    def page_count(self, total: int) -> int:
        return math.ceil(total / self.size) if total else 0


@dataclass(frozen=True)
class TradeFilter:
    owner_id: int
    strategy_id: uuid.UUID
    is_backtest: bool | None  # None: both partitions
    sort: SortSpec = field(default_factory=SortSpec)
    page: PageSpec | None = None  # None: every matching row


def _conditions(trade_filter: TradeFilter) -> list:
    conditions = [
        Trade.user_id == trade_filter.owner_id,
        Trade.strategy_id == trade_filter.strategy_id,
    ]
    if trade_filter.is_backtest is not None:
        conditions.append(Trade.is_backtest == trade_filter.is_backtest)
    return conditions


def build_trade_query(trade_filter: TradeFilter) -> SelectOfScalar[Trade]:
    """SELECT for the filter, totally ordered (ties broken by trade id)."""
    column = getattr(Trade, trade_filter.sort.key)
    primary = column.desc() if trade_filter.sort.direction == SortDirection.DESC else column.asc()

    stmt = select(Trade).where(*_conditions(trade_filter)).order_by(primary, Trade.id.asc())
    if trade_filter.page is not None:
        stmt = stmt.offset(trade_filter.page.offset).limit(trade_filter.page.size)
    return stmt


def build_count_query(trade_filter: TradeFilter) -> SelectOfScalar[int]:
    return select(func.count()).select_from(Trade).where(*_conditions(trade_filter))


def fetch_trades(session: Session, trade_filter: TradeFilter) -> list[Trade]:
    return list(session.exec(build_trade_query(trade_filter)).all())


def count_trades(session: Session, trade_filter: TradeFilter) -> int:
    return session.exec(build_count_query(trade_filter)).one()

"""Query facade over a user's strategies and trades.

A ``TradeJournal`` is bound to one session and one authenticated owner, and
every query it issues is scoped to that owner. Public methods return an
``ActionResult``: domain errors, pydantic validation errors and store failures
are converted into failed results here and never propagate to the caller.
"""

import functools
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from journal.config import settings
from journal.errors import (
    AuthenticationRequired,
    JournalError,
    NotFoundOrForbidden,
    StoreFailure,
    ValidationFailed,
    field_errors,
)
from journal.models import CustomField, Strategy, Trade, User
from journal.schemas.metrics import MetricsRead
from journal.schemas.strategy import CustomFieldIn, StrategyCreate, StrategyRead, StrategyUpdate
from journal.schemas.trade import TradeCreate, TradePage, TradeRead, TradeUpdate
from journal.services.custom_values import (
    CustomValue,
    dump_custom_values,
    merge_custom_values,
    parse_custom_values,
    visible_custom_values,
)
from journal.services.lifecycle import Lifecycle, resolve_lifecycle
from journal.services.metrics import aggregate_trade_metrics
from journal.services.trade_query import PageSpec, SortSpec, TradeFilter, count_trades, fetch_trades
from journal.utils.text import create_slug
from journal.utils.time import ensure_utc, utcnow

logger = logging.getLogger(__name__)

STRATEGY_NOT_FOUND = "Strategy not found or you don't have permission to access it"
TRADE_NOT_FOUND = "Trade not found or you don't have permission to access it"
NAME_TAKEN = "A strategy with this name already exists"


@dataclass
class ActionResult:
    success: bool
    message: str = ""
    data: Any = None
    errors: dict[str, list[str]] = field(default_factory=dict)
    status_code: int = 200

    @classmethod
    def failure(cls, error: JournalError) -> "ActionResult":
        return cls(
            success=False,
            message=error.message,
            errors=error.errors,
            status_code=error.status_code,
        )


def _action(message: str = ""):
    """Wrap a TradeJournal method so that it always returns an ActionResult."""

    def decorator(method):
        @functools.wraps(method)
        def wrapper(self: "TradeJournal", *args, **kwargs) -> ActionResult:
            try:
                self._require_owner()
                data = method(self, *args, **kwargs)
            except ValidationError as e:
                self.session.rollback()
                error = ValidationFailed(errors=field_errors(e))
                logger.info(f"{method.__name__} rejected: {error.errors}")
                return ActionResult.failure(error)
            except JournalError as e:
                self.session.rollback()
                logger.info(f"{method.__name__} failed: {e.message} {e.errors or ''}".rstrip())
                return ActionResult.failure(e)
            except SQLAlchemyError as e:
                self.session.rollback()
                logger.error(f"{method.__name__} store error: {e}", exc_info=True)
                return ActionResult.failure(StoreFailure())
            return ActionResult(success=True, message=message, data=data)

        return wrapper

    return decorator


def _as_uuid(value: uuid.UUID | str, not_found: str) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise NotFoundOrForbidden(not_found) from None


class TradeJournal:
    """All reads and writes for one authenticated owner."""

    def __init__(self, session: Session, owner: User | None):
        self.session = session
        self.owner = owner

    def _require_owner(self):
        if self.owner is None or self.owner.id is None or not self.owner.is_active:
            raise AuthenticationRequired()

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def _strategy(self, strategy_id: uuid.UUID | str) -> Strategy:
        strategy_id = _as_uuid(strategy_id, STRATEGY_NOT_FOUND)
        strategy = self.session.exec(
            select(Strategy).where(Strategy.id == strategy_id, Strategy.user_id == self.owner.id)
        ).first()
        if strategy is None:
            raise NotFoundOrForbidden(STRATEGY_NOT_FOUND)
        return strategy

    def _trade(self, trade_id: uuid.UUID | str) -> Trade:
        trade_id = _as_uuid(trade_id, TRADE_NOT_FOUND)
        trade = self.session.exec(
            select(Trade).where(Trade.id == trade_id, Trade.user_id == self.owner.id)
        ).first()
        if trade is None:
            raise NotFoundOrForbidden(TRADE_NOT_FOUND)
        return trade

    def _owned_strategies(self) -> list[Strategy]:
        return list(
            self.session.exec(
                select(Strategy)
                .where(Strategy.user_id == self.owner.id)
                .order_by(Strategy.created_at.desc(), Strategy.id.asc())
            ).all()
        )

    @staticmethod
    def _read_trade(trade: Trade, fields: list[CustomField]) -> TradeRead:
        read = TradeRead.model_validate(trade)
        return read.model_copy(update={"custom_values": visible_custom_values(trade.custom_values, fields)})

    # ------------------------------------------------------------------
    # Trade queries
    # ------------------------------------------------------------------

    @_action()
    def list_trades(
        self,
        strategy_id: uuid.UUID | str,
        is_backtest: bool = False,
        sort_field: str | None = None,
        sort_direction: str | None = None,
        page_index: int | None = 0,
        page_size: int | None = None,
    ) -> TradePage:
        sort = SortSpec.parse(sort_field, sort_direction)
        page = PageSpec.parse(
            page_index,
            page_size,
            default_size=settings.default_page_size,
            max_size=settings.max_page_size,
        )
        strategy = self._strategy(strategy_id)
        trade_filter = TradeFilter(
            owner_id=self.owner.id,
            strategy_id=strategy.id,
            is_backtest=is_backtest,
            sort=sort,
            page=page,
        )
        total = count_trades(self.session, trade_filter)
        rows = fetch_trades(self.session, trade_filter)
        fields = strategy.custom_fields
        return TradePage(
            trades=[self._read_trade(t, fields) for t in rows],
            total_count=total,
            page_count=page.page_count(total),
            page_index=page.index,
            page_size=page.size,
        )

    @_action()
    def compute_metrics(self, strategy_id: uuid.UUID | str, is_backtest: bool = False) -> MetricsRead:
        strategy = self._strategy(strategy_id)
        trades = fetch_trades(
            self.session,
            TradeFilter(owner_id=self.owner.id, strategy_id=strategy.id, is_backtest=is_backtest),
        )
        return MetricsRead.model_validate(aggregate_trade_metrics(trades))

    @_action()
    def recent_trades(self, strategy_id: uuid.UUID | str, limit: int | None = None) -> list[TradeRead]:
        """Newest trades of a strategy, live and backtest together."""
        limit = settings.recent_trades_limit if limit is None else limit
        if limit < 1 or limit > settings.max_page_size:
            raise ValidationFailed(errors={"limit": [f"must be between 1 and {settings.max_page_size}"]})
        page = PageSpec(index=0, size=limit)
        strategy = self._strategy(strategy_id)
        rows = fetch_trades(
            self.session,
            TradeFilter(owner_id=self.owner.id, strategy_id=strategy.id, is_backtest=None, page=page),
        )
        return [self._read_trade(t, strategy.custom_fields) for t in rows]

    @_action()
    def get_trade(self, trade_id: uuid.UUID | str) -> TradeRead:
        trade = self._trade(trade_id)
        return self._read_trade(trade, trade.strategy.custom_fields)

    # ------------------------------------------------------------------
    # Trade writes
    # ------------------------------------------------------------------

    def _validate_trade(
        self,
        strategy: Strategy,
        data: TradeCreate,
        raw_custom_values: dict[str, Any] | None,
        now,
    ) -> tuple[Lifecycle, dict[str, CustomValue] | None]:
        """Status rules and custom values together, so every field error is reported at once."""
        errors: dict[str, list[str]] = {}
        lifecycle = None
        values = None
        try:
            lifecycle = resolve_lifecycle(
                data.status,
                date_opened=data.date_opened,
                date_closed=data.date_closed,
                result=data.result,
                profit_loss=data.profit_loss,
                now=now,
            )
        except ValidationFailed as e:
            errors.update(e.errors)
        if raw_custom_values is not None:
            try:
                values = parse_custom_values(strategy.custom_fields, raw_custom_values)
            except ValidationFailed as e:
                errors.update(e.errors)
        if errors:
            raise ValidationFailed(errors=errors)
        return lifecycle, values

    @_action("Trade logged successfully")
    def create_trade(self, data: TradeCreate | dict) -> TradeRead:
        if not isinstance(data, TradeCreate):
            data = TradeCreate.model_validate(data)
        strategy = self._strategy(data.strategy_id)
        now = utcnow()
        lifecycle, values = self._validate_trade(strategy, data, data.custom_values, now)

        trade = Trade(
            user_id=self.owner.id,
            strategy_id=strategy.id,
            is_backtest=data.is_backtest,
            asset=data.asset,
            direction=data.direction,
            notes=data.notes,
            custom_values=dump_custom_values(values or {}),
            created_at=now,
            updated_at=now,
            **lifecycle.as_dict(),
        )
        self.session.add(trade)
        self.session.commit()
        self.session.refresh(trade)

        partition = "backtest" if trade.is_backtest else "live"
        logger.info(f"[{strategy.name}] Logged {partition} trade {trade.id} ({trade.status.value})")
        return self._read_trade(trade, strategy.custom_fields)

    @_action("Trade updated successfully")
    def update_trade(self, trade_id: uuid.UUID | str, data: TradeUpdate | dict) -> TradeRead:
        if not isinstance(data, TradeUpdate):
            data = TradeUpdate.model_validate(data)
        trade = self._trade(trade_id)
        strategy = trade.strategy

        changes = data.model_dump(exclude_unset=True)
        raw_custom_values = changes.pop("custom_values", None)

        # Validate the full merged record so a partial update cannot bypass the rules
        merged = TradeCreate.model_validate(
            {**trade.model_dump(exclude={"custom_values"}), **changes}
        )
        now = utcnow()
        lifecycle, values = self._validate_trade(strategy, merged, raw_custom_values, now)

        previous_status = trade.status
        for key, value in lifecycle.as_dict().items():
            setattr(trade, key, value)
        trade.asset = merged.asset
        trade.direction = merged.direction
        trade.notes = merged.notes
        if values is not None:
            trade.custom_values = merge_custom_values(
                trade.custom_values, dump_custom_values(values), strategy.custom_fields
            )
        trade.updated_at = max(now, ensure_utc(trade.updated_at))

        self.session.add(trade)
        self.session.commit()
        self.session.refresh(trade)

        if previous_status != trade.status:
            logger.info(
                f"[{strategy.name}] Trade {trade.id} moved {previous_status.value} -> {trade.status.value}"
            )
        return self._read_trade(trade, strategy.custom_fields)

    @_action("Trade deleted successfully")
    def delete_trade(self, trade_id: uuid.UUID | str) -> None:
        trade = self._trade(trade_id)
        self.session.delete(trade)
        self.session.commit()
        logger.info(f"Deleted trade {trade_id}")

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def _check_name_available(self, name: str, exclude_id: uuid.UUID | None = None):
        """Names are unique per owner, and so are their slugs (lookups go by slug)."""
        slug = create_slug(name)
        if not slug:
            raise ValidationFailed(errors={"name": ["must contain at least one letter or digit"]})
        for other in self._owned_strategies():
            if other.id == exclude_id:
                continue
            if other.name == name or create_slug(other.name) == slug:
                raise ValidationFailed(errors={"name": [NAME_TAKEN]})

    def _commit_strategy(self, strategy: Strategy):
        self.session.add(strategy)
        try:
            self.session.commit()
        except IntegrityError:
            # A concurrent write took the name between the check and the commit
            self.session.rollback()
            raise ValidationFailed(errors={"name": [NAME_TAKEN]}) from None
        self.session.refresh(strategy)

    @staticmethod
    def _build_fields(fields: list[CustomFieldIn]) -> list[CustomField]:
        return [
            CustomField(
                name=f.name,
                type=f.type,
                options=f.options or None,
                required=f.required,
                position=position,
            )
            for position, f in enumerate(fields)
        ]

    @_action()
    def list_strategies(self) -> list[StrategyRead]:
        return [StrategyRead.model_validate(s) for s in self._owned_strategies()]

    @_action()
    def get_strategy(self, strategy_id: uuid.UUID | str) -> StrategyRead:
        return StrategyRead.model_validate(self._strategy(strategy_id))

    @_action()
    def get_strategy_by_slug(self, slug: str) -> StrategyRead:
        wanted = create_slug(slug)
        for strategy in self._owned_strategies():
            if wanted and create_slug(strategy.name) == wanted:
                return StrategyRead.model_validate(strategy)
        raise NotFoundOrForbidden(STRATEGY_NOT_FOUND)

    @_action("Strategy created successfully")
    def create_strategy(self, data: StrategyCreate | dict) -> StrategyRead:
        if not isinstance(data, StrategyCreate):
            data = StrategyCreate.model_validate(data)
        self._check_name_available(data.name)

        now = utcnow()
        strategy = Strategy(
            user_id=self.owner.id,
            name=data.name,
            description=data.description,
            instrument=data.instrument,
            created_at=now,
            updated_at=now,
        )
        strategy.custom_fields = self._build_fields(data.custom_fields)

        # Strategy and its fields land in one commit
        self._commit_strategy(strategy)

        logger.info(f"Created strategy '{strategy.name}' with {len(strategy.custom_fields)} custom fields")
        return StrategyRead.model_validate(strategy)

    @_action("Strategy updated successfully")
    def update_strategy(self, strategy_id: uuid.UUID | str, data: StrategyUpdate | dict) -> StrategyRead:
        if not isinstance(data, StrategyUpdate):
            data = StrategyUpdate.model_validate(data)
        strategy = self._strategy(strategy_id)

        changes = data.model_dump(exclude_unset=True)
        if changes.get("custom_fields") is None:
            changes.pop("custom_fields", None)

        current = {
            "name": strategy.name,
            "description": strategy.description,
            "instrument": strategy.instrument,
            "custom_fields": [
                {"name": f.name, "type": f.type, "options": f.options or [], "required": f.required}
                for f in strategy.custom_fields
            ],
        }
        merged = StrategyCreate.model_validate({**current, **changes})
        if merged.name != strategy.name:
            self._check_name_available(merged.name, exclude_id=strategy.id)

        strategy.name = merged.name
        strategy.description = merged.description
        strategy.instrument = merged.instrument
        if "custom_fields" in changes:
            # Replaced wholesale; orphaned rows are deleted in the same commit
            strategy.custom_fields = self._build_fields(merged.custom_fields)
        strategy.updated_at = max(utcnow(), ensure_utc(strategy.updated_at))

        self._commit_strategy(strategy)

        logger.info(f"Updated strategy '{strategy.name}'")
        return StrategyRead.model_validate(strategy)

    @_action("Strategy deleted successfully")
    def delete_strategy(self, strategy_id: uuid.UUID | str) -> None:
        strategy = self._strategy(strategy_id)
        name = strategy.name
        trade_count = len(strategy.trades)
        self.session.delete(strategy)
        self.session.commit()
        logger.info(f"Deleted strategy '{name}' and {trade_count} trades")

"""Strategy API: CRUD, metrics and recent trades."""

import uuid

from fastapi import APIRouter, Depends, Query

from journal.api.deps import get_journal, unwrap
from journal.schemas.metrics import MetricsRead
from journal.schemas.strategy import StrategyCreate, StrategyRead, StrategyUpdate
from journal.schemas.trade import TradeRead
from journal.services.journal import TradeJournal

router = APIRouter(prefix="/api/strategies", tags=["strategies"])


@router.get("", response_model=list[StrategyRead])
def list_strategies(journal: TradeJournal = Depends(get_journal)):
    return unwrap(journal.list_strategies())


@router.post("", response_model=StrategyRead, status_code=201)
def create_strategy(data: StrategyCreate, journal: TradeJournal = Depends(get_journal)):
    return unwrap(journal.create_strategy(data))


@router.get("/by-slug/{slug}", response_model=StrategyRead)
def get_strategy_by_slug(slug: str, journal: TradeJournal = Depends(get_journal)):
    return unwrap(journal.get_strategy_by_slug(slug))


@router.get("/{strategy_id}", response_model=StrategyRead)
def get_strategy(strategy_id: uuid.UUID, journal: TradeJournal = Depends(get_journal)):
    return unwrap(journal.get_strategy(strategy_id))


@router.put("/{strategy_id}", response_model=StrategyRead)
def update_strategy(
    strategy_id: uuid.UUID,
    data: StrategyUpdate,
    journal: TradeJournal = Depends(get_journal),
):
    return unwrap(journal.update_strategy(strategy_id, data))


@router.delete("/{strategy_id}", status_code=204)
def delete_strategy(strategy_id: uuid.UUID, journal: TradeJournal = Depends(get_journal)):
    unwrap(journal.delete_strategy(strategy_id))


@router.get("/{strategy_id}/metrics", response_model=MetricsRead)
def strategy_metrics(
    strategy_id: uuid.UUID,
    is_backtest: bool = Query(default=False, alias="isBacktest"),
    journal: TradeJournal = Depends(get_journal),
):
    """Win rate, total profit and average return over one partition."""
    return unwrap(journal.compute_metrics(strategy_id, is_backtest=is_backtest))


@router.get("/{strategy_id}/trades/recent", response_model=list[TradeRead])
def recent_trades(
    strategy_id: uuid.UUID,
    limit: int | None = None,
    journal: TradeJournal = Depends(get_journal),
):
    return unwrap(journal.recent_trades(strategy_id, limit=limit))

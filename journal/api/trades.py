"""Trade API: paginated listing and CRUD."""

import uuid

from fastapi import APIRouter, Depends, Query

from journal.api.deps import get_journal, unwrap
from journal.schemas.trade import TradeCreate, TradePage, TradeRead, TradeUpdate
from journal.services.journal import TradeJournal

router = APIRouter(prefix="/api/trades", tags=["trades"])


@router.get("", response_model=TradePage)
def list_trades(
    strategy_id: uuid.UUID = Query(alias="strategyId"),
    is_backtest: bool = Query(default=False, alias="isBacktest"),
    sort_field: str | None = Query(default=None, alias="sortField"),
    sort_direction: str | None = Query(default=None, alias="sortDirection"),
    page_index: int = Query(default=0, alias="pageIndex"),
    page_size: int | None = Query(default=None, alias="pageSize"),
    journal: TradeJournal = Depends(get_journal),
):
    return unwrap(
        journal.list_trades(
            strategy_id,
            is_backtest=is_backtest,
            sort_field=sort_field,
            sort_direction=sort_direction,
            page_index=page_index,
            page_size=page_size,
        )
    )


@router.post("", response_model=TradeRead, status_code=201)
def create_trade(data: TradeCreate, journal: TradeJournal = Depends(get_journal)):
    return unwrap(journal.create_trade(data))


@router.get("/{trade_id}", response_model=TradeRead)
def get_trade(trade_id: uuid.UUID, journal: TradeJournal = Depends(get_journal)):
    return unwrap(journal.get_trade(trade_id))


@router.put("/{trade_id}", response_model=TradeRead)
def update_trade(
    trade_id: uuid.UUID,
    data: TradeUpdate,
    journal: TradeJournal = Depends(get_journal),
):
    return unwrap(journal.update_trade(trade_id, data))


@router.delete("/{trade_id}", status_code=204)
def delete_trade(trade_id: uuid.UUID, journal: TradeJournal = Depends(get_journal)):
    unwrap(journal.delete_trade(trade_id))

"""Tests for trade filtering, sorting and pagination."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from journal.errors import ValidationFailed
from journal.models import Strategy, Trade
from journal.models.enums import Instrument, TradeStatus
from journal.services.trade_query import (
    PageSpec,
    SortDirection,
    SortSpec,
    TradeFilter,
    build_trade_query,
    count_trades,
    fetch_trades,
)

BASE = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# 1. Parameter parsing
# ---------------------------------------------------------------------------

class TestSortSpec:
    def test_default_is_newest_first(self):
        assert SortSpec.parse() == SortSpec("created_at", SortDirection.DESC)

    def test_field_without_direction_sorts_ascending(self):
        assert SortSpec.parse("dateOpened") == SortSpec("date_opened", SortDirection.ASC)

    def test_snake_case_and_direction_case(self):
        assert SortSpec.parse("profit_loss", "DESC") == SortSpec("profit_loss", SortDirection.DESC)

    def test_direction_without_field_keeps_default_key(self):
        assert SortSpec.parse(None, "asc") == SortSpec("created_at", SortDirection.ASC)

    @pytest.mark.parametrize("field", ["nonsense", "customValues", "user_id", "strategy", "__class__"])
    def test_unknown_field_rejected(self, field):
        with pytest.raises(ValidationFailed) as exc_info:
            SortSpec.parse(field)
        assert "sortField" in exc_info.value.errors

    def test_bad_direction_rejected(self):
        with pytest.raises(ValidationFailed) as exc_info:
            SortSpec.parse("asset", "sideways")
        assert "sortDirection" in exc_info.value.errors


class TestPageSpec:
    def test_defaults(self):
        page = PageSpec.parse(None, None, default_size=10, max_size=100)
        assert (page.index, page.size, page.offset) == (0, 10, 0)

    def test_offset(self):
        assert PageSpec.parse(3, 25, default_size=10, max_size=100).offset == 75

    @pytest.mark.parametrize("index, size, bad_field", [(-1, 10, "pageIndex"), (0, 0, "pageSize"), (0, 101, "pageSize")])
    def test_out_of_bounds_rejected(self, index, size, bad_field):
        with pytest.raises(ValidationFailed) as exc_info:
            PageSpec.parse(index, size, default_size=10, max_size=100)
        assert bad_field in exc_info.value.errors

    @pytest.mark.parametrize("total, expected", [(0, 0), (1, 1), (10, 1), (11, 2), (15, 2)])
    def test_page_count(self, total, expected):
        assert PageSpec(0, 10).page_count(total) == expected


def test_query_is_always_owner_scoped(alice):
    stmt = build_trade_query(TradeFilter(owner_id=alice.id, strategy_id=uuid.uuid4(), is_backtest=False))
    sql = str(stmt)
    assert "trade.user_id" in sql
    assert "trade.strategy_id" in sql
    assert "trade.is_backtest" in sql
    assert "ORDER BY trade.created_at DESC, trade.id ASC" in sql


# ---------------------------------------------------------------------------
# 2. Against the database
# ---------------------------------------------------------------------------

@pytest.fixture
def raw_strategy(session, alice) -> Strategy:
    strategy = Strategy(user_id=alice.id, name="Scalper", instrument=Instrument.CRYPTO)
    session.add(strategy)
    session.commit()
    session.refresh(strategy)
    return strategy


def _insert(session, owner_id, strategy_id, count, *, is_backtest=False, start=0, step_minutes=1):
    """Insert trades directly so created_at is under test control."""
    trades = []
    for i in range(count):
        trades.append(
            Trade(
                user_id=owner_id,
                strategy_id=strategy_id,
                is_backtest=is_backtest,
                status=TradeStatus.ORDER_PLACED,
                asset="BTC",
                profit_loss=float(i),
                created_at=BASE + timedelta(minutes=(start + i) * step_minutes),
            )
        )
    session.add_all(trades)
    session.commit()
    return [t.id for t in trades]


class TestPartition:
    def test_live_and_backtest_never_mix(self, session, alice, raw_strategy):
        live_ids = _insert(session, alice.id, raw_strategy.id, 4)
        backtest_ids = _insert(session, alice.id, raw_strategy.id, 3, is_backtest=True)

        live = TradeFilter(owner_id=alice.id, strategy_id=raw_strategy.id, is_backtest=False)
        backtest = TradeFilter(owner_id=alice.id, strategy_id=raw_strategy.id, is_backtest=True)

        assert {t.id for t in fetch_trades(session, live)} == set(live_ids)
        assert {t.id for t in fetch_trades(session, backtest)} == set(backtest_ids)
        assert count_trades(session, live) == 4
        assert count_trades(session, backtest) == 3

    def test_none_selects_both_partitions(self, session, alice, raw_strategy):
        _insert(session, alice.id, raw_strategy.id, 2)
        _insert(session, alice.id, raw_strategy.id, 2, is_backtest=True)
        both = TradeFilter(owner_id=alice.id, strategy_id=raw_strategy.id, is_backtest=None)
        assert count_trades(session, both) == 4

    def test_other_owner_sees_nothing(self, session, alice, bob, raw_strategy):
        _insert(session, alice.id, raw_strategy.id, 3)
        foreign = TradeFilter(owner_id=bob.id, strategy_id=raw_strategy.id, is_backtest=False)
        assert fetch_trades(session, foreign) == []
        assert count_trades(session, foreign) == 0


class TestOrderingAndPages:
    def test_pages_are_disjoint_and_cover_the_sorted_set(self, session, alice, raw_strategy):
        _insert(session, alice.id, raw_strategy.id, 15)

        def page(index):
            f = TradeFilter(
                owner_id=alice.id,
                strategy_id=raw_strategy.id,
                is_backtest=False,
                page=PageSpec(index, 10),
            )
            return [t.id for t in fetch_trades(session, f)]

        everything = [
            t.id for t in fetch_trades(session, TradeFilter(alice.id, raw_strategy.id, False))
        ]
        first, second = page(0), page(1)

        assert len(first) == 10 and len(second) == 5
        assert not set(first) & set(second)
        assert first + second == everything
        assert page(0) == first

    def test_newest_first_by_default(self, session, alice, raw_strategy):
        _insert(session, alice.id, raw_strategy.id, 5)
        rows = fetch_trades(session, TradeFilter(alice.id, raw_strategy.id, False))
        created = [t.created_at for t in rows]
        assert created == sorted(created, reverse=True)

    def test_ties_broken_by_id(self, session, alice, raw_strategy):
        # step 0: every trade shares one created_at
        ids = _insert(session, alice.id, raw_strategy.id, 12, step_minutes=0)
        rows = fetch_trades(session, TradeFilter(alice.id, raw_strategy.id, False))
        assert [t.id for t in rows] == sorted(ids)

        paged = []
        for index in range(3):
            f = TradeFilter(alice.id, raw_strategy.id, False, page=PageSpec(index, 5))
            paged.extend(t.id for t in fetch_trades(session, f))
        assert paged == sorted(ids)

    def test_sort_by_requested_field(self, session, alice, raw_strategy):
        _insert(session, alice.id, raw_strategy.id, 6)
        f = TradeFilter(alice.id, raw_strategy.id, False, sort=SortSpec.parse("profitLoss", "asc"))
        assert [t.profit_loss for t in fetch_trades(session, f)] == [0.0, 1.0, 2.0, 3.0, 4.0, 5.0]

    def test_page_past_the_end_is_empty(self, session, alice, raw_strategy):
        _insert(session, alice.id, raw_strategy.id, 3)
        f = TradeFilter(alice.id, raw_strategy.id, False, page=PageSpec(5, 10))
        assert fetch_trades(session, f) == []
        assert count_trades(session, f) == 3

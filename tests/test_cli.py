"""Tests for the seed-trades CLI helpers."""

import pytest
from sqlmodel import func, select

import journal.cli as cli
from journal.models import Strategy, Trade
from journal.models.enums import TradeResult


@pytest.mark.parametrize("result", list(TradeResult))
def test_random_profit_loss_matches_result(result):
    for _ in range(20):
        pl = cli._random_profit_loss(result)
        if result == TradeResult.WIN:
            assert pl > 0
        elif result == TradeResult.LOSS:
            assert pl < 0


def test_generated_trades_pass_validation(session, journal, strategy):
    row = session.get(Strategy, strategy.id)
    for is_backtest in (False, True):
        payload = cli.generate_trade(row, ["EUR/USD", "GBP/JPY"], is_backtest=is_backtest)
        result = journal.create_trade(payload)
        assert result.success, result.errors
        assert result.data.is_backtest is is_backtest
        assert "Setup" in result.data.custom_values


def test_seed_trades(engine, session, alice, strategy, monkeypatch, capsys):
    monkeypatch.setattr(cli, "engine", engine)
    monkeypatch.setattr(cli, "create_db_and_tables", lambda: None)

    cli.seed_trades("alice", "Archer Full", count=8)

    assert "Seeded 8/8" in capsys.readouterr().out
    assert session.exec(select(func.count()).select_from(Trade)).one() == 8


def test_seed_trades_unknown_user(engine, monkeypatch):
    monkeypatch.setattr(cli, "engine", engine)
    monkeypatch.setattr(cli, "create_db_and_tables", lambda: None)

    with pytest.raises(SystemExit):
        cli.seed_trades("nobody", "Archer Full")

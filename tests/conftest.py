"""Shared test fixtures: in-memory database, users, journal and HTTP client."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from journal.database import create_db_and_tables, get_session
from journal.main import app
from journal.models import User
from journal.models.enums import FieldType, Instrument
from journal.services.auth import create_access_token
from journal.services.journal import TradeJournal


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


def make_user(session: Session, username: str, **kwargs) -> User:
    user = User(
        username=username,
        hashed_password=kwargs.pop("hashed_password", "not-a-real-hash"),
        totp_secret=kwargs.pop("totp_secret", "JBSWY3DPEHPK3PXP"),
        **kwargs,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def alice(session) -> User:
    return make_user(session, "alice")


@pytest.fixture
def bob(session) -> User:
    return make_user(session, "bob")


@pytest.fixture
def journal(session, alice) -> TradeJournal:
    return TradeJournal(session, alice)


STRATEGY_PAYLOAD = {
    "name": "Archer Full",
    "description": "London session breakouts",
    "instrument": Instrument.FOREX,
    "custom_fields": [
        {"name": "Setup", "type": FieldType.SELECT, "options": ["Breakout", "Pullback"], "required": True},
        {"name": "Confluences", "type": FieldType.MULTI_SELECT, "options": ["HTF trend", "Liquidity sweep", "FVG"]},
        {"name": "Comment", "type": FieldType.TEXT},
    ],
}


@pytest.fixture
def strategy(journal):
    """Alice's strategy with a select, a multi-select and a text field."""
    result = journal.create_strategy(STRATEGY_PAYLOAD)
    assert result.success, result.errors
    return result.data


def trade_payload(strategy_id, **overrides) -> dict:
    payload = {
        "strategy_id": strategy_id,
        "status": "closed",
        "asset": "EUR/USD",
        "direction": "long",
        "result": "win",
        "profit_loss": 2.5,
        "custom_values": {"Setup": "Breakout"},
    }
    payload.update(overrides)
    return payload


def log_trade(journal: TradeJournal, strategy_id, **overrides):
    result = journal.create_trade(trade_payload(strategy_id, **overrides))
    assert result.success, (result.message, result.errors)
    return result.data


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

@pytest.fixture
def client(engine):
    """TestClient with one fresh session per request."""

    def _session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def api_users(engine):
    """Two users created outside any request session."""
    with Session(engine) as session:
        users = make_user(session, "carol"), make_user(session, "dave")
        # Each commit expires the users created before it
        for user in users:
            session.refresh(user)
        return users


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}

"""CLI tool for admin operations.

Usage:
    python -m journal.cli create-user
    python -m journal.cli seed-trades <username> <strategy name> [count]
"""

import sys
import getpass
import logging
import random
from datetime import timedelta

from sqlmodel import Session, select

from journal.database import engine, create_db_and_tables
from journal.models.enums import Direction, FieldType, TradeResult, TradeStatus
from journal.models.strategy import Strategy
from journal.models.user import User
from journal.services.auth import hash_password, generate_totp_secret, get_totp_uri
from journal.services.journal import TradeJournal
from journal.utils.constants import assets_for_instrument
from journal.utils.logging import setup_logging
from journal.utils.time import utcnow

logger = logging.getLogger(__name__)


def create_user():
    """Create a user with TOTP setup."""
    create_db_and_tables()

    username = input("Username: ").strip()
    if not username:
        print("Username cannot be empty.")
        sys.exit(1)

    with Session(engine) as session:
        existing = session.exec(select(User).where(User.username == username)).first()
        if existing:
            print(f"User '{username}' already exists.")
            sys.exit(1)

    password = getpass.getpass("Password: ")
    password_confirm = getpass.getpass("Confirm password: ")
    if password != password_confirm:
        print("Passwords do not match.")
        sys.exit(1)

    totp_secret = generate_totp_secret()
    totp_uri = get_totp_uri(totp_secret, username)

    user = User(
        username=username,
        hashed_password=hash_password(password),
        totp_secret=totp_secret,
    )

    with Session(engine) as session:
        session.add(user)
        session.commit()

    print(f"\nUser '{username}' created successfully.")
    print(f"\nTOTP Secret: {totp_secret}")
    print(f"TOTP URI: {totp_uri}")
    print("\nScan the QR code below with your authenticator app:")

    try:
        import qrcode
        qr = qrcode.QRCode(box_size=1, border=1)
        qr.add_data(totp_uri)
        qr.make(fit=True)
        qr.print_ascii(invert=True)
    except ImportError:
        print("(Install qrcode[pil] to display QR code in terminal)")


def _random_profit_loss(result: TradeResult) -> float:
    """Profit/loss percentage consistent with the result."""
    if result == TradeResult.WIN:
        return round(random.uniform(0.5, 12), 2)
    if result == TradeResult.LOSS:
        return -round(random.uniform(0.5, 12), 2)
    return round(random.uniform(-0.1, 0.1), 2)


def _random_custom_value(field):
    if field.type == FieldType.TEXT:
        return random.choice(["Clean setup", "Late entry", "News spike", "Followed plan"])
    options = field.options or []
    if not options:
        return None
    if field.type == FieldType.SELECT:
        return random.choice(options)
    return random.sample(options, k=random.randint(1, len(options)))


def generate_trade(strategy: Strategy, assets: list[str], is_backtest: bool) -> dict:
    """Random closed trade payload for a strategy."""
    result = random.choices(
        [TradeResult.WIN, TradeResult.LOSS, TradeResult.BREAK_EVEN], weights=[5, 4, 1]
    )[0]
    opened = utcnow() - timedelta(days=random.randint(1, 180), minutes=random.randint(0, 1440))
    closed = opened + timedelta(minutes=random.randint(5, 60 * 24 * 5))
    return {
        "strategy_id": strategy.id,
        "is_backtest": is_backtest,
        "status": TradeStatus.CLOSED,
        "asset": random.choice(assets),
        "date_opened": opened,
        "date_closed": closed,
        "direction": random.choice(list(Direction)),
        "result": result,
        "profit_loss": _random_profit_loss(result),
        "custom_values": {
            f.name: value
            for f in strategy.custom_fields
            if (value := _random_custom_value(f)) is not None
        },
    }


def seed_trades(username: str, strategy_name: str, count: int = 50):
    """Fill a strategy with random closed trades, split between live and backtest."""
    create_db_and_tables()
    with Session(engine) as session:
        user = session.exec(select(User).where(User.username == username)).first()
        if user is None:
            print(f"User '{username}' not found.")
            sys.exit(1)
        strategy = session.exec(
            select(Strategy).where(Strategy.user_id == user.id, Strategy.name == strategy_name)
        ).first()
        if strategy is None:
            print(f"Strategy '{strategy_name}' not found for '{username}'.")
            sys.exit(1)

        assets = assets_for_instrument(strategy.instrument.value) or ["EUR/USD"]
        journal = TradeJournal(session, user)
        created = 0
        for _ in range(count):
            result = journal.create_trade(generate_trade(strategy, assets, is_backtest=random.random() < 0.5))
            if result.success:
                created += 1
            else:
                logger.warning(f"Skipped trade: {result.message} {result.errors}")

    print(f"Seeded {created}/{count} trades into '{strategy_name}'.")


def main():
    setup_logging()
    if len(sys.argv) < 2:
        print("Usage: python -m journal.cli <command>")
        print("Commands: create-user, seed-trades <username> <strategy name> [count]")
        sys.exit(1)

    command = sys.argv[1]
    if command == "create-user":
        create_user()
    elif command == "seed-trades":
        if len(sys.argv) < 4:
            print("Usage: python -m journal.cli seed-trades <username> <strategy name> [count]")
            sys.exit(1)
        count = int(sys.argv[4]) if len(sys.argv) > 4 else 50
        seed_trades(sys.argv[2], sys.argv[3], count)
    else:
        print(f"Unknown command: {command}")
        sys.exit(1)


if __name__ == "__main__":
    main()

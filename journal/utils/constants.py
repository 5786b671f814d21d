"""Shared constants: the asset catalogue offered per instrument."""

FOREX_PAIRS = [
    "EUR/USD", "EUR/AUD", "EUR/GBP", "EUR/JPY", "EUR/CHF", "EUR/NZD",
    "USD/CAD", "USD/CHF", "USD/JPY",
    "CAD/JPY", "CAD/CHF", "CHF/JPY",
    "GBP/JPY", "GBP/CHF", "GBP/AUD", "GBP/NZD", "GBP/USD", "GBP/CAD",
    "AUD/CAD", "AUD/CHF", "AUD/JPY", "AUD/NZD", "AUD/USD",
    "NZD/JPY", "NZD/USD", "NZD/CAD", "NZD/CHF",
    # Metals are quoted like currency pairs
    "XAU/USD", "XAG/USD",
]

CRYPTO_ASSETS = ["BTC"]

STOCK_ASSETS = ["AAPL"]

ASSETS_BY_INSTRUMENT: dict[str, list[str]] = {
    "forex": FOREX_PAIRS,
    "crypto": CRYPTO_ASSETS,
    "stocks": STOCK_ASSETS,
}


def assets_for_instrument(instrument: str) -> list[str]:
    """Assets for an instrument name (case-insensitive); unknown instruments have none."""
    return list(ASSETS_BY_INSTRUMENT.get(instrument.strip().lower(), []))

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

import pandas as pd
import yfinance as yf

from ..models.holding import DividendPayment

"""Market data lookups.

Two lookups are needed per symbol: the current share price and the dividend
payment history. ``MarketDataProvider`` is the interface the row calculator
depends on; ``YahooFinanceProvider`` implements it on top of yfinance.
``MarketDataCache`` wraps a provider for the lifetime of one table update so
repeated symbols trigger a single lookup.

Provider failures (network errors, empty frames) are reported as "not found"
(``None``), never raised.
"""

__all__ = [
    "MarketDataProvider",
    "YahooFinanceProvider",
    "MarketDataCache",
    "dividends_since",
]

logger = logging.getLogger(__name__)


class MarketDataProvider(Protocol):
    def fetch_current_price(self, symbol: str) -> float | None:
        ...

    def fetch_dividend_history(self, symbol: str) -> list[DividendPayment] | None:
        ...


class YahooFinanceProvider:
    """Yahoo Finance lookups through ``yfinance.Ticker``.

    The current price is the last close of a short intraday history window
    (by default 5 days of 1-minute bars).
    """

    def __init__(self, price_period: str = "5d", price_interval: str = "1m") -> None:
        self.price_period = price_period
        self.price_interval = price_interval
        # yfinance prints failed downloads itself; our own DEBUG line is enough
        logging.getLogger("yfinance").setLevel(logging.CRITICAL)

    def fetch_current_price(self, symbol: str) -> float | None:
        try:
            history = yf.Ticker(symbol).history(period=self.price_period, interval=self.price_interval)
        except Exception as e:  # yfinance surfaces network errors with assorted types
            logger.debug(f"price lookup failed symbol={symbol}: {e}")
            return None
        if history is None or history.empty or "Close" not in history:
            logger.debug(f"no price history symbol={symbol}")
            return None
        closes = history["Close"].dropna()
        if closes.empty:
            return None
        value = float(closes.iloc[-1])
        return value if value > 0 else None

    def fetch_dividend_history(self, symbol: str) -> list[DividendPayment] | None:
        try:
            series = yf.Ticker(symbol).dividends
        except Exception as e:
            logger.debug(f"dividend lookup failed symbol={symbol}: {e}")
            return None
        if series is None or series.empty:
            logger.debug(f"no dividend history symbol={symbol}")
            return None
        return _series_to_payments(series)


def _series_to_payments(series: pd.Series) -> list[DividendPayment]:
    """Convert a date-indexed amount Series into payments (oldest first)."""
    index = pd.DatetimeIndex(series.index)
    if index.tz is not None:
        index = index.tz_localize(None)
    payments = [
        DividendPayment(ex_date=ts.to_pydatetime(), amount=float(amount))
        for ts, amount in zip(index, series.tolist(), strict=True)
        if not pd.isna(amount) and amount > 0
    ]
    payments.sort(key=lambda p: p.ex_date)
    return payments


def dividends_since(payments: Sequence[DividendPayment], purchase_date: datetime, now: datetime) -> float:
    """Total dividend per share paid after ``purchase_date`` and up to ``now``.

    Returns 0.0 when the history is empty or does not reach back to the
    purchase date (a partial history would understate the total).
    """
    if not payments:
        return 0.0
    ordered = sorted(payments, key=lambda p: p.ex_date)
    if ordered[0].ex_date > purchase_date:
        return 0.0
    return sum(p.amount for p in ordered if purchase_date < p.ex_date <= now)


class MarketDataCache:
    """Per-run memo of provider lookups.

    Each symbol is looked up at most once per lookup kind; a "not found"
    result is cached too. Create one instance per table update.
    """

    def __init__(self, provider: MarketDataProvider) -> None:
        self.provider = provider
        self._prices: dict[str, float] = {}
        self._dividends: dict[str, list[DividendPayment]] = {}
        self._dividend_totals: dict[tuple[str, datetime], float] = {}

    def price(self, symbol: str) -> float:
        """Current share price, 0.0 when unavailable."""
        if symbol not in self._prices:
            value = self.provider.fetch_current_price(symbol)
            self._prices[symbol] = float(value) if value else 0.0
            logger.debug(f"price symbol={symbol} value={self._prices[symbol]}")
        return self._prices[symbol]

    def dividend_history(self, symbol: str) -> list[DividendPayment]:
        if symbol not in self._dividends:
            payments = self.provider.fetch_dividend_history(symbol)
            self._dividends[symbol] = list(payments) if payments else []
            logger.debug(f"dividends symbol={symbol} payments={len(self._dividends[symbol])}")
        return self._dividends[symbol]

    def dividend_per_share(self, symbol: str, purchase_date: datetime, now: datetime) -> float:
        """Dividends per share since purchase, 0.0 when unavailable."""
        key = (symbol, purchase_date)
        if key not in self._dividend_totals:
            self._dividend_totals[key] = dividends_since(self.dividend_history(symbol), purchase_date, now)
        return self._dividend_totals[key]

    @property
    def price_lookups(self) -> int:
        return len(self._prices)

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Holding and dividend payment models.

A Holding is the transient, parsed view of one table row; it is never
written back, only its derived values are.
"""

__all__ = [
    "DAYS_PER_YEAR",
    "DividendPayment",
    "Holding",
]

DAYS_PER_YEAR = 365


@dataclass(frozen=True)
class DividendPayment:
    """One dividend distribution of a symbol."""
    ex_date: datetime
    amount: float  # per share, dollars


@dataclass(frozen=True)
class Holding:
    """Parsed required fields of a single purchase row.

    Attributes:
        symbol: Upper-cased symbol with whitespace removed
        purchase_date: Naive datetime of purchase
        purchase_price: Price per share paid
        shares: Share count (may be negative, not validated)
    """
    symbol: str
    purchase_date: datetime
    purchase_price: float
    shares: int

    def years_owned(self, now: datetime) -> float:
        """Elapsed time since purchase in 365-day years, floored at one day."""
        elapsed_days = (now - self.purchase_date).total_seconds() / 86400
        return max(elapsed_days, 1) / DAYS_PER_YEAR

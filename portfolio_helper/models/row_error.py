from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

"""Row-level error model.

Errors found while calculating a row are collected as discrete RowError
values and only rendered into the row's Error cell when the table is written.
"""

__all__ = [
    "RowErrorCode",
    "RowError",
    "render_errors",
]


class RowErrorCode(Enum):
    """Classification of a row problem.

    Every code except DIVIDEND_NOT_FOUND stops the row's calculation.
    """
    PURCHASE_PRICE = "PURCHASE_PRICE"
    PURCHASE_DATE = "PURCHASE_DATE"
    SHARES = "SHARES"
    PRICE_NOT_FOUND = "PRICE_NOT_FOUND"
    DIVIDEND_NOT_FOUND = "DIVIDEND_NOT_FOUND"

    @property
    def fatal(self) -> bool:
        return self is not RowErrorCode.DIVIDEND_NOT_FOUND


_MESSAGES: dict[RowErrorCode, str] = {
    RowErrorCode.PURCHASE_PRICE: "Could not parse Purchase Share Price as a double",
    RowErrorCode.PURCHASE_DATE: "Could not parse Purchase Date as a date",
    RowErrorCode.SHARES: "Could not parse Shares as an integer",
    RowErrorCode.PRICE_NOT_FOUND: "Could not find price information",
    RowErrorCode.DIVIDEND_NOT_FOUND: "Could not find dividend information",
}


@dataclass(frozen=True)
class RowError:
    code: RowErrorCode
    message: str

    @staticmethod
    def create(code: RowErrorCode) -> RowError:
        """Create a RowError carrying the standard message for ``code``."""
        return RowError(code=code, message=_MESSAGES[code])


def render_errors(errors: Iterable[RowError]) -> str:
    """Join errors into Error cell text, each message followed by ``"; "``."""
    return "".join(f"{e.message}; " for e in errors)

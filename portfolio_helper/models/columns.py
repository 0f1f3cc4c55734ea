from __future__ import annotations

from collections.abc import Iterator, Mapping
from enum import Enum

"""Semantic columns and the per-table column map.

The enumeration order is significant: the first four members are the required
input columns, the rest are derived output columns appended to the header (in
this order) when absent.
"""

__all__ = [
    "SemanticColumn",
    "COLUMN_LABELS",
    "LAST_REQUIRED_COLUMN",
    "ColumnMap",
]


class SemanticColumn(Enum):
    """Logical field of a portfolio table, independent of its physical position."""
    SYMBOL = "Stock Symbol"
    PURCHASE_DATE = "Purchase Date"
    PURCHASE_SHARE_PRICE = "Purchase Share Price"
    SHARES = "Shares"
    PURCHASE_VALUE = "Total Purchase Cost"
    CURRENT_SHARE_PRICE = "Current Share Price"
    CURRENT_VALUE = "Current Holdings"
    CAPITAL_GAIN = "Capital Gain"
    CAPITAL_GAIN_PERCENT = "Capital Gain %"
    ANNUAL_CAPITAL_GAIN_PERCENT = "Annual Capital Gain %"
    DIVIDENDS_PER_SHARE = "Dividends Per Share"
    TOTAL_DIVIDENDS = "Total Dividends"
    DIVIDEND_PERCENT = "Dividend %"
    ANNUAL_DIVIDEND_PERCENT = "Annual Dividend %"
    TOTAL_GAIN = "Total Gain"
    TOTAL_GAIN_PERCENT = "Total Gain %"
    ANNUAL_TOTAL_GAIN_PERCENT = "Annual Total Gain %"
    ERROR = "Error Notes"

    @property
    def label(self) -> str:
        """Canonical header text."""
        return self.value

    @property
    def required(self) -> bool:
        return _POSITIONS[self] <= _POSITIONS[LAST_REQUIRED_COLUMN]


LAST_REQUIRED_COLUMN = SemanticColumn.SHARES

_POSITIONS: dict[SemanticColumn, int] = {c: i for i, c in enumerate(SemanticColumn)}

COLUMN_LABELS: tuple[str, ...] = tuple(c.label for c in SemanticColumn)


class ColumnMap(Mapping[SemanticColumn, int]):
    """Read-only mapping of semantic column -> physical cell index.

    Built once per table by the schema resolver and handed to row processing.
    """

    def __init__(self, indices: Mapping[SemanticColumn, int]) -> None:
        missing = [c.label for c in SemanticColumn if c not in indices]
        if missing:
            raise ValueError(f"column map incomplete: {missing}")
        self._indices = dict(indices)

    def __getitem__(self, column: SemanticColumn) -> int:
        return self._indices[column]

    def __iter__(self) -> Iterator[SemanticColumn]:
        return iter(self._indices)

    def __len__(self) -> int:
        return len(self._indices)

    @property
    def width(self) -> int:
        """Minimum row length holding every mapped column."""
        return max(self._indices.values()) + 1

    def __repr__(self) -> str:  # pragma: no cover (debug aid)
        pairs = ", ".join(f"{c.name}={i}" for c, i in self._indices.items())
        return f"ColumnMap({pairs})"

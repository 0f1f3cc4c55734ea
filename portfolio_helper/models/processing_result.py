from __future__ import annotations

from dataclasses import dataclass, field

"""Aggregation models for a processed table."""


@dataclass
class Totals:
    """Running sums across every row that reached metric computation."""
    shares: int = 0
    purchase_cost: float = 0.0
    current_value: float = 0.0
    dividend_dollars: float = 0.0

    def add(self, shares: int, purchase_cost: float, current_value: float, dividend_dollars: float) -> None:
        self.shares += shares
        self.purchase_cost += purchase_cost
        self.current_value += current_value
        self.dividend_dollars += dividend_dollars

    @property
    def capital_gain(self) -> float:
        return self.current_value - self.purchase_cost

    @property
    def total_gain(self) -> float:
        return self.capital_gain + self.dividend_dollars


@dataclass(frozen=True)
class TableResult:
    """Outcome of updating one portfolio table.

    ``lines`` is the serialized output (header, body rows, TOTAL row) ready to
    be written.
    """
    lines: list[str]
    totals: Totals
    body_rows: int  # body rows after trailing blank lines were stripped
    processed_rows: int  # rows that reached metric computation
    failed_rows: int  # rows stopped by a parse or price error
    blank_rows: int  # rows skipped for an empty symbol
    warnings: int  # rows computed with a dividend warning
    replaced_total: bool = False
    added_columns: list[str] = field(default_factory=list)

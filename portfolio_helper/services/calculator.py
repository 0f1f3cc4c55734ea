from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from ..models.columns import ColumnMap, SemanticColumn
from ..models.holding import Holding
from ..models.processing_result import Totals
from ..models.row_error import RowError, RowErrorCode, render_errors
from .formatting import format_currency, format_percent, parse_currency, parse_date, parse_shares
from .market_data import MarketDataCache

"""Row calculation engine.

For each body row: parse the required fields, look up market data, write the
derived cells and accumulate portfolio totals. A parse failure or a missing
price stops the row (derived cells stay blank, totals untouched); a missing
dividend history is only a warning and the row is computed with zero
dividends.
"""

__all__ = [
    "TOTAL_SYMBOL",
    "MIN_PURCHASE_COST",
    "RowOutcome",
    "RowStatus",
    "RowCalculator",
    "normalize_symbol",
]

logger = logging.getLogger(__name__)

TOTAL_SYMBOL = "TOTAL"
MIN_PURCHASE_COST = 0.01

Row = list[str | None]


class RowStatus(Enum):
    """Outcome of one body row.

    - PROCESSED: derived cells written, row counted in totals
    - FAILED: parse error or missing price, derived cells left blank
    - BLANK: empty symbol, row passed through
    - PRIOR_TOTAL: previous aggregate row, dropped from the output
    """
    PROCESSED = "processed"
    FAILED = "failed"
    BLANK = "blank"
    PRIOR_TOTAL = "prior_total"


@dataclass
class RowOutcome:
    status: RowStatus
    errors: list[RowError] = field(default_factory=list)

    @property
    def warned(self) -> bool:
        return any(not e.code.fatal for e in self.errors)


def normalize_symbol(text: str | None) -> str:
    """Remove all whitespace and upper-case."""
    if not text:
        return ""
    return "".join(text.split()).upper()


class RowCalculator:
    """Processes rows of one table against a shared column map, cache and totals."""

    def __init__(
        self,
        columns: ColumnMap,
        market: MarketDataCache,
        now: datetime | None = None,
    ) -> None:
        self.columns = columns
        self.market = market
        self.now = now if now is not None else datetime.now()
        self.totals = Totals()

    def _get(self, row: Row, column: SemanticColumn) -> str:
        return row[self.columns[column]] or ""

    def _set(self, row: Row, column: SemanticColumn, value: str) -> None:
        row[self.columns[column]] = value

    def process_row(self, row: Row, is_last: bool = False) -> RowOutcome:
        """Update ``row`` in place.

        ``row`` must already be padded to at least ``columns.width`` cells.
        ``is_last`` marks the final body row, the only position at which a
        ``TOTAL`` symbol is treated as a previous aggregate row.
        """
        self._set(row, SemanticColumn.ERROR, "")

        symbol = normalize_symbol(self._get(row, SemanticColumn.SYMBOL))
        if not symbol:
            return RowOutcome(RowStatus.BLANK)
        if symbol == TOTAL_SYMBOL and is_last:
            return RowOutcome(RowStatus.PRIOR_TOTAL)

        errors: list[RowError] = []
        holding = self._parse_holding(row, symbol, errors)
        if holding is None:
            return self._finish(row, RowStatus.FAILED, errors)

        current_price = self.market.price(symbol)
        if current_price == 0:
            errors.append(RowError.create(RowErrorCode.PRICE_NOT_FOUND))
            return self._finish(row, RowStatus.FAILED, errors)
        self._set(row, SemanticColumn.CURRENT_SHARE_PRICE, format_currency(current_price))

        dividend = self.market.dividend_per_share(symbol, holding.purchase_date, self.now)
        if dividend == 0:
            errors.append(RowError.create(RowErrorCode.DIVIDEND_NOT_FOUND))
        self._set(row, SemanticColumn.DIVIDENDS_PER_SHARE, format_currency(dividend))

        self._write_metrics(row, holding, current_price, dividend)
        return self._finish(row, RowStatus.PROCESSED, errors)

    def _parse_holding(self, row: Row, symbol: str, errors: list[RowError]) -> Holding | None:
        purchase_price = parse_currency(self._get(row, SemanticColumn.PURCHASE_SHARE_PRICE))
        if purchase_price is None:
            errors.append(RowError.create(RowErrorCode.PURCHASE_PRICE))
            return None
        purchase_date = parse_date(self._get(row, SemanticColumn.PURCHASE_DATE))
        if purchase_date is None:
            errors.append(RowError.create(RowErrorCode.PURCHASE_DATE))
            return None
        shares = parse_shares(self._get(row, SemanticColumn.SHARES))
        if shares is None:
            errors.append(RowError.create(RowErrorCode.SHARES))
            return None
        return Holding(symbol=symbol, purchase_date=purchase_date, purchase_price=purchase_price, shares=shares)

    def _write_metrics(self, row: Row, holding: Holding, current_price: float, dividend: float) -> None:
        years = holding.years_owned(self.now)
        shares = holding.shares

        purchase_cost = max(holding.purchase_price * shares, MIN_PURCHASE_COST)
        current_value = current_price * shares
        capital_gain = (current_price - holding.purchase_price) * shares
        capital_gain_pct = capital_gain * 100 / purchase_cost
        total_dividends = dividend * shares
        dividend_pct = total_dividends * 100 / purchase_cost
        total_gain = capital_gain + total_dividends
        total_gain_pct = total_gain * 100 / purchase_cost

        C = SemanticColumn
        self._set(row, C.PURCHASE_VALUE, format_currency(purchase_cost))
        self._set(row, C.CURRENT_VALUE, format_currency(current_value))
        self._set(row, C.CAPITAL_GAIN, format_currency(capital_gain))
        self._set(row, C.CAPITAL_GAIN_PERCENT, format_percent(capital_gain_pct))
        self._set(row, C.ANNUAL_CAPITAL_GAIN_PERCENT, format_percent(capital_gain_pct / years))
        self._set(row, C.TOTAL_DIVIDENDS, format_currency(total_dividends))
        self._set(row, C.DIVIDEND_PERCENT, format_percent(dividend_pct))
        self._set(row, C.ANNUAL_DIVIDEND_PERCENT, format_percent(dividend_pct / years))
        self._set(row, C.TOTAL_GAIN, format_currency(total_gain))
        self._set(row, C.TOTAL_GAIN_PERCENT, format_percent(total_gain_pct))
        self._set(row, C.ANNUAL_TOTAL_GAIN_PERCENT, format_percent(total_gain_pct / years))

        self.totals.add(shares, purchase_cost, current_value, total_dividends)

    def _finish(self, row: Row, status: RowStatus, errors: list[RowError]) -> RowOutcome:
        self._set(row, SemanticColumn.ERROR, render_errors(errors))
        if errors:
            logger.debug(
                f"row symbol={self._get(row, SemanticColumn.SYMBOL).strip()} "
                f"status={status.value} errors={[e.code.value for e in errors]}"
            )
        return RowOutcome(status, errors)

    def build_total_row(self, width: int) -> list[str]:
        """Synthesize the TOTAL row from the accumulated totals.

        Percentage cells are left blank when the total purchase cost is zero
        (no row was computed).
        """
        t = self.totals
        C = SemanticColumn
        row: list[str] = [""] * max(width, self.columns.width)

        def put(column: SemanticColumn, value: str) -> None:
            row[self.columns[column]] = value

        def pct(amount: float) -> str:
            return format_percent(amount * 100 / t.purchase_cost) if t.purchase_cost else ""

        put(C.SYMBOL, TOTAL_SYMBOL)
        put(C.SHARES, str(t.shares))
        put(C.PURCHASE_VALUE, format_currency(t.purchase_cost))
        put(C.CURRENT_VALUE, format_currency(t.current_value))
        put(C.CAPITAL_GAIN, format_currency(t.capital_gain))
        put(C.CAPITAL_GAIN_PERCENT, pct(t.capital_gain))
        put(C.TOTAL_DIVIDENDS, format_currency(t.dividend_dollars))
        put(C.DIVIDEND_PERCENT, pct(t.dividend_dollars))
        put(C.TOTAL_GAIN, format_currency(t.total_gain))
        put(C.TOTAL_GAIN_PERCENT, pct(t.total_gain))
        return row

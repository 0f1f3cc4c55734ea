from __future__ import annotations

from datetime import datetime

from portfolio_helper.models.columns import COLUMN_LABELS, SemanticColumn
from portfolio_helper.models.row_error import RowErrorCode
from portfolio_helper.services.calculator import RowCalculator, RowStatus, normalize_symbol
from portfolio_helper.services.market_data import MarketDataCache
from portfolio_helper.services.schema import resolve_columns

C = SemanticColumn
WIDTH = len(COLUMN_LABELS)


def _calculator(provider, now: datetime) -> RowCalculator:
    schema = resolve_columns(list(COLUMN_LABELS[:4]))
    return RowCalculator(schema.columns, MarketDataCache(provider), now=now)


def _row(symbol: str, date: str, price: str, shares: str) -> list[str | None]:
    return [symbol, date, price, shares] + [None] * (WIDTH - 4)


def _cell(row, column: SemanticColumn):
    return row[list(SemanticColumn).index(column)]


def test_numeric_scenario(provider, now):
    calc = _calculator(provider, now)
    row = _row("MSFT", "1/1/2023", "$100.00", "10")
    outcome = calc.process_row(row)

    assert outcome.status is RowStatus.PROCESSED
    assert outcome.errors == []
    assert _cell(row, C.CURRENT_SHARE_PRICE) == "$150.00"
    assert _cell(row, C.PURCHASE_VALUE) == "$1,000.00"
    assert _cell(row, C.CURRENT_VALUE) == "$1,500.00"
    assert _cell(row, C.CAPITAL_GAIN) == "$500.00"
    assert _cell(row, C.CAPITAL_GAIN_PERCENT) == "50%"
    assert _cell(row, C.ANNUAL_CAPITAL_GAIN_PERCENT) == "50%"
    assert _cell(row, C.DIVIDENDS_PER_SHARE) == "$5.00"
    assert _cell(row, C.TOTAL_DIVIDENDS) == "$50.00"
    assert _cell(row, C.DIVIDEND_PERCENT) == "5%"
    assert _cell(row, C.ANNUAL_DIVIDEND_PERCENT) == "5%"
    assert _cell(row, C.TOTAL_GAIN) == "$550.00"
    assert _cell(row, C.TOTAL_GAIN_PERCENT) == "55%"
    assert _cell(row, C.ANNUAL_TOTAL_GAIN_PERCENT) == "55%"
    assert _cell(row, C.ERROR) == ""

    t = calc.totals
    assert (t.shares, t.purchase_cost, t.current_value, t.dividend_dollars) == (10, 1000.0, 1500.0, 50.0)


def test_annual_percent_uses_years_owned(provider):
    calc = _calculator(provider, datetime(2025, 1, 1))  # 731 days after 2023-01-01
    row = _row("GME", "2023-01-01", "$10.00", "1")
    calc.process_row(row)
    assert _cell(row, C.CAPITAL_GAIN_PERCENT) == "100%"
    assert _cell(row, C.ANNUAL_CAPITAL_GAIN_PERCENT) == "49.932%"


def test_years_owned_floored_at_one_day(provider, now):
    calc = _calculator(provider, now)
    row = _row("GME", "2024-01-01", "$10.00", "1")  # bought "now"
    calc.process_row(row)
    # 100% over 1/365 of a year
    assert _cell(row, C.ANNUAL_CAPITAL_GAIN_PERCENT) == "36500%"


def test_symbol_is_normalized(provider, now):
    calc = _calculator(provider, now)
    row = _row(" m sft ", "1/1/2023", "$100.00", "10")
    assert calc.process_row(row).status is RowStatus.PROCESSED
    assert provider.price_calls == ["MSFT"]
    assert normalize_symbol(" b r k\t") == "BRK"


def test_blank_symbol_row_untouched(provider, now):
    calc = _calculator(provider, now)
    row = _row("  ", "junk", "junk", "junk")
    before = list(row)
    before[list(SemanticColumn).index(C.ERROR)] = ""
    outcome = calc.process_row(row)
    assert outcome.status is RowStatus.BLANK
    assert row == before
    assert provider.price_calls == []
    assert calc.totals.shares == 0


def test_unparseable_shares(provider, now):
    calc = _calculator(provider, now)
    row = _row("MSFT", "1/1/2023", "$100.00", "ten")
    outcome = calc.process_row(row)
    assert outcome.status is RowStatus.FAILED
    assert [e.code for e in outcome.errors] == [RowErrorCode.SHARES]
    assert _cell(row, C.ERROR) == "Could not parse Shares as an integer; "
    derived = [_cell(row, c) for c in list(SemanticColumn)[4:-1]]
    assert all(v is None for v in derived)
    assert calc.totals.shares == 0
    assert provider.price_calls == []


def test_unparseable_price_stops_before_date(provider, now):
    calc = _calculator(provider, now)
    row = _row("MSFT", "garbage", "abc", "10")
    outcome = calc.process_row(row)
    assert [e.code for e in outcome.errors] == [RowErrorCode.PURCHASE_PRICE]
    assert _cell(row, C.ERROR) == "Could not parse Purchase Share Price as a double; "


def test_unparseable_date(provider, now):
    calc = _calculator(provider, now)
    row = _row("MSFT", "someday", "$1.00", "10")
    calc.process_row(row)
    assert _cell(row, C.ERROR) == "Could not parse Purchase Date as a date; "


def test_price_not_found_skips_row(provider, now):
    calc = _calculator(provider, now)
    row = _row("NOPE", "1/1/2023", "$1.00", "10")
    outcome = calc.process_row(row)
    assert outcome.status is RowStatus.FAILED
    assert _cell(row, C.ERROR) == "Could not find price information; "
    assert _cell(row, C.CURRENT_SHARE_PRICE) is None
    assert provider.dividend_calls == []
    assert calc.totals.purchase_cost == 0


def test_dividend_not_found_is_warning(provider, now):
    calc = _calculator(provider, now)
    row = _row("GME", "1/1/2023", "$10.00", "3")
    outcome = calc.process_row(row)
    assert outcome.status is RowStatus.PROCESSED
    assert outcome.warned
    assert _cell(row, C.ERROR) == "Could not find dividend information; "
    assert _cell(row, C.DIVIDENDS_PER_SHARE) == "$0.00"
    assert _cell(row, C.TOTAL_DIVIDENDS) == "$0.00"
    assert _cell(row, C.TOTAL_GAIN) == "$30.00"
    assert calc.totals.shares == 3


def test_stale_error_cleared(provider, now):
    calc = _calculator(provider, now)
    row = _row("MSFT", "1/1/2023", "$100.00", "10")
    row[-1] = "Could not find price information; "
    calc.process_row(row)
    assert _cell(row, C.ERROR) == ""


def test_purchase_cost_floor(provider, now):
    calc = _calculator(provider, now)
    row = _row("GME", "1/1/2023", "$0.00", "10")
    calc.process_row(row)
    assert _cell(row, C.PURCHASE_VALUE) == "$0.01"
    assert _cell(row, C.CAPITAL_GAIN) == "$200.00"
    assert _cell(row, C.CAPITAL_GAIN_PERCENT) == "2000000%"


def test_total_only_treated_as_prior_aggregate_when_last(provider, now):
    calc = _calculator(provider, now)
    middle = _row("total", "", "", "")
    assert calc.process_row(middle, is_last=False).status is RowStatus.FAILED
    last = _row(" Total ", "", "", "")
    assert calc.process_row(last, is_last=True).status is RowStatus.PRIOR_TOTAL


def test_repeated_symbol_single_price_lookup(provider, now):
    calc = _calculator(provider, now)
    calc.process_row(_row("MSFT", "1/1/2023", "$100.00", "10"))
    calc.process_row(_row("msft", "6/1/2023", "$120.00", "2"))
    assert provider.price_calls == ["MSFT"]
    assert provider.dividend_calls == ["MSFT"]
    assert calc.totals.shares == 12


def test_build_total_row(provider, now):
    calc = _calculator(provider, now)
    calc.process_row(_row("MSFT", "1/1/2023", "$100.00", "10"))
    calc.process_row(_row("AAPL", "1/1/2023", "$150.00", "5"))
    calc.process_row(_row("BAD", "1/1/2023", "$1.00", "x"))
    total = calc.build_total_row(WIDTH + 2)

    assert len(total) == WIDTH + 2
    assert _cell(total, C.SYMBOL) == "TOTAL"
    assert _cell(total, C.SHARES) == "15"
    assert _cell(total, C.PURCHASE_VALUE) == "$1,750.00"
    assert _cell(total, C.CURRENT_VALUE) == "$2,500.00"
    assert _cell(total, C.CAPITAL_GAIN) == "$750.00"
    assert _cell(total, C.CAPITAL_GAIN_PERCENT) == "42.857%"
    assert _cell(total, C.TOTAL_DIVIDENDS) == "$55.00"
    assert _cell(total, C.DIVIDEND_PERCENT) == "3.143%"
    assert _cell(total, C.TOTAL_GAIN) == "$805.00"
    assert _cell(total, C.TOTAL_GAIN_PERCENT) == "46%"
    for column in (C.PURCHASE_DATE, C.PURCHASE_SHARE_PRICE, C.CURRENT_SHARE_PRICE,
                   C.ANNUAL_CAPITAL_GAIN_PERCENT, C.DIVIDENDS_PER_SHARE,
                   C.ANNUAL_DIVIDEND_PERCENT, C.ANNUAL_TOTAL_GAIN_PERCENT, C.ERROR):
        assert _cell(total, column) == ""


def test_total_row_percentages_blank_when_nothing_processed(provider, now):
    calc = _calculator(provider, now)
    calc.process_row(_row("BAD", "1/1/2023", "$1.00", "x"))
    total = calc.build_total_row(WIDTH)
    assert _cell(total, C.SHARES) == "0"
    assert _cell(total, C.PURCHASE_VALUE) == "$0.00"
    assert _cell(total, C.CAPITAL_GAIN_PERCENT) == ""
    assert _cell(total, C.DIVIDEND_PERCENT) == ""
    assert _cell(total, C.TOTAL_GAIN_PERCENT) == ""

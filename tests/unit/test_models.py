from __future__ import annotations

from datetime import datetime

import pytest

from portfolio_helper.models import (
    COLUMN_LABELS,
    ColumnMap,
    Holding,
    RowError,
    RowErrorCode,
    SemanticColumn,
    Totals,
)
from portfolio_helper.models.row_error import render_errors


def test_semantic_column_order_and_labels():
    assert len(COLUMN_LABELS) == 18
    assert COLUMN_LABELS[:4] == ("Stock Symbol", "Purchase Date", "Purchase Share Price", "Shares")
    assert COLUMN_LABELS[-1] == "Error Notes"
    assert [c.required for c in SemanticColumn].count(True) == 4
    assert SemanticColumn.SHARES.required
    assert not SemanticColumn.PURCHASE_VALUE.required


def test_column_map_requires_every_column():
    with pytest.raises(ValueError):
        ColumnMap({SemanticColumn.SYMBOL: 0})


def test_column_map_width():
    cmap = ColumnMap({c: i * 2 for i, c in enumerate(SemanticColumn)})
    assert cmap[SemanticColumn.SHARES] == 6
    assert cmap.width == 35
    assert len(cmap) == 18


def test_holding_years_owned():
    h = Holding(symbol="MSFT", purchase_date=datetime(2023, 1, 1), purchase_price=1.0, shares=1)
    assert h.years_owned(datetime(2024, 1, 1)) == 1.0
    assert h.years_owned(datetime(2023, 1, 1, 12)) == pytest.approx(1 / 365)


def test_render_errors_concatenates_messages():
    errors = [RowError.create(RowErrorCode.PRICE_NOT_FOUND), RowError.create(RowErrorCode.DIVIDEND_NOT_FOUND)]
    assert render_errors(errors) == "Could not find price information; Could not find dividend information; "
    assert render_errors([]) == ""


def test_row_error_fatality():
    assert RowErrorCode.SHARES.fatal
    assert not RowErrorCode.DIVIDEND_NOT_FOUND.fatal


def test_totals_derived_values():
    t = Totals()
    t.add(10, 1000.0, 1500.0, 50.0)
    t.add(5, 750.0, 1000.0, 5.0)
    assert t.capital_gain == 750.0
    assert t.total_gain == 805.0

# Shared pytest fixtures
from __future__ import annotations
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from portfolio_helper.logging.init import reset_logging
from tests.fakes import FakeProvider, dividend_history

# Fixed reference time for holding periods; 2023-01-01 is exactly 365 days earlier.
NOW = datetime(2024, 1, 1)

HEADER = "Stock Symbol,Purchase Date,Purchase Share Price,Shares"


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def provider() -> FakeProvider:
    # MSFT: $5.00/share paid after 2023-01-01; history reaches back to 2022
    return FakeProvider(
        prices={"MSFT": 150.0, "AAPL": 200.0, "GME": 20.0},
        dividends={
            "MSFT": dividend_history(
                ("2022-11-15", 0.68),
                ("2023-03-15", 1.25),
                ("2023-06-15", 1.25),
                ("2023-09-15", 1.25),
                ("2023-12-15", 1.25),
                ("2024-03-15", 1.30),  # after NOW, ignored
            ),
            "AAPL": dividend_history(("2022-01-01", 1.0), ("2023-05-01", 1.0)),
        },
    )


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def portfolio_csv(temp_workdir: Path) -> Path:
    f = temp_workdir / "stocks.csv"
    f.write_text(
        "\n".join([
            HEADER + ",Notes",
            'MSFT,1/1/2023,$100.00,10,"long term, core"',
            "AAPL,2023-01-01,$150.00,5,",
            "",
        ]),
        encoding="utf-8",
    )
    return f


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()

from __future__ import annotations

import math
import re
import warnings
from datetime import datetime

import pandas as pd

"""Cell value parsing and display formatting.

Parsing returns ``None`` on failure rather than raising; the row calculator
turns a ``None`` into the matching RowError.
"""

__all__ = [
    "parse_currency",
    "parse_date",
    "parse_shares",
    "format_currency",
    "format_percent",
]

_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_HAS_DIGIT_RE = re.compile(r"\d")
_NUMERIC_DATE_RE = re.compile(r"^(\d{1,2})[/.-](\d{1,2})[/.-]\d{2,4}$")


def parse_currency(text: str | None) -> float | None:
    """Parse ``$1,234.50`` style text; ``$`` and thousands separators are ignored."""
    if text is None:
        return None
    cleaned = text.replace("$", "").replace(",", "").strip()
    if not cleaned:
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_date(text: str | None) -> datetime | None:
    """Parse a calendar date (``1/1/2018``, ``2018-01-01``, ``Jan 1, 2018`` ...).

    Month-first is assumed for slash dates. Text pandas would only accept by
    re-reading it day-first (``13/1/2023``) is rejected, as are relative
    keywords such as ``today`` that carry no digits.
    """
    if text is None or not _HAS_DIGIT_RE.search(text):
        return None
    numeric = _NUMERIC_DATE_RE.match(text.strip())
    if numeric and int(numeric.group(1)) > 12:
        return None
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("error", UserWarning)
            ts = pd.to_datetime(text.strip(), errors="coerce", dayfirst=False)
    except (ValueError, TypeError, OverflowError, UserWarning):
        return None
    if pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert(None)
    return ts.to_pydatetime()


def parse_shares(text: str | None) -> int | None:
    if text is None:
        return None
    stripped = text.strip()
    if not _INTEGER_RE.match(stripped):
        return None
    return int(stripped)


def format_currency(value: float) -> str:
    """``1234.5`` -> ``$1,234.50``; negatives as ``-$1,234.50``."""
    rounded = round(value, 2)
    if rounded == 0:
        rounded = 0.0  # no "-$0.00"
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.2f}"


def format_percent(value: float) -> str:
    """Round to 3 decimals and drop trailing zeros: ``50.0`` -> ``50%``."""
    rounded = round(value, 3)
    if rounded == 0:
        return "0%"
    text = f"{rounded:.3f}".rstrip("0").rstrip(".")
    return f"{text}%"

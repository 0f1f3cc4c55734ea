"""Domain models for the portfolio helper.

This package contains the value types passed between the table codec, the
column resolver, the row calculator and the orchestrator.
"""

from .columns import (
    COLUMN_LABELS,
    LAST_REQUIRED_COLUMN,
    ColumnMap,
    SemanticColumn,
)
from .holding import DividendPayment, Holding
from .processing_result import TableResult, Totals
from .row_error import RowError, RowErrorCode

__all__ = [
    # Column layout
    "COLUMN_LABELS",
    "LAST_REQUIRED_COLUMN",
    "ColumnMap",
    "SemanticColumn",
    # Holdings / market data
    "DividendPayment",
    "Holding",
    # Processing models
    "RowError",
    "RowErrorCode",
    "TableResult",
    "Totals",
]

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from ..logging.init import log_summary
from ..models.columns import SemanticColumn
from ..models.processing_result import TableResult
from ..table.codec import format_row, parse_line
from ..table.reader import TableIOError, read_table_lines, strip_trailing_blank_lines, write_table_lines
from .calculator import RowCalculator, RowStatus, normalize_symbol
from .market_data import MarketDataCache, MarketDataProvider
from .progress import ProgressTracker
from .schema import ProcessingError, SchemaError, resolve_columns
from .summary import render_summary_line

"""Table orchestration.

Coordinates one portfolio update: strip trailing blank lines, resolve the
column layout from the header, run the row calculator over the body, append
the TOTAL row and serialize. ``process_file`` adds file I/O around
``update_portfolio``; nothing is written unless the whole table succeeded.
"""

__all__ = [
    "ProcessingError",
    "SchemaError",
    "TableIOError",
    "update_portfolio",
    "process_file",
    "default_output_path",
]

logger = logging.getLogger(__name__)

_REQUIRED_LABELS = [c.label for c in SemanticColumn if c.required]


def _pad(cells: list[str], width: int) -> list[str | None]:
    if len(cells) >= width:
        return list(cells)
    return list(cells) + [None] * (width - len(cells))


def update_portfolio(
    lines: Sequence[str],
    provider: MarketDataProvider,
    now: datetime | None = None,
) -> TableResult:
    """Compute the updated table for ``lines``.

    Args:
        lines: Raw input lines, header first
        provider: Market data source; wrapped in a fresh per-call cache
        now: Reference time for holding periods and dividend windows

    Returns:
        TableResult with the serialized output lines and row counts

    Raises:
        SchemaError: If the header lacks a required column (or there is no header)
    """
    lines = strip_trailing_blank_lines(lines)
    if not lines:
        raise SchemaError(_REQUIRED_LABELS)

    schema = resolve_columns(parse_line(lines[0]))
    if schema.added:
        logger.debug(f"appended columns: {schema.added}")
    width = len(schema.header)
    body = [_pad(parse_line(line), width) for line in lines[1:]]

    calculator = RowCalculator(schema.columns, MarketDataCache(provider), now=now)
    kept: list[list[str | None]] = []
    processed = failed = blank = warnings = 0
    replaced_total = False

    symbol_index = schema.columns[SemanticColumn.SYMBOL]
    with ProgressTracker(len(body)) as progress:
        for i, row in enumerate(body):
            progress.start_row(normalize_symbol(row[symbol_index]))
            outcome = calculator.process_row(row, is_last=(i == len(body) - 1))
            progress.finish_row()

            if outcome.status is RowStatus.PRIOR_TOTAL:
                replaced_total = True
                continue
            kept.append(row)
            if outcome.status is RowStatus.BLANK:
                blank += 1
            elif outcome.status is RowStatus.FAILED:
                failed += 1
                logger.warning(f"row {i + 2}: {row[schema.columns[SemanticColumn.ERROR]]}".rstrip("; "))
            else:
                processed += 1
                if outcome.warned:
                    warnings += 1
            progress.set_postfix(ok=processed, failed=failed)

    output = [format_row(schema.header)]
    output.extend(format_row(row) for row in kept)
    output.append(format_row(calculator.build_total_row(width)))

    return TableResult(
        lines=output,
        totals=calculator.totals,
        body_rows=len(body),
        processed_rows=processed,
        failed_rows=failed,
        blank_rows=blank,
        warnings=warnings,
        replaced_total=replaced_total,
        added_columns=schema.added,
    )


def process_file(
    input_path: Path,
    output_path: Path,
    provider: MarketDataProvider,
    now: datetime | None = None,
) -> TableResult:
    """Read ``input_path``, update it and write the result to ``output_path``.

    Raises:
        TableIOError: If the input cannot be read or the output cannot be written
        SchemaError: If a required column is missing (no output is written)
    """
    start = time.perf_counter()
    lines = read_table_lines(input_path)
    logger.info(f"Updating {input_path} ({len(lines)} lines)")
    result = update_portfolio(lines, provider, now=now)
    write_table_lines(output_path, result.lines)
    logger.info(f"Output successfully saved to {output_path}")

    summary = render_summary_line(result, time.perf_counter() - start)
    log_summary(summary[len("SUMMARY "):])
    return result


def default_output_path(input_path: Path, suffix: str = "_updated") -> Path:
    """``holdings.csv`` -> ``holdings_updated.csv``."""
    return input_path.with_name(f"{input_path.stem}{suffix}{input_path.suffix}")

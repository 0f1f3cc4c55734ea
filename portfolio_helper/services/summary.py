from __future__ import annotations

from ..models.processing_result import TableResult

"""SUMMARY line rendering for a processed table."""


def _format_seconds(elapsed: float) -> str:
    if elapsed == 0:
        return "0"
    if elapsed == int(elapsed):
        return str(int(elapsed))
    if elapsed < 0.01:
        # avoid scientific notation
        return f"{elapsed:.6f}".rstrip("0").rstrip(".")
    return f"{elapsed:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: TableResult, elapsed_seconds: float) -> str:
    """Render the SUMMARY line for one table update.

    Format:
    SUMMARY rows={body} processed={n} failed={n} blank={n} warnings={n}
    replaced_total={yes|no} elapsed_sec={elapsed}

    Examples:
        >>> from portfolio_helper.models.processing_result import Totals
        >>> result = TableResult(
        ...     lines=[], totals=Totals(), body_rows=3, processed_rows=2,
        ...     failed_rows=1, blank_rows=0, warnings=1,
        ... )
        >>> render_summary_line(result, 2.0)
        'SUMMARY rows=3 processed=2 failed=1 blank=0 warnings=1 replaced_total=no elapsed_sec=2'
    """
    return (
        f"SUMMARY rows={result.body_rows} "
        f"processed={result.processed_rows} "
        f"failed={result.failed_rows} "
        f"blank={result.blank_rows} "
        f"warnings={result.warnings} "
        f"replaced_total={'yes' if result.replaced_total else 'no'} "
        f"elapsed_sec={_format_seconds(elapsed_seconds)}"
    )

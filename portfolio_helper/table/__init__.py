"""Delimited text table handling (line codec + file I/O)."""

from .codec import DELIMITER, QUOTE, format_row, parse_line
from .reader import TableIOError, read_table_lines, strip_trailing_blank_lines, write_table_lines

__all__ = [
    "DELIMITER",
    "QUOTE",
    "format_row",
    "parse_line",
    "TableIOError",
    "read_table_lines",
    "strip_trailing_blank_lines",
    "write_table_lines",
]

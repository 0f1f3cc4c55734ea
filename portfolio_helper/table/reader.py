from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from ..errors import ProcessingError
from .codec import DELIMITER

"""Table file I/O.

Input is read whole (``utf-8-sig`` so a spreadsheet BOM does not end up in
the first header label) and output is written in a single call once every
line has been assembled.
"""


class TableIOError(ProcessingError):
    """Raised when a table file cannot be read or written."""


def read_table_lines(path: Path) -> list[str]:
    try:
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise TableIOError(
            f"Could not read from input file {path}. Make sure that the input file exists "
            f"and is not in use by another application. ({e})"
        ) from e
    return text.splitlines()


def strip_trailing_blank_lines(lines: Sequence[str], delimiter: str = DELIMITER) -> list[str]:
    """Drop trailing lines that are blank once delimiters are removed.

    Spreadsheet exports often pad a table with rows of bare delimiters.
    """
    end = len(lines)
    while end > 0 and not lines[end - 1].replace(delimiter, "").strip():
        end -= 1
    return list(lines[:end])


def write_table_lines(path: Path, lines: Sequence[str]) -> Path:
    text = "".join(f"{line}\n" for line in lines)
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise TableIOError(
            f"Could not write to {path} because it is in use by another application. "
            f"Please close the application using {path} and try again. ({e})"
        ) from e
    return path

from __future__ import annotations

from collections.abc import Iterable

"""Delimited-text line codec.

Deliberately not the stdlib ``csv`` module: quoting here has no escape
sequence (``""`` is not a literal quote), a quoted field simply ends at the
next quote character, and any text between that quote and the following
delimiter stays part of the field. Writing only quotes fields that contain
the delimiter.

Round-trip: ``parse_line(format_row(fields)) == fields`` for any non-empty
``fields`` free of quote characters.
"""

__all__ = [
    "DELIMITER",
    "QUOTE",
    "parse_line",
    "format_row",
]

DELIMITER = ","
QUOTE = '"'


def parse_line(line: str, delimiter: str = DELIMITER) -> list[str]:
    """Split one line into fields.

    A line always yields one more field than it has unquoted delimiters, so an
    empty line is ``[""]`` and a trailing delimiter yields a trailing empty field.
    An unterminated quote runs to the end of the line.
    """
    fields: list[str] = []
    buf: list[str] = []
    in_quotes = False
    at_field_start = True
    for ch in line:
        if in_quotes:
            if ch == QUOTE:
                in_quotes = False
            else:
                buf.append(ch)
            continue
        if ch == delimiter:
            fields.append("".join(buf))
            buf.clear()
            at_field_start = True
            continue
        if ch == QUOTE and at_field_start:
            in_quotes = True
        else:
            buf.append(ch)
        at_field_start = False
    fields.append("".join(buf))
    return fields


def format_row(fields: Iterable[str | None], delimiter: str = DELIMITER) -> str:
    """Join fields into a line, quoting any field containing the delimiter."""
    out: list[str] = []
    for f in fields:
        if f is None:
            out.append("")
        elif delimiter in f:
            out.append(f"{QUOTE}{f}{QUOTE}")
        else:
            out.append(f)
    return delimiter.join(out)

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ..errors import ProcessingError
from ..models.columns import ColumnMap, SemanticColumn

"""Column schema resolution.

Maps every semantic column onto a physical index of the header row. Columns
are matched by exact label. Missing required input columns abort the table;
missing derived columns are appended to the header in enumeration order.
Unrecognized columns keep their positions and are never modified.
"""

__all__ = [
    "ProcessingError",
    "SchemaError",
    "ResolvedSchema",
    "resolve_columns",
]


class SchemaError(ProcessingError):
    """Raised when required input columns are missing from the header."""

    def __init__(self, missing: Sequence[str]) -> None:
        self.missing = list(missing)
        super().__init__(
            f"missing required column(s): {', '.join(self.missing)}. "
            "Input file was not formatted correctly; you can enter 't' to generate an input template."
        )


@dataclass(frozen=True)
class ResolvedSchema:
    columns: ColumnMap
    header: list[str]  # possibly widened copy of the input header
    added: list[str]  # labels appended to the header, in order


def resolve_columns(header: Sequence[str]) -> ResolvedSchema:
    """Resolve the column map for ``header``.

    Raises:
        SchemaError: If one or more required columns are absent. All absent
            required labels are reported, in enumeration order.
    """
    widened = list(header)
    indices: dict[SemanticColumn, int] = {}
    missing: list[str] = []
    added: list[str] = []
    for column in SemanticColumn:
        try:
            indices[column] = widened.index(column.label)
            continue
        except ValueError:
            pass
        if column.required:
            missing.append(column.label)
            continue
        indices[column] = len(widened)
        widened.append(column.label)
        added.append(column.label)
    if missing:
        raise SchemaError(missing)
    return ResolvedSchema(columns=ColumnMap(indices), header=widened, added=added)

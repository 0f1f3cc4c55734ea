from __future__ import annotations

"""Exceptions shared across the table and services packages."""

__all__ = ["ProcessingError"]


class ProcessingError(Exception):
    """Base exception for errors that abort a whole table."""
    pass

"""
Error taxonomy for the fixture data pipeline.

Every error carries the logical fixture name so that callers can build a
single message naming the file, the expected columns, and the reason.
"""

from __future__ import annotations

from collections.abc import Iterable


class DataDriverError(Exception):
    """Base class for all fixture data errors."""

    def __init__(self, name: str, message: str):
        super().__init__(f"{name}: {message}")
        self.name = name
        self.detail = message


class DataNotFoundError(DataDriverError):
    """The fixture file, or the requested sheet inside it, does not exist."""


class DataParseError(DataDriverError):
    """The fixture file exists but its tabular content is malformed."""


class DataValidationError(DataDriverError):
    """Required columns are missing, or the table has no records."""

    def __init__(
        self,
        name: str,
        missing_columns: Iterable[str] = (),
        expected_columns: Iterable[str] = (),
        reason: str | None = None,
    ):
        self.missing_columns = sorted(missing_columns)
        self.expected_columns = list(expected_columns)
        self.reason = reason

        parts = []
        if reason:
            parts.append(reason)
        if self.missing_columns:
            parts.append(f"missing columns: {', '.join(self.missing_columns)}")
        if self.expected_columns:
            parts.append(f"expected columns: {', '.join(self.expected_columns)}")
        super().__init__(name, "; ".join(parts) or "validation failed")


class DataPersistError(DataDriverError):
    """Writing a fixture table back to storage failed."""

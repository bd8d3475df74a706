"""
Data model for the fixture data pipeline.

A fixture file is parsed into a ``SourceTable``: an ordered header plus an
ordered list of records, where each record is a plain ``dict`` mapping
column name to a trimmed string value.

Key Concepts Demonstrated:
- Immutable value objects for derived results (``ValidationResult``)
- Explicit per-fixture schemas instead of guessing column names
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from data_driver.errors import DataValidationError

Record = dict[str, str]


@dataclass
class SourceTable:
    """
    In-memory form of one fixture file.

    Attributes:
        name: Logical fixture name (``unit-types``), independent of extension.
        columns: Header column names, in file order.
        records: Parsed rows, in file order.
        path: File the table was read from (or will be written to).
        sheet: Worksheet name for ``.xlsx`` files, ``None`` for CSV.
    """

    name: str
    columns: list[str] = field(default_factory=list)
    records: list[Record] = field(default_factory=list)
    path: Path | None = None
    sheet: str | None = None

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    @property
    def is_empty(self) -> bool:
        return not self.records

    def column_values(self, column: str) -> set[str]:
        """Return the set of values present in ``column`` across all records."""
        return {record.get(column, "") for record in self.records}

    def copy(self) -> "SourceTable":
        """Return a copy whose header and records can be modified safely."""
        return SourceTable(
            name=self.name,
            columns=list(self.columns),
            records=[dict(record) for record in self.records],
            path=self.path,
            sheet=self.sheet,
        )


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of checking a table against a set of required columns."""

    valid: bool
    missing_columns: frozenset[str] = frozenset()
    empty_columns: frozenset[str] = frozenset()
    reason: str | None = None
    record_count: int = 0

    @property
    def has_empty_columns(self) -> bool:
        return bool(self.empty_columns)

    def raise_for_errors(self, name: str, expected_columns: list[str] | None = None) -> None:
        """
        Raise one ``DataValidationError`` listing every problem at once.

        Args:
            name: Logical fixture name used in the message.
            expected_columns: Columns the fixture is expected to carry.

        Raises:
            DataValidationError: If the result is not valid.
        """
        if self.valid:
            return
        raise DataValidationError(
            name,
            missing_columns=self.missing_columns,
            expected_columns=expected_columns or [],
            reason=self.reason,
        )


@dataclass(frozen=True)
class FixtureSchema:
    """
    Declared shape of one fixture type.

    Attributes:
        name: Logical fixture name.
        columns: Recognised columns, in the order new files are written.
        required: Columns that must be present in the header.
        identifying: Columns that must stay unique; the first is the record key.
        sheet: Worksheet to read for ``.xlsx`` sources, or ``None`` for the first.
        file_format: Format used when the file has to be created (``xlsx``/``csv``).
        startup: Whether the file must be valid before an e2e session starts.
    """

    name: str
    columns: tuple[str, ...] = ()
    required: tuple[str, ...] = ()
    identifying: tuple[str, ...] = ()
    sheet: str | None = None
    file_format: str = "xlsx"
    startup: bool = False

    @property
    def key(self) -> str | None:
        return self.identifying[0] if self.identifying else None

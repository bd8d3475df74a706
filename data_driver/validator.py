"""
Row Validator.

Checks a whole table against a whole set of required columns in a single
pass. Missing columns make the table invalid; columns that are empty in
every row are only reported as a warning.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from data_driver.errors import (
    DataDriverError,
    DataNotFoundError,
    DataParseError,
    DataValidationError,
)
from data_driver.models import FixtureSchema, SourceTable, ValidationResult

logger = logging.getLogger(__name__)

NO_RECORDS = "no records"


def validate_table(table: SourceTable, required: Iterable[str]) -> ValidationResult:
    """
    Validate ``table`` against ``required`` columns.

    Args:
        table: Parsed fixture table.
        required: Column names that must appear in the header.

    Returns:
        A ``ValidationResult``. An empty table is invalid with reason
        ``"no records"``.
    """
    required = frozenset(required)
    missing = frozenset(col for col in required if col not in table.columns)

    if table.is_empty:
        return ValidationResult(valid=False, missing_columns=missing, reason=NO_RECORDS)

    empty = frozenset(
        col
        for col in table.columns
        if all(not record.get(col, "") for record in table.records)
    )

    return ValidationResult(
        valid=not missing,
        missing_columns=missing,
        empty_columns=empty,
        reason="missing required columns" if missing else None,
        record_count=len(table),
    )


def validate_fixture(store, name: str) -> ValidationResult:
    """
    Re-read a fixture (bypassing the cache) and validate it against its schema.

    Unknown columns are logged as warnings. ``DataNotFoundError`` and
    ``DataParseError`` propagate: this is the startup path.
    """
    table = store.load(name)
    schema = store.schema_for(name)
    required = schema.required if schema else ()

    if schema and schema.columns:
        unknown = [col for col in table.columns if col not in schema.columns]
        if unknown:
            logger.warning("%s has unrecognised columns: %s", name, ", ".join(unknown))

    result = validate_table(table, required)
    if result.has_empty_columns:
        logger.warning(
            "%s has empty columns: %s", name, ", ".join(sorted(result.empty_columns))
        )
    return result


def describe_failure(
    name: str,
    schema: FixtureSchema | None,
    error: DataDriverError,
) -> str:
    """Build the one-line message for a fixture that failed to load or validate."""
    expected = ", ".join(schema.required) if schema and schema.required else "(none declared)"

    if isinstance(error, DataNotFoundError):
        reason = f"missing file ({error.detail})"
    elif isinstance(error, DataParseError):
        reason = f"parse failure ({error.detail})"
    elif isinstance(error, DataValidationError) and error.reason == NO_RECORDS:
        reason = NO_RECORDS
    elif isinstance(error, DataValidationError) and error.missing_columns:
        reason = f"missing columns: {', '.join(error.missing_columns)}"
    elif isinstance(error, DataValidationError):
        reason = error.reason or "validation failed"
    else:
        reason = error.detail

    return f"Fixture '{name}' failed to load: {reason}. Expected columns: {expected}"


def check_fixtures(store, names: Iterable[str] | None = None) -> list[str]:
    """
    Validate several fixtures and collect one failure message per file.

    Args:
        store: ``FixtureStore`` to read through.
        names: Fixtures to check; defaults to every schema marked ``startup``.
            Files without the mark are first-time data that tests create.

    Returns:
        Failure messages, empty when every fixture is valid.
    """
    if names is None:
        names = [name for name, schema in store.schemas.items() if schema.startup]

    failures = []
    for name in names:
        schema = store.schema_for(name)
        try:
            result = validate_fixture(store, name)
            result.raise_for_errors(name, list(schema.required) if schema else None)
        except (DataNotFoundError, DataParseError, DataValidationError) as exc:
            failures.append(describe_failure(name, schema, exc))
            continue

        logger.info("%s: %d records", name, result.record_count)
    return failures

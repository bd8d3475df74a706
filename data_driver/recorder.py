"""
Execution Recorder.

Bridges test runs and fixture files: before a create-flow runs, ``prepare``
makes the candidate's identifying values unique against what has already
been recorded; after the flow succeeds, ``record`` appends the record to the
fixture file so later runs know it exists.

Bookkeeping never fails a test: persistence problems are logged and
reported through the return value.

Key Concepts Demonstrated:
- Read-modify-write of a whole file behind a per-name lock
- Idempotent appends keyed on the record's first identifying column
- A step log that can be attached to reports
"""

from __future__ import annotations

import logging
import threading
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any

from data_driver.cache import FixtureStore
from data_driver.errors import DataNotFoundError, DataParseError, DataPersistError
from data_driver.models import Record, SourceTable
from data_driver.reader import cell_text, logical_name
from data_driver.resolver import resolve_unique
from data_driver.writer import write_table

logger = logging.getLogger(__name__)

DEFAULT_KEY_COLUMN = "name"


@dataclass
class ExecutionStep:
    """One entry of the recorder's execution log."""

    timestamp: str
    step: str
    data: dict[str, Any] = field(default_factory=dict)


class ExecutionRecorder:
    """
    Prepare and record fixtures created by test runs.

    Args:
        store: Fixture store of the current run. Its cache is invalidated
            after every successful write.
    """

    def __init__(self, store: FixtureStore):
        self.store = store
        self.steps: list[ExecutionStep] = []
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # -------------------------------------------------------------------------
    # Execution Log
    # -------------------------------------------------------------------------

    def log_step(self, step: str, **data: Any) -> None:
        """Append a step to the execution log."""
        self.steps.append(
            ExecutionStep(
                timestamp=datetime.now(timezone.utc).isoformat(),
                step=step,
                data=data,
            )
        )
        logger.info(step)
        if data:
            logger.debug("%s: %s", step, data)

    def summary(self) -> dict[str, Any]:
        """Return step count, steps, and first/last timestamps."""
        return {
            "total_steps": len(self.steps),
            "steps": [asdict(step) for step in self.steps],
            "start_time": self.steps[0].timestamp if self.steps else None,
            "end_time": self.steps[-1].timestamp if self.steps else None,
        }

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _lock_for(self, name: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(logical_name(name), threading.Lock())

    def _fresh_table(self, name: str) -> SourceTable:
        try:
            return self.store.load(name)
        except DataNotFoundError:
            return self.store.empty_table(name)

    def key_column(self, name: str) -> str | None:
        """
        Column used to decide whether a record was already stored.

        Fixtures without a schema fall back to ``name``. A schema that
        declares no identifying columns has no key.
        """
        schema = self.store.schema_for(name)
        if schema is None:
            return DEFAULT_KEY_COLUMN
        return schema.key

    def identifying_columns(self, name: str) -> tuple[str, ...]:
        schema = self.store.schema_for(name)
        if schema is None:
            return (DEFAULT_KEY_COLUMN,)
        return schema.identifying

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def prepare(self, name: str, candidate: Record) -> Record:
        """
        Make ``candidate`` unique against the records stored for ``name``.

        The table is re-read from disk; a missing file counts as empty.

        Raises:
            DataParseError: If the stored table is malformed.
        """
        self.log_step(f"Preparing data for {name}", candidate=dict(candidate))
        table = self._fresh_table(name)
        prepared = resolve_unique(candidate, table.records, self.identifying_columns(name))
        self.log_step("Data prepared", prepared=prepared)
        return prepared

    def record(self, name: str, record: Record, success: bool = True) -> bool:
        """
        Append ``record`` to the fixture file for ``name``.

        Args:
            name: Logical fixture name.
            record: Record that was successfully created in the application.
            success: Whether the test that created it passed.

        Returns:
            True when the record is stored (now or already), False when
            nothing was written.
        """
        if not success:
            self.log_step("Test failed, not saving data")
            return False

        key = self.key_column(name)
        if key is None:
            logger.error("Cannot record %s: no key column declared", name)
            self.log_step("Save skipped, no key column")
            return False

        key_value = cell_text(record.get(key))
        if not key_value:
            logger.error("Cannot record %s: value for key column '%s' is empty", name, key)
            self.log_step("Save skipped, empty key", key=key)
            return False

        self.log_step(f"Saving execution data to {name}")
        with self._lock_for(name):
            try:
                table = self._fresh_table(name).copy()
                if key_value in table.column_values(key):
                    self.log_step("Data already exists, skipping save", key=key, value=key_value)
                    return True

                for column in record:
                    if column not in table.columns:
                        table.columns.append(column)
                table.records.append(
                    {column: cell_text(record.get(column)) for column in table.columns}
                )

                write_table(table)
            except (DataParseError, DataPersistError) as exc:
                logger.error("Could not record %s: %s", name, exc)
                self.log_step("Save failed", error=str(exc))
                return False
            finally:
                self.store.invalidate(name)

        self.log_step("Data saved", key=key, value=key_value)
        return True

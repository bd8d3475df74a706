"""
Fixture data pipeline for the ORDISS end-to-end suite.

Reads CSV/Excel fixture files, validates them against declared schemas,
makes identifying values unique for create-flows, and records successfully
created fixtures back to their files.
"""

from data_driver.cache import FixtureStore
from data_driver.errors import (
    DataDriverError,
    DataNotFoundError,
    DataParseError,
    DataPersistError,
    DataValidationError,
)
from data_driver.models import FixtureSchema, Record, SourceTable, ValidationResult
from data_driver.reader import read_table
from data_driver.recorder import ExecutionRecorder
from data_driver.resolver import resolve_unique, unique_value
from data_driver.schemas import load_schemas
from data_driver.validator import check_fixtures, validate_table
from data_driver.writer import write_table

__all__ = [
    "DataDriverError",
    "DataNotFoundError",
    "DataParseError",
    "DataPersistError",
    "DataValidationError",
    "ExecutionRecorder",
    "FixtureSchema",
    "FixtureStore",
    "Record",
    "SourceTable",
    "ValidationResult",
    "check_fixtures",
    "load_schemas",
    "read_table",
    "resolve_unique",
    "unique_value",
    "validate_table",
    "write_table",
]

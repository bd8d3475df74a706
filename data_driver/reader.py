"""
Tabular Data Reader.

Turns a logical fixture name into a ``SourceTable`` by locating
``<name>.xlsx`` or ``<name>.csv`` in the data directory and parsing it.
Both formats share the same row rules:

- the first non-blank row is the header (names trimmed)
- every later row becomes a record; fully blank rows are dropped
- cell values are trimmed and short rows are padded with ``""``
- a row with non-empty cells beyond the header is a parse error, and the
  whole table is rejected

Key Concepts Demonstrated:
- One parsing path for two storage formats
- Wrapping third-party parser errors in the pipeline's own taxonomy
- Always closing read-only workbooks (they hold the file open)
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable, Sequence
from datetime import date, datetime, time
from pathlib import Path
from typing import Any
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from data_driver.errors import DataNotFoundError, DataParseError
from data_driver.models import SourceTable

logger = logging.getLogger(__name__)

# Lookup order for bare logical names.
EXTENSIONS = (".xlsx", ".csv")


def logical_name(name: str) -> str:
    """Strip a known fixture extension: ``unit-types.xlsx`` -> ``unit-types``."""
    path = Path(name)
    if path.suffix.lower() in EXTENSIONS:
        return path.stem
    return name


def locate(data_dir: Path | str, name: str) -> Path:
    """
    Find the file backing a fixture.

    Args:
        data_dir: Directory holding fixture files.
        name: Logical name, or a file name with a ``.xlsx``/``.csv`` extension.

    Returns:
        Path of the existing file.

    Raises:
        DataNotFoundError: If no matching file exists.
    """
    data_dir = Path(data_dir)
    logical = logical_name(name)

    if Path(name).suffix.lower() in EXTENSIONS:
        path = data_dir / name
        if not path.is_file():
            raise DataNotFoundError(logical, f"file not found: {path}")
        return path

    existing = [data_dir / f"{name}{ext}" for ext in EXTENSIONS]
    existing = [path for path in existing if path.is_file()]
    if not existing:
        raise DataNotFoundError(
            logical, f"no {name}.xlsx or {name}.csv in {data_dir}"
        )
    if len(existing) > 1:
        logger.warning(
            "Both %s and %s exist; using %s",
            existing[0].name,
            existing[1].name,
            existing[0].name,
        )
    return existing[0]


def cell_text(value: Any) -> str:
    """Render a raw CSV/XLSX cell value as a trimmed string."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value).strip()


def build_table(
    name: str,
    rows: Iterable[Sequence[Any]],
    path: Path | None = None,
    sheet: str | None = None,
) -> SourceTable:
    """
    Apply the header/record rules to raw rows.

    Raises:
        DataParseError: On blank or duplicate header names, or a row wider
            than the header.
    """
    row_iter = iter(rows)
    table = SourceTable(name=name, path=path, sheet=sheet)

    header: list[str] | None = None
    line_no = 0
    for raw in row_iter:
        line_no += 1
        cells = [cell_text(value) for value in raw]
        if any(cells):
            header = cells
            break

    if header is None:
        return table

    while header and header[-1] == "":
        header.pop()

    if "" in header:
        position = header.index("") + 1
        raise DataParseError(name, f"blank column name at position {position} (row {line_no})")

    duplicates = sorted({col for col in header if header.count(col) > 1})
    if duplicates:
        raise DataParseError(name, f"duplicate column names: {', '.join(duplicates)}")

    width = len(header)
    for raw in row_iter:
        line_no += 1
        cells = [cell_text(value) for value in raw]
        if not any(cells):
            continue
        if any(cells[width:]):
            raise DataParseError(
                name,
                f"row {line_no} has {len(cells)} cells but the header has {width} columns",
            )
        cells = cells[:width] + [""] * (width - len(cells))
        table.records.append(dict(zip(header, cells)))

    table.columns = header
    return table


def _read_csv(path: Path, name: str) -> SourceTable:
    try:
        with path.open("r", encoding="utf-8-sig", newline="") as handle:
            return build_table(name, csv.reader(handle), path=path)
    except FileNotFoundError as exc:
        raise DataNotFoundError(name, f"file not found: {path}") from exc
    except (csv.Error, UnicodeDecodeError, OSError) as exc:
        raise DataParseError(name, f"cannot parse {path.name}: {exc}") from exc


def _read_xlsx(path: Path, name: str, sheet: str | None) -> SourceTable:
    try:
        workbook = load_workbook(path, read_only=True, data_only=True)
    except FileNotFoundError as exc:
        raise DataNotFoundError(name, f"file not found: {path}") from exc
    except (InvalidFileException, BadZipFile, KeyError, ValueError, OSError) as exc:
        raise DataParseError(name, f"cannot parse {path.name}: {exc}") from exc

    try:
        if sheet is None:
            worksheet = workbook.worksheets[0]
        elif sheet in workbook.sheetnames:
            worksheet = workbook[sheet]
        else:
            raise DataNotFoundError(
                name,
                f"sheet '{sheet}' not found in {path.name} "
                f"(available: {', '.join(workbook.sheetnames)})",
            )
        return build_table(
            name, worksheet.iter_rows(values_only=True), path=path, sheet=worksheet.title
        )
    finally:
        workbook.close()


def read_table(data_dir: Path | str, name: str, sheet: str | None = None) -> SourceTable:
    """
    Read a fixture file into a ``SourceTable``.

    Args:
        data_dir: Directory holding fixture files.
        name: Logical fixture name (extension optional).
        sheet: Worksheet for ``.xlsx`` files; the first sheet when ``None``.
            Ignored for CSV files.

    Returns:
        The parsed table. An empty file yields an empty table.

    Raises:
        DataNotFoundError: If the file or sheet does not exist.
        DataParseError: If the content is malformed.
    """
    path = locate(data_dir, name)
    logical = logical_name(name)

    if path.suffix.lower() == ".xlsx":
        table = _read_xlsx(path, logical, sheet)
    else:
        if sheet:
            logger.debug("Ignoring sheet %r for CSV fixture %s", sheet, path.name)
        table = _read_csv(path, logical)

    logger.info("Loaded %d records from %s", len(table), path.name)
    return table

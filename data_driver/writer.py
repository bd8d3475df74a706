"""
Table Writer.

Rewrites a whole fixture file from a ``SourceTable``. Writes go to a
temporary file in the same directory first and are then moved into place,
so readers never see a half-written file. For workbooks only the target
sheet is replaced; other sheets are kept.
"""

from __future__ import annotations

import csv
import logging
import os
import tempfile
from pathlib import Path
from zipfile import BadZipFile

from openpyxl import Workbook, load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from data_driver.errors import DataPersistError
from data_driver.models import SourceTable

logger = logging.getLogger(__name__)

DEFAULT_SHEET = "Sheet1"


def _rows(table: SourceTable) -> list[list[str]]:
    return [[record.get(column, "") for column in table.columns] for record in table.records]


def _append_text_row(worksheet, values: list[str]) -> None:
    """Append ``values`` as text; a leading ``=`` must not turn a cell into a formula."""
    worksheet.append(values)
    row = worksheet.max_row
    for column, value in enumerate(values, start=1):
        if isinstance(value, str) and value.startswith("="):
            worksheet.cell(row=row, column=column).data_type = "s"


def _temp_path(target: Path) -> Path:
    fd, temp_name = tempfile.mkstemp(
        prefix=f".{target.stem}.", suffix=target.suffix, dir=target.parent
    )
    os.close(fd)
    return Path(temp_name)


def _write_csv(table: SourceTable, target: Path) -> None:
    temp_path = _temp_path(target)
    try:
        with temp_path.open("w", encoding="utf-8", newline="") as handle:
            writer = csv.writer(handle)
            writer.writerow(table.columns)
            writer.writerows(_rows(table))
        os.replace(temp_path, target)
    finally:
        temp_path.unlink(missing_ok=True)


def _open_workbook(table: SourceTable, target: Path) -> tuple[Workbook, str]:
    """Open (or create) the workbook and pick the sheet title to rewrite."""
    if not target.exists():
        workbook = Workbook()
        title = table.sheet or DEFAULT_SHEET
        workbook.active.title = title
        return workbook, title

    try:
        workbook = load_workbook(target)
    except (InvalidFileException, BadZipFile, KeyError, ValueError) as exc:
        raise DataPersistError(table.name, f"cannot open {target.name} for writing: {exc}") from exc

    title = table.sheet or workbook.worksheets[0].title
    return workbook, title


def _write_xlsx(table: SourceTable, target: Path) -> None:
    workbook, title = _open_workbook(table, target)

    if title in workbook.sheetnames:
        old_sheet = workbook[title]
        index = workbook.index(old_sheet)
        workbook.remove(old_sheet)
        worksheet = workbook.create_sheet(title, index)
    else:
        worksheet = workbook.create_sheet(title)

    _append_text_row(worksheet, list(table.columns))
    for row in _rows(table):
        _append_text_row(worksheet, row)

    temp_path = _temp_path(target)
    try:
        workbook.save(temp_path)
        os.replace(temp_path, target)
    finally:
        temp_path.unlink(missing_ok=True)


def write_table(table: SourceTable, path: Path | str | None = None) -> Path:
    """
    Persist ``table`` wholesale to ``path`` (defaults to ``table.path``).

    The format follows the file extension (``.xlsx`` or ``.csv``).

    Returns:
        The path written.

    Raises:
        DataPersistError: If no target is known, the extension is
            unsupported, or the write fails.
    """
    if path is None and table.path is None:
        raise DataPersistError(table.name, "no target path to write to")

    target = Path(path if path is not None else table.path)
    suffix = target.suffix.lower()
    if suffix not in (".xlsx", ".csv"):
        raise DataPersistError(table.name, f"unsupported file type: {target.name}")

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        if suffix == ".xlsx":
            _write_xlsx(table, target)
        else:
            _write_csv(table, target)
    except OSError as exc:
        raise DataPersistError(table.name, f"cannot write {target}: {exc}") from exc

    logger.info("Wrote %d records to %s", len(table), target.name)
    return target

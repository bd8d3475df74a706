"""
Shared pytest fixtures for the ORDISS suite.

These fixtures build throw-away fixture directories so the data pipeline
can be tested without touching ``test-data/``. Every test gets its own
directory under ``tmp_path``.

Key Concepts Demonstrated:
- Factory fixtures for CSV and XLSX files
- Test data generation with Faker
- Fixture dependencies (store -> data_dir, schemas)
"""

from __future__ import annotations

import csv
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest
from faker import Faker
from openpyxl import Workbook

from data_driver.cache import FixtureStore
from data_driver.models import FixtureSchema
from data_driver.schemas import load_schemas

# Initialize Faker for generating test data
fake = Faker()

Rows = Sequence[Sequence[Any]]


# -----------------------------------------------------------------------------
# Fixture Directories
# -----------------------------------------------------------------------------


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Empty fixture directory for one test."""
    directory = tmp_path / "test-data"
    directory.mkdir()
    return directory


@pytest.fixture
def write_csv(data_dir: Path) -> Callable[..., Path]:
    """
    Factory fixture writing a CSV file into ``data_dir``.

    Usage:
        def test_something(write_csv):
            path = write_csv("units", [["name", "code"], ["Alpha", "A1"]])
    """

    def _write(name: str, rows: Rows, encoding: str = "utf-8") -> Path:
        path = data_dir / f"{name}.csv"
        with path.open("w", encoding=encoding, newline="") as handle:
            csv.writer(handle).writerows(rows)
        return path

    return _write


@pytest.fixture
def write_xlsx(data_dir: Path) -> Callable[..., Path]:
    """
    Factory fixture writing a workbook into ``data_dir``.

    Args (of the returned callable):
        name: Logical name; ``.xlsx`` is appended.
        rows: Rows of the first sheet.
        sheet: Title of the first sheet.
        extra_sheets: Further ``{title: rows}`` sheets, in order.
    """

    def _write(
        name: str,
        rows: Rows,
        sheet: str = "Sheet1",
        extra_sheets: dict[str, Rows] | None = None,
    ) -> Path:
        workbook = Workbook()
        worksheet = workbook.active
        worksheet.title = sheet
        for row in rows:
            worksheet.append(list(row))
        for title, sheet_rows in (extra_sheets or {}).items():
            extra = workbook.create_sheet(title)
            for row in sheet_rows:
                extra.append(list(row))
        path = data_dir / f"{name}.xlsx"
        workbook.save(path)
        return path

    return _write


# -----------------------------------------------------------------------------
# Pipeline Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture(scope="session")
def schemas() -> dict[str, FixtureSchema]:
    """Schemas shipped with the package."""
    return load_schemas()


@pytest.fixture
def store(data_dir: Path, schemas: dict[str, FixtureSchema]) -> FixtureStore:
    return FixtureStore(data_dir, schemas)


@pytest.fixture
def unit_type_factory() -> Callable[..., dict[str, str]]:
    """
    Factory for ``unit-types`` records with realistic values.

    Keyword arguments override individual columns.
    """

    def _make(**overrides: str) -> dict[str, str]:
        name = f"{fake.city()} {fake.random_element(['Depot', 'Workshop', 'Headquarter'])}"
        record = {
            "Name (English)": name,
            "Name (Bangla)": f"{name} বাংলা",
            "Short Name (English)": "".join(word[0] for word in name.split()).upper(),
            "Short Name (Bangla)": "",
            "Category": fake.random_element(["Headquarter", "Unit", "Formation"]),
            "Service": "Bangladesh Army",
            "Type": fake.random_element(["Static", "Mobile"]),
            "Is Depot": "No",
            "Is Workshop": "No",
            "Corps Names (English)": "",
        }
        record.update(overrides)
        return record

    return _make

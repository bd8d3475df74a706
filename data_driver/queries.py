"""
Record queries used by data-driven tests.

Small, read-only helpers over a ``SourceTable``: role/category lookups,
free-text search, pagination, random sampling, and cartesian combinations
for parameterised tests.
"""

from __future__ import annotations

import itertools
import math
import random
from dataclasses import dataclass, field

from data_driver.models import Record, SourceTable


@dataclass(frozen=True)
class Page:
    """One page of records plus pagination metadata."""

    records: list[Record] = field(default_factory=list)
    current_page: int = 1
    page_size: int = 10
    total_records: int = 0
    total_pages: int = 0

    @property
    def has_next_page(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self.current_page > 1


def filter_records(table: SourceTable, column: str, value: str) -> list[Record]:
    """Records whose ``column`` equals ``value``, ignoring case."""
    wanted = value.casefold()
    return [record for record in table if record.get(column, "").casefold() == wanted]


def find_record(table: SourceTable, column: str, value: str) -> Record | None:
    """First record whose ``column`` equals ``value`` exactly, or None."""
    return next((record for record in table if record.get(column) == value), None)


def search_records(
    table: SourceTable, column: str, term: str, exact: bool = False
) -> list[Record]:
    """
    Case-insensitive search on one column.

    Args:
        table: Table to search.
        column: Column to look in. Records with an empty value never match.
        term: Search term.
        exact: Match the whole value instead of a substring.
    """
    needle = term.casefold()
    matches = []
    for record in table:
        haystack = record.get(column, "").casefold()
        if not haystack:
            continue
        if (haystack == needle) if exact else (needle in haystack):
            matches.append(record)
    return matches


def paginate(table: SourceTable, page: int = 1, page_size: int = 10) -> Page:
    """Slice ``table`` into 1-based pages of ``page_size`` records."""
    if page < 1 or page_size < 1:
        raise ValueError("page and page_size must be >= 1")

    total = len(table)
    start = (page - 1) * page_size
    return Page(
        records=table.records[start : start + page_size],
        current_page=page,
        page_size=page_size,
        total_records=total,
        total_pages=math.ceil(total / page_size),
    )


def sample_records(
    table: SourceTable, count: int = 1, rng: random.Random | None = None
) -> list[Record]:
    """Pick up to ``count`` distinct records at random."""
    rng = rng or random.Random()
    return rng.sample(table.records, min(count, len(table)))


def combine_tables(*tables: SourceTable) -> list[Record]:
    """
    Cartesian product of the records of several tables.

    Each combination is merged left to right into one record; on column
    clashes the right-most table wins.
    """
    if not tables:
        return []

    combined = []
    for parts in itertools.product(*(table.records for table in tables)):
        merged: Record = {}
        for part in parts:
            merged.update(part)
        combined.append(merged)
    return combined

"""
Uniqueness Resolver.

Disambiguates identifying values of a candidate record against the values
already recorded, by appending ``-002``, ``-003``, ... to the base value.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from data_driver.models import Record

logger = logging.getLogger(__name__)

FIRST_SUFFIX = 2


def unique_value(base: str, taken: set[str]) -> str:
    """
    Return ``base`` if unused, else the first free ``base-NNN``.

    Examples:
        >>> unique_value("Alpha", {"Alpha", "Alpha-002"})
        'Alpha-003'
    """
    if base not in taken:
        return base

    counter = FIRST_SUFFIX
    while f"{base}-{counter:03d}" in taken:
        counter += 1
    return f"{base}-{counter:03d}"


def resolve_unique(
    candidate: Record, existing: Iterable[Record], columns: Iterable[str]
) -> Record:
    """
    Make every identifying column of ``candidate`` unique against ``existing``.

    Each column is resolved on its own, so two columns of one record can end
    up with different suffixes. Empty values are left empty.

    Args:
        candidate: Record to prepare. Not modified.
        existing: Previously recorded records.
        columns: Identifying column names.

    Returns:
        A new record with disambiguated identifying values.
    """
    existing = list(existing)
    resolved = dict(candidate)

    for column in columns:
        base = resolved.get(column, "")
        if not base:
            continue
        taken = {record.get(column, "") for record in existing}
        value = unique_value(base, taken)
        if value != base:
            logger.warning("%s '%s' already exists, using '%s'", column, base, value)
        resolved[column] = value

    return resolved

"""
Cache/Lookup Layer.

``FixtureStore`` owns the parsed fixture tables of one test run. It is
created by a session fixture and handed to tests, so its lifetime is the
run rather than the process.

Key Concepts Demonstrated:
- Explicit cache object instead of a module-level singleton
- Cache bypass for read-modify-write paths (``load``)
- Treating "file not found" as an empty table only where the caller asks
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from data_driver.errors import DataNotFoundError
from data_driver.models import FixtureSchema, SourceTable
from data_driver.reader import EXTENSIONS, logical_name, read_table

logger = logging.getLogger(__name__)

CacheKey = tuple[str, str | None]


class FixtureStore:
    """
    Cached access to fixture tables in one data directory.

    Attributes:
        data_dir: Directory holding the fixture files.
        schemas: Declared schemas keyed by logical name.
    """

    def __init__(self, data_dir: Path | str, schemas: dict[str, FixtureSchema] | None = None):
        self.data_dir = Path(data_dir)
        self.schemas = dict(schemas or {})
        self._cache: dict[CacheKey, SourceTable] = {}

    def schema_for(self, name: str) -> FixtureSchema | None:
        return self.schemas.get(logical_name(name))

    def _key(self, name: str, sheet: str | None) -> CacheKey:
        if sheet is None:
            schema = self.schema_for(name)
            sheet = schema.sheet if schema else None
        return logical_name(name), sheet

    def load(self, name: str, sheet: str | None = None) -> SourceTable:
        """Read ``name`` from disk, bypassing and then refreshing the cache."""
        key = self._key(name, sheet)
        table = read_table(self.data_dir, name, key[1])
        self._cache[key] = table
        return table

    def get(self, name: str, sheet: str | None = None, use_cache: bool = True) -> SourceTable:
        """
        Return the table for ``name``, reading it on first use.

        Args:
            name: Logical fixture name.
            sheet: Worksheet for ``.xlsx`` files; defaults to the schema's sheet.
            use_cache: When False, always re-read from disk.

        Raises:
            DataNotFoundError: If the file or sheet does not exist.
            DataParseError: If the content is malformed.
        """
        key = self._key(name, sheet)
        if use_cache and key in self._cache:
            logger.debug("Using cached data for %s", key[0])
            return self._cache[key]
        return self.load(name, sheet)

    def get_or_empty(self, name: str, sheet: str | None = None) -> SourceTable:
        """Like ``get`` but a missing file yields an empty, uncached table."""
        try:
            return self.get(name, sheet)
        except DataNotFoundError as exc:
            logger.warning("%s; treating as empty", exc)
            return self.empty_table(name)

    def empty_table(self, name: str) -> SourceTable:
        """Build an empty table with the schema's columns and default file path."""
        logical = logical_name(name)
        schema = self.schema_for(logical)
        if Path(name).suffix.lower() in EXTENSIONS:
            path = self.data_dir / name
        else:
            file_format = schema.file_format if schema else "xlsx"
            path = self.data_dir / f"{logical}.{file_format}"
        return SourceTable(
            name=logical,
            columns=list(schema.columns) if schema else [],
            path=path,
            sheet=schema.sheet if schema else None,
        )

    def invalidate(self, name: str | None = None) -> None:
        """Drop cached entries for ``name`` (all sheets), or every entry."""
        if name is None:
            self._cache.clear()
            logger.debug("Cleared all cached fixture data")
            return

        logical = logical_name(name)
        for key in [key for key in self._cache if key[0] == logical]:
            del self._cache[key]
        logger.debug("Cleared cache for %s", logical)

    def stats(self) -> dict[str, Any]:
        """Summarise what is currently cached."""
        return {
            "cached_files": [name for name, _ in self._cache],
            "cache_size": len(self._cache),
            "total_records": sum(len(table) for table in self._cache.values()),
        }

"""Load fixture schemas from ``schemas.yml``."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from data_driver.models import FixtureSchema

DEFAULT_SCHEMA_PATH = Path(__file__).resolve().parent / "schemas.yml"
SUPPORTED_FORMATS = ("xlsx", "csv")


def _as_tuple(name: str, key: str, value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"Schema '{name}': '{key}' must be a list of column names")
    return tuple(item.strip() for item in value)


def parse_schema(name: str, data: dict[str, Any]) -> FixtureSchema:
    """
    Build a ``FixtureSchema`` from one YAML mapping.

    Args:
        name: Logical fixture name (the YAML key).
        data: Mapping with ``columns``, ``required``, ``identifying``,
            and optional ``sheet`` / ``format`` / ``startup`` keys.

    Returns:
        The parsed schema.

    Raises:
        ValueError: If a key has the wrong type, the format is unknown, or
            ``required``/``identifying`` name columns not in ``columns``.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Schema '{name}' must be a mapping")

    columns = _as_tuple(name, "columns", data.get("columns"))
    required = _as_tuple(name, "required", data.get("required"))
    identifying = _as_tuple(name, "identifying", data.get("identifying"))

    undeclared = [col for col in (*required, *identifying) if col not in columns]
    if undeclared:
        raise ValueError(
            f"Schema '{name}' references undeclared columns: {', '.join(undeclared)}"
        )

    file_format = str(data.get("format", "xlsx")).lower()
    if file_format not in SUPPORTED_FORMATS:
        raise ValueError(f"Schema '{name}': unsupported format '{file_format}'")

    startup = data.get("startup", False)
    if not isinstance(startup, bool):
        raise ValueError(f"Schema '{name}': 'startup' must be true or false")

    return FixtureSchema(
        name=name,
        columns=columns,
        required=required,
        identifying=identifying,
        sheet=data.get("sheet"),
        file_format=file_format,
        startup=startup,
    )


def load_schemas(path: Path = DEFAULT_SCHEMA_PATH) -> dict[str, FixtureSchema]:
    """Read every schema declared in a YAML file, keyed by logical name."""
    with Path(path).open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Schema file {path} must contain a mapping of fixture names")

    return {str(name): parse_schema(str(name), body) for name, body in data.items()}

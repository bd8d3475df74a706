"""First-time execution guidance for fixtures that are not set up yet."""

from __future__ import annotations

from pathlib import Path

from data_driver.models import FixtureSchema


def first_time_guidance(name: str, schema: FixtureSchema | None, data_dir: Path | str) -> str:
    """
    Explain how to provide the fixture file for ``name``.

    Returns:
        Multi-line text suitable for logs and ``pytest.skip`` reasons.
    """
    data_dir = Path(data_dir)
    file_format = schema.file_format if schema else "xlsx"
    lines = [
        f"First-time {name} execution",
        f"1. Place {name}.{file_format} (or {name}.xlsx / {name}.csv) in {data_dir}",
    ]

    if schema and schema.columns:
        lines.append(f"2. The header row should contain: {', '.join(schema.columns)}")
    else:
        lines.append("2. The first row must hold the column names")

    if schema and schema.required:
        lines.append(f"   Required columns: {', '.join(schema.required)}")

    lines.append("3. Run the test; records created successfully are appended to the file")
    lines.append("4. Later runs pick up the file and make names unique automatically")
    return "\n".join(lines)

"""
Command-line checks for fixture files.

Usage::

    python -m data_driver validate [NAME ...]
    python -m data_driver show NAME [--sheet SHEET]
    python -m data_driver guide NAME

Exit codes follow the same three-state convention as the CI gates:

- ``0`` -- every checked fixture is valid
- ``1`` -- at least one fixture failed validation
- ``2`` -- the script itself failed (bad schema file, unreadable file, etc.)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from data_driver.cache import FixtureStore
from data_driver.errors import DataDriverError
from data_driver.guidance import first_time_guidance
from data_driver.schemas import DEFAULT_SCHEMA_PATH, load_schemas
from data_driver.validator import check_fixtures

EXIT_PASS = 0
EXIT_INVALID = 1
EXIT_SCRIPT_ERROR = 2

DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "test-data"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        prog="python -m data_driver",
        description="Inspect and validate ORDISS fixture files.",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=DEFAULT_DATA_DIR,
        help="Directory holding fixture files",
    )
    parser.add_argument(
        "--schemas",
        type=Path,
        default=DEFAULT_SCHEMA_PATH,
        help="Path to the fixture schema YAML file",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level")

    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser("validate", help="Validate fixture files")
    validate.add_argument("names", nargs="*", help="Fixtures to check (default: all)")

    show = subparsers.add_parser("show", help="Print a fixture table as JSON")
    show.add_argument("name")
    show.add_argument("--sheet", default=None)

    guide = subparsers.add_parser("guide", help="Print first-time setup guidance")
    guide.add_argument("name")

    return parser.parse_args(argv)


def _validate(store: FixtureStore, names: list[str]) -> int:
    failures = check_fixtures(store, names or list(store.schemas))
    for message in failures:
        print(message)
    if failures:
        print(f"{len(failures)} fixture(s) failed validation")
        return EXIT_INVALID
    print("All fixtures valid")
    return EXIT_PASS


def _show(store: FixtureStore, name: str, sheet: str | None) -> int:
    table = store.get(name, sheet)
    print(json.dumps({"columns": table.columns, "records": table.records}, ensure_ascii=False, indent=2))
    return EXIT_PASS


def main(argv: list[str] | None = None) -> int:
    """Entry point; returns a process exit code."""
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        store = FixtureStore(args.data_dir, load_schemas(args.schemas))
        if args.command == "validate":
            return _validate(store, args.names)
        if args.command == "show":
            return _show(store, args.name, args.sheet)
        print(first_time_guidance(args.name, store.schema_for(args.name), args.data_dir))
        return EXIT_PASS
    except (DataDriverError, OSError, ValueError) as exc:
        print(f"Fixture check failed: {exc}", file=sys.stderr)
        return EXIT_SCRIPT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())

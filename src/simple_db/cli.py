"""Command-line interface for simple_db database files."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from simple_db.config import Settings
from simple_db.dump import format_schema, format_table
from simple_db.errors import DatabaseError
from simple_db.parsing import RowParser, SchemaParser
from simple_db.storage import PersistentDatabase

logger = logging.getLogger(__name__)

# Subcommands that change the database and must be saved afterwards
_MUTATING = {"create-table", "drop-table", "insert", "update", "remove-row"}


def _build_parser() -> argparse.ArgumentParser:
    arg_parser = argparse.ArgumentParser(
        prog="sdb",
        description="Inspect and edit simple_db database files",
        epilog="Row literals starting with '-' must follow '--', e.g. sdb insert t -- '-1, 2'",
    )
    arg_parser.add_argument(
        "-d", "--db",
        type=Path,
        default=None,
        help="Path to the database file (default: $SIMPLE_DB_PATH)",
    )
    arg_parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: $SIMPLE_DB_LOG_LEVEL or WARNING)",
    )
    sub = arg_parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("create", help="Create an empty database file")
    p.add_argument("name", help="Name of the new database")

    sub.add_parser("name", help="Print the database name")
    sub.add_parser("tables", help="List tables")

    p = sub.add_parser("schema", help="Print a table's schema")
    p.add_argument("table")

    p = sub.add_parser("create-table", help="Create a table")
    p.add_argument("table")
    p.add_argument("schema", help="Comma-separated type names, e.g. 'int, text'")

    p = sub.add_parser("drop-table", help="Remove a table")
    p.add_argument("table")

    p = sub.add_parser("insert", help="Append a row")
    p.add_argument("table")
    p.add_argument("row", help="Comma-separated values, e.g. '1, \"a\", 3+4i'")

    p = sub.add_parser("update", help="Replace the row at an index")
    p.add_argument("table")
    p.add_argument("index", type=int)
    p.add_argument("row")

    p = sub.add_parser("remove-row", help="Remove the row at an index")
    p.add_argument("table")
    p.add_argument("index", type=int)

    p = sub.add_parser("rows", help="Print a table's rows")
    p.add_argument("table")
    p.add_argument("-s", "--sort-by", type=int, default=None, help="Column index to sort by")
    p.add_argument("-n", "--limit", type=int, default=None, help="Limit number of rows")

    return arg_parser


def run_command(args: argparse.Namespace, path: Path, settings: Settings) -> int:
    """Execute one parsed subcommand against the database at ``path``."""
    if args.command == "create":
        PersistentDatabase.create(args.name, path, settings)
        print(f"Created database {args.name!r} at {path}")
        return 0

    pinned = PersistentDatabase.load(path, settings)

    if args.command == "name":
        print(pinned.name)
    elif args.command == "tables":
        for name in sorted(pinned.table_names()):
            print(name)
    elif args.command == "schema":
        print(format_schema(pinned.table_schema(args.table)))
    elif args.command == "create-table":
        pinned.create_table(args.table, SchemaParser().parse(args.schema))
    elif args.command == "drop-table":
        pinned.remove_table(args.table)
    elif args.command == "insert":
        index = pinned.insert_row(args.table, RowParser().parse(args.row))
        print(f"Inserted row {index}")
    elif args.command == "update":
        pinned.update_row(args.table, args.index, RowParser().parse(args.row))
    elif args.command == "remove-row":
        pinned.remove_row(args.table, args.index)
    elif args.command == "rows":
        print(format_table(pinned.get_table(args.table), args.sort_by, args.limit))

    if args.command in _MUTATING:
        pinned.save()
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = _build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
        if args.log_level:
            settings = replace(settings, log_level=args.log_level)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    path = args.db or settings.default_path
    if path is None:
        print("Error: No database file given. Use --db or set SIMPLE_DB_PATH.", file=sys.stderr)
        return 1

    try:
        return run_command(args, path, settings)
    except SyntaxError as e:
        print(f"Syntax error: {e}", file=sys.stderr)
        return 1
    except (DatabaseError, ValueError, TypeError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""Tool for dumping database contents to the console."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from simple_db.config import Settings
from simple_db.database import Database
from simple_db.errors import DatabaseError
from simple_db.row import Row
from simple_db.storage import PersistentDatabase
from simple_db.table import Table
from simple_db.types import TypeTag, Value, format_value


def value_to_json(value: Value) -> dict[str, Any]:
    """Encode a value as a tagged JSON object."""
    data = list(value.data) if value.tag.is_complex else value.data
    return {"type": value.tag.value, "value": data}


def row_to_json(row: Row) -> list[dict[str, Any]]:
    return [value_to_json(v) for v in row]


def table_to_json(
    table: Table, sort_key: int | None = None, limit: int | None = None
) -> dict[str, Any]:
    rows = table.sorted_rows(sort_key)
    if limit is not None:
        rows = rows[:limit]
    return {
        "schema": [tag.value for tag in table.schema],
        "rows": [row_to_json(row) for row in rows],
    }


def dump_database_json(db: Database) -> dict[str, Any]:
    """Return the whole database as a JSON-compatible dict.

    Tables are emitted in name order; the result is accepted by
    ``json_import.load_database_json``.
    """
    return {
        "name": db.name,
        "tables": {
            table.name: table_to_json(table)
            for table in sorted(db.tables, key=lambda t: t.name)
        },
    }


def format_schema(schema: tuple[TypeTag, ...]) -> str:
    return ", ".join(tag.value for tag in schema)


def format_table(
    table: Table,
    sort_key: int | None = None,
    limit: int | None = None,
    max_col_width: int = 40,
) -> str:
    """Format a table's rows as aligned text columns."""
    rows = table.sorted_rows(sort_key)
    total = len(rows)
    if limit is not None:
        rows = rows[:limit]

    columns = [f"{i}:{tag.value}" for i, tag in enumerate(table.schema)]
    cells = [[format_value(v) for v in row] for row in rows]

    if not columns:
        return f"({total} row{'s' if total != 1 else ''}, no columns)"

    # Calculate column widths, capped
    widths = [len(c) for c in columns]
    for line in cells:
        for i, cell in enumerate(line):
            widths[i] = max(widths[i], len(cell))
    widths = [min(w, max_col_width) for w in widths]

    out = []
    header = " | ".join(c.ljust(widths[i])[: widths[i]] for i, c in enumerate(columns))
    out.append(header)
    out.append("-" * len(header))
    for line in cells:
        values = []
        for i, cell in enumerate(line):
            if len(cell) > widths[i]:
                cell = cell[: widths[i] - 3] + "..."
            values.append(cell.ljust(widths[i]))
        out.append(" | ".join(values))

    if not cells:
        out.append("(no rows)")
    if total > len(rows):
        out.append(f"... {total - len(rows)} more")
    out.append(f"\n({total} row{'s' if total != 1 else ''})")
    return "\n".join(out)


def list_tables(db: Database) -> None:
    """Print a summary line for every table."""
    print(f"Database: {db.name}")
    if not len(db):
        print("  (no tables)")
        return
    for table in sorted(db.tables, key=lambda t: t.name):
        print(f"  {table.name:<20} {table.count:>6} rows  [{format_schema(table.schema)}]")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Dump simple_db database contents to the console"
    )
    parser.add_argument(
        "path",
        type=Path,
        help="Path to the database file",
    )
    parser.add_argument(
        "table",
        nargs="?",
        help="Name of the table to dump (omit to list tables)",
    )
    parser.add_argument(
        "-s", "--sort-by",
        type=int,
        default=None,
        help="Column index to sort rows by",
    )
    parser.add_argument(
        "-j", "--json",
        action="store_true",
        help="Output as JSON",
    )
    parser.add_argument(
        "-n", "--limit",
        type=int,
        default=None,
        help="Limit number of rows to display",
    )

    args = parser.parse_args(argv)
    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        pinned = PersistentDatabase.load(args.path, settings)
    except DatabaseError as e:
        print(f"Error loading database: {e}", file=sys.stderr)
        return 1

    db = pinned.database
    if args.table is None:
        if args.json:
            print(json.dumps(dump_database_json(db), indent=2))
        else:
            list_tables(db)
        return 0

    if args.table not in db:
        print(f"Error: Unknown table: {args.table}", file=sys.stderr)
        print("\nAvailable tables:")
        list_tables(db)
        return 1

    table = db.get_table(args.table)
    if args.json:
        print(json.dumps(table_to_json(table, args.sort_by, args.limit), indent=2))
    else:
        print(format_table(table, args.sort_by, args.limit))
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Import JSON documents into a simple_db database file.

The input has the shape produced by ``sdb-dump --json``::

    {"name": "db",
     "tables": {"t": {"schema": ["int", "text"],
                      "rows": [[{"type": "int", "value": 1},
                                {"type": "text", "value": "a"}]]}}}

Usage:
    sdb-json-import input.json db.sdb            # writes db.sdb
    sdb-json-import input.json db.sdb -n other   # override database name
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from simple_db.config import Settings
from simple_db.database import Database
from simple_db.errors import DatabaseError, DeserializationError
from simple_db.storage import PersistentDatabase
from simple_db.types import TypeTag, Value


def value_from_json(obj: Any) -> Value:
    """Decode a tagged JSON object into a Value."""
    if not isinstance(obj, dict) or "type" not in obj or "value" not in obj:
        raise DeserializationError(f"Expected {{'type': ..., 'value': ...}}, got {obj!r}")
    try:
        tag = TypeTag.from_name(obj["type"])
        return Value(tag, obj["value"])
    except (AttributeError, TypeError, ValueError) as e:
        raise DeserializationError(f"Invalid value {obj!r}: {e}") from e


def load_database_json(data: Any, name: str | None = None) -> Database:
    """Build a database from a parsed JSON document.

    Rows go through ``Table.insert_row``, so a row that does not fit its
    table raises SchemaMismatchError.
    """
    if not isinstance(data, dict):
        raise DeserializationError("Top-level JSON value must be an object")
    db_name = name if name is not None else data.get("name")
    if not isinstance(db_name, str):
        raise DeserializationError("Database name missing or not a string")

    tables = data.get("tables", {})
    if not isinstance(tables, dict):
        raise DeserializationError("'tables' must be an object")

    db = Database(db_name)
    for table_name, entry in tables.items():
        if not isinstance(entry, dict):
            raise DeserializationError(f"Table {table_name!r} must be an object")
        schema_names = entry.get("schema", [])
        if not isinstance(schema_names, list):
            raise DeserializationError(f"Schema of table {table_name!r} must be a list")
        try:
            schema = [TypeTag.from_name(t) for t in schema_names]
        except (AttributeError, TypeError, ValueError) as e:
            raise DeserializationError(f"Invalid schema for table {table_name!r}: {e}") from e
        table = db.create_table(table_name, schema)
        rows = entry.get("rows", [])
        if not isinstance(rows, list):
            raise DeserializationError(f"Rows of table {table_name!r} must be a list")
        for row in rows:
            if not isinstance(row, list):
                raise DeserializationError(f"Rows of table {table_name!r} must be lists")
            table.insert_row([value_from_json(v) for v in row])
    return db


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Import a JSON document into a simple_db database file"
    )
    parser.add_argument("input", type=Path, help="JSON file to import")
    parser.add_argument("output", type=Path, help="Database file to write")
    parser.add_argument("-n", "--name", help="Database name (default: from the document)")
    parser.add_argument(
        "-f", "--force",
        action="store_true",
        help="Overwrite the output file if it exists",
    )

    args = parser.parse_args(argv)

    if not args.input.exists():
        print(f"Error: {args.input} not found", file=sys.stderr)
        return 1
    if args.output.exists() and not args.force:
        print(f"Error: {args.output} already exists (use --force)", file=sys.stderr)
        return 1

    with open(args.input, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            print(f"Error: Invalid JSON in {args.input}: {e}", file=sys.stderr)
            return 1

    try:
        db = load_database_json(data, args.name)
        PersistentDatabase(db, args.output, Settings.from_env()).save()
    except (DatabaseError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Wrote {args.output}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Parsing of schema and row literals."""

from simple_db.parsing.literal_parser import RowParser, SchemaParser, parse_row, parse_schema

__all__ = [
    "RowParser",
    "SchemaParser",
    "parse_row",
    "parse_schema",
]

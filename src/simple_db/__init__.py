"""Simple DB - A minimal embedded store of typed tables in a single file."""

from simple_db.database import Database
from simple_db.errors import (
    DatabaseError,
    DatabaseIOError,
    DeserializationError,
    IndexOutOfBoundsError,
    InvalidStateError,
    SchemaMismatchError,
    SerializationError,
    TableAlreadyExistsError,
    TableMissingError,
)
from simple_db.row import Row, schema_of
from simple_db.service import DatabaseService
from simple_db.storage import PersistentDatabase
from simple_db.table import Table
from simple_db.types import TypeTag, Value, compare, format_value, type_tag

__all__ = [
    # Main API
    "PersistentDatabase",
    "DatabaseService",
    "Database",
    "Table",
    "Row",
    # Values
    "TypeTag",
    "Value",
    "compare",
    "format_value",
    "schema_of",
    "type_tag",
    # Errors
    "DatabaseError",
    "DatabaseIOError",
    "DeserializationError",
    "IndexOutOfBoundsError",
    "InvalidStateError",
    "SchemaMismatchError",
    "SerializationError",
    "TableAlreadyExistsError",
    "TableMissingError",
]

__version__ = "0.1.0"

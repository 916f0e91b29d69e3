"""Exception hierarchy for simple_db."""

from __future__ import annotations

from typing import Sequence


class DatabaseError(Exception):
    """Base class for all simple_db errors."""


class DatabaseIOError(DatabaseError, OSError):
    """Raised when the database file cannot be created, read or written."""

    def __init__(self, message: str, path: object = None) -> None:
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        return self.args[0]


class SerializationError(DatabaseError):
    """Raised when a database cannot be encoded."""


class DeserializationError(DatabaseError):
    """Raised when bytes are not a valid encoding of a database."""


class SchemaMismatchError(DatabaseError, ValueError):
    """Raised when a row does not fit a table's schema."""

    def __init__(self, expected: Sequence[object], actual: Sequence[object]) -> None:
        self.expected = tuple(expected)
        self.actual = tuple(actual)
        super().__init__(
            f"Row does not fit table's schema: expected {_tags(self.expected)}, "
            f"got {_tags(self.actual)}"
        )


class TableAlreadyExistsError(DatabaseError):
    """Raised when creating a table whose name is taken."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Table {name} is already present")


class TableMissingError(DatabaseError, LookupError):
    """Raised when a named table does not exist."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Table {name} is missing")


class IndexOutOfBoundsError(DatabaseError, IndexError):
    """Raised when a row or column index is past the end."""

    def __init__(self, index: int, length: int) -> None:
        self.index = index
        self.length = length
        super().__init__(f"Index {index} out of range [0, {length})")


class InvalidStateError(DatabaseError):
    """Raised when a loaded table holds rows that violate its schema."""

    def __init__(self, table_name: str) -> None:
        self.table_name = table_name
        super().__init__(f"Invalid state for table {table_name}")


def _tags(schema: tuple[object, ...]) -> str:
    return "[" + ", ".join(getattr(t, "value", str(t)) for t in schema) + "]"

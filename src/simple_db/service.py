"""Lock-guarded "current database" surface for transports and tools."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Iterable, Optional

from simple_db.config import Settings
from simple_db.errors import (
    IndexOutOfBoundsError,
    SchemaMismatchError,
    TableAlreadyExistsError,
    TableMissingError,
)
from simple_db.row import Row
from simple_db.storage import PersistentDatabase
from simple_db.types import TypeTag

logger = logging.getLogger(__name__)

# Structural errors the mutating operations turn into logged no-ops
_IGNORED = (SchemaMismatchError, TableAlreadyExistsError, TableMissingError, IndexOutOfBoundsError)


class DatabaseService:
    """Holds at most one open database behind a lock.

    Accessors return None when no database is open or the table does not
    exist; mutators do nothing in the same situations. Each instance is
    independent, so several can coexist in one process.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or Settings()
        self._lock = threading.Lock()
        self._current: Optional[PersistentDatabase] = None

    @property
    def is_open(self) -> bool:
        with self._lock:
            return self._current is not None

    def create(self, name: str, path: Path | str) -> None:
        """Create a database at ``path`` and make it current."""
        with self._lock:
            self._current = PersistentDatabase.create(name, path, self._settings)
            logger.info(f"Current database is now {name!r} ({path})")

    def open(self, path: Path | str) -> None:
        """Load the database at ``path`` and make it current.

        On failure the previously open database stays current.
        """
        with self._lock:
            loaded = PersistentDatabase.load(path, self._settings)
            self._current = loaded
            logger.info(f"Current database is now {loaded.name!r} ({path})")

    def close(self) -> None:
        """Forget the current database without saving it."""
        with self._lock:
            self._current = None

    def get_name(self) -> str | None:
        with self._lock:
            if self._current is None:
                return None
            return self._current.name

    def get_table_names(self) -> list[str] | None:
        with self._lock:
            if self._current is None:
                return None
            return sorted(self._current.table_names())

    def save(self) -> None:
        with self._lock:
            if self._current is not None:
                self._current.save()

    def remove_table(self, name: str) -> None:
        self._mutate("remove_table", name)

    def create_table(self, name: str, schema: Iterable[TypeTag | str]) -> None:
        """Create an empty table; unknown type names make this a no-op."""
        try:
            tags = [t if isinstance(t, TypeTag) else TypeTag.from_name(t) for t in schema]
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning(f"create_table: invalid schema for {name!r}: {e}")
            return
        self._mutate("create_table", name, tags)

    def remove_row(self, table: str, index: int) -> None:
        self._mutate("remove_row", table, index)

    def insert_row(self, table: str, row: Row | Iterable[Any]) -> None:
        converted = _as_row("insert_row", row)
        if converted is not None:
            self._mutate("insert_row", table, converted)

    def update_row(self, table: str, index: int, row: Row | Iterable[Any]) -> None:
        converted = _as_row("update_row", row)
        if converted is not None:
            self._mutate("update_row", table, index, converted)

    def get_table_schema(self, table: str) -> list[TypeTag] | None:
        with self._lock:
            if self._current is None:
                return None
            try:
                return list(self._current.table_schema(table))
            except TableMissingError:
                return None

    def get_rows_sorted(self, table: str, sort_by: int | None = None) -> list[Row] | None:
        with self._lock:
            if self._current is None:
                return None
            try:
                return self._current.sorted_rows(table, sort_by)
            except TableMissingError:
                return None

    def _mutate(self, operation: str, *args: Any) -> None:
        with self._lock:
            if self._current is None:
                logger.warning(f"{operation}: no database is open")
                return
            try:
                getattr(self._current, operation)(*args)
            except _IGNORED as e:
                logger.warning(f"{operation}: {e}")


def _as_row(operation: str, row: Row | Iterable[Any]) -> Row | None:
    if isinstance(row, Row):
        return row
    try:
        return Row(row)
    except (TypeError, ValueError) as e:
        logger.warning(f"{operation}: invalid row: {e}")
        return None

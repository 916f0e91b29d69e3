"""Persistence wrapper binding a database to a file."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Iterable

from simple_db.codec import decode_database, encode_database
from simple_db.config import Settings
from simple_db.database import Database
from simple_db.errors import DatabaseIOError
from simple_db.row import Row
from simple_db.table import Table
from simple_db.types import TypeTag

logger = logging.getLogger(__name__)


class PersistentDatabase:
    """A database together with the file it is saved to and loaded from.

    Nothing is written implicitly: mutations only reach disk on ``save``.
    """

    def __init__(
        self,
        database: Database,
        path: Path | str,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the wrapper without touching the disk.

        Args:
            database: In-memory database.
            path: File the database is persisted to.
            settings: Storage settings (fsync behaviour).
        """
        self._database = database
        self._path = Path(path)
        self._settings = settings or Settings()

    @classmethod
    def create(
        cls, name: str, path: Path | str, settings: Settings | None = None
    ) -> PersistentDatabase:
        """Create an empty database and write it to ``path`` immediately."""
        pinned = cls(Database(name), path, settings)
        pinned.save()
        logger.info(f"Created database {name!r} at {pinned.path}")
        return pinned

    @classmethod
    def load(cls, path: Path | str, settings: Settings | None = None) -> PersistentDatabase:
        """Read, decode and validate the database stored at ``path``."""
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise DatabaseIOError(f"Cannot read database file {path}: {e}", path) from e

        database = decode_database(data)
        database.validate()
        logger.info(f"Loaded database {database.name!r} from {path} ({len(database)} tables)")
        return cls(database, path, settings)

    open = load

    @property
    def database(self) -> Database:
        return self._database

    @property
    def path(self) -> Path:
        return self._path

    @property
    def name(self) -> str:
        return self._database.name

    def save(self) -> None:
        """Write the whole database to ``path``.

        The bytes go to a temporary file in the same directory which then
        replaces the target, so the previous file survives a failed write.
        """
        content = encode_database(self._database)
        directory = self._path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DatabaseIOError(f"Cannot create directory {directory}: {e}", directory) from e

        tmp_name: str | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=directory
            )
            with os.fdopen(fd, "wb") as f:
                f.write(content)
                f.flush()
                if self._settings.fsync:
                    os.fsync(f.fileno())
            os.chmod(tmp_name, _target_mode(self._path))
            os.replace(tmp_name, self._path)
            tmp_name = None
        except OSError as e:
            raise DatabaseIOError(f"Cannot write database file {self._path}: {e}", self._path) from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        logger.info(f"Saved database {self.name!r} to {self._path} ({len(content)} bytes)")

    # Delegating accessors

    def table_names(self) -> set[str]:
        return self._database.table_names()

    def create_table(self, name: str, schema: Iterable[TypeTag | str]) -> Table:
        table = self._database.create_table(name, schema)
        logger.debug(f"Created table {name!r} with schema {[t.value for t in table.schema]}")
        return table

    def remove_table(self, name: str) -> None:
        self._database.remove_table(name)
        logger.debug(f"Removed table {name!r}")

    def get_table(self, name: str) -> Table:
        return self._database.get_table(name)

    def table_schema(self, name: str) -> tuple[TypeTag, ...]:
        return self._database.get_table(name).schema

    def insert_row(self, table: str, row: Row | Iterable[Any]) -> int:
        index = self._database.get_table(table).insert_row(row)
        logger.debug(f"Inserted row {index} into {table!r}")
        return index

    def update_row(self, table: str, index: int, row: Row | Iterable[Any]) -> None:
        self._database.get_table(table).update_row(index, row)
        logger.debug(f"Updated row {index} in {table!r}")

    def remove_row(self, table: str, index: int) -> None:
        self._database.get_table(table).remove_row(index)
        logger.debug(f"Removed row {index} from {table!r}")

    def sorted_rows(self, table: str, sort_key: int | None = None) -> list[Row]:
        return self._database.get_table(table).sorted_rows(sort_key)

    def __repr__(self) -> str:
        return f"PersistentDatabase({self.name!r}, {str(self._path)!r})"


def _target_mode(path: Path) -> int:
    """Permission bits for a rewritten file: the existing file's, else the umask default."""
    try:
        return path.stat().st_mode & 0o7777
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask

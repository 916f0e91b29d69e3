"""In-memory database: a named mapping of tables."""

from __future__ import annotations

from typing import Iterable, Iterator

from simple_db.errors import TableAlreadyExistsError, TableMissingError
from simple_db.table import Table
from simple_db.types import TypeTag


class Database:
    """Named collection of uniquely named tables."""

    def __init__(self, name: str, tables: Iterable[Table] = ()) -> None:
        """Initialize a database.

        Args:
            name: Name of the database itself.
            tables: Tables to start with; names must be unique.
        """
        self._name = name
        self._tables: dict[str, Table] = {}
        for table in tables:
            if table.name in self._tables:
                raise TableAlreadyExistsError(table.name)
            self._tables[table.name] = table

    @property
    def name(self) -> str:
        return self._name

    @property
    def tables(self) -> tuple[Table, ...]:
        return tuple(self._tables.values())

    def create_table(self, name: str, schema: Iterable[TypeTag | str]) -> Table:
        """Create an empty table and return it."""
        if name in self._tables:
            raise TableAlreadyExistsError(name)
        table = Table(name, schema)
        self._tables[name] = table
        return table

    def remove_table(self, name: str) -> None:
        """Remove the named table."""
        if name not in self._tables:
            raise TableMissingError(name)
        del self._tables[name]

    def get_table(self, name: str) -> Table:
        """Return the named table."""
        try:
            return self._tables[name]
        except KeyError:
            raise TableMissingError(name) from None

    def table_names(self) -> set[str]:
        """Return the names of all tables. Order is not meaningful."""
        return set(self._tables)

    def validate(self) -> None:
        """Validate every table, raising on the first corrupt one."""
        for table in self._tables.values():
            table.validate()

    def __contains__(self, name: object) -> bool:
        return name in self._tables

    def __iter__(self) -> Iterator[Table]:
        return iter(self._tables.values())

    def __len__(self) -> int:
        return len(self._tables)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Database):
            return NotImplemented
        return self._name == other._name and self._tables == other._tables

    def __repr__(self) -> str:
        return f"Database({self._name!r}, tables={sorted(self._tables)!r})"

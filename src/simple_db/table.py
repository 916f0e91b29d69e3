"""Table of rows sharing a fixed schema."""

from __future__ import annotations

from typing import Any, Iterable

from simple_db.errors import IndexOutOfBoundsError, InvalidStateError, SchemaMismatchError
from simple_db.row import Row
from simple_db.types import TypeTag


class Table:
    """Named, ordered collection of rows with a fixed schema.

    Every stored row matches ``schema``; this is enforced on insert and
    update and re-checked by ``validate`` after loading from disk.
    """

    def __init__(self, name: str, schema: Iterable[TypeTag | str]) -> None:
        self._name = name
        self._schema: tuple[TypeTag, ...] = tuple(_as_tag(t) for t in schema)
        self._rows: list[Row] = []

    @classmethod
    def from_rows(cls, name: str, schema: Iterable[TypeTag], rows: Iterable[Row]) -> Table:
        """Rebuild a table from stored rows without checking them.

        Used when decoding a file; call ``validate`` afterwards.
        """
        table = cls(name, schema)
        table._rows = list(rows)
        return table

    @property
    def name(self) -> str:
        return self._name

    @property
    def schema(self) -> tuple[TypeTag, ...]:
        return self._schema

    @property
    def rows(self) -> tuple[Row, ...]:
        return tuple(self._rows)

    @property
    def count(self) -> int:
        """Return the number of rows in the table."""
        return len(self._rows)

    def _coerce(self, row: Row | Iterable[Any]) -> Row:
        if not isinstance(row, Row):
            row = Row(row)
        if row.schema() != self._schema:
            raise SchemaMismatchError(self._schema, row.schema())
        return row

    def insert_row(self, row: Row | Iterable[Any]) -> int:
        """Append a row and return its index."""
        row = self._coerce(row)
        self._rows.append(row)
        return len(self._rows) - 1

    def update_row(self, index: int, row: Row | Iterable[Any]) -> None:
        """Replace the row at ``index``.

        The schema is checked before the index so a rejected row never
        touches the table.
        """
        row = self._coerce(row)
        if index < 0 or index >= len(self._rows):
            raise IndexOutOfBoundsError(index, len(self._rows))
        self._rows[index] = row

    def remove_row(self, index: int) -> None:
        """Remove the row at ``index``; out-of-range indices are ignored."""
        if 0 <= index < len(self._rows):
            del self._rows[index]

    def get_row(self, index: int) -> Row:
        """Return the row at ``index``."""
        if index < 0 or index >= len(self._rows):
            raise IndexOutOfBoundsError(index, len(self._rows))
        return self._rows[index]

    def validate(self) -> None:
        """Check every stored row against the schema."""
        for row in self._rows:
            if row.schema() != self._schema:
                raise InvalidStateError(self._name)

    def sorted_rows(self, sort_key: int | None = None) -> list[Row]:
        """Return the rows ordered by column ``sort_key``.

        A missing or out-of-range column means insertion order. The sort is
        stable, so rows with equal keys keep their insertion order. The list
        is rebuilt on every call.
        """
        if sort_key is None or sort_key < 0 or sort_key >= len(self._schema):
            return list(self._rows)
        return sorted(self._rows, key=lambda row: row.get(sort_key).sort_key())

    def __len__(self) -> int:
        return len(self._rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Table):
            return NotImplemented
        return (
            self._name == other._name
            and self._schema == other._schema
            and self._rows == other._rows
        )

    def __repr__(self) -> str:
        schema = ", ".join(t.value for t in self._schema)
        return f"Table({self._name!r}, [{schema}], {len(self._rows)} rows)"


def _as_tag(tag: TypeTag | str) -> TypeTag:
    if isinstance(tag, TypeTag):
        return tag
    return TypeTag.from_name(tag)

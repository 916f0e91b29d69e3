"""Binary encoding of a database.

File layout (all integers little-endian):

    magic       4 bytes  b"SDB1"
    database    name:string  table_count:uint32  table*
    table       name:string  schema_len:uint32  tag:uint8*  row_count:uint32  row*
    row         value_count:uint32  value*
    value       tag:uint8  payload
    string      length:uint32  utf-8 bytes

Value payloads by tag: int64, float64, character code point as uint32,
string, two float64, two int64.
"""

from __future__ import annotations

import struct
from typing import Any

from simple_db.database import Database
from simple_db.errors import DeserializationError, SerializationError
from simple_db.row import Row
from simple_db.table import Table
from simple_db.types import TypeTag, Value

MAGIC = b"SDB1"

# struct formats for fixed-size payloads
_FORMATS: dict[TypeTag, str] = {
    TypeTag.INTEGER: "<q",
    TypeTag.REAL: "<d",
    TypeTag.CHAR: "<I",
    TypeTag.COMPLEX_REAL: "<dd",
    TypeTag.COMPLEX_INTEGER: "<qq",
}

_U8 = struct.Struct("<B")
_U32 = struct.Struct("<I")


def encode_database(db: Database) -> bytes:
    """Serialize a database to bytes."""
    parts = [MAGIC]
    try:
        _write_string(parts, db.name)
        tables = db.tables
        parts.append(_U32.pack(len(tables)))
        for table in tables:
            _write_table(parts, table)
    except (struct.error, UnicodeEncodeError, OverflowError) as e:
        raise SerializationError(f"Cannot encode database {db.name!r}: {e}") from e
    return b"".join(parts)


def _write_string(parts: list[bytes], s: str) -> None:
    data = s.encode("utf-8")
    parts.append(_U32.pack(len(data)))
    parts.append(data)


def _write_table(parts: list[bytes], table: Table) -> None:
    _write_string(parts, table.name)
    parts.append(_U32.pack(len(table.schema)))
    for tag in table.schema:
        parts.append(_U8.pack(tag.ordinal))
    rows = table.rows
    parts.append(_U32.pack(len(rows)))
    for row in rows:
        parts.append(_U32.pack(len(row)))
        for value in row:
            _write_value(parts, value)


def _write_value(parts: list[bytes], value: Value) -> None:
    """Write the discriminant followed by the payload."""
    tag = value.tag
    parts.append(_U8.pack(tag.ordinal))
    if tag == TypeTag.TEXT:
        _write_string(parts, value.data)
    elif tag == TypeTag.CHAR:
        parts.append(struct.pack(_FORMATS[tag], ord(value.data)))
    elif tag.is_complex:
        parts.append(struct.pack(_FORMATS[tag], *value.data))
    else:
        parts.append(struct.pack(_FORMATS[tag], value.data))


class _Reader:
    """Cursor over an encoded buffer."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.offset = 0

    def take(self, size: int) -> bytes:
        end = self.offset + size
        if end > len(self.data):
            raise DeserializationError(
                f"Unexpected end of data at offset {self.offset} (need {size} bytes)"
            )
        chunk = self.data[self.offset:end]
        self.offset = end
        return chunk

    def unpack(self, fmt: str | struct.Struct) -> tuple[Any, ...]:
        s = fmt if isinstance(fmt, struct.Struct) else struct.Struct(fmt)
        return s.unpack(self.take(s.size))

    def u8(self) -> int:
        return self.unpack(_U8)[0]

    def u32(self) -> int:
        return self.unpack(_U32)[0]

    def string(self) -> str:
        length = self.u32()
        raw = self.take(length)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DeserializationError(f"Invalid UTF-8 string: {e}") from e

    def tag(self) -> TypeTag:
        ordinal = self.u8()
        try:
            return TypeTag.from_ordinal(ordinal)
        except ValueError as e:
            raise DeserializationError(str(e)) from e

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset


def decode_database(data: bytes) -> Database:
    """Deserialize bytes produced by ``encode_database``.

    Rows are not checked against their table's schema here; call
    ``Database.validate`` on the result.
    """
    reader = _Reader(data)
    if reader.take(len(MAGIC)) != MAGIC:
        raise DeserializationError("Not a simple_db file (bad magic)")

    name = reader.string()
    table_count = reader.u32()
    tables: dict[str, Table] = {}
    for _ in range(table_count):
        table = _read_table(reader)
        if table.name in tables:
            raise DeserializationError(f"Duplicate table name: {table.name!r}")
        tables[table.name] = table

    if reader.remaining:
        raise DeserializationError(f"{reader.remaining} trailing bytes after database")

    return Database(name, tables.values())


def _read_table(reader: _Reader) -> Table:
    name = reader.string()
    schema = [reader.tag() for _ in range(reader.u32())]
    rows = []
    for _ in range(reader.u32()):
        values = [_read_value(reader) for _ in range(reader.u32())]
        rows.append(Row(values))
    return Table.from_rows(name, schema, rows)


def _read_value(reader: _Reader) -> Value:
    tag = reader.tag()
    try:
        if tag == TypeTag.TEXT:
            return Value(tag, reader.string())
        elif tag == TypeTag.CHAR:
            return Value(tag, chr(reader.unpack(_FORMATS[tag])[0]))
        elif tag.is_complex:
            return Value(tag, reader.unpack(_FORMATS[tag]))
        else:
            return Value(tag, reader.unpack(_FORMATS[tag])[0])
    except (ValueError, OverflowError) as e:
        raise DeserializationError(f"Invalid {tag.value} payload: {e}") from e

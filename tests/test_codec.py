"""Tests for the binary file format."""

import math
import struct

import pytest

from simple_db.codec import MAGIC, decode_database, encode_database
from simple_db.database import Database
from simple_db.errors import DeserializationError, InvalidStateError
from simple_db.row import Row
from simple_db.table import Table
from simple_db.types import TypeTag, Value


def sample_database():
    db = Database("sample ✓")
    people = db.create_table("people", [TypeTag.TEXT, TypeTag.INTEGER, TypeTag.CHAR])
    people.insert_row([Value.text("Alice"), Value.integer(30), Value.char("A")])
    people.insert_row([Value.text(""), Value.integer(-(2**63)), Value.char("é")])
    numbers = db.create_table(
        "numbers", [TypeTag.REAL, TypeTag.COMPLEX_REAL, TypeTag.COMPLEX_INTEGER]
    )
    numbers.insert_row(
        [Value.real(-0.5), Value.complex_real(1.5, -2.25), Value.complex_integer(2**63 - 1, -7)]
    )
    numbers.insert_row([Value.real(math.inf), Value.complex_real(0.0, 0.0), Value.complex_integer(0, 0)])
    numbers.insert_row(
        [Value.real(math.nan), Value.complex_real(math.nan, -math.nan), Value.complex_integer(1, 1)]
    )
    db.create_table("empty", [])
    return db


class TestRoundTrip:
    """Encoding then decoding reproduces the database."""

    def test_round_trip(self):
        """All value kinds survive a round trip."""
        db = sample_database()
        data = encode_database(db)
        assert data.startswith(MAGIC)
        assert decode_database(data) == db

    def test_round_trip_empty(self):
        """A database without tables round-trips."""
        db = Database("")
        assert decode_database(encode_database(db)) == db

    def test_row_order_preserved(self):
        """Rows come back in stored order."""
        db = Database("db")
        table = db.create_table("t", [TypeTag.INTEGER])
        for n in (3, 1, 2):
            table.insert_row([n])
        decoded = decode_database(encode_database(db))
        assert [row.get(0).data for row in decoded.get_table("t").rows] == [3, 1, 2]

    def test_invalid_rows_survive_decoding(self):
        """Decoding does not validate; that is left to the caller."""
        bad = Table.from_rows("t", [TypeTag.INTEGER], [Row([Value.text("x")])])
        decoded = decode_database(encode_database(Database("db", [bad])))
        with pytest.raises(InvalidStateError):
            decoded.validate()


class TestDecodeErrors:
    """Malformed input is reported as DeserializationError."""

    def test_bad_magic(self):
        """Files without the magic header are rejected."""
        with pytest.raises(DeserializationError):
            decode_database(b"NOPE" + encode_database(Database("db"))[4:])

    def test_empty_input(self):
        """Empty input is rejected."""
        with pytest.raises(DeserializationError):
            decode_database(b"")

    def test_truncated(self):
        """Every strict prefix of a valid encoding is rejected."""
        data = encode_database(sample_database())
        for cut in (5, len(data) // 2, len(data) - 1):
            with pytest.raises(DeserializationError):
                decode_database(data[:cut])

    def test_trailing_bytes(self):
        """Extra bytes after the database are rejected."""
        data = encode_database(Database("db"))
        with pytest.raises(DeserializationError):
            decode_database(data + b"\x00")

    def test_unknown_tag(self):
        """An unknown schema discriminant is rejected."""
        data = (
            MAGIC
            + struct.pack("<I", 2) + b"db"
            + struct.pack("<I", 1)
            + struct.pack("<I", 1) + b"t"
            + struct.pack("<I", 1) + struct.pack("<B", 9)
            + struct.pack("<I", 0)
        )
        with pytest.raises(DeserializationError):
            decode_database(data)

    def test_bad_utf8(self):
        """Invalid UTF-8 in a name is rejected."""
        data = MAGIC + struct.pack("<I", 2) + b"\xff\xfe" + struct.pack("<I", 0)
        with pytest.raises(DeserializationError):
            decode_database(data)

    def test_duplicate_table_names(self):
        """Two tables with the same name are rejected."""
        table = struct.pack("<I", 1) + b"t" + struct.pack("<I", 0) + struct.pack("<I", 0)
        data = MAGIC + struct.pack("<I", 2) + b"db" + struct.pack("<I", 2) + table + table
        with pytest.raises(DeserializationError):
            decode_database(data)

    def test_invalid_char_code_point(self):
        """A char payload outside the Unicode range is rejected."""
        data = (
            MAGIC
            + struct.pack("<I", 2) + b"db"
            + struct.pack("<I", 1)
            + struct.pack("<I", 1) + b"t"
            + struct.pack("<I", 1) + struct.pack("<B", TypeTag.CHAR.ordinal)
            + struct.pack("<I", 1)
            + struct.pack("<I", 1) + struct.pack("<B", TypeTag.CHAR.ordinal)
            + struct.pack("<I", 0x110000)
        )
        with pytest.raises(DeserializationError):
            decode_database(data)

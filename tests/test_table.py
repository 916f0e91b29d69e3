"""Tests for rows and tables."""

import pytest

from simple_db.errors import IndexOutOfBoundsError, InvalidStateError, SchemaMismatchError
from simple_db.row import Row, schema_of
from simple_db.table import Table
from simple_db.types import TypeTag, Value


def int_row(n):
    return Row([Value.integer(n)])


class TestRow:
    """Tests for the Row class."""

    def test_schema(self):
        """A row's schema is the tag of each value in order."""
        row = Row([Value.text("a"), Value.integer(1), Value.complex_integer(1, 1)])
        assert schema_of(row) == (TypeTag.TEXT, TypeTag.INTEGER, TypeTag.COMPLEX_INTEGER)
        assert Row().schema() == ()

    def test_plain_values_are_wrapped(self):
        """Plain Python values are converted with Value.from_python."""
        row = Row([1, "a", 2.5])
        assert row.values == (Value.integer(1), Value.text("a"), Value.real(2.5))

    def test_get(self):
        """get returns the value at an index."""
        row = Row([Value.integer(7), Value.char("z")])
        assert row.get(0) == Value.integer(7)
        assert row.get(1) == Value.char("z")

    def test_get_out_of_bounds(self):
        """get fails past the end."""
        row = Row([Value.integer(7)])
        with pytest.raises(IndexOutOfBoundsError) as exc_info:
            row.get(1)
        assert exc_info.value.index == 1
        assert exc_info.value.length == 1
        with pytest.raises(IndexError):
            row.get(-1)

    def test_str(self):
        """A row renders as space-separated values."""
        row = Row([Value.integer(1), Value.text("b"), Value.complex_integer(2, -3)])
        assert str(row) == "1 b 2 - 3i"
        assert str(Row([Value.real(2.0), Value.real(0.25)])) == "2 0.25"

    def test_equality(self):
        """Rows compare by their values."""
        assert Row([1, 2]) == Row([Value.integer(1), Value.integer(2)])
        assert Row([1]) != Row([1.0])


class TestTableInsert:
    """Tests for inserting rows."""

    def test_new_table_is_empty(self):
        """A new table has its schema and no rows."""
        table = Table("t", [TypeTag.INTEGER, TypeTag.TEXT])
        assert table.name == "t"
        assert table.schema == (TypeTag.INTEGER, TypeTag.TEXT)
        assert table.rows == ()
        assert table.count == 0

    def test_schema_accepts_names(self):
        """Schema entries may be given as type names."""
        table = Table("t", ["int", "complex_real"])
        assert table.schema == (TypeTag.INTEGER, TypeTag.COMPLEX_REAL)

    def test_insert_appends(self):
        """Matching rows are appended in order."""
        table = Table("t", [TypeTag.INTEGER])
        assert table.insert_row(int_row(1)) == 0
        assert table.insert_row(int_row(2)) == 1
        assert table.rows == (int_row(1), int_row(2))

    def test_insert_mismatch_leaves_table_unchanged(self):
        """A row with the wrong schema is rejected without mutation."""
        table = Table("t", [TypeTag.INTEGER])
        table.insert_row(int_row(1))
        before = table.rows

        with pytest.raises(SchemaMismatchError) as exc_info:
            table.insert_row(Row([Value.real(1.0)]))
        assert exc_info.value.expected == (TypeTag.INTEGER,)
        assert exc_info.value.actual == (TypeTag.REAL,)

        with pytest.raises(SchemaMismatchError):
            table.insert_row(Row([Value.integer(1), Value.integer(2)]))
        with pytest.raises(SchemaMismatchError):
            table.insert_row(Row())

        assert table.rows == before

    def test_empty_schema_accepts_empty_row(self):
        """A table without columns accepts only empty rows."""
        table = Table("t", [])
        table.insert_row(Row())
        assert table.count == 1


class TestTableUpdate:
    """Tests for updating rows."""

    def test_update_replaces(self):
        """A matching row replaces the row at the index."""
        table = Table("t", [TypeTag.INTEGER])
        table.insert_row(int_row(1))
        table.update_row(0, int_row(2))
        assert table.rows == (int_row(2),)

    def test_update_out_of_bounds(self):
        """Updating past the end fails."""
        table = Table("t", [TypeTag.INTEGER])
        table.insert_row(int_row(1))
        with pytest.raises(IndexOutOfBoundsError):
            table.update_row(1, int_row(2))
        assert table.rows == (int_row(1),)

    def test_update_checks_schema_first(self):
        """A bad row is reported as a schema mismatch even for a bad index."""
        table = Table("t", [TypeTag.INTEGER])
        table.insert_row(int_row(1))
        with pytest.raises(SchemaMismatchError):
            table.update_row(5, Row([Value.text("x")]))
        with pytest.raises(SchemaMismatchError):
            table.update_row(0, Row([Value.text("x")]))
        assert table.rows == (int_row(1),)


class TestTableRemove:
    """Tests for removing rows."""

    def test_remove_shifts_later_rows(self):
        """Removing a row keeps the relative order of the rest."""
        table = Table("t", [TypeTag.INTEGER])
        for n in (1, 2, 3, 4):
            table.insert_row(int_row(n))
        table.remove_row(1)
        assert table.rows == (int_row(1), int_row(3), int_row(4))

    def test_remove_out_of_range_is_noop(self):
        """Out-of-range removal leaves the rows untouched."""
        table = Table("t", [TypeTag.INTEGER])
        table.insert_row(int_row(1))
        table.remove_row(1)
        table.remove_row(100)
        table.remove_row(-1)
        assert table.rows == (int_row(1),)


class TestTableValidate:
    """Tests for schema validation."""

    def test_valid_table(self):
        """A table built through insert_row validates."""
        table = Table("t", [TypeTag.TEXT])
        table.insert_row(Row([Value.text("ok")]))
        table.validate()

    def test_invalid_rows_detected(self):
        """Rows that bypassed insert_row are caught."""
        table = Table.from_rows("t", [TypeTag.TEXT], [Row([Value.integer(1)])])
        with pytest.raises(InvalidStateError) as exc_info:
            table.validate()
        assert exc_info.value.table_name == "t"


class TestSortedRows:
    """Tests for the sorted view."""

    def make_table(self):
        table = Table("table", [TypeTag.TEXT, TypeTag.COMPLEX_INTEGER])
        row1 = Row([Value.text("B"), Value.complex_integer(1, 1)])
        row2 = Row([Value.text("C"), Value.complex_integer(0, 1)])
        row3 = Row([Value.text("A"), Value.complex_integer(0, -1)])
        for row in (row1, row2, row3):
            table.insert_row(row)
        return table, row1, row2, row3

    def test_no_key_is_insertion_order(self):
        """Without a sort key rows come back in insertion order."""
        table, row1, row2, row3 = self.make_table()
        assert table.sorted_rows(None) == [row1, row2, row3]
        assert table.sorted_rows() == [row1, row2, row3]

    def test_sort_by_text_column(self):
        """Rows sort ascending by the chosen column."""
        table, row1, row2, row3 = self.make_table()
        assert table.sorted_rows(0) == [row3, row1, row2]

    def test_sort_by_complex_column(self):
        """Complex columns sort real part first, then imaginary."""
        table, row1, row2, row3 = self.make_table()
        assert table.sorted_rows(1) == [row3, row2, row1]

    def test_out_of_range_key_is_insertion_order(self):
        """A column index past the schema falls back to insertion order."""
        table, row1, row2, row3 = self.make_table()
        assert table.sorted_rows(2) == [row1, row2, row3]
        assert table.sorted_rows(99) == [row1, row2, row3]

    def test_sort_is_stable(self):
        """Rows with equal keys keep their insertion order."""
        table = Table("t", [TypeTag.INTEGER, TypeTag.TEXT])
        rows = [
            Row([Value.integer(2), Value.text("first two")]),
            Row([Value.integer(1), Value.text("one")]),
            Row([Value.integer(2), Value.text("second two")]),
        ]
        for row in rows:
            table.insert_row(row)
        assert table.sorted_rows(0) == [rows[1], rows[0], rows[2]]

    def test_view_is_recomputed(self):
        """Each call reflects the current rows and does not affect the table."""
        table, row1, row2, row3 = self.make_table()
        view = table.sorted_rows(0)
        view.clear()
        assert table.count == 3
        table.remove_row(2)
        assert table.sorted_rows(0) == [row1, row2]

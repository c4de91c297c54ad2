"""Tests for the symbol table."""

import pytest

from promwrite.symbols import SymbolTable


class TestSymbolTable:
    """Tests for SymbolTable."""

    def test_empty_string_is_reference_zero(self):
        table = SymbolTable()
        assert table.intern("") == 0
        assert table.symbols() == [""]

    def test_real_strings_start_at_one(self):
        table = SymbolTable()
        assert table.intern("__name__") == 1
        assert table.intern("up") == 2

    def test_repeated_input_returns_same_reference(self):
        table = SymbolTable()
        first = table.intern("job")
        table.intern("instance")
        assert table.intern("job") == first
        assert table.symbols() == ["", "job", "instance"]

    def test_intern_labels_keeps_order(self):
        table = SymbolTable()
        refs = table.intern_labels(["__name__", "up", "job", "node"])
        assert refs == [1, 2, 3, 4]
        assert [table.symbols()[r] for r in refs] == ["__name__", "up", "job", "node"]

    def test_intern_labels_same_name_different_values(self):
        table = SymbolTable()
        first = table.intern_labels(["room", "kitchen"])
        second = table.intern_labels(["room", "office"])
        assert first[0] == second[0]
        assert first[1] != second[1]

    def test_intern_labels_value_equal_to_name(self):
        """A value that matches a label name shares its reference."""
        table = SymbolTable()
        refs = table.intern_labels(["job", "job"])
        assert refs[0] == refs[1]
        assert len(table) == 2

    def test_intern_labels_rejects_odd_list(self):
        table = SymbolTable()
        with pytest.raises(ValueError, match="name/value pairs"):
            table.intern_labels(["__name__"])

    def test_symbols_returns_copy(self):
        table = SymbolTable()
        table.intern("a")
        symbols = table.symbols()
        symbols.append("b")
        assert table.symbols() == ["", "a"]
        assert len(table) == 2

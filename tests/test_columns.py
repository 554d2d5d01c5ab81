"""Tests for epictrack.lib.columns module."""

from epictrack.lib.columns import format_row, get_column_string


class TestGetColumnString:
    """Test get_column_string padding and truncation."""

    def test_tiny_widths_are_dots(self):
        text = "testmetest"
        assert get_column_string(text, 0) == ""
        assert get_column_string(text, 1) == "."
        assert get_column_string(text, 2) == ".."
        assert get_column_string(text, 3) == "..."

    def test_truncates_with_ellipsis(self):
        assert get_column_string("testmetest", 4) == "t..."
        assert get_column_string("testmetest", 6) == "tes..."

    def test_pads_short_text(self):
        assert get_column_string("", 6) == "      "
        assert get_column_string("test", 6) == "test  "

    def test_exact_fit(self):
        assert get_column_string("testme", 6) == "testme"


class TestFormatRow:
    """Test format_row."""

    def test_joins_fixed_width_columns(self):
        assert format_row(["1", "Checkout"], [3, 5]) == "1   | Ch..."

    def test_custom_separator(self):
        assert format_row(["a", "b"], [2, 2], sep="|") == "a |b "

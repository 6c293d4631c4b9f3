"""Unit tests for (line, column) <-> offset reconciliation."""

# pylint: disable=missing-class-docstring,missing-function-docstring

from mdgrid.tables.positions import SourceIndex, SourcePos, line_col_to_offset

SOURCE = "abc\ndefg\n\nxy"


# ===========================================================================
# line_col_to_offset tests
# ===========================================================================


class TestLineColToOffset:

    def test_first_character(self):
        assert line_col_to_offset(SOURCE, 1, 1) == 0

    def test_start_of_second_line(self):
        assert line_col_to_offset(SOURCE, 2, 1) == 4

    def test_inside_second_line(self):
        assert line_col_to_offset(SOURCE, 2, 3) == 6
        assert SOURCE[6] == "f"

    def test_blank_line(self):
        assert line_col_to_offset(SOURCE, 3, 1) == 9

    def test_last_line(self):
        assert line_col_to_offset(SOURCE, 4, 2) == 11
        assert SOURCE[11] == "y"

    def test_end_of_text_allowed(self):
        assert line_col_to_offset(SOURCE, 4, 3) == len(SOURCE)

    def test_overflow_past_end(self):
        assert line_col_to_offset(SOURCE, 4, 4) is None

    def test_line_out_of_range(self):
        assert line_col_to_offset(SOURCE, 5, 1) is None

    def test_zero_line_or_column(self):
        assert line_col_to_offset(SOURCE, 0, 1) is None
        assert line_col_to_offset(SOURCE, 1, 0) is None

    def test_crlf_lines_keep_carriage_return(self):
        """The '\\r' counts as part of its line, so offsets index the raw text."""
        source = "ab\r\ncd"
        offset = line_col_to_offset(source, 2, 1)
        assert offset == 4
        assert source[offset] == "c"


# ===========================================================================
# SourceIndex tests
# ===========================================================================


class TestSourceIndex:

    def test_line_starts(self):
        assert SourceIndex(SOURCE).line_starts == [0, 4, 9, 10]

    def test_offset_matches_function(self):
        index = SourceIndex(SOURCE)
        for line, column in [(1, 1), (2, 3), (3, 1), (4, 2), (4, 3), (4, 4), (5, 1)]:
            assert index.offset(line, column) == line_col_to_offset(SOURCE, line, column)

    def test_line_end_excludes_newline(self):
        index = SourceIndex(SOURCE)
        assert index.line_end(2) == 8
        assert SOURCE[index.line_start(2) : index.line_end(2)] == "defg"

    def test_line_text(self):
        index = SourceIndex(SOURCE)
        assert index.line_text(2) == "defg"
        assert index.line_text(3) == ""
        assert index.line_text(9) == ""

    def test_position_inverse(self):
        index = SourceIndex(SOURCE)
        assert index.position(6) == SourcePos(2, 3)
        assert index.position(9) == SourcePos(3, 1)
        assert index.position(0) == SourcePos(1, 1)

    def test_position_on_newline(self):
        """The newline character belongs to the line it terminates."""
        assert SourceIndex(SOURCE).position(3) == SourcePos(1, 4)

    def test_round_trip_every_offset(self):
        index = SourceIndex(SOURCE)
        for offset in range(len(SOURCE)):
            assert index.offset(*index.position(offset)) == offset

"""Integration tests for the extract / rewrite_markers entry points."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import pytest

from mdgrid.tables.pipeline import extract, rewrite_markers
from mdgrid.tables.schema import CommentKind, MarkerMode

DOCUMENT = """\
# Quarterly budget

Costs are tracked below. <!-- reviewed -->

| Item <!-- !A1 --> | Cost <!-- !B1 --> |
|---|---|
| Rent <!-- !A2 --> | 1200 |
| Power | 80 <!-- !B9 --> |
| Total | <!-- =B2+B3 --> |
"""


class TestExtract:

    def test_comments_found_document_wide(self):
        extraction = extract(DOCUMENT)
        assert [c.comment.label for c in extraction.comments] == ["reviewed", "!A1", "!B1", "!A2", "!B9", "=B2+B3"]

    def test_kinds(self):
        kinds = [c.comment.kind for c in extract(DOCUMENT).comments]
        assert kinds.count(CommentKind.MARKER) == 4
        assert kinds.count(CommentKind.FORMULA) == 1
        assert kinds.count(CommentKind.UNKNOWN) == 1

    def test_one_table(self):
        extraction = extract(DOCUMENT)
        assert len(extraction.tables) == 1
        assert extraction.tables[0].shape == (4, 2)

    def test_formula_cell_has_no_text(self):
        table = extract(DOCUMENT).tables[0]
        total = table.rows[3].cells[1]
        assert total.text() == ""
        assert total.comments()[0].comment.kind == CommentKind.FORMULA

    def test_no_degradations(self):
        assert extract(DOCUMENT).diagnostics.total == 0

    def test_fresh_extraction_each_call(self):
        assert extract(DOCUMENT).tables[0] is not extract(DOCUMENT).tables[0]


class TestRewriteMarkers:

    def test_all_markers(self):
        output, _ = rewrite_markers(DOCUMENT, MarkerMode.ALL_MARKERS)
        assert "| Power <!-- !A3 --> | 80 <!-- !B3 --> |" in output
        assert "| Total <!-- !A4 --> | <!-- =B2+B3 --> <!-- !B4 --> |" in output
        assert "Costs are tracked below. <!-- reviewed -->" in output

    def test_all_markers_idempotent(self):
        once, _ = rewrite_markers(DOCUMENT, "all")
        twice, _ = rewrite_markers(once, "all")
        assert twice == once

    def test_update_existing(self):
        output, _ = rewrite_markers(DOCUMENT, "update-existing")
        assert "| Power | 80 <!-- !B3 --> |" in output
        assert "| Rent <!-- !A2 --> | 1200 |" in output

    def test_delete_all(self):
        output, _ = rewrite_markers(DOCUMENT, MarkerMode.DELETE_ALL)
        extraction = extract(output)
        assert [c.comment.label for c in extraction.comments] == ["reviewed", "=B2+B3"]

    def test_row_and_column(self):
        output, _ = rewrite_markers(DOCUMENT, "row-and-column")
        table = extract(output).tables[0]
        marked = [(r, c) for r, row in enumerate(table.rows) for c, cell in enumerate(row.cells) if cell.markers()]
        assert marked == [(0, 0), (0, 1), (1, 0), (2, 0), (3, 0)]

    def test_divider_untouched(self):
        output, _ = rewrite_markers(DOCUMENT, "all")
        assert "\n|---|---|\n" in output

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            rewrite_markers(DOCUMENT, "everything")

    def test_padded_code_span_delete_all(self):
        source = "| ` a ` <!-- !A1 --> | b |\n|---|---|\n| c | d |\n"
        output, extraction = rewrite_markers(source, MarkerMode.DELETE_ALL)
        assert output == "| ` a ` | b |\n|---|---|\n| c | d |\n"
        assert extraction.diagnostics.total == 0

    def test_padded_code_span_all_markers(self):
        source = "| ` a ` <!-- !Q9 --> | b |\n|---|---|\n| c | d |\n"
        output, _ = rewrite_markers(source, MarkerMode.ALL_MARKERS)
        assert output.splitlines()[0] == "| ` a ` <!-- !A1 --> | b <!-- !B1 --> |"


# ===========================================================================
# Tables too wide to label
# ===========================================================================

WIDE_HEADER = "|" + "|".join(f" c{i} " for i in range(27)) + "|"
WIDE_ROW = "|" + "|".join(" x " for _ in range(27)) + "|"
MIXED = f"| a | b |\n|---|---|\n| c | d |\n\n{WIDE_HEADER}\n{WIDE_ROW}\n"


class TestWideTables:

    def test_narrow_table_still_rewritten(self):
        output, _ = rewrite_markers(MIXED, MarkerMode.ALL_MARKERS)
        assert output.startswith("| a <!-- !A1 --> | b <!-- !B1 --> |\n|---|---|\n| c <!-- !A2 --> | d <!-- !B2 --> |\n")

    def test_wide_table_left_as_written(self):
        output, _ = rewrite_markers(MIXED, MarkerMode.ALL_MARKERS)
        assert output.endswith(f"\n\n{WIDE_HEADER}\n{WIDE_ROW}\n")

    def test_wide_table_counted(self):
        _, extraction = rewrite_markers(MIXED, MarkerMode.ROW_AND_COLUMN)
        assert extraction.diagnostics.skipped_tables == 1
        assert extraction.diagnostics.total == 1

    def test_delete_all_needs_no_labels(self):
        _, extraction = rewrite_markers(MIXED, MarkerMode.DELETE_ALL)
        assert extraction.diagnostics.skipped_tables == 0

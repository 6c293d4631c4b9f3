"""Coordinate-marker policies for extracted tables.

Rows and columns are counted from the table's first line, so the header row
is row 1 and its first cell is ``!A1``.  Only single-letter columns (A-Z)
are supported; a table that would need a wider label raises rather than
wrapping.
"""

import logging
import string
from typing import assert_never

from mdgrid.tables.schema import Cell, CellPiece, Comment, CommentKind, CommentPiece, LocatedComment, MarkerMode, Table

logger = logging.getLogger(__name__)

COLUMN_LETTERS = string.ascii_uppercase


def canonical_label(row: int, col: int) -> str:
    """Return the marker for zero-based (*row*, *col*), e.g. (2, 1) -> '!B3'."""
    if not 0 <= col < len(COLUMN_LETTERS):
        raise ValueError(f"Column index {col} has no single-letter label (supported: 0-{len(COLUMN_LETTERS) - 1})")
    if row < 0:
        raise ValueError(f"Row index {row} must be non-negative")
    return f"!{COLUMN_LETTERS[col]}{row + 1}"


def _is_marker_piece(piece: CellPiece) -> bool:
    return isinstance(piece, CommentPiece) and piece.comment.kind == CommentKind.MARKER


def delete_markers(cell: Cell) -> None:
    cell.pieces = [p for p in cell.pieces if not _is_marker_piece(p)]


def update_markers(cell: Cell, label: str) -> None:
    """Relabel every existing marker in *cell*; never inserts."""
    for piece in cell.pieces:
        if _is_marker_piece(piece):
            piece.comment.content = label


def ensure_marker(cell: Cell, label: str) -> None:
    """Leave exactly one marker in *cell*, labelled *label*.

    The first existing marker is relabelled and any others are removed.  With
    no marker present a new one is appended at the end of the cell; it has
    no tree node and zero length, which keeps the pieces in offset order.
    """
    kept = False
    pieces: list[CellPiece] = []
    for piece in cell.pieces:
        if _is_marker_piece(piece):
            if kept:
                continue
            piece.comment.content = label
            kept = True
        pieces.append(piece)

    if not kept:
        marker = Comment(content=label, kind=CommentKind.MARKER, offset=cell.offset + cell.length, length=0)
        pieces.append(CommentPiece(located=LocatedComment(comment=marker)))
    cell.pieces = pieces


def _needs_label(mode: MarkerMode, row_idx: int, col_idx: int, cell: Cell) -> bool:
    if mode is MarkerMode.UPDATE_EXISTING:
        return bool(cell.markers())
    if mode is MarkerMode.ROW_AND_COLUMN:
        return row_idx == 0 or col_idx == 0
    return mode is MarkerMode.ALL_MARKERS


def check_labelable(table: Table, mode: MarkerMode) -> None:
    """Raise ValueError if *mode* would need a label for a column past 'Z'."""
    for row_idx, row in enumerate(table.rows):
        for col_idx in range(len(COLUMN_LETTERS), len(row.cells)):
            if _needs_label(mode, row_idx, col_idx, row.cells[col_idx]):
                raise ValueError(
                    f"Table row {row_idx + 1} has {len(row.cells)} cells; "
                    f"mode {mode.value} needs a label for column {col_idx + 1}"
                )


def apply_marker_mode(table: Table, mode: MarkerMode) -> None:
    """Apply *mode* to every cell of *table* in place.

    The table is checked with check_labelable first, so a table that cannot
    be labelled raises before any cell is touched.
    """
    if not table.rows:
        return
    check_labelable(table, mode)

    for row_idx, row in enumerate(table.rows):
        for col_idx, cell in enumerate(row.cells):
            if mode is MarkerMode.DELETE_ALL:
                delete_markers(cell)
            elif mode is MarkerMode.UPDATE_EXISTING:
                if cell.markers():
                    update_markers(cell, canonical_label(row_idx, col_idx))
            elif mode is MarkerMode.ROW_AND_COLUMN:
                if row_idx == 0 or col_idx == 0:
                    ensure_marker(cell, canonical_label(row_idx, col_idx))
                else:
                    delete_markers(cell)
            elif mode is MarkerMode.ALL_MARKERS:
                ensure_marker(cell, canonical_label(row_idx, col_idx))
            else:
                assert_never(mode)

    logger.debug("Applied marker mode %s to %d rows", mode.value, len(table.rows))

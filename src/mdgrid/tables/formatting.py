"""Render extracted tables back to pipe text and splice them into the source.

Rows are rendered as ``| a <!-- !A1 --> | b |``: pieces joined by a space,
comments written with their trimmed label.  Splicing replaces each row's own
source span, so divider rows, blockquote prefixes and prose sharing the
paragraph are left exactly as they were.
"""

import logging

from mdgrid.tables.patterns import COMMENT_CLOSE, COMMENT_OPEN
from mdgrid.tables.schema import Cell, CellPiece, CommentPiece, Row, Table

logger = logging.getLogger(__name__)


def render_piece(piece: CellPiece) -> str:
    if isinstance(piece, CommentPiece):
        return f"{COMMENT_OPEN} {piece.comment.label} {COMMENT_CLOSE}"
    return piece.text


def render_cell(cell: Cell) -> str:
    return " ".join(render_piece(p) for p in cell.pieces)


def render_row(row: Row) -> str:
    """Render one row, keeping a single space of padding inside each delimiter."""
    return "| " + " | ".join(render_cell(c) for c in row.cells) + " |"


def render_table(table: Table) -> list[str]:
    return [render_row(row) for row in table.rows]


def splice_tables(source: str, tables: list[Table]) -> str:
    """Return *source* with every row of *tables* replaced by its rendering.

    Rows are applied from the end of the document backwards so earlier
    offsets stay valid.
    """
    rows = sorted((row for table in tables for row in table.rows), key=lambda r: r.offset, reverse=True)
    output = source
    for row in rows:
        output = output[: row.offset] + render_row(row) + output[row.offset + row.length :]
    logger.info("Spliced %d rows from %d tables", len(rows), len(tables))
    return output

"""Pipe-table detection and cell decomposition.

Works on the document tree rather than raw lines: every paragraph's literal
text is rebuilt from its inline nodes, and a paragraph with at least two
lines starting with "|" is treated as a pipe table.  Each row line is then
mapped back to its source line, stripped of comments, split into fields, and
every field becomes a Cell of text and comment pieces in source order.

Rows that cannot be split consistently are dropped and counted; the rest of
the table is kept.
"""

import logging

from mdgrid.document.tree import DocumentTree, Node
from mdgrid.tables.classifiers import is_divider_line, is_table_line, looks_like_table
from mdgrid.tables.patterns import CELL_DELIMITER
from mdgrid.tables.positions import SourceIndex
from mdgrid.tables.schema import (
    Cell,
    CellPiece,
    CommentPiece,
    Diagnostics,
    LocatedComment,
    Row,
    Table,
    TextPiece,
    record,
)
from mdgrid.tables.stripping import strip_line_comments

logger = logging.getLogger(__name__)


# ─── Paragraph Text Reconstruction ───────────────────────────────────────────


def _link_destination(node: Node) -> str:
    """Render '(href "title")' for a link or '(src "title")' for an image."""
    target = str(node.attrs.get("href", node.attrs.get("src", "")))
    title = node.attrs.get("title")
    return f'({target} "{title}")' if title else f"({target})"


def _collect_literal(tree: DocumentTree, node: Node, parts: list[str]) -> None:
    for child in tree.children(node):
        kind = child.type
        if kind in ("text", "html_inline"):
            parts.append(child.content)
        elif kind == "text_special":
            # Escapes and entities keep their source spelling
            parts.append(child.markup or child.content)
        elif kind == "code_inline":
            parts.append(child.markup + child.content + child.markup)
        elif kind in ("softbreak", "hardbreak"):
            parts.append("\n")
        elif kind in ("em", "strong", "s"):
            parts.append(child.markup)
            _collect_literal(tree, child, parts)
            parts.append(child.markup)
        elif kind == "link" and child.markup == "autolink":
            parts.append("<")
            _collect_literal(tree, child, parts)
            parts.append(">")
        elif kind == "link":
            parts.append("[")
            _collect_literal(tree, child, parts)
            parts.append("]" + _link_destination(child))
        elif kind == "image":
            parts.append(f"![{child.content}]{_link_destination(child)}")
        else:
            _collect_literal(tree, child, parts)


def paragraph_text(tree: DocumentTree, node: Node) -> str:
    """Rebuild a paragraph's literal text from its inline nodes, one line per source line."""
    parts: list[str] = []
    _collect_literal(tree, node, parts)
    return "".join(parts)


# ─── Row Splitting ───────────────────────────────────────────────────────────


def split_fields(line: str) -> tuple[list[int], list[str]]:
    """Split a row on '|' and return (field start offsets, field texts).

    A single leading and a single trailing delimiter are consumed without
    producing an empty field.  Each start is the running sum of the previous
    field lengths plus one per consumed delimiter.
    """
    body_start, body_end = 0, len(line)
    if line.startswith(CELL_DELIMITER):
        body_start = 1
    if line.endswith(CELL_DELIMITER) and body_end > body_start:
        body_end -= 1

    fields = line[body_start:body_end].split(CELL_DELIMITER)
    starts: list[int] = []
    position = body_start
    for field in fields:
        starts.append(position)
        position += len(field) + 1
    return starts, fields


def spans_consistent(line: str, starts: list[int], fields: list[str]) -> bool:
    """Return True if every (start, field) pair points at that field's text in *line*.

    split_fields always produces consistent spans; this guards parse_row
    against a splitter whose starts drift from its fields.
    """
    if len(starts) != len(fields):
        return False
    return all(line[start : start + len(field)] == field for start, field in zip(starts, fields))


# ─── Cell Construction ───────────────────────────────────────────────────────


def _append_text(pieces: list[CellPiece], text: str) -> None:
    text = text.strip()
    if text:
        pieces.append(TextPiece(text=text))


def build_cell(line: str, start: int, field: str, comments: list[LocatedComment], line_offset: int) -> Cell:
    """Decompose one field of a stripped row into pieces.

    *comments* carry line-relative offsets; those starting inside the field
    are attributed to it and re-expressed as absolute offsets.
    """
    end = start + len(field)
    pieces: list[CellPiece] = []
    cursor = start
    for item in comments:
        comment = item.comment
        if not start <= comment.offset < end:
            continue
        _append_text(pieces, line[cursor : comment.offset])
        absolute = comment.model_copy(update={"offset": comment.offset + line_offset})
        pieces.append(CommentPiece(located=LocatedComment(comment=absolute, node=item.node)))
        cursor = comment.end
    _append_text(pieces, line[cursor:end])
    return Cell(pieces=pieces, offset=line_offset + start, length=len(field))


def parse_row(
    line: str,
    line_offset: int,
    located: list[LocatedComment] | None = None,
    diagnostics: Diagnostics | None = None,
) -> Row | None:
    """Parse one trimmed row line starting at *line_offset*; None if it cannot be split."""
    stripped = strip_line_comments(line, line_offset, located, diagnostics)
    starts, fields = split_fields(stripped.stripped)
    if not spans_consistent(stripped.stripped, starts, fields):
        record(
            diagnostics,
            "dropped_rows",
            f"Row at offset {line_offset} split into {len(fields)} fields but {len(starts)} starts; dropped",
        )
        return None

    cells = [build_cell(stripped.stripped, start, field, stripped.comments, line_offset) for start, field in zip(starts, fields)]
    return Row(cells=cells, offset=line_offset, length=len(line))


# ─── Table Extraction ────────────────────────────────────────────────────────


def _locate_line(index: SourceIndex, line_number: int, text: str) -> tuple[int, int]:
    """Return (offset of *text* on its source line, length of the row span on that line).

    The row span runs from where the reconstructed text starts to the end of
    the trimmed source line, so container prefixes like '> ' stay outside it.
    When the reconstruction differs from the source (a padded code span, for
    one), the span starts at the line's first '|' instead.
    """
    source_line = index.line_text(line_number)
    column = source_line.find(text) if text else -1
    if column < 0:
        logger.debug("Line %d does not contain its reconstructed text %r", line_number, text)
        column = source_line.find(CELL_DELIMITER)
    if column < 0:
        column = len(source_line) - len(source_line.lstrip())
    line_start = index.line_start(line_number) or 0
    return line_start + column, max(len(source_line.rstrip()) - column, 0)


def extract_table(
    tree: DocumentTree,
    node: Node,
    index: SourceIndex,
    located: list[LocatedComment] | None = None,
    diagnostics: Diagnostics | None = None,
) -> Table | None:
    """Extract the table held in paragraph *node*, or None if it is not a pipe table."""
    if node.start is None or node.end is None:
        return None
    text = paragraph_text(tree, node)
    if not looks_like_table(text):
        return None

    rows: list[Row] = []
    for i, raw_line in enumerate(text.split("\n")):
        line = raw_line.strip()
        if not line or is_divider_line(line) or not is_table_line(line):
            continue
        # The reconstruction only finds the row; cells come from the source text itself
        line_offset, span_length = _locate_line(index, node.start.line + i, line)
        row_text = index.source[line_offset : line_offset + span_length]
        row = parse_row(row_text, line_offset, located, diagnostics)
        if row is not None:
            rows.append(row)

    start_offset = index.offset(node.start.line, node.start.column) or 0
    end_offset = index.line_end(node.end.line) or len(index.source)
    logger.debug("Table at [%d, %d): %d rows", start_offset, end_offset, len(rows))
    return Table(rows=rows, start_offset=start_offset, end_offset=end_offset, node=node.index)


def extract_tables(
    tree: DocumentTree,
    located: list[LocatedComment] | None,
    source: str,
    diagnostics: Diagnostics | None = None,
) -> list[Table]:
    """Return every pipe table in the document, in source order.

    *located* is the document-wide comment list from locate_comments; pass
    None to have each row scanned for comments on its own.
    """
    index = SourceIndex(source)
    tables: list[Table] = []
    for node in tree.walk():
        if node.type != "paragraph":
            continue
        table = extract_table(tree, node, index, located, diagnostics)
        if table is not None:
            tables.append(table)
    logger.info("Extracted %d tables", len(tables))
    return tables

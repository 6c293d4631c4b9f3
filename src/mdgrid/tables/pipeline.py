"""Extraction and marker-rewrite entry points.

``extract`` runs the full read side (parse, locate comments, extract tables)
over one Markdown source.  ``rewrite_markers`` adds the write side: apply a
marker policy to every table and splice the re-rendered rows back in.

Nothing is cached; a changed document needs a fresh ``extract``.
"""

import logging

from pydantic import BaseModel, Field

from mdgrid.document.tree import DocumentTree, parse_document
from mdgrid.tables.comments import locate_comments
from mdgrid.tables.detection import extract_tables
from mdgrid.tables.formatting import splice_tables
from mdgrid.tables.markers import apply_marker_mode
from mdgrid.tables.schema import Diagnostics, LocatedComment, MarkerMode, Table

logger = logging.getLogger(__name__)


class Extraction(BaseModel):
    """Everything derived from one (source, tree) pair."""

    source: str
    tree: DocumentTree
    comments: list[LocatedComment] = Field(default_factory=list)
    tables: list[Table] = Field(default_factory=list)
    diagnostics: Diagnostics = Field(default_factory=Diagnostics)


def extract(source: str) -> Extraction:
    """Parse *source* and return its located comments and tables."""
    diagnostics = Diagnostics()
    tree = parse_document(source)
    comments = locate_comments(tree, source, diagnostics)
    tables = extract_tables(tree, comments, source, diagnostics)
    logger.info(
        "Extracted %d comments and %d tables (%d degradations)",
        len(comments),
        len(tables),
        diagnostics.total,
    )
    return Extraction(source=source, tree=tree, comments=comments, tables=tables, diagnostics=diagnostics)


def rewrite_markers(source: str, mode: MarkerMode | str) -> tuple[str, Extraction]:
    """Apply *mode* to every table in *source*; return the new text and the extraction it came from.

    A table the mode cannot label is left as written and counted under
    ``skipped_tables``; the other tables are still rewritten.
    """
    mode = MarkerMode(mode)
    extraction = extract(source)
    rewritten: list[Table] = []
    for table in extraction.tables:
        try:
            apply_marker_mode(table, mode)
        except ValueError as exc:
            extraction.diagnostics.record("skipped_tables", f"Table at offset {table.start_offset} skipped: {exc}")
            continue
        rewritten.append(table)
    return splice_tables(source, rewritten), extraction

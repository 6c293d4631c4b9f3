"""Pydantic models for comments, table cells, tables, and extraction diagnostics.

Offsets and lengths are indices into the Python source string.  A comment's
``(offset, length)`` always spans the full ``<!--content-->`` literal, so
slicing the source with them yields the original comment text.
"""

import logging
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class CommentKind(str, Enum):
    FORMULA = "formula"
    MARKER = "marker"
    FORMATTING = "formatting"
    UNKNOWN = "unknown"


class MarkerMode(str, Enum):
    """Marker rewrite policy, selected per invocation."""

    DELETE_ALL = "delete-all"
    UPDATE_EXISTING = "update-existing"
    ROW_AND_COLUMN = "row-and-column"
    ALL_MARKERS = "all"


class Comment(BaseModel):
    """One ``<!-- ... -->`` span.  ``content`` is stored untrimmed."""

    content: str
    kind: CommentKind
    offset: int = Field(ge=0)
    length: int = Field(ge=0)

    @property
    def literal(self) -> str:
        return f"<!--{self.content}-->"

    @property
    def label(self) -> str:
        return self.content.strip()

    @property
    def end(self) -> int:
        return self.offset + self.length


class LocatedComment(BaseModel):
    """A comment plus the arena index of the tree node it came from (None when synthetic)."""

    comment: Comment
    node: int | None = None


class TextPiece(BaseModel):
    piece_type: Literal["text"] = "text"
    text: str


class CommentPiece(BaseModel):
    piece_type: Literal["comment"] = "comment"
    located: LocatedComment

    @property
    def comment(self) -> Comment:
        return self.located.comment


CellPiece = Annotated[TextPiece | CommentPiece, Field(discriminator="piece_type")]


class Cell(BaseModel):
    """A table cell as text/comment pieces in source order.

    ``offset``/``length`` give the absolute span of the cell's field between
    its delimiters.
    """

    pieces: list[CellPiece] = Field(default_factory=list)
    offset: int = Field(default=0, ge=0)
    length: int = Field(default=0, ge=0)

    def text(self) -> str:
        """Visible content: the text pieces joined by single spaces."""
        return " ".join(p.text for p in self.pieces if isinstance(p, TextPiece))

    def comments(self) -> list[LocatedComment]:
        return [p.located for p in self.pieces if isinstance(p, CommentPiece)]

    def markers(self) -> list[Comment]:
        return [c.comment for c in self.comments() if c.comment.kind == CommentKind.MARKER]


class Row(BaseModel):
    """A table row; ``offset``/``length`` span the trimmed row line in the source."""

    cells: list[Cell] = Field(default_factory=list)
    offset: int = Field(default=0, ge=0)
    length: int = Field(default=0, ge=0)


class Table(BaseModel):
    """Rows of one pipe table plus its [start_offset, end_offset) span in the source."""

    rows: list[Row] = Field(default_factory=list)
    start_offset: int = Field(default=0, ge=0)
    end_offset: int = Field(default=0, ge=0)
    node: int | None = None

    @property
    def shape(self) -> tuple[int, int]:
        """(row count, widest row's cell count)."""
        return len(self.rows), max((len(r.cells) for r in self.rows), default=0)


class StrippedLine(BaseModel):
    """One source line with its comments replaced by fixed-width placeholders."""

    original: str
    stripped: str
    comments: list[LocatedComment] = Field(default_factory=list)


class Diagnostics(BaseModel):
    """Counts of every unit dropped during extraction or rewriting.

    Nothing here is fatal; each degradation is logged and counted
    here so callers can detect silent data loss.
    """

    malformed_comments: int = 0
    offset_overflows: int = 0
    dropped_rows: int = 0
    dropped_comments: int = 0
    skipped_tables: int = 0
    messages: list[str] = Field(default_factory=list)

    def record(self, counter: Literal["malformed_comments", "offset_overflows", "dropped_rows", "dropped_comments", "skipped_tables"], message: str) -> None:
        setattr(self, counter, getattr(self, counter) + 1)
        self.messages.append(message)
        logger.warning(message)

    @property
    def total(self) -> int:
        return (
            self.malformed_comments + self.offset_overflows + self.dropped_rows + self.dropped_comments + self.skipped_tables
        )


def record(diagnostics: Diagnostics | None, counter: str, message: str) -> None:
    """Record on *diagnostics* when given, otherwise just log the warning."""
    if diagnostics is None:
        logger.warning(message)
    else:
        diagnostics.record(counter, message)

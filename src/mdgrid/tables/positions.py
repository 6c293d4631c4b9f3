"""Mapping between parser-reported (line, column) positions and source offsets.

The document tree reports 1-based lines and columns.  Everything downstream
(comment location, line stripping, splicing) works on 0-based offsets into
the source string, so this is the single place where the two are converted.

A line contributes its length plus one newline character; a carriage return
before the newline stays part of the line, so CRLF sources reconcile without
normalisation.
"""

import bisect
import itertools
from typing import NamedTuple


class SourcePos(NamedTuple):
    """1-based line and column of a character in the source."""

    line: int
    column: int


def line_col_to_offset(source: str, line: int, column: int) -> int | None:
    """Return the 0-based offset of (*line*, *column*) in *source*, or None if out of range."""
    if line < 1 or column < 1:
        return None
    lines = source.split("\n")
    if line > len(lines):
        return None
    offset = sum(len(text) + 1 for text in lines[: line - 1]) + column - 1
    if offset > len(source):
        return None
    return offset


class SourceIndex:
    """Precomputed line starts for repeated lookups against one source string."""

    def __init__(self, source: str):
        self.source = source
        self.lines = source.split("\n")
        # Start offset of every line: 0, len(l0)+1, len(l0)+len(l1)+2, ...
        self.line_starts = [0] + list(itertools.accumulate(len(text) + 1 for text in self.lines[:-1]))

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def offset(self, line: int, column: int) -> int | None:
        """Same contract as line_col_to_offset, without re-splitting the source."""
        if line < 1 or column < 1 or line > self.line_count:
            return None
        offset = self.line_starts[line - 1] + column - 1
        if offset > len(self.source):
            return None
        return offset

    def line_start(self, line: int) -> int | None:
        return self.offset(line, 1)

    def line_end(self, line: int) -> int | None:
        """Offset just past the last character of *line*, excluding its newline."""
        if line < 1 or line > self.line_count:
            return None
        return self.line_starts[line - 1] + len(self.lines[line - 1])

    def line_text(self, line: int) -> str:
        if line < 1 or line > self.line_count:
            return ""
        return self.lines[line - 1]

    def position(self, offset: int) -> SourcePos:
        """Inverse of offset(): the (line, column) that *offset* falls on."""
        offset = max(0, min(offset, len(self.source)))
        line_idx = bisect.bisect_right(self.line_starts, offset) - 1
        return SourcePos(line_idx + 1, offset - self.line_starts[line_idx] + 1)

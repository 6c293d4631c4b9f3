"""Replace the comments on one line with fixed-width placeholders.

A comment may contain "|", so a row cannot be split on the cell delimiter
until its comments are out of the way.  Each ``<!--content-->`` span becomes
``/***content**/`` (with "|" swapped for a stand-in), which has exactly the
same width, so every offset on the line stays valid for the split.
"""

import logging

from mdgrid.tables.comments import extract_comments
from mdgrid.tables.patterns import CELL_DELIMITER, PIPE_STANDIN, PLACEHOLDER_CLOSE, PLACEHOLDER_OPEN
from mdgrid.tables.schema import Comment, Diagnostics, LocatedComment, StrippedLine, record

logger = logging.getLogger(__name__)


def placeholder_for(comment: Comment) -> str:
    """Return the same-width placeholder written over *comment*'s span."""
    return PLACEHOLDER_OPEN + comment.content.replace(CELL_DELIMITER, PIPE_STANDIN) + PLACEHOLDER_CLOSE


def _relocate(
    line: str,
    line_offset: int,
    located: list[LocatedComment],
    diagnostics: Diagnostics | None,
) -> list[LocatedComment]:
    """Keep the pre-located comments that fall on this line, with line-relative offsets."""
    line_end = line_offset + len(line)
    relevant: list[LocatedComment] = []
    for item in located:
        comment = item.comment
        if comment.offset < line_offset or comment.end > line_end:
            continue
        rel_offset = comment.offset - line_offset
        candidate = line[rel_offset : rel_offset + comment.length]
        if candidate != comment.literal:
            record(
                diagnostics,
                "dropped_comments",
                f"Comment {comment.label!r} expected at line offset {rel_offset} but found {candidate!r}; dropped",
            )
            continue
        relevant.append(LocatedComment(comment=comment.model_copy(update={"offset": rel_offset}), node=item.node))
    return relevant


def strip_line_comments(
    line: str,
    line_offset: int = 0,
    located: list[LocatedComment] | None = None,
    diagnostics: Diagnostics | None = None,
) -> StrippedLine:
    """Strip comments from *line*, which starts at *line_offset* in the source.

    With *located* given, only those comments are used (offsets are absolute
    and are checked against the line text).  Without it, the line is scanned
    directly.  The returned comments carry line-relative offsets in ascending
    order.
    """
    if located is not None:
        relevant = _relocate(line, line_offset, located, diagnostics)
    else:
        relevant = [LocatedComment(comment=c) for c in extract_comments(line, diagnostics)]
    relevant.sort(key=lambda item: item.comment.offset)

    # Replace right to left so earlier offsets stay valid
    stripped = line
    for item in reversed(relevant):
        comment = item.comment
        stripped = stripped[: comment.offset] + placeholder_for(comment) + stripped[comment.end :]

    return StrippedLine(original=line, stripped=stripped, comments=relevant)

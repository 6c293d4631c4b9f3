"""Comment and table-line classification helpers.

Each predicate takes a string and answers one question about it; the
comment classifier folds the predicates into a single CommentKind.
"""

from mdgrid.tables.patterns import (
    CELL_DELIMITER,
    DIVIDER_MARK,
    FORMATTING_RE,
    FORMULA_RE,
    MARKER_RE,
    MIN_TABLE_LINES,
)
from mdgrid.tables.schema import CommentKind


def is_formula(label: str) -> bool:
    """Return True for '=B2*C2' or '!=B2*C2'."""
    return bool(FORMULA_RE.match(label))


def is_marker(label: str) -> bool:
    """Return True for a coordinate marker such as '!B3'."""
    return bool(MARKER_RE.match(label))


def is_formatting(label: str) -> bool:
    return bool(FORMATTING_RE.match(label))


def classify_comment(content: str) -> CommentKind:
    """Classify raw comment content by the leading characters of its trimmed form.

    Formula is checked before marker so that '!=...' is never read as a marker.
    """
    label = content.strip()
    if is_formula(label):
        return CommentKind.FORMULA
    if is_marker(label):
        return CommentKind.MARKER
    if is_formatting(label):
        return CommentKind.FORMATTING
    return CommentKind.UNKNOWN


def is_table_line(line: str) -> bool:
    """Return True if the trimmed line starts with the cell delimiter."""
    return line.strip().startswith(CELL_DELIMITER)


def is_divider_line(line: str) -> bool:
    """Return True for an alignment row like '|---|:---:|'."""
    return DIVIDER_MARK in line


def looks_like_table(text: str) -> bool:
    """Return True if *text* has at least two lines starting with '|'."""
    return sum(1 for line in text.split("\n") if is_table_line(line)) >= MIN_TABLE_LINES

"""Compiled regex patterns and delimiter constants for comment and table handling.

Used by classifiers.py, comments.py, stripping.py and detection.py.
"""

import re

# ─── Comment Delimiters ──────────────────────────────────────────────────────

COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"

# Placeholder written over a comment span before a row is split into cells.
# Same width as the comment literal: len("/***") + len("**/") == len("<!--") + len("-->")
PLACEHOLDER_OPEN = "/***"
PLACEHOLDER_CLOSE = "**/"

# Stand-in for "|" inside placeholder text so it never reads as a cell delimiter
PIPE_STANDIN = "¦"


# ─── Comment Classification Patterns ─────────────────────────────────────────

# "=B2*C2" or "!=SUM(A1:A3)"
FORMULA_RE = re.compile(r"^!?=")

# "!B3": a bang followed only by ASCII letters and digits
MARKER_RE = re.compile(r"^![A-Za-z0-9]+$")

# "%bold", "%align=right"
FORMATTING_RE = re.compile(r"^%")


# ─── Table Line Patterns ─────────────────────────────────────────────────────

CELL_DELIMITER = "|"

# Alignment/divider row marker, e.g. "|---|:---:|"
DIVIDER_MARK = "---"

# A pipe table needs at least this many lines starting with CELL_DELIMITER
MIN_TABLE_LINES = 2

"""HTML comment extraction and document-wide comment location.

``extract_comments`` works on any text fragment and reports offsets relative
to that fragment.  ``locate_comments`` runs it over every raw-HTML node of a
parsed document and shifts each result by the node's reconciled start, so
the returned offsets index the full source.
"""

import logging

from mdgrid.document.tree import DocumentTree
from mdgrid.tables.classifiers import classify_comment
from mdgrid.tables.patterns import COMMENT_CLOSE, COMMENT_OPEN
from mdgrid.tables.positions import SourceIndex
from mdgrid.tables.schema import Comment, Diagnostics, LocatedComment, record

logger = logging.getLogger(__name__)

# Tree node types whose content is raw HTML
HTML_NODE_TYPES = ("html_inline", "html_block")


def extract_comments(text: str, diagnostics: Diagnostics | None = None) -> list[Comment]:
    """Return every non-overlapping ``<!-- ... -->`` in *text*, left to right.

    An opening delimiter without a closing one ends the scan; comments found
    before it are still returned.
    """
    comments: list[Comment] = []
    start = 0
    while True:
        begin = text.find(COMMENT_OPEN, start)
        if begin < 0:
            break
        close = text.find(COMMENT_CLOSE, begin + len(COMMENT_OPEN))
        if close < 0:
            record(diagnostics, "malformed_comments", f"Unterminated comment at offset {begin}: {text[begin:begin + 40]!r}")
            break
        end = close + len(COMMENT_CLOSE)
        content = text[begin + len(COMMENT_OPEN) : close]
        comments.append(Comment(content=content, kind=classify_comment(content), offset=begin, length=end - begin))
        start = end
    return comments


def locate_comments(tree: DocumentTree, source: str, diagnostics: Diagnostics | None = None) -> list[LocatedComment]:
    """Find every comment in the document's raw-HTML nodes, with absolute offsets."""
    index = SourceIndex(source)
    located: list[LocatedComment] = []

    for node in tree.walk():
        if node.type not in HTML_NODE_TYPES or node.start is None:
            continue

        base = index.offset(node.start.line, node.start.column)
        if base is None or base + len(node.content.rstrip("\n")) > len(source):
            record(diagnostics, "offset_overflows", f"Node {node.index} ({node.type}) at {tuple(node.start)} overflows the source; skipped")
            continue

        for comment in extract_comments(node.content, diagnostics):
            comment.offset += base
            if source[comment.offset : comment.end] != comment.literal:
                # Container prefixes (e.g. "> ") stripped from later lines of a block shift the offsets
                record(diagnostics, "dropped_comments", f"Comment {comment.label!r} from node {node.index} does not match the source at {comment.offset}")
                continue
            located.append(LocatedComment(comment=comment, node=node.index))

    logger.debug("Located %d comments", len(located))
    return located

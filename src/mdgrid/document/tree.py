"""Arena-backed Markdown document tree built on markdown-it-py.

markdown-it produces a flat token stream: block tokens carry a 0-based line
``map`` and inline tokens carry no position at all.  This module turns that
stream into a tree of ``Node`` values stored in a single list and addressed
by integer index, and gives every node it can place a 1-based
(line, column) start and end span.

Inline positions are recovered by walking each paragraph's inline tokens in
order and searching the source for their literal text from a running cursor.
Tokens whose source form cannot be recovered (link destinations, for
instance) are left without a position and do not move the cursor.

The parser runs the CommonMark preset with raw HTML enabled, so pipe tables
come through as plain paragraphs, and with ``text_join`` disabled so escapes
and entities keep their ``text_special`` tokens (and with them their source
markup).
"""

import logging
from collections.abc import Iterator

from markdown_it import MarkdownIt
from markdown_it.token import Token
from pydantic import BaseModel, Field

from mdgrid.tables.positions import SourceIndex, SourcePos

logger = logging.getLogger(__name__)

# Inline tokens whose source form starts with their `markup`
_MARKUP_TOKENS = {"text_special", "em_open", "em_close", "strong_open", "strong_close", "s_open", "s_close"}

_PARSER: MarkdownIt | None = None


class Node(BaseModel):
    """One document node.  Containers (paragraph, em, link, ...) drop markdown-it's ``_open`` suffix."""

    index: int
    type: str
    content: str = ""
    markup: str = ""
    info: str = ""
    attrs: dict[str, str | int | float] = Field(default_factory=dict)
    parent: int | None = None
    children: list[int] = Field(default_factory=list)
    start: SourcePos | None = None
    end: SourcePos | None = None


class DocumentTree(BaseModel):
    """All nodes of one parsed document; ``nodes[0]`` is the root."""

    nodes: list[Node]

    @property
    def root(self) -> Node:
        return self.nodes[0]

    def node(self, index: int) -> Node:
        return self.nodes[index]

    def children(self, node: Node) -> list[Node]:
        return [self.nodes[i] for i in node.children]

    def walk(self, node: Node | None = None) -> Iterator[Node]:
        """Pre-order traversal starting at *node* (the root by default)."""
        stack = [node or self.root]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(self.nodes[i] for i in reversed(current.children))


def get_parser() -> MarkdownIt:
    """Lazy-initialise the shared markdown-it parser."""
    global _PARSER  # pylint: disable=global-statement
    if _PARSER is None:
        parser = MarkdownIt("commonmark", {"html": True})
        parser.disable("text_join", ignoreInvalid=True)
        _PARSER = parser
    return _PARSER


def _new_node(nodes: list[Node], token: Token, parent: int | None) -> Node:
    """Append a node for *token* to the arena and link it to *parent*."""
    node_type = token.type[: -len("_open")] if token.type.endswith("_open") else token.type
    node = Node(
        index=len(nodes),
        type=node_type,
        content=token.content,
        markup=token.markup,
        info=token.info,
        attrs=dict(token.attrs),
        parent=parent,
    )
    nodes.append(node)
    if parent is not None:
        nodes[parent].children.append(node.index)
    return node


# ─── Block Positions ─────────────────────────────────────────────────────────


def _block_span(index: SourceIndex, token: Token) -> tuple[SourcePos, SourcePos] | None:
    """Start/end of a block token from its line map.

    The start column is where the token's first content line sits inside the
    source line (this skips indentation and container prefixes such as ``> ``).
    """
    if not token.map:
        return None
    first_line, last_line = token.map[0] + 1, max(token.map[1], token.map[0] + 1)
    source_line = index.line_text(first_line)

    first_content = token.content.split("\n", 1)[0]
    if token.type != "html_block":
        first_content = first_content.strip()
    column = source_line.find(first_content) if first_content else -1
    if column < 0:
        column = len(source_line) - len(source_line.lstrip())

    end_text = index.line_text(last_line).rstrip()
    return SourcePos(first_line, column + 1), SourcePos(last_line, max(len(end_text), 1))


# ─── Inline Positions ────────────────────────────────────────────────────────


class _InlineCursor:
    """Running search position over one paragraph's source span."""

    def __init__(self, index: SourceIndex, start: int, limit: int):
        self.index = index
        self.pos = start
        self.limit = limit

    def seek(self, needle: str) -> tuple[SourcePos, SourcePos] | None:
        """Find *needle* at or after the cursor and move past it."""
        if not needle:
            return None
        found = self.index.source.find(needle, self.pos, self.limit)
        if found < 0:
            return None
        self.pos = found + len(needle)
        return self.index.position(found), self.index.position(self.pos - 1)

    def seek_code(self, fence: str) -> tuple[SourcePos, SourcePos] | None:
        """Find an opening backtick fence and its matching closing fence."""
        opening = self.seek(fence)
        if opening is None:
            return None
        closing = self.seek(fence)
        return opening[0], (closing or opening)[1]

    def next_line(self) -> tuple[SourcePos, SourcePos] | None:
        """Jump over a line break and the next line's leading whitespace."""
        newline = self.index.source.find("\n", self.pos, self.limit)
        if newline < 0:
            return None
        span = self.index.position(self.pos), self.index.position(newline)
        self.pos = newline + 1
        source = self.index.source
        while self.pos < self.limit and source[self.pos] in " \t":
            self.pos += 1
        return span


def _inline_span(cursor: _InlineCursor, token: Token) -> tuple[SourcePos, SourcePos] | None:
    if token.type in ("text", "html_inline"):
        return cursor.seek(token.content)
    if token.type == "code_inline":
        return cursor.seek_code(token.markup)
    if token.type in ("softbreak", "hardbreak"):
        return cursor.next_line()
    if token.type in _MARKUP_TOKENS:
        return cursor.seek(token.markup)
    if token.type == "link_open":
        return cursor.seek("<" if token.markup == "autolink" else "[")
    if token.type == "link_close" and token.markup == "autolink":
        return cursor.seek(">")
    if token.type == "image":
        return cursor.seek("![")
    return None


def _build_inline(nodes: list[Node], index: SourceIndex, inline: Token, parent: int, start: int | None) -> None:
    """Attach *inline*'s children directly under the enclosing block node."""
    if start is None:
        cursor = _InlineCursor(index, len(index.source), len(index.source))
    else:
        last_line = inline.map[1] if inline.map else index.line_count
        cursor = _InlineCursor(index, start, index.line_end(last_line) or len(index.source))

    stack = [parent]
    for child in inline.children or []:
        span = _inline_span(cursor, child)
        if child.nesting == -1:
            stack.pop()
            continue
        node = _new_node(nodes, child, stack[-1])
        if span is not None:
            node.start, node.end = span
        if child.nesting == 1:
            stack.append(node.index)


def build_tree(source: str, tokens: list[Token]) -> DocumentTree:
    """Assemble the node arena from a markdown-it token stream over *source*."""
    index = SourceIndex(source)
    root = Node(index=0, type="document", start=SourcePos(1, 1), end=index.position(max(len(source) - 1, 0)))
    nodes = [root]
    stack = [0]

    for token in tokens:
        if token.nesting == -1:
            stack.pop()
            continue

        span = _block_span(index, token)
        if token.type == "inline":
            # Inline children belong to the enclosing block; no wrapper node
            block = nodes[stack[-1]]
            start = index.offset(*span[0]) if span else None
            if span:
                block.start = span[0]
            _build_inline(nodes, index, token, block.index, start)
            continue

        node = _new_node(nodes, token, stack[-1])
        if span is not None:
            node.start, node.end = span
        if token.nesting == 1:
            stack.append(node.index)

    logger.debug("Built document tree with %d nodes", len(nodes))
    return DocumentTree(nodes=nodes)


def parse_document(source: str) -> DocumentTree:
    """Parse Markdown *source* into a DocumentTree."""
    return build_tree(source, get_parser().parse(source))

"""Unit tests for the arena-backed document tree."""

# pylint: disable=missing-class-docstring,missing-function-docstring

from mdgrid.document.tree import get_parser, parse_document
from mdgrid.tables.positions import SourcePos


def nodes_of_type(tree, node_type: str) -> list:
    return [node for node in tree.walk() if node.type == node_type]


class TestParser:

    def test_parser_is_shared(self):
        assert get_parser() is get_parser()

    def test_pipe_tables_stay_paragraphs(self):
        tree = parse_document("| a | b |\n|---|---|\n| c | d |\n")
        assert [n.type for n in tree.children(tree.root)] == ["paragraph"]


class TestTreeShape:

    def test_root_first_in_walk(self):
        tree = parse_document("Hello")
        assert next(tree.walk()).type == "document"
        assert tree.root.index == 0

    def test_indices_match_arena_positions(self):
        tree = parse_document("# Title\n\nSome *text* <!-- !A1 -->\n")
        for i, node in enumerate(tree.nodes):
            assert node.index == i

    def test_parent_links(self):
        tree = parse_document("Some *text*\n")
        for node in tree.walk():
            for child in tree.children(node):
                assert child.parent == node.index

    def test_no_inline_wrapper_nodes(self):
        tree = parse_document("Some text\nmore text\n")
        assert nodes_of_type(tree, "inline") == []
        paragraph = nodes_of_type(tree, "paragraph")[0]
        assert [n.type for n in tree.children(paragraph)] == ["text", "softbreak", "text"]

    def test_open_suffix_dropped(self):
        tree = parse_document("Some *text*\n")
        assert len(nodes_of_type(tree, "em")) == 1
        assert nodes_of_type(tree, "em_open") == []

    def test_entities_keep_source_markup(self):
        tree = parse_document("a &amp; b\n")
        special = nodes_of_type(tree, "text_special")
        assert len(special) == 1
        assert special[0].markup == "&amp;"
        assert special[0].content == "&"


class TestPositions:

    def test_paragraph_span(self):
        tree = parse_document("first\n\nsecond line\nthird\n")
        paragraphs = nodes_of_type(tree, "paragraph")
        assert paragraphs[0].start == SourcePos(1, 1)
        assert paragraphs[1].start == SourcePos(3, 1)
        assert paragraphs[1].end == SourcePos(4, 5)

    def test_inline_comment_positions(self):
        tree = parse_document("Here is <!-- !A --> and <!-- =B2*C2 --> inline.")
        html = nodes_of_type(tree, "html_inline")
        assert [n.start for n in html] == [SourcePos(1, 9), SourcePos(1, 25)]
        assert html[0].end == SourcePos(1, 19)

    def test_comment_on_second_line(self):
        tree = parse_document("| a |\n| b <!-- !A2 --> |\n")
        html = nodes_of_type(tree, "html_inline")
        assert html[0].start == SourcePos(2, 5)

    def test_blockquote_paragraph_starts_after_prefix(self):
        tree = parse_document("> | a | b |\n> | c | d |\n")
        paragraph = nodes_of_type(tree, "paragraph")[0]
        assert paragraph.start == SourcePos(1, 3)

    def test_indented_paragraph(self):
        tree = parse_document("  indented <!-- x -->\n")
        html = nodes_of_type(tree, "html_inline")
        assert html[0].start == SourcePos(1, 12)

    def test_html_block_position(self):
        tree = parse_document("Intro\n\n<!-- %bold -->\n")
        block = nodes_of_type(tree, "html_block")[0]
        assert block.start == SourcePos(3, 1)

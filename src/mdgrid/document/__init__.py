"""Markdown document tree: markdown-it-py tokens arranged as an index-addressed node arena."""

from mdgrid.document.tree import DocumentTree, Node, parse_document

__all__ = ["DocumentTree", "Node", "parse_document"]

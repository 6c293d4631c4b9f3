"""Pipe-table extraction, comment location, and coordinate-marker rewriting.

Submodules:
  patterns     -- compiled regex patterns and delimiter constants
  classifiers  -- comment classification and table-line predicates
  schema       -- Pydantic models (Comment, Cell, Row, Table, Diagnostics, ...)
  positions    -- (line, column) <-> offset reconciliation
  comments     -- HTML comment extraction and document-wide location
  stripping    -- per-line comment placeholders ahead of cell splitting
  detection    -- pipe-table detection and cell decomposition
  markers      -- marker policies and canonical labels
  formatting   -- row rendering and splicing back into the source
  pipeline     -- extract() / rewrite_markers() entry points
"""

"""Spreadsheet-style cell markers and formulas for Markdown pipe tables."""

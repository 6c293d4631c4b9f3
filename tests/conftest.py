"""Shared test configuration and fixtures."""

from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load .env from project root for all tests
root = Path(__file__).parent.parent.resolve()
load_dotenv(root / ".env")


# Header row, divider, one data row
SIMPLE_TABLE = "| A | B | C |\n|---|---|---|\n| 1 | 2 | 3 |\n"

# Every cell carries a (stale) marker and a formula
ANNOTATED_TABLE = (
    "| Item <!-- !Q7 --> <!-- =A2 --> | Price <!-- !Q8 --> <!-- =B2 --> |\n"
    "|---|---|\n"
    "| Apple <!-- !Q9 --> <!-- =A3 --> | 2 <!-- !Z1 --> <!-- =B2*2 --> |\n"
)


@pytest.fixture
def simple_table() -> str:
    return SIMPLE_TABLE


@pytest.fixture
def annotated_table() -> str:
    return ANNOTATED_TABLE

"""Shared configuration for the mdgrid extraction and rewrite pipeline."""

import os
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).parent.parent.parent.resolve()
load_dotenv(ROOT / ".env")

# Level name handed to logging.basicConfig by the CLI
LOG_LEVEL = os.getenv("MDGRID_LOG_LEVEL", "WARNING").upper()

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Marker policy used by `mdgrid markers` when --mode is not given
DEFAULT_MARKER_MODE = os.getenv("MDGRID_MARKER_MODE", "all")

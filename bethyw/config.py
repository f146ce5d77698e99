"""
Beth Yw? — Configuration: paths, constants, logging.
"""
import logging
import os
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths: override with BETHYW_DATA_DIR env var
# ---------------------------------------------------------------------------
DATA_DIR = Path(os.environ.get("BETHYW_DATA_DIR", "datasets"))

# ---------------------------------------------------------------------------
# Output formatting
# ---------------------------------------------------------------------------
TABLE_COLUMN_WIDTH = 11
TABLE_PRECISION = 6

# Display order for area names (English first, then Welsh)
PREFERRED_LANGUAGES = ("eng", "cym")

# ---------------------------------------------------------------------------
# Server / logging
# ---------------------------------------------------------------------------
PORT = int(os.environ.get("PORT", "8000"))
LOG_LEVEL = os.environ.get("BETHYW_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Send log records to stderr so stdout stays clean for tables/JSON."""
    logging.basicConfig(
        level=(level or LOG_LEVEL),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )

"""Configuration constants, defaults, and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. Metadata defaults, field limits and upload limits
are plain data, not buried in the CLI or API code.

HOW: python-dotenv loads the .env file on import. Constants are defined
at module level; the overridable ones read an environment variable first.

RULES:
- DEFAULT_MANUFACTURER and DEFAULT_GENRE feed both the CLI and the API
- Name and manufacturer limits match the fixed header field widths
- IGNORED_EXTENSIONS is not overridable; it mirrors how ROM sets ship
- All env overrides use the NEO_ prefix
"""

from __future__ import annotations

import datetime
import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Metadata defaults and limits
# ---------------------------------------------------------------------------

DEFAULT_MANUFACTURER = os.getenv("NEO_DEFAULT_MANUFACTURER", "SNK")
DEFAULT_GENRE = os.getenv("NEO_DEFAULT_GENRE", "Other")

MAX_NAME_LENGTH = 33
"""Bytes available for the game name in the header."""

MAX_MANUFACTURER_LENGTH = 17
"""Bytes available for the manufacturer in the header."""

# ---------------------------------------------------------------------------
# Source files
# ---------------------------------------------------------------------------

IGNORED_EXTENSIONS: frozenset = frozenset({".html", ".zip"})
"""File name endings never treated as ROM data (lowercase, with dot)."""

# ---------------------------------------------------------------------------
# Runtime
# ---------------------------------------------------------------------------

LOG_LEVEL = os.getenv("NEO_LOG_LEVEL", "WARNING").upper()
MAX_UPLOAD_BYTES = int(os.getenv("NEO_MAX_UPLOAD_BYTES", str(128 * 1024 * 1024)))
API_HOST = os.getenv("NEO_API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("NEO_API_PORT", "8000"))


def current_year() -> int:
    """Default release year for a build."""
    return datetime.date.today().year

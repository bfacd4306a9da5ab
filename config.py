"""
config.py
Runtime settings (read from the environment once at import).
"""

from __future__ import annotations

import os
from pathlib import Path


def read_page_size(raw: str) -> int:
    size = int(raw)
    if size < 1:
        raise ValueError(f"MEMBERSHIP_PAGE_SIZE must be at least 1, got {raw!r}")
    return size


DB_FILE = Path(os.environ.get("MEMBERSHIP_DB_PATH", Path(__file__).with_name("membership.db")))
LOG_LEVEL = os.environ.get("MEMBERSHIP_LOG_LEVEL", "INFO").upper()
PAGE_SIZE = read_page_size(os.environ.get("MEMBERSHIP_PAGE_SIZE", "10"))

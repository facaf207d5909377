"""Small shared helpers: ids, timestamps, natural sort."""

from __future__ import annotations

import re
import uuid
from datetime import datetime, timezone


def generate_id() -> str:
    """Create a new entity id."""
    return uuid.uuid4().hex


def now_utc() -> datetime:
    """Get current time in UTC with timezone info."""
    return datetime.now(timezone.utc)


def natural_sort_key(name: str) -> list[int | str]:
    """Sort key that orders embedded numbers numerically.

    ``slide2.png`` sorts before ``slide10.png``.
    """
    return [
        int(part) if part.isdigit() else part.lower()
        for part in re.split(r"(\d+)", name)
    ]


def sanitize_filename(name: str, max_length: int = 50) -> str:
    """Turn a project name into a safe lowercase file stem."""
    stem = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return stem[:max_length] or "export"

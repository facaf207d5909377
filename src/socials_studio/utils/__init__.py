"""Utility modules for Socials Studio."""

from .json_fields import safe_json_parse, extract_json
from .helpers import generate_id, now_utc, natural_sort_key, sanitize_filename

__all__ = [
    "safe_json_parse",
    "extract_json",
    "generate_id",
    "now_utc",
    "natural_sort_key",
    "sanitize_filename",
]

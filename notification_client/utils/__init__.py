"""Utility helpers for reusable functionality."""

from .datetime import ensure_utc, now_utc, parse_timestamp, to_iso

__all__ = [
    "ensure_utc",
    "now_utc",
    "parse_timestamp",
    "to_iso",
]

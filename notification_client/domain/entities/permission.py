"""Platform notification permission states."""

from __future__ import annotations

from enum import Enum


class PermissionState(str, Enum):
    """Permission reported by the platform notification surface."""

    DEFAULT = "default"
    GRANTED = "granted"
    DENIED = "denied"


__all__ = ["PermissionState"]

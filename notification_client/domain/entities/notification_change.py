"""Domain entity describing a change applied to the notification state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .notification import Notification


class ChangeKind(str, Enum):
    CREATED = "created"
    READ = "read"
    ALL_READ = "all_read"
    DELETED = "deleted"


@dataclass(frozen=True)
class NotificationChange:
    """State-change event delivered to ``on_change`` listeners."""

    kind: ChangeKind
    notification_ids: tuple[str, ...] = ()
    notification: Notification | None = None


__all__ = ["ChangeKind", "NotificationChange"]

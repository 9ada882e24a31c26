from .notification import (
    NotificationListRead,
    NotificationRead,
    PermissionReport,
    SessionCreate,
    SessionRead,
    UnreadCountRead,
)

__all__ = [
    "NotificationListRead",
    "NotificationRead",
    "PermissionReport",
    "SessionCreate",
    "SessionRead",
    "UnreadCountRead",
]

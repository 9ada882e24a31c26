"""Domain entities exposed by the client."""

from .notification import (
    PAYLOAD_TYPES,
    ChatMessageData,
    Notification,
    NotificationData,
    NotificationPage,
    NotificationType,
    OfferAcceptedData,
    OfferReceivedData,
    TradeCompletedData,
    badge_label,
)
from .notification_change import ChangeKind, NotificationChange
from .permission import PermissionState

__all__ = [
    "ChangeKind",
    "ChatMessageData",
    "Notification",
    "NotificationChange",
    "NotificationData",
    "NotificationPage",
    "NotificationType",
    "OfferAcceptedData",
    "OfferReceivedData",
    "PAYLOAD_TYPES",
    "PermissionState",
    "TradeCompletedData",
    "badge_label",
]

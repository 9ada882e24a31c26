"""Domain entities representing user notifications."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Union


class NotificationType(str, Enum):
    """Closed set of events that produce a notification."""

    TRADE_CHAT = "trade_chat"
    OFFER_ACCEPTED = "offer_accepted"
    OFFER_RECEIVED = "offer_received"
    TRADE_COMPLETED = "trade_completed"

    @property
    def icon(self) -> str:
        return _TYPE_ICONS[self]


_TYPE_ICONS = {
    NotificationType.TRADE_CHAT: "💬",
    NotificationType.OFFER_ACCEPTED: "✅",
    NotificationType.OFFER_RECEIVED: "📥",
    NotificationType.TRADE_COMPLETED: "🎉",
}


@dataclass(frozen=True)
class ChatMessageData:
    """Payload of a ``trade_chat`` notification."""

    title: str
    message: str
    sender_name: str | None = None
    trade_post_id: str | None = None
    chat_room_id: str | None = None


@dataclass(frozen=True)
class OfferAcceptedData:
    """Payload of an ``offer_accepted`` notification."""

    title: str
    message: str
    sender_name: str | None = None
    trade_post_id: str | None = None


@dataclass(frozen=True)
class OfferReceivedData:
    """Payload of an ``offer_received`` notification."""

    title: str
    message: str
    sender_name: str | None = None
    trade_post_id: str | None = None


@dataclass(frozen=True)
class TradeCompletedData:
    """Payload of a ``trade_completed`` notification."""

    title: str
    message: str
    sender_name: str | None = None
    trade_post_id: str | None = None


NotificationData = Union[
    ChatMessageData, OfferAcceptedData, OfferReceivedData, TradeCompletedData
]

PAYLOAD_TYPES: dict[NotificationType, type] = {
    NotificationType.TRADE_CHAT: ChatMessageData,
    NotificationType.OFFER_ACCEPTED: OfferAcceptedData,
    NotificationType.OFFER_RECEIVED: OfferReceivedData,
    NotificationType.TRADE_COMPLETED: TradeCompletedData,
}


@dataclass(frozen=True)
class Notification:
    """Information message delivered to a specific user.

    Instances are immutable; the only state transition a client may apply is
    :meth:`as_read`, which never goes back from read to unread.
    """

    id: str
    user_id: str
    type: NotificationType
    data: NotificationData
    is_read: bool = False
    related_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def title(self) -> str:
        return self.data.title

    @property
    def message(self) -> str:
        return self.data.message

    def as_read(self) -> "Notification":
        """Return this notification marked as read."""

        if self.is_read:
            return self
        return replace(self, is_read=True)


@dataclass(frozen=True)
class NotificationPage:
    """One page of the paginated notification listing."""

    items: list[Notification] = field(default_factory=list)
    has_more: bool = False


def badge_label(count: int) -> str:
    """Return the text shown on an unread badge for ``count`` items."""

    if count <= 0:
        return ""
    if count > 99:
        return "99+"
    return str(count)


__all__ = [
    "ChatMessageData",
    "Notification",
    "NotificationData",
    "NotificationPage",
    "NotificationType",
    "OfferAcceptedData",
    "OfferReceivedData",
    "PAYLOAD_TYPES",
    "TradeCompletedData",
    "badge_label",
]

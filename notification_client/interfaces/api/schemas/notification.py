"""Pydantic models describing relay payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from notification_client.domain.entities import Notification, PermissionState
from notification_client.infrastructure.serialization import serialize_notification


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the UI."""

    id: str
    user_id: str
    type: str
    data: dict[str, Any] = Field(default_factory=dict)
    related_url: str | None = None
    is_read: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
    icon: str

    @classmethod
    def from_entity(cls, notification: Notification) -> "NotificationRead":
        payload = serialize_notification(notification)
        payload["created_at"] = notification.created_at
        payload["updated_at"] = notification.updated_at
        return cls(**payload, icon=notification.type.icon)


class NotificationListRead(BaseModel):
    notifications: list[NotificationRead]
    unread_count: int
    badge: str


class UnreadCountRead(BaseModel):
    count: int
    badge: str


class SessionCreate(BaseModel):
    """Payload used to start polling for a user."""

    user_id: str = Field(..., min_length=1, description="Identifier of the signed-in user")


class SessionRead(BaseModel):
    user_id: str | None
    running: bool


class PermissionReport(BaseModel):
    """Permission state reported by the UI over the websocket."""

    state: PermissionState


__all__ = [
    "NotificationListRead",
    "NotificationRead",
    "PermissionReport",
    "SessionCreate",
    "SessionRead",
    "UnreadCountRead",
]

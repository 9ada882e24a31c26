"""Conversion between wire payloads and :class:`Notification` entities."""

from __future__ import annotations

from dataclasses import asdict, fields
from typing import Any, Mapping

from notification_client.domain.entities import (
    PAYLOAD_TYPES,
    Notification,
    NotificationChange,
    NotificationType,
)
from notification_client.utils import parse_timestamp, to_iso


class MalformedNotificationError(ValueError):
    """Raised when a wire record cannot be turned into a notification."""


def parse_notification(record: Any) -> Notification:
    """Build a :class:`Notification` from a store record.

    Raises :class:`MalformedNotificationError` when a required field is
    missing or the ``type`` is outside the known set.
    """

    if not isinstance(record, Mapping):
        raise MalformedNotificationError("Notification record must be an object")

    notification_id = record.get("id")
    if notification_id in (None, ""):
        raise MalformedNotificationError("Notification record has no id")

    raw_type = record.get("type")
    try:
        notification_type = NotificationType(raw_type)
    except ValueError as exc:
        msg = f"Unknown notification type {raw_type!r}"
        raise MalformedNotificationError(msg) from exc

    return Notification(
        id=str(notification_id),
        user_id=str(record.get("user_id") or ""),
        type=notification_type,
        data=_parse_data(notification_type, record.get("data")),
        is_read=bool(record.get("is_read", False)),
        related_url=record.get("related_url") or None,
        created_at=parse_timestamp(record.get("created_at")),
        updated_at=parse_timestamp(record.get("updated_at")),
    )


def _parse_data(notification_type: NotificationType, raw: Any):
    if not isinstance(raw, Mapping):
        raise MalformedNotificationError("Notification data must be an object")

    title = raw.get("title")
    message = raw.get("message")
    if not isinstance(title, str) or not isinstance(message, str):
        raise MalformedNotificationError("Notification data needs a title and a message")

    payload_type = PAYLOAD_TYPES[notification_type]
    values = {
        item.name: _optional_str(raw.get(item.name))
        for item in fields(payload_type)
        if item.name not in ("title", "message")
    }
    return payload_type(title=title, message=message, **values)


def _optional_str(value: Any) -> str | None:
    if value in (None, ""):
        return None
    return str(value)


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the wire representation for ``notification``."""

    data = {key: value for key, value in asdict(notification.data).items() if value is not None}
    return {
        "id": notification.id,
        "user_id": notification.user_id,
        "type": notification.type.value,
        "data": data,
        "related_url": notification.related_url,
        "is_read": notification.is_read,
        "created_at": to_iso(notification.created_at),
        "updated_at": to_iso(notification.updated_at),
    }


def serialize_change(change: NotificationChange) -> dict[str, Any]:
    """Return a JSON-serializable representation of ``change``."""

    return {
        "kind": change.kind.value,
        "notification_ids": list(change.notification_ids),
        "notification": serialize_notification(change.notification)
        if change.notification is not None
        else None,
    }


__all__ = [
    "MalformedNotificationError",
    "parse_notification",
    "serialize_change",
    "serialize_notification",
]

"""Forward client events to the UI websockets."""

from __future__ import annotations

from notification_client.application import NotificationClient
from notification_client.domain.entities import Notification, NotificationChange
from notification_client.infrastructure.notifications import UIConnectionManager
from notification_client.infrastructure.serialization import (
    serialize_change,
    serialize_notification,
)


class UIRelay:
    """Listener pair broadcasting notifications and state changes."""

    def __init__(self, manager: UIConnectionManager) -> None:
        self._manager = manager

    def attach(self, client: NotificationClient) -> None:
        """Register on ``client``; repeated calls keep a single registration."""

        client.on_notification(self.on_notification)
        client.on_change(self.on_change)

    async def on_notification(self, notification: Notification) -> None:
        await self._manager.broadcast(
            {"type": "notification", "data": serialize_notification(notification)}
        )

    async def on_change(self, change: NotificationChange) -> None:
        await self._manager.broadcast({"type": "change", "data": serialize_change(change)})


__all__ = ["UIRelay"]

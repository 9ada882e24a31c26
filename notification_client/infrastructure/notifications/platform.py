"""Best-effort platform-level notification surface."""

from __future__ import annotations

import logging
from typing import Protocol

from notification_client.domain.entities import Notification, PermissionState

from .manager import UIConnectionManager

logger = logging.getLogger(__name__)


class PlatformNotificationBackend(Protocol):
    """Platform surface able to display notifications behind a permission."""

    @property
    def supported(self) -> bool: ...

    def permission(self) -> PermissionState: ...

    async def request_permission(self) -> PermissionState: ...

    async def show(self, *, title: str, body: str, tag: str, icon: str | None) -> None: ...


class UnsupportedPlatformBackend:
    """Backend for environments without a notification surface."""

    supported = False

    def permission(self) -> PermissionState:
        return PermissionState.DENIED

    async def request_permission(self) -> PermissionState:
        return PermissionState.DENIED

    async def show(self, *, title: str, body: str, tag: str, icon: str | None) -> None:
        return None


class WebsocketPlatformBackend:
    """Forward platform notifications to connected UI websockets.

    The UI owns the real permission prompt; it reports the outcome back with
    :meth:`report_permission`. Without any connected UI the backend counts as
    unsupported.
    """

    def __init__(self, manager: UIConnectionManager) -> None:
        self._manager = manager
        self._permission = PermissionState.DEFAULT

    @property
    def supported(self) -> bool:
        return len(self._manager) > 0

    def permission(self) -> PermissionState:
        return self._permission

    def report_permission(self, state: PermissionState) -> None:
        if self._permission is PermissionState.DENIED and state is not PermissionState.DENIED:
            logger.info("UI reported %s after a denial", state.value)
        self._permission = state

    async def request_permission(self) -> PermissionState:
        await self._manager.broadcast({"type": "permission-request"})
        return self._permission

    async def show(self, *, title: str, body: str, tag: str, icon: str | None) -> None:
        await self._manager.broadcast(
            {
                "type": "platform-notification",
                "data": {"title": title, "body": body, "tag": tag, "icon": icon},
            }
        )


class PlatformNotificationBridge:
    """Permission-gated wrapper around a :class:`PlatformNotificationBackend`.

    Permission is requested at most once per bridge instance while it is
    undetermined, and never after a denial. Display failures are logged and
    never raised to the caller.
    """

    def __init__(
        self,
        backend: PlatformNotificationBackend | None = None,
        *,
        icon: str | None = None,
    ) -> None:
        self.backend = backend or UnsupportedPlatformBackend()
        self._icon = icon
        self._permission_requested = False
        self._denied = False

    @property
    def permission_requested(self) -> bool:
        return self._permission_requested

    @property
    def denied(self) -> bool:
        """Whether a denial has been observed; it is never forgotten."""

        return self._denied

    async def attempt(self, notification: Notification) -> bool:
        """Try to display ``notification``; return whether it was shown."""

        try:
            if not self.backend.supported:
                return False

            state = self.backend.permission()
            if state is PermissionState.GRANTED:
                await self.backend.show(
                    title=notification.title,
                    body=notification.message,
                    tag=notification.id,
                    icon=self._icon,
                )
                return True
            if state is PermissionState.DENIED:
                self._denied = True
            if self._denied or self._permission_requested:
                return False

            self._permission_requested = True
            result = await self.backend.request_permission()
            if result is PermissionState.DENIED:
                self._denied = True
            logger.debug("Platform notification permission is now %s", result.value)
            return False
        except Exception:
            logger.warning(
                "Platform notification for %s could not be displayed",
                notification.id,
                exc_info=True,
            )
            return False


__all__ = [
    "PlatformNotificationBackend",
    "PlatformNotificationBridge",
    "UnsupportedPlatformBackend",
    "WebsocketPlatformBackend",
]

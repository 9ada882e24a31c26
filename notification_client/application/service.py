"""Facade used by UI code to poll, query, mutate and observe notifications."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable

from notification_client.config import Settings, get_settings
from notification_client.domain.entities import (
    ChangeKind,
    Notification,
    NotificationChange,
    NotificationPage,
)
from notification_client.infrastructure.database import session_factory_from_settings
from notification_client.infrastructure.notifications import (
    ListenerRegistry,
    PlatformNotificationBackend,
    PlatformNotificationBridge,
    Unsubscribe,
)
from notification_client.infrastructure.repositories import (
    CheckpointRepository,
    SqlCheckpointRepository,
)
from notification_client.infrastructure.store_client import (
    NotificationStoreClient,
    NotificationStoreError,
    TokenProvider,
)
from notification_client.utils import now_utc

from .reconciler import Reconciler
from .scheduler import PollingScheduler

logger = logging.getLogger(__name__)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


class NotificationClient:
    """Single entry point for the notification subsystem.

    The client owns the poll scheduler, the listener registries and a central
    cache of every notification it has seen, keyed by id. Read operations
    degrade to empty defaults on failure; mutations update the cache first
    and only log when the store rejects them.
    """

    def __init__(
        self,
        store: NotificationStoreClient,
        checkpoints: CheckpointRepository,
        *,
        settings: Settings | None = None,
        bridge: PlatformNotificationBridge | None = None,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self.settings = settings or store.settings
        self.store = store
        self.checkpoints = checkpoints
        self.bridge = bridge or PlatformNotificationBridge(icon=self.settings.notification_icon)
        self._clock = clock
        self._notification_listeners: ListenerRegistry[Notification] = ListenerRegistry(
            "notification"
        )
        self._change_listeners: ListenerRegistry[NotificationChange] = ListenerRegistry(
            "change"
        )
        self._cache: dict[str, Notification] = {}
        self._deleted_ids: set[str] = set()
        self._user_id: str | None = None
        self._reconciler: Reconciler | None = None
        self._scheduler: PollingScheduler | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        token_provider: TokenProvider | None = None,
        platform_backend: PlatformNotificationBackend | None = None,
    ) -> "NotificationClient":
        """Build a client wired to the HTTP store and the SQL checkpoint table."""

        settings = settings or get_settings()
        store = NotificationStoreClient(settings, token_provider=token_provider)
        checkpoints = SqlCheckpointRepository(session_factory_from_settings(settings))
        bridge = PlatformNotificationBridge(platform_backend, icon=settings.notification_icon)
        return cls(store, checkpoints, settings=settings, bridge=bridge)

    async def __aenter__(self) -> "NotificationClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        self.reset()
        await self.store.aclose()

    @property
    def user_id(self) -> str | None:
        return self._user_id

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def checkpoint_key_for(self, user_id: str) -> str:
        return f"{self.settings.checkpoint_key}:{user_id}"

    def initialize(self, user_id: str) -> None:
        """Start polling for ``user_id``.

        Calling again for the same user while polling is a no-op. A different
        user tears the previous session down first, listeners included.
        Must be called from a running event loop.
        """

        if not user_id:
            raise ValueError("user_id is required to initialize notifications")

        if self._user_id == user_id and self.running:
            return
        if self._user_id is not None and self._user_id != user_id:
            logger.info("Switching notification session to a new user")
            self.reset()
        else:
            self._stop_session()

        self._user_id = user_id
        self._reconciler = Reconciler(
            self.store,
            self.checkpoints,
            checkpoint_key=self.checkpoint_key_for(user_id),
            on_new=self._handle_new_notification,
            on_fetched=self._merge,
            bridge=self.bridge,
            clock=self._clock,
        )
        self._scheduler = PollingScheduler(
            self._reconciler.check_new_notifications,
            self.settings.poll_interval_seconds,
        )
        self._scheduler.start()

    def reset(self) -> None:
        """Stop polling and forget listeners, cached state and the user."""

        self._stop_session()
        self._notification_listeners.clear()
        self._change_listeners.clear()
        self._cache.clear()
        self._deleted_ids.clear()
        self._user_id = None

    def _stop_session(self) -> None:
        if self._scheduler is not None:
            self._scheduler.stop()
            self._scheduler = None
        if self._reconciler is not None:
            self._reconciler.close()
            self._reconciler = None

    async def check_new_notifications(self) -> list[Notification]:
        """Run a poll cycle now, outside the timer cadence."""

        if self._reconciler is None:
            return []
        return await self._reconciler.check_new_notifications()

    def on_notification(self, callback: Callable[[Notification], object]) -> Unsubscribe:
        """Register ``callback`` for newly detected notifications."""

        return self._notification_listeners.add(callback)

    def on_change(self, callback: Callable[[NotificationChange], object]) -> Unsubscribe:
        """Register ``callback`` for every change applied to the cached state."""

        return self._change_listeners.add(callback)

    def notifications(self, *, unread_only: bool = False) -> list[Notification]:
        """Return the cached notifications, newest first."""

        items: Iterable[Notification] = self._cache.values()
        if unread_only:
            items = (item for item in items if not item.is_read)
        return sorted(items, key=lambda item: item.created_at or _OLDEST, reverse=True)

    @property
    def local_unread_count(self) -> int:
        return sum(1 for item in self._cache.values() if not item.is_read)

    async def get_unread_notifications(self) -> list[Notification]:
        try:
            notifications = await self.store.list_unread()
        except NotificationStoreError as exc:
            logger.error("Failed to fetch notifications: %s", exc)
            return []
        self._merge(notifications)
        return [item for item in self._visible(notifications) if not item.is_read]

    async def get_all_notifications(
        self, page: int = 1, limit: int | None = None
    ) -> NotificationPage:
        limit = self.settings.default_page_size if limit is None else limit
        if page < 1:
            raise ValueError("page must be 1 or greater")
        if limit <= 0:
            raise ValueError("limit must be greater than 0")

        try:
            result = await self.store.list_page(page, limit)
        except NotificationStoreError as exc:
            logger.error("Failed to fetch notifications: %s", exc)
            return NotificationPage()
        self._merge(result.items)
        return NotificationPage(items=self._visible(result.items), has_more=result.has_more)

    async def get_unread_count(self) -> int:
        try:
            return await self.store.unread_count()
        except NotificationStoreError as exc:
            logger.error("Failed to fetch unread count: %s", exc)
            return 0

    async def mark_as_read(self, notification_id: str) -> None:
        cached = self._cache.get(notification_id)
        if cached is not None and not cached.is_read:
            self._cache[notification_id] = cached.as_read()
            self._emit(
                NotificationChange(
                    ChangeKind.READ,
                    (notification_id,),
                    self._cache[notification_id],
                )
            )

        try:
            await self.store.mark_read(notification_id)
        except NotificationStoreError as exc:
            logger.error("Failed to mark notification as read: %s", exc)

    async def mark_all_as_read(self) -> None:
        changed = [key for key, item in self._cache.items() if not item.is_read]
        for key in changed:
            self._cache[key] = self._cache[key].as_read()
        self._emit(NotificationChange(ChangeKind.ALL_READ, tuple(changed)))

        try:
            await self.store.mark_all_read()
        except NotificationStoreError as exc:
            logger.error("Failed to mark all notifications as read: %s", exc)

    async def delete_notification(self, notification_id: str) -> None:
        removed = self._cache.pop(notification_id, None)
        self._deleted_ids.add(notification_id)
        self._emit(NotificationChange(ChangeKind.DELETED, (notification_id,), removed))

        try:
            await self.store.delete(notification_id)
        except NotificationStoreError as exc:
            logger.error("Failed to delete notification: %s", exc)

    def _handle_new_notification(self, notification: Notification) -> None:
        current = self._cache.get(notification.id, notification)
        self._notification_listeners.dispatch(current)
        self._emit(NotificationChange(ChangeKind.CREATED, (current.id,), current))

    def _emit(self, change: NotificationChange) -> None:
        self._change_listeners.dispatch(change)

    def _merge(self, notifications: Iterable[Notification]) -> None:
        for notification in notifications:
            if notification.id in self._deleted_ids:
                continue
            cached = self._cache.get(notification.id)
            if cached is not None and cached.is_read and not notification.is_read:
                notification = notification.as_read()
            self._cache[notification.id] = notification

    def _visible(self, notifications: Iterable[Notification]) -> list[Notification]:
        """Project fetched items through the cache so read state never reverts."""

        return [
            self._cache[notification.id]
            for notification in notifications
            if notification.id in self._cache
        ]


__all__ = ["NotificationClient"]

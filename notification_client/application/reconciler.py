"""Poll cycle that detects notifications created since the last check."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable, Iterable

from anyio import to_thread

from notification_client.domain.entities import Notification
from notification_client.infrastructure.notifications import PlatformNotificationBridge
from notification_client.infrastructure.repositories import CheckpointRepository
from notification_client.infrastructure.store_client import (
    NotificationStoreClient,
    NotificationStoreError,
)
from notification_client.utils import now_utc

logger = logging.getLogger(__name__)


class Reconciler:
    """Compare the unread set against the checkpoint and fan out new items.

    One instance serves one user session. Cycles never overlap: a cycle
    requested while another is in flight is skipped. Once :meth:`close` is
    called, in-flight cycles run to completion but neither deliver nor move
    the checkpoint.
    """

    def __init__(
        self,
        store: NotificationStoreClient,
        checkpoints: CheckpointRepository,
        *,
        checkpoint_key: str,
        on_new: Callable[[Notification], None],
        on_fetched: Callable[[Iterable[Notification]], None] | None = None,
        bridge: PlatformNotificationBridge | None = None,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self._store = store
        self._checkpoints = checkpoints
        self.checkpoint_key = checkpoint_key
        self._on_new = on_new
        self._on_fetched = on_fetched
        self._bridge = bridge
        self._clock = clock
        # id -> created_at of everything delivered and still newer than the checkpoint
        self._delivered: dict[str, datetime] = {}
        self._in_flight = False
        self._closed = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def remembered_ids(self) -> frozenset[str]:
        return frozenset(self._delivered)

    def close(self) -> None:
        self._closed = True

    async def check_new_notifications(self) -> list[Notification]:
        """Run one poll cycle and return the notifications fanned out."""

        if self._closed:
            return []
        if self._in_flight:
            logger.debug("Skipping poll cycle; previous cycle still in flight")
            return []

        self._in_flight = True
        try:
            return await self._run_cycle()
        finally:
            self._in_flight = False

    async def _load_checkpoint(self) -> datetime | None:
        if self._checkpoints.blocking:
            return await to_thread.run_sync(self._checkpoints.get, self.checkpoint_key)
        return self._checkpoints.get(self.checkpoint_key)

    async def _store_checkpoint(self, value: datetime) -> None:
        if self._checkpoints.blocking:
            await to_thread.run_sync(self._checkpoints.save, self.checkpoint_key, value)
        else:
            self._checkpoints.save(self.checkpoint_key, value)

    def _forget_delivered_before(self, checkpoint: datetime) -> None:
        self._delivered = {
            notification_id: created_at
            for notification_id, created_at in self._delivered.items()
            if created_at > checkpoint
        }

    async def _run_cycle(self) -> list[Notification]:
        checkpoint = await self._load_checkpoint()
        cycle_started_at = self._clock()

        try:
            fetched = await self._store.list_unread()
        except NotificationStoreError as exc:
            logger.error("Failed to check new notifications: %s", exc)
            return []

        if self._closed:
            return []

        if self._on_fetched is not None:
            self._on_fetched(fetched)

        new_notifications: list[Notification] = []
        if checkpoint is not None:
            new_notifications = [
                notification
                for notification in fetched
                if notification.created_at is not None
                and notification.created_at > checkpoint
                and notification.id not in self._delivered
            ]

        for notification in new_notifications:
            self._delivered[notification.id] = notification.created_at
            self._on_new(notification)

        if self._bridge is not None and new_notifications:
            await asyncio.gather(
                *(self._bridge.attempt(notification) for notification in new_notifications)
            )

        # A session that closed meanwhile may already have written a newer value.
        if self._closed:
            return new_notifications

        await self._store_checkpoint(cycle_started_at)
        self._forget_delivered_before(cycle_started_at)
        return new_notifications


__all__ = ["Reconciler"]

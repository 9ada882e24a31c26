"""Shared fixtures and fakes for the notification client tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from notification_client.config import Settings
from notification_client.domain.entities import (
    ChatMessageData,
    Notification,
    NotificationPage,
    NotificationType,
    PermissionState,
)
from notification_client.infrastructure.store_client import NotificationStoreConnectionError

T0 = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_notification(
    notification_id: str,
    *,
    created_at: datetime | None = T0,
    is_read: bool = False,
    user_id: str = "user-1",
) -> Notification:
    return Notification(
        id=notification_id,
        user_id=user_id,
        type=NotificationType.TRADE_CHAT,
        data=ChatMessageData(title=f"Title {notification_id}", message="Hello"),
        is_read=is_read,
        created_at=created_at,
        updated_at=created_at,
    )


class FakeStore:
    """In-memory stand-in for :class:`NotificationStoreClient`."""

    def __init__(self, settings: Settings, notifications: list[Notification] | None = None) -> None:
        self.settings = settings
        self.notifications: list[Notification] = list(notifications or [])
        self.fail = False
        self.calls: list[tuple[str, object]] = []
        self.closed = False

    def _check(self, name: str, argument: object = None) -> None:
        self.calls.append((name, argument))
        if self.fail:
            raise NotificationStoreConnectionError(f"{name} failed")

    async def aclose(self) -> None:
        self.closed = True

    async def list_unread(self) -> list[Notification]:
        self._check("list_unread")
        return [item for item in self.notifications if not item.is_read]

    async def list_page(self, page: int, limit: int) -> NotificationPage:
        self._check("list_page", (page, limit))
        start = (page - 1) * limit
        items = self.notifications[start : start + limit]
        return NotificationPage(items=items, has_more=start + limit < len(self.notifications))

    async def unread_count(self) -> int:
        self._check("unread_count")
        return sum(1 for item in self.notifications if not item.is_read)

    async def mark_read(self, notification_id: str) -> None:
        self._check("mark_read", notification_id)
        self.notifications = [
            item.as_read() if item.id == notification_id else item
            for item in self.notifications
        ]

    async def mark_all_read(self) -> None:
        self._check("mark_all_read")
        self.notifications = [item.as_read() for item in self.notifications]

    async def delete(self, notification_id: str) -> None:
        self._check("delete", notification_id)
        self.notifications = [item for item in self.notifications if item.id != notification_id]


class FakePlatformBackend:
    """Platform backend recording every request it receives."""

    def __init__(
        self,
        permission: PermissionState = PermissionState.DEFAULT,
        *,
        supported: bool = True,
        answer: PermissionState | None = None,
    ) -> None:
        self.supported = supported
        self.state = permission
        self.answer = answer
        self.permission_requests = 0
        self.shown: list[dict[str, object]] = []
        self.fail_on_show = False

    def permission(self) -> PermissionState:
        return self.state

    async def request_permission(self) -> PermissionState:
        self.permission_requests += 1
        if self.answer is not None:
            self.state = self.answer
        return self.state

    async def show(self, *, title: str, body: str, tag: str, icon: str | None) -> None:
        if self.fail_on_show:
            raise RuntimeError("quota exceeded")
        self.shown.append({"title": title, "body": body, "tag": tag, "icon": icon})


class Clock:
    """Controllable clock returning aware UTC datetimes."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        api_base_url="https://store.test",
        access_token="secret-token",
        checkpoint_database_url="sqlite:///:memory:",
        poll_interval_seconds=30,
    )


@pytest.fixture()
def store(settings: Settings) -> FakeStore:
    return FakeStore(settings)


@pytest.fixture()
def clock() -> Clock:
    return Clock()

"""Tests for the notification client facade."""

from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest
import pytest_asyncio
from conftest import T0, Clock, FakeStore, make_notification

from notification_client.application import NotificationClient
from notification_client.domain.entities import ChangeKind, Notification, NotificationChange
from notification_client.infrastructure.repositories import InMemoryCheckpointRepository


@pytest.fixture()
def checkpoints() -> InMemoryCheckpointRepository:
    return InMemoryCheckpointRepository()


@pytest_asyncio.fixture()
async def client(store: FakeStore, checkpoints, clock: Clock):
    instance = NotificationClient(store, checkpoints, clock=clock)
    yield instance
    await instance.aclose()


async def _settle() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_initialize_primes_then_delivers_new_notifications(
    client: NotificationClient, store: FakeStore, checkpoints, clock: Clock
) -> None:
    received: list[Notification] = []
    client.on_notification(received.append)
    store.notifications = [make_notification("old", created_at=T0 - timedelta(minutes=5))]

    client.initialize("user-1")
    await _settle()

    assert client.running is True
    assert received == []
    assert checkpoints.get(client.checkpoint_key_for("user-1")) == T0

    store.notifications.append(make_notification("fresh", created_at=T0 + timedelta(seconds=5)))
    clock.advance(30)
    await client.check_new_notifications()

    assert [item.id for item in received] == ["fresh"]
    assert [item.id for item in client.notifications()] == ["fresh", "old"]


@pytest.mark.asyncio
async def test_initialize_same_user_is_idempotent(
    client: NotificationClient, store: FakeStore
) -> None:
    client.initialize("user-1")
    await _settle()
    client.initialize("user-1")
    await _settle()

    assert store.calls.count(("list_unread", None)) == 1


@pytest.mark.asyncio
async def test_initialize_other_user_tears_down_previous_session(
    client: NotificationClient, store: FakeStore
) -> None:
    store.notifications = [make_notification("a")]
    client.initialize("user-1")
    await _settle()
    assert client.notifications()

    client.initialize("user-2")
    await _settle()

    assert client.user_id == "user-2"
    assert client.running is True
    assert store.calls.count(("list_unread", None)) == 2


@pytest.mark.asyncio
async def test_switching_user_clears_listeners(
    client: NotificationClient, store: FakeStore, clock: Clock
) -> None:
    received: list[Notification] = []
    client.on_notification(received.append)
    client.initialize("user-1")
    await _settle()

    client.initialize("user-2")
    await _settle()
    store.notifications = [make_notification("b", created_at=T0 + timedelta(seconds=1))]
    clock.advance(30)
    await client.check_new_notifications()

    assert received == []


def test_initialize_requires_user_id(store: FakeStore, checkpoints) -> None:
    client = NotificationClient(store, checkpoints)

    with pytest.raises(ValueError):
        client.initialize("")


@pytest.mark.asyncio
async def test_reset_stops_polling_and_clears_state(
    client: NotificationClient, store: FakeStore
) -> None:
    store.notifications = [make_notification("a")]
    client.on_notification(lambda item: None)
    client.initialize("user-1")
    await _settle()

    client.reset()

    assert client.running is False
    assert client.user_id is None
    assert client.notifications() == []
    assert await client.check_new_notifications() == []


@pytest.mark.asyncio
async def test_unsubscribed_listener_misses_next_poll(
    client: NotificationClient, store: FakeStore, clock: Clock
) -> None:
    received: list[Notification] = []
    unsubscribe = client.on_notification(received.append)
    client.initialize("user-1")
    await _settle()

    unsubscribe()
    unsubscribe()
    store.notifications = [make_notification("a", created_at=T0 + timedelta(seconds=1))]
    clock.advance(30)
    delivered = await client.check_new_notifications()

    assert [item.id for item in delivered] == ["a"]
    assert received == []


@pytest.mark.asyncio
async def test_read_operations_degrade_to_defaults(
    client: NotificationClient, store: FakeStore, caplog
) -> None:
    store.fail = True

    with caplog.at_level("ERROR"):
        assert await client.get_unread_notifications() == []
        page = await client.get_all_notifications(1, 10)
        assert await client.get_unread_count() == 0

    assert page.items == [] and page.has_more is False
    assert "Failed to fetch" in caplog.text


@pytest.mark.asyncio
async def test_mutation_failures_are_logged_not_raised(
    client: NotificationClient, store: FakeStore, caplog
) -> None:
    store.notifications = [make_notification("a")]
    await client.get_unread_notifications()
    store.fail = True

    with caplog.at_level("ERROR"):
        await client.mark_as_read("a")
        await client.mark_all_as_read()
        await client.delete_notification("a")

    assert "Failed to mark notification as read" in caplog.text
    assert "Failed to delete notification" in caplog.text
    assert client.notifications() == []


@pytest.mark.asyncio
async def test_pagination_validates_arguments(client: NotificationClient) -> None:
    with pytest.raises(ValueError):
        await client.get_all_notifications(0, 10)
    with pytest.raises(ValueError):
        await client.get_all_notifications(1, 0)


@pytest.mark.asyncio
async def test_pagination_respects_limit_and_has_more(
    client: NotificationClient, store: FakeStore
) -> None:
    store.notifications = [make_notification(str(index)) for index in range(5)]

    first = await client.get_all_notifications(1, 2)
    last = await client.get_all_notifications(3, 2)
    beyond = await client.get_all_notifications(4, 2)

    assert len(first.items) == 2 and first.has_more is True
    assert len(last.items) == 1 and last.has_more is False
    assert beyond.items == []


@pytest.mark.asyncio
async def test_default_page_size_comes_from_settings(
    client: NotificationClient, store: FakeStore
) -> None:
    await client.get_all_notifications()

    assert ("list_page", (1, 20)) in store.calls


@pytest.mark.asyncio
async def test_read_state_is_monotonic(client: NotificationClient, store: FakeStore) -> None:
    """A stale fetch reporting ``is_read=False`` never reverts a local read."""

    store.notifications = [make_notification("a"), make_notification("b")]
    await client.get_unread_notifications()
    store.fail = True
    await client.mark_as_read("a")
    store.fail = False

    unread = await client.get_unread_notifications()
    page = await client.get_all_notifications(1, 10)

    assert [item.id for item in unread] == ["b"]
    assert {item.id: item.is_read for item in page.items} == {"a": True, "b": False}
    assert client.local_unread_count == 1


@pytest.mark.asyncio
async def test_mark_all_as_read_then_count_is_zero(
    client: NotificationClient, store: FakeStore
) -> None:
    store.notifications = [make_notification("a"), make_notification("b")]
    await client.get_unread_notifications()
    assert await client.get_unread_count() == 2

    await client.mark_all_as_read()

    assert await client.get_unread_count() == 0
    assert client.local_unread_count == 0


@pytest.mark.asyncio
async def test_deleted_notification_never_returns(
    client: NotificationClient, store: FakeStore
) -> None:
    store.notifications = [make_notification("a")]
    await client.get_unread_notifications()
    store.fail = True
    await client.delete_notification("a")
    store.fail = False

    assert await client.get_unread_notifications() == []
    assert client.notifications() == []


@pytest.mark.asyncio
async def test_change_listeners_follow_every_state_change(
    client: NotificationClient, store: FakeStore, clock: Clock
) -> None:
    changes: list[NotificationChange] = []
    client.on_change(changes.append)
    store.notifications = [make_notification("a"), make_notification("b")]
    client.initialize("user-1")
    await _settle()

    store.notifications.append(make_notification("c", created_at=T0 + timedelta(seconds=1)))
    clock.advance(30)
    await client.check_new_notifications()
    await client.mark_as_read("a")
    await client.delete_notification("b")
    await client.mark_all_as_read()

    assert [change.kind for change in changes] == [
        ChangeKind.CREATED,
        ChangeKind.READ,
        ChangeKind.DELETED,
        ChangeKind.ALL_READ,
    ]
    assert changes[0].notification.id == "c"
    assert changes[-1].notification_ids == ("c",)


@pytest.mark.asyncio
async def test_async_context_manager_closes_store(store: FakeStore, checkpoints) -> None:
    async with NotificationClient(store, checkpoints) as client:
        client.initialize("user-1")
        await _settle()

    assert client.running is False
    assert store.closed is True

"""Listener registry used to fan events out to subscribers."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Generic, TypeVar

from anyio import from_thread

logger = logging.getLogger(__name__)

EventT = TypeVar("EventT")
Listener = Callable[[EventT], Any]
Unsubscribe = Callable[[], None]


class ListenerRegistry(Generic[EventT]):
    """Set of callbacks that receive every dispatched event.

    Registering an equal callback twice keeps a single entry. A listener
    that raises is logged and does not stop delivery to the others. A
    listener may be a coroutine function; its coroutine is scheduled on the
    running loop and fan-out continues without waiting for it.
    """

    def __init__(self, name: str = "listeners") -> None:
        self._name = name
        self._listeners: dict[Listener, object] = {}
        self._pending: set[asyncio.Task[Any]] = set()

    def __len__(self) -> int:
        return len(self._listeners)

    def __contains__(self, listener: object) -> bool:
        return listener in self._listeners

    def add(self, listener: Listener) -> Unsubscribe:
        """Register ``listener`` and return a handle that removes it."""

        token = self._listeners.get(listener)
        if token is None:
            token = object()
            self._listeners[listener] = token

        def unsubscribe() -> None:
            if self._listeners.get(listener) is token:
                del self._listeners[listener]

        return unsubscribe

    def discard(self, listener: Listener) -> None:
        self._listeners.pop(listener, None)

    def clear(self) -> None:
        self._listeners.clear()

    def dispatch(self, event: EventT) -> int:
        """Deliver ``event`` to every registered listener.

        Returns the number of listeners that were called.
        """

        delivered = 0
        for listener, token in list(self._listeners.items()):
            # an earlier listener may have unsubscribed this one
            if self._listeners.get(listener) is not token:
                continue
            delivered += 1
            try:
                result = listener(event)
            except Exception:
                logger.exception("%s listener %r failed", self._name, listener)
                continue
            if inspect.isawaitable(result):
                self._schedule(result, listener)
        return delivered

    def _schedule(self, awaitable: Awaitable[Any], listener: Listener) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run(self._run_listener, awaitable, listener)
            except RuntimeError:
                logger.error(
                    "%s listener %r returned an awaitable outside an event loop",
                    self._name,
                    listener,
                )
                if inspect.iscoroutine(awaitable):
                    awaitable.close()
        else:
            task = loop.create_task(self._run_listener(awaitable, listener))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

    async def _run_listener(self, awaitable: Awaitable[Any], listener: Listener) -> None:
        try:
            await awaitable
        except Exception:
            logger.exception("%s listener %r failed", self._name, listener)


__all__ = ["Listener", "ListenerRegistry", "Unsubscribe"]

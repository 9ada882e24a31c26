"""Persistence helpers for the poll checkpoint."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Protocol

from sqlalchemy.orm import sessionmaker

from notification_client.infrastructure.models import ClientStateModel
from notification_client.utils import parse_timestamp, to_iso

logger = logging.getLogger(__name__)


class CheckpointRepository(Protocol):
    """Durable key/value slot holding checkpoint timestamps.

    ``blocking`` marks implementations doing I/O; callers on an event loop run
    them in a worker thread.
    """

    blocking: bool

    def get(self, key: str) -> datetime | None: ...

    def save(self, key: str, value: datetime) -> None: ...

    def clear(self, key: str) -> None: ...


class SqlCheckpointRepository:
    """Store checkpoints in the ``client_state`` table."""

    blocking = True

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def get(self, key: str) -> datetime | None:
        with self._session_factory() as session:
            model = session.get(ClientStateModel, key)
            if model is None:
                return None
            value = parse_timestamp(model.value)
        if value is None:
            logger.warning("Ignoring unparseable checkpoint stored under %s", key)
        return value

    def save(self, key: str, value: datetime) -> None:
        serialized = to_iso(value)
        with self._session_factory() as session:
            model = session.get(ClientStateModel, key)
            if model is None:
                model = ClientStateModel(key=key, value=serialized)
            else:
                model.value = serialized
            session.add(model)
            session.commit()

    def clear(self, key: str) -> None:
        with self._session_factory() as session:
            model = session.get(ClientStateModel, key)
            if model is None:
                return
            session.delete(model)
            session.commit()


class InMemoryCheckpointRepository:
    """Non-durable checkpoint storage, scoped to the process."""

    blocking = False

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def get(self, key: str) -> datetime | None:
        return parse_timestamp(self._values.get(key))

    def save(self, key: str, value: datetime) -> None:
        self._values[key] = to_iso(value)

    def clear(self, key: str) -> None:
        self._values.pop(key, None)


__all__ = [
    "CheckpointRepository",
    "InMemoryCheckpointRepository",
    "SqlCheckpointRepository",
]

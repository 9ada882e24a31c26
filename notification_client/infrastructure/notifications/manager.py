"""Connection management helpers for the relay websockets."""

from __future__ import annotations

import logging
from typing import Any, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class UIConnectionManager:
    """Track websocket connections opened by local UI observers."""

    def __init__(self) -> None:
        self._connections: Set[WebSocket] = set()

    def __len__(self) -> int:
        return len(self._connections)

    async def connect(self, websocket: WebSocket) -> None:
        """Accept the websocket connection and register it."""

        await websocket.accept()
        self._connections.add(websocket)

    def disconnect(self, websocket: WebSocket) -> None:
        self._connections.discard(websocket)

    async def broadcast(self, message: dict[str, Any]) -> None:
        """Send ``message`` to every active connection."""

        for connection in list(self._connections):
            try:
                await connection.send_json(message)
            except Exception:
                logger.warning("Dropping UI websocket after a failed send", exc_info=True)
                self.disconnect(connection)


__all__ = ["UIConnectionManager"]

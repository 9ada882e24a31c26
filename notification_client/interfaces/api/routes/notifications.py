"""Endpoints and websocket handler exposing the notification state."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from pydantic import ValidationError

from notification_client.application import NotificationClient
from notification_client.domain.entities import badge_label
from notification_client.infrastructure.notifications import (
    UIConnectionManager,
    WebsocketPlatformBackend,
)
from notification_client.infrastructure.serialization import serialize_notification
from notification_client.interfaces.api.dependencies import (
    get_client,
    get_ws_manager,
    get_ws_platform_backend,
)
from notification_client.interfaces.api.schemas import (
    NotificationListRead,
    NotificationRead,
    PermissionReport,
    UnreadCountRead,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListRead)
async def list_notifications(
    unread_only: bool = Query(default=False),
    client: NotificationClient = Depends(get_client),
) -> NotificationListRead:
    """Return the cached notifications, newest first."""

    items = client.notifications(unread_only=unread_only)
    unread = client.local_unread_count
    return NotificationListRead(
        notifications=[NotificationRead.from_entity(item) for item in items],
        unread_count=unread,
        badge=badge_label(unread),
    )


@router.get("/unread-count", response_model=UnreadCountRead)
async def unread_count(client: NotificationClient = Depends(get_client)) -> UnreadCountRead:
    count = await client.get_unread_count()
    return UnreadCountRead(count=count, badge=badge_label(count))


@router.put("/mark-all-read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_all_read(client: NotificationClient = Depends(get_client)) -> None:
    await client.mark_all_as_read()


@router.put("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_read(
    notification_id: str, client: NotificationClient = Depends(get_client)
) -> None:
    await client.mark_as_read(notification_id)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: str, client: NotificationClient = Depends(get_client)
) -> None:
    await client.delete_notification(notification_id)


@router.websocket("/ws")
async def notifications_websocket(
    websocket: WebSocket,
    manager: UIConnectionManager = Depends(get_ws_manager),
    backend: WebsocketPlatformBackend | None = Depends(get_ws_platform_backend),
) -> None:
    """Stream notification events to a UI and collect its permission reports."""

    client: NotificationClient = websocket.app.state.notification_client
    await manager.connect(websocket)
    try:
        pending = client.notifications(unread_only=True)
        if pending:
            await websocket.send_json(
                {"type": "init", "data": [serialize_notification(item) for item in pending]}
            )
        while True:
            try:
                message = await websocket.receive_json()
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "permission" and backend is not None:
                try:
                    report = PermissionReport.model_validate(message)
                except ValidationError:
                    logger.warning("Ignoring malformed permission report")
                    continue
                backend.report_permission(report.state)
                continue
    except WebSocketDisconnect:
        manager.disconnect(websocket)
    except Exception:
        manager.disconnect(websocket)
        raise

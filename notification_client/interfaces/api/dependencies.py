"""FastAPI dependency utilities."""

from fastapi import Request, WebSocket

from notification_client.application import NotificationClient
from notification_client.infrastructure.notifications import (
    UIConnectionManager,
    WebsocketPlatformBackend,
)

from .relay import UIRelay


def get_client(request: Request) -> NotificationClient:
    return request.app.state.notification_client


def get_relay(request: Request) -> UIRelay:
    return request.app.state.ui_relay


def get_ws_manager(websocket: WebSocket) -> UIConnectionManager:
    return websocket.app.state.ui_manager


def get_ws_platform_backend(websocket: WebSocket) -> WebsocketPlatformBackend | None:
    backend = websocket.app.state.notification_client.bridge.backend
    return backend if isinstance(backend, WebsocketPlatformBackend) else None

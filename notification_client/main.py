"""FastAPI relay application."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from notification_client.application import NotificationClient
from notification_client.config import Settings, get_settings
from notification_client.infrastructure.notifications import (
    UIConnectionManager,
    WebsocketPlatformBackend,
)
from notification_client.interfaces.api.relay import UIRelay
from notification_client.interfaces.api.routes import register_routes


def create_app(
    client: NotificationClient | None = None,
    *,
    settings: Settings | None = None,
    manager: UIConnectionManager | None = None,
) -> FastAPI:
    """Create the relay; builds its own client from settings when none is given."""

    manager = manager or UIConnectionManager()
    if client is None:
        client = NotificationClient.from_settings(
            settings or get_settings(),
            platform_backend=WebsocketPlatformBackend(manager),
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Release the polling session and HTTP resources on shutdown."""

        yield
        await client.aclose()

    app = FastAPI(lifespan=lifespan)
    app.state.notification_client = client
    app.state.ui_manager = manager
    app.state.ui_relay = UIRelay(manager)
    register_routes(app)
    return app


__all__ = ["create_app"]

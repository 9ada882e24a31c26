"""Fan-out and platform notification helpers for the infrastructure layer."""

from .manager import UIConnectionManager
from .platform import (
    PlatformNotificationBackend,
    PlatformNotificationBridge,
    UnsupportedPlatformBackend,
    WebsocketPlatformBackend,
)
from .registry import Listener, ListenerRegistry, Unsubscribe

__all__ = [
    "Listener",
    "ListenerRegistry",
    "PlatformNotificationBackend",
    "PlatformNotificationBridge",
    "UIConnectionManager",
    "UnsupportedPlatformBackend",
    "Unsubscribe",
    "WebsocketPlatformBackend",
]

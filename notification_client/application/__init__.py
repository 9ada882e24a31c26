"""Application layer: poll cycle, scheduler and the client facade."""

from .reconciler import Reconciler
from .scheduler import PollingScheduler
from .service import NotificationClient

__all__ = ["NotificationClient", "PollingScheduler", "Reconciler"]

"""Polling notification client.

The public entry point is :class:`NotificationClient`; everything else is
exposed for callers that need to wire custom collaborators.
"""

from .application import NotificationClient, PollingScheduler, Reconciler

__all__ = ["NotificationClient", "PollingScheduler", "Reconciler"]

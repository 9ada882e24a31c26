"""ORM models for the persisted client state."""

from .client_state import ClientStateModel

__all__ = ["ClientStateModel"]

"""Repository implementations for infrastructure layer."""

from .checkpoint_repository import (
    CheckpointRepository,
    InMemoryCheckpointRepository,
    SqlCheckpointRepository,
)

__all__ = [
    "CheckpointRepository",
    "InMemoryCheckpointRepository",
    "SqlCheckpointRepository",
]

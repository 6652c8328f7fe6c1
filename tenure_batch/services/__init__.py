"""Stateful batch services: checkpoint persistence and the run scheduler."""

from tenure_batch.services.checkpoint_store import (
    CheckpointStore,
    InMemoryCheckpointStore,
    SqlCheckpointStore,
)
from tenure_batch.services.scheduler import RunScheduler

__all__ = [
    "CheckpointStore",
    "InMemoryCheckpointStore",
    "RunScheduler",
    "SqlCheckpointStore",
]

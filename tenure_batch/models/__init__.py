"""ORM models for scheduler persistence."""

from tenure_batch.models.checkpoint import CheckpointModel

__all__ = ["CheckpointModel"]

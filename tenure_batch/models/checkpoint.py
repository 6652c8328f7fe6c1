"""
ORM model for the sweep checkpoint.

Contract:
    One row per checkpoint key.  ``value`` holds the ``"<year>-<monthIndex>"``
    marker of the last calendar month a full reconciliation sweep
    completed.  Used only for dedupe, never for tenure math.

Architecture: tenure_batch/models. Imports from tenure_kernel.db.base only.
"""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from tenure_kernel.db.base import TimestampedBase


class CheckpointModel(TimestampedBase):
    """Persistent key/value checkpoint."""

    __tablename__ = "run_checkpoints"

    key: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    value: Mapped[str] = mapped_column(String(200), nullable=False)

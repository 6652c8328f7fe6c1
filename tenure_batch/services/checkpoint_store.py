"""
CheckpointStore -- durable key/value marker of the last completed sweep.

Contract:
    ``get_checkpoint(key)`` returns the stored value or None.
    ``set_checkpoint(key, value)`` stores it (last writer wins).

Only one sweep is ever active, so the store needs no transactional
guarantee beyond a single-row upsert.

Failure modes:
    ``SqlCheckpointStore`` wraps database errors in ``CheckpointError``.
"""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tenure_batch.models.checkpoint import CheckpointModel
from tenure_kernel.db.engine import session_scope
from tenure_kernel.exceptions import CheckpointError
from tenure_kernel.logging_config import get_logger

logger = get_logger("batch.checkpoint_store")


@runtime_checkable
class CheckpointStore(Protocol):
    """Externally-durable key/value pair used for monthly dedupe."""

    def get_checkpoint(self, key: str) -> str | None: ...

    def set_checkpoint(self, key: str, value: str) -> None: ...


class InMemoryCheckpointStore:
    """Process-local store.  Survives nothing; meant for tests and dry runs."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get_checkpoint(self, key: str) -> str | None:
        return self._values.get(key)

    def set_checkpoint(self, key: str, value: str) -> None:
        self._values[key] = value


class SqlCheckpointStore:
    """Checkpoint store backed by the ``run_checkpoints`` table.

    Opens a short-lived session per call so it can be used from the
    scheduler thread.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def get_checkpoint(self, key: str) -> str | None:
        try:
            with session_scope(self._session_factory) as session:
                return session.execute(
                    select(CheckpointModel.value).where(CheckpointModel.key == key)
                ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise CheckpointError(key, "read", str(exc)) from exc

    def set_checkpoint(self, key: str, value: str) -> None:
        try:
            with session_scope(self._session_factory) as session:
                model = session.execute(
                    select(CheckpointModel).where(CheckpointModel.key == key)
                ).scalar_one_or_none()
                if model is None:
                    session.add(CheckpointModel(key=key, value=value))
                else:
                    model.value = value
        except SQLAlchemyError as exc:
            raise CheckpointError(key, "write", str(exc)) from exc

        logger.debug("checkpoint_written", extra={"key": key, "value": value})

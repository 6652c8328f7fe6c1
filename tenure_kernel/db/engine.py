"""
Engine and session management (``tenure_kernel.db.engine``).

One process-wide engine, created from a URL by ``init_engine_from_url``.
The checkpoint store receives a session factory and opens a short
``session_scope`` per read or write, which is safe from the scheduler
thread.

Failure modes:
    - ``RuntimeError`` from any accessor used before ``init_engine_from_url``.
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from tenure_kernel.logging_config import get_logger

logger = get_logger("db.engine")

_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def init_engine_from_url(
    database_url: str,
    echo: bool = False,
    pool_pre_ping: bool = True,
) -> Engine:
    """Create the process engine, disposing any previous one."""
    global _engine, _session_factory

    reset_engine()
    _engine = create_engine(database_url, echo=echo, pool_pre_ping=pool_pre_ping)
    _session_factory = sessionmaker(bind=_engine, expire_on_commit=False)

    logger.info(
        "engine_initialized",
        extra={"dialect": make_url(database_url).get_backend_name(), "echo": echo},
    )
    return _engine


def _require_initialized() -> tuple[Engine, sessionmaker[Session]]:
    if _engine is None or _session_factory is None:
        raise RuntimeError("Database engine not initialized; call init_engine_from_url() first")
    return _engine, _session_factory


def get_engine() -> Engine:
    return _require_initialized()[0]


def get_session_factory() -> sessionmaker[Session]:
    return _require_initialized()[1]


def get_session() -> Session:
    return get_session_factory()()


@contextmanager
def session_scope(
    session_factory: Callable[[], Session] | None = None,
) -> Iterator[Session]:
    """Commit on success, roll back and re-raise on error, always close.

    Uses the process session factory unless one is passed in.
    """
    session = (session_factory or get_session_factory())()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        logger.warning("transaction_rolled_back", exc_info=True)
        raise
    finally:
        session.close()


def create_tables() -> None:
    """Create every table registered on ``Base.metadata``."""
    from tenure_kernel.db.base import Base

    # Registers the checkpoint model on Base.metadata
    import tenure_batch.models  # noqa: F401

    Base.metadata.create_all(get_engine())


def reset_engine() -> None:
    """Dispose the engine and forget the session factory."""
    global _engine, _session_factory

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None

"""
Pytest fixtures for the tenure reconciliation test suite.

Provides:
- Structured logging configuration and a ``captured_logs`` fixture
- Deterministic clocks
- Raw directory record builders and an in-memory directory
- A file-backed SQLite checkpoint database
"""

import json
import logging
from datetime import datetime, timezone
from io import StringIO

import pytest

from tenure_kernel.db.engine import (
    create_tables,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
)
from tenure_kernel.domain.clock import DeterministicClock
from tenure_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from tenure_services.directory import InMemoryEmployeeDirectory

# Catalog ids used throughout the suite
FIXED_BONUS_ID = 10
SUPPLEMENT_M_10_24 = 21
SUPPLEMENT_M_25 = 22
SUPPLEMENT_F_10_21 = 23
SUPPLEMENT_F_22 = 24
OTHER_CONCEPT_ID = 99

CATALOG_RECORDS = [
    {"idBonificacion": FIXED_BONUS_ID, "nombre": "Bonif Antigüedad"},
    {"idBonificacion": SUPPLEMENT_M_10_24, "nombre": "Suplemento Antigüedad Hombres entre 10 y 24 años"},
    {"idBonificacion": SUPPLEMENT_M_25, "nombre": "Suplemento Antigüedad Hombres más de 25 años"},
    {"idBonificacion": SUPPLEMENT_F_10_21, "nombre": "Suplemento Antigüedad Mujeres entre 10 y 21 años"},
    {"idBonificacion": SUPPLEMENT_F_22, "nombre": "Suplemento Antigüedad Mujeres más de 22 años"},
    {"idBonificacion": OTHER_CONCEPT_ID, "nombre": "Presentismo"},
]


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture tenure logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, service):
            service.run_sweep()
            logs = captured_logs()
            assert any(r["message"] == "reconciliation_run_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("tenure")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Clock fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock():
    """Clock fixed at 2025-06-15 12:00 UTC."""
    return DeterministicClock(datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc))


# =============================================================================
# Directory record builders
# =============================================================================


def make_employee_record(
    legajo: int,
    *,
    hire_date: str | None = "2010-03-01",
    sexo: str | None = "M",
    gremio: str = "Luz y Fuerza",
    estado: str = "ACTIVO",
    **extra,
) -> dict:
    record = {
        "legajo": legajo,
        "nombre": f"Nombre{legajo}",
        "apellido": f"Apellido{legajo}",
        "cuil": f"20-{legajo:08d}-3",
        "inicioActividad": hire_date,
        "sexo": sexo,
        "gremio": {"idGremio": 3, "nombre": gremio},
        "estado": estado,
        "idCategoria": 7,
        "areas": [{"id": 1}, {"id": 2}],
        "idZonaUocra": None,
    }
    record.update(extra)
    return record


def make_assignment(
    reference_id: int,
    *,
    unidades: int | None = 1,
    tipo: str = "CONCEPTO_LYF",
    assignment_id: int | None = None,
) -> dict:
    record = {
        "idEmpleadoConcepto": assignment_id,
        "tipoConcepto": tipo,
        "idReferencia": reference_id,
    }
    if unidades is not None:
        record["unidades"] = unidades
    return record


@pytest.fixture
def make_directory():
    """Build an ``InMemoryEmployeeDirectory`` over the standard catalog."""

    def _make(employees, assigned=None, catalog=None, profiles=None):
        return InMemoryEmployeeDirectory(
            employees=employees,
            assigned_concepts=assigned or {},
            catalog=CATALOG_RECORDS if catalog is None else catalog,
            profiles=profiles,
        )

    return _make


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def checkpoint_session_factory(tmp_path):
    """Session factory on a fresh file-backed SQLite database.

    A file is used rather than ``:memory:`` so the scheduler thread sees
    the same tables as the test thread.
    """
    init_engine_from_url(f"sqlite:///{tmp_path / 'checkpoints.db'}")
    create_tables()
    yield get_session_factory()
    reset_engine()

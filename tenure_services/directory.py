"""
Directory collaborators (``tenure_services.directory``).

Responsibility
--------------
Abstract contracts for the external employee directory and the
assignment-update service, plus ``InMemoryEmployeeDirectory``, an
implementation over raw directory records that can be loaded from and
written back to a JSON snapshot.

Contract of ``AssignmentUpdater.update_employee``
-------------------------------------------------
Full replacement: the ``conceptosAsignados`` list of the payload
entirely replaces the employee's assignments.  A record left out of the
list is deleted; a record with ``idEmpleadoConcepto=None`` is created.
"""

from __future__ import annotations

import copy
import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from tenure_engines.domain import AssignedConcept, ConceptCatalogEntry, Employee
from tenure_kernel.logging_config import get_logger
from tenure_services.records import (
    assigned_concept_from_record,
    catalog_entry_from_record,
    employee_from_record,
)

logger = get_logger("services.directory")


# =============================================================================
# Protocols
# =============================================================================


@runtime_checkable
class EmployeeDirectory(Protocol):
    """Read side of the external employee directory.

    Any exception raised by an implementation is treated as a failed
    lookup by the reconciliation service.
    """

    def list_employees(self) -> Sequence[Employee]:
        """All employees, active and inactive."""
        ...

    def get_employee_profile(self, legajo: int) -> Employee:
        """Full profile of one employee, including gender."""
        ...

    def list_assigned_concepts(self, legajo: int) -> Sequence[AssignedConcept]:
        """Current concept assignments of one employee."""
        ...

    def list_concept_catalog(self) -> Sequence[ConceptCatalogEntry]:
        """The concept catalog, tenure concepts included."""
        ...


@runtime_checkable
class AssignmentUpdater(Protocol):
    """Write side: full-replacement update of one employee."""

    def update_employee(self, legajo: int, payload: Mapping[str, Any]) -> None:
        ...


# =============================================================================
# In-memory implementation
# =============================================================================


class InMemoryEmployeeDirectory:
    """Directory and updater backed by raw directory records.

    Records are kept in their raw wire shape and mapped through
    ``tenure_services.records`` on every read, so this class exercises the
    same boundary as a remote directory would.
    """

    def __init__(
        self,
        employees: Sequence[Mapping[str, Any]] = (),
        assigned_concepts: Mapping[int, Sequence[Mapping[str, Any]]] | None = None,
        catalog: Sequence[Mapping[str, Any]] = (),
        profiles: Mapping[int, Mapping[str, Any]] | None = None,
    ) -> None:
        self._employees: dict[int, dict[str, Any]] = {}
        for raw in employees:
            self._employees[int(raw["legajo"])] = dict(raw)
        self._profiles = {int(k): dict(v) for k, v in (profiles or {}).items()}
        self._assigned = {
            int(k): [dict(r) for r in v]
            for k, v in (assigned_concepts or {}).items()
        }
        self._catalog = [dict(r) for r in catalog]
        self._next_assignment_id = 1 + max(
            (
                int(r["idEmpleadoConcepto"])
                for records in self._assigned.values()
                for r in records
                if r.get("idEmpleadoConcepto") is not None
            ),
            default=0,
        )
        self.updates: list[tuple[int, dict[str, Any]]] = []

    # -------------------------------------------------------------------------
    # Snapshot I/O
    # -------------------------------------------------------------------------

    @classmethod
    def from_snapshot(cls, path: str | Path) -> InMemoryEmployeeDirectory:
        """Load a JSON snapshot.

        Expected keys: ``employees`` (list), ``catalog`` (list),
        ``assigned_concepts`` (legajo -> list) and optionally ``profiles``
        (legajo -> record).
        """
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
        logger.info(
            "directory_snapshot_loaded",
            extra={"path": str(path), "employees": len(data.get("employees", []))},
        )
        return cls(
            employees=data.get("employees", []),
            assigned_concepts=data.get("assigned_concepts", {}),
            catalog=data.get("catalog", []),
            profiles=data.get("profiles", {}),
        )

    def to_snapshot(self) -> dict[str, Any]:
        snapshot: dict[str, Any] = {
            "employees": list(self._employees.values()),
            "catalog": self._catalog,
            "assigned_concepts": {str(k): v for k, v in self._assigned.items()},
        }
        if self._profiles:
            snapshot["profiles"] = {str(k): v for k, v in self._profiles.items()}
        return copy.deepcopy(snapshot)

    def dump_snapshot(self, path: str | Path) -> None:
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(self.to_snapshot(), fh, ensure_ascii=False, indent=2)
        logger.info("directory_snapshot_written", extra={"path": str(path)})

    # -------------------------------------------------------------------------
    # EmployeeDirectory
    # -------------------------------------------------------------------------

    def list_employees(self) -> tuple[Employee, ...]:
        return tuple(employee_from_record(raw) for raw in self._employees.values())

    def get_employee_profile(self, legajo: int) -> Employee:
        raw = self._profiles.get(legajo) or self._employees.get(legajo)
        if raw is None:
            raise LookupError(f"Unknown employee: {legajo}")
        return employee_from_record(raw)

    def list_assigned_concepts(self, legajo: int) -> tuple[AssignedConcept, ...]:
        if legajo not in self._employees:
            raise LookupError(f"Unknown employee: {legajo}")
        return tuple(
            assigned_concept_from_record(raw)
            for raw in self._assigned.get(legajo, [])
        )

    def list_concept_catalog(self) -> tuple[ConceptCatalogEntry, ...]:
        return tuple(catalog_entry_from_record(raw) for raw in self._catalog)

    # -------------------------------------------------------------------------
    # AssignmentUpdater
    # -------------------------------------------------------------------------

    def update_employee(self, legajo: int, payload: Mapping[str, Any]) -> None:
        if legajo not in self._employees:
            raise LookupError(f"Unknown employee: {legajo}")

        replacement: list[dict[str, Any]] = []
        for raw in payload.get("conceptosAsignados") or []:
            record = dict(raw)
            if record.get("idEmpleadoConcepto") is None:
                record["idEmpleadoConcepto"] = self._next_assignment_id
                self._next_assignment_id += 1
            replacement.append(record)

        self._assigned[legajo] = replacement
        self.updates.append((legajo, copy.deepcopy(dict(payload))))

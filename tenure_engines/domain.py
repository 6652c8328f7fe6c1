"""
Tenure Domain Models (``tenure_engines.domain``).

Responsibility
--------------
Frozen dataclass value objects representing the nouns of tenure
reconciliation: employees, catalog entries, assigned concepts, the
entitlement decision and the reconciliation plan.

Architecture position
---------------------
**Engines layer** -- pure data definitions with ZERO I/O.  Raw directory
records are converted into these types once, at the service boundary
(``tenure_services.records``); nothing downstream reads field aliases.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* Tenure is never a field of any model; it is recomputed on every run.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


class Gender(str, Enum):
    """Normalized gender used for supplement bracket selection."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class SupplementTier(str, Enum):
    """Abstract tier keys of the tiered tenure supplement."""

    MALE_10_TO_24 = "10-24"
    MALE_25_PLUS = "25+"
    FEMALE_10_TO_21 = "10-21"
    FEMALE_22_PLUS = "22+"


class ConceptCategory(str, Enum):
    """Role a catalog entry plays for this engine."""

    FIXED_TENURE_BONUS = "fixed-tenure-bonus"
    TIERED_TENURE_SUPPLEMENT = "tiered-tenure-supplement"
    OTHER = "other"


@dataclass(frozen=True)
class Employee:
    """An employee as read from the directory.

    Only ``legajo``, ``hire_date``, ``gender``, ``guild`` and ``active``
    drive reconciliation.  The remaining fields are carried so the
    full-replacement update payload can restate the employee's identity
    unchanged.
    """

    legajo: int
    nombre: str = ""
    apellido: str = ""
    hire_date: date | None = None
    gender: str | None = None
    guild: str = ""
    active: bool = False
    cuil: str | None = None
    domicilio: str | None = None
    banco: str | None = None
    cuenta: str | None = None
    category_id: int | None = None
    area_ids: tuple[int, ...] | None = None
    guild_id: int | None = None
    zone_id: int | None = None

    @property
    def display_name(self) -> str:
        return f"{self.nombre} {self.apellido}".strip()


@dataclass(frozen=True)
class ConceptCatalogEntry:
    """A payroll concept from the read-only catalog."""

    concept_id: int
    name: str
    category: ConceptCategory = ConceptCategory.OTHER


@dataclass(frozen=True)
class AssignedConcept:
    """One concept assignment held by an employee.

    ``assignment_id`` is None for a record that does not exist yet; the
    update collaborator creates it.
    """

    concept_type: str
    reference_id: int
    quantity: int = 1
    assignment_id: int | None = None


@dataclass(frozen=True)
class EntitlementDecision:
    """What tenure and gender entitle an employee to.

    ``fixed_bonus_quantity`` is None when the employee has less than one
    completed year; that excludes them from fixed-bonus processing, which
    is not the same as a quantity of zero.
    """

    fixed_bonus_quantity: int | None
    supplement_tier: SupplementTier | None


@dataclass(frozen=True)
class ReconciliationPlan:
    """Full replacement list of assigned concepts for one employee."""

    records: tuple[AssignedConcept, ...]
    changed: bool
    changes: tuple[str, ...] = ()

    @property
    def summary(self) -> str:
        return " ".join(self.changes)

"""
Module: tenure_engines
Responsibility:
    Pure calculation layer of the tenure reconciliation engine: completed
    years of service, entitlement brackets, catalog tier mapping and the
    reconciliation planner.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import tenure_kernel (logging, exceptions).
    MUST NOT import tenure_services, tenure_batch or tenure_config.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      The "as of" date is always passed in by the caller.
    - Determinism: identical inputs always produce identical outputs.
"""

from tenure_engines.catalog import (
    CatalogMatching,
    TenureCatalog,
    resolve_tenure_catalog,
)
from tenure_engines.domain import (
    AssignedConcept,
    ConceptCatalogEntry,
    ConceptCategory,
    Employee,
    EntitlementDecision,
    Gender,
    ReconciliationPlan,
    SupplementTier,
)
from tenure_engines.entitlement import normalize_gender, resolve_entitlement
from tenure_engines.normalize import normalize_text
from tenure_engines.planner import plan_reconciliation
from tenure_engines.tenure import completed_years, parse_hire_date

__all__ = [
    # Domain
    "AssignedConcept",
    "ConceptCatalogEntry",
    "ConceptCategory",
    "Employee",
    "EntitlementDecision",
    "Gender",
    "ReconciliationPlan",
    "SupplementTier",
    # Engines
    "CatalogMatching",
    "TenureCatalog",
    "completed_years",
    "normalize_gender",
    "normalize_text",
    "parse_hire_date",
    "plan_reconciliation",
    "resolve_entitlement",
    "resolve_tenure_catalog",
]

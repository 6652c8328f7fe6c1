"""
TenureReconciliationService -- per-employee reconciliation and the sweep.

Contract:
    ``reconcile_one()`` brings one employee's tenure concepts in line with
    their current tenure and gender, writing only when the plan changed.
    ``reconcile_all()`` folds it sequentially over a filtered employee
    list with per-employee failure isolation.  ``run_sweep()`` fetches and
    filters the employee list first.

Architecture: tenure_services.  Composes the pure engines
    (tenure_engines) with the directory collaborators and the clock.

Failure modes:
    - FetchError / UpdateError from one employee are counted and logged;
      the sweep continues with the next employee.
    - BatchFatalError when the employee list or the catalog cannot be
      obtained; nothing is written and the sweep is aborted.

Non-goals:
    - Does NOT decide when to run (see tenure_batch.services.scheduler).
    - Does NOT cache profiles across sweeps.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from uuid import uuid4

from tenure_engines.catalog import CatalogMatching, TenureCatalog, resolve_tenure_catalog
from tenure_engines.domain import Employee
from tenure_engines.entitlement import resolve_entitlement
from tenure_engines.normalize import normalize_text
from tenure_engines.planner import DEFAULT_OWNED_CONCEPT_TYPE, plan_reconciliation
from tenure_engines.tenure import completed_years
from tenure_kernel.domain.clock import Clock, SystemClock
from tenure_kernel.exceptions import (
    BatchFatalError,
    FetchError,
    ReconciliationError,
    UpdateError,
)
from tenure_kernel.logging_config import LogContext, get_logger
from tenure_services.directory import AssignmentUpdater, EmployeeDirectory
from tenure_services.records import build_update_payload, merge_profile

logger = get_logger("services.reconciliation")

DEFAULT_GUILD_TOKENS: tuple[str, ...] = ("luz", "fuerza")


@dataclass(frozen=True)
class EmployeeReconciliation:
    """Outcome of reconciling one employee."""

    legajo: int
    changed: bool
    years: int = 0
    summary: str = ""
    error_code: str | None = None
    error_message: str | None = None

    @property
    def failed(self) -> bool:
        return self.error_code is not None


@dataclass(frozen=True)
class ReconciliationRunResult:
    """Aggregate outcome of one sweep."""

    run_id: str
    as_of: date
    updated: int
    unchanged: int
    errors: int
    results: tuple[EmployeeReconciliation, ...] = ()

    @property
    def total(self) -> int:
        return len(self.results)


class TenureReconciliationService:
    """Reconciles tenure benefits for eligible employees.

    Contract:
        - ``eligible_employees()`` keeps active employees of the eligible guild.
        - ``reconcile_one()`` returns whether the employee was updated;
          raises FetchError / UpdateError.
        - ``reconcile_all()`` never raises for a single employee's failure.
        - ``run_sweep()`` is the entry point used by the scheduler.
    """

    def __init__(
        self,
        directory: EmployeeDirectory,
        updater: AssignmentUpdater,
        clock: Clock | None = None,
        matching: CatalogMatching | None = None,
        guild_tokens: Sequence[str] = DEFAULT_GUILD_TOKENS,
        owned_concept_type: str = DEFAULT_OWNED_CONCEPT_TYPE,
    ) -> None:
        self._directory = directory
        self._updater = updater
        self._clock = clock or SystemClock()
        self._matching = matching or CatalogMatching()
        self._guild_tokens = tuple(normalize_text(t) for t in guild_tokens)
        self._owned_concept_type = owned_concept_type

    # -------------------------------------------------------------------------
    # Eligibility
    # -------------------------------------------------------------------------

    def is_eligible(self, employee: Employee) -> bool:
        guild = normalize_text(employee.guild)
        return employee.active and all(token in guild for token in self._guild_tokens)

    def eligible_employees(self, employees: Iterable[Employee]) -> tuple[Employee, ...]:
        return tuple(e for e in employees if self.is_eligible(e))

    # -------------------------------------------------------------------------
    # Shared inputs
    # -------------------------------------------------------------------------

    def load_catalog(self) -> TenureCatalog:
        """Fetch and resolve the concept catalog.

        Raises:
            BatchFatalError: If the catalog cannot be fetched.
        """
        try:
            entries = self._directory.list_concept_catalog()
        except Exception as exc:
            raise BatchFatalError("catalog", str(exc)) from exc
        return resolve_tenure_catalog(entries, self._matching)

    # -------------------------------------------------------------------------
    # One employee
    # -------------------------------------------------------------------------

    def reconcile_one(
        self,
        employee: Employee,
        catalog: TenureCatalog,
        as_of: date | None = None,
    ) -> EmployeeReconciliation:
        """Reconcile one employee's tenure concepts.

        Raises:
            FetchError: If the profile or the assigned concepts cannot be read.
            UpdateError: If the replacement write fails.
        """
        as_of = as_of or self._clock.today()
        legajo = employee.legajo

        try:
            profile = self._directory.get_employee_profile(legajo)
        except Exception as exc:
            raise FetchError(legajo, "profile", str(exc)) from exc
        employee = merge_profile(employee, profile)

        try:
            current = tuple(self._directory.list_assigned_concepts(legajo))
        except Exception as exc:
            raise FetchError(legajo, "assigned_concepts", str(exc)) from exc

        years = completed_years(employee.hire_date, as_of)
        decision = resolve_entitlement(years, employee.gender)
        plan = plan_reconciliation(
            current=current,
            catalog=catalog,
            decision=decision,
            owned_concept_type=self._owned_concept_type,
        )

        if not plan.changed:
            logger.debug("employee_unchanged", extra={"years": years})
            return EmployeeReconciliation(legajo=legajo, changed=False, years=years)

        payload = build_update_payload(employee, plan.records)
        try:
            self._updater.update_employee(legajo, payload)
        except Exception as exc:
            raise UpdateError(legajo, str(exc)) from exc

        logger.info(
            "employee_reconciled",
            extra={
                "employee_name": employee.display_name,
                "years": years,
                "supplement_tier": (
                    decision.supplement_tier.value if decision.supplement_tier else None
                ),
                "summary": plan.summary,
            },
        )
        return EmployeeReconciliation(
            legajo=legajo, changed=True, years=years, summary=plan.summary,
        )

    # -------------------------------------------------------------------------
    # Batch
    # -------------------------------------------------------------------------

    def reconcile_all(
        self,
        employees: Sequence[Employee],
        as_of: date | None = None,
    ) -> ReconciliationRunResult:
        """Reconcile ``employees`` in order, isolating per-employee failures.

        ``employees`` is expected to be pre-filtered with
        ``eligible_employees()``.

        Raises:
            BatchFatalError: If the catalog cannot be fetched.
        """
        as_of = as_of or self._clock.today()
        run_id = str(uuid4())

        if not employees:
            logger.info("no_eligible_employees", extra={"as_of": as_of})
            return ReconciliationRunResult(
                run_id=run_id, as_of=as_of, updated=0, unchanged=0, errors=0,
            )

        with LogContext.bind(run_id=run_id):
            catalog = self.load_catalog()

            updated = 0
            unchanged = 0
            errors = 0
            results: list[EmployeeReconciliation] = []

            for employee in employees:
                with LogContext.bind(legajo=str(employee.legajo)):
                    try:
                        result = self.reconcile_one(employee, catalog, as_of)
                    except ReconciliationError as exc:
                        logger.warning(
                            "employee_reconciliation_failed",
                            extra={"error_code": exc.code, "error": str(exc)},
                        )
                        result = EmployeeReconciliation(
                            legajo=employee.legajo,
                            changed=False,
                            error_code=exc.code,
                            error_message=str(exc),
                        )
                        errors += 1
                    else:
                        if result.changed:
                            updated += 1
                        else:
                            unchanged += 1
                results.append(result)

            logger.info(
                "reconciliation_run_completed",
                extra={
                    "as_of": as_of,
                    "employees": len(results),
                    "updated": updated,
                    "unchanged": unchanged,
                    "errors": errors,
                },
            )

        return ReconciliationRunResult(
            run_id=run_id,
            as_of=as_of,
            updated=updated,
            unchanged=unchanged,
            errors=errors,
            results=tuple(results),
        )

    def run_sweep(self, as_of: date | None = None) -> ReconciliationRunResult:
        """Fetch all employees, keep the eligible ones and reconcile them.

        Raises:
            BatchFatalError: If the employee list or the catalog cannot be
                fetched.
        """
        try:
            employees = self._directory.list_employees()
        except Exception as exc:
            raise BatchFatalError("employee_list", str(exc)) from exc

        eligible = self.eligible_employees(employees)
        logger.info(
            "reconciliation_sweep_started",
            extra={"employees": len(employees), "eligible": len(eligible)},
        )
        return self.reconcile_all(eligible, as_of)

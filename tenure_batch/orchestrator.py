"""
TenureOrchestrator -- DI container for the scheduled tenure reconciliation.

Contract:
    Wires the reconciliation service, the checkpoint store and the run
    scheduler from one ``TenureEngineConfig``.  Single place where all
    tenure dependencies are composed.

Architecture: tenure_batch (top-level).  This is the canonical entry point
    for configuring and running the monthly sweep.

Invariants enforced:
    - Clock injection: the service and the scheduler share one Clock.
    - The checkpoint store is durable unless the caller injects another.
"""

from __future__ import annotations

from datetime import date
from typing import Callable

from tenure_batch.domain.types import TriggerResult
from tenure_batch.services.checkpoint_store import CheckpointStore, SqlCheckpointStore
from tenure_batch.services.scheduler import RunScheduler
from tenure_config.schema import TenureEngineConfig
from tenure_kernel.db.engine import create_tables, get_session_factory, init_engine_from_url
from tenure_kernel.domain.clock import Clock, SystemClock
from tenure_kernel.logging_config import get_logger
from tenure_services.directory import AssignmentUpdater, EmployeeDirectory
from tenure_services.reconciliation_service import (
    ReconciliationRunResult,
    TenureReconciliationService,
)

logger = get_logger("batch.orchestrator")


class TenureOrchestrator:
    """DI container for the tenure reconciliation subsystem.

    Contract:
        - ``from_config()`` factory creates a fully wired orchestrator.
        - ``create_scheduler()`` returns a RunScheduler for background use.
        - ``run_now()`` runs one sweep immediately, bypassing the monthly
          dedupe and leaving the checkpoint untouched.

    Non-goals:
        - Does NOT start the scheduler automatically -- caller decides.
    """

    def __init__(
        self,
        config: TenureEngineConfig,
        service: TenureReconciliationService,
        checkpoint_store: CheckpointStore,
        clock: Clock | None = None,
    ) -> None:
        self._config = config
        self._service = service
        self._checkpoint_store = checkpoint_store
        self._clock = clock or SystemClock()

    # -------------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------------

    @classmethod
    def from_config(
        cls,
        config: TenureEngineConfig,
        directory: EmployeeDirectory,
        updater: AssignmentUpdater | None = None,
        clock: Clock | None = None,
        checkpoint_store: CheckpointStore | None = None,
    ) -> TenureOrchestrator:
        """Create a fully wired TenureOrchestrator.

        Args:
            config: Engine configuration.
            directory: Read side of the employee directory.
            updater: Write side.  If None, ``directory`` must also
                implement ``AssignmentUpdater``.
            clock: Optional clock for deterministic testing.
            checkpoint_store: Optional store override.  If None, a
                SqlCheckpointStore is created on ``config.storage``.
        """
        if updater is None:
            if not isinstance(directory, AssignmentUpdater):
                raise TypeError("directory does not implement update_employee; pass updater")
            updater = directory

        effective_clock = clock or SystemClock()

        if checkpoint_store is None:
            init_engine_from_url(config.storage.database_url)
            create_tables()
            checkpoint_store = SqlCheckpointStore(get_session_factory())

        service = TenureReconciliationService(
            directory=directory,
            updater=updater,
            clock=effective_clock,
            matching=config.catalog,
            guild_tokens=config.eligibility.guild_tokens,
            owned_concept_type=config.eligibility.owned_concept_type,
        )
        return cls(
            config=config,
            service=service,
            checkpoint_store=checkpoint_store,
            clock=effective_clock,
        )

    # -------------------------------------------------------------------------
    # Scheduler
    # -------------------------------------------------------------------------

    def create_scheduler(
        self,
        is_enabled: Callable[[], bool] | None = None,
        notifier: Callable[[TriggerResult], None] | None = None,
    ) -> RunScheduler:
        """Create a RunScheduler wired with the orchestrator's dependencies.

        Args:
            is_enabled: Enablement signal, read on every trigger.
            notifier: Receives every TriggerResult whose sweep ran.
        """
        schedule = self._config.schedule
        return RunScheduler(
            sweep=self._service.run_sweep,
            checkpoint_store=self._checkpoint_store,
            clock=self._clock,
            is_enabled=is_enabled,
            notifier=notifier,
            checkpoint_key=schedule.checkpoint_key,
            tick_interval_seconds=schedule.tick_interval_seconds,
        )

    def run_now(self, as_of: date | None = None) -> ReconciliationRunResult:
        """Run one sweep immediately.

        Raises:
            BatchFatalError: If the employee list or the catalog cannot be
                fetched.
        """
        logger.info("manual_sweep_requested", extra={"as_of": as_of})
        return self._service.run_sweep(as_of)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def config(self) -> TenureEngineConfig:
        return self._config

    @property
    def service(self) -> TenureReconciliationService:
        return self._service

    @property
    def checkpoint_store(self) -> CheckpointStore:
        return self._checkpoint_store

"""
RunScheduler -- single-flight, monthly-deduped reconciliation trigger.

Contract:
    ``trigger()`` runs the sweep when the subsystem is enabled, no sweep
    is in flight, and the current month differs from the persisted
    checkpoint.  ``start()`` fires one startup trigger and then one per
    tick on a background thread; ``stop()`` cancels future ticks.

Architecture: tenure_batch/services.  Uses tenure_batch.domain.schedule
    for pure evaluation and an injected ``CheckpointStore``.

Invariants enforced:
    - Single flight: a trigger arriving while a sweep is RUNNING is
      dropped immediately (not queued, not retried).
    - The checkpoint advances only when the sweep returns a result; a
      raised failure leaves it untouched so the next trigger retries.
    - All timestamps from the injected Clock.
    - Graceful shutdown: ``stop()`` never aborts an in-flight sweep.
"""

from __future__ import annotations

import threading
from typing import Callable

from tenure_batch.domain.schedule import month_key, parse_month_key, should_run
from tenure_batch.domain.types import RunState, TriggerOutcome, TriggerResult
from tenure_batch.services.checkpoint_store import CheckpointStore
from tenure_kernel.domain.clock import Clock, SystemClock
from tenure_kernel.exceptions import CheckpointError, TenureEngineError
from tenure_kernel.logging_config import get_logger
from tenure_services.reconciliation_service import ReconciliationRunResult

logger = get_logger("batch.scheduler")

DEFAULT_CHECKPOINT_KEY = "antiguedadLastUpdate"
DEFAULT_TICK_INTERVAL_SECONDS = 60 * 60


def _always_enabled() -> bool:
    return True


class RunScheduler:
    """Decides whether a reconciliation sweep should run now, and runs it.

    Contract:
        - ``trigger()`` evaluates and possibly runs one sweep (public for
          testing and manual use).
        - ``start()`` / ``stop()`` for background thread operation.
        - ``notifier`` (optional) receives every TriggerResult whose sweep
          actually ran.

    Non-goals:
        - NOT a distributed scheduler (the guard is process-local).
    """

    def __init__(
        self,
        sweep: Callable[[], ReconciliationRunResult],
        checkpoint_store: CheckpointStore,
        clock: Clock | None = None,
        is_enabled: Callable[[], bool] | None = None,
        notifier: Callable[[TriggerResult], None] | None = None,
        checkpoint_key: str = DEFAULT_CHECKPOINT_KEY,
        tick_interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS,
    ):
        self._sweep = sweep
        self._store = checkpoint_store
        self._clock = clock or SystemClock()
        self._is_enabled = is_enabled or _always_enabled
        self._notifier = notifier
        self._checkpoint_key = checkpoint_key
        self._tick_interval = tick_interval_seconds

        self._guard = threading.Lock()
        self._state = RunState.IDLE
        self._last_checkpoint: str | None = None
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def last_checkpoint(self) -> str | None:
        return self._last_checkpoint

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def trigger(self) -> TriggerResult:
        """Run one sweep if allowed; returns what happened."""
        if not self._is_enabled():
            logger.debug("sweep_skipped_disabled")
            return TriggerResult(outcome=TriggerOutcome.SKIPPED_DISABLED)

        if not self._guard.acquire(blocking=False):
            logger.info("sweep_skipped_already_running")
            return TriggerResult(outcome=TriggerOutcome.SKIPPED_RUNNING)

        try:
            current_key = month_key(self._clock.today())
            if not should_run(current_key, self._load_checkpoint()):
                logger.debug("sweep_skipped_same_month", extra={"month_key": current_key})
                return TriggerResult(
                    outcome=TriggerOutcome.SKIPPED_SAME_MONTH, month_key=current_key,
                )

            self._state = RunState.RUNNING
            result = self._run(current_key)
        finally:
            self._state = RunState.IDLE
            self._guard.release()

        self._notify(result)
        return result

    def start(self) -> None:
        """Start the scheduler in a background thread.

        The first trigger fires immediately; later ones every
        ``tick_interval_seconds``.
        """
        if self._thread is not None and self._thread.is_alive():
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_loop,
            name="tenure-scheduler",
            daemon=True,
        )
        self._thread.start()
        logger.info("scheduler_started", extra={"tick_interval": self._tick_interval})

    def stop(self, timeout: float = 30.0) -> None:
        """Cancel future ticks and wait for an in-flight sweep to finish.

        Args:
            timeout: Max seconds to wait for the thread to finish.
        """
        self._stop_event.set()
        if self._thread is not None and self._thread.is_alive():
            self._thread.join(timeout=timeout)
        logger.info("scheduler_stopped")

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _run_loop(self) -> None:
        """Background loop. Exits when stop_event is set."""
        while not self._stop_event.is_set():
            try:
                self.trigger()
            except Exception:
                logger.exception("scheduler_tick_exception")
            self._stop_event.wait(timeout=self._tick_interval)

    def _load_checkpoint(self) -> str | None:
        """Refresh the in-memory checkpoint from the store.

        A store that cannot be read, or holds a malformed value, leaves the
        in-memory value in place.
        """
        try:
            stored = self._store.get_checkpoint(self._checkpoint_key)
        except CheckpointError:
            logger.exception("checkpoint_read_failed")
            return self._last_checkpoint

        if stored is not None:
            try:
                parse_month_key(stored)
            except ValueError:
                logger.warning("checkpoint_malformed", extra={"stored_value": stored})
                return self._last_checkpoint
            self._last_checkpoint = stored
        return self._last_checkpoint

    def _run(self, current_key: str) -> TriggerResult:
        logger.info("tenure_sweep_started", extra={"month_key": current_key})
        try:
            run_result = self._sweep()
        except TenureEngineError as exc:
            logger.error(
                "tenure_sweep_failed",
                extra={"month_key": current_key, "error_code": exc.code, "error": str(exc)},
            )
            return TriggerResult(
                outcome=TriggerOutcome.FAILED,
                month_key=current_key,
                error_code=exc.code,
                error_message=str(exc),
            )
        except Exception as exc:
            logger.exception("tenure_sweep_crashed", extra={"month_key": current_key})
            return TriggerResult(
                outcome=TriggerOutcome.FAILED,
                month_key=current_key,
                error_code="UNHANDLED_EXCEPTION",
                error_message=str(exc),
            )

        self._last_checkpoint = current_key
        try:
            self._store.set_checkpoint(self._checkpoint_key, current_key)
        except CheckpointError:
            logger.exception("checkpoint_write_failed", extra={"month_key": current_key})

        logger.info(
            "tenure_sweep_completed",
            extra={
                "month_key": current_key,
                "updated": run_result.updated,
                "errors": run_result.errors,
            },
        )
        return TriggerResult(
            outcome=TriggerOutcome.COMPLETED,
            month_key=current_key,
            updated=run_result.updated,
            errors=run_result.errors,
        )

    def _notify(self, result: TriggerResult) -> None:
        if self._notifier is None or not result.outcome.ran:
            return
        try:
            self._notifier(result)
        except Exception:
            logger.exception("sweep_notifier_failed")

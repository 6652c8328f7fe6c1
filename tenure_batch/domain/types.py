"""
tenure_batch.domain.types -- Pure frozen dataclasses for the scheduler.

ZERO I/O.  Frozen dataclasses with enum status fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RunState(str, Enum):
    """Scheduler state.  Only one sweep may be RUNNING at a time."""

    IDLE = "idle"
    RUNNING = "running"


class TriggerOutcome(str, Enum):
    """What happened to one trigger of the scheduler."""

    COMPLETED = "completed"  # Sweep ran, checkpoint advanced
    FAILED = "failed"  # Sweep aborted, checkpoint untouched
    SKIPPED_RUNNING = "skipped_running"  # Dropped by the single-flight guard
    SKIPPED_SAME_MONTH = "skipped_same_month"  # Month already swept
    SKIPPED_DISABLED = "skipped_disabled"  # Enablement signal is off

    @property
    def ran(self) -> bool:
        return self in (TriggerOutcome.COMPLETED, TriggerOutcome.FAILED)


@dataclass(frozen=True)
class TriggerResult:
    """Immutable result of one ``RunScheduler.trigger()`` call."""

    outcome: TriggerOutcome
    month_key: str | None = None
    updated: int = 0
    errors: int = 0
    error_code: str | None = None
    error_message: str | None = None

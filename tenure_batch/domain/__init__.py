"""Pure scheduler domain: run state, trigger outcomes and month keys."""

from tenure_batch.domain.schedule import month_key, parse_month_key, should_run
from tenure_batch.domain.types import RunState, TriggerOutcome, TriggerResult

__all__ = [
    "RunState",
    "TriggerOutcome",
    "TriggerResult",
    "month_key",
    "parse_month_key",
    "should_run",
]

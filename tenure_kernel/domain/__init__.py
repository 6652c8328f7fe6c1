"""Pure kernel domain types (time abstraction)."""

from tenure_kernel.domain.clock import Clock, DeterministicClock, SystemClock

__all__ = ["Clock", "DeterministicClock", "SystemClock"]

"""
Pure monthly-dedupe evaluation for the reconciliation scheduler.

A sweep runs at most once per calendar month.  The month is identified
by the key ``"<year>-<monthIndex>"`` with a 0-based month index
(January is ``"2025-0"``, December is ``"2025-11"``), the format already
persisted by earlier deployments.
"""

from __future__ import annotations

from datetime import date


def month_key(moment: date) -> str:
    """Checkpoint key of the calendar month containing ``moment``."""
    return f"{moment.year}-{moment.month - 1}"


def parse_month_key(key: str) -> tuple[int, int]:
    """Split a month key into ``(year, month_index)``.

    Raises:
        ValueError: If ``key`` is not a valid month key.
    """
    year_text, sep, month_text = key.partition("-")
    if not sep:
        raise ValueError(f"Invalid month key: {key!r}")
    year, month_index = int(year_text), int(month_text)
    if not 0 <= month_index <= 11:
        raise ValueError(f"Month index out of range in key: {key!r}")
    return year, month_index


def should_run(current_key: str, last_checkpoint: str | None) -> bool:
    """True when the current month has not been swept yet."""
    return current_key != last_checkpoint

#!/usr/bin/env python3
"""
Run the tenure reconciliation sweep against a directory snapshot.

The snapshot is a JSON file with the raw directory records (keys
``employees``, ``catalog``, ``assigned_concepts`` and optionally
``profiles``).  By default the run goes through the scheduler, so it is
skipped when the current month was already swept; ``--force`` runs the
sweep regardless and leaves the checkpoint untouched.

Usage:
  python3 scripts/run_tenure_sweep.py --snapshot directory.json \\
    [--config tenure.yaml] [--as-of 2025-06-01] [--force] [--write-back] \\
    [--database-url sqlite:///tenure_checkpoints.db] [--verbose]

Output: one JSON line with the outcome and the updated / error counts.
Exit status is 1 when the sweep failed as a whole, 0 otherwise.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from datetime import date, datetime, time, timezone
from pathlib import Path

from tenure_batch.domain.types import TriggerOutcome
from tenure_batch.orchestrator import TenureOrchestrator
from tenure_config.loader import load_config
from tenure_config.schema import StorageConfig
from tenure_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from tenure_kernel.exceptions import TenureEngineError
from tenure_kernel.logging_config import configure_logging
from tenure_services.directory import InMemoryEmployeeDirectory


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Reconcile tenure bonuses and supplements for eligible employees.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--snapshot",
        type=Path,
        required=True,
        help="JSON snapshot of the employee directory",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration (default: packaged defaults)",
    )
    parser.add_argument(
        "--as-of",
        type=_parse_date,
        default=None,
        help="Evaluate tenure and the month checkpoint as of this date (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Run even if this month was already swept; checkpoint is not touched",
    )
    parser.add_argument(
        "--write-back",
        action="store_true",
        help="Write the updated directory back to the snapshot file",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="Checkpoint database URL (overrides the configuration)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log at DEBUG level",
    )
    return parser


def _clock_for(as_of: date | None) -> Clock:
    if as_of is None:
        return SystemClock()
    return DeterministicClock(datetime.combine(as_of, time(12, 0), tzinfo=timezone.utc))


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO, stream=sys.stderr)

    if not args.snapshot.exists():
        print(f"Snapshot not found: {args.snapshot}", file=sys.stderr)
        return 1

    config = load_config(args.config)
    if args.database_url:
        config = dataclasses.replace(config, storage=StorageConfig(database_url=args.database_url))

    directory = InMemoryEmployeeDirectory.from_snapshot(args.snapshot)
    orchestrator = TenureOrchestrator.from_config(
        config, directory, clock=_clock_for(args.as_of),
    )

    if args.force:
        try:
            run_result = orchestrator.run_now(args.as_of)
        except TenureEngineError as exc:
            print(json.dumps({"outcome": "failed", "error_code": exc.code, "error": str(exc)}))
            return 1
        summary = {
            "outcome": "completed",
            "updated": run_result.updated,
            "errors": run_result.errors,
        }
        failed = False
    else:
        trigger_result = orchestrator.create_scheduler().trigger()
        summary = {
            "outcome": trigger_result.outcome.value,
            "month_key": trigger_result.month_key,
            "updated": trigger_result.updated,
            "errors": trigger_result.errors,
        }
        if trigger_result.error_code:
            summary["error_code"] = trigger_result.error_code
        failed = trigger_result.outcome is TriggerOutcome.FAILED

    if args.write_back and not failed:
        directory.dump_snapshot(args.snapshot)

    print(json.dumps(summary))
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())

"""
Typed Exception Hierarchy for the tenure reconciliation engine.

Every error has a TYPED exception class (catch by type, not message), a
``code`` class attribute (machine-readable, log-safe) and carries
structured data as attributes rather than only a message string.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    TenureEngineError (base)
    |
    +-- HireDateParseError
    |
    +-- ReconciliationError
    |   +-- FetchError
    |   +-- UpdateError
    |
    +-- BatchFatalError
    |
    +-- CheckpointError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                   | When Raised / Recovery
----------------|------------------------|-----------------------------------------
Tenure          | HIRE_DATE_UNPARSEABLE  | Hire date missing or malformed.
                |                        | Recovered locally: tenure = 0.
----------------|------------------------|-----------------------------------------
Reconciliation  | FETCH_FAILED           | Profile / assigned concepts lookup failed
                |                        | for one employee. Employee skipped.
                | UPDATE_FAILED          | Replacement write failed for one employee.
                |                        | Employee skipped.
----------------|------------------------|-----------------------------------------
Batch           | BATCH_FATAL            | Employee list or catalog unavailable.
                |                        | Run aborted, checkpoint NOT advanced.
----------------|------------------------|-----------------------------------------
Checkpoint      | CHECKPOINT_ERROR       | Checkpoint store read/write failed.
"""


class TenureEngineError(Exception):
    """
    Base exception for all tenure engine errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "TENURE_ENGINE_ERROR"


class HireDateParseError(TenureEngineError):
    """Hire date is absent or cannot be parsed as a calendar date."""

    code: str = "HIRE_DATE_UNPARSEABLE"

    def __init__(self, raw_value: object):
        self.raw_value = raw_value
        super().__init__(f"Cannot parse hire date: {raw_value!r}")


# Reconciliation-related exceptions


class ReconciliationError(TenureEngineError):
    """Base exception for per-employee reconciliation failures."""

    code: str = "RECONCILIATION_ERROR"

    def __init__(self, legajo: int, message: str):
        self.legajo = legajo
        super().__init__(message)


class FetchError(ReconciliationError):
    """A directory lookup for one employee failed."""

    code: str = "FETCH_FAILED"

    def __init__(self, legajo: int, resource: str, reason: str = ""):
        self.resource = resource
        self.reason = reason
        message = f"Failed to fetch {resource} for employee {legajo}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(legajo, message)


class UpdateError(ReconciliationError):
    """The full-replacement update for one employee failed."""

    code: str = "UPDATE_FAILED"

    def __init__(self, legajo: int, reason: str = ""):
        self.reason = reason
        message = f"Failed to update assigned concepts for employee {legajo}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(legajo, message)


# Batch-related exceptions


class BatchFatalError(TenureEngineError):
    """A shared input of the sweep (employee list, catalog) is unavailable."""

    code: str = "BATCH_FATAL"

    def __init__(self, stage: str, reason: str = ""):
        self.stage = stage
        self.reason = reason
        message = f"Reconciliation sweep aborted at stage '{stage}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class CheckpointError(TenureEngineError):
    """The checkpoint store could not be read or written."""

    code: str = "CHECKPOINT_ERROR"

    def __init__(self, key: str, operation: str, reason: str = ""):
        self.key = key
        self.operation = operation
        self.reason = reason
        message = f"Checkpoint {operation} failed for key '{key}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)

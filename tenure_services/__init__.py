"""
tenure_services -- Package init and public API.

Responsibility:
    Stateful orchestration over the pure engines (tenure_engines/): the
    directory collaborator contracts, the boundary mapping of raw
    directory records, and the reconciliation service.

Architecture position:
    Services -- may import tenure_engines and tenure_kernel.
    tenure_engines and tenure_kernel must never import from this package.
"""

from tenure_services.directory import (
    AssignmentUpdater,
    EmployeeDirectory,
    InMemoryEmployeeDirectory,
)
from tenure_services.reconciliation_service import (
    EmployeeReconciliation,
    ReconciliationRunResult,
    TenureReconciliationService,
)

__all__ = [
    "AssignmentUpdater",
    "EmployeeDirectory",
    "EmployeeReconciliation",
    "InMemoryEmployeeDirectory",
    "ReconciliationRunResult",
    "TenureReconciliationService",
]

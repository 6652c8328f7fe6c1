"""
ReconciliationPlanner -- desired vs. assigned tenure concepts.

Contract:
    Given an employee's current assignments, the resolved tenure catalog
    and an ``EntitlementDecision``, produce the FULL replacement list of
    assignments plus a ``changed`` flag.  The update collaborator replaces
    the whole list, so every record that is not a tenure concept is
    carried through verbatim and in its original order.

Architecture: tenure_engines -- pure calculation, zero I/O.

Invariants enforced:
    - The fixed tenure bonus is never created and never removed; only its
      quantity is corrected.
    - At most one tiered supplement survives.  Every assigned supplement
      is dropped and the correct one (if any) is appended as a new record,
      so drifted state with several supplements is normalized on every run.
    - Records of other concept types pass through unchanged.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from tenure_engines.catalog import TenureCatalog
from tenure_engines.domain import AssignedConcept, EntitlementDecision, ReconciliationPlan
from tenure_engines.tracer import traced_engine
from tenure_kernel.logging_config import get_logger

logger = get_logger("engines.planner")

DEFAULT_OWNED_CONCEPT_TYPE = "CONCEPTO_LYF"


@traced_engine(
    "reconciliation_planner", "1.0",
    fingerprint_fields=("current", "catalog", "decision", "owned_concept_type"),
)
def plan_reconciliation(
    *,
    current: Sequence[AssignedConcept],
    catalog: TenureCatalog,
    decision: EntitlementDecision,
    owned_concept_type: str = DEFAULT_OWNED_CONCEPT_TYPE,
) -> ReconciliationPlan:
    """Build the replacement assignment list for one employee."""
    records: list[AssignedConcept] = []
    changes: list[str] = []
    prior_supplement_ids: list[int] = []
    fixed_bonus_changed = False
    target_quantity = decision.fixed_bonus_quantity

    for record in current:
        owned = record.concept_type == owned_concept_type

        if owned and catalog.is_supplement(record.reference_id):
            prior_supplement_ids.append(record.reference_id)
            continue

        is_fixed_bonus = (
            owned
            and catalog.fixed_bonus_id is not None
            and record.reference_id == catalog.fixed_bonus_id
        )
        if (
            is_fixed_bonus
            and target_quantity is not None
            and record.quantity != target_quantity
        ):
            changes.append(
                f"Fixed tenure bonus: {record.quantity} -> {target_quantity} years."
            )
            record = replace(record, quantity=target_quantity)
            fixed_bonus_changed = True

        records.append(record)

    target_id = catalog.supplement_id_for(decision.supplement_tier)
    if decision.supplement_tier is not None and target_id is None:
        logger.warning(
            "supplement_tier_not_in_catalog",
            extra={"tier": decision.supplement_tier.value},
        )

    resulting_supplement_ids: list[int] = []
    if target_id is not None:
        records.append(AssignedConcept(
            concept_type=owned_concept_type,
            reference_id=target_id,
            quantity=1,
            assignment_id=None,
        ))
        resulting_supplement_ids.append(target_id)

    supplement_changed = sorted(prior_supplement_ids) != resulting_supplement_ids
    if supplement_changed:
        tier_label = decision.supplement_tier.value if decision.supplement_tier else ""
        if target_id is None:
            changes.append("Tenure supplement: removed.")
        elif prior_supplement_ids:
            changes.append(f"Tenure supplement: replaced by tier {tier_label}.")
        else:
            changes.append(f"Tenure supplement: assigned tier {tier_label}.")

    return ReconciliationPlan(
        records=tuple(records),
        changed=fixed_bonus_changed or supplement_changed,
        changes=tuple(changes),
    )

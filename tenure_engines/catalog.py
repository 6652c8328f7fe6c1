"""
Catalog tier mapping -- concept catalog entries to tenure roles.

The directory catalog identifies concepts only by display name, so the
engine locates the fixed tenure bonus and the supplement tiers by
normalized name matching.  The matching rules are data
(``CatalogMatching``), supplied by configuration; this module applies
them once per sweep and hands the planner plain ids.

Architecture: tenure_engines -- pure calculation, zero I/O.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from tenure_engines.domain import ConceptCatalogEntry, ConceptCategory, SupplementTier
from tenure_engines.normalize import normalize_text
from tenure_kernel.logging_config import get_logger

logger = get_logger("engines.catalog")

DEFAULT_TIER_FRAGMENTS: Mapping[SupplementTier, tuple[str, ...]] = MappingProxyType({
    SupplementTier.MALE_10_TO_24: ("entre 10", "24"),
    SupplementTier.MALE_25_PLUS: ("mas de 25",),
    SupplementTier.FEMALE_10_TO_21: ("entre 10", "21"),
    SupplementTier.FEMALE_22_PLUS: ("mas de 22",),
})


@dataclass(frozen=True)
class CatalogMatching:
    """Name patterns that identify tenure concepts in the catalog.

    Patterns and fragments are normalized on construction and compared
    against ``normalize_text(name)``, so configuration may spell them with
    accents and capitals.
    """

    fixed_bonus_patterns: tuple[str, ...] = ("bonif antiguedad",)
    supplement_patterns: tuple[str, ...] = ("suplemento antiguedad",)
    tier_fragments: Mapping[SupplementTier, tuple[str, ...]] = field(
        default_factory=lambda: DEFAULT_TIER_FRAGMENTS,
    )

    def __post_init__(self):
        fixed = tuple(normalize_text(p) for p in self.fixed_bonus_patterns)
        supplement = tuple(normalize_text(p) for p in self.supplement_patterns)
        if not fixed or not all(fixed):
            raise ValueError("fixed_bonus_patterns must not be empty")
        if not supplement or not all(supplement):
            raise ValueError("supplement_patterns must not be empty")
        missing = set(SupplementTier) - set(self.tier_fragments)
        if missing:
            raise ValueError(
                f"tier_fragments missing tiers: {sorted(t.value for t in missing)}"
            )
        fragments_by_tier = {}
        for tier, fragments in self.tier_fragments.items():
            normalized = tuple(normalize_text(f) for f in fragments)
            if not normalized or not all(normalized):
                raise ValueError(f"tier_fragments for '{tier.value}' must not be empty")
            fragments_by_tier[tier] = normalized

        # Frozen: patterns are stored in the same normal form as the names
        object.__setattr__(self, "fixed_bonus_patterns", fixed)
        object.__setattr__(self, "supplement_patterns", supplement)
        object.__setattr__(self, "tier_fragments", MappingProxyType(fragments_by_tier))

    def classify(self, name: str) -> ConceptCategory:
        """Category of a catalog entry, judged by its name."""
        normalized = normalize_text(name)
        if any(p in normalized for p in self.supplement_patterns):
            return ConceptCategory.TIERED_TENURE_SUPPLEMENT
        if any(p in normalized for p in self.fixed_bonus_patterns):
            return ConceptCategory.FIXED_TENURE_BONUS
        return ConceptCategory.OTHER

    def tier_of(self, name: str) -> SupplementTier | None:
        """Tier whose fragments all occur in ``name``, if exactly one does."""
        normalized = normalize_text(name)
        matches = [
            tier
            for tier, fragments in self.tier_fragments.items()
            if all(fragment in normalized for fragment in fragments)
        ]
        return matches[0] if len(matches) == 1 else None


@dataclass(frozen=True)
class TenureCatalog:
    """Catalog ids the planner works with."""

    fixed_bonus_id: int | None
    supplement_ids: frozenset[int]
    tier_ids: Mapping[SupplementTier, int] = field(default_factory=dict)

    def supplement_id_for(self, tier: SupplementTier | None) -> int | None:
        if tier is None:
            return None
        return self.tier_ids.get(tier)

    def is_supplement(self, reference_id: int) -> bool:
        return reference_id in self.supplement_ids


def resolve_tenure_catalog(
    entries: Iterable[ConceptCatalogEntry],
    matching: CatalogMatching | None = None,
) -> TenureCatalog:
    """Locate the fixed bonus and the supplement tiers in ``entries``.

    Entries already tagged with a tenure category keep it; untagged ones
    are classified by name.  When several entries claim the same role the
    first one in catalog order wins and the clash is logged.
    """
    matching = matching or CatalogMatching()
    fixed_bonus_id: int | None = None
    supplement_ids: set[int] = set()
    tier_ids: dict[SupplementTier, int] = {}

    for entry in entries:
        category = entry.category
        if category == ConceptCategory.OTHER:
            category = matching.classify(entry.name)

        if category == ConceptCategory.FIXED_TENURE_BONUS:
            if fixed_bonus_id is None:
                fixed_bonus_id = entry.concept_id
            elif fixed_bonus_id != entry.concept_id:
                logger.warning(
                    "catalog_duplicate_fixed_bonus",
                    extra={"kept_id": fixed_bonus_id, "ignored_id": entry.concept_id},
                )
        elif category == ConceptCategory.TIERED_TENURE_SUPPLEMENT:
            supplement_ids.add(entry.concept_id)
            tier = matching.tier_of(entry.name)
            if tier is None:
                logger.warning(
                    "catalog_supplement_without_tier",
                    extra={"concept_id": entry.concept_id, "concept_name": entry.name},
                )
            elif tier in tier_ids:
                logger.warning(
                    "catalog_duplicate_supplement_tier",
                    extra={
                        "tier": tier.value,
                        "kept_id": tier_ids[tier],
                        "ignored_id": entry.concept_id,
                    },
                )
            else:
                tier_ids[tier] = entry.concept_id

    if fixed_bonus_id is None:
        logger.warning("catalog_fixed_bonus_not_found")

    return TenureCatalog(
        fixed_bonus_id=fixed_bonus_id,
        supplement_ids=frozenset(supplement_ids),
        tier_ids=MappingProxyType(tier_ids),
    )

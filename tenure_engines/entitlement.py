"""
EntitlementResolver -- tenure + gender to benefit entitlement.

Architecture: tenure_engines -- pure calculation, zero I/O.  Returns an
abstract ``SupplementTier``; mapping a tier onto a concrete catalog
entry is the job of ``tenure_engines.catalog``.

Brackets (inclusive):

    gender   no tier   lower tier        upper tier
    male     0-9       10-24 ("10-24")   25+ ("25+")
    female   0-9       10-21 ("10-21")   22+ ("22+")
    other    always no tier
"""

from __future__ import annotations

from tenure_engines.domain import EntitlementDecision, Gender, SupplementTier
from tenure_engines.normalize import normalize_text

SUPPLEMENT_MIN_YEARS = 10

_GENDER_ALIASES: dict[str, Gender] = {
    "m": Gender.MALE,
    "masculino": Gender.MALE,
    "male": Gender.MALE,
    "hombre": Gender.MALE,
    "varon": Gender.MALE,
    "f": Gender.FEMALE,
    "femenino": Gender.FEMALE,
    "female": Gender.FEMALE,
    "mujer": Gender.FEMALE,
}

# (first year of the upper tier, lower tier, upper tier)
_BRACKETS: dict[Gender, tuple[int, SupplementTier, SupplementTier]] = {
    Gender.MALE: (25, SupplementTier.MALE_10_TO_24, SupplementTier.MALE_25_PLUS),
    Gender.FEMALE: (22, SupplementTier.FEMALE_10_TO_21, SupplementTier.FEMALE_22_PLUS),
}


def normalize_gender(code: str | None) -> Gender:
    """Map a raw directory gender code onto ``Gender``."""
    return _GENDER_ALIASES.get(normalize_text(code), Gender.OTHER)


def supplement_tier_for(years: int, gender: Gender) -> SupplementTier | None:
    """Tier of the tenure supplement for ``years`` of service, if any."""
    if years < SUPPLEMENT_MIN_YEARS:
        return None
    bracket = _BRACKETS.get(gender)
    if bracket is None:
        return None
    upper_from, lower, upper = bracket
    return upper if years >= upper_from else lower


def resolve_entitlement(years: int, gender_code: str | None) -> EntitlementDecision:
    """Decide the fixed bonus quantity and supplement tier.

    Employees with less than one completed year get
    ``fixed_bonus_quantity=None``: they are left out of fixed-bonus
    processing altogether.
    """
    return EntitlementDecision(
        fixed_bonus_quantity=years if years >= 1 else None,
        supplement_tier=supplement_tier_for(years, normalize_gender(gender_code)),
    )

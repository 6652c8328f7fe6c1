"""
TenureCalculator -- completed years of service.

Pure function of the hire date and an injected "as of" date.  A hire
date that is missing or cannot be parsed counts as zero years; the parse
failure is logged and never propagated.
"""

from __future__ import annotations

import re
from datetime import date, datetime

from tenure_kernel.exceptions import HireDateParseError
from tenure_kernel.logging_config import get_logger

logger = get_logger("engines.tenure")

HireDateInput = date | datetime | str | None

# "2010-5-3" as well as "2010-05-03"
_UNPADDED_DATE = re.compile(r"(\d{4})-(\d{1,2})-(\d{1,2})")


def parse_hire_date(value: HireDateInput) -> date:
    """Coerce a hire date from the directory into a ``date``.

    Accepts ``date``, ``datetime``, ``YYYY-M-D`` (zero padding optional)
    and ISO datetime strings (a trailing ``Z`` is tolerated).

    Raises:
        HireDateParseError: If the value is absent or not a valid date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise HireDateParseError(value)

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        short = _UNPADDED_DATE.fullmatch(text)
        if short:
            return date(*(int(part) for part in short.groups()))
        return datetime.fromisoformat(text).date()
    except ValueError:
        raise HireDateParseError(value) from None


def completed_years(hire_date: HireDateInput, as_of: date) -> int:
    """Whole years of service between ``hire_date`` and ``as_of``.

    The count drops by one while this year's anniversary (month/day) has
    not been reached yet.  Never negative.
    """
    try:
        hired = parse_hire_date(hire_date)
    except HireDateParseError as exc:
        logger.debug(
            "hire_date_unparseable",
            extra={"raw_value": exc.raw_value, "error_code": exc.code},
        )
        return 0

    years = as_of.year - hired.year
    if (as_of.month, as_of.day) < (hired.month, hired.day):
        years -= 1
    return max(0, years)

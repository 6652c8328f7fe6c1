"""Case-, accent- and whitespace-insensitive text normalization."""

from __future__ import annotations

import re
import unicodedata

_WHITESPACE = re.compile(r"\s+")


def normalize_text(value: object) -> str:
    """Lowercase ``value``, strip diacritics and collapse whitespace.

    ``None`` normalizes to the empty string.

        >>> normalize_text("  Suplemento  Antigüedad ")
        'suplemento antiguedad'
    """
    text = unicodedata.normalize("NFKD", str(value or ""))
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    return _WHITESPACE.sub(" ", text).strip().lower()

"""Text helpers shared by lookup and search."""

from __future__ import annotations

import unicodedata
from typing import Any
from typing import Optional


def normalize_query(value: Optional[str]) -> str:
    """Lowercase and trim a search query.

    Args:
        value: Raw text typed by the user, or None.

    Returns:
        The normalized query; empty when the input is None or whitespace.
    """
    if not value:
        return ""
    return value.lower().strip()


def normalize_name(value: Any) -> str:
    """Normalize a dataset value for name comparisons."""
    if value is None:
        return ""
    return str(value).lower().strip()


def sort_key(name: str) -> tuple[str, str]:
    """Locale-aware sort key for display names.

    Accents and case are ignored at the primary level ("Ñ" sorts with
    "N"), with the raw name as a tie-breaker so the order is total.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), name


def coerce_code(value: Any) -> Optional[str]:
    """Coerce a dataset code (str or number) to a string, None when blank."""
    if value is None:
        return None
    code = str(value).strip()
    return code or None

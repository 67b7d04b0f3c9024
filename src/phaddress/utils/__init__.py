"""Utility modules for the address resolver."""

from phaddress.utils.logging import (
    clear_form_context,
    configure_logging,
    form_context,
    get_logger,
    set_form_context,
)
from phaddress.utils.text import (
    coerce_code,
    normalize_name,
    normalize_query,
    sort_key,
)

__all__ = [
    "clear_form_context",
    "coerce_code",
    "configure_logging",
    "form_context",
    "get_logger",
    "normalize_name",
    "normalize_query",
    "set_form_context",
    "sort_key",
]

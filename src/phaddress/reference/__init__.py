"""Static reference datasets for the location hierarchy."""

from phaddress.reference.loader import (
    ReferenceData,
    clear_reference_cache,
    load_reference_data,
)

__all__ = [
    "ReferenceData",
    "clear_reference_cache",
    "load_reference_data",
]

"""Philippine address hierarchy: cached lookups and cascading selection."""

from phaddress.address import AddressValue, validate_address
from phaddress.exceptions import (
    AppError,
    ConfigurationError,
    NotFoundError,
    ReferenceDataError,
    ValidationError,
)
from phaddress.lookup import LocationResolver, LookupCache
from phaddress.models import (
    Barangay,
    ChildLookup,
    City,
    LocationLevel,
    LookupStatus,
    PartialSelection,
    Province,
    Region,
    SelectionState,
)
from phaddress.reference import ReferenceData, load_reference_data
from phaddress.search import filter_and_rank, search_locations
from phaddress.selection import SelectionMachine

__all__ = [
    "AddressValue",
    "AppError",
    "Barangay",
    "ChildLookup",
    "City",
    "ConfigurationError",
    "LocationLevel",
    "LocationResolver",
    "LookupCache",
    "LookupStatus",
    "NotFoundError",
    "PartialSelection",
    "Province",
    "ReferenceData",
    "ReferenceDataError",
    "Region",
    "SelectionMachine",
    "SelectionState",
    "ValidationError",
    "filter_and_rank",
    "load_reference_data",
    "search_locations",
    "validate_address",
]

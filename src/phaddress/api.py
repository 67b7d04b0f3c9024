"""Module-level entry points bound to a process-wide default resolver.

Hosts that need isolated caches (tests, multiple datasets) should build a
``LocationResolver`` themselves instead.
"""

from __future__ import annotations

from typing import Iterable
from typing import Optional
from typing import Tuple

from phaddress import selection
from phaddress.config import get_database_url
from phaddress.lookup import LocationResolver
from phaddress.lookup import LookupCache
from phaddress.models import AnyLocation
from phaddress.models import Barangay
from phaddress.models import City
from phaddress.models import Province
from phaddress.models import Region
from phaddress.models import SelectionState
from phaddress.reference.loader import ReferenceData
from phaddress.reference.loader import load_reference_data
from phaddress.search import filter_and_rank as _filter_and_rank
from phaddress.selection import Level
from phaddress.utils.logging import get_logger

logger = get_logger(__name__)

_RESOLVER_CACHE: dict[str, LocationResolver] = {}


def _load_default_data() -> ReferenceData:
    """Load from PHADDRESS_DATABASE_URL when set, else from JSON files."""
    if get_database_url():
        from sqlalchemy.orm import Session

        from phaddress.db import get_engine, load_reference_data_from_db

        with Session(get_engine()) as session:
            return load_reference_data_from_db(session)
    return load_reference_data()


def get_resolver() -> LocationResolver:
    """Return the default resolver, building it on first use."""
    if "default" not in _RESOLVER_CACHE:
        _RESOLVER_CACHE["default"] = LocationResolver(
            _load_default_data(), LookupCache()
        )
    return _RESOLVER_CACHE["default"]


def reset_default_resolver() -> None:
    """Forget the default resolver so the next call reloads it."""
    _RESOLVER_CACHE.clear()


def list_regions() -> Tuple[Region, ...]:
    return get_resolver().list_regions()


def list_provinces_of(region_code: Optional[str]) -> Tuple[Province, ...]:
    return get_resolver().list_provinces_of(region_code)


def list_cities_of(province_code: Optional[str]) -> Tuple[City, ...]:
    return get_resolver().list_cities_of(province_code)


def list_barangays_of(city_code: Optional[str]) -> Tuple[Barangay, ...]:
    return get_resolver().list_barangays_of(city_code)


def filter_and_rank(
    nodes: Iterable[AnyLocation],
    query: Optional[str],
) -> Tuple[AnyLocation, ...]:
    return _filter_and_rank(nodes, query)


def select(state: SelectionState, level: Level, node: AnyLocation) -> SelectionState:
    return selection.select(state, level, node)


def type_text(
    state: SelectionState,
    level: Level,
    text: Optional[str],
    invalidate_on_type: bool = False,
) -> SelectionState:
    return selection.type_text(state, level, text, invalidate_on_type=invalidate_on_type)


def clear_all() -> SelectionState:
    return selection.clear_all()


def clear_cache() -> None:
    """Empty the default resolver's lookup cache, if it was built."""
    resolver = _RESOLVER_CACHE.get("default")
    if resolver is not None:
        resolver.clear_cache()

"""Cached per-parent lookups over the reference datasets.

``LocationResolver`` answers "which provinces belong to this region" (and
the same for cities and barangays) by scanning the child dataset once per
parent code and keeping the result in an explicitly owned ``LookupCache``.
Repeated lookups for the same parent return the identical tuple until the
cache is cleared.
"""

from __future__ import annotations

from typing import Any
from typing import Callable
from typing import Optional
from typing import Tuple
from typing import Union

from phaddress.exceptions import ValidationError
from phaddress.models import AnyLocation
from phaddress.models import Barangay
from phaddress.models import City
from phaddress.models import LocationLevel
from phaddress.models import PostalCode
from phaddress.models import Province
from phaddress.models import Region
from phaddress.reference.loader import ReferenceData
from phaddress.reference.rows import NODE_FACTORIES
from phaddress.reference.rows import row_code
from phaddress.reference.rows import row_parent_code
from phaddress.utils.logging import get_logger
from phaddress.utils.text import coerce_code
from phaddress.utils.text import normalize_name

logger = get_logger(__name__)

# Level tags accepted by get_location_by_code for postal codes
POSTAL_CODE_TAGS = frozenset({"postal_code", "postalcode"})


def _postal_code_from_row(row: Any) -> PostalCode:
    code = str(coerce_code(row.get("postal_code")))
    city = str(row.get("city_name") or "")
    region = row.get("region_desc")
    return PostalCode(
        id=code,
        code=code,
        name=code,
        city=city,
        municipality=city,
        region=None if region is None else str(region),
    )


class LookupCache:
    """Per-level child lists keyed by parent code.

    Entries are inserted once and never evicted; ``clear`` empties every
    map. ``computations`` counts dataset scans, which makes cache hits
    observable.
    """

    def __init__(self) -> None:
        self.provinces: dict[str, Tuple[Province, ...]] = {}
        self.cities: dict[str, Tuple[City, ...]] = {}
        self.barangays: dict[str, Tuple[Barangay, ...]] = {}
        self.postal_codes: dict[str, Tuple[PostalCode, ...]] = {}
        self.computations = 0

    def for_level(self, level: LocationLevel) -> dict[str, Tuple[Any, ...]]:
        """Return the map holding children of the given (child) level."""
        maps = {
            LocationLevel.PROVINCE: self.provinces,
            LocationLevel.CITY: self.cities,
            LocationLevel.BARANGAY: self.barangays,
        }
        if level not in maps:
            raise KeyError(level)
        return maps[level]

    def __len__(self) -> int:
        return (
            len(self.provinces)
            + len(self.cities)
            + len(self.barangays)
            + len(self.postal_codes)
        )

    def clear(self) -> None:
        """Empty all maps. Idempotent."""
        self.provinces.clear()
        self.cities.clear()
        self.barangays.clear()
        self.postal_codes.clear()


class LocationResolver:
    """Region > province > city > barangay lookups with memoization."""

    def __init__(
        self,
        data: ReferenceData,
        cache: Optional[LookupCache] = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            data: Loaded reference datasets.
            cache: Cache to fill. A fresh one is created when omitted.
        """
        self._data = data
        self._cache = cache if cache is not None else LookupCache()
        self._regions: Optional[Tuple[Region, ...]] = None

    @property
    def data(self) -> ReferenceData:
        return self._data

    @property
    def cache(self) -> LookupCache:
        return self._cache

    def list_regions(self) -> Tuple[Region, ...]:
        """Return all regions in dataset order."""
        if self._regions is None:
            self._regions = self._data.regions()
        return self._regions

    def list_provinces_of(self, region_code: Optional[str]) -> Tuple[Province, ...]:
        """Return the provinces of a region, or () when no region is given."""
        return self._children(LocationLevel.PROVINCE, region_code)

    def list_cities_of(self, province_code: Optional[str]) -> Tuple[City, ...]:
        """Return the cities of a province, or () when no province is given."""
        return self._children(LocationLevel.CITY, province_code)

    def list_barangays_of(self, city_code: Optional[str]) -> Tuple[Barangay, ...]:
        """Return the barangays of a city, or () when no city is given."""
        return self._children(LocationLevel.BARANGAY, city_code)

    def children_of(
        self,
        level: Union[LocationLevel, str],
        parent_code: Optional[str],
    ) -> Tuple[AnyLocation, ...]:
        """Return the nodes of ``level`` whose parent has ``parent_code``.

        Regions have no parent, so ``level="region"`` returns every region
        regardless of the code.
        """
        level = LocationLevel.parse(level)
        if level is LocationLevel.REGION:
            return self.list_regions()
        return self._children(level, parent_code)

    def _children(
        self,
        level: LocationLevel,
        parent_code: Optional[str],
    ) -> Tuple[Any, ...]:
        if not parent_code:
            return ()

        entries = self._cache.for_level(level)
        key = str(parent_code)
        cached = entries.get(key)
        if cached is not None:
            return cached

        factory: Callable[[Any], Any] = NODE_FACTORIES[level]
        children = tuple(
            factory(row)
            for row in self._data.rows(level)
            if row_parent_code(row, level) == key
        )
        self._cache.computations += 1
        entries[key] = children
        logger.debug(
            "Child lookup computed",
            extra={"context": {"level": level.value, "parent": key, "count": len(children)}},
        )
        return children

    def get_location_by_code(
        self,
        code: Optional[str],
        level: Union[LocationLevel, str],
    ) -> Optional[Union[AnyLocation, PostalCode]]:
        """Find a node by its own code at any level.

        The ``postal_code`` tag (also ``postalCode``) finds the first city
        carrying that postal code and returns it as a ``PostalCode``.

        Returns:
            The node, or None if the code is empty, unknown, or the level
            tag is not recognized.
        """
        if not code:
            return None
        if str(level).strip().lower() in POSTAL_CODE_TAGS:
            return next(
                (
                    _postal_code_from_row(row)
                    for row in self._data.city_rows
                    if coerce_code(row.get("postal_code")) == str(code)
                ),
                None,
            )
        try:
            level = LocationLevel.parse(level)
        except ValidationError:
            return None
        key = str(code)
        if level is LocationLevel.REGION:
            return next((r for r in self.list_regions() if r.code == key), None)
        for row in self._data.rows(level):
            if row_code(row, level) == key:
                return NODE_FACTORIES[level](row)
        return None

    def get_postal_codes(
        self,
        region_name: str = "",
        city_name: str = "",
        barangay_name: str = "",
    ) -> Tuple[PostalCode, ...]:
        """Return postal codes for a city, optionally scoped to a region.

        City names match loosely: equal, or either one containing the
        other. The region, when given, must equal the city's region code.
        Results are deduplicated by code and sorted by code.
        """
        region = normalize_name(region_name)
        city = normalize_name(city_name)
        barangay = normalize_name(barangay_name)

        key = f"{region}|{city}|{barangay}"
        cached = self._cache.postal_codes.get(key)
        if cached is not None:
            return cached

        if not city:
            self._cache.postal_codes[key] = ()
            return ()

        by_code: dict[str, PostalCode] = {}
        for row in self._data.city_rows:
            row_city = normalize_name(row.get("city_name"))
            if not (row_city == city or city in row_city or row_city in city):
                continue
            row_region = row.get("region_desc")
            if region and normalize_name(row_region) != region:
                continue
            code = coerce_code(row.get("postal_code"))
            if code is None or code in by_code:
                continue
            by_code[code] = _postal_code_from_row(row)

        result = tuple(by_code[code] for code in sorted(by_code))
        self._cache.computations += 1
        self._cache.postal_codes[key] = result
        return result

    def clear_cache(self) -> None:
        """Empty every cached lookup. Idempotent."""
        self._cache.clear()
        logger.debug("Lookup cache cleared")

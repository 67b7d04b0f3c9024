"""Mapping from raw PSGC dataset rows to location nodes."""

from __future__ import annotations

from typing import Any
from typing import Mapping
from typing import Optional

from phaddress.models import Barangay
from phaddress.models import City
from phaddress.models import LocationLevel
from phaddress.models import Province
from phaddress.models import Region
from phaddress.utils.text import coerce_code

# Raw field linking a child row to its parent, per child level
PARENT_FIELDS: dict[LocationLevel, str] = {
    LocationLevel.PROVINCE: "region_code",
    LocationLevel.CITY: "province_code",
    LocationLevel.BARANGAY: "city_code",
}

# Raw field holding each row's own code
CODE_FIELDS: dict[LocationLevel, str] = {
    LocationLevel.REGION: "region_code",
    LocationLevel.PROVINCE: "province_code",
    LocationLevel.CITY: "city_code",
    LocationLevel.BARANGAY: "brgy_code",
}

# Raw field holding each row's display name
NAME_FIELDS: dict[LocationLevel, str] = {
    LocationLevel.REGION: "region_name",
    LocationLevel.PROVINCE: "province_name",
    LocationLevel.CITY: "city_name",
    LocationLevel.BARANGAY: "brgy_name",
}


def _text(row: Mapping[str, Any], key: str) -> str:
    value = row.get(key)
    return "" if value is None else str(value)


def _code(row: Mapping[str, Any], key: str) -> Optional[str]:
    return coerce_code(row.get(key))


def row_code(row: Mapping[str, Any], level: LocationLevel) -> Optional[str]:
    """Return a raw row's own code."""
    return _code(row, CODE_FIELDS[level])


def row_parent_code(row: Mapping[str, Any], level: LocationLevel) -> Optional[str]:
    """Return a raw row's parent code, None for regions."""
    field = PARENT_FIELDS.get(level)
    return _code(row, field) if field else None


def region_from_row(row: Mapping[str, Any]) -> Region:
    return Region(
        id=_text(row, "id"),
        code=_text(row, "region_code"),
        name=_text(row, "region_name"),
        psgc_code=_code(row, "psgc_code"),
    )


def province_from_row(row: Mapping[str, Any]) -> Province:
    code = _text(row, "province_code")
    return Province(
        id=code,
        code=code,
        name=_text(row, "province_name"),
        region_code=_text(row, "region_code"),
        psgc_code=_code(row, "psgc_code"),
    )


def city_from_row(row: Mapping[str, Any]) -> City:
    # region_desc carries the region code in the PSGC city dump
    code = _text(row, "city_code")
    return City(
        id=code,
        code=code,
        name=_text(row, "city_name"),
        province_code=_text(row, "province_code"),
        region_code=_code(row, "region_desc"),
        psgc_code=_code(row, "psgc_code"),
        postal_code=_code(row, "postal_code"),
    )


def barangay_from_row(row: Mapping[str, Any]) -> Barangay:
    code = _text(row, "brgy_code")
    return Barangay(
        id=code,
        code=code,
        name=_text(row, "brgy_name"),
        city_code=_text(row, "city_code"),
        province_code=_code(row, "province_code"),
        region_code=_code(row, "region_code"),
        psgc_code=code or None,
    )


NODE_FACTORIES = {
    LocationLevel.REGION: region_from_row,
    LocationLevel.PROVINCE: province_from_row,
    LocationLevel.CITY: city_from_row,
    LocationLevel.BARANGAY: barangay_from_row,
}

"""SQL source for the reference datasets."""

from phaddress.db.engine import clear_engine_cache, get_engine
from phaddress.db.models import (
    BarangayRow,
    CityRow,
    ProvinceRow,
    ReferenceBase,
    RegionRow,
)
from phaddress.db.repository import ReferenceRepository, load_reference_data_from_db

__all__ = [
    "BarangayRow",
    "CityRow",
    "ProvinceRow",
    "ReferenceBase",
    "ReferenceRepository",
    "RegionRow",
    "clear_engine_cache",
    "get_engine",
    "load_reference_data_from_db",
]

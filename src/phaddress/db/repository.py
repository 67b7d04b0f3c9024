"""Repository for the PSGC reference tables."""

from __future__ import annotations

from typing import Any
from typing import Mapping
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from phaddress.db.models import BarangayRow
from phaddress.db.models import CityRow
from phaddress.db.models import ProvinceRow
from phaddress.db.models import RegionRow
from phaddress.reference.loader import ReferenceData
from phaddress.reference.loader import log_loaded
from phaddress.utils.logging import get_logger
from phaddress.utils.text import coerce_code

logger = get_logger(__name__)


class ReferenceRepository:
    """Repository for reading and seeding the reference tables."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy session for database operations.
        """
        self._session = session

    def get_regions(self) -> Sequence[RegionRow]:
        """Get all regions in dataset order."""
        return self._session.execute(select(RegionRow).order_by(RegionRow.id)).scalars().all()

    def get_provinces(self) -> Sequence[ProvinceRow]:
        """Get all provinces in dataset order."""
        return (
            self._session.execute(select(ProvinceRow).order_by(ProvinceRow.id))
            .scalars()
            .all()
        )

    def get_cities(self) -> Sequence[CityRow]:
        """Get all cities in dataset order."""
        return self._session.execute(select(CityRow).order_by(CityRow.id)).scalars().all()

    def get_barangays(self) -> Sequence[BarangayRow]:
        """Get all barangays in dataset order."""
        return (
            self._session.execute(select(BarangayRow).order_by(BarangayRow.id))
            .scalars()
            .all()
        )

    def import_reference_data(self, data: ReferenceData) -> dict[str, int]:
        """Insert every row of a loaded dataset.

        The caller owns the transaction and decides when to commit.

        Args:
            data: Reference data, typically from the bundled JSON files.

        Returns:
            Number of rows inserted per level.
        """
        regions = [_region_row(row) for row in data.region_rows]
        provinces = [_province_row(row) for row in data.province_rows]
        cities = [_city_row(row) for row in data.city_rows]
        barangays = [_barangay_row(row) for row in data.barangay_rows]

        self._session.add_all(regions)
        self._session.add_all(provinces)
        self._session.add_all(cities)
        self._session.add_all(barangays)
        self._session.flush()

        counts = {
            "region": len(regions),
            "province": len(provinces),
            "city": len(cities),
            "barangay": len(barangays),
        }
        logger.info("Reference tables seeded", extra={"context": {"counts": counts}})
        return counts


def load_reference_data_from_db(session: Session) -> ReferenceData:
    """Build reference data from the SQL tables.

    Args:
        session: SQLAlchemy session bound to a seeded database.

    Returns:
        Reference data equivalent to the JSON-loaded datasets.
    """
    repo = ReferenceRepository(session)
    data = ReferenceData.from_rows(
        regions=[row.to_row() for row in repo.get_regions()],
        provinces=[row.to_row() for row in repo.get_provinces()],
        cities=[row.to_row() for row in repo.get_cities()],
        barangays=[row.to_row() for row in repo.get_barangays()],
    )
    log_loaded(data, source="database")
    return data


def _region_row(row: Mapping[str, Any]) -> RegionRow:
    region = RegionRow(
        region_code=coerce_code(row.get("region_code")),
        region_name=str(row.get("region_name") or ""),
        psgc_code=coerce_code(row.get("psgc_code")),
    )
    if row.get("id") is not None:
        region.id = int(row["id"])
    return region


def _province_row(row: Mapping[str, Any]) -> ProvinceRow:
    return ProvinceRow(
        province_code=coerce_code(row.get("province_code")),
        province_name=str(row.get("province_name") or ""),
        region_code=coerce_code(row.get("region_code")),
        psgc_code=coerce_code(row.get("psgc_code")),
    )


def _city_row(row: Mapping[str, Any]) -> CityRow:
    return CityRow(
        city_code=coerce_code(row.get("city_code")),
        city_name=str(row.get("city_name") or ""),
        province_code=coerce_code(row.get("province_code")),
        region_desc=coerce_code(row.get("region_desc")),
        psgc_code=coerce_code(row.get("psgc_code")),
        postal_code=coerce_code(row.get("postal_code")),
    )


def _barangay_row(row: Mapping[str, Any]) -> BarangayRow:
    return BarangayRow(
        brgy_code=coerce_code(row.get("brgy_code")),
        brgy_name=str(row.get("brgy_name") or ""),
        city_code=coerce_code(row.get("city_code")),
        province_code=coerce_code(row.get("province_code")),
        region_code=coerce_code(row.get("region_code")),
    )

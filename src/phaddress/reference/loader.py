"""Loading of the static PSGC reference datasets.

The four datasets (regions, provinces, cities, barangays) are bundled with
the package as JSON arrays and loaded once per process. They are read-only
for the lifetime of the process.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from typing import Iterable
from typing import Mapping
from typing import Optional
from typing import Tuple
from typing import Union

from phaddress.config import get_data_dir
from phaddress.exceptions import ReferenceDataError
from phaddress.models import LEVELS
from phaddress.models import LocationLevel
from phaddress.models import Region
from phaddress.reference.rows import region_from_row
from phaddress.reference.rows import row_code
from phaddress.reference.rows import row_parent_code
from phaddress.utils.logging import get_logger

logger = get_logger(__name__)

Row = Mapping[str, Any]

DATASET_FILES: dict[LocationLevel, str] = {
    LocationLevel.REGION: "region.json",
    LocationLevel.PROVINCE: "province.json",
    LocationLevel.CITY: "city.json",
    LocationLevel.BARANGAY: "barangay.json",
}

# Loaded datasets keyed by resolved directory
_REFERENCE_CACHE: dict[str, "ReferenceData"] = {}


@dataclass(frozen=True)
class ReferenceData:
    """Raw rows of the four reference datasets, in stored order."""

    region_rows: Tuple[Row, ...]
    province_rows: Tuple[Row, ...]
    city_rows: Tuple[Row, ...]
    barangay_rows: Tuple[Row, ...]

    @classmethod
    def from_rows(
        cls,
        regions: Iterable[Row] = (),
        provinces: Iterable[Row] = (),
        cities: Iterable[Row] = (),
        barangays: Iterable[Row] = (),
    ) -> "ReferenceData":
        return cls(
            region_rows=tuple(regions),
            province_rows=tuple(provinces),
            city_rows=tuple(cities),
            barangay_rows=tuple(barangays),
        )

    def rows(self, level: Union[LocationLevel, str]) -> Tuple[Row, ...]:
        """Return the raw rows of one level."""
        level = LocationLevel.parse(level)
        return {
            LocationLevel.REGION: self.region_rows,
            LocationLevel.PROVINCE: self.province_rows,
            LocationLevel.CITY: self.city_rows,
            LocationLevel.BARANGAY: self.barangay_rows,
        }[level]

    def regions(self) -> Tuple[Region, ...]:
        """Return all regions in stored order, without filtering."""
        return tuple(region_from_row(row) for row in self.region_rows)

    def counts(self) -> dict[str, int]:
        return {level.value: len(self.rows(level)) for level in LEVELS}

    def find_orphans(self) -> dict[LocationLevel, int]:
        """Count child rows whose parent code matches no parent row.

        Such rows are kept; they simply never match any parent lookup.
        """
        orphans: dict[LocationLevel, int] = {}
        for parent_level, child_level in zip(LEVELS, LEVELS[1:]):
            parent_codes = {
                row_code(row, parent_level) for row in self.rows(parent_level)
            }
            missing = sum(
                1
                for row in self.rows(child_level)
                if row_parent_code(row, child_level) not in parent_codes
            )
            if missing:
                orphans[child_level] = missing
        return orphans


def _read_dataset(path: Path) -> Tuple[Row, ...]:
    """Read one JSON dataset file.

    Raises:
        ReferenceDataError: If the file is missing, unreadable, or not a
            JSON array of objects.
    """
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ReferenceDataError(
            f"Reference dataset missing: {path.name}", detail=str(path)
        ) from e
    except (OSError, ValueError) as e:
        raise ReferenceDataError(
            f"Reference dataset unreadable: {path.name}", detail=str(e)
        ) from e

    if not isinstance(payload, list) or not all(
        isinstance(item, dict) for item in payload
    ):
        raise ReferenceDataError(
            f"Reference dataset must be a JSON array of objects: {path.name}"
        )
    return tuple(payload)


def load_reference_data(
    data_dir: Optional[Union[str, Path]] = None,
    use_cache: bool = True,
) -> ReferenceData:
    """Load the four reference datasets from a directory.

    Args:
        data_dir: Directory holding region.json, province.json, city.json
            and barangay.json. Defaults to the configured data directory.
        use_cache: Whether to reuse a dataset already loaded from the
            same directory.

    Returns:
        The loaded reference data.

    Raises:
        ReferenceDataError: If any dataset is missing or malformed.
    """
    directory = Path(data_dir) if data_dir is not None else get_data_dir()
    cache_key = str(directory.resolve())
    if use_cache and cache_key in _REFERENCE_CACHE:
        return _REFERENCE_CACHE[cache_key]

    datasets = {
        level: _read_dataset(directory / filename)
        for level, filename in DATASET_FILES.items()
    }
    data = ReferenceData.from_rows(
        regions=datasets[LocationLevel.REGION],
        provinces=datasets[LocationLevel.PROVINCE],
        cities=datasets[LocationLevel.CITY],
        barangays=datasets[LocationLevel.BARANGAY],
    )
    log_loaded(data, source=str(directory))

    if use_cache:
        _REFERENCE_CACHE[cache_key] = data
    return data


def log_loaded(data: ReferenceData, source: str) -> None:
    """Log dataset sizes and any referential-integrity gaps."""
    logger.info(
        "Reference data loaded",
        extra={"context": {"source": source, "counts": data.counts()}},
    )
    orphans = data.find_orphans()
    if orphans:
        logger.warning(
            "Reference data has rows with unknown parents",
            extra={
                "context": {
                    "source": source,
                    "orphans": {level.value: n for level, n in orphans.items()},
                }
            },
        )


def clear_reference_cache() -> None:
    """Forget loaded datasets (useful in tests)."""
    _REFERENCE_CACHE.clear()

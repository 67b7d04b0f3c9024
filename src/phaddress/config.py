"""Environment-driven settings."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from phaddress.exceptions import ConfigurationError

DEFAULT_RESULT_LIMIT = 100
BUNDLED_DATA_DIR = Path(__file__).resolve().parent / "data"


def get_data_dir() -> Path:
    """Resolve the reference dataset directory.

    Returns:
        PHADDRESS_DATA_DIR when set, otherwise the bundled data directory.
    """
    data_dir = os.getenv("PHADDRESS_DATA_DIR")
    if data_dir:
        return Path(data_dir).expanduser()
    return BUNDLED_DATA_DIR


def get_result_limit() -> int:
    """Return the maximum number of ranked candidates.

    Raises:
        ConfigurationError: If PHADDRESS_RESULT_LIMIT is not a positive integer.
    """
    raw = os.getenv("PHADDRESS_RESULT_LIMIT")
    if raw is None or raw.strip() == "":
        return DEFAULT_RESULT_LIMIT
    try:
        limit = int(raw)
    except ValueError as e:
        raise ConfigurationError(
            "PHADDRESS_RESULT_LIMIT", detail="must be an integer"
        ) from e
    if limit <= 0:
        raise ConfigurationError("PHADDRESS_RESULT_LIMIT", detail="must be positive")
    return limit


def invalidate_on_type() -> bool:
    """Return True if typing over a resolved slot should clear it."""

    return str(os.getenv("PHADDRESS_INVALIDATE_ON_TYPE", "")).lower() in {
        "1",
        "true",
        "yes",
    }


def get_database_url() -> Optional[str]:
    """Return the SQL reference source URL, if configured."""

    database_url = os.getenv("PHADDRESS_DATABASE_URL")
    return database_url or None

"""Engine management for the SQL reference source."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from phaddress.config import get_database_url
from phaddress.exceptions import ConfigurationError

# Module-level engine cache keyed by URL
_ENGINE_CACHE: dict[str, Engine] = {}


def get_engine(url: Optional[str] = None, use_cache: bool = True) -> Engine:
    """Get or create a SQLAlchemy engine.

    Args:
        url: Database URL. Defaults to PHADDRESS_DATABASE_URL.
        use_cache: Whether to reuse an engine already created for the URL.

    Returns:
        A SQLAlchemy engine.

    Raises:
        ConfigurationError: If no URL is given and none is configured.
    """
    database_url = url or get_database_url()
    if not database_url:
        raise ConfigurationError("PHADDRESS_DATABASE_URL", detail="not set")

    if use_cache and database_url in _ENGINE_CACHE:
        return _ENGINE_CACHE[database_url]

    engine = create_engine(database_url, pool_pre_ping=True)
    if use_cache:
        _ENGINE_CACHE[database_url] = engine
    return engine


def clear_engine_cache() -> None:
    """Dispose and forget cached engines."""
    for engine in _ENGINE_CACHE.values():
        engine.dispose()
    _ENGINE_CACHE.clear()

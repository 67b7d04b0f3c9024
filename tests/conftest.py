"""Pytest configuration and fixtures for resolver tests.

This module provides shared fixtures: small in-memory reference datasets,
resolvers with a fresh cache per test, and an in-memory SQLite session for
the SQL reference source.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Generator

import pytest

# Add package source to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / 'src'))


# --- Reference Data Fixtures ---


@pytest.fixture
def region_rows() -> list[dict]:
    """Raw region rows in PSGC shape."""
    return [
        {'id': 1, 'region_code': '13', 'region_name': 'National Capital Region', 'psgc_code': '130000000'},
        {'id': 2, 'region_code': '07', 'region_name': 'Central Visayas', 'psgc_code': '070000000'},
    ]


@pytest.fixture
def province_rows() -> list[dict]:
    """Raw province rows; three in NCR, one in Central Visayas."""
    return [
        {'province_code': '1374', 'province_name': 'NCR, Second District', 'region_code': '13', 'psgc_code': '137400000'},
        {'province_code': '1376', 'province_name': 'NCR, Fourth District', 'region_code': '13', 'psgc_code': '137600000'},
        {'province_code': '0722', 'province_name': 'Cebu', 'region_code': '07', 'psgc_code': '072200000'},
        {'province_code': '1339', 'province_name': 'NCR, City of Manila, First District', 'region_code': '13', 'psgc_code': '133900000'},
    ]


@pytest.fixture
def city_rows() -> list[dict]:
    """Raw city rows, with postal codes."""
    return [
        {'city_code': '137404', 'city_name': 'Quezon City', 'province_code': '1374', 'region_desc': '13', 'psgc_code': '137404000', 'postal_code': '1100'},
        {'city_code': '137401', 'city_name': 'City of Mandaluyong', 'province_code': '1374', 'region_desc': '13', 'psgc_code': '137401000', 'postal_code': '1550'},
        {'city_code': '137603', 'city_name': 'City of Makati', 'province_code': '1376', 'region_desc': '13', 'psgc_code': '137603000', 'postal_code': '1200'},
        {'city_code': '072217', 'city_name': 'Cebu City', 'province_code': '0722', 'region_desc': '07', 'psgc_code': '072217000', 'postal_code': '6000'},
        {'city_code': '133900', 'city_name': 'City of Manila', 'province_code': '1339', 'region_desc': '13', 'psgc_code': '133900000', 'postal_code': None},
    ]


@pytest.fixture
def barangay_rows() -> list[dict]:
    """Raw barangay rows."""
    return [
        {'brgy_code': '137404001', 'brgy_name': 'Alicia', 'city_code': '137404', 'province_code': '1374', 'region_code': '13'},
        {'brgy_code': '137404054', 'brgy_name': 'Commonwealth', 'city_code': '137404', 'province_code': '1374', 'region_code': '13'},
        {'brgy_code': '137404083', 'brgy_name': 'Holy Spirit', 'city_code': '137404', 'province_code': '1374', 'region_code': '13'},
        {'brgy_code': '137603021', 'brgy_name': 'Poblacion', 'city_code': '137603', 'province_code': '1376', 'region_code': '13'},
        {'brgy_code': '072217050', 'brgy_name': 'Lahug', 'city_code': '072217', 'province_code': '0722', 'region_code': '07'},
    ]


@pytest.fixture
def reference_data(region_rows, province_rows, city_rows, barangay_rows):
    """Small, referentially complete reference dataset."""
    from phaddress.reference import ReferenceData

    return ReferenceData.from_rows(
        regions=region_rows,
        provinces=province_rows,
        cities=city_rows,
        barangays=barangay_rows,
    )


@pytest.fixture
def resolver(reference_data):
    """Resolver over the small dataset with a fresh cache."""
    from phaddress.lookup import LocationResolver
    from phaddress.lookup import LookupCache

    return LocationResolver(reference_data, LookupCache())


@pytest.fixture
def data_dir(tmp_path, region_rows, province_rows, city_rows, barangay_rows) -> Path:
    """Directory holding the small dataset as JSON files."""
    import json

    for filename, rows in (
        ('region.json', region_rows),
        ('province.json', province_rows),
        ('city.json', city_rows),
        ('barangay.json', barangay_rows),
    ):
        (tmp_path / filename).write_text(json.dumps(rows), encoding='utf-8')
    return tmp_path


@pytest.fixture(autouse=True)
def _reset_module_caches(monkeypatch) -> Generator:
    """Isolate environment settings and module-level caches per test."""
    for name in (
        'PHADDRESS_DATA_DIR',
        'PHADDRESS_RESULT_LIMIT',
        'PHADDRESS_INVALIDATE_ON_TYPE',
        'PHADDRESS_DATABASE_URL',
    ):
        monkeypatch.delenv(name, raising=False)

    yield

    from phaddress import api
    from phaddress.db import clear_engine_cache
    from phaddress.reference import clear_reference_cache
    from phaddress.utils.logging import clear_form_context

    api.reset_default_resolver()
    clear_reference_cache()
    clear_engine_cache()
    clear_form_context()


# --- Database Fixtures ---


@pytest.fixture(scope='session')
def test_database_url() -> str:
    """Get the test database URL.

    Uses SQLite in-memory by default for fast, isolated tests.
    """
    return os.getenv('TEST_DATABASE_URL', 'sqlite:///:memory:')


@pytest.fixture(scope='session')
def test_engine(test_database_url: str):
    """Create a test database engine and the reference tables."""
    from sqlalchemy import create_engine

    from phaddress.db import ReferenceBase

    engine = create_engine(
        test_database_url,
        echo=os.getenv('TEST_SQL_ECHO', '').lower() == 'true',
    )

    ReferenceBase.metadata.create_all(engine)

    yield engine

    ReferenceBase.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(test_engine) -> Generator:
    """Create a test database session with automatic rollback."""
    from sqlalchemy.orm import Session

    connection = test_engine.connect()
    transaction = connection.begin()
    session = Session(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()

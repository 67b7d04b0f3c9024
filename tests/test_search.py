"""Tests for query filtering and ranking."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1] / 'src'))

from phaddress.exceptions import ValidationError  # noqa: E402
from phaddress.models import City  # noqa: E402
from phaddress.models import LookupStatus  # noqa: E402
from phaddress.search import filter_and_rank  # noqa: E402
from phaddress.search import rank_children  # noqa: E402
from phaddress.search import search_locations  # noqa: E402
from phaddress.utils.text import sort_key  # noqa: E402


def make_cities(*names: str) -> tuple[City, ...]:
    """Build cities in one province, codes following input order."""
    return tuple(
        City(id=str(i), code=str(i), name=name, province_code='1374')
        for i, name in enumerate(names)
    )


class TestSearchLocations:
    """Tests for search_locations."""

    def test_empty_query_returns_input(self) -> None:
        cities = make_cities('Manila', 'Caloocan')
        assert search_locations(cities, '') is cities

    def test_whitespace_query_returns_input(self) -> None:
        cities = make_cities('Manila', 'Caloocan')
        assert search_locations(cities, '   ') is cities

    def test_none_query_returns_input(self) -> None:
        cities = make_cities('Manila')
        assert search_locations(cities, None) is cities

    def test_matches_anywhere_in_name(self) -> None:
        cities = make_cities('City of Makati', 'Pasay City', 'Manila')
        assert [c.name for c in search_locations(cities, 'city')] == [
            'City of Makati',
            'Pasay City',
        ]

    def test_keeps_input_order(self) -> None:
        cities = make_cities('Pasay City', 'Cebu City')
        assert [c.name for c in search_locations(cities, 'city')] == ['Pasay City', 'Cebu City']


class TestFilterAndRank:
    """Tests for filter_and_rank."""

    def test_prefix_query_selects_single_city(self) -> None:
        cities = make_cities('Quezon City', 'Caloocan', 'Manila')
        assert [c.name for c in filter_and_rank(cities, 'Que')] == ['Quezon City']

    def test_query_is_case_insensitive_and_trimmed(self) -> None:
        cities = make_cities('Quezon City', 'Caloocan')
        assert [c.name for c in filter_and_rank(cities, '  qUEZ ')] == ['Quezon City']

    def test_empty_query_sorts_everything(self) -> None:
        cities = make_cities('Manila', 'Caloocan', 'Quezon City')
        assert [c.name for c in filter_and_rank(cities, '')] == [
            'Caloocan',
            'Manila',
            'Quezon City',
        ]

    def test_caps_results_at_one_hundred(self) -> None:
        names = [f'Barangay {i:03d}' for i in range(150, 0, -1)]
        result = filter_and_rank(make_cities(*names), 'barangay')
        assert len(result) == 100
        assert [c.name for c in result] == sorted(names)[:100]

    def test_respects_explicit_limit(self) -> None:
        cities = make_cities('A', 'B', 'C')
        assert [c.name for c in filter_and_rank(cities, '', limit=2)] == ['A', 'B']

    def test_limit_defaults_to_environment(self, monkeypatch) -> None:
        monkeypatch.setenv('PHADDRESS_RESULT_LIMIT', '1')
        cities = make_cities('B', 'A')
        assert [c.name for c in filter_and_rank(cities, '')] == ['A']

    @pytest.mark.parametrize('limit', [0, -1, True])
    def test_rejects_invalid_explicit_limit(self, limit) -> None:
        with pytest.raises(ValidationError) as excinfo:
            filter_and_rank(make_cities('Manila', 'Makati'), '', limit=limit)
        assert excinfo.value.field == 'limit'

    def test_does_not_mutate_input(self) -> None:
        cities = make_cities('Manila', 'Caloocan')
        filter_and_rank(cities, '')
        assert [c.name for c in cities] == ['Manila', 'Caloocan']

    def test_sorts_accented_names_with_base_letter(self) -> None:
        cities = make_cities('City of Parañaque', 'City of Pasig', 'City of Paranas')
        assert [c.name for c in filter_and_rank(cities, '')] == [
            'City of Parañaque',
            'City of Paranas',
            'City of Pasig',
        ]

    def test_sorting_ignores_case(self) -> None:
        cities = make_cities('bagong Silangan', 'Alicia', 'Commonwealth')
        assert [c.name for c in filter_and_rank(cities, '')] == [
            'Alicia',
            'bagong Silangan',
            'Commonwealth',
        ]

    def test_empty_query_is_idempotent(self) -> None:
        cities = make_cities('Manila', 'Caloocan', 'Quezon City')
        once = filter_and_rank(cities, '')
        assert filter_and_rank(once, '') == once

    @pytest.mark.parametrize('query', ['', 'a', 'city', 'an', ' MA '])
    def test_results_satisfy_filter_properties(self, query) -> None:
        cities = make_cities(
            'Quezon City', 'Caloocan', 'Manila', 'City of Makati',
            'Pasay City', 'Mandaluyong', 'San Juan', 'Taguig',
        )
        result = filter_and_rank(cities, query)
        needle = query.lower().strip()

        assert len(result) <= 100
        assert all(needle in c.name.lower() for c in result)
        keys = [sort_key(c.name) for c in result]
        assert keys == sorted(keys)
        if not needle:
            assert set(result) == set(cities)


class TestRankChildren:
    """Tests for the tri-state rank_children result."""

    def test_not_applicable_without_parent(self) -> None:
        lookup = rank_children(make_cities('Manila'), 'man', parent_resolved=False)
        assert lookup.status is LookupStatus.NOT_APPLICABLE
        assert lookup.items == ()

    def test_empty_when_nothing_matches(self) -> None:
        lookup = rank_children(make_cities('Manila'), 'cebu')
        assert lookup.status is LookupStatus.EMPTY
        assert lookup.items == ()

    def test_results_when_matches(self) -> None:
        lookup = rank_children(make_cities('Manila', 'Makati'), 'ma')
        assert lookup.status is LookupStatus.RESULTS
        assert [c.name for c in lookup.items] == ['Makati', 'Manila']


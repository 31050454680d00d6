"""
Unit tests for section chain pure helper functions.

These tests exercise the derivations in
line_sections/helpers/section_chain.py on plain lists of sections.
"""

import pytest
from line_sections.helpers.section_chain import (
    SplitLengths,
    collect_stations,
    find_end_endpoint,
    find_section_by_down_station,
    find_section_by_up_station,
    find_start_endpoint,
    is_single_path,
    order_stations,
    split_lengths,
)
from line_sections.models.section import Section
from line_sections.models.station import Station

from tests.helpers.section_assertions import labels


@pytest.fixture
def path(stations: dict[str, Station]) -> list[Section]:
    """A -> B -> C -> D stored out of order."""
    return [
        Section(1, stations["C"], stations["D"], 4),
        Section(1, stations["A"], stations["B"], 3),
        Section(1, stations["B"], stations["C"], 2),
    ]


class TestFindEndpoints:
    """Test find_start_endpoint() and find_end_endpoint()."""

    def test_start_endpoint(self, path: list[Section], stations: dict[str, Station]) -> None:
        assert find_start_endpoint(path) == stations["A"]

    def test_end_endpoint(self, path: list[Section], stations: dict[str, Station]) -> None:
        assert find_end_endpoint(path) == stations["D"]

    def test_empty_sections(self) -> None:
        """Should return None for both endpoints."""
        assert find_start_endpoint([]) is None
        assert find_end_endpoint([]) is None

    def test_cycle_has_no_endpoints(self, stations: dict[str, Station]) -> None:
        """A malformed loop has neither an up-only nor a down-only station."""
        loop = [
            Section(1, stations["A"], stations["B"], 1),
            Section(1, stations["B"], stations["A"], 1),
        ]

        assert find_start_endpoint(loop) is None
        assert find_end_endpoint(loop) is None

    def test_accepts_iterators(self, path: list[Section], stations: dict[str, Station]) -> None:
        """Should work with single-pass iterables."""
        assert find_start_endpoint(iter(path)) == stations["A"]
        assert find_end_endpoint(iter(path)) == stations["D"]


class TestFindSection:
    """Test find_section_by_up_station() and find_section_by_down_station()."""

    def test_by_up_station(self, path: list[Section], stations: dict[str, Station]) -> None:
        section = find_section_by_up_station(path, stations["B"])

        assert section is not None
        assert section.down_station == stations["C"]

    def test_by_up_station_missing(self, path: list[Section], stations: dict[str, Station]) -> None:
        """The end station starts no section."""
        assert find_section_by_up_station(path, stations["D"]) is None

    def test_by_down_station(self, path: list[Section], stations: dict[str, Station]) -> None:
        section = find_section_by_down_station(path, stations["B"])

        assert section is not None
        assert section.up_station == stations["A"]

    def test_by_down_station_missing(self, path: list[Section], stations: dict[str, Station]) -> None:
        """The start station ends no section."""
        assert find_section_by_down_station(path, stations["A"]) is None


class TestCollectStations:
    """Test collect_stations()."""

    def test_collects_every_station(self, path: list[Section]) -> None:
        assert sorted(labels(collect_stations(path))) == ["A", "B", "C", "D"]

    def test_empty(self) -> None:
        assert collect_stations([]) == set()


class TestOrderStations:
    """Test order_stations() - path walk from the start endpoint."""

    def test_orders_by_links(self, path: list[Section]) -> None:
        assert labels(order_stations(path)) == ["A", "B", "C", "D"]

    def test_single_section(self, stations: dict[str, Station]) -> None:
        assert labels(order_stations([Section(1, stations["A"], stations["B"], 1)])) == ["A", "B"]

    def test_empty(self) -> None:
        assert order_stations([]) == []


class TestSplitLengths:
    """Test split_lengths()."""

    def test_new_section_on_upper_half(self) -> None:
        assert split_lengths(5, 2, new_on_upper=True) == SplitLengths(upper=2, lower=3)

    def test_new_section_on_lower_half(self) -> None:
        assert split_lengths(5, 2, new_on_upper=False) == SplitLengths(upper=3, lower=2)

    @pytest.mark.parametrize(("existing", "new"), [(7, 1), (7, 3), (7, 6)])
    def test_halves_sum_to_existing(self, existing: int, new: int) -> None:
        """Re-merging the halves should give back the original distance."""
        lengths = split_lengths(existing, new, new_on_upper=True)

        assert lengths.upper + lengths.lower == existing

    def test_does_not_validate(self) -> None:
        """Non-positive remainders are returned as-is for the caller to reject."""
        assert split_lengths(3, 3, new_on_upper=True) == SplitLengths(upper=3, lower=0)
        assert split_lengths(3, 5, new_on_upper=False) == SplitLengths(upper=-2, lower=5)


class TestIsSinglePath:
    """Test is_single_path()."""

    def test_path_stored_out_of_order(self, path: list[Section]) -> None:
        assert is_single_path(path) is True

    def test_empty(self) -> None:
        assert is_single_path([]) is True

    def test_disconnected(self, stations: dict[str, Station]) -> None:
        sections = [Section(1, stations["A"], stations["B"], 3), Section(1, stations["C"], stations["D"], 5)]

        assert is_single_path(sections) is False

    def test_branching(self, stations: dict[str, Station]) -> None:
        sections = [Section(1, stations["A"], stations["B"], 3), Section(1, stations["A"], stations["C"], 5)]

        assert is_single_path(sections) is False

    def test_cycle(self, stations: dict[str, Station]) -> None:
        sections = [Section(1, stations["A"], stations["B"], 1), Section(1, stations["B"], stations["A"], 1)]

        assert is_single_path(sections) is False

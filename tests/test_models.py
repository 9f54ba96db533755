"""
Destination model tests: cluster fallback, duration coercion, island
detection and immutability.
"""
import pytest
from pydantic import ValidationError

from models.destination import (
    Destination,
    TransportMode,
    is_island,
    resolve_cluster,
    to_hours,
)

ISLAND = "제주특별자치도"


def assemble(place, timing=None):
    return Destination.from_records(place, timing, island_cluster=ISLAND, island_region_name="제주")


class TestResolveCluster:
    def test_explicit_cluster_wins(self):
        assert resolve_cluster("강원특별자치도", "서울특별시 종로구") == "강원특별자치도"

    def test_numeric_cluster_becomes_string(self):
        assert resolve_cluster(3, None) == "3"

    def test_falls_back_to_first_address_token(self):
        assert resolve_cluster(None, "전라남도  여수시 돌산읍") == "전라남도"
        assert resolve_cluster("  ", "경기도 가평군") == "경기도"

    def test_unresolvable(self):
        assert resolve_cluster(None, "") is None
        assert resolve_cluster(None, "   ") is None
        assert resolve_cluster(None, None) is None


class TestToHours:
    @pytest.mark.parametrize("value, expected", [(2, 2.0), (1.5, 1.5), ("2.5", 2.5), (" 3 ", 3.0)])
    def test_numeric_values(self, value, expected):
        assert to_hours(value) == expected

    @pytest.mark.parametrize("value", [None, "", "n/a", True])
    def test_missing_values(self, value):
        assert to_hours(value) is None


class TestIsIsland:
    def test_stored_flag(self):
        assert is_island("강원특별자치도", "강원특별자치도 춘천시", True, ISLAND, "제주")

    def test_cluster_match(self):
        assert is_island(ISLAND, "", None, ISLAND, "제주")

    def test_address_substring(self):
        assert is_island("99", "제주 서귀포시", None, ISLAND, "제주")

    def test_mainland(self):
        assert not is_island("경상북도", "경상북도 경주시", 0, ISLAND, "제주")


class TestTransportMode:
    def test_time_fields(self):
        assert TransportMode.CAR.time_field == "drive_time"
        assert TransportMode("publicTransport").time_field == "transit_time"


class TestDestinationAssembly:
    def test_denormalized_record(self):
        doc = {
            "_id": "abc", "id": 12, "name": "해운대", "address": "부산광역시 해운대구",
            "cluster": 4, "departure_location": "서울특별시", "drive_time": "4.5",
            "transit_time": 3, "image": "", "description": "바다",
        }
        destination = assemble(doc, doc)
        assert destination.id == 12
        assert destination.cluster == "4"
        assert destination.drive_time == 4.5
        assert destination.transit_time == 3.0
        assert destination.image is None
        assert destination.is_jeju is False
        assert destination.travel_time(TransportMode.CAR) == 4.5
        assert destination.travel_time(TransportMode.PUBLIC_TRANSPORT) == 3.0

    def test_missing_travel_time_row(self):
        destination = assemble({"id": 1, "name": "x", "address": "충청북도 단양군"})
        assert destination.departure_location == ""
        assert destination.drive_time is None
        assert destination.transit_time is None

    def test_missing_id_yields_none(self):
        assert assemble({"_id": "65f0c0ffee", "name": "x", "address": "경기도 파주시"}) is None

    def test_non_string_name_is_rejected(self):
        with pytest.raises(ValidationError):
            assemble({"id": 1, "name": 2024, "address": "경기도 파주시"})

    def test_unresolvable_cluster_yields_none(self):
        assert assemble({"id": 1, "name": "x", "address": ""}) is None

    def test_destination_is_immutable(self):
        destination = assemble({"id": 1, "name": "x", "address": "경기도 파주시"})
        with pytest.raises(ValidationError):
            destination.name = "changed"

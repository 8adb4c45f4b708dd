import pytest

from wakeadvisor.services.vessel_types import (
    SHIP_TYPE_TABLE,
    VesselCategory,
    classify_ship_type,
    describe_ship_type,
    is_freighter,
)


class TestClassifyShipType:
    """Tests for the AIS ship type table"""

    @pytest.mark.parametrize("code", [70, 71, 74, 79])
    def test_cargo_range(self, code):
        assert classify_ship_type(code) is VesselCategory.CARGO
        assert is_freighter(code)

    @pytest.mark.parametrize("code", [80, 84, 89])
    def test_tanker_range(self, code):
        assert classify_ship_type(code) is VesselCategory.TANKER
        assert is_freighter(code)

    @pytest.mark.parametrize("code, category", [
        (30, VesselCategory.FISHING),
        (52, VesselCategory.TUG),
        (60, VesselCategory.PASSENGER),
        (37, VesselCategory.PLEASURE),
        (99, VesselCategory.OTHER),
    ])
    def test_non_freighters(self, code, category):
        assert classify_ship_type(code) is category
        assert not is_freighter(code)

    def test_absent_and_unmapped(self):
        assert classify_ship_type(None) is VesselCategory.UNKNOWN
        assert classify_ship_type(38) is VesselCategory.OTHER
        assert classify_ship_type(150) is VesselCategory.OTHER
        assert not is_freighter(None)

    def test_descriptions(self):
        assert describe_ship_type(75) == "Cargo"
        assert describe_ship_type(52) == "Tug"
        assert describe_ship_type(None) == "Unknown"
        assert describe_ship_type(120) == "Type 120"

    def test_table_is_ordered_and_disjoint(self):
        for previous, current in zip(SHIP_TYPE_TABLE, SHIP_TYPE_TABLE[1:]):
            assert previous.start <= previous.end < current.start

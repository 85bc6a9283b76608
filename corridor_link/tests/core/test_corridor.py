# ==============================================================================
# Corridor Link - Station/Offset/Elevation Geometry for Civil Corridors
# Copyright (c) 2025 Michael Yoder / Desert Springs Civil Engineering PLLC
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
#
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
# You should have received a copy of the GNU General Public License along with this program. If not, see <https://www.gnu.org/licenses/>.
#
# Primary Author: Michael Yoder
# Company: Desert Springs Civil Engineering PLLC
# ==============================================================================

"""
Tests for the Corridor Aggregate
================================

Uses InMemoryCorridorSource as the design data provider.
"""

import pytest

from corridor_link.core.corridor import (
    AppliedSubassemblyLink,
    AppliedSubassemblyShape,
    Corridor,
    cross_section_name,
)
from corridor_link.core.featureline import Side
from corridor_link.core.records import (
    AppliedSubassemblyRecord,
    CrossSectionPointRecord,
    FeaturelineRecord,
    LinkRecord,
    ShapeRecord,
)
from corridor_link.core.session import Session
from corridor_link.tool.in_memory import InMemoryCorridorSource


def _samples(stations, y, region):
    return [{"Station": s, "X": s, "Y": y, "Z": 0.0, "RegionIndex": region} for s in stations]


@pytest.fixture
def source() -> InMemoryCorridorSource:
    left = _samples([0, 10, 20, 30, 40, 50], 5.0, 0) + _samples([50, 75, 100], 5.0, 1)
    return InMemoryCorridorSource(
        featurelines=[
            FeaturelineRecord(0, "EP", left),
            FeaturelineRecord(0, "EP", _samples([0, 20, 40], -5.0, 0)),
            FeaturelineRecord(0, "CL", _samples([0, 100], 0.0, -1)),
            FeaturelineRecord(1, "EP", _samples([0, 20, 40, 60], -3.0, 0)),
        ],
        subassemblies=[
            AppliedSubassemblyRecord(
                0, 0, "Typical", "Lane", "2A4F", 20.0,
                shapes=[
                    ShapeRecord(["Pave"], [(20, 0, 0), (20, 3.5, -0.07), (20, 3.5, -0.3), (20, 0, -0.3)]),
                    ShapeRecord(["Bad"], [(20, 0, 0), (20, 0, 0), (20, 1, 0)]),
                ],
                links=[
                    LinkRecord(["Top"], [(20, 0, 0), (20, 3.5, -0.07)]),
                    LinkRecord(["Dot"], [(20, 1, 0)]),
                ],
            ),
            AppliedSubassemblyRecord(5, 0, "Typical", "Lane", "FFFF", 20.0),
        ],
        points=[
            CrossSectionPointRecord(10.0, 2.0, 0.5, ["EP"], 0),
            CrossSectionPointRecord(10.0, -2.0, 0.5, ["EP"], 0),
            CrossSectionPointRecord(60.0, 2.0, 0.0, ["EP"], -1),
            CrossSectionPointRecord(50.0005, 3.0, 0.0, ["EP"], 0),
            CrossSectionPointRecord(70.0, 3.0, 0.0, ["EP"], 0),
            CrossSectionPointRecord(10.0, 0.0, 0.0, ["CL"], 0),
        ],
    )


@pytest.fixture
def corridor(straight_baseline, curved_baseline, source) -> Corridor:
    return Corridor("Road", [straight_baseline, curved_baseline], source)


class TestCorridor:
    """Tests for corridor construction and shortcuts."""

    @pytest.mark.unit
    def test_baselines_indexed(self, corridor):
        """Test that baselines learn their index and corridor."""
        assert [b.index for b in corridor.baselines] == [0, 1]
        assert corridor.baseline(1).corridor_name == "Road"
        assert repr(corridor) == "Corridor(Name = Road, 2 baselines)"

    @pytest.mark.unit
    def test_given_baselines_unchanged(self, straight_baseline, curved_baseline, source):
        """Test that building a corridor leaves the caller's baselines alone."""
        corridor = Corridor("Road", [straight_baseline, curved_baseline], source)
        other = Corridor("Ramp", [curved_baseline], source)
        assert (curved_baseline.index, curved_baseline.corridor_name) == (0, "")
        assert (corridor.baseline(1).index, corridor.baseline(1).corridor_name) == (1, "Road")
        assert (other.baseline(0).index, other.baseline(0).corridor_name) == (0, "Ramp")
        assert corridor.baseline(1).alignment is curved_baseline.alignment

    @pytest.mark.unit
    def test_missing_baseline(self, corridor):
        """Test that an unknown baseline index raises IndexError."""
        with pytest.raises(IndexError):
            corridor.baseline(2)

    @pytest.mark.unit
    def test_codes(self, corridor):
        """Test codes collected from every record kind."""
        assert corridor.codes() == ["Bad", "CL", "Dot", "EP", "Pave", "Top"]

    @pytest.mark.unit
    def test_shortcuts(self, corridor):
        """Test the baseline query shortcuts."""
        assert corridor.point_at(0, 20.0, 1.0).y == pytest.approx(-1.0)
        assert corridor.coordinate_frame_at_station(1, 50.0).origin.z == pytest.approx(101.0)
        assert corridor.coordinate_frame_at_point(0, (30.0, 2.0, 0.0)).origin.x == pytest.approx(30.0)


class TestFeaturelines:
    """Tests for featureline queries."""

    @pytest.mark.unit
    def test_grouped_by_baseline_and_region(self, corridor):
        """Test the Baseline > Region grouping."""
        result = corridor.featurelines_by_code("EP")
        assert [len(regions) for regions in result] == [2, 1]
        first_region, second_region = result[0]
        assert [f.side for f in first_region] == [Side.LEFT, Side.RIGHT]
        assert len(second_region) == 1
        assert second_region[0].start == pytest.approx(50.0)
        assert result[1][0][0].side is Side.RIGHT

    @pytest.mark.unit
    def test_unknown_region_dropped(self, corridor):
        """Test that featurelines without a region are not grouped."""
        assert corridor.featurelines_by_code("CL") == [[[], []], [[]]]

    @pytest.mark.unit
    def test_thread_pool(self, corridor):
        """Test that threaded extraction gives the same grouping."""
        serial = corridor.featurelines_by_code("EP")
        threaded = corridor.featurelines_by_code("EP", max_workers=2)
        assert [[len(r) for r in b] for b in threaded] == [[len(r) for r in b] for b in serial]
        assert threaded[0][1][0].points == serial[0][1][0].points

    @pytest.mark.unit
    def test_records_fetched_each_time(self, corridor, source):
        """Test that without a session each query reads the source."""
        corridor.featurelines_by_code("EP")
        corridor.featurelines_by_code("CL")
        assert source.calls == {0: 2, 1: 2}

    @pytest.mark.unit
    def test_session_caches_records(self, straight_baseline, curved_baseline, source):
        """Test that a session keeps exported records."""
        session = Session()
        corridor = Corridor("Road", [straight_baseline, curved_baseline], source, session)
        corridor.featurelines_by_code("EP")
        corridor.featurelines_by_code("CL", max_workers=2)
        assert source.calls == {0: 1, 1: 1}
        assert session.is_exported("Road", 1)

        session.invalidate("Road")
        corridor.featurelines_by_code("EP")
        assert source.calls == {0: 2, 1: 2}

    @pytest.mark.unit
    def test_by_station(self, corridor):
        """Test featurelines covering a station."""
        at_30 = corridor.featurelines_by_code_station("EP", 30.0)
        assert [len(b) for b in at_30] == [2, 1]
        at_75 = corridor.featurelines_by_code_station("EP", 75.0)
        assert [len(b) for b in at_75] == [1, 0]
        assert at_75[0][0].region_index == 1

    @pytest.mark.unit
    def test_closest_featureline(self, corridor):
        """Test selection by side and distance."""
        left = corridor.closest_featureline((30.0, 4.0, 0.0), "EP", "LEFT")
        right = corridor.closest_featureline((30.0, 4.0, 0.0), "EP", Side.RIGHT)
        nearest = corridor.closest_featureline((30.0, 4.0, 0.0), "EP", None)
        assert left.side is Side.LEFT
        assert right.side is Side.RIGHT
        assert nearest.side is Side.LEFT
        assert nearest.points == left.points

    @pytest.mark.unit
    def test_closest_featureline_none(self, corridor):
        """Test that no match gives None."""
        assert corridor.closest_featureline((30.0, 4.0, 0.0), "XX", "LEFT") is None
        assert corridor.closest_featureline((75.0, -4.0, 0.0), "EP", "RIGHT") is None


class TestCrossSections:
    """Tests for coded points, shapes and links."""

    @pytest.mark.unit
    def test_points_by_code(self, corridor):
        """Test the Baseline > Region > Station grouping of points."""
        result = corridor.points_by_code("EP")
        region0, region1 = result[0]
        assert [len(group) for group in region0] == [2, 1]
        assert region0[0][0].y == pytest.approx(-2.0)
        assert region0[0][0].z == pytest.approx(0.5)
        assert region0[1][0].x == pytest.approx(50.0)
        assert [len(group) for group in region1] == [1]
        assert result[1] == [[]]

    @pytest.mark.unit
    def test_cross_section_name(self):
        """Test the name built from record fields."""
        record = AppliedSubassemblyRecord(0, 1, "Typical", "Lane", "2A4F", 10.0)
        assert cross_section_name("Road", record, 3) == "Road_0_1_Typical_Lane_2A4F_3"

    @pytest.mark.unit
    def test_cross_sections(self, corridor):
        """Test shapes and links mapped to world coordinates."""
        output = corridor.cross_sections()
        assert list(output) == [0]
        items = output[0][0]["Typical"]["Lane"]
        assert [type(i) for i in items] == [AppliedSubassemblyShape, AppliedSubassemblyLink]
        shape, link = items
        assert shape.name == "Road_0_0_Typical_Lane_2A4F_0"
        assert link.name == "Road_0_0_Typical_Lane_2A4F_2"
        assert shape.closed and not link.closed
        assert shape.codes == ["Pave"]
        assert len(shape.points) == 4
        assert (link.points[1].x, link.points[1].y, link.points[1].z) == pytest.approx((20.0, -3.5, -0.07))
        assert link.station == 20.0

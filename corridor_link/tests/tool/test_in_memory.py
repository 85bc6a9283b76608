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
Tests for In-Memory Sources
===========================
"""

import pytest

from corridor_link.core.coordinate_frame import Point3D
from corridor_link.core.horizontal_alignment import AlignmentEntity
from corridor_link.core.records import CrossSectionPointRecord, FeaturelineRecord
from corridor_link.tool import InMemoryCorridorSource, StaticAlignmentSource


class TestStaticAlignmentSource:
    """Tests for StaticAlignmentSource."""

    @pytest.mark.unit
    def test_accessors(self):
        """Test that the given data is returned as copies."""
        entities = [AlignmentEntity.tangent(Point3D(0, 0), Point3D(10, 0))]
        source = StaticAlignmentSource("Main", entities, 100.0, [105.0], [Point3D(0, 0)])
        assert source.name == "Main"
        assert source.starting_station == 100.0
        assert source.entities() == entities
        assert source.entities() is not entities
        assert source.superelevation_stations() == [105.0]
        assert source.fallback_points() == [Point3D(0, 0)]

    @pytest.mark.unit
    def test_no_fallback(self):
        """Test the defaults."""
        source = StaticAlignmentSource("Main", [])
        assert source.starting_station is None
        assert source.fallback_points() is None
        assert source.superelevation_stations() == []


class TestInMemoryCorridorSource:
    """Tests for InMemoryCorridorSource."""

    @pytest.mark.unit
    def test_featureline_records_by_baseline(self):
        """Test filtering and call counting."""
        source = InMemoryCorridorSource(featurelines=[
            FeaturelineRecord(0, "EP"),
            FeaturelineRecord(1, "EP"),
            FeaturelineRecord(1, "CL"),
        ])
        assert [r.code for r in source.featureline_records(1)] == ["EP", "CL"]
        source.featureline_records(1)
        source.featureline_records(0)
        assert source.calls == {1: 2, 0: 1}

    @pytest.mark.unit
    def test_points_by_baseline(self):
        """Test cross-section points assigned to baselines."""
        points = [CrossSectionPointRecord(0.0, 1.0, 0.0), CrossSectionPointRecord(5.0, 1.0, 0.0)]
        source = InMemoryCorridorSource(points=points, point_baselines=[0, 1])
        assert source.cross_section_points(1) == [points[1]]
        assert InMemoryCorridorSource(points=points).cross_section_points(0) == points
        assert source.applied_subassemblies() == []

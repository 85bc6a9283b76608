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
Tests for Vertical Profiles
===========================
"""

import pytest

from corridor_link.core.vertical_alignment import (
    PVI,
    FlatProfile,
    ParabolicSegment,
    TangentSegment,
    VerticalProfile,
    profile_or_flat,
)


@pytest.fixture
def crest_profile() -> VerticalProfile:
    """+2% then -1% with an 80 m crest curve at station 200."""
    return VerticalProfile(
        [PVI(0.0, 100.0), PVI(200.0, 104.0, 80.0), PVI(400.0, 102.0)],
        name="Crest",
    )


class TestSegments:
    """Tests for tangent and parabolic segments."""

    @pytest.mark.unit
    def test_tangent(self):
        """Test a constant grade segment."""
        tangent = TangentSegment(0.0, 100.0, 100.0, 0.02)
        assert tangent.elevation_at(50.0) == pytest.approx(101.0)
        assert tangent.end_elevation == pytest.approx(102.0)
        assert tangent.grade_at(10.0) == 0.02

    @pytest.mark.unit
    def test_parabola(self):
        """Test elevation and grade along a crest curve."""
        curve = ParabolicSegment(160.0, 240.0, 104.0, 0.02, -0.01)
        assert curve.elevation_at(200.0) == pytest.approx(104.5)
        assert curve.grade_at(200.0) == pytest.approx(0.005)
        assert curve.is_crest and not curve.is_sag

    @pytest.mark.unit
    def test_bounds(self):
        """Test invalid lengths and stations outside a segment."""
        with pytest.raises(ValueError):
            TangentSegment(10.0, 10.0, 0.0, 0.0)
        with pytest.raises(ValueError):
            TangentSegment(0.0, 10.0, 0.0, 0.0).elevation_at(11.0)


class TestVerticalProfile:
    """Tests for PVI-based profiles."""

    @pytest.mark.unit
    def test_constant_grade(self, rising_profile):
        """Test a single-grade profile."""
        assert rising_profile.elevation_at(50.0) == pytest.approx(101.0)
        assert rising_profile.grade_at(150.0) == pytest.approx(0.02)

    @pytest.mark.unit
    def test_crest_curve(self, crest_profile):
        """Test elevations through a vertical curve."""
        assert crest_profile.elevation_at(160.0) == pytest.approx(103.2)
        assert crest_profile.elevation_at(200.0) == pytest.approx(103.7)
        assert crest_profile.elevation_at(400.0) == pytest.approx(102.0)
        assert crest_profile.grade_at(200.0) == pytest.approx(0.005)

    @pytest.mark.unit
    def test_stations(self, crest_profile):
        """Test PVI and segment stations."""
        assert crest_profile.pvi_stations == [0.0, 200.0, 400.0]
        assert crest_profile.entity_stations == pytest.approx([0.0, 160.0, 240.0, 400.0])
        assert crest_profile.start_station == 0.0
        assert crest_profile.end_station == 400.0

    @pytest.mark.unit
    def test_unsorted_pvis(self):
        """Test that PVIs are sorted by station."""
        profile = VerticalProfile([PVI(100.0, 12.0), PVI(0.0, 10.0)])
        assert profile.elevation_at(50.0) == pytest.approx(11.0)

    @pytest.mark.unit
    def test_out_of_range(self, crest_profile):
        """Test that stations outside the profile raise ValueError."""
        with pytest.raises(ValueError):
            crest_profile.elevation_at(500.0)

    @pytest.mark.unit
    @pytest.mark.parametrize("pvis", [
        [PVI(0.0, 100.0)],
        [PVI(0.0, 100.0), PVI(0.0, 101.0)],
        [PVI(0.0, 100.0), PVI(50.0, 101.0, 200.0), PVI(100.0, 100.0)],
    ])
    def test_invalid_pvis(self, pvis):
        """Test too few PVIs, duplicate stations and overlapping curves."""
        with pytest.raises(ValueError):
            VerticalProfile(pvis)

    @pytest.mark.unit
    def test_negative_curve_length(self):
        """Test that a negative curve length is rejected."""
        with pytest.raises(ValueError):
            PVI(0.0, 100.0, -10.0)

    @pytest.mark.unit
    def test_from_segments(self):
        """Test a profile built from ready-made segments."""
        profile = VerticalProfile.from_segments([
            ParabolicSegment(100.0, 200.0, 11.0, 0.01, -0.01),
            TangentSegment(0.0, 100.0, 10.0, 0.01),
        ])
        assert profile.pvi_stations == [0.0, 100.0, 200.0]
        assert profile.elevation_at(150.0) == pytest.approx(11.25)

    @pytest.mark.unit
    def test_from_no_segments(self):
        """Test that an empty segment list is rejected."""
        with pytest.raises(ValueError):
            VerticalProfile.from_segments([])


class TestFlatProfile:
    """Tests for the flat fallback profile."""

    @pytest.mark.unit
    def test_flat(self):
        """Test constant elevation and the fallback helper."""
        assert FlatProfile(12.5).elevation_at(1e6) == 12.5
        assert profile_or_flat(None).elevation_at(3.0) == 0.0

    @pytest.mark.unit
    def test_keeps_given_profile(self, rising_profile):
        """Test that a given profile is returned unchanged."""
        assert profile_or_flat(rising_profile) is rising_profile

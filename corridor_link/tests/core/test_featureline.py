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
Tests for Featurelines
======================

Tests for sample parsing, run extraction, featureline frames and derived
polylines.
"""

import pytest

from corridor_link.core.coordinate_frame import Point3D
from corridor_link.core.exceptions import GeometryError
from corridor_link.core.featureline import (
    Featureline,
    FeaturelinePoint,
    FeaturelineSample,
    Side,
    extract_featurelines,
    extract_from_records,
    group_by_region,
    parse_featureline_sample,
    parse_side,
)
from corridor_link.core.records import FeaturelineRecord


def _samples(stations, y=5.0, region=0, breaks=()):
    return [
        FeaturelineSample(float(s), Point3D(float(s), y, 0.0), region, i in breaks)
        for i, s in enumerate(stations)
    ]


@pytest.fixture
def left_edge(straight_baseline) -> Featureline:
    """Featureline 5 m left of the straight baseline, stations 0 to 20."""
    return Featureline(
        straight_baseline,
        [Point3D(0, 5, 0), Point3D(10, 5, 0), Point3D(20, 5, 0)],
        "EP",
        region_index=0,
    )


class TestParsing:
    """Tests for sample attribute parsing."""

    @pytest.mark.unit
    def test_full_sample(self):
        """Test a sample with every attribute."""
        sample = parse_featureline_sample({
            "Station": "0+010.5", "X": "1", "Y": 2, "Z": 3.5,
            "IsBreak": "1", "RegionIndex": 2,
        })
        assert sample.station == 10.5
        assert sample.point == Point3D(1.0, 2.0, 3.5)
        assert sample.is_break is True
        assert sample.region_index == 2

    @pytest.mark.unit
    def test_defaults(self):
        """Test defaults for missing and malformed attributes."""
        sample = parse_featureline_sample({"station": 5, "x": 1, "Z": "n/a", "IsBreak": "0.5"})
        assert sample.point == Point3D(1.0, 0.0, 0.0)
        assert sample.region_index == -1
        assert sample.is_break is False

    @pytest.mark.unit
    def test_exponent_station(self):
        """Test that an exported station in exponent form is kept."""
        sample = parse_featureline_sample({"Station": "1.5E+03", "X": "1", "Y": "2", "Z": "3"})
        assert sample is not None
        assert sample.station == pytest.approx(1500.0)
        assert sample.point == Point3D(1.0, 2.0, 3.0)

    @pytest.mark.unit
    @pytest.mark.parametrize("attributes", [{"Station": "abc"}, {"X": 1.0}, {"Station": "1+2+3"}])
    def test_bad_station(self, attributes):
        """Test that a sample without a readable station is skipped."""
        assert parse_featureline_sample(attributes) is None

    @pytest.mark.unit
    @pytest.mark.parametrize("raw,expected", [
        ("left", Side.LEFT),
        ("RIGHT", Side.RIGHT),
        (-1, Side.LEFT),
        ("2", Side.RIGHT),
        (Side.NONE, Side.NONE),
        (None, None),
        ("sideways", None),
    ])
    def test_parse_side(self, raw, expected):
        """Test side values from exports."""
        assert parse_side(raw) is expected


class TestExtraction:
    """Tests for stitching samples into featurelines."""

    @pytest.mark.unit
    def test_break_splits(self, straight_baseline):
        """Test that a break closes the run."""
        samples = _samples([0, 10, 20, 20, 30, 40], breaks=(2,))
        featurelines = extract_featurelines(straight_baseline, samples, "EP")
        assert [len(f.points) for f in featurelines] == [3, 3]
        assert featurelines[0].end == pytest.approx(20.0)
        assert featurelines[1].start == pytest.approx(20.0)

    @pytest.mark.unit
    def test_unsorted_samples(self, straight_baseline):
        """Test that samples are ordered by station."""
        samples = _samples([30, 0, 20, 10])
        featurelines = extract_featurelines(straight_baseline, samples, "EP")
        assert len(featurelines) == 1
        assert [p.x for p in featurelines[0].points] == [0.0, 10.0, 20.0, 30.0]

    @pytest.mark.unit
    def test_region_change(self, straight_baseline):
        """Test that a region change starts a new featureline at the shared station."""
        samples = _samples([40, 50], region=0) + _samples([50, 60, 70], region=1)
        featurelines = extract_featurelines(straight_baseline, samples, "EP")
        assert [f.region_index for f in featurelines] == [0, 1]
        assert [p.x for p in featurelines[0].points] == [40.0, 50.0]
        assert [p.x for p in featurelines[1].points] == [50.0, 60.0, 70.0]

    @pytest.mark.unit
    def test_duplicates_pruned(self, straight_baseline):
        """Test that repeated points collapse."""
        samples = _samples([0, 0, 10])
        featurelines = extract_featurelines(straight_baseline, samples, "EP")
        assert len(featurelines[0].points) == 2

    @pytest.mark.unit
    def test_short_runs_dropped(self, straight_baseline):
        """Test that single-point data gives no featureline."""
        assert extract_featurelines(straight_baseline, _samples([10]), "EP") == []
        assert extract_featurelines(straight_baseline, [], "EP") == []

    @pytest.mark.unit
    def test_side_from_offset(self, straight_baseline):
        """Test the side derived from the first point."""
        left = extract_featurelines(straight_baseline, _samples([0, 10], y=5.0), "EP")[0]
        right = extract_featurelines(straight_baseline, _samples([0, 10], y=-5.0), "EP")[0]
        given = extract_featurelines(straight_baseline, _samples([0, 10]), "EP", Side.RIGHT)[0]
        assert left.side is Side.LEFT
        assert right.side is Side.RIGHT
        assert given.side is Side.RIGHT

    @pytest.mark.unit
    def test_from_records(self, straight_baseline):
        """Test parsing and extraction of raw records."""
        records = [
            FeaturelineRecord(0, "EP", [
                {"Station": s, "X": s, "Y": -5.0, "Z": 0.0, "RegionIndex": 0} for s in (0, 10, 20)
            ]),
            FeaturelineRecord(0, "CL", [{"Station": "bad"}, {"Station": 10, "X": 10}]),
        ]
        by_code = extract_from_records(straight_baseline, records)
        assert len(by_code["EP"]) == 1
        assert by_code["EP"][0].side is Side.RIGHT
        assert by_code["CL"] == []

    @pytest.mark.unit
    def test_group_by_region(self, straight_baseline):
        """Test grouping by region index."""
        samples = _samples([40, 50], region=0) + _samples([50, 60], region=1)
        featurelines = extract_featurelines(straight_baseline, samples, "EP")
        groups = group_by_region(featurelines, 2)
        assert [len(g) for g in groups] == [1, 1]
        assert group_by_region(featurelines, 1) == [[featurelines[0]]]


class TestFeatureline:
    """Tests for featureline geometry."""

    @pytest.mark.unit
    def test_needs_two_points(self, straight_baseline):
        """Test that a degenerate featureline is rejected."""
        with pytest.raises(GeometryError):
            Featureline(straight_baseline, [(0, 5, 0), (0, 5, 0)], "EP")

    @pytest.mark.unit
    def test_range_and_length(self, left_edge):
        """Test station range and polyline length."""
        assert (left_edge.start, left_edge.end) == pytest.approx((0.0, 20.0))
        assert left_edge.length == pytest.approx(20.0)
        assert left_edge.region.assembly_name == "Typical"

    @pytest.mark.unit
    def test_range_clamped_to_region(self, straight_baseline):
        """Test that the range stays inside the region."""
        featureline = Featureline(straight_baseline, [(40, 5, 0), (60, 5, 0)], "EP", region_index=0)
        assert featureline.end == pytest.approx(50.0)

    @pytest.mark.unit
    def test_frame(self, left_edge):
        """Test the frame where the featureline crosses the station."""
        frame = left_edge.coordinate_frame_at_station(10.0)
        assert (frame.origin.x, frame.origin.y) == pytest.approx((10.0, 5.0))
        assert list(frame.y_axis) == pytest.approx([1.0, 0.0, 0.0])

    @pytest.mark.unit
    def test_frame_at_ends(self, left_edge):
        """Test frames at the first and last stations."""
        assert left_edge.coordinate_frame_at_station(0.0).origin.x == pytest.approx(0.0)
        assert left_edge.coordinate_frame_at_station(20.0).origin.x == pytest.approx(20.0)

    @pytest.mark.unit
    def test_frame_out_of_range(self, left_edge):
        """Test stations outside the featureline."""
        assert left_edge.coordinate_frame_at_station(30.0) is None

    @pytest.mark.unit
    def test_point_at(self, left_edge):
        """Test points in the featureline and baseline frames."""
        assert left_edge.point_at(10.0, offset=2.0).y == pytest.approx(3.0)
        assert left_edge.point_at(10.0, offset=2.0, refer_to_baseline=True).y == pytest.approx(-2.0)

    @pytest.mark.unit
    def test_station_offset_elevation(self, left_edge):
        """Test the inverse query relative to the featureline."""
        result = left_edge.station_offset_elevation((10.0, 8.0, 1.0))
        assert result.station == pytest.approx(10.0)
        assert result.offset == pytest.approx(-3.0)
        assert result.elevation == pytest.approx(1.0)

    @pytest.mark.unit
    def test_station_offset_elevation_outside(self, left_edge):
        """Test that points beyond the featureline use the baseline."""
        result = left_edge.station_offset_elevation((40.0, 0.0, 2.0))
        assert result.station == pytest.approx(40.0)
        assert result.offset == pytest.approx(0.0)
        assert result.elevation == pytest.approx(2.0)

    @pytest.mark.unit
    def test_parallel_polyline(self, left_edge):
        """Test a polyline offset from the featureline at baseline stations."""
        points = left_edge.polyline_by_offset_elevation(offset=1.0, elevation=0.5)
        assert [p.x for p in points] == pytest.approx([0.0, 10.0, 20.0])
        assert all(p.y == pytest.approx(4.0) for p in points)
        assert all(p.z == pytest.approx(0.5) for p in points)

    @pytest.mark.unit
    def test_polyline_between_stations(self, left_edge):
        """Test clamping and empty ranges."""
        points = left_edge.polyline_by_stations_offset_elevation(15.0, 5.0)
        assert [p.x for p in points] == pytest.approx([5.0, 10.0, 15.0])
        assert left_edge.polyline_by_stations_offset_elevation(30.0, 40.0) == []

    @pytest.mark.unit
    def test_points_by_chord(self, left_edge):
        """Test constant-chord resampling."""
        points = left_edge.points_by_chord(4.0)
        assert [p.x for p in points] == pytest.approx([0.0, 4.0, 8.0, 12.0, 16.0, 20.0])

    @pytest.mark.unit
    def test_points_by_chord_keeps_end(self, left_edge):
        """Test that the last point is appended."""
        points = left_edge.points_by_chord(7.0)
        assert points[-1].x == pytest.approx(20.0)
        assert len(points) == 4

    @pytest.mark.unit
    @pytest.mark.parametrize("chord", [0.0, -1.0])
    def test_points_by_chord_invalid(self, left_edge, chord):
        """Test that a non-positive chord raises ValueError."""
        with pytest.raises(ValueError):
            left_edge.points_by_chord(chord)

    @pytest.mark.unit
    def test_featureline_point_frame(self, straight_baseline):
        """Test the frame of a featureline point."""
        point = FeaturelinePoint(straight_baseline, Point3D(30, 5, 0), "EP", 30.0)
        assert point.coordinate_frame.origin.x == pytest.approx(30.0)

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
Vertical Profiles
=================

Profile elevation lookups used by baselines.

- PVI: point of vertical intersection with an optional curve length
- VerticalProfile: tangent and parabolic segments generated from PVIs,
  or taken directly from a list of segments
- FlatProfile: constant elevation, for baselines without a profile

Example:
    >>> profile = VerticalProfile([
    ...     PVI(0.0, 100.0),
    ...     PVI(200.0, 104.0, curve_length=80.0),
    ...     PVI(400.0, 102.0),
    ... ])
    >>> round(profile.elevation_at(100.0), 3)
    102.0
"""

import bisect
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..logging_config import get_logger
from ..tool import ProfileSource
from .segments import ParabolicSegment, TangentSegment, VerticalSegment

logger = get_logger(__name__)


@dataclass
class PVI:
    """Point of Vertical Intersection.

    Attributes:
        station: Station of the PVI
        elevation: Elevation of the PVI
        curve_length: Length of the parabolic curve centered here, 0 for none
    """

    station: float
    elevation: float
    curve_length: float = 0.0

    def __post_init__(self):
        if self.curve_length < 0:
            raise ValueError(f"Curve length must be non-negative, got {self.curve_length}")

    @property
    def bvc_station(self) -> float:
        return self.station - self.curve_length / 2.0

    @property
    def evc_station(self) -> float:
        return self.station + self.curve_length / 2.0


class VerticalProfile(ProfileSource):
    """Profile made of tangent and parabolic segments.

    Args:
        pvis: PVIs in station order (at least two)
        name: Profile name

    Raises:
        ValueError: If fewer than two PVIs are given, two PVIs share a
            station, or vertical curves overlap
    """

    def __init__(self, pvis: Sequence[PVI], name: str = ""):
        self.name = name
        self.pvis: List[PVI] = sorted(pvis, key=lambda p: p.station)
        if len(self.pvis) < 2:
            raise ValueError("A vertical profile needs at least 2 PVIs")
        self.segments: List[VerticalSegment] = self._generate_segments()
        self._starts = [s.start_station for s in self.segments]

    @classmethod
    def from_segments(cls, segments: Sequence[VerticalSegment], name: str = "") -> "VerticalProfile":
        """Profile from ready-made segments (e.g. read from an IFC file)."""
        if not segments:
            raise ValueError("A vertical profile needs at least 1 segment")
        profile = cls.__new__(cls)
        profile.name = name
        profile.segments = sorted(segments, key=lambda s: s.start_station)
        profile.pvis = [PVI(s.start_station, s.start_elevation) for s in profile.segments]
        last = profile.segments[-1]
        profile.pvis.append(PVI(last.end_station, last.end_elevation))
        profile._starts = [s.start_station for s in profile.segments]
        return profile

    def _grades(self) -> List[float]:
        grades = []
        for a, b in zip(self.pvis, self.pvis[1:]):
            run = b.station - a.station
            if run == 0:
                raise ValueError(f"PVIs at same station: {a.station:.3f}")
            grades.append((b.elevation - a.elevation) / run)
        return grades

    def _generate_segments(self) -> List[VerticalSegment]:
        grades = self._grades()
        segments: List[VerticalSegment] = []
        station = self.pvis[0].station
        elevation = self.pvis[0].elevation

        for i in range(1, len(self.pvis)):
            pvi = self.pvis[i]
            grade_in = grades[i - 1]
            is_interior = i < len(self.pvis) - 1

            if is_interior and pvi.curve_length > 0:
                if pvi.bvc_station < station - 1e-9 or pvi.evc_station > self.pvis[i + 1].station + 1e-9:
                    raise ValueError(f"Vertical curve at PVI {pvi.station:.3f} overlaps its neighbours")
                if pvi.bvc_station > station:
                    tangent = TangentSegment(station, pvi.bvc_station, elevation, grade_in)
                    segments.append(tangent)
                    station, elevation = pvi.bvc_station, tangent.end_elevation
                curve = ParabolicSegment(station, pvi.evc_station, elevation, grade_in, grades[i])
                segments.append(curve)
                station, elevation = pvi.evc_station, curve.end_elevation
            elif pvi.station > station:
                tangent = TangentSegment(station, pvi.station, elevation, grade_in)
                segments.append(tangent)
                station, elevation = pvi.station, tangent.end_elevation

        logger.debug("Profile %r: %d segments from %d PVIs", self.name, len(segments), len(self.pvis))
        return segments

    # ========================================================================
    # QUERIES
    # ========================================================================

    @property
    def start_station(self) -> float:
        return self.segments[0].start_station

    @property
    def end_station(self) -> float:
        return self.segments[-1].end_station

    def _segment_for(self, station: float) -> VerticalSegment:
        index = max(0, bisect.bisect_right(self._starts, station) - 1)
        segment = self.segments[index]
        if not segment.contains_station(station):
            raise ValueError(
                f"Station {station:.3f} outside profile {self.name!r} "
                f"[{self.start_station:.3f}, {self.end_station:.3f}]"
            )
        return segment

    def elevation_at(self, station: float) -> float:
        return self._segment_for(station).elevation_at(station)

    def grade_at(self, station: float) -> float:
        return self._segment_for(station).grade_at(station)

    @property
    def pvi_stations(self) -> List[float]:
        return [p.station for p in self.pvis]

    @property
    def pvi_elevations(self) -> List[float]:
        return [p.elevation for p in self.pvis]

    @property
    def entity_stations(self) -> List[float]:
        """Segment boundary stations (BVC/EVC and tangent ends)."""
        stations = [s.start_station for s in self.segments]
        stations.append(self.end_station)
        return stations

    def __repr__(self) -> str:
        return (
            f"VerticalProfile({self.name!r}, {self.start_station:.3f}-{self.end_station:.3f}, "
            f"{len(self.segments)} segments)"
        )


class FlatProfile(ProfileSource):
    """Constant elevation everywhere."""

    def __init__(self, elevation: float = 0.0):
        self.elevation = float(elevation)

    def elevation_at(self, station: float) -> float:
        return self.elevation

    def __repr__(self) -> str:
        return f"FlatProfile({self.elevation:.3f})"


def profile_or_flat(profile: Optional[ProfileSource]) -> ProfileSource:
    return profile if profile is not None else FlatProfile()


__all__ = [
    "PVI",
    "VerticalProfile",
    "FlatProfile",
    "profile_or_flat",
]

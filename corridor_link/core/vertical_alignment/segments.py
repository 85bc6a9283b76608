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
Vertical Profile Segments
=========================

Segment types of a vertical profile:
- VerticalSegment: abstract base with the station range
- TangentSegment: constant grade
- ParabolicSegment: parabolic vertical curve

Stations are baseline stations; elevations are absolute.
"""

from abc import ABC, abstractmethod


class VerticalSegment(ABC):
    """Abstract base class for vertical profile segments.

    Raises:
        ValueError: If end_station is not greater than start_station
    """

    segment_type = "SEGMENT"

    def __init__(self, start_station: float, end_station: float, start_elevation: float):
        if end_station <= start_station:
            raise ValueError(
                f"End station ({end_station}) must be > start station ({start_station})"
            )
        self.start_station = float(start_station)
        self.end_station = float(end_station)
        self.start_elevation = float(start_elevation)

    @property
    def length(self) -> float:
        return self.end_station - self.start_station

    @property
    def end_elevation(self) -> float:
        return self._elevation(self.length)

    def contains_station(self, station: float, tolerance: float = 1e-6) -> bool:
        """True if station is in [start_station, end_station] (within tolerance)."""
        return (self.start_station - tolerance) <= station <= (self.end_station + tolerance)

    def _check(self, station: float) -> float:
        if not self.contains_station(station):
            raise ValueError(
                f"Station {station:.3f} outside segment bounds "
                f"[{self.start_station:.3f}, {self.end_station:.3f}]"
            )
        return min(self.length, max(0.0, station - self.start_station))

    def elevation_at(self, station: float) -> float:
        """Elevation at ``station``.

        Raises:
            ValueError: If station is outside the segment
        """
        return self._elevation(self._check(station))

    def grade_at(self, station: float) -> float:
        """Grade (decimal) at ``station``.

        Raises:
            ValueError: If station is outside the segment
        """
        return self._grade(self._check(station))

    @abstractmethod
    def _elevation(self, x: float) -> float:
        """Elevation at distance ``x`` from the segment start."""

    @abstractmethod
    def _grade(self, x: float) -> float:
        """Grade at distance ``x`` from the segment start."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.start_station:.1f}-{self.end_station:.1f})"


class TangentSegment(VerticalSegment):
    """Constant grade segment: E(x) = E0 + g x.

    Example:
        >>> tangent = TangentSegment(0.0, 100.0, 100.0, 0.02)
        >>> tangent.elevation_at(50.0)
        101.0
    """

    segment_type = "CONSTANTGRADIENT"

    def __init__(self, start_station: float, end_station: float, start_elevation: float, grade: float):
        super().__init__(start_station, end_station, start_elevation)
        self.grade = float(grade)

    def _elevation(self, x: float) -> float:
        return self.start_elevation + self.grade * x

    def _grade(self, x: float) -> float:
        return self.grade


class ParabolicSegment(VerticalSegment):
    """Parabolic vertical curve.

    Mathematics:
        Elevation: E(x) = E_BVC + g1 x + ((g2 - g1) / (2 L)) x^2
        Grade:     g(x) = g1 + ((g2 - g1) / L) x

    where x is the distance from the BVC and L the curve length.

    Example:
        >>> curve = ParabolicSegment(160.0, 240.0, 104.0, 0.02, -0.01)
        >>> round(curve.elevation_at(200.0), 3)
        104.5
    """

    segment_type = "PARABOLICARC"

    def __init__(
        self,
        start_station: float,
        end_station: float,
        start_elevation: float,
        g1: float,
        g2: float
    ):
        super().__init__(start_station, end_station, start_elevation)
        self.g1 = float(g1)
        self.g2 = float(g2)

    @property
    def is_crest(self) -> bool:
        return self.g1 > self.g2

    @property
    def is_sag(self) -> bool:
        return self.g1 < self.g2

    def _elevation(self, x: float) -> float:
        return self.start_elevation + self.g1 * x + (self.g2 - self.g1) / (2.0 * self.length) * x * x

    def _grade(self, x: float) -> float:
        return self.g1 + (self.g2 - self.g1) / self.length * x


__all__ = [
    "VerticalSegment",
    "TangentSegment",
    "ParabolicSegment",
]

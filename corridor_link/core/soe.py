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
Station-Offset-Elevation Transform
==================================

Bidirectional mapping between (station, offset, elevation) along a
horizontal alignment and world XYZ.

Frame at a station:
    origin = alignment point at the station (z = 0)
    Y      = horizontal tangent
    Z      = world up
    X      = Y x Z, pointing to the right of travel (positive offset)

Forward:
    point = origin + offset * X + elevation * Z

Inverse:
    1. closest point on the flattened alignment -> station
    2. local = frame(station).to_local(point)
       (offset, residual, elevation) = (local.x, local.y, local.z)

``residual`` is the distance along the tangent between the point and the
station's normal plane; it is ~0 when the closest-point search is exact.
Stations within STATION_SNAP_TOLERANCE of the start or end snap onto them.

Out-of-range stations give None plus a logged warning. Profile elevations
are not applied here; see ``core.baseline``.

Example:
    >>> soe = SOETransform(alignment)
    >>> p = soe.point_at(150.0, offset=3.5, elevation=0.2)
    >>> result = soe.station_offset_elevation(p)
    >>> round(result.station, 3), round(result.offset, 3)
    (150.0, 3.5)
"""

from dataclasses import dataclass
from typing import Optional

from .constants import STATION_SNAP_TOLERANCE
from .coordinate_frame import CoordinateFrame, Point3D, PointLike, as_point
from .horizontal_alignment.manager import HorizontalAlignment
from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class StationOffsetElevation:
    """Result of an inverse SOE query.

    Attributes:
        station: Station of the closest alignment point
        offset: Signed lateral distance, positive to the right
        elevation: Height above the frame origin
        residual: Along-tangent miss of the closest-point search
        on_profile: False when no profile elevation was available and
            ``elevation`` is measured from z = 0 instead
    """

    station: float
    offset: float
    elevation: float
    residual: float = 0.0
    on_profile: bool = True

    def as_point(self) -> Point3D:
        """(offset, residual, elevation) as a Point3D."""
        return Point3D(self.offset, self.residual, self.elevation)

    def rounded(self, decimals: int) -> "StationOffsetElevation":
        return StationOffsetElevation(
            round(self.station, decimals),
            round(self.offset, decimals),
            round(self.elevation, decimals),
            round(self.residual, decimals),
            self.on_profile,
        )


def snap_station(station: float, start: float, end: float, tolerance: float) -> float:
    """Snap ``station`` onto start or end when it is within ``tolerance``."""
    if abs(station - start) <= tolerance:
        return start
    if abs(station - end) <= tolerance:
        return end
    return station


class SOETransform:
    """Station-offset-elevation engine for one horizontal alignment.

    Args:
        alignment: Alignment supplying the chain
        snap_tolerance: Boundary snapping distance for stations
    """

    def __init__(self, alignment: HorizontalAlignment, snap_tolerance: float = STATION_SNAP_TOLERANCE):
        self.alignment = alignment
        self.snap_tolerance = snap_tolerance

    @property
    def start(self) -> float:
        return self.alignment.start

    @property
    def end(self) -> float:
        return self.alignment.end

    def snap(self, station: float) -> float:
        return snap_station(station, self.start, self.end, self.snap_tolerance)

    def frame_at(self, station: float, offset: float = 0.0, elevation: float = 0.0) -> Optional[CoordinateFrame]:
        """Frame at ``station``, optionally moved by offset and elevation.

        Returns:
            CoordinateFrame, or None if the station is out of range
        """
        return self.alignment.coordinate_frame(self.snap(station), offset, elevation)

    def point_at(self, station: float, offset: float = 0.0, elevation: float = 0.0) -> Optional[Point3D]:
        """World point at (station, offset, elevation), or None if out of range."""
        frame = self.frame_at(station)
        if frame is None:
            return None
        return frame.to_world(offset, 0.0, elevation)

    def station_offset_elevation(self, point: PointLike) -> StationOffsetElevation:
        """Station, offset and elevation of a world point.

        Elevation is measured from z = 0 (the alignment's plane).
        """
        point = as_point(point)
        station, _ = self.alignment.closest_station(point)
        station = self.snap(station)
        frame = self.frame_at(station)
        local = frame.to_local(point)
        return StationOffsetElevation(station, local.x, local.z, local.y)

    def frame_at_point(self, point: PointLike) -> CoordinateFrame:
        """Frame at the station of the point's closest alignment point."""
        result = self.station_offset_elevation(point)
        return self.frame_at(result.station)

    def __repr__(self) -> str:
        return f"SOETransform({self.alignment!r})"


__all__ = [
    "StationOffsetElevation",
    "SOETransform",
    "snap_station",
]

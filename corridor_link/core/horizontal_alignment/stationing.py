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
Alignment Stationing Module
============================

Station categories reported by a horizontal alignment:

- GEOMETRY: every point where two primitives join, plus start and end
- PI: points of intersection of the tangents around each curve group,
  plus start and end
- SUPERELEVATION: superelevation transition stations supplied by the
  entity source

A PI station is the station of the curve group's start plus the distance
from that start to the tangent intersection (the tangent length T).
"""

import math
from typing import Iterable, List, Sequence

from ..logging_config import get_logger
from .curve_geometry import get_tangent_intersection
from .primitives import CurvePrimitive, LinePrimitive

logger = get_logger(__name__)


class StationType:
    """Station category tags for ``HorizontalAlignment.stations_for``."""

    GEOMETRY = "GEOMETRY"
    PI = "PI"
    SUPERELEVATION = "SUPERELEVATION"

    ALL = (GEOMETRY, PI, SUPERELEVATION)


def unique_sorted(stations: Iterable[float], decimals: int = 6) -> List[float]:
    """Sort stations and drop the ones equal after rounding."""
    result: List[float] = []
    seen = set()
    for station in sorted(stations):
        key = round(station, decimals)
        if key in seen:
            continue
        seen.add(key)
        result.append(station)
    return result


def geometry_stations(offsets: Sequence[float], start_station: float) -> List[float]:
    """Stations of primitive joints.

    Args:
        offsets: Cumulative chain lengths, starting with 0.0
        start_station: Station of the chain start
    """
    return unique_sorted(start_station + d for d in offsets)


def pi_stations(
    chain: Sequence[CurvePrimitive],
    offsets: Sequence[float],
    start_station: float
) -> List[float]:
    """Stations of the tangent intersections around curve groups.

    A curve group is a maximal run of non-line primitives. Groups whose
    incoming and outgoing tangents are parallel have no PI and are skipped.
    """
    stations = [start_station, start_station + offsets[-1]]
    i = 0
    while i < len(chain):
        if isinstance(chain[i], LinePrimitive):
            i += 1
            continue
        first = i
        while i < len(chain) and not isinstance(chain[i], LinePrimitive):
            i += 1
        last = i - 1

        head = chain[first]
        tail = chain[last]
        d_in = head.direction_at(0.0)
        d_out = tail.direction_at(tail.length)
        pi = get_tangent_intersection(head.start_point, d_in, tail.end_point, d_out)
        if pi is None:
            logger.debug("Curve group %d-%d has parallel tangents, no PI", first, last)
            continue
        # The PI must lie ahead of the curve start along the incoming tangent
        ahead = (pi.x - head.start_point.x) * math.cos(d_in) + (pi.y - head.start_point.y) * math.sin(d_in)
        if ahead < 0:
            logger.debug("Curve group %d-%d deflects past 180 degrees, no PI", first, last)
            continue
        stations.append(start_station + offsets[first] + head.start_point.distance_2d(pi))
    return unique_sorted(stations)


def filter_range(stations: Iterable[float], start: float, end: float) -> List[float]:
    """Stations within [start, end], sorted."""
    return unique_sorted(s for s in stations if start <= s <= end)


__all__ = [
    "StationType",
    "unique_sorted",
    "geometry_stations",
    "pi_stations",
    "filter_range",
]

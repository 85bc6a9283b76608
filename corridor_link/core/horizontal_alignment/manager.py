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
Horizontal Alignment Manager
============================

HorizontalAlignment owns the ordered chain of curve primitives built from a
source's entity descriptors and answers station-indexed queries on it.

Chain construction:
    1. Every entity becomes one or more primitives (segment_builder);
       entities that fail are logged and skipped.
    2. The primitives are stitched head to tail by ``sort_curves``.
    3. If the source has no usable entities, a polyline through its
       fallback points is used instead.

An alignment without usable geometry, or with zero total length, raises
GeometryError. Station queries outside [start, end] return None and log.

Example:
    >>> entities = [
    ...     AlignmentEntity.tangent(Point3D(0, 0), Point3D(100, 0)),
    ...     AlignmentEntity.arc(Point3D(100, 50), Point3D(100, 0), Point3D(150, 50)),
    ... ]
    >>> alignment = HorizontalAlignment(entities, name="Main")
    >>> alignment.end
    178.53981633974485
"""

import bisect
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from ..constants import STITCH_TOLERANCE
from ..coordinate_frame import CoordinateFrame, Point3D, as_point, prune_duplicates
from ..exceptions import GeometryError, log_out_of_range
from ..logging_config import get_logger
from ..station_formatting import format_station
from .entities import AlignmentEntity
from .primitives import CurvePrimitive, LinePrimitive
from .segment_builder import build_primitives
from .stationing import StationType, filter_range, geometry_stations, pi_stations

logger = get_logger(__name__)


# ============================================================================
# CHAIN STITCHING
# ============================================================================

def _orient_head(
    chain: List[CurvePrimitive],
    start_point: Point3D,
    tolerance: float
) -> None:
    """Move the primitive touching ``start_point`` to the front, facing away from it."""
    for index, primitive in enumerate(chain):
        if primitive.start_point.distance_2d(start_point) < tolerance:
            chain.insert(0, chain.pop(index))
            return
        if primitive.end_point.distance_2d(start_point) < tolerance:
            chain.pop(index)
            chain.insert(0, primitive.reversed())
            return
    logger.debug("No primitive touches the recorded start point; keeping source order")


def sort_curves(
    curves: Iterable[CurvePrimitive],
    tolerance: float = STITCH_TOLERANCE,
    start_point: Optional[Point3D] = None
) -> List[CurvePrimitive]:
    """Stitch primitives into a head-to-tail chain.

    Greedy pass: for each position i, the first later primitive whose start
    or end lies within ``tolerance`` of primitive i's end is swapped into
    position i + 1, reversed when it matched with its end. When several
    primitives match, the first in scan order wins and a warning is logged.

    Args:
        curves: Primitives in source order
        tolerance: Endpoint matching distance
        start_point: Recorded alignment start; when given, the primitive
            touching it becomes the chain head

    Returns:
        New list; the input is not modified
    """
    chain = list(curves)
    if start_point is not None and chain:
        _orient_head(chain, start_point, tolerance)

    for i in range(len(chain) - 1):
        end = chain[i].end_point
        candidates: List[Tuple[int, bool]] = []
        for j in range(i + 1, len(chain)):
            if chain[j].start_point.distance_2d(end) < tolerance:
                candidates.append((j, False))
            elif chain[j].end_point.distance_2d(end) < tolerance:
                candidates.append((j, True))

        if not candidates:
            logger.warning(
                "No primitive continues from (%.4f, %.4f) after position %d",
                end.x, end.y, i,
            )
            continue
        if len(candidates) > 1:
            logger.warning(
                "%d primitives continue from (%.4f, %.4f); using the first",
                len(candidates), end.x, end.y,
            )

        j, reverse = candidates[0]
        primitive = chain[j].reversed() if reverse else chain[j]
        chain[j] = chain[i + 1]
        chain[i + 1] = primitive

    return chain


def polyline_primitives(points: Sequence[Point3D]) -> List[CurvePrimitive]:
    """Line chain through ``points`` after pruning duplicates."""
    flat = prune_duplicates(as_point(p).flattened() for p in points)
    return [LinePrimitive(a, b) for a, b in zip(flat, flat[1:])]


# ============================================================================
# ALIGNMENT
# ============================================================================

class HorizontalAlignment:
    """Horizontal alignment geometry built from entity descriptors.

    Attributes:
        name: Alignment name
        start_station: Station of the chain start

    Args:
        entities: Entity descriptors in source order
        name: Alignment name
        start_station: Station of the first point (defaults to the first
            entity's recorded station, else 0)
        superelevation_stations: Transition stations from the source
        fallback_points: Points for a polyline when no entity can be built

    Raises:
        GeometryError: If no geometry can be built or the length is zero
    """

    def __init__(
        self,
        entities: Iterable[AlignmentEntity],
        name: str = "",
        start_station: Optional[float] = None,
        superelevation_stations: Optional[Iterable[float]] = None,
        fallback_points: Optional[Sequence[Point3D]] = None,
    ):
        self.name = name
        self._entities = list(entities)
        self._superelevation = sorted(superelevation_stations or [])
        self._offsets: Optional[np.ndarray] = None

        primitives = build_primitives(self._entities)
        head = self._entities[0].start_point if self._entities else None

        if not primitives and fallback_points:
            logger.info("Alignment %r has no usable entities, using polyline fallback", name)
            primitives = polyline_primitives(fallback_points)
            head = as_point(fallback_points[0])

        if not primitives:
            raise GeometryError(f"Alignment {name!r} has no usable geometry")

        self._curves = sort_curves(primitives, start_point=head)
        self._check_continuity()

        if start_station is None:
            recorded = self._entities[0].start_station if self._entities else None
            start_station = recorded if recorded is not None else 0.0
        self.start_station = float(start_station)

        if self.length <= 0:
            raise GeometryError(f"Alignment {name!r} has zero length")

        logger.debug(
            "Alignment %r: %d primitives, %s to %s",
            name, len(self._curves), format_station(self.start), format_station(self.end),
        )

    @classmethod
    def from_source(cls, source: Any) -> "HorizontalAlignment":
        """Build from an ``AlignmentEntitySource``."""
        return cls(
            source.entities(),
            name=source.name,
            start_station=source.starting_station,
            superelevation_stations=source.superelevation_stations(),
            fallback_points=source.fallback_points(),
        )

    def _check_continuity(self) -> None:
        for i, (a, b) in enumerate(zip(self._curves, self._curves[1:])):
            gap = a.end_point.distance_2d(b.start_point)
            if gap >= STITCH_TOLERANCE:
                logger.warning(
                    "Alignment %r: gap of %.6f between primitives %d and %d",
                    self.name, gap, i, i + 1,
                )

    # ========================================================================
    # CHAIN
    # ========================================================================

    def curves(self) -> List[CurvePrimitive]:
        """The stitched primitive chain, in travel order."""
        return list(self._curves)

    def curve(self, index: int) -> CurvePrimitive:
        return self._curves[index]

    @property
    def offsets(self) -> np.ndarray:
        """Cumulative chain length at each primitive start, plus the total.

        Computed on first use; recomputation gives the same array.
        """
        if self._offsets is None:
            lengths = [c.length for c in self._curves]
            self._offsets = np.concatenate(([0.0], np.cumsum(lengths)))
        return self._offsets

    @property
    def length(self) -> float:
        return float(self.offsets[-1])

    @property
    def start(self) -> float:
        return self.start_station

    @property
    def end(self) -> float:
        return self.start_station + self.length

    @property
    def start_point(self) -> Point3D:
        return self._curves[0].start_point

    @property
    def end_point(self) -> Point3D:
        return self._curves[-1].end_point

    def contains(self, station: float, tolerance: float = 0.0) -> bool:
        return self.start - tolerance <= station <= self.end + tolerance

    # ========================================================================
    # STATION QUERIES
    # ========================================================================

    def locate(self, station: float) -> Optional[Tuple[int, float]]:
        """Primitive index and distance into it for ``station``.

        Returns:
            (index, distance) or None if the station is out of range
        """
        if not self.contains(station):
            log_out_of_range(logger, station, self.start, self.end, f"alignment {self.name!r}")
            return None
        distance = station - self.start_station
        offsets = self.offsets
        index = bisect.bisect_right(offsets, distance) - 1
        index = min(max(index, 0), len(self._curves) - 1)
        return index, distance - float(offsets[index])

    def point_at_station(self, station: float) -> Optional[Point3D]:
        located = self.locate(station)
        if located is None:
            return None
        index, local = located
        return self._curves[index].point_at(local)

    def tangent_at_station(self, station: float) -> Optional[np.ndarray]:
        located = self.locate(station)
        if located is None:
            return None
        index, local = located
        return self._curves[index].tangent_at(local)

    def coordinate_frame(self, station: float, offset: float = 0.0, elevation: float = 0.0) -> Optional[CoordinateFrame]:
        """Frame at ``station`` with Y along the tangent and X toward +offset.

        The origin is moved by ``offset`` along X and ``elevation`` along Z.
        Returns None if the station is out of range.
        """
        located = self.locate(station)
        if located is None:
            return None
        index, local = located
        curve = self._curves[index]
        frame = CoordinateFrame.from_tangent(curve.point_at(local), curve.tangent_at(local))
        if offset or elevation:
            moved = frame.to_world(offset, 0.0, elevation)
            frame = CoordinateFrame(moved, frame.x_axis, frame.y_axis, frame.z_axis)
        return frame

    def closest_station(self, point: Point3D) -> Tuple[float, float]:
        """Station of the XY closest point on the chain.

        Returns:
            (station, horizontal distance to the chain)
        """
        best_station = self.start_station
        best_distance = float("inf")
        offsets = self.offsets
        for index, curve in enumerate(self._curves):
            local = curve.closest_distance(point)
            distance = curve.point_at(local).distance_2d(point)
            if distance < best_distance:
                best_distance = distance
                best_station = self.start_station + float(offsets[index]) + local
        return best_station, best_distance

    # ========================================================================
    # STATION CATEGORIES
    # ========================================================================

    @property
    def geometry_stations(self) -> List[float]:
        return geometry_stations(self.offsets, self.start_station)

    @property
    def pi_stations(self) -> List[float]:
        return pi_stations(self._curves, self.offsets, self.start_station)

    @property
    def superelevation_stations(self) -> List[float]:
        return filter_range(self._superelevation, self.start, self.end)

    def stations_for(self, station_type: str) -> List[float]:
        """Sorted stations of one category.

        Raises:
            ValueError: For an unknown category
        """
        if station_type == StationType.GEOMETRY:
            return self.geometry_stations
        if station_type == StationType.PI:
            return self.pi_stations
        if station_type == StationType.SUPERELEVATION:
            return self.superelevation_stations
        raise ValueError(f"Unknown station type {station_type!r}")

    # ========================================================================
    # OUTPUT
    # ========================================================================

    def polyline(self, step: float = 2.0) -> List[Point3D]:
        """Tessellated chain, joints included and duplicates pruned."""
        points: List[Point3D] = []
        for curve in self._curves:
            points.extend(curve.sample(step))
        return prune_duplicates(points)

    def validate(self) -> Dict[str, Any]:
        """Check chain continuity and report basic statistics.

        Returns:
            Dictionary with 'valid', 'errors', 'warnings' and 'info' keys
        """
        errors: List[str] = []
        warnings: List[str] = []
        for i, (a, b) in enumerate(zip(self._curves, self._curves[1:])):
            gap = a.end_point.distance_2d(b.start_point)
            if gap >= STITCH_TOLERANCE:
                errors.append(f"Gap of {gap:.6f} between primitives {i} and {i + 1}")
        for i, curve in enumerate(self._curves):
            closure = getattr(curve, "closure_gap", 0.0)
            if closure > 1e-3:
                warnings.append(f"Spiral {i} closure gap {closure:.6f}")
        return {
            "valid": not errors,
            "errors": errors,
            "warnings": warnings,
            "info": {
                "name": self.name,
                "start_station": self.start,
                "end_station": self.end,
                "length": self.length,
                "entities": sum(len(e.leaves()) for e in self._entities),
                "primitives": len(self._curves),
                "kinds": [c.kind for c in self._curves],
            },
        }

    def __repr__(self) -> str:
        return (
            f"HorizontalAlignment({self.name!r}, {format_station(self.start)} - "
            f"{format_station(self.end)}, {len(self._curves)} primitives)"
        )


__all__ = [
    "sort_curves",
    "polyline_primitives",
    "HorizontalAlignment",
]

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
Curve Primitives
================

Immutable horizontal curve pieces that make up an alignment chain:

- LinePrimitive: straight tangent between two points
- ArcPrimitive: circular arc around a center, clockwise or counter-clockwise
- SpiralPrimitive: clothoid transition between two curvatures

Every primitive is parameterized by distance along the curve, from 0 at
``start_point`` to ``length`` at ``end_point``, and supports:

- point_at(distance) / tangent_at(distance)
- closest_distance(point): distance of the XY closest point
- reversed(): same geometry traversed end -> start
- sample(step): polyline approximation

Points are horizontal (z = 0); elevations come from the profile.
"""

import math
from abc import ABC, abstractmethod
from typing import List, Optional

import numpy as np

from ..constants import (
    SPIRAL_SAMPLE_STEP,
    SPIRAL_SEARCH_SAMPLES,
    SPIRAL_SERIES_TERMS,
    TURN_LEFT,
    TURN_RIGHT,
)
from ..coordinate_frame import Point3D
from ..exceptions import GeometryError
from ..logging_config import get_logger
from .curve_geometry import (
    polar_angle,
    project_onto_segment,
    sweep_angle,
)
from .entities import is_tangent_radius, opposite_turn
from .spiral import spiral_local, spiral_points, tangent_angle, y_sign

logger = get_logger(__name__)

# Below this, a length or radius is treated as zero
MIN_LENGTH = 1e-9


class CurvePrimitive(ABC):
    """Abstract base class for alignment curve primitives."""

    kind = "PRIMITIVE"

    @property
    @abstractmethod
    def start_point(self) -> Point3D:
        """First point of the primitive."""

    @property
    @abstractmethod
    def end_point(self) -> Point3D:
        """Last point of the primitive."""

    @property
    @abstractmethod
    def length(self) -> float:
        """Curve length."""

    @abstractmethod
    def point_at(self, distance: float) -> Point3D:
        """Point at ``distance`` from the start (clamped to the primitive)."""

    @abstractmethod
    def tangent_at(self, distance: float) -> np.ndarray:
        """Unit horizontal tangent (x, y, 0) at ``distance``."""

    @abstractmethod
    def closest_distance(self, point: Point3D) -> float:
        """Distance along the primitive of the XY point closest to ``point``."""

    @abstractmethod
    def reversed(self) -> "CurvePrimitive":
        """The same geometry traversed from end to start."""

    def sample(self, step: float) -> List[Point3D]:
        """Points every ``step`` along the primitive, ends included."""
        count = max(1, int(math.ceil(self.length / step)))
        return [self.point_at(self.length * i / count) for i in range(count + 1)]

    def _clamp(self, distance: float) -> float:
        return min(self.length, max(0.0, distance))

    def direction_at(self, distance: float) -> float:
        """Tangent bearing (radians from +X) at ``distance``."""
        t = self.tangent_at(distance)
        return math.atan2(t[1], t[0])


# ============================================================================
# LINE
# ============================================================================

class LinePrimitive(CurvePrimitive):
    """Straight segment from start to end.

    Raises:
        GeometryError: If start and end coincide
    """

    kind = "LINE"

    def __init__(self, start: Point3D, end: Point3D):
        self._start = start.flattened()
        self._end = end.flattened()
        self._length = self._start.distance_to(self._end)
        if self._length < MIN_LENGTH:
            raise GeometryError(f"Zero-length line at ({start.x:.3f}, {start.y:.3f})")
        self._direction = np.array(
            [(self._end.x - self._start.x) / self._length,
             (self._end.y - self._start.y) / self._length,
             0.0]
        )

    @property
    def start_point(self) -> Point3D:
        return self._start

    @property
    def end_point(self) -> Point3D:
        return self._end

    @property
    def length(self) -> float:
        return self._length

    def point_at(self, distance: float) -> Point3D:
        d = self._clamp(distance)
        return Point3D(
            self._start.x + self._direction[0] * d,
            self._start.y + self._direction[1] * d,
            0.0,
        )

    def tangent_at(self, distance: float) -> np.ndarray:
        return self._direction.copy()

    def closest_distance(self, point: Point3D) -> float:
        distance, _ = project_onto_segment(self._start, self._end, point)
        return distance

    def reversed(self) -> "LinePrimitive":
        return LinePrimitive(self._end, self._start)

    def sample(self, step: float) -> List[Point3D]:
        return [self._start, self._end]

    def __repr__(self) -> str:
        return (
            f"LinePrimitive(({self._start.x:.3f}, {self._start.y:.3f}) -> "
            f"({self._end.x:.3f}, {self._end.y:.3f}))"
        )


# ============================================================================
# ARC
# ============================================================================

class ArcPrimitive(CurvePrimitive):
    """Circular arc from start to end around center.

    The radius comes from center -> start; the end point fixes the end
    angle. ``clockwise`` is the sense in which the arc is traversed from
    start to end.

    Raises:
        GeometryError: If the radius is zero or the sweep is empty
    """

    kind = "ARC"

    def __init__(self, center: Point3D, start: Point3D, end: Point3D, clockwise: bool = False):
        self._center = center.flattened()
        self._start = start.flattened()
        self._end = end.flattened()
        self._clockwise = bool(clockwise)

        self._radius = self._center.distance_to(self._start)
        if self._radius < MIN_LENGTH:
            raise GeometryError(
                f"Arc start ({start.x:.3f}, {start.y:.3f}) coincides with its center"
            )
        end_radius = self._center.distance_to(self._end)
        if abs(end_radius - self._radius) > max(1e-4, 1e-6 * self._radius):
            logger.warning(
                "Arc radii differ: start %.6f, end %.6f", self._radius, end_radius
            )

        self._start_angle = polar_angle(self._center, self._start)
        self._end_angle = polar_angle(self._center, self._end)
        self._sweep = sweep_angle(self._start_angle, self._end_angle, self._clockwise)
        if self._sweep * self._radius < MIN_LENGTH:
            raise GeometryError(
                f"Zero-length arc at ({start.x:.3f}, {start.y:.3f})"
            )

    @classmethod
    def by_center_start_end(cls, center: Point3D, start: Point3D, end: Point3D) -> "ArcPrimitive":
        """Counter-clockwise arc from start to end around center."""
        return cls(center, start, end, clockwise=False)

    @property
    def center(self) -> Point3D:
        return self._center

    @property
    def radius(self) -> float:
        return self._radius

    @property
    def clockwise(self) -> bool:
        return self._clockwise

    @property
    def sweep(self) -> float:
        return self._sweep

    @property
    def start_point(self) -> Point3D:
        return self._start

    @property
    def end_point(self) -> Point3D:
        return self._end

    @property
    def length(self) -> float:
        return self._radius * self._sweep

    def _angle_at(self, distance: float) -> float:
        delta = self._clamp(distance) / self._radius
        return self._start_angle - delta if self._clockwise else self._start_angle + delta

    def point_at(self, distance: float) -> Point3D:
        angle = self._angle_at(distance)
        return Point3D(
            self._center.x + self._radius * math.cos(angle),
            self._center.y + self._radius * math.sin(angle),
            0.0,
        )

    def mid_point(self) -> Point3D:
        return self.point_at(self.length / 2.0)

    def tangent_at(self, distance: float) -> np.ndarray:
        angle = self._angle_at(distance)
        if self._clockwise:
            return np.array([math.sin(angle), -math.cos(angle), 0.0])
        return np.array([-math.sin(angle), math.cos(angle), 0.0])

    def closest_distance(self, point: Point3D) -> float:
        if self._center.distance_2d(point) < MIN_LENGTH:
            return 0.0
        delta = sweep_angle(self._start_angle, polar_angle(self._center, point), self._clockwise)
        if delta <= self._sweep:
            return delta * self._radius
        # Outside the sweep: the nearer end wins
        if self._start.distance_2d(point) <= self._end.distance_2d(point):
            return 0.0
        return self.length

    def reversed(self) -> "ArcPrimitive":
        return ArcPrimitive(self._center, self._end, self._start, not self._clockwise)

    def __repr__(self) -> str:
        sense = "CW" if self._clockwise else "CCW"
        return (
            f"ArcPrimitive(R={self._radius:.3f}, {sense}, "
            f"sweep={math.degrees(self._sweep):.3f} deg, L={self.length:.3f})"
        )


# ============================================================================
# SPIRAL
# ============================================================================

def _curvature(radius: Optional[float]) -> float:
    """Curvature magnitude of a radius; None, 0 and inf mean a tangent."""
    if is_tangent_radius(radius):
        return 0.0
    return 1.0 / abs(radius)


class SpiralPrimitive(CurvePrimitive):
    """Clothoid transition between two curvatures.

    The curve is evaluated from the Fresnel series, anchored at its
    lower-curvature end. A spiral leaving a tangent is anchored at its start
    point and rotated to ``start_direction``. A spiral arriving at a tangent
    is anchored at its end point, laid out backward from ``end_direction``.
    Series truncation leaves a small gap at the far end; it is distributed
    linearly along the spiral so the primitive still meets its recorded
    start and end points exactly.

    Args:
        start_point: Recorded start point
        end_point: Recorded end point
        start_direction: Tangent bearing at the start (radians)
        end_direction: Tangent bearing at the end (radians)
        start_radius: Radius at the start (None, 0 or inf for a tangent)
        end_radius: Radius at the end (None, 0 or inf for a tangent)
        length: Spiral length
        turn_direction: 'LEFT' or 'RIGHT'

    Raises:
        GeometryError: If the length is zero or the curvature does not change
    """

    kind = "SPIRAL"

    def __init__(
        self,
        start_point: Point3D,
        end_point: Point3D,
        start_direction: float,
        end_direction: float,
        start_radius: Optional[float],
        end_radius: Optional[float],
        length: float,
        turn_direction: str,
        terms: int = SPIRAL_SERIES_TERMS,
    ):
        if length < MIN_LENGTH:
            raise GeometryError("Zero-length spiral")
        if turn_direction not in (TURN_LEFT, TURN_RIGHT):
            raise GeometryError(f"Unknown spiral turn direction {turn_direction!r}")

        k1 = _curvature(start_radius)
        k2 = _curvature(end_radius)
        if abs(k2 - k1) < 1e-12:
            raise GeometryError("Spiral start and end curvature are equal")

        self._start = start_point.flattened()
        self._end = end_point.flattened()
        self.start_direction = float(start_direction)
        self.end_direction = float(end_direction)
        self.start_radius = start_radius
        self.end_radius = end_radius
        self._length = float(length)
        self.turn_direction = turn_direction
        self.terms = terms

        # A^2 for the clothoid this spiral is a piece of
        self.rl = self._length / abs(k2 - k1)
        self.inbound = k1 < k2
        if self.inbound:
            self._anchor = self._start
            self._anchor_direction = self.start_direction
            self._n0 = k1 * self.rl
        else:
            self._anchor = self._end
            self._anchor_direction = self.end_direction + math.pi
            self._n0 = k2 * self.rl
        self._sign = y_sign(turn_direction, at_start=self.inbound)

        far_target = self._end if self.inbound else self._start
        far = self._analytic_point(self._length if self.inbound else 0.0)
        self._closure = far_target - far
        gap = math.hypot(self._closure.x, self._closure.y)
        if gap > max(1e-3, 1e-4 * self._length):
            logger.warning(
                "Spiral closure gap %.6f over length %.3f; check recorded geometry",
                gap, self._length,
            )

    # Local n for a distance measured from the start point
    def _local_n(self, distance: float) -> float:
        if self.inbound:
            return self._n0 + distance
        return self._n0 + (self._length - distance)

    def _to_world(self, lx: float, ly: float) -> Point3D:
        cos_a = math.cos(self._anchor_direction)
        sin_a = math.sin(self._anchor_direction)
        ly = self._sign * ly
        return Point3D(
            self._anchor.x + lx * cos_a - ly * sin_a,
            self._anchor.y + lx * sin_a + ly * cos_a,
            0.0,
        )

    def _analytic_point(self, distance: float) -> Point3D:
        lx, ly = spiral_local(self._local_n(distance), self.rl, self._n0, self.terms)
        return self._to_world(lx, ly)

    def _closure_weight(self, distance: float) -> float:
        if self.inbound:
            return distance / self._length
        return (self._length - distance) / self._length

    @property
    def start_point(self) -> Point3D:
        return self._start

    @property
    def end_point(self) -> Point3D:
        return self._end

    @property
    def length(self) -> float:
        return self._length

    @property
    def closure_gap(self) -> float:
        """Distance between the series end and the recorded far point."""
        return math.hypot(self._closure.x, self._closure.y)

    def point_at(self, distance: float) -> Point3D:
        d = self._clamp(distance)
        return self._analytic_point(d) + self._closure * self._closure_weight(d)

    def tangent_at(self, distance: float) -> np.ndarray:
        n = self._local_n(self._clamp(distance))
        turned = float(tangent_angle(n, self.rl) - tangent_angle(self._n0, self.rl))
        heading = self._anchor_direction + self._sign * turned
        if not self.inbound:
            heading += math.pi
        return np.array([math.cos(heading), math.sin(heading), 0.0])

    def closest_distance(self, point: Point3D) -> float:
        # Coarse search on samples, then golden-section refinement
        count = SPIRAL_SEARCH_SAMPLES
        distances = np.linspace(0.0, self._length, count + 1)
        samples = [self.point_at(float(d)) for d in distances]
        gaps = [p.distance_2d(point) for p in samples]
        best = int(np.argmin(gaps))
        lo = float(distances[max(0, best - 1)])
        hi = float(distances[min(count, best + 1)])
        return self._refine(point, lo, hi)

    def _refine(self, point: Point3D, lo: float, hi: float, iterations: int = 60) -> float:
        ratio = (math.sqrt(5.0) - 1.0) / 2.0
        a, b = lo, hi
        c = b - ratio * (b - a)
        d = a + ratio * (b - a)
        fc = self.point_at(c).distance_2d(point)
        fd = self.point_at(d).distance_2d(point)
        for _ in range(iterations):
            if b - a < 1e-10:
                break
            if fc < fd:
                b, d, fd = d, c, fc
                c = b - ratio * (b - a)
                fc = self.point_at(c).distance_2d(point)
            else:
                a, c, fc = c, d, fd
                d = a + ratio * (b - a)
                fd = self.point_at(d).distance_2d(point)
        return (a + b) / 2.0

    def reversed(self) -> "SpiralPrimitive":
        flipped = opposite_turn(self.turn_direction)
        return SpiralPrimitive(
            self._end,
            self._start,
            self.end_direction + math.pi,
            self.start_direction + math.pi,
            self.end_radius,
            self.start_radius,
            self._length,
            flipped,
            self.terms,
        )

    def sample(self, step: float = SPIRAL_SAMPLE_STEP) -> List[Point3D]:
        """Spiral samples from the series, start to end."""
        local = spiral_points(
            self._length, self.rl, self.turn_direction,
            at_start=self.inbound, step=step, terms=self.terms,
            start_distance=self._n0,
        )
        count = len(local) - 1
        points = []
        for i, lp in enumerate(local):
            # spiral_points already applied the turn sign
            world = self._to_world(lp.x, self._sign * lp.y)
            along = self._length * i / count
            distance = along if self.inbound else self._length - along
            points.append(world + self._closure * self._closure_weight(distance))
        if not self.inbound:
            points.reverse()
        return points

    def __repr__(self) -> str:
        return (
            f"SpiralPrimitive({self.turn_direction}, L={self._length:.3f}, "
            f"RL={self.rl:.3f}, {'in' if self.inbound else 'out'}bound)"
        )


__all__ = [
    "CurvePrimitive",
    "LinePrimitive",
    "ArcPrimitive",
    "SpiralPrimitive",
    "MIN_LENGTH",
]

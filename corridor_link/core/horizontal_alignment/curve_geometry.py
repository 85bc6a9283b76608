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
Horizontal Curve Geometry Module
=================================

Plane geometry helpers shared by the curve primitives and the alignment
model: angle normalization, arc sweeps, tangent intersections and
closest-point projections. All functions work on the XY plane and ignore z.
"""

import logging
import math
from typing import Optional, Tuple

from ..coordinate_frame import Point3D

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * math.pi


def normalize_angle(angle: float) -> float:
    """Wrap an angle into (-pi, pi]."""
    angle = math.fmod(angle, TWO_PI)
    if angle <= -math.pi:
        angle += TWO_PI
    elif angle > math.pi:
        angle -= TWO_PI
    return angle


def direction_angle(start: Point3D, end: Point3D) -> float:
    """Bearing of the vector start -> end, radians from +X."""
    return math.atan2(end.y - start.y, end.x - start.x)


def polar_angle(center: Point3D, point: Point3D) -> float:
    """Angle of ``point`` around ``center``, radians from +X."""
    return math.atan2(point.y - center.y, point.x - center.x)


def sweep_angle(start_angle: float, end_angle: float, clockwise: bool) -> float:
    """Angle swept from start to end in the given rotational sense.

    Returns a value in [0, 2 pi).

    Example:
        >>> round(sweep_angle(math.pi / 2, 0.0, clockwise=True), 6)
        1.570796
    """
    if clockwise:
        return (start_angle - end_angle) % TWO_PI
    return (end_angle - start_angle) % TWO_PI


def get_tangent_intersection(
    p1: Point3D,
    d1: float,
    p2: Point3D,
    d2: float
) -> Optional[Point3D]:
    """Calculate intersection point of two tangent lines.

    Args:
        p1: Point on first line
        d1: Direction of first line (radians)
        p2: Point on second line
        d2: Direction of second line (radians)

    Returns:
        Intersection point, or None if lines are parallel
    """
    cos1, sin1 = math.cos(d1), math.sin(d1)
    cos2, sin2 = math.cos(d2), math.sin(d2)

    det = cos1 * (-sin2) - (-sin1) * cos2
    if abs(det) < 1e-10:
        return None

    dx = p2.x - p1.x
    dy = p2.y - p1.y
    t1 = ((-sin2) * dx + cos2 * dy) / det

    return Point3D(p1.x + t1 * cos1, p1.y + t1 * sin1, 0.0)


def project_onto_segment(start: Point3D, end: Point3D, point: Point3D) -> Tuple[float, float]:
    """Project ``point`` onto the XY segment start -> end.

    Returns:
        Tuple (distance along the segment clamped to [0, length],
        horizontal distance from the point to its projection)
    """
    dx = end.x - start.x
    dy = end.y - start.y
    length_sq = dx * dx + dy * dy
    if length_sq == 0.0:
        return 0.0, start.distance_2d(point)

    t = ((point.x - start.x) * dx + (point.y - start.y) * dy) / length_sq
    t = min(1.0, max(0.0, t))
    px = start.x + t * dx
    py = start.y + t * dy
    return t * math.sqrt(length_sq), math.hypot(point.x - px, point.y - py)


__all__ = [
    "TWO_PI",
    "normalize_angle",
    "direction_angle",
    "polar_angle",
    "sweep_angle",
    "get_tangent_intersection",
    "project_onto_segment",
]

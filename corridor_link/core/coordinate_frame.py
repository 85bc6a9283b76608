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
Points and Coordinate Frames
============================

Value types shared by every geometry module:

- Point3D: immutable (x, y, z) triple
- CoordinateFrame: origin plus orthonormal, right-handed X/Y/Z axes

Frames along an alignment use Y for the tangent direction, Z for world up,
and X = Y x Z, which points to the right of the direction of travel. A local
point (offset, along, elevation) maps to world space with ``to_world`` and
back with ``to_local``.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union

import numpy as np

from .constants import DUPLICATE_POINT_TOLERANCE
from .exceptions import GeometryError

WORLD_Z = np.array([0.0, 0.0, 1.0])

# Orthonormality check used when a frame is constructed from explicit axes
FRAME_TOLERANCE = 1e-6


@dataclass(frozen=True)
class Point3D:
    """Immutable 3D point.

    Example:
        >>> a = Point3D(1.0, 2.0, 0.0)
        >>> b = Point3D(4.0, 6.0, 0.0)
        >>> a.distance_to(b)
        5.0
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "Point3D":
        """Build a point from a 2 or 3 item sequence (z defaults to 0)."""
        if len(values) == 2:
            return cls(float(values[0]), float(values[1]), 0.0)
        if len(values) == 3:
            return cls(float(values[0]), float(values[1]), float(values[2]))
        raise ValueError(f"Expected 2 or 3 coordinates, got {len(values)}")

    def __add__(self, other: "Point3D") -> "Point3D":
        return Point3D(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Point3D") -> "Point3D":
        return Point3D(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> "Point3D":
        return Point3D(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def flattened(self, z: float = 0.0) -> "Point3D":
        """Return the point projected onto the horizontal plane at ``z``."""
        return Point3D(self.x, self.y, z)

    def distance_to(self, other: "Point3D") -> float:
        return math.sqrt(
            (self.x - other.x) ** 2 + (self.y - other.y) ** 2 + (self.z - other.z) ** 2
        )

    def distance_2d(self, other: "Point3D") -> float:
        """Horizontal (XY) distance, ignoring elevation."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def is_almost_equal(self, other: "Point3D", tolerance: float = DUPLICATE_POINT_TOLERANCE) -> bool:
        return self.distance_to(other) < tolerance


PointLike = Union[Point3D, Sequence[float], np.ndarray]


def as_point(value: PointLike) -> Point3D:
    """Coerce a Point3D, tuple, list or numpy array into a Point3D."""
    if isinstance(value, Point3D):
        return value
    return Point3D.from_sequence(list(value))


def _unit(vector: np.ndarray, name: str) -> np.ndarray:
    length = float(np.linalg.norm(vector))
    if length < 1e-12:
        raise GeometryError(f"Zero-length {name} axis")
    return vector / length


class CoordinateFrame:
    """Origin plus orthonormal right-handed axes.

    Frames are immutable; every query that needs a different frame builds a
    new one.

    Attributes:
        origin: Frame origin in world coordinates
        x_axis: Unit X axis (numpy array)
        y_axis: Unit Y axis (numpy array)
        z_axis: Unit Z axis (numpy array)

    Raises:
        GeometryError: If the axes are not unit length, not mutually
            orthogonal, or not right-handed
    """

    __slots__ = ("_origin", "_axes")

    def __init__(
        self,
        origin: PointLike,
        x_axis: Sequence[float],
        y_axis: Sequence[float],
        z_axis: Sequence[float],
    ):
        axes = np.array([x_axis, y_axis, z_axis], dtype=float)
        if axes.shape != (3, 3):
            raise GeometryError("Frame axes must be 3D vectors")

        # Rows are the axes, so axes @ axes.T must be the identity
        gram = axes @ axes.T
        if not np.allclose(gram, np.eye(3), atol=FRAME_TOLERANCE):
            raise GeometryError(f"Frame axes are not orthonormal:\n{axes}")
        if np.linalg.det(axes) < 0:
            raise GeometryError("Frame axes are left-handed")

        self._origin = as_point(origin)
        self._axes = axes

    # ========================================================================
    # CONSTRUCTION
    # ========================================================================

    @classmethod
    def from_tangent(cls, origin: PointLike, tangent: Sequence[float]) -> "CoordinateFrame":
        """Build a frame whose Y axis follows ``tangent``.

        X = Y x worldZ (normalized) and Z = X x Y. For a horizontal tangent
        Z is world up; for a sloped tangent Z tilts with it.

        Raises:
            GeometryError: If the tangent is zero or vertical
        """
        y = _unit(np.asarray(tangent, dtype=float), "tangent")
        x = np.cross(y, WORLD_Z)
        if np.linalg.norm(x) < 1e-12:
            raise GeometryError("Tangent is vertical, frame is undefined")
        x = _unit(x, "X")
        z = np.cross(x, y)
        return cls(origin, x, y, z)

    @classmethod
    def from_direction_angle(cls, origin: PointLike, angle: float) -> "CoordinateFrame":
        """Horizontal frame whose Y axis points at ``angle`` radians from +X."""
        return cls.from_tangent(origin, (math.cos(angle), math.sin(angle), 0.0))

    @classmethod
    def world(cls) -> "CoordinateFrame":
        return cls(Point3D(), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0))

    # ========================================================================
    # PROPERTIES
    # ========================================================================

    @property
    def origin(self) -> Point3D:
        return self._origin

    @property
    def x_axis(self) -> np.ndarray:
        return self._axes[0].copy()

    @property
    def y_axis(self) -> np.ndarray:
        return self._axes[1].copy()

    @property
    def z_axis(self) -> np.ndarray:
        return self._axes[2].copy()

    @property
    def matrix(self) -> np.ndarray:
        """4x4 homogeneous local-to-world matrix (axes as columns)."""
        m = np.eye(4)
        m[:3, :3] = self._axes.T
        m[:3, 3] = self._origin.to_array()
        return m

    # ========================================================================
    # TRANSFORMS
    # ========================================================================

    def to_world(self, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> Point3D:
        """Map local coordinates into world space."""
        world = self._origin.to_array() + self._axes.T @ np.array([x, y, z], dtype=float)
        return Point3D(*(float(c) for c in world))

    def to_local(self, point: PointLike) -> Point3D:
        """Map a world point into this frame's local coordinates."""
        delta = as_point(point).to_array() - self._origin.to_array()
        local = self._axes @ delta
        return Point3D(*(float(c) for c in local))

    def inverse(self) -> "CoordinateFrame":
        """Frame representing the world-to-local transform."""
        rotation = self._axes  # rows of R^T are the inverse frame's axes
        origin = -(rotation @ self._origin.to_array())
        inv_axes = rotation.T
        return CoordinateFrame(origin, inv_axes[0], inv_axes[1], inv_axes[2])

    def translated(self, dx: float = 0.0, dy: float = 0.0, dz: float = 0.0) -> "CoordinateFrame":
        """Copy of this frame with the origin moved by world (dx, dy, dz)."""
        return CoordinateFrame(
            self._origin + Point3D(dx, dy, dz), self._axes[0], self._axes[1], self._axes[2]
        )

    def flattened(self) -> "CoordinateFrame":
        """Copy of this frame with Y projected to horizontal and Z set to up."""
        y = self._axes[1].copy()
        y[2] = 0.0
        return CoordinateFrame.from_tangent(self._origin, y)

    def is_almost_equal(self, other: "CoordinateFrame", tolerance: float = 1e-6) -> bool:
        return (
            self._origin.distance_to(other.origin) < tolerance
            and bool(np.allclose(self._axes, other._axes, atol=tolerance))
        )

    def __repr__(self) -> str:
        o = self._origin
        y = self._axes[1]
        return (
            f"CoordinateFrame(origin=({o.x:.3f}, {o.y:.3f}, {o.z:.3f}), "
            f"y=({y[0]:.4f}, {y[1]:.4f}, {y[2]:.4f}))"
        )


def prune_duplicates(
    points: Iterable[Point3D],
    tolerance: float = DUPLICATE_POINT_TOLERANCE
) -> List[Point3D]:
    """Drop consecutive points closer than ``tolerance`` to their predecessor.

    Example:
        >>> prune_duplicates([Point3D(), Point3D(), Point3D(1, 0, 0)])
        [Point3D(x=0.0, y=0.0, z=0.0), Point3D(x=1, y=0, z=0)]
    """
    result: List[Point3D] = []
    for point in points:
        if result and result[-1].distance_to(point) < tolerance:
            continue
        result.append(point)
    return result


def polyline_length(points: Sequence[Point3D]) -> float:
    return sum(a.distance_to(b) for a, b in zip(points, points[1:]))


__all__ = [
    "Point3D",
    "PointLike",
    "as_point",
    "CoordinateFrame",
    "prune_duplicates",
    "polyline_length",
    "WORLD_Z",
]

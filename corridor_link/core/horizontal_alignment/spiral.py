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
Clothoid Spiral Approximation
=============================

Evaluates Euler spirals (clothoids) with the truncated Fresnel power series.

For a clothoid with flatness RL = A^2 = R * L (R the radius reached after
length L), the local coordinates at distance n from the zero-curvature
origin are:

    x(n) = sum_t (-1)^t n^(4t+1) / ((2t)!   (4t+1) (2 RL)^(2t))
    y(n) = sum_t (-1)^t n^(4t+3) / ((2t+1)! (4t+3) (2 RL)^(2t+1))

for t = 0..T. The local curve starts at (0, 0) heading along +X and bends
toward +Y; the tangent angle at n is n^2 / (2 RL).

Turning convention:
    A spiral that leaves a tangent (infinite radius at its start) is laid out
    from its start point. One that arrives at a tangent (infinite radius at
    its end) is laid out backward from its end point, where the curve bends
    the opposite way. The local y is therefore negated for a RIGHT turn at
    the start and for a LEFT turn at the end.
"""

import math
from typing import List, Tuple, Union

import numpy as np

from ..constants import SPIRAL_SAMPLE_STEP, SPIRAL_SERIES_TERMS, TURN_LEFT, TURN_RIGHT
from ..coordinate_frame import Point3D

ArrayLike = Union[float, np.ndarray]


def factorial(n: int) -> float:
    """Factorial accumulated in floating point.

    Integer factorials pass the 64-bit range at 21!, while the series needs
    (2t+1)! for t up to at least 17, so the product is kept as a float.

    Raises:
        ValueError: If n is negative
    """
    if n < 0:
        raise ValueError(f"Factorial of negative number {n}")
    result = 1.0
    for i in range(2, n + 1):
        result *= i
    return result


def fresnel_xy(
    n: ArrayLike,
    rl: float,
    terms: int = SPIRAL_SERIES_TERMS
) -> Tuple[ArrayLike, ArrayLike]:
    """Local clothoid coordinates at distance ``n`` from the origin.

    Args:
        n: Distance along the spiral (scalar or numpy array)
        rl: Flatness parameter R * L
        terms: Highest series index T

    Returns:
        Tuple (x, y) with the same shape as ``n``

    Raises:
        ValueError: If rl is not positive
    """
    if rl <= 0:
        raise ValueError(f"Spiral parameter RL must be positive, got {rl}")

    n = np.asarray(n, dtype=float)
    x = np.zeros_like(n)
    y = np.zeros_like(n)
    two_rl = 2.0 * rl
    for t in range(terms + 1):
        sign = -1.0 if t % 2 else 1.0
        x = x + sign * n ** (4 * t + 1) / (
            factorial(2 * t) * (4 * t + 1) * two_rl ** (2 * t)
        )
        y = y + sign * n ** (4 * t + 3) / (
            factorial(2 * t + 1) * (4 * t + 3) * two_rl ** (2 * t + 1)
        )
    if x.ndim == 0:
        return float(x), float(y)
    return x, y


def tangent_angle(n: ArrayLike, rl: float) -> ArrayLike:
    """Local tangent angle (radians) at distance ``n``: n^2 / (2 RL)."""
    return np.asarray(n, dtype=float) ** 2 / (2.0 * rl)


def spiral_local(
    n: ArrayLike,
    rl: float,
    start_distance: float = 0.0,
    terms: int = SPIRAL_SERIES_TERMS
) -> Tuple[ArrayLike, ArrayLike]:
    """Clothoid coordinates relative to the point at ``start_distance``.

    The result is translated and rotated so the clothoid point at
    ``start_distance`` sits at (0, 0) heading along +X. With
    ``start_distance == 0`` this is exactly ``fresnel_xy``. A non-zero start
    distance describes a spiral between two finite radii, which is a piece
    of the same clothoid that does not begin at zero curvature.
    """
    x, y = fresnel_xy(n, rl, terms)
    if start_distance == 0.0:
        return x, y
    x0, y0 = fresnel_xy(start_distance, rl, terms)
    theta0 = float(tangent_angle(start_distance, rl))
    cos0, sin0 = math.cos(theta0), math.sin(theta0)
    dx = np.asarray(x) - x0
    dy = np.asarray(y) - y0
    lx = cos0 * dx + sin0 * dy
    ly = -sin0 * dx + cos0 * dy
    if lx.ndim == 0:
        return float(lx), float(ly)
    return lx, ly


def sample_count(length: float, step: float = SPIRAL_SAMPLE_STEP) -> int:
    """Number of sample intervals: ceil(length / step), at least 1."""
    return max(1, int(math.ceil(length / step)))


def y_sign(turn_direction: str, at_start: bool) -> float:
    """Sign applied to the local y coordinate.

    Args:
        turn_direction: 'LEFT' or 'RIGHT'
        at_start: True when the zero-curvature end is the spiral's start

    Raises:
        ValueError: For an unknown turn direction
    """
    if turn_direction not in (TURN_LEFT, TURN_RIGHT):
        raise ValueError(f"Unknown turn direction {turn_direction!r}")
    if at_start:
        return -1.0 if turn_direction == TURN_RIGHT else 1.0
    return -1.0 if turn_direction == TURN_LEFT else 1.0


def spiral_points(
    length: float,
    rl: float,
    turn_direction: str,
    at_start: bool = True,
    step: float = SPIRAL_SAMPLE_STEP,
    terms: int = SPIRAL_SERIES_TERMS,
    start_distance: float = 0.0,
) -> List[Point3D]:
    """Sample a spiral in its local frame.

    Args:
        length: Spiral length L
        rl: Flatness parameter R * L
        turn_direction: 'LEFT' or 'RIGHT'
        at_start: True if the lower-curvature end is the spiral start
        step: Nominal sample spacing
        terms: Highest series index T
        start_distance: Clothoid distance of the lower-curvature end
            (0 when that end has infinite radius)

    Returns:
        ceil(L / step) + 1 local points from (0, 0, 0) to n = L

    Example:
        >>> pts = spiral_points(60.0, 200.0 * 60.0, "LEFT")
        >>> pts[0]
        Point3D(x=0.0, y=0.0, z=0.0)
    """
    if length <= 0:
        raise ValueError(f"Spiral length must be positive, got {length}")
    count = sample_count(length, step)
    n = np.linspace(start_distance, start_distance + length, count + 1)
    x, y = spiral_local(n, rl, start_distance, terms)
    sign = y_sign(turn_direction, at_start)
    return [Point3D(float(px), float(sign * py), 0.0) for px, py in zip(x, y)]


__all__ = [
    "factorial",
    "fresnel_xy",
    "tangent_angle",
    "spiral_local",
    "sample_count",
    "y_sign",
    "spiral_points",
]

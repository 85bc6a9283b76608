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
Horizontal Alignment Package
============================

Plan geometry of an alignment as a stitched chain of curve primitives.

This package provides:
- Alignment entities (tangent, arc, spiral, spiral-curve-spiral)
- Line, arc and clothoid primitives with station lookups
- Chain stitching and cumulative stationing
- Geometry, PI and superelevation station lists

Example:
    >>> from corridor_link.core.horizontal_alignment import AlignmentEntity, HorizontalAlignment
    >>> alignment = HorizontalAlignment([
    ...     AlignmentEntity.tangent((0, 0, 0), (100, 0, 0)),
    ...     AlignmentEntity.arc((100, 50, 0), (100, 0, 0), (150, 50, 0)),
    ... ])
    >>> alignment.geometry_stations
    [0.0, 100.0, 178.53981633974485]
"""

# Curve geometry calculations
from .curve_geometry import (
    normalize_angle,
    direction_angle,
    sweep_angle,
    get_tangent_intersection,
)

# Spiral series
from .spiral import fresnel_xy, spiral_points

# Entities and primitives
from .entities import EntityType, AlignmentEntity
from .primitives import CurvePrimitive, LinePrimitive, ArcPrimitive, SpiralPrimitive

# Segment building functions
from .segment_builder import create_primitives, build_primitives

# Stationing
from .stationing import StationType

# Main alignment class
from .manager import HorizontalAlignment, sort_curves

__all__ = [
    # Classes
    "EntityType",
    "AlignmentEntity",
    "CurvePrimitive",
    "LinePrimitive",
    "ArcPrimitive",
    "SpiralPrimitive",
    "StationType",
    "HorizontalAlignment",
    # Curve geometry functions
    "normalize_angle",
    "direction_angle",
    "sweep_angle",
    "get_tangent_intersection",
    # Spiral functions
    "fresnel_xy",
    "spiral_points",
    # Builders
    "create_primitives",
    "build_primitives",
    "sort_curves",
]

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
Alignment Entity Descriptors
============================

Plain records describing horizontal alignment entities as a road-design
document reports them. Entity sources (see ``core.tool``) produce these;
the segment builder turns them into curve primitives.

Entity types:
- TANGENT: start/end points
- ARC: center, start/end points and rotation sense
- SPIRAL: start/end points, directions, radii, length and turn direction
- SPIRAL_CURVE_SPIRAL (and other composites): ordered ``sub_entities``

Radii of tangent ends may be given as None, 0 or math.inf.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional

from ..constants import TURN_LEFT, TURN_RIGHT
from ..coordinate_frame import Point3D, as_point


class EntityType:
    """Entity type tags."""

    TANGENT = "TANGENT"
    ARC = "ARC"
    SPIRAL = "SPIRAL"
    SPIRAL_CURVE_SPIRAL = "SPIRAL_CURVE_SPIRAL"
    SPIRAL_SPIRAL = "SPIRAL_SPIRAL"

    COMPOSITE = (SPIRAL_CURVE_SPIRAL, SPIRAL_SPIRAL)


@dataclass
class AlignmentEntity:
    """One horizontal alignment entity.

    Attributes:
        entity_type: One of the EntityType tags
        start_point: Entity start point
        end_point: Entity end point
        center: Arc center (ARC only)
        clockwise: Arc rotation sense from start to end (ARC only)
        start_direction: Tangent bearing at the start, radians (SPIRAL)
        end_direction: Tangent bearing at the end, radians (SPIRAL)
        start_radius: Radius at the start, None/0/inf for a tangent (SPIRAL)
        end_radius: Radius at the end, None/0/inf for a tangent (SPIRAL)
        length: Entity length (SPIRAL; optional otherwise)
        turn_direction: 'LEFT' or 'RIGHT' (SPIRAL)
        start_station: Station of the start point, when the source knows it
        sub_entities: Members of a composite entity, in order
        name: Optional identifier for log messages
    """

    entity_type: str
    start_point: Optional[Point3D] = None
    end_point: Optional[Point3D] = None
    center: Optional[Point3D] = None
    clockwise: bool = False
    start_direction: Optional[float] = None
    end_direction: Optional[float] = None
    start_radius: Optional[float] = None
    end_radius: Optional[float] = None
    length: Optional[float] = None
    turn_direction: Optional[str] = None
    start_station: Optional[float] = None
    sub_entities: List["AlignmentEntity"] = field(default_factory=list)
    name: str = ""

    def __post_init__(self):
        for attr in ("start_point", "end_point", "center"):
            value = getattr(self, attr)
            if value is not None:
                setattr(self, attr, as_point(value))

    @property
    def is_composite(self) -> bool:
        return bool(self.sub_entities) or self.entity_type in EntityType.COMPOSITE

    @property
    def is_curve(self) -> bool:
        """True for entities that change direction (arcs, spirals, groups)."""
        return self.entity_type != EntityType.TANGENT

    def leaves(self) -> List["AlignmentEntity"]:
        """Simple entities of this entity, composites expanded in order."""
        if not self.sub_entities:
            return [self]
        result: List[AlignmentEntity] = []
        for sub in self.sub_entities:
            result.extend(sub.leaves())
        return result

    # ========================================================================
    # CONSTRUCTORS
    # ========================================================================

    @classmethod
    def tangent(cls, start: Point3D, end: Point3D, **kwargs) -> "AlignmentEntity":
        return cls(EntityType.TANGENT, start_point=start, end_point=end, **kwargs)

    @classmethod
    def arc(
        cls,
        center: Point3D,
        start: Point3D,
        end: Point3D,
        clockwise: bool = False,
        **kwargs
    ) -> "AlignmentEntity":
        return cls(
            EntityType.ARC, start_point=start, end_point=end,
            center=center, clockwise=clockwise, **kwargs
        )

    @classmethod
    def spiral(
        cls,
        start: Point3D,
        end: Point3D,
        start_direction: float,
        end_direction: float,
        start_radius: Optional[float],
        end_radius: Optional[float],
        length: float,
        turn_direction: str,
        **kwargs
    ) -> "AlignmentEntity":
        return cls(
            EntityType.SPIRAL,
            start_point=start,
            end_point=end,
            start_direction=start_direction,
            end_direction=end_direction,
            start_radius=start_radius,
            end_radius=end_radius,
            length=length,
            turn_direction=turn_direction,
            **kwargs
        )

    @classmethod
    def spiral_curve_spiral(
        cls,
        entry: "AlignmentEntity",
        arc: Optional["AlignmentEntity"],
        exit: "AlignmentEntity",
        **kwargs
    ) -> "AlignmentEntity":
        """Composite group; ``arc`` may be None for a spiral-spiral pair."""
        members = [entry] + ([arc] if arc is not None else []) + [exit]
        entity_type = EntityType.SPIRAL_CURVE_SPIRAL if arc is not None else EntityType.SPIRAL_SPIRAL
        return cls(
            entity_type,
            start_point=entry.start_point,
            end_point=exit.end_point,
            sub_entities=members,
            turn_direction=entry.turn_direction,
            **kwargs
        )


def opposite_turn(turn_direction: str) -> str:
    return TURN_RIGHT if turn_direction == TURN_LEFT else TURN_LEFT


def is_tangent_radius(radius: Optional[float]) -> bool:
    """True when a radius value stands for zero curvature."""
    return radius is None or radius == 0 or math.isinf(radius)


__all__ = [
    "EntityType",
    "AlignmentEntity",
    "opposite_turn",
    "is_tangent_radius",
]

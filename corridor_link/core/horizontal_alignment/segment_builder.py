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
Horizontal Segment Builder
==========================

Turns alignment entity descriptors into curve primitives.

- TANGENT -> LinePrimitive
- ARC -> ArcPrimitive. The center/start/end constructor always sweeps
  counter-clockwise, so a clockwise arc is built with its start and end
  swapped. The resulting primitive runs end -> start and is put back in
  travel order when the chain is sorted.
- SPIRAL -> SpiralPrimitive, anchored at its zero-curvature end
- Composite groups -> their members, recursively

A descriptor that cannot be built raises GeometryError; ``build_primitives``
logs it and moves on to the next entity.
"""

from typing import Iterable, List

from ..exceptions import GeometryError
from ..logging_config import get_logger
from .entities import AlignmentEntity, EntityType
from .primitives import ArcPrimitive, CurvePrimitive, LinePrimitive, SpiralPrimitive

logger = get_logger(__name__)


def _require(entity: AlignmentEntity, *names: str) -> None:
    missing = [name for name in names if getattr(entity, name) is None]
    if missing:
        raise GeometryError(
            f"{entity.entity_type} entity {entity.name!r} is missing {', '.join(missing)}"
        )


def create_line(entity: AlignmentEntity) -> LinePrimitive:
    """Build a line from a TANGENT entity."""
    _require(entity, "start_point", "end_point")
    return LinePrimitive(entity.start_point, entity.end_point)


def create_arc(entity: AlignmentEntity) -> ArcPrimitive:
    """Build an arc from an ARC entity.

    Example:
        >>> entity = AlignmentEntity.arc(
        ...     Point3D(0, 0), Point3D(0, 10), Point3D(10, 0), clockwise=True)
        >>> arc = create_arc(entity)
        >>> arc.start_point, arc.clockwise
        (Point3D(x=10, y=0, z=0.0), False)
    """
    _require(entity, "center", "start_point", "end_point")
    if entity.clockwise:
        return ArcPrimitive.by_center_start_end(entity.center, entity.end_point, entity.start_point)
    return ArcPrimitive.by_center_start_end(entity.center, entity.start_point, entity.end_point)


def create_spiral(entity: AlignmentEntity) -> SpiralPrimitive:
    """Build a clothoid from a SPIRAL entity."""
    _require(
        entity, "start_point", "end_point", "start_direction", "end_direction",
        "length", "turn_direction",
    )
    return SpiralPrimitive(
        start_point=entity.start_point,
        end_point=entity.end_point,
        start_direction=entity.start_direction,
        end_direction=entity.end_direction,
        start_radius=entity.start_radius,
        end_radius=entity.end_radius,
        length=entity.length,
        turn_direction=entity.turn_direction,
    )


_BUILDERS = {
    EntityType.TANGENT: create_line,
    EntityType.ARC: create_arc,
    EntityType.SPIRAL: create_spiral,
}


def create_primitives(entity: AlignmentEntity) -> List[CurvePrimitive]:
    """Build the primitives for one entity, expanding composites.

    Raises:
        GeometryError: If the entity (or a composite member) is degenerate
    """
    if entity.is_composite:
        if not entity.sub_entities:
            raise GeometryError(f"Composite entity {entity.name!r} has no members")
        primitives: List[CurvePrimitive] = []
        for sub in entity.sub_entities:
            primitives.extend(create_primitives(sub))
        return primitives

    builder = _BUILDERS.get(entity.entity_type)
    if builder is None:
        raise GeometryError(f"Unsupported entity type {entity.entity_type!r}")
    return [builder(entity)]


def build_primitives(entities: Iterable[AlignmentEntity]) -> List[CurvePrimitive]:
    """Build primitives for all entities, skipping the ones that fail.

    Args:
        entities: Entity descriptors in source order

    Returns:
        Primitives in source order (not yet sorted into a chain)
    """
    primitives: List[CurvePrimitive] = []
    for index, entity in enumerate(entities):
        try:
            primitives.extend(create_primitives(entity))
        except GeometryError as exc:
            logger.error("Skipping entity %d (%s): %s", index, entity.entity_type, exc)
    logger.debug("Built %d primitives", len(primitives))
    return primitives


__all__ = [
    "create_line",
    "create_arc",
    "create_spiral",
    "create_primitives",
    "build_primitives",
]

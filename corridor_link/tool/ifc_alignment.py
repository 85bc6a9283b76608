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
IFC Alignment Source
====================

Reads IFC 4.3 alignments with ifcopenshell and exposes them through the
core collaborator interfaces:

- ``IfcAlignmentSource``: IfcAlignment > IfcAlignmentHorizontal segments
  as AlignmentEntity descriptors (AlignmentEntitySource)
- ``read_vertical_profile``: IfcAlignmentVertical segments as a
  VerticalProfile (ProfileSource)

Horizontal segment mapping (IfcAlignmentHorizontalSegment.PredefinedType):
    LINE        -> TANGENT
    CIRCULARARC -> ARC; radius > 0 turns left (counter-clockwise)
    CLOTHOID    -> SPIRAL; radius 0 stands for a tangent end

Zero-length segments (the closing endpoint marker) are skipped. The
starting station comes from the first IfcReferent carrying a
Pset_Stationing.Station value, when there is one.

Example:
    >>> ifc_file = ifcopenshell.open("road.ifc")
    >>> source = IfcAlignmentSource(ifc_file.by_type("IfcAlignment")[0])
    >>> alignment = HorizontalAlignment.from_source(source)
"""

import math
from typing import List, Optional, Tuple

import ifcopenshell
import numpy as np

from ..core.constants import TURN_LEFT, TURN_RIGHT
from ..core.coordinate_frame import Point3D
from ..core.horizontal_alignment.entities import AlignmentEntity
from ..core.logging_config import get_logger
from ..core.tool import AlignmentEntitySource
from ..core.vertical_alignment.profile import VerticalProfile
from ..core.vertical_alignment.segments import ParabolicSegment, TangentSegment, VerticalSegment

logger = get_logger(__name__)

# Midpoint-rule steps used to integrate a clothoid's end point
CLOTHOID_INTEGRATION_STEPS = 256


# =============================================================================
# Traversal
# =============================================================================

def nested_objects(entity: ifcopenshell.entity_instance, ifc_class: str) -> List[ifcopenshell.entity_instance]:
    """Objects of ``ifc_class`` nested under ``entity`` through IfcRelNests."""
    found = []
    for rel in getattr(entity, "IsNestedBy", None) or []:
        for obj in rel.RelatedObjects:
            if obj.is_a(ifc_class):
                found.append(obj)
    return found


def get_layout(alignment: ifcopenshell.entity_instance, ifc_class: str) -> Optional[ifcopenshell.entity_instance]:
    """First IfcAlignmentHorizontal / IfcAlignmentVertical of an alignment."""
    layouts = nested_objects(alignment, ifc_class)
    return layouts[0] if layouts else None


def get_design_segments(layout: ifcopenshell.entity_instance, ifc_class: str) -> List[ifcopenshell.entity_instance]:
    """DesignParameters of the layout's IfcAlignmentSegment children, in nesting order."""
    params = []
    for segment in nested_objects(layout, "IfcAlignmentSegment"):
        design = segment.DesignParameters
        if design is not None and design.is_a(ifc_class):
            params.append(design)
    return params


def get_starting_station(alignment: ifcopenshell.entity_instance) -> Optional[float]:
    """Station of the first referent with a Pset_Stationing.Station value."""
    for referent in nested_objects(alignment, "IfcReferent"):
        for rel_def in referent.IsDefinedBy or []:
            if not rel_def.is_a("IfcRelDefinesByProperties"):
                continue
            pset = rel_def.RelatingPropertyDefinition
            if pset.is_a("IfcPropertySet") and pset.Name == "Pset_Stationing":
                for prop in pset.HasProperties:
                    if prop.Name == "Station" and prop.NominalValue is not None:
                        return float(prop.NominalValue.wrappedValue)
    return None


# =============================================================================
# Horizontal geometry
# =============================================================================

def _signed_curvature(radius: Optional[float]) -> float:
    if not radius:
        return 0.0
    return 1.0 / radius


def _radius_or_none(radius: Optional[float]) -> Optional[float]:
    return abs(radius) if radius else None


def arc_center_and_end(
    start: Tuple[float, float],
    direction: float,
    radius: float,
    length: float
) -> Tuple[Point3D, Point3D]:
    """Center and end point of an arc given its signed radius (> 0 turns left).

    Example:
        >>> center, end = arc_center_and_end((0.0, 0.0), 0.0, 10.0, math.pi * 5)
        >>> round(center.y, 6), round(end.x, 6), round(end.y, 6)
        (10.0, 10.0, 10.0)
    """
    x0, y0 = start
    r = abs(radius)
    side = 1.0 if radius > 0 else -1.0
    cx = x0 - side * r * math.sin(direction)
    cy = y0 + side * r * math.cos(direction)
    sweep = side * length / r
    angle = math.atan2(y0 - cy, x0 - cx) + sweep
    end = Point3D(cx + r * math.cos(angle), cy + r * math.sin(angle), 0.0)
    return Point3D(cx, cy, 0.0), end


def clothoid_end(
    start: Tuple[float, float],
    direction: float,
    k1: float,
    k2: float,
    length: float,
    steps: int = CLOTHOID_INTEGRATION_STEPS
) -> Tuple[Point3D, float]:
    """End point and end direction of a clothoid with linear curvature k1 -> k2."""
    ds = length / steps
    s = (np.arange(steps) + 0.5) * ds
    theta = direction + k1 * s + (k2 - k1) * s ** 2 / (2.0 * length)
    x = start[0] + float(np.sum(np.cos(theta))) * ds
    y = start[1] + float(np.sum(np.sin(theta))) * ds
    end_direction = direction + (k1 + k2) * length / 2.0
    return Point3D(x, y, 0.0), end_direction


def _split_at_inflection(
    params: ifcopenshell.entity_instance,
    start: Tuple[float, float],
    direction: float,
    k1: float,
    k2: float,
    length: float,
    station: float,
    name: str
) -> AlignmentEntity:
    """Spiral pair for a clothoid whose curvature changes sign.

    The curvature is zero at ``length * k1 / (k1 - k2)``; the first spiral
    eases out to that point and the second one leaves it.
    """
    split = length * k1 / (k1 - k2)
    mid, mid_direction = clothoid_end(start, direction, k1, 0.0, split)
    end, end_direction = clothoid_end((mid.x, mid.y), mid_direction, 0.0, k2, length - split)
    easing = AlignmentEntity.spiral(
        Point3D(*start), mid,
        start_direction=direction,
        end_direction=mid_direction,
        start_radius=_radius_or_none(params.StartRadiusOfCurvature),
        end_radius=None,
        length=split,
        turn_direction=TURN_LEFT if k1 > 0 else TURN_RIGHT,
        start_station=station,
        name=f"{name} (1)",
    )
    leaving = AlignmentEntity.spiral(
        mid, end,
        start_direction=mid_direction,
        end_direction=end_direction,
        start_radius=None,
        end_radius=_radius_or_none(params.EndRadiusOfCurvature),
        length=length - split,
        turn_direction=TURN_LEFT if k2 > 0 else TURN_RIGHT,
        start_station=station + split,
        name=f"{name} (2)",
    )
    logger.debug("Clothoid %r split at its inflection, %.3f from the start", name, split)
    return AlignmentEntity.spiral_curve_spiral(easing, None, leaving, start_station=station, name=name)


def segment_to_entity(params: ifcopenshell.entity_instance, station: float) -> Optional[AlignmentEntity]:
    """AlignmentEntity for one IfcAlignmentHorizontalSegment, or None to skip it."""
    kind = params.PredefinedType
    length = float(params.SegmentLength or 0.0)
    if length <= 0:
        return None

    coords = params.StartPoint.Coordinates
    start = (float(coords[0]), float(coords[1]))
    direction = float(params.StartDirection)
    name = getattr(params, "StartTag", None) or kind

    if kind == "LINE":
        end = Point3D(start[0] + length * math.cos(direction), start[1] + length * math.sin(direction), 0.0)
        return AlignmentEntity.tangent(Point3D(*start), end, start_station=station, length=length, name=name)

    if kind == "CIRCULARARC":
        radius = float(params.StartRadiusOfCurvature or 0.0)
        if radius == 0:
            logger.warning("Circular arc segment %r has no radius, skipped", name)
            return None
        center, end = arc_center_and_end(start, direction, radius, length)
        return AlignmentEntity.arc(
            center, Point3D(*start), end, clockwise=radius < 0,
            start_station=station, length=length, name=name
        )

    if kind == "CLOTHOID":
        k1 = _signed_curvature(params.StartRadiusOfCurvature)
        k2 = _signed_curvature(params.EndRadiusOfCurvature)
        if k1 == k2:
            logger.warning("Clothoid segment %r has constant curvature, skipped", name)
            return None
        if k1 * k2 < 0:
            return _split_at_inflection(params, start, direction, k1, k2, length, station, name)
        end, end_direction = clothoid_end(start, direction, k1, k2, length)
        dominant = k2 if abs(k2) > abs(k1) else k1
        return AlignmentEntity.spiral(
            Point3D(*start),
            end,
            start_direction=direction,
            end_direction=end_direction,
            start_radius=_radius_or_none(params.StartRadiusOfCurvature),
            end_radius=_radius_or_none(params.EndRadiusOfCurvature),
            length=length,
            turn_direction=TURN_LEFT if dominant > 0 else TURN_RIGHT,
            start_station=station,
            name=name,
        )

    logger.warning("Unsupported horizontal segment type %r, skipped", kind)
    return None


class IfcAlignmentSource(AlignmentEntitySource):
    """AlignmentEntitySource backed by an IfcAlignment.

    Args:
        alignment: IfcAlignment entity
    """

    def __init__(self, alignment: ifcopenshell.entity_instance):
        self.alignment = alignment
        self._station = get_starting_station(alignment)

    @property
    def name(self) -> str:
        return self.alignment.Name or "Alignment"

    @property
    def starting_station(self) -> Optional[float]:
        return self._station

    def entities(self) -> List[AlignmentEntity]:
        layout = get_layout(self.alignment, "IfcAlignmentHorizontal")
        if layout is None:
            logger.warning("Alignment %r has no horizontal layout", self.name)
            return []

        entities = []
        station = self._station or 0.0
        for params in get_design_segments(layout, "IfcAlignmentHorizontalSegment"):
            entity = segment_to_entity(params, station)
            if entity is not None:
                entities.append(entity)
                station += float(params.SegmentLength)
        logger.debug("Read %d horizontal entities from %r", len(entities), self.name)
        return entities


# =============================================================================
# Vertical geometry
# =============================================================================

def vertical_segment(params: ifcopenshell.entity_instance) -> Optional[VerticalSegment]:
    """VerticalSegment for one IfcAlignmentVerticalSegment, or None to skip it."""
    length = float(params.HorizontalLength or 0.0)
    if length <= 0:
        return None

    start = float(params.StartDistAlong)
    height = float(params.StartHeight)
    g1 = float(params.StartGradient)
    kind = params.PredefinedType

    if kind == "CONSTANTGRADIENT":
        return TangentSegment(start, start + length, height, g1)
    if kind == "PARABOLICARC":
        return ParabolicSegment(start, start + length, height, g1, float(params.EndGradient))

    logger.warning("Unsupported vertical segment type %r, skipped", kind)
    return None


def read_vertical_profile(alignment: ifcopenshell.entity_instance) -> Optional[VerticalProfile]:
    """Profile of an IfcAlignment's IfcAlignmentVertical, or None if it has none.

    Raises:
        ValueError: If the vertical layout exists but has no usable segments
    """
    layout = get_layout(alignment, "IfcAlignmentVertical")
    if layout is None:
        return None

    segments = []
    for params in get_design_segments(layout, "IfcAlignmentVerticalSegment"):
        segment = vertical_segment(params)
        if segment is not None:
            segments.append(segment)
    name = layout.Name or alignment.Name or "Profile"
    return VerticalProfile.from_segments(segments, name=name)


__all__ = [
    "IfcAlignmentSource",
    "read_vertical_profile",
    "segment_to_entity",
    "vertical_segment",
    "arc_center_and_end",
    "clothoid_end",
    "get_starting_station",
]

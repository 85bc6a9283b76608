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
Corridor Data Records
=====================

Plain records exchanged with a CorridorDataSource. They carry raw values
as the design application exported them; parsing into geometry happens in
``core.featureline`` and ``core.corridor``.

Featureline sample attributes (keys of ``FeaturelineRecord.points``):
    Station, X, Y, Z, IsBreak, RegionIndex
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence, Tuple

# (station, offset, elevation) relative to a baseline
SOETriple = Tuple[float, float, float]


@dataclass
class FeaturelineRecord:
    """Raw samples of one featureline code on one baseline.

    Attributes:
        baseline_index: Baseline the samples belong to
        code: Design code (e.g. "ETW", "EP")
        points: Attribute mappings, one per sample
        side: Raw side value when the export provides one (<0 left)
    """

    baseline_index: int
    code: str
    points: List[Mapping[str, Any]] = field(default_factory=list)
    side: Optional[Any] = None


@dataclass
class ShapeRecord:
    """Closed cross-section shape of an applied subassembly."""

    codes: List[str]
    points: Sequence[SOETriple]


@dataclass
class LinkRecord:
    """Open cross-section link of an applied subassembly."""

    codes: List[str]
    points: Sequence[SOETriple]


@dataclass
class AppliedSubassemblyRecord:
    """Shapes and links one subassembly produced at one station.

    Attributes:
        baseline_index: Baseline index in the corridor
        region_index: Region index in the baseline
        assembly: Assembly name
        subassembly: Subassembly name
        handle: Identifier of the subassembly in the design document
        station: Station of the applied assembly
        shapes: Closed shapes
        links: Open links
    """

    baseline_index: int
    region_index: int
    assembly: str
    subassembly: str
    handle: str
    station: float
    shapes: List[ShapeRecord] = field(default_factory=list)
    links: List[LinkRecord] = field(default_factory=list)


@dataclass
class CrossSectionPointRecord:
    """Coded cross-section point at one station.

    Attributes:
        station: Station of the cross section
        offset: Offset from the baseline, positive right
        elevation: Elevation relative to the profile
        codes: Point codes
        region_index: Region the station belongs to, -1 if unknown
    """

    station: float
    offset: float
    elevation: float
    codes: List[str] = field(default_factory=list)
    region_index: int = -1


__all__ = [
    "SOETriple",
    "FeaturelineRecord",
    "ShapeRecord",
    "LinkRecord",
    "AppliedSubassemblyRecord",
    "CrossSectionPointRecord",
]

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
In-Memory Sources
=================

Collaborator implementations holding their data in plain Python objects.
Used when records are already loaded (scripting, tests) and as the
reference for adapters talking to a design application.

Example:
    >>> source = StaticAlignmentSource("Main", [AlignmentEntity.tangent((0, 0), (100, 0))])
    >>> HorizontalAlignment.from_source(source).length
    100.0
"""

from typing import Dict, Iterable, List, Optional, Sequence

from ..core.coordinate_frame import Point3D
from ..core.horizontal_alignment.entities import AlignmentEntity
from ..core.records import AppliedSubassemblyRecord, CrossSectionPointRecord, FeaturelineRecord
from ..core.tool import AlignmentEntitySource, CorridorDataSource


class StaticAlignmentSource(AlignmentEntitySource):
    """Alignment entities given up front."""

    def __init__(
        self,
        name: str,
        entities: Sequence[AlignmentEntity],
        starting_station: Optional[float] = None,
        superelevation_stations: Sequence[float] = (),
        fallback_points: Optional[Sequence[Point3D]] = None,
    ):
        self._name = name
        self._entities = list(entities)
        self._starting_station = starting_station
        self._superelevation = list(superelevation_stations)
        self._fallback = list(fallback_points) if fallback_points is not None else None

    @property
    def name(self) -> str:
        return self._name

    @property
    def starting_station(self) -> Optional[float]:
        return self._starting_station

    def entities(self) -> List[AlignmentEntity]:
        return list(self._entities)

    def superelevation_stations(self) -> List[float]:
        return list(self._superelevation)

    def fallback_points(self) -> Optional[Sequence[Point3D]]:
        return self._fallback


class InMemoryCorridorSource(CorridorDataSource):
    """Corridor records kept in lists.

    Attributes:
        calls: Number of ``featureline_records`` calls per baseline index
    """

    def __init__(
        self,
        featurelines: Iterable[FeaturelineRecord] = (),
        subassemblies: Iterable[AppliedSubassemblyRecord] = (),
        points: Iterable[CrossSectionPointRecord] = (),
        point_baselines: Optional[Sequence[int]] = None,
    ):
        self._featurelines = list(featurelines)
        self._subassemblies = list(subassemblies)
        self._points = list(points)
        # Baseline index of each cross-section point; all on baseline 0 if omitted
        self._point_baselines = list(point_baselines) if point_baselines is not None else [0] * len(self._points)
        self.calls: Dict[int, int] = {}

    def featureline_records(self, baseline_index: int) -> List[FeaturelineRecord]:
        self.calls[baseline_index] = self.calls.get(baseline_index, 0) + 1
        return [r for r in self._featurelines if r.baseline_index == baseline_index]

    def applied_subassemblies(self) -> List[AppliedSubassemblyRecord]:
        return list(self._subassemblies)

    def cross_section_points(self, baseline_index: int) -> List[CrossSectionPointRecord]:
        return [p for p, b in zip(self._points, self._point_baselines) if b == baseline_index]


__all__ = [
    "StaticAlignmentSource",
    "InMemoryCorridorSource",
]

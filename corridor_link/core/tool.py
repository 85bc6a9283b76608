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
Core Tool Interfaces
====================

Abstract interfaces for the external collaborators the geometry engine
reads from. Core code depends only on these; adapters for a concrete data
source (an IFC file, an in-memory export, a vendor API) implement them in
the ``tool`` package.

- AlignmentEntitySource: horizontal alignment entity descriptors
- ProfileSource: vertical profile elevation lookup
- CorridorDataSource: per-station corridor records (featureline samples,
  applied subassembly shapes/links, cross-section points)

Record types exchanged through CorridorDataSource are plain dataclasses
defined in ``core.records``.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence

if TYPE_CHECKING:
    from .coordinate_frame import Point3D
    from .horizontal_alignment.entities import AlignmentEntity
    from .records import AppliedSubassemblyRecord, CrossSectionPointRecord, FeaturelineRecord


class AlignmentEntitySource(ABC):
    """Typed access to one alignment's entity descriptors."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Alignment name."""

    @property
    def starting_station(self) -> Optional[float]:
        """Station of the alignment start, or None to use the entities'."""
        return None

    @abstractmethod
    def entities(self) -> List["AlignmentEntity"]:
        """Entity descriptors in source order."""

    def superelevation_stations(self) -> List[float]:
        """Superelevation transition stations (none by default)."""
        return []

    def fallback_points(self) -> Optional[Sequence["Point3D"]]:
        """Station-ordered points used when no entity can be built."""
        return None


class ProfileSource(ABC):
    """Vertical profile lookup used by baselines."""

    @abstractmethod
    def elevation_at(self, station: float) -> float:
        """Absolute elevation at ``station``.

        Raises:
            ValueError: If the station is outside the profile
        """

    def grade_at(self, station: float) -> float:
        """Grade (decimal) at ``station``; flat unless overridden."""
        return 0.0


class CorridorDataSource(ABC):
    """Per-station corridor records produced by the design application."""

    @abstractmethod
    def featureline_records(self, baseline_index: int) -> Iterable["FeaturelineRecord"]:
        """Featureline sample records of one baseline."""

    def applied_subassemblies(self) -> Iterable["AppliedSubassemblyRecord"]:
        """Applied subassembly shape/link records of all baselines."""
        return []

    def cross_section_points(self, baseline_index: int) -> Iterable["CrossSectionPointRecord"]:
        """Coded cross-section points of one baseline."""
        return []


__all__ = [
    "AlignmentEntitySource",
    "ProfileSource",
    "CorridorDataSource",
]

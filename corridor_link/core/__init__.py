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
Corridor Link Core Module

Core geometry and data structures for Corridor Link.
This module contains:
- Interface definitions (tool.py) for the collaborators that supply data
- Alignment, profile and baseline geometry
- Featureline extraction and corridor cross sections

Architecture:
    Layer 1: Core (this module) - Pure Python interfaces and geometry
    Layer 2: Tool (corridor_link.tool) - Data source implementations (IFC, in-memory)
"""

# Import logging configuration first (no dependencies)
from .logging_config import get_logger, setup_logging

# Import interface definitions (no external dependencies)
from .tool import AlignmentEntitySource, ProfileSource, CorridorDataSource

from .exceptions import CorridorLinkError, GeometryError, OutOfRangeError, ParseError
from .coordinate_frame import Point3D, CoordinateFrame
from .horizontal_alignment import AlignmentEntity, EntityType, HorizontalAlignment, StationType
from .vertical_alignment import PVI, VerticalProfile, FlatProfile
from .soe import SOETransform, StationOffsetElevation
from .baseline import Baseline, BaselineRegion
from .featureline import Featureline, FeaturelinePoint, Side
from .corridor import Corridor
from .session import Session

logger = get_logger(__name__)

__all__ = [
    "get_logger",
    "setup_logging",
    "AlignmentEntitySource",
    "ProfileSource",
    "CorridorDataSource",
    "CorridorLinkError",
    "GeometryError",
    "OutOfRangeError",
    "ParseError",
    "Point3D",
    "CoordinateFrame",
    "AlignmentEntity",
    "EntityType",
    "HorizontalAlignment",
    "StationType",
    "PVI",
    "VerticalProfile",
    "FlatProfile",
    "SOETransform",
    "StationOffsetElevation",
    "Baseline",
    "BaselineRegion",
    "Featureline",
    "FeaturelinePoint",
    "Side",
    "Corridor",
    "Session",
]

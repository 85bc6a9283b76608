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
Corridor Link Tool Layer
========================

Implementations of the core collaborator interfaces:

    from corridor_link.tool import InMemoryCorridorSource, StaticAlignmentSource
    from corridor_link.tool.ifc_alignment import IfcAlignmentSource

The IFC adapter is imported from its module so that ifcopenshell is only
needed when it is used.
"""

from .in_memory import InMemoryCorridorSource, StaticAlignmentSource

__all__ = [
    "InMemoryCorridorSource",
    "StaticAlignmentSource",
]

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
Corridor Link
Version 0.1.0

Station/offset/elevation geometry for civil road corridors: alignments,
profiles, baselines, featurelines and cross sections, independent of the
design application that produced them.
"""

from .core.logging_config import get_logger, setup_logging

__version__ = "0.1.0"

__all__ = [
    "get_logger",
    "setup_logging",
    "__version__",
]

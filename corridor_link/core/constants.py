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
Geometry Engine Constants
=========================

Tolerances and tuning values shared by the alignment, baseline and
featureline modules. All lengths are in the alignment's native units.
"""

# Two primitive endpoints closer than this are considered connected
STITCH_TOLERANCE = 1e-5

# SOE results this close to a start/end station snap onto it
STATION_SNAP_TOLERANCE = 1e-4

# Featureline start/end snapping (finer than the alignment snap)
FEATURELINE_SNAP_TOLERANCE = 1e-5

# Region membership when locating cross-section samples by station
REGION_STATION_TOLERANCE = 1e-3

# Baseline station arrays are rounded to this many decimals
STATION_DECIMALS = 3

# Featureline station/offset/elevation results are rounded to this
RESULT_DECIMALS = 5

# Consecutive points closer than this are pruned as duplicates
DUPLICATE_POINT_TOLERANCE = 1e-5

# Fresnel series terms (t = 0..T) used by the spiral approximator
SPIRAL_SERIES_TERMS = 8

# Nominal distance between spiral samples
SPIRAL_SAMPLE_STEP = 2.0

# Samples per primitive for the coarse closest-point search on spirals
SPIRAL_SEARCH_SAMPLES = 64

# Turn direction tags shared with entity descriptors
TURN_LEFT = "LEFT"
TURN_RIGHT = "RIGHT"

__all__ = [
    "STITCH_TOLERANCE",
    "STATION_SNAP_TOLERANCE",
    "FEATURELINE_SNAP_TOLERANCE",
    "REGION_STATION_TOLERANCE",
    "STATION_DECIMALS",
    "RESULT_DECIMALS",
    "DUPLICATE_POINT_TOLERANCE",
    "SPIRAL_SERIES_TERMS",
    "SPIRAL_SAMPLE_STEP",
    "SPIRAL_SEARCH_SAMPLES",
    "TURN_LEFT",
    "TURN_RIGHT",
]

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
Pytest Configuration and Fixtures
==================================

Shared fixtures for the Corridor Link test suite.
"""

import math
from typing import Generator, Optional

import pytest

from corridor_link.core.baseline import Baseline
from corridor_link.core.coordinate_frame import Point3D
from corridor_link.core.horizontal_alignment import AlignmentEntity, HorizontalAlignment
from corridor_link.core.vertical_alignment import PVI, VerticalProfile


# =============================================================================
# Skip Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, no external deps)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "ifc: Requires ifcopenshell")
    config.addinivalue_line("markers", "slow: Slow running tests")


# =============================================================================
# Conditional Imports
# =============================================================================

# Check if ifcopenshell is available
try:
    import ifcopenshell
    HAS_IFC = True
except ImportError:
    HAS_IFC = False
    ifcopenshell = None


# =============================================================================
# Skip Decorators
# =============================================================================

requires_ifc = pytest.mark.skipif(
    not HAS_IFC,
    reason="ifcopenshell not installed"
)


# =============================================================================
# Geometry Fixtures
# =============================================================================

@pytest.fixture
def straight_alignment() -> HorizontalAlignment:
    """100 m tangent along +X starting at station 0."""
    return HorizontalAlignment(
        [AlignmentEntity.tangent(Point3D(0, 0), Point3D(100, 0))],
        name="Straight",
    )


@pytest.fixture
def curved_alignment() -> HorizontalAlignment:
    """100 m tangent followed by a left quarter arc of radius 50.

    Total length is 100 + 25 * pi.
    """
    return HorizontalAlignment(
        [
            AlignmentEntity.tangent(Point3D(0, 0), Point3D(100, 0)),
            AlignmentEntity.arc(Point3D(100, 50), Point3D(100, 0), Point3D(150, 50)),
        ],
        name="Curved",
    )


@pytest.fixture
def rising_profile() -> VerticalProfile:
    """Constant +2% grade from elevation 100 at station 0."""
    return VerticalProfile([PVI(0.0, 100.0), PVI(200.0, 104.0)], name="Rising")


@pytest.fixture
def straight_baseline(straight_alignment) -> Baseline:
    """Flat baseline on the straight alignment with two regions."""
    return Baseline(
        straight_alignment,
        stations=[0, 10, 20, 30, 40, 50, 60, 70, 80, 90, 100],
        regions=[(0.0, 50.0, "Typical"), (50.0, 100.0, "Widening")],
    )


@pytest.fixture
def curved_baseline(curved_alignment, rising_profile) -> Baseline:
    """Baseline on the curved alignment with a rising profile."""
    end = 100.0 + 25.0 * math.pi
    return Baseline(
        curved_alignment,
        rising_profile,
        stations=[0, 25, 50, 75, 100, 125, 150, end],
        regions=[(0.0, end, "Typical")],
    )


# =============================================================================
# IFC Fixtures (require ifcopenshell)
# =============================================================================

@pytest.fixture
def ifc_file() -> Generator[Optional["ifcopenshell.file"], None, None]:
    """Create a fresh IFC 4x3 file for testing.

    Yields:
        New ifcopenshell.file instance or None if not available
    """
    if not HAS_IFC:
        yield None
        return

    file = ifcopenshell.file(schema="IFC4X3")
    yield file

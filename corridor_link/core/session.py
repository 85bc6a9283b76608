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
Session State
=============

Process-wide state shared by corridor queries:

- the document transform between design coordinates and the host model,
  applied only at the boundary through ``to_host`` / ``from_host``
- exported featureline records per corridor and baseline, so repeated
  queries do not go back to the design application

The document transform is a CoordinateFrame describing the host origin and
axes in design coordinates. Its inverse is computed on first use and kept
until the transform changes or ``invalidate`` is called.

Example:
    >>> session = Session(CoordinateFrame.world().translated(dx=1000.0))
    >>> session.to_host((1010.0, 5.0, 0.0))
    Point3D(x=10.0, y=5.0, z=0.0)
"""

import threading
from typing import Dict, List, Optional, Tuple

from .coordinate_frame import CoordinateFrame, Point3D, PointLike, as_point
from .logging_config import get_logger

logger = get_logger(__name__)


class Session:
    """Document transform and featureline export cache.

    Args:
        document_transform: Host frame in design coordinates; identity if omitted
    """

    def __init__(self, document_transform: Optional[CoordinateFrame] = None):
        self._transform = document_transform or CoordinateFrame.world()
        self._inverse: Optional[CoordinateFrame] = None
        self._exported: Dict[Tuple[str, int], List] = {}
        self._lock = threading.Lock()

    # =========================================================================
    # Document transform
    # =========================================================================

    @property
    def document_transform(self) -> CoordinateFrame:
        return self._transform

    @property
    def inverse_transform(self) -> CoordinateFrame:
        """Inverse of the document transform, computed once."""
        if self._inverse is None:
            self._inverse = self._transform.inverse()
        return self._inverse

    def set_document_transform(self, transform: CoordinateFrame) -> None:
        self._transform = transform
        self._inverse = None
        logger.debug("Document transform set to %r", transform)

    def to_host(self, point: PointLike) -> Point3D:
        """Design coordinates to host model coordinates."""
        p = as_point(point)
        return self.inverse_transform.to_world(p.x, p.y, p.z)

    def from_host(self, point: PointLike) -> Point3D:
        """Host model coordinates to design coordinates."""
        p = as_point(point)
        return self._transform.to_world(p.x, p.y, p.z)

    # =========================================================================
    # Export cache
    # =========================================================================

    def mark_exported(self, corridor_name: str, baseline_index: int, records: List) -> None:
        """Remember the featureline records exported for one baseline."""
        with self._lock:
            self._exported[(corridor_name, baseline_index)] = list(records)
        logger.debug(
            "Cached %d featureline record(s) for %r baseline %d",
            len(records), corridor_name, baseline_index
        )

    def is_exported(self, corridor_name: str, baseline_index: Optional[int] = None) -> bool:
        """True if records were exported for the corridor (or one of its baselines)."""
        with self._lock:
            if baseline_index is not None:
                return (corridor_name, baseline_index) in self._exported
            return any(name == corridor_name for name, _ in self._exported)

    def cached_records(self, corridor_name: str, baseline_index: int) -> Optional[List]:
        """Exported records for one baseline, or None if not exported yet."""
        with self._lock:
            records = self._exported.get((corridor_name, baseline_index))
        return list(records) if records is not None else None

    def invalidate(self, corridor_name: Optional[str] = None) -> None:
        """Drop cached records (for one corridor, or all) and the memoized inverse."""
        with self._lock:
            if corridor_name is None:
                self._exported.clear()
            else:
                for key in [k for k in self._exported if k[0] == corridor_name]:
                    del self._exported[key]
        self._inverse = None
        logger.debug("Session invalidated (%s)", corridor_name or "all")


__all__ = ["Session"]

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
Corridor Link Exceptions
========================

Error taxonomy for the geometry engine.

- GeometryError: degenerate or malformed geometry (zero-length segments,
  non-orthogonal frames, chains that cannot be stitched). Raised; callers
  building an alignment skip the offending primitive, but an alignment that
  ends up unusable propagates the error.
- OutOfRangeError: a station query outside the valid range. Core queries
  report this by returning None and logging through ``log_out_of_range``;
  the exception exists for callers that want to raise instead.
- ParseError: malformed numeric or attribute data from an external record.
  Recovered locally by substituting a default value.

All three subclass ValueError so existing ``except ValueError`` handlers keep
working.
"""

import logging
from typing import Optional


class CorridorLinkError(Exception):
    """Base class for all Corridor Link errors."""


class GeometryError(CorridorLinkError, ValueError):
    """Degenerate or malformed input geometry."""


class OutOfRangeError(CorridorLinkError, ValueError):
    """A station or offset query outside the valid range.

    Attributes:
        value: The requested station
        start: Lower bound of the valid range
        end: Upper bound of the valid range
    """

    def __init__(self, value: float, start: float, end: float, context: str = ""):
        self.value = value
        self.start = start
        self.end = end
        self.context = context
        prefix = f"{context}: " if context else ""
        super().__init__(
            f"{prefix}station {value:.4f} outside range [{start:.4f}, {end:.4f}]"
        )


class ParseError(CorridorLinkError, ValueError):
    """Malformed attribute value in an external record.

    Attributes:
        field: Name of the attribute that failed to parse
        raw: The raw value as received
    """

    def __init__(self, field: str, raw: object, message: Optional[str] = None):
        self.field = field
        self.raw = raw
        super().__init__(message or f"cannot parse {field}={raw!r}")


def log_out_of_range(
    logger: logging.Logger,
    value: float,
    start: float,
    end: float,
    context: str = ""
) -> None:
    """Log an out-of-range query in the standard format.

    Args:
        logger: Logger of the calling module
        value: The requested station
        start: Lower bound of the valid range
        end: Upper bound of the valid range
        context: Name of the object that was queried
    """
    logger.warning("%s", OutOfRangeError(value, start, end, context))


__all__ = [
    "CorridorLinkError",
    "GeometryError",
    "OutOfRangeError",
    "ParseError",
    "log_out_of_range",
]

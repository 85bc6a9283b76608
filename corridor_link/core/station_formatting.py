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
Station Formatting Utilities
============================

Conversion between station notation (XX+XXX.XX) and numeric stations.

Two station bases are common:
- Metric: 1000 m stations, e.g. 12+345.67 = 12345.67 m
- US Customary: 100 ft stations, e.g. 123+45.67 = 12345.67 ft

Numeric stations are used everywhere in the geometry engine; notation only
appears in log messages, reprs and when reading station values from
external records.
"""

import math
from typing import Tuple, Union

from .exceptions import ParseError

METRIC_BASE = 1000
US_BASE = 100


def _minor_width(base: int) -> int:
    return len(str(base)) - 1


def parse_station(value: Union[str, float, int], base: int = METRIC_BASE) -> float:
    """Parse a station value into a number.

    Accepts "12+345.67", "-0+012.5", "345.67", "1.5E+03" and plain numbers.
    Anything that reads as a number is taken as one before plus notation
    is tried.

    Args:
        value: Station notation or numeric value
        base: Units per station (1000 metric, 100 US)

    Returns:
        Numeric station

    Raises:
        ParseError: If the value cannot be interpreted as a station
    """
    if isinstance(value, bool):
        raise ParseError("station", value)
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise ParseError("station", value)
        return float(value)

    text = str(value).strip()
    if not text:
        raise ParseError("station", value, "empty station value")

    try:
        number = float(text)
    except ValueError:
        pass
    else:
        if not math.isfinite(number):
            raise ParseError("station", value)
        return number
    if "+" not in text:
        raise ParseError("station", value)

    sign = 1.0
    if text.startswith("-"):
        sign = -1.0
        text = text[1:]

    parts = text.split("+")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ParseError(
            "station", value, f"invalid station format {value!r}, expected XX+XXX.XX"
        )
    try:
        major = int(parts[0])
        minor = float(parts[1])
    except ValueError:
        raise ParseError("station", value) from None

    if minor < 0 or minor >= base:
        raise ParseError(
            "station", value, f"minor part of {value!r} must be within [0, {base})"
        )
    return sign * (major * base + minor)


def split_station(value: float, base: int = METRIC_BASE, decimals: int = 2) -> Tuple[int, float]:
    """Split a non-negative station into (major, minor) parts.

    The minor part is rounded first so 999.999 formats as 1+000.00 rather
    than 0+1000.00.
    """
    minor_total = round(abs(value), decimals)
    major = int(minor_total // base)
    minor = round(minor_total - major * base, decimals)
    if minor >= base:
        major += 1
        minor = 0.0
    return major, minor


def format_station(value: float, decimals: int = 2, base: int = METRIC_BASE) -> str:
    """Format a numeric station in plus notation.

    Examples:
        >>> format_station(12345.678)
        '12+345.68'
        >>> format_station(45.5)
        '0+045.50'
        >>> format_station(1234.5, base=100)
        '12+34.50'
    """
    major, minor = split_station(value, base, decimals)
    sign = "-" if value < 0 and (major or minor) else ""
    width = _minor_width(base)
    if decimals > 0:
        return f"{sign}{major}+{minor:0{width + 1 + decimals}.{decimals}f}"
    return f"{sign}{major}+{int(minor):0{width}d}"


def format_station_short(value: float, base: int = METRIC_BASE) -> str:
    """Format a station without trailing zeros.

    Examples:
        >>> format_station_short(12000.0)
        '12+000'
        >>> format_station_short(345.5)
        '0+345.5'
    """
    text = format_station(value, decimals=3, base=base)
    head, _, fraction = text.partition(".")
    fraction = fraction.rstrip("0")
    return f"{head}.{fraction}" if fraction else head


def validate_station_input(value: str, base: int = METRIC_BASE) -> Tuple[bool, str]:
    """Check whether a station string can be parsed.

    Returns:
        Tuple of (is_valid, error_message); the message is empty when valid
    """
    try:
        parse_station(value, base)
    except ParseError as exc:
        return False, str(exc)
    return True, ""


__all__ = [
    "METRIC_BASE",
    "US_BASE",
    "parse_station",
    "split_station",
    "format_station",
    "format_station_short",
    "validate_station_input",
]

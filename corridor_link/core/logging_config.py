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
Logging Setup
=============

All Corridor Link loggers sit under the ``corridor_link`` logger, which
owns a single stream handler and does not propagate to the root logger.

What gets logged where:
    DEBUG    chain stitching summaries, skipped degenerate cross sections
    INFO     polyline fallback for alignments without usable entities
    WARNING  out-of-range stations, chain gaps, malformed sample values
    ERROR    entities that cannot be built, samples without a station

Usage:
    from corridor_link.core.logging_config import get_logger

    logger = get_logger(__name__)
"""

import logging
import sys
from typing import IO, Optional

LOGGER_PREFIX = "corridor_link"

DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
DETAILED_FORMAT = "[%(levelname)s] %(asctime)s - %(name)s:%(lineno)d - %(message)s"


def setup_logging(
    level: int = logging.INFO,
    detailed: bool = False,
    stream: Optional[IO[str]] = None
) -> logging.Logger:
    """(Re)configure the package logger.

    Any handler installed by an earlier call is replaced.

    Args:
        level: Level for the logger and its handler
        detailed: Add timestamps and line numbers
        stream: Output stream, sys.stderr by default

    Returns:
        The ``corridor_link`` logger
    """
    package_logger = logging.getLogger(LOGGER_PREFIX)
    package_logger.handlers.clear()
    package_logger.setLevel(level)
    package_logger.propagate = False

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(DETAILED_FORMAT if detailed else DEFAULT_FORMAT))
    package_logger.addHandler(handler)
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Logger for ``name`` under the package logger.

    Names outside the package (scripts, tests) are prefixed with
    ``corridor_link.``. The package logger is set up on first use.
    """
    if not logging.getLogger(LOGGER_PREFIX).handlers:
        setup_logging()
    if name != LOGGER_PREFIX and not name.startswith(LOGGER_PREFIX + "."):
        name = f"{LOGGER_PREFIX}.{name}"
    return logging.getLogger(name)


def set_log_level(level: int) -> None:
    """Change the level of the package logger and its handlers."""
    package_logger = logging.getLogger(LOGGER_PREFIX)
    package_logger.setLevel(level)
    for handler in package_logger.handlers:
        handler.setLevel(level)


__all__ = [
    "LOGGER_PREFIX",
    "setup_logging",
    "get_logger",
    "set_log_level",
]

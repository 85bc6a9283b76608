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
Featurelines
============

Continuous longitudinal 3D polylines that follow one design code (edge of
pavement, curb, ditch bottom...) along a baseline.

Extraction (``extract_featurelines``) consumes per-station samples in
station order and closes a run:

- at a break flag: the run is pruned of duplicates and emitted when it
  has at least two points; a new run starts;
- at a region change: the run up to the previous sample is emitted and
  the sample that changed region starts the next run, so consecutive
  featurelines share their boundary point;
- at the end of data, when the run has at least two points.

Unparseable sample attributes are logged and replaced by defaults
(coordinates 0.0, region -1, no break); a sample whose station cannot be
read is skipped.

Frames along a featureline are taken where the featureline crosses the
baseline's normal plane at the station, with Y along the featureline.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .constants import FEATURELINE_SNAP_TOLERANCE, RESULT_DECIMALS, STATION_SNAP_TOLERANCE
from .coordinate_frame import CoordinateFrame, Point3D, PointLike, as_point, polyline_length, prune_duplicates
from .exceptions import GeometryError, ParseError, log_out_of_range
from .logging_config import get_logger
from .soe import StationOffsetElevation, snap_station
from .station_formatting import format_station, parse_station

logger = get_logger(__name__)


class Side(Enum):
    """Side of the baseline a featureline runs on."""

    NONE = "NONE"
    LEFT = "LEFT"
    RIGHT = "RIGHT"

    @classmethod
    def from_offset(cls, offset: float) -> "Side":
        return cls.LEFT if offset < 0 else cls.RIGHT


# ============================================================================
# SAMPLES
# ============================================================================

@dataclass(frozen=True)
class FeaturelineSample:
    """One parsed featureline sample.

    Attributes:
        station: Baseline station of the sample
        point: World position
        region_index: Region the sample was computed in, -1 if unknown
        is_break: True when the featureline is interrupted after this sample
    """

    station: float
    point: Point3D
    region_index: int = -1
    is_break: bool = False


def _attribute(attributes: Mapping[str, Any], name: str) -> Any:
    if name in attributes:
        return attributes[name]
    lowered = name.lower()
    for key, value in attributes.items():
        if str(key).lower() == lowered:
            return value
    return None


def _parse_float(attributes: Mapping[str, Any], name: str) -> float:
    raw = _attribute(attributes, name)
    if raw is None:
        raise ParseError(name, raw, f"missing {name}")
    if isinstance(raw, bool):
        raise ParseError(name, raw)
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ParseError(name, raw) from None
    if not math.isfinite(value):
        raise ParseError(name, raw)
    return value


def _parse_int(attributes: Mapping[str, Any], name: str) -> int:
    value = _parse_float(attributes, name)
    if value != int(value):
        raise ParseError(name, _attribute(attributes, name))
    return int(value)


def _with_default(attributes: Mapping[str, Any], name: str, parser, default):
    try:
        return parser(attributes, name)
    except ParseError as exc:
        logger.warning("Featureline sample: %s, using %r", exc, default)
        return default


def parse_featureline_sample(attributes: Mapping[str, Any]) -> Optional[FeaturelineSample]:
    """Parse one sample's attribute mapping.

    Returns:
        The sample, or None when the station cannot be read
    """
    raw_station = _attribute(attributes, "Station")
    try:
        station = parse_station(raw_station if raw_station is not None else "")
    except ParseError as exc:
        logger.error("Skipping featureline sample: %s", exc)
        return None

    x = _with_default(attributes, "X", _parse_float, 0.0)
    y = _with_default(attributes, "Y", _parse_float, 0.0)
    z = _with_default(attributes, "Z", _parse_float, 0.0)
    is_break = _with_default(attributes, "IsBreak", _parse_int, 0)
    region_index = _with_default(attributes, "RegionIndex", _parse_int, -1)
    return FeaturelineSample(station, Point3D(x, y, z), region_index, bool(is_break))


def parse_side(raw: Any) -> Optional[Side]:
    """Side from an exported side value (< 0 left); None if absent or invalid."""
    if raw is None:
        return None
    if isinstance(raw, Side):
        return raw
    text = str(raw).strip().upper()
    if text in Side.__members__:
        return Side[text]
    try:
        return Side.LEFT if float(text) < 0 else Side.RIGHT
    except ValueError:
        logger.warning("Featureline side %r not understood, deriving it from the offset", raw)
        return None


# ============================================================================
# FEATURELINE
# ============================================================================

class Featureline:
    """Featureline polyline along a baseline.

    Attributes:
        baseline: Baseline the featureline follows (referenced, not owned)
        code: Design code
        region_index: Region the featureline was extracted from, -1 if none
        points: Polyline points, duplicates pruned
        side: Side of the baseline
        start: Station of the first point (within the region)
        end: Station of the last point (within the region)

    Raises:
        GeometryError: If fewer than two distinct points remain
    """

    def __init__(
        self,
        baseline,
        points: Sequence[PointLike],
        code: str,
        region_index: int = -1,
        side: Optional[Side] = None,
    ):
        self.baseline = baseline
        self.code = code
        self.region_index = region_index
        self.points: List[Point3D] = prune_duplicates(as_point(p) for p in points)
        if len(self.points) < 2:
            raise GeometryError(f"Featureline {code!r} needs at least 2 distinct points")

        first = baseline.station_offset_elevation(self.points[0])
        last = baseline.station_offset_elevation(self.points[-1])
        self.side = side if side is not None else Side.from_offset(first.offset)

        start, end = sorted((first.station, last.station))
        region = baseline.region(region_index)
        if region is not None:
            start = max(start, region.start)
            end = min(end, region.end)
        self.start = start
        self.end = end

    @property
    def region(self):
        return self.baseline.region(self.region_index)

    @property
    def length(self) -> float:
        return polyline_length(self.points)

    def _snap(self, station: float, tolerance: float = FEATURELINE_SNAP_TOLERANCE) -> float:
        return snap_station(station, self.start, self.end, tolerance)

    # ========================================================================
    # FRAMES
    # ========================================================================

    def _plane_crossings(self, origin: Point3D, normal: np.ndarray) -> List[Tuple[Point3D, int]]:
        """Points where the polyline crosses the plane, with segment index."""
        o = origin.to_array()
        crossings: List[Tuple[Point3D, int]] = []
        for i, (a, b) in enumerate(zip(self.points, self.points[1:])):
            pa, pb = a.to_array(), b.to_array()
            da = float(np.dot(pa - o, normal))
            db = float(np.dot(pb - o, normal))
            if da == 0.0:
                crossings.append((a, i))
            elif da * db < 0.0:
                t = da / (da - db)
                crossings.append((Point3D(*(pa + t * (pb - pa))), i))
            elif db == 0.0 and i == len(self.points) - 2:
                crossings.append((b, i))
        return crossings

    def coordinate_frame_at_station(self, station: float, vertical: bool = True) -> Optional[CoordinateFrame]:
        """Frame on the featureline at ``station``.

        The origin is where the featureline crosses the baseline's normal
        plane at the station (the crossing nearest the baseline when there
        are several). Y follows the featureline; with ``vertical`` it is
        flattened so Z stays world up.

        Returns:
            CoordinateFrame, or None if the station is outside the
            featureline or the featureline does not reach the station
        """
        station = self._snap(station)
        if not (self.start <= station <= self.end):
            log_out_of_range(logger, station, self.start, self.end, f"featureline {self.code!r}")
            return None

        baseline_frame = self.baseline.coordinate_frame_at_station(station)
        if baseline_frame is None:
            return None

        crossings = self._plane_crossings(baseline_frame.origin, baseline_frame.y_axis)
        if crossings:
            origin, segment = min(crossings, key=lambda c: c[0].distance_to(baseline_frame.origin))
        elif station == self.start:
            origin, segment = self.points[0], 0
        elif station == self.end:
            origin, segment = self.points[-1], len(self.points) - 2
        else:
            logger.warning(
                "Featureline %r does not cross station %s", self.code, format_station(station)
            )
            return None

        a, b = self.points[segment], self.points[segment + 1]
        tangent = (b - a).to_array()
        if vertical:
            tangent[2] = 0.0
        try:
            return CoordinateFrame.from_tangent(origin, tangent)
        except GeometryError as exc:
            logger.warning("Featureline %r: no frame at %s: %s", self.code, format_station(station), exc)
            return None

    def point_at(
        self,
        station: float,
        offset: float = 0.0,
        elevation: float = 0.0,
        refer_to_baseline: bool = False
    ) -> Optional[Point3D]:
        """Point at (offset, elevation) in the featureline or baseline frame."""
        if refer_to_baseline:
            frame = self.baseline.coordinate_frame_at_station(station)
        else:
            frame = self.coordinate_frame_at_station(station)
        if frame is None:
            return None
        return frame.to_world(offset, 0.0, elevation)

    def station_offset_elevation(self, point: PointLike) -> StationOffsetElevation:
        """Station, offset and elevation of a point relative to the featureline.

        Inside the featureline's range, offset and elevation are measured in
        the featureline frame at the station of the point's closest
        featureline point. Outside it, the baseline result is returned.
        Values are rounded to 5 decimals.
        """
        point = as_point(point)
        base = self.baseline.station_offset_elevation(point)
        station = self._snap(base.station)

        if self.start - STATION_SNAP_TOLERANCE <= station <= self.end + STATION_SNAP_TOLERANCE:
            nearest = self._closest_point_2d(point)
            at = self._snap(self.baseline.station_offset_elevation(nearest).station)
            frame = self.coordinate_frame_at_station(min(self.end, max(self.start, at)), vertical=False)
            if frame is not None:
                local = frame.to_local(point)
                return StationOffsetElevation(at, local.x, local.z, local.y).rounded(RESULT_DECIMALS)

        return StationOffsetElevation(
            station, base.offset, base.elevation, base.residual, base.on_profile
        ).rounded(RESULT_DECIMALS)

    def _closest_point_2d(self, point: Point3D) -> Point3D:
        """Closest point on the polyline in plan, with its 3D position."""
        best: Optional[Point3D] = None
        best_distance = float("inf")
        for a, b in zip(self.points, self.points[1:]):
            dx, dy = b.x - a.x, b.y - a.y
            length_sq = dx * dx + dy * dy
            t = 0.0
            if length_sq > 0:
                t = min(1.0, max(0.0, ((point.x - a.x) * dx + (point.y - a.y) * dy) / length_sq))
            candidate = a + (b - a) * t
            distance = candidate.distance_2d(point)
            if distance < best_distance:
                best, best_distance = candidate, distance
        return best

    # ========================================================================
    # DERIVED POLYLINES
    # ========================================================================

    def _stations_between(self, start: float, end: float) -> List[float]:
        inner = [s for s in self.baseline.stations if start < s < end]
        return [start] + inner + [end]

    def polyline_by_stations_offset_elevation(
        self,
        start: float,
        end: float,
        offset: float = 0.0,
        elevation: float = 0.0
    ) -> List[Point3D]:
        """Points at (offset, elevation) in the featureline frame between two stations.

        Stations are clamped to the featureline range. Returns an empty list
        when the clamped range is empty.
        """
        start, end = sorted((start, end))
        start = max(start, self.start)
        end = min(end, self.end)
        if end - start <= FEATURELINE_SNAP_TOLERANCE:
            return []
        points = [self.point_at(s, offset, elevation) for s in self._stations_between(start, end)]
        return prune_duplicates(p for p in points if p is not None)

    def polyline_by_offset_elevation(self, offset: float = 0.0, elevation: float = 0.0) -> List[Point3D]:
        """Polyline parallel to the featureline over its whole range."""
        return self.polyline_by_stations_offset_elevation(self.start, self.end, offset, elevation)

    def points_by_chord(self, chord: float) -> List[Point3D]:
        """Points along the featureline at a constant chord length.

        Each point is the first point of the polyline, past the previous one,
        at straight-line distance ``chord`` from it. The last polyline point
        is always included.

        Raises:
            ValueError: If chord is not positive
        """
        if chord <= 0:
            raise ValueError(f"Chord must be positive, got {chord}")

        result = [self.points[0]]
        center = self.points[0].to_array()
        segment = 0
        start = self.points[0].to_array()
        while segment < len(self.points) - 1:
            end = self.points[segment + 1].to_array()
            hit = _sphere_exit(center, chord, start, end)
            if hit is None:
                segment += 1
                start = end
                continue
            point = Point3D(*(float(c) for c in hit))
            result.append(point)
            center = hit
            start = hit

        if result[-1].distance_to(self.points[-1]) > FEATURELINE_SNAP_TOLERANCE:
            result.append(self.points[-1])
        return result

    def __repr__(self) -> str:
        return (
            f"Featureline({self.code!r}, {self.side.value}, region {self.region_index}, "
            f"{format_station(self.start)} - {format_station(self.end)}, {len(self.points)} points)"
        )


def _sphere_exit(center: np.ndarray, radius: float, a: np.ndarray, b: np.ndarray) -> Optional[np.ndarray]:
    """First point past ``a`` on segment a-b at distance ``radius`` from ``center``.

    ``a`` is inside (or on) the sphere; returns None if b is still inside.
    """
    d = b - a
    f = a - center
    qa = float(np.dot(d, d))
    if qa == 0.0:
        return None
    qb = 2.0 * float(np.dot(f, d))
    qc = float(np.dot(f, f)) - radius * radius
    disc = qb * qb - 4.0 * qa * qc
    if disc < 0:
        return None
    t = (-qb + math.sqrt(disc)) / (2.0 * qa)
    if t <= 1e-12 or t > 1.0:
        return None
    return a + t * d


@dataclass(frozen=True)
class FeaturelinePoint:
    """A point of a featureline with its station and frame.

    Attributes:
        baseline: Baseline of the featureline
        position: World position
        code: Design code
        station: Baseline station of the point
    """

    baseline: Any
    position: Point3D
    code: str
    station: float

    @property
    def coordinate_frame(self) -> Optional[CoordinateFrame]:
        return self.baseline.coordinate_frame_at_station(self.station)


# ============================================================================
# EXTRACTION
# ============================================================================

def _emit(
    baseline,
    points: List[Point3D],
    code: str,
    region_index: int,
    side: Optional[Side],
    out: List[Featureline],
) -> bool:
    pruned = prune_duplicates(points)
    if len(pruned) < 2:
        logger.debug("Featureline %r run of %d point(s) is too short", code, len(pruned))
        return False
    out.append(Featureline(baseline, pruned, code, region_index, side))
    return True


def extract_featurelines(
    baseline,
    samples: Iterable[FeaturelineSample],
    code: str,
    side: Optional[Side] = None,
) -> List[Featureline]:
    """Stitch samples of one code into featurelines.

    Args:
        baseline: Baseline the samples belong to
        samples: Parsed samples in any order
        code: Design code
        side: Side from the export, or None to derive it from the offset

    Returns:
        Featurelines in station order

    Example:
        >>> stations = [0, 10, 20, 20, 30, 40]
        >>> samples = [FeaturelineSample(s, Point3D(s, 5, 0), 0, i == 2)
        ...            for i, s in enumerate(stations)]
        >>> [len(f.points) for f in extract_featurelines(baseline, samples, "EP")]
        [3, 3]
    """
    ordered = sorted(samples, key=lambda s: s.station)
    result: List[Featureline] = []
    run: List[Point3D] = []
    pending_break = False
    last_region = -1

    for sample in ordered:
        run.append(sample.point)
        pending_break = pending_break or sample.is_break

        if pending_break:
            if _emit(baseline, run, code, sample.region_index, side, result):
                run = []
            pending_break = False

        if sample.region_index != last_region and last_region > -1 and len(run) > 1:
            if _emit(baseline, run[:-1], code, last_region, side, result):
                run = run[-1:]

        last_region = sample.region_index

    if run:
        _emit(baseline, run, code, last_region, side, result)

    logger.debug("Extracted %d featureline(s) for %r", len(result), code)
    return result


def extract_from_records(baseline, records: Iterable[Any]) -> Dict[str, List[Featureline]]:
    """Parse raw featureline records and extract featurelines per code.

    Args:
        baseline: Baseline the records belong to
        records: FeaturelineRecord objects

    Returns:
        Featurelines keyed by code, in record order
    """
    by_code: Dict[str, List[Featureline]] = {}
    for record in records:
        samples = [s for s in (parse_featureline_sample(p) for p in record.points) if s is not None]
        featurelines = extract_featurelines(baseline, samples, record.code, parse_side(record.side))
        by_code.setdefault(record.code, []).extend(featurelines)
    return by_code


def group_by_region(featurelines: Iterable[Featureline], region_count: int) -> List[List[Featureline]]:
    """Featurelines grouped into one list per region index."""
    groups: List[List[Featureline]] = [[] for _ in range(region_count)]
    for featureline in featurelines:
        index = featureline.region_index
        if 0 <= index < region_count:
            groups[index].append(featureline)
        else:
            logger.warning("Featureline %r has no valid region (%d)", featureline.code, index)
    return groups


__all__ = [
    "Side",
    "FeaturelineSample",
    "parse_featureline_sample",
    "parse_side",
    "Featureline",
    "FeaturelinePoint",
    "extract_featurelines",
    "extract_from_records",
    "group_by_region",
]

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
Baselines and Regions
=====================

A Baseline couples a horizontal alignment with a vertical profile, a
station array and an ordered list of regions. It answers
station-offset-elevation queries that include the profile elevation:

    point = SOE frame(station) moved up by profile(station)
            + offset * X + elevation * Z

Regions split the baseline into consecutive station ranges, each applied
with one assembly. ``region_index_for_station`` scans them in order with
inclusive bounds, so a boundary station belongs to the earlier region.
Stations before the first region map to region 0 and stations after the
last region map to the last one.

Example:
    >>> baseline = Baseline(alignment, profile, stations=[0, 10, 20, 30],
    ...                     regions=[(0.0, 15.0), (15.0, 30.0)])
    >>> baseline.region_index_for_station(15.0)
    0
    >>> baseline.region_index_for_station(42.0)
    1
"""

from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .constants import STATION_DECIMALS, STATION_SNAP_TOLERANCE
from .coordinate_frame import CoordinateFrame, Point3D, PointLike, as_point
from .exceptions import GeometryError, log_out_of_range
from .horizontal_alignment.manager import HorizontalAlignment
from .logging_config import get_logger
from .soe import SOETransform, StationOffsetElevation, snap_station
from .station_formatting import format_station
from .tool import ProfileSource
from .vertical_alignment.profile import profile_or_flat

logger = get_logger(__name__)


def normalize_stations(stations: Iterable[float], decimals: int = STATION_DECIMALS) -> List[float]:
    """Round stations, drop duplicates and sort.

    Example:
        >>> normalize_stations([10.0004, 0.0, 10.0, 5.12345])
        [0.0, 5.123, 10.0]
    """
    return sorted({round(float(s), decimals) for s in stations})


class BaselineRegion:
    """Contiguous station range of a baseline.

    Attributes:
        start: First station of the region
        end: Last station of the region
        index: Position in the baseline's region list
        assembly_name: Assembly applied in this region
        stations: Sorted stations of the region
        baseline_start: Start station of the owning baseline

    A Baseline builds its own regions from the ones it is given, so one
    region object can describe a range on several baselines.
    """

    def __init__(
        self,
        start: float,
        end: float,
        stations: Iterable[float] = (),
        index: int = 0,
        assembly_name: str = "",
        baseline_start: float = 0.0,
    ):
        if end < start:
            raise GeometryError(f"Region end {end} is before its start {start}")
        self.start = float(start)
        self.end = float(end)
        self.index = index
        self.assembly_name = assembly_name
        self.stations = normalize_stations(stations)
        self.baseline_start = float(baseline_start)

    @property
    def relative_start(self) -> float:
        """Region start measured from the baseline start."""
        return self.start - self.baseline_start

    @property
    def relative_end(self) -> float:
        return self.end - self.baseline_start

    @property
    def length(self) -> float:
        return self.end - self.start

    def contains(self, station: float, tolerance: float = 0.0) -> bool:
        return self.start - tolerance <= station <= self.end + tolerance

    def stations_in_range(self, stations: Iterable[float]) -> List[float]:
        return [s for s in stations if self.contains(s)]

    def __repr__(self) -> str:
        return (
            f"BaselineRegion({self.index}, {format_station(self.start)} - "
            f"{format_station(self.end)}, {self.assembly_name!r})"
        )


RegionSpec = Union[BaselineRegion, Tuple[float, float], Tuple[float, float, str]]


class Baseline:
    """Alignment plus profile, stations and regions.

    Args:
        alignment: Horizontal alignment
        profile: Profile lookup; a flat profile at elevation 0 if omitted
        stations: Corridor stations (rounded to 3 decimals, deduplicated)
        regions: BaselineRegion objects or (start, end[, assembly]) tuples,
            in station order; a single region over the whole alignment if
            omitted
        index: Position of the baseline in its corridor
        corridor_name: Name of the owning corridor
    """

    def __init__(
        self,
        alignment: HorizontalAlignment,
        profile: Optional[ProfileSource] = None,
        stations: Iterable[float] = (),
        regions: Sequence[RegionSpec] = (),
        index: int = 0,
        corridor_name: str = "",
    ):
        self.alignment = alignment
        self.profile = profile_or_flat(profile)
        self.soe = SOETransform(alignment)
        self.index = index
        self.corridor_name = corridor_name
        self.stations = normalize_stations(stations)
        self.regions = self._build_regions(regions)

    def _build_regions(self, specs: Sequence[RegionSpec]) -> List[BaselineRegion]:
        if not specs:
            specs = [(self.alignment.start, self.alignment.end)]

        regions: List[BaselineRegion] = []
        for i, spec in enumerate(specs):
            if isinstance(spec, BaselineRegion):
                start, end = spec.start, spec.end
                assembly, stations = spec.assembly_name, spec.stations
            else:
                start, end = spec[0], spec[1]
                assembly = spec[2] if len(spec) > 2 else ""
                stations = []
            region = BaselineRegion(
                start, end, stations,
                index=i,
                assembly_name=assembly,
                baseline_start=self.alignment.start,
            )
            if not region.stations:
                region.stations = region.stations_in_range(self.stations)
            regions.append(region)

        for a, b in zip(regions, regions[1:]):
            if b.start < a.end - STATION_SNAP_TOLERANCE:
                logger.warning("Regions %d and %d overlap at %s", a.index, b.index, format_station(b.start))
            elif b.start > a.end + STATION_SNAP_TOLERANCE:
                logger.warning("Gap between regions %d and %d", a.index, b.index)
        return regions

    # ========================================================================
    # RANGE
    # ========================================================================

    @property
    def name(self) -> str:
        return self.alignment.name

    @property
    def start(self) -> float:
        return self.regions[0].start

    @property
    def end(self) -> float:
        return self.regions[-1].end

    def contains(self, station: float, tolerance: float = 0.0) -> bool:
        return self.start - tolerance <= station <= self.end + tolerance

    def region(self, index: int) -> Optional[BaselineRegion]:
        if 0 <= index < len(self.regions):
            return self.regions[index]
        return None

    def region_index_for_station(self, station: float) -> int:
        """Index of the first region whose [start, end] contains ``station``.

        Stations before the first region give 0; stations after the last
        region, or in a gap between regions, give the last index.
        """
        if station < self.regions[0].start:
            return 0
        for region in self.regions:
            if region.start <= station <= region.end:
                return region.index
        return self.regions[-1].index

    # ========================================================================
    # SOE QUERIES
    # ========================================================================

    def _profile_elevation(self, station: float) -> Optional[float]:
        try:
            return self.profile.elevation_at(station)
        except ValueError as exc:
            logger.warning("Baseline %r: no profile elevation at %s: %s", self.name, format_station(station), exc)
            return None

    def coordinate_frame_at_station(self, station: float) -> Optional[CoordinateFrame]:
        """SOE frame at ``station`` with its origin raised to the profile.

        Returns:
            CoordinateFrame, or None if the station is outside the baseline
        """
        station = snap_station(station, self.start, self.end, STATION_SNAP_TOLERANCE)
        if not self.contains(station):
            log_out_of_range(logger, station, self.start, self.end, f"baseline {self.name!r}")
            return None
        frame = self.soe.frame_at(station)
        if frame is None:
            return None
        z = self._profile_elevation(station)
        if z is None:
            return None
        return frame.translated(dz=z)

    def point_at(self, station: float, offset: float = 0.0, elevation: float = 0.0) -> Optional[Point3D]:
        """World point at (station, offset, elevation above the profile)."""
        frame = self.coordinate_frame_at_station(station)
        if frame is None:
            return None
        return frame.to_world(offset, 0.0, elevation)

    def station_offset_elevation(self, point: PointLike) -> StationOffsetElevation:
        """Station, offset and elevation above the profile of a world point.

        Where the profile has no elevation for the station, the elevation is
        measured from z = 0 and ``on_profile`` is False.
        """
        point = as_point(point)
        result = self.soe.station_offset_elevation(point)
        station = snap_station(result.station, self.start, self.end, STATION_SNAP_TOLERANCE)
        z = self._profile_elevation(station)
        if z is None:
            return StationOffsetElevation(station, result.offset, result.elevation, result.residual, on_profile=False)
        return StationOffsetElevation(station, result.offset, result.elevation - z, result.residual)

    def coordinate_frame_at_point(self, point: PointLike) -> Optional[CoordinateFrame]:
        """Frame at the station of the point's closest baseline point."""
        return self.coordinate_frame_at_station(self.station_offset_elevation(point).station)

    def region_polylines(self) -> List[List[Point3D]]:
        """Baseline centerline through each region's stations."""
        polylines = []
        for region in self.regions:
            stations = normalize_stations([region.start] + region.stations + [region.end])
            points = [self.point_at(s) for s in stations]
            polylines.append([p for p in points if p is not None])
        return polylines

    def placed(self, index: int, corridor_name: str) -> "Baseline":
        """Copy of this baseline at position ``index`` of a corridor.

        The alignment and profile are shared; regions are rebuilt.
        """
        return Baseline(
            self.alignment,
            self.profile,
            self.stations,
            self.regions,
            index=index,
            corridor_name=corridor_name,
        )

    def __repr__(self) -> str:
        return (
            f"Baseline({self.index}, {self.name!r}, {format_station(self.start)} - "
            f"{format_station(self.end)}, {len(self.regions)} regions)"
        )


__all__ = [
    "normalize_stations",
    "BaselineRegion",
    "Baseline",
]

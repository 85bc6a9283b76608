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
Corridor Aggregate
==================

A corridor is an ordered list of baselines plus the design data exported
for them by a CorridorDataSource. This module turns that raw data into
geometry:

- featurelines per code, grouped Baseline > Region
- coded cross-section points mapped to world space
- applied subassembly shapes and links, grouped
  Baseline > Region > Assembly > Subassembly

Records are read through the injected source; nothing here knows where
they come from. When a Session is given, featureline records are fetched
once per baseline and reused.

Usage:
    corridor = Corridor("Road A", [baseline], source)
    edges = corridor.featurelines_by_code("ETW")
    left_edge = edges[0][0][0]
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Union

from .baseline import Baseline
from .constants import FEATURELINE_SNAP_TOLERANCE, REGION_STATION_TOLERANCE
from .coordinate_frame import Point3D, PointLike, as_point, prune_duplicates
from .featureline import Featureline, Side, extract_from_records, group_by_region, parse_side
from .logging_config import get_logger
from .soe import snap_station
from .tool import CorridorDataSource

if TYPE_CHECKING:
    from .records import AppliedSubassemblyRecord, FeaturelineRecord, SOETriple
    from .session import Session

logger = get_logger(__name__)


# =============================================================================
# Cross-section geometry
# =============================================================================

@dataclass
class AppliedSubassemblyShape:
    """Closed cross-section shape in world coordinates."""
    name: str
    points: List[Point3D]
    codes: List[str] = field(default_factory=list)
    station: float = 0.0
    closed: bool = True


@dataclass
class AppliedSubassemblyLink:
    """Open cross-section link in world coordinates."""
    name: str
    points: List[Point3D]
    codes: List[str] = field(default_factory=list)
    station: float = 0.0
    closed: bool = False


CrossSectionItem = Union[AppliedSubassemblyShape, AppliedSubassemblyLink]

# baseline index -> region index -> assembly -> subassembly -> items
CrossSections = Dict[int, Dict[int, Dict[str, Dict[str, List[CrossSectionItem]]]]]


def cross_section_name(corridor_name: str, record: "AppliedSubassemblyRecord", ordinal: int) -> str:
    """Stable name of a shape or link.

    Example:
        >>> cross_section_name("Road", record, 3)
        'Road_0_1_Typical_Lane_2A4F_3'
    """
    parts = [
        corridor_name,
        record.baseline_index,
        record.region_index,
        record.assembly,
        record.subassembly,
        record.handle,
        ordinal,
    ]
    return "_".join(str(p) for p in parts)


# =============================================================================
# Corridor
# =============================================================================

class Corridor:
    """Corridor made of baselines.

    Args:
        name: Corridor name
        baselines: Baselines in corridor order; baseline ``i`` is matched
            with records whose ``baseline_index`` is ``i``. The corridor
            keeps placed copies; the given baselines are not changed
        source: Provider of featureline, subassembly and point records
        session: Optional session caching exported featureline records
    """

    def __init__(
        self,
        name: str,
        baselines: Sequence[Baseline],
        source: CorridorDataSource,
        session: Optional["Session"] = None,
    ):
        self.name = name
        self.baselines: List[Baseline] = [b.placed(i, name) for i, b in enumerate(baselines)]
        self.source = source
        self.session = session

    def baseline(self, index: int) -> Baseline:
        if not 0 <= index < len(self.baselines):
            raise IndexError(f"Corridor {self.name!r} has no baseline {index}")
        return self.baselines[index]

    # =========================================================================
    # Featurelines
    # =========================================================================

    def _featureline_records(self, baseline_index: int) -> List["FeaturelineRecord"]:
        if self.session is not None:
            cached = self.session.cached_records(self.name, baseline_index)
            if cached is not None:
                return cached
        records = list(self.source.featureline_records(baseline_index))
        if self.session is not None:
            self.session.mark_exported(self.name, baseline_index, records)
        return records

    def codes(self) -> List[str]:
        """Sorted unique design codes across all baselines."""
        codes = set()
        for i in range(len(self.baselines)):
            codes.update(r.code for r in self._featureline_records(i))
        for record in self.source.applied_subassemblies():
            for item in list(record.shapes) + list(record.links):
                codes.update(item.codes)
        for i in range(len(self.baselines)):
            for point in self.source.cross_section_points(i):
                codes.update(point.codes)
        return sorted(c for c in codes if c)

    def _baseline_featurelines(
        self,
        baseline_index: int,
        code: str,
        records: Optional[List["FeaturelineRecord"]] = None
    ) -> List[List[Featureline]]:
        baseline = self.baselines[baseline_index]
        if records is None:
            records = self._featureline_records(baseline_index)
        records = [r for r in records if r.code == code]
        featurelines = extract_from_records(baseline, records).get(code, [])
        return group_by_region(featurelines, len(baseline.regions))

    def featurelines_by_code(self, code: str, max_workers: Optional[int] = None) -> List[List[List[Featureline]]]:
        """Featurelines of one code, grouped Baseline > Region.

        Args:
            code: Design code
            max_workers: Extract baselines in a thread pool when > 1

        Returns:
            One list per baseline, holding one list per region
        """
        logger.debug("Corridor %r: featurelines for %r", self.name, code)
        indices = range(len(self.baselines))
        if max_workers and max_workers > 1 and len(self.baselines) > 1:
            # Records are fetched up front so the source is only called from this thread
            records = [self._featureline_records(i) for i in indices]
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                return list(executor.map(lambda i: self._baseline_featurelines(i, code, records[i]), indices))
        return [self._baseline_featurelines(i, code) for i in indices]

    def featurelines_by_code_station(self, code: str, station: float) -> List[List[Featureline]]:
        """Featurelines of one code that cover ``station``, one list per baseline.

        Only the regions containing the station (within 1e-3) are searched.
        """
        result: List[List[Featureline]] = []
        for i, baseline in enumerate(self.baselines):
            found: List[Featureline] = []
            for region, featurelines in zip(baseline.regions, self._baseline_featurelines(i, code)):
                if not region.contains(station, REGION_STATION_TOLERANCE):
                    continue
                found.extend(
                    f for f in featurelines
                    if f.start - REGION_STATION_TOLERANCE <= station <= f.end + REGION_STATION_TOLERANCE
                )
            result.append(found)
        return result

    def closest_featureline(
        self,
        point: PointLike,
        code: str,
        side: Union[Side, str],
        baseline_index: int = 0
    ) -> Optional[Featureline]:
        """Featureline of ``code`` on ``side`` nearest to ``point``.

        Returns:
            The featureline, or None if the point is outside the baseline or
            no featureline matches
        """
        point = as_point(point)
        baseline = self.baseline(baseline_index)
        wanted = parse_side(side)
        station = baseline.station_offset_elevation(point).station
        if not baseline.contains(station, FEATURELINE_SNAP_TOLERANCE):
            logger.error("Point %s is outside baseline %r", point.to_tuple(), baseline.name)
            return None

        candidates = [
            f for f in self.featurelines_by_code_station(code, station)[baseline_index]
            if wanted is None or f.side == wanted
        ]
        if not candidates:
            logger.warning("No %r featureline on side %s at station %.3f", code, side, station)
            return None
        return min(candidates, key=lambda f: abs(f.station_offset_elevation(point).offset))

    # =========================================================================
    # Cross sections
    # =========================================================================

    def _region_for(self, baseline: Baseline, region_index: int, station: float):
        region = baseline.region(region_index)
        if region is None:
            region = baseline.region(baseline.region_index_for_station(station))
        return region

    def points_by_code(self, code: str) -> List[List[List[List[Point3D]]]]:
        """Coded cross-section points, grouped Baseline > Region > Station.

        Points whose station falls outside their region by more than 1e-3
        are dropped; stations within 1e-3 of a bound snap onto it.
        """
        result: List[List[List[List[Point3D]]]] = []
        for i, baseline in enumerate(self.baselines):
            per_region: List[Dict[float, List[Point3D]]] = [{} for _ in baseline.regions]
            for record in self.source.cross_section_points(i):
                if code not in record.codes:
                    continue
                region = self._region_for(baseline, record.region_index, record.station)
                station = snap_station(record.station, region.start, region.end, REGION_STATION_TOLERANCE)
                if not region.contains(station):
                    continue
                point = baseline.point_at(station, record.offset, record.elevation)
                if point is not None:
                    per_region[region.index].setdefault(station, []).append(point)
            result.append([[group[s] for s in sorted(group)] for group in per_region])
        return result

    def _map_triples(self, baseline: Baseline, triples: Sequence["SOETriple"]) -> List[Point3D]:
        points = []
        for station, offset, elevation in triples:
            point = baseline.point_at(station, offset, elevation)
            if point is not None:
                points.append(point)
        return prune_duplicates(points)

    def cross_sections(self) -> CrossSections:
        """Applied subassembly shapes and links in world coordinates.

        Shapes with fewer than 3 distinct points and links with fewer than 2
        are skipped with a debug log.
        """
        output: CrossSections = {}
        for record in self.source.applied_subassemblies():
            if not 0 <= record.baseline_index < len(self.baselines):
                logger.warning(
                    "Corridor %r: subassembly %r refers to missing baseline %d",
                    self.name, record.subassembly, record.baseline_index
                )
                continue
            baseline = self.baselines[record.baseline_index]
            items = (
                output.setdefault(record.baseline_index, {})
                .setdefault(record.region_index, {})
                .setdefault(record.assembly, {})
                .setdefault(record.subassembly, [])
            )

            ordinal = 0
            for shape in record.shapes:
                points = self._map_triples(baseline, shape.points)
                if len(points) > 2:
                    items.append(AppliedSubassemblyShape(
                        cross_section_name(self.name, record, ordinal),
                        points, list(shape.codes), record.station
                    ))
                else:
                    logger.debug("Skipping degenerate shape of %r", record.subassembly)
                ordinal += 1
            for link in record.links:
                points = self._map_triples(baseline, link.points)
                if len(points) > 1:
                    items.append(AppliedSubassemblyLink(
                        cross_section_name(self.name, record, ordinal),
                        points, list(link.codes), record.station
                    ))
                else:
                    logger.debug("Skipping degenerate link of %r", record.subassembly)
                ordinal += 1
        return output

    # =========================================================================
    # Baseline shortcuts
    # =========================================================================

    def point_at(self, baseline_index: int, station: float, offset: float = 0.0, elevation: float = 0.0):
        return self.baseline(baseline_index).point_at(station, offset, elevation)

    def coordinate_frame_at_station(self, baseline_index: int, station: float):
        return self.baseline(baseline_index).coordinate_frame_at_station(station)

    def coordinate_frame_at_point(self, baseline_index: int, point: PointLike):
        return self.baseline(baseline_index).coordinate_frame_at_point(point)

    def __repr__(self) -> str:
        return f"Corridor(Name = {self.name}, {len(self.baselines)} baselines)"


__all__ = [
    "AppliedSubassemblyShape",
    "AppliedSubassemblyLink",
    "cross_section_name",
    "Corridor",
]

"""
Corridor network synthesis.

Two fixed topologies are available:
- spine: one horizontal main corridor through the middle of the zone bounds,
  plus a vertical connector to every other zone (even indices)
- tree: a minimum spanning tree over zone centers, each edge laid out as an
  L-shaped pair of axis-aligned strips
Neither routes around obstacles.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from shapely.ops import unary_union

from .geometry import BBox, polygon_shape, strip_polygon
from .zones import PlacedZone

logger = logging.getLogger(__name__)

# Minimum corridor width regardless of configuration
MIN_CORRIDOR_WIDTH = 1.8
# Horizontal padding of the main corridor beyond the outermost zones
SPINE_PADDING = 1.0

MAIN_CORRIDOR_ID = "main_horizontal"


@dataclass(frozen=True)
class CorridorSegment:
    id: str
    type: str  # main | secondary
    width: float
    polygon: Tuple[Tuple[float, float], ...]
    length: float
    area: float
    connects: Tuple[str, str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "width": self.width,
            "polygon": [list(p) for p in self.polygon],
            "length": self.length,
            "area": self.area,
            "connects": list(self.connects),
        }


def _segment(
    segment_id: str,
    segment_type: str,
    start: Tuple[float, float],
    end: Tuple[float, float],
    width: float,
    connects: Tuple[str, str],
) -> CorridorSegment:
    length = abs(end[0] - start[0]) + abs(end[1] - start[1])
    ring = strip_polygon(start[0], start[1], end[0], end[1], width)
    return CorridorSegment(
        id=segment_id,
        type=segment_type,
        width=width,
        polygon=tuple((p[0], p[1]) for p in ring),
        length=length,
        area=length * width,
        connects=connects,
    )


class CorridorSynthesizer:
    """Builds a corridor network reaching the placed zones."""

    def __init__(self, topology: str = "spine"):
        self.topology = topology

    def synthesize(
        self,
        zones: List[PlacedZone],
        bounds: Optional[BBox] = None,
        width: float = MIN_CORRIDOR_WIDTH,
    ) -> List[CorridorSegment]:
        """
        Generate corridor segments for a set of zones.

        Args:
            zones: Final zones of the floor, in output order
            bounds: Floor bounds. The main corridor is padded 1 m past the
                outermost zones but never past these bounds; pass None to
                keep the full padding
            width: Requested corridor width (raised to 1.8 m if smaller)

        Returns:
            List of corridor segments (empty for fewer than 2 zones)
        """
        width = max(width, MIN_CORRIDOR_WIDTH)
        if len(zones) < 2:
            return []

        if self.topology == "tree":
            corridors = self._tree(zones, width)
        else:
            corridors = self._spine(zones, bounds, width)

        logger.debug("Synthesized %d corridor segments (%s)", len(corridors), self.topology)
        return corridors

    def _spine(self, zones: List[PlacedZone], bounds: Optional[BBox], width: float) -> List[CorridorSegment]:
        extent = BBox.union(z.bbox for z in zones)
        mid_y = extent.center_y

        start_x = extent.min_x - SPINE_PADDING
        end_x = extent.max_x + SPINE_PADDING
        if bounds is not None:
            start_x = max(start_x, bounds.min_x)
            end_x = min(end_x, bounds.max_x)

        leftmost = min(zones, key=lambda z: z.bbox.min_x)
        rightmost = max(zones, key=lambda z: z.bbox.max_x)
        corridors = [
            _segment(
                MAIN_CORRIDOR_ID, "main", (start_x, mid_y), (end_x, mid_y), width,
                (leftmost.id, rightmost.id),
            )
        ]

        for index, zone in enumerate(zones):
            if index % 2 != 0:
                continue
            zone_box = zone.bbox
            # Run to the zone edge on the far side of the spine
            far_y = zone_box.max_y if zone.position.y >= mid_y else zone_box.min_y
            corridors.append(
                _segment(
                    f"connector_{index + 1}", "secondary",
                    (zone.position.x, mid_y), (zone.position.x, far_y), width,
                    (MAIN_CORRIDOR_ID, zone.id),
                )
            )

        return corridors

    def _tree(self, zones: List[PlacedZone], width: float) -> List[CorridorSegment]:
        corridors = []
        for a, b in minimum_spanning_tree(zones):
            pa, pb = zones[a].position, zones[b].position
            corner = (pb.x, pa.y)
            segment_type = "main" if not corridors else "secondary"
            connects = (zones[a].id, zones[b].id)

            if abs(pb.x - pa.x) > 1e-9:
                corridors.append(
                    _segment(f"link_{a}_{b}_h", segment_type, (pa.x, pa.y), corner, width, connects)
                )
                segment_type = "secondary"
            if abs(pb.y - pa.y) > 1e-9:
                corridors.append(
                    _segment(f"link_{a}_{b}_v", segment_type, corner, (pb.x, pb.y), width, connects)
                )

        return corridors


def minimum_spanning_tree(zones: List[PlacedZone]) -> List[Tuple[int, int]]:
    """
    Prim's algorithm over zone centers with Manhattan edge weights.

    Returns:
        List of (parent_index, child_index) edges in insertion order
    """
    n = len(zones)
    if n < 2:
        return []

    in_tree = [False] * n
    best = [math.inf] * n
    parent = [-1] * n
    best[0] = 0.0
    edges = []

    for _ in range(n):
        current = min((i for i in range(n) if not in_tree[i]), key=lambda i: best[i])
        in_tree[current] = True
        if parent[current] >= 0:
            edges.append((parent[current], current))

        pc = zones[current].position
        for i in range(n):
            if in_tree[i]:
                continue
            pi = zones[i].position
            weight = abs(pi.x - pc.x) + abs(pi.y - pc.y)
            if weight < best[i]:
                best[i] = weight
                parent[i] = current

    return edges


def network_statistics(corridors: List[CorridorSegment]) -> Dict[str, Any]:
    """Length, area and unioned footprint of a corridor network."""
    if not corridors:
        return {
            "count": 0,
            "main": 0,
            "secondary": 0,
            "total_length": 0.0,
            "total_area": 0.0,
            "footprint_area": 0.0,
        }

    footprint = unary_union([polygon_shape(c.polygon) for c in corridors])
    return {
        "count": len(corridors),
        "main": sum(1 for c in corridors if c.type == "main"),
        "secondary": sum(1 for c in corridors if c.type == "secondary"),
        "total_length": sum(c.length for c in corridors),
        "total_area": sum(c.area for c in corridors),
        "footprint_area": footprint.area,
    }

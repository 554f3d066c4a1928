"""
Planar geometry helpers shared by the placer, validator and corridor synthesizer.
Coordinates are meters in floor-plan space (X right, Y up, Z = level).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

import shapely.geometry as sg

# Wall margin every zone rectangle must keep inside its room bbox
ROOM_MARGIN = 0.5


@dataclass(frozen=True)
class Point3:
    x: float
    y: float
    z: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}


@dataclass(frozen=True)
class BBox:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center_x(self) -> float:
        return (self.min_x + self.max_x) / 2.0

    @property
    def center_y(self) -> float:
        return (self.min_y + self.max_y) / 2.0

    def shrink(self, margin: float) -> "BBox":
        return BBox(
            self.min_x + margin,
            self.min_y + margin,
            self.max_x - margin,
            self.max_y - margin,
        )

    def contains_box(self, other: "BBox", tolerance: float = 1e-9) -> bool:
        return (
            other.min_x >= self.min_x - tolerance
            and other.max_x <= self.max_x + tolerance
            and other.min_y >= self.min_y - tolerance
            and other.max_y <= self.max_y + tolerance
        )

    def gap_to(self, inner: "BBox") -> float:
        """Smallest distance between an inner box's edges and this box's edges."""
        return min(
            inner.min_x - self.min_x,
            self.max_x - inner.max_x,
            inner.min_y - self.min_y,
            self.max_y - inner.max_y,
        )

    def corners(self) -> List[List[float]]:
        """Clockwise ring starting at (min_x, min_y) in a Y-down view."""
        return [
            [self.min_x, self.min_y],
            [self.max_x, self.min_y],
            [self.max_x, self.max_y],
            [self.min_x, self.max_y],
        ]

    def to_dict(self) -> Dict[str, float]:
        return {
            "min_x": self.min_x,
            "min_y": self.min_y,
            "max_x": self.max_x,
            "max_y": self.max_y,
        }

    @classmethod
    def union(cls, boxes: Iterable["BBox"]) -> "BBox":
        boxes = list(boxes)
        return cls(
            min(b.min_x for b in boxes),
            min(b.min_y for b in boxes),
            max(b.max_x for b in boxes),
            max(b.max_y for b in boxes),
        )


def rect_around(x: float, y: float, width: float, height: float) -> BBox:
    """Axis-aligned rectangle of the given size centered on (x, y)."""
    half_w = width / 2.0
    half_h = height / 2.0
    return BBox(x - half_w, y - half_h, x + half_w, y + half_h)


def distance(a: Point3, b: Point3) -> float:
    return math.sqrt((a.x - b.x) ** 2 + (a.y - b.y) ** 2 + (a.z - b.z) ** 2)


def strip_polygon(x0: float, y0: float, x1: float, y1: float, width: float) -> List[List[float]]:
    """
    Footprint ring of an axis-aligned strip of the given width between two points.

    The segment must be horizontal or vertical.
    """
    half = width / 2.0
    if abs(y1 - y0) <= abs(x1 - x0):
        lo, hi = sorted((x0, x1))
        return BBox(lo, y0 - half, hi, y0 + half).corners()
    lo, hi = sorted((y0, y1))
    return BBox(x0 - half, lo, x0 + half, hi).corners()


def polygon_shape(points: Sequence[Sequence[float]]) -> sg.Polygon:
    return sg.Polygon([(float(p[0]), float(p[1])) for p in points])

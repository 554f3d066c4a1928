"""
Room normalization.
Turns external room descriptions (detector output or user-drawn plans) into the
canonical Room shape the engine consumes.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from shapely.validation import explain_validity

from .geometry import BBox, Point3, polygon_shape

logger = logging.getLogger(__name__)

ROOM_TYPES = (
    "office",
    "meeting_room",
    "general_space",
    "workspace",
    "open_office",
    "other",
)

# Fallback room used when no room data is available at all
DEFAULT_ROOM_BOUNDS = BBox(0.0, 0.0, 20.0, 15.0)


class InvalidRoomData(ValueError):
    """Raised when a room description cannot be turned into a usable Room."""

    def __init__(self, message: str, room_id: Optional[str] = None):
        self.room_id = room_id
        if room_id is not None:
            message = f"Room {room_id}: {message}"
        super().__init__(message)


@dataclass(frozen=True)
class Room:
    """A room in canonical form. `polygon` is authoritative for polygonal rooms."""

    id: str
    type: str
    center: Point3
    width: float
    height: float
    area: float
    bbox: BBox
    polygon: tuple

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "center": self.center.to_dict(),
            "width": self.width,
            "height": self.height,
            "area": self.area,
            "bbox": self.bbox.to_dict(),
            "polygon": [list(p) for p in self.polygon],
        }


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _parse_bbox(raw: Mapping[str, Any], room_id: Optional[str]) -> BBox:
    try:
        return BBox(
            float(_pick(raw, "min_x", "minX")),
            float(_pick(raw, "min_y", "minY")),
            float(_pick(raw, "max_x", "maxX")),
            float(_pick(raw, "max_y", "maxY")),
        )
    except (TypeError, ValueError) as e:
        raise InvalidRoomData(f"malformed bbox {dict(raw)!r}", room_id) from e


def _parse_point(raw: Any) -> List[float]:
    if isinstance(raw, Mapping):
        return [float(raw["x"]), float(raw["y"])]
    return [float(raw[0]), float(raw[1])]


class RoomAdapter:
    """Normalizes room descriptions into Room values."""

    def normalize(self, data: Any, index: int = 0) -> Room:
        """
        Build a Room from a polygon, a bounding box, or a center plus size.

        Args:
            data: Room description (mapping) or an existing Room
            index: Position in the caller's list, used for a fallback id

        Returns:
            Normalized Room

        Raises:
            InvalidRoomData: On non-positive dimensions, a degenerate or
                self-intersecting polygon, or missing geometry
        """
        if isinstance(data, Room):
            return data
        if not isinstance(data, Mapping):
            raise InvalidRoomData(f"expected a mapping, got {type(data).__name__}")

        room_id = str(_pick(data, "id", default=f"room_{index + 1}"))
        room_type = str(_pick(data, "type", "room_type", default="other")).lower().strip()
        if room_type not in ROOM_TYPES:
            room_type = "other"

        raw_polygon = _pick(data, "polygon")
        raw_bbox = _pick(data, "bbox", "bounds")

        if raw_polygon:
            try:
                points = [_parse_point(p) for p in raw_polygon]
            except (KeyError, IndexError, TypeError, ValueError) as e:
                raise InvalidRoomData("malformed polygon vertices", room_id) from e
            # Drop an explicit closing vertex
            if len(points) > 1 and points[0] == points[-1]:
                points = points[:-1]
            return self._from_polygon(room_id, room_type, points, data)

        if raw_bbox:
            bbox = _parse_bbox(raw_bbox, room_id)
        else:
            bbox = self._bbox_from_center(room_id, data)

        return self._rectangular(room_id, room_type, bbox, data)

    def from_bounds(self, bounds: Any, room_id: str = "default_room_1") -> Room:
        """Single general_space room covering the given floor bounds."""
        bbox = bounds if isinstance(bounds, BBox) else _parse_bbox(bounds, room_id)
        return self._rectangular(room_id, "general_space", bbox, {})

    def default_room(self) -> Room:
        """The 20 m x 15 m room used when nothing else is known about the floor."""
        return self._rectangular("default_room", "general_space", DEFAULT_ROOM_BOUNDS, {})

    def _bbox_from_center(self, room_id: str, data: Mapping[str, Any]) -> BBox:
        center = _pick(data, "center")
        width = _pick(data, "width")
        height = _pick(data, "height")
        if center is None or width is None or height is None:
            raise InvalidRoomData("no polygon, bbox or center/size given", room_id)
        try:
            cx, cy = _parse_point(center)
            width = float(width)
            height = float(height)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise InvalidRoomData("malformed center or size", room_id) from e
        return BBox(cx - width / 2.0, cy - height / 2.0, cx + width / 2.0, cy + height / 2.0)

    def _rectangular(
        self, room_id: str, room_type: str, bbox: BBox, data: Mapping[str, Any]
    ) -> Room:
        if not all(math.isfinite(v) for v in (bbox.min_x, bbox.min_y, bbox.max_x, bbox.max_y)):
            raise InvalidRoomData(f"non-finite bbox {bbox.to_dict()!r}", room_id)

        width = bbox.width
        height = bbox.height
        area = width * height
        if width <= 0 or height <= 0:
            raise InvalidRoomData(
                f"non-positive dimensions {width:.2f} x {height:.2f}", room_id
            )
        if not math.isfinite(area):
            raise InvalidRoomData("room area is not finite", room_id)

        return Room(
            id=room_id,
            type=room_type,
            center=Point3(bbox.center_x, bbox.center_y, self._z(data, room_id)),
            width=width,
            height=height,
            area=area,
            bbox=bbox,
            polygon=tuple(tuple(p) for p in bbox.corners()),
        )

    def _from_polygon(
        self, room_id: str, room_type: str, points: List[List[float]], data: Mapping[str, Any]
    ) -> Room:
        if len(points) < 3:
            raise InvalidRoomData(f"polygon has {len(points)} vertices, need at least 3", room_id)
        if not all(math.isfinite(c) for p in points for c in p):
            raise InvalidRoomData("polygon has non-finite coordinates", room_id)

        shape = polygon_shape(points)
        if not shape.is_valid:
            raise InvalidRoomData(f"invalid polygon ({explain_validity(shape)})", room_id)
        if not math.isfinite(shape.area):
            raise InvalidRoomData("polygon area is not finite", room_id)
        if shape.area <= 0:
            raise InvalidRoomData("degenerate polygon with zero area", room_id)

        min_x, min_y, max_x, max_y = shape.bounds
        bbox = BBox(min_x, min_y, max_x, max_y)
        if bbox.width <= 0 or bbox.height <= 0:
            raise InvalidRoomData("degenerate polygon", room_id)

        return Room(
            id=room_id,
            type=room_type,
            center=Point3(bbox.center_x, bbox.center_y, self._z(data, room_id)),
            width=bbox.width,
            height=bbox.height,
            area=shape.area,
            bbox=bbox,
            polygon=tuple(tuple(p) for p in points),
        )

    @staticmethod
    def _z(data: Mapping[str, Any], room_id: str) -> float:
        center = data.get("center") if isinstance(data, Mapping) else None
        try:
            if isinstance(center, Mapping):
                z = float(center.get("z", 0.0) or 0.0)
            elif isinstance(center, Sequence) and not isinstance(center, str) and len(center) > 2:
                z = float(center[2])
            else:
                z = 0.0
        except (TypeError, ValueError) as e:
            raise InvalidRoomData(f"malformed center elevation {center!r}", room_id) from e
        if not math.isfinite(z):
            raise InvalidRoomData(f"non-finite center elevation {z}", room_id)
        return z


def normalize_rooms(rooms: Sequence[Any], adapter: Optional[RoomAdapter] = None):
    """
    Normalize a list of room descriptions, skipping invalid ones.

    Returns:
        Tuple of (rooms, errors) where errors is a list of InvalidRoomData
    """
    adapter = adapter or RoomAdapter()
    normalized = []
    errors = []
    for i, raw in enumerate(rooms):
        try:
            normalized.append(adapter.normalize(raw, index=i))
        except InvalidRoomData as e:
            logger.warning("Skipping room: %s", e)
            errors.append(e)
    return normalized, errors

"""
Grid-based îlot placement.
Lays a regular grid over a room and places one zone per accepted grid cell.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

import shapely.geometry as sg

from . import scoring
from .catalog import ZoneCatalog
from .config import GenerationConfig
from .geometry import ROOM_MARGIN, Point3, polygon_shape, rect_around
from .rooms import Room
from .zones import PlacedZone

logger = logging.getLogger(__name__)

# Constants
MIN_ROOM_AREA = 15.0  # m²
MIN_ROOM_DIMENSION = 3.0  # meters, both width and height
CIRCULATION_FACTOR = 0.3  # floor share kept free for circulation
STRUCTURAL_FACTOR = 0.1  # floor share lost to columns, walls, etc.


@dataclass(frozen=True)
class GridLayout:
    cols: int
    rows: int
    max_zones: int
    spacing: float


class GridPlacer:
    """Computes candidate zone positions for a room before validation."""

    def __init__(self, catalog: ZoneCatalog, config: GenerationConfig):
        self.catalog = catalog
        self.config = config

    def is_suitable(self, room: Room) -> bool:
        """
        Check whether zone placement should be attempted in a room.

        A room qualifies when its type is whitelisted, its area is at least
        15 m² and both sides are at least 3 m.
        """
        if room.type not in self.config.room_types:
            logger.debug("Room %s not suitable: type %s", room.id, room.type)
            return False

        if room.area < MIN_ROOM_AREA:
            logger.debug("Room %s not suitable: area %.2f < %.0f m²", room.id, room.area, MIN_ROOM_AREA)
            return False

        if room.width < MIN_ROOM_DIMENSION or room.height < MIN_ROOM_DIMENSION:
            logger.debug(
                "Room %s not suitable: dimensions %.2fx%.2f < %.1f",
                room.id, room.width, room.height, MIN_ROOM_DIMENSION,
            )
            return False

        return True

    def determine_type_sequence(self, room: Room) -> List[str]:
        """
        Zone type names to cycle through when filling a room's grid.

        Config overrides take precedence over the catalog's table; names the
        catalog doesn't know are dropped.
        """
        sequence = self.config.type_sequences.get(room.type)
        if sequence is None:
            sequence = self.catalog.room_type_sequences.get(room.type)
        if sequence is None:
            sequence = self.catalog.default_sequence

        known = [name for name in sequence if name in self.catalog]
        if len(known) < len(sequence):
            unknown = [name for name in sequence if name not in self.catalog]
            logger.warning("Ignoring unknown zone types for room %s: %s", room.id, unknown)

        return known or [n for n in self.catalog.default_sequence if n in self.catalog]

    @staticmethod
    def usable_area(room: Room) -> float:
        return room.area * (1.0 - CIRCULATION_FACTOR - STRUCTURAL_FACTOR)

    def compute_grid(self, room: Room, type_sequence: List[str]) -> GridLayout:
        """
        Compute grid dimensions for a room.

        Args:
            room: Room to fill
            type_sequence: Zone type names used in the room

        Returns:
            GridLayout with cols/rows clamped to at least 1
        """
        spacing = self.config.min_distance
        avg_zone_area = self.catalog.average_area(type_sequence)
        max_zones = math.floor(self.usable_area(room) / avg_zone_area) if avg_zone_area > 0 else 0

        aspect_ratio = room.width / room.height
        cols = math.ceil(math.sqrt(max_zones * aspect_ratio)) if max_zones > 0 else 1
        rows = math.ceil(max_zones / cols) if max_zones > 0 else 1

        # Every cell must still hold the smallest zone plus the spacing
        min_width, min_height = self.catalog.min_footprint(type_sequence)
        max_cols = math.floor((room.width - spacing) / (min_width + spacing))
        max_rows = math.floor((room.height - spacing) / (min_height + spacing))

        cols = max(1, min(cols, max_cols))
        rows = max(1, min(rows, max_rows))

        return GridLayout(
            cols=cols,
            rows=rows,
            max_zones=min(max_zones, cols * rows),
            spacing=spacing,
        )

    @staticmethod
    def cell_center(room: Room, grid: GridLayout, row: int, col: int) -> Point3:
        """Center of a grid cell, offset by half the spacing from the room edge."""
        cell_width = (room.width - grid.spacing) / grid.cols
        cell_height = (room.height - grid.spacing) / grid.rows

        x = room.bbox.min_x + grid.spacing / 2.0 + cell_width * (col + 0.5)
        y = room.bbox.min_y + grid.spacing / 2.0 + cell_height * (row + 0.5)
        return Point3(x, y, room.center.z)

    def is_valid_position(
        self,
        position: Point3,
        room: Room,
        type_name: str,
        room_shape: Optional[sg.Polygon] = None,
    ) -> bool:
        """
        Check that a zone centered at `position` fits in the room.

        The zone rectangle must stay inside the room bbox shrunk by the wall
        margin and, with exact polygon checking, have all 4 corners inside the
        room polygon.
        """
        profile = self.catalog.get(type_name)
        rect = rect_around(position.x, position.y, profile.width, profile.height)

        if not room.bbox.shrink(ROOM_MARGIN).contains_box(rect):
            return False

        if self.config.exact_polygon_check:
            shape = room_shape if room_shape is not None else polygon_shape(room.polygon)
            for corner in rect.corners():
                if not shape.covers(sg.Point(corner[0], corner[1])):
                    return False

        return True

    def place(self, room: Room) -> List[PlacedZone]:
        """
        Place zones on the room grid.

        Cells whose zone would not fit are skipped, not backfilled, so the
        result can hold fewer than grid.max_zones zones.
        """
        type_sequence = self.determine_type_sequence(room)
        if not type_sequence:
            return []

        grid = self.compute_grid(room, type_sequence)
        room_shape = polygon_shape(room.polygon)
        zones = []

        for row in range(grid.rows):
            for col in range(grid.cols):
                index = row * grid.cols + col
                if index >= grid.max_zones:
                    break

                type_name = type_sequence[index % len(type_sequence)]
                position = self.cell_center(room, grid, row, col)

                if not self.is_valid_position(position, room, type_name, room_shape):
                    logger.debug("Room %s: cell (%d, %d) rejected for %s", room.id, row, col, type_name)
                    continue

                zones.append(self._create_zone(room, type_name, position, index))

        logger.debug("Placed %d zones in room %s (grid %dx%d)", len(zones), room.id, grid.cols, grid.rows)
        return zones

    def _create_zone(self, room: Room, type_name: str, position: Point3, index: int) -> PlacedZone:
        profile = self.catalog.get(type_name)
        return PlacedZone(
            id=f"{room.id}_{type_name}_{index}",
            room_id=room.id,
            type_name=type_name,
            position=position,
            width=profile.width,
            height=profile.height,
            capacity=profile.capacity,
            priority=profile.priority,
            color=profile.color,
            equipment=profile.equipment,
            accessibility=scoring.assess_accessibility(position, room, self.config),
            efficiency_score=scoring.efficiency_score(position, room),
        )

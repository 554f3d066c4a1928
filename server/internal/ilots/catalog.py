"""
Zone type catalog.
Loads the zone-type profiles (size, capacity, priority, equipment, color) and the
default room-type sequences from server/config/zone-types.json.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

# __file__ = server/internal/ilots/catalog.py
# config lives at server/config/zone-types.json
_DEFAULT_PATH = Path(__file__).resolve().parents[2] / "config" / "zone-types.json"


class CatalogError(ValueError):
    """Raised when the zone-type catalog file is malformed."""


class UnknownZoneType(KeyError):
    """Raised when a zone type name is not in the catalog."""


@dataclass(frozen=True)
class ZoneTypeProfile:
    """Immutable catalog entry for one zone type (sizes in meters)."""

    name: str
    width: float
    height: float
    capacity: int
    priority: float
    color: str
    equipment: Tuple[str, ...] = ()

    @property
    def area(self) -> float:
        return self.width * self.height

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "base_size": {"width": self.width, "height": self.height},
            "capacity": self.capacity,
            "priority": self.priority,
            "color": self.color,
            "equipment": list(self.equipment),
        }


class ZoneCatalog:
    """
    Read-only registry of zone type profiles.

    Built once (normally through load_catalog) and passed explicitly to the
    placer, optimizer and pipeline.
    """

    def __init__(
        self,
        profiles: Iterable[ZoneTypeProfile],
        room_type_sequences: Optional[Mapping[str, Iterable[str]]] = None,
        default_sequence: Iterable[str] = ("work", "meeting"),
    ):
        self._profiles = MappingProxyType({p.name: p for p in profiles})
        self._sequences = MappingProxyType(
            {k: tuple(v) for k, v in (room_type_sequences or {}).items()}
        )
        self._default_sequence = tuple(default_sequence)

    def __contains__(self, name: object) -> bool:
        return name in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)

    def get(self, name: str) -> ZoneTypeProfile:
        try:
            return self._profiles[name]
        except KeyError:
            raise UnknownZoneType(name) from None

    def names(self) -> List[str]:
        return list(self._profiles)

    def profiles(self) -> List[ZoneTypeProfile]:
        return list(self._profiles.values())

    @property
    def room_type_sequences(self) -> Mapping[str, Tuple[str, ...]]:
        return self._sequences

    @property
    def default_sequence(self) -> Tuple[str, ...]:
        return self._default_sequence

    def average_area(self, names: Iterable[str]) -> float:
        """Mean footprint area of the named profiles."""
        areas = [self.get(n).area for n in names]
        if not areas:
            return 0.0
        return sum(areas) / len(areas)

    def min_footprint(self, names: Iterable[str]) -> Tuple[float, float]:
        """Smallest width and smallest height among the named profiles."""
        profiles = [self.get(n) for n in names]
        return (
            min(p.width for p in profiles),
            min(p.height for p in profiles),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "zone_types": {n: p.to_dict() for n, p in self._profiles.items()},
            "room_type_sequences": {k: list(v) for k, v in self._sequences.items()},
            "default_sequence": list(self._default_sequence),
        }


def _parse_profile(name: str, raw: Dict[str, Any]) -> ZoneTypeProfile:
    size = raw.get("base_size")
    if not isinstance(size, dict):
        raise CatalogError(f"Zone type {name!r} has no base_size")

    try:
        width = float(size["width"])
        height = float(size["height"])
        capacity = int(raw["capacity"])
    except (KeyError, TypeError, ValueError) as e:
        raise CatalogError(f"Zone type {name!r} is malformed: {e}") from e

    if width <= 0 or height <= 0:
        raise CatalogError(f"Zone type {name!r} must have a positive base_size")
    if capacity <= 0:
        raise CatalogError(f"Zone type {name!r} must have a positive capacity")

    return ZoneTypeProfile(
        name=name,
        width=width,
        height=height,
        capacity=capacity,
        priority=float(raw.get("priority", 1.0)),
        color=str(raw.get("color", "#808080")),
        equipment=tuple(raw.get("equipment", [])),
    )


def catalog_from_dict(data: Dict[str, Any]) -> ZoneCatalog:
    """Build a catalog from the decoded zone-types.json structure."""
    zone_types = data.get("zone_types")
    if not isinstance(zone_types, dict) or not zone_types:
        raise CatalogError("Catalog must define at least one zone type")

    profiles = [_parse_profile(name, raw) for name, raw in zone_types.items()]
    sequences = data.get("room_type_sequences", {})

    for room_type, names in sequences.items():
        missing = [n for n in names if n not in zone_types]
        if missing:
            raise CatalogError(
                f"Sequence for room type {room_type!r} references unknown zone types: {missing}"
            )

    default_sequence = data.get("default_sequence", ["work", "meeting"])
    return ZoneCatalog(profiles, sequences, default_sequence)


def catalog_path() -> Path:
    override = os.getenv("ILOTS_ZONE_TYPES_PATH")
    return Path(override) if override else _DEFAULT_PATH


def load_catalog(path: Optional[Path] = None) -> ZoneCatalog:
    """
    Load the zone type catalog from JSON.

    Args:
        path: Catalog file (defaults to server/config/zone-types.json, or the
            ILOTS_ZONE_TYPES_PATH environment variable)

    Raises:
        FileNotFoundError: If the file doesn't exist
        CatalogError: If an entry is malformed
    """
    path = Path(path) if path is not None else catalog_path()
    if not path.exists():
        raise FileNotFoundError(f"Zone type catalog not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)

    return catalog_from_dict(data)

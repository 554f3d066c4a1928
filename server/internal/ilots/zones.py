"""
Placed zone (îlot) records produced by the placement pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from .geometry import BBox, Point3, rect_around


@dataclass(frozen=True)
class Accessibility:
    wheelchair_accessible: bool
    proximity_score: float
    rating: str  # excellent | good | fair
    path_clearance: str = "adequate"  # adequate | restricted
    distance_to_entrance: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wheelchair_accessible": self.wheelchair_accessible,
            "proximity_score": self.proximity_score,
            "rating": self.rating,
            "path_clearance": self.path_clearance,
            "distance_to_entrance": self.distance_to_entrance,
        }


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    score: float
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()
    checks: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def pending(cls) -> "ValidationResult":
        return cls(is_valid=True, score=1.0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "score": self.score,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "checks": dict(self.checks),
        }


@dataclass(frozen=True)
class PlacedZone:
    """
    One îlot placed inside a room.

    Records are replaced, never mutated: the optimizer returns new instances
    (dataclasses.replace) when it nudges a position or re-scores a zone.
    """

    id: str
    room_id: str
    type_name: str
    position: Point3
    width: float
    height: float
    capacity: int
    priority: float
    color: str
    equipment: Tuple[str, ...]
    accessibility: Accessibility
    efficiency_score: float
    validation: ValidationResult = field(default_factory=ValidationResult.pending)
    comfort_score: Optional[float] = None
    overall_score: Optional[float] = None

    @property
    def bbox(self) -> BBox:
        return rect_around(self.position.x, self.position.y, self.width, self.height)

    @property
    def polygon(self) -> List[List[float]]:
        return self.bbox.corners()

    @property
    def compliance_score(self) -> float:
        """Validation score for compliant zones, 0 for non-compliant ones."""
        return self.validation.score if self.validation.is_valid else 0.0

    def moved_to(self, x: float, y: float) -> "PlacedZone":
        return replace(self, position=Point3(x, y, self.position.z))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "room_id": self.room_id,
            "type": self.type_name,
            "position": self.position.to_dict(),
            "dimensions": {"width": self.width, "height": self.height},
            "polygon": self.polygon,
            "bbox": self.bbox.to_dict(),
            "capacity": self.capacity,
            "equipment": list(self.equipment),
            "properties": {
                "color": self.color,
                "priority": self.priority,
                "is_valid": self.validation.is_valid,
                "compliance_score": self.compliance_score,
            },
            "accessibility": self.accessibility.to_dict(),
            "efficiency_score": self.efficiency_score,
            "comfort_score": self.comfort_score,
            "overall_score": self.overall_score,
            "validation": self.validation.to_dict(),
        }

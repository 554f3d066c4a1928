"""
Architectural compliance checks for placed zones.

Each check multiplies a running score that starts at 1.0:
- clearance (error, x0.7)
- accessibility (warning only, x0.9)
- emergency egress (error, x0.5)
Non-compliant zones are kept and flagged, never dropped.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional

from . import scoring
from .config import GenerationConfig
from .geometry import ROOM_MARGIN, distance
from .rooms import Room
from .zones import PlacedZone, ValidationResult

logger = logging.getLogger(__name__)

CLEARANCE_PENALTY = 0.7
ACCESSIBILITY_PENALTY = 0.9
EGRESS_PENALTY = 0.5

# Clearance credited to a zone that keeps the wall margin
CLEARANCE_ALLOWANCE = 0.2


class ComplianceValidator:
    """Annotates zones with a ValidationResult."""

    def __init__(self, config: GenerationConfig):
        self.config = config

    def actual_clearance(self, zone: PlacedZone, room: Optional[Room] = None) -> float:
        """
        Clearance available around a zone.

        A zone that keeps the wall margin gets the required clearance plus a
        fixed allowance; otherwise its clearance is the measured wall gap.
        """
        required = self.config.architectural.min_clearance
        if room is None:
            return required + CLEARANCE_ALLOWANCE

        wall_gap = room.bbox.gap_to(zone.bbox)
        if wall_gap >= ROOM_MARGIN - 1e-9:
            return required + CLEARANCE_ALLOWANCE
        return max(0.0, wall_gap)

    def distance_to_nearest_exit(self, zone: PlacedZone, room: Optional[Room] = None) -> float:
        if room is None:
            return zone.accessibility.distance_to_entrance
        return min(distance(zone.position, exit_) for exit_ in scoring.exit_points(room))

    def check_clearance(self, zone: PlacedZone, room: Optional[Room] = None) -> Dict[str, Any]:
        required = self.config.architectural.min_clearance
        actual = self.actual_clearance(zone, room)
        return {"is_valid": actual >= required, "required": required, "actual": actual}

    @staticmethod
    def check_accessibility(zone: PlacedZone) -> Dict[str, Any]:
        issues = []
        if not zone.accessibility.wheelchair_accessible:
            issues.append("Not wheelchair accessible")
        if zone.accessibility.path_clearance != "adequate":
            issues.append("Inadequate path clearance")
        return {"is_valid": not issues, "issues": issues}

    def check_egress(self, zone: PlacedZone, room: Optional[Room] = None) -> Dict[str, Any]:
        max_allowed = self.config.architectural.emergency_egress_max
        actual = self.distance_to_nearest_exit(zone, room)
        return {"is_valid": actual <= max_allowed, "distance": actual, "max_allowed": max_allowed}

    def validate(self, zone: PlacedZone, room: Optional[Room] = None) -> ValidationResult:
        """
        Run the clearance, accessibility and egress checks on one zone.

        Args:
            zone: Zone to check
            room: Room the zone was placed in (enables the wall-gap and
                exit-distance measurements)

        Returns:
            ValidationResult; is_valid is True exactly when there are no errors
        """
        errors: List[str] = []
        warnings: List[str] = []
        score = 1.0

        clearance = self.check_clearance(zone, room)
        if not clearance["is_valid"]:
            errors.append(
                f"Insufficient clearance: {clearance['actual']:.2f}m < {clearance['required']}m required"
            )
            score *= CLEARANCE_PENALTY

        accessibility = self.check_accessibility(zone)
        if not accessibility["is_valid"]:
            warnings.append(f"Accessibility concerns: {', '.join(accessibility['issues'])}")
            score *= ACCESSIBILITY_PENALTY

        egress = self.check_egress(zone, room)
        if not egress["is_valid"]:
            errors.append(
                f"Emergency egress too far: {egress['distance']:.2f}m > {egress['max_allowed']}m allowed"
            )
            score *= EGRESS_PENALTY

        return ValidationResult(
            is_valid=not errors,
            score=score,
            errors=tuple(errors),
            warnings=tuple(warnings),
            checks={"clearance": clearance, "accessibility": accessibility, "egress": egress},
        )

    def validate_all(self, zones: List[PlacedZone], room: Optional[Room] = None) -> List[PlacedZone]:
        validated = [replace(z, validation=self.validate(z, room)) for z in zones]
        valid_count = sum(1 for z in validated if z.validation.is_valid)
        logger.debug("Compliance: %d/%d zones compliant", valid_count, len(validated))
        return validated

"""
End-to-end îlot generation for a floor.

Sequence: filter suitable rooms -> place zones per room -> validate each
zone -> optimize across all rooms -> synthesize corridors -> statistics.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from . import seeds
from .catalog import ZoneCatalog, load_catalog
from .compliance import ComplianceValidator
from .config import GenerationConfig, merge_config
from .corridors import CorridorSegment, CorridorSynthesizer, network_statistics
from .geometry import BBox
from .grid import GridPlacer
from .optimizer import PlacementOptimizer
from .rooms import RoomAdapter, normalize_rooms
from .zones import PlacedZone

logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_NO_SUITABLE_ROOMS = "no_suitable_rooms"
STATUS_NO_ZONES = "no_zones"


@dataclass
class GenerationResult:
    zones: List[PlacedZone] = field(default_factory=list)
    corridors: List[CorridorSegment] = field(default_factory=list)
    statistics: Dict[str, Any] = field(default_factory=dict)
    status: str = STATUS_OK
    message: str = ""

    @property
    def success(self) -> bool:
        return self.status == STATUS_OK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "status": self.status,
            "message": self.message,
            "zones": [z.to_dict() for z in self.zones],
            "corridors": [c.to_dict() for c in self.corridors],
            "statistics": self.statistics,
        }


class GenerationPipeline:
    """
    Orchestrates placement, validation, optimization and corridor synthesis.

    One instance per concurrent run; the only shared value is the read-only
    catalog.
    """

    def __init__(self, catalog: Optional[ZoneCatalog] = None, adapter: Optional[RoomAdapter] = None):
        self.catalog = catalog if catalog is not None else load_catalog()
        self.adapter = adapter or RoomAdapter()

    def generate(self, rooms: Sequence[Any], config: Any = None) -> GenerationResult:
        """
        Generate zones and corridors for a floor.

        Args:
            rooms: Room descriptions (mappings) or Room values
            config: GenerationConfig or a partial override mapping

        Returns:
            GenerationResult; an empty result with a status instead of an
            exception when no room is suitable or no zone survives
        """
        started = time.perf_counter()
        config = merge_config(config)

        normalized, invalid = normalize_rooms(rooms, self.adapter)
        placer = GridPlacer(self.catalog, config)
        suitable = [room for room in normalized if placer.is_suitable(room)]
        room_stats = {
            "supplied": len(rooms),
            "invalid": len(invalid),
            "suitable": len(suitable),
            "with_zones": 0,
        }

        if not suitable:
            logger.info("No suitable rooms among %d supplied", len(rooms))
            return self._empty(
                STATUS_NO_SUITABLE_ROOMS,
                f"None of the {len(rooms)} supplied rooms is suitable for îlots",
                config, room_stats, started,
            )

        # Per-room placement and validation; rooms are independent of each other
        validator = ComplianceValidator(config)
        zones: List[PlacedZone] = []
        for room in suitable:
            room_zones = validator.validate_all(placer.place(room), room)
            if room_zones:
                room_stats["with_zones"] += 1
            zones.extend(room_zones)

        optimizer = PlacementOptimizer(
            self.catalog,
            config,
            rng=seeds.seeded_random(seeds.get_run_seed(config.seed, config.optimization_objective)),
            room_bounds={room.id: room.bbox for room in suitable},
        )
        optimized = optimizer.optimize(zones, config.optimization_objective)
        optimization_stats = {
            "objective": config.optimization_objective,
            "input_count": len(zones),
            "output_count": len(optimized),
            "removed": len(zones) - len(optimized),
            "improvement": optimizer.improvement(zones, optimized),
        }

        if not optimized:
            logger.info("No zones generated for %d suitable rooms", len(suitable))
            result = self._empty(
                STATUS_NO_ZONES,
                "Suitable rooms were found but no zone could be placed",
                config, room_stats, started,
            )
            result.statistics["optimization"] = optimization_stats
            return result

        floor_bounds = BBox.union(room.bbox for room in suitable)
        synthesizer = CorridorSynthesizer(config.corridor_topology)
        corridors = synthesizer.synthesize(
            optimized, floor_bounds, config.architectural.corridor_width
        )

        statistics = compute_statistics(optimized, corridors, config)
        statistics["rooms"] = room_stats
        statistics["optimization"] = optimization_stats
        statistics["generation"]["elapsed_ms"] = (time.perf_counter() - started) * 1000.0

        valid = statistics["generation"]["valid"]
        logger.info(
            "Generated %d îlots (%d compliant) and %d corridor segments in %d rooms",
            len(optimized), valid, len(corridors), room_stats["with_zones"],
        )
        return GenerationResult(
            zones=optimized,
            corridors=corridors,
            statistics=statistics,
            status=STATUS_OK,
            message=f"Generated {len(optimized)} îlots ({valid} compliant)",
        )

    def _empty(
        self,
        status: str,
        message: str,
        config: GenerationConfig,
        room_stats: Dict[str, int],
        started: float,
    ) -> GenerationResult:
        statistics = compute_statistics([], [], config)
        statistics["rooms"] = room_stats
        statistics["generation"]["elapsed_ms"] = (time.perf_counter() - started) * 1000.0
        return GenerationResult(statistics=statistics, status=status, message=message)


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def compute_statistics(
    zones: List[PlacedZone], corridors: List[CorridorSegment], config: GenerationConfig
) -> Dict[str, Any]:
    """Aggregate counts, type distribution, capacity and score averages."""
    total = len(zones)
    valid = sum(1 for z in zones if z.validation.is_valid)

    distribution: Dict[str, int] = {}
    capacity_by_type: Dict[str, int] = {}
    for zone in zones:
        distribution[zone.type_name] = distribution.get(zone.type_name, 0) + 1
        capacity_by_type[zone.type_name] = capacity_by_type.get(zone.type_name, 0) + zone.capacity

    total_capacity = sum(z.capacity for z in zones)

    return {
        "generation": {
            "total": total,
            "valid": valid,
            "invalid": total - valid,
            "validation_rate": valid / total if total else 0.0,
        },
        "distribution": distribution,
        "capacity": {
            "total": total_capacity,
            "average": total_capacity / total if total else 0.0,
            "by_type": capacity_by_type,
        },
        "compliance": {
            "architectural_score": _mean([z.compliance_score for z in zones]),
            "accessibility_score": _mean([z.accessibility.proximity_score for z in zones]),
            "efficiency_score": _mean([z.efficiency_score for z in zones]),
        },
        "corridors": network_statistics(corridors),
        "config": config.model_dump(),
    }

"""
Cross-room re-ranking of validated zones under one optimization objective.
"""

import logging
import random
from dataclasses import replace
from typing import Dict, List, Optional

from . import scoring
from .catalog import UnknownZoneType, ZoneCatalog
from .config import GenerationConfig
from .geometry import ROOM_MARGIN, BBox, distance
from .zones import PlacedZone

logger = logging.getLogger(__name__)

# Total jitter range per axis for the comfort pass (±0.15 m)
COMFORT_JITTER = 0.3


class PlacementOptimizer:
    """
    Reorders (and for density, filters) a zone set.

    Only the density objective can change which zones are kept; the others
    re-score and sort, and comfort also nudges positions slightly.
    """

    def __init__(
        self,
        catalog: ZoneCatalog,
        config: GenerationConfig,
        rng: Optional[random.Random] = None,
        room_bounds: Optional[Dict[str, BBox]] = None,
    ):
        self.catalog = catalog
        self.config = config
        self.rng = rng if rng is not None else random.Random(config.seed)
        # Jittered zones are clamped to their room's bbox minus the wall margin
        self.room_bounds = room_bounds or {}

    def optimize(self, zones: List[PlacedZone], objective: Optional[str] = None) -> List[PlacedZone]:
        objective = objective or self.config.optimization_objective
        if objective == "density":
            result = self.optimize_for_density(zones)
        elif objective == "comfort":
            result = self.optimize_for_comfort(zones)
        elif objective == "efficiency":
            result = self.optimize_for_efficiency(zones)
        else:
            result = self.optimize_balanced(zones)

        logger.debug("Optimization %s: %d -> %d zones", objective, len(zones), len(result))
        return result

    def optimize_for_density(self, zones: List[PlacedZone]) -> List[PlacedZone]:
        """
        Greedy accept/reject in input order.

        A zone is kept only if it is at least min_distance from every zone
        kept so far. The result depends on input order; it is not a maximum
        independent set.
        """
        kept: List[PlacedZone] = []
        for zone in zones:
            if all(distance(zone.position, k.position) >= self.config.min_distance for k in kept):
                kept.append(zone)
        return sorted(kept, key=lambda z: z.efficiency_score, reverse=True)

    def optimize_for_comfort(self, zones: List[PlacedZone]) -> List[PlacedZone]:
        result = []
        for zone in zones:
            moved = self._jitter(zone)
            comfort = scoring.comfort_score(moved.accessibility.proximity_score, moved.efficiency_score)
            result.append(replace(moved, comfort_score=comfort))
        return sorted(result, key=lambda z: z.comfort_score, reverse=True)

    def optimize_for_efficiency(self, zones: List[PlacedZone]) -> List[PlacedZone]:
        result = [replace(z, efficiency_score=self._enhanced_efficiency(z)) for z in zones]
        return sorted(result, key=lambda z: z.efficiency_score, reverse=True)

    def optimize_balanced(self, zones: List[PlacedZone]) -> List[PlacedZone]:
        result = []
        for zone in zones:
            comfort = scoring.comfort_score(zone.accessibility.proximity_score, zone.efficiency_score)
            overall = self.balanced_score(zone)
            result.append(replace(zone, comfort_score=comfort, overall_score=overall))
        return sorted(result, key=lambda z: z.overall_score, reverse=True)

    def balanced_score(self, zone: PlacedZone) -> float:
        comfort = scoring.comfort_score(zone.accessibility.proximity_score, zone.efficiency_score)
        return scoring.overall_score(self._enhanced_efficiency(zone), comfort, zone.compliance_score)

    def improvement(self, before: List[PlacedZone], after: List[PlacedZone]) -> float:
        """
        Mean balanced score of the optimized set minus that of the input set.

        Both sets are scored from the input records, so passes that rewrite
        scores (efficiency) are not counted twice. 0.0 when either set is empty.
        """
        if not before or not after:
            return 0.0
        originals = {z.id: z for z in before}
        scored_after = [self.balanced_score(originals.get(z.id, z)) for z in after]
        scored_before = [self.balanced_score(z) for z in before]
        return sum(scored_after) / len(scored_after) - sum(scored_before) / len(scored_before)

    def _enhanced_efficiency(self, zone: PlacedZone) -> float:
        try:
            priority = self.catalog.get(zone.type_name).priority
        except UnknownZoneType:
            priority = zone.priority
        return scoring.enhanced_efficiency(zone.efficiency_score, priority, zone.accessibility.rating)

    def _jitter(self, zone: PlacedZone) -> PlacedZone:
        half = COMFORT_JITTER / 2.0
        x = zone.position.x + self.rng.uniform(-half, half)
        y = zone.position.y + self.rng.uniform(-half, half)

        bounds = self.room_bounds.get(zone.room_id)
        if bounds is not None:
            inner = bounds.shrink(ROOM_MARGIN)
            half_w = zone.width / 2.0
            half_h = zone.height / 2.0
            # Never move a zone further out than it already was
            x = min(max(x, min(inner.min_x + half_w, zone.position.x)), max(inner.max_x - half_w, zone.position.x))
            y = min(max(y, min(inner.min_y + half_h, zone.position.y)), max(inner.max_y - half_h, zone.position.y))

        return zone.moved_to(x, y)

"""
Position scoring shared by the grid placer and the optimizer.

Efficiency is the mean of three proxies:
- position: closeness to the room center
- lighting: distance from the nearest wall axis, as a daylight proxy
- ventilation: a fixed constant, not an airflow model
"""

from .config import GenerationConfig
from .geometry import Point3, distance
from .rooms import Room
from .zones import Accessibility

VENTILATION_SCORE = 0.8
LIGHTING_FULL_DISTANCE = 3.0  # meters from the wall for a full lighting score

WHEELCHAIR_MAX_DISTANCE = 20.0
PROXIMITY_RANGE = 30.0
EXCELLENT_DISTANCE = 10.0
GOOD_DISTANCE = 20.0


def entrance_point(room: Room) -> Point3:
    """Reference entrance on the room's left-center edge."""
    return Point3(room.center.x - room.width / 2.0, room.center.y, room.center.z)


def exit_points(room: Room):
    """Assumed emergency exits: left-center and right-center edges."""
    return [
        entrance_point(room),
        Point3(room.center.x + room.width / 2.0, room.center.y, room.center.z),
    ]


def lighting_score(position: Point3, room: Room) -> float:
    distance_from_wall = min(
        abs(position.x - (room.center.x - room.width / 2.0)),
        abs(position.x - (room.center.x + room.width / 2.0)),
        abs(position.y - (room.center.y - room.height / 2.0)),
        abs(position.y - (room.center.y + room.height / 2.0)),
    )
    return min(1.0, distance_from_wall / LIGHTING_FULL_DISTANCE)


def efficiency_score(position: Point3, room: Room) -> float:
    room_radius = max(room.width, room.height) / 2.0
    center_distance = distance(position, room.center)
    position_score = max(0.0, 1.0 - center_distance / room_radius)
    return (position_score + lighting_score(position, room) + VENTILATION_SCORE) / 3.0


def assess_accessibility(position: Point3, room: Room, config: GenerationConfig) -> Accessibility:
    distance_to_entrance = distance(position, entrance_point(room))

    if distance_to_entrance < EXCELLENT_DISTANCE:
        rating = "excellent"
    elif distance_to_entrance < GOOD_DISTANCE:
        rating = "good"
    else:
        rating = "fair"

    # Aisles between zones are min_distance wide; they must fit a wheelchair turn
    if config.min_distance >= config.architectural.accessibility_zone:
        path_clearance = "adequate"
    else:
        path_clearance = "restricted"

    return Accessibility(
        wheelchair_accessible=distance_to_entrance < WHEELCHAIR_MAX_DISTANCE,
        proximity_score=max(0.0, 1.0 - distance_to_entrance / PROXIMITY_RANGE),
        rating=rating,
        path_clearance=path_clearance,
        distance_to_entrance=distance_to_entrance,
    )


def comfort_score(proximity: float, efficiency: float) -> float:
    return 0.4 * proximity + 0.6 * efficiency


def enhanced_efficiency(efficiency: float, priority: float, rating: str) -> float:
    """Base efficiency weighted by zone priority, with a bonus for excellent access."""
    bonus = 0.1 if rating == "excellent" else 0.0
    return min(1.0, efficiency * priority + bonus)


def overall_score(efficiency: float, comfort: float, compliance: float) -> float:
    return 0.4 * efficiency + 0.3 * comfort + 0.3 * compliance

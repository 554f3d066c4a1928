"""
Pytest configuration and fixtures for the îlots engine tests.
"""

import sys
from pathlib import Path

# Add server directory to path
server_dir = Path(__file__).parent.parent.parent.parent
sys.path.insert(0, str(server_dir))

import pytest

from internal.ilots.catalog import load_catalog
from internal.ilots.config import DEFAULT_CONFIG
from internal.ilots.geometry import Point3
from internal.ilots.rooms import RoomAdapter
from internal.ilots.scoring import assess_accessibility, efficiency_score


@pytest.fixture(scope="session")
def catalog():
    """Zone type catalog loaded from server/config/zone-types.json."""
    return load_catalog()


@pytest.fixture
def config():
    return DEFAULT_CONFIG


@pytest.fixture
def adapter():
    return RoomAdapter()


@pytest.fixture
def general_space_data():
    """20m x 15m general space (the default fallback room)."""
    return {
        "id": "room_a",
        "type": "general_space",
        "center": {"x": 10.0, "y": 7.5, "z": 0.0},
        "width": 20.0,
        "height": 15.0,
        "area": 300.0,
        "bbox": {"min_x": 0.0, "min_y": 0.0, "max_x": 20.0, "max_y": 15.0},
    }


@pytest.fixture
def general_space(adapter, general_space_data):
    return adapter.normalize(general_space_data)


@pytest.fixture
def long_open_office(adapter):
    """80m x 10m open office; its middle is more than 30m from either exit."""
    return adapter.normalize(
        {
            "id": "hall",
            "type": "open_office",
            "bbox": {"min_x": 0.0, "min_y": 0.0, "max_x": 80.0, "max_y": 10.0},
        }
    )


@pytest.fixture
def l_shaped_room(adapter):
    """L-shaped room: 20m x 16m bbox with the upper-right 12m x 8m cut out."""
    return adapter.normalize(
        {
            "id": "l_room",
            "type": "general_space",
            "polygon": [[0, 0], [20, 0], [20, 8], [8, 8], [8, 16], [0, 16]],
        }
    )


@pytest.fixture
def make_zone(catalog, general_space, config):
    """Factory for zones placed at arbitrary positions in the general space."""
    from internal.ilots.zones import PlacedZone

    def _make(zone_id, x, y, type_name="work", room=None):
        room = room or general_space
        profile = catalog.get(type_name)
        position = Point3(x, y, 0.0)
        return PlacedZone(
            id=zone_id,
            room_id=room.id,
            type_name=type_name,
            position=position,
            width=profile.width,
            height=profile.height,
            capacity=profile.capacity,
            priority=profile.priority,
            color=profile.color,
            equipment=profile.equipment,
            accessibility=assess_accessibility(position, room, config),
            efficiency_score=efficiency_score(position, room),
        )

    return _make

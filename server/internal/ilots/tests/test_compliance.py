"""
Tests for architectural compliance validation.
"""

import sys
from pathlib import Path

# Add server directory to path
server_dir = Path(__file__).parent.parent.parent.parent
sys.path.insert(0, str(server_dir))

from dataclasses import replace

import pytest

from internal.ilots import config as ilots_config
from internal.ilots.compliance import ComplianceValidator
from internal.ilots.grid import GridPlacer


def test_well_placed_zone_is_compliant(make_zone, general_space, config):
    """Test a zone in the middle of a small room passes every check"""
    zone = make_zone("z", 10.0, 7.5)
    result = ComplianceValidator(config).validate(zone, general_space)

    assert result.is_valid
    assert result.score == 1.0
    assert result.errors == ()
    assert result.warnings == ()
    assert result.checks["clearance"]["actual"] == pytest.approx(1.4)
    assert result.checks["egress"]["distance"] == pytest.approx(10.0)


def test_zone_against_the_wall_fails_clearance(make_zone, general_space, config):
    """Test a zone inside the wall margin gets a clearance error"""
    # work is 3m wide: left edge at 0.2m from the wall
    zone = make_zone("z", 1.7, 7.5)
    result = ComplianceValidator(config).validate(zone, general_space)

    assert not result.is_valid
    assert result.score == pytest.approx(0.7)
    assert len(result.errors) == 1
    assert "clearance" in result.errors[0]


def test_accessibility_is_only_a_warning(make_zone, general_space, config):
    """Test accessibility problems lower the score without invalidating"""
    zone = make_zone("z", 10.0, 7.5)
    zone = replace(
        zone, accessibility=replace(zone.accessibility, wheelchair_accessible=False)
    )
    result = ComplianceValidator(config).validate(zone, general_space)

    assert result.is_valid
    assert result.score == pytest.approx(0.9)
    assert len(result.warnings) == 1
    assert "wheelchair" in result.warnings[0]


def test_restricted_path_clearance_warns(catalog, general_space):
    """Test narrow aisles (min_distance below the accessibility zone) warn"""
    cfg = ilots_config.merge_config({"min_distance": 1.0})
    zones = GridPlacer(catalog, cfg).place(general_space)
    assert zones
    assert all(z.accessibility.path_clearance == "restricted" for z in zones)

    result = ComplianceValidator(cfg).validate(zones[0], general_space)
    assert result.is_valid
    assert any("path clearance" in w for w in result.warnings)


def test_far_zones_fail_egress(catalog, long_open_office, config):
    """Test zones more than 30m from both exits are invalid"""
    placer = GridPlacer(catalog, config)
    validated = ComplianceValidator(config).validate_all(placer.place(long_open_office), long_open_office)

    invalid = [z for z in validated if not z.validation.is_valid]
    valid = [z for z in validated if z.validation.is_valid]
    assert invalid
    assert valid
    for zone in invalid:
        assert any("egress" in e.lower() for e in zone.validation.errors)
        assert zone.validation.score <= 0.5
        assert zone.compliance_score == 0.0


def test_validity_matches_errors(catalog, long_open_office, general_space, config):
    """Test is_valid is exactly 'no errors' for every zone"""
    placer = GridPlacer(catalog, config)
    validator = ComplianceValidator(config)
    for room in (long_open_office, general_space):
        for zone in validator.validate_all(placer.place(room), room):
            assert zone.validation.is_valid == (len(zone.validation.errors) == 0)
            assert 0.0 <= zone.validation.score <= 1.0


def test_validate_without_room_uses_estimates(make_zone, config):
    """Test validation still works when the room is unknown"""
    zone = make_zone("z", 10.0, 7.5)
    result = ComplianceValidator(config).validate(zone)
    assert result.is_valid
    assert result.checks["clearance"]["actual"] == pytest.approx(1.4)

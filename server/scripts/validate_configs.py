#!/usr/bin/env python3
"""
Validate zone-types.json
"""
import json
import sys
from pathlib import Path

# Expected structure
EXPECTED_ZONE_TYPES = ['work', 'meeting', 'social', 'break', 'focus', 'collaboration']
EXPECTED_ROOM_TYPES = ['office', 'meeting_room', 'general_space', 'workspace', 'open_office']
REQUIRED_KEYS = ['base_size', 'capacity', 'priority', 'color', 'equipment']


def validate_zone_types(config_path=None):
    """Validate zone-types.json"""
    print("Validating zone-types.json...")
    config_path = config_path or Path(__file__).parent.parent / 'config' / 'zone-types.json'

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        print(f"✗ Invalid JSON: {e}")
        return False
    except FileNotFoundError:
        print(f"✗ File not found: {config_path}")
        return False

    zone_types = data.get('zone_types')
    if not isinstance(zone_types, dict):
        print("✗ Missing top-level 'zone_types' key")
        return False

    missing_types = [t for t in EXPECTED_ZONE_TYPES if t not in zone_types]
    if missing_types:
        print(f"✗ Missing zone types: {missing_types}")
        return False
    print(f"✓ All {len(EXPECTED_ZONE_TYPES)} zone types present")

    missing_keys = {}
    invalid_entries = {}
    for name, entry in zone_types.items():
        for key in REQUIRED_KEYS:
            if key not in entry:
                missing_keys.setdefault(name, []).append(key)
        size = entry.get('base_size', {})
        if not isinstance(size, dict) or size.get('width', 0) <= 0 or size.get('height', 0) <= 0:
            invalid_entries.setdefault(name, []).append('base_size must have positive width/height')
        if not isinstance(entry.get('capacity'), int) or entry['capacity'] <= 0:
            invalid_entries.setdefault(name, []).append('capacity must be a positive integer')
        priority = entry.get('priority')
        if not isinstance(priority, (int, float)) or not 0 < priority <= 1:
            invalid_entries.setdefault(name, []).append('priority must be in (0, 1]')
        color = entry.get('color')
        if not isinstance(color, str) or not color.startswith('#'):
            invalid_entries.setdefault(name, []).append('invalid hex format')

    if missing_keys:
        print(f"✗ Missing keys: {missing_keys}")
        return False

    if invalid_entries:
        print(f"✗ Invalid zone types: {invalid_entries}")
        return False
    print("✓ All zone type profiles valid")

    sequences = data.get('room_type_sequences', {})
    missing_rooms = [r for r in EXPECTED_ROOM_TYPES if r not in sequences]
    if missing_rooms:
        print(f"⚠ No sequence for room types: {missing_rooms}")
    else:
        print(f"✓ Sequences present for all {len(EXPECTED_ROOM_TYPES)} room types")

    unknown = {
        room: [t for t in seq if t not in zone_types]
        for room, seq in list(sequences.items()) + [('default', data.get('default_sequence', []))]
    }
    unknown = {room: names for room, names in unknown.items() if names}
    if unknown:
        print(f"✗ Sequences reference unknown zone types: {unknown}")
        return False
    print("✓ All sequences reference known zone types")

    # Test loading with actual module
    sys.path.insert(0, str(Path(__file__).parent.parent))
    from internal.ilots import catalog

    try:
        loaded = catalog.load_catalog(Path(config_path))
        print(f"✓ Module can successfully load {len(loaded)} zone types")
    except catalog.CatalogError as e:
        print(f"✗ Module rejected the catalog: {e}")
        return False

    return True


if __name__ == '__main__':
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else None

    if validate_zone_types(path):
        print("\n✓ All validations passed!")
        sys.exit(0)
    else:
        print("\n✗ Some validations failed")
        sys.exit(1)

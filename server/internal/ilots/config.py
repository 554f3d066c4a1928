"""
Configuration management for the îlots layout service.

Two layers:
- Config: process settings read from environment variables (service host/port,
  default seed, catalog path).
- GenerationConfig: per-invocation engine settings, merged onto engine defaults.
"""

import os
import re
from typing import Any, Dict, List, Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Room types eligible for zone placement unless the caller overrides them
DEFAULT_ROOM_TYPES = ["office", "meeting_room", "general_space", "workspace", "open_office"]

# Sections merged key-by-key instead of replaced wholesale
_DEEP_MERGE_KEYS = ("architectural", "type_sequences")


class Config:
    """Configuration for the îlots layout service"""

    def __init__(self):
        # Server configuration
        self.host = os.getenv("ILOTS_SERVICE_HOST", "0.0.0.0")
        self.port = int(os.getenv("ILOTS_SERVICE_PORT", "8082"))
        self.environment = os.getenv("ENVIRONMENT", "development")

        # Generation configuration
        self.default_seed = int(os.getenv("ILOTS_DEFAULT_SEED", "12345"))
        self.exact_polygon_check = (
            os.getenv("ILOTS_EXACT_POLYGON_CHECK", "true").lower() == "true"
        )
        self.zone_types_path = os.getenv("ILOTS_ZONE_TYPES_PATH") or None


def load_config() -> Config:
    """Load configuration from a .env file (if any) and environment variables"""
    load_dotenv(override=False)
    return Config()


class _EngineModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
    )


class ArchitecturalConfig(_EngineModel):
    """Architectural compliance settings (meters)"""

    min_clearance: float = Field(default=1.2, ge=0.0)
    corridor_width: float = Field(default=1.5, gt=0.0)
    emergency_egress_max: float = Field(default=30.0, gt=0.0)
    accessibility_zone: float = Field(default=1.5, ge=0.0)


class GenerationConfig(_EngineModel):
    """Engine settings for one generation run"""

    density: float = Field(default=0.3, ge=0.0, le=1.0)
    min_distance: float = Field(default=2.0, ge=0.0)
    max_distance: float = Field(default=8.0, ge=0.0)
    optimization_objective: Literal["density", "comfort", "efficiency", "balanced"] = "balanced"
    architectural: ArchitecturalConfig = Field(default_factory=ArchitecturalConfig)

    room_types: List[str] = Field(default_factory=lambda: list(DEFAULT_ROOM_TYPES))
    # Per-room-type overrides of the catalog's zone sequences
    type_sequences: Dict[str, List[str]] = Field(default_factory=dict)
    exact_polygon_check: bool = True
    seed: int = 12345
    corridor_topology: Literal["spine", "tree"] = "spine"


DEFAULT_CONFIG = GenerationConfig()


def _snake(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def canonical_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    """Convert camelCase keys to snake_case (top level and architectural)."""
    result = {}
    for key, val in data.items():
        key = _snake(key)
        if key == "architectural" and isinstance(val, dict):
            val = {_snake(k): v for k, v in val.items()}
        result[key] = val
    return result


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def merge_config(
    overrides: Optional[Dict[str, Any]] = None,
    base: Optional[GenerationConfig] = None,
) -> GenerationConfig:
    """
    Merge caller overrides onto a base configuration.

    Top-level keys replace the base value; the architectural and type_sequences
    sections are merged key by key.

    Args:
        overrides: Partial configuration (snake_case or camelCase keys)
        base: Configuration to merge onto (engine defaults if omitted)

    Returns:
        New GenerationConfig

    Raises:
        pydantic.ValidationError: If a key is unknown or a value is out of range
    """
    if base is None:
        base = DEFAULT_CONFIG
    if overrides is None:
        return base
    if isinstance(overrides, GenerationConfig):
        return overrides

    merged = base.model_dump()
    for key, val in canonical_keys(overrides).items():
        if key in _DEEP_MERGE_KEYS and isinstance(val, dict):
            merged[key] = _deep_merge(merged.get(key, {}), val)
        else:
            merged[key] = val

    return GenerationConfig.model_validate(merged)

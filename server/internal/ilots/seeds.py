"""
Seed generation utilities for deterministic optimization passes.
"""

import random
import zlib


def get_run_seed(base_seed: int, objective: str) -> int:
    """
    Generate deterministic seed for one optimization run.

    Args:
        base_seed: Seed from the generation config
        objective: Optimization objective name

    Returns:
        Deterministic run seed
    """
    # crc32 instead of hash(): str hashing is salted per process
    return (zlib.crc32(objective.encode("utf-8")) ^ base_seed) % (2**31)


def seeded_random(seed: int) -> random.Random:
    """Create deterministic random number generator."""
    return random.Random(seed)

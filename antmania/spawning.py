"""
Ant spawning system.

Places ants uniformly at random over the colonies alive at spawn time,
using a single deterministic generator.
"""

import numpy as np

from .ants import AntPool
from .world import World
from .rng import make_rng, choose_uniform
from .constants import SPAWN_SEED


class SpawnError(Exception):
    """Raised when ants cannot be placed on the world"""
    pass


def spawn_ants(world: World, count: int, seed: int = SPAWN_SEED) -> AntPool:
    """
    Spawn `count` ants on uniformly random alive colonies.

    Args:
        world: World to place ants on
        count: Number of ants (0 yields an empty pool)
        seed: Seed for the placement generator

    Returns:
        AntPool with every ant alive and 0 moves

    Raises:
        ValueError: count is negative
        SpawnError: ants requested but no alive colony exists
    """
    if count < 0:
        raise ValueError(f"Ant count must be >= 0, got {count}")

    if count == 0:
        return AntPool.at_colonies([])

    colony_ids = np.array(world.alive_colony_ids(), dtype=np.int64)
    if len(colony_ids) == 0:
        raise SpawnError("No alive colonies to place ants.")

    rng = make_rng(seed)
    return AntPool.at_colonies(choose_uniform(rng, colony_ids, count))

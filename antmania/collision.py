"""
Collision detection and cleanup phases.

Collision groups alive ants by colony after movement; cleanup destroys
every colony holding two or more ants, kills those ants, and cascades the
destruction through the world graph. Both phases are single-threaded.
"""

import numpy as np
from typing import Dict, List

from .ants import AntPool
from .world import World
from .data_types import DestructionEvent


def phase_collision(pool: AntPool) -> Dict[int, List[int]]:
    """
    Phase B: bucket alive ants by current colony.

    Ants are visited in index order (chunk order, then within-chunk order),
    so each bucket lists its ants ascending. Only occupied colonies appear.

    Returns:
        Dict mapping colony id -> ant indices, keys ascending
    """
    ant_ids = np.flatnonzero(pool.alive)
    if len(ant_ids) == 0:
        return {}

    colonies = pool.colony[ant_ids]

    # Stable sort keeps visit order inside each colony
    order = np.argsort(colonies, kind='stable')
    sorted_colonies = colonies[order]
    sorted_ants = ant_ids[order]

    occupied, starts = np.unique(sorted_colonies, return_index=True)
    groups = np.split(sorted_ants, starts[1:])

    return {int(colony_id): group.tolist() for colony_id, group in zip(occupied, groups)}


def phase_cleanup(
    pool: AntPool,
    world: World,
    buckets: Dict[int, List[int]],
    tick: int = 0
) -> List[DestructionEvent]:
    """
    Phase C: destroy colonies with 2+ ants and kill those ants.

    All buckets are scanned before any colony is destroyed. Destruction
    order among colonies hit in the same tick does not matter: each only
    touches its own edges and its neighbours' mirrored edges, and
    destroy_colony() is a no-op on an already dead colony.

    Args:
        pool: Ant pool, mutated in place
        world: World, mutated in place
        buckets: Output of phase_collision()
        tick: Tick number recorded on the events

    Returns:
        Destruction events, ascending colony id
    """
    events = []

    for colony_id in sorted(buckets):
        ants_here = buckets[colony_id]
        if len(ants_here) < 2:
            continue

        pool.alive[ants_here] = False
        events.append(DestructionEvent(
            tick=tick,
            colony_id=colony_id,
            colony_name=world.colony_name(colony_id),
            ants=list(ants_here)
        ))

    for event in events:
        world.destroy_colony(event.colony_id)

    return events

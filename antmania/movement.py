"""
Movement phase.

Every alive ant takes one random step along an outgoing edge of its colony.
The pool is split into contiguous chunks; each chunk is processed by one
worker with its own generator seeded from the chunk index, so the outcome
depends on the chunk size but not on the number of workers or on the order
in which chunks finish.

Workers write only their own slice of the ant arrays and read only the
immutable WorldView.
"""

import numpy as np
from concurrent.futures import Executor
from typing import List, Optional

from .ants import AntPool
from .world import WorldView
from .rng import make_rng, chunk_seed
from .constants import CHUNK_SIZE, CHUNK_SEED_BASE, MAX_MOVES


def chunk_bounds(count: int, chunk_size: int = CHUNK_SIZE) -> List[range]:
    """
    Split [0, count) into contiguous chunks of chunk_size (last may be short).

    Returns:
        List of ranges, in chunk-index order
    """
    return [range(start, min(start + chunk_size, count)) for start in range(0, count, chunk_size)]


def move_chunk(
    pool: AntPool,
    view: WorldView,
    bounds: range,
    rng: np.random.Generator,
    max_moves: int = MAX_MOVES
) -> int:
    """
    Advance the ants in one chunk by a single step.

    Ants are processed in index order: each alive ant standing on a dead
    colony dies; every other alive ant increments its move counter and,
    when its colony has outgoing edges, moves to one picked uniformly.
    Ants on dead-end colonies stay put (and consume no random draw).

    Args:
        pool: Ant pool (only rows in `bounds` are touched)
        view: Read-only world snapshot
        bounds: Rows owned by this chunk
        rng: Generator owned by this chunk
        max_moves: Move counter saturation value

    Returns:
        Number of ants that died stranded on a dead colony
    """
    rows = slice(bounds.start, bounds.stop)
    colony = pool.colony[rows]
    moves = pool.moves[rows]
    alive = pool.alive[rows]

    active = np.flatnonzero(alive)
    if len(active) == 0:
        return 0

    on_live_colony = view.alive[colony[active]]
    stranded = active[~on_live_colony]
    alive[stranded] = False

    movers = active[on_live_colony]
    moves[movers] = np.minimum(moves[movers] + 1, max_moves)

    here = colony[movers]
    degree = view.degree[here]
    has_exit = degree > 0
    leaving = movers[has_exit]

    if len(leaving) > 0:
        picks = rng.integers(0, degree[has_exit])
        colony[leaving] = view.targets[view.offsets[here[has_exit]] + picks]

    return len(stranded)


def phase_movement(
    pool: AntPool,
    view: WorldView,
    executor: Optional[Executor] = None,
    chunk_size: int = CHUNK_SIZE,
    seed_base: int = CHUNK_SEED_BASE,
    max_moves: int = MAX_MOVES
) -> int:
    """
    Phase A: move every alive ant one step.

    Args:
        pool: Ant pool, mutated in place
        view: Read-only world snapshot (must not change during the phase)
        executor: Worker pool for the chunks (None = run chunks inline)
        chunk_size: Ants per chunk
        seed_base: Chunk k is seeded with k + seed_base
        max_moves: Move counter saturation value

    Returns:
        Total number of ants that died stranded on a dead colony
    """
    chunks = chunk_bounds(len(pool), chunk_size)

    def run_chunk(chunk_index: int) -> int:
        rng = make_rng(chunk_seed(chunk_index, seed_base))
        return move_chunk(pool, view, chunks[chunk_index], rng, max_moves)

    if executor is None or len(chunks) <= 1:
        results = [run_chunk(i) for i in range(len(chunks))]
    else:
        # map() yields in submission order: the merge barrier for per-chunk results
        results = list(executor.map(run_chunk, range(len(chunks))))

    return sum(results)

"""
Deterministic RNG utilities for ant mania simulation.

All randomness uses numpy.random.Generator(PCG64). Each consumer owns its
generator instance: one for spawning, one per movement chunk per tick.
No generator is ever shared between threads.
"""

import numpy as np

from .constants import CHUNK_SEED_BASE


def make_rng(seed: int) -> np.random.Generator:
    """
    Create an independent generator for a single consumer.

    Args:
        seed: Non-negative integer seed

    Returns:
        numpy Generator backed by PCG64
    """
    return np.random.Generator(np.random.PCG64(seed))


def chunk_seed(chunk_index: int, base: int = CHUNK_SEED_BASE) -> int:
    """
    Seed for a movement chunk.

    Reproducibility is per chunk: results are stable for a fixed chunk size
    and ant ordering, but are not equivalent to one global random sequence.

    Example:
        rng = make_rng(chunk_seed(3))  # seeded with 3 + CHUNK_SEED_BASE
    """
    return chunk_index + base


def choose_uniform(rng: np.random.Generator, choices: np.ndarray, count: int) -> np.ndarray:
    """
    Draw `count` independent uniform picks from `choices`.

    Args:
        rng: Generator to draw from
        choices: (K,) array of candidates, K >= 1
        count: Number of picks

    Returns:
        (count,) array of picked values, in draw order
    """
    picks = rng.integers(0, len(choices), size=count)
    return choices[picks]

"""
Tests for ant spawning.

Verifies uniform placement over alive colonies, determinism of the spawn
seed, and the fatal no-colony case.
"""

import sys
import numpy as np
import pytest
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from antmania.loader import parse_map
from antmania.spawning import spawn_ants, SpawnError
from antmania.ants import AntPool
from antmania.world import World


GRID_MAP = "\n".join(f"C{i} north=C{(i + 1) % 10}" for i in range(10))


def test_spawn_places_ants_on_alive_colonies():
    """Fresh ants: alive, 0 moves, only on alive colonies"""
    world = parse_map(GRID_MAP)
    world.destroy_colony(world.colony_id("C3"))
    world.destroy_colony(world.colony_id("C7"))

    ants = spawn_ants(world, 500)

    assert len(ants) == 500
    assert ants.alive.all()
    assert (ants.moves == 0).all()

    placed = set(ants.colony.tolist())
    print(f"[OK] 500 ants placed on {len(placed)} distinct colonies")
    assert placed <= set(world.alive_colony_ids()), "Ant placed on a dead colony"
    assert world.colony_id("C3") not in placed
    assert len(placed) == 8, "500 uniform draws should cover all 8 alive colonies"


def test_spawn_is_deterministic():
    world = parse_map(GRID_MAP)

    first = spawn_ants(world, 200, seed=99)
    second = spawn_ants(world, 200, seed=99)
    other = spawn_ants(world, 200, seed=100)

    np.testing.assert_array_equal(first.colony, second.colony)
    assert not np.array_equal(first.colony, other.colony), "Different seeds gave identical placement"


def test_spawn_roughly_uniform():
    """Each of 10 colonies receives about a tenth of the ants"""
    world = parse_map(GRID_MAP)

    ants = spawn_ants(world, 20_000)
    counts = np.bincount(ants.colony, minlength=world.num_colonies)

    assert counts.min() > 1700 and counts.max() < 2300, f"Skewed placement: {counts.tolist()}"


def test_spawn_zero_ants():
    """No ants needed: never fails, even on an empty world"""
    ants = spawn_ants(World(), 0)

    assert len(ants) == 0
    assert ants.all_dead()


def test_spawn_without_colonies_is_fatal():
    with pytest.raises(SpawnError, match="No alive colonies"):
        spawn_ants(World(), 3)


def test_spawn_on_fully_destroyed_world_is_fatal():
    world = parse_map("A north=B\n")
    world.destroy_colony(0)
    world.destroy_colony(1)

    with pytest.raises(SpawnError):
        spawn_ants(world, 1)


def test_spawn_negative_count():
    with pytest.raises(ValueError):
        spawn_ants(parse_map("A\n"), -1)


def test_ant_pool_counts():
    ants = AntPool.at_colonies([0, 1, 1, 2])
    ants.alive[1] = False
    ants.moves[:] = [5, 0, 5, 4]

    assert len(ants) == 4
    assert ants.alive_count == 3
    assert ants.dead_count == 1
    assert not ants.all_dead()
    assert ants.all_reached(4)
    assert not ants.all_reached(5), "Ant 3 has only 4 moves"
    assert ants.to_dict()['alive'] == [True, False, True, True]


def test_ant_pool_rejects_mismatched_arrays():
    with pytest.raises(ValueError):
        AntPool(colony=[0, 1], moves=[0], alive=[True, True])


if __name__ == '__main__':
    pytest.main([__file__, '-v'])

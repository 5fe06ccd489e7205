"""
Tests for the world model.

Verifies:
- Colony ids are stable and assigned in first-seen order
- Edges are mirrored in the reverse-link index
- Destruction cascades to neighbours and is idempotent
- WorldView snapshot matches the graph and is cached between mutations
- Rendering follows the map input format
"""

import sys
import numpy as np
import pytest
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from antmania.world import World
from antmania.data_types import Direction


def build_cross_world() -> World:
    """
    Center colony with four neighbours, every edge mirrored:

        Center north=N south=S east=E west=W
        N south=Center, S north=Center, E west=Center, W east=Center
    """
    world = World()
    center = world.get_or_add_colony("Center")
    for name, out_dir, back_dir in [
        ("N", Direction.NORTH, Direction.SOUTH),
        ("S", Direction.SOUTH, Direction.NORTH),
        ("E", Direction.EAST, Direction.WEST),
        ("W", Direction.WEST, Direction.EAST),
    ]:
        neighbour = world.get_or_add_colony(name)
        world.add_direction(center, out_dir, neighbour)
        world.add_direction(neighbour, back_dir, center)
    return world


def test_get_or_add_colony_is_idempotent():
    """Same name returns the same id; new names append"""
    world = World()

    a = world.get_or_add_colony("A")
    b = world.get_or_add_colony("B")
    a_again = world.get_or_add_colony("A")

    assert (a, b, a_again) == (0, 1, 0), f"Unexpected ids {(a, b, a_again)}"
    assert world.num_colonies == 2
    assert world.names == ["A", "B"]
    assert world.colony_id("B") == 1
    assert world.colony_name(0) == "A"
    assert world.is_alive(a) and world.is_alive(b)
    assert world.outgoing(a) == []

    print("[OK] Colony ids stable and first-seen ordered")


def test_add_direction_mirrors_reverse_links():
    """Every outgoing edge appears in the target's reverse links"""
    world = World()
    a = world.get_or_add_colony("A")
    b = world.get_or_add_colony("B")

    world.add_direction(a, Direction.SOUTH, b)

    assert world.outgoing(a) == [(Direction.SOUTH, b)]
    assert world.incoming(b) == {(a, Direction.SOUTH)}
    assert world.incoming(a) == set()
    assert world.has_direction(a, Direction.SOUTH)
    assert not world.has_direction(a, Direction.NORTH)
    assert world.check_invariants() == []

    print("[OK] Edge mirrored in reverse-link index")


def test_destroy_colony_cascades_to_neighbours():
    """Destroying the hub removes every edge that referenced it"""
    world = build_cross_world()
    center = world.colony_id("Center")

    world.destroy_colony(center)

    assert not world.is_alive(center)
    assert world.outgoing(center) == []
    assert world.incoming(center) == set()
    for name in ["N", "S", "E", "W"]:
        cid = world.colony_id(name)
        assert world.is_alive(cid), f"{name} should survive"
        assert world.outgoing(cid) == [], f"{name} still points at destroyed Center"
        assert world.incoming(cid) == set(), f"{name} still referenced by destroyed Center"

    assert world.num_alive == 4
    assert world.num_colonies == 5, "Destroyed colonies must stay in the arena"
    assert world.check_invariants() == []

    print("[OK] Destruction cascaded to all neighbours")


def test_destroy_colony_keeps_unrelated_edges():
    """Only edges touching the destroyed colony are removed"""
    world = World()
    a = world.get_or_add_colony("A")
    b = world.get_or_add_colony("B")
    c = world.get_or_add_colony("C")
    world.add_direction(a, Direction.NORTH, b)
    world.add_direction(a, Direction.EAST, c)
    world.add_direction(b, Direction.WEST, c)

    world.destroy_colony(b)

    assert world.outgoing(a) == [(Direction.EAST, c)]
    assert world.incoming(c) == {(a, Direction.EAST)}
    assert world.check_invariants() == []

    print("[OK] Unrelated edges preserved")


def test_destroy_colony_is_idempotent():
    """Second destruction of the same colony is a no-op"""
    world = build_cross_world()
    north = world.colony_id("N")

    world.destroy_colony(north)
    snapshot = world.to_dict()
    world.destroy_colony(north)

    assert world.to_dict() == snapshot, "Re-destroying a dead colony changed the world"
    assert not world.is_alive(north)

    print("[OK] destroy_colony idempotent")


def test_destroy_self_loop():
    """A colony pointing at itself is cleaned up consistently"""
    world = World()
    a = world.get_or_add_colony("A")
    world.add_direction(a, Direction.NORTH, a)

    world.destroy_colony(a)

    assert world.outgoing(a) == []
    assert world.incoming(a) == set()
    assert world.check_invariants() == []


def test_check_invariants_reports_mismatch():
    """Tampering with the reverse index is detected"""
    world = build_cross_world()
    world._reverse_links[world.colony_id("N")].clear()

    problems = world.check_invariants()

    assert len(problems) == 1, f"Expected one violation, got {problems}"
    assert "missing from reverse links" in problems[0]


def test_view_matches_graph():
    """CSR snapshot lists outgoing targets in edge order"""
    world = build_cross_world()
    view = world.view()

    center = world.colony_id("Center")
    expected = [world.colony_id(n) for n in ["N", "S", "E", "W"]]
    start, stop = view.offsets[center], view.offsets[center + 1]

    assert view.num_colonies == 5
    assert view.targets[start:stop].tolist() == expected
    assert view.degree.tolist() == [4, 1, 1, 1, 1]
    assert view.alive.all()

    with pytest.raises(ValueError):
        view.alive[0] = False  # Snapshot is read-only

    print("[OK] WorldView consistent with graph")


def test_view_is_cached_until_mutation():
    """Same snapshot is reused until the world changes"""
    world = build_cross_world()

    first = world.view()
    assert world.view() is first, "View rebuilt without a mutation"

    world.destroy_colony(world.colony_id("E"))
    second = world.view()

    assert second is not first, "View not rebuilt after destruction"
    assert not second.alive[world.colony_id("E")]
    assert second.degree[world.colony_id("Center")] == 3
    assert first.degree[world.colony_id("Center")] == 4, "Old snapshot must not change"


def test_view_of_empty_world():
    """Empty world yields empty arrays"""
    view = World().view()

    assert view.num_colonies == 0
    assert len(view.targets) == 0
    assert view.offsets.tolist() == [0]
    assert view.degree.dtype == np.int64


def test_render_lines():
    """Alive colonies in id order, dead ones omitted, bare names for no edges"""
    world = build_cross_world()
    world.destroy_colony(world.colony_id("S"))

    lines = world.render_lines()

    assert lines == [
        "Center north=N east=E west=W",
        "N south=Center",
        "E west=Center",
        "W east=Center",
    ], f"Unexpected render: {lines}"

    print("[OK] Render matches input format")


def test_to_dict():
    world = World()
    a = world.get_or_add_colony("A")
    b = world.get_or_add_colony("B")
    world.add_direction(a, Direction.WEST, b)

    data = world.to_dict()

    assert data['colonies'][0] == {
        'id': 0,
        'name': 'A',
        'alive': True,
        'outgoing': [{'direction': 'west', 'target': 'B'}],
    }
    assert data['colonies'][1]['outgoing'] == []


if __name__ == '__main__':
    print("=" * 60)
    print("World Model Tests")
    print("=" * 60)

    test_get_or_add_colony_is_idempotent()
    test_add_direction_mirrors_reverse_links()
    test_destroy_colony_cascades_to_neighbours()
    test_destroy_colony_keeps_unrelated_edges()
    test_destroy_colony_is_idempotent()
    test_destroy_self_loop()
    test_check_invariants_reports_mismatch()
    test_view_matches_graph()
    test_view_is_cached_until_mutation()
    test_view_of_empty_world()
    test_render_lines()
    test_to_dict()

    print("=" * 60)
    print("[PASS] All world tests passed!")
    print("=" * 60)

"""
World model: directed graph of colonies.

Colonies live in an arena addressed by stable integer id (first-seen order).
Destroying a colony never removes it from the arena; it flips the alive flag
and drops every edge touching it. A reverse-link index (target -> set of
(source, direction)) mirrors the outgoing edge lists so destruction costs
O(degree) instead of a scan over all colonies.

Invariant: (forward edges, reverse links) are only mutated together through
add_direction() and destroy_colony().
"""

import numpy as np
from typing import Dict, List, Optional, Set, Tuple

from .data_types import Direction


Edge = Tuple[Direction, int]  # (direction, target colony id)
ReverseLink = Tuple[int, Direction]  # (source colony id, direction)


class WorldView:
    """
    Read-only numpy snapshot of the world for the movement phase.

    Outgoing targets are stored in CSR layout: the targets of colony c are
    targets[offsets[c]:offsets[c + 1]], in edge-list order. Arrays are
    flagged non-writeable so worker threads can share one instance safely.
    """

    def __init__(self, alive: np.ndarray, offsets: np.ndarray, targets: np.ndarray):
        """
        Args:
            alive: (C,) bool array, colony alive flags
            offsets: (C + 1,) int64 array, CSR row offsets
            targets: (E,) int64 array, outgoing target ids
        """
        self.alive = alive
        self.offsets = offsets
        self.targets = targets
        self.degree = np.diff(offsets)

        for array in (self.alive, self.offsets, self.targets, self.degree):
            array.flags.writeable = False

    @property
    def num_colonies(self) -> int:
        return len(self.alive)


class World:
    """
    Mutable directed graph of colonies.

    Attributes:
        names: Display name per colony id
        name_to_id: Reverse of names
    """

    def __init__(self):
        self.names: List[str] = []
        self.name_to_id: Dict[str, int] = {}
        self._alive: List[bool] = []
        self._outgoing: List[List[Edge]] = []
        self._reverse_links: Dict[int, Set[ReverseLink]] = {}

        # Bumped on every mutation; invalidates the cached WorldView
        self._version: int = 0
        self._view: Optional[WorldView] = None
        self._view_version: int = -1

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def get_or_add_colony(self, name: str) -> int:
        """
        Return the id of colony `name`, creating it (alive, no edges) if unseen.

        Args:
            name: Colony display name

        Returns:
            Stable colony id
        """
        colony_id = self.name_to_id.get(name)
        if colony_id is not None:
            return colony_id

        colony_id = len(self.names)
        self.name_to_id[name] = colony_id
        self.names.append(name)
        self._alive.append(True)
        self._outgoing.append([])
        self._version += 1
        return colony_id

    def add_direction(self, source: int, direction: Direction, target: int):
        """
        Add directed edge source --direction--> target and mirror it in the
        reverse-link index.

        Does not check for an existing edge in the same direction; the map
        builder rejects duplicates before calling this.
        """
        self._outgoing[source].append((direction, target))
        self._reverse_links.setdefault(target, set()).add((source, direction))
        self._version += 1

    def destroy_colony(self, colony_id: int):
        """
        Destroy a colony and every edge touching it.

        No-op if the colony is already dead. Otherwise removes each incoming
        edge from its source (found through the reverse-link index), removes
        this colony from each outgoing target's reverse links, and clears the
        outgoing list.
        """
        if not self._alive[colony_id]:
            return

        self._alive[colony_id] = False

        for source, direction in self._reverse_links.pop(colony_id, set()):
            self._outgoing[source] = [
                (d, t) for d, t in self._outgoing[source]
                if not (d == direction and t == colony_id)
            ]

        for direction, target in self._outgoing[colony_id]:
            links = self._reverse_links.get(target)
            if links is not None:
                links.discard((colony_id, direction))

        self._outgoing[colony_id] = []
        self._version += 1

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def num_colonies(self) -> int:
        return len(self.names)

    @property
    def num_alive(self) -> int:
        return sum(self._alive)

    def is_alive(self, colony_id: int) -> bool:
        return self._alive[colony_id]

    def colony_id(self, name: str) -> int:
        """Id of a known colony (KeyError if unseen)"""
        return self.name_to_id[name]

    def colony_name(self, colony_id: int) -> str:
        return self.names[colony_id]

    def outgoing(self, colony_id: int) -> List[Edge]:
        """Copy of the outgoing edges of a colony"""
        return list(self._outgoing[colony_id])

    def incoming(self, colony_id: int) -> Set[ReverseLink]:
        """Copy of the reverse links pointing at a colony"""
        return set(self._reverse_links.get(colony_id, ()))

    def has_direction(self, colony_id: int, direction: Direction) -> bool:
        return any(d == direction for d, _ in self._outgoing[colony_id])

    def alive_colony_ids(self) -> List[int]:
        """Ids of alive colonies, ascending"""
        return [cid for cid, alive in enumerate(self._alive) if alive]

    def view(self) -> WorldView:
        """
        Read-only snapshot for the movement phase.

        Cached until the next mutation, so consecutive ticks without
        destructions reuse the same arrays.
        """
        if self._view is None or self._view_version != self._version:
            self._view = self._build_view()
            self._view_version = self._version
        return self._view

    def _build_view(self) -> WorldView:
        C = len(self.names)

        degree = np.fromiter((len(edges) for edges in self._outgoing), dtype=np.int64, count=C)
        offsets = np.zeros(C + 1, dtype=np.int64)
        np.cumsum(degree, out=offsets[1:])

        targets = np.fromiter(
            (target for edges in self._outgoing for _, target in edges),
            dtype=np.int64,
            count=int(offsets[-1])
        )
        alive = np.array(self._alive, dtype=bool)

        return WorldView(alive, offsets, targets)

    def check_invariants(self) -> List[str]:
        """
        Verify the edge mirror invariant and the dead-colony invariant.

        Returns:
            List of violation descriptions (empty when consistent)
        """
        problems = []

        forward = set()
        for source, edges in enumerate(self._outgoing):
            if edges and not self._alive[source]:
                problems.append(f"dead colony {self.names[source]} has outgoing edges")
            for direction, target in edges:
                forward.add((source, direction, target))
                if not self._alive[target]:
                    problems.append(
                        f"edge {self.names[source]} {direction.value}={self.names[target]} "
                        f"points at a dead colony"
                    )

        reverse = set()
        for target, links in self._reverse_links.items():
            for source, direction in links:
                reverse.add((source, direction, target))

        for source, direction, target in sorted(forward - reverse, key=lambda e: (e[0], e[2])):
            problems.append(
                f"edge {self.names[source]} {direction.value}={self.names[target]} "
                f"missing from reverse links"
            )
        for source, direction, target in sorted(reverse - forward, key=lambda e: (e[0], e[2])):
            problems.append(
                f"reverse link {self.names[source]} {direction.value}={self.names[target]} "
                f"has no forward edge"
            )

        return problems

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def render_lines(self) -> List[str]:
        """
        Render alive colonies in the map input format, ascending id order.

        Destroyed colonies are omitted; a colony without edges renders as
        its name alone.
        """
        lines = []
        for colony_id, name in enumerate(self.names):
            if not self._alive[colony_id]:
                continue
            parts = [name]
            parts.extend(
                f"{direction.value}={self.names[target]}"
                for direction, target in self._outgoing[colony_id]
            )
            lines.append(" ".join(parts))
        return lines

    def to_dict(self) -> dict:
        """Serialize world state to JSON-compatible dict"""
        return {
            'colonies': [
                {
                    'id': colony_id,
                    'name': name,
                    'alive': self._alive[colony_id],
                    'outgoing': [
                        {'direction': direction.value, 'target': self.names[target]}
                        for direction, target in self._outgoing[colony_id]
                    ],
                }
                for colony_id, name in enumerate(self.names)
            ]
        }


def print_world(world: World):
    """Print the final world state in the same format as the input map."""
    for line in world.render_lines():
        print(line)

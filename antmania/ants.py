"""
Ant pool runtime representation.

Ants are stored as structure-of-arrays (one numpy array per attribute) so
phases can operate on contiguous slices. An ant's id is its row index;
dead ants are never removed, keeping indices stable for collision reports.
"""

import numpy as np
from typing import Sequence


class AntPool:
    """
    Flat collection of ant states.

    Attributes:
        colony: (N,) int64 array, current colony id per ant
        moves: (N,) int64 array, moves taken (saturates at the move cap)
        alive: (N,) bool array
    """

    def __init__(self, colony: np.ndarray, moves: np.ndarray = None, alive: np.ndarray = None):
        self.colony = np.asarray(colony, dtype=np.int64).copy()
        n = len(self.colony)

        if moves is None:
            self.moves = np.zeros(n, dtype=np.int64)
        else:
            self.moves = np.asarray(moves, dtype=np.int64).copy()

        if alive is None:
            self.alive = np.ones(n, dtype=bool)
        else:
            self.alive = np.asarray(alive, dtype=bool).copy()

        if not (len(self.moves) == len(self.alive) == n):
            raise ValueError(
                f"Ant arrays differ in length: colony={n}, "
                f"moves={len(self.moves)}, alive={len(self.alive)}"
            )

    @classmethod
    def at_colonies(cls, colony_ids: Sequence[int]) -> 'AntPool':
        """Fresh pool (0 moves, all alive) with one ant per listed colony"""
        return cls(np.asarray(colony_ids, dtype=np.int64))

    def __len__(self) -> int:
        return len(self.colony)

    @property
    def alive_count(self) -> int:
        return int(np.count_nonzero(self.alive))

    @property
    def dead_count(self) -> int:
        return len(self) - self.alive_count

    def all_dead(self) -> bool:
        return not self.alive.any()

    def all_reached(self, max_moves: int) -> bool:
        """True when every alive ant has taken at least max_moves moves"""
        return bool(np.all(self.moves[self.alive] >= max_moves))

    def to_dict(self) -> dict:
        """Serialize pool to JSON-compatible dict"""
        return {
            'colony': self.colony.tolist(),
            'moves': self.moves.tolist(),
            'alive': self.alive.tolist(),
        }

"""
Data types shared across the simulation.

SimulationConfig mirrors the YAML config schema and is populated by
loader.py; the remaining types are produced by the simulation phases.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any
from enum import Enum

from .constants import (
    MAX_MOVES,
    SPAWN_SEED,
    CHUNK_SEED_BASE,
    CHUNK_SIZE,
    MOVEMENT_WORKERS,
    TICK_SUMMARY_INTERVAL,
)


# ============================================================================
# Map Definitions
# ============================================================================

class Direction(Enum):
    """Compass label of a directed edge between two colonies"""
    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"

    @classmethod
    def parse(cls, token: str) -> 'Direction':
        """
        Parse a direction token as written in map files.

        Raises:
            ValueError: token is not one of north/south/east/west
        """
        try:
            return cls(token)
        except ValueError:
            raise ValueError(f"Invalid direction: {token!r}") from None


# ============================================================================
# Simulation State
# ============================================================================

class TerminationReason(Enum):
    """Simulation loop state after a tick"""
    RUNNING = "running"
    ALL_DEAD = "all_dead"
    MAX_MOVES_REACHED = "max_moves_reached"

    @property
    def terminal(self) -> bool:
        return self is not TerminationReason.RUNNING


@dataclass
class DestructionEvent:
    """A colony destroyed during cleanup, with the ants that destroyed it"""
    tick: int
    colony_id: int
    colony_name: str
    ants: List[int]  # All ants in the colony, ascending index

    @property
    def first_ant(self) -> int:
        return self.ants[0]

    @property
    def second_ant(self) -> int:
        return self.ants[1]

    def describe(self) -> str:
        """Human-readable line for the runtime event stream"""
        return (f"{self.colony_name} has been destroyed by "
                f"ant {self.first_ant} and ant {self.second_ant}!")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'tick': self.tick,
            'colony_id': self.colony_id,
            'colony_name': self.colony_name,
            'ants': list(self.ants),
        }


# ============================================================================
# Configuration & Results
# ============================================================================

@dataclass
class SimulationConfig:
    """Simulation tunables (defaults from constants.py)"""
    max_moves: int = MAX_MOVES
    spawn_seed: int = SPAWN_SEED
    chunk_seed_base: int = CHUNK_SEED_BASE
    chunk_size: int = CHUNK_SIZE
    workers: int = MOVEMENT_WORKERS
    summary_interval: int = TICK_SUMMARY_INTERVAL

    def __post_init__(self):
        """Reject values the phases cannot work with"""
        if self.max_moves < 1:
            raise ValueError(f"max_moves must be >= 1, got {self.max_moves}")
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {self.chunk_size}")
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")
        if self.summary_interval < 1:
            raise ValueError(f"summary_interval must be >= 1, got {self.summary_interval}")
        # PCG64 only accepts non-negative seeds
        if self.spawn_seed < 0:
            raise ValueError(f"spawn_seed must be >= 0, got {self.spawn_seed}")
        if self.chunk_seed_base < 0:
            raise ValueError(f"chunk_seed_base must be >= 0, got {self.chunk_seed_base}")


@dataclass
class SimulationResult:
    """Outcome of AntManiaSimulation.run()"""
    reason: TerminationReason
    ticks: int
    elapsed_seconds: float
    alive_ants: int
    dead_ants: int
    destroyed_colonies: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'reason': self.reason.value,
            'ticks': self.ticks,
            'elapsed_seconds': float(self.elapsed_seconds),
            'alive_ants': self.alive_ants,
            'dead_ants': self.dead_ants,
            'destroyed_colonies': list(self.destroyed_colonies),
        }

"""
Central configuration constants for ant mania simulation.

Defines default values, seeds, and tuning parameters used across
multiple modules. SimulationConfig (data_types.py) takes its defaults
from here; a YAML config file may override any of them.
"""

import os


# ============================================================================
# Termination
# ============================================================================

# Every surviving ant must reach this many moves before the run ends
MAX_MOVES = 10_000


# ============================================================================
# Randomness
# ============================================================================

# Seed for the single generator that places ants at spawn time
SPAWN_SEED = 12345

# Movement chunk k draws from Generator(PCG64(k + CHUNK_SEED_BASE))
CHUNK_SEED_BASE = 12345


# ============================================================================
# Parallel Movement
# ============================================================================

# Ants per movement chunk. Chunk boundaries define the reproducibility contract:
# changing this changes the random stream every ant sees.
CHUNK_SIZE = 1000

# Worker threads for the movement phase (same default as ThreadPoolExecutor)
MOVEMENT_WORKERS = min(32, (os.cpu_count() or 1) + 4)


# ============================================================================
# Map Input
# ============================================================================

# Map file read by the command line when --map is not given
DEFAULT_MAP_FILE = "ant_mania_map.txt"

# Token joining a direction and its target colony (e.g. "north=Foo")
EDGE_SEPARATOR = "="


# ============================================================================
# Performance Configuration
# ============================================================================

# Tick timing window for rolling average
TICK_TIME_WINDOW = 100  # Number of ticks to average

# Default tick summary interval (print every N ticks when verbose)
TICK_SUMMARY_INTERVAL = 1000

"""
Ant mania simulation kernel.

Main simulation class that owns the world, the ant pool and the movement
worker pool, and runs the tick loop:

    Phase A: Movement  (parallel over ant chunks, world read-only)
    Phase B: Collision (sequential, groups ants by colony)
    Phase C: Cleanup   (sequential, destroys colonies, world write)

until every ant is dead or every surviving ant reached the move cap.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from .ants import AntPool
from .world import World, print_world
from .data_types import SimulationConfig, SimulationResult, TerminationReason, DestructionEvent
from .loader import load_map
from .spawning import spawn_ants
from .movement import phase_movement
from .collision import phase_collision, phase_cleanup
from .constants import TICK_TIME_WINDOW


class AntManiaSimulation:
    """
    Tick loop over a World and an AntPool.

    Destruction events are passed to `report` (default: print the event
    line). The movement executor is created on the first tick; call
    close() or use the simulation as a context manager to release it.
    """

    def __init__(
        self,
        world: World,
        ants: AntPool,
        config: Optional[SimulationConfig] = None,
        report: Optional[Callable[[str], None]] = print,
        verbose: bool = False
    ):
        """
        Args:
            world: World to simulate (mutated in place)
            ants: Ant pool (mutated in place)
            config: Tunables (defaults from constants.py)
            report: Sink for destruction lines, None to silence
            verbose: Print diagnostics and periodic tick summaries
        """
        self.world = world
        self.ants = ants
        self.config = config or SimulationConfig()
        self.report = report
        self.verbose = verbose

        # Simulation state
        self.tick_count: int = 0
        self.state: TerminationReason = TerminationReason.RUNNING
        self.events: List[DestructionEvent] = []
        self.stranded_deaths: int = 0

        self._executor: Optional[ThreadPoolExecutor] = None

        # Performance metrics
        self._tick_times: List[float] = []
        self._tick_time_sum: float = 0.0
        self._tick_time_window: int = TICK_TIME_WINDOW  # Rolling average window

        # Phase timing breakdown
        self._movement_times: List[float] = []
        self._collision_times: List[float] = []
        self._cleanup_times: List[float] = []

        if self.verbose:
            print(f"[OK] Simulation initialized: {len(self.ants)} ants, "
                  f"{self.world.num_colonies} colonies, chunk_size={self.config.chunk_size}, "
                  f"workers={self.config.workers}, max_moves={self.config.max_moves}")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.config.workers,
                thread_name_prefix="antmania-move"
            )
        return self._executor

    def close(self):
        """Shut down the movement worker pool"""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> 'AntManiaSimulation':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # ------------------------------------------------------------------
    # Tick loop
    # ------------------------------------------------------------------

    def tick(self) -> TerminationReason:
        """
        Execute one simulation tick.

        Phase A: Movement. The world snapshot is taken once and stays
        read-only while the chunk workers run; their per-chunk results are
        merged in chunk order before the phase returns.

        Phase B: Collision. Buckets alive ants by colony.

        Phase C: Cleanup. Kills co-located ants, destroys their colonies and
        reports each destruction.

        Returns:
            Loop state after this tick
        """
        if self.state.terminal:
            return self.state

        start_time = time.perf_counter()
        self.tick_count += 1

        # Phase A: Movement
        movement_start = time.perf_counter()
        view = self.world.view()
        self.stranded_deaths += phase_movement(
            self.ants,
            view,
            executor=self._get_executor(),
            chunk_size=self.config.chunk_size,
            seed_base=self.config.chunk_seed_base,
            max_moves=self.config.max_moves
        )
        movement_elapsed = time.perf_counter() - movement_start

        # Phase B: Collision
        collision_start = time.perf_counter()
        buckets = phase_collision(self.ants)
        collision_elapsed = time.perf_counter() - collision_start

        # Phase C: Cleanup
        cleanup_start = time.perf_counter()
        events = phase_cleanup(self.ants, self.world, buckets, tick=self.tick_count)
        cleanup_elapsed = time.perf_counter() - cleanup_start

        self.events.extend(events)
        if self.report is not None:
            for event in events:
                self.report(event.describe())

        self.state = self._evaluate_state()

        elapsed = time.perf_counter() - start_time
        self._record_timings(elapsed, movement_elapsed, collision_elapsed, cleanup_elapsed)

        if self.verbose and self.tick_count % self.config.summary_interval == 0:
            self.print_tick_summary()

        return self.state

    def _evaluate_state(self) -> TerminationReason:
        if self.ants.all_dead():
            return TerminationReason.ALL_DEAD
        if self.ants.all_reached(self.config.max_moves):
            return TerminationReason.MAX_MOVES_REACHED
        return TerminationReason.RUNNING

    def run(self, max_ticks: Optional[int] = None) -> SimulationResult:
        """
        Tick until a terminal state.

        Args:
            max_ticks: Optional supervisory bound on ticks for this call.
                When hit first, the result reason is RUNNING.

        Returns:
            SimulationResult with the wall-clock time spent in this call
        """
        start_time = time.perf_counter()
        ticks = 0

        while not self.state.terminal:
            if max_ticks is not None and ticks >= max_ticks:
                if self.verbose:
                    print(f"[WARN] Stopped after {ticks} ticks without reaching a terminal state")
                break
            self.tick()
            ticks += 1

        elapsed = time.perf_counter() - start_time

        if self.verbose:
            print(f"[OK] Simulation finished: {self.state.value} after {self.tick_count} ticks "
                  f"({elapsed:.3f} s, {len(self.events)} colonies destroyed)")

        return SimulationResult(
            reason=self.state,
            ticks=self.tick_count,
            elapsed_seconds=elapsed,
            alive_ants=self.ants.alive_count,
            dead_ants=self.ants.dead_count,
            destroyed_colonies=[event.colony_name for event in self.events]
        )

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------

    def get_tick_stats(self) -> dict:
        """
        Timing of the ticks run so far (averages over the rolling window).

        Returns:
            Dict with tick_count, window, avg_tick_time_ms, last_tick_time_ms,
            and per-phase averages movement_ms, collision_ms, cleanup_ms
        """
        window = len(self._tick_times)

        def avg_ms(times: List[float]) -> float:
            return sum(times) / len(times) * 1000.0 if times else 0.0

        return {
            'tick_count': self.tick_count,
            'window': window,
            'avg_tick_time_ms': self._tick_time_sum / window * 1000.0 if window else 0.0,
            'last_tick_time_ms': self._tick_times[-1] * 1000.0 if window else 0.0,
            'movement_ms': avg_ms(self._movement_times),
            'collision_ms': avg_ms(self._collision_times),
            'cleanup_ms': avg_ms(self._cleanup_times),
        }

    def _record_timings(self, total: float, movement: float, collision: float, cleanup: float):
        """Append one tick's timings (seconds), dropping the oldest past TICK_TIME_WINDOW."""
        self._tick_times.append(total)
        self._tick_time_sum += total
        self._movement_times.append(movement)
        self._collision_times.append(collision)
        self._cleanup_times.append(cleanup)

        if len(self._tick_times) > self._tick_time_window:
            self._tick_time_sum -= self._tick_times.pop(0)
            self._movement_times.pop(0)
            self._collision_times.pop(0)
            self._cleanup_times.pop(0)

    def get_snapshot(self) -> dict:
        """
        Get complete simulation state snapshot.

        Returns:
            Dict with tick_count, state, world, ants, events, timing
        """
        return {
            'tick_count': self.tick_count,
            'state': self.state.value,
            'ant_count': len(self.ants),
            'alive_ants': self.ants.alive_count,
            'world': self.world.to_dict(),
            'ants': self.ants.to_dict(),
            'events': [event.to_dict() for event in self.events],
            'timing': self.get_tick_stats()
        }

    def print_tick_summary(self):
        """Print tick summary to console (lightweight monitoring)"""
        stats = self.get_tick_stats()
        print(f"Tick {stats['tick_count']:5d} | "
              f"Avg: {stats['avg_tick_time_ms']:6.3f} ms | "
              f"Last: {stats['last_tick_time_ms']:6.3f} ms | "
              f"Ants alive: {self.ants.alive_count} | "
              f"Colonies alive: {self.world.num_alive}")

    def print_perf_breakdown(self):
        """Print average per-phase timings over the rolling window."""
        stats = self.get_tick_stats()
        if stats['window'] == 0:
            return

        avg_movement = stats['movement_ms']
        avg_collision = stats['collision_ms']
        avg_cleanup = stats['cleanup_ms']
        avg_total = stats['avg_tick_time_ms']

        print(f"\n[Perf Breakdown] Tick {self.tick_count} ({len(self.ants)} ants, "
              f"last {stats['window']} ticks)")
        print(f"  Movement:     {avg_movement:6.3f} ms")
        print(f"  Collision:    {avg_collision:6.3f} ms")
        print(f"  Cleanup:      {avg_cleanup:6.3f} ms")
        print(f"  Total:        {avg_total:6.3f} ms")
        print(f"  Overhead:     {(avg_total - avg_movement - avg_collision - avg_cleanup):6.3f} ms")


def run_simulation_phase(
    n_ants: int,
    map_path: Union[str, Path],
    config: Optional[SimulationConfig] = None,
    max_ticks: Optional[int] = None,
    verbose: bool = False
) -> Tuple[float, SimulationResult]:
    """
    Build the world, spawn ants, run the simulation and print the final state.

    Only the tick loop is timed; world construction and spawning are not.

    Returns:
        (elapsed seconds of the tick loop, SimulationResult)
    """
    config = config or SimulationConfig()

    world = load_map(map_path)
    ants = spawn_ants(world, n_ants, seed=config.spawn_seed)

    with AntManiaSimulation(world, ants, config, verbose=verbose) as sim:
        result = sim.run(max_ticks=max_ticks)
        if verbose:
            sim.print_perf_breakdown()

    print("Final world state:")
    print_world(world)

    return result.elapsed_seconds, result

"""
Simulation latency benchmark across ant counts.

Measures the tick loop only (world build and spawning excluded), the same
way run_simulation_phase() reports latency.
"""

# Pin threading for stable measurement
import os
os.environ.update({
    'OPENBLAS_NUM_THREADS': '1',
    'MKL_NUM_THREADS': '1',
    'NUMEXPR_NUM_THREADS': '1',
    'OMP_NUM_THREADS': '1'
})

import argparse
import gc
import numpy as np

from antmania.loader import parse_map
from antmania.spawning import spawn_ants
from antmania.simulation import AntManiaSimulation
from antmania.data_types import SimulationConfig


def build_grid_map(width: int, height: int) -> str:
    """Grid map text, every neighbour pair linked both ways."""
    lines = []
    for y in range(height):
        for x in range(width):
            tokens = [f"C{x}_{y}"]
            if y > 0:
                tokens.append(f"north=C{x}_{y - 1}")
            if y < height - 1:
                tokens.append(f"south=C{x}_{y + 1}")
            if x < width - 1:
                tokens.append(f"east=C{x + 1}_{y}")
            if x > 0:
                tokens.append(f"west=C{x - 1}_{y}")
            lines.append(" ".join(tokens))
    return "\n".join(lines)


def run_simulation_perf_test(map_text: str, ant_count: int, runs: int, config: SimulationConfig) -> dict:
    """
    Run the full simulation `runs` times on a fresh world each time.

    Returns:
        Dict with latency percentiles and the outcome of the last run
    """
    times_s = []
    result = None

    for _ in range(runs):
        world = parse_map(map_text)
        ants = spawn_ants(world, ant_count, seed=config.spawn_seed)

        gc.collect()
        with AntManiaSimulation(world, ants, config, report=None) as sim:
            result = sim.run()
        times_s.append(result.elapsed_seconds)

    times_ms = np.array(times_s) * 1000.0

    return {
        'ant_count': ant_count,
        'runs': runs,
        'p50_ms': np.percentile(times_ms, 50),
        'p90_ms': np.percentile(times_ms, 90),
        'min_ms': np.min(times_ms),
        'max_ms': np.max(times_ms),
        'ticks': result.ticks,
        'reason': result.reason.value,
        'destroyed': len(result.destroyed_colonies),
    }


def main():
    """Run multi-N simulation latency benchmark."""
    parser = argparse.ArgumentParser(description="Ant mania simulation benchmark")
    parser.add_argument("--width", type=int, default=100)
    parser.add_argument("--height", type=int, default=100)
    parser.add_argument("--runs", type=int, default=5)
    parser.add_argument("--sizes", type=int, nargs="+", default=[100, 1000, 10_000])
    parser.add_argument("--workers", type=int, default=SimulationConfig().workers)
    args = parser.parse_args()

    map_text = build_grid_map(args.width, args.height)
    config = SimulationConfig(workers=args.workers)

    print("=" * 80)
    print(f"Ant Mania Simulation Benchmark ({args.width}x{args.height} grid, "
          f"{args.workers} workers, chunk_size={config.chunk_size})")
    print("=" * 80)
    print()

    results = []

    for ant_count in args.sizes:
        print(f"[N = {ant_count}]")

        result = run_simulation_perf_test(map_text, ant_count, args.runs, config)

        print(f"  p50: {result['p50_ms']:.3f}ms")
        print(f"  p90: {result['p90_ms']:.3f}ms")
        print(f"  min: {result['min_ms']:.3f}ms, max: {result['max_ms']:.3f}ms")
        print(f"  Ticks: {result['ticks']} ({result['reason']}), Destroyed: {result['destroyed']}")

        results.append(result)
        print()

    print("=" * 80)
    print("Summary Table")
    print("=" * 80)
    print()
    print("|     Ants | p50 (ms) | p90 (ms) |  Ticks | Destroyed |")
    print("|----------|----------|----------|--------|-----------|")
    for r in results:
        print(f"| {r['ant_count']:8d} | {r['p50_ms']:8.3f} | {r['p90_ms']:8.3f} | "
              f"{r['ticks']:6d} | {r['destroyed']:9d} |")

    print()
    print("=" * 80)


if __name__ == '__main__':
    main()

"""
Command-line entry point.

Usage:
    antmania <num_ants> [--map PATH] [--config PATH] [--max-ticks N] [--verbose]
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .loader import DataLoadError, load_config
from .spawning import SpawnError
from .simulation import run_simulation_phase
from .constants import DEFAULT_MAP_FILE


def _ant_count(value: str) -> int:
    try:
        count = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}")
    if count < 0:
        raise argparse.ArgumentTypeError(f"ant count must be >= 0, got {count}")
    return count


def _tick_limit(value: str) -> int:
    try:
        limit = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}")
    if limit < 1:
        raise argparse.ArgumentTypeError(f"tick limit must be >= 1, got {limit}")
    return limit


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="antmania",
        description="Simulate ants wandering a colony map until they destroy it or tire out"
    )
    parser.add_argument("num_ants", type=_ant_count, help="Number of ants to spawn")
    parser.add_argument("--map", type=Path, default=Path(DEFAULT_MAP_FILE),
                        help=f"Map file (default: {DEFAULT_MAP_FILE})")
    parser.add_argument("--config", type=Path, default=None,
                        help="YAML file overriding simulation constants")
    parser.add_argument("--max-ticks", type=_tick_limit, default=None,
                        help="Stop after N ticks even if no terminal state was reached")
    parser.add_argument("--verbose", action="store_true",
                        help="Print diagnostics, tick summaries and a phase timing breakdown")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config) if args.config else None
        elapsed, _ = run_simulation_phase(
            args.num_ants,
            args.map,
            config=config,
            max_ticks=args.max_ticks,
            verbose=args.verbose
        )
    except (DataLoadError, SpawnError) as e:
        print(f"[FAIL] {e}", file=sys.stderr)
        return 1

    print(f"Simulation phase latency: {elapsed:.6f}s")
    return 0


if __name__ == '__main__':
    sys.exit(main())

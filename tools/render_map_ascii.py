#!/usr/bin/env python3
"""
Render a generated map as ASCII art for debugging.

Usage:
    uv run tools/render_map_ascii.py [--width N] [--height N] [--seed S]
"""

import argparse
import sys
from pathlib import Path

import numpy as np

# Add parent directory to path so we can import mapgen
sys.path.insert(0, str(Path(__file__).parent.parent))

from mapgen.map_gen import (
    DEFAULT_EXCESS_HALLWAY_MODIFIER,
    DEFAULT_INFLATION_BIAS,
    DEFAULT_INFLATION_DECAY,
    DEFAULT_ROOM_BIAS,
    GeneratorConfig,
    MapGenerator,
)
from mapgen.tiles import TileKind


def main():
    parser = argparse.ArgumentParser(description="Render a generated map as ASCII art")
    parser.add_argument("--width", type=int, default=20, help="Map width in tiles")
    parser.add_argument("--height", type=int, default=12, help="Map height in tiles")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible generation")
    parser.add_argument("--room-bias", type=float, default=DEFAULT_ROOM_BIAS)
    parser.add_argument("--inflation-bias", type=float, default=DEFAULT_INFLATION_BIAS)
    parser.add_argument("--inflation-decay", type=float, default=DEFAULT_INFLATION_DECAY)
    parser.add_argument(
        "--excess-hallway",
        type=float,
        default=DEFAULT_EXCESS_HALLWAY_MODIFIER,
        help="Probability of keeping a corridor between already connected rooms",
    )
    parser.add_argument("--verbose", action="store_true", help="Log each generation phase")
    args = parser.parse_args()

    config = GeneratorConfig(
        room_bias=args.room_bias,
        inflation_bias=args.inflation_bias,
        inflation_decay=args.inflation_decay,
        excess_hallway_modifier=args.excess_hallway,
    )
    generator = MapGenerator(config=config, seed=args.seed, verbose=args.verbose)
    grid = generator.generate(args.width, args.height)

    print(grid.render_ascii())

    # Print some debug info
    print(f"\n--- Debug Info ---")
    print(f"Map size: {grid.width}x{grid.height} tiles")
    print(f"Seed: {generator.last_seed}")
    print(f"Seeds placed: {len(grid.seeds)}")
    print(f"Rooms: {grid.list_room_ids()}")
    print(f"Hallway tiles: {int(np.count_nonzero(grid.kinds == TileKind.HALLWAY))}")


if __name__ == "__main__":
    main()

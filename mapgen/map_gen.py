"""
Map Generation Algorithm
========================

We grow the map from randomly scattered single-tile rooms.

1. Seeding: visit every tile in row-major order and turn it into a new
   single-tile room with probability room_bias. Every such tile is a "seed".
2. Seed merging: seeds that touch each other are fused into one room by a
   depth-first flood fill that copies the room id and opens the passages it
   walks through.
3. Growth: rooms inflate outwards one generation at a time. Every room tile
   of the current generation tries to claim each neighboring rock tile with
   probability inflation_bias - inflation_decay * generation, so growth
   slows down and eventually stops.
4. Corridor linking: for every pair of seeds, carve a hallway with a biased
   random walk from one to the other. If the two are already connected, the
   corridor is usually skipped; it is only kept with probability
   excess_hallway_modifier.

All randomness comes from a single random.Random owned by one generate()
call, so the same seed and dimensions always reproduce the same map.
"""

import numbers
import random
import sys
import time
from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterator, List, Optional, Set, Tuple

from .connectivity import count_seed_regions, flood_fill
from .grid import Grid
from .tiles import NO_ROOM, Direction, Position, TileKind

DEFAULT_ROOM_BIAS: float = 0.1
DEFAULT_INFLATION_BIAS: float = 0.7
DEFAULT_INFLATION_DECAY: float = 0.2
DEFAULT_EXCESS_HALLWAY_MODIFIER: float = 0.1

# Auto-derived seeds are kept in the positive 31-bit range
SEED_MASK = 0x7FFFFFFF


@dataclass
class GeneratorConfig:
    """
    Tunables for map generation.

    Attributes:
        room_bias: Probability that a tile becomes a seed room
        inflation_bias: Growth probability of the first generation
        inflation_decay: Amount the growth probability drops per generation
        excess_hallway_modifier: Probability of keeping a corridor between
            two seeds that are already connected
    """

    room_bias: float = DEFAULT_ROOM_BIAS
    inflation_bias: float = DEFAULT_INFLATION_BIAS
    inflation_decay: float = DEFAULT_INFLATION_DECAY
    excess_hallway_modifier: float = DEFAULT_EXCESS_HALLWAY_MODIFIER

    def __post_init__(self) -> None:
        if not 0.0 <= self.room_bias <= 1.0:
            raise ValueError(f"room_bias must be within [0, 1], got {self.room_bias}")
        if not 0.0 <= self.excess_hallway_modifier <= 1.0:
            raise ValueError(
                "excess_hallway_modifier must be within [0, 1], "
                f"got {self.excess_hallway_modifier}"
            )
        if self.inflation_decay < 0.0:
            raise ValueError(
                f"inflation_decay must not be negative, got {self.inflation_decay}"
            )


def _toward(delta: int) -> int:
    return 1 if delta > 0 else -1


class MapGenerator:
    """Seedable generator producing fully connected tile maps."""

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        seed: Optional[int] = None,
        verbose: bool = False,
    ) -> None:
        self.config: GeneratorConfig = config if config is not None else GeneratorConfig()
        self.verbose: bool = verbose

        self._seed: Optional[int] = seed
        self._last_seed: Optional[int] = None

    @property
    def last_seed(self) -> Optional[int]:
        """The seed used by the most recent generate() call."""
        return self._last_seed

    def set_random_seed(self, seed: Optional[int]) -> None:
        """Fix the seed for subsequent runs. None goes back to time-based seeds."""
        self._seed = seed

    def _log(self, message: str) -> None:
        if self.verbose:
            print(message, file=sys.stderr)

    def generate(self, width: int, height: int) -> Grid:
        """
        Generate a map of the given size.

        Returns:
            A frozen Grid. The seed that produced it is available afterwards
            as last_seed.

        Raises:
            ValueError: If width or height is not a positive integer.
        """
        for name, value in (("width", width), ("height", height)):
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        width, height = int(width), int(height)

        seed = self._seed
        if seed is None:
            seed = time.time_ns() & SEED_MASK
        self._last_seed = seed
        rng = random.Random(seed)

        self._log(f"Generating {width}x{height} map with seed {seed}...")

        grid = Grid(width, height)
        self._seed_rooms(grid, rng)
        self._merge_seeds(grid)
        self._grow_rooms(grid, rng)
        self._link_rooms(grid, rng)

        grid.freeze()
        return grid

    def _seed_rooms(self, grid: Grid, rng: random.Random) -> None:
        """Randomly place single-tile rooms, each with its own room id."""
        next_room_id = 0

        for pos in grid.positions():
            if rng.random() < self.config.room_bias:
                grid.set_tile(pos, TileKind.ROOM, next_room_id)
                grid.seeds.append(pos)
                next_room_id += 1
            else:
                grid.set_tile(pos, TileKind.IMPASSABLE, NO_ROOM)

        # A map without any room can't be linked, so force one
        if not grid.seeds:
            index = rng.randrange(grid.width * grid.height)
            pos = Position(row=index // grid.width, column=index % grid.width)
            grid.set_tile(pos, TileKind.ROOM, next_room_id)
            grid.seeds.append(pos)
            print(f"No seed rooms placed, forcing one at {pos}", file=sys.stderr)

        self._log(f"Seeding placed {len(grid.seeds)} rooms")

    def _merge_seeds(self, grid: Grid) -> None:
        """
        Fuse touching seeds into single rooms.

        Depth-first: after relabeling a neighbor, the merge continues from that
        neighbor before the remaining neighbors of the current tile are looked
        at. The explicit stack of neighbor iterators keeps exactly that order.
        """
        relabeled = 0

        for start in grid.positions():
            if grid.kind_at(start) != TileKind.ROOM:
                continue

            stack: List[Tuple[Position, Iterator[Tuple[Direction, Position]]]] = [
                (start, iter(grid.neighbors(start)))
            ]
            while stack:
                pos, pending = stack[-1]
                room_id = grid.room_id_at(pos)

                for _, neighbor in pending:
                    if (
                        grid.kind_at(neighbor) == TileKind.ROOM
                        and grid.room_id_at(neighbor) != room_id
                    ):
                        grid.open_passage(pos, neighbor)
                        grid.set_room_id(neighbor, room_id)
                        relabeled += 1
                        stack.append((neighbor, iter(grid.neighbors(neighbor))))
                        break
                else:
                    stack.pop()

        self._log(
            f"Merging relabeled {relabeled} tiles, "
            f"{len(grid.list_room_ids())} rooms remain"
        )

    def _grow_rooms(self, grid: Grid, rng: random.Random) -> None:
        """Inflate rooms into neighboring rock, one generation at a time."""
        queue: Deque[Position] = deque(
            pos for pos in grid.positions() if grid.kind_at(pos) == TileKind.ROOM
        )

        current_generation = 0
        generation_members = len(queue)
        grown = 0

        while queue:
            chance = (
                self.config.inflation_bias
                - self.config.inflation_decay * current_generation
            )

            pos = queue.popleft()
            room_id = grid.room_id_at(pos)

            for _, target in grid.neighbors(pos):
                if grid.kind_at(target) != TileKind.IMPASSABLE:
                    continue

                if rng.random() < chance:
                    grid.set_tile(target, TileKind.ROOM, room_id)
                    grid.open_passage(pos, target)
                    queue.append(target)
                    grown += 1

            # Tiles found during this generation are processed in the next one
            generation_members -= 1
            if generation_members <= 0:
                current_generation += 1
                generation_members = len(queue)

        self._log(f"Growth added {grown} tiles over {current_generation} generations")

    def _link_rooms(self, grid: Grid, rng: random.Random) -> Tuple[int, int]:
        """
        Carve corridors between every pair of seeds that needs one.

        Whether a pair is already connected is decided against the grid as
        carved so far: the region reachable from seed i is flood filled once
        and filled again after every corridor carved from it.

        Returns:
            (carved, skipped) corridor counts
        """
        seeds = grid.seeds
        if self.verbose:
            regions = count_seed_regions(grid)
            self._log(f"Linking {len(seeds)} seeds spread over {regions} regions")
        carved = 0
        skipped = 0

        for i in range(len(seeds)):
            region: Optional[Set[Position]] = None

            for j in range(i + 1, len(seeds)):
                if region is None:
                    region = set(flood_fill(grid, seeds[i]))

                if (
                    seeds[j] in region
                    and rng.random() > self.config.excess_hallway_modifier
                ):
                    skipped += 1
                    continue

                self._carve_corridor(grid, rng, seeds[i], seeds[j])
                carved += 1
                region = None

        self._log(f"Linking carved {carved} corridors, skipped {skipped}")
        return carved, skipped

    def _carve_corridor(
        self, grid: Grid, rng: random.Random, source: Position, target: Position
    ) -> int:
        """
        Walk from source to target, turning rock into hallway on the way.

        Each step moves one column towards the target with probability
        |dx / (dx + dy)| and one row otherwise. When dx + dy is zero the
        step is a coin flip.

        Returns:
            The number of tiles that became hallway.
        """
        carved = 0
        current = source

        while current != target:
            dx = target.column - current.column
            dy = target.row - current.row

            if dx + dy == 0:
                chance = 0.5
            else:
                chance = abs(dx / (dx + dy))

            if rng.random() < chance:
                step = Position(row=0, column=_toward(dx))
            else:
                step = Position(row=_toward(dy), column=0)

            following = current + step
            if grid.kind_at(following) == TileKind.IMPASSABLE:
                grid.set_tile(following, TileKind.HALLWAY, NO_ROOM)
                carved += 1

            grid.open_passage(current, following)
            current = following

        return carved


def generate_map(
    width: int,
    height: int,
    seed: Optional[int] = None,
    config: Optional[GeneratorConfig] = None,
) -> Grid:
    """
    Generates a map with a throwaway MapGenerator.

    Parameters:
        width: Number of tile columns
        height: Number of tile rows
        seed: Random seed; a time-based one is used when omitted
        config: Tunables, defaults to GeneratorConfig()

    Returns:
        The generated, frozen Grid
    """
    return MapGenerator(config=config, seed=seed).generate(width, height)

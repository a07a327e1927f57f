"""
The map grid produced by the generator, and its read-side queries.
"""

import random
from typing import Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from .connectivity import flood_fill
from .connectivity import is_connected as _is_connected
from .tiles import (
    NEIGHBOR_OFFSETS,
    NO_ROOM,
    Direction,
    Position,
    Tile,
    TileKind,
    direction_between,
)

GridKey = Union[Position, Tuple[int, int]]

# Debug dump tokens, three characters wide like the zero-padded room ids
IMPASSABLE_TOKEN = "---"
HALLWAY_TOKEN = "HHH"


class RoomNotFoundError(LookupError):
    """Raised when a room id belongs to no surviving seed."""


def _as_position(key: GridKey) -> Position:
    if isinstance(key, Position):
        return key
    row, column = key
    return Position(row=row, column=column)


class Grid:
    """
    A width x height map of tiles plus the seeds the rooms grew from.

    Tile state is stored in three numpy arrays of shape (height, width),
    indexed [row, column]:

        kinds:     TileKind values
        room_ids:  room id per tile, NO_ROOM for rock and hallways
        passages:  4-bit mask of opened edges (see Direction.bit)
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")

        self.kinds: np.ndarray = np.full(
            (height, width), TileKind.IMPASSABLE, dtype=np.int8
        )
        self.room_ids: np.ndarray = np.full((height, width), NO_ROOM, dtype=np.int32)
        self.passages: np.ndarray = np.zeros((height, width), dtype=np.uint8)

        # Seed coordinates in placement order
        self.seeds: Sequence[Position] = []

    @property
    def width(self) -> int:
        return self.kinds.shape[1]

    @property
    def height(self) -> int:
        return self.kinds.shape[0]

    def __getitem__(self, key: GridKey) -> Tile:
        pos = _as_position(key)
        if not self.in_bounds(pos):
            raise IndexError(f"{pos} is outside the {self.width}x{self.height} grid")
        return Tile(
            kind=TileKind(int(self.kinds[pos.row, pos.column])),
            room_id=int(self.room_ids[pos.row, pos.column]),
            passages=int(self.passages[pos.row, pos.column]),
        )

    def __str__(self) -> str:
        return self.render_ascii()

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height}, seeds={len(self.seeds)})"

    def positions(self) -> Iterator[Position]:
        """Yield every position in row-major order."""
        for row in range(self.height):
            for column in range(self.width):
                yield Position(row=row, column=column)

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.row < self.height and 0 <= pos.column < self.width

    def kind_at(self, pos: Position) -> TileKind:
        return TileKind(int(self.kinds[pos.row, pos.column]))

    def room_id_at(self, pos: Position) -> int:
        return int(self.room_ids[pos.row, pos.column])

    def is_passable(self, pos: Position) -> bool:
        return self.kinds[pos.row, pos.column] != TileKind.IMPASSABLE

    def neighbors(self, pos: Position) -> List[Tuple[Direction, Position]]:
        """
        Return the in-bounds orthogonal neighbors of a tile.

        Neighbors are listed North, South, West, East. Positions off the edge
        of the grid are left out rather than reported as errors.
        """
        height, width = self.kinds.shape
        result: List[Tuple[Direction, Position]] = []
        for direction, dr, dc in NEIGHBOR_OFFSETS:
            row = pos.row + dr
            column = pos.column + dc
            if 0 <= row < height and 0 <= column < width:
                result.append((direction, Position(row=row, column=column)))
        return result

    # Mutators, used while the generator owns the grid

    def set_tile(self, pos: Position, kind: TileKind, room_id: int = NO_ROOM) -> None:
        """Reclassify a tile. Its passages are reset to all closed."""
        self.kinds[pos.row, pos.column] = kind
        self.room_ids[pos.row, pos.column] = room_id
        self.passages[pos.row, pos.column] = 0

    def set_room_id(self, pos: Position, room_id: int) -> None:
        self.room_ids[pos.row, pos.column] = room_id

    def open_passage(self, source: Position, target: Position) -> Direction:
        """
        Open the edge between two orthogonal neighbors on both sides.

        Returns:
            The direction leading from source to target.

        Raises:
            ValueError: If the positions are not orthogonal neighbors.
        """
        direction = direction_between(source, target)
        self.passages[source.row, source.column] |= direction.bit
        self.passages[target.row, target.column] |= direction.opposite().bit
        return direction

    def freeze(self) -> None:
        """Make the tile arrays and the seed list read-only."""
        for array in (self.kinds, self.room_ids, self.passages):
            array.setflags(write=False)
        self.seeds = tuple(self.seeds)

    # Queries

    def is_connected(self, source: Position, target: Position) -> bool:
        """True if target is reachable from source over passable tiles."""
        return _is_connected(self, source, target)

    def list_room_ids(self) -> List[int]:
        """Return the distinct room ids found at the seeds, in first-seen order."""
        room_ids: List[int] = []
        for seed in self.seeds:
            room_id = self.room_id_at(seed)
            if room_id not in room_ids:
                room_ids.append(room_id)
        return room_ids

    def points_in_room(self, room_id: int) -> List[Position]:
        """
        Return every tile belonging to the given room.

        The search starts from the first seed currently carrying the room id
        and walks all passable tiles, including those of other rooms and
        hallways, keeping only the tiles whose id matches.

        Raises:
            RoomNotFoundError: If no seed carries the room id.
        """
        start: Optional[Position] = None
        for seed in self.seeds:
            if self.room_id_at(seed) == room_id:
                start = seed
                break

        if start is None:
            raise RoomNotFoundError(f"Room {room_id} does not exist")

        return [pos for pos in flood_fill(self, start) if self.room_id_at(pos) == room_id]

    def random_point_in_room(
        self, room_id: int, rng: Optional[random.Random] = None
    ) -> Position:
        """Pick a uniformly random tile of the given room."""
        points = self.points_in_room(room_id)
        chooser = rng if rng is not None else random
        return chooser.choice(points)

    def render_ascii(self) -> str:
        """
        Render the grid for debugging.

        Each cell is a three character token followed by a space: room ids
        zero-padded, hallways as HHH and rock as ---.
        """
        lines = []
        for row in range(self.height):
            line = ""
            for column in range(self.width):
                kind = self.kinds[row, column]
                if kind == TileKind.ROOM:
                    token = f"{int(self.room_ids[row, column]):03d}"
                elif kind == TileKind.HALLWAY:
                    token = HALLWAY_TOKEN
                else:
                    token = IMPASSABLE_TOKEN
                line += token + " "
            lines.append(line)
        return "\n".join(lines)

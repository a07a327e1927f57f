"""
Tile model for generated maps.

Every cell of a map is one of three kinds. Room and hallway cells can be
walked on; impassable cells are solid rock. On top of the kind, each cell
carries a 4-bit passage mask, one bit per cardinal direction, recording
which edges the generator explicitly opened.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum


class TileKind(IntEnum):
    """Classification of a map cell."""

    IMPASSABLE = 0
    ROOM = 1
    HALLWAY = 2


# Room id carried by cells that belong to no room (rock and hallways)
NO_ROOM: int = -1


@dataclass(frozen=True)
class Position:
    """A position in the map grid, measured in tiles."""

    row: int
    column: int

    def __add__(self, other: "Position") -> "Position":
        return Position(row=self.row + other.row, column=self.column + other.column)


class Direction(Enum):
    """Cardinal directions for passages between neighboring tiles."""

    NORTH = 1
    SOUTH = 2
    WEST = 4
    EAST = 8

    @property
    def bit(self) -> int:
        """This direction's bit in a passage mask."""
        return self.value

    def opposite(self) -> "Direction":
        """Returns the opposite direction."""
        return _OPPOSITES[self]

    def step(self) -> Position:
        """Returns the Position offset for moving one step in this direction."""
        return _STEPS[self]


_OPPOSITES = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
}

_STEPS = {
    Direction.NORTH: Position(row=-1, column=0),
    Direction.SOUTH: Position(row=1, column=0),
    Direction.EAST: Position(row=0, column=1),
    Direction.WEST: Position(row=0, column=-1),
}

# Neighbor inspection order used everywhere draws or visits depend on it
NEIGHBOR_ORDER = (Direction.NORTH, Direction.SOUTH, Direction.WEST, Direction.EAST)

# (direction, delta_row, delta_col) in NEIGHBOR_ORDER
NEIGHBOR_OFFSETS = tuple(
    (direction, _STEPS[direction].row, _STEPS[direction].column)
    for direction in NEIGHBOR_ORDER
)


def direction_between(source: Position, target: Position) -> Direction:
    """
    Return the direction leading from source to an orthogonal neighbor.

    Raises:
        ValueError: If the two positions are not orthogonally adjacent.
    """
    delta = (target.row - source.row, target.column - source.column)
    for direction in NEIGHBOR_ORDER:
        offset = direction.step()
        if delta == (offset.row, offset.column):
            return direction
    raise ValueError(f"{source} and {target} are not orthogonal neighbors")


@dataclass(frozen=True)
class Tile:
    """A read-only snapshot of one map cell."""

    kind: TileKind
    room_id: int = NO_ROOM
    passages: int = 0

    @property
    def is_passable(self) -> bool:
        return self.kind != TileKind.IMPASSABLE

    def has_passage(self, direction: Direction) -> bool:
        """True if movement across the given edge was opened by the generator."""
        return bool(self.passages & direction.bit)

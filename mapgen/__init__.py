"""Tile map generation module."""

from mapgen.tiles import (
    NO_ROOM,
    Direction,
    Position,
    Tile,
    TileKind,
)
from mapgen.grid import Grid, RoomNotFoundError
from mapgen.connectivity import (
    all_seeds_connected,
    count_seed_regions,
    flood_fill,
    is_connected,
)
from mapgen.map_gen import GeneratorConfig, MapGenerator, generate_map

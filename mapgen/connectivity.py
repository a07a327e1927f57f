"""
Reachability checks over generated maps.

Reachability is decided by tile kind alone: any room or hallway tile can be
entered from an orthogonal neighbor. Passage flags are not consulted.
"""

from collections import deque
from typing import Deque, List, Optional, Set, Tuple, TYPE_CHECKING

from .tiles import NEIGHBOR_OFFSETS, Position, TileKind

if TYPE_CHECKING:
    from .grid import Grid


def _passable_mask(grid: "Grid") -> List[List[bool]]:
    """Row lists of passable flags, one lookup per tile instead of numpy scalars."""
    return (grid.kinds != TileKind.IMPASSABLE).tolist()


def _bfs(
    passable: List[List[bool]],
    start: Tuple[int, int],
    goal: Optional[Tuple[int, int]] = None,
) -> Tuple[List[Tuple[int, int]], bool]:
    """
    Breadth-first walk over passable tiles from start.

    Returns the (row, col) tiles visited in BFS order and whether goal was
    reached. The walk stops as soon as goal is reached.
    """
    rows = len(passable)
    cols = len(passable[0])

    queue: Deque[Tuple[int, int]] = deque([start])
    visited: Set[Tuple[int, int]] = {start}
    order: List[Tuple[int, int]] = []

    while queue:
        current_row, current_col = queue.popleft()
        order.append((current_row, current_col))

        for _, dr, dc in NEIGHBOR_OFFSETS:
            next_row = current_row + dr
            next_col = current_col + dc

            if not (0 <= next_row < rows and 0 <= next_col < cols):
                continue

            next_tile = (next_row, next_col)
            if next_tile in visited or not passable[next_row][next_col]:
                continue

            if next_tile == goal:
                return order, True

            visited.add(next_tile)
            queue.append(next_tile)

    return order, False


def is_connected(grid: "Grid", source: Position, target: Position) -> bool:
    """
    Check whether target can be reached from source using BFS.

    Args:
        grid: The map to search
        source: Starting tile
        target: Tile to reach

    Returns:
        True as soon as the target is reached, False once the frontier is
        exhausted without reaching it.
    """
    if source == target:
        return True

    _, found = _bfs(
        _passable_mask(grid),
        (source.row, source.column),
        goal=(target.row, target.column),
    )
    return found


def flood_fill(grid: "Grid", start: Position) -> List[Position]:
    """
    Return every passable tile reachable from start, in BFS order.

    The start tile is always the first element.
    """
    order, _ = _bfs(_passable_mask(grid), (start.row, start.column))
    return [Position(row=row, column=column) for row, column in order]


def all_seeds_connected(grid: "Grid") -> bool:
    """True if every seed of the grid is reachable from the first one."""
    if len(grid.seeds) < 2:
        return True

    reachable = set(flood_fill(grid, grid.seeds[0]))
    return all(seed in reachable for seed in grid.seeds)


def count_seed_regions(grid: "Grid") -> int:
    """Number of separate passable regions the seeds are spread over."""
    passable = _passable_mask(grid)
    covered: Set[Tuple[int, int]] = set()
    regions = 0

    for seed in grid.seeds:
        tile = (seed.row, seed.column)
        if tile in covered:
            continue
        order, _ = _bfs(passable, tile)
        covered.update(order)
        regions += 1

    return regions

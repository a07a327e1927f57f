"""Tests for the tile model."""

import pytest

from mapgen.tiles import (
    NEIGHBOR_OFFSETS,
    NEIGHBOR_ORDER,
    NO_ROOM,
    Direction,
    Position,
    Tile,
    TileKind,
    direction_between,
)


class TestDirection:
    """Tests for Direction helpers."""

    @pytest.mark.parametrize("direction", list(Direction))
    def test_opposite_is_symmetric(self, direction):
        assert direction.opposite().opposite() is direction
        assert direction.opposite() is not direction

    @pytest.mark.parametrize("direction", list(Direction))
    def test_step_and_opposite_cancel(self, direction):
        origin = Position(row=3, column=3)
        assert origin + direction.step() + direction.opposite().step() == origin

    def test_north_decreases_row(self):
        assert Direction.NORTH.step() == Position(row=-1, column=0)
        assert Direction.EAST.step() == Position(row=0, column=1)

    def test_bits_form_a_four_bit_mask(self):
        bits = [direction.bit for direction in Direction]
        assert sorted(bits) == [1, 2, 4, 8]

    def test_neighbor_order(self):
        assert NEIGHBOR_ORDER == (
            Direction.NORTH,
            Direction.SOUTH,
            Direction.WEST,
            Direction.EAST,
        )

    def test_steps_are_shared(self):
        """step() hands out the same offset objects on every call."""
        assert Direction.NORTH.step() is Direction.NORTH.step()

    def test_neighbor_offsets_follow_neighbor_order(self):
        assert [direction for direction, _, _ in NEIGHBOR_OFFSETS] == list(NEIGHBOR_ORDER)
        for direction, dr, dc in NEIGHBOR_OFFSETS:
            assert direction.step() == Position(row=dr, column=dc)


class TestDirectionBetween:
    """Tests for direction_between."""

    @pytest.mark.parametrize("direction", list(Direction))
    def test_neighbor_direction(self, direction):
        source = Position(row=5, column=5)
        assert direction_between(source, source + direction.step()) is direction

    @pytest.mark.parametrize("target", [
        Position(row=5, column=5),
        Position(row=6, column=6),
        Position(row=5, column=7),
    ])
    def test_non_neighbor_raises(self, target):
        with pytest.raises(ValueError, match="not orthogonal neighbors"):
            direction_between(Position(row=5, column=5), target)


class TestTile:
    """Tests for Tile snapshots."""

    def test_defaults_are_closed_rock(self):
        tile = Tile(kind=TileKind.IMPASSABLE)

        assert tile.room_id == NO_ROOM
        assert not tile.is_passable
        assert not any(tile.has_passage(direction) for direction in Direction)

    def test_has_passage_reads_mask(self):
        tile = Tile(
            kind=TileKind.ROOM,
            room_id=3,
            passages=Direction.NORTH.bit | Direction.EAST.bit,
        )

        assert tile.has_passage(Direction.NORTH)
        assert tile.has_passage(Direction.EAST)
        assert not tile.has_passage(Direction.SOUTH)
        assert not tile.has_passage(Direction.WEST)

    @pytest.mark.parametrize("kind", [TileKind.ROOM, TileKind.HALLWAY])
    def test_room_and_hallway_are_passable(self, kind):
        assert Tile(kind=kind).is_passable

"""Tests for map generation and rejection-sampled placement."""

from __future__ import annotations

import math
import random

import pytest

from rally.chase.entities import ItemType, TileType
from rally.chase.map_gen import OUT_OF_BOUNDS_TILE, generate_map, place_objects
from tests.conftest import make_tiles

pytestmark = pytest.mark.unit


class TestGenerateMap:

    def test_dimensions(self):
        tiles = generate_map(40, 40)
        assert tiles.width == 40
        assert tiles.height == 40
        assert all(len(row) == 40 for row in tiles.rows)

    def test_border_is_wall(self):
        tiles = generate_map(40, 30)
        for x in range(40):
            assert tiles.tile(x, 0).type is TileType.WALL
            assert tiles.tile(x, 29).type is TileType.WALL
        for y in range(30):
            assert tiles.tile(0, y).type is TileType.WALL
            assert tiles.tile(39, y).type is TileType.WALL

    def test_lattice_walls(self):
        tiles = generate_map(40, 40)
        assert tiles.tile(4, 4).type is TileType.WALL
        assert tiles.tile(8, 12).type is TileType.WALL
        assert tiles.tile(4, 5).type is TileType.ROAD
        assert tiles.tile(1, 1).type is TileType.ROAD
        assert tiles.tile(5, 8).type is TileType.ROAD

    def test_elevation_normalized(self):
        tiles = generate_map(40, 40, random.Random(7))
        for row in tiles.rows:
            for t in row:
                assert 0.0 <= t.elevation <= 1.0

    def test_unseeded_uses_reference_waves(self):
        tiles = generate_map(10, 10)
        expected = (math.sin(0.6) + math.cos(1.0) + math.sin(0.8) + 3) / 6
        assert tiles.tile(3, 5).elevation == pytest.approx(expected)
        assert tiles.tile(0, 0).elevation == pytest.approx(4 / 6)

    def test_same_seed_same_map(self):
        a = generate_map(40, 40, random.Random(99))
        b = generate_map(40, 40, random.Random(99))
        assert a.rows == b.rows

    def test_different_seed_different_elevation(self):
        a = generate_map(40, 40, random.Random(1))
        b = generate_map(40, 40, random.Random(2))
        assert a.rows != b.rows

    def test_enough_road(self):
        tiles = generate_map(40, 40)
        assert tiles.count(TileType.ROAD) >= 5 + 2 * 10 + 15


class TestTileLookup:

    def test_tile_at_maps_world_to_grid(self):
        tiles = generate_map(40, 40)
        assert tiles.tile_index(100, 200) == (1, 3)
        assert tiles.tile_at(100, 200) == tiles.tile(1, 3)

    @pytest.mark.parametrize("x,y", [(-1, 10), (10, -1), (64 * 40, 10), (10, 64 * 40 + 5)])
    def test_out_of_bounds_is_neutral_wall(self, x, y):
        tiles = generate_map(40, 40)
        t = tiles.tile_at(x, y)
        assert t is OUT_OF_BOUNDS_TILE
        assert t.type is TileType.WALL
        assert t.elevation == 0.5

    def test_tile_center(self):
        tiles = make_tiles()
        c = tiles.tile_center(2, 3)
        assert (c.x, c.y) == (160, 224)


class TestPlaceObjects:

    def test_counts_and_ids(self):
        tiles = generate_map(40, 40)
        objects = place_objects(tiles, 7, 15, random.Random(3))
        flags = [o for o in objects if o.type is ItemType.FLAG]
        items = [o for o in objects if o.type is not ItemType.FLAG]
        assert len(flags) == 7
        assert len(items) == 15
        assert sorted(o.id for o in flags) == sorted(f"flag-{n}" for n in range(7))
        assert sorted(o.id for o in items) == sorted(f"item-{n}" for n in range(15))
        assert len({o.id for o in objects}) == len(objects)

    def test_items_are_fuel_or_smoke(self):
        tiles = generate_map(40, 40)
        objects = place_objects(tiles, 0, 15, random.Random(4))
        assert {o.type for o in objects} <= {ItemType.FUEL, ItemType.SMOKE}

    def test_only_on_road_tile_centers(self):
        tiles = generate_map(40, 40)
        for obj in place_objects(tiles, 9, 15, random.Random(5)):
            assert tiles.tile_at(obj.pos.x, obj.pos.y).type is TileType.ROAD
            assert obj.pos.x % 64 == 32
            assert obj.pos.y % 64 == 32

    def test_flags_keep_interior_margin(self):
        tiles = generate_map(40, 40)
        for obj in place_objects(tiles, 25, 0, random.Random(6)):
            col, row = tiles.tile_index(obj.pos.x, obj.pos.y)
            assert 2 <= col <= 37
            assert 2 <= row <= 37

    def test_one_object_per_tile_within_a_pass(self):
        tiles = generate_map(40, 40)
        objects = place_objects(tiles, 25, 15, random.Random(8))
        flag_tiles = [(o.pos.x, o.pos.y) for o in objects if o.type is ItemType.FLAG]
        item_tiles = [(o.pos.x, o.pos.y) for o in objects if o.type is not ItemType.FLAG]
        assert len(set(flag_tiles)) == len(flag_tiles)
        assert len(set(item_tiles)) == len(item_tiles)

    def test_no_road_places_nothing(self):
        walls = {(x, y) for x in range(10) for y in range(10)}
        tiles = make_tiles(walls=walls)
        assert place_objects(tiles, 7, 15, random.Random(1), max_attempts=20) == []

    def test_scarce_road_places_fewer(self):
        walls = {(x, y) for x in range(10) for y in range(10)} - {(5, 5)}
        tiles = make_tiles(walls=walls)
        objects = place_objects(tiles, 3, 0, random.Random(1), max_attempts=200)
        assert len(objects) == 1
        assert objects[0].id == "flag-0"

    def test_same_seed_same_placement(self):
        tiles = generate_map(40, 40)
        a = place_objects(tiles, 7, 15, random.Random(11))
        b = place_objects(tiles, 7, 15, random.Random(11))
        assert a == b

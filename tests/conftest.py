"""Shared fixtures for chase game tests."""

from __future__ import annotations

import pytest

from rally.chase.config import GameConfig
from rally.chase.entities import Body, Enemy, LevelState, MapTile, TileType, Vec2
from rally.chase.map_gen import TileMap
from rally.chase.simulation import new_game


def make_tiles(width: int = 10, height: int = 10, elevation: float = 0.5, walls=(), tile_size: int = 64) -> TileMap:
    """Open arena: border walls, ROAD inside, extra walls at (col, row) in `walls`"""
    rows = []
    for y in range(height):
        row = []
        for x in range(width):
            border = x == 0 or y == 0 or x == width - 1 or y == height - 1
            tile_type = TileType.WALL if border or (x, y) in walls else TileType.ROAD
            row.append(MapTile(elevation=elevation, type=tile_type))
        rows.append(row)
    return TileMap(rows, tile_size=tile_size)


def make_enemy(x: float, y: float, speed: float = 3.0) -> Enemy:
    return Enemy(body=Body(pos=Vec2(x, y), radius=20.0), speed=speed)


@pytest.fixture
def config() -> GameConfig:
    return GameConfig()


@pytest.fixture
def game(config):
    """Real level-1 game from a fixed seed"""
    return new_game(config, seed=1234)


@pytest.fixture
def arena(config):
    """Level-1 game on a flat 10x10 arena with nothing in it"""
    state = new_game(config, seed=1)
    state.tiles = make_tiles()
    state.enemies = []
    state.objects = []
    state.smokes = []
    state.level = LevelState(number=1, flags_total=7, flags_collected=0)
    return state

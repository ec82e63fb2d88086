"""Tests for gameplay configuration."""

from __future__ import annotations

import pytest

from rally.chase.config import GAME_CONFIG, GameConfig

pytestmark = pytest.mark.unit


def test_defaults_match_dict_config():
    assert GameConfig.from_dict(GAME_CONFIG) == GameConfig()


def test_round_trip_dict():
    cfg = GameConfig(map_width=20, fuel_rate=0.1)
    assert GameConfig.from_dict(cfg.to_dict()) == cfg


def test_unknown_key_rejected():
    with pytest.raises(ValueError, match="warp_speed"):
        GameConfig.from_dict({"warp_speed": 9})


@pytest.mark.parametrize("kwargs", [
    {"map_width": 2},
    {"tile_size": 0},
    {"tick_rate": 0},
    {"max_fuel": 0},
])
def test_invalid_values(kwargs):
    with pytest.raises(ValueError):
        GameConfig(**kwargs)


def test_level_scaling():
    cfg = GameConfig()
    assert cfg.flags_for_level(1) == 7
    assert cfg.flags_for_level(2) == 9
    assert cfg.enemies_for_level(1) == 4
    assert cfg.enemies_for_level(20) == 10
    assert cfg.spawn_point == (160.0, 160.0)

"""
Gameplay configuration for the chase game
"""

from __future__ import annotations

from dataclasses import dataclass, fields, asdict
from typing import Any, Dict


# Gameplay constants
GAME_CONFIG = {
    "tile_size": 64,
    "map_width": 40,          # tiles
    "map_height": 40,         # tiles
    "screen_width": 800,
    "screen_height": 600,
    "tick_rate": 60,          # simulation ticks per second
    "player_speed": 4.0,      # px/tick
    "player_radius": 20.0,
    "start_fuel": 100.0,
    "max_fuel": 100.0,
    "fuel_rate": 0.05,        # fuel per tick
    "enemy_speed": 3.5,       # px/tick at level 0
    "enemy_speed_step": 0.2,  # added per level
    "enemy_radius": 20.0,
    "max_enemies": 10,
    "item_count": 15,
    "pickup_radius": 15.0,
    "fuel_refill": 25.0,
    "level_fuel_bonus": 40.0,
    "smoke_cost": 10.0,
    "smoke_lifetime": 180,    # ticks
    "smoke_cooldown": 6,      # ticks (~100ms at 60 FPS)
    "stun_radius": 40.0,
    "stun_duration": 180,     # ticks
    "transition_ticks": 120,  # 2s at 60 FPS
    "score_fuel": 50,
    "score_flag": 500,
    "score_smoke": 100,
    "placement_attempts": 200,  # per object
}

# Headless environment parameters
ENV_CONFIG = {
    "max_steps": 3600,  # 60s at 60 FPS
    "k_enemies": 5,
    "m_flags": 3,
}

# Reward shaping for the headless environment
REWARD_CONFIG = {
    "R_FLAG": 1.0,       # Reward for collecting a flag
    "R_FUEL": 0.2,       # Reward for a fuel can
    "R_SMOKE": 0.1,      # Reward for a smoke canister
    "R_STUN": 0.1,       # Reward per enemy stunned
    "R_LEVEL": 5.0,      # Reward for clearing a level
    "R_TIME": 0.001,     # Small time penalty
    "R_DEATH": 5.0,      # Game over penalty
}


@dataclass(frozen=True)
class GameConfig:
    """Every tunable gameplay constant; defaults match GAME_CONFIG"""
    tile_size: int = 64
    map_width: int = 40
    map_height: int = 40
    screen_width: int = 800
    screen_height: int = 600
    tick_rate: int = 60
    player_speed: float = 4.0
    player_radius: float = 20.0
    start_fuel: float = 100.0
    max_fuel: float = 100.0
    fuel_rate: float = 0.05
    enemy_speed: float = 3.5
    enemy_speed_step: float = 0.2
    enemy_radius: float = 20.0
    max_enemies: int = 10
    item_count: int = 15
    pickup_radius: float = 15.0
    fuel_refill: float = 25.0
    level_fuel_bonus: float = 40.0
    smoke_cost: float = 10.0
    smoke_lifetime: int = 180
    smoke_cooldown: int = 6
    stun_radius: float = 40.0
    stun_duration: int = 180
    transition_ticks: int = 120
    score_fuel: int = 50
    score_flag: int = 500
    score_smoke: int = 100
    placement_attempts: int = 200

    def __post_init__(self):
        if self.map_width < 3 or self.map_height < 3:
            raise ValueError(f"Map must be at least 3x3 tiles, got {self.map_width}x{self.map_height}")
        if self.tile_size <= 0:
            raise ValueError(f"tile_size must be positive, got {self.tile_size}")
        if self.tick_rate <= 0:
            raise ValueError(f"tick_rate must be positive, got {self.tick_rate}")
        if self.max_fuel <= 0:
            raise ValueError(f"max_fuel must be positive, got {self.max_fuel}")

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "GameConfig":
        """Build a config from a GAME_CONFIG-style dict"""
        known = {f.name for f in fields(cls)}
        unknown = set(config) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        return cls(**config)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def flags_for_level(self, level: int) -> int:
        return 5 + level * 2

    def enemies_for_level(self, level: int) -> int:
        return min(self.max_enemies, 3 + level)

    @property
    def spawn_point(self):
        """Player spawn at the center of tile (2, 2)"""
        return self.tile_size * 2.5, self.tile_size * 2.5

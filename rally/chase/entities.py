"""
Game entity dataclasses
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .config import GameConfig
    from .map_gen import TileMap


class TileType(str, Enum):
    ROAD = "ROAD"
    WALL = "WALL"
    GRASS = "GRASS"


class ItemType(str, Enum):
    FUEL = "FUEL"
    SMOKE = "SMOKE"
    FLAG = "FLAG"


class Phase(str, Enum):
    """Overall game state machine"""
    NOT_STARTED = "NOT_STARTED"
    PLAYING = "PLAYING"
    LEVEL_TRANSITION = "LEVEL_TRANSITION"
    GAME_OVER = "GAME_OVER"


@dataclass
class Vec2:
    x: float
    y: float

    def copy(self) -> "Vec2":
        return Vec2(self.x, self.y)


@dataclass(frozen=True)
class MapTile:
    """One map cell"""
    elevation: float  # 0.0 (valley) to 1.0 (peak)
    type: TileType


@dataclass
class Body:
    """Physical shape shared by the player and enemy vehicles"""
    pos: Vec2
    vel: Vec2 = field(default_factory=lambda: Vec2(0.0, 0.0))
    angle: float = 0.0  # radians
    radius: float = 20.0


@dataclass
class Player:
    """Player vehicle"""
    body: Body
    speed: float = 4.0
    fuel: float = 100.0
    max_fuel: float = 100.0
    score: int = 0
    items: List[ItemType] = field(default_factory=list)  # collected FUEL/SMOKE, kept across levels
    smoke_cooldown: int = 0  # ticks until the next cloud may be deployed


@dataclass
class Enemy:
    """Pursuing vehicle"""
    body: Body
    speed: float = 3.5
    stunned: bool = False
    stun_timer: int = 0


@dataclass
class GameObject:
    """Collectible item or flag"""
    id: str
    pos: Vec2
    type: ItemType


@dataclass
class SmokeCloud:
    """Stationary smoke screen"""
    pos: Vec2
    lifetime: int  # ticks left


@dataclass
class LevelState:
    number: int = 1
    flags_total: int = 0
    flags_collected: int = 0


@dataclass
class GameState:
    """Everything the simulation owns for the current level"""
    config: "GameConfig"
    tiles: "TileMap"
    player: Player
    enemies: List[Enemy] = field(default_factory=list)
    objects: List[GameObject] = field(default_factory=list)
    smokes: List[SmokeCloud] = field(default_factory=list)
    level: LevelState = field(default_factory=LevelState)
    phase: Phase = Phase.NOT_STARTED
    transition_timer: int = 0
    tick: int = 0
    rng: random.Random = field(default_factory=random.Random, repr=False)
    game_over_cause: Optional[str] = None

    @property
    def is_game_over(self) -> bool:
        return self.phase is Phase.GAME_OVER

    @property
    def is_level_transition(self) -> bool:
        return self.phase is Phase.LEVEL_TRANSITION

    @property
    def is_playing(self) -> bool:
        return self.phase in (Phase.PLAYING, Phase.LEVEL_TRANSITION)

    @property
    def camera(self) -> Vec2:
        """Offset that centers the player in the viewport"""
        return camera_for(self.player.body.pos, self.config.screen_width, self.config.screen_height)


def camera_for(pos: Vec2, view_w: float, view_h: float) -> Vec2:
    return Vec2(pos.x - view_w / 2, pos.y - view_h / 2)

"""
Chase simulation
----------------
One call to `step` advances a GameState by a single tick:

 1. input resolution (up > down > left > right, no diagonals)
 2. terrain-scaled speed (lower ground is faster)
 3. wall-gated player move
 4. fuel drain
 5. smoke deployment (tick-counted cooldown)
 6. item / flag collection
 7. level-clear check -> timed level transition
 8. smoke decay
 9. enemy pursuit, stun and contact
10. camera (derived from the player position on demand)

The state is mutated in place; the returned dict records what happened
during the tick.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from loguru import logger

from .config import GameConfig
from .entities import (
    Body,
    Enemy,
    GameState,
    ItemType,
    LevelState,
    Phase,
    Player,
    SmokeCloud,
    TileType,
    Vec2,
)
from .map_gen import TileMap, generate_map, place_objects
from .utils import circle_collide, distance, normalize

# Fuel is kept on a fixed decimal grid so repeated drains land exactly on zero
_FUEL_DIGITS = 6


@dataclass(frozen=True)
class InputState:
    """Keys held during a tick"""
    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False
    smoke: bool = False

    @classmethod
    def from_move(cls, move: int, smoke: bool = False) -> "InputState":
        # 0 stay, 1 up, 2 down, 3 left, 4 right
        return cls(up=move == 1, down=move == 2, left=move == 3, right=move == 4, smoke=smoke)


def resolve_direction(inputs: InputState) -> Optional[Tuple[float, float, float]]:
    """Pick one direction from the held keys: (dx, dy, facing angle)"""
    if inputs.up:
        return 0.0, -1.0, -math.pi / 2
    if inputs.down:
        return 0.0, 1.0, math.pi / 2
    if inputs.left:
        return -1.0, 0.0, math.pi
    if inputs.right:
        return 1.0, 0.0, 0.0
    return None


def terrain_factor(tiles: TileMap, pos: Vec2) -> float:
    """Speed multiplier for the tile under pos: 1.5 - elevation"""
    return 1.5 - tiles.tile_at(pos.x, pos.y).elevation


def _set_fuel(player: Player, value: float):
    player.fuel = round(min(player.max_fuel, value), _FUEL_DIGITS)


# ----------------------------
# Level setup
# ----------------------------

def make_player(config: GameConfig) -> Player:
    sx, sy = config.spawn_point
    return Player(
        body=Body(pos=Vec2(sx, sy), radius=config.player_radius),
        speed=config.player_speed,
        fuel=config.start_fuel,
        max_fuel=config.max_fuel,
    )


def make_enemies(config: GameConfig, level: int) -> List[Enemy]:
    """Enemies start in rows of five near the far corner"""
    enemies = []
    ts = config.tile_size
    for i in range(config.enemies_for_level(level)):
        x = ts * (config.map_width - 4 - (i % 5))
        y = ts * (config.map_height - 4 - i // 5)
        enemies.append(Enemy(
            body=Body(pos=Vec2(x, y), radius=config.enemy_radius),
            speed=config.enemy_speed + level * config.enemy_speed_step,
        ))
    return enemies


def init_level(state: GameState, level: int):
    """Regenerate map, enemies and objects for `level`; keep player stats"""
    config = state.config
    state.tiles = generate_map(config.map_width, config.map_height, state.rng, config.tile_size)
    state.enemies = make_enemies(config, level)
    state.objects = place_objects(
        state.tiles,
        config.flags_for_level(level),
        config.item_count,
        state.rng,
        config.placement_attempts,
    )
    state.smokes = []
    flags = sum(1 for o in state.objects if o.type is ItemType.FLAG)
    state.level = LevelState(number=level, flags_total=flags, flags_collected=0)
    state.transition_timer = 0
    state.phase = Phase.PLAYING
    logger.info(f"Level {level} started: {flags} flags, {len(state.enemies)} enemies")


def new_game(config: Optional[GameConfig] = None, seed: Optional[int] = None) -> GameState:
    """Fresh game at level 1"""
    config = config or GameConfig()
    rng = random.Random(seed)
    state = GameState(
        config=config,
        tiles=TileMap([[]], config.tile_size),
        player=make_player(config),
        rng=rng,
    )
    init_level(state, 1)
    logger.info(f"New game (seed={seed})")
    return state


def advance_level(state: GameState):
    """Move to the next level with a fuel top-up and a respawn"""
    player = state.player
    _set_fuel(player, player.fuel + state.config.level_fuel_bonus)
    sx, sy = state.config.spawn_point
    player.body.pos = Vec2(sx, sy)
    player.smoke_cooldown = 0
    init_level(state, state.level.number + 1)


# ----------------------------
# Tick
# ----------------------------

def _new_events() -> Dict[str, float]:
    return {
        "fuel": 0.0,
        "smoke_pickup": 0.0,
        "flag": 0.0,
        "smoke_deployed": 0.0,
        "stunned": 0.0,
        "level_clear": 0.0,
        "level_start": 0.0,
        "game_over": 0.0,
    }


def _end_game(state: GameState, events: Dict[str, float], cause: str):
    state.phase = Phase.GAME_OVER
    state.game_over_cause = cause
    events["game_over"] = 1.0
    logger.info(f"Game over ({cause}) at level {state.level.number}, score {state.player.score}")


def step(state: GameState, inputs: Optional[InputState] = None) -> Dict[str, float]:
    """Advance the simulation by one tick"""
    events = _new_events()
    if inputs is None:
        inputs = InputState()

    if state.phase is Phase.LEVEL_TRANSITION:
        state.tick += 1
        state.transition_timer -= 1
        if state.transition_timer <= 0:
            advance_level(state)
            events["level_start"] = 1.0
        return events

    if state.phase is not Phase.PLAYING:
        return events

    state.tick += 1
    config = state.config
    player = state.player
    body = player.body

    # --- Player movement ---
    direction = resolve_direction(inputs)
    if direction is not None:
        dx, dy, body.angle = direction
    else:
        dx, dy = 0.0, 0.0
    body.vel = Vec2(dx, dy)

    speed = player.speed * terrain_factor(state.tiles, body.pos)
    next_x = body.pos.x + dx * speed
    next_y = body.pos.y + dy * speed
    if state.tiles.tile_at(next_x, next_y).type is not TileType.WALL:
        body.pos = Vec2(next_x, next_y)

    # --- Fuel ---
    _set_fuel(player, player.fuel - config.fuel_rate)
    if player.fuel <= 0:
        _end_game(state, events, "fuel")
        return events

    # --- Smoke deployment ---
    if player.smoke_cooldown > 0:
        player.smoke_cooldown -= 1
    if inputs.smoke and player.fuel > config.smoke_cost and player.smoke_cooldown == 0:
        state.smokes.append(SmokeCloud(pos=body.pos.copy(), lifetime=config.smoke_lifetime))
        _set_fuel(player, player.fuel - config.smoke_cost)
        player.smoke_cooldown = config.smoke_cooldown
        events["smoke_deployed"] += 1.0
        logger.debug(f"Smoke deployed at ({body.pos.x:.0f}, {body.pos.y:.0f})")

    # --- Collection ---
    _collect(state, events)

    # --- Level clear ---
    if state.level.flags_collected >= state.level.flags_total:
        state.phase = Phase.LEVEL_TRANSITION
        state.transition_timer = config.transition_ticks
        events["level_clear"] = 1.0
        logger.info(f"Level {state.level.number} clear, score {player.score}")
        return events

    # --- Smoke decay ---
    for s in state.smokes:
        s.lifetime -= 1
    state.smokes = [s for s in state.smokes if s.lifetime > 0]

    # --- Enemies ---
    _update_enemies(state, events)

    return events


def _collect(state: GameState, events: Dict[str, float]):
    config = state.config
    player = state.player
    px, py = player.body.pos.x, player.body.pos.y
    reach = player.body.radius + config.pickup_radius

    remaining = []
    for obj in state.objects:
        if distance(px, py, obj.pos.x, obj.pos.y) >= reach:
            remaining.append(obj)
            continue
        if obj.type is ItemType.FUEL:
            _set_fuel(player, player.fuel + config.fuel_refill)
            player.score += config.score_fuel
            player.items.append(obj.type)
            events["fuel"] += 1.0
        elif obj.type is ItemType.FLAG:
            level = state.level
            level.flags_collected = min(level.flags_total, level.flags_collected + 1)
            player.score += config.score_flag
            events["flag"] += 1.0
        else:
            # Smoke canisters are worth points only
            player.score += config.score_smoke
            player.items.append(obj.type)
            events["smoke_pickup"] += 1.0
    state.objects = remaining


def _update_enemies(state: GameState, events: Dict[str, float]):
    config = state.config
    player = state.player
    pb = player.body

    for enemy in state.enemies:
        if enemy.stunned:
            enemy.stun_timer -= 1
            if enemy.stun_timer <= 0:
                enemy.stun_timer = 0
                enemy.stunned = False
            continue

        eb = enemy.body
        # Straight-line pursuit; walls do not block enemies
        nx, ny = normalize(pb.pos.x - eb.pos.x, pb.pos.y - eb.pos.y)
        speed = enemy.speed * terrain_factor(state.tiles, eb.pos)
        eb.vel = Vec2(nx * speed, ny * speed)
        eb.pos = Vec2(eb.pos.x + eb.vel.x, eb.pos.y + eb.vel.y)
        eb.angle = math.atan2(pb.pos.y - eb.pos.y, pb.pos.x - eb.pos.x)

        for s in state.smokes:
            if distance(s.pos.x, s.pos.y, eb.pos.x, eb.pos.y) < config.stun_radius:
                enemy.stunned = True
                enemy.stun_timer = config.stun_duration
                events["stunned"] += 1.0
                logger.debug(f"Enemy stunned at ({eb.pos.x:.0f}, {eb.pos.y:.0f})")
                break

        if circle_collide(pb.pos.x, pb.pos.y, pb.radius, eb.pos.x, eb.pos.y, eb.radius):
            _end_game(state, events, "caught")
            return

"""
Render projection
-----------------
Turns a GameState into camera-relative draw commands. Screen coordinates
are y-down like the world; the window flips them for arcade.
Nothing here mutates the state.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .entities import GameState, ItemType, TileType, Vec2, camera_for
from .utils import clamp, rotate_points

Color = Tuple[int, ...]

WALL_C = (30, 41, 59)
SMOKE_C = (220, 220, 220)
FLAG_C = (239, 68, 68)
FUEL_C = (251, 191, 36)
SMOKE_ITEM_C = (148, 163, 184)
PLAYER_C = (59, 130, 246)
PLAYER_WINDOW_C = (147, 197, 253)
ENEMY_C = (239, 68, 68)
STUNNED_C = (100, 116, 139)
WHEEL_C = (0, 0, 0)

SMOKE_DRAW_RADIUS = 30
ITEM_DRAW_RADIUS = 12

# Vehicle outline in local coordinates, facing +x
_CAR_BODY = [(-18, -12), (18, -12), (18, 12), (-18, 12)]
_CAR_WHEELS = [
    [(-14, -15), (-6, -15), (-6, -11), (-14, -11)],
    [(6, -15), (14, -15), (14, -11), (6, -11)],
    [(-14, 11), (-6, 11), (-6, 15), (-14, 15)],
    [(6, 11), (14, 11), (14, 15), (6, 15)],
]
_CAR_WINDOW = [(6, -8), (14, -8), (14, 8), (6, 8)]
_CAR_EXTENT = 22  # bounding radius used for culling

_FLAG_SHAPE = [(-5, 15), (-5, -15), (15, -8), (-5, 0)]


@dataclass
class DrawCommand:
    """One primitive in screen space"""
    kind: str  # "rect" | "circle" | "polygon" | "text"
    color: Color
    points: List[Tuple[float, float]] = field(default_factory=list)
    x: float = 0.0
    y: float = 0.0
    w: float = 0.0
    h: float = 0.0
    radius: float = 0.0
    text: str = ""


@dataclass
class HudSnapshot:
    """Read-only values for the on-screen HUD"""
    score: int
    level: int
    fuel_percent: float
    flags_collected: int
    flags_total: int
    banner: Optional[str]
    advice: str


def to_screen(pos: Vec2, camera: Vec2) -> Tuple[float, float]:
    return pos.x - camera.x, pos.y - camera.y


def _visible(x: float, y: float, extent: float, view_w: float, view_h: float) -> bool:
    return -extent <= x <= view_w + extent and -extent <= y <= view_h + extent


def _tile_color(elevation: float) -> Color:
    shade = math.floor(elevation * 100)
    return (40 + shade, int(120 - shade / 2), 40)


def _vehicle(x: float, y: float, angle: float, body_c: Color, window: bool) -> List[DrawCommand]:
    cmds = [DrawCommand("polygon", body_c, points=rotate_points(_CAR_BODY, angle, x, y))]
    if window:
        cmds.append(DrawCommand("polygon", PLAYER_WINDOW_C, points=rotate_points(_CAR_WINDOW, angle, x, y)))
    for wheel in _CAR_WHEELS:
        cmds.append(DrawCommand("polygon", WHEEL_C, points=rotate_points(wheel, angle, x, y)))
    return cmds


def project(state: GameState, viewport: Optional[Tuple[int, int]] = None) -> List[DrawCommand]:
    """Draw commands for one frame, culled to the viewport"""
    cfg = state.config
    view_w, view_h = viewport or (cfg.screen_width, cfg.screen_height)
    player = state.player
    camera = camera_for(player.body.pos, view_w, view_h)
    ts = state.tiles.tile_size
    cmds: List[DrawCommand] = []

    # Only the tiles overlapping the viewport
    first_col = max(0, math.floor(camera.x / ts))
    last_col = min(state.tiles.width - 1, math.floor((camera.x + view_w) / ts))
    first_row = max(0, math.floor(camera.y / ts))
    last_row = min(state.tiles.height - 1, math.floor((camera.y + view_h) / ts))
    for row in range(first_row, last_row + 1):
        for col in range(first_col, last_col + 1):
            tile = state.tiles.tile(col, row)
            color = WALL_C if tile.type is TileType.WALL else _tile_color(tile.elevation)
            cmds.append(DrawCommand("rect", color, x=col * ts - camera.x, y=row * ts - camera.y, w=ts, h=ts))

    for s in state.smokes:
        sx, sy = to_screen(s.pos, camera)
        if not _visible(sx, sy, SMOKE_DRAW_RADIUS, view_w, view_h):
            continue
        alpha = int(255 * clamp(s.lifetime / cfg.smoke_lifetime, 0.0, 1.0) * 0.6)
        cmds.append(DrawCommand("circle", SMOKE_C + (alpha,), x=sx, y=sy, radius=SMOKE_DRAW_RADIUS))

    for obj in state.objects:
        ox, oy = to_screen(obj.pos, camera)
        if not _visible(ox, oy, 16, view_w, view_h):
            continue
        if obj.type is ItemType.FLAG:
            cmds.append(DrawCommand("polygon", FLAG_C, points=[(ox + px, oy + py) for px, py in _FLAG_SHAPE]))
        else:
            color = FUEL_C if obj.type is ItemType.FUEL else SMOKE_ITEM_C
            label = "F" if obj.type is ItemType.FUEL else "S"
            cmds.append(DrawCommand("circle", color, x=ox, y=oy, radius=ITEM_DRAW_RADIUS))
            cmds.append(DrawCommand("text", WHEEL_C, x=ox, y=oy, text=label))

    for enemy in state.enemies:
        ex, ey = to_screen(enemy.body.pos, camera)
        if not _visible(ex, ey, _CAR_EXTENT, view_w, view_h):
            continue
        color = STUNNED_C if enemy.stunned else ENEMY_C
        cmds.extend(_vehicle(ex, ey, enemy.body.angle, color, window=False))

    px, py = to_screen(player.body.pos, camera)
    cmds.extend(_vehicle(px, py, player.body.angle, PLAYER_C, window=True))
    return cmds


def fuel_percent(state: GameState) -> float:
    player = state.player
    return clamp(100.0 * player.fuel / player.max_fuel, 0.0, 100.0)


def hud(state: GameState, advice: str = "") -> HudSnapshot:
    """HUD values plus the banner for the current phase"""
    banner = None
    if state.is_level_transition:
        banner = f"LEVEL CLEAR! GET READY FOR LEVEL {state.level.number + 1}"
    elif state.is_game_over:
        banner = f"GAME OVER - TOTAL SCORE: {state.player.score} - PRESS R"
    return HudSnapshot(
        score=state.player.score,
        level=state.level.number,
        fuel_percent=fuel_percent(state),
        flags_collected=state.level.flags_collected,
        flags_total=state.level.flags_total,
        banner=banner,
        advice=advice,
    )


def hud_lines(snapshot: HudSnapshot) -> Sequence[str]:
    lines = [
        f"LEVEL {snapshot.level}   SCORE {snapshot.score:,}",
        f"FLAGS {snapshot.flags_collected}/{snapshot.flags_total}   FUEL {snapshot.fuel_percent:.0f}%",
    ]
    if snapshot.advice and snapshot.banner is None:
        lines.append(f"TIP: {snapshot.advice}")
    return lines

"""
Arcade front end
----------------
- StateViewer draws draw commands + HUD for any GameState
- RallyWindow is the playable game: key capture, fixed-rate updates

Run:
    python -m rally.chase.viewer
"""

from __future__ import annotations

from typing import Iterable, Optional

import arcade
from loguru import logger

from .advisor import LevelAdvisor
from .config import GameConfig
from .entities import GameState
from .loop import GameSession, RESTART_KEY, SMOKE_KEY
from .render import DrawCommand, HudSnapshot, hud, hud_lines, project

KEY_NAMES = {
    arcade.key.UP: "up",
    arcade.key.DOWN: "down",
    arcade.key.LEFT: "left",
    arcade.key.RIGHT: "right",
    arcade.key.SPACE: SMOKE_KEY,
    arcade.key.R: RESTART_KEY,
}

BG_C = (0, 0, 0)
HUD_C = (220, 220, 220)
BANNER_C = (255, 255, 255)
FUEL_BAR_C = (234, 179, 8)


class StateViewer(arcade.Window):
    """Draws a GameState; y is flipped from world (down) to arcade (up)"""

    def __init__(self, width: int, height: int, title: str = "Rally Chase", update_rate: float = 1 / 60):
        super().__init__(width, height, title, update_rate=update_rate)
        arcade.set_background_color(BG_C)
        self.state: Optional[GameState] = None
        self.advice = ""

    def show(self, state: GameState, advice: str = ""):
        self.state = state
        self.advice = advice

    def on_draw(self):
        self.clear()
        if self.state is None:
            self.draw_title()
            return
        self.draw_commands(project(self.state, (self.width, self.height)))
        self.draw_hud(hud(self.state, self.advice))

    def draw_commands(self, cmds: Iterable[DrawCommand]):
        h = self.height
        for c in cmds:
            if c.kind == "rect":
                arcade.draw_lrbt_rectangle_filled(c.x, c.x + c.w, h - c.y - c.h, h - c.y, c.color)
            elif c.kind == "circle":
                arcade.draw_circle_filled(c.x, h - c.y, c.radius, c.color)
            elif c.kind == "polygon":
                arcade.draw_polygon_filled([(x, h - y) for x, y in c.points], c.color)
            elif c.kind == "text":
                arcade.draw_text(c.text, c.x, h - c.y, c.color, 10, anchor_x="center", anchor_y="center", bold=True)

    def draw_hud(self, snap: HudSnapshot):
        # Fuel bar
        bar_w, bar_h = 180, 10
        x0, y0 = 12, self.height - 22
        arcade.draw_lrbt_rectangle_filled(x0, x0 + bar_w, y0, y0 + bar_h, (60, 60, 60))
        fill = bar_w * snap.fuel_percent / 100.0
        if fill > 0:
            arcade.draw_lrbt_rectangle_filled(x0, x0 + fill, y0, y0 + bar_h, FUEL_BAR_C)

        for i, line in enumerate(hud_lines(snap)):
            arcade.draw_text(line, 12, self.height - 44 - i * 18, HUD_C, 12)

        if snap.banner:
            arcade.draw_text(
                snap.banner, self.width / 2, self.height / 2, BANNER_C, 24,
                anchor_x="center", anchor_y="center", bold=True,
            )

    def draw_title(self):
        arcade.draw_text(
            "RALLY CHASE", self.width / 2, self.height / 2 + 40, (59, 130, 246), 40,
            anchor_x="center", anchor_y="center", bold=True,
        )
        arcade.draw_text(
            "Arrows: drive   Space: smoke   R: start", self.width / 2, self.height / 2 - 20, HUD_C, 14,
            anchor_x="center", anchor_y="center",
        )


class RallyWindow(StateViewer):
    """Playable game window"""

    def __init__(self, session: GameSession):
        cfg = session.config
        super().__init__(cfg.screen_width, cfg.screen_height, update_rate=1 / cfg.tick_rate)
        self.session = session

    def on_update(self, delta_time: float):
        self.session.advance(delta_time)
        self.state = self.session.state
        snap = self.session.hud()
        self.advice = snap.advice if snap else ""

    def on_key_press(self, symbol: int, modifiers: int):
        name = KEY_NAMES.get(symbol)
        if name is not None:
            self.session.press(name)

    def on_key_release(self, symbol: int, modifiers: int):
        name = KEY_NAMES.get(symbol)
        if name is not None:
            self.session.release(name)

    def on_deactivate(self):
        # Keys released while unfocused never reach us
        self.session.keys.clear()

    def on_close(self):
        self.session.stop()
        super().on_close()


def main(config: Optional[GameConfig] = None):
    session = GameSession(config or GameConfig(), advisor=LevelAdvisor())
    RallyWindow(session)
    logger.info("Press R to start")
    arcade.run()


if __name__ == "__main__":
    main()

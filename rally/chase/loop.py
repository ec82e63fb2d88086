"""
Game loop driver, independent of any window toolkit.

The window forwards key names and frame times here; GameSession turns
them into fixed-rate simulation ticks.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Set

from loguru import logger

from .advisor import LevelAdvisor
from .config import GameConfig
from .entities import GameState, Phase
from .render import DrawCommand, HudSnapshot, hud, project
from .simulation import InputState, new_game, step

DIRECTION_KEYS = ("up", "down", "left", "right")
SMOKE_KEY = "smoke"
RESTART_KEY = "restart"


class GameSession:
    """Owns held keys, the current game and the tick accumulator"""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        advisor: Optional[LevelAdvisor] = None,
        seed: Optional[int] = None,
        max_catchup_ticks: int = 5,
    ):
        self.config = config or GameConfig()
        self.advisor = advisor
        self.seed = seed
        self.max_catchup_ticks = max_catchup_ticks
        self.tick_seconds = 1.0 / self.config.tick_rate

        self.state: Optional[GameState] = None
        self.session_id = 0
        self.keys: Set[str] = set()
        self._accumulator = 0.0

    @property
    def phase(self) -> Phase:
        return self.state.phase if self.state is not None else Phase.NOT_STARTED

    @property
    def is_playing(self) -> bool:
        return self.state is not None and self.state.is_playing

    # ----------------------------
    # Input
    # ----------------------------

    def press(self, key: str):
        self.keys.add(key)
        if key == RESTART_KEY and not self.is_playing:
            self.restart()

    def release(self, key: str):
        self.keys.discard(key)

    def inputs(self) -> InputState:
        return InputState(
            up="up" in self.keys,
            down="down" in self.keys,
            left="left" in self.keys,
            right="right" in self.keys,
            smoke=SMOKE_KEY in self.keys,
        )

    # ----------------------------
    # Lifecycle
    # ----------------------------

    def restart(self) -> GameState:
        """Start over at level 1; pending advice from the old game is dropped"""
        self.session_id += 1
        self._accumulator = 0.0
        if self.advisor is not None:
            self.advisor.cancel()
        seed = None if self.seed is None else self.seed + self.session_id - 1
        self.state = new_game(self.config, seed=seed)
        logger.info(f"Session {self.session_id} started")
        return self.state

    def stop(self):
        self._accumulator = 0.0
        self.keys.clear()
        if self.advisor is not None:
            self.advisor.cancel()

    def advance(self, dt: float) -> List[Dict[str, float]]:
        """Run as many whole ticks as `dt` seconds allow"""
        if self.state is None:
            return []
        self._accumulator += dt
        ticks = int(self._accumulator / self.tick_seconds)
        if ticks > self.max_catchup_ticks:
            # Too far behind; drop the backlog instead of spiralling
            ticks = self.max_catchup_ticks
            self._accumulator = 0.0
        else:
            self._accumulator -= ticks * self.tick_seconds

        results = []
        for _ in range(ticks):
            results.append(self.tick())
        return results

    def tick(self) -> Dict[str, float]:
        events = step(self.state, self.inputs())
        if events["level_start"] and self.advisor is not None:
            self.advisor.request(self.state.level.number)
        return events

    # ----------------------------
    # Presentation
    # ----------------------------

    def frame(self) -> List[DrawCommand]:
        if self.state is None:
            return []
        return project(self.state, (self.config.screen_width, self.config.screen_height))

    def hud(self) -> Optional[HudSnapshot]:
        if self.state is None:
            return None
        advice = self.advisor.text if self.advisor is not None else ""
        return hud(self.state, advice)

"""
RallyEnv - headless Gymnasium wrapper around the chase simulation
-----------------------------------------------------------------
- 1 agent that drives (one direction per tick) and drops smoke
- Flags to collect, fuel / smoke canisters for points
- Enemies that chase and end the episode on contact
- Vector observation: player state + top-K nearest enemies + top-M nearest flags
- MultiDiscrete action space: [move(5), smoke(2)]

Quick test:
    python -m rally.chase.rally_env
"""

from __future__ import annotations

import time
from typing import Any, Dict, Optional

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .config import ENV_CONFIG, REWARD_CONFIG, GameConfig
from .entities import GameState, ItemType
from .simulation import InputState, new_game, step
from .utils import clamp


class RallyEnv(gym.Env):
    """Flag-collecting chase game as a Gymnasium environment"""

    metadata = {"render_modes": ["human"], "render_fps": 60}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        config: Optional[GameConfig] = None,
        max_steps: int = ENV_CONFIG["max_steps"],
        k_enemies: int = ENV_CONFIG["k_enemies"],
        m_flags: int = ENV_CONFIG["m_flags"],
        rewards: Optional[Dict[str, float]] = None,
    ):
        super().__init__()

        if render_mode is not None and render_mode not in self.metadata["render_modes"]:
            raise ValueError(f"Unsupported render_mode: {render_mode}")
        self.render_mode = render_mode
        self.config = config or GameConfig()
        self.max_steps = max_steps
        self.k_enemies = k_enemies
        self.m_flags = m_flags
        self.rewards = dict(REWARD_CONFIG, **(rewards or {}))

        # move: 0 stay, 1 up, 2 down, 3 left, 4 right
        # smoke: 0/1
        self.action_space = spaces.MultiDiscrete([5, 2])

        # Player: pos(2) fuel(1) smoke cooldown(1) flag progress(1) transition(1)
        # Each enemy: rel pos(2) stunned(1)
        # Each flag: rel pos(2)
        obs_dim = 6 + (self.k_enemies * 3) + (self.m_flags * 2)
        self.observation_space = spaces.Box(
            low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )

        self.state: GameState = None  # type: ignore
        self._step_count = 0
        self._events: Dict[str, float] = {}
        self._window = None

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        if seed is None:
            seed = int(self.np_random.integers(0, 2**31 - 1))
        self.state = new_game(self.config, seed=seed)
        self._step_count = 0
        self._events = {}
        return self._get_obs(), self._get_info()

    def step(self, action):
        move, smoke = int(action[0]), int(action[1])
        self._events = step(self.state, InputState.from_move(move, smoke=bool(smoke)))

        reward = self._compute_reward()
        terminated = self.state.is_game_over
        self._step_count += 1
        truncated = self._step_count >= self.max_steps

        if self.render_mode == "human":
            self.render()

        return self._get_obs(), reward, terminated, truncated, self._get_info()

    # ----------------------------
    # Observation / reward / info
    # ----------------------------

    def _get_obs(self) -> np.ndarray:
        cfg = self.config
        p = self.state.player
        world_w = cfg.map_width * cfg.tile_size
        world_h = cfg.map_height * cfg.tile_size
        level = self.state.level

        obs_parts = [
            p.body.pos.x / world_w * 2 - 1,
            p.body.pos.y / world_h * 2 - 1,
            p.fuel / p.max_fuel * 2 - 1,
            clamp(p.smoke_cooldown / max(1, cfg.smoke_cooldown), 0, 1) * 2 - 1,
            (level.flags_collected / max(1, level.flags_total)) * 2 - 1,
            1.0 if self.state.is_level_transition else -1.0,
        ]

        px, py = p.body.pos.x, p.body.pos.y

        def rel(x, y):
            return [clamp((x - px) / cfg.screen_width, -1, 1), clamp((y - py) / cfg.screen_height, -1, 1)]

        enemies = sorted(
            self.state.enemies,
            key=lambda e: (e.body.pos.x - px) ** 2 + (e.body.pos.y - py) ** 2,
        )
        for i in range(self.k_enemies):
            if i < len(enemies):
                e = enemies[i]
                obs_parts += rel(e.body.pos.x, e.body.pos.y) + [1.0 if e.stunned else -1.0]
            else:
                obs_parts += [0.0, 0.0, 0.0]

        flags = sorted(
            (o for o in self.state.objects if o.type is ItemType.FLAG),
            key=lambda o: (o.pos.x - px) ** 2 + (o.pos.y - py) ** 2,
        )
        for i in range(self.m_flags):
            if i < len(flags):
                obs_parts += rel(flags[i].pos.x, flags[i].pos.y)
            else:
                obs_parts += [0.0, 0.0]

        obs = np.array(obs_parts, dtype=np.float32)
        return np.clip(obs, -1.0, 1.0)

    def _compute_reward(self) -> float:
        r = self.rewards
        ev = self._events
        reward = 0.0
        reward += r["R_FLAG"] * ev.get("flag", 0.0)
        reward += r["R_FUEL"] * ev.get("fuel", 0.0)
        reward += r["R_SMOKE"] * ev.get("smoke_pickup", 0.0)
        reward += r["R_STUN"] * ev.get("stunned", 0.0)
        reward += r["R_LEVEL"] * ev.get("level_clear", 0.0)
        reward -= r["R_TIME"]
        if ev.get("game_over", 0.0):
            reward -= r["R_DEATH"]
        return float(reward)

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.state.player.score,
            "fuel": self.state.player.fuel,
            "level": self.state.level.number,
            "flags_collected": self.state.level.flags_collected,
            "flags_total": self.state.level.flags_total,
            "num_enemies": len(self.state.enemies),
            "num_smokes": len(self.state.smokes),
            "phase": self.state.phase.value,
            "cause": self.state.game_over_cause,
            "step": self._step_count,
        }

    # ----------------------------
    # Rendering
    # ----------------------------

    def render(self):
        if self.render_mode is None:
            return None

        if self._window is None:
            from .viewer import StateViewer
            self._window = StateViewer(self.config.screen_width, self.config.screen_height, "RallyEnv")

        self._window.show(self.state)
        self._window.dispatch_events()
        self._window.on_draw()
        self._window.flip()
        return None

    def close(self):
        if self._window is not None:
            self._window.close()
            self._window = None


def run_random_episode(render: bool = False, seed: Optional[int] = 42, max_steps: Optional[int] = None,
                       fps: float = 60.0) -> Dict[str, Any]:
    """Run one episode with random actions; returns the final info dict"""
    kwargs = {} if max_steps is None else {"max_steps": max_steps}
    env = RallyEnv(render_mode="human" if render else None, **kwargs)
    obs, info = env.reset(seed=seed)

    terminated = False
    truncated = False
    total = 0.0
    while not (terminated or truncated):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward
        if render:
            time.sleep(1.0 / fps)

    info["return"] = total
    env.close()
    return info


if __name__ == "__main__":
    result = run_random_episode(render=True)
    print(f"Random episode return: {result['return']:.2f}  score: {result['score']}  level: {result['level']}")

"""Chase game module - simulation, projection and game loop"""

from .config import GameConfig
from .simulation import new_game, step, InputState
from .rally_env import RallyEnv, run_random_episode

__all__ = ['GameConfig', 'new_game', 'step', 'InputState', 'RallyEnv', 'run_random_episode']

"""
Flip & Shoot Core - the fixed-tick game simulation.

This module provides the loop controller, its physics/spawner and collision
engine, the tick driver, and a Gymnasium environment wrapper.

Main exports:
- LoopController: Owns the game state and the Idle/Running/Over phases
- TickDriver: Fixed-rate, non-reentrant tick scheduler
- FlipShootEnv: Gymnasium environment for agent training
- make_vec_env: Vectorized environments (sync or multiprocess)
- GameConfig: Configuration loaded from game_config.yaml
"""

from flipshoot.core.config_loader import GameConfig, load_config
from flipshoot.core.entities import Character, Projectile, Enemy, Obstacle, EdgeTag
from flipshoot.core.game_state import GameState
from flipshoot.core.rules import Phase
from flipshoot.core.state_snapshot import GameSnapshot
from flipshoot.core.game import LoopController, TickResult
from flipshoot.core.driver import TickDriver
from flipshoot.core.env_gym import FlipShootEnv
from flipshoot.core.vector_env import make_env, make_vec_env

__all__ = [
    "GameConfig",
    "load_config",
    "Character",
    "Projectile",
    "Enemy",
    "Obstacle",
    "EdgeTag",
    "GameState",
    "Phase",
    "GameSnapshot",
    "LoopController",
    "TickResult",
    "TickDriver",
    "FlipShootEnv",
    "make_env",
    "make_vec_env",
]

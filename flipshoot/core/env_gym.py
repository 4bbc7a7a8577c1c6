"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the Flip & Shoot game.
One environment step is one game tick.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from flipshoot.core.config_loader import GameConfig, load_config
from flipshoot.core.game import LoopController


class FlipShootEnv(gym.Env):
    """
    Flip & Shoot arcade game as a Gymnasium environment.

    Action Space:
        MultiBinary(2): [flap_held, fire].

    Observation Space:
        Dict of numpy arrays: run state, character state and padded
        projectile/enemy/obstacle arrays with masks.

    Reward:
        Score gained during the tick (+1 per obstacle passed, +10 per enemy shot).

    Info:
        Contains score, delta_score, tick, entity counts, terminated_reason.
    """

    metadata = {
        "render_modes": [],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        debug: bool = False,
    ):
        """
        Initialize the environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            config: Already loaded configuration (takes precedence over config_path).
            render_mode: Must be None; rendering lives outside the core.
            debug: If True, enables verbose debug output for agent development.
        """
        super().__init__()

        if render_mode is not None:
            raise ValueError(f"Unsupported render_mode: {render_mode!r}")

        self._config = config if config is not None else load_config(config_path)
        self.render_mode = render_mode
        self._debug = debug

        self._game = LoopController(config=self._config)

        self.action_space = spaces.MultiBinary(2)
        self.observation_space = self._build_observation_space()

        if self._debug:
            print("[DEBUG] FlipShootEnv initialized")
            print(f"[DEBUG]   Playfield: {self._config.width}x{self._config.height}")
            print(f"[DEBUG]   Max ticks: {self._config.caps.max_ticks}")

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        obs_cfg = self._config.observation
        height = float(self._config.height)
        max_p = obs_cfg.max_projectiles
        max_e = obs_cfg.max_enemies
        max_o = obs_cfg.max_obstacles

        return spaces.Dict({
            # Run state
            "phase": spaces.Box(low=0, high=2, shape=(), dtype=np.int32),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "tick": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),

            # Character
            "char_y": spaces.Box(low=0, high=height, shape=(), dtype=np.float32),
            "char_velocity": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),

            # Projectiles
            "proj_x": spaces.Box(low=-np.inf, high=np.inf, shape=(max_p,), dtype=np.float32),
            "proj_y": spaces.Box(low=-np.inf, high=np.inf, shape=(max_p,), dtype=np.float32),
            "proj_mask": spaces.MultiBinary(max_p),

            # Enemies
            "enemy_x": spaces.Box(low=-np.inf, high=np.inf, shape=(max_e,), dtype=np.float32),
            "enemy_y": spaces.Box(low=-np.inf, high=np.inf, shape=(max_e,), dtype=np.float32),
            "enemy_vx": spaces.Box(low=-np.inf, high=np.inf, shape=(max_e,), dtype=np.float32),
            "enemy_vy": spaces.Box(low=-np.inf, high=np.inf, shape=(max_e,), dtype=np.float32),
            "enemy_edge": spaces.Box(low=-1, high=3, shape=(max_e,), dtype=np.int8),
            "enemy_mask": spaces.MultiBinary(max_e),

            # Obstacles
            "obstacle_x": spaces.Box(low=-np.inf, high=np.inf, shape=(max_o,), dtype=np.float32),
            "obstacle_top": spaces.Box(low=0, high=height, shape=(max_o,), dtype=np.float32),
            "obstacle_bottom": spaces.Box(low=0, high=height, shape=(max_o,), dtype=np.float32),
            "obstacle_mask": spaces.MultiBinary(max_o),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        self._game.release_flap()
        self._game.reset(seed=seed)

        obs = self._game.observation()
        info = self._game.get_info()
        info["delta_score"] = 0

        return obs, info

    def step(
        self,
        action: Union[np.ndarray, Tuple[int, int]]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one tick.

        Args:
            action: [flap_held, fire], each 0 or 1.

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
        """
        flap, fire = (int(a) for a in np.asarray(action).reshape(-1)[:2])

        self._game.set_flap(bool(flap))
        if fire:
            self._game.fire()

        result = self._game.tick()

        obs = self._game.observation()
        reward = float(result.delta_score)
        terminated = self._game.is_over
        truncated = not terminated and self._game.tick_count >= self._config.caps.max_ticks

        info = self._game.get_info()
        info["delta_score"] = result.delta_score
        info["hits"] = len(result.hits)

        if self._debug:
            print(f"[DEBUG] Tick {result.snapshot.tick}: flap={flap} fire={fire} "
                  f"delta_score={result.delta_score} enemies={info['enemies']}")
            if terminated:
                print(f"[DEBUG] TERMINATED: {info.get('terminated_reason', 'unknown')}")

        return obs, reward, terminated, truncated, info

    def render(self) -> None:
        """Rendering is handled outside the core (see tools/play_human.py)."""
        return None

    def close(self) -> None:
        """Clean up resources."""
        self._game.release_flap()

    @property
    def game(self) -> LoopController:
        """Access to underlying controller (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

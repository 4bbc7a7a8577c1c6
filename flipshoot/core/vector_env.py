"""
Vector Environment Factory
==========================

Factory functions for running several FlipShootEnv instances side by side
with gymnasium.vector.

Usage:
    from flipshoot.core.vector_env import make_vec_env

    vec_env = make_vec_env(num_envs=8, seed=42)
    obs, infos = vec_env.reset()
    obs, rewards, terms, truncs, infos = vec_env.step(vec_env.action_space.sample())
    vec_env.close()
"""

from __future__ import annotations

import multiprocessing
from typing import Callable, Optional

import gymnasium as gym
from gymnasium.vector import AsyncVectorEnv, SyncVectorEnv


def make_env(
    rank: int,
    seed: int,
    config_path: Optional[str] = None,
) -> Callable[[], gym.Env]:
    """
    Create a factory function for a single environment.

    Args:
        rank: Index of this environment (0 to num_envs-1).
        seed: Base seed. Each env gets seed + rank.
        config_path: Path to game_config.yaml (None = default).

    Returns:
        Factory function that creates the environment.
    """
    def _init() -> gym.Env:
        # Import here so subprocesses load the env themselves
        from flipshoot.core.env_gym import FlipShootEnv

        env = FlipShootEnv(config_path=config_path)
        env.reset(seed=seed + rank)
        return env

    return _init


def make_vec_env(
    num_envs: Optional[int] = None,
    seed: int = 42,
    config_path: Optional[str] = None,
    asynchronous: bool = False,
) -> gym.vector.VectorEnv:
    """
    Create a vectorized environment.

    Args:
        num_envs: Number of environments. Default: recommended count.
        seed: Base random seed. Each env gets seed + i.
        config_path: Path to game_config.yaml (None = default).
        asynchronous: If True, run each env in its own process.

    Returns:
        SyncVectorEnv or AsyncVectorEnv instance.
    """
    if num_envs is None:
        num_envs = get_recommended_num_envs()

    env_fns = [make_env(rank=i, seed=seed, config_path=config_path) for i in range(num_envs)]

    if asynchronous:
        return AsyncVectorEnv(env_fns)
    return SyncVectorEnv(env_fns)


def get_recommended_num_envs() -> int:
    """
    Get the recommended number of parallel environments.

    Returns:
        Number of CPU cores, capped at 32.
    """
    return min(multiprocessing.cpu_count(), 32)


__all__ = [
    "make_env",
    "make_vec_env",
    "get_recommended_num_envs",
]

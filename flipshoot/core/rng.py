"""
RNG - Injected Random Source
============================

Single seedable random source for every spawn decision (enemy edge, enemy
position and jitter, obstacle height), so seeded runs replay exactly.
"""

from __future__ import annotations

import random
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")


class GameRng:
    """
    Thin wrapper around random.Random.

    Components receive one shared instance instead of touching the global
    `random` module.
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize the random source.

        Args:
            seed: Random seed for reproducibility. Random if None.
        """
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def seed(self) -> Optional[int]:
        """Seed the source was last reset with."""
        return self._seed

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        return self._rng.random()

    def uniform(self, low: float, high: float) -> float:
        """Uniform float in [low, high)."""
        return low + (high - low) * self._rng.random()

    def chance(self, probability: float) -> bool:
        """True with the given probability."""
        return self._rng.random() < probability

    def choice(self, options: Sequence[T]) -> T:
        """Uniformly pick one element."""
        return options[int(self._rng.random() * len(options))]

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the source with optional new seed.

        Args:
            seed: New random seed. Keeps the current stream if None.
        """
        if seed is not None:
            self._seed = seed
            self._rng = random.Random(seed)

    def get_state(self) -> object:
        """Opaque state for checkpointing."""
        return self._rng.getstate()

    def set_state(self, state: object) -> None:
        """Restore state captured by get_state()."""
        self._rng.setstate(state)

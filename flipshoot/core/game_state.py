"""
Game State
==========

Immutable per-tick state value. The loop controller commits a new GameState
every tick; nothing mutates a committed one.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple

from flipshoot.core.config_loader import GameConfig
from flipshoot.core.entities import Character, Projectile, Enemy, Obstacle


@dataclass(frozen=True)
class GameState:
    """All entities plus run bookkeeping for one tick."""
    character: Character
    projectiles: Tuple[Projectile, ...]
    enemies: Tuple[Enemy, ...]
    obstacles: Tuple[Obstacle, ...]
    score: int
    tick: int
    over: bool
    termination_reason: str
    next_uid: int

    @classmethod
    def initial(cls, config: GameConfig) -> "GameState":
        """Fresh state used on start/reset: default character, seeded obstacles."""
        char_cfg = config.character
        obs_cfg = config.obstacle

        character = Character(
            x=char_cfg.x,
            y=char_cfg.start_y,
            velocity=0.0,
            size=char_cfg.size
        )
        obstacles = tuple(
            Obstacle(uid=uid, x=x, top_height=top, gap=obs_cfg.gap, width=obs_cfg.width)
            for uid, (x, top) in enumerate(obs_cfg.initial)
        )
        return cls(
            character=character,
            projectiles=(),
            enemies=(),
            obstacles=obstacles,
            score=0,
            tick=0,
            over=False,
            termination_reason="",
            next_uid=len(obstacles)
        )

    def evolve(self, **changes) -> "GameState":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def end(self, reason: str) -> "GameState":
        """Mark the run over. The first reason recorded wins."""
        if self.over:
            return self
        return replace(self, over=True, termination_reason=reason)

    @property
    def entity_count(self) -> int:
        return len(self.projectiles) + len(self.enemies) + len(self.obstacles)

"""
Scoring System
==============

Builds score events for passed obstacles and destroyed enemies, and keeps
per-run tallies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from flipshoot.core.config_loader import GameConfig, get_config


@dataclass(frozen=True)
class ScoreEvent:
    """Record of a scoring event."""
    points: int
    kind: str        # "obstacle" or "enemy"
    entity_uid: int

    def __repr__(self) -> str:
        return f"ScoreEvent({self.kind}#{self.entity_uid}=+{self.points})"


class ScoreTracker:
    """
    Tracks run tallies and creates score events.

    The score itself lives on the committed GameState; the tracker only counts
    what produced it.
    """

    OBSTACLE = "obstacle"
    ENEMY = "enemy"

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize score tracker.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._enemies_destroyed: int = 0
        self._obstacles_passed: int = 0
        self._points: int = 0

    @property
    def enemies_destroyed(self) -> int:
        """Enemies shot down this run."""
        return self._enemies_destroyed

    @property
    def obstacles_passed(self) -> int:
        """Obstacles scrolled past the left edge this run."""
        return self._obstacles_passed

    @property
    def points(self) -> int:
        """Total points recorded this run."""
        return self._points

    def obstacle_passed(self, obstacle_uid: int) -> ScoreEvent:
        """Event for an obstacle leaving the playfield."""
        return ScoreEvent(
            points=self._config.scoring.obstacle_reward,
            kind=self.OBSTACLE,
            entity_uid=obstacle_uid
        )

    def enemy_destroyed(self, enemy_uid: int) -> ScoreEvent:
        """Event for a projectile destroying an enemy."""
        return ScoreEvent(
            points=self._config.scoring.enemy_reward,
            kind=self.ENEMY,
            entity_uid=enemy_uid
        )

    @staticmethod
    def total(events: Iterable[ScoreEvent]) -> int:
        """Sum of points over events."""
        return sum(event.points for event in events)

    def record(self, events: Iterable[ScoreEvent]) -> None:
        """Add committed events to the run tallies."""
        for event in events:
            if event.kind == self.ENEMY:
                self._enemies_destroyed += 1
            elif event.kind == self.OBSTACLE:
                self._obstacles_passed += 1
            self._points += event.points

    def reset(self) -> None:
        """Reset tallies to zero."""
        self._enemies_destroyed = 0
        self._obstacles_passed = 0
        self._points = 0

"""
Collision Engine
================

Detects projectile/enemy, character/enemy and character/obstacle overlaps on
the post-motion candidate state and applies their effects.

Shapes are approximated by circles (centre distance against summed radii),
except obstacles, which are tested as axis-aligned spans.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from flipshoot.core.config_loader import GameConfig, get_config
from flipshoot.core.entities import Character, Enemy, Obstacle
from flipshoot.core.game_state import GameState
from flipshoot.core.rules import TerminationReason, TerminationResult
from flipshoot.core.scoring import ScoreTracker, ScoreEvent


def circle_collide(
    center_a: Tuple[float, float],
    radius_a: float,
    center_b: Tuple[float, float],
    radius_b: float
) -> bool:
    """True if the circles overlap (touching does not count)."""
    dx = center_a[0] - center_b[0]
    dy = center_a[1] - center_b[1]
    return math.hypot(dx, dy) < radius_a + radius_b


def obstacle_blocks(character: Character, obstacle: Obstacle) -> bool:
    """True if the character overlaps the obstacle's solid segments."""
    if not (character.x + character.size > obstacle.x and character.x < obstacle.right):
        return False
    return character.y < obstacle.top_height or character.bottom > obstacle.gap_bottom


@dataclass
class Hit:
    """A projectile destroying an enemy."""
    projectile_uid: int
    enemy_uid: int


@dataclass
class CollisionReport:
    """Everything collision resolution did this tick."""
    state: GameState
    hits: List[Hit] = field(default_factory=list)
    score_events: List[ScoreEvent] = field(default_factory=list)
    termination: TerminationResult = field(default_factory=TerminationResult.none)


class CollisionEngine:
    """
    Resolves collisions in a fixed order:

    1. projectile vs enemy (+reward, both removed, one hit per projectile)
    2. character vs enemy (run over)
    3. character vs obstacle (run over)

    Entities are marked during a read-only scan and the collections are
    rebuilt once at the end.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        scorer: Optional[ScoreTracker] = None
    ):
        """
        Initialize collision engine.

        Args:
            config: Game configuration. Uses default if None.
            scorer: Score event factory. A private one if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._scorer = scorer if scorer is not None else ScoreTracker(config)

    def resolve(self, state: GameState) -> CollisionReport:
        """
        Apply all collision effects to a candidate state.

        Args:
            state: Candidate state from the physics step.

        Returns:
            CollisionReport whose state is ready to commit.
        """
        hits = self.find_projectile_hits(state)
        spent_projectiles = {hit.projectile_uid for hit in hits}
        destroyed_enemies = {hit.enemy_uid for hit in hits}
        events = [self._scorer.enemy_destroyed(hit.enemy_uid) for hit in hits]

        enemies = tuple(e for e in state.enemies if e.uid not in destroyed_enemies)
        projectiles = tuple(p for p in state.projectiles if p.uid not in spent_projectiles)

        termination = self.check_character(state.character, enemies, state.obstacles)

        committed = state.evolve(
            projectiles=projectiles,
            enemies=enemies,
            score=state.score + ScoreTracker.total(events)
        )
        if termination.terminated:
            committed = committed.end(termination.reason)

        return CollisionReport(
            state=committed,
            hits=hits,
            score_events=events,
            termination=termination
        )

    def find_projectile_hits(self, state: GameState) -> List[Hit]:
        """Pair projectiles with enemies; each entity is consumed at most once."""
        hits: List[Hit] = []
        consumed: Set[int] = set()

        for projectile in state.projectiles:
            for enemy in state.enemies:
                if enemy.uid in consumed:
                    continue
                if circle_collide(projectile.center, projectile.radius, enemy.center, enemy.radius):
                    consumed.add(enemy.uid)
                    hits.append(Hit(projectile_uid=projectile.uid, enemy_uid=enemy.uid))
                    break

        return hits

    def check_character(
        self,
        character: Character,
        enemies: Tuple[Enemy, ...],
        obstacles: Tuple[Obstacle, ...]
    ) -> TerminationResult:
        """Terminal collisions for the character, enemies first."""
        for enemy in enemies:
            if circle_collide(character.center, character.radius, enemy.center, enemy.radius):
                return TerminationResult.game_over(TerminationReason.ENEMY)

        for obstacle in obstacles:
            if obstacle_blocks(character, obstacle):
                return TerminationResult.game_over(TerminationReason.OBSTACLE)

        return TerminationResult.none()

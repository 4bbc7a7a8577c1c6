"""
Physics & Spawner
=================

Advances the character, projectiles, obstacles and enemies by one tick and
spawns new obstacles and enemies. Collision resolution happens afterwards,
against the candidate state produced here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from flipshoot.core.config_loader import GameConfig, get_config
from flipshoot.core.entities import Character, Projectile, Enemy, Obstacle, EdgeTag
from flipshoot.core.game_state import GameState
from flipshoot.core.rng import GameRng
from flipshoot.core.rules import TerminationReason
from flipshoot.core.scoring import ScoreTracker, ScoreEvent

EDGES: Tuple[EdgeTag, ...] = (EdgeTag.TOP, EdgeTag.BOTTOM, EdgeTag.LEFT, EdgeTag.RIGHT)


@dataclass
class PhysicsResult:
    """Candidate state after motion and spawning, before collisions."""
    state: GameState
    score_events: List[ScoreEvent]
    spawned_enemy: Optional[Enemy] = None
    spawned_obstacle: Optional[Obstacle] = None


class PhysicsSpawner:
    """
    Minimal arcade physics plus the obstacle/enemy spawner.

    One step:
        1. flap impulse (overrides velocity while held)
        2. gravity, then integrate y
        3. clamp y; hitting the floor ends the run
        4. move projectiles, drop the ones past the right edge
        5. scroll obstacles
        6. spawn an obstacle when below target count and spacing allows
        7. drop obstacles past the left edge (+1 each)
        8. move enemies, drop the ones outside the playfield margin
        9. maybe spawn an enemy
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[GameRng] = None,
        scorer: Optional[ScoreTracker] = None
    ):
        """
        Initialize physics and spawner.

        Args:
            config: Game configuration. Uses default if None.
            rng: Shared random source. A fresh unseeded one if None.
            scorer: Score event factory. A private one if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = rng if rng is not None else GameRng()
        self._scorer = scorer if scorer is not None else ScoreTracker(config)

        self._width = config.playfield.width
        self._height = config.playfield.height

    @property
    def rng(self) -> GameRng:
        return self._rng

    # ------------------------------------------------------------------
    # Full step
    # ------------------------------------------------------------------

    def step(self, state: GameState, flap_held: bool = False) -> PhysicsResult:
        """
        Advance the state by one tick.

        Args:
            state: Previously committed state.
            flap_held: True while the flap control is held.

        Returns:
            PhysicsResult with the candidate state and obstacle score events.
        """
        character, hit_floor = self.update_character(state.character, flap_held)
        projectiles = self.update_projectiles(state.projectiles)

        obstacles = self.scroll_obstacles(state.obstacles)
        next_uid = state.next_uid
        spawned_obstacle = None
        if self.should_spawn_obstacle(obstacles):
            spawned_obstacle = self.spawn_obstacle(next_uid)
            next_uid += 1
            obstacles = obstacles + (spawned_obstacle,)
        obstacles, events = self.prune_obstacles(obstacles)

        enemies = self.update_enemies(state.enemies)
        spawned_enemy = None
        if self._rng.chance(self._config.enemy.spawn_probability):
            spawned_enemy = self.spawn_enemy(next_uid)
            next_uid += 1
            enemies = enemies + (spawned_enemy,)

        candidate = state.evolve(
            character=character,
            projectiles=projectiles,
            obstacles=obstacles,
            enemies=enemies,
            score=state.score + ScoreTracker.total(events),
            next_uid=next_uid
        )
        if hit_floor:
            candidate = candidate.end(TerminationReason.FLOOR)

        return PhysicsResult(
            state=candidate,
            score_events=events,
            spawned_enemy=spawned_enemy,
            spawned_obstacle=spawned_obstacle
        )

    # ------------------------------------------------------------------
    # Character
    # ------------------------------------------------------------------

    def update_character(self, character: Character, flap_held: bool) -> Tuple[Character, bool]:
        """
        Apply flap, gravity and bounds.

        Returns:
            (new character, hit_floor)
        """
        cfg = self._config.character

        velocity = cfg.flap_impulse if flap_held else character.velocity
        velocity += cfg.gravity
        y = character.y + velocity

        hit_floor = False
        floor = self._height - character.size
        if y < 0:
            y = 0.0
            velocity = 0.0
        if y > floor:
            y = floor
            hit_floor = True

        return Character(x=character.x, y=y, velocity=velocity, size=character.size), hit_floor

    def fire(self, state: GameState, count: int = 1) -> GameState:
        """Append `count` projectiles launched from the character's front."""
        if count <= 0:
            return state

        character = state.character
        cfg = self._config.projectile
        uid = state.next_uid
        new_projectiles = tuple(
            Projectile(
                uid=uid + i,
                x=character.x + character.size,
                y=character.y + character.size / 2,
                velocity=cfg.speed,
                size=cfg.size
            )
            for i in range(count)
        )
        return state.evolve(
            projectiles=state.projectiles + new_projectiles,
            next_uid=uid + count
        )

    # ------------------------------------------------------------------
    # Projectiles
    # ------------------------------------------------------------------

    def update_projectiles(self, projectiles: Tuple[Projectile, ...]) -> Tuple[Projectile, ...]:
        """Move projectiles right and drop the ones past the right edge."""
        moved = (
            Projectile(uid=p.uid, x=p.x + p.velocity, y=p.y, velocity=p.velocity, size=p.size)
            for p in projectiles
        )
        return tuple(p for p in moved if p.x < self._width)

    # ------------------------------------------------------------------
    # Obstacles
    # ------------------------------------------------------------------

    def scroll_obstacles(self, obstacles: Tuple[Obstacle, ...]) -> Tuple[Obstacle, ...]:
        """Scroll every obstacle left by the configured speed."""
        speed = self._config.obstacle.scroll_speed
        return tuple(
            Obstacle(uid=o.uid, x=o.x - speed, top_height=o.top_height, gap=o.gap, width=o.width)
            for o in obstacles
        )

    def should_spawn_obstacle(self, obstacles: Tuple[Obstacle, ...]) -> bool:
        """Below target count and the newest obstacle has scrolled far enough."""
        cfg = self._config.obstacle
        if not obstacles:
            return True
        if len(obstacles) >= cfg.target_count:
            return False
        return obstacles[-1].x < self._width - cfg.spacing

    def spawn_obstacle(self, uid: int) -> Obstacle:
        """New obstacle at the right edge with a random top height."""
        cfg = self._config.obstacle
        return Obstacle(
            uid=uid,
            x=float(self._width),
            top_height=self._rng.uniform(cfg.top_height_min, cfg.top_height_max),
            gap=cfg.gap,
            width=cfg.width
        )

    def prune_obstacles(
        self,
        obstacles: Tuple[Obstacle, ...]
    ) -> Tuple[Tuple[Obstacle, ...], List[ScoreEvent]]:
        """Drop obstacles fully past the left edge, one score event each."""
        kept = []
        events = []
        for obstacle in obstacles:
            if obstacle.right < 0:
                events.append(self._scorer.obstacle_passed(obstacle.uid))
            else:
                kept.append(obstacle)
        return tuple(kept), events

    # ------------------------------------------------------------------
    # Enemies
    # ------------------------------------------------------------------

    def update_enemies(self, enemies: Tuple[Enemy, ...]) -> Tuple[Enemy, ...]:
        """Move enemies and drop the ones that left the playfield margin."""
        moved = (
            Enemy(
                uid=e.uid,
                x=e.x + e.velocity_x,
                y=e.y + e.velocity_y,
                velocity_x=e.velocity_x,
                velocity_y=e.velocity_y,
                size=e.size,
                edge=e.edge
            )
            for e in enemies
        )
        return tuple(e for e in moved if self.in_bounds(e))

    def in_bounds(self, enemy: Enemy) -> bool:
        """Inside the playfield extended by the enemy's size on every side."""
        margin = enemy.size
        return (
            -margin < enemy.x < self._width + margin
            and -margin < enemy.y < self._height + margin
        )

    def spawn_enemy(self, uid: int, edge: Optional[EdgeTag] = None) -> Enemy:
        """
        Create an enemy on a playfield edge, heading inward.

        Args:
            uid: Entity id for the new enemy.
            edge: Spawn edge. Chosen uniformly if None.

        Returns:
            The new Enemy (not yet added to any state).
        """
        cfg = self._config.enemy
        size = cfg.size
        speed = cfg.speed

        if edge is None:
            edge = self._rng.choice(EDGES)
        edge = EdgeTag(edge)

        if edge is EdgeTag.TOP:
            x = self._rng.uniform(0, self._width)
            y = -size
            vx, vy = self._jitter(), speed
        elif edge is EdgeTag.BOTTOM:
            x = self._rng.uniform(0, self._width)
            y = self._height + size
            vx, vy = self._jitter(), -speed
        elif edge is EdgeTag.LEFT:
            x = -size
            y = self._rng.uniform(0, self._height)
            vx, vy = speed, self._jitter()
        else:
            x = self._width + size
            y = self._rng.uniform(0, self._height)
            vx, vy = -speed, self._jitter()

        return Enemy(uid=uid, x=x, y=y, velocity_x=vx, velocity_y=vy, size=size, edge=edge)

    def _jitter(self) -> float:
        """Perpendicular velocity component in [-jitter, jitter)."""
        jitter = self._config.enemy.jitter
        return self._rng.uniform(-jitter, jitter)

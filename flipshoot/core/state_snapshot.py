"""
State Snapshot
==============

Read-only view of the committed game state handed to renderers once per tick,
and its packing into fixed-size numpy arrays for Gymnasium observations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple
import numpy as np

from flipshoot.core.config_loader import GameConfig, get_config
from flipshoot.core.entities import Character, Projectile, Enemy, Obstacle
from flipshoot.core.game_state import GameState
from flipshoot.core.rules import Phase

PHASE_CODES = {Phase.IDLE: 0, Phase.RUNNING: 1, Phase.OVER: 2}


@dataclass(frozen=True)
class GameSnapshot:
    """
    Immutable snapshot of one committed tick.

    Entity records are frozen dataclasses and collections are tuples, so the
    renderer can hold on to a snapshot without copying it.
    """
    phase: Phase
    tick: int
    score: int
    termination_reason: str

    character: Character
    projectiles: Tuple[Projectile, ...]
    enemies: Tuple[Enemy, ...]
    obstacles: Tuple[Obstacle, ...]

    # Board info (for normalization)
    board_width: float
    board_height: float

    @property
    def is_running(self) -> bool:
        return self.phase is Phase.RUNNING

    @property
    def is_over(self) -> bool:
        return self.phase is Phase.OVER


class SnapshotBuilder:
    """Builds snapshots and observation dictionaries."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._max_projectiles = config.observation.max_projectiles
        self._max_enemies = config.observation.max_enemies
        self._max_obstacles = config.observation.max_obstacles

        self._board_width = float(config.playfield.width)
        self._board_height = float(config.playfield.height)

    @property
    def max_projectiles(self) -> int:
        return self._max_projectiles

    @property
    def max_enemies(self) -> int:
        return self._max_enemies

    @property
    def max_obstacles(self) -> int:
        return self._max_obstacles

    def build(self, state: GameState, phase: Phase) -> GameSnapshot:
        """Build a snapshot from a committed state."""
        return GameSnapshot(
            phase=phase,
            tick=state.tick,
            score=state.score,
            termination_reason=state.termination_reason,
            character=state.character,
            projectiles=state.projectiles,
            enemies=state.enemies,
            obstacles=state.obstacles,
            board_width=self._board_width,
            board_height=self._board_height
        )

    def to_obs_dict(self, snapshot: GameSnapshot) -> Dict[str, np.ndarray]:
        """
        Pack a snapshot into fixed-size arrays.

        Entity arrays are padded to the configured maxima; `*_mask` marks the
        valid slots. Entities beyond the maximum are dropped in spawn order.
        """
        character = snapshot.character

        # Projectiles
        proj_x = np.zeros(self._max_projectiles, dtype=np.float32)
        proj_y = np.zeros(self._max_projectiles, dtype=np.float32)
        proj_mask = np.zeros(self._max_projectiles, dtype=bool)
        for i, p in enumerate(snapshot.projectiles[:self._max_projectiles]):
            proj_x[i] = p.x
            proj_y[i] = p.y
            proj_mask[i] = True

        # Enemies
        enemy_x = np.zeros(self._max_enemies, dtype=np.float32)
        enemy_y = np.zeros(self._max_enemies, dtype=np.float32)
        enemy_vx = np.zeros(self._max_enemies, dtype=np.float32)
        enemy_vy = np.zeros(self._max_enemies, dtype=np.float32)
        enemy_edge = np.full(self._max_enemies, -1, dtype=np.int8)
        enemy_mask = np.zeros(self._max_enemies, dtype=bool)
        for i, e in enumerate(snapshot.enemies[:self._max_enemies]):
            enemy_x[i] = e.x
            enemy_y[i] = e.y
            enemy_vx[i] = e.velocity_x
            enemy_vy[i] = e.velocity_y
            enemy_edge[i] = e.edge.code
            enemy_mask[i] = True

        # Obstacles
        obstacle_x = np.zeros(self._max_obstacles, dtype=np.float32)
        obstacle_top = np.zeros(self._max_obstacles, dtype=np.float32)
        obstacle_bottom = np.zeros(self._max_obstacles, dtype=np.float32)
        obstacle_mask = np.zeros(self._max_obstacles, dtype=bool)
        for i, o in enumerate(snapshot.obstacles[:self._max_obstacles]):
            obstacle_x[i] = o.x
            obstacle_top[i] = o.top_height
            obstacle_bottom[i] = o.gap_bottom
            obstacle_mask[i] = True

        return {
            # Run state
            "phase": np.array(PHASE_CODES[snapshot.phase], dtype=np.int32),
            "score": np.array(snapshot.score, dtype=np.int64),
            "tick": np.array(snapshot.tick, dtype=np.int32),

            # Character
            "char_y": np.array(character.y, dtype=np.float32),
            "char_velocity": np.array(character.velocity, dtype=np.float32),

            # Entity arrays
            "proj_x": proj_x,
            "proj_y": proj_y,
            "proj_mask": proj_mask,
            "enemy_x": enemy_x,
            "enemy_y": enemy_y,
            "enemy_vx": enemy_vx,
            "enemy_vy": enemy_vy,
            "enemy_edge": enemy_edge,
            "enemy_mask": enemy_mask,
            "obstacle_x": obstacle_x,
            "obstacle_top": obstacle_top,
            "obstacle_bottom": obstacle_bottom,
            "obstacle_mask": obstacle_mask,
        }

"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple, Optional

import yaml


@dataclass(frozen=True)
class PlayfieldConfig:
    """Logical coordinate space entities move within."""
    width: int
    height: int


@dataclass(frozen=True)
class CharacterConfig:
    """Controlled character and its vertical physics."""
    x: float                # Fixed horizontal position
    start_y: float          # Y coordinate after reset
    size: float             # Bounding box side (radius = size / 2)
    gravity: float          # Added to velocity every tick
    flap_impulse: float     # Velocity set while flap is held (negative = up)


@dataclass(frozen=True)
class ProjectileConfig:
    """Projectile size and rightward speed."""
    size: float
    speed: float


@dataclass(frozen=True)
class ObstacleConfig:
    """Paired top/bottom barrier parameters."""
    width: float
    gap: float
    scroll_speed: float
    target_count: int
    spacing: float
    top_height_min: float
    top_height_max: float
    initial: Tuple[Tuple[float, float], ...]  # (x, top_height) seeded on reset


@dataclass(frozen=True)
class EnemyConfig:
    """Enemy size, speed and spawn rate."""
    size: float
    speed: float
    jitter: float
    spawn_probability: float


@dataclass(frozen=True)
class ScoringConfig:
    """Scoring parameters."""
    enemy_reward: int
    obstacle_reward: int


@dataclass(frozen=True)
class LoopConfig:
    """Tick driver parameters."""
    tick_interval_ms: float

    @property
    def tick_interval(self) -> float:
        """Tick interval in seconds."""
        return self.tick_interval_ms / 1000.0


@dataclass(frozen=True)
class CapsConfig:
    """Episode limits."""
    max_ticks: int


@dataclass(frozen=True)
class ObservationConfig:
    """Observation space parameters."""
    max_projectiles: int
    max_enemies: int
    max_obstacles: int


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    playfield: PlayfieldConfig
    character: CharacterConfig
    projectile: ProjectileConfig
    obstacle: ObstacleConfig
    enemy: EnemyConfig
    scoring: ScoringConfig
    loop: LoopConfig
    caps: CapsConfig
    observation: ObservationConfig

    @property
    def width(self) -> int:
        """Playfield width."""
        return self.playfield.width

    @property
    def height(self) -> int:
        """Playfield height."""
        return self.playfield.height


def _parse_initial_obstacles(data: List) -> Tuple[Tuple[float, float], ...]:
    """Parse seeded obstacle list from YAML."""
    obstacles = []
    for entry in data:
        if len(entry) != 2:
            raise ValueError(f"Initial obstacle must have 2 values [x, top_height], got {entry}")
        obstacles.append((float(entry[0]), float(entry[1])))
    return tuple(obstacles)


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    playfield = config.playfield
    if playfield.width <= 0 or playfield.height <= 0:
        raise ValueError(
            f"Playfield must have positive dimensions, got {playfield.width}x{playfield.height}"
        )

    # Collision radii derive from these
    sizes = {
        "character.size": config.character.size,
        "projectile.size": config.projectile.size,
        "enemy.size": config.enemy.size,
        "obstacle.width": config.obstacle.width,
        "obstacle.gap": config.obstacle.gap,
    }
    for name, value in sizes.items():
        if value <= 0:
            raise ValueError(f"{name} must be positive, got {value}")

    if config.character.size >= playfield.height:
        raise ValueError(
            f"character.size ({config.character.size}) must be smaller than "
            f"playfield height ({playfield.height})"
        )

    if not 0.0 <= config.enemy.spawn_probability <= 1.0:
        raise ValueError(
            f"enemy.spawn_probability must be in [0, 1], got {config.enemy.spawn_probability}"
        )

    obstacle = config.obstacle
    if obstacle.top_height_min > obstacle.top_height_max:
        raise ValueError(
            f"obstacle.top_height_min ({obstacle.top_height_min}) exceeds "
            f"top_height_max ({obstacle.top_height_max})"
        )
    if obstacle.top_height_max + obstacle.gap > playfield.height:
        raise ValueError(
            f"obstacle.top_height_max + gap ({obstacle.top_height_max + obstacle.gap}) "
            f"exceeds playfield height ({playfield.height})"
        )
    if obstacle.target_count < 1:
        raise ValueError(f"obstacle.target_count must be at least 1, got {obstacle.target_count}")
    if len(obstacle.initial) > obstacle.target_count:
        raise ValueError(
            f"{len(obstacle.initial)} initial obstacles exceed "
            f"target_count ({obstacle.target_count})"
        )

    if config.loop.tick_interval_ms <= 0:
        raise ValueError(f"loop.tick_interval_ms must be positive, got {config.loop.tick_interval_ms}")

    # Observation arrays must be able to hold every obstacle
    if config.observation.max_obstacles < obstacle.target_count:
        raise ValueError(
            f"observation.max_obstacles ({config.observation.max_obstacles}) must be at least "
            f"obstacle.target_count ({obstacle.target_count})"
        )


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    playfield_data = raw["playfield"]
    playfield = PlayfieldConfig(
        width=int(playfield_data["width"]),
        height=int(playfield_data["height"])
    )

    char_data = raw["character"]
    character = CharacterConfig(
        x=float(char_data.get("x", 100)),
        start_y=float(char_data.get("start_y", playfield.height / 2)),
        size=float(char_data["size"]),
        gravity=float(char_data["gravity"]),
        flap_impulse=float(char_data["flap_impulse"])
    )

    proj_data = raw["projectile"]
    projectile = ProjectileConfig(
        size=float(proj_data["size"]),
        speed=float(proj_data["speed"])
    )

    obs_data = raw["obstacle"]
    obstacle = ObstacleConfig(
        width=float(obs_data["width"]),
        gap=float(obs_data["gap"]),
        scroll_speed=float(obs_data["scroll_speed"]),
        target_count=int(obs_data.get("target_count", 4)),
        spacing=float(obs_data.get("spacing", 300)),
        top_height_min=float(obs_data["top_height_min"]),
        top_height_max=float(obs_data["top_height_max"]),
        initial=_parse_initial_obstacles(obs_data.get("initial", []))
    )

    enemy_data = raw["enemy"]
    enemy = EnemyConfig(
        size=float(enemy_data["size"]),
        speed=float(enemy_data["speed"]),
        jitter=float(enemy_data.get("jitter", 1.0)),
        spawn_probability=float(enemy_data["spawn_probability"])
    )

    scoring_data = raw["scoring"]
    scoring = ScoringConfig(
        enemy_reward=int(scoring_data["enemy_reward"]),
        obstacle_reward=int(scoring_data["obstacle_reward"])
    )

    loop_data = raw.get("loop", {})
    loop = LoopConfig(
        tick_interval_ms=float(loop_data.get("tick_interval_ms", 16))
    )

    caps_data = raw.get("caps", {})
    caps = CapsConfig(
        max_ticks=int(caps_data.get("max_ticks", 10000))
    )

    observation_data = raw.get("observation", {})
    observation = ObservationConfig(
        max_projectiles=int(observation_data.get("max_projectiles", 32)),
        max_enemies=int(observation_data.get("max_enemies", 16)),
        max_obstacles=int(observation_data.get("max_obstacles", obstacle.target_count))
    )

    config = GameConfig(
        playfield=playfield,
        character=character,
        projectile=projectile,
        obstacle=obstacle,
        enemy=enemy,
        scoring=scoring,
        loop=loop,
        caps=caps,
        observation=observation
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config

"""
Game Entities
=============

Plain data records for the character, projectiles, enemies and obstacles.

Positions are the top-left corner of each entity's bounding box; collision
tests use the box centre and a radius of half the size.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class EdgeTag(str, Enum):
    """Playfield side an enemy spawned from."""
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"

    @property
    def code(self) -> int:
        """Stable integer code for numeric observations."""
        return _EDGE_CODES[self]


_EDGE_CODES = {
    EdgeTag.TOP: 0,
    EdgeTag.BOTTOM: 1,
    EdgeTag.LEFT: 2,
    EdgeTag.RIGHT: 3,
}


@dataclass(frozen=True)
class Character:
    """The controlled flying character. Only y and velocity change."""
    x: float
    y: float
    velocity: float
    size: float

    @property
    def radius(self) -> float:
        return self.size / 2

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.size / 2, self.y + self.size / 2)

    @property
    def bottom(self) -> float:
        return self.y + self.size


@dataclass(frozen=True)
class Projectile:
    """Shot fired by the character, travelling right at a constant speed."""
    uid: int
    x: float
    y: float
    velocity: float
    size: float

    @property
    def radius(self) -> float:
        return self.size / 2

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.size / 2, self.y + self.size / 2)


@dataclass(frozen=True)
class Enemy:
    """Enemy drifting inward from the edge it spawned on."""
    uid: int
    x: float
    y: float
    velocity_x: float
    velocity_y: float
    size: float
    edge: EdgeTag

    @property
    def radius(self) -> float:
        return self.size / 2

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.size / 2, self.y + self.size / 2)


@dataclass(frozen=True)
class Obstacle:
    """
    Paired top/bottom barrier.

    The top segment spans [0, top_height), the bottom segment starts at
    top_height + gap and runs to the floor.
    """
    uid: int
    x: float
    top_height: float
    gap: float
    width: float

    @property
    def gap_bottom(self) -> float:
        """Y coordinate where the bottom segment begins."""
        return self.top_height + self.gap

    @property
    def right(self) -> float:
        return self.x + self.width

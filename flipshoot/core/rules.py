"""
Game Rules
==========

Run phases and termination results.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Phase(str, Enum):
    """Run-level state machine value."""
    IDLE = "idle"
    RUNNING = "running"
    OVER = "over"


class TerminationReason:
    """Reasons a run can end."""
    FLOOR = "floor"          # Character hit the lower playfield bound
    ENEMY = "enemy"          # Character touched an enemy
    OBSTACLE = "obstacle"    # Character left an obstacle's gap
    STOPPED = "stopped"      # Host stopped the run explicitly


@dataclass(frozen=True)
class TerminationResult:
    """Result of termination check."""
    terminated: bool
    reason: str

    @staticmethod
    def none() -> "TerminationResult":
        return TerminationResult(False, "")

    @staticmethod
    def game_over(reason: str) -> "TerminationResult":
        return TerminationResult(True, reason)


def next_phase(current: Phase, terminated: bool) -> Phase:
    """Phase after a committed tick."""
    if current is Phase.RUNNING and terminated:
        return Phase.OVER
    return current

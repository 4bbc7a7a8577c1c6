"""
Input Buffer
============

Shared buffer between the input layer (producers, possibly on other threads)
and the loop controller (single consumer).

Level controls are kept in a held set; edge-triggered actions are queued.
drain() hands the consumer one consistent InputFrame per tick.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List, Set, Tuple


class Control(str, Enum):
    """Level-triggered controls (held while the key is down)."""
    FLAP = "flap"


class Action(str, Enum):
    """Edge-triggered one-shot actions."""
    FIRE = "fire"


@dataclass(frozen=True)
class InputFrame:
    """Inputs consumed by a single tick."""
    held: FrozenSet[Control]
    actions: Tuple[Action, ...]

    @property
    def flap(self) -> bool:
        return Control.FLAP in self.held

    @property
    def fire_count(self) -> int:
        return sum(1 for action in self.actions if action is Action.FIRE)

    @staticmethod
    def empty() -> "InputFrame":
        return InputFrame(held=frozenset(), actions=())


class InputBuffer:
    """Held-set plus append/drain queue, guarded by one lock."""

    def __init__(self):
        self._lock = threading.Lock()
        self._held: Set[Control] = set()
        self._queue: List[Action] = []

    def press(self, control: Control) -> None:
        """Mark a level control as held."""
        control = Control(control)
        with self._lock:
            self._held.add(control)

    def release(self, control: Control) -> None:
        """Mark a level control as released."""
        control = Control(control)
        with self._lock:
            self._held.discard(control)

    def is_held(self, control: Control) -> bool:
        with self._lock:
            return Control(control) in self._held

    def push(self, action: Action) -> None:
        """Queue a one-shot action for the next tick."""
        action = Action(action)
        with self._lock:
            self._queue.append(action)

    @property
    def pending(self) -> int:
        """Number of queued one-shot actions."""
        with self._lock:
            return len(self._queue)

    def drain(self) -> InputFrame:
        """Snapshot held controls and take every queued action."""
        with self._lock:
            frame = InputFrame(held=frozenset(self._held), actions=tuple(self._queue))
            self._queue.clear()
        return frame

    def discard_actions(self) -> None:
        """Drop queued actions, keep held controls."""
        with self._lock:
            self._queue.clear()

    def clear(self) -> None:
        """Drop everything."""
        with self._lock:
            self._held.clear()
            self._queue.clear()

"""
Core Game
=========

Loop controller tying physics, spawning, collisions and scoring together on a
fixed tick, and owning the Idle/Running/Over state machine.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from flipshoot.core.collision import CollisionEngine, Hit
from flipshoot.core.config_loader import GameConfig, get_config
from flipshoot.core.entities import Enemy, Obstacle
from flipshoot.core.game_state import GameState
from flipshoot.core.input_buffer import Action, Control, InputBuffer
from flipshoot.core.physics import PhysicsSpawner
from flipshoot.core.rng import GameRng
from flipshoot.core.rules import Phase, TerminationReason, next_phase
from flipshoot.core.scoring import ScoreTracker, ScoreEvent
from flipshoot.core.state_snapshot import SnapshotBuilder, GameSnapshot

logger = logging.getLogger(__name__)


@dataclass
class TickResult:
    """Result of a single tick."""
    snapshot: GameSnapshot
    ticked: bool
    terminated: bool
    termination_reason: str
    delta_score: int
    hits: List[Hit] = field(default_factory=list)
    score_events: List[ScoreEvent] = field(default_factory=list)
    spawned_enemy: Optional[Enemy] = None
    spawned_obstacle: Optional[Obstacle] = None


class LoopController:
    """
    Main game simulation class.

    Orchestrates:
    - Input buffer (held flap, queued fire actions)
    - Physics & spawner
    - Collision engine
    - Scoring
    - Phase transitions
    - State snapshots

    One tick = drain inputs, fire, physics, collisions, commit.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        rng: Optional[GameRng] = None
    ):
        """
        Initialize the controller in the Idle phase.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Ignored if rng is given.
            rng: Random source shared by every spawn decision.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = rng if rng is not None else GameRng(seed)

        # Initialize subsystems
        self._scorer = ScoreTracker(config)
        self._physics = PhysicsSpawner(config, rng=self._rng, scorer=self._scorer)
        self._collision = CollisionEngine(config, scorer=self._scorer)
        self._snapshot_builder = SnapshotBuilder(config)
        self._inputs = InputBuffer()

        # Serialises tick/reset/stop so a tick in flight always commits
        self._lock = threading.Lock()

        # Game state
        self._phase: Phase = Phase.IDLE
        self._state: GameState = GameState.initial(config).evolve(obstacles=())
        self._run_id: int = 0

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def phase(self) -> Phase:
        """Current state machine phase."""
        return self._phase

    @property
    def state(self) -> GameState:
        """Last committed state."""
        return self._state

    @property
    def score(self) -> int:
        """Current score."""
        return self._state.score

    @property
    def tick_count(self) -> int:
        """Ticks committed in the current run."""
        return self._state.tick

    @property
    def is_running(self) -> bool:
        return self._phase is Phase.RUNNING

    @property
    def is_over(self) -> bool:
        """True if the run has ended."""
        return self._phase is Phase.OVER

    @property
    def termination_reason(self) -> str:
        """Reason for game end, or empty string."""
        return self._state.termination_reason

    @property
    def run_id(self) -> int:
        """Incremented on every start/reset."""
        return self._run_id

    @property
    def inputs(self) -> InputBuffer:
        """Input buffer (for input layers that feed it directly)."""
        return self._inputs

    @property
    def rng(self) -> GameRng:
        return self._rng

    @property
    def scorer(self) -> ScoreTracker:
        return self._scorer

    @property
    def physics(self) -> PhysicsSpawner:
        return self._physics

    @property
    def collision(self) -> CollisionEngine:
        return self._collision

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self, seed: Optional[int] = None) -> GameSnapshot:
        """
        Start a fresh run from any phase.

        Args:
            seed: New random seed. Keeps the current stream if None.

        Returns:
            Initial snapshot (phase RUNNING).
        """
        with self._lock:
            previous = self._phase
            self._rng.reset(seed)
            self._scorer.reset()
            self._inputs.discard_actions()

            self._state = GameState.initial(self._config)
            self._phase = Phase.RUNNING
            self._run_id += 1

            logger.info("Run %d started (%s -> running)", self._run_id, previous.value)
            return self._build_snapshot()

    def start(self, seed: Optional[int] = None) -> GameSnapshot:
        """Idle -> Running. Same initialisation as reset()."""
        return self.reset(seed)

    def stop(self) -> GameSnapshot:
        """
        Halt a running run. Waits for a tick in flight to commit first.

        Returns:
            Final snapshot (phase OVER).
        """
        with self._lock:
            if self._phase is Phase.RUNNING:
                self._state = self._state.end(TerminationReason.STOPPED)
                self._phase = Phase.OVER
                logger.info("Run %d stopped at tick %d", self._run_id, self._state.tick)
            return self._build_snapshot()

    # ------------------------------------------------------------------
    # Input hooks
    # ------------------------------------------------------------------

    def set_flap(self, held: bool) -> None:
        """Level signal: flap held or released."""
        if held:
            self._inputs.press(Control.FLAP)
        else:
            self._inputs.release(Control.FLAP)

    def press_flap(self) -> None:
        self.set_flap(True)

    def release_flap(self) -> None:
        self.set_flap(False)

    def fire(self) -> bool:
        """
        Queue a shot for the next tick (keyboard or pointer).

        Returns:
            False if the run is not active and the shot was ignored.
        """
        if self._phase is not Phase.RUNNING:
            return False
        self._inputs.push(Action.FIRE)
        return True

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self) -> TickResult:
        """
        Advance the run by one tick.

        Outside the Running phase this is a no-op returning the current
        snapshot with ticked=False.
        """
        with self._lock:
            if self._phase is not Phase.RUNNING:
                return TickResult(
                    snapshot=self._build_snapshot(),
                    ticked=False,
                    terminated=self._phase is Phase.OVER,
                    termination_reason=self._state.termination_reason,
                    delta_score=0
                )

            frame = self._inputs.drain()
            previous = self._state

            state = self._physics.fire(previous, frame.fire_count)
            motion = self._physics.step(state, frame.flap)
            report = self._collision.resolve(motion.state)

            committed = report.state.evolve(tick=previous.tick + 1)
            events = motion.score_events + report.score_events
            self._scorer.record(events)

            self._state = committed
            self._phase = next_phase(self._phase, committed.over)

            if report.hits:
                logger.debug("Tick %d: %d enemy hit(s)", committed.tick, len(report.hits))
            if committed.over:
                logger.info(
                    "Run %d over at tick %d (%s), score %d",
                    self._run_id, committed.tick, committed.termination_reason, committed.score
                )

            return TickResult(
                snapshot=self._build_snapshot(),
                ticked=True,
                terminated=committed.over,
                termination_reason=committed.termination_reason,
                delta_score=committed.score - previous.score,
                hits=report.hits,
                score_events=events,
                spawned_enemy=motion.spawned_enemy,
                spawned_obstacle=motion.spawned_obstacle
            )

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def snapshot(self) -> GameSnapshot:
        """Read-only snapshot of the committed state."""
        return self._build_snapshot()

    def observation(self) -> Dict[str, Any]:
        """Numpy observation dict of the committed state."""
        return self._snapshot_builder.to_obs_dict(self._build_snapshot())

    def _build_snapshot(self) -> GameSnapshot:
        return self._snapshot_builder.build(self._state, self._phase)

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        state = self._state
        return {
            "score": state.score,
            "tick": state.tick,
            "phase": self._phase.value,
            "projectiles": len(state.projectiles),
            "enemies": len(state.enemies),
            "obstacles": len(state.obstacles),
            "enemies_destroyed": self._scorer.enemies_destroyed,
            "obstacles_passed": self._scorer.obstacles_passed,
            "terminated_reason": state.termination_reason,
        }

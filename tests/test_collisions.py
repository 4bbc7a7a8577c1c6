"""
Tests for collision detection and resolution.
"""

import pytest

from flipshoot.core.collision import CollisionEngine, circle_collide, obstacle_blocks
from flipshoot.core.config_loader import load_config
from flipshoot.core.entities import Character, Projectile, Enemy, Obstacle, EdgeTag
from flipshoot.core.game_state import GameState
from flipshoot.core.rules import TerminationReason


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def engine(config):
    return CollisionEngine(config)


@pytest.fixture
def empty_state(config):
    """Initial state with no obstacles, character at (100, 300)."""
    return GameState.initial(config).evolve(obstacles=(), next_uid=100)


def make_enemy(uid, x, y, size=25):
    return Enemy(uid=uid, x=x, y=y, velocity_x=-2, velocity_y=0, size=size, edge=EdgeTag.RIGHT)


def make_projectile(uid, x, y, size=8):
    return Projectile(uid=uid, x=x, y=y, velocity=8, size=size)


class TestCircleCollide:
    """Test the circle overlap primitive."""

    def test_overlap(self):
        assert circle_collide((0, 0), 5, (8, 0), 5)

    def test_touching_is_not_overlap(self):
        assert not circle_collide((0, 0), 5, (10, 0), 5)

    def test_apart(self):
        assert not circle_collide((0, 0), 5, (30, 40), 5)

    def test_diagonal(self):
        # Distance 5, radii sum 6
        assert circle_collide((0, 0), 3, (3, 4), 3)


class TestProjectileHits:
    """Test projectile vs enemy resolution."""

    def test_hit_removes_both_and_scores(self, engine, empty_state):
        state = empty_state.evolve(
            projectiles=(make_projectile(1, 500, 300),),
            enemies=(make_enemy(2, 495, 292),)
        )

        report = engine.resolve(state)

        assert report.state.projectiles == ()
        assert report.state.enemies == ()
        assert report.state.score == 10
        assert len(report.hits) == 1
        assert report.hits[0].projectile_uid == 1
        assert report.hits[0].enemy_uid == 2
        assert [e.points for e in report.score_events] == [10]

    def test_one_projectile_two_enemies(self, engine, empty_state):
        """A projectile overlapping two enemies destroys only the first."""
        state = empty_state.evolve(
            projectiles=(make_projectile(1, 500, 300),),
            enemies=(make_enemy(2, 495, 292), make_enemy(3, 490, 290))
        )

        report = engine.resolve(state)

        assert report.state.projectiles == ()
        assert [e.uid for e in report.state.enemies] == [3]
        assert report.state.score == 10

    def test_two_projectiles_one_enemy(self, engine, empty_state):
        """An enemy is consumed once; the second projectile survives."""
        state = empty_state.evolve(
            projectiles=(make_projectile(1, 500, 300), make_projectile(2, 502, 302)),
            enemies=(make_enemy(3, 495, 292),)
        )

        report = engine.resolve(state)

        assert [p.uid for p in report.state.projectiles] == [2]
        assert report.state.enemies == ()
        assert report.state.score == 10

    def test_two_projectiles_two_enemies(self, engine, empty_state):
        state = empty_state.evolve(
            projectiles=(make_projectile(1, 500, 300), make_projectile(2, 502, 302)),
            enemies=(make_enemy(3, 495, 292), make_enemy(4, 497, 294))
        )

        report = engine.resolve(state)

        assert report.state.projectiles == ()
        assert report.state.enemies == ()
        assert report.state.score == 20

    def test_miss_leaves_everything(self, engine, empty_state):
        state = empty_state.evolve(
            projectiles=(make_projectile(1, 500, 300),),
            enemies=(make_enemy(2, 600, 100),)
        )

        report = engine.resolve(state)

        assert report.hits == []
        assert report.state.projectiles == state.projectiles
        assert report.state.enemies == state.enemies
        assert report.state.score == 0

    def test_destroyed_enemy_cannot_end_run(self, engine, empty_state):
        """An enemy shot this tick is removed before the character check."""
        character = empty_state.character
        enemy = make_enemy(2, character.x + 5, character.y)
        projectile = make_projectile(1, character.x + 10, character.y + 10)
        state = empty_state.evolve(projectiles=(projectile,), enemies=(enemy,))

        report = engine.resolve(state)

        assert report.state.enemies == ()
        assert not report.state.over


class TestCharacterCollisions:
    """Test terminal collisions for the character."""

    def test_enemy_contact_ends_run(self, engine, empty_state):
        character = empty_state.character
        state = empty_state.evolve(enemies=(make_enemy(1, character.x + 10, character.y + 5),))

        report = engine.resolve(state)

        assert report.state.over
        assert report.state.termination_reason == TerminationReason.ENEMY
        assert report.termination.terminated

    def test_far_enemy_is_harmless(self, engine, empty_state):
        state = empty_state.evolve(enemies=(make_enemy(1, 600, 100),))

        report = engine.resolve(state)

        assert not report.state.over
        assert report.state.termination_reason == ""

    def test_inside_gap_is_safe(self, engine, empty_state):
        # Character y in [300, 330], gap spans [250, 450]
        obstacle = Obstacle(uid=1, x=90, top_height=250, gap=200, width=60)
        state = empty_state.evolve(obstacles=(obstacle,))

        report = engine.resolve(state)

        assert not report.state.over

    def test_top_segment_ends_run(self, engine, empty_state):
        obstacle = Obstacle(uid=1, x=90, top_height=310, gap=200, width=60)
        state = empty_state.evolve(obstacles=(obstacle,))

        report = engine.resolve(state)

        assert report.state.over
        assert report.state.termination_reason == TerminationReason.OBSTACLE

    def test_bottom_segment_ends_run(self, engine, empty_state):
        obstacle = Obstacle(uid=1, x=90, top_height=100, gap=200, width=60)
        state = empty_state.evolve(obstacles=(obstacle,))

        report = engine.resolve(state)

        assert report.state.over
        assert report.state.termination_reason == TerminationReason.OBSTACLE

    def test_no_horizontal_overlap_is_safe(self, engine, empty_state):
        # Character spans x in [100, 130]; obstacle starts exactly at its right edge
        obstacle = Obstacle(uid=1, x=130, top_height=500, gap=50, width=60)
        state = empty_state.evolve(obstacles=(obstacle,))

        report = engine.resolve(state)

        assert not report.state.over

    def test_enemy_checked_before_obstacle(self, engine, empty_state):
        character = empty_state.character
        obstacle = Obstacle(uid=1, x=90, top_height=500, gap=50, width=60)
        enemy = make_enemy(2, character.x, character.y)
        state = empty_state.evolve(obstacles=(obstacle,), enemies=(enemy,))

        report = engine.resolve(state)

        assert report.state.termination_reason == TerminationReason.ENEMY

    def test_floor_termination_is_kept(self, engine, empty_state):
        """A run ended by the floor stays over even with no collisions."""
        state = empty_state.end(TerminationReason.FLOOR)

        report = engine.resolve(state)

        assert report.state.over
        assert report.state.termination_reason == TerminationReason.FLOOR
        assert not report.termination.terminated

    def test_floor_reason_wins_over_collision(self, engine, empty_state):
        character = empty_state.character
        state = empty_state.evolve(
            enemies=(make_enemy(1, character.x, character.y),)
        ).end(TerminationReason.FLOOR)

        report = engine.resolve(state)

        assert report.state.termination_reason == TerminationReason.FLOOR


class TestObstacleBlocks:
    """Test the obstacle span predicate directly."""

    def test_edges(self):
        obstacle = Obstacle(uid=0, x=100, top_height=200, gap=200, width=60)

        at_top = Character(x=100, y=200, velocity=0, size=30)
        at_bottom = Character(x=100, y=370, velocity=0, size=30)
        above = Character(x=100, y=199, velocity=0, size=30)
        below = Character(x=100, y=371, velocity=0, size=30)

        assert not obstacle_blocks(at_top, obstacle)
        assert not obstacle_blocks(at_bottom, obstacle)
        assert obstacle_blocks(above, obstacle)
        assert obstacle_blocks(below, obstacle)

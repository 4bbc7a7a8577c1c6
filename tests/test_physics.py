"""
Tests for physics integration and spawning.
"""

import dataclasses

import pytest

from flipshoot.core.config_loader import load_config
from flipshoot.core.entities import Character, Enemy, Obstacle, EdgeTag
from flipshoot.core.game_state import GameState
from flipshoot.core.physics import PhysicsSpawner
from flipshoot.core.rng import GameRng
from flipshoot.core.rules import TerminationReason


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def calm_config(config):
    """Config with enemy spawning disabled."""
    return dataclasses.replace(
        config, enemy=dataclasses.replace(config.enemy, spawn_probability=0.0)
    )


@pytest.fixture
def physics(calm_config):
    return PhysicsSpawner(calm_config, rng=GameRng(42))


@pytest.fixture
def state(calm_config):
    return GameState.initial(calm_config)


class TestCharacterPhysics:
    """Test gravity, flap and playfield clamps."""

    def test_gravity_from_rest_at_top(self, physics, state):
        """y=0, velocity=0, no flap -> y=0.6, velocity=0.6 after one tick."""
        start = state.evolve(character=dataclasses.replace(state.character, y=0.0, velocity=0.0))

        result = physics.step(start, flap_held=False)

        assert result.state.character.y == pytest.approx(0.6)
        assert result.state.character.velocity == pytest.approx(0.6)
        assert not result.state.over

    def test_flap_overrides_velocity(self, physics):
        """Flap sets velocity to the impulse; it does not accumulate."""
        character = Character(x=100, y=300, velocity=5.0, size=30)

        moved, hit_floor = physics.update_character(character, flap_held=True)

        assert moved.velocity == pytest.approx(-12 + 0.6)
        assert moved.y == pytest.approx(300 - 11.4)
        assert not hit_floor

    def test_repeated_flap_does_not_stack(self, physics):
        """Holding flap keeps the same velocity every tick."""
        character = Character(x=100, y=400, velocity=0.0, size=30)

        first, _ = physics.update_character(character, flap_held=True)
        second, _ = physics.update_character(first, flap_held=True)

        assert first.velocity == pytest.approx(second.velocity)

    def test_upper_clamp_zeroes_velocity(self, physics):
        """Crossing the ceiling clamps y to 0 and resets velocity."""
        character = Character(x=100, y=5.0, velocity=-10.0, size=30)

        moved, hit_floor = physics.update_character(character, flap_held=False)

        assert moved.y == 0.0
        assert moved.velocity == 0.0
        assert not hit_floor

    def test_lower_clamp_ends_run(self, physics, state, config):
        """Crossing the floor clamps y and marks the run over."""
        floor = config.height - config.character.size
        start = state.evolve(character=dataclasses.replace(state.character, y=floor - 1, velocity=5.0))

        result = physics.step(start)

        assert result.state.character.y == floor
        assert result.state.over
        assert result.state.termination_reason == TerminationReason.FLOOR

    def test_y_stays_in_bounds(self, physics, state, config):
        """Character y never leaves [0, height - size]."""
        floor = config.height - config.character.size
        current = state

        for i in range(300):
            current = physics.step(current, flap_held=(i % 7 < 3)).state
            assert 0 <= current.character.y <= floor

    def test_x_is_fixed(self, physics, state):
        current = state
        for _ in range(20):
            current = physics.step(current).state
        assert current.character.x == state.character.x


class TestProjectiles:
    """Test projectile creation and movement."""

    def test_fire_spawns_at_character_front(self, physics, state):
        fired = physics.fire(state)

        assert len(fired.projectiles) == 1
        p = fired.projectiles[0]
        c = state.character
        assert p.x == c.x + c.size
        assert p.y == c.y + c.size / 2
        assert p.velocity == 8
        assert p.size == 8

    def test_fire_count_and_unique_ids(self, physics, state):
        fired = physics.fire(state, count=3)

        uids = [p.uid for p in fired.projectiles]
        assert len(uids) == 3
        assert len(set(uids)) == 3
        assert fired.next_uid == state.next_uid + 3

    def test_fire_zero_is_noop(self, physics, state):
        assert physics.fire(state, count=0) is state

    def test_projectiles_move_right(self, physics, state):
        fired = physics.fire(state)
        x0 = fired.projectiles[0].x

        moved = physics.update_projectiles(fired.projectiles)

        assert moved[0].x == x0 + 8

    def test_projectile_dropped_past_right_edge(self, physics, state, config):
        fired = physics.fire(state)
        near_edge = (dataclasses.replace(fired.projectiles[0], x=config.width - 4),)

        assert physics.update_projectiles(near_edge) == ()


class TestObstacles:
    """Test obstacle scrolling, spawning and scoring."""

    def test_obstacles_scroll_left(self, physics, state):
        scrolled = physics.scroll_obstacles(state.obstacles)

        for before, after in zip(state.obstacles, scrolled):
            assert after.x == before.x - 3

    def test_spawn_when_below_target_and_spaced(self, physics, config):
        obstacles = (Obstacle(uid=0, x=config.width - 301, top_height=150, gap=200, width=60),)
        assert physics.should_spawn_obstacle(obstacles)

    def test_no_spawn_when_newest_too_close(self, physics, config):
        obstacles = (Obstacle(uid=0, x=config.width - 300, top_height=150, gap=200, width=60),)
        assert not physics.should_spawn_obstacle(obstacles)

    def test_no_spawn_at_target_count(self, physics):
        obstacles = tuple(
            Obstacle(uid=i, x=float(i * 100), top_height=150, gap=200, width=60)
            for i in range(4)
        )
        assert not physics.should_spawn_obstacle(obstacles)

    def test_spawn_when_empty(self, physics):
        assert physics.should_spawn_obstacle(())

    def test_spawned_obstacle_shape(self, physics, config):
        for uid in range(50):
            obstacle = physics.spawn_obstacle(uid)
            assert obstacle.x == config.width
            assert 100 <= obstacle.top_height < 300
            assert obstacle.gap == 200
            assert obstacle.width == 60

    def test_obstacle_passing_scores_once(self, physics, state):
        """Obstacle at x=60 scrolls past after 41 ticks and scores exactly once."""
        tracked = Obstacle(uid=99, x=60, top_height=150, gap=200, width=60)
        current = state.evolve(obstacles=(tracked,), next_uid=100)

        score_by_tick = []
        removed_at = None
        for tick in range(1, 50):
            current = physics.step(current, flap_held=True).state
            score_by_tick.append(current.score)
            present = any(o.uid == 99 for o in current.obstacles)
            if not present and removed_at is None:
                removed_at = tick

        assert removed_at == 41
        assert score_by_tick[39] == 0
        assert score_by_tick[40] == 1
        assert current.score == 1


class TestEnemies:
    """Test enemy movement, pruning and spawning."""

    def test_left_spawn(self, physics, config):
        enemy = physics.spawn_enemy(uid=1, edge=EdgeTag.LEFT)

        assert enemy.x == -config.enemy.size
        assert enemy.velocity_x == 2
        assert -1 <= enemy.velocity_y < 1
        assert 0 <= enemy.y < config.height
        assert enemy.edge is EdgeTag.LEFT
        assert enemy.size == 25

    def test_right_spawn(self, physics, config):
        enemy = physics.spawn_enemy(uid=1, edge=EdgeTag.RIGHT)

        assert enemy.x == config.width + config.enemy.size
        assert enemy.velocity_x == -2
        assert -1 <= enemy.velocity_y < 1

    def test_top_spawn(self, physics, config):
        enemy = physics.spawn_enemy(uid=1, edge=EdgeTag.TOP)

        assert enemy.y == -config.enemy.size
        assert enemy.velocity_y == 2
        assert 0 <= enemy.x < config.width
        assert -1 <= enemy.velocity_x < 1

    def test_bottom_spawn(self, physics, config):
        enemy = physics.spawn_enemy(uid=1, edge=EdgeTag.BOTTOM)

        assert enemy.y == config.height + config.enemy.size
        assert enemy.velocity_y == -2

    def test_random_edge_covers_all_sides(self, physics):
        edges = {physics.spawn_enemy(uid=i).edge for i in range(200)}
        assert edges == set(EdgeTag)

    def test_left_enemy_removed_past_right_margin(self, physics, config):
        """A left-edge enemy is removed once x reaches width + size."""
        limit = config.width + config.enemy.size
        enemy = Enemy(
            uid=1, x=-config.enemy.size, y=300, velocity_x=2, velocity_y=0,
            size=config.enemy.size, edge=EdgeTag.LEFT
        )
        enemies = (enemy,)
        last_x = enemy.x

        while enemies:
            last_x = enemies[0].x
            enemies = physics.update_enemies(enemies)

        assert last_x < limit
        assert last_x + 2 >= limit

    def test_spawned_enemy_survives_first_move(self, physics):
        """Edge spawns sit exactly on the margin and move inward next tick."""
        for edge in EdgeTag:
            enemy = physics.spawn_enemy(uid=1, edge=edge)
            assert physics.update_enemies((enemy,)) != ()

    def test_spawn_probability_one(self, config):
        eager = dataclasses.replace(
            config, enemy=dataclasses.replace(config.enemy, spawn_probability=1.0)
        )
        physics = PhysicsSpawner(eager, rng=GameRng(1))
        current = GameState.initial(eager)

        for _ in range(5):
            result = physics.step(current, flap_held=True)
            assert result.spawned_enemy is not None
            current = result.state

        assert len(current.enemies) == 5

    def test_spawn_probability_zero(self, physics, state):
        current = state
        for _ in range(100):
            result = physics.step(current, flap_held=current.character.y > 300)
            assert result.spawned_enemy is None
            current = result.state
        assert current.enemies == ()


class TestDeterminism:
    """Seeded random sources replay identically."""

    def test_same_seed_same_states(self, config):
        a = PhysicsSpawner(config, rng=GameRng(7))
        b = PhysicsSpawner(config, rng=GameRng(7))
        state_a = state_b = GameState.initial(config)

        for i in range(200):
            flap = state_a.character.y > 300
            state_a = a.step(state_a, flap).state
            state_b = b.step(state_b, flap).state

        assert state_a == state_b

    def test_different_seeds_differ(self, config):
        a = PhysicsSpawner(config, rng=GameRng(1))
        b = PhysicsSpawner(config, rng=GameRng(2))

        obstacles_a = [a.spawn_obstacle(i).top_height for i in range(10)]
        obstacles_b = [b.spawn_obstacle(i).top_height for i in range(10)]

        assert obstacles_a != obstacles_b

"""
Human Play Mode
================

Play Flip & Shoot interactively. The core runs on its own fixed tick through
TickDriver; this window only feeds inputs in and draws the latest snapshot.

Controls:
    - Space (hold): Flap
    - Enter / Left click: Fire
    - R: Start / restart (Enter or click also start when no run is active)
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--fps FPS] [--verbose]
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

import pygame

from flipshoot.core.config_loader import load_config, GameConfig
from flipshoot.core.driver import TickDriver
from flipshoot.core.entities import EdgeTag
from flipshoot.core.game import LoopController
from flipshoot.core.rules import Phase
from flipshoot.core.state_snapshot import GameSnapshot


class ArcadeRenderer:
    """Draws a snapshot with plain shapes."""

    EDGE_COLORS = {
        EdgeTag.TOP: (239, 68, 68),
        EdgeTag.BOTTOM: (168, 85, 247),
        EdgeTag.LEFT: (249, 115, 22),
        EdgeTag.RIGHT: (59, 130, 246),
    }

    def __init__(self, config: GameConfig):
        self._config = config
        self._width = config.width
        self._height = config.height

        self._sky_top = (176, 224, 255)
        self._sky_bottom = (140, 190, 235)
        self._ground = (38, 115, 38)
        self._obstacle_fill = (54, 60, 74)
        self._obstacle_cap = (76, 84, 102)
        self._character = (74, 222, 128)
        self._projectile = (250, 204, 21)
        self._text = (30, 30, 40)

        pygame.font.init()
        self._font_large = pygame.font.Font(None, 56)
        self._font_medium = pygame.font.Font(None, 30)
        self._font_small = pygame.font.Font(None, 22)

        self._bg_surface = self._create_gradient_background()

    def _create_gradient_background(self) -> pygame.Surface:
        surface = pygame.Surface((self._width, self._height))
        for y in range(self._height):
            t = y / self._height
            color = tuple(
                int(top * (1 - t) + bottom * t)
                for top, bottom in zip(self._sky_top, self._sky_bottom)
            )
            pygame.draw.line(surface, color, (0, y), (self._width, y))
        pygame.draw.rect(surface, self._ground, (0, self._height - 40, self._width, 40))
        return surface

    def render(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        screen.blit(self._bg_surface, (0, 0))
        self._draw_obstacles(screen, snapshot)
        self._draw_projectiles(screen, snapshot)
        self._draw_enemies(screen, snapshot)
        self._draw_character(screen, snapshot)
        self._draw_score(screen, snapshot)

        if snapshot.phase is Phase.IDLE:
            self._draw_banner(screen, "Flip & Shoot", "Press R to start")
        elif snapshot.phase is Phase.OVER:
            self._draw_banner(screen, "Game Over", f"Score: {snapshot.score}  -  R to restart")

    def _draw_obstacles(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        for obstacle in snapshot.obstacles:
            x = int(obstacle.x)
            w = int(obstacle.width)
            top = int(obstacle.top_height)
            bottom = int(obstacle.gap_bottom)
            pygame.draw.rect(screen, self._obstacle_fill, (x, 0, w, top))
            pygame.draw.rect(screen, self._obstacle_fill, (x, bottom, w, self._height - bottom))
            pygame.draw.rect(screen, self._obstacle_cap, (x - 5, top - 20, w + 10, 20))
            pygame.draw.rect(screen, self._obstacle_cap, (x - 5, bottom, w + 10, 20))

    def _draw_projectiles(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        for p in snapshot.projectiles:
            cx, cy = p.center
            pygame.draw.circle(screen, self._projectile, (int(cx), int(cy)), int(p.radius))

    def _draw_enemies(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        for e in snapshot.enemies:
            cx, cy = e.center
            color = self.EDGE_COLORS[e.edge]
            pygame.draw.circle(screen, color, (int(cx), int(cy)), int(e.radius))
            pygame.draw.circle(screen, (255, 255, 255), (int(cx - 4), int(cy - 3)), 3)
            pygame.draw.circle(screen, (255, 255, 255), (int(cx + 4), int(cy - 3)), 3)

    def _draw_character(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        c = snapshot.character
        rect = pygame.Rect(int(c.x), int(c.y + c.size / 6), int(c.size), int(c.size * 2 / 3))
        pygame.draw.ellipse(screen, self._character, rect)
        cx, cy = c.center
        pygame.draw.circle(screen, (255, 255, 255), (int(cx + c.size / 4), int(cy - 5)), 4)
        pygame.draw.polygon(
            screen, (251, 191, 36),
            [(c.x + c.size, cy), (c.x + c.size + 8, cy - 3), (c.x + c.size + 8, cy + 3)]
        )

    def _draw_score(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        score = self._font_medium.render(f"Score: {snapshot.score}", True, self._text)
        screen.blit(score, (12, 10))
        hint = self._font_small.render("SPACE flap  |  ENTER/CLICK fire", True, self._text)
        screen.blit(hint, (self._width - hint.get_width() - 12, 14))

    def _draw_banner(self, screen: pygame.Surface, title: str, subtitle: str) -> None:
        overlay = pygame.Surface((self._width, self._height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 128))
        screen.blit(overlay, (0, 0))

        title_surf = self._font_large.render(title, True, (255, 255, 255))
        sub_surf = self._font_medium.render(subtitle, True, (255, 255, 255))
        screen.blit(title_surf, ((self._width - title_surf.get_width()) // 2, self._height // 2 - 50))
        screen.blit(sub_surf, ((self._width - sub_surf.get_width()) // 2, self._height // 2 + 10))


class HumanPlayer:
    """Pygame window driving a LoopController through a TickDriver."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        target_fps: int = 60
    ):
        if config is None:
            config = load_config()

        self._config = config
        self._seed = seed
        self._target_fps = target_fps

        self._game = LoopController(config=config, seed=seed)
        self._driver = TickDriver(self._game)

        pygame.init()
        self._screen = pygame.display.set_mode((config.width, config.height))
        pygame.display.set_caption("Flip & Shoot")
        self._clock = pygame.time.Clock()

        self._renderer = ArcadeRenderer(config)
        self._running = True
        self._last_score = 0

    def run(self) -> int:
        """Run the window loop. Returns the last score."""
        print("=== Flip & Shoot ===")
        print("SPACE to flap, ENTER or click to fire")
        print("R to start/restart, ESC to quit")
        print()

        while self._running:
            self._handle_events()
            result = self._driver.poll()
            if result is not None and result.ticked:
                if result.delta_score > 0:
                    print(f"  +{result.delta_score} (Total: {result.snapshot.score})")
                if result.terminated:
                    print(f"\nGAME OVER ({result.termination_reason}) - Score: {result.snapshot.score}")

            self._renderer.render(self._screen, self._game.snapshot())
            pygame.display.flip()
            self._clock.tick(self._target_fps)

        self._driver.stop()
        pygame.quit()
        return self._game.score

    def _handle_events(self) -> None:
        """Translate pygame events into controller inputs."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key == pygame.K_r:
                    self._restart()
                elif event.key == pygame.K_SPACE:
                    self._game.press_flap()
                elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                    self._fire_or_start()

            elif event.type == pygame.KEYUP:
                if event.key == pygame.K_SPACE:
                    self._game.release_flap()

            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1:
                    self._fire_or_start()

    def _fire_or_start(self) -> None:
        if self._game.is_running:
            self._game.fire()
        else:
            self._restart()

    def _restart(self) -> None:
        """Start a new run (from Idle or Over)."""
        self._game.reset(seed=self._seed)
        self._driver.resume()
        print("\n=== Game Started ===\n")


def main():
    parser = argparse.ArgumentParser(description="Play Flip & Shoot interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--fps", type=int, default=60, help="Render FPS")
    parser.add_argument("--config", type=str, default=None, help="Path to game_config.yaml")
    parser.add_argument("--verbose", action="store_true", help="Log phase transitions")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    config = load_config(args.config)
    player = HumanPlayer(config=config, seed=args.seed, target_fps=args.fps)
    score = player.run()
    print(f"\nFinal Score: {score}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

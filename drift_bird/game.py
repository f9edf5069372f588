"""pygame front end for Drift Bird: frame clock, input wiring and flat drawing.

The simulation core never imports pygame; this module only feeds it frame
deltas and ``InputEvents`` and draws the resulting ``Snapshot``.
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from typing import Optional, Sequence

import numpy as np
import pygame

from .config import (
    COL_BACKGROUND,
    COL_BIRD,
    COL_GROUND,
    COL_GROUND_LINE,
    COL_PIPE,
    COL_TEXT,
    COL_WARNING,
    GLITCH_SHAKE,
    GLITCH_SHAKE_DECAY,
    GROUND_Y,
    PIPE_WIDTH,
    TARGET_FPS,
    WINDOW_HEIGHT,
    WINDOW_WIDTH,
)
from .modes import GameMode, get_mode_profile, other_mode
from .simulation import InputEvents, jump_to_phase, reset, restart, set_mode, step, toggle_assist
from .snapshot import OBSTACLE_COLUMNS, Snapshot

logger = logging.getLogger(__name__)

FLAP_KEYS = (pygame.K_SPACE, pygame.K_UP, pygame.K_w)
PHASE_KEYS = {getattr(pygame, f"K_{n}"): n for n in range(1, 10)}

_X = OBSTACLE_COLUMNS.index("x")
_GAP_Y = OBSTACLE_COLUMNS.index("effective_gap_y")
_GAP = OBSTACLE_COLUMNS.index("gap_size")
_GHOST = OBSTACLE_COLUMNS.index("is_ghost")


def shift_hue(color: tuple[int, int, int], degrees: float) -> pygame.Color:
    """Rotate ``color`` around the hue wheel."""
    shifted = pygame.Color(*color)
    if degrees:
        h, s, v, a = shifted.hsva
        shifted.hsva = ((h + degrees) % 360.0, s, v, a)
    return shifted


class Game:
    """Top-level controller: owns the simulation state, input, update, and draw."""

    def __init__(self, mode: GameMode | str = GameMode.CHAOS, seed: Optional[int] = None) -> None:
        pygame.init()
        self.screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        pygame.display.set_caption("Drift Bird")
        self.clock = pygame.time.Clock()
        self.font_big = pygame.font.SysFont(None, 48)
        self.font_small = pygame.font.SysFont(None, 22)
        self.seed = seed
        self.state = reset(get_mode_profile(mode), seed=seed)
        self.best = 0
        self.frame = pygame.Surface((WINDOW_WIDTH, WINDOW_HEIGHT))
        # Cosmetic effects draw from their own stream, never the simulation rng.
        self.fx_rng = random.Random(seed)
        self.shake = [0.0, 0.0]
        self._clear_inputs()

    def _clear_inputs(self) -> None:
        self._flap = False
        self._hold = False
        self._release = False

    def _take_inputs(self) -> InputEvents:
        events = InputEvents(flap_pressed=self._flap, hold_active=self._hold, hold_released=self._release)
        self._clear_inputs()
        return events

    def restart(self) -> None:
        self.best = max(self.best, self.state.score)
        self.state = restart(self.state)
        self.shake = [0.0, 0.0]
        self._clear_inputs()

    def press(self) -> None:
        if self.state.is_game_over:
            self.restart()
            return
        self._flap = True
        self._hold = True
        if self.state.phase_config.visual_glitch:
            self.shake = [
                (self.fx_rng.random() - 0.5) * GLITCH_SHAKE,
                (self.fx_rng.random() - 0.5) * GLITCH_SHAKE,
            ]

    def release(self) -> None:
        self._release = True

    def handle_input(self, event: pygame.event.Event) -> None:
        if event.type == pygame.KEYDOWN:
            if event.key in FLAP_KEYS:
                self.press()
            elif event.key == pygame.K_r:
                self.restart()
            elif event.key == pygame.K_m:
                set_mode(self.state, other_mode(self.state.profile.mode))
            elif event.key == pygame.K_a:
                toggle_assist(self.state)
            elif event.key in PHASE_KEYS:
                jump_to_phase(self.state, PHASE_KEYS[event.key])
            elif event.key == pygame.K_ESCAPE:
                pygame.event.post(pygame.event.Event(pygame.QUIT))
        elif event.type == pygame.KEYUP:
            if event.key in FLAP_KEYS:
                self.release()
        elif event.type == pygame.MOUSEBUTTONDOWN:
            if event.button == 1:
                self.press()
        elif event.type == pygame.MOUSEBUTTONUP:
            if event.button == 1:
                self.release()

    def update(self, dt: float) -> None:
        self.state = step(self.state, dt, self._take_inputs())
        self.shake = [s * GLITCH_SHAKE_DECAY for s in self.shake]
        if self.state.is_game_over:
            self.best = max(self.best, self.state.score)

    def _draw_pipe(self, surf: pygame.Surface, row: np.ndarray, opacity: float, color: pygame.Color) -> None:
        x = int(row[_X])
        gap_top = int(row[_GAP_Y] - row[_GAP] / 2.0)
        gap_bottom = int(row[_GAP_Y] + row[_GAP] / 2.0)
        top = pygame.Rect(x, 0, PIPE_WIDTH, max(0, gap_top))
        bottom = pygame.Rect(x, gap_bottom, PIPE_WIDTH, max(0, GROUND_Y - gap_bottom))
        if not row[_GHOST]:
            pygame.draw.rect(surf, color, top)
            pygame.draw.rect(surf, color, bottom)
            return
        layer = pygame.Surface((WINDOW_WIDTH, WINDOW_HEIGHT), pygame.SRCALPHA)
        ghost = (color.r, color.g, color.b, int(255 * opacity))
        pygame.draw.rect(layer, ghost, top)
        pygame.draw.rect(layer, ghost, bottom)
        surf.blit(layer, (0, 0))

    def draw_snapshot(self, surf: pygame.Surface, snap: Snapshot) -> None:
        frame = self.frame
        hue = snap.hue_shift
        frame.fill(shift_hue(COL_BACKGROUND, hue))
        pipe_color = shift_hue(COL_PIPE, hue)
        for row in snap.obstacle_array():
            self._draw_pipe(frame, row, snap.ghost_pipe_opacity, pipe_color)
        pygame.draw.rect(frame, COL_GROUND, pygame.Rect(0, GROUND_Y, WINDOW_WIDTH, WINDOW_HEIGHT - GROUND_Y))
        pygame.draw.line(frame, COL_GROUND_LINE, (0, GROUND_Y), (WINDOW_WIDTH, GROUND_Y), 2)

        actor = snap.actor
        if not snap.is_game_over:
            body = pygame.Rect(
                int(actor.x + self.shake[0]), int(actor.y + self.shake[1]), int(actor.width), int(actor.height)
            )
            pygame.draw.rect(frame, shift_hue(COL_BIRD, hue), body)

        if snap.control.warning_flash or snap.control.is_inverted:
            pygame.draw.rect(frame, COL_WARNING, frame.get_rect(), 4)
        if snap.overload.is_active and snap.overload.flicker:
            veil = pygame.Surface((WINDOW_WIDTH, WINDOW_HEIGHT), pygame.SRCALPHA)
            veil.fill((255, 255, 255, 60))
            frame.blit(veil, (0, 0))

        if snap.rotation:
            # pygame rotates counter-clockwise
            tilted = pygame.transform.rotate(frame, -snap.rotation)
            surf.fill(COL_BACKGROUND)
            surf.blit(tilted, tilted.get_rect(center=surf.get_rect().center))
        else:
            surf.blit(frame, (0, 0))
        self._draw_ui(surf, snap)

    def _draw_ui(self, surf: pygame.Surface, snap: Snapshot) -> None:
        score_text = self.font_big.render(str(snap.score), True, COL_TEXT)
        surf.blit(score_text, score_text.get_rect(midtop=(WINDOW_WIDTH // 2, 16)))
        info = self.font_small.render(
            f"Phase {snap.phase}  {snap.survival_time:.1f}s  {snap.mode.upper()}", True, COL_TEXT
        )
        surf.blit(info, (8, 8))
        for i, name in enumerate(snap.active_effects):
            line = self.font_small.render(name, True, COL_TEXT)
            surf.blit(line, (8, 30 + i * 18))

        if snap.slow_motion.title:
            banner = self.font_small.render(snap.slow_motion.title, True, COL_BIRD)
            surf.blit(banner, banner.get_rect(center=(WINDOW_WIDTH // 2, WINDOW_HEIGHT // 3)))
        if snap.control.is_warning:
            warn = self.font_small.render("CONTROLS FLIPPING", True, COL_WARNING)
            surf.blit(warn, warn.get_rect(center=(WINDOW_WIDTH // 2, WINDOW_HEIGHT // 2)))

        if snap.is_game_over:
            title = self.font_big.render("Game Over", True, COL_TEXT)
            best = self.font_small.render(f"Best: {self.best}  Space to retry", True, COL_TEXT)
            surf.blit(title, title.get_rect(center=(WINDOW_WIDTH // 2, WINDOW_HEIGHT // 2 - 30)))
            surf.blit(best, best.get_rect(center=(WINDOW_WIDTH // 2, WINDOW_HEIGHT // 2 + 10)))

    def draw(self) -> None:
        self.draw_snapshot(self.screen, self.state.snapshot())
        pygame.display.flip()

    def run(self) -> None:
        while True:
            dt = self.clock.tick(TARGET_FPS) / 1000.0
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    pygame.quit()
                    sys.exit(0)
                self.handle_input(event)

            self.update(dt)
            self.draw()


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Drift Bird: an arcade game whose rules decay")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in GameMode],
        default=GameMode.CHAOS.value,
        help="Difficulty profile (default: chaos)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for a replayable run")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s:%(name)s:%(message)s",
    )
    Game(mode=args.mode, seed=args.seed).run()

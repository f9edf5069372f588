"""Game entities: the player-controlled bird and the pipe obstacles.

Per-frame quantities (gravity, speed, wind) are multiplied by ``frames``, the
number of reference frames a tick covers; ``frames=1.0`` is one 60 Hz frame.
"""

from __future__ import annotations

import logging
import math
import random

from .config import (
    BIRD_HEIGHT,
    BIRD_INITIAL_Y,
    BIRD_WIDTH,
    BIRD_X,
    DELAYED_COLLISION_PHASE,
    DELAYED_COLLISION_PROBABILITY,
    FLAP_FORCE,
    FLIP_HOLD_FACTOR,
    FLIP_RELEASE_FACTOR,
    FLIP_SOFTEN_BLEND,
    GROUND_Y,
    HORIZONTAL_FRICTION,
    MAX_HORIZONTAL_VELOCITY,
    MAX_VELOCITY,
    MIN_GAP_Y,
    MIN_VELOCITY,
    OSCILLATION_AMPLITUDE,
    PIPE_WIDTH,
    WINDOW_WIDTH,
)
from .modes import ModeProfile
from .phases import gap_size, ghost_probability, oscillation_frequency, oscillation_phase_multiplier
from .utils import clamp

logger = logging.getLogger(__name__)


class Bird:
    def __init__(self, x: float = BIRD_X, y: float = BIRD_INITIAL_Y) -> None:
        self.width = BIRD_WIDTH
        self.height = BIRD_HEIGHT
        self.reset(x, y)

    def reset(self, x: float = BIRD_X, y: float = BIRD_INITIAL_Y) -> None:
        self.x = float(x)
        self.y = float(y)
        self.vx = 0.0
        self.vy = 0.0
        self.alive = True

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2.0

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def flap(self, control_inverted: bool = False) -> bool:
        """Apply the upward impulse. Returns False when the flap is ignored.

        While controls are inverted flapping does nothing; vertical motion is
        driven by the hold/release branch of ``update`` instead.
        """
        if not self.alive or control_inverted:
            return False
        self.vy = FLAP_FORCE
        return True

    def vertical_acceleration(
        self,
        gravity: float,
        control_inverted: bool,
        holding: bool,
        flip_force_multiplier: float,
    ) -> float:
        if not control_inverted:
            return gravity
        if holding:
            # Holding pulls down hard, like a stuck control.
            accel = gravity * FLIP_HOLD_FACTOR * flip_force_multiplier
        else:
            accel = -gravity * FLIP_RELEASE_FACTOR * flip_force_multiplier
        if flip_force_multiplier < 1.0:
            # Softened modes keep some plain gravity so they don't turn floaty.
            accel += gravity * (1.0 - flip_force_multiplier) * FLIP_SOFTEN_BLEND
        return accel

    def update(
        self,
        gravity: float,
        wind_force: float = 0.0,
        control_inverted: bool = False,
        holding: bool = False,
        flip_force_multiplier: float = 1.0,
        frames: float = 1.0,
    ) -> None:
        if not self.alive:
            return
        accel = self.vertical_acceleration(gravity, control_inverted, holding, flip_force_multiplier)
        self.vy = clamp(self.vy + accel * frames, MIN_VELOCITY, MAX_VELOCITY)
        self.y += self.vy * frames
        # Hard ceiling, not a bounce
        if self.y < 0.0:
            self.y = 0.0
            self.vy = 0.0

        # Wind only displaces sideways
        self.vx += wind_force * frames
        self.vx *= HORIZONTAL_FRICTION**frames
        self.vx = clamp(self.vx, -MAX_HORIZONTAL_VELOCITY, MAX_HORIZONTAL_VELOCITY)
        self.x = clamp(self.x + self.vx * frames, 0.0, WINDOW_WIDTH - self.width)


class Pipe:
    def __init__(
        self,
        x: float,
        gap_y: float,
        gap_size: float,
        is_ghost: bool = False,
        has_delayed_collision: bool = False,
        oscillation_seed: float = 0.0,
        spawn_time_ms: float = 0.0,
    ) -> None:
        self.x = float(x)
        self.gap_y = float(gap_y)  # center of the gap
        self.gap_size = float(gap_size)
        self.width = PIPE_WIDTH
        self.is_ghost = is_ghost
        self.has_delayed_collision = has_delayed_collision
        self.oscillation_seed = oscillation_seed
        self.oscillation_offset = 0.0
        self.spawn_time_ms = spawn_time_ms
        self.scored = False

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2.0

    @property
    def effective_gap_y(self) -> float:
        return self.gap_y + self.oscillation_offset

    @property
    def gap_top(self) -> float:
        return self.effective_gap_y - self.gap_size / 2.0

    @property
    def gap_bottom(self) -> float:
        return self.effective_gap_y + self.gap_size / 2.0

    def update(
        self,
        speed: float,
        phase: int,
        oscillation_enabled: bool,
        survival_time: float,
        profile: ModeProfile,
        frames: float = 1.0,
    ) -> None:
        self.x -= speed * frames
        if not oscillation_enabled:
            self.oscillation_offset = 0.0
            return
        # Each pipe's seed keeps neighbours swinging out of step.
        angle = survival_time * oscillation_frequency(phase) + self.oscillation_seed
        self.oscillation_offset = (
            math.sin(angle)
            * OSCILLATION_AMPLITUDE
            * profile.oscillation_amplitude_multiplier
            * oscillation_phase_multiplier(phase)
        )

    def check_score(self, actor_x: float) -> bool:
        """Mark the pipe scored the first time ``actor_x`` passes its center.

        Returns True only on that first crossing.
        """
        if self.scored or actor_x <= self.center_x:
            return False
        self.scored = True
        return True

    def offscreen(self) -> bool:
        return self.x + self.width < 0


def spawn_pipe(
    phase: int,
    profile: ModeProfile,
    rng: random.Random,
    assist_gap_multiplier: float = 1.0,
    spawn_time_ms: float = 0.0,
    x: float = WINDOW_WIDTH,
) -> Pipe:
    """Create a pipe at the right edge with a gap that fits above the ground."""
    gap = gap_size(phase) * profile.pipe_gap_multiplier * assist_gap_multiplier
    min_y = MIN_GAP_Y + gap / 2.0
    max_y = GROUND_Y - MIN_GAP_Y - gap / 2.0
    if max_y < min_y:
        # Oversized gap: center it in the playfield
        gap_y = GROUND_Y / 2.0
    else:
        gap_y = rng.uniform(min_y, max_y)

    probability = ghost_probability(phase)
    is_ghost = probability > 0.0 and rng.random() < probability
    has_delayed = phase >= DELAYED_COLLISION_PHASE and rng.random() < DELAYED_COLLISION_PROBABILITY
    seed = rng.uniform(0.0, 2.0 * math.pi)

    if is_ghost or has_delayed:
        logger.debug(
            "Spawned pipe at phase %d (ghost=%s, delayed=%s, gap=%.1f)", phase, is_ghost, has_delayed, gap
        )
    return Pipe(
        x,
        gap_y,
        gap,
        is_ghost=is_ghost,
        has_delayed_collision=has_delayed,
        oscillation_seed=seed,
        spawn_time_ms=spawn_time_ms,
    )

"""Difficulty modes and the adaptive-assist decorator.

A ``ModeProfile`` is an immutable set of multipliers applied on top of the
constants in ``config``. The simulation never edits a profile; toggling the
mode swaps in a different one.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, replace

from .config import (
    ASSIST_DEATHS_THRESHOLD,
    ASSIST_GAP_BOOST,
    ASSIST_GRAVITY_REDUCTION,
    ASSIST_MAX_GAP_MULTIPLIER,
    ASSIST_MIN_GRAVITY_MULTIPLIER,
    ASSIST_MIN_SPEED_MULTIPLIER,
    ASSIST_SPEED_REDUCTION,
)
from .exceptions import InvalidArgument

logger = logging.getLogger(__name__)


class GameMode(str, enum.Enum):
    CHAOS = "chaos"
    DEMO = "demo"


@dataclass(frozen=True)
class ModeProfile:
    """Multipliers scaling every tunable for one named difficulty mode."""

    mode: GameMode
    pipe_gap_multiplier: float = 1.0
    pipe_spawn_multiplier: float = 1.0
    pipe_speed_multiplier: float = 1.0
    gravity_multiplier: float = 1.0
    wind_force_multiplier: float = 1.0
    oscillation_amplitude_multiplier: float = 1.0
    control_flip_duration_multiplier: float = 1.0
    control_flip_force_multiplier: float = 1.0
    ghost_pipe_opacity: float = 0.4  # cosmetic
    collision_forgiveness_ms: float = 0.0


CHAOS_PROFILE = ModeProfile(mode=GameMode.CHAOS)

# Mechanics stay active; only their parameters are softened.
DEMO_PROFILE = ModeProfile(
    mode=GameMode.DEMO,
    pipe_gap_multiplier=1.6,
    pipe_spawn_multiplier=1.25,
    pipe_speed_multiplier=0.7,
    gravity_multiplier=0.8,
    wind_force_multiplier=0.6,
    oscillation_amplitude_multiplier=0.75,
    control_flip_duration_multiplier=0.3,
    control_flip_force_multiplier=0.5,
    ghost_pipe_opacity=0.3,
    collision_forgiveness_ms=120.0,
)

_PROFILES = {
    GameMode.CHAOS: CHAOS_PROFILE,
    GameMode.DEMO: DEMO_PROFILE,
}


def get_mode_profile(mode: GameMode | str) -> ModeProfile:
    """Look up the profile for a mode enum or its (case-insensitive) name."""
    if not isinstance(mode, GameMode):
        mode = str(mode).lower()
    try:
        return _PROFILES[GameMode(mode)]
    except ValueError:
        raise InvalidArgument(f"Unknown game mode: {mode!r}") from None


def other_mode(mode: GameMode) -> GameMode:
    return GameMode.DEMO if mode is GameMode.CHAOS else GameMode.CHAOS


@dataclass
class AdaptiveAssist:
    """Softens difficulty after a streak of early deaths.

    Applied as a decorator over the selected ``ModeProfile``: gravity and
    pipe speed are folded into the profile by ``apply``; the gap boost is
    handed to pipe spawning separately.
    """

    is_active: bool = False
    manually_toggled: bool = False
    consecutive_early_deaths: int = 0
    last_death_phase: int = 0
    gap_multiplier: float = 1.0
    gravity_multiplier: float = 1.0
    speed_multiplier: float = 1.0

    def record_death(self, phase: int) -> None:
        """Track a death at ``phase`` and activate or strengthen the assist."""
        early = phase in (self.last_death_phase, self.last_death_phase + 1)
        if early:
            self.consecutive_early_deaths += 1
            # A player who switched the assist off keeps it off.
            opted_out = self.manually_toggled and not self.is_active
            if self.consecutive_early_deaths >= ASSIST_DEATHS_THRESHOLD and not opted_out:
                if not self.is_active:
                    logger.info(
                        "Adaptive assist activated after %d early deaths",
                        self.consecutive_early_deaths,
                    )
                self.is_active = True
                self._strengthen()
        else:
            # Good progress resets the streak but keeps any active assist.
            self.consecutive_early_deaths = 0
        self.last_death_phase = phase

    def _strengthen(self) -> None:
        self.gap_multiplier = min(ASSIST_MAX_GAP_MULTIPLIER, self.gap_multiplier * ASSIST_GAP_BOOST)
        self.gravity_multiplier = max(
            ASSIST_MIN_GRAVITY_MULTIPLIER, self.gravity_multiplier * ASSIST_GRAVITY_REDUCTION
        )
        self.speed_multiplier = max(ASSIST_MIN_SPEED_MULTIPLIER, self.speed_multiplier * ASSIST_SPEED_REDUCTION)

    def toggle(self) -> None:
        """Manual override from the player."""
        self.manually_toggled = True
        self.is_active = not self.is_active
        if self.is_active and self.gap_multiplier == 1.0:
            self._strengthen()
        logger.info("Adaptive assist %s manually", "enabled" if self.is_active else "disabled")

    @property
    def effective_gap_multiplier(self) -> float:
        return self.gap_multiplier if self.is_active else 1.0

    def apply(self, profile: ModeProfile) -> ModeProfile:
        """Return ``profile`` with the assist's gravity and speed factors folded in."""
        if not self.is_active:
            return profile
        return replace(
            profile,
            gravity_multiplier=profile.gravity_multiplier * self.gravity_multiplier,
            pipe_speed_multiplier=profile.pipe_speed_multiplier * self.speed_multiplier,
        )

"""Timed event state machines layered over the phase rules.

- ``ControlInversion``: idle -> warning -> active -> idle, in simulated time.
- ``SlowMotion``: phase-announcement slow-down, in real time.
- ``SystemOverload``: simulation-wide freeze at milestone phases, in real time.

Each machine only holds flags and timers; the simulation step decides what
they gate.
"""

from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass
from typing import Optional

from .config import (
    CONTROL_FLIP_DURATION_MS,
    CONTROL_FLIP_PHASE,
    CONTROL_FLIP_RANDOM_CHANCE,
    CONTROL_FLIP_TRIGGER_WINDOW,
    CONTROL_FLIP_WARNING_MS,
    OVERLOAD_FLICKER_MS,
    OVERLOAD_FREEZE_MS,
    OVERLOAD_RECOVERY_MS,
    PHASE_BANNER_MS,
    SLOW_MOTION_DURATION_MS,
    SLOW_MOTION_TIME_SCALE,
)
from .modes import ModeProfile
from .phases import PhaseConfig, is_overload_phase, phase_start_time, phase_title

logger = logging.getLogger(__name__)

WARNING_FLASH_MS = 200


class ControlStatus(str, enum.Enum):
    IDLE = "idle"
    WARNING = "warning"
    ACTIVE = "active"


@dataclass
class ControlInversion:
    status: ControlStatus = ControlStatus.IDLE
    remaining_ms: float = 0.0

    @property
    def is_inverted(self) -> bool:
        return self.status is ControlStatus.ACTIVE

    @property
    def is_warning(self) -> bool:
        return self.status is ControlStatus.WARNING

    @property
    def warning_flash(self) -> bool:
        """Blink signal for the renderer's warning border."""
        return self.is_warning and int(self.remaining_ms // WARNING_FLASH_MS) % 2 == 0

    def reset(self) -> None:
        self.status = ControlStatus.IDLE
        self.remaining_ms = 0.0

    def should_trigger(
        self,
        phase: int,
        survival_time: float,
        config: PhaseConfig,
        rng: random.Random,
    ) -> bool:
        if not config.control_flip or self.status is not ControlStatus.IDLE:
            return False
        if phase == CONTROL_FLIP_PHASE and survival_time - phase_start_time(phase) < CONTROL_FLIP_TRIGGER_WINDOW:
            return True
        return rng.random() < CONTROL_FLIP_RANDOM_CHANCE

    def update(
        self,
        elapsed_ms: float,
        phase: int,
        survival_time: float,
        config: PhaseConfig,
        profile: ModeProfile,
        rng: random.Random,
    ) -> None:
        if self.status is ControlStatus.IDLE:
            if self.should_trigger(phase, survival_time, config, rng):
                self.status = ControlStatus.WARNING
                self.remaining_ms = float(CONTROL_FLIP_WARNING_MS)
                logger.info("Control inversion warning at phase %d (t=%.2fs)", phase, survival_time)
            return

        self.remaining_ms -= elapsed_ms
        if self.remaining_ms > 0.0:
            return
        if self.status is ControlStatus.WARNING:
            # Carry the overshoot so the total stays time-exact.
            duration = CONTROL_FLIP_DURATION_MS * profile.control_flip_duration_multiplier
            self.status = ControlStatus.ACTIVE
            self.remaining_ms += duration
            logger.info("Controls inverted for %.0f ms", duration)
            if self.remaining_ms > 0.0:
                return
        self.reset()
        logger.info("Controls restored")


@dataclass
class SlowMotion:
    is_active: bool = False
    remaining_ms: float = 0.0
    time_scale: float = 1.0
    title: Optional[str] = None
    banner_remaining_ms: float = 0.0

    def announce(self, phase: int) -> bool:
        """Start slow motion and the banner if ``phase`` has a title."""
        title = phase_title(phase)
        if title is None:
            return False
        self.is_active = True
        self.remaining_ms = float(SLOW_MOTION_DURATION_MS)
        self.time_scale = SLOW_MOTION_TIME_SCALE
        self.title = title
        self.banner_remaining_ms = float(PHASE_BANNER_MS)
        return True

    def update(self, real_ms: float) -> float:
        """Advance real-time timers and return the time scale for this tick."""
        if self.title is not None:
            self.banner_remaining_ms -= real_ms
            if self.banner_remaining_ms <= 0.0:
                self.banner_remaining_ms = 0.0
                self.title = None
        if not self.is_active:
            return 1.0
        self.remaining_ms -= real_ms
        if self.remaining_ms <= 0.0:
            self.is_active = False
            self.remaining_ms = 0.0
            self.time_scale = 1.0
        return self.time_scale

    def reset(self) -> None:
        self.is_active = False
        self.remaining_ms = 0.0
        self.time_scale = 1.0
        self.title = None
        self.banner_remaining_ms = 0.0


@dataclass
class SystemOverload:
    is_active: bool = False
    remaining_ms: float = 0.0
    elapsed_ms: float = 0.0
    recovery_ms: float = 0.0
    flicker: bool = False

    @property
    def recovery_fade(self) -> float:
        """1.0 right after the freeze ends, fading to 0.0."""
        return self.recovery_ms / OVERLOAD_RECOVERY_MS if OVERLOAD_RECOVERY_MS else 0.0

    def trigger(self, phase: int) -> bool:
        if self.is_active or not is_overload_phase(phase):
            return False
        self.is_active = True
        self.remaining_ms = float(OVERLOAD_FREEZE_MS)
        self.elapsed_ms = 0.0
        self.recovery_ms = 0.0
        self.flicker = True
        logger.info("System overload: freezing simulation at phase %d", phase)
        return True

    def update(self, real_ms: float) -> None:
        if self.is_active:
            self.elapsed_ms += real_ms
            self.remaining_ms -= real_ms
            self.flicker = int(self.elapsed_ms // OVERLOAD_FLICKER_MS) % 2 == 0
            if self.remaining_ms <= 0.0:
                self.is_active = False
                self.remaining_ms = 0.0
                self.flicker = False
                self.recovery_ms = float(OVERLOAD_RECOVERY_MS)
                logger.info("System overload cleared after %.0f ms", self.elapsed_ms)
        elif self.recovery_ms > 0.0:
            self.recovery_ms = max(0.0, self.recovery_ms - real_ms)

    def reset(self) -> None:
        self.is_active = False
        self.remaining_ms = 0.0
        self.elapsed_ms = 0.0
        self.recovery_ms = 0.0
        self.flicker = False

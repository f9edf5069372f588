"""Phase rules: which mechanics are live, and the instantaneous physics values.

Everything here is a pure function of the phase number and the accumulated
survival time, never of tick count, so any survival time always maps to the
same gravity, wind and pipe speed however many ticks it took to get there.
Inputs are clamped rather than rejected.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from .config import (
    COLLAPSE_PHASE,
    CONTROL_FLIP_PHASE,
    FLOATY_GRAVITY_FACTOR,
    GAP_SHRINK_PER_PHASE,
    GAP_SIZE,
    GHOST_PIPE_BASE_PROBABILITY,
    GHOST_PIPE_MAX_PROBABILITY,
    GHOST_PIPE_PHASE,
    GHOST_PIPE_PHASE_STEP,
    GLITCH_HUE_RATE,
    GLITCH_ROTATION,
    GLITCH_ROTATION_RATE,
    GRAVITY,
    GRAVITY_CYCLE_PERIOD,
    GRAVITY_DRIFT_PHASE,
    GUST_INTERVAL,
    HEAVY_GRAVITY_FACTOR,
    MILD_GRAVITY_PERIOD,
    MILD_HIGH_GRAVITY_FACTOR,
    MILD_LOW_GRAVITY_FACTOR,
    MIN_GAP_SIZE,
    OSCILLATION_FREQUENCY,
    OSCILLATION_FREQUENCY_MAX_STEPS,
    OSCILLATION_FREQUENCY_STEP,
    OSCILLATION_PHASE,
    OVERLOAD_PHASE_INTERVAL,
    PHASE_DISPLAY_CAP,
    PHASE_DURATION,
    PIPE_SPEED,
    SPEED_DRIFT_MAX,
    SPEED_DRIFT_PERIOD,
    SPEED_DRIFT_PHASE,
    VISUAL_GLITCH_PHASE,
    WIND_BASE_INTENSITY,
    WIND_FORCE,
    WIND_INTENSITY_STEP,
    WIND_PHASE,
)
from .modes import ModeProfile
from .utils import clamp, cycle_index, lerp

# Gust cycle direction: leftward, calm, rightward, calm.
GUST_PATTERN = (-1.0, 0.0, 1.0, 0.0)

_MILD_GRAVITY = (MILD_LOW_GRAVITY_FACTOR, MILD_HIGH_GRAVITY_FACTOR)
_CYCLE_GRAVITY = (1.0, HEAVY_GRAVITY_FACTOR, FLOATY_GRAVITY_FACTOR)

PHASE_TITLES = {
    1: "PHASE 1: CLASSIC",
    2: "PHASE 2: WARMING UP",
    3: "PHASE 3: OSCILLATION",
    4: "PHASE 4: WIND FORCE",
    5: "PHASE 5: CONTROL CHAOS",
    6: "PHASE 6: GHOST PIPES",
    7: "PHASE 7: SPEED DRIFT",
    8: "PHASE 8: VISUAL GLITCH",
    9: "PHASE 9: TOTAL CHAOS",
}


@dataclass(frozen=True)
class PhaseConfig:
    """Mechanics active for a phase. Flags never turn off as the phase grows."""

    gravity_drift: bool
    pipe_oscillation: bool
    wind_force: bool
    control_flip: bool
    ghost_pipes: bool
    speed_drift: bool
    visual_glitch: bool
    all_unstable: bool


def phase_of(survival_time: float) -> int:
    """Phase number for a survival time in seconds; 1-based and unbounded."""
    return int(math.floor(max(0.0, survival_time) / PHASE_DURATION)) + 1


def phase_start_time(phase: int) -> float:
    """First instant (seconds) of ``phase``."""
    return (max(1, phase) - 1) * PHASE_DURATION


def phase_config(phase: int) -> PhaseConfig:
    collapse = phase >= COLLAPSE_PHASE
    return PhaseConfig(
        gravity_drift=phase >= GRAVITY_DRIFT_PHASE or collapse,
        pipe_oscillation=phase >= OSCILLATION_PHASE or collapse,
        wind_force=phase >= WIND_PHASE or collapse,
        control_flip=phase >= CONTROL_FLIP_PHASE or collapse,
        ghost_pipes=phase >= GHOST_PIPE_PHASE or collapse,
        speed_drift=phase >= SPEED_DRIFT_PHASE or collapse,
        visual_glitch=phase >= VISUAL_GLITCH_PHASE or collapse,
        all_unstable=collapse,
    )


def _gravity_slot(phase: int, survival_time: float) -> tuple[float, Optional[tuple[str, int]]]:
    """Gravity factor and the identity of the cycle slot it came from."""
    if not phase_config(phase).gravity_drift:
        return 1.0, None
    if phase < GRAVITY_DRIFT_PHASE + 2:
        idx = cycle_index(survival_time, MILD_GRAVITY_PERIOD, len(_MILD_GRAVITY))
        return _MILD_GRAVITY[idx], ("mild", idx)
    idx = cycle_index(survival_time, GRAVITY_CYCLE_PERIOD, len(_CYCLE_GRAVITY))
    return _CYCLE_GRAVITY[idx], ("cycle", idx)


def gravity(
    phase: int,
    survival_time: float,
    profile: ModeProfile,
    previous_time: Optional[float] = None,
) -> tuple[float, bool]:
    """Instantaneous gravity and whether its cycle slot flipped since ``previous_time``.

    Below the drift phase gravity is the profile-scaled base value. The two
    phases after drift starts alternate between a mild low/high pair; later
    phases round-robin through base, heavy and floaty.
    """
    survival_time = max(0.0, survival_time)
    factor, slot = _gravity_slot(phase, survival_time)
    changed = False
    if slot is not None and previous_time is not None:
        previous_time = max(0.0, previous_time)
        _, previous_slot = _gravity_slot(phase_of(previous_time), previous_time)
        changed = previous_slot is not None and previous_slot != slot
    return GRAVITY * factor * profile.gravity_multiplier, changed


def wind_intensity(phase: int) -> float:
    """Gust intensity ramp: half strength when wind first appears, full later."""
    return clamp(WIND_BASE_INTENSITY + WIND_INTENSITY_STEP * (phase - WIND_PHASE), WIND_BASE_INTENSITY, 1.0)


def max_gust(profile: ModeProfile) -> float:
    return WIND_FORCE * profile.wind_force_multiplier


def wind_force(phase: int, survival_time: float, profile: ModeProfile) -> float:
    """Signed horizontal wind; negative pushes left."""
    if not phase_config(phase).wind_force:
        return 0.0
    step = int(math.floor(max(0.0, survival_time) * 1000.0 / GUST_INTERVAL)) % len(GUST_PATTERN)
    direction = GUST_PATTERN[step]
    if direction == 0.0:
        return 0.0
    return direction * max_gust(profile) * wind_intensity(phase)


def pipe_speed(phase: int, survival_time: float, profile: ModeProfile) -> float:
    """Pipe speed in px/frame, drifting within +/-15% of base once speed drift is live.

    Drift cycle (10 s): ramp up to +15% over 0-4 s, drop to -15% for 4-5 s,
    recover linearly to base over 5-10 s.
    """
    base = PIPE_SPEED * profile.pipe_speed_multiplier
    if not phase_config(phase).speed_drift:
        return base
    cycle = max(0.0, survival_time) % SPEED_DRIFT_PERIOD
    max_drift = base * SPEED_DRIFT_MAX
    if cycle < 4.0:
        speed = lerp(base, base + max_drift, cycle / 4.0)
    elif cycle < 5.0:
        speed = base - max_drift
    else:
        speed = lerp(base - max_drift, base, (cycle - 5.0) / 5.0)
    return clamp(speed, base - max_drift, base + max_drift)


def gap_size(phase: int) -> float:
    """Unscaled pipe gap for a phase; shrinks past phase 2 down to the floor."""
    return max(MIN_GAP_SIZE, GAP_SIZE - GAP_SHRINK_PER_PHASE * max(0, phase - 2))


def ghost_probability(phase: int) -> float:
    if not phase_config(phase).ghost_pipes:
        return 0.0
    probability = GHOST_PIPE_BASE_PROBABILITY + (phase - GHOST_PIPE_PHASE) * GHOST_PIPE_PHASE_STEP
    return clamp(probability, 0.0, GHOST_PIPE_MAX_PROBABILITY)


def oscillation_frequency(phase: int) -> float:
    steps = clamp(phase - OSCILLATION_PHASE, 0, OSCILLATION_FREQUENCY_MAX_STEPS)
    return OSCILLATION_FREQUENCY * (1.0 + steps * OSCILLATION_FREQUENCY_STEP)


def oscillation_phase_multiplier(phase: int) -> float:
    if phase >= COLLAPSE_PHASE:
        return 1.4
    if phase >= SPEED_DRIFT_PHASE:
        return 1.2
    return 1.0


def is_overload_phase(phase: int) -> bool:
    """Overload milestones: every third phase up to the collapse phase."""
    return 0 < phase <= COLLAPSE_PHASE and phase % OVERLOAD_PHASE_INTERVAL == 0


def phase_title(phase: int) -> Optional[str]:
    """Announcement banner for a phase, or None past the display cap."""
    if phase < 1 or phase > PHASE_DISPLAY_CAP:
        return None
    return PHASE_TITLES.get(phase, f"PHASE {phase}: BEYOND")


def visual_effects(phase: int, survival_time: float) -> tuple[float, float]:
    """Canvas rotation and hue shift, both in degrees, while the visual glitch is live."""
    if not phase_config(phase).visual_glitch:
        return 0.0, 0.0
    survival_time = max(0.0, survival_time)
    rotation = math.sin(survival_time * GLITCH_ROTATION_RATE) * GLITCH_ROTATION
    return rotation, (survival_time * GLITCH_HUE_RATE) % 360.0


def active_effects(config: PhaseConfig, control_inverted: bool = False) -> tuple[str, ...]:
    """Names of live mechanics, in HUD order."""
    effects = []
    if config.gravity_drift:
        effects.append("GRAVITY DRIFT")
    if config.pipe_oscillation:
        effects.append("PIPE OSCILLATION")
    if config.wind_force:
        effects.append("WIND FORCE")
    if control_inverted:
        effects.append("CONTROL INVERTED")
    if config.ghost_pipes:
        effects.append("GHOST PIPES")
    if config.speed_drift:
        effects.append("SPEED DRIFT")
    if config.visual_glitch:
        effects.append("VISUAL GLITCH")
    if config.all_unstable:
        effects.append("ALL UNSTABLE")
    return tuple(effects)

"""Simulation step: advances the whole game state by one external frame.

The caller owns a ``SimulationState`` and passes it to ``step`` once per
frame together with the real elapsed time and the input events of that
frame. ``step`` mutates the state in place and returns it; consumers that
need a stable view take ``state.snapshot()``.

Order inside a step:

1. input latches (hold state) are updated
2. a running System-Overload freeze absorbs the whole tick
3. slow motion picks the time scale for this tick
4. survival time and phase advance one boundary at a time; an overload
   milestone stops the step at its first instant
5. gravity, wind and pipe speed are re-derived from survival time
6. control inversion advances
7. bird, pipes, scoring, retirement and collisions
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Optional

from .collision import check_all_collisions
from .config import PIPE_SPAWN_INTERVAL, TARGET_FPS
from .entities import Bird, Pipe, spawn_pipe
from .events import ControlInversion, SlowMotion, SystemOverload
from .exceptions import InvalidArgument
from .modes import CHAOS_PROFILE, AdaptiveAssist, GameMode, ModeProfile, get_mode_profile
from .phases import (
    PhaseConfig,
    gravity,
    is_overload_phase,
    phase_config,
    phase_of,
    phase_start_time,
    pipe_speed,
    wind_force,
)
from .snapshot import Snapshot, build_snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InputEvents:
    """Discrete player input collected during one frame."""

    flap_pressed: bool = False
    hold_active: bool = False
    hold_released: bool = False


NO_INPUT = InputEvents()


@dataclass
class SimulationState:
    profile: ModeProfile
    rng: random.Random
    assist: AdaptiveAssist = field(default_factory=AdaptiveAssist)
    bird: Bird = field(default_factory=Bird)
    pipes: list[Pipe] = field(default_factory=list)
    score: int = 0
    survival_time: float = 0.0  # seconds, simulated
    phase: int = 1
    is_playing: bool = True
    is_game_over: bool = False
    game_over_reason: Optional[str] = None
    holding: bool = False
    spawn_timer_ms: float = 0.0
    ticks: int = 0

    # Instantaneous physics readout
    current_gravity: float = 0.0
    current_wind_force: float = 0.0
    current_pipe_speed: float = 0.0
    gravity_changed: bool = False

    control: ControlInversion = field(default_factory=ControlInversion)
    slow_motion: SlowMotion = field(default_factory=SlowMotion)
    overload: SystemOverload = field(default_factory=SystemOverload)

    @property
    def survival_time_ms(self) -> float:
        return self.survival_time * 1000.0

    @property
    def effective_profile(self) -> ModeProfile:
        """The mode profile with the adaptive assist folded in."""
        return self.assist.apply(self.profile)

    @property
    def phase_config(self) -> PhaseConfig:
        return phase_config(self.phase)

    def snapshot(self) -> Snapshot:
        return build_snapshot(self)


def reset(
    profile: ModeProfile = CHAOS_PROFILE,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
    assist: Optional[AdaptiveAssist] = None,
) -> SimulationState:
    """Fresh game in ``profile``.

    Pass either ``seed`` or an existing ``rng`` to make the run replayable.
    """
    state = SimulationState(
        profile=profile,
        rng=rng if rng is not None else random.Random(seed),
        assist=assist if assist is not None else AdaptiveAssist(),
    )
    _refresh_physics(state)
    logger.info("New game in %s mode (seed=%s)", profile.mode.value, seed)
    return state


def restart(state: SimulationState, seed: Optional[int] = None) -> SimulationState:
    """Replace ``state`` with a fresh game, keeping mode, assist and RNG stream."""
    if state.is_game_over:
        state.assist.record_death(state.phase)
    return reset(
        state.profile,
        seed=seed,
        rng=None if seed is not None else state.rng,
        assist=state.assist,
    )


def set_mode(state: SimulationState, mode: GameMode | str) -> SimulationState:
    """Swap the whole mode profile; takes effect from the next step."""
    profile = get_mode_profile(mode)
    if profile is not state.profile:
        state.profile = profile
        _refresh_physics(state)
        logger.info(
            "Switched to %s mode (gap x%.2f, speed x%.2f, gravity x%.2f)",
            profile.mode.value,
            profile.pipe_gap_multiplier,
            profile.pipe_speed_multiplier,
            profile.gravity_multiplier,
        )
    return state


def toggle_assist(state: SimulationState) -> SimulationState:
    state.assist.toggle()
    _refresh_physics(state)
    return state


def jump_to_phase(state: SimulationState, phase: int) -> SimulationState:
    """Move the clock to the first instant of ``phase`` and re-derive phase state.

    A testing and demo hook: the jump is announced like a normal transition
    but never starts an overload freeze.
    """
    if isinstance(phase, bool) or not isinstance(phase, int) or phase < 1:
        raise InvalidArgument(f"phase must be a positive integer, got {phase!r}")
    if not state.is_playing:
        logger.info("Ignoring jump to phase %d: game is over", phase)
        return state
    state.survival_time = phase_start_time(phase)
    state.phase = phase
    state.control.reset()
    state.overload.reset()
    state.slow_motion.reset()
    state.slow_motion.announce(phase)
    _refresh_physics(state)
    logger.info("Jumped to phase %d (t=%.1fs)", phase, state.survival_time)
    return state


def step(
    state: SimulationState,
    delta_time: float,
    inputs: InputEvents = NO_INPUT,
) -> SimulationState:
    """Advance ``state`` by ``delta_time`` real seconds."""
    if not isinstance(delta_time, (int, float)) or not math.isfinite(delta_time) or delta_time < 0:
        raise InvalidArgument(f"delta_time must be a finite non-negative number, got {delta_time!r}")
    if not state.is_playing:
        return state

    if inputs.hold_active:
        state.holding = True
    if inputs.hold_released:
        state.holding = False

    state.ticks += 1
    real_ms = delta_time * 1000.0

    # Overload freeze gates everything but its own timer.
    frozen = state.overload.is_active
    state.overload.update(real_ms)
    if frozen:
        return state

    time_scale = state.slow_motion.update(real_ms)
    scaled_dt = delta_time * time_scale
    frames = scaled_dt * TARGET_FPS

    previous_time = state.survival_time
    state.survival_time += scaled_dt
    new_phase = phase_of(state.survival_time)
    # A long delta may cross several boundaries; each one is entered in order.
    for phase in range(state.phase + 1, new_phase + 1):
        state.phase = phase
        if phase < new_phase and is_overload_phase(phase):
            # The freeze starts at the milestone, not past it.
            state.survival_time = phase_start_time(phase)
        logger.info("Entered phase %d at t=%.2fs", phase, state.survival_time)
        state.slow_motion.announce(phase)
        if state.overload.trigger(phase):
            _refresh_physics(state, previous_time)
            return state

    config = _refresh_physics(state, previous_time)
    profile = state.effective_profile

    state.control.update(
        scaled_dt * 1000.0, state.phase, state.survival_time, config, profile, state.rng
    )
    inverted = state.control.is_inverted

    bird = state.bird
    if inputs.flap_pressed:
        bird.flap(control_inverted=inverted)
    bird.update(
        state.current_gravity,
        state.current_wind_force,
        control_inverted=inverted,
        holding=state.holding,
        flip_force_multiplier=profile.control_flip_force_multiplier,
        frames=frames,
    )

    _update_pipes(state, config, profile, scaled_dt * 1000.0, frames)

    hit = check_all_collisions(bird, state.pipes, state.survival_time_ms, profile.collision_forgiveness_ms)
    if hit is not None:
        _trigger_game_over(state, hit)
    return state


def _refresh_physics(state: SimulationState, previous_time: Optional[float] = None) -> PhaseConfig:
    profile = state.effective_profile
    state.current_gravity, state.gravity_changed = gravity(
        state.phase, state.survival_time, profile, previous_time
    )
    state.current_wind_force = wind_force(state.phase, state.survival_time, profile)
    state.current_pipe_speed = pipe_speed(state.phase, state.survival_time, profile)
    return phase_config(state.phase)


def _update_pipes(
    state: SimulationState,
    config: PhaseConfig,
    profile: ModeProfile,
    elapsed_ms: float,
    frames: float,
) -> None:
    interval = PIPE_SPAWN_INTERVAL * profile.pipe_spawn_multiplier
    state.spawn_timer_ms += elapsed_ms
    if state.spawn_timer_ms >= interval:
        state.spawn_timer_ms %= interval
        state.pipes.append(
            spawn_pipe(
                state.phase,
                profile,
                state.rng,
                assist_gap_multiplier=state.assist.effective_gap_multiplier,
                spawn_time_ms=state.survival_time_ms,
            )
        )

    actor_x = state.bird.center_x
    for pipe in state.pipes:
        pipe.update(
            state.current_pipe_speed,
            state.phase,
            config.pipe_oscillation,
            state.survival_time,
            profile,
            frames=frames,
        )
        if pipe.check_score(actor_x):
            state.score += 1

    # Spawn order is screen order, so filtering keeps the sequence sorted.
    state.pipes[:] = [p for p in state.pipes if not p.offscreen()]


def _trigger_game_over(state: SimulationState, reason: str) -> None:
    if state.is_game_over:
        return
    state.is_game_over = True
    state.is_playing = False
    state.game_over_reason = reason
    state.bird.alive = False
    logger.info(
        "Game over (%s): score=%d phase=%d survived=%.2fs",
        reason,
        state.score,
        state.phase,
        state.survival_time,
    )

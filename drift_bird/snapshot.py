"""
State Snapshot
==============

Read-only projection of a ``SimulationState`` for renderers, audio and HUD.
Every field is copied into frozen dataclasses and tuples, so holding a
snapshot never gives access to live simulation objects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

import numpy as np

from .phases import active_effects, phase_config, visual_effects

if TYPE_CHECKING:
    from .simulation import SimulationState

# Column layout of Snapshot.obstacle_array()
OBSTACLE_COLUMNS = (
    "x",
    "effective_gap_y",
    "gap_size",
    "oscillation_offset",
    "is_ghost",
    "has_delayed_collision",
    "scored",
)


@dataclass(frozen=True)
class ActorPose:
    x: float
    y: float
    vx: float
    vy: float
    width: float
    height: float


@dataclass(frozen=True)
class ObstacleView:
    x: float
    width: float
    gap_y: float
    gap_size: float
    oscillation_offset: float
    is_ghost: bool
    has_delayed_collision: bool
    scored: bool
    spawn_time_ms: float

    @property
    def effective_gap_y(self) -> float:
        return self.gap_y + self.oscillation_offset

    @property
    def gap_top(self) -> float:
        return self.effective_gap_y - self.gap_size / 2.0

    @property
    def gap_bottom(self) -> float:
        return self.effective_gap_y + self.gap_size / 2.0


@dataclass(frozen=True)
class ControlInversionView:
    status: str
    remaining_ms: float
    is_inverted: bool
    is_warning: bool
    warning_flash: bool


@dataclass(frozen=True)
class SlowMotionView:
    is_active: bool
    time_scale: float
    remaining_ms: float
    title: Optional[str]
    banner_remaining_ms: float


@dataclass(frozen=True)
class OverloadView:
    is_active: bool
    flicker: bool
    remaining_ms: float
    recovery_fade: float


@dataclass(frozen=True)
class Snapshot:
    """Immutable view of one simulation instant."""

    actor: ActorPose
    obstacles: Tuple[ObstacleView, ...]
    score: int
    phase: int
    survival_time: float
    is_playing: bool
    is_game_over: bool
    game_over_reason: Optional[str]
    mode: str
    gravity: float
    wind_force: float
    pipe_speed: float
    gravity_changed: bool
    active_effects: Tuple[str, ...]
    control: ControlInversionView
    slow_motion: SlowMotionView
    overload: OverloadView
    assist_active: bool
    ghost_pipe_opacity: float
    rotation: float = 0.0  # degrees, clockwise
    hue_shift: float = 0.0  # degrees

    def obstacle_array(self) -> np.ndarray:
        """Obstacles as a read-only (N, len(OBSTACLE_COLUMNS)) float32 array."""
        arr = np.zeros((len(self.obstacles), len(OBSTACLE_COLUMNS)), dtype=np.float32)
        for i, obs in enumerate(self.obstacles):
            arr[i] = (
                obs.x,
                obs.effective_gap_y,
                obs.gap_size,
                obs.oscillation_offset,
                float(obs.is_ghost),
                float(obs.has_delayed_collision),
                float(obs.scored),
            )
        arr.flags.writeable = False
        return arr


def build_snapshot(state: "SimulationState") -> Snapshot:
    """Copy the current simulation state into a ``Snapshot``."""
    bird = state.bird
    control = state.control
    slow = state.slow_motion
    overload = state.overload
    rotation, hue_shift = visual_effects(state.phase, state.survival_time)
    return Snapshot(
        actor=ActorPose(bird.x, bird.y, bird.vx, bird.vy, bird.width, bird.height),
        obstacles=tuple(
            ObstacleView(
                x=p.x,
                width=p.width,
                gap_y=p.gap_y,
                gap_size=p.gap_size,
                oscillation_offset=p.oscillation_offset,
                is_ghost=p.is_ghost,
                has_delayed_collision=p.has_delayed_collision,
                scored=p.scored,
                spawn_time_ms=p.spawn_time_ms,
            )
            for p in state.pipes
        ),
        score=state.score,
        phase=state.phase,
        survival_time=state.survival_time,
        is_playing=state.is_playing,
        is_game_over=state.is_game_over,
        game_over_reason=state.game_over_reason,
        mode=state.profile.mode.value,
        gravity=state.current_gravity,
        wind_force=state.current_wind_force,
        pipe_speed=state.current_pipe_speed,
        gravity_changed=state.gravity_changed,
        active_effects=active_effects(phase_config(state.phase), control.is_inverted),
        control=ControlInversionView(
            status=control.status.value,
            remaining_ms=control.remaining_ms,
            is_inverted=control.is_inverted,
            is_warning=control.is_warning,
            warning_flash=control.warning_flash,
        ),
        slow_motion=SlowMotionView(
            is_active=slow.is_active,
            time_scale=slow.time_scale,
            remaining_ms=slow.remaining_ms,
            title=slow.title,
            banner_remaining_ms=slow.banner_remaining_ms,
        ),
        overload=OverloadView(
            is_active=overload.is_active,
            flicker=overload.flicker,
            remaining_ms=overload.remaining_ms,
            recovery_fade=overload.recovery_fade,
        ),
        assist_active=state.assist.is_active,
        ghost_pipe_opacity=state.profile.ghost_pipe_opacity,
        rotation=rotation,
        hue_shift=hue_shift,
    )

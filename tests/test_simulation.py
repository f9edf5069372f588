import math

import pytest

from drift_bird.config import FLAP_FORCE, GRAVITY, PHASE_DURATION, PIPE_SPEED, PIPE_WIDTH
from drift_bird.entities import Pipe
from drift_bird.events import ControlStatus
from drift_bird.exceptions import DriftBirdError, InvalidArgument
from drift_bird.modes import DEMO_PROFILE
from drift_bird.phases import gravity, pipe_speed, wind_force
from drift_bird.simulation import InputEvents, jump_to_phase, reset, restart, set_mode, step, toggle_assist

FLAP = InputEvents(flap_pressed=True, hold_active=True)
RELEASE = InputEvents(hold_released=True)


def run(state, ticks, dt=0.02, flap_every=25):
    """Step ``ticks`` times, flapping on a fixed cadence to hover near the start height."""
    for i in range(ticks):
        inputs = FLAP if flap_every and i % flap_every == 0 else RELEASE
        step(state, dt, inputs)
    return state


def test_reset_defaults() -> None:
    state = reset(seed=1)
    assert state.phase == 1
    assert state.score == 0
    assert state.survival_time == 0.0
    assert state.is_playing and not state.is_game_over
    assert state.pipes == []
    assert state.current_gravity == GRAVITY
    assert state.current_wind_force == 0.0
    assert state.current_pipe_speed == PIPE_SPEED
    assert state.control.status is ControlStatus.IDLE


def test_one_phase_without_input_reaches_phase_two() -> None:
    state = reset(seed=0)
    step(state, PHASE_DURATION)
    assert state.survival_time == PHASE_DURATION
    assert state.phase == 2
    assert state.phase_config.gravity_drift
    assert "GRAVITY DRIFT" in state.snapshot().active_effects


@pytest.mark.parametrize("dt", [-0.1, math.nan, math.inf])
def test_step_rejects_bad_delta(dt) -> None:
    state = reset(seed=0)
    with pytest.raises(InvalidArgument):
        step(state, dt)
    assert state.survival_time == 0.0


def test_step_zero_delta_keeps_clock() -> None:
    state = reset(seed=0)
    step(state, 0.0)
    assert state.survival_time == 0.0
    assert state.bird.y == 250.0


@pytest.mark.parametrize("phase", [0, -1, 1.5, True, "3"])
def test_jump_rejects_bad_phase(phase) -> None:
    state = reset(seed=0)
    with pytest.raises(InvalidArgument) as info:
        jump_to_phase(state, phase)
    assert isinstance(info.value, ValueError)
    assert isinstance(info.value, DriftBirdError)
    assert state.phase == 1


def test_jump_to_phase() -> None:
    state = reset(seed=0)
    jump_to_phase(state, 5)
    assert state.phase == 5
    assert state.survival_time == 4 * PHASE_DURATION
    assert state.slow_motion.is_active
    assert state.slow_motion.title == "PHASE 5: CONTROL CHAOS"
    assert not state.overload.is_active
    assert state.phase_config.control_flip


def test_jump_to_overload_phase_does_not_freeze() -> None:
    state = reset(seed=0)
    jump_to_phase(state, 6)
    assert not state.overload.is_active
    y = state.bird.y
    step(state, 0.02)
    assert state.bird.y != y


def test_jump_ignored_after_game_over() -> None:
    state = reset(seed=0)
    step(state, PHASE_DURATION)
    assert state.is_game_over
    jump_to_phase(state, 7)
    assert state.phase == 2


def test_slow_motion_scales_simulated_time() -> None:
    state = reset(seed=0)
    jump_to_phase(state, 2)
    step(state, 0.1)
    assert state.survival_time == pytest.approx(PHASE_DURATION + 0.04)


def test_control_timer_runs_on_simulated_time() -> None:
    state = reset(seed=0)
    jump_to_phase(state, 5)
    step(state, 0.1)
    assert state.control.is_warning
    assert state.control.remaining_ms == 2000.0
    step(state, 0.1)
    assert state.control.remaining_ms == pytest.approx(2000.0 - 40.0)


def test_overload_freeze_holds_world_still() -> None:
    state = reset(seed=3)
    state.survival_time = 2 * PHASE_DURATION - 0.01
    state.phase = 2
    state.pipes.append(Pipe(300.0, 300.0, 150.0))

    step(state, 0.02)
    assert state.phase == 3
    assert state.overload.is_active
    frozen_time = state.survival_time
    frozen_pose = (state.bird.x, state.bird.y, state.bird.vx, state.bird.vy)
    frozen_pipe_x = state.pipes[0].x
    assert frozen_pose[1] == 250.0
    assert frozen_pipe_x == 300.0

    for _ in range(3):
        step(state, 0.5, FLAP)
        assert state.survival_time == frozen_time
        assert (state.bird.x, state.bird.y, state.bird.vx, state.bird.vy) == frozen_pose
        assert state.pipes[0].x == frozen_pipe_x
    assert not state.overload.is_active
    assert state.snapshot().overload.recovery_fade == pytest.approx(1.0)

    step(state, 0.02)
    assert state.survival_time > frozen_time
    assert state.pipes[0].x < frozen_pipe_x


def test_long_step_stops_at_overload_milestone() -> None:
    state = reset(seed=3)
    state.survival_time = 2 * PHASE_DURATION - 0.01
    state.phase = 2
    step(state, PHASE_DURATION + 0.02)
    assert state.phase == 3
    assert state.survival_time == 2 * PHASE_DURATION
    assert state.overload.is_active
    assert state.slow_motion.title == "PHASE 3: OSCILLATION"


def test_fast_forward_from_reset_freezes_at_phase_three() -> None:
    state = reset(seed=3)
    step(state, 3 * PHASE_DURATION)
    assert state.phase == 3
    assert state.survival_time == 2 * PHASE_DURATION
    assert state.overload.is_active
    assert state.bird.y == 250.0
    assert not state.is_game_over


def test_long_step_announces_every_crossed_phase() -> None:
    state = reset(seed=3)
    state.survival_time = 3 * PHASE_DURATION - 0.01
    state.phase = 3
    step(state, PHASE_DURATION + 0.02)
    assert state.phase == 5
    assert state.survival_time == pytest.approx(4 * PHASE_DURATION + 0.01)
    assert not state.overload.is_active
    assert state.slow_motion.title == "PHASE 5: CONTROL CHAOS"


def test_overload_entry_refreshes_physics() -> None:
    state = reset(seed=3)
    state.survival_time = 5 * PHASE_DURATION - 0.01
    state.phase = 5
    state.current_gravity = 99.0
    state.current_wind_force = 99.0
    state.current_pipe_speed = 99.0
    step(state, 0.02)
    assert state.overload.is_active
    profile = state.effective_profile
    assert state.current_gravity == gravity(6, state.survival_time, profile)[0]
    assert state.current_wind_force == wind_force(6, state.survival_time, profile)
    assert state.current_pipe_speed == pipe_speed(6, state.survival_time, profile)


def test_scoring_once_per_pipe() -> None:
    state = reset(seed=0)
    bird = state.bird
    state.pipes.append(Pipe(bird.center_x - PIPE_WIDTH / 2.0 + 1.0, bird.y + bird.height / 2.0, 300.0))
    step(state, 1 / 60)
    assert state.score == 1
    step(state, 1 / 60)
    assert state.score == 1
    assert not state.is_game_over


def test_pipes_spawn_on_interval() -> None:
    state = run(reset(seed=5), 70)
    assert state.pipes == []
    run(state, 20)
    assert len(state.pipes) == 1
    assert not state.is_game_over


def test_same_seed_same_run() -> None:
    a = run(reset(seed=7), 200)
    b = run(reset(seed=7), 200)
    assert a.snapshot() == b.snapshot()
    c = run(reset(seed=8), 200)
    assert c.snapshot().obstacles[0].gap_y != a.snapshot().obstacles[0].gap_y


def test_ground_collision_ends_game() -> None:
    state = reset(seed=0)
    for _ in range(300):
        step(state, 1 / 60)
        if state.is_game_over:
            break
    assert state.is_game_over
    assert not state.is_playing
    assert state.game_over_reason == "ground"
    assert not state.bird.alive

    before = state.snapshot()
    step(state, 1 / 60, FLAP)
    assert state.snapshot() == before


def test_flap_ignored_while_inverted() -> None:
    state = reset(seed=0)
    state.control.status = ControlStatus.ACTIVE
    state.control.remaining_ms = 5000.0
    step(state, 1 / 60, FLAP)
    assert state.bird.vy != FLAP_FORCE
    assert state.bird.vy == pytest.approx(GRAVITY * 2.5)

    step(state, 1 / 60, RELEASE)
    assert state.bird.vy == pytest.approx(GRAVITY * 2.5 - GRAVITY * 1.2)


def test_set_mode_and_assist() -> None:
    state = reset(seed=0)
    set_mode(state, "demo")
    assert state.profile is DEMO_PROFILE
    assert state.current_gravity == pytest.approx(GRAVITY * 0.8)
    assert state.snapshot().mode == "demo"

    toggle_assist(state)
    assert state.assist.is_active
    assert state.current_gravity == pytest.approx(GRAVITY * 0.8 * 0.9)
    assert state.snapshot().assist_active


def test_restart_keeps_mode_and_counts_deaths() -> None:
    state = reset(DEMO_PROFILE, seed=0)
    for _ in range(3):
        step(state, PHASE_DURATION / 2)
        assert state.is_game_over
        state = restart(state)
        assert state.profile is DEMO_PROFILE
        assert state.is_playing
        assert state.survival_time == 0.0
    assert state.assist.consecutive_early_deaths == 3
    assert state.assist.is_active
    assert state.assist.gap_multiplier == pytest.approx(1.15)

import pytest

from drift_bird.exceptions import InvalidArgument
from drift_bird.modes import (
    CHAOS_PROFILE,
    DEMO_PROFILE,
    AdaptiveAssist,
    GameMode,
    get_mode_profile,
    other_mode,
)


def test_get_mode_profile_by_enum_and_name() -> None:
    assert get_mode_profile(GameMode.CHAOS) is CHAOS_PROFILE
    assert get_mode_profile("demo") is DEMO_PROFILE
    assert get_mode_profile("DEMO") is DEMO_PROFILE


def test_unknown_mode_rejected() -> None:
    with pytest.raises(InvalidArgument):
        get_mode_profile("nightmare")


def test_profiles_are_immutable() -> None:
    with pytest.raises(Exception):
        CHAOS_PROFILE.gravity_multiplier = 2.0  # type: ignore[misc]


def test_demo_is_softer_than_chaos() -> None:
    assert DEMO_PROFILE.pipe_gap_multiplier > CHAOS_PROFILE.pipe_gap_multiplier
    assert DEMO_PROFILE.control_flip_force_multiplier < 1.0
    assert DEMO_PROFILE.collision_forgiveness_ms > 0


def test_other_mode_toggles() -> None:
    assert other_mode(GameMode.CHAOS) is GameMode.DEMO
    assert other_mode(GameMode.DEMO) is GameMode.CHAOS


def test_assist_activates_after_early_death_streak() -> None:
    assist = AdaptiveAssist()
    assist.record_death(1)
    assist.record_death(1)
    assert not assist.is_active
    assist.record_death(2)
    assert assist.is_active
    assert assist.effective_gap_multiplier > 1.0


def test_assist_streak_resets_on_progress() -> None:
    assist = AdaptiveAssist()
    assist.record_death(1)
    assist.record_death(1)
    assist.record_death(5)  # survived much longer
    assert assist.consecutive_early_deaths == 0
    assert not assist.is_active


def test_assist_multipliers_are_capped() -> None:
    assist = AdaptiveAssist()
    for _ in range(50):
        assist.record_death(1)
    assert assist.gap_multiplier <= 1.45
    assert assist.gravity_multiplier >= 0.7
    assert assist.speed_multiplier >= 0.7


def test_assist_apply_scales_gravity_and_speed_only() -> None:
    assist = AdaptiveAssist()
    assert assist.apply(CHAOS_PROFILE) is CHAOS_PROFILE
    assist.toggle()
    softened = assist.apply(CHAOS_PROFILE)
    assert softened.gravity_multiplier < 1.0
    assert softened.pipe_speed_multiplier < 1.0
    assert softened.pipe_gap_multiplier == CHAOS_PROFILE.pipe_gap_multiplier
    assert softened.mode is GameMode.CHAOS


def test_assist_switched_off_stays_off() -> None:
    assist = AdaptiveAssist()
    assist.toggle()
    assist.toggle()
    assert not assist.is_active
    for _ in range(5):
        assist.record_death(1)
    assert assist.consecutive_early_deaths == 5
    assert not assist.is_active
    assert assist.effective_gap_multiplier == 1.0

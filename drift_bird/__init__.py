"""Drift Bird: an arcade survival game whose rules decay as you survive.

The simulation core (phases, entities, collision, events, simulation) is
pure Python; ``drift_bird.game`` is the pygame front end that drives it.
"""

from .exceptions import InvalidArgument
from .modes import CHAOS_PROFILE, DEMO_PROFILE, AdaptiveAssist, GameMode, ModeProfile, get_mode_profile
from .simulation import (
    NO_INPUT,
    InputEvents,
    SimulationState,
    jump_to_phase,
    reset,
    restart,
    set_mode,
    step,
    toggle_assist,
)
from .snapshot import Snapshot

__all__ = [
    "AdaptiveAssist",
    "CHAOS_PROFILE",
    "DEMO_PROFILE",
    "GameMode",
    "InputEvents",
    "InvalidArgument",
    "ModeProfile",
    "NO_INPUT",
    "SimulationState",
    "Snapshot",
    "get_mode_profile",
    "jump_to_phase",
    "reset",
    "restart",
    "set_mode",
    "step",
    "toggle_assist",
]

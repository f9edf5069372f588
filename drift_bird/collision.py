"""Collision checks between the bird, the pipes and the ground.

Ceiling contact is never fatal; ``Bird.update`` clamps the bird to the top edge.
"""

from __future__ import annotations

from typing import Iterable, Optional

from .config import DELAYED_COLLISION_MS, GROUND_Y
from .entities import Bird, Pipe
from .utils import rects_overlap_x, span_within_band

GROUND = "ground"
PIPE = "pipe"


def is_delayed_collision_active(pipe: Pipe, now_ms: float, forgiveness_ms: float = 0.0) -> bool:
    """True once a delayed-collision pipe's grace window has elapsed."""
    if not pipe.has_delayed_collision:
        return True
    return now_ms - pipe.spawn_time_ms > DELAYED_COLLISION_MS + forgiveness_ms


def check_pipe_collision(bird: Bird, pipe: Pipe, now_ms: float, forgiveness_ms: float = 0.0) -> bool:
    """True if the bird overlaps the pipe horizontally and is not fully inside its gap."""
    if pipe.is_ghost:
        return False
    if not is_delayed_collision_active(pipe, now_ms, forgiveness_ms):
        return False
    if not rects_overlap_x(bird.x, bird.width, pipe.x, pipe.width):
        return False
    return not span_within_band(bird.y, bird.bottom, pipe.gap_top, pipe.gap_bottom)


def check_ground_collision(bird: Bird) -> bool:
    return bird.bottom >= GROUND_Y


def check_all_collisions(
    bird: Bird,
    pipes: Iterable[Pipe],
    now_ms: float,
    forgiveness_ms: float = 0.0,
) -> Optional[str]:
    """Return the collision kind (``"ground"`` or ``"pipe"``), or None."""
    if check_ground_collision(bird):
        return GROUND
    for pipe in pipes:
        if check_pipe_collision(bird, pipe, now_ms, forgiveness_ms):
            return PIPE
    return None

"""Numeric and interval helpers used across the simulation."""

from __future__ import annotations

import math


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp a numeric value into the inclusive range [lo, hi]."""
    return max(lo, min(hi, value))


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation from a to b by t in [0, 1]."""
    return a + (b - a) * t


def cycle_index(time_s: float, period_s: float, count: int) -> int:
    """Index of the slot of length period_s that time_s falls in, modulo count."""
    return int(math.floor(time_s / period_s)) % count


def rects_overlap_x(
    ax: float,
    aw: float,
    bx: float,
    bw: float,
) -> bool:
    """True if horizontal spans [ax, ax+aw) and [bx, bx+bw) overlap."""
    return ax + aw > bx and ax < bx + bw


def span_within_band(top: float, bottom: float, band_top: float, band_bottom: float) -> bool:
    """True if the vertical span lies strictly inside the band."""
    return top > band_top and bottom < band_bottom

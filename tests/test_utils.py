from drift_bird.utils import clamp, cycle_index, lerp, rects_overlap_x, span_within_band


def test_clamp_basic() -> None:
    assert clamp(5, 0, 10) == 5
    assert clamp(-1, 0, 10) == 0
    assert clamp(11, 0, 10) == 10


def test_lerp_endpoints() -> None:
    assert lerp(2.0, 6.0, 0.0) == 2.0
    assert lerp(2.0, 6.0, 1.0) == 6.0
    assert lerp(2.0, 6.0, 0.5) == 4.0


def test_cycle_index_wraps() -> None:
    assert cycle_index(0.0, 2.0, 4) == 0
    assert cycle_index(1.99, 2.0, 4) == 0
    assert cycle_index(2.0, 2.0, 4) == 1
    assert cycle_index(8.5, 2.0, 4) == 0


def test_rects_overlap_x() -> None:
    assert rects_overlap_x(0, 10, 5, 10) is True
    # touching edges do not overlap
    assert rects_overlap_x(0, 10, 10, 10) is False
    assert rects_overlap_x(30, 10, 0, 10) is False


def test_span_within_band_is_strict() -> None:
    assert span_within_band(10, 20, 0, 30) is True
    assert span_within_band(0, 20, 0, 30) is False
    assert span_within_band(10, 30, 0, 30) is False

import pytest

from femmesh.color_scale import AbstractColorScale, SimpleColorScale

BLUE = (255.0, 0.0, 0.0)
GREEN = (0.0, 255.0, 0.0)
RED = (0.0, 0.0, 255.0)


def _scale() -> SimpleColorScale:
    return SimpleColorScale(-1.0, 1.0, [BLUE, GREEN, RED])


def test_endpoints_give_end_colors():
    scale = _scale()
    assert scale(-1.0) == pytest.approx(BLUE)
    assert scale(1.0) == pytest.approx(RED)


def test_middle_breakpoint_gives_middle_color():
    assert _scale()(0.0) == pytest.approx(GREEN)


def test_values_are_clamped():
    scale = _scale()
    assert scale(-50.0) == pytest.approx(BLUE)
    assert scale(50.0) == pytest.approx(RED)


def test_midpoint_blends_evenly():
    scale = SimpleColorScale(0.0, 1.0, [(0.0, 0.0, 0.0), (200.0, 100.0, 50.0)])
    assert scale(0.5) == pytest.approx((100.0, 50.0, 25.0))


def test_channels_stay_within_neighbours():
    scale = _scale()
    for i in range(21):
        x = -1.0 + i * 0.1
        color = scale(x)
        assert all(0.0 - 1e-9 <= c <= 255.0 + 1e-9 for c in color)
        assert sum(color) == pytest.approx(255.0)


def test_bad_range_rejected():
    with pytest.raises(ValueError, match="Bad min/max"):
        SimpleColorScale(1.0, 1.0, [BLUE, RED])


def test_too_few_colors_rejected():
    with pytest.raises(ValueError, match="No colors"):
        SimpleColorScale(0.0, 1.0, [BLUE])


def test_abstract_scale_cannot_be_instantiated():
    with pytest.raises(TypeError):
        AbstractColorScale()


def test_simple_scale_is_an_abstract_scale():
    scale = _scale()
    assert isinstance(scale, AbstractColorScale)
    assert scale(0.5) == pytest.approx((0.0, 127.5, 127.5))
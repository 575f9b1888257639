import pytest

from tailfw.color import (
    RGB,
    rgb_add,
    rgb_max,
    rgb_min,
    rgb_multiply,
    rgb_overwrite,
    rgb_subtract,
)
from tailfw.compositor import BlendMode, LayerCompositor, blend
from tailfw.effect import LedEffect
from tailfw.led_matrix import LedMatrix

RED = RGB(255, 0, 0)
GREEN = RGB(0, 255, 0)


class _ColourEffect(LedEffect):
    def __init__(self, colour):
        super().__init__()
        self.colour = colour
        self.calls = []

    def render(self, coords, dt):
        self.calls.append((len(coords), dt))
        return [self.colour] * len(coords)

    def set_param(self, param_id, value):
        pass

    def get_param(self, param_id):
        return 0.0


def _matrix(leds=3):
    matrix = LedMatrix()
    matrix.configure([leds])
    return matrix


@pytest.mark.parametrize(
    "mode, func",
    [
        (BlendMode.MULTIPLY, rgb_multiply),
        (BlendMode.ADD, rgb_add),
        (BlendMode.SUBTRACT, rgb_subtract),
        (BlendMode.MIN, rgb_min),
        (BlendMode.MAX, rgb_max),
        (BlendMode.OVERWRITE, rgb_overwrite),
    ],
)
def test_blend_dispatches(mode, func):
    base, overlay = RGB(100, 30, 200), RGB(60, 250, 0)
    assert blend(base, overlay, mode) == func(base, overlay)


def test_unknown_blend_mode_returns_overlay():
    assert blend(RED, GREEN, 9) == GREEN


def test_layers_start_empty_and_enabled():
    compositor = LayerCompositor(4)
    assert compositor.layer_count == 4
    layer = compositor.get_layer(0)
    assert layer.effect is None
    assert layer.blend_mode == BlendMode.OVERWRITE
    assert layer.enabled is True


def test_out_of_range_layer_is_ignored():
    compositor = LayerCompositor(2)
    compositor.set_layer(2, _ColourEffect(RED), BlendMode.ADD)
    assert compositor.get_layer(2) is None
    assert compositor.get_layer(-1) is None
    assert compositor.layer_count == 2


def test_single_overwrite_layer_fills_matrix():
    compositor = LayerCompositor(2)
    matrix = _matrix()
    compositor.set_layer(0, _ColourEffect(RED), BlendMode.OVERWRITE)
    compositor.render(matrix, 0.033)
    assert matrix.pixels == (RED,) * 3


def test_layers_blend_in_order():
    compositor = LayerCompositor(2)
    matrix = _matrix()
    compositor.set_layer(0, _ColourEffect(RED), BlendMode.OVERWRITE)
    compositor.set_layer(1, _ColourEffect(GREEN), BlendMode.ADD)
    compositor.render(matrix, 0.033)
    assert matrix.pixels == (rgb_add(RED, GREEN),) * 3


def test_multiply_on_empty_output_stays_black():
    compositor = LayerCompositor(1)
    matrix = _matrix()
    compositor.set_layer(0, _ColourEffect(RED), BlendMode.MULTIPLY)
    compositor.render(matrix, 0.033)
    assert matrix.pixels == (RGB.black(),) * 3


def test_disabled_layer_is_skipped():
    compositor = LayerCompositor(1)
    matrix = _matrix()
    effect = _ColourEffect(RED)
    compositor.set_layer(0, effect, BlendMode.OVERWRITE)
    compositor.set_layer_enabled(0, False)
    compositor.render(matrix, 0.033)
    assert effect.calls == []
    assert matrix.pixels == (RGB.black(),) * 3


def test_set_layer_reenables():
    compositor = LayerCompositor(1)
    compositor.set_layer_enabled(0, False)
    compositor.set_layer(0, _ColourEffect(RED), BlendMode.MAX)
    assert compositor.get_layer(0).enabled is True
    assert compositor.get_layer(0).blend_mode == BlendMode.MAX


def test_remove_layer_clears_effect():
    compositor = LayerCompositor(1)
    compositor.set_layer(0, _ColourEffect(RED), BlendMode.ADD)
    compositor.set_layer_enabled(0, False)
    compositor.remove_layer(0)
    layer = compositor.get_layer(0)
    assert layer.effect is None
    assert layer.enabled is True


def test_render_passes_coords_and_dt():
    compositor = LayerCompositor(1)
    effect = _ColourEffect(GREEN)
    compositor.set_layer(0, effect, BlendMode.OVERWRITE)
    compositor.render(_matrix(5), 0.25)
    assert effect.calls == [(5, 0.25)]


def test_render_on_empty_matrix_does_nothing():
    compositor = LayerCompositor(1)
    effect = _ColourEffect(GREEN)
    compositor.set_layer(0, effect, BlendMode.OVERWRITE)
    matrix = LedMatrix()
    compositor.render(matrix, 0.033)
    assert effect.calls == []
    assert matrix.pixels == ()
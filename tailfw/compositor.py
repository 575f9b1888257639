"""Stacks LED effects in layers and blends them into a matrix."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from tailfw.color import (
    RGB,
    rgb_add,
    rgb_max,
    rgb_min,
    rgb_multiply,
    rgb_overwrite,
    rgb_subtract,
)
from tailfw.effect import LedEffect
from tailfw.led_matrix import LedMatrix


class BlendMode(IntEnum):
    MULTIPLY = 0
    ADD = 1
    SUBTRACT = 2
    MIN = 3
    MAX = 4
    OVERWRITE = 5


_BLENDERS = {
    BlendMode.MULTIPLY: rgb_multiply,
    BlendMode.ADD: rgb_add,
    BlendMode.SUBTRACT: rgb_subtract,
    BlendMode.MIN: rgb_min,
    BlendMode.MAX: rgb_max,
    BlendMode.OVERWRITE: rgb_overwrite,
}


def blend(base: RGB, overlay: RGB, mode: BlendMode | int) -> RGB:
    """Combine two colours; an unknown mode yields the overlay."""
    blender = _BLENDERS.get(mode)
    return overlay if blender is None else blender(base, overlay)


@dataclass
class Layer:
    effect: LedEffect | None = None
    blend_mode: BlendMode | int = BlendMode.OVERWRITE
    enabled: bool = True


class LayerCompositor:
    """A fixed number of layers rendered bottom to top."""

    def __init__(self, max_layers: int) -> None:
        self._layers = [Layer() for _ in range(max_layers)]

    @property
    def layer_count(self) -> int:
        return len(self._layers)

    def _valid(self, index: int) -> bool:
        return 0 <= index < len(self._layers)

    def set_layer(self, index: int, effect: LedEffect | None, mode: BlendMode | int) -> None:
        """Place an effect on a layer and enable it; bad indices are ignored."""
        if not self._valid(index):
            return
        try:
            mode = BlendMode(mode)
        except ValueError:
            pass
        layer = self._layers[index]
        layer.effect = effect
        layer.blend_mode = mode
        layer.enabled = True

    def remove_layer(self, index: int) -> None:
        if not self._valid(index):
            return
        layer = self._layers[index]
        layer.effect = None
        layer.enabled = True

    def set_layer_enabled(self, index: int, enabled: bool) -> None:
        if self._valid(index):
            self._layers[index].enabled = enabled

    def get_layer(self, index: int) -> Layer | None:
        return self._layers[index] if self._valid(index) else None

    def render(self, matrix: LedMatrix, dt: float) -> None:
        """Render every enabled layer and write the blended result to the matrix."""
        count = matrix.led_count
        if count == 0:
            return

        coords = matrix.coords
        output = [RGB.black()] * count
        for layer in self._layers:
            if not layer.enabled or layer.effect is None:
                continue
            rendered = list(layer.effect.render(coords, dt))[:count]
            rendered.extend([RGB.black()] * (count - len(rendered)))
            output = [
                blend(base, overlay, layer.blend_mode)
                for base, overlay in zip(output, rendered)
            ]

        for index, color in enumerate(output):
            matrix.set_pixel(index, color)
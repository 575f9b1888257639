"""Ring-based LED layout with a pixel buffer pushed to a physical strip."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from tailfw.color import RGB
from tailfw.effect import LedCoord


class LedStrip(Protocol):
    """The output device a matrix pushes its pixels to."""

    def set_pixel(self, index: int, r: int, g: int, b: int) -> None: ...

    def refresh(self) -> None: ...

    def resize(self, num_leds: int) -> None: ...


class LedMatrix:
    """LEDs arranged in rings; ring index maps to y, position in ring to x."""

    def __init__(self, strip: LedStrip | None = None) -> None:
        self.strip = strip
        self._coords: tuple[LedCoord, ...] = ()
        self._pixels: list[RGB] = []

    @property
    def led_count(self) -> int:
        return len(self._coords)

    @property
    def coords(self) -> tuple[LedCoord, ...]:
        return self._coords

    @property
    def pixels(self) -> tuple[RGB, ...]:
        return tuple(self._pixels)

    def configure(self, leds_per_ring: Sequence[int]) -> None:
        """Rebuild the coordinate map for the given ring sizes."""
        rings = list(leds_per_ring)
        for count in rings:
            if not 0 <= count <= 255:
                raise ValueError(f"LEDs per ring must be within 0..255, got {count}")

        num_rings = len(rings)
        coords: list[LedCoord] = []
        for ring, count in enumerate(rings):
            y = 0.5 if num_rings == 1 else ring / (num_rings - 1)
            for led in range(count):
                x = 0.5 if count == 1 else led / (count - 1)
                coords.append(LedCoord(x, y))

        new_total = len(coords)
        old_total = self.led_count
        if new_total < len(self._pixels):
            del self._pixels[new_total:]
        else:
            self._pixels.extend([RGB.black()] * (new_total - len(self._pixels)))
        self._coords = tuple(coords)

        if new_total != old_total and self.strip is not None:
            self.strip.resize(new_total)

    def set_pixel(self, index: int, color: RGB) -> None:
        """Store a colour; indices outside the matrix are ignored."""
        if 0 <= index < len(self._pixels):
            self._pixels[index] = color

    def push(self) -> None:
        """Send the buffer to the strip, if one is attached."""
        if self.strip is None:
            return
        for index, color in enumerate(self._pixels):
            self.strip.set_pixel(index, color.r, color.g, color.b)
        self.strip.refresh()
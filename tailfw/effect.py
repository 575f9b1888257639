"""Base class for LED effects rendered over normalised LED coordinates."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from tailfw.color import RGB


@dataclass(frozen=True)
class LedCoord:
    """Position of an LED in the unit square."""

    x: float
    y: float


class LedEffect(ABC):
    """An effect that colours every LED; supports flip and mirror transforms."""

    def __init__(self) -> None:
        self.flip_x = False
        self.flip_y = False
        self.mirror_x = False
        self.mirror_y = False

    @abstractmethod
    def render(self, coords: Sequence[LedCoord], dt: float) -> list[RGB]:
        """Return one colour per coordinate; dt is seconds since the last frame."""

    @abstractmethod
    def set_param(self, param_id: int, value: float) -> None:
        """Set an effect-specific parameter; unknown ids are ignored."""

    @abstractmethod
    def get_param(self, param_id: int) -> float:
        """Return an effect-specific parameter; unknown ids give 0.0."""

    def transform_coord(self, coord: LedCoord) -> LedCoord:
        """Apply mirroring first, then flipping."""
        x, y = coord.x, coord.y
        if self.mirror_x:
            x = x * 2.0 if x <= 0.5 else (1.0 - x) * 2.0
        if self.mirror_y:
            y = y * 2.0 if y <= 0.5 else (1.0 - y) * 2.0
        if self.flip_x:
            x = 1.0 - x
        if self.flip_y:
            y = 1.0 - y
        return LedCoord(x, y)
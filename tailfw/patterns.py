"""Motion patterns that turn sensor input into target angles for the four half-axes."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import IntEnum

from tailfw.config_types import MAX_SERVOS, Vec3


class PatternId(IntEnum):
    STATIC = 0x00
    WAGGING = 0x01
    LOOSE = 0x02


@dataclass
class MotionInput:
    """Everything a pattern may react to in one control cycle."""

    encoder_angles: list[float] = field(default_factory=lambda: [0.0] * MAX_SERVOS)
    gravity: Vec3 = field(default_factory=Vec3)
    tap_base: bool = False
    tap_tip: bool = False
    loudness: float = 0.0
    dt: float = 0.0


class MotionPattern(ABC):
    """Computes target angles (degrees) for X-first, X-second, Y-first, Y-second."""

    @abstractmethod
    def update(self, motion_input: MotionInput) -> list[float]:
        """Return the four target angles for this cycle."""

    @abstractmethod
    def set_param(self, param_id: int, value: float) -> None:
        """Set a pattern-specific parameter; unknown ids are ignored."""

    @abstractmethod
    def get_param(self, param_id: int) -> float:
        """Return a pattern-specific parameter; unknown ids give 0.0."""


class StaticPattern(MotionPattern):
    """Holds each half-axis at a fixed angle given by parameters 0-3."""

    def __init__(self) -> None:
        self._positions = [0.0] * MAX_SERVOS

    def update(self, motion_input: MotionInput) -> list[float]:
        return list(self._positions)

    def set_param(self, param_id: int, value: float) -> None:
        if 0 <= param_id < MAX_SERVOS:
            self._positions[param_id] = float(value)

    def get_param(self, param_id: int) -> float:
        if 0 <= param_id < MAX_SERVOS:
            return self._positions[param_id]
        return 0.0


class WaggingPattern(MotionPattern):
    """Sinusoidal side-to-side wag; the second X half lags by a quarter of pi."""

    _PARAMS = ("frequency", "x_amplitude", "y1_position", "y2_position")

    def __init__(self) -> None:
        self.frequency = 1.0  # Hz
        self.x_amplitude = 45.0  # degrees
        self.y1_position = 0.0  # degrees
        self.y2_position = 0.0  # degrees
        self._phase = 0.0  # radians

    def update(self, motion_input: MotionInput) -> list[float]:
        self._phase += motion_input.dt * self.frequency * 2.0 * math.pi
        if self._phase > 2.0 * math.pi * 1000.0:
            self._phase = math.fmod(self._phase, 2.0 * math.pi)
        return [
            self.x_amplitude * math.sin(self._phase),
            self.x_amplitude * math.sin(self._phase - math.pi / 4.0),
            self.y1_position,
            self.y2_position,
        ]

    def set_param(self, param_id: int, value: float) -> None:
        if 0 <= param_id < len(self._PARAMS):
            setattr(self, self._PARAMS[param_id], float(value))

    def get_param(self, param_id: int) -> float:
        if 0 <= param_id < len(self._PARAMS):
            return getattr(self, self._PARAMS[param_id])
        return 0.0


SPRING_K = 20.0


class _SpringChain:
    """Two spring-damper masses; the second chases the first."""

    def __init__(self) -> None:
        self.position = [0.0, 0.0]
        self.velocity = [0.0, 0.0]

    def _step(self, half: int, target: float, damping: float, dt: float) -> None:
        accel = (target - self.position[half]) * SPRING_K - self.velocity[half] * damping * 2.0 * math.sqrt(
            SPRING_K
        )
        self.velocity[half] += accel * dt
        self.position[half] += self.velocity[half] * dt

    def advance(self, target: float, damping: float, dt: float) -> tuple[float, float]:
        self._step(0, target, damping, dt)
        self._step(1, self.position[0], damping, dt)
        return self.position[0], self.position[1]


class LoosePattern(MotionPattern):
    """Physics-driven tail that swings against the tilt measured by gravity."""

    def __init__(self) -> None:
        self._damping = 0.3  # 0-1
        self._reactivity = 3.0  # 0-10
        self._x = _SpringChain()
        self._y = _SpringChain()

    def update(self, motion_input: MotionInput) -> list[float]:
        target_x = -motion_input.gravity.x * self._reactivity * 15.0
        target_y = -motion_input.gravity.y * self._reactivity * 15.0

        dt = motion_input.dt
        if dt <= 0.0 or dt > 0.1:
            dt = 0.01

        x_first, x_second = self._x.advance(target_x, self._damping, dt)
        y_first, y_second = self._y.advance(target_y, self._damping, dt)
        return [x_first, x_second, y_first, y_second]

    def set_param(self, param_id: int, value: float) -> None:
        if param_id == 0:
            self._damping = max(0.0, min(1.0, float(value)))
        elif param_id == 1:
            self._reactivity = max(0.0, min(10.0, float(value)))

    def get_param(self, param_id: int) -> float:
        if param_id == 0:
            return self._damping
        if param_id == 1:
            return self._reactivity
        return 0.0


_FACTORIES = {
    PatternId.STATIC: StaticPattern,
    PatternId.WAGGING: WaggingPattern,
    PatternId.LOOSE: LoosePattern,
}


def create_pattern(pattern_id: int) -> MotionPattern | None:
    """A fresh pattern for a wire id, or None if the id is unknown."""
    factory = _FACTORIES.get(pattern_id)
    return factory() if factory is not None else None
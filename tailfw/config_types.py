"""Persistent configuration records and their fixed binary layout."""

from __future__ import annotations

import copy as _copy
import struct
from collections.abc import Iterator
from dataclasses import dataclass, field

MAX_SERVOS = 4
MAX_AXES = 2
MAX_IMU = 2
MAX_LED_RINGS = 20
MAX_LED_LAYERS = 8
MAX_FFT_BINS = 128
NUM_PARAMS = 8

# Little-endian, naturally aligned layout of the stored configuration blob.
_SERVO = "BB?B6fhh"
_AXIS = "3f"
_IMU = "B?"
_MATRIX = f"B{MAX_LED_RINGS}B"
_LAYER = f"BB5?x{NUM_PARAMS}f"
_PATTERN = f"B3x{NUM_PARAMS}f"
_LAYOUT = struct.Struct(
    "<"
    + _SERVO * MAX_SERVOS
    + _AXIS * MAX_AXES
    + _IMU * MAX_IMU
    + _MATRIX
    + "3x"
    + _LAYER * MAX_LED_LAYERS
    + "B3x"
    + _PATTERN
)
CONFIG_BLOB_SIZE = _LAYOUT.size


def _zeros(count: int) -> list:
    return [0.0] * count


def _require_length(name: str, seq: list, length: int) -> None:
    if len(seq) != length:
        raise ValueError(f"{name} must have {length} entries, got {len(seq)}")


@dataclass
class Vec3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass
class ServoAssignment:
    axis: int = 0
    half: int = 0
    invert: bool = False
    mux_channel: int = 0

    def _values(self) -> list:
        return [self.axis, self.half, self.invert, self.mux_channel]

    @classmethod
    def _take(cls, it: Iterator) -> ServoAssignment:
        return cls(next(it), next(it), next(it), next(it))


@dataclass
class PidParams:
    kp: float = 0.0
    ki: float = 0.0
    kd: float = 0.0
    output_min: float = 0.0
    output_max: float = 0.0
    integral_limit: float = 0.0

    def _values(self) -> list:
        return [self.kp, self.ki, self.kd, self.output_min, self.output_max, self.integral_limit]

    @classmethod
    def _take(cls, it: Iterator) -> PidParams:
        return cls(*(next(it) for _ in range(6)))


@dataclass
class ServoConfig:
    assignment: ServoAssignment = field(default_factory=ServoAssignment)
    pid: PidParams = field(default_factory=PidParams)
    deadband_center: int = 0
    deadband_width: int = 0

    def _values(self) -> list:
        return [
            *self.assignment._values(),
            *self.pid._values(),
            self.deadband_center,
            self.deadband_width,
        ]

    @classmethod
    def _take(cls, it: Iterator) -> ServoConfig:
        assignment = ServoAssignment._take(it)
        pid = PidParams._take(it)
        return cls(assignment, pid, next(it), next(it))


@dataclass
class AxisConfig:
    zero_offset: float = 0.0
    limit_min: float = 0.0
    limit_max: float = 0.0

    def _values(self) -> list:
        return [self.zero_offset, self.limit_min, self.limit_max]

    @classmethod
    def _take(cls, it: Iterator) -> AxisConfig:
        return cls(next(it), next(it), next(it))


@dataclass
class LedMatrixConfig:
    num_rings: int = 0
    leds_per_ring: list[int] = field(default_factory=lambda: [0] * MAX_LED_RINGS)

    def _values(self) -> list:
        _require_length("leds_per_ring", self.leds_per_ring, MAX_LED_RINGS)
        return [self.num_rings, *self.leds_per_ring]

    @classmethod
    def _take(cls, it: Iterator) -> LedMatrixConfig:
        num_rings = next(it)
        return cls(num_rings, [next(it) for _ in range(MAX_LED_RINGS)])


@dataclass
class LayerConfig:
    effect_id: int = 0
    blend_mode: int = 0
    enabled: bool = False
    flip_x: bool = False
    flip_y: bool = False
    mirror_x: bool = False
    mirror_y: bool = False
    params: list[float] = field(default_factory=lambda: _zeros(NUM_PARAMS))

    def _values(self) -> list:
        _require_length("layer params", self.params, NUM_PARAMS)
        return [
            self.effect_id,
            self.blend_mode,
            self.enabled,
            self.flip_x,
            self.flip_y,
            self.mirror_x,
            self.mirror_y,
            *self.params,
        ]

    @classmethod
    def _take(cls, it: Iterator) -> LayerConfig:
        head = [next(it) for _ in range(7)]
        return cls(*head, params=[next(it) for _ in range(NUM_PARAMS)])


@dataclass
class MotionPatternConfig:
    pattern_id: int = 0
    params: list[float] = field(default_factory=lambda: _zeros(NUM_PARAMS))

    def _values(self) -> list:
        _require_length("pattern params", self.params, NUM_PARAMS)
        return [self.pattern_id, *self.params]

    @classmethod
    def _take(cls, it: Iterator) -> MotionPatternConfig:
        pattern_id = next(it)
        return cls(pattern_id, [next(it) for _ in range(NUM_PARAMS)])


@dataclass
class ImuConfig:
    mux_channel: int = 0
    tap_enabled: bool = False

    def _values(self) -> list:
        return [self.mux_channel, self.tap_enabled]

    @classmethod
    def _take(cls, it: Iterator) -> ImuConfig:
        return cls(next(it), next(it))


@dataclass
class SystemConfig:
    """Top-level configuration; all-zero by default."""

    servos: list[ServoConfig] = field(
        default_factory=lambda: [ServoConfig() for _ in range(MAX_SERVOS)]
    )
    axes: list[AxisConfig] = field(default_factory=lambda: [AxisConfig() for _ in range(MAX_AXES)])
    imus: list[ImuConfig] = field(default_factory=lambda: [ImuConfig() for _ in range(MAX_IMU)])
    led_matrix: LedMatrixConfig = field(default_factory=LedMatrixConfig)
    layers: list[LayerConfig] = field(
        default_factory=lambda: [LayerConfig() for _ in range(MAX_LED_LAYERS)]
    )
    num_layers: int = 0
    motion_pattern: MotionPatternConfig = field(default_factory=MotionPatternConfig)

    def to_bytes(self) -> bytes:
        """Serialise to the fixed-size blob layout."""
        _require_length("servos", self.servos, MAX_SERVOS)
        _require_length("axes", self.axes, MAX_AXES)
        _require_length("imus", self.imus, MAX_IMU)
        _require_length("layers", self.layers, MAX_LED_LAYERS)
        values: list = []
        for servo in self.servos:
            values.extend(servo._values())
        for axis in self.axes:
            values.extend(axis._values())
        for imu in self.imus:
            values.extend(imu._values())
        values.extend(self.led_matrix._values())
        for layer in self.layers:
            values.extend(layer._values())
        values.append(self.num_layers)
        values.extend(self.motion_pattern._values())
        try:
            return _LAYOUT.pack(*values)
        except struct.error as exc:
            raise ValueError(f"configuration value out of range: {exc}") from exc

    @classmethod
    def from_bytes(cls, data: bytes) -> SystemConfig:
        """Parse a blob; the size must match exactly."""
        if len(data) != CONFIG_BLOB_SIZE:
            raise ValueError(
                f"config blob must be {CONFIG_BLOB_SIZE} bytes, got {len(data)}"
            )
        it = iter(_LAYOUT.unpack(data))
        servos = [ServoConfig._take(it) for _ in range(MAX_SERVOS)]
        axes = [AxisConfig._take(it) for _ in range(MAX_AXES)]
        imus = [ImuConfig._take(it) for _ in range(MAX_IMU)]
        led_matrix = LedMatrixConfig._take(it)
        layers = [LayerConfig._take(it) for _ in range(MAX_LED_LAYERS)]
        num_layers = next(it)
        motion_pattern = MotionPatternConfig._take(it)
        return cls(servos, axes, imus, led_matrix, layers, num_layers, motion_pattern)

    def copy(self) -> SystemConfig:
        return _copy.deepcopy(self)
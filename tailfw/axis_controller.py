"""Closed-loop control of one axis driven by two servo/encoder halves."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from tailfw.config_types import ServoConfig
from tailfw.encoder import Encoder
from tailfw.i2c_mux import BusError, I2CMux
from tailfw.pid import PidController
from tailfw.servo import SERVO_SPEED_MAX, SERVO_SPEED_MIN, ServoBank

MAX_CONSECUTIVE_FAILURES = 10

_log = logging.getLogger(__name__)


def _clamp(value: float, lo: float, hi: float) -> float:
    if value < lo:
        return lo
    if value > hi:
        return hi
    return value


@dataclass
class _HalfAxis:
    servo_id: int = 0
    mux_channel: int = 0
    encoder: Encoder | None = None
    pid: PidController = field(default_factory=PidController)
    invert: bool = False
    zero_offset: float = 0.0
    target: float = 0.0
    current: float = 0.0
    fail_count: int = 0
    failed: bool = False


class AxisController:
    """Two halves of one axis; each reads its encoder and drives its servo via PID."""

    def __init__(self, servos: ServoBank) -> None:
        self.servos = servos
        self._halves = [_HalfAxis(), _HalfAxis()]
        self.limit_min = -180.0
        self.limit_max = 180.0
        self._disabled = False

    @property
    def is_disabled(self) -> bool:
        """True once both halves have failed."""
        return self._disabled

    def configure(
        self,
        servo_first: int,
        servo_second: int,
        cfg_first: ServoConfig,
        cfg_second: ServoConfig,
    ) -> None:
        """Assign servos and apply their configuration; clears failure state."""
        for half, servo_id, cfg in (
            (self._halves[0], servo_first, cfg_first),
            (self._halves[1], servo_second, cfg_second),
        ):
            half.servo_id = servo_id
            half.invert = bool(cfg.assignment.invert)
            half.mux_channel = cfg.assignment.mux_channel
            half.pid.set_gains(cfg.pid.kp, cfg.pid.ki, cfg.pid.kd)
            half.pid.set_output_limits(cfg.pid.output_min, cfg.pid.output_max)
            half.pid.set_integral_limit(cfg.pid.integral_limit)
            half.fail_count = 0
            half.failed = False
        self._disabled = False

    def _mark_disabled_if_both_failed(self) -> None:
        if all(half.failed for half in self._halves):
            self._disabled = True
            _log.warning("Both encoders failed, axis disabled")

    def init_encoders(self, mux: I2CMux) -> None:
        """Bring up both encoders; a half whose encoder fails is disabled."""
        for index, half in enumerate(self._halves):
            try:
                encoder = Encoder(half.mux_channel)
                encoder.init(mux)
            except (BusError, ValueError) as exc:
                half.encoder = None
                half.fail_count = MAX_CONSECUTIVE_FAILURES
                half.failed = True
                _log.warning("Encoder %d init failed, disabling half: %s", index, exc)
            else:
                half.encoder = encoder
        self._mark_disabled_if_both_failed()

    def calibrate_zero(self, mux: I2CMux) -> None:
        """Take the current encoder angles as the zero position."""
        for half in self._halves:
            if half.failed:
                continue
            half.zero_offset = half.encoder.read_angle(mux) if half.encoder else 0.0
            half.current = 0.0
            half.target = 0.0
            half.pid.reset()

    def set_limits(self, min_deg: float, max_deg: float) -> None:
        self.limit_min = float(min_deg)
        self.limit_max = float(max_deg)

    def set_pid_gains(self, half: int, kp: float, ki: float, kd: float) -> None:
        if 0 <= half < 2:
            self._halves[half].pid.set_gains(kp, ki, kd)

    def set_target(self, first_half_deg: float, second_half_deg: float) -> None:
        """Set target angles from zero, clamped to the axis limits."""
        self._halves[0].target = _clamp(first_half_deg, self.limit_min, self.limit_max)
        self._halves[1].target = _clamp(second_half_deg, self.limit_min, self.limit_max)

    def update(self, mux: I2CMux, dt: float) -> None:
        """One control cycle: read encoders, run PID, set servo speeds."""
        if self._disabled:
            return

        for index, half in enumerate(self._halves):
            if half.failed:
                self.servos.stop(half.servo_id)
                continue

            try:
                if half.encoder is None:
                    raise BusError("encoder not initialized")
                half.encoder.read_raw(mux)
            except BusError:
                half.fail_count += 1
                if half.fail_count >= MAX_CONSECUTIVE_FAILURES:
                    half.failed = True
                    self.servos.stop(half.servo_id)
                    _log.warning(
                        "Encoder %d: %d consecutive failures, disabling",
                        index,
                        half.fail_count,
                    )
                    self._mark_disabled_if_both_failed()
                continue
            half.fail_count = 0

            half.current = half.encoder.read_angle(mux) - half.zero_offset
            output = half.pid.update(half.target, half.current, dt)
            if half.invert:
                output = -output
            speed = int(_clamp(output, SERVO_SPEED_MIN, SERVO_SPEED_MAX))
            self.servos.set_speed(half.servo_id, speed)

    def get_position(self, half: int) -> float:
        """Current angle of a half in degrees from zero; 0.0 for an unknown half."""
        if 0 <= half < 2:
            return self._halves[half].current
        return 0.0
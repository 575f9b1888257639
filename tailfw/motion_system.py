"""Top-level motion control: sensors, the active pattern and both axes."""

from __future__ import annotations

import logging

from tailfw.axis_controller import AxisController
from tailfw.config_types import MAX_AXES, MAX_IMU, MAX_SERVOS, ServoConfig, SystemConfig, Vec3
from tailfw.i2c_mux import BusError, I2CMux
from tailfw.imu import Imu, ImuError
from tailfw.patterns import MotionInput, MotionPattern
from tailfw.servo import ServoBank

MAX_IMU_FAILURES = 10

_log = logging.getLogger(__name__)


class MotionSystem:
    """Owns the two axes and two IMUs and runs the active motion pattern."""

    def __init__(self, servos: ServoBank | None = None) -> None:
        self.servos = servos if servos is not None else ServoBank()
        self._axes = [AxisController(self.servos) for _ in range(MAX_AXES)]
        self._imus = [Imu(0) for _ in range(MAX_IMU)]
        self._mux: I2CMux | None = None
        self._pattern: MotionPattern | None = None
        self._gravity = Vec3()
        self._tap_base = False
        self._tap_tip = False
        self._loudness = 0.0
        self._imu_fail_count = [0] * MAX_IMU
        self._imu_disabled = [False] * MAX_IMU

    @property
    def pattern(self) -> MotionPattern | None:
        return self._pattern

    @property
    def gravity(self) -> Vec3:
        """The last gravity vector measured by the base IMU."""
        g = self._gravity
        return Vec3(g.x, g.y, g.z)

    def init(self, mux: I2CMux | None, config: SystemConfig) -> None:
        """Map servos to axes, bring up encoders and IMUs, apply axis limits."""
        self._mux = mux

        # Default: servo 0/1 drive X, servo 2/3 drive Y; assignments override.
        servo_idx = [[0, 1], [2, 3]]
        servo_cfg: list[list[ServoConfig]] = [
            [config.servos[0], config.servos[1]],
            [config.servos[2], config.servos[3]],
        ]
        for index, servo in enumerate(config.servos[:MAX_SERVOS]):
            axis = servo.assignment.axis
            half = servo.assignment.half
            if 0 <= axis < MAX_AXES and 0 <= half < 2:
                servo_idx[axis][half] = index
                servo_cfg[axis][half] = servo

        for a, axis in enumerate(self._axes):
            axis.configure(servo_idx[a][0], servo_idx[a][1], servo_cfg[a][0], servo_cfg[a][1])
            if mux is not None:
                axis.init_encoders(mux)
            axis.set_limits(config.axes[a].limit_min, config.axes[a].limit_max)

        self._imu_fail_count = [0] * MAX_IMU
        self._imu_disabled = [False] * MAX_IMU
        if mux is None:
            return
        for i in range(MAX_IMU):
            imu = Imu(config.imus[i].mux_channel)
            self._imus[i] = imu
            try:
                imu.init(mux)
            except (BusError, ImuError, ValueError) as exc:
                self._imu_fail_count[i] = MAX_IMU_FAILURES
                self._imu_disabled[i] = True
                _log.warning("IMU %d init failed, disabled: %s", i, exc)

    def set_pattern(self, pattern: MotionPattern | None) -> None:
        self._pattern = pattern

    def set_pattern_param(self, param_id: int, value: float) -> None:
        if self._pattern is not None:
            self._pattern.set_param(param_id, value)

    def calibrate_zero(self) -> None:
        """Take the current encoder positions of both axes as zero."""
        for axis in self._axes:
            axis.calibrate_zero(self._mux)

    def set_axis_limits(self, axis: int, min_deg: float, max_deg: float) -> None:
        if 0 <= axis < MAX_AXES:
            self._axes[axis].set_limits(min_deg, max_deg)

    def set_pid_gains(self, servo_id: int, kp: float, ki: float, kd: float) -> None:
        """Set gains by servo id: axis is id // 2, half is id % 2."""
        if 0 <= servo_id < MAX_SERVOS:
            self._axes[servo_id // 2].set_pid_gains(servo_id % 2, kp, ki, kd)

    def update(self, dt: float) -> None:
        """One control cycle; does nothing without a bus."""
        mux = self._mux
        if mux is None:
            return

        if not self._imu_disabled[0]:
            try:
                self._imus[0].read_accel(mux)
            except (BusError, ValueError):
                self._imu_fail_count[0] += 1
                if self._imu_fail_count[0] >= MAX_IMU_FAILURES:
                    self._imu_disabled[0] = True
                    _log.warning(
                        "Base IMU: %d failures, disabled", self._imu_fail_count[0]
                    )
            else:
                self._gravity = self._imus[0].gravity_vector(mux)
                self._imu_fail_count[0] = 0

        for i, imu in enumerate(self._imus):
            if self._imu_disabled[i]:
                continue
            if imu.check_tap(mux):
                if i == 0:
                    self._tap_base = True
                else:
                    self._tap_tip = True

        if self._pattern is not None:
            motion_input = MotionInput(
                encoder_angles=[
                    self._axes[0].get_position(0),
                    self._axes[0].get_position(1),
                    self._axes[1].get_position(0),
                    self._axes[1].get_position(1),
                ],
                gravity=self.gravity,
                tap_base=self._tap_base,
                tap_tip=self._tap_tip,
                loudness=self._loudness,
                dt=dt,
            )
            targets = self._pattern.update(motion_input)
            self._axes[0].set_target(targets[0], targets[1])
            self._axes[1].set_target(targets[2], targets[3])

        for axis in self._axes:
            axis.update(mux, dt)

    def get_position(self, axis: int, half: int) -> float:
        """Current angle of an axis half in degrees; 0.0 for an unknown axis."""
        if 0 <= axis < MAX_AXES:
            return self._axes[axis].get_position(half)
        return 0.0

    def check_tap_base(self) -> bool:
        """Report and clear a tap seen by the base IMU."""
        tapped, self._tap_base = self._tap_base, False
        return tapped

    def check_tap_tip(self) -> bool:
        """Report and clear a tap seen by the tip IMU."""
        tapped, self._tap_tip = self._tap_tip, False
        return tapped
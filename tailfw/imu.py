"""Six-axis inertial sensor on the multiplexed bus: acceleration, rotation and taps."""

from __future__ import annotations

import logging
import math
import struct
import time

from tailfw.config_types import Vec3
from tailfw.i2c_mux import BusError, I2CMux

BMI270_ADDR = 0x68

REG_CHIP_ID = 0x00
REG_DATA_8 = 0x0C  # accelerometer X low byte
REG_DATA_14 = 0x12  # gyroscope X low byte
REG_ACC_CONF = 0x40
REG_ACC_RANGE = 0x41
REG_GYR_CONF = 0x42
REG_GYR_RANGE = 0x43
REG_INIT_CTRL = 0x59
REG_INIT_DATA = 0x5E
REG_PWR_CONF = 0x7C
REG_PWR_CTRL = 0x7D
REG_CMD = 0x7E

CHIP_ID = 0x24
CMD_SOFT_RESET = 0xB6

ACCEL_SCALE = 8.0 / 32768.0  # g per LSB at +/-8 g
GYRO_SCALE = 2000.0 / 32768.0  # deg/s per LSB at +/-2000 deg/s
TAP_THRESHOLD_G = 2.5

_XYZ = struct.Struct("<hhh")
_log = logging.getLogger(__name__)


class ImuError(Exception):
    """The sensor answered, but not as the expected device."""


def parse_raw_xyz(raw: bytes, scale: float) -> Vec3:
    """Decode three little-endian signed 16-bit values and scale them."""
    if len(raw) < _XYZ.size:
        raise ValueError(f"xyz sample needs {_XYZ.size} bytes, got {len(raw)}")
    x, y, z = _XYZ.unpack(bytes(raw[: _XYZ.size]))
    return Vec3(x * scale, y * scale, z * scale)


def _magnitude(v: Vec3) -> float:
    return math.sqrt(v.x * v.x + v.y * v.y + v.z * v.z)


class Imu:
    """One sensor behind a multiplexer channel, with software tap detection."""

    def __init__(self, mux_channel: int) -> None:
        self.mux_channel = mux_channel
        self.tap_detected = False
        self._prev_spiking = False

    def _write(self, mux: I2CMux, register: int, value: int) -> None:
        mux.write_register(self.mux_channel, BMI270_ADDR, register, value)

    def _read(self, mux: I2CMux, register: int, length: int) -> bytes:
        return mux.read_registers(self.mux_channel, BMI270_ADDR, register, length)

    def init(self, mux: I2CMux) -> None:
        """Reset, identify and configure the sensor; raises BusError or ImuError."""
        self.tap_detected = False
        self._prev_spiking = False

        self._write(mux, REG_CMD, CMD_SOFT_RESET)
        time.sleep(0.002)

        chip_id = self._read(mux, REG_CHIP_ID, 1)[0]
        if chip_id != CHIP_ID:
            raise ImuError(f"unexpected chip id {chip_id:#04x} (expected {CHIP_ID:#04x})")
        _log.info("IMU detected, chip id %#04x", chip_id)

        self._write(mux, REG_PWR_CONF, 0x00)
        time.sleep(0.001)
        self._write(mux, REG_INIT_CTRL, 0x00)
        # Without the vendor feature blob only plain accel/gyro data is available.
        _log.warning("IMU feature configuration not uploaded; advanced features disabled")
        self._write(mux, REG_PWR_CONF, 0x01)

        self._write(mux, REG_ACC_CONF, 0xA8)  # 100 Hz, normal bandwidth, performance filter
        self._write(mux, REG_ACC_RANGE, 0x02)  # +/-8 g
        self._write(mux, REG_GYR_CONF, 0xA8)
        self._write(mux, REG_GYR_RANGE, 0x00)  # +/-2000 deg/s
        self._write(mux, REG_PWR_CTRL, 0x44)

        time.sleep(0.05)
        _log.info("IMU initialized on mux channel %d", self.mux_channel)

    def read_accel(self, mux: I2CMux) -> Vec3:
        """Acceleration in g."""
        return parse_raw_xyz(self._read(mux, REG_DATA_8, 6), ACCEL_SCALE)

    def read_gyro(self, mux: I2CMux) -> Vec3:
        """Angular rate in degrees per second."""
        return parse_raw_xyz(self._read(mux, REG_DATA_14, 6), GYRO_SCALE)

    def gravity_vector(self, mux: I2CMux) -> Vec3:
        """Unit vector along the measured acceleration; zero if unreadable."""
        try:
            accel = self.read_accel(mux)
        except BusError as exc:
            _log.warning("failed to read accel for gravity vector: %s", exc)
            return Vec3()
        mag = _magnitude(accel)
        if mag > 0.001:
            return Vec3(accel.x / mag, accel.y / mag, accel.z / mag)
        return accel

    def check_tap(self, mux: I2CMux) -> bool:
        """True on the rising edge of an acceleration spike above the tap threshold."""
        if self.tap_detected:
            self.tap_detected = False
            return True
        try:
            accel = self.read_accel(mux)
        except BusError:
            return False
        spiking = _magnitude(accel) > TAP_THRESHOLD_G
        tap = spiking and not self._prev_spiking
        self._prev_spiking = spiking
        return tap
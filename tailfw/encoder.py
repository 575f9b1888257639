"""Magnetic rotary encoder (12-bit raw angle) with multi-turn tracking."""

from __future__ import annotations

import logging

from tailfw.i2c_mux import I2C_MUX_NUM_CHANNELS, BusError, I2CMux

AS5600_ADDR = 0x36
AS5600_REG_RAW_ANGLE_H = 0x0C
COUNTS_PER_TURN = 4096
HALF_TURN = 2048

_log = logging.getLogger(__name__)


def parse_raw_angle(data: bytes) -> int:
    """Combine the high nibble and low byte of the raw-angle registers."""
    if len(data) < 2:
        raise ValueError(f"raw angle needs 2 bytes, got {len(data)}")
    return ((data[0] & 0x0F) << 8) | data[1]


class Encoder:
    """One encoder behind a multiplexer channel, counting full turns."""

    def __init__(self, mux_channel: int) -> None:
        if not 0 <= mux_channel < I2C_MUX_NUM_CHANNELS:
            raise ValueError(
                f"mux channel must be within 0..{I2C_MUX_NUM_CHANNELS - 1}, got {mux_channel}"
            )
        self.mux_channel = mux_channel
        self.multi_turn_offset = 0
        self.last_raw_angle = 0

    def _read(self, mux: I2CMux) -> int:
        data = mux.read_registers(self.mux_channel, AS5600_ADDR, AS5600_REG_RAW_ANGLE_H, 2)
        return parse_raw_angle(data)

    def init(self, mux: I2CMux) -> None:
        """Reset turn counting and seed the last angle from the sensor."""
        self.multi_turn_offset = 0
        self.last_raw_angle = 0
        self.last_raw_angle = self._read(mux)
        _log.info(
            "Encoder on mux channel %d initialized, raw angle: %d",
            self.mux_channel,
            self.last_raw_angle,
        )

    def read_raw(self, mux: I2CMux) -> int:
        """Read the raw angle (0-4095), counting wraps across the 0/4095 boundary."""
        raw = self._read(mux)
        delta = raw - self.last_raw_angle
        if delta > HALF_TURN:
            self.multi_turn_offset -= 1
        elif delta < -HALF_TURN:
            self.multi_turn_offset += 1
        self.last_raw_angle = raw
        return raw

    def read_angle(self, mux: I2CMux) -> float:
        """Continuous angle in degrees; 0.0 if the sensor cannot be read."""
        try:
            raw = self.read_raw(mux)
        except BusError as exc:
            _log.error("encoder read failed: %s", exc)
            return 0.0
        return self.multi_turn_offset * 360.0 + raw * 360.0 / COUNTS_PER_TURN
"""An eight-channel I2C multiplexer in front of the sensor bus."""

from __future__ import annotations

from typing import Protocol

I2C_MUX_ADDR = 0x70
I2C_MUX_NUM_CHANNELS = 8


class BusError(Exception):
    """A transfer on the I2C bus failed."""


class I2CTransport(Protocol):
    """Raw bus access; implementations raise BusError on failure."""

    def write(self, address: int, data: bytes) -> None: ...

    def write_read(self, address: int, data: bytes, length: int) -> bytes: ...


class I2CMux:
    """Routes transfers to one downstream channel at a time."""

    def __init__(self, transport: I2CTransport) -> None:
        self.transport = transport
        self._active: int | None = None
        self.disable_all()

    @property
    def active_channel(self) -> int | None:
        return self._active

    def select_channel(self, channel: int) -> None:
        """Route the bus to a channel; reselecting the active one is free."""
        if not 0 <= channel < I2C_MUX_NUM_CHANNELS:
            raise ValueError(
                f"channel must be within 0..{I2C_MUX_NUM_CHANNELS - 1}, got {channel}"
            )
        if channel == self._active:
            return
        self.transport.write(I2C_MUX_ADDR, bytes([1 << channel]))
        self._active = channel

    def disable_all(self) -> None:
        """Disconnect every downstream channel."""
        self.transport.write(I2C_MUX_ADDR, bytes([0x00]))
        self._active = None

    def write_register(self, channel: int, address: int, register: int, value: int) -> None:
        """Write one register of a device behind the given channel."""
        self.select_channel(channel)
        self.transport.write(address, bytes([register, value]))

    def read_registers(self, channel: int, address: int, register: int, length: int) -> bytes:
        """Read consecutive registers of a device behind the given channel."""
        self.select_channel(channel)
        data = bytes(self.transport.write_read(address, bytes([register]), length))
        if len(data) != length:
            raise BusError(
                f"device {address:#04x} returned {len(data)} bytes, expected {length}"
            )
        return data
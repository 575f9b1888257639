import pytest

from tailfw.i2c_mux import I2C_MUX_ADDR, BusError, I2CMux


class FakeBus:
    def __init__(self):
        self.writes = []
        self.reads = []
        self.responses = {}
        self.fail = False

    def write(self, address, data):
        if self.fail:
            raise BusError("nack")
        self.writes.append((address, bytes(data)))

    def write_read(self, address, data, length):
        if self.fail:
            raise BusError("nack")
        self.reads.append((address, bytes(data), length))
        return self.responses.get(address, bytes(length))


def test_construction_disables_all_channels():
    bus = FakeBus()
    mux = I2CMux(bus)
    assert bus.writes == [(I2C_MUX_ADDR, b"\x00")]
    assert mux.active_channel is None


def test_select_channel_writes_bitmask():
    bus = FakeBus()
    mux = I2CMux(bus)
    mux.select_channel(0)
    assert bus.writes[-1] == (I2C_MUX_ADDR, b"\x01")
    assert mux.active_channel == 0


def test_reselecting_active_channel_sends_nothing():
    bus = FakeBus()
    mux = I2CMux(bus)
    mux.select_channel(3)
    count = len(bus.writes)
    mux.select_channel(3)
    assert len(bus.writes) == count


@pytest.mark.parametrize("channel", [-1, 8])
def test_invalid_channel_raises(channel):
    mux = I2CMux(FakeBus())
    with pytest.raises(ValueError):
        mux.select_channel(channel)


def test_failed_select_keeps_previous_channel():
    bus = FakeBus()
    mux = I2CMux(bus)
    mux.select_channel(2)
    bus.fail = True
    with pytest.raises(BusError):
        mux.select_channel(5)
    assert mux.active_channel == 2


def test_failed_construction_raises():
    bus = FakeBus()
    bus.fail = True
    with pytest.raises(BusError):
        I2CMux(bus)


def test_disable_all_clears_active_channel():
    bus = FakeBus()
    mux = I2CMux(bus)
    mux.select_channel(4)
    mux.disable_all()
    assert mux.active_channel is None
    assert bus.writes[-1] == (I2C_MUX_ADDR, b"\x00")


def test_write_register_selects_then_writes():
    bus = FakeBus()
    mux = I2CMux(bus)
    mux.write_register(1, 0x68, 0x7E, 0xB6)
    assert mux.active_channel == 1
    assert bus.writes[-1] == (0x68, bytes([0x7E, 0xB6]))


def test_read_registers_returns_device_data():
    bus = FakeBus()
    bus.responses[0x36] = b"\x0a\x0b"
    mux = I2CMux(bus)
    assert mux.read_registers(6, 0x36, 0x0C, 2) == b"\x0a\x0b"
    assert bus.reads[-1] == (0x36, b"\x0c", 2)
    assert mux.active_channel == 6


def test_short_read_raises():
    bus = FakeBus()
    bus.responses[0x36] = b"\x01"
    mux = I2CMux(bus)
    with pytest.raises(BusError):
        mux.read_registers(0, 0x36, 0x0C, 2)
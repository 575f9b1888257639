import pytest

from tailfw.encoder import AS5600_ADDR, Encoder, parse_raw_angle
from tailfw.i2c_mux import BusError, I2CMux


class FakeBus:
    def __init__(self):
        self.raw = 0
        self.fail = False
        self.reads = []

    def write(self, address, data):
        if self.fail:
            raise BusError("nack")

    def write_read(self, address, data, length):
        if self.fail:
            raise BusError("nack")
        self.reads.append((address, bytes(data)))
        return bytes([(self.raw >> 8) & 0x0F, self.raw & 0xFF])


@pytest.fixture
def bus():
    return FakeBus()


@pytest.fixture
def mux(bus):
    return I2CMux(bus)


def test_parse_raw_angle_masks_high_nibble():
    assert parse_raw_angle(bytes([0xFF, 0xFF])) == 4095
    assert parse_raw_angle(bytes([0x0F, 0xA0])) == 4000


def test_parse_raw_angle_rejects_short_data():
    with pytest.raises(ValueError):
        parse_raw_angle(b"\x01")


def test_invalid_channel_rejected():
    with pytest.raises(ValueError):
        Encoder(8)


def test_init_seeds_last_angle(bus, mux):
    bus.raw = 1234
    encoder = Encoder(3)
    encoder.init(mux)
    assert encoder.last_raw_angle == 1234
    assert bus.reads[-1] == (AS5600_ADDR, b"\x0c")
    assert mux.active_channel == 3


def test_init_propagates_bus_errors(bus, mux):
    bus.fail = True
    with pytest.raises(BusError):
        Encoder(0).init(mux)


def test_forward_wrap_counts_a_turn(bus, mux):
    encoder = Encoder(0)
    bus.raw = 4000
    encoder.init(mux)
    bus.raw = 100
    assert encoder.read_raw(mux) == 100
    assert encoder.multi_turn_offset == 1


def test_backward_wrap_counts_a_turn(bus, mux):
    encoder = Encoder(0)
    bus.raw = 100
    encoder.init(mux)
    bus.raw = 4000
    encoder.read_raw(mux)
    assert encoder.multi_turn_offset == -1


def test_small_moves_do_not_wrap(bus, mux):
    encoder = Encoder(0)
    encoder.init(mux)
    for raw in (500, 1500, 2500, 2000):
        bus.raw = raw
        encoder.read_raw(mux)
    assert encoder.multi_turn_offset == 0
    assert encoder.last_raw_angle == 2000


def test_angle_is_continuous_across_wrap(bus, mux):
    encoder = Encoder(0)
    bus.raw = 4090
    encoder.init(mux)
    before = encoder.read_angle(mux)
    bus.raw = 5
    after = encoder.read_angle(mux)
    assert before < 360.0 < after
    assert after - before < 2.0


def test_half_turn_angle(bus, mux):
    encoder = Encoder(0)
    encoder.init(mux)
    bus.raw = 2048
    assert encoder.read_angle(mux) == pytest.approx(180.0)


def test_read_angle_failure_returns_zero(bus, mux):
    encoder = Encoder(0)
    bus.raw = 1000
    encoder.init(mux)
    bus.fail = True
    assert encoder.read_angle(mux) == 0.0
    assert encoder.last_raw_angle == 1000


def test_read_raw_failure_raises(bus, mux):
    encoder = Encoder(1)
    encoder.init(mux)
    bus.fail = True
    with pytest.raises(BusError):
        encoder.read_raw(mux)
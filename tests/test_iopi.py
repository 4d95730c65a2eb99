import pytest

from abepi.i2c import I2CBus, I2CError
from abepi.iopi import IOPi


class FakeBus:
    """A register file standing in for an MCP23017, logging each transfer."""

    def __init__(self, preset=None):
        self.registers = [0] * 256
        for register, value in (preset or {}).items():
            self.registers[register] = value
        self.log = []

    def read_byte_data(self, address, register):
        self.log.append(("rb", address, register))
        return self.registers[register]

    def read_word_data(self, address, register):
        self.log.append(("rw", address, register))
        return self.registers[register] | (self.registers[register + 1] << 8)

    def write_byte_data(self, address, register, value):
        self.log.append(("wb", address, register, value))
        self.registers[register] = value & 0xFF

    def write_word_data(self, address, register, value):
        self.log.append(("ww", address, register, value))
        self.registers[register] = value & 0xFF
        self.registers[register + 1] = (value >> 8) & 0xFF


@pytest.fixture
def bus():
    return FakeBus()


@pytest.fixture
def chip(bus):
    device = IOPi(0x20, reset=False, bus=bus)
    bus.log.clear()
    return device


def test_init_with_reset(bus):
    IOPi(0x20, reset=True, bus=bus)
    assert bus.log == [
        ("wb", 0x20, 0x0A, 0x02),
        ("ww", 0x20, 0x00, 0xFFFF),
        ("ww", 0x20, 0x0C, 0x0000),
        ("ww", 0x20, 0x02, 0x0000),
    ]


def test_init_without_reset(bus):
    IOPi(0x20, reset=False, bus=bus)
    assert bus.log == [("wb", 0x20, 0x0A, 0x02)]


@pytest.mark.parametrize(
    "setter, getter",
    [
        ("set_bus_direction", "get_bus_direction"),
        ("invert_bus", "get_bus_polarity"),
        ("set_bus_pullups", "get_bus_pullups"),
        ("set_interrupt_on_bus", "get_interrupt_on_bus"),
    ],
)
def test_bus_round_trip(chip, setter, getter):
    mismatches = [
        a for a in range(65535)
        if (getattr(chip, setter)(a), getattr(chip, getter)())[1] != a
    ]
    assert mismatches == []


@pytest.mark.parametrize(
    "setter, getter",
    [
        ("set_interrupt_defaults", "get_interrupt_defaults"),
        ("set_interrupt_on_port", "get_interrupt_on_port"),
        ("set_interrupt_type", "get_interrupt_type"),
        ("set_port_direction", "get_port_direction"),
        ("invert_port", "get_port_polarity"),
        ("set_port_pullups", "get_port_pullups"),
    ],
)
def test_port_round_trip(chip, setter, getter):
    for a in range(255):
        for port in (0, 1):
            getattr(chip, setter)(port, a)
            assert getattr(chip, getter)(port) == a


@pytest.mark.parametrize(
    "setter, getter",
    [
        ("set_interrupt_on_pin", "get_interrupt_on_pin"),
        ("set_pin_direction", "get_pin_direction"),
        ("invert_pin", "get_pin_polarity"),
        ("set_pin_pullup", "get_pin_pullup"),
    ],
)
def test_pin_round_trip(chip, setter, getter):
    for pin in range(1, 17):
        getattr(chip, setter)(pin, 0)
        assert getattr(chip, getter)(pin) == 0
        getattr(chip, setter)(pin, 1)
        assert getattr(chip, getter)(pin) == 1


def test_get_interrupt_polarity(chip):
    chip.set_interrupt_polarity(0)
    assert chip.get_interrupt_polarity() == 0
    chip.set_interrupt_polarity(1)
    assert chip.get_interrupt_polarity() == 1


@pytest.mark.parametrize(
    "method, getter, register",
    [
        ("invert_bus", "get_bus_polarity", 0x02),
        ("set_bus_direction", "get_bus_direction", 0x00),
        ("set_bus_pullups", "get_bus_pullups", 0x0C),
        ("set_interrupt_on_bus", "get_interrupt_on_bus", 0x04),
        ("write_bus", "read_bus", 0x12),
    ],
)
def test_bus_writes(chip, bus, method, getter, register):
    getattr(chip, method)(0x0000)
    getattr(chip, method)(0xFFFE)
    assert bus.log == [
        ("ww", 0x20, register, 0x0000),
        ("ww", 0x20, register, 0xFFFE),
    ]
    assert getattr(chip, getter)() == 0xFFFE


@pytest.mark.parametrize(
    "method, getter, registers",
    [
        ("invert_port", "get_port_polarity", (0x02, 0x03)),
        ("set_interrupt_defaults", "get_interrupt_defaults", (0x06, 0x07)),
        ("set_interrupt_on_port", "get_interrupt_on_port", (0x04, 0x05)),
        ("set_interrupt_type", "get_interrupt_type", (0x08, 0x09)),
        ("set_port_direction", "get_port_direction", (0x00, 0x01)),
        ("set_port_pullups", "get_port_pullups", (0x0C, 0x0D)),
        ("write_port", "read_port", (0x12, 0x13)),
    ],
)
def test_port_writes(chip, bus, method, getter, registers):
    for x in range(256):
        getattr(chip, method)(0, x)
        getattr(chip, method)(1, x)
    assert bus.log[:2] == [
        ("wb", 0x20, registers[0], 0x00),
        ("wb", 0x20, registers[1], 0x00),
    ]
    assert bus.log[-2:] == [
        ("wb", 0x20, registers[0], 0xFF),
        ("wb", 0x20, registers[1], 0xFF),
    ]
    assert len(bus.log) == 512
    assert [getattr(chip, getter)(0), getattr(chip, getter)(1)] == [0xFF, 0xFF]


@pytest.mark.parametrize(
    "clear, method, getter, registers",
    [
        ("invert_bus", "invert_pin", "get_bus_polarity", (0x02, 0x03)),
        ("set_interrupt_on_bus", "set_interrupt_on_pin", "get_interrupt_on_bus", (0x04, 0x05)),
        ("set_bus_direction", "set_pin_direction", "get_bus_direction", (0x00, 0x01)),
        ("set_bus_pullups", "set_pin_pullup", "get_bus_pullups", (0x0C, 0x0D)),
        ("write_bus", "write_pin", "read_bus", (0x12, 0x13)),
    ],
)
def test_pin_writes(chip, bus, clear, method, getter, registers):
    getattr(chip, clear)(0x0000)
    bus.log.clear()
    for pin in range(1, 17):
        getattr(chip, method)(pin, 1)
    a, b = registers
    assert bus.log[0:2] == [("rb", 0x20, a), ("wb", 0x20, a, 0x01)]
    assert bus.log[14:16] == [("rb", 0x20, a), ("wb", 0x20, a, 0xFF)]
    assert bus.log[16:18] == [("rb", 0x20, b), ("wb", 0x20, b, 0x01)]
    assert bus.log[30:32] == [("rb", 0x20, b), ("wb", 0x20, b, 0xFF)]
    assert len(bus.log) == 32
    assert getattr(chip, getter)() == 0xFFFF


def test_write_pin_clears_bit(chip, bus):
    chip.write_bus(0xFFFF)
    chip.write_pin(3, 0)
    chip.write_pin(12, 0)
    assert chip.read_bus() == 0xF7FB


def test_mirror_interrupts(chip, bus):
    chip.mirror_interrupts(1)
    chip.mirror_interrupts(0)
    assert bus.log == [("wb", 0x20, 0x0A, 0x42), ("wb", 0x20, 0x0A, 0x02)]
    assert chip.get_interrupt_polarity() == 1


def test_set_interrupt_polarity(chip, bus):
    chip.set_interrupt_polarity(1)
    chip.set_interrupt_polarity(0)
    assert bus.log == [("wb", 0x20, 0x0A, 0x02), ("wb", 0x20, 0x0A, 0x00)]
    assert chip.get_interrupt_polarity() == 0


def test_config_bits_combine(chip, bus):
    chip.mirror_interrupts(1)
    chip.set_interrupt_polarity(0)
    assert bus.log[-1] == ("wb", 0x20, 0x0A, 0x40)
    assert chip.get_interrupt_polarity() == 0


def test_read_bus(chip, bus):
    chip.write_bus(0x0000)
    chip.set_bus_direction(0xFFFF)
    bus.log.clear()
    assert chip.read_bus() == 0x0000
    assert bus.log == [("rw", 0x20, 0x12)]


def test_read_interrupt_capture(chip, bus):
    bus.registers[0x10] = 0x5A
    bus.registers[0x11] = 0xA5
    assert chip.read_interrupt_capture(0) == 0x5A
    assert chip.read_interrupt_capture(1) == 0xA5
    assert bus.log == [("rb", 0x20, 0x10), ("rb", 0x20, 0x11)]


def test_read_interrupt_status(chip, bus):
    bus.registers[0x0E] = 0x01
    bus.registers[0x0F] = 0x80
    assert chip.read_interrupt_status(0) == 0x01
    assert chip.read_interrupt_status(1) == 0x80
    assert bus.log == [("rb", 0x20, 0x0E), ("rb", 0x20, 0x0F)]


def test_reset_interrupts(chip, bus):
    bus.registers[0x10] = 0x12
    chip.reset_interrupts()
    assert bus.log == [("rb", 0x20, 0x10), ("rb", 0x20, 0x11)]
    assert chip.read_interrupt_capture(0) == 0x12


def test_read_pin(bus):
    bus.registers[0x12] = 0b10100101
    bus.registers[0x13] = 0b00000011
    device = IOPi(0x20, reset=False, bus=bus)
    bus.log.clear()
    levels = [device.read_pin(pin) for pin in range(1, 17)]
    assert levels == [1, 0, 1, 0, 0, 1, 0, 1, 1, 1, 0, 0, 0, 0, 0, 0]
    assert bus.log[:8] == [("rb", 0x20, 0x12)] * 8
    assert bus.log[8:] == [("rb", 0x20, 0x13)] * 8


def test_read_port(chip, bus):
    bus.registers[0x12] = 0x3C
    bus.registers[0x13] = 0xC3
    assert chip.read_port(0) == 0x3C
    assert chip.read_port(1) == 0xC3
    assert bus.log == [("rb", 0x20, 0x12), ("rb", 0x20, 0x13)]


@pytest.mark.parametrize("pin", [0, 17])
def test_pin_out_of_range(chip, bus, pin):
    with pytest.raises(ValueError, match="pin out of range"):
        chip.write_pin(pin, 1)
    with pytest.raises(ValueError, match="pin out of range"):
        chip.read_pin(pin)
    assert bus.log == []


def test_pin_value_out_of_range(chip, bus):
    with pytest.raises(ValueError):
        chip.set_pin_direction(1, 2)
    assert bus.log == []


def test_port_out_of_range(chip, bus):
    with pytest.raises(ValueError, match="port out of range"):
        chip.write_port(2, 0xFF)
    with pytest.raises(ValueError, match="port out of range"):
        chip.read_interrupt_status(2)
    assert bus.log == []


@pytest.mark.parametrize("method", ["mirror_interrupts", "set_interrupt_polarity"])
def test_config_value_out_of_range(chip, bus, method):
    with pytest.raises(ValueError, match="out of range"):
        getattr(chip, method)(2)
    assert bus.log == []
    assert chip.get_interrupt_polarity() == 1


def test_missing_device_node(tmp_path):
    with pytest.raises(I2CError):
        IOPi(0x20, reset=True, bus=I2CBus(tmp_path / "no-such-bus"))
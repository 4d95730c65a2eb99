"""IO Zero 32 port expander based on the PCA9535.

Each PCA9535 is split into two 8-bit ports: port 0 holds pins 1 to 8 and
port 1 holds pins 9 to 16. In port and bus values the least significant
bit is the lowest numbered pin.
"""

from __future__ import annotations

from .i2c import I2CBus, check_bit, update_bit

_INPUT = (0x00, 0x01)
_OUTPUT = (0x02, 0x03)
_INVERT = (0x04, 0x05)
_CONFIG = (0x06, 0x07)


def _pin_location(pin: int) -> tuple[int, int]:
    if 1 <= pin <= 8:
        return 0, pin - 1
    if 9 <= pin <= 16:
        return 1, pin - 9
    raise ValueError("pin out of range: 1 to 16")


def _check_port(port: int) -> int:
    if port not in (0, 1):
        raise ValueError("port out of range: 0 or 1")
    return port


class IOZero32:
    """One PCA9535 chip on an IO Zero 32 board."""

    def __init__(self, address: int = 0x20, bus: I2CBus | None = None) -> None:
        self.address = address
        self.bus = bus if bus is not None else I2CBus()

    def _set_pin(self, pin: int, value: int, registers: tuple[int, int]) -> None:
        port, bit = _pin_location(pin)
        if value not in (0, 1):
            raise ValueError("value out of range: 0 or 1")
        register = registers[port]
        current = self.bus.read_byte_data(self.address, register)
        self.bus.write_byte_data(self.address, register, update_bit(current, bit, value))

    def _get_pin(self, pin: int, registers: tuple[int, int]) -> int:
        port, bit = _pin_location(pin)
        return check_bit(self.bus.read_byte_data(self.address, registers[port]), bit)

    def _set_port(self, port: int, value: int, registers: tuple[int, int]) -> None:
        register = registers[_check_port(port)]
        self.bus.write_byte_data(self.address, register, value & 0xFF)

    def _get_port(self, port: int, registers: tuple[int, int]) -> int:
        return self.bus.read_byte_data(self.address, registers[_check_port(port)])

    def _set_bus(self, value: int, registers: tuple[int, int]) -> None:
        self.bus.write_word_data(self.address, registers[0], value & 0xFFFF)

    def _get_bus(self, registers: tuple[int, int]) -> int:
        return self.bus.read_word_data(self.address, registers[0])

    def set_pin_direction(self, pin: int, direction: int) -> None:
        """Set a pin (1-16) to input (1) or output (0)."""
        self._set_pin(pin, direction, _CONFIG)

    def get_pin_direction(self, pin: int) -> int:
        """Return 1 if the pin is an input, 0 if it is an output."""
        return self._get_pin(pin, _CONFIG)

    def set_port_direction(self, port: int, direction: int) -> None:
        """Set the direction of all pins on a port; each bit 1 = input."""
        self._set_port(port, direction, _CONFIG)

    def get_port_direction(self, port: int) -> int:
        """Return the direction byte of a port."""
        return self._get_port(port, _CONFIG)

    def set_bus_direction(self, direction: int) -> None:
        """Set the direction of all 16 pins; each bit 1 = input."""
        self._set_bus(direction, _CONFIG)

    def get_bus_direction(self) -> int:
        """Return the 16-bit direction of the bus."""
        return self._get_bus(_CONFIG)

    def write_pin(self, pin: int, value: int) -> None:
        """Drive a pin low (0) or high (1)."""
        self._set_pin(pin, value, _OUTPUT)

    def write_port(self, port: int, value: int) -> None:
        """Write a byte to all pins on a port."""
        self._set_port(port, value, _OUTPUT)

    def write_bus(self, value: int) -> None:
        """Write a 16-bit value to all pins."""
        self._set_bus(value, _OUTPUT)

    def read_pin(self, pin: int) -> int:
        """Return the logic level of a pin."""
        return self._get_pin(pin, _INPUT)

    def read_port(self, port: int) -> int:
        """Return the logic levels of a port as a byte."""
        return self._get_port(port, _INPUT)

    def read_bus(self) -> int:
        """Return the logic levels of all 16 pins."""
        return self._get_bus(_INPUT)

    def set_pin_polarity(self, pin: int, polarity: int) -> None:
        """Set a pin to non-inverted (0) or inverted (1)."""
        self._set_pin(pin, polarity, _INVERT)

    def get_pin_polarity(self, pin: int) -> int:
        """Return 1 if the pin is inverted, else 0."""
        return self._get_pin(pin, _INVERT)

    def set_port_polarity(self, port: int, polarity: int) -> None:
        """Set the polarity of all pins on a port; each bit 1 = inverted."""
        self._set_port(port, polarity, _INVERT)

    def get_port_polarity(self, port: int) -> int:
        """Return the polarity byte of a port."""
        return self._get_port(port, _INVERT)

    def set_bus_polarity(self, polarity: int) -> None:
        """Set the polarity of all 16 pins; each bit 1 = inverted."""
        self._set_bus(polarity, _INVERT)

    def get_bus_polarity(self) -> int:
        """Return the 16-bit polarity of the bus."""
        return self._get_bus(_INVERT)
"""IO Pi port expander based on the MCP23017.

Each MCP23017 is split into two 8-bit ports: port 0 holds pins 1 to 8 and
port 1 holds pins 9 to 16. In port and bus values the least significant
bit is the lowest numbered pin.
"""

from __future__ import annotations

from .i2c import I2CBus, check_bit, update_bit

# Register pairs (port 0, port 1) with IOCON.BANK = 0.
_IODIR = (0x00, 0x01)
_IPOL = (0x02, 0x03)
_GPINTEN = (0x04, 0x05)
_DEFVAL = (0x06, 0x07)
_INTCON = (0x08, 0x09)
_IOCON = 0x0A
_GPPU = (0x0C, 0x0D)
_INTF = (0x0E, 0x0F)
_INTCAP = (0x10, 0x11)
_GPIO = (0x12, 0x13)

_DEFAULT_CONFIG = 0x02
_MIRROR_BIT = 6
_INTPOL_BIT = 1


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


def _check_flag(value: int, what: str) -> int:
    if value not in (0, 1):
        raise ValueError(f"{what} value out of range: 0 or 1")
    return int(value)


class IOPi:
    """One MCP23017 chip on an IO Pi board.

    Creating the object writes the configuration register; with ``reset``
    the ports are also set to inputs with pull-ups disabled and no inversion.
    """

    def __init__(
        self, address: int = 0x20, reset: bool = True, bus: I2CBus | None = None
    ) -> None:
        self.address = address
        self.bus = bus if bus is not None else I2CBus()
        self._config = _DEFAULT_CONFIG
        self.bus.write_byte_data(self.address, _IOCON, self._config)
        if reset:
            self.bus.write_word_data(self.address, _IODIR[0], 0xFFFF)
            self.bus.write_word_data(self.address, _GPPU[0], 0x0000)
            self.bus.write_word_data(self.address, _IPOL[0], 0x0000)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(address=0x{self.address:02X}, bus={self.bus!r})"

    # register helpers

    def _set_pin(self, pin: int, value: int, registers: tuple[int, int]) -> None:
        port, bit = _pin_location(pin)
        value = _check_flag(value, "pin")
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

    def _set_config_bit(self, bit: int, value: int, what: str) -> None:
        value = _check_flag(value, what)
        self._config = update_bit(self._config, bit, value)
        self.bus.write_byte_data(self.address, _IOCON, self._config)

    # direction

    def set_pin_direction(self, pin: int, direction: int) -> None:
        """Set a pin (1-16) to input (1) or output (0)."""
        self._set_pin(pin, direction, _IODIR)

    def get_pin_direction(self, pin: int) -> int:
        """Return 1 if the pin is an input, 0 if it is an output."""
        return self._get_pin(pin, _IODIR)

    def set_port_direction(self, port: int, direction: int) -> None:
        """Set the direction of all pins on a port; each bit 1 = input."""
        self._set_port(port, direction, _IODIR)

    def get_port_direction(self, port: int) -> int:
        """Return the direction byte of a port."""
        return self._get_port(port, _IODIR)

    def set_bus_direction(self, direction: int) -> None:
        """Set the direction of all 16 pins; each bit 1 = input."""
        self._set_bus(direction, _IODIR)

    def get_bus_direction(self) -> int:
        """Return the 16-bit direction of the bus."""
        return self._get_bus(_IODIR)

    # pull-ups

    def set_pin_pullup(self, pin: int, value: int) -> None:
        """Enable (1) or disable (0) the 100K pull-up on a pin."""
        self._set_pin(pin, value, _GPPU)

    def get_pin_pullup(self, pin: int) -> int:
        """Return 1 if the pin's pull-up is enabled, else 0."""
        return self._get_pin(pin, _GPPU)

    def set_port_pullups(self, port: int, value: int) -> None:
        """Set the pull-ups of a port; each bit 1 = enabled."""
        self._set_port(port, value, _GPPU)

    def get_port_pullups(self, port: int) -> int:
        """Return the pull-up byte of a port."""
        return self._get_port(port, _GPPU)

    def set_bus_pullups(self, value: int) -> None:
        """Set the pull-ups of all 16 pins; each bit 1 = enabled."""
        self._set_bus(value, _GPPU)

    def get_bus_pullups(self) -> int:
        """Return the 16-bit pull-up setting of the bus."""
        return self._get_bus(_GPPU)

    # data

    def write_pin(self, pin: int, value: int) -> None:
        """Drive a pin low (0) or high (1)."""
        self._set_pin(pin, value, _GPIO)

    def write_port(self, port: int, value: int) -> None:
        """Write a byte to all pins on a port."""
        self._set_port(port, value, _GPIO)

    def write_bus(self, value: int) -> None:
        """Write a 16-bit value to all pins."""
        self._set_bus(value, _GPIO)

    def read_pin(self, pin: int) -> int:
        """Return the logic level of a pin."""
        return self._get_pin(pin, _GPIO)

    def read_port(self, port: int) -> int:
        """Return the logic levels of a port as a byte."""
        return self._get_port(port, _GPIO)

    def read_bus(self) -> int:
        """Return the logic levels of all 16 pins."""
        return self._get_bus(_GPIO)

    # polarity

    def invert_pin(self, pin: int, polarity: int) -> None:
        """Set a pin to non-inverted (0) or inverted (1)."""
        self._set_pin(pin, polarity, _IPOL)

    def get_pin_polarity(self, pin: int) -> int:
        """Return 1 if the pin is inverted, else 0."""
        return self._get_pin(pin, _IPOL)

    def invert_port(self, port: int, polarity: int) -> None:
        """Set the polarity of a port; each bit 1 = inverted."""
        self._set_port(port, polarity, _IPOL)

    def get_port_polarity(self, port: int) -> int:
        """Return the polarity byte of a port."""
        return self._get_port(port, _IPOL)

    def invert_bus(self, polarity: int) -> None:
        """Set the polarity of all 16 pins; each bit 1 = inverted."""
        self._set_bus(polarity, _IPOL)

    def get_bus_polarity(self) -> int:
        """Return the 16-bit polarity of the bus."""
        return self._get_bus(_IPOL)

    # interrupts

    def mirror_interrupts(self, value: int) -> None:
        """Connect the INTA and INTB pins internally (1) or keep them apart (0)."""
        self._set_config_bit(_MIRROR_BIT, value, "mirror_interrupts")

    def set_interrupt_polarity(self, value: int) -> None:
        """Make the interrupt outputs active-high (1) or active-low (0)."""
        self._set_config_bit(_INTPOL_BIT, value, "set_interrupt_polarity")

    def get_interrupt_polarity(self) -> int:
        """Return 1 if the interrupt outputs are active-high, 0 if active-low."""
        return check_bit(self.bus.read_byte_data(self.address, _IOCON), _INTPOL_BIT)

    def set_interrupt_type(self, port: int, value: int) -> None:
        """Per bit: 1 = fire when the pin differs from the default, 0 = on change."""
        self._set_port(port, value, _INTCON)

    def get_interrupt_type(self, port: int) -> int:
        """Return the interrupt type byte of a port."""
        return self._get_port(port, _INTCON)

    def set_interrupt_defaults(self, port: int, value: int) -> None:
        """Set the compare value for interrupt-on-change on a port."""
        self._set_port(port, value, _DEFVAL)

    def get_interrupt_defaults(self, port: int) -> int:
        """Return the compare value for interrupt-on-change on a port."""
        return self._get_port(port, _DEFVAL)

    def set_interrupt_on_pin(self, pin: int, value: int) -> None:
        """Enable (1) or disable (0) interrupts on a pin."""
        self._set_pin(pin, value, _GPINTEN)

    def get_interrupt_on_pin(self, pin: int) -> int:
        """Return 1 if interrupts are enabled on the pin, else 0."""
        return self._get_pin(pin, _GPINTEN)

    def set_interrupt_on_port(self, port: int, value: int) -> None:
        """Enable interrupts on a port; each bit 1 = enabled."""
        self._set_port(port, value, _GPINTEN)

    def get_interrupt_on_port(self, port: int) -> int:
        """Return the interrupt-enable byte of a port."""
        return self._get_port(port, _GPINTEN)

    def set_interrupt_on_bus(self, value: int) -> None:
        """Enable interrupts on all 16 pins; each bit 1 = enabled."""
        self._set_bus(value, _GPINTEN)

    def get_interrupt_on_bus(self) -> int:
        """Return the 16-bit interrupt-enable setting of the bus."""
        return self._get_bus(_GPINTEN)

    def read_interrupt_status(self, port: int) -> int:
        """Return which pins on a port caused an interrupt; each bit 1 = triggered."""
        return self._get_port(port, _INTF)

    def read_interrupt_capture(self, port: int) -> int:
        """Return the port value captured at the last interrupt."""
        return self._get_port(port, _INTCAP)

    def reset_interrupts(self) -> None:
        """Clear the interrupts on both ports by reading their captures."""
        self.read_interrupt_capture(0)
        self.read_interrupt_capture(1)
"""RTC Pi real-time clock based on the DS1307.

The clock keeps seconds, minutes, hours, day of week, day, month and a
two-digit year in BCD. The chip also holds 56 bytes of battery-backed RAM
at register addresses 0x08 to 0x3F.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from enum import IntEnum

from .i2c import I2CBus, I2CError, update_bit

_SECONDS = 0x00
_CONTROL = 0x07
_DATE_LENGTH = 7

_DEFAULT_ADDRESS = 0x68
_DEFAULT_CONFIG = 0x03
_DEFAULT_CENTURY = 2000

_MEMORY_START = 0x08
_MEMORY_END = 0x3F

_OUTPUT_BITS = (7, 4)


class Frequency(IntEnum):
    """Square-wave output frequencies of the DS1307."""

    HZ_1 = 1
    KHZ_4_096 = 2
    KHZ_8_192 = 3
    KHZ_32_768 = 4


# Values of control register bits 0 and 1 for each frequency.
_FREQUENCY_BITS = {
    Frequency.HZ_1: (0, 0),
    Frequency.KHZ_4_096: (1, 0),
    Frequency.KHZ_8_192: (0, 1),
    Frequency.KHZ_32_768: (1, 1),
}


def _to_bcd(value: int) -> int:
    return ((value // 10) * 16 + value % 10) & 0xFF


def _from_bcd(value: int) -> int:
    return ((value >> 4) & 0x0F) * 10 + (value & 0x0F)


class RTCPi:
    """A DS1307 real-time clock on an RTC Pi board."""

    def __init__(self, bus: I2CBus | None = None, address: int = _DEFAULT_ADDRESS) -> None:
        self.bus = bus if bus is not None else I2CBus()
        self.address = address
        self.century = _DEFAULT_CENTURY
        self._config = _DEFAULT_CONFIG

    def __repr__(self) -> str:
        return f"{type(self).__name__}(bus={self.bus!r}, address=0x{self.address:02X})"

    def _write_config(self) -> None:
        self.bus.write_byte_data(self.address, _CONTROL, self._config)

    def set_date(self, date: datetime) -> None:
        """Set the clock to ``date``; the century is not stored on the chip."""
        day_of_week = (date.weekday() + 1) % 7  # 0 = Sunday
        payload = bytes(
            [
                _SECONDS,
                _to_bcd(date.second),
                _to_bcd(date.minute),
                _to_bcd(date.hour),
                _to_bcd(day_of_week),
                _to_bcd(date.day),
                _to_bcd(date.month),
                _to_bcd(date.year % 100),
            ]
        )
        self.bus.write_block(self.address, payload)

    def read_date(self) -> datetime:
        """Read the current date and time from the clock."""
        data = self.bus.read_block(self.address, _SECONDS, _DATE_LENGTH)
        if len(data) < _DATE_LENGTH:
            raise I2CError("failed to read the date from the RTC")
        return datetime(
            year=_from_bcd(data[6]) + self.century,
            month=_from_bcd(data[5]),
            day=_from_bcd(data[4]),
            hour=_from_bcd(data[2]),
            minute=_from_bcd(data[1]),
            second=_from_bcd(data[0]),
        )

    def enable_output(self) -> None:
        """Enable the square-wave output pin."""
        for bit in _OUTPUT_BITS:
            self._config = update_bit(self._config, bit, 1)
        self._write_config()

    def disable_output(self) -> None:
        """Disable the square-wave output pin."""
        for bit in _OUTPUT_BITS:
            self._config = update_bit(self._config, bit, 0)
        self._write_config()

    def set_frequency(self, frequency: Frequency | int) -> None:
        """Set the square-wave output frequency (1 to 4, see :class:`Frequency`)."""
        try:
            selected = Frequency(frequency)
        except ValueError:
            raise ValueError("frequency must be between 1 and 4") from None
        bit0, bit1 = _FREQUENCY_BITS[selected]
        self._config = update_bit(self._config, 0, bit0)
        self._config = update_bit(self._config, 1, bit1)
        self._write_config()

    @staticmethod
    def _check_address(address: int) -> None:
        if not _MEMORY_START <= address <= _MEMORY_END:
            raise ValueError("address out of range")

    def write_memory(self, address: int, data: Iterable[int] | bytes) -> None:
        """Write ``data`` to the battery-backed RAM starting at ``address``."""
        self._check_address(address)
        payload = bytes(data)
        if address + len(payload) > _MEMORY_END:
            raise ValueError("memory overflow error: address + length exceeds 0x3F")
        self.bus.write_block(self.address, bytes([address]) + payload)

    def read_memory(self, address: int, length: int) -> bytes:
        """Read ``length`` bytes from the battery-backed RAM at ``address``."""
        self._check_address(address)
        if length < 0 or address > _MEMORY_END - length:
            raise ValueError("memory overflow error: address + length exceeds 0x3F")
        data = self.bus.read_block(self.address, address, length)
        if len(data) != length:
            raise I2CError("failed to read memory from the RTC")
        return bytes(data)
"""Servo Pi 16-channel PWM controller based on the PCA9685.

The optional Output Enable pin is driven through the sysfs GPIO interface.
"""

from __future__ import annotations

import math
import os
from pathlib import Path

from .i2c import I2CBus

_MODE1 = 0x00
_ALLCALLADR = 0x05
_LED0_ON_L = 0x06
_ALL_LED_ON_L = 0xFA
_PRE_SCALE = 0xFE

_OSCILLATOR_HZ = 25_000_000.0
_STEPS = 4096.0

ENABLE_PIN = 4
DEFAULT_GPIO_ROOT = "/sys/class/gpio"


class GPIOError(Exception):
    """Raised when the Output Enable GPIO pin cannot be driven."""


def _write_sysfs(path: Path, text: str, message: str) -> None:
    payload = text.encode("ascii")
    try:
        fd = os.open(path, os.O_WRONLY)
    except OSError as exc:
        raise GPIOError(message) from exc
    try:
        try:
            written = os.write(fd, payload)
        except OSError as exc:
            raise GPIOError(message) from exc
    finally:
        os.close(fd)
    if written != len(payload):
        raise GPIOError(message)


class ServoPi:
    """A PCA9685 PWM controller on a Servo Pi board.

    Creating the object clears MODE1; with ``use_oe_pin`` the Output Enable
    GPIO pin is exported and set as an output.
    """

    def __init__(
        self,
        address: int = 0x40,
        use_oe_pin: bool = False,
        bus: I2CBus | None = None,
        gpio_root: str | os.PathLike[str] = DEFAULT_GPIO_ROOT,
    ) -> None:
        self.address = address
        self.bus = bus if bus is not None else I2CBus()
        self.gpio_root = Path(gpio_root)
        self.bus.write_byte_data(self.address, _MODE1, 0x00)
        if use_oe_pin:
            _write_sysfs(
                self.gpio_root / "export", str(ENABLE_PIN), "failed to enable GPIO pin"
            )
            _write_sysfs(
                self._pin_dir / "direction", "out", "failed to set GPIO pin direction"
            )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(address=0x{self.address:02X}, bus={self.bus!r})"

    @property
    def _pin_dir(self) -> Path:
        return self.gpio_root / f"gpio{ENABLE_PIN}"

    def _write_pair(self, register: int, value: int) -> None:
        self.bus.write_byte_data(self.address, register, value & 0xFF)
        self.bus.write_byte_data(self.address, register + 1, (value >> 8) & 0xFF)

    def set_pwm_freq(self, freq: float) -> None:
        """Set the PWM frequency in hertz."""
        if freq <= 0:
            raise ValueError("frequency must be positive")
        prescale = math.floor(_OSCILLATOR_HZ / _STEPS / freq - 1.0 + 0.5)
        if not 0 <= prescale <= 0xFF:
            raise ValueError("frequency out of range")
        old_mode = self.bus.read_byte_data(self.address, _MODE1)
        sleep_mode = (old_mode & 0x7F) | 0x10
        self.bus.write_byte_data(self.address, _MODE1, sleep_mode)
        self.bus.write_byte_data(self.address, _PRE_SCALE, prescale)
        self.bus.write_byte_data(self.address, _MODE1, old_mode)
        self.bus.write_byte_data(self.address, _MODE1, (old_mode | 0x80) & 0xFF)

    def set_pwm(self, channel: int, on: int, off: int) -> None:
        """Set the on and off times (0 to 4096) of a channel (1 to 16)."""
        if not 1 <= channel <= 16:
            raise ValueError("channel out of range: 1 to 16")
        base = _LED0_ON_L + 4 * (channel - 1)
        self._write_pair(base, on)
        self._write_pair(base + 2, off)

    def set_all_pwm(self, on: int, off: int) -> None:
        """Set the on and off times (0 to 4096) of all channels."""
        self._write_pair(_ALL_LED_ON_L, on)
        self._write_pair(_ALL_LED_ON_L + 2, off)

    def output_disable(self) -> None:
        """Disable the outputs by driving the Output Enable pin high."""
        _write_sysfs(self._pin_dir / "value", "1", "failed to write GPIO value")

    def output_enable(self) -> None:
        """Enable the outputs by driving the Output Enable pin low."""
        _write_sysfs(self._pin_dir / "value", "0", "failed to write GPIO value")

    def set_allcall_address(self, allcall_address: int) -> None:
        """Enable All Call and set its I2C address."""
        self.enable_allcall_address()
        self.bus.write_byte_data(self.address, _ALLCALLADR, (allcall_address << 1) & 0xFF)

    def enable_allcall_address(self) -> None:
        """Make the chip respond to its All Call address."""
        mode = self.bus.read_byte_data(self.address, _MODE1)
        self.bus.write_byte_data(self.address, _MODE1, mode | 0x01)

    def disable_allcall_address(self) -> None:
        """Stop the chip responding to its All Call address."""
        mode = self.bus.read_byte_data(self.address, _MODE1)
        self.bus.write_byte_data(self.address, _MODE1, mode & ~0x01 & 0xFF)
"""Access to devices on a Linux I2C bus through its character device."""

from __future__ import annotations

import fcntl
import os
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

I2C_SLAVE = 0x0703
DEFAULT_BUS_PATH = "/dev/i2c-1"


class I2CError(Exception):
    """Raised when a transfer on the I2C bus fails."""


def update_bit(byte: int, bit: int, value: int) -> int:
    """Return ``byte`` with ``bit`` cleared when ``value`` is 0, set otherwise."""
    if value == 0:
        return byte & ~(1 << bit) & 0xFF
    return (byte | (1 << bit)) & 0xFF


def check_bit(byte: int, bit: int) -> int:
    """Return 1 if ``bit`` is set in ``byte``, else 0."""
    return 1 if byte & (1 << bit) else 0


class I2CBus:
    """An I2C bus reached through a device node such as ``/dev/i2c-1``.

    The device node is opened afresh for every transfer and closed afterwards.
    """

    def __init__(self, path: str | os.PathLike[str] = DEFAULT_BUS_PATH) -> None:
        self.path = os.fspath(path)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path!r})"

    @contextmanager
    def _device(self, address: int, action: str) -> Iterator[int]:
        try:
            fd = os.open(self.path, os.O_RDWR)
        except OSError as exc:
            raise I2CError(
                f"failed to open i2c port {self.path} for {action}: {exc.strerror}"
            ) from exc
        try:
            try:
                fcntl.ioctl(fd, I2C_SLAVE, address)
            except OSError as exc:
                raise I2CError(
                    f"failed to select i2c device 0x{address:02X} for {action}"
                ) from exc
            yield fd
        finally:
            os.close(fd)

    @staticmethod
    def _write(fd: int, data: bytes, action: str) -> None:
        try:
            written = os.write(fd, data)
        except OSError as exc:
            raise I2CError(f"failed to write to i2c device for {action}") from exc
        if written != len(data):
            raise I2CError(f"failed to write to i2c device for {action}")

    @staticmethod
    def _read(fd: int, length: int) -> bytes:
        try:
            return os.read(fd, length)
        except OSError as exc:
            raise I2CError("failed to read from i2c device") from exc

    def _read_exact(self, address: int, register: int, length: int) -> bytes:
        with self._device(address, "read") as fd:
            self._write(fd, bytes([register & 0xFF]), "read")
            data = self._read(fd, length)
        if len(data) != length:
            raise I2CError("failed to read from i2c device")
        return data

    def read_byte_data(self, address: int, register: int) -> int:
        """Read one byte from ``register`` of the device at ``address``."""
        return self._read_exact(address, register, 1)[0]

    def read_word_data(self, address: int, register: int) -> int:
        """Read two bytes, low byte first, starting at ``register``."""
        return int.from_bytes(self._read_exact(address, register, 2), "little")

    def write_byte_data(self, address: int, register: int, value: int) -> None:
        """Write one byte to ``register`` of the device at ``address``."""
        with self._device(address, "write") as fd:
            self._write(fd, bytes([register & 0xFF, value & 0xFF]), "write")

    def write_word_data(self, address: int, register: int, value: int) -> None:
        """Write a 16-bit value, low byte first, starting at ``register``."""
        payload = bytes([register & 0xFF]) + (value & 0xFFFF).to_bytes(2, "little")
        with self._device(address, "write") as fd:
            self._write(fd, payload, "write")

    def read_block(self, address: int, register: int, length: int) -> bytes:
        """Read up to ``length`` bytes starting at ``register``."""
        with self._device(address, "read") as fd:
            self._write(fd, bytes([register & 0xFF]), "read")
            return self._read(fd, length)

    def write_block(self, address: int, data: Iterable[int] | bytes) -> None:
        """Write ``data`` as one transfer to the device at ``address``."""
        payload = bytes(data)
        with self._device(address, "write") as fd:
            self._write(fd, payload, "write")
"""Drivers for the IO Pi, IO Zero 32, RTC Pi and Servo Pi I2C boards, with demonstration commands."""

__version__ = "1.0.0"

__all__ = ["i2c", "iopi", "iozero32", "rtcpi", "servopi", "cli"]
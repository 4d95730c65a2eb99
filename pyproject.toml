[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "abepi"
version = "1.0.0"
description = "Drivers for I2C expansion boards on Linux: IO Pi and IO Zero 32 port expanders, the RTC Pi real-time clock and the Servo Pi PWM controller"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "i2c",
    "gpio",
    "mcp23017",
    "pca9535",
    "ds1307",
    "pca9685",
    "rtc",
    "pwm",
    "servo",
    "port-expander",
]
classifiers = [
    "Development Status :: 5 - Production/Stable",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Hardware :: Hardware Drivers",
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
abepi = "abepi.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["abepi"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

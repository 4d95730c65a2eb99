"""Command-line demonstrations for the IO Pi, IO Zero 32, RTC Pi and Servo Pi boards."""

from __future__ import annotations

import argparse
import itertools
import sys
import time
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime

from .i2c import DEFAULT_BUS_PATH, I2CBus, I2CError
from .iopi import IOPi
from .iozero32 import IOZero32
from .rtcpi import RTCPi
from .servopi import DEFAULT_GPIO_ROOT, GPIOError, ServoPi

CLEAR_SCREEN = "\033[2J\033[1;1H"

SERVO_MIN = 250
SERVO_MED = 400
SERVO_MAX = 500

Handler = Callable[[argparse.Namespace, I2CBus], int]


def _cycles(count: int | None) -> Iterable[int]:
    return itertools.count() if count is None else range(count)


def _int(text: str) -> int:
    return int(text, 0)


# IO Pi


def _setup_iopi_inputs(iopi: IOPi) -> None:
    for port in (0, 1):
        iopi.set_port_direction(port, 0xFF)
    for port in (0, 1):
        iopi.set_port_pullups(port, 0xFF)
        iopi.invert_port(port, 0xFF)


def _iopi_interrupt(args: argparse.Namespace, bus: I2CBus) -> int:
    iopi = IOPi(args.address, reset=True, bus=bus)
    for port in (0, 1):
        iopi.set_port_pullups(port, 0xFF)
    for port in (0, 1):
        iopi.set_port_direction(port, 0xFF)
    for port in (0, 1):
        iopi.invert_port(port, 0xFF)
    # active-high, not mirrored: pins 1-8 drive INT A and pins 9-16 drive INT B
    iopi.set_interrupt_polarity(1)
    iopi.mirror_interrupts(0)
    for port in (0, 1):
        iopi.set_interrupt_defaults(port, 0x00)
    for port in (0, 1):
        iopi.set_interrupt_type(port, 0xFF)
    for port in (0, 1):
        iopi.set_interrupt_on_port(port, 0xFF)

    for _ in _cycles(args.count):
        for port in (0, 1):
            if iopi.read_interrupt_status(port) != 0:
                print(f"Port {port}: {iopi.read_interrupt_capture(port):x}")
        time.sleep(args.interval)
    return 0


def _iopi_read(args: argparse.Namespace, bus: I2CBus) -> int:
    iopi = IOPi(args.address, reset=True, bus=bus)
    _setup_iopi_inputs(iopi)
    for _ in _cycles(args.count):
        print(CLEAR_SCREEN, end="")
        for pin in range(1, 17):
            print(f"Pin {pin}: {iopi.read_pin(pin):x}")
        time.sleep(args.interval)
    return 0


def _iopi_read_port(args: argparse.Namespace, bus: I2CBus) -> int:
    iopi = IOPi(args.address, reset=True, bus=bus)
    _setup_iopi_inputs(iopi)
    for _ in _cycles(args.count):
        print(CLEAR_SCREEN, end="")
        for port in (0, 1):
            print(f"Port {port} {iopi.read_port(port):x}")
        time.sleep(args.interval)
    return 0


def _iopi_write(args: argparse.Namespace, bus: I2CBus) -> int:
    iopi = IOPi(args.address, reset=True, bus=bus)
    iopi.set_port_direction(0, 0x00)
    iopi.set_port_direction(1, 0x00)
    iopi.write_port(1, 0xFF)
    for _ in _cycles(args.count):
        iopi.write_pin(1, 1)
        time.sleep(args.interval)
        iopi.write_pin(1, 0)
        time.sleep(args.interval)
    return 0


def _iopi_toggle_led(args: argparse.Namespace, bus: I2CBus) -> int:
    outputs = IOPi(args.address, reset=True, bus=bus)
    inputs = IOPi(args.input_address, reset=True, bus=bus)
    for port in (0, 1):
        outputs.set_port_direction(port, 0x00)
    for port in (0, 1):
        inputs.set_port_direction(port, 0xFF)
    for port in (0, 1):
        inputs.set_port_pullups(port, 0xFF)
        inputs.invert_port(port, 0xFF)

    led = 0
    pressed_before = False
    outputs.write_pin(args.led_pin, 0)
    for _ in _cycles(args.count):
        pressed = inputs.read_pin(args.button_pin) == 1
        if pressed and not pressed_before:
            led ^= 1
            outputs.write_pin(args.led_pin, led)
        pressed_before = pressed
        time.sleep(args.interval)
    return 0


# IO Zero 32


def _iozero32_read(args: argparse.Namespace, bus: I2CBus) -> int:
    board = IOZero32(args.address, bus=bus)
    board.set_bus_direction(0xFFFF)
    board.set_bus_polarity(0xFFFF)
    for _ in _cycles(args.count):
        print(CLEAR_SCREEN, end="")
        for pin in range(1, 17):
            print(f"Pin {pin:2d}: {board.read_pin(pin):x}")
        time.sleep(args.interval)
    return 0


def _iozero32_write(args: argparse.Namespace, bus: I2CBus) -> int:
    board = IOZero32(args.address, bus=bus)
    board.set_bus_direction(0x0000)
    board.write_bus(0x0000)
    for _ in _cycles(args.count):
        board.write_pin(1, 1)
        time.sleep(args.interval)
        board.write_pin(1, 0)
        time.sleep(args.interval)
    return 0


# RTC Pi


def _rtc_memory(args: argparse.Namespace, bus: I2CBus) -> int:
    rtc = RTCPi(bus, args.address)
    print(f"Number written to SRAM: {args.value}")
    data = args.value.to_bytes(4, "little", signed=True)
    rtc.write_memory(0x08, data)
    stored = int.from_bytes(rtc.read_memory(0x08, len(data)), "little", signed=True)
    print(f"Number read from SRAM: {stored}")
    return 0


def _rtc_output(args: argparse.Namespace, bus: I2CBus) -> int:
    rtc = RTCPi(bus, args.address)
    rtc.set_frequency(args.frequency)
    rtc.enable_output()
    return 0


def _rtc_set_date(args: argparse.Namespace, bus: I2CBus) -> int:
    rtc = RTCPi(bus, args.address)
    rtc.set_date(args.date)
    for _ in _cycles(args.count):
        print(rtc.read_date().strftime("%Y-%m-%dT%H:%M:%S"))
        time.sleep(args.interval)
    return 0


# Servo Pi


def _servo(args: argparse.Namespace, bus: I2CBus) -> ServoPi:
    return ServoPi(args.address, use_oe_pin=args.oe, bus=bus, gpio_root=args.gpio_root)


def _servo_pwm(args: argparse.Namespace, bus: I2CBus) -> int:
    servo = _servo(args, bus)
    servo.set_pwm_freq(1000)
    if args.oe:
        servo.output_enable()
    for _ in _cycles(args.count):
        for width in range(1, 4096, 5):
            servo.set_pwm(1, 0, width)
        for width in range(4095, -1, -5):
            servo.set_pwm(1, 0, width)
    return 0


def _servo_move(args: argparse.Namespace, bus: I2CBus) -> int:
    servo = _servo(args, bus)
    servo.set_pwm_freq(60)
    if args.oe:
        servo.output_enable()
    for _ in _cycles(args.count):
        for width in (SERVO_MIN, SERVO_MED, SERVO_MAX):
            servo.set_pwm(1, 0, width)
            time.sleep(args.interval)
    return 0


def _servo_allcall(args: argparse.Namespace, bus: I2CBus) -> int:
    servo = _servo(args, bus)
    servo.set_allcall_address(args.allcall_address)
    servo.enable_allcall_address()
    return 0


def _add_command(
    commands: argparse._SubParsersAction,
    name: str,
    help_text: str,
    handler: Handler,
    address: int,
    interval: float | None = None,
    looping: bool = True,
) -> argparse.ArgumentParser:
    parser = commands.add_parser(name, help=help_text)
    parser.add_argument(
        "--address", type=_int, default=address, help=f"I2C address (default 0x{address:02X})"
    )
    if looping:
        parser.add_argument(
            "--count", type=int, default=None, help="number of cycles (default: run forever)"
        )
    if interval is not None:
        parser.add_argument(
            "--interval", type=float, default=interval, help=f"seconds between steps (default {interval})"
        )
    parser.set_defaults(handler=handler)
    return parser


def _add_servo_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--no-oe", dest="oe", action="store_false", help="do not use the Output Enable pin"
    )
    parser.add_argument(
        "--gpio-root", default=DEFAULT_GPIO_ROOT, help="sysfs GPIO directory"
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="abepi", description="Demonstrations for IO Pi, IO Zero 32, RTC Pi and Servo Pi boards."
    )
    parser.add_argument("--bus", default=DEFAULT_BUS_PATH, help="I2C device node")
    commands = parser.add_subparsers(dest="command", required=True)

    _add_command(commands, "iopi-interrupt", "report IO Pi interrupts", _iopi_interrupt, 0x20, 0.2)
    _add_command(commands, "iopi-read", "show the state of each IO Pi pin", _iopi_read, 0x20, 0.2)
    _add_command(commands, "iopi-read-port", "show the IO Pi ports", _iopi_read_port, 0x20, 0.2)
    _add_command(commands, "iopi-write", "blink IO Pi pin 1", _iopi_write, 0x20, 1.0)
    toggle = _add_command(
        commands, "iopi-toggle-led", "toggle an LED with a button", _iopi_toggle_led, 0x20, 0.1
    )
    toggle.add_argument("--input-address", type=_int, default=0x21, help="I2C address of the button bus")
    toggle.add_argument("--led-pin", type=int, default=11, help="output pin driving the LED")
    toggle.add_argument("--button-pin", type=int, default=15, help="input pin reading the button")

    _add_command(commands, "iozero32-read", "show the state of each IO Zero 32 pin", _iozero32_read, 0x20, 0.2)
    _add_command(commands, "iozero32-write", "blink IO Zero 32 pin 1", _iozero32_write, 0x20, 1.0)

    memory = _add_command(
        commands, "rtc-memory", "store a number in the RTC memory", _rtc_memory, 0x68, looping=False
    )
    memory.add_argument("--value", type=int, default=6254, help="number to store")
    output = _add_command(
        commands, "rtc-output", "enable the RTC square-wave output", _rtc_output, 0x68, looping=False
    )
    output.add_argument(
        "--frequency", type=int, choices=(1, 2, 3, 4), default=3,
        help="1 = 1Hz, 2 = 4.096KHz, 3 = 8.192KHz, 4 = 32.768KHz",
    )
    set_date = _add_command(
        commands, "rtc-set-date", "set the RTC date and read it back", _rtc_set_date, 0x68, 1.0
    )
    set_date.add_argument(
        "--date", type=datetime.fromisoformat, default=datetime(2017, 7, 10, 17, 20, 0),
        help="date in ISO format",
    )

    pwm = _add_command(commands, "servo-pwm", "sweep the PWM width on channel 1", _servo_pwm, 0x40)
    _add_servo_options(pwm)
    move = _add_command(commands, "servo-move", "move a servo on channel 1", _servo_move, 0x40, 0.5)
    _add_servo_options(move)
    allcall = _add_command(
        commands, "servo-allcall", "set and enable the All Call address", _servo_allcall, 0x40,
        looping=False,
    )
    _add_servo_options(allcall)
    allcall.add_argument("--allcall-address", type=_int, default=0x60, help="All Call I2C address")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run one demonstration and return its exit status."""
    args = _build_parser().parse_args(argv)
    bus = I2CBus(args.bus)
    try:
        return args.handler(args, bus)
    except (I2CError, GPIOError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
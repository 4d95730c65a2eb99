# abepi

Drivers for four I2C expansion boards, driven through the Linux
`/dev/i2c-*` character devices:

- **IO Pi** – MCP23017 16-pin port expander with pull-ups, polarity
  inversion and interrupts (`abepi.iopi.IOPi`)
- **IO Zero 32** – PCA9535 16-pin port expander (`abepi.iozero32.IOZero32`)
- **RTC Pi** – DS1307 real-time clock with square-wave output and
  battery-backed RAM (`abepi.rtcpi.RTCPi`)
- **Servo Pi** – PCA9685 16-channel PWM controller with an optional
  Output Enable GPIO pin (`abepi.servopi.ServoPi`)

Only the standard library is used. Python 3.10 or later, on Linux.

## The bus

Every board talks through an `abepi.i2c.I2CBus`, which opens the device
node afresh for each transfer and closes it afterwards. A failed open,
device selection, write or short read raises `abepi.i2c.I2CError`.

```python
from abepi.i2c import I2CBus

bus = I2CBus("/dev/i2c-1")   # the default path
bus.write_byte_data(0x20, 0x12, 0xFF)
value = bus.read_word_data(0x20, 0x12)   # low byte first
```

`I2CBus` also offers `read_byte_data`, `write_word_data`, `read_block` and
`write_block`. The helpers `abepi.i2c.update_bit(byte, bit, value)` and
`abepi.i2c.check_bit(byte, bit)` set or test one bit of a byte.

## Pins, ports and the bus

The expanders split their 16 pins into two 8-bit ports: port 0 holds pins
1 to 8 and port 1 holds pins 9 to 16. In a port or bus value the least
significant bit is the lowest numbered pin. Pin numbers outside 1–16, port
numbers other than 0 or 1, and single-pin values other than 0 or 1 raise
`ValueError`.

### IO Pi

Creating an `IOPi` writes its configuration register. With `reset=True`
(the default) all pins are also made inputs, pull-ups are disabled and no
pin is inverted.

```python
from abepi.i2c import I2CBus
from abepi.iopi import IOPi

bus = I2CBus("/dev/i2c-1")
io = IOPi(0x20, reset=True, bus=bus)

io.set_port_direction(0, 0x00)         # pins 1-8 as outputs
io.write_pin(1, 1)

io.set_port_direction(1, 0xFF)         # pins 9-16 as inputs
io.set_port_pullups(1, 0xFF)
io.invert_port(1, 0xFF)                # grounded pins read as 1
print(io.read_port(1))
print(io.read_bus())
```

Each setting exists per pin, per port and for the whole bus, with a
matching getter: direction (`set_pin_direction`, `set_port_direction`,
`set_bus_direction`), pull-ups (`set_pin_pullup`, `set_port_pullups`,
`set_bus_pullups`), polarity (`invert_pin`, `invert_port`, `invert_bus`,
read back with `get_pin_polarity` and friends) and data (`write_pin`,
`write_port`, `write_bus`, `read_pin`, `read_port`, `read_bus`).

Interrupts:

```python
io.set_interrupt_polarity(1)           # active high
io.mirror_interrupts(0)                # INT A for port 0, INT B for port 1
io.set_interrupt_defaults(0, 0x00)
io.set_interrupt_type(0, 0xFF)         # fire when a pin differs from the default
io.set_interrupt_on_port(0, 0xFF)      # or set_interrupt_on_pin / set_interrupt_on_bus

if io.read_interrupt_status(0):
    print(io.read_interrupt_capture(0))
io.reset_interrupts()                  # reads both capture registers
```

### IO Zero 32

```python
from abepi.i2c import I2CBus
from abepi.iozero32 import IOZero32

bus = I2CBus("/dev/i2c-1")
zero = IOZero32(0x20, bus=bus)

zero.set_bus_direction(0x0000)         # every pin an output
zero.write_bus(0x0000)
zero.write_pin(1, 1)

zero.set_port_direction(1, 0xFF)
zero.set_port_polarity(1, 0xFF)
print(zero.read_pin(9))
```

Writes go to the output registers and reads come from the input
registers. Polarity is set with `set_pin_polarity`, `set_port_polarity`
and `set_bus_polarity`.

### RTC Pi

```python
from datetime import datetime

from abepi.i2c import I2CBus
from abepi.rtcpi import Frequency, RTCPi

bus = I2CBus("/dev/i2c-1")
rtc = RTCPi(bus=bus, address=0x68)

rtc.set_date(datetime(2017, 7, 10, 17, 20, 0))
print(rtc.read_date())

rtc.set_frequency(Frequency.KHZ_8_192) # 1 to 4; anything else raises ValueError
rtc.enable_output()

rtc.write_memory(0x08, bytes([0x6E, 0x18, 0x00, 0x00]))
print(rtc.read_memory(0x08, 4))
```

The chip stores only a two-digit year; `read_date` adds `rtc.century`
(2000 by default) and returns a naive `datetime`. The memory lives at
addresses 0x08 to 0x3F; a start address outside that range, or a request
running past 0x3F, raises `ValueError`.

### Servo Pi

Creating a `ServoPi` clears its MODE1 register. With `use_oe_pin=True`
GPIO 4 is exported and set as an output under `gpio_root`.

```python
from abepi.i2c import I2CBus
from abepi.servopi import ServoPi

bus = I2CBus("/dev/i2c-1")
servo = ServoPi(0x40, use_oe_pin=True, bus=bus, gpio_root="/sys/class/gpio")

servo.set_pwm_freq(60)
servo.output_enable()
servo.set_pwm(1, 0, 400)               # channel 1, on at 0, off at 400 of 4096
servo.set_all_pwm(0, 250)

servo.set_allcall_address(0x60)        # also enables All Call
servo.disable_allcall_address()
```

Channels outside 1–16, and frequencies that are not positive or whose
prescaler falls outside 0–255, raise `ValueError`. Failures writing the
GPIO sysfs files raise `abepi.servopi.GPIOError`.

## Command line

The `abepi` command runs one demonstration per call:

| Command | What it does |
| --- | --- |
| `iopi-interrupt` | sets up interrupts on every pin and prints each captured port value |
| `iopi-read` | prints the state of pins 1–16 |
| `iopi-read-port` | prints both ports |
| `iopi-write` | blinks pin 1 |
| `iopi-toggle-led` | toggles an LED pin each time a button pin on a second board is pressed |
| `iozero32-read` | prints the state of pins 1–16 |
| `iozero32-write` | blinks pin 1 |
| `rtc-memory` | stores a number in the clock's RAM and reads it back |
| `rtc-output` | sets the square-wave frequency and enables the output |
| `rtc-set-date` | sets the date and prints it as read back |
| `servo-pwm` | sweeps the PWM width on channel 1 |
| `servo-move` | moves a servo on channel 1 between three positions |
| `servo-allcall` | sets and enables the All Call address |

```
abepi --bus /dev/i2c-1 iopi-read --address 0x20 --count 10
abepi rtc-set-date --date 2017-07-10T17:20:00 --count 3
abepi servo-move --no-oe
abepi --help
```

Every command takes `--address`. Looping commands run until interrupted
unless `--count` is given; most take `--interval` in seconds. The servo
commands take `--no-oe` and `--gpio-root`. Run `abepi <command> --help`
for the rest. Bus and GPIO errors are printed and the command exits with
status 1.

## What it does not do

Interrupts are observed by polling the status registers; nothing waits on
the interrupt lines themselves. The clock's date is naive, with no time
zone, and the clock is not synchronised with the system time.

## Tests

```
pip install -e .[test]
pytest
```
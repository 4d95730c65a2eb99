import pytest

from abepi.servopi import GPIOError, ServoPi


class FakeBus:
    def __init__(self):
        self.registers = {}
        self.writes = []

    def read_byte_data(self, address, register):
        return self.registers.get(register, 0)

    def write_byte_data(self, address, register, value):
        self.writes.append((address, register, value))
        self.registers[register] = value


@pytest.fixture
def gpio_root(tmp_path):
    root = tmp_path / "gpio"
    pin = root / "gpio4"
    pin.mkdir(parents=True)
    for path in (root / "export", pin / "direction", pin / "value"):
        path.write_text("")
    return root


@pytest.fixture
def bus():
    return FakeBus()


@pytest.fixture
def servo(bus, gpio_root):
    return ServoPi(0x40, bus=bus, gpio_root=gpio_root)


def test_init_clears_mode1(bus, gpio_root):
    ServoPi(0x40, bus=bus, gpio_root=gpio_root)
    assert bus.writes == [(0x40, 0x00, 0x00)]


def test_init_with_oe_pin_exports_and_sets_direction(bus, gpio_root):
    ServoPi(0x40, use_oe_pin=True, bus=bus, gpio_root=gpio_root)
    assert (gpio_root / "export").read_text() == "4"
    assert (gpio_root / "gpio4" / "direction").read_text() == "out"


def test_init_with_missing_gpio_raises(bus, tmp_path):
    with pytest.raises(GPIOError):
        ServoPi(0x40, use_oe_pin=True, bus=bus, gpio_root=tmp_path / "missing")


def test_init_with_missing_direction_raises(bus, tmp_path):
    root = tmp_path / "gpio"
    root.mkdir()
    (root / "export").write_text("")
    with pytest.raises(GPIOError):
        ServoPi(0x40, use_oe_pin=True, bus=bus, gpio_root=root)


def test_output_enable_and_disable(servo, gpio_root):
    value = gpio_root / "gpio4" / "value"
    assert servo.output_enable() is None
    assert value.read_text() == "0"
    assert servo.output_disable() is None
    assert value.read_text() == "1"


def test_output_enable_without_gpio_raises(bus, tmp_path):
    servo = ServoPi(0x40, bus=bus, gpio_root=tmp_path / "missing")
    with pytest.raises(GPIOError):
        servo.output_enable()


def test_set_pwm_freq_sequence(servo, bus):
    bus.writes.clear()
    assert servo.set_pwm_freq(60) is None
    assert bus.writes == [
        (0x40, 0x00, 0x10),
        (0x40, 0xFE, 101),
        (0x40, 0x00, 0x00),
        (0x40, 0x00, 0x80),
    ]


def test_set_pwm_freq_keeps_mode_bits(servo, bus):
    bus.registers[0x00] = 0x01
    assert servo.set_pwm_freq(1000) is None
    assert bus.registers[0xFE] == 5
    assert bus.registers[0x00] & 0x81 == 0x81


@pytest.mark.parametrize("freq", [0, -5, 1])
def test_set_pwm_freq_out_of_range(servo, freq):
    with pytest.raises(ValueError):
        servo.set_pwm_freq(freq)


@pytest.mark.parametrize("channel", [1, 8, 16])
@pytest.mark.parametrize("on,off", [(0, 4095), (250, 500), (4096, 0)])
def test_set_pwm_round_trip(servo, bus, channel, on, off):
    bus.writes.clear()
    servo.set_pwm(channel, on, off)
    registers = [register for _, register, _ in bus.writes]
    assert len(registers) == 4
    assert registers == list(range(registers[0], registers[0] + 4))
    base = registers[0]
    assert bus.registers[base] | bus.registers[base + 1] << 8 == on
    assert bus.registers[base + 2] | bus.registers[base + 3] << 8 == off


def test_set_pwm_channel_one_uses_led0(servo, bus):
    bus.writes.clear()
    assert servo.set_pwm(1, 0, 400) is None
    assert [register for _, register, _ in bus.writes] == [0x06, 0x07, 0x08, 0x09]


def test_set_pwm_channels_do_not_overlap(servo, bus):
    assert servo.set_pwm(1, 0, 0) is None
    first = {register for _, register, _ in bus.writes[-4:]}
    assert servo.set_pwm(2, 0, 0) is None
    second = {register for _, register, _ in bus.writes[-4:]}
    assert first.isdisjoint(second)


@pytest.mark.parametrize("channel", [0, 17])
def test_set_pwm_channel_out_of_range(servo, channel):
    with pytest.raises(ValueError):
        servo.set_pwm(channel, 0, 0)


def test_set_all_pwm(servo, bus):
    bus.writes.clear()
    assert servo.set_all_pwm(250, 500) is None
    assert [register for _, register, _ in bus.writes] == [0xFA, 0xFB, 0xFC, 0xFD]
    assert bus.registers[0xFA] | bus.registers[0xFB] << 8 == 250
    assert bus.registers[0xFC] | bus.registers[0xFD] << 8 == 500


def test_set_allcall_address(servo, bus):
    assert servo.set_allcall_address(0x60) is None
    assert bus.registers[0x05] == 0xC0
    assert bus.registers[0x00] & 0x01 == 0x01


def test_enable_and_disable_allcall_keep_other_bits(servo, bus):
    bus.registers[0x00] = 0x20
    assert servo.enable_allcall_address() is None
    assert bus.registers[0x00] == 0x21
    assert servo.disable_allcall_address() is None
    assert bus.registers[0x00] == 0x20
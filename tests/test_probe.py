import pytest

import usbtemp.probe
from usbtemp import Probe
from usbtemp.crc import crc8
from usbtemp.ds18b20 import SKIP_ROM, CONVERT_T, READ_SCRATCHPAD, READ_ROM
from usbtemp.exceptions import (CRCValidationError, WriteMismatchError, NoDevicePresent, ProbeNotOpen,
                                SerialException, PortResolutionError)
from usbtemp.onewire import RESET_BAUDRATE, DATA_BAUDRATE

from conftest import FakeSerial, SCRATCHPAD_DATA


def test_identity(probe):
    assert probe.is_open
    assert probe.name == "/dev/ttyUSB0"
    assert probe.id == "1a86:7523"
    assert probe.serial_number == "USBTEMP01"


def test_opens_at_reset_rate(probe, bus):
    assert bus.com == "/dev/ttyUSB0"
    assert bus.baudrate == RESET_BAUDRATE
    assert bus.timeout == 1.0


def test_rom(probe, bus):
    assert probe.rom() == "021cb801000000a2"
    assert bus.resets == 1
    assert bus.commands == [READ_ROM]


def test_temperature_celsius(probe, bus):
    assert probe.temperature() == 25.0
    assert bus.resets == 2
    assert bus.commands == [SKIP_ROM, CONVERT_T, SKIP_ROM, READ_SCRATCHPAD]
    assert bus.baudrate == DATA_BAUDRATE


def test_temperature_fahrenheit(probe):
    assert probe.temperature(True) == 77.0


def test_temperature_ignores_config_bytes(probe, bus):
    data = bytes([0x91, 0x01, 0x00, 0x00, 0x1F, 0xFF, 0x0C, 0x10])
    bus.scratchpad = data + bytes([crc8(data)])
    assert probe.temperature() == 25.0625


def test_temperature_waits_for_conversion(probe, bus, monkeypatch):
    delays = []
    def sleep(seconds):
        delays.append(seconds)
        assert bus.commands == [SKIP_ROM, CONVERT_T] # conversion started, scratchpad not read yet
    monkeypatch.setattr(usbtemp.probe.time, "sleep", sleep)
    probe.conversion_delay = 1.0
    probe.temperature()
    assert delays == [1.0]


@pytest.mark.parametrize("check", [0x00, 0x34, 0xFF])
def test_temperature_crc_failure(probe, bus, check):
    bus.scratchpad = SCRATCHPAD_DATA + bytes([check])
    with pytest.raises(CRCValidationError):
        probe.temperature()


def test_temperature_write_mismatch(probe, bus):
    bus.corrupt.add(CONVERT_T)
    with pytest.raises(WriteMismatchError):
        probe.temperature()
    assert bus.commands == [SKIP_ROM, CONVERT_T]
    assert bus.resets == 1
    assert bus.read_slots == 0


def test_no_device(probe, bus):
    bus.presence = 0xF0
    with pytest.raises(NoDevicePresent):
        probe.rom()
    assert bus.commands == []


def test_each_command_resets(probe, bus):
    probe.rom()
    probe.rom()
    probe.temperature()
    assert bus.resets == 4


def test_close(probe, bus):
    probe.close()
    assert bus.closed
    assert not probe.is_open
    probe.close()
    with pytest.raises(ProbeNotOpen):
        probe.rom()
    with pytest.raises(ProbeNotOpen):
        probe.temperature()
    assert probe.name == "/dev/ttyUSB0"


def test_context_manager(ports):
    with Probe("/dev/ttyUSB0", wrapper=FakeSerial, conversion_delay=0) as probe:
        bus = probe._serial_wrapper
        assert probe.temperature() == 25.0
    assert bus.closed
    assert not probe.is_open


def test_open_twice(probe):
    with pytest.raises(SerialException):
        probe.open("/dev/ttyUSB0")


def test_open_later(ports):
    probe = Probe(wrapper=FakeSerial)
    assert not probe.is_open
    assert probe.name is None
    probe.open("ttyUSB0")
    assert probe.name == "/dev/ttyUSB0"
    probe.close()


def test_open_unknown_port(ports):
    probe = Probe(wrapper=FakeSerial)
    with pytest.raises(PortResolutionError):
        probe.open("/dev/ttyUSB9")
    assert not probe.is_open


def test_custom_rates(ports):
    probe = Probe("/dev/ttyUSB0", wrapper=FakeSerial, reset_baudrate=4800, data_baudrate=57600, timeout=0.5)
    bus = probe._serial_wrapper
    assert bus.baudrate == 4800
    assert bus.timeout == 0.5
    bus.reset_baudrate = 4800
    probe.rom()
    assert bus.baudrates == [4800, 57600]
    probe.close()


@pytest.mark.parametrize("wrapper", [object, "LocalSerial", FakeSerial()])
def test_wrapper_must_be_serial_wrapper_class(wrapper):
    with pytest.raises(TypeError):
        Probe(wrapper=wrapper)

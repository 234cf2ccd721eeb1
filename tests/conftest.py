import pytest
import serial.tools.list_ports
from serial.tools.list_ports_common import ListPortInfo

from usbtemp.crc import crc8
from usbtemp.ds18b20 import READ_ROM, READ_SCRATCHPAD
from usbtemp.onewire import RESET_BAUDRATE, SLOT_HIGH, SLOT_LOW
from usbtemp.probe import Probe
from usbtemp.serial import SerialWrapper

ROM = bytes([0x02, 0x1C, 0xB8, 0x01, 0x00, 0x00, 0x00, 0xA2])
SCRATCHPAD_DATA = bytes([0x90, 0x01, 0x4B, 0x46, 0x7F, 0xFF, 0x0C, 0x10])
SCRATCHPAD = SCRATCHPAD_DATA + bytes([crc8(SCRATCHPAD_DATA)])
ZERO_SAMPLE = 0xFC # device pulled the bus low for most of the read slot


class FakeSerial(SerialWrapper):
    """
    Adapter with a single DS18B20 on the bus, answering at the slot level
    """

    def __init__(self, com="fake", baudrate=RESET_BAUDRATE, timeout=1.0):
        self.com = com
        self.baudrate = baudrate
        self.timeout = timeout
        self.reset_baudrate = RESET_BAUDRATE
        self.presence = 0x90
        self.rom = ROM
        self.scratchpad = SCRATCHPAD
        self.corrupt = set()
        self.baudrates = []
        self.commands = []
        self.resets = 0
        self.read_slots = 0
        self.closed = False
        self._rx = bytearray()
        self._pending = []
        self._outgoing = []

    def _set_baudrate(self, baudrate):
        self.baudrates.append(baudrate)

    def _write(self, payload):
        for slot in payload:
            if self.baudrate == self.reset_baudrate:
                self._reset_slot(slot)
            elif self._outgoing:
                self.read_slots += 1
                bit = self._outgoing.pop(0)
                self._rx.append(slot if bit else ZERO_SAMPLE)
            else:
                self._pending.append(slot)
                if len(self._pending) == 8:
                    self._command()
        return len(payload)

    def _reset_slot(self, slot):
        self.resets += 1
        self._pending = []
        self._outgoing = []
        if self.presence is not None:
            self._rx.append(self.presence)

    def _command(self):
        value = 0
        for i, slot in enumerate(self._pending):
            if slot == SLOT_HIGH:
                value |= 1 << i
        echo = bytearray(self._pending)
        if value in self.corrupt:
            echo[0] = SLOT_LOW if echo[0] == SLOT_HIGH else SLOT_HIGH
        self._rx.extend(echo)
        self._pending = []
        self.commands.append(value)
        if value == READ_ROM:
            self._send(self.rom)
        elif value == READ_SCRATCHPAD:
            self._send(self.scratchpad)

    def _send(self, data):
        for b in data:
            self._outgoing.extend((b >> i) & 0x01 for i in range(8))

    def _read(self, length_bytes):
        data = bytes(self._rx[:length_bytes])
        del self._rx[:length_bytes]
        return data

    def _drain(self):
        self._rx.clear()

    def _close(self):
        self.closed = True


def make_port(device, vid=0x1a86, pid=0x7523, serial_number="USBTEMP01"):
    port = ListPortInfo(device)
    port.vid = vid
    port.pid = pid
    port.serial_number = serial_number
    return port


@pytest.fixture
def ports(monkeypatch):
    available = [make_port("/dev/ttyS0", vid=None, pid=None, serial_number=None), make_port("/dev/ttyUSB0")]
    monkeypatch.setattr(serial.tools.list_ports, "comports", lambda: available)
    return available


@pytest.fixture
def fake():
    return FakeSerial()


@pytest.fixture
def probe(ports):
    probe = Probe("/dev/ttyUSB0", wrapper=FakeSerial, conversion_delay=0)
    yield probe
    probe.close()


@pytest.fixture
def bus(probe):
    return probe._serial_wrapper

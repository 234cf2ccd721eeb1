from usbtemp.probe import Probe
from usbtemp.crc import crc8
from usbtemp.ds18b20 import RomId, Scratchpad
from usbtemp.exceptions import (SerialException, PortResolutionError, TransportIOError, TransportTimeout, ProbeNotOpen,
                                OneWireException, ResetError, NoDevicePresent, ShortCircuit, PresenceProtocolError,
                                WriteMismatchError, ReadLengthError, CRCValidationError)

"""
1-Wire link layer bit-banged over a UART

A UART frame sent at 115200 baud is short enough to act as a single 1-Wire
time slot: an all-high byte only pulls the bus low for its start bit (write 1
or read slot), an all-low byte holds it low for the whole frame (write 0). At
9600 baud a 0xF0 frame is long enough to be a reset pulse, and the device's
presence pulse shows up as low bits in the echoed byte. Timing comes entirely
from the baud rate, the code never sleeps.
"""
from usbtemp.serial import SerialFunction, SerialWrapper
from usbtemp.utils import Logged
from usbtemp.exceptions import TransportIOError, NoDevicePresent, ShortCircuit, PresenceProtocolError, WriteMismatchError, ReadLengthError

RESET_BAUDRATE = 9600
DATA_BAUDRATE = 115200

RESET_PULSE = 0xF0
SLOT_HIGH = 0xFF # write 1, release bus, read slot
SLOT_LOW = 0x00 # write 0
READ_FILLER = 0xFF

SHORTED = 0x00
PRESENCE_MIN = 0x10
PRESENCE_MAX = 0xE0


class ResetDetector(Logged, SerialFunction):
    """
    Sends the reset pulse and classifies the presence response

    Args:
        serial_wrapper (SerialWrapper): Open transport
        reset_baudrate (int, optional)(default: 9600): Rate used for the reset slot
        data_baudrate (int, optional)(default: 115200): Rate restored after the reset slot
    """
    _logger_name = "usbtemp.onewire"

    def __init__(self, serial_wrapper:SerialWrapper, reset_baudrate:int=RESET_BAUDRATE, data_baudrate:int=DATA_BAUDRATE):
        super().__init__(serial_wrapper)
        self.reset_baudrate = reset_baudrate
        self.data_baudrate = data_baudrate

    def reset(self) -> None:
        """
        Reset the bus and check that a device answered with a presence pulse

        Raises:
            NoDevicePresent: If the reset pulse came back unchanged
            ShortCircuit: If the bus stayed low
            PresenceProtocolError: If the response is outside [0x10, 0xE0]
            ReadLengthError: If the adapter didn't echo the reset pulse
            SerialException: Abstraction for all serial exceptions
        """
        self._serial_wrapper.set_baudrate(self.reset_baudrate)
        try:
            self._serial_wrapper.drain()
            if self._serial_wrapper.write(bytes([RESET_PULSE])) != 1:
                raise TransportIOError("reset pulse was not written")
            received = self._serial_wrapper.read(1)
        finally:
            self._serial_wrapper.set_baudrate(self.data_baudrate) # restored even if the slot failed

        if len(received) != 1:
            self.logger.error("Reset failed: no reply from adapter")
            raise ReadLengthError(1, len(received))
        response = received[0]
        if response == RESET_PULSE:
            self.logger.error("Reset failed: no device present")
            raise NoDevicePresent("no device present")
        if response == SHORTED:
            self.logger.error("Reset failed: short circuit")
            raise ShortCircuit("short circuit")
        if not PRESENCE_MIN <= response <= PRESENCE_MAX:
            self.logger.error(f"Reset failed: presence error 0x{response:02x}")
            raise PresenceProtocolError(response)
        self.logger.debug(f"Presence detected (0x{response:02x})")


class BitTransceiver(SerialFunction):
    """
    Exchanges 1-Wire time slots, one transport byte out and one back per slot

    Args:
        serial_wrapper (SerialWrapper): Open transport
        baudrate (int, optional)(default: 115200): Rate the slots are sent at
    """

    def __init__(self, serial_wrapper:SerialWrapper, baudrate:int=DATA_BAUDRATE):
        super().__init__(serial_wrapper)
        self.baudrate = baudrate

    @staticmethod
    def encode(bit:int) -> int:
        if bit not in (0, 1):
            raise ValueError("bit must be 0 or 1")
        return SLOT_HIGH if bit else SLOT_LOW

    @staticmethod
    def decode(slot:int) -> int:
        return 1 if slot == SLOT_HIGH else 0

    def exchange(self, slots:bytes) -> bytes:
        """
        Send slot bytes and collect as many bytes back

        Args:
            slots (bytes): Encoded time slots

        Raises:
            TransportIOError: If the transport accepted fewer bytes than sent
            ReadLengthError: If the transport timed out before every slot came back
            SerialException: Abstraction for all serial exceptions

        Returns:
            bytes: Sampled slot bytes, in transmission order
        """
        if self._serial_wrapper.baudrate != self.baudrate:
            self._serial_wrapper.set_baudrate(self.baudrate)
        written = self._serial_wrapper.write(slots)
        if written != len(slots):
            raise TransportIOError(f"# of bytes written incorrect: {written} of {len(slots)}")
        received = b""
        while len(received) < len(slots):
            chunk = self._serial_wrapper.read(len(slots) - len(received))
            if not chunk: # read timed out
                raise ReadLengthError(len(slots), len(received))
            received += chunk
        return received

    def write_bit(self, bit:int) -> int:
        """
        Run a single time slot

        Args:
            bit (int): 1 for a write-1 or read slot, 0 for a write-0 slot

        Returns:
            int: Bit sampled on the bus
        """
        return self.decode(self.exchange(bytes([self.encode(bit)]))[0])


class ByteTransceiver(Logged):
    """
    Sends and samples whole bytes, least significant bit first

    Args:
        bits (BitTransceiver): Slot layer to send through
    """
    _logger_name = "usbtemp.onewire"

    def __init__(self, bits:BitTransceiver):
        self.bits = bits

    def write_byte(self, value:int) -> int:
        """
        Send the 8 bits of value and return the 8 bits sampled back

        Args:
            value (int): Byte to send, 0xFF turns every slot into a read slot

        Raises:
            ValueError: If value is not a byte

        Returns:
            int: Byte read back from the bus
        """
        if not 0 <= value <= 0xFF:
            raise ValueError("value must be in range 0-255")
        slots = bytes(self.bits.encode((value >> i) & 0x01) for i in range(8))
        echoed = 0
        for i, slot in enumerate(self.bits.exchange(slots)):
            echoed |= self.bits.decode(slot) << i
        return echoed

    def write(self, value:int) -> None:
        """
        Write a byte to the bus and check it was echoed unchanged

        Raises:
            WriteMismatchError: If another value was read back
        """
        echoed = self.write_byte(value)
        if echoed != value:
            self.logger.error(f"Write failed: sent 0x{value:02x}, read back 0x{echoed:02x}")
            raise WriteMismatchError(value, echoed)
        self.logger.debug(f"Wrote 0x{value:02x}")

    def read_bytes(self, count:int) -> bytes:
        """
        Read bytes from the device using read slots

        Args:
            count (int): Number of bytes to read

        Raises:
            ValueError: If count is not strictly positive

        Returns:
            bytes: Bytes sent by the device, in order
        """
        if count <= 0:
            raise ValueError("count must be positive")
        data = bytes(self.write_byte(READ_FILLER) for _ in range(count))
        self.logger.debug(f"Read {data.hex()}")
        return data

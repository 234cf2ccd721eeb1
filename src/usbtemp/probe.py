import time

from usbtemp.utils import Logged
from usbtemp.serial import SerialWrapper, LocalSerial
from usbtemp.ports import resolve_port
from usbtemp.onewire import ResetDetector, BitTransceiver, ByteTransceiver, RESET_BAUDRATE, DATA_BAUDRATE
from usbtemp.ds18b20 import RomId, Scratchpad, READ_ROM, SKIP_ROM, CONVERT_T, READ_SCRATCHPAD, ROM_SIZE, SCRATCHPAD_SIZE
from usbtemp.exceptions import SerialException, ProbeNotOpen, CRCValidationError

class Probe(Logged):
    """
    USB thermometer: a single DS18B20 behind a USB-serial adapter

    Args:
        port (str, optional): Serial port to open right away (e.g. '/dev/ttyUSB0')
        wrapper (type, optional)(default: LocalSerial): SerialWrapper subclass used to open the port
        reset_baudrate (int, optional)(default: 9600): Baud rate of the reset slot
        data_baudrate (int, optional)(default: 115200): Baud rate of the data slots
        timeout (float, optional)(default: 1.0): Transport read timeout in seconds
        conversion_delay (float, optional)(default: 1.0): Time allowed for a temperature conversion

    Raises:
        TypeError: If wrapper is not subclass of SerialWrapper
    """
    _logger_name = "usbtemp"
    _serial_wrapper:SerialWrapper = None

    def __init__(self, port:str=None, **kwargs) -> None:
        wrapper = kwargs.get("wrapper", LocalSerial)
        if not (isinstance(wrapper, type) and issubclass(wrapper, SerialWrapper)):
            raise TypeError("wrapper must be subclass of SerialWrapper")
        self._wrapper_class = wrapper
        self.reset_baudrate = kwargs.get("reset_baudrate", RESET_BAUDRATE)
        self.data_baudrate = kwargs.get("data_baudrate", DATA_BAUDRATE)
        self.timeout = kwargs.get("timeout", 1.0)
        self.conversion_delay = kwargs.get("conversion_delay", 1.0)
        self._name = None
        self._id = None
        self._serial_number = None
        if port:
            self.open(port)

    @property
    def name(self) -> str:
        """
        Device path of the opened port (read-only)
        """
        return self._name

    @property
    def id(self) -> str:
        """
        USB 'vid:pid' of the adapter (read-only)
        """
        return self._id

    @property
    def serial_number(self) -> str:
        """
        USB serial number of the adapter (read-only)
        """
        return self._serial_number

    @property
    def is_open(self) -> bool:
        return self._serial_wrapper is not None

    def open(self, port:str) -> None:
        """
        Resolve and open the USB serial port the thermometer is plugged in

        Args:
            port (str): Serial port name

        Raises:
            SerialException: If the probe is already open
            PortResolutionError: If the port doesn't exist or is not USB
            TransportIOError: If the port cannot be opened
        """
        if self.is_open:
            raise SerialException(f"Probe already open on {self._name}")
        details = resolve_port(port)
        self.logger.debug(f"Opening serial port {details.name} using {self._wrapper_class.__name__}")
        serial_wrapper = self._wrapper_class(details.name, baudrate=self.reset_baudrate, timeout=self.timeout)
        self._attach(serial_wrapper)
        self._name, self._id, self._serial_number = details

    def _attach(self, serial_wrapper:SerialWrapper) -> None:
        self._serial_wrapper = serial_wrapper
        self._reset = ResetDetector(serial_wrapper, self.reset_baudrate, self.data_baudrate)
        self._bytes = ByteTransceiver(BitTransceiver(serial_wrapper, self.data_baudrate))

    def close(self) -> None:
        """
        Close the serial port, does nothing if already closed
        """
        if not self.is_open:
            return
        serial_wrapper = self._serial_wrapper
        self._serial_wrapper = None
        self._reset = None
        self._bytes = None
        serial_wrapper.close()

    def __enter__(self) -> "Probe":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _check_open(self) -> None:
        if not self.is_open:
            raise ProbeNotOpen("Probe is not open")

    def rom(self) -> str:
        """
        Read the 64-bit ROM code of the sensor

        Raises:
            ProbeNotOpen: If the probe is closed
            ResetError: If no device answered the reset
            WriteMismatchError: If the command byte was not echoed
            SerialException: Abstraction for all serial exceptions

        Returns:
            str: ROM code as 16 lowercase hex digits
        """
        self._check_open()
        self._reset.reset()
        self._bytes.write(READ_ROM)
        rom = RomId(self._bytes.read_bytes(ROM_SIZE))
        self.logger.info(f"ROM: {rom}")
        return str(rom)

    def convert(self) -> None:
        """
        Start a temperature conversion on the sensor
        """
        self._check_open()
        self._reset.reset()
        self._bytes.write(SKIP_ROM)
        self._bytes.write(CONVERT_T)

    def wait_for_conversion(self) -> None:
        # fixed worst case, the sensor is not polled
        time.sleep(self.conversion_delay)

    def read_scratchpad(self) -> Scratchpad:
        """
        Read and validate the sensor scratchpad

        Raises:
            CRCValidationError: If the CRC8 check byte doesn't match
        """
        self._check_open()
        self._reset.reset()
        self._bytes.write(SKIP_ROM)
        self._bytes.write(READ_SCRATCHPAD)
        scratchpad = Scratchpad(self._bytes.read_bytes(SCRATCHPAD_SIZE))
        self.logger.debug(f"Read {scratchpad!r}")
        try:
            scratchpad.validate()
        except CRCValidationError as e:
            self.logger.error(e.args[0])
            raise e
        return scratchpad

    def temperature(self, fahrenheit:bool=False) -> float:
        """
        Measure the temperature

        Args:
            fahrenheit (bool, optional)(default: False): Return degrees Fahrenheit instead of Celsius

        Raises:
            ProbeNotOpen: If the probe is closed
            ResetError: If no device answered a reset
            WriteMismatchError: If a command byte was not echoed
            CRCValidationError: If the scratchpad failed its CRC check
            SerialException: Abstraction for all serial exceptions

        Returns:
            float: Temperature
        """
        self.convert()
        self.wait_for_conversion()
        scratchpad = self.read_scratchpad()
        value = scratchpad.fahrenheit if fahrenheit else scratchpad.celsius
        self.logger.info(f"Temperature: {value:.3f} {'F' if fahrenheit else 'C'}")
        return value

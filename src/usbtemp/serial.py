from logging import Logger, getLogger

from usbtemp.exceptions import SerialException, TransportIOError, TransportTimeout

class SerialWrapper:
    """
    Abstract class for the raw duplex byte channel the 1-Wire engine talks through

    Raises:
        NotImplementedError: If class is instantiated directly
    """
    serial_log:Logger = getLogger("usbtemp.serial")
    baudrate:int = None

    def __init__(self):
        raise NotImplementedError("SerialWrapper is an abstract class, use LocalSerial")

    def _set_baudrate(self, baudrate:int):
        raise NotImplementedError("SerialWrapper is an abstract class, use LocalSerial")

    def _write(self, payload:bytes) -> int:
        raise NotImplementedError("SerialWrapper is an abstract class, use LocalSerial")

    def _read(self, length_bytes:int) -> bytes:
        raise NotImplementedError("SerialWrapper is an abstract class, use LocalSerial")

    def _drain(self):
        raise NotImplementedError("SerialWrapper is an abstract class, use LocalSerial")

    def _close(self):
        raise NotImplementedError("SerialWrapper is an abstract class, use LocalSerial")

    def set_baudrate(self, baudrate:int):
        """
        Change the line speed

        Args:
            baudrate (int): New baud rate

        Raises:
            SerialException: Abstraction for all serial exceptions
        """
        self.serial_log.debug(f"Setting baud rate to {baudrate}")
        try:
            self._set_baudrate(baudrate)
        except SerialException as e:
            self.serial_log.error(e.args[0])
            raise e
        self.baudrate = baudrate

    def write(self, msg:bytes) -> int:
        """
        Send binary data

        Args:
            msg (bytes): Binary data to send

        Raises:
            SerialException: Abstraction for all serial exceptions

        Returns:
            int: Number of bytes written
        """
        self.serial_log.debug(f"Sending binary: {msg}")
        try:
            written = self._write(msg)
        except SerialException as e:
            self.serial_log.error(e.args[0])
            raise e
        return written

    def read(self, length_bytes:int) -> bytes:
        """
        Read binary data, may return fewer bytes than requested once the port times out

        Args:
            length_bytes (int): Maximum number of bytes to read

        Raises:
            SerialException: Abstraction for all serial exceptions
            ValueError: If length_bytes is not strictly positive

        Returns:
            bytes: Binary data read
        """
        if length_bytes <= 0:
            raise ValueError("length_bytes must be positive")
        self.serial_log.debug(f"Reading {length_bytes} bytes")
        try:
            received = self._read(length_bytes)
        except SerialException as e:
            self.serial_log.error(e.args[0])
            raise e
        else:
            self.serial_log.debug(f"Received: {received}")
        return received

    def drain(self):
        """
        Discard any pending input

        Raises:
            SerialException: Abstraction for all serial exceptions
        """
        self.serial_log.debug("Draining input buffer")
        try:
            self._drain()
        except SerialException as e:
            self.serial_log.error(e.args[0])
            raise e

    def close(self):
        """
        Close serial port

        Raises:
            SerialException: Abstraction for all serial exceptions
        """
        self.serial_log.info("Closing serial port")
        try:
            self._close()
        except SerialException as e:
            self.serial_log.error(e.args[0])
            raise e



import serial

class LocalSerial(SerialWrapper):
    """
    SerialWrapper class for a local serial port

    Args:
        com (str): Device path or pyserial URL (e.g. 'loop://')
        baudrate (int, optional)(default: 9600): Initial baud rate
        timeout (float, optional)(default: 1.0): Read timeout in seconds, None blocks forever

    Raises:
        TransportIOError: If the port cannot be opened
    """

    def __init__(self, com:str, baudrate:int=9600, timeout:float=1.0):
        try:
            self._serial_port = serial.serial_for_url(com, baudrate=baudrate, bytesize=serial.EIGHTBITS,
                                                      parity=serial.PARITY_NONE, stopbits=serial.STOPBITS_ONE,
                                                      timeout=timeout, write_timeout=timeout)
        except serial.serialutil.SerialException as e:
            self.serial_log.error(f"Failed to open port {com}") # logging manually because SerialWrapper is not initialized
            raise TransportIOError(f"Failed to open port {com}: {e}") from e
        else:
            self.baudrate = baudrate
            self.serial_log.info(f"Opened {com} at {baudrate} baud")


    @staticmethod
    def _handle_serial_exception(func): # needs to be declared in class to handle exceptions depending on type of serial port
        def wrapper(self, *args, **kwargs):
            try:
                return func(self, *args, **kwargs)
            except serial.SerialTimeoutException as e:
                raise TransportTimeout("Write timed out") from e
            except serial.serialutil.SerialException as e:
                raise TransportIOError(f"Serial port failure: {e}") from e
        return wrapper


    @_handle_serial_exception
    def _set_baudrate(self, baudrate:int):
        self._serial_port.baudrate = baudrate


    @_handle_serial_exception
    def _write(self, payload:bytes) -> int:
        written = self._serial_port.write(payload)
        self._serial_port.flush()
        return len(payload) if written is None else written


    @_handle_serial_exception
    def _read(self, length_bytes:int) -> bytes:
        return self._serial_port.read(length_bytes)


    @_handle_serial_exception
    def _drain(self):
        self._serial_port.reset_input_buffer()


    @_handle_serial_exception
    def _close(self):
        self._serial_port.close()



class SerialFunction:
    """
    This class serves as a base class for every protocol layer.
    It keeps a reference to the SerialWrapper the layer exchanges bytes through.

    Args:
        serial_wrapper (SerialWrapper): Open transport to use

    Raises:
        TypeError: If serial_wrapper is not a SerialWrapper
    """

    _serial_wrapper:SerialWrapper = None

    def __init__(self, serial_wrapper:SerialWrapper):
        if not isinstance(serial_wrapper, SerialWrapper):
            raise TypeError("serial_wrapper must be an instance of SerialWrapper")
        self._serial_wrapper = serial_wrapper

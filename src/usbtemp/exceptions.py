class SerialException(Exception):
    """Abstraction for all serial exceptions"""
    pass

class PortResolutionError(SerialException):
    """Raised when no matching USB port is found"""
    pass

class TransportIOError(SerialException):
    """Raised when the underlying serial port fails to read, write or change mode"""
    pass

class TransportTimeout(TransportIOError):
    """Raised when the serial port does not accept data in time"""
    pass

class ProbeNotOpen(SerialException):
    """Raised when a command is issued on a closed probe"""
    pass



class OneWireException(Exception):
    """Abstraction for all 1-Wire protocol exceptions
    
    Pure use may indicate an unexpected device on the bus"""
    pass


# Reset exceptions

class ResetError(OneWireException):
    """Abstraction for all reset/presence exceptions"""
    pass

class NoDevicePresent(ResetError):
    """Raised when the reset pulse comes back unchanged (bus floating)"""
    pass

class ShortCircuit(ResetError):
    """Raised when the bus is held low during the reset slot"""
    pass

class PresenceProtocolError(ResetError):
    """Raised when the presence response is outside the expected range"""

    def __init__(self, response:int):
        super().__init__(f"presence error: 0x{response:02x}")
        self.response = response


# Transfer exceptions

class WriteMismatchError(OneWireException):
    """Raised when the byte echoed by the bus differs from the byte written"""

    def __init__(self, sent:int, echoed:int):
        super().__init__(f"read byte 0x{echoed:02x} does not match write 0x{sent:02x}")
        self.sent = sent
        self.echoed = echoed

class ReadLengthError(OneWireException):
    """Raised when the adapter returns fewer bytes than slots were sent"""

    def __init__(self, expected:int, received:int):
        super().__init__(f"invalid reply length: expected {expected} bytes, received {received}")
        self.expected = expected
        self.received = received

class CRCValidationError(OneWireException):
    """Raised when the CRC8 check byte doesn't match the data"""

    def __init__(self, expected:int, computed:int):
        super().__init__(f"CRC validation failed: check byte 0x{expected:02x}, computed 0x{computed:02x}")
        self.expected = expected
        self.computed = computed

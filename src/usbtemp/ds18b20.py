from usbtemp.crc import check_crc8
from usbtemp.utils import is_hexstring, to_hex

READ_ROM = 0x33
SKIP_ROM = 0xCC
CONVERT_T = 0x44
READ_SCRATCHPAD = 0xBE

ROM_SIZE = 8
SCRATCHPAD_SIZE = 9


class RomId(bytes):
    """
    64-bit ROM code: family code, 48-bit serial number and CRC8, as read from the bus
    """

    def __new__(cls, data:bytes):
        if len(data) != ROM_SIZE:
            raise ValueError(f"ROM id must be {ROM_SIZE} bytes long")
        return super().__new__(cls, data)

    @classmethod
    def fromhex(cls, value:str) -> "RomId":
        if not is_hexstring(value):
            raise ValueError("value must be hexstring")
        return cls(bytes.fromhex(value))

    @property
    def family_code(self) -> int:
        return self[0]

    def __str__(self) -> str:
        return to_hex(self)


class Scratchpad(bytes):
    """
    The 9 bytes returned by Read Scratchpad

    Bytes 0-1 hold the temperature register (little-endian, 1/16 degree per LSB),
    bytes 2-7 the alarm/configuration/reserved registers and byte 8 the CRC8 of
    bytes 0-7.
    """

    def __new__(cls, data:bytes):
        if len(data) != SCRATCHPAD_SIZE:
            raise ValueError(f"scratchpad must be {SCRATCHPAD_SIZE} bytes long")
        return super().__new__(cls, data)

    def validate(self) -> None:
        """
        Raises:
            CRCValidationError: If byte 8 is not the CRC8 of bytes 0-7
        """
        check_crc8(self)

    @property
    def raw_temperature(self) -> int:
        # register read as unsigned, everything past byte 1 is ignored
        return int.from_bytes(self[0:2], "little")

    @property
    def celsius(self) -> float:
        return self.raw_temperature / 16.0

    @property
    def fahrenheit(self) -> float:
        return self.celsius * 9 / 5 + 32

    def __repr__(self) -> str:
        return f"Scratchpad({to_hex(self)})"

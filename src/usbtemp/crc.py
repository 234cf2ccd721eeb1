from typing import Iterable

from usbtemp.exceptions import CRCValidationError

CRC8_FEEDBACK = 0x8C # Dallas/Maxim x^8 + x^5 + x^4 + 1, reflected


def crc8(data:Iterable[int]) -> int:
    """
    Dallas/Maxim 1-Wire CRC8, LSB first, seeded with 0x00

    Args:
        data (Iterable[int]): Bytes to checksum

    Returns:
        int: CRC8 of data
    """
    crc = 0x00
    for b in data:
        for _ in range(8):
            mix = (crc ^ b) & 0x01
            crc >>= 1
            if mix:
                crc ^= CRC8_FEEDBACK
            b >>= 1
    return crc


def check_crc8(data:bytes) -> None:
    """
    Validate a block whose last byte is the CRC8 of the bytes before it

    Args:
        data (bytes): Data followed by its check byte

    Raises:
        ValueError: If data is shorter than two bytes
        CRCValidationError: If the check byte doesn't match
    """
    if len(data) < 2:
        raise ValueError("data must hold at least one byte and its check byte")
    computed = crc8(data[:-1])
    if computed != data[-1]:
        raise CRCValidationError(data[-1], computed)

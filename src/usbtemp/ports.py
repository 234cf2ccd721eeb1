from logging import getLogger
from typing import NamedTuple

import serial.tools.list_ports

from usbtemp.exceptions import PortResolutionError

logger = getLogger("usbtemp.ports")


class PortDetails(NamedTuple):
    name: str
    id: str
    serial_number: str


def resolve_port(port_name:str) -> PortDetails:
    """
    Find the USB serial port named port_name and collect its identity

    Args:
        port_name (str): Device path (e.g. '/dev/ttyUSB0', 'COM3') or short name (e.g. 'ttyUSB0')

    Raises:
        PortResolutionError: If no port matches or the matching port is not a USB device

    Returns:
        PortDetails: Device path, 'vid:pid' identifier and USB serial number
    """
    ports = serial.tools.list_ports.comports()
    if len(ports) == 0:
        raise PortResolutionError("no valid ports found")

    match = next((port for port in ports if port.device == port_name or port.name == port_name), None)
    if match is None:
        raise PortResolutionError(f"no port named {port_name}, found {len(ports)} other ports")
    if match.vid is None: # only USB ports carry vendor/product ids
        raise PortResolutionError(f"{port_name} is not USB")

    details = PortDetails(match.device, f"{match.vid:04x}:{match.pid:04x}", match.serial_number or "")
    logger.debug(f"Resolved {port_name} to {details}")
    return details

import argparse
import logging
import sys

from usbtemp.probe import Probe
from usbtemp.exceptions import SerialException, OneWireException

logger = logging.getLogger("usbtemp")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="usbtemp", description="Read the ROM code and temperature of a USB thermometer")
    parser.add_argument("--port", default="/dev/ttyUSB0", help="Port name where the usbtemp device is connected")
    parser.add_argument("--celsius", action="store_true", help="Report degrees Celsius instead of Fahrenheit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every serial exchange")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    try:
        with Probe(args.port) as probe:
            rom = probe.rom()
            temp = probe.temperature(fahrenheit=not args.celsius)
    except (SerialException, OneWireException) as e:
        logger.error(f"Probe failed: {e}")
        return 1

    print(f"Name: {probe.name}\nSerial: {probe.serial_number}\nRom: {rom}\nTemperature: {temp:.3f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

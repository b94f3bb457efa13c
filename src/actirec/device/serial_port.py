"""Opening the sensor's serial port."""

from __future__ import annotations

import errno
import logging

import serial

logger = logging.getLogger(__name__)


class DeviceNotFoundError(FileNotFoundError):
    """The configured serial device path does not exist."""

    def __init__(self, device: str) -> None:
        super().__init__(f"Device not found: {device}")
        self.device = device


def open_serial(device: str, baud: int) -> serial.Serial:
    """
    Open ``device`` at ``baud`` with no read timeout.

    ``readline()`` on the returned port blocks until a full line (or end of
    stream) arrives.
    """
    try:
        port = serial.Serial(port=device, baudrate=baud, timeout=None)
    except serial.SerialException as exc:
        if exc.errno == errno.ENOENT:
            raise DeviceNotFoundError(device) from exc
        raise
    logger.info("Opened %s at %d baud", device, baud)
    return port

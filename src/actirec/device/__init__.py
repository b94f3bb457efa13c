"""Hardware-facing inputs: the sensor's serial port and the keyboard."""

from .serial_port import DeviceNotFoundError, open_serial

__all__ = ["DeviceNotFoundError", "open_serial"]

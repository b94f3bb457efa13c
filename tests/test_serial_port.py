import errno

import pytest
import serial

from actirec.device import serial_port
from actirec.device.serial_port import DeviceNotFoundError, open_serial


def _raising(exc):
    def _factory(*args, **kwargs):
        raise exc

    return _factory


def test_missing_device_names_the_configured_path(monkeypatch) -> None:
    monkeypatch.setattr(
        serial_port.serial,
        "Serial",
        _raising(serial.SerialException(errno.ENOENT, "could not open port")),
    )

    with pytest.raises(DeviceNotFoundError) as info:
        open_serial("/dev/ttyFAKE0", 115200)

    assert info.value.device == "/dev/ttyFAKE0"
    assert "/dev/ttyFAKE0" in str(info.value)
    assert isinstance(info.value, FileNotFoundError)


def test_other_open_failures_propagate_unchanged(monkeypatch) -> None:
    original = serial.SerialException(errno.EACCES, "permission denied")
    monkeypatch.setattr(serial_port.serial, "Serial", _raising(original))

    with pytest.raises(serial.SerialException) as info:
        open_serial("/dev/ttyFAKE0", 115200)

    assert info.value is original


def test_port_is_opened_without_timeout(monkeypatch) -> None:
    calls = {}

    def _fake_serial(**kwargs):
        calls.update(kwargs)
        return object()

    monkeypatch.setattr(serial_port.serial, "Serial", _fake_serial)

    open_serial("/dev/ttyUSB0", 9600)

    assert calls == {"port": "/dev/ttyUSB0", "baudrate": 9600, "timeout": None}

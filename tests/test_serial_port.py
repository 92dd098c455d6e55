"""Tests for the serial I/O boundary (pyserial patched out)."""

import logging

import pytest
import serial
from serial import SerialException, SerialTimeoutException

from flipboard.config import SerialConfig
from flipboard.serial_port import (
    HardwareSerialPort,
    MockSerialPort,
    SerialConnectionError,
    TransportWriteError,
    create_serial_port,
)


class FakeSerial:
    instances: list["FakeSerial"] = []
    write_result = None
    write_error = None

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.written: list[bytes] = []
        self.closed = False
        FakeSerial.instances.append(self)

    def write(self, data: bytes) -> int:
        if FakeSerial.write_error is not None:
            raise FakeSerial.write_error
        self.written.append(data)
        return len(data) if FakeSerial.write_result is None else FakeSerial.write_result

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_serial(monkeypatch):
    FakeSerial.instances = []
    FakeSerial.write_result = None
    FakeSerial.write_error = None
    monkeypatch.setattr(serial, "Serial", FakeSerial)
    return FakeSerial


@pytest.fixture
def hw_port(fake_serial) -> HardwareSerialPort:
    port = HardwareSerialPort(SerialConfig(port="/dev/ttyUSB3", mock=False))
    port.connect()
    return port


def test_hardware_port_line_settings(hw_port, fake_serial):
    kwargs = fake_serial.instances[0].kwargs
    assert kwargs["port"] == "/dev/ttyUSB3"
    assert kwargs["baudrate"] == 2400
    assert kwargs["bytesize"] == serial.EIGHTBITS
    assert kwargs["parity"] == serial.PARITY_NONE
    assert kwargs["stopbits"] == serial.STOPBITS_ONE
    assert kwargs["xonxoff"] is False
    assert kwargs["rtscts"] is False
    assert kwargs["dsrdtr"] is False
    assert kwargs["write_timeout"] == 10.0
    assert hw_port.is_connected()


def test_hardware_port_writes_frame(hw_port, fake_serial):
    hw_port.write_frame(b"A           12 34 56 X\r")
    assert fake_serial.instances[0].written == [b"A           12 34 56 X\r"]


def test_hardware_port_timeout(hw_port, fake_serial):
    fake_serial.write_error = SerialTimeoutException("Write timeout")
    with pytest.raises(TransportWriteError, match="timed out"):
        hw_port.write_frame(b"frame")


def test_hardware_port_write_failure(hw_port, fake_serial):
    fake_serial.write_error = SerialException("device reports readiness but no data")
    with pytest.raises(TransportWriteError, match="failed"):
        hw_port.write_frame(b"frame")


def test_hardware_port_short_write(hw_port, fake_serial):
    fake_serial.write_result = 3
    with pytest.raises(TransportWriteError, match="Short write"):
        hw_port.write_frame(b"frame")


def test_hardware_port_disconnect(hw_port, fake_serial):
    hw_port.disconnect()
    assert fake_serial.instances[0].closed
    assert not hw_port.is_connected()
    with pytest.raises(TransportWriteError):
        hw_port.write_frame(b"frame")


def test_hardware_port_connect_failure(monkeypatch):
    def refuse(**kwargs):
        raise SerialException("could not open port /dev/ttyUSB3")

    monkeypatch.setattr(serial, "Serial", refuse)
    port = HardwareSerialPort(SerialConfig(port="/dev/ttyUSB3", mock=False))
    with pytest.raises(SerialConnectionError):
        port.connect()
    assert not port.is_connected()


def test_mock_port_records_frames():
    port = MockSerialPort()
    with pytest.raises(TransportWriteError):
        port.write_frame(b"x")

    port.connect()
    port.write_frame(b"one")
    port.write_frame(bytearray(b"two"))
    assert port.frames == [b"one", b"two"]

    port.disconnect()
    assert not port.is_connected()


def test_mock_port_logs_frames_at_debug(caplog):
    port = MockSerialPort()
    port.connect()
    with caplog.at_level(logging.DEBUG, logger="flipboard.serial_port"):
        port.write_frame(b"A           12 34 56 X\r")
    records = [r for r in caplog.records if "Wrote frame" in r.getMessage()]
    assert [r.levelno for r in records] == [logging.DEBUG]


def test_transport_write_error_is_a_connection_error():
    assert issubclass(TransportWriteError, SerialConnectionError)


def test_create_serial_port():
    assert isinstance(create_serial_port(SerialConfig(mock=True)), MockSerialPort)
    assert isinstance(create_serial_port(SerialConfig(mock=False)), HardwareSerialPort)
    assert isinstance(
        create_serial_port(SerialConfig(mock=True), use_hardware=True), HardwareSerialPort
    )
    assert isinstance(
        create_serial_port(SerialConfig(mock=False), use_hardware=False), MockSerialPort
    )

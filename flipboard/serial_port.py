"""
Serial Port I/O Boundary

This module provides the SerialPort class, which handles all serial I/O
for the board. It hides the hardware/mock distinction behind one small
interface: connect, disconnect, and write one frame.

Writes are blocking and bounded by the configured write timeout. They are
never retried here; what a failed write means for a row is decided by the
row controller.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import List, Optional

import serial
from serial import SerialException, SerialTimeoutException

from .config import SerialConfig
from .protocol_config import LINK_SETTINGS


logger = logging.getLogger(__name__)


class SerialConnectionError(Exception):
    """Raised when serial connection operations fail."""

    pass


class TransportWriteError(SerialConnectionError):
    """Raised when a frame could not be written (error, timeout or short write)."""

    pass


class SerialPort(ABC):
    """
    Abstract base class for serial port communication.

    Defines the I/O boundary used by the board controller. Implementations
    handle hardware vs mock communication.
    """

    @abstractmethod
    def connect(self) -> None:
        """
        Open and configure the serial port.

        Raises:
            SerialConnectionError: If the port cannot be opened or configured
        """
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """
        Close the serial port.

        Raises:
            SerialConnectionError: If disconnection fails
        """
        pass

    @abstractmethod
    def is_connected(self) -> bool:
        """Check if serial port is connected."""
        pass

    @abstractmethod
    def write_frame(self, frame: bytes) -> None:
        """
        Write one encoded frame, blocking until sent or timed out.

        Raises:
            TransportWriteError: If the write fails, times out or is short
        """
        pass


class HardwareSerialPort(SerialPort):
    """
    Hardware serial port implementation using pyserial.

    Opens the port with the board's fixed line settings: 8 data bits, no
    parity, 1 stop bit and no flow control. Baud rate and write timeout come
    from SerialConfig (2400 baud and 10 s by default).
    """

    def __init__(self, config: SerialConfig):
        self.config = config
        self._serial: Optional[serial.Serial] = None
        self._io_lock = threading.Lock()

    def connect(self) -> None:
        """Open and configure the hardware serial port."""
        with self._io_lock:
            try:
                self._serial = serial.Serial(
                    port=self.config.port,
                    baudrate=self.config.baudrate,
                    bytesize=LINK_SETTINGS.bytesize,
                    parity=LINK_SETTINGS.parity,
                    stopbits=LINK_SETTINGS.stopbits,
                    xonxoff=LINK_SETTINGS.xonxoff,
                    rtscts=LINK_SETTINGS.rtscts,
                    dsrdtr=LINK_SETTINGS.dsrdtr,
                    write_timeout=self.config.write_timeout,
                )
                logger.info(
                    f"Connected to hardware serial port {self.config.port} "
                    f"({self.config.baudrate} baud, {LINK_SETTINGS.description})"
                )

            except (SerialException, OSError, ValueError) as e:
                self._serial = None
                raise SerialConnectionError(
                    f"Hardware serial connect failed: {e}"
                ) from e

    def disconnect(self) -> None:
        """Close the hardware serial port."""
        with self._io_lock:
            if self._serial:
                try:
                    self._serial.close()
                    logger.info("Disconnected from hardware serial port")
                except (SerialException, OSError) as e:
                    raise SerialConnectionError(
                        f"Hardware serial disconnect failed: {e}"
                    ) from e
                finally:
                    self._serial = None

    def is_connected(self) -> bool:
        """Check if hardware serial port is connected."""
        return self._serial is not None

    def write_frame(self, frame: bytes) -> None:
        """Write a frame to the hardware serial port."""
        with self._io_lock:
            if not self._serial:
                raise TransportWriteError("Not connected to hardware")

            try:
                bytes_written = self._serial.write(frame)
            except SerialTimeoutException as e:
                raise TransportWriteError(
                    f"Hardware write timed out after {self.config.write_timeout}s"
                ) from e
            except (SerialException, OSError) as e:
                raise TransportWriteError(f"Hardware write failed: {e}") from e

            if bytes_written != len(frame):
                raise TransportWriteError(
                    f"Short write: {bytes_written}/{len(frame)} bytes"
                )


class MockSerialPort(SerialPort):
    """
    Mock serial port implementation for testing and headless runs.

    Records every frame instead of sending it and logs operations for
    debugging purposes.
    """

    def __init__(self, config: Optional[SerialConfig] = None):
        self.config = config or SerialConfig(mock=True)
        self._connected = False
        self.frames: List[bytes] = []

    def connect(self) -> None:
        """Simulate connecting to serial port."""
        self._connected = True
        logger.info(f"[MOCK] Connected to serial port {self.config.port}")

    def disconnect(self) -> None:
        """Simulate disconnecting from serial port."""
        self._connected = False
        logger.info("[MOCK] Disconnected from serial port")

    def is_connected(self) -> bool:
        """Check if mock serial port is connected."""
        return self._connected

    def write_frame(self, frame: bytes) -> None:
        """Record a frame as if it was written."""
        if not self._connected:
            raise TransportWriteError("Not connected to mock serial")

        self.frames.append(bytes(frame))
        logger.debug(f"[MOCK] Wrote frame {bytes(frame)!r} ({len(frame)} bytes)")


def create_serial_port(
    config: SerialConfig, use_hardware: Optional[bool] = None
) -> SerialPort:
    """
    Factory function to create appropriate serial port implementation.

    Args:
        config: Serial configuration
        use_hardware: Force hardware (True) or mock (False). If None, uses config.mock

    Returns:
        SerialPort: Hardware or mock implementation
    """
    if use_hardware is None:
        use_hardware = not config.mock

    if use_hardware:
        logger.info("Creating hardware serial port")
        return HardwareSerialPort(config)
    else:
        logger.info("Creating mock serial port")
        return MockSerialPort(config)

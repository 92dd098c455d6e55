"""
Board Controller - Policy/Orchestration Layer

This module contains the BoardController class, which owns the rows of the
split-character board and the one serial port they share. It runs the boot
sequence at construction and then exposes `write` and `tick` to the
application.

Policy layer - uses pure classes (FrameEncoder), per-row policy
(RowController) and the I/O boundary (SerialPort).
"""

import logging
import threading
import time
from typing import Callable, List, Optional

from .boot_sequence import BootSequence, BootStage
from .config import BoardConfig
from .protocol_encoder import FrameEncoder
from .row_controller import RowController
from .serial_port import (
    SerialConnectionError,
    SerialPort,
    TransportWriteError,
    create_serial_port,
)


logger = logging.getLogger(__name__)


class BoardControllerError(Exception):
    """Base exception for board controller errors."""

    pass


class ConfigurationError(BoardControllerError):
    """Raised when the serial port cannot be opened or configured."""

    pass


class UnknownRowError(BoardControllerError, IndexError):
    """Raised when a row index is outside the board."""

    pass


class BoardController:
    """
    Owner of the board rows and their shared serial port.

    Every `write` and `tick` holds one board-wide lock, so an application
    thread and a ticker thread may both call in. The port is only ever
    touched through the rows while that lock is held.
    """

    def __init__(
        self,
        board_config: BoardConfig,
        serial_port: Optional[SerialPort] = None,
        protocol_encoder: Optional[FrameEncoder] = None,
        use_hardware: Optional[bool] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Open the serial port, build the rows and run the boot sequence.

        Args:
            board_config: Board configuration
            serial_port: Serial I/O boundary (default: auto-created)
            protocol_encoder: Frame encoding logic (default: new instance)
            use_hardware: Force hardware vs mock (default: from config)
            clock: Monotonic time source shared by all rows
            sleep: Blocking delay used by the boot sequence

        Raises:
            ConfigValidationError: If the board configuration is inconsistent
            ConfigurationError: If the serial port cannot be opened
        """
        board_config.validate()

        self.config = board_config
        self._clock = clock
        self._lock = threading.RLock()

        self.protocol_encoder = protocol_encoder or FrameEncoder()
        self.serial_port = serial_port or create_serial_port(
            board_config.serial, use_hardware
        )

        self.rows: List[RowController] = [
            RowController(
                row,
                self.serial_port,
                encoder=self.protocol_encoder,
                cooldown=board_config.cooldown,
                on_write_error=board_config.on_write_error,
                clock=clock,
            )
            for row in board_config.rows
        ]

        try:
            self.serial_port.connect()
        except SerialConnectionError as e:
            raise ConfigurationError(f"Failed to open board serial port: {e}") from e

        logger.info(
            f"Board controller initialized with {len(self.rows)} rows: "
            + ", ".join(f"{r.id}({r.capacity})" for r in self.rows)
        )

        self.boot_sequence = BootSequence(board_config.boot, sleep=sleep)
        try:
            self.boot_sequence.run(self)
        except Exception:
            self.close()
            raise

    def __enter__(self) -> "BoardController":
        return self

    def __exit__(self, exc_type, exc_value, tb) -> None:
        self.close()

    @property
    def boot_stage(self) -> Optional[BootStage]:
        return self.boot_sequence.stage

    def write(self, row_index: int, text: str) -> bool:
        """
        Request `text` on row `row_index`.

        Returns:
            bool: True if a frame was transmitted now, False if it was queued
                or suppressed

        Raises:
            UnknownRowError: If row_index is not a valid row
            RowTextError: If the text does not fit the row exactly
        """
        with self._lock:
            return self.get_row(row_index).write(text, self._clock())

    def tick(self) -> int:
        """
        Flush queued text on every row whose cooldown elapsed, in row order.

        A transport error on one row does not stop the remaining rows. The
        first such error is re-raised once every row has been ticked.

        Returns:
            int: Number of frames transmitted

        Raises:
            TransportWriteError: If a row write failed under the raise policy
        """
        with self._lock:
            now = self._clock()
            sent = 0
            failure: Optional[TransportWriteError] = None
            for row in self.rows:
                try:
                    if row.tick(now):
                        sent += 1
                except TransportWriteError as e:
                    logger.error(f"Row '{row.id}' tick failed: {e}")
                    if failure is None:
                        failure = e
            if failure is not None:
                raise failure
            return sent

    def close(self) -> None:
        """Release the serial port."""
        with self._lock:
            if self.serial_port.is_connected():
                self.serial_port.disconnect()
                logger.info("Board controller disconnected")

    def is_connected(self) -> bool:
        return self.serial_port.is_connected()

    def get_row(self, row_index: int) -> RowController:
        if not (0 <= row_index < len(self.rows)):
            raise UnknownRowError(
                f"Unknown row index {row_index} (board has {len(self.rows)} rows)"
            )
        return self.rows[row_index]

    def get_board_stats(self) -> dict:
        """Get board statistics and information."""
        with self._lock:
            return {
                "row_count": len(self.rows),
                "rows": [row.get_row_stats() for row in self.rows],
                "boot_stage": str(self.boot_stage) if self.boot_stage else None,
                "connected": self.is_connected(),
                "serial_config": {
                    "port": self.config.serial.port,
                    "baudrate": self.config.serial.baudrate,
                    "write_timeout": self.config.serial.write_timeout,
                    "mock": self.config.serial.mock,
                },
                "on_write_error": str(self.config.on_write_error),
            }

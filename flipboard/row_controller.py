"""
Row Controller - per-row rate limiting and change suppression

One RowController drives one physical row of the board. It decides when a
text is actually sent:

- A row accepts at most one transmission per cooldown (1 s by default).
  Text written while the row is cooling down is parked as `pending_text`;
  a newer write replaces it and the next tick after the cooldown sends it.
- Text equal to what the row already shows is never re-sent.
"""

import logging
import time
from typing import Callable, Optional

from .config import RowConfig
from .protocol_config import ROW_COOLDOWN, WriteErrorPolicy
from .protocol_encoder import FrameEncoder
from .serial_port import SerialPort, TransportWriteError
from .validation import validate_row_text


logger = logging.getLogger(__name__)


class RowController:
    """
    Rate limiter and change filter for a single board row.

    Not thread-safe on its own; the board controller serialises access.
    """

    def __init__(
        self,
        config: RowConfig,
        serial_port: SerialPort,
        encoder: Optional[FrameEncoder] = None,
        cooldown: float = ROW_COOLDOWN,
        on_write_error: WriteErrorPolicy = WriteErrorPolicy.IGNORE,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self.serial_port = serial_port
        self.encoder = encoder or FrameEncoder()
        self.cooldown = cooldown
        self.on_write_error = on_write_error
        self._clock = clock

        # None means "never updated", so the first write is never rate-limited
        self.last_update: Optional[float] = None
        self.current_text = ""
        self.pending_text: Optional[str] = None

    @property
    def id(self) -> str:
        return self.config.id

    @property
    def capacity(self) -> int:
        return self.config.capacity

    def is_cooling_down(self, now: Optional[float] = None) -> bool:
        """True while less than `cooldown` seconds passed since the last accepted write."""
        if self.last_update is None:
            return False
        now = self._clock() if now is None else now
        return now - self.last_update < self.cooldown

    def write(self, text: str, now: Optional[float] = None) -> bool:
        """
        Request `text` on this row.

        Args:
            text: Row text, exactly `capacity` printable characters
            now: Timestamp to use instead of the row clock

        Returns:
            bool: True if a frame was transmitted

        Raises:
            RowTextError: If the text does not fit the row exactly
            TransportWriteError: If the write failed and the policy is RAISE
        """
        validate_row_text(text, self.capacity, self.id)
        now = self._clock() if now is None else now

        if self.is_cooling_down(now):
            if self.pending_text is not None and self.pending_text != text:
                logger.debug(
                    f"Row '{self.id}' cooling down, replacing queued {self.pending_text!r}"
                )
            self.pending_text = text
            return False

        return self._transmit(text, now)

    def tick(self, now: Optional[float] = None) -> bool:
        """
        Send the queued text once the cooldown has elapsed.

        Returns:
            bool: True if a frame was transmitted
        """
        if self.pending_text is None:
            return False

        now = self._clock() if now is None else now
        if self.is_cooling_down(now):
            return False

        return self._transmit(self.pending_text, now)

    def _transmit(self, text: str, now: float) -> bool:
        self.pending_text = None
        self.last_update = now

        if text == self.current_text:
            logger.debug(f"Row '{self.id}' unchanged, skipping {text!r}")
            return False

        frame = self.encoder.encode_row_frame(self.id, self.capacity, text)
        try:
            self.serial_port.write_frame(frame)
        except TransportWriteError as e:
            if self.on_write_error is WriteErrorPolicy.RAISE:
                raise
            if self.on_write_error is WriteErrorPolicy.RETRY:
                logger.warning(f"Row '{self.id}' write failed, will retry {text!r}: {e}")
                self.pending_text = text
                return False
            logger.warning(f"Row '{self.id}' write failed, dropping {text!r}: {e}")
            self.current_text = text
            return False

        self.current_text = text
        logger.debug(f"Row '{self.id}' sent {frame!r}")
        return True

    def get_row_stats(self) -> dict:
        return {
            "id": self.id,
            "capacity": self.capacity,
            "current_text": self.current_text,
            "pending_text": self.pending_text,
            "last_update": self.last_update,
        }

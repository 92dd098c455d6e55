"""
Pure Protocol Encoding Logic

This module contains the FrameEncoder class, which turns the text for one
board row into the command the display hardware expects. It's a pure class
with no I/O dependencies.

Frame format: <id> ' ' <18 payload slots> ' ' 'X' '\\r'  (23 bytes)

The payload is laid out in groups of three slots: two characters and a
separator space. Text is consumed back to front and the whole buffer is
reversed before framing, so the row reads left to right on the board with
unused groups padding the left edge. This mirrors how the row modules are
wired and must not be "simplified".
"""

from .protocol_config import (
    FIELD_SEPARATOR,
    FRAME_COMMAND,
    FRAME_ENCODING,
    FRAME_TERMINATOR,
    GROUP_SIZE,
    PAYLOAD_SLOTS,
)
from .validation import FrameLengthError


class FrameEncoder:
    """
    Pure protocol encoder for board row frames.

    All methods are pure functions that take inputs and return encoded bytes.
    """

    def encode_payload(self, capacity: int, text: str) -> str:
        """
        Lay `text` out over the 18 payload slots.

        Args:
            capacity: Number of characters the row accepts
            text: Row text, exactly `capacity` characters

        Returns:
            str: The 18 character payload, already reversed

        Raises:
            FrameLengthError: If text length differs from capacity
        """
        if len(text) != capacity:
            raise FrameLengthError(
                f"Text length {len(text)} != row capacity {capacity}: {text!r}"
            )

        slots = []
        for i in range(PAYLOAD_SLOTS):
            logical = i - i // GROUP_SIZE
            if i % GROUP_SIZE == GROUP_SIZE - 1 or logical > capacity - 1:
                slots.append(" ")
            else:
                slots.append(text[capacity - logical - 1])

        return "".join(reversed(slots))

    def encode_row_frame(self, row_id: str, capacity: int, text: str) -> bytes:
        """
        Encode a complete row frame.

        Args:
            row_id: Single character addressing the row
            capacity: Number of characters the row accepts
            text: Row text, exactly `capacity` characters

        Returns:
            bytes: 23 byte frame ready for transmission

        Raises:
            FrameLengthError: If text length differs from capacity
        """
        payload = self.encode_payload(capacity, text)
        frame = (
            row_id
            + FIELD_SEPARATOR
            + payload
            + FIELD_SEPARATOR
            + FRAME_COMMAND
            + FRAME_TERMINATOR
        )
        return frame.encode(FRAME_ENCODING)


def encode_row_frame(row_id: str, capacity: int, text: str) -> bytes:
    """Module-level shortcut for FrameEncoder().encode_row_frame."""
    return FrameEncoder().encode_row_frame(row_id, capacity, text)

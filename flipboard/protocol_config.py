"""
Split-character board protocol configuration.

Frame format: <row id> ' ' <18 payload slots> ' ' 'X' '\\r'
"""

from enum import Enum
from typing import NamedTuple

import serial


# Frame layout
PAYLOAD_SLOTS = 18       # Working buffer width (six groups of three slots)
GROUP_SIZE = 3           # Two content slots followed by one separator
MAX_CAPACITY = PAYLOAD_SLOTS - PAYLOAD_SLOTS // GROUP_SIZE  # 12 characters
FIELD_SEPARATOR = " "
FRAME_COMMAND = "X"      # Latch/show command
FRAME_TERMINATOR = "\r"
FRAME_LENGTH = 1 + 1 + PAYLOAD_SLOTS + 1 + 1 + 1  # 23 bytes
FRAME_ENCODING = "ascii"


# Row timing
ROW_COOLDOWN = 1.0       # Seconds between transmissions to the same row
TICK_INTERVAL = 0.06     # Reference scheduler cadence
MAX_TICK_INTERVAL = 0.2  # Recommended upper bound for the cadence


class WriteErrorPolicy(Enum):
    """What a row does when the transport rejects a frame."""

    IGNORE = "ignore"  # Advance bookkeeping as if the write succeeded
    RETRY = "retry"    # Re-queue the text for the next post-cooldown tick
    RAISE = "raise"    # Leave bookkeeping untouched and propagate

    def __str__(self) -> str:
        return self.value


class LinkSettings(NamedTuple):
    """Serial line parameters expected by the board controller."""

    baudrate: int
    bytesize: int
    parity: str
    stopbits: float
    xonxoff: bool
    rtscts: bool
    dsrdtr: bool
    write_timeout: float
    description: str


# 2400 8N1, no flow control, 10 s write timeout
LINK_SETTINGS = LinkSettings(
    baudrate=2400,
    bytesize=serial.EIGHTBITS,
    parity=serial.PARITY_NONE,
    stopbits=serial.STOPBITS_ONE,
    xonxoff=False,
    rtscts=False,
    dsrdtr=False,
    write_timeout=10.0,
    description="2400 baud 8N1, no flow control",
)


# Reference board: four rows addressed A-D
REFERENCE_ROWS = (("A", 6), ("B", 7), ("C", 7), ("D", 7))
REFERENCE_GREETING = ("TELAND", "TER ZEE", "DELUCHT", "LSTRM15")


def parse_write_error_policy(value: str) -> WriteErrorPolicy:
    """Get the write error policy for a config value.

    Args:
        value: Policy name ("ignore", "retry" or "raise"), case-insensitive

    Returns:
        WriteErrorPolicy enum value

    Raises:
        ValueError: If the name is not a known policy
    """
    try:
        return WriteErrorPolicy(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(p.value for p in WriteErrorPolicy)
        raise ValueError(
            f"Unsupported on_write_error '{value}'. Supported: {allowed}"
        ) from None

"""
Cross-cutting validation logic for the split-character board.

Type-local invariants stay in the dataclass __post_init__ methods of
config.py. Rules checked here span several objects:
- Row id uniqueness
- Greeting texts matching the capacity of their rows
- Tick cadence against the row cooldown
- Row text accepted by the frame encoder
"""

import logging
from typing import TYPE_CHECKING

from .protocol_config import MAX_CAPACITY, MAX_TICK_INTERVAL

if TYPE_CHECKING:
    from .config import BoardConfig


logger = logging.getLogger(__name__)


class ValidationError(ValueError):
    """Base exception for validation errors."""
    pass


class ConfigValidationError(ValidationError):
    """Raised when board configuration is invalid."""
    pass


class RowTextError(ValidationError):
    """Raised when text cannot be shown on a row."""
    pass


class FrameLengthError(ValidationError):
    """Raised when text handed to the encoder does not fill the row exactly."""
    pass


def is_printable(text: str) -> bool:
    """True if every character is printable ASCII (space through tilde)."""
    return all(" " <= ch <= "~" for ch in text)


def validate_row_id(row_id: str) -> None:
    if len(row_id) != 1 or not is_printable(row_id) or row_id == " ":
        raise ConfigValidationError(
            f"Row id must be a single printable character, got {row_id!r}"
        )


def validate_capacity(capacity: int, row_id: str = "?") -> None:
    if not (1 <= capacity <= MAX_CAPACITY):
        raise ConfigValidationError(
            f"Row '{row_id}' capacity must be 1-{MAX_CAPACITY}, got {capacity}"
        )


def validate_row_text(text: str, capacity: int, row_id: str = "?") -> None:
    """
    Validate text for a row of the given capacity.

    The caller is responsible for padding or truncating; text is never
    adjusted here.

    Raises:
        RowTextError: If the length differs from capacity or the text holds
            characters the board cannot show
    """
    if not isinstance(text, str):
        raise RowTextError(f"Row '{row_id}' text must be str, got {type(text).__name__}")
    if len(text) != capacity:
        raise RowTextError(
            f"Row '{row_id}' expects exactly {capacity} characters, "
            f"got {len(text)} ({text!r})"
        )
    if not is_printable(text):
        raise RowTextError(f"Row '{row_id}' text has unprintable characters: {text!r}")


def validate_board_config(config: "BoardConfig") -> None:
    """
    Validate cross-cutting rules for a complete board configuration.

    Raises:
        ConfigValidationError: If any rule fails
    """
    if not config.rows:
        raise ConfigValidationError("Board must have at least one row")

    ids = [row.id for row in config.rows]
    if len(ids) != len(set(ids)):
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        raise ConfigValidationError(f"Duplicate row ids: {duplicates}")

    if config.tick_interval >= config.cooldown:
        raise ConfigValidationError(
            f"tick_interval ({config.tick_interval}s) must be below "
            f"cooldown ({config.cooldown}s)"
        )
    if config.tick_interval > MAX_TICK_INTERVAL:
        # Allowed, but queued updates will lag behind the cooldown
        logger.warning(
            "tick_interval %.3fs exceeds recommended %.3fs",
            config.tick_interval,
            MAX_TICK_INTERVAL,
        )

    greeting = config.boot.greeting
    if config.boot.enabled and greeting:
        if len(greeting) != len(config.rows):
            raise ConfigValidationError(
                f"Boot greeting has {len(greeting)} lines for {len(config.rows)} rows"
            )
        for row, text in zip(config.rows, greeting):
            try:
                validate_row_text(text, row.capacity, row.id)
            except RowTextError as e:
                raise ConfigValidationError(f"Boot greeting: {e}") from e

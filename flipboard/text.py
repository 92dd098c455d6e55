from typing import Literal

Align = Literal["left", "right", "center"]


def fit_text(text: str, capacity: int, align: Align = "left") -> str:
    """
    Pad or truncate `text` to exactly `capacity` characters.

    Rows only accept text of their exact capacity; this is the helper
    callers use before `BoardController.write`. Truncation always keeps the
    leading characters.

    Args:
        text: Text to fit
        capacity: Target row capacity
        align: Where the text sits when padding ("left", "right", "center")
    """
    if capacity < 0:
        raise ValueError(f"capacity must be >= 0, got {capacity}")
    if align not in ("left", "right", "center"):
        raise ValueError(f"Invalid align '{align}'")

    text = text[:capacity]
    if align == "right":
        return text.rjust(capacity)
    if align == "center":
        return text.center(capacity)
    return text.ljust(capacity)

"""Frame-to-pointer command mapping.

Each frame maps independently to one ``MouseCommand``; nothing carries
over from the previous frame.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .framing import Frame

CENTER = 512
AXIS_LIMIT = 511
DEADZONE = 40  # half-width of the square deadzone, per axis


class Click(Enum):
    """Button to click for a frame."""

    NONE = "none"
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class MouseCommand:
    """Normalized pointer action for one frame."""

    dx: int = 0
    dy: int = 0
    click: Click = Click.NONE
    scroll: int = 0


def decode_click(left: int, right: int) -> Click:
    """Decode the click flags. Right wins when both are set."""
    if right == 1:
        return Click.RIGHT
    if left == 1:
        return Click.LEFT
    return Click.NONE


def decode_axis(raw: int) -> int:
    """Recenter, clamp to +/-AXIS_LIMIT, then zero anything inside the deadzone."""
    value = max(-AXIS_LIMIT, min(AXIS_LIMIT, raw - CENTER))
    if abs(value) < DEADZONE:
        return 0
    return value


def decode_scroll(up: int, down: int) -> int:
    """Decode the scroll flags into -1, 0 or +1. Both set cancel out."""
    up_set = up == 1
    down_set = down == 1
    if up_set == down_set:
        return 0
    return 1 if up_set else -1


def scale(value: int, sensitivity: int) -> int:
    """Divide by sensitivity, truncating toward zero.

    A zero divisor yields 0 instead of raising.
    """
    if sensitivity == 0:
        return 0
    quotient = abs(value) // abs(sensitivity)
    return quotient if (value < 0) == (sensitivity < 0) else -quotient


def map_frame(frame: Frame) -> MouseCommand:
    """Map a decoded frame to the pointer action it describes."""
    click = decode_click(frame.left_click, frame.right_click)
    x = decode_axis(frame.raw_x)
    y = decode_axis(frame.raw_y)
    scroll = decode_scroll(frame.scroll_up, frame.scroll_down)
    return MouseCommand(
        dx=scale(x, frame.sensitivity),
        dy=scale(y, frame.sensitivity),
        click=click,
        scroll=scroll,
    )

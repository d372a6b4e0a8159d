"""Record decoder and builder for the joystick transmitter's text frames.

Record layout (one line per sample, terminated by ``\\r``)::

    +-----------+------------+------+------+-------------+----------+------------+----+
    | leftClick | rightClick | rawX | rawY | sensitivity | scrollUp | scrollDown | CR |
    +-----------+------------+------+------+-------------+----------+------------+----+

- Fields are signed decimal integers separated by one or more whitespace chars
- Axis values are 0-1023 with rest position near 512
- Flags are 0/1; anything other than 1 reads as "not pressed"
- No checksum, no escaping; the terminator is the only framing
"""

from __future__ import annotations

import re
from dataclasses import dataclass, astuple
from enum import Enum

RECORD_TERMINATOR = b"\r"
FIELD_COUNT = 7

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_INTEGER_TOKEN = re.compile(r"[+-]?[0-9]+")
# Unicode White_Space; str.split() would also split on \x1c-\x1f
_SEPARATOR = re.compile(
    r"[\t\n\x0b\x0c\r \x85\xa0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000]+"
)


@dataclass(frozen=True)
class Frame:
    """A decoded telemetry frame."""

    left_click: int
    right_click: int
    raw_x: int
    raw_y: int
    sensitivity: int
    scroll_up: int
    scroll_down: int

    def __repr__(self) -> str:
        return (
            f"Frame(click=({self.left_click},{self.right_click}), "
            f"raw=({self.raw_x},{self.raw_y}), s={self.sensitivity}, "
            f"scroll=({self.scroll_up},{self.scroll_down}))"
        )


class RejectReason(Enum):
    """Why a raw record could not be decoded."""

    INVALID_ENCODING = "invalid_encoding"
    INVALID_NUMBER = "invalid_number"
    WRONG_FIELD_COUNT = "wrong_field_count"


@dataclass(frozen=True)
class Rejected:
    """A record the decoder refused; the caller skips it."""

    reason: RejectReason
    raw: bytes


def _parse_int32(token: str) -> int | None:
    if not _INTEGER_TOKEN.fullmatch(token):
        return None
    value = int(token)
    if not INT32_MIN <= value <= INT32_MAX:
        return None
    return value


def decode(raw: bytes) -> Frame | Rejected:
    """Decode one raw record into a Frame.

    Args:
        raw: Bytes read up to and including the record terminator.

    Returns:
        A ``Frame`` on success, or a ``Rejected`` naming the first check
        that failed: encoding, then number parsing, then field count.
    """
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        return Rejected(RejectReason.INVALID_ENCODING, raw)

    values: list[int] = []
    for token in _SEPARATOR.split(text):
        if not token:
            continue
        value = _parse_int32(token)
        if value is None:
            return Rejected(RejectReason.INVALID_NUMBER, raw)
        values.append(value)

    if len(values) != FIELD_COUNT:
        return Rejected(RejectReason.WRONG_FIELD_COUNT, raw)

    return Frame(*values)


def build_record(frame: Frame) -> bytes:
    """Render a Frame the way the transmitter sends it."""
    body = " ".join(str(v) for v in astuple(frame))
    return body.encode("ascii") + RECORD_TERMINATOR

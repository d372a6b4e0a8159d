"""Receiver entry point: serial records in, pointer actions out.

Reads records from the transmitter forever, decoding and applying each
one before the next read.
"""

from __future__ import annotations

import argparse
import logging
from typing import Protocol

from .protocol.commands import Click, MouseCommand, map_frame
from .protocol.framing import Rejected, decode
from .pointer.pynput_pointer import PointerError, PynputPointer
from .transport.serial_connection import (
    DEFAULT_BAUDRATE,
    SerialConnection,
    list_ports,
    select_port,
)

logger = logging.getLogger(__name__)


class RecordSource(Protocol):
    def read_record(self) -> bytes: ...


class Pointer(Protocol):
    def get_position(self) -> tuple[int, int]: ...

    def move_to(self, x: int, y: int) -> None: ...

    def click(self, button: Click) -> None: ...

    def scroll(self, delta: int) -> None: ...


def apply_command(command: MouseCommand, pointer: Pointer) -> None:
    """Move relative to the current cursor, then click, then scroll."""
    x, y = pointer.get_position()
    pointer.move_to(x + command.dx, y + command.dy)
    if command.click is not Click.NONE:
        pointer.click(command.click)
    if command.scroll != 0:
        pointer.scroll(command.scroll)


def handle_record(record: bytes, pointer: Pointer) -> MouseCommand | None:
    """Decode and apply one record.

    Returns:
        The applied command, or None if the record was rejected.
    """
    result = decode(record)
    if isinstance(result, Rejected):
        logger.debug("Skipping record (%s): %r", result.reason.value, result.raw)
        return None

    command = map_frame(result)
    apply_command(command, pointer)
    return command


def run(source: RecordSource, pointer: Pointer) -> None:
    """Process records until the source or the pointer raises."""
    while True:
        handle_record(source.read_record(), pointer)


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="joystick-mouse",
        description="Move the mouse pointer from a serial joystick transmitter.",
    )
    parser.add_argument(
        "--port",
        help="serial device to read from; prompts when omitted",
    )
    parser.add_argument(
        "--baudrate",
        type=int,
        default=DEFAULT_BAUDRATE,
        help=f"serial baud rate (default: {DEFAULT_BAUDRATE})",
    )
    parser.add_argument(
        "--list-ports",
        action="store_true",
        help="print available serial ports and exit",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="log skipped records and other debug output",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the receiver until interrupted. Returns a process exit status."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list_ports:
        for name in list_ports():
            print(name)
        return 0

    try:
        port = args.port or select_port(list_ports())
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 0
    except EOFError:
        logger.error("No port selected")
        return 2
    except ValueError as e:
        logger.error("%s", e)
        return 2

    connection = SerialConnection(port, args.baudrate)
    pointer = PynputPointer()
    try:
        pointer.open()
        connection.open()
        run(connection, pointer)
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 0
    except (ConnectionError, PointerError) as e:
        logger.error("%s", e)
        return 1
    finally:
        connection.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

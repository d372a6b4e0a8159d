"""Serial connection to the joystick transmitter.

The transmitter streams one text record per sample over a USB-serial
link at 115200 baud. Reads block with no timeout: when the transmitter
goes quiet the receiver simply waits.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

import serial
import serial.tools.list_ports

from ..protocol.framing import RECORD_TERMINATOR

logger = logging.getLogger(__name__)

DEFAULT_BAUDRATE = 115_200


@dataclass
class PortInfo:
    """Identification of the opened port."""

    device: str = ""
    baudrate: int = DEFAULT_BAUDRATE


def list_ports() -> list[str]:
    """Return the device names of all serial ports on this host."""
    return [port.device for port in serial.tools.list_ports.comports()]


def select_port(
    ports: list[str],
    choose: Callable[[str], str] = input,
) -> str:
    """Prompt for one of ``ports`` and return the chosen device name.

    Args:
        ports: Candidate device names, as from :func:`list_ports`.
        choose: Prompt function returning the user's answer.

    Raises:
        ValueError: If there are no ports or the answer is not a listed
            index or device name.
    """
    if not ports:
        raise ValueError("No serial ports found")

    lines = [f"  [{i}] {name}" for i, name in enumerate(ports)]
    answer = choose("select a port\n" + "\n".join(lines) + "\n> ").strip()

    if answer in ports:
        return answer
    if answer.isdecimal() and int(answer) < len(ports):
        return ports[int(answer)]
    raise ValueError(f"Invalid port selection {answer!r}. Valid: {ports}")


class SerialConnection:
    """Manages the serial link to the transmitter.

    Usage::

        conn = SerialConnection("/dev/ttyACM0")
        conn.open()
        record = conn.read_record()
        conn.close()
    """

    def __init__(self, port: str, baudrate: int = DEFAULT_BAUDRATE) -> None:
        self._port_info = PortInfo(device=port, baudrate=baudrate)
        self._serial: serial.Serial | None = None

    @property
    def connected(self) -> bool:
        return self._serial is not None

    def open(self) -> PortInfo:
        """Open the port with blocking reads.

        Raises:
            ConnectionError: If the port cannot be opened.
        """
        try:
            self._serial = serial.Serial(
                self._port_info.device,
                self._port_info.baudrate,
                timeout=None,
            )
        except (serial.SerialException, OSError) as e:
            raise ConnectionError(
                f"Could not open serial port {self._port_info.device} "
                f"at {self._port_info.baudrate} baud: {e}"
            ) from e

        logger.info(
            "Opened %s at %d baud",
            self._port_info.device,
            self._port_info.baudrate,
        )
        return self._port_info

    def close(self) -> None:
        """Close the serial port."""
        if self._serial is None:
            return

        try:
            self._serial.close()
        except (serial.SerialException, OSError) as e:
            logger.warning("Error closing port: %s", e)
        finally:
            self._serial = None
            logger.info("Closed %s", self._port_info.device)

    def read_record(self) -> bytes:
        """Block until one terminated record arrives and return it.

        The returned bytes include the terminator when one was read.

        Raises:
            ConnectionError: If not connected or the read fails.
        """
        if self._serial is None:
            raise ConnectionError("Not connected to serial port")

        try:
            return self._serial.read_until(RECORD_TERMINATOR)
        except (serial.SerialException, OSError) as e:
            raise ConnectionError(
                f"Read from {self._port_info.device} failed: {e}"
            ) from e

    def __enter__(self) -> SerialConnection:
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

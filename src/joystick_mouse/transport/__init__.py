"""Transport layer: serial link to the transmitter."""

from .serial_connection import SerialConnection, list_ports, select_port

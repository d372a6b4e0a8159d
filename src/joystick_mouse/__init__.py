"""Drive the host mouse pointer from a serial joystick transmitter."""

__version__ = "0.1.0"

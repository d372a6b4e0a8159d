"""Host pointer control through pynput.

pynput needs a display connection on Linux, so it is imported only when a
pointer is opened.
"""

from __future__ import annotations

import logging

from ..protocol.commands import Click

logger = logging.getLogger(__name__)


class PointerError(RuntimeError):
    """The host pointer backend rejected a call."""


def _load_backend():
    """Import pynput's mouse controller and button enum."""
    from pynput.mouse import Button, Controller

    return Controller, Button


class PynputPointer:
    """Moves, clicks and scrolls the host cursor.

    Usage::

        pointer = PynputPointer()
        pointer.open()
        x, y = pointer.get_position()
        pointer.move_to(x + 10, y)
    """

    def __init__(self) -> None:
        self._controller = None
        self._buttons: dict[Click, object] = {}

    @property
    def opened(self) -> bool:
        return self._controller is not None

    def open(self) -> None:
        """Create the pynput controller.

        Raises:
            PointerError: If pynput cannot reach the host display.
        """
        try:
            controller_cls, button = _load_backend()
            self._controller = controller_cls()
        except Exception as e:
            raise PointerError(f"Could not open host pointer: {e}") from e

        self._buttons = {Click.LEFT: button.left, Click.RIGHT: button.right}
        logger.debug("Pointer backend ready")

    def _get_controller(self):
        if self._controller is None:
            raise PointerError("Pointer not opened")
        return self._controller

    def get_position(self) -> tuple[int, int]:
        controller = self._get_controller()
        try:
            x, y = controller.position
        except Exception as e:
            raise PointerError(f"Could not read cursor position: {e}") from e
        return int(x), int(y)

    def move_to(self, x: int, y: int) -> None:
        controller = self._get_controller()
        try:
            controller.position = (x, y)
        except Exception as e:
            raise PointerError(f"Could not move cursor to ({x}, {y}): {e}") from e

    def click(self, button: Click) -> None:
        """Single-click ``button``. ``Click.NONE`` is ignored."""
        if button is Click.NONE:
            return
        controller = self._get_controller()
        try:
            controller.click(self._buttons[button])
        except Exception as e:
            raise PointerError(f"Could not click {button.value}: {e}") from e

    def scroll(self, delta: int) -> None:
        """Scroll vertically by ``delta`` notches; positive scrolls up."""
        controller = self._get_controller()
        try:
            controller.scroll(0, delta)
        except Exception as e:
            raise PointerError(f"Could not scroll by {delta}: {e}") from e

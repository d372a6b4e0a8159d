"""Tests for the receive loop and entry point."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock, patch

import pytest

from joystick_mouse import receiver
from joystick_mouse.pointer.pynput_pointer import PointerError
from joystick_mouse.protocol.commands import Click, MouseCommand


class FakePointer:
    """Records pointer calls in order."""

    def __init__(self, position: tuple[int, int] = (500, 400)) -> None:
        self.position = position
        self.calls: list[tuple] = []

    def get_position(self) -> tuple[int, int]:
        self.calls.append(("get_position",))
        return self.position

    def move_to(self, x: int, y: int) -> None:
        self.calls.append(("move_to", x, y))
        self.position = (x, y)

    def click(self, button: Click) -> None:
        self.calls.append(("click", button))

    def scroll(self, delta: int) -> None:
        self.calls.append(("scroll", delta))


class EndOfStream(Exception):
    pass


class FakeSource:
    def __init__(self, records: list[bytes]) -> None:
        self._records = list(records)

    def read_record(self) -> bytes:
        if not self._records:
            raise EndOfStream
        return self._records.pop(0)


def test_handle_record_applies_in_order():
    """Move, then click, then scroll."""
    pointer = FakePointer((500, 400))
    command = receiver.handle_record(b"1 0 700 300 2 1 0\r", pointer)

    assert command == MouseCommand(dx=94, dy=-106, click=Click.LEFT, scroll=1)
    assert pointer.calls == [
        ("get_position",),
        ("move_to", 594, 294),
        ("click", Click.LEFT),
        ("scroll", 1),
    ]


def test_handle_record_idle_only_moves():
    """No click and no scroll means only the (zero) move is issued."""
    pointer = FakePointer((10, 20))
    receiver.handle_record(b"0 0 512 512 2 0 0\r", pointer)
    assert pointer.calls == [("get_position",), ("move_to", 10, 20)]


def test_handle_record_rejected_touches_nothing(caplog):
    pointer = FakePointer()
    with caplog.at_level(logging.DEBUG, logger="joystick_mouse.receiver"):
        assert receiver.handle_record(b"0 0 abc 512 2 0 0\r", pointer) is None
    assert pointer.calls == []
    assert "invalid_number" in caplog.text


@pytest.mark.parametrize(
    "record",
    [b"0 0 512 512 2 0\r", b"0 0 512 512 2 0 0 0\r", b"\xff\xfe\r"],
)
def test_handle_record_skips_bad_records(record):
    pointer = FakePointer()
    assert receiver.handle_record(record, pointer) is None
    assert pointer.calls == []


def test_position_read_fresh_each_record():
    """Displacement is relative to wherever the cursor is now."""
    pointer = FakePointer((0, 0))
    receiver.handle_record(b"0 0 612 512 1 0 0\r", pointer)
    pointer.position = (1000, 1000)  # moved by someone else
    receiver.handle_record(b"0 0 612 512 1 0 0\r", pointer)
    moves = [c for c in pointer.calls if c[0] == "move_to"]
    assert moves == [("move_to", 100, 0), ("move_to", 1100, 1000)]


def test_run_skips_bad_records_and_continues():
    source = FakeSource([
        b"garbage\r",
        b"0 1 512 512 1 0 0\r",
        b"0 0 512 512 1 0\r",
        b"0 0 512 512 0 0 1\r",
    ])
    pointer = FakePointer()
    with pytest.raises(EndOfStream):
        receiver.run(source, pointer)

    assert ("click", Click.RIGHT) in pointer.calls
    assert ("scroll", -1) in pointer.calls
    assert sum(1 for c in pointer.calls if c[0] == "move_to") == 2


def test_run_stops_on_pointer_failure():
    pointer = MagicMock()
    pointer.get_position.side_effect = PointerError("gone")
    source = FakeSource([b"0 0 512 512 1 0 0\r"])
    with pytest.raises(PointerError):
        receiver.run(source, pointer)


def test_main_list_ports(capsys):
    with patch.object(receiver, "list_ports", return_value=["COM3", "COM4"]):
        assert receiver.main(["--list-ports"]) == 0
    assert capsys.readouterr().out.split() == ["COM3", "COM4"]


def test_main_no_ports():
    with patch.object(receiver, "list_ports", return_value=[]):
        assert receiver.main([]) == 2


def test_main_interrupt_at_port_prompt():
    """Ctrl-C while choosing a port exits cleanly without opening anything."""
    with patch.object(receiver, "list_ports", return_value=["COM3"]), \
            patch.object(receiver, "select_port", side_effect=KeyboardInterrupt), \
            patch.object(receiver, "SerialConnection") as conn_cls:
        assert receiver.main([]) == 0
    conn_cls.assert_not_called()


def test_main_eof_at_port_prompt():
    """Closed stdin counts as no selection."""
    with patch.object(receiver, "list_ports", return_value=["COM3"]), \
            patch.object(receiver, "select_port", side_effect=EOFError), \
            patch.object(receiver, "SerialConnection") as conn_cls:
        assert receiver.main([]) == 2
    conn_cls.assert_not_called()


def test_main_connection_error_exits_1():
    conn = MagicMock()
    conn.open.side_effect = ConnectionError("busy")
    with patch.object(receiver, "SerialConnection", return_value=conn) as conn_cls, \
            patch.object(receiver, "PynputPointer"):
        assert receiver.main(["--port", "COM3", "--baudrate", "9600"]) == 1
    conn_cls.assert_called_once_with("COM3", 9600)
    conn.close.assert_called_once()


def test_main_interrupt_exits_cleanly():
    conn = MagicMock()
    with patch.object(receiver, "SerialConnection", return_value=conn), \
            patch.object(receiver, "PynputPointer"), \
            patch.object(receiver, "run", side_effect=KeyboardInterrupt):
        assert receiver.main(["--port", "COM3"]) == 0
    conn.close.assert_called_once()


def test_main_prompts_when_no_port_given():
    conn = MagicMock()
    with patch.object(receiver, "list_ports", return_value=["COM3"]), \
            patch.object(receiver, "select_port", return_value="COM3") as select, \
            patch.object(receiver, "SerialConnection", return_value=conn) as conn_cls, \
            patch.object(receiver, "PynputPointer"), \
            patch.object(receiver, "run", side_effect=KeyboardInterrupt):
        receiver.main([])
    select.assert_called_once_with(["COM3"])
    conn_cls.assert_called_once_with("COM3", 115_200)

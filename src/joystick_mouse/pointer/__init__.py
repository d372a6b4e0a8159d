"""Host pointer adapters."""

from .pynput_pointer import PointerError, PynputPointer

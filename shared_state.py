"""
Shared State Module
Process-wide settings and status shared by the click loop, the hotkey
listeners and the control window.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Union

logger = logging.getLogger(__name__)


class Hotkey(Enum):
    """Keys selectable as the start/stop toggle."""
    F1 = "f1"
    F2 = "f2"
    F3 = "f3"
    F4 = "f4"
    F5 = "f5"
    F6 = "f6"
    F7 = "f7"
    F8 = "f8"
    F9 = "f9"
    F10 = "f10"

    def __str__(self) -> str:
        return self.name

    @property
    def key_id(self) -> str:
        """Key identifier as delivered by the keyboard subscription."""
        return self.value

    @classmethod
    def parse(cls, value: Union["Hotkey", str]) -> "Hotkey":
        """
        Resolve a Hotkey from a member or a case-insensitive name ("F6", "f6").

        Raises:
            ValueError: If the value names no supported key.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        supported = ", ".join(member.name for member in cls)
        raise ValueError(f"Unsupported hotkey {value!r}. Use one of: {supported}")


DEFAULT_HOTKEY = Hotkey.F6
DEFAULT_INTERVAL_MS = 800


@dataclass(frozen=True)
class StateSnapshot:
    """Read-only view of the shared state for rendering."""
    running: bool
    interval_ms: int
    hotkey: Hotkey


class SharedState:
    """
    Single source of truth for the clicker.

    The three fields are synchronized independently:
        - running and interval_ms are plain attributes; a single attribute
          load/store is atomic under the interpreter lock, so readers and
          writers never block each other.
        - hotkey sits behind a short lock held only around the read/write.

    No operation updates more than one field at a time.
    """

    def __init__(self, interval_ms: int = DEFAULT_INTERVAL_MS, hotkey: Hotkey = DEFAULT_HOTKEY):
        self._running = False
        self._interval_ms = int(interval_ms)
        self._hotkey = hotkey
        self._hotkey_lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._running

    def set_running(self, value: bool) -> bool:
        """
        Set the running flag.

        Returns:
            True if the flag changed, False if it already held this value.
        """
        value = bool(value)
        if self._running == value:
            return False
        self._running = value
        logger.info("Clicker STARTED." if value else "Clicker STOPPED.")
        return True

    def toggle_running(self) -> bool:
        """Flip the running flag and return the new value."""
        target = not self._running
        self.set_running(target)
        return target

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @interval_ms.setter
    def interval_ms(self, value: int) -> None:
        # Callers clamp before writing
        self._interval_ms = int(value)

    @property
    def hotkey(self) -> Hotkey:
        with self._hotkey_lock:
            return self._hotkey

    @hotkey.setter
    def hotkey(self, value: Hotkey) -> None:
        with self._hotkey_lock:
            self._hotkey = value

    def snapshot(self) -> StateSnapshot:
        """Read each field once; fields are not read as a single atomic unit."""
        return StateSnapshot(
            running=self._running,
            interval_ms=self._interval_ms,
            hotkey=self.hotkey,
        )

"""
Control Surface Module
Translates user intents (start, stop, set interval, set hotkey) into shared
state changes and provides the snapshot the window renders.

All methods are meant to be called from the single GUI thread.
"""

import logging
import math
import threading
from typing import Callable, List, Optional, Union

from config import ClickerConfig, quantize_interval
from hotkey_listener import (
    HotkeyListener, KeyboardSubscription, ListenerRegistry,
    pynput_subscribe, spawn_hotkey_listener,
)
from shared_state import Hotkey, SharedState, StateSnapshot

logger = logging.getLogger(__name__)


class ControlSurface:
    """Intent handler sitting between the window and the shared state."""

    def __init__(self,
                 state: SharedState,
                 registry: ListenerRegistry,
                 config: Optional[ClickerConfig] = None,
                 subscribe: KeyboardSubscription = pynput_subscribe):
        self._state = state
        self._registry = registry
        self._config = config or ClickerConfig()
        self._subscribe = subscribe
        self._error_callback: Optional[Callable[[str], None]] = None
        self._error_lock = threading.Lock()
        self._pending_errors: List[str] = []

    def set_error_callback(self, callback: Callable[[str], None]) -> None:
        """
        Set callback for background errors (may be called from any thread).

        Errors reported before a callback was set are delivered to it now.
        """
        with self._error_lock:
            self._error_callback = callback
            pending, self._pending_errors = self._pending_errors, []
        for message in pending:
            callback(message)

    def start(self) -> bool:
        """Start clicking. Returns False if already running."""
        return self._state.set_running(True)

    def stop(self) -> bool:
        """Stop clicking. Returns False if already stopped."""
        return self._state.set_running(False)

    def set_interval(self, value: Union[int, float, str, None]) -> int:
        """
        Store a new click interval, rounded to the step and clamped to range.

        Malformed input is logged and ignored.

        Returns:
            The interval now stored, in milliseconds.
        """
        try:
            raw = float(value)
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid interval %r", value)
            return self._state.interval_ms

        if math.isnan(raw):
            logger.warning("Ignoring invalid interval %r", value)
            return self._state.interval_ms

        interval = quantize_interval(
            raw,
            self._config.min_interval_ms,
            self._config.max_interval_ms,
            self._config.interval_step_ms,
        )
        self._state.interval_ms = interval
        logger.info("Delay updated to %d ms", interval)
        return interval

    def set_hotkey(self, key: Union[Hotkey, str]) -> Hotkey:
        """
        Rebind the toggle hotkey and spawn a listener for it.

        Re-selecting the current key is a no-op unless its listener has died,
        in which case a fresh listener is started.

        Raises:
            ValueError: If the key is not a supported hotkey.
        """
        hotkey = Hotkey.parse(key)

        if hotkey == self._state.hotkey and self.listener_alive:
            return hotkey

        self._state.hotkey = hotkey
        logger.info("Hotkey changed to %s", hotkey)
        # Hotkey lock is released by now
        self.spawn_listener()
        return hotkey

    def spawn_listener(self) -> HotkeyListener:
        """Start a listener for the current hotkey and make it the active one."""
        return spawn_hotkey_listener(
            self._state,
            self._registry,
            subscribe=self._subscribe,
            suppress_key_repeat=self._config.suppress_key_repeat,
            on_error=self._on_listener_error,
        )

    def _on_listener_error(self, message: str) -> None:
        """Forward listener failures (called on the listener thread)."""
        with self._error_lock:
            callback = self._error_callback
            if callback is None:
                self._pending_errors.append(message)
                return
        callback(message)

    def snapshot(self) -> StateSnapshot:
        """Current state for rendering."""
        return self._state.snapshot()

    @property
    def listener_alive(self) -> bool:
        """Whether the active hotkey listener is still subscribed."""
        active = self._registry.active
        return active is not None and active.is_alive

    @property
    def interval_bounds(self) -> tuple:
        """(minimum, maximum, step) for interval controls."""
        return (
            self._config.min_interval_ms,
            self._config.max_interval_ms,
            self._config.interval_step_ms,
        )

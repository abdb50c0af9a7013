"""
Click Engine Module
Background loop that emits left clicks at the configured interval while the
shared running flag is set.
"""

import logging
import threading
import time
from typing import Callable, Optional

from shared_state import SharedState

logger = logging.getLogger(__name__)

_mouse_controller = None


def pynput_click() -> None:
    """Click the left mouse button at the current pointer position."""
    global _mouse_controller
    from pynput import mouse

    if _mouse_controller is None:
        _mouse_controller = mouse.Controller()
    _mouse_controller.click(mouse.Button.left)


class ClickEngine:
    """
    Click emission loop.

    Runs forever on its own daemon thread once started. The running flag and
    the interval are re-read every cycle, so changes take effect without a
    restart. There is no stop method: the thread ends with the process.
    """

    POLL_INTERVAL_MS = 50

    def __init__(self,
                 state: SharedState,
                 click: Callable[[], None] = pynput_click,
                 poll_interval_ms: int = POLL_INTERVAL_MS,
                 warmup_delay_ms: int = 0,
                 sleep: Callable[[float], None] = time.sleep,
                 clock: Callable[[], float] = time.monotonic):
        """
        Initialize the click engine.

        Args:
            state: Shared state to read the running flag and interval from.
            click: Primitive performing one primary click at the pointer.
            poll_interval_ms: Idle check period while not running.
            warmup_delay_ms: One-time pause before the first click of each run.
            sleep: Blocking sleep taking seconds.
            clock: Monotonic clock in seconds, used for click timing logs.
        """
        self._state = state
        self._click = click
        self.poll_interval_ms = poll_interval_ms
        self.warmup_delay_ms = warmup_delay_ms
        self._sleep = sleep
        self._clock = clock

        self._thread: Optional[threading.Thread] = None
        self._last_click_time: Optional[float] = None
        self._clicks_emitted: int = 0
        self._failed_clicks: int = 0

    def start(self) -> None:
        """
        Start the click loop thread.

        Raises:
            RuntimeError: If the engine was already started.
        """
        if self._thread is not None:
            raise RuntimeError("Click engine already started")
        self._thread = threading.Thread(target=self.run, name="click-engine", daemon=True)
        self._thread.start()
        logger.info("Click engine started (poll %d ms, warm-up %d ms)",
                    self.poll_interval_ms, self.warmup_delay_ms)

    def run(self) -> None:
        """Main loop (runs in separate thread)."""
        while True:
            self.run_once()

    def run_once(self) -> None:
        """
        Run one outer cycle: an idle poll, or a full click run that lasts
        until the running flag is cleared.
        """
        if not self._state.running:
            self._sleep(self.poll_interval_ms / 1000.0)
            return

        logger.info("Starting auto-clicker (warm-up %d ms)", self.warmup_delay_ms)
        if self.warmup_delay_ms > 0:
            self._sleep(self.warmup_delay_ms / 1000.0)

        # Stop is only observed here, once per click + sleep
        while self._state.running:
            self._emit_click()
            self._sleep(self._state.interval_ms / 1000.0)

        logger.info("Clicker thread stopped after %d clicks", self._clicks_emitted)

    def _emit_click(self) -> None:
        try:
            self._click()
        except Exception:
            self._failed_clicks += 1
            logger.exception("Click failed; continuing")
            return

        self._clicks_emitted += 1
        now = self._clock()
        if self._last_click_time is not None:
            logger.debug("Clicked, %.1f ms since last click",
                         (now - self._last_click_time) * 1000.0)
        self._last_click_time = now

    @property
    def clicks_emitted(self) -> int:
        """Total successful clicks since the process started."""
        return self._clicks_emitted

    @property
    def failed_clicks(self) -> int:
        """Clicks whose primitive raised."""
        return self._failed_clicks

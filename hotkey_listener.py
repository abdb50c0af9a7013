"""
Hotkey Listener Module
Handles the global start/stop hotkey using pynput.

The keyboard subscription blocks its thread until it fails or the process
exits and offers no way to interrupt it. Changing the hotkey therefore
spawns a replacement listener and abandons the previous one in place: the
old thread keeps receiving events until exit but is no longer registered as
active, so its matches are ignored. Each hotkey change leaks one idle thread.
"""

import itertools
import logging
import threading
from enum import Enum
from typing import Callable, Optional

from shared_state import Hotkey, SharedState

logger = logging.getLogger(__name__)


class KeyEventKind(Enum):
    """Raw keyboard event kind."""
    PRESS = "press"
    RELEASE = "release"


class ListenerState(Enum):
    """Listener lifecycle. There is no cancelled state."""
    CREATED = "created"
    SUBSCRIBED = "subscribed"
    TERMINATED = "terminated"


KeyCallback = Callable[[KeyEventKind, str], None]
KeyboardSubscription = Callable[[KeyCallback], None]


def key_id_for(key) -> str:
    """Map a pynput key to the identifier used by HotkeyListener ("f6", "a", ...)."""
    name = getattr(key, "name", None)
    if name:
        return name
    char = getattr(key, "char", None)
    if char:
        return char.lower()
    return f"vk{getattr(key, 'vk', '?')}"


def pynput_subscribe(callback: KeyCallback) -> None:
    """
    Receive global key events until the listener stops.

    Blocks the calling thread. Errors raised inside the listener (missing
    input-monitoring permission, no display, ...) are re-raised here.
    """
    from pynput import keyboard

    def on_press(key):
        callback(KeyEventKind.PRESS, key_id_for(key))

    def on_release(key):
        callback(KeyEventKind.RELEASE, key_id_for(key))

    listener = keyboard.Listener(on_press=on_press, on_release=on_release)
    listener.start()
    listener.join()


class HotkeyListener:
    """
    One subscription to the keyboard stream, bound to the hotkey captured at
    creation time. A later hotkey change is never noticed by this instance.
    """

    _ids = itertools.count(1)

    def __init__(self,
                 state: SharedState,
                 registry: "ListenerRegistry",
                 subscribe: KeyboardSubscription = pynput_subscribe,
                 suppress_key_repeat: bool = False,
                 on_error: Optional[Callable[[str], None]] = None):
        """
        Initialize the listener.

        Args:
            state: Shared state; its hotkey is read once here and running is toggled later.
            registry: Registry deciding whether this listener is the active one.
            subscribe: Blocking keyboard subscription.
            suppress_key_repeat: Ignore repeated presses until the key is released.
            on_error: Called with a message if the subscription fails.
        """
        self._state = state
        self._registry = registry
        self._subscribe = subscribe
        self._on_error = on_error
        self.suppress_key_repeat = suppress_key_repeat

        self.hotkey: Hotkey = state.hotkey
        self.name = f"hotkey-listener-{next(self._ids)}"
        self.listener_state = ListenerState.CREATED
        self.error: Optional[BaseException] = None

        self._key_down = False
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """Start the subscription on a new daemon thread."""
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()

    def join(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the listener thread to end.

        Only returns early if the subscription fails; a healthy listener runs
        until process exit.

        Returns:
            True if the thread has ended.
        """
        if self._thread is None:
            return False
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def _run(self) -> None:
        self.listener_state = ListenerState.SUBSCRIBED
        logger.info("Hotkey listener %s started for %s", self.name, self.hotkey)
        try:
            self._subscribe(self.handle_event)
        except Exception as e:
            self.error = e
            self.listener_state = ListenerState.TERMINATED
            logger.exception("Error listening to keyboard events (%s)", self.name)
            if self._on_error:
                self._on_error(f"Hotkey {self.hotkey} stopped working: {e}")
            return

        self.listener_state = ListenerState.TERMINATED
        logger.info("Hotkey listener %s ended", self.name)

    def handle_event(self, kind: KeyEventKind, key_id: str) -> bool:
        """
        Process one keyboard event.

        Returns:
            True if the event toggled the running flag.
        """
        if key_id != self.hotkey.key_id:
            return False

        if kind is KeyEventKind.RELEASE:
            self._key_down = False
            return False

        if self.suppress_key_repeat and self._key_down:
            return False
        self._key_down = True

        if not self._registry.is_active(self):
            logger.debug("Ignoring %s on abandoned listener %s", self.hotkey, self.name)
            return False

        running = self._state.toggle_running()
        logger.info("Hotkey %s pressed, running=%s", self.hotkey, running)
        return True

    @property
    def is_alive(self) -> bool:
        """Whether the listener has not terminated."""
        return self.listener_state is not ListenerState.TERMINATED


class ListenerRegistry:
    """Holds the active listener handle."""

    def __init__(self):
        self._lock = threading.Lock()
        self._active: Optional[HotkeyListener] = None
        self._abandoned_count = 0

    def install(self, listener: HotkeyListener) -> Optional[HotkeyListener]:
        """
        Make a listener the active one.

        The previous listener is dropped without joining or signalling it.

        Returns:
            The abandoned listener, if any.
        """
        with self._lock:
            previous = self._active
            self._active = listener
            if previous is not None:
                self._abandoned_count += 1

        if previous is not None:
            logger.info("Abandoning previous listener %s (%s); it keeps running until exit",
                        previous.name, previous.hotkey)
        return previous

    def is_active(self, listener: HotkeyListener) -> bool:
        with self._lock:
            return self._active is listener

    @property
    def active(self) -> Optional[HotkeyListener]:
        with self._lock:
            return self._active

    @property
    def abandoned_count(self) -> int:
        with self._lock:
            return self._abandoned_count


def spawn_hotkey_listener(state: SharedState,
                          registry: ListenerRegistry,
                          subscribe: KeyboardSubscription = pynput_subscribe,
                          suppress_key_repeat: bool = False,
                          on_error: Optional[Callable[[str], None]] = None) -> HotkeyListener:
    """
    Create a listener for the current hotkey, install it as active, and start it.

    Must not be called while holding the hotkey lock.
    """
    listener = HotkeyListener(
        state, registry,
        subscribe=subscribe,
        suppress_key_repeat=suppress_key_repeat,
        on_error=on_error,
    )
    # Active before its first event can arrive
    registry.install(listener)
    listener.start()
    return listener

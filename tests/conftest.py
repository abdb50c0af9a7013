import threading
import time

import pytest

from config import ClickerConfig
from control_surface import ControlSurface
from hotkey_listener import KeyEventKind, ListenerRegistry
from shared_state import SharedState


class FakeKeyboard:
    """
    Stand-in for the blocking keyboard subscription.

    Every subscriber blocks until close(); press()/release() deliver an event
    to all subscribers, the way the OS delivers to every hook.
    """

    def __init__(self, fail_times: int = 0, error: Exception = None):
        self.callbacks = []
        self._lock = threading.Lock()
        self._closed = threading.Event()
        self._fail_times = fail_times
        self._error = error or OSError("input monitoring not permitted")

    def subscribe(self, callback):
        with self._lock:
            if self._fail_times > 0:
                self._fail_times -= 1
                raise self._error
            self.callbacks.append(callback)
        self._closed.wait()

    def wait_for_subscribers(self, count: int, timeout: float = 2.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            with self._lock:
                if len(self.callbacks) >= count:
                    return True
            time.sleep(0.005)
        return False

    def press(self, key_id: str) -> None:
        with self._lock:
            callbacks = list(self.callbacks)
        for callback in callbacks:
            callback(KeyEventKind.PRESS, key_id)

    def release(self, key_id: str) -> None:
        with self._lock:
            callbacks = list(self.callbacks)
        for callback in callbacks:
            callback(KeyEventKind.RELEASE, key_id)

    def close(self) -> None:
        self._closed.set()


class ScriptedSleep:
    """Records requested sleeps and runs a hook instead of blocking."""

    def __init__(self, hook=None):
        self.calls = []
        self._hook = hook

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        if self._hook:
            self._hook(len(self.calls), seconds)


@pytest.fixture
def state():
    return SharedState()


@pytest.fixture
def registry():
    return ListenerRegistry()


@pytest.fixture
def keyboard():
    kb = FakeKeyboard()
    yield kb
    kb.close()


@pytest.fixture
def config():
    return ClickerConfig()


@pytest.fixture
def surface(state, registry, config, keyboard):
    return ControlSurface(state, registry, config, subscribe=keyboard.subscribe)

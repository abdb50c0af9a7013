import threading
from types import SimpleNamespace

import pytest

from conftest import FakeKeyboard
from hotkey_listener import (
    HotkeyListener, KeyEventKind, ListenerRegistry, ListenerState,
    key_id_for, spawn_hotkey_listener,
)
from shared_state import Hotkey


def spawn(state, registry, keyboard, **kwargs):
    expected = len(keyboard.callbacks) + 1
    listener = spawn_hotkey_listener(state, registry, subscribe=keyboard.subscribe, **kwargs)
    assert keyboard.wait_for_subscribers(expected)
    return listener


def test_press_toggles_running(state, registry, keyboard):
    spawn(state, registry, keyboard)

    keyboard.press("f6")
    assert state.running is True
    keyboard.press("f6")
    assert state.running is False


@pytest.mark.parametrize("presses", [2, 4, 10])
def test_even_number_of_presses_restores_state(state, registry, keyboard, presses):
    spawn(state, registry, keyboard)

    for _ in range(presses):
        keyboard.press("f6")
        keyboard.release("f6")

    assert state.running is False


def test_release_and_other_keys_are_ignored(state, registry, keyboard):
    spawn(state, registry, keyboard)

    keyboard.release("f6")
    keyboard.press("f7")
    keyboard.press("a")

    assert state.running is False


def test_listener_reaches_subscribed_state(state, registry, keyboard):
    listener = spawn(state, registry, keyboard)

    assert listener.listener_state is ListenerState.SUBSCRIBED
    assert listener.is_alive
    assert registry.active is listener


def test_hotkey_is_captured_at_creation(state, registry, keyboard):
    listener = spawn(state, registry, keyboard)

    state.hotkey = Hotkey.F7

    assert listener.hotkey is Hotkey.F6
    keyboard.press("f7")
    assert state.running is False
    keyboard.press("f6")
    assert state.running is True


def test_replacement_abandons_previous_listener(state, registry, keyboard):
    old = spawn(state, registry, keyboard)

    state.hotkey = Hotkey.F2
    new = spawn(state, registry, keyboard)

    assert registry.active is new
    assert registry.abandoned_count == 1
    # Still running in the background, just without effect
    assert old.is_alive
    assert not old.join(timeout=0.05)

    keyboard.press("f6")
    assert state.running is False
    keyboard.press("f2")
    assert state.running is True


def test_key_repeat_toggles_on_every_press_by_default(state, registry, keyboard):
    spawn(state, registry, keyboard)

    # Held key delivering auto-repeat presses
    for _ in range(3):
        keyboard.press("f6")

    assert state.running is True
    keyboard.press("f6")
    assert state.running is False


def test_key_repeat_suppressed_until_release(state, registry, keyboard):
    spawn(state, registry, keyboard, suppress_key_repeat=True)

    for _ in range(5):
        keyboard.press("f6")
    assert state.running is True

    keyboard.release("f6")
    keyboard.press("f6")
    assert state.running is False


def test_press_delivered_as_soon_as_subscribed_toggles(state, registry):
    pressed = threading.Event()
    release = threading.Event()

    def subscribe(callback):
        callback(KeyEventKind.PRESS, "f6")
        pressed.set()
        release.wait()

    spawn_hotkey_listener(state, registry, subscribe=subscribe)

    assert pressed.wait(2.0)
    assert state.running is True
    release.set()


def test_replacement_is_active_before_its_first_event(state, registry, keyboard):
    first = spawn(state, registry, keyboard)
    seen = []

    def subscribe(callback):
        seen.append(registry.is_active(first))
        callback(KeyEventKind.PRESS, "f6")

    second = spawn_hotkey_listener(state, registry, subscribe=subscribe)

    assert second.join(timeout=2.0)
    assert seen == [False]
    assert state.running is True


def test_subscription_failure_terminates_listener(state, registry):
    keyboard = FakeKeyboard(fail_times=1)
    errors = []

    listener = spawn_hotkey_listener(state, registry, subscribe=keyboard.subscribe,
                                     on_error=errors.append)

    assert listener.join(timeout=2.0)
    assert listener.listener_state is ListenerState.TERMINATED
    assert not listener.is_alive
    assert isinstance(listener.error, OSError)
    assert errors == ["Hotkey F6 stopped working: input monitoring not permitted"]
    keyboard.close()


def test_subscription_returning_terminates_listener(state, registry):
    keyboard = FakeKeyboard()
    listener = spawn(state, registry, keyboard)

    keyboard.close()

    assert listener.join(timeout=2.0)
    assert listener.listener_state is ListenerState.TERMINATED
    assert listener.error is None


def test_unregistered_listener_has_no_effect(state, registry):
    listener = HotkeyListener(state, registry, subscribe=lambda cb: None)

    assert listener.listener_state is ListenerState.CREATED
    assert listener.handle_event(KeyEventKind.PRESS, "f6") is False
    assert state.running is False

    registry.install(listener)
    assert listener.handle_event(KeyEventKind.PRESS, "f6") is True
    assert state.running is True


def test_registry_install_returns_previous(state):
    registry = ListenerRegistry()
    first = HotkeyListener(state, registry, subscribe=lambda cb: None)
    second = HotkeyListener(state, registry, subscribe=lambda cb: None)

    assert registry.install(first) is None
    assert registry.install(second) is first
    assert registry.is_active(second)
    assert not registry.is_active(first)
    assert registry.abandoned_count == 1


@pytest.mark.parametrize("key,expected", [
    (SimpleNamespace(name="f6"), "f6"),
    (SimpleNamespace(char="A"), "a"),
    (SimpleNamespace(char=None, vk=65), "vk65"),
])
def test_key_id_for_pynput_keys(key, expected):
    assert key_id_for(key) == expected

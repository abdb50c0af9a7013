import logging
import threading

import pytest

from shared_state import Hotkey, SharedState, StateSnapshot


def test_defaults():
    state = SharedState()
    assert state.running is False
    assert state.interval_ms == 800
    assert state.hotkey is Hotkey.F6


def test_set_running_reports_change_only_once(caplog):
    caplog.set_level(logging.INFO, logger="shared_state")
    state = SharedState()

    assert state.set_running(True) is True
    assert state.set_running(True) is False
    assert state.running is True

    started = [r for r in caplog.records if r.getMessage() == "Clicker STARTED."]
    assert len(started) == 1


def test_stop_when_stopped_is_silent(caplog):
    caplog.set_level(logging.INFO, logger="shared_state")
    state = SharedState()

    assert state.set_running(False) is False
    assert not [r for r in caplog.records if "STOPPED" in r.getMessage()]


def test_toggle_returns_new_value():
    state = SharedState()
    assert state.toggle_running() is True
    assert state.toggle_running() is False
    assert state.running is False


def test_snapshot_is_frozen():
    state = SharedState(interval_ms=250, hotkey=Hotkey.F9)
    state.set_running(True)

    snap = state.snapshot()
    assert snap == StateSnapshot(running=True, interval_ms=250, hotkey=Hotkey.F9)
    with pytest.raises(AttributeError):
        snap.running = False


def test_hotkey_writes_are_visible_across_threads():
    state = SharedState()

    def writer():
        state.hotkey = Hotkey.F2

    t = threading.Thread(target=writer)
    t.start()
    t.join()
    assert state.hotkey is Hotkey.F2


@pytest.mark.parametrize("name,expected", [
    ("F6", Hotkey.F6),
    ("f10", Hotkey.F10),
    (" f1 ", Hotkey.F1),
    (Hotkey.F3, Hotkey.F3),
])
def test_hotkey_parse(name, expected):
    assert Hotkey.parse(name) is expected


@pytest.mark.parametrize("bad", ["F11", "ctrl", "", None, 6])
def test_hotkey_parse_rejects_unknown(bad):
    with pytest.raises(ValueError):
        Hotkey.parse(bad)


def test_hotkey_str_and_key_id():
    assert str(Hotkey.F6) == "F6"
    assert Hotkey.F6.key_id == "f6"
    assert len(list(Hotkey)) == 10

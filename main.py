#!/usr/bin/env python3
"""
Auto Clicker
Clicks the left mouse button at a fixed interval, toggled with a global
hotkey (F6 by default) or the Start/Stop buttons.

Usage:
    python main.py [--interval MS] [--hotkey F1-F10] [--warmup MS] [--no-key-repeat]

The click loop and the hotkey listeners run on daemon threads with no
cancellation; they end only when the process exits. Closing the window is
the only way to shut down.
"""

import logging
import sys
import os

# Add the current directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from PyQt6.QtWidgets import QApplication
from PyQt6.QtCore import Qt

from click_engine import ClickEngine
from config import parse_args
from control_surface import ControlSurface
from hotkey_listener import ListenerRegistry
from shared_state import Hotkey, SharedState
from ui.main_window import MainWindow

logger = logging.getLogger(__name__)


def main():
    """Application entry point."""
    config = parse_args(sys.argv[1:])

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)-7s [%(threadName)s] %(name)s: %(message)s",
    )

    state = SharedState(interval_ms=config.interval_ms, hotkey=Hotkey.parse(config.hotkey))
    registry = ListenerRegistry()

    engine = ClickEngine(
        state,
        poll_interval_ms=config.poll_interval_ms,
        warmup_delay_ms=config.warmup_delay_ms,
    )
    engine.start()

    surface = ControlSurface(state, registry, config)

    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv)
    app.setApplicationName("Auto Clicker")
    app.setStyle("Fusion")

    window = MainWindow(surface, engine)
    window.show()

    # After the window so a startup failure reaches its error toast
    surface.spawn_listener()

    logger.info("Ready: interval %d ms, hotkey %s", config.interval_ms, config.hotkey)

    # Daemon threads are reclaimed at exit
    sys.exit(app.exec())


if __name__ == "__main__":
    main()

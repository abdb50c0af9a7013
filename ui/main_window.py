"""
Main Window
Auto clicker control window: status, delay slider, hotkey picker and
start/stop buttons.
"""

from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QPushButton, QComboBox, QLabel, QFrame, QSlider
)
from PyQt6.QtCore import Qt, QTimer, pyqtSignal, QObject
from PyQt6.QtGui import QFont

from click_engine import ClickEngine
from control_surface import ControlSurface
from shared_state import Hotkey, StateSnapshot
from ui.toast import ToastManager


class SignalBridge(QObject):
    """Bridge for thread-safe signal emission from background threads."""
    error_occurred = pyqtSignal(str)


class MainWindow(QMainWindow):
    """Main application window for the auto clicker."""

    RENDER_INTERVAL_MS = 100

    def __init__(self, surface: ControlSurface, engine: ClickEngine):
        super().__init__()

        self.surface = surface
        self.engine = engine

        # Listener errors arrive on the listener thread
        self.signal_bridge = SignalBridge()
        self.surface.set_error_callback(self._on_error)

        self.toast = ToastManager()

        self.setup_ui()
        self.setup_connections()
        self.render(self.surface.snapshot())

        # The core never pushes updates; poll it
        self.render_timer = QTimer(self)
        self.render_timer.timeout.connect(self._refresh)
        self.render_timer.start(self.RENDER_INTERVAL_MS)

    def setup_ui(self) -> None:
        """Set up the user interface."""
        self.setWindowTitle("Auto Clicker")
        self.setMinimumWidth(360)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        layout = QVBoxLayout(central_widget)
        layout.setContentsMargins(20, 20, 20, 20)
        layout.setSpacing(16)

        self.setStyleSheet(self._get_stylesheet())

        # === Status ===
        self.status_label = QLabel("Auto Clicker is STOPPED")
        self.status_label.setFont(QFont("Helvetica Neue", 16, QFont.Weight.Bold))
        self.status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.status_label)

        self.clicks_label = QLabel("Clicks: 0")
        self.clicks_label.setObjectName("helperLabel")
        self.clicks_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.clicks_label)

        # === Settings ===
        settings_frame = QFrame()
        settings_frame.setObjectName("cardFrame")
        settings_layout = QVBoxLayout(settings_frame)
        settings_layout.setContentsMargins(16, 16, 16, 16)
        settings_layout.setSpacing(12)

        self.delay_label = QLabel()
        self.delay_label.setObjectName("helperLabel")
        settings_layout.addWidget(self.delay_label)

        minimum, maximum, step = self.surface.interval_bounds
        self.delay_slider = QSlider(Qt.Orientation.Horizontal)
        self.delay_slider.setRange(minimum, maximum)
        self.delay_slider.setSingleStep(step)
        self.delay_slider.setPageStep(step * 10)
        self.delay_slider.setTickInterval(step * 10)
        settings_layout.addWidget(self.delay_slider)

        hotkey_row = QHBoxLayout()
        hotkey_label = QLabel("Toggle hotkey")
        hotkey_label.setObjectName("helperLabel")
        hotkey_row.addWidget(hotkey_label)
        hotkey_row.addStretch()

        self.hotkey_combo = QComboBox()
        self.hotkey_combo.setPlaceholderText("Select Hotkey")
        for hotkey in Hotkey:
            self.hotkey_combo.addItem(str(hotkey), hotkey.name)
        hotkey_row.addWidget(self.hotkey_combo)
        settings_layout.addLayout(hotkey_row)

        layout.addWidget(settings_frame)

        # === Start | Stop ===
        btn_layout = QHBoxLayout()
        btn_layout.setSpacing(20)

        self.start_btn = QPushButton("Start")
        self.start_btn.setObjectName("startBtn")
        self.start_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        self.start_btn.setMinimumHeight(40)
        btn_layout.addWidget(self.start_btn)

        self.stop_btn = QPushButton("Stop")
        self.stop_btn.setObjectName("stopBtn")
        self.stop_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        self.stop_btn.setMinimumHeight(40)
        btn_layout.addWidget(self.stop_btn)

        layout.addLayout(btn_layout)

        self.hint_label = QLabel()
        self.hint_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.hint_label)

        self.signal_bridge.error_occurred.connect(self._show_error)

    def setup_connections(self) -> None:
        """Set up signal-slot connections."""
        self.start_btn.clicked.connect(self.surface.start)
        self.stop_btn.clicked.connect(self.surface.stop)
        self.delay_slider.valueChanged.connect(self._on_delay_changed)
        self.hotkey_combo.activated.connect(self._on_hotkey_selected)

    def _on_delay_changed(self, value: int) -> None:
        """Handle delay slider change."""
        stored = self.surface.set_interval(value)
        if stored != value:
            # Snap the handle onto the step grid
            self.delay_slider.blockSignals(True)
            self.delay_slider.setValue(stored)
            self.delay_slider.blockSignals(False)
        self._refresh()

    def _on_hotkey_selected(self, index: int) -> None:
        """Handle hotkey picker change."""
        name = self.hotkey_combo.itemData(index)
        if name is None:
            return
        hotkey = Hotkey.parse(name)
        previous = self.surface.snapshot().hotkey
        self.surface.set_hotkey(hotkey)
        if hotkey != previous:
            self.toast.info(f"Hotkey changed to {hotkey}")
        self._refresh()

    def _refresh(self) -> None:
        self.render(self.surface.snapshot())

    def render(self, snapshot: StateSnapshot) -> None:
        """Draw a state snapshot."""
        if snapshot.running:
            self.status_label.setText("Auto Clicker is RUNNING")
            self.status_label.setStyleSheet("color: #22c55e;")
        else:
            self.status_label.setText("Auto Clicker is STOPPED")
            self.status_label.setStyleSheet("color: #f8fafc;")

        self.start_btn.setEnabled(not snapshot.running)
        self.stop_btn.setEnabled(snapshot.running)

        clicks_text = f"Clicks: {self.engine.clicks_emitted}"
        if self.engine.failed_clicks:
            clicks_text += f" ({self.engine.failed_clicks} failed)"
        self.clicks_label.setText(clicks_text)

        self.delay_label.setText(f"Delay: {snapshot.interval_ms} ms")
        if not self.delay_slider.isSliderDown() and self.delay_slider.value() != snapshot.interval_ms:
            self.delay_slider.blockSignals(True)
            self.delay_slider.setValue(snapshot.interval_ms)
            self.delay_slider.blockSignals(False)

        combo_index = self.hotkey_combo.findData(snapshot.hotkey.name)
        if combo_index != self.hotkey_combo.currentIndex():
            self.hotkey_combo.setCurrentIndex(combo_index)

        if self.surface.listener_alive:
            self.hint_label.setText(f"Press {snapshot.hotkey} to start/stop")
            self.hint_label.setStyleSheet("color: #64748b; font-size: 12px;")
        else:
            self.hint_label.setText("Hotkey inactive - reselect it or use the buttons")
            self.hint_label.setStyleSheet("color: #f59e0b; font-size: 12px;")

    def _on_error(self, message: str) -> None:
        """Handle errors from background threads."""
        self.signal_bridge.error_occurred.emit(message)

    def _show_error(self, message: str) -> None:
        """Show error on the GUI thread."""
        self.toast.error(message)
        self._refresh()

    def _get_stylesheet(self) -> str:
        """Get the application stylesheet."""
        bg_main = "#020617"
        card_bg = "#0f172a"
        border_col = "#1e293b"
        text_primary = "#f8fafc"
        text_secondary = "#94a3b8"
        start_col = "#16a34a"
        stop_col = "#e11d48"
        accent_col = "#3b82f6"

        return f"""
            QMainWindow {{
                background-color: {bg_main};
            }}

            QWidget {{
                font-family: "Inter", "Helvetica Neue", sans-serif;
                color: {text_primary};
                font-size: 13px;
            }}

            QFrame#cardFrame {{
                background-color: {card_bg};
                border: 1px solid {border_col};
                border-radius: 12px;
            }}

            QLabel#helperLabel {{
                color: {text_secondary};
                font-size: 12px;
            }}

            QComboBox {{
                background-color: {bg_main};
                border: 1px solid {border_col};
                border-radius: 6px;
                padding: 6px 10px;
                min-width: 70px;
            }}

            QSlider::groove:horizontal {{
                background: {border_col}; height: 6px; border-radius: 3px;
            }}
            QSlider::handle:horizontal {{
                background: {accent_col}; width: 16px; height: 16px;
                margin: -5px 0; border-radius: 8px;
            }}
            QSlider::sub-page:horizontal {{
                background: {accent_col}; border-radius: 3px;
            }}

            QPushButton {{
                background-color: {bg_main};
                border: 1px solid {border_col};
                border-radius: 6px;
                padding: 8px 16px;
                font-weight: 600;
            }}

            QPushButton#startBtn:enabled {{
                background-color: {start_col};
                border: none;
            }}

            QPushButton#stopBtn:enabled {{
                background-color: {stop_col};
                border: none;
            }}

            QPushButton:disabled {{
                color: {text_secondary};
            }}
        """

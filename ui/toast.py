"""
Toast Notification Widget
Short-lived status messages (hotkey changes, listener failures) that fade
out on their own without taking focus.
"""

from PyQt6.QtWidgets import QWidget, QLabel, QHBoxLayout, QGraphicsOpacityEffect, QApplication
from PyQt6.QtCore import Qt, QTimer, QPropertyAnimation, QEasingCurve, pyqtSignal
from PyQt6.QtGui import QColor, QPainter


class ToastNotification(QWidget):
    """A single frameless notification with a colored accent bar."""
    closed = pyqtSignal(object)  # Emits self when closed

    COLORS = {
        "info": "#3b82f6",
        "warning": "#f59e0b",
        "error": "#ef4444",
    }

    def __init__(self, message: str, level: str = "info", duration_ms: int = 2500, parent=None):
        super().__init__(parent)

        self.level = level
        self.duration_ms = duration_ms

        self.setWindowFlags(
            Qt.WindowType.FramelessWindowHint |
            Qt.WindowType.WindowStaysOnTopHint |
            Qt.WindowType.Tool
        )
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)
        self.setAttribute(Qt.WidgetAttribute.WA_ShowWithoutActivating)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(18, 8, 16, 8)
        label = QLabel(message)
        label.setStyleSheet("color: #f8fafc; font-size: 13px;")
        layout.addWidget(label)
        self.setFixedHeight(40)
        self.adjustSize()

        self._opacity = QGraphicsOpacityEffect(self)
        self._opacity.setOpacity(1.0)
        self.setGraphicsEffect(self._opacity)

        self._dismiss_timer = QTimer(self)
        self._dismiss_timer.setSingleShot(True)
        self._dismiss_timer.timeout.connect(self.fade_out)

    def paintEvent(self, event):
        """Paint rounded background and accent bar."""
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setPen(Qt.PenStyle.NoPen)

        painter.setBrush(QColor(15, 23, 42, 235))
        painter.drawRoundedRect(self.rect(), 10, 10)

        painter.setBrush(QColor(self.COLORS.get(self.level, "#3b82f6")))
        painter.drawRoundedRect(0, 0, 5, self.height(), 2, 2)
        painter.end()

    def popup(self) -> None:
        self.show()
        self._dismiss_timer.start(self.duration_ms)

    def fade_out(self) -> None:
        self._fade = QPropertyAnimation(self._opacity, b"opacity")
        self._fade.setDuration(300)
        self._fade.setStartValue(1.0)
        self._fade.setEndValue(0.0)
        self._fade.setEasingCurve(QEasingCurve.Type.InQuad)
        self._fade.finished.connect(self._on_faded)
        self._fade.start()

    def _on_faded(self) -> None:
        self.closed.emit(self)
        self.close()
        self.deleteLater()


class ToastManager:
    """Stacks toasts in the top-right corner of the primary screen."""

    MARGIN = 20
    SPACING = 48

    def __init__(self):
        self._toasts = []

    def show_toast(self, message: str, level: str = "info", duration_ms: int = 2500) -> ToastNotification:
        toast = ToastNotification(message, level, duration_ms)
        toast.closed.connect(self._on_toast_closed)
        self._toasts.append(toast)
        self._layout()
        toast.popup()
        return toast

    def _layout(self) -> None:
        screen = QApplication.primaryScreen().availableGeometry()
        for i, toast in enumerate(self._toasts):
            x = screen.right() - toast.width() - self.MARGIN
            y = screen.top() + self.MARGIN + i * self.SPACING
            toast.move(x, y)

    def _on_toast_closed(self, toast: ToastNotification) -> None:
        if toast in self._toasts:
            self._toasts.remove(toast)
        self._layout()

    def info(self, message: str, duration_ms: int = 2500) -> ToastNotification:
        return self.show_toast(message, "info", duration_ms)

    def warning(self, message: str, duration_ms: int = 3500) -> ToastNotification:
        return self.show_toast(message, "warning", duration_ms)

    def error(self, message: str, duration_ms: int = 5000) -> ToastNotification:
        """Show an error toast (longer duration)."""
        return self.show_toast(message, "error", duration_ms)

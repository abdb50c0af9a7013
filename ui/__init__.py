"""
UI Package
"""

from .main_window import MainWindow
from .toast import ToastNotification, ToastManager

__all__ = ['MainWindow', 'ToastNotification', 'ToastManager']

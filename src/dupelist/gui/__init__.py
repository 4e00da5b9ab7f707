"""
GUI components built on PySide6 (optional dependency).
"""

from .main_window import ListingWindow, SettingsManager
from .qprocess_runner import QProcessRunner, QProcessHandle
from .custom_widgets import ListingWidget

__all__ = ["ListingWindow", "SettingsManager", "QProcessRunner", "QProcessHandle", "ListingWidget"]

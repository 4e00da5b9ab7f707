"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License
main_window.py
Duplicate listing window: runs the finder through a ProcessSession and shows the
streamed listing, with re-run, kill, toggle and size controls.
"""
import logging
from typing import Any, Optional

from PySide6.QtWidgets import (
    QMainWindow, QFileDialog, QInputDialog, QMessageBox, QLabel, QToolBar,
)
from PySide6.QtGui import QAction
from PySide6.QtCore import QSettings
from dupelist.aliases import TOGGLE_FLAG_ALIASES
from dupelist.core.formatter import display_text
from dupelist.core.models import ListingConfig, ListingOption, SearchState
from dupelist.core.session import ProcessSession, ProcessAlreadyActive
from dupelist.gui.custom_widgets.listing_widget import ListingWidget
from dupelist.gui.qprocess_runner import QProcessRunner
from dupelist.services.file_service import FileService

logger = logging.getLogger(__name__)


class SettingsManager:
    def __init__(self, settings: Optional[QSettings] = None):
        self.settings = settings or QSettings("InitumSoft", "DupeList")

    def save_settings(self, key: str, value: Any):
        self.settings.setValue(key, value)

    def load_settings(self, key: str, default: Any = None) -> Any:
        return self.settings.value(key, default)

    def load_config(self, base: Optional[ListingConfig] = None) -> ListingConfig:
        """Overlays persisted values on top of the given (or default) config."""
        config = base or ListingConfig()
        config.program = str(self.load_settings("program", config.program))
        config.listing_option = ListingOption(
            pipe_clause=str(self.load_settings("pipe_clause", config.listing_option.pipe_clause)),
            switches=str(self.load_settings("ls_switches", config.listing_option.switches)),
        )
        toggles = self.load_settings("default_toggle_flags", " ".join(config.default_toggle_flags))
        config.default_toggle_flags = str(toggles).split()
        config.default_size_filter = str(self.load_settings("default_size_filter", config.default_size_filter))
        return config

    def save_config(self, config: ListingConfig):
        self.save_settings("program", config.program)
        self.save_settings("pipe_clause", config.listing_option.pipe_clause)
        self.save_settings("ls_switches", config.listing_option.switches)
        self.save_settings("default_toggle_flags", " ".join(config.default_toggle_flags))
        self.save_settings("default_size_filter", config.default_size_filter)


class ListingWindow(QMainWindow):
    """Main listing window; owns exactly one ProcessSession."""

    def __init__(self, config: Optional[ListingConfig] = None,
                 settings_manager: Optional[SettingsManager] = None):
        super().__init__()
        self.settings_manager = settings_manager or SettingsManager()
        self.config = self.settings_manager.load_config(config)

        self.listing = ListingWidget(self)
        self.listing.unescape_paths = self.config.listing_option.escapes_file_names
        self.setCentralWidget(self.listing)
        self.status_label = QLabel("Idle")
        self.statusBar().addPermanentWidget(self.status_label)

        self.session = ProcessSession(QProcessRunner(self), sink=self.listing, config=self.config)
        self.toggle_actions = {}
        self.setup_toolbar()
        self.setup_connections()
        self.setWindowTitle("DupeList")
        self.resize(1000, 600)

    def setup_toolbar(self):
        toolbar = QToolBar("Search", self)
        self.addToolBar(toolbar)

        self.search_action = QAction("Search…", self)
        self.rerun_action = QAction("Re-run", self)
        self.kill_action = QAction("Kill", self)
        self.size_action = QAction("Size…", self)
        for action in (self.search_action, self.rerun_action, self.kill_action, self.size_action):
            toolbar.addAction(action)
        toolbar.addSeparator()

        for name, flag in TOGGLE_FLAG_ALIASES.items():
            action = QAction(f"{name} ({flag})", self)
            action.setCheckable(True)
            action.setChecked(flag in self.config.default_toggle_flags)
            action.triggered.connect(lambda _checked, f=flag: self.toggle_flag(f))
            toolbar.addAction(action)
            self.toggle_actions[flag] = action

    def setup_connections(self):
        self.search_action.triggered.connect(lambda _: self.new_search())
        self.rerun_action.triggered.connect(lambda _: self.rerun())
        self.kill_action.triggered.connect(lambda _: self.session.kill())
        self.size_action.triggered.connect(lambda _: self.change_size())
        self.listing.status_changed.connect(self.on_status_changed)
        self.listing.directory_requested.connect(self.on_directory_requested)

    # Input acquisition

    def ask_directory(self, default: str = "") -> str:
        return QFileDialog.getExistingDirectory(self, "Select Directory to Search", default)

    def ask_text(self, title: str, label: str, default: str = "") -> Optional[str]:
        text, ok = QInputDialog.getText(self, title, label, text=default)
        return text if ok else None

    def confirm_kill(self) -> bool:
        reply = QMessageBox.question(
            self,
            "Search Running",
            "A search process is running; kill it?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No
        )
        return reply == QMessageBox.StandardButton.Yes

    # Actions

    def new_search(self):
        previous = self.session.search_state
        default_dir = previous.directories[0] if previous else ""
        directory = self.ask_directory(default_dir)
        if not directory:
            return
        extra_args = self.ask_text("Finder Arguments", "Extra arguments:",
                                   previous.extra_args if previous else "")
        if extra_args is None:
            return

        try:
            state = SearchState.create(
                [directory],
                extra_args=extra_args,
                size_filter=previous.size_filter if previous else self.config.default_size_filter,
                toggle_flags=previous.toggle_flags if previous else self.config.default_toggle_flags,
            )
        except (FileNotFoundError, NotADirectoryError, ValueError) as e:
            QMessageBox.warning(self, "Input Error", str(e))
            return
        self.start_search(state)

    def start_search(self, state: Optional[SearchState] = None):
        try:
            self.session.run_search(state, confirm=self.confirm_kill)
        except ProcessAlreadyActive as e:
            self.statusBar().showMessage(str(e), 5000)
            return
        except (FileNotFoundError, ValueError) as e:
            QMessageBox.critical(self, "Error", str(e))
            return
        self.sync_toggle_actions()
        self.setWindowTitle(f"DupeList — {' '.join(self.session.search_state.directories)}")

    def rerun(self):
        if self.session.search_state is None:
            self.new_search()
            return
        self.start_search()

    def toggle_flag(self, flag: str):
        if self.session.search_state is None:
            self.sync_toggle_actions()
            return
        try:
            self.session.toggle_and_rerun(flag, confirm=self.confirm_kill)
        except ProcessAlreadyActive as e:
            self.statusBar().showMessage(str(e), 5000)
        except (FileNotFoundError, ValueError) as e:
            QMessageBox.critical(self, "Error", str(e))
        self.sync_toggle_actions()

    def change_size(self):
        state = self.session.search_state
        if state is None:
            return
        value = self.ask_text("Size Filter", "Size (empty for none):", state.size_filter or "")
        if value is None:
            return
        try:
            self.session.set_size_and_rerun(value, confirm=self.confirm_kill)
        except ProcessAlreadyActive as e:
            self.statusBar().showMessage(str(e), 5000)
        except (FileNotFoundError, ValueError) as e:
            QMessageBox.critical(self, "Error", str(e))

    def sync_toggle_actions(self):
        state = self.session.search_state
        for flag, action in self.toggle_actions.items():
            if state is not None:
                action.setChecked(state.has_flag(flag))
            else:
                action.setChecked(flag in self.config.default_toggle_flags)

    # Slots

    def on_status_changed(self, status: str):
        self.status_label.setText(f"{self.config.program}: {status}")

    def on_directory_requested(self, directory: str):
        try:
            FileService.open_path(directory)
        except Exception as e:
            logger.warning(f"Cannot open {directory}: {e}")
            QMessageBox.critical(self, "Error", display_text(str(e)))

    def closeEvent(self, event):
        self.session.kill()
        self.settings_manager.save_config(self.config)
        super().closeEvent(event)

"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

listing_widget.py

UI component showing the streamed duplicate listing.
Implements the ListingSink interface: entries may be appended from any thread, they are
forwarded to the GUI thread through queued signals.

Emits signals for navigation and status instead of handling them directly, which keeps
this widget reusable and decoupled from the session.
"""
from typing import List, Optional

from PySide6.QtWidgets import QListWidget, QListWidgetItem, QMenu, QAbstractItemView, QWidget, QMessageBox
from PySide6.QtGui import QAction, QFontDatabase
from PySide6.QtCore import Qt, Signal
from dupelist.core.formatter import display_text
from dupelist.core.models import FormattedEntry, EntryKind
from dupelist.services.file_service import FileService, PartialTrashError
from dupelist.services.listing import entry_path, entry_directory

ENTRY_ROLE = Qt.ItemDataRole.UserRole
PATH_ROLE = int(Qt.ItemDataRole.UserRole) + 1


class ListingWidget(QListWidget):
    """
    A list widget that displays the formatted listing, one entry per row.

    Signals:
        directory_requested (str): Emitted when the user asks to go to an entry's directory.
        status_changed (str): Emitted when the process status indicator changes.
    """
    directory_requested = Signal(object)  # str path, may carry surrogate-escaped bytes
    status_changed = Signal(str)
    _entry_appended = Signal(object)
    _reset_requested = Signal()

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self.setFont(QFontDatabase.systemFont(QFontDatabase.SystemFont.FixedFont))
        self.setSelectionMode(QAbstractItemView.SelectionMode.ExtendedSelection)
        self.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.customContextMenuRequested.connect(self.show_context_menu)
        self.itemActivated.connect(self.on_item_activated)
        self._entry_appended.connect(self._add_entry_item)
        self._reset_requested.connect(self.clear)
        self.status = ""
        self.unescape_paths = False

    # ListingSink

    def append_entry(self, entry: FormattedEntry) -> None:
        self._entry_appended.emit(entry)

    def set_status(self, status: str) -> None:
        self.status = status
        self.status_changed.emit(status)

    def reset(self) -> None:
        self._reset_requested.emit()

    def _add_entry_item(self, entry: FormattedEntry):
        item = QListWidgetItem(display_text(entry.text))
        item.setData(ENTRY_ROLE, entry)
        path = entry_path(entry, self.unescape_paths)
        if path:
            # display form only; file actions use item_path()
            item.setData(PATH_ROLE, display_text(path))
            item.setToolTip(f"Path: {display_text(path)}")
        else:
            item.setFlags(Qt.ItemFlag.NoItemFlags)
        if entry.kind == EntryKind.SUMMARY:
            font = item.font()
            font.setItalic(True)
            item.setFont(font)
        self.addItem(item)

    # Navigation

    def entries(self) -> List[FormattedEntry]:
        return [self.item(i).data(ENTRY_ROLE) for i in range(self.count())]

    def item_path(self, item: QListWidgetItem) -> Optional[str]:
        """Filesystem path of a row, including bytes that are not valid UTF-8."""
        entry = item.data(ENTRY_ROLE)
        return entry_path(entry, self.unescape_paths) if entry is not None else None

    def selected_paths(self) -> List[str]:
        return [p for p in (self.item_path(item) for item in self.selectedItems()) if p]

    def current_directory(self) -> Optional[str]:
        """Directory of the first selected entry, falling back to the current row."""
        items = self.selectedItems() or ([self.currentItem()] if self.currentItem() else [])
        for item in items:
            entry = item.data(ENTRY_ROLE)
            if entry is not None:
                directory = entry_directory(entry, self.unescape_paths)
                if directory:
                    return directory
        return None

    def go_to_directory(self):
        directory = self.current_directory()
        if directory:
            self.directory_requested.emit(directory)

    def on_item_activated(self, item):
        if item.data(PATH_ROLE):
            self.go_to_directory()

    def show_context_menu(self, point):
        """Shows context menu on right-click."""
        paths = self.selected_paths()
        if not paths:
            return

        menu = QMenu(self)

        if len(paths) == 1:
            open_action = QAction("Open", self)
            goto_action = QAction("Go to Directory", self)
            open_action.triggered.connect(lambda _: self._run_file_action(FileService.open_path, paths[0]))
            goto_action.triggered.connect(lambda _: self.go_to_directory())
            menu.addAction(open_action)
            menu.addAction(goto_action)
            menu.addSeparator()

        delete_text = "Move to Trash" if len(paths) == 1 else f"Move {len(paths)} files to Trash"
        delete_action = QAction(delete_text, self)
        delete_action.triggered.connect(lambda _: self.delete_selected_files())
        menu.addAction(delete_action)

        menu.exec(self.mapToGlobal(point))

    def delete_selected_files(self):
        """Moves the selected files to trash after confirmation and drops their rows."""
        items = [item for item in self.selectedItems() if self.item_path(item)]
        if not items:
            return

        reply = QMessageBox.question(
            self,
            "Confirm Deletion",
            f"Are you sure you want to move {len(items)} files to trash?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No
        )
        if reply != QMessageBox.StandardButton.Yes:
            return

        paths = [self.item_path(item) for item in items]
        failed = []
        try:
            moved = FileService.move_multiple_to_trash(paths)
        except PartialTrashError as e:
            moved, failed = e.moved, e.failed

        moved = set(moved)
        for item, path in zip(items, paths):
            if path in moved:
                self.takeItem(self.row(item))

        if failed:
            details = "\n".join(f"• {display_text(path)}: {display_text(reason)}" for path, reason in failed[:5])
            QMessageBox.warning(self, "Partial Success", details)

    def _run_file_action(self, action, path: str):
        try:
            action(path)
        except Exception as e:
            QMessageBox.critical(self, "Error", display_text(str(e)))

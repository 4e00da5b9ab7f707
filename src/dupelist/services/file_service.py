"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
File actions on listing entries: open a file or directory, move files to trash.
Works on Windows, macOS and Linux.
"""
import logging
import os
import sys
import subprocess
from pathlib import Path
from typing import List, Tuple
from send2trash import send2trash

logger = logging.getLogger(__name__)


class PartialTrashError(RuntimeError):
    """Some files of a multi-file trash request were not moved."""

    def __init__(self, moved: List[str], failed: List[Tuple[str, str]]):
        self.moved = moved
        self.failed = failed
        details = "\n".join(f"  • {path}: {reason}" for path, reason in failed)
        super().__init__(f"{len(failed)} of {len(moved) + len(failed)} file(s) not moved to trash:\n{details}")


class FileService:
    """
    Cross-platform file operations for listing entries.
    Uses universal system tools with proper error handling.
    """

    @staticmethod
    def open_path(path_str: str):
        """Opens a file or directory with the system default application."""
        path = Path(path_str).resolve()

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            if sys.platform == 'win32':
                os.startfile(str(path))
            elif sys.platform == 'darwin':
                subprocess.Popen(['open', str(path)])
            else:
                FileService._open_linux(path)
        except Exception as e:
            raise RuntimeError(f"Failed to open {path}: {e}") from e

    @staticmethod
    def _open_linux(path: Path):
        """Linux: Tries gio, falls back to xdg-open."""
        try:
            subprocess.run(['gio', 'open', str(path)], timeout=5)
            return
        except (FileNotFoundError, subprocess.TimeoutExpired):
            logger.debug("gio unavailable, falling back to xdg-open")

        try:
            subprocess.run(['xdg-open', str(path)], timeout=5)
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            raise RuntimeError("Cannot open path: no suitable application found") from e

    @staticmethod
    def move_to_trash(file_path: str):
        """Moves a file to the system trash."""
        path = Path(file_path).resolve()

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            send2trash(str(path))
        except Exception as e:
            raise RuntimeError(f"Failed to move to trash: {e}") from e
        logger.debug(f"Moved to trash: {path}")

    @classmethod
    def move_multiple_to_trash(cls, file_paths: List[str]) -> List[str]:
        """
        Moves the files of several listing rows to trash.
        Every path is attempted, failures do not stop the rest.

        Returns:
            Paths that were moved

        Raises:
            PartialTrashError: if any path could not be moved; carries both lists
        """
        moved, failed = [], []
        for path in file_paths:
            try:
                cls.move_to_trash(path)
            except (FileNotFoundError, RuntimeError) as e:
                failed.append((path, str(e)))
                continue
            moved.append(path)

        if failed:
            raise PartialTrashError(moved, failed)
        return moved

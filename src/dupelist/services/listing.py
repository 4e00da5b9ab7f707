"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/listing.py
Listing sinks without GUI dependencies, plus path extraction used for
"go to directory" navigation on listing entries.
"""
import os
import re
import sys
import threading
from typing import List, Optional, TextIO

from dupelist.core.formatter import display_text
from dupelist.core.models import FormattedEntry, EntryKind

ABSOLUTE_PATH_PATTERN = re.compile(r"(?:^|\s)(/.*)$")
SYMLINK_ARROW = " -> "
LS_ESCAPE_PATTERN = re.compile(rb"\\([0-3][0-7]{2}|.)", re.DOTALL)
LS_CHAR_ESCAPES = {b"n": b"\n", b"t": b"\t", b"r": b"\r", b"a": b"\a", b"b": b"\b", b"f": b"\f", b"v": b"\v"}


def unescape_ls_path(path: str) -> str:
    """Undoes `ls -b` escaping: octal byte codes, C escapes and backslashed characters."""
    def replace(match):
        token = match.group(1)
        if len(token) == 3:
            return bytes([int(token, 8)])
        return LS_CHAR_ESCAPES.get(token, token)

    return os.fsdecode(LS_ESCAPE_PATTERN.sub(replace, os.fsencode(path)))


def entry_path(entry: FormattedEntry, unescape: bool = False) -> Optional[str]:
    """
    Extracts the file path shown on a listing line.
    Returns None for separators, summaries and lines without a path.

    Args:
        entry: Listing entry
        unescape: The listing was produced with `ls -b`, undo its escapes
    """
    if entry.kind != EntryKind.FILE:
        return None

    text = entry.text.strip()
    if not text:
        return None

    match = ABSOLUTE_PATH_PATTERN.search(text)
    path = match.group(1) if match else text.split()[-1]

    if SYMLINK_ARROW in path:
        path = path.split(SYMLINK_ARROW, 1)[0]
    return unescape_ls_path(path) if unescape else path


def entry_directory(entry: FormattedEntry, unescape: bool = False) -> Optional[str]:
    """Directory containing the file of a listing line."""
    path = entry_path(entry, unescape)
    if path is None:
        return None
    return os.path.dirname(path.rstrip("/")) or "/"


class MemorySink:
    """Keeps every entry in memory. Used headless and in tests."""

    def __init__(self):
        self.entries: List[FormattedEntry] = []
        self.status = ""
        self._lock = threading.Lock()

    def append_entry(self, entry: FormattedEntry) -> None:
        with self._lock:
            self.entries.append(entry)

    def set_status(self, status: str) -> None:
        self.status = status

    def reset(self) -> None:
        with self._lock:
            self.entries.clear()
        self.status = ""

    @property
    def lines(self) -> List[str]:
        with self._lock:
            return [e.text for e in self.entries]

    @property
    def text(self) -> str:
        return "".join(line + "\n" for line in self.lines)

    def file_entries(self) -> List[FormattedEntry]:
        with self._lock:
            return [e for e in self.entries if e.kind == EntryKind.FILE]


class ConsoleSink(MemorySink):
    """Prints entries as they arrive, keeping them for navigation afterwards."""

    def __init__(self, stream: Optional[TextIO] = None, quiet: bool = False):
        super().__init__()
        self.stream = stream or sys.stdout
        self.quiet = quiet

    def append_entry(self, entry: FormattedEntry) -> None:
        super().append_entry(entry)
        if self.quiet and entry.kind != EntryKind.SUMMARY:
            return
        print(display_text(entry.text), file=self.stream, flush=True)

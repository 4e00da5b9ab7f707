"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/formatter.py
Incremental formatter for the output of the duplicate finder + listing pipe.

PIPELINE (per complete line)
----------------------------
  • Drop `ls: cannot access ...` noise lines (finder/listing races)
  • Indent non-empty lines by two spaces
  • Collapse every " ./" into " " (turns ./FILE into FILE)
  • Right-justify link count (4) and size (9) columns of long listings

CURSOR
------
The formatter keeps the accumulated text of the session and `processed_up_to`,
the offset between emitted lines and the raw, not yet complete, tail.
The cursor only moves forward and always sits right after a newline, so the
result never depends on how the transport chunks the byte stream.

DECODING
--------
UTF-8 with surrogateescape, like os.fsdecode: filenames that are not valid UTF-8
keep their original bytes and map back to the real path with os.fsencode.
"""

import codecs
import logging
import re
from typing import List, Optional

from dupelist.core.interfaces import ListingSink
from dupelist.core.models import FormattedEntry, EntryKind

logger = logging.getLogger(__name__)

INDENT = "  "
ERROR_LINE_PATTERN = re.compile(r"^[ \t]*ls: cannot access")
# whitespace, token, (whitespace, link count), whitespace, token, whitespace, token, (whitespace, size)
LONG_LISTING_PATTERN = re.compile(
    r"^([ \t]+[^ \t\r\n]+)([ \t]+[^ \t\r\n]+)([ \t]+[^ \t\r\n]+[ \t]+[^ \t\r\n]+)([ \t]+[^ \t\r\n]+)"
)
LINK_COUNT_WIDTH = 4
SIZE_WIDTH = 9


def display_text(text: str) -> str:
    """
    Printable form of a listing line. Undecodable filename bytes are kept as
    surrogates in the buffer and shown as U+FFFD here.
    """
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def is_error_line(line: str) -> bool:
    return ERROR_LINE_PATTERN.match(line) is not None


def strip_relative_markers(line: str) -> str:
    """
    Replaces every " ./" with " ".
    Applied anywhere in the line, not only to the path field.
    """
    return line.replace(" ./", " ")


def pad_columns(line: str) -> str:
    """
    Right-justifies the link count and size fields of a long listing line.
    The fields keep their leading whitespace, so wider values are never merged.
    """
    match = LONG_LISTING_PATTERN.match(line)
    if not match:
        return line
    return (
        match.group(1)
        + match.group(2).rjust(LINK_COUNT_WIDTH)
        + match.group(3)
        + match.group(4).rjust(SIZE_WIDTH)
        + line[match.end():]
    )


class StreamFormatter:
    """
    Consumes raw output chunks and emits formatted entries to the sink.

    Not thread-safe: feed() and flush() must be called from one delivery path.
    """

    def __init__(self, sink: Optional[ListingSink] = None, pad_columns: bool = False):
        self.sink = sink
        self.pad_columns = pad_columns
        self.reset()

    def reset(self) -> None:
        """Drops all accumulated text and rewinds the cursor."""
        self._emitted: List[str] = []
        self._tail = ""
        self.processed_up_to = 0
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="surrogateescape")

    @property
    def buffer(self) -> str:
        """Accumulated session text: emitted lines followed by the unprocessed tail."""
        return "".join(self._emitted) + self._tail

    @property
    def pending(self) -> str:
        """Unprocessed tail (text after the last emitted newline)."""
        return self._tail

    def format_line(self, line: str) -> str:
        """Applies indentation, relative marker removal and column padding to one line."""
        if not line:
            return line
        line = strip_relative_markers(INDENT + line)
        if self.pad_columns:
            line = pad_columns(line)
        return line

    def feed(self, chunk: bytes) -> List[FormattedEntry]:
        """
        Appends a raw chunk and emits every line completed by it.

        Returns:
            Entries emitted by this call (also handed to the sink)
        """
        if not chunk:
            return []

        self._tail += self._decoder.decode(chunk)
        last_newline = self._tail.rfind("\n")
        if last_newline < 0:
            return []

        complete = self._tail[:last_newline]
        self._tail = self._tail[last_newline + 1:]

        lines = []
        for raw in complete.split("\n"):
            if is_error_line(raw):
                logger.debug(f"Dropping listing error line: {raw.strip()}")
                continue
            lines.append(self.format_line(raw))

        return self._emit(lines)

    def flush(self) -> List[FormattedEntry]:
        """
        Treats the remaining tail as a final complete line and emits it.
        Called once the process has exited.
        """
        self._tail += self._decoder.decode(b"", final=True)
        if not self._tail:
            return []

        logger.debug(f"Flushing unterminated tail ({len(self._tail)} chars)")
        line = self.format_line(self._tail)
        self._tail = ""
        return self._emit([line])

    def append_line(self, text: str, kind: EntryKind = EntryKind.SUMMARY) -> FormattedEntry:
        """
        Emits a line that did not come from the process (e.g. the summary line).
        Must be called after flush(), when no raw tail is pending.
        """
        if self._tail:
            raise RuntimeError("Cannot append a line while raw output is pending")
        return self._emit([text], kind=kind)[0]

    def _emit(self, lines: List[str], kind: Optional[EntryKind] = None) -> List[FormattedEntry]:
        entries = []
        position = self.processed_up_to
        for line in lines:
            end = position + len(line)
            if kind is not None:
                entry_kind = kind
            else:
                entry_kind = EntryKind.FILE if line.strip() else EntryKind.SEPARATOR
            entries.append(FormattedEntry(text=line, start=position, end=end, kind=entry_kind))
            self._emitted.append(line + "\n")
            position = end + 1

        self.processed_up_to = position

        if self.sink is not None:
            for entry in entries:
                self.sink.append_entry(entry)
        return entries

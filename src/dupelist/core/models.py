"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for duplicate listing sessions: search parameters, listing configuration
and formatted listing entries.
"""

import os
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence


# =============================
# Enums
# =============================

class SessionState(Enum):
    """
    Lifecycle of the external process attached to a listing session.
    """
    IDLE = "idle"
    RUNNING = "running"
    TERMINATING = "terminating"

    def __repr__(self) -> str:
        return self.value


class EntryKind(str, Enum):
    FILE = "file"
    SEPARATOR = "separator"
    SUMMARY = "summary"


# ======================
#  Configuration
# ======================

DEFAULT_PROGRAM = "jdupes" if sys.platform == "win32" else "fdupes"
DEFAULT_PIPE_CLAUSE = '| xargs -d "\\n" ls -ld'
DEFAULT_LS_SWITCHES = "-ld"


@dataclass(frozen=True)
class ListingOption:
    """
    Pair of (pipe clause, listing switches) describing how raw finder output
    is turned into per-file listing lines.
    """
    pipe_clause: str = DEFAULT_PIPE_CLAUSE
    switches: str = DEFAULT_LS_SWITCHES

    @property
    def has_link_count_and_size_columns(self) -> bool:
        """True for long (-l style) listings that carry link count and size columns."""
        return "l" in self.switches

    @property
    def escapes_file_names(self) -> bool:
        """True when ls prints C-style escapes (-b) for unusual characters in names."""
        return "b" in self.switches


@dataclass
class ListingConfig:
    """
    Read-only inputs for command building and output formatting.
    """
    program: str = DEFAULT_PROGRAM
    listing_option: ListingOption = field(default_factory=ListingOption)
    default_toggle_flags: List[str] = field(default_factory=lambda: ["-r"])
    default_size_filter: str = ""
    verbose: bool = False
    grace_period: float = 1.0

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "ListingConfig":
        """
        Builds a config from defaults overlaid with DUPELIST_* environment variables.
        """
        env = os.environ if environ is None else environ
        config = cls()

        if env.get("DUPELIST_PROGRAM"):
            config.program = env["DUPELIST_PROGRAM"]

        pipe_clause = env.get("DUPELIST_PIPE_CLAUSE")
        switches = env.get("DUPELIST_LS_SWITCHES")
        if pipe_clause or switches:
            config.listing_option = ListingOption(
                pipe_clause=pipe_clause or config.listing_option.pipe_clause,
                switches=switches or config.listing_option.switches,
            )

        if "DUPELIST_TOGGLES" in env:
            config.default_toggle_flags = env["DUPELIST_TOGGLES"].split()
        if "DUPELIST_SIZE" in env:
            config.default_size_filter = env["DUPELIST_SIZE"]

        verbose = env.get("DUPELIST_VERBOSE", "").strip().lower()
        config.verbose = verbose in ("1", "true", "yes", "on")
        return config


# ======================
#  Core Data Models
# ======================

def normalize_directory(path: str) -> str:
    """
    Returns the absolute form of an existing directory with a trailing separator.

    Raises:
        FileNotFoundError: if the path does not exist
        NotADirectoryError: if the path is not a directory
    """
    absolute = os.path.abspath(os.path.expanduser(path))
    if not os.path.exists(absolute):
        raise FileNotFoundError(f"Directory not found: {path}")
    if not os.path.isdir(absolute):
        raise NotADirectoryError(f"Path is not a directory: {path}")
    return os.path.join(absolute, "")


@dataclass
class SearchState:
    """
    Parameters of the last search of a listing session.
    The single source of truth for reconstructing the command line.
    """
    directories: List[str]
    extra_args: str = ""
    size_filter: Optional[str] = None
    toggle_flags: List[str] = field(default_factory=list)

    @classmethod
    def create(
            cls,
            directories: Sequence[str],
            extra_args: str = "",
            size_filter: Optional[str] = None,
            toggle_flags: Sequence[str] = (),
    ) -> "SearchState":
        """
        Validates and normalizes directories, then builds the state.
        The whole build is rejected if any directory is invalid.
        """
        if not directories:
            raise ValueError("At least one directory is required")

        normalized = [normalize_directory(d) for d in directories]
        flags: List[str] = []
        for flag in toggle_flags:
            if flag not in flags:
                flags.append(flag)

        return cls(
            directories=normalized,
            extra_args=extra_args,
            size_filter=size_filter,
            toggle_flags=flags,
        )

    def toggle(self, flag: str) -> None:
        """Removes the flag if present, adds it otherwise."""
        if flag in self.toggle_flags:
            self.toggle_flags.remove(flag)
        else:
            self.toggle_flags.append(flag)

    def set_size(self, value: str) -> None:
        """Replaces the size filter. An empty string means no filter."""
        self.size_filter = value

    def build(self) -> str:
        """
        Renders toggle flags and the size filter as command-line switches.
        Pure: unchanged state always yields identical output.
        """
        parts: List[str] = []
        for flag in self.toggle_flags:
            if flag and flag not in parts:
                parts.append(flag)

        if self.size_filter and self.size_filter.strip():
            parts.append(f"--size {self.size_filter.strip()}")

        return " ".join(parts).strip()

    def has_flag(self, flag: str) -> bool:
        return flag in self.toggle_flags

    def __repr__(self):
        return f"<SearchState dirs={self.directories}, flags={self.toggle_flags}, size={self.size_filter!r}>"


@dataclass(frozen=True)
class FormattedEntry:
    """
    One normalized line of finder output.
    start/end is the marker range of the line inside the formatter buffer.
    """
    text: str
    start: int
    end: int
    kind: EntryKind = EntryKind.FILE

    @property
    def marker_range(self) -> tuple:
        return self.start, self.end

    def __repr__(self):
        return f"<FormattedEntry {self.kind.value} [{self.start}:{self.end}] {self.text!r}>"

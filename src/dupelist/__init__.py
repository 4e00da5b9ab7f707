"""
DupeList — streaming, column-aligned listing of duplicate files found by fdupes/jdupes.

Core features:
- Runs the external duplicate finder and pipes its output through `ls -ld`
- Incremental formatter: stable output no matter how the process output is chunked
- One process per listing session, re-run identically or with one switch flipped
- Optional GUI with PySide6 (install with [gui] extra), entries can be moved to trash
- CLI interface for terminal usage
"""

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("dupelist")
except Exception:
    try:
        import tomllib  # Python 3.11+
    except ImportError:
        import tomli as tomllib  # Python < 3.11: pip install tomli

    try:
        with open("pyproject.toml", "rb") as f:
            __version__ = tomllib.load(f)["project"]["version"]
    except OSError:
        __version__ = "0.0.0"

# Public API — only what users should import directly
from dupelist.core import (
    SearchState, ListingConfig, ListingOption, FormattedEntry, EntryKind, SessionState,
    StreamFormatter, CompletionHandler, ProcessSession, ProcessAlreadyActive,
    full_command, resolve_program,
)
from dupelist.services import FileService, MemorySink, ConsoleSink, SubprocessRunner

__all__ = [
    "SearchState",
    "ListingConfig",
    "ListingOption",
    "FormattedEntry",
    "EntryKind",
    "SessionState",
    "StreamFormatter",
    "CompletionHandler",
    "ProcessSession",
    "ProcessAlreadyActive",
    "full_command",
    "resolve_program",
    "FileService",
    "MemorySink",
    "ConsoleSink",
    "SubprocessRunner",
    "__version__",
]

"""
Core listing engine — search state, command builder, stream formatter and process session.

This package contains the algorithmic foundation of dupelist:
- SearchState: parameters of the last search (directories, extra args, size filter, toggles)
- command_builder: SearchState → shell command running the finder and the listing pipe
- StreamFormatter: incremental, chunk-boundary independent output formatter
- CompletionHandler: summary line and status update on process exit
- ProcessSession: single-process-per-listing lifecycle

All components are pure Python with no GUI dependencies — suitable for CLI and GUI usage.
"""

from .models import (
    SearchState, ListingConfig, ListingOption, FormattedEntry, EntryKind, SessionState)
from .command_builder import full_command, output_pipe_clause, resolve_program
from .formatter import StreamFormatter
from .completion import CompletionHandler, describe_exit_status
from .session import ProcessSession, ProcessAlreadyActive

__all__ = [
    "SearchState",
    "ListingConfig",
    "ListingOption",
    "FormattedEntry",
    "EntryKind",
    "SessionState",
    "full_command",
    "output_pipe_clause",
    "resolve_program",
    "StreamFormatter",
    "CompletionHandler",
    "describe_exit_status",
    "ProcessSession",
    "ProcessAlreadyActive",
]

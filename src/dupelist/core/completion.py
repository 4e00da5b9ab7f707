"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/completion.py
Finalizes a listing when the external process exits: flushes the pending tail,
appends the summary line and updates the status indicator.
"""

import logging
import signal
import time
from typing import Callable, Optional

from dupelist.core.formatter import StreamFormatter, INDENT
from dupelist.core.interfaces import ListingSink
from dupelist.core.models import FormattedEntry, EntryKind

logger = logging.getLogger(__name__)

TIMESTAMP_LENGTH = 19  # "Sun Oct 19 14:03:22"


def describe_exit_status(exit_status: int) -> str:
    """
    0 -> "finished", N > 0 -> "exited abnormally with code N",
    negative (killed by signal) -> lower-cased signal description.
    """
    if exit_status == 0:
        return "finished"
    if exit_status > 0:
        return f"exited abnormally with code {exit_status}"

    signum = -exit_status
    try:
        description = signal.strsignal(signum)
    except ValueError:
        description = None
    if not description:
        return f"terminated by signal {signum}"
    # glibc: "Interrupt", "Killed"; some platforms append ": 2"
    return description.split(":")[0].strip().lower()


def exit_status_indicator(exit_status: int) -> str:
    return "signal" if exit_status < 0 else "exit"


def format_timestamp(now: Optional[float] = None) -> str:
    return time.ctime(now)[:TIMESTAMP_LENGTH]


class CompletionHandler:
    """
    Reacts to process termination.

    The release callback hands the process handle back to the owning session.
    """

    def __init__(
            self,
            formatter: StreamFormatter,
            sink: Optional[ListingSink] = None,
            release: Optional[Callable[[], None]] = None,
            clock: Callable[[], float] = time.time,
    ):
        self.formatter = formatter
        self.sink = sink
        self.release = release
        self.clock = clock

    def summary_line(self, exit_status: int, program_name: str) -> str:
        return (
            f"{INDENT}{program_name} {describe_exit_status(exit_status)}"
            f" at {format_timestamp(self.clock())}"
        )

    def on_exit(self, exit_status: int, program_name: str) -> FormattedEntry:
        """Flush, summarize, update status, release. Returns the summary entry."""
        self.formatter.flush()
        summary = self.formatter.append_line(
            self.summary_line(exit_status, program_name),
            kind=EntryKind.SUMMARY,
        )
        logger.debug(f"Process finished: {summary.text.strip()}")

        if self.sink is not None:
            self.sink.set_status(exit_status_indicator(exit_status))
        if self.release is not None:
            self.release()
        return summary

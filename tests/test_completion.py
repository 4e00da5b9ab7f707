"""
Unit tests for core/completion.py
Verifies exit status descriptions, the summary line format and finalization order.
"""
import sys
import time
from unittest.mock import Mock

import pytest

from dupelist.core.completion import (
    CompletionHandler, describe_exit_status, exit_status_indicator, format_timestamp,
)
from dupelist.core.formatter import StreamFormatter
from dupelist.core.models import EntryKind
from dupelist.services.listing import MemorySink

FIXED_TIME = 1_760_000_000.0


class TestDescribeExitStatus:
    def test_success(self):
        assert describe_exit_status(0) == "finished"

    def test_failure_code(self):
        assert describe_exit_status(2) == "exited abnormally with code 2"

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX signal names")
    def test_interrupt_signal(self):
        assert describe_exit_status(-2) == "interrupt"

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX signal names")
    def test_kill_signal(self):
        assert describe_exit_status(-9) == "killed"

    def test_unknown_signal(self):
        assert describe_exit_status(-9999) == "terminated by signal 9999"

    def test_status_indicator(self):
        assert exit_status_indicator(0) == "exit"
        assert exit_status_indicator(1) == "exit"
        assert exit_status_indicator(-9) == "signal"


class TestTimestamp:
    def test_fixed_length_without_year(self):
        stamp = format_timestamp(FIXED_TIME)
        assert len(stamp) == 19
        assert stamp == time.ctime(FIXED_TIME)[:19]


class TestCompletionHandler:
    """Flush, summary, status update and release on exit."""

    def make_handler(self, release=None):
        sink = MemorySink()
        formatter = StreamFormatter(sink)
        handler = CompletionHandler(formatter, sink, release=release, clock=lambda: FIXED_TIME)
        return handler, formatter, sink

    def test_summary_line_format(self):
        handler, _, _ = self.make_handler()
        expected = f"  fdupes finished at {time.ctime(FIXED_TIME)[:19]}"
        assert handler.summary_line(0, "fdupes") == expected

    def test_tail_flushed_before_summary(self):
        handler, formatter, sink = self.make_handler()
        formatter.feed(b"./first\n./unterminated")

        handler.on_exit(0, "fdupes")

        assert sink.lines[:2] == ["  first", "  unterminated"]
        assert sink.lines[2].startswith("  fdupes finished at ")
        assert sink.entries[-1].kind == EntryKind.SUMMARY

    def test_summary_has_marker_range(self):
        handler, formatter, _ = self.make_handler()
        formatter.feed(b"./a\n")

        summary = handler.on_exit(1, "jdupes")

        assert formatter.buffer[summary.start:summary.end] == summary.text
        assert "jdupes exited abnormally with code 1 at " in summary.text

    def test_status_updated_and_handle_released(self):
        release = Mock()
        handler, _, sink = self.make_handler(release=release)

        handler.on_exit(0, "fdupes")

        assert sink.status == "exit"
        release.assert_called_once()

    def test_signal_exit_status(self):
        handler, _, sink = self.make_handler()
        handler.on_exit(-9, "fdupes")
        assert sink.status == "signal"

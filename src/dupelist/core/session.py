"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/session.py
One listing session: its SearchState, its formatter and at most one live external process.

STATE MACHINE
-------------
IDLE --start--> RUNNING --exit--> IDLE
RUNNING --start (confirmed)--> TERMINATING --> RUNNING (new process)
RUNNING --start (declined)--> RUNNING (old process, ProcessAlreadyActive raised)
RUNNING --kill--> TERMINATING --exit--> IDLE

Output and exit notifications of a superseded process are ignored: every spawn gets a
generation number and callbacks carrying an older number are dropped.
"""

import logging
import os
import threading
import time
from typing import Callable, Optional

from dupelist.core.command_builder import full_command, resolve_program
from dupelist.core.completion import CompletionHandler
from dupelist.core.formatter import StreamFormatter
from dupelist.core.interfaces import ListingSink, ProcessHandle, ProcessRunner
from dupelist.core.models import ListingConfig, SearchState, SessionState

logger = logging.getLogger(__name__)


class ProcessAlreadyActive(RuntimeError):
    """Raised when start() is declined while a process is still running."""


class ProcessSession:
    """
    Owns the process handle of one listing view and enforces the singleton invariant.

    Usage:
        session = ProcessSession(SubprocessRunner(), sink, config)
        session.search_state = SearchState.create(["/data"], toggle_flags=["-r"])
        session.run_search(confirm=ask_user)
        session.wait()
    """

    def __init__(
            self,
            runner: ProcessRunner,
            sink: Optional[ListingSink] = None,
            config: Optional[ListingConfig] = None,
            search_state: Optional[SearchState] = None,
            sleep: Callable[[float], None] = time.sleep,
    ):
        self.runner = runner
        self.sink = sink
        self.config = config or ListingConfig()
        self.search_state = search_state
        self.formatter = StreamFormatter(
            sink,
            pad_columns=self.config.listing_option.has_link_count_and_size_columns,
        )
        self.completion = CompletionHandler(self.formatter, sink, release=self._release)
        self.state = SessionState.IDLE
        self.last_command: Optional[str] = None

        self._handle: Optional[ProcessHandle] = None
        self._program_name = os.path.basename(self.config.program)
        self._generation = 0
        self._exited_generation = 0
        self._lock = threading.RLock()
        self._exited = threading.Event()
        self._exited.set()
        self._sleep = sleep

    @property
    def handle(self) -> Optional[ProcessHandle]:
        return self._handle

    def is_running(self) -> bool:
        handle = self._handle
        return handle is not None and handle.is_running()

    # ======================
    #  Process lifecycle
    # ======================

    def start(
            self,
            command: str,
            confirm: Optional[Callable[[], bool]] = None,
            program_name: Optional[str] = None,
    ) -> ProcessHandle:
        """
        Spawns the command, superseding any previous process.

        Args:
            command: Full shell command line
            confirm: Asked before killing a still-running process; declining (or no
                     callback) raises ProcessAlreadyActive
            program_name: Name shown in the summary line

        Raises:
            ProcessAlreadyActive: if a process is running and termination was not confirmed
        """
        with self._lock:
            previous = self._handle
            if previous is not None:
                if previous.is_running():
                    if confirm is None or not confirm():
                        raise ProcessAlreadyActive("A search process is already active")
                self.state = SessionState.TERMINATING
                self._terminate(previous)

            self._generation += 1
            generation = self._generation
            self._handle = None
            self._exited.clear()
            self.formatter.reset()
            if self.sink is not None:
                self.sink.reset()
                self.sink.set_status("run")
            if program_name:
                self._program_name = program_name

            logger.debug(f"Starting process (generation {generation}): {command}")
            try:
                handle = self.runner.spawn(
                    command,
                    on_output=lambda chunk: self._on_output(generation, chunk),
                    on_exit=lambda status: self._on_exit(generation, status),
                )
            except Exception:
                self.state = SessionState.IDLE
                self._exited.set()
                raise

            self.last_command = command
            # A runner may report exit before spawn() returns
            if self._exited_generation != generation:
                self._handle = handle
                self.state = SessionState.RUNNING
            return handle

    def kill(self) -> bool:
        """
        Interrupts the running process, force-killing it after the grace period.
        The exit notification then finalizes the listing.

        Returns:
            True if there was a process to terminate
        """
        with self._lock:
            handle = self._handle
            if handle is None:
                return False
            self.state = SessionState.TERMINATING

        self._terminate(handle)
        return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Blocks until the current process has exited. Returns False on timeout."""
        return self._exited.wait(timeout)

    def _terminate(self, handle: ProcessHandle) -> None:
        """Interrupt, wait for the grace period, force-kill if still alive."""
        try:
            if not handle.is_running():
                return
            handle.interrupt()
        except (ProcessLookupError, OSError) as e:
            logger.debug(f"Interrupt failed, process already gone: {e}")
            return

        self._sleep(self.config.grace_period)

        try:
            if handle.is_running():
                logger.debug(f"Process {handle.pid} ignored interrupt, killing")
                handle.kill()
        except (ProcessLookupError, OSError) as e:
            logger.debug(f"Kill failed, process already gone: {e}")

    # ======================
    #  Delivery path
    # ======================

    def _on_output(self, generation: int, chunk: bytes) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self.formatter.feed(chunk)

    def _on_exit(self, generation: int, exit_status: int) -> None:
        with self._lock:
            if generation != self._generation:
                logger.debug(f"Ignoring exit of superseded process (generation {generation})")
                return
            self._exited_generation = generation
            self.completion.on_exit(exit_status, self._program_name)

    def _release(self) -> None:
        self._handle = None
        self.state = SessionState.IDLE
        self._exited.set()

    # ======================
    #  Search helpers
    # ======================

    def build_command(self, state: Optional[SearchState] = None) -> str:
        """
        Resolves the configured program and renders the full command for a search.

        Raises:
            FileNotFoundError: if the program is not on PATH
            ValueError: if there is no search to run
        """
        state = state or self.search_state
        if state is None:
            raise ValueError("No search parameters available")
        program_path = resolve_program(self.config.program)
        return full_command(program_path, state, self.config.listing_option)

    def run_search(
            self,
            state: Optional[SearchState] = None,
            confirm: Optional[Callable[[], bool]] = None,
    ) -> ProcessHandle:
        """
        Runs a search. A supplied state replaces the session's state wholesale;
        otherwise the last search is re-run unchanged.
        """
        command = self.build_command(state)
        handle = self.start(command, confirm=confirm)
        if state is not None:
            self.search_state = state
        return handle

    def toggle_and_rerun(self, flag: str, confirm: Optional[Callable[[], bool]] = None) -> ProcessHandle:
        """Flips one toggle flag of the last search and re-runs it."""
        if self.search_state is None:
            raise ValueError("No previous search to re-run")
        self.search_state.toggle(flag)
        try:
            return self.run_search(confirm=confirm)
        except ProcessAlreadyActive:
            self.search_state.toggle(flag)
            raise

    def set_size_and_rerun(self, value: str, confirm: Optional[Callable[[], bool]] = None) -> ProcessHandle:
        """Replaces the size filter of the last search and re-runs it."""
        if self.search_state is None:
            raise ValueError("No previous search to re-run")
        previous = self.search_state.size_filter
        self.search_state.set_size(value)
        try:
            return self.run_search(confirm=confirm)
        except ProcessAlreadyActive:
            self.search_state.size_filter = previous
            raise

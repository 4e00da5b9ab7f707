"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines the collaborators (Protocols) the listing core talks to.
The core never spawns processes or draws anything itself: it is handed a runner
that spawns commands and a sink that displays formatted lines.

Key Components:
---------------
- ListingSink: display surface receiving formatted entries and a status indicator.
- ProcessHandle: a live external process that can be interrupted and killed.
- ProcessRunner: spawns a shell command and delivers its output chunks and exit status.
"""

from typing import Protocol, Callable
from dupelist.core.models import FormattedEntry


OutputCallback = Callable[[bytes], None]
ExitCallback = Callable[[int], None]


class ListingSink(Protocol):
    """Interface for the surface that shows the listing."""

    def append_entry(self, entry: FormattedEntry) -> None:
        """Appends one formatted line. Called in output order."""
        ...

    def set_status(self, status: str) -> None:
        """Updates the process status indicator ("run", "exit", "signal")."""
        ...

    def reset(self) -> None:
        """Clears all entries before a new search starts."""
        ...


class ProcessHandle(Protocol):
    """
    Interface for a spawned process.

    interrupt() and kill() may raise ProcessLookupError / OSError when the
    process has already exited; the session swallows those.
    """
    @property
    def pid(self) -> int: ...

    def is_running(self) -> bool: ...

    def interrupt(self) -> None: ...

    def kill(self) -> None: ...


class ProcessRunner(Protocol):
    """
    Interface for spawning shell commands asynchronously.

    Output chunks and the final exit status must be delivered sequentially
    from a single delivery path: every on_output call happens before on_exit.
    """
    def spawn(
        self,
        command: str,
        on_output: OutputCallback,
        on_exit: ExitCallback,
    ) -> ProcessHandle:
        """
        Start the command and return its handle immediately.

        Args:
            command: Full shell command line
            on_output: Called with each raw stdout chunk
            on_exit: Called once with the exit status (negative for signal exits)
        """
        ...

"""
Shared fixtures for listing core tests.
Provides search directories, a scripted process runner and a fake finder program.
"""
import os
import stat
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List

import pytest

# Add src/ to sys.path so 'dupelist' is importable without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from dupelist.core.models import ListingConfig, ListingOption
from dupelist.services.listing import MemorySink


class FakeHandle:
    """Process handle whose liveness is driven by the test."""

    def __init__(self, pid: int, ignores_interrupt: bool = False):
        self.pid = pid
        self.running = True
        self.ignores_interrupt = ignores_interrupt
        self.interrupted = False
        self.killed = False

    def is_running(self) -> bool:
        return self.running

    def interrupt(self) -> None:
        if not self.running:
            raise ProcessLookupError(f"No such process: {self.pid}")
        self.interrupted = True
        if not self.ignores_interrupt:
            self.running = False

    def kill(self) -> None:
        if not self.running:
            raise ProcessLookupError(f"No such process: {self.pid}")
        self.killed = True
        self.running = False


@dataclass
class SpawnedProcess:
    command: str
    on_output: Callable[[bytes], None]
    on_exit: Callable[[int], None]
    handle: FakeHandle

    def emit(self, data: bytes) -> None:
        self.on_output(data)

    def exit(self, status: int = 0) -> None:
        self.handle.running = False
        self.on_exit(status)


class FakeRunner:
    """Records spawned commands; the test delivers output and exit by hand."""

    def __init__(self, ignores_interrupt: bool = False):
        self.spawned: List[SpawnedProcess] = []
        self.ignores_interrupt = ignores_interrupt

    def spawn(self, command, on_output, on_exit):
        handle = FakeHandle(pid=1000 + len(self.spawned), ignores_interrupt=self.ignores_interrupt)
        self.spawned.append(SpawnedProcess(command, on_output, on_exit, handle))
        return handle

    @property
    def last(self) -> SpawnedProcess:
        return self.spawned[-1]


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def sink():
    return MemorySink()


@pytest.fixture
def config():
    """Config with a fast grace period and the default long listing."""
    return ListingConfig(
        program="fdupes",
        listing_option=ListingOption(),
        default_toggle_flags=["-r"],
        grace_period=0.01,
    )


@pytest.fixture
def search_dirs(tmp_path):
    """Two existing directories to search."""
    dir_a = tmp_path / "a"
    dir_b = tmp_path / "b"
    dir_a.mkdir()
    dir_b.mkdir()
    return dir_a, dir_b


@pytest.fixture
def fake_finder(tmp_path, monkeypatch):
    """
    Installs an executable named 'fdupes' on PATH that prints one './'-prefixed
    line per directory argument, then a blank group separator.
    """
    if sys.platform == "win32":
        pytest.skip("Shell script finder requires a POSIX shell")

    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    script = bin_dir / "fdupes"
    script.write_text(
        "#!/bin/sh\n"
        "for arg in \"$@\"; do\n"
        "  case \"$arg\" in\n"
        "    -*) ;;\n"
        "    *) echo \"./$(basename \"$arg\")/copy.txt\" ;;\n"
        "  esac\n"
        "done\n"
        "echo\n"
    )
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    monkeypatch.setenv("PATH", str(bin_dir) + os.pathsep + os.environ.get("PATH", ""))
    return script

"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/process_runner.py
subprocess-based runner: spawns the finder pipeline through the shell and pumps its
merged stdout/stderr to the session from a single reader thread.
"""
import logging
import os
import signal
import subprocess
import sys
import threading
from typing import Optional, Dict

from dupelist.core.interfaces import OutputCallback, ExitCallback

logger = logging.getLogger(__name__)

CHUNK_SIZE = 4096


class SubprocessHandle:
    """Handle of a shell pipeline started in its own process group."""

    def __init__(self, process: subprocess.Popen):
        self._process = process

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def returncode(self) -> Optional[int]:
        return self._process.returncode

    def is_running(self) -> bool:
        return self._process.poll() is None

    def interrupt(self) -> None:
        """Sends SIGINT to the whole pipeline (terminate() on Windows)."""
        if sys.platform == "win32":
            self._process.terminate()
        else:
            os.killpg(self._process.pid, signal.SIGINT)

    def kill(self) -> None:
        if sys.platform == "win32":
            self._process.kill()
        else:
            os.killpg(self._process.pid, signal.SIGKILL)

    def __repr__(self):
        return f"<SubprocessHandle pid={self.pid}>"


class SubprocessRunner:
    """
    Spawns commands with subprocess.Popen(shell=True).
    Each process gets one daemon reader thread: all output callbacks and the exit
    callback come from that thread, in order.
    """

    def __init__(self, cwd: Optional[str] = None, env: Optional[Dict[str, str]] = None,
                 chunk_size: int = CHUNK_SIZE):
        self.cwd = cwd
        self.env = env
        self.chunk_size = chunk_size

    def spawn(self, command: str, on_output: OutputCallback, on_exit: ExitCallback) -> SubprocessHandle:
        process = subprocess.Popen(
            command,
            shell=True,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            cwd=self.cwd,
            env=self.env,
            start_new_session=(sys.platform != "win32"),
        )
        logger.debug(f"Spawned pid {process.pid}")

        reader = threading.Thread(
            target=self._pump,
            args=(process, on_output, on_exit),
            name=f"dupelist-reader-{process.pid}",
            daemon=True,
        )
        reader.start()
        return SubprocessHandle(process)

    def _pump(self, process: subprocess.Popen, on_output: OutputCallback, on_exit: ExitCallback) -> None:
        fd = process.stdout.fileno()
        try:
            while True:
                chunk = os.read(fd, self.chunk_size)
                if not chunk:
                    break
                on_output(chunk)
        except Exception:
            logger.exception("Error while reading process output")
        finally:
            process.stdout.close()

        status = process.wait()
        logger.debug(f"Process {process.pid} exited with status {status}")
        try:
            on_exit(status)
        except Exception:
            logger.exception("Error while finalizing listing")

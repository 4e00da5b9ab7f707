"""
Qt process runner — QProcess adapter for ProcessSession.
Output chunks and the exit status are delivered on the Qt event loop, so the listing
widget is only ever touched from the GUI thread.
"""
import os
import signal
import sys
from typing import Optional

from PySide6.QtCore import QObject, QProcess
from dupelist.core.interfaces import OutputCallback, ExitCallback

SIGKILL = getattr(signal, "SIGKILL", 9)


class QProcessHandle:
    """Wraps a QProcess; remembers the last signal sent to report crash exits."""

    def __init__(self, process: QProcess):
        self.process = process
        self.last_signal: Optional[int] = None

    @property
    def pid(self) -> int:
        return int(self.process.processId())

    def is_running(self) -> bool:
        return self.process.state() != QProcess.ProcessState.NotRunning

    def interrupt(self) -> None:
        self.last_signal = signal.SIGINT
        if sys.platform == "win32":
            self.process.terminate()
        else:
            os.kill(self.pid, signal.SIGINT)

    def kill(self) -> None:
        self.last_signal = SIGKILL
        self.process.kill()

    def exit_status(self, exit_code: int, exit_status: QProcess.ExitStatus) -> int:
        """Negative signal number for crash exits, like subprocess.Popen.returncode."""
        if exit_status == QProcess.ExitStatus.CrashExit:
            return -(self.last_signal or SIGKILL)
        return exit_code


class QProcessRunner:
    """Spawns commands through the platform shell with QProcess."""

    def __init__(self, parent: Optional[QObject] = None):
        self.parent = parent

    def spawn(self, command: str, on_output: OutputCallback, on_exit: ExitCallback) -> QProcessHandle:
        process = QProcess(self.parent)
        process.setProcessChannelMode(QProcess.ProcessChannelMode.MergedChannels)
        handle = QProcessHandle(process)

        def read_output():
            chunk = bytes(process.readAllStandardOutput())
            if chunk:
                on_output(chunk)

        def finished(exit_code, exit_status):
            read_output()
            on_exit(handle.exit_status(exit_code, exit_status))
            process.deleteLater()

        def error_occurred(error):
            if error == QProcess.ProcessError.FailedToStart:
                on_exit(127)

        process.readyReadStandardOutput.connect(read_output)
        process.finished.connect(finished)
        process.errorOccurred.connect(error_occurred)

        if sys.platform == "win32":
            process.start("cmd", ["/c", command])
        else:
            process.start("/bin/sh", ["-c", command])
        return handle

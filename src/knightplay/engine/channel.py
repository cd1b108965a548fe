"""Line-oriented transport to an external search process."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence

from PyQt6.QtCore import QObject, QProcess

_LOGGER = logging.getLogger(__name__)

LineHandler = Callable[[str], None]
FailureHandler = Callable[[str], None]


class IProcessChannel(ABC):
    """Interface for a text-line command/response process."""

    @abstractmethod
    def start(self, on_line: LineHandler, on_failure: FailureHandler) -> bool:
        """Launch the process. Returns ``False`` if it cannot be started."""

    @abstractmethod
    def send(self, command: str) -> None:
        """Write one command line."""

    @property
    @abstractmethod
    def is_running(self) -> bool: ...

    @abstractmethod
    def terminate(self) -> None:
        """Forcibly stop the process. Safe to call repeatedly."""


class QProcessChannel(IProcessChannel):
    """``QProcess``-backed channel; output lines arrive on the Qt event loop."""

    _KILL_WAIT_MS = 1000

    __slots__ = ("_program", "_args", "_process", "_buffer", "_on_line", "_on_failure")

    def __init__(
        self,
        program: str,
        args: Sequence[str] = (),
        parent: QObject | None = None,
    ) -> None:
        self._program = program
        self._args = list(args)
        self._process = QProcess(parent)
        self._buffer = ""
        self._on_line: LineHandler | None = None
        self._on_failure: FailureHandler | None = None

    @property
    def program(self) -> str:
        return self._program

    def start(self, on_line: LineHandler, on_failure: FailureHandler) -> bool:
        if self.is_running:
            return True
        self._on_line = on_line
        self._on_failure = on_failure
        self._process.readyReadStandardOutput.connect(self._read_output)
        self._process.errorOccurred.connect(self._on_error)
        self._process.finished.connect(self._on_finished)
        _LOGGER.debug("Starting search process: %s %s", self._program, self._args)
        self._process.start(self._program, self._args)
        return True

    def send(self, command: str) -> None:
        if not self.is_running:
            return
        _LOGGER.debug(">> %s", command)
        self._process.write(f"{command}\n".encode())

    @property
    def is_running(self) -> bool:
        return self._process.state() != QProcess.ProcessState.NotRunning

    def terminate(self) -> None:
        if not self.is_running:
            return
        self._on_failure = None
        self._process.kill()
        self._process.waitForFinished(self._KILL_WAIT_MS)

    # ── Internal ─────────────────────────────────────────────────────────

    def _read_output(self) -> None:
        chunk = bytes(self._process.readAllStandardOutput()).decode(errors="replace")
        self._buffer += chunk
        *lines, self._buffer = self._buffer.split("\n")
        for raw in lines:
            line = raw.strip()
            if not line:
                continue
            _LOGGER.debug("<< %s", line)
            if self._on_line is not None:
                self._on_line(line)

    def _on_error(self, error: QProcess.ProcessError) -> None:
        message = f"{error.name}: {self._process.errorString()}"
        _LOGGER.warning("Search process error: %s", message)
        if self._on_failure is not None:
            self._on_failure(message)

    def _on_finished(self, exit_code: int, _status: QProcess.ExitStatus) -> None:
        if self._on_failure is not None:
            self._on_failure(f"process exited with code {exit_code}")

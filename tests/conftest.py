"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import random
from collections.abc import Iterator

import pytest

from knightplay.config import EngineSettings
from knightplay.engine.adapter import SearchProcessAdapter
from knightplay.engine.channel import FailureHandler, IProcessChannel, LineHandler


class FakeChannel(IProcessChannel):
    """In-memory process: records commands, lets tests push output lines."""

    def __init__(self, *, can_start: bool = True) -> None:
        self.sent: list[str] = []
        self.terminate_calls = 0
        self._can_start = can_start
        self._running = False
        self._on_line: LineHandler | None = None
        self._on_failure: FailureHandler | None = None

    def start(self, on_line: LineHandler, on_failure: FailureHandler) -> bool:
        if not self._can_start:
            return False
        self._on_line = on_line
        self._on_failure = on_failure
        self._running = True
        return True

    def send(self, command: str) -> None:
        self.sent.append(command)

    @property
    def is_running(self) -> bool:
        return self._running

    def terminate(self) -> None:
        self.terminate_calls += 1
        self._running = False

    # ── Test helpers ─────────────────────────────────────────────────────

    def feed(self, *lines: str) -> None:
        assert self._on_line is not None
        for line in lines:
            self._on_line(line)

    def crash(self, message: str = "crashed") -> None:
        assert self._on_failure is not None
        self._running = False
        self._on_failure(message)


@pytest.fixture(scope="session", autouse=True)
def qapp() -> Iterator[object]:
    """Provide a singleton QCoreApplication so timers have an event loop."""
    from PyQt6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def channel() -> FakeChannel:
    return FakeChannel()


@pytest.fixture
def adapter(channel: FakeChannel, rng: random.Random) -> Iterator[SearchProcessAdapter]:
    """Adapter whose fake process has completed the handshake."""
    adapter = SearchProcessAdapter(
        channel,
        settings=EngineSettings(
            handshake_timeout_ms=50, eval_timeout_ms=50, move_timeout_ms=200
        ),
        rng=rng,
    )
    adapter.init()
    channel.feed("id name FakeFish", "uciok", "readyok")
    channel.sent.clear()
    yield adapter
    adapter.destroy()


@pytest.fixture
def dead_channel() -> FakeChannel:
    """A process that fails to launch."""
    return FakeChannel(can_start=False)


@pytest.fixture
def spare_channel() -> FakeChannel:
    """A second process, for tests that build their own adapter."""
    return FakeChannel()

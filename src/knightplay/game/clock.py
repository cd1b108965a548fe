"""Chess clock ticking in whole seconds with Fischer increment."""

from __future__ import annotations

from collections.abc import Callable

from PyQt6.QtCore import QObject, QTimer

from knightplay.core.enums import Color
from knightplay.game.interfaces import IClock, TimeControl

ClockTickCallback = Callable[[dict[Color, int]], None]
TimeoutCallback = Callable[[Color], None]


class Clock(IClock):
    """Dual countdown clock driven by a 1 Hz ``QTimer``.

    Each tick takes one second from the side returned by *side_to_move*.
    Remaining time never goes below zero; reaching zero stops the clock and
    reports the timeout once.
    """

    _TICK_INTERVAL_MS = 1000

    __slots__ = (
        "_time_control",
        "_remaining",
        "_side_to_move",
        "_on_tick",
        "_on_timeout",
        "_timer",
        "_running",
        "_flagged",
    )

    def __init__(
        self,
        time_control: TimeControl,
        side_to_move: Callable[[], Color],
        *,
        on_tick: ClockTickCallback | None = None,
        on_timeout: TimeoutCallback | None = None,
        parent: QObject | None = None,
    ) -> None:
        self._time_control = time_control
        self._remaining: dict[Color, int] = {
            Color.WHITE: time_control.initial_seconds,
            Color.BLACK: time_control.initial_seconds,
        }
        self._side_to_move = side_to_move
        self._on_tick = on_tick
        self._on_timeout = on_timeout
        self._timer = QTimer(parent)
        self._timer.setInterval(self._TICK_INTERVAL_MS)
        self._timer.timeout.connect(self.tick)
        self._running = False
        self._flagged: Color | None = None

    # ── IClock implementation ────────────────────────────────────────────

    def start(self) -> None:
        if self._running or self._flagged is not None:
            return
        self._running = True
        self._timer.start()

    def stop(self) -> None:
        self._running = False
        self._timer.stop()

    def tick(self) -> None:
        if not self._running:
            return
        color = self._side_to_move()
        if self._remaining[color] > 0:
            self._remaining[color] -= 1
            if self._on_tick is not None:
                self._on_tick(self.snapshot())
        if self._remaining[color] == 0:
            self.stop()
            self._flag(color)

    def remaining(self, color: Color) -> int:
        return self._remaining[color]

    def add_increment(self, color: Color) -> None:
        self._remaining[color] += self._time_control.increment_seconds

    # ── Extra helpers ────────────────────────────────────────────────────

    @property
    def time_control(self) -> TimeControl:
        return self._time_control

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def flagged(self) -> Color | None:
        """Side whose time ran out, if any."""
        return self._flagged

    def snapshot(self) -> dict[Color, int]:
        return dict(self._remaining)

    def reset(self, time_control: TimeControl | None = None) -> None:
        """Stop and refill both sides, optionally with a new time control."""
        self.stop()
        if time_control is not None:
            self._time_control = time_control
        initial = self._time_control.initial_seconds
        self._remaining = {Color.WHITE: initial, Color.BLACK: initial}
        self._flagged = None

    def set_remaining(self, color: Color, seconds: int) -> None:
        """Manually override remaining time (for testing / adjournment)."""
        self._remaining[color] = max(0, seconds)

    # ── Internal ─────────────────────────────────────────────────────────

    def _flag(self, color: Color) -> None:
        if self._flagged is not None:
            return
        self._flagged = color
        if self._on_timeout is not None:
            self._on_timeout(color)

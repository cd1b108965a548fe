"""Session event slots.

One subscriber per event kind; registering a new callback replaces the
previous one and ``None`` clears the slot.  The process-ready slot has
catch-up semantics: a callback registered after readiness is invoked at
once.
"""

from __future__ import annotations

from collections.abc import Callable

from knightplay.core.enums import Color
from knightplay.game.state import GameOverInfo, SessionSnapshot

MoveCallback = Callable[[SessionSnapshot], None]
ClockTickCallback = Callable[[dict[Color, int]], None]
GameOverCallback = Callable[[GameOverInfo], None]
ProcessReadyCallback = Callable[[], None]


class SessionEvents:
    """Single-subscriber callbacks for move, clock, game-over and ready."""

    __slots__ = ("_on_move", "_on_clock_tick", "_on_game_over", "_on_process_ready", "_ready")

    def __init__(self) -> None:
        self._on_move: MoveCallback | None = None
        self._on_clock_tick: ClockTickCallback | None = None
        self._on_game_over: GameOverCallback | None = None
        self._on_process_ready: ProcessReadyCallback | None = None
        self._ready = False

    # ── Registration ─────────────────────────────────────────────────────

    def on_move(self, callback: MoveCallback | None) -> None:
        self._on_move = callback

    def on_clock_tick(self, callback: ClockTickCallback | None) -> None:
        self._on_clock_tick = callback

    def on_game_over(self, callback: GameOverCallback | None) -> None:
        self._on_game_over = callback

    def on_process_ready(self, callback: ProcessReadyCallback | None) -> None:
        self._on_process_ready = callback
        if self._ready and callback is not None:
            callback()

    # ── Emission ─────────────────────────────────────────────────────────

    @property
    def process_ready(self) -> bool:
        return self._ready

    def emit_move(self, snapshot: SessionSnapshot) -> None:
        if self._on_move is not None:
            self._on_move(snapshot)

    def emit_clock_tick(self, clocks: dict[Color, int]) -> None:
        if self._on_clock_tick is not None:
            self._on_clock_tick(clocks)

    def emit_game_over(self, info: GameOverInfo) -> None:
        if self._on_game_over is not None:
            self._on_game_over(info)

    def emit_process_ready(self) -> None:
        self._ready = True
        if self._on_process_ready is not None:
            self._on_process_ready()

"""Search process adapter: handshake, skill setup, move search, evaluation.

One adapter owns one external process and is shared by every session that
the host composes.  It has a single in-flight slot: at most one move search
or evaluation is outstanding at a time.  When the process is missing or
stops responding the adapter reports itself unavailable and callers fall
back to :meth:`SearchProcessAdapter.fallback_move`.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Sequence
from types import TracebackType

from PyQt6.QtCore import QObject, QTimer

from knightplay.config import EngineSettings
from knightplay.engine import protocol
from knightplay.engine.channel import IProcessChannel

_LOGGER = logging.getLogger(__name__)

ReadyCallback = Callable[[], None]
MoveCallback = Callable[[str | None], None]  # uci token, None if no usable move
ScoreCallback = Callable[[float | None], None]  # pawns, None on timeout/failure


class SearchProcessAdapter:
    """Drives an external UCI search process over an :class:`IProcessChannel`."""

    __slots__ = (
        "__weakref__",
        "_channel",
        "_settings",
        "_rng",
        "_handshake_timer",
        "_eval_timer",
        "_move_timer",
        "_ready_listeners",
        "_is_ready",
        "_is_available",
        "_is_started",
        "_is_destroyed",
        "_pending_move",
        "_pending_eval",
        "_last_score",
        "_discard_bestmoves",
    )

    def __init__(
        self,
        channel: IProcessChannel | None = None,
        *,
        settings: EngineSettings | None = None,
        rng: random.Random | None = None,
        parent: QObject | None = None,
    ) -> None:
        self._channel = channel
        self._settings = settings or EngineSettings()
        self._rng = rng or random.Random()

        self._handshake_timer = QTimer(parent)
        self._handshake_timer.setSingleShot(True)
        self._handshake_timer.timeout.connect(self._on_handshake_timeout)

        self._eval_timer = QTimer(parent)
        self._eval_timer.setSingleShot(True)
        self._eval_timer.timeout.connect(self._on_eval_timeout)

        self._move_timer = QTimer(parent)
        self._move_timer.setSingleShot(True)
        self._move_timer.timeout.connect(self._on_move_timeout)

        self._ready_listeners: list[ReadyCallback] = []
        self._is_ready = False
        self._is_available = False
        self._is_started = False
        self._is_destroyed = False
        self._pending_move: MoveCallback | None = None
        self._pending_eval: ScoreCallback | None = None
        self._last_score = 0.0
        self._discard_bestmoves = 0

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def is_ready(self) -> bool:
        """Handshake finished, either with the process or by timeout."""
        return self._is_ready

    @property
    def is_available(self) -> bool:
        """The process answered the handshake and is still running."""
        return (
            self._is_available
            and self._channel is not None
            and self._channel.is_running
        )

    @property
    def is_degraded(self) -> bool:
        return self._is_ready and not self.is_available

    @property
    def is_busy(self) -> bool:
        """The in-flight slot is taken."""
        return self._pending_move is not None or self._pending_eval is not None

    # ── Lifecycle ────────────────────────────────────────────────────────

    def init(self) -> None:
        """Start the process and begin the handshake."""
        if self._is_started or self._is_destroyed:
            return
        self._is_started = True

        if self._channel is None or not self._channel.start(self._on_line, self._on_failure):
            _LOGGER.warning("No search process; using random fallback moves")
            self._mark_ready()
            return

        self._channel.send(protocol.UCI)
        self._channel.send(protocol.IS_READY)
        self._handshake_timer.start(self._settings.handshake_timeout_ms)

    def destroy(self) -> None:
        """Send ``quit`` and kill the process. Idempotent."""
        if self._is_destroyed:
            return
        self._is_destroyed = True
        self._handshake_timer.stop()
        self._eval_timer.stop()
        self._move_timer.stop()
        self._pending_move = None
        self._pending_eval = None
        self._is_available = False
        if self._channel is not None and self._channel.is_running:
            self._channel.send(protocol.QUIT)
            self._channel.terminate()

    def __enter__(self) -> SearchProcessAdapter:
        self.init()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.destroy()

    def add_ready_listener(self, callback: ReadyCallback) -> None:
        """Call *callback* once ready; immediately if already ready."""
        self._ready_listeners.append(callback)
        if self._is_ready:
            callback()

    def remove_ready_listener(self, callback: ReadyCallback) -> None:
        if callback in self._ready_listeners:
            self._ready_listeners.remove(callback)

    # ── Commands ─────────────────────────────────────────────────────────

    def new_match(self, skill: int) -> None:
        """Reset the process for a new game and set its skill (0..20)."""
        if not self.is_available:
            return
        assert self._channel is not None
        self._channel.send(protocol.NEW_GAME)
        self._channel.send(protocol.IS_READY)
        self._channel.send(protocol.set_skill(skill))
        _LOGGER.debug("Engine skill set to %d", skill)

    def request_move(self, fen: str, depth: int, on_move: MoveCallback) -> bool:
        """Start a depth-bounded search.

        Returns ``False`` (and never calls *on_move*) if the process is not
        available or the in-flight slot is taken.  *on_move* gets ``None`` if
        no answer arrives within ``move_timeout_ms``.
        """
        if not self.is_available or self.is_busy:
            return False
        assert self._channel is not None
        self._pending_move = on_move
        self._channel.send(protocol.set_position(fen))
        self._channel.send(protocol.search(depth))
        self._move_timer.start(self._settings.move_timeout_ms)
        return True

    def evaluate(
        self,
        fen: str,
        on_score: ScoreCallback,
        *,
        depth: int | None = None,
        timeout_ms: int | None = None,
    ) -> bool:
        """Start a shallow evaluation; *on_score* always fires exactly once.

        The score is side-to-move relative, in pawns.  ``None`` is delivered
        if no terminal response arrives within the timeout.
        """
        if not self.is_available or self.is_busy:
            return False
        assert self._channel is not None
        self._pending_eval = on_score
        self._last_score = 0.0
        self._channel.send(protocol.set_position(fen))
        self._channel.send(protocol.search(depth or self._settings.eval_depth))
        self._eval_timer.start(timeout_ms or self._settings.eval_timeout_ms)
        return True

    def cancel_search(self) -> None:
        """Abandon the outstanding request and free the in-flight slot.

        The pending callback is called with ``None``; the process is told to
        ``stop`` and its late ``bestmove`` is discarded.
        """
        if not self.is_busy:
            return
        self._abandon_search()
        self._fail_pending()

    def fallback_move(self, legal_moves: Sequence[str]) -> str | None:
        """Pick uniformly among *legal_moves*."""
        if not legal_moves:
            return None
        return self._rng.choice(list(legal_moves))

    # ── Process output ───────────────────────────────────────────────────

    def _on_line(self, line: str) -> None:
        if self._is_destroyed:
            return
        line = line.strip()

        if protocol.is_ready_token(line):
            self._is_available = True
            if not self._is_ready:
                self._handshake_timer.stop()
                _LOGGER.info("Search process ready")
                self._mark_ready()
            return

        if line.startswith("info"):
            if self._pending_eval is not None:
                score = protocol.parse_score(line)
                if score is not None:
                    self._last_score = score
            return

        if protocol.is_bestmove_line(line):
            self._on_bestmove(line)

    def _on_bestmove(self, line: str) -> None:
        if self._discard_bestmoves > 0:
            self._discard_bestmoves -= 1
            return

        if self._pending_eval is not None:
            self._eval_timer.stop()
            callback = self._pending_eval
            self._pending_eval = None
            callback(self._last_score)
            return

        if self._pending_move is not None:
            self._move_timer.stop()
            callback = self._pending_move
            self._pending_move = None
            token = protocol.parse_bestmove(line)
            if token is None:
                _LOGGER.warning("Discarding malformed response: %r", line)
            callback(token)

    def _on_failure(self, message: str) -> None:
        if self._is_destroyed:
            return
        was_available = self._is_available
        self._is_available = False
        if was_available:
            _LOGGER.warning("Search process unavailable: %s", message)
        if not self._is_ready:
            self._handshake_timer.stop()
            self._mark_ready()
        self._fail_pending()

    def _on_handshake_timeout(self) -> None:
        if self._is_ready:
            return
        _LOGGER.warning(
            "Search process did not answer within %d ms; using fallback moves",
            self._settings.handshake_timeout_ms,
        )
        self._mark_ready()

    def _on_eval_timeout(self) -> None:
        if self._pending_eval is None:
            return
        callback = self._pending_eval
        self._pending_eval = None
        self._abandon_search()
        _LOGGER.info("Evaluation timed out")
        callback(None)

    def _on_move_timeout(self) -> None:
        if self._pending_move is None:
            return
        callback = self._pending_move
        self._pending_move = None
        self._abandon_search()
        _LOGGER.warning(
            "Search process gave no move within %d ms; using a fallback move",
            self._settings.move_timeout_ms,
        )
        callback(None)

    # ── Internal ─────────────────────────────────────────────────────────

    def _abandon_search(self) -> None:
        if self._channel is not None and self._channel.is_running:
            # The search is still running; its bestmove must not resolve
            # the next request.
            self._discard_bestmoves += 1
            self._channel.send(protocol.STOP)

    def _mark_ready(self) -> None:
        self._is_ready = True
        for callback in list(self._ready_listeners):
            callback()

    def _fail_pending(self) -> None:
        self._eval_timer.stop()
        self._move_timer.stop()
        move_cb, eval_cb = self._pending_move, self._pending_eval
        self._pending_move = None
        self._pending_eval = None
        if move_cb is not None:
            move_cb(None)
        if eval_cb is not None:
            eval_cb(None)

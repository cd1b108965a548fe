"""SessionController — one human-vs-engine match.

Coordinates: RulesAuthority, Clock, SearchProcessAdapter, SessionEvents.

All mutation runs on the thread that owns the Qt event loop: clock ticks,
delayed replies and process output are delivered there, so moves, ticks and
search responses never interleave.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable

from PyQt6.QtCore import QObject, QTimer

from knightplay.config import SessionSettings
from knightplay.core.enums import Color, EndReason, LifecycleState, Outcome
from knightplay.core.move import Move, parse_uci_move
from knightplay.core.rules import ChessRules, IRulesAuthority, Position
from knightplay.engine.adapter import SearchProcessAdapter
from knightplay.engine.levels import OpponentLevel, resolve_level
from knightplay.game.clock import Clock
from knightplay.game.events import SessionEvents
from knightplay.game.interfaces import ISessionController, TimeControl
from knightplay.game.state import (
    GameOverInfo,
    MoveResult,
    PositionInfo,
    SessionSnapshot,
)

_LOGGER = logging.getLogger(__name__)

DrawCallback = Callable[[bool], None]


class SessionController(ISessionController):
    """Owns match state, drives the clock and talks to the search process.

    Lifecycle: ``IDLE`` until :meth:`new_game`, then ``ACTIVE`` until a
    terminal condition moves it to ``ENDED`` exactly once.
    """

    __slots__ = (
        "_rules",
        "_adapter",
        "_settings",
        "_rng",
        "_parent",
        "events",
        "_reply_timer",
        "_clock",
        "_position",
        "_moves",
        "_positions",
        "_time_control",
        "_level",
        "_player_side",
        "_lifecycle",
        "_game_over",
        "_game_id",
        "_in_flight",
        "_evaluating",
    )

    def __init__(
        self,
        adapter: SearchProcessAdapter | None = None,
        rules: IRulesAuthority | None = None,
        *,
        settings: SessionSettings | None = None,
        rng: random.Random | None = None,
        parent: QObject | None = None,
    ) -> None:
        self._rules = rules or ChessRules()
        self._rng = rng or random.Random()
        if adapter is None:
            # No search process: degraded from the start.
            adapter = SearchProcessAdapter(rng=self._rng, parent=parent)
            adapter.init()
        self._adapter = adapter
        self._settings = settings or SessionSettings()
        self._parent = parent
        self.events = SessionEvents()

        self._reply_timer = QTimer(parent)
        self._reply_timer.setSingleShot(True)
        self._reply_timer.timeout.connect(self.request_opponent_move)

        self._time_control = TimeControl()
        self._clock = self._make_clock(self._time_control)
        self._position: Position = self._rules.initial_position()
        self._moves: list[Move] = []
        self._positions: list[str] = [self._rules.fen(self._position)]
        self._level = resolve_level(self._settings.default_level)
        self._player_side = Color.WHITE
        self._lifecycle = LifecycleState.IDLE
        self._game_over: GameOverInfo | None = None
        self._game_id = 0
        self._in_flight = False
        self._evaluating = False

        self._adapter.add_ready_listener(self.events.emit_process_ready)

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def adapter(self) -> SearchProcessAdapter:
        return self._adapter

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def lifecycle(self) -> LifecycleState:
        return self._lifecycle

    @property
    def player_side(self) -> Color:
        return self._player_side

    @property
    def opponent_side(self) -> Color:
        return self._player_side.opposite

    @property
    def side_to_move(self) -> Color:
        return self._rules.side_to_move(self._position)

    @property
    def is_awaiting_opponent(self) -> bool:
        """An opponent reply is scheduled or being searched."""
        return self._in_flight or self._reply_timer.isActive()

    # ── ISessionController impl ──────────────────────────────────────────

    def new_game(
        self,
        opponent_level: str | OpponentLevel | None = None,
        player_side: str | Color = "w",
        time_control: TimeControl | None = None,
        starting_fen: str | None = None,
    ) -> SessionSnapshot:
        position = self._rules.initial_position(starting_fen)

        self._reply_timer.stop()

        self._game_id += 1
        self._cancel_search()
        self._level = resolve_level(
            opponent_level if opponent_level is not None else self._settings.default_level
        )
        self._player_side = self._resolve_side(player_side)
        self._time_control = time_control or TimeControl()
        self._clock.reset(self._time_control)
        self._position = position
        self._moves = []
        self._positions = [self._rules.fen(position)]
        self._game_over = None
        self._lifecycle = LifecycleState.ACTIVE

        _LOGGER.info(
            "New game: level=%s player=%s time=%s",
            self._level.key,
            self._player_side,
            self._time_control,
        )
        self._adapter.new_match(self._level.skill)

        info = self._terminal_info()
        if info is not None:
            self._end(info)
            return self.get_state()

        self._clock.start()
        if self.side_to_move != self._player_side:
            self._reply_timer.start(self._settings.first_move_delay_ms)
        return self.get_state()

    def apply_player_move(
        self, from_square: str, to_square: str, promotion: str | None = None
    ) -> MoveResult:
        if self._lifecycle != LifecycleState.ACTIVE:
            return MoveResult.invalid()
        if self.side_to_move != self._player_side or self.is_awaiting_opponent:
            return MoveResult.invalid()

        move = self._apply(from_square, to_square, promotion)
        if move is None:
            return MoveResult.invalid()

        if self._lifecycle == LifecycleState.ACTIVE and self.side_to_move != self._player_side:
            low, high = self._settings.reply_delay_ms
            self._reply_timer.start(self._rng.randint(low, high))
        return MoveResult(valid=True, move=move)

    def request_opponent_move(self) -> None:
        if self._lifecycle != LifecycleState.ACTIVE:
            return
        if self._rules.is_game_over(self._position):
            return
        if self.side_to_move == self._player_side or self._in_flight:
            return

        self._reply_timer.stop()
        if self._adapter.is_available and self._adapter.is_busy:
            # The slot is held by another request; the process itself is fine.
            self._reply_timer.start(self._settings.busy_retry_ms)
            return

        self._in_flight = True
        game_id = self._game_id
        requested = self._adapter.request_move(
            self._rules.fen(self._position),
            self._level.depth,
            lambda token: self._on_opponent_move(game_id, token),
        )
        if not requested:
            self._in_flight = False
            self._play_fallback_move()

    def resign(self) -> None:
        if self._lifecycle != LifecycleState.ACTIVE:
            return
        self._clock.stop()
        self._end(GameOverInfo(Outcome.LOSS, EndReason.RESIGNATION, self.opponent_side))

    def offer_draw(self, on_result: DrawCallback | None = None) -> None:
        resolve = on_result or (lambda _accepted: None)
        if self._lifecycle != LifecycleState.ACTIVE:
            resolve(False)
            return

        if not self._adapter.is_available:
            accepted = len(self._moves) > self._settings.draw_fallback_min_plies
            if accepted:
                self._end(GameOverInfo(Outcome.DRAW, EndReason.AGREEMENT))
            resolve(accepted)
            return

        game_id = self._game_id
        self._evaluating = True
        started = self._adapter.evaluate(
            self._rules.fen(self._position),
            lambda score: self._on_draw_evaluation(game_id, score, resolve),
        )
        if not started:
            self._evaluating = False
            _LOGGER.info("Draw offer declined: search process busy")
            resolve(False)

    def get_state(self) -> SessionSnapshot:
        position = self._position
        return SessionSnapshot(
            position=PositionInfo(
                fen=self._rules.fen(position),
                side_to_move=self._rules.side_to_move(position),
                is_check=self._rules.is_check(position),
                is_checkmate=self._rules.is_checkmate(position),
                is_stalemate=self._rules.is_stalemate(position),
                is_draw=self._rules.is_draw(position),
                is_game_over=self._rules.is_game_over(position),
            ),
            move_history=tuple(self._moves),
            position_history=tuple(self._positions),
            clocks=self._clock.snapshot(),
            time_control=self._time_control,
            opponent_level=self._level,
            player_side=self._player_side,
            lifecycle=self._lifecycle,
            game_over=self._game_over,
            legal_moves=tuple(self._rules.legal_moves(position)),
        )

    # ── Queries / clock control ──────────────────────────────────────────

    def legal_moves(self, square: str | None = None) -> list[str]:
        return self._rules.legal_moves(self._position, square)

    def is_legal_move(self, from_square: str, to_square: str) -> bool:
        return any(uci[2:4] == to_square for uci in self.legal_moves(from_square))

    def needs_promotion(self, from_square: str, to_square: str) -> bool:
        return self._rules.needs_promotion(self._position, from_square, to_square)

    def start_clock(self) -> None:
        if self._lifecycle == LifecycleState.ACTIVE:
            self._clock.start()

    def stop_clock(self) -> None:
        self._clock.stop()

    # ── Event registration ───────────────────────────────────────────────

    def on_move(self, callback: Callable[[SessionSnapshot], None] | None) -> None:
        self.events.on_move(callback)

    def on_clock_tick(self, callback: Callable[[dict[Color, int]], None] | None) -> None:
        self.events.on_clock_tick(callback)

    def on_game_over(self, callback: Callable[[GameOverInfo], None] | None) -> None:
        self.events.on_game_over(callback)

    def on_process_ready(self, callback: Callable[[], None] | None) -> None:
        self.events.on_process_ready(callback)

    def close(self) -> None:
        """Stop timers and detach from the shared adapter."""
        self._reply_timer.stop()
        self._clock.stop()
        self._game_id += 1
        self._cancel_search()
        self._adapter.remove_ready_listener(self.events.emit_process_ready)

    # ── Internal helpers ─────────────────────────────────────────────────

    def _apply(self, from_square: str, to_square: str, promotion: str | None) -> Move | None:
        """Shared application path for player and opponent moves."""
        result = self._rules.apply_move(self._position, from_square, to_square, promotion)
        if not result.success or result.move is None or result.position is None:
            return None

        move = result.move
        self._position = result.position
        self._moves.append(move)
        self._positions.append(move.fen_after)
        self._clock.add_increment(move.side)

        self.events.emit_move(self.get_state())

        info = self._terminal_info()
        if info is not None:
            self._end(info)
        return move

    def _on_opponent_move(self, game_id: int, token: str | None) -> None:
        if game_id != self._game_id:
            return
        self._in_flight = False
        if self._lifecycle != LifecycleState.ACTIVE:
            return
        if self.side_to_move == self._player_side:
            return

        parsed = parse_uci_move(token) if token else None
        if parsed is not None and self._apply(*parsed) is not None:
            return
        _LOGGER.warning("Unusable opponent move %r; playing a fallback move", token)
        self._play_fallback_move()

    def _play_fallback_move(self) -> None:
        token = self._adapter.fallback_move(self._rules.legal_moves(self._position))
        parsed = parse_uci_move(token) if token else None
        if parsed is None:
            return
        _LOGGER.debug("Fallback move %s", token)
        self._apply(*parsed)

    def _on_draw_evaluation(
        self, game_id: int, score: float | None, resolve: DrawCallback
    ) -> None:
        if game_id == self._game_id:
            self._evaluating = False
        if game_id != self._game_id or self._lifecycle != LifecycleState.ACTIVE:
            resolve(False)
            return
        if score is None:
            resolve(False)
            return

        # Engine scores are relative to the side to move.
        opponent_eval = score if self.side_to_move == self.opponent_side else -score
        if opponent_eval <= self._settings.draw_accept_threshold:
            self._end(GameOverInfo(Outcome.DRAW, EndReason.AGREEMENT))
            resolve(True)
            return
        _LOGGER.info("Draw declined, opponent evaluation %.2f", opponent_eval)
        resolve(False)

    def _on_clock_timeout(self, color: Color) -> None:
        if self._lifecycle != LifecycleState.ACTIVE:
            return
        self._end(GameOverInfo(self._outcome_for_loser(color), EndReason.TIMEOUT, color.opposite))

    def _terminal_info(self) -> GameOverInfo | None:
        position = self._position
        if self._rules.is_checkmate(position):
            loser = self._rules.side_to_move(position)
            return GameOverInfo(self._outcome_for_loser(loser), EndReason.CHECKMATE, loser.opposite)
        if self._rules.is_stalemate(position):
            return GameOverInfo(Outcome.DRAW, EndReason.STALEMATE)
        if self._rules.is_threefold_repetition(position):
            return GameOverInfo(Outcome.DRAW, EndReason.REPETITION)
        if self._rules.is_insufficient_material(position):
            return GameOverInfo(Outcome.DRAW, EndReason.INSUFFICIENT_MATERIAL)
        if self._rules.is_fifty_moves(position):
            return GameOverInfo(Outcome.DRAW, EndReason.FIFTY_MOVE)
        return None

    def _outcome_for_loser(self, loser: Color) -> Outcome:
        return Outcome.LOSS if loser == self._player_side else Outcome.WIN

    def _end(self, info: GameOverInfo) -> None:
        if self._lifecycle == LifecycleState.ENDED:
            return
        self._lifecycle = LifecycleState.ENDED
        self._clock.stop()
        self._reply_timer.stop()
        self._cancel_search()
        self._game_over = info
        _LOGGER.info("Game over: %s (%s)", info.result, info.reason)
        self.events.emit_game_over(info)

    def _cancel_search(self) -> None:
        """Release the shared search slot if this session holds it."""
        if self._in_flight or self._evaluating:
            self._in_flight = False
            self._evaluating = False
            self._adapter.cancel_search()

    def _resolve_side(self, side: str | Color) -> Color:
        if isinstance(side, str) and side.strip().lower() == "random":
            return self._rng.choice((Color.WHITE, Color.BLACK))
        return Color.parse(side)

    def _make_clock(self, time_control: TimeControl) -> Clock:
        return Clock(
            time_control,
            lambda: self.side_to_move,
            on_tick=self.events.emit_clock_tick,
            on_timeout=self._on_clock_timeout,
            parent=self._parent,
        )

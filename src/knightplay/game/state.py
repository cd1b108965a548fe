"""Immutable snapshots handed to session consumers."""

from __future__ import annotations

from dataclasses import dataclass, field

from knightplay.core.enums import Color, EndReason, LifecycleState, Outcome
from knightplay.core.move import Move
from knightplay.engine.levels import OpponentLevel
from knightplay.game.interfaces import TimeControl


@dataclass(frozen=True, slots=True)
class PositionInfo:
    """Board state plus flags derived from the rules authority."""

    fen: str
    side_to_move: Color
    is_check: bool = False
    is_checkmate: bool = False
    is_stalemate: bool = False
    is_draw: bool = False
    is_game_over: bool = False


@dataclass(frozen=True, slots=True)
class GameOverInfo:
    """Terminal result, from the human player's point of view."""

    result: Outcome
    reason: EndReason
    winner: Color | None = None


@dataclass(frozen=True, slots=True)
class MoveResult:
    """Answer to a move submission."""

    valid: bool
    move: Move | None = None

    @classmethod
    def invalid(cls) -> MoveResult:
        return cls(valid=False)


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """Everything a presentation layer needs to render the match."""

    position: PositionInfo
    move_history: tuple[Move, ...]
    position_history: tuple[str, ...]
    clocks: dict[Color, int]
    time_control: TimeControl
    opponent_level: OpponentLevel
    player_side: Color
    lifecycle: LifecycleState
    game_over: GameOverInfo | None = None
    legal_moves: tuple[str, ...] = field(default=())

    @property
    def is_active(self) -> bool:
        return self.lifecycle == LifecycleState.ACTIVE

    @property
    def is_players_turn(self) -> bool:
        return self.is_active and self.position.side_to_move == self.player_side

    @property
    def ply_count(self) -> int:
        return len(self.move_history)

"""Abstract interfaces for the game layer.

High-level ``SessionController`` depends on these ABCs, not on the
concrete clock implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from knightplay.core.enums import Color

if TYPE_CHECKING:
    from knightplay.engine.levels import OpponentLevel
    from knightplay.game.state import MoveResult, SessionSnapshot


# ── Time control presets ─────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class TimeControl:
    """Immutable time-control definition, in whole seconds.

    Args:
        initial_seconds: Starting time per side.
        increment_seconds: Per-move increment (Fischer).
    """

    initial_seconds: int = 600
    increment_seconds: int = 0

    def __post_init__(self) -> None:
        if self.initial_seconds < 0 or self.increment_seconds < 0:
            raise ValueError("Time control values must be non-negative")

    # Common presets
    @classmethod
    def bullet_1m(cls) -> TimeControl:
        return cls(60, 0)

    @classmethod
    def blitz_3m2s(cls) -> TimeControl:
        return cls(180, 2)

    @classmethod
    def blitz_5m(cls) -> TimeControl:
        return cls(300, 0)

    @classmethod
    def rapid_10m(cls) -> TimeControl:
        return cls(600, 0)

    @classmethod
    def rapid_15m10s(cls) -> TimeControl:
        return cls(900, 10)

    @classmethod
    def classical_30m(cls) -> TimeControl:
        return cls(1800, 0)

    def __str__(self) -> str:
        mins = self.initial_seconds // 60
        if self.increment_seconds:
            return f"{mins}+{self.increment_seconds}"
        return f"{mins}+0"


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IClock(ABC):
    """Interface for a ticking chess clock."""

    @abstractmethod
    def start(self) -> None:
        """Start ticking for the side to move."""

    @abstractmethod
    def stop(self) -> None:
        """Halt ticking without altering remaining time."""

    @abstractmethod
    def tick(self) -> None:
        """Consume one second from the side to move."""

    @abstractmethod
    def remaining(self, color: Color) -> int:
        """Whole seconds remaining for *color*."""

    @abstractmethod
    def add_increment(self, color: Color) -> None:
        """Add Fischer increment after a move."""


class ISessionController(ABC):
    """Interface for the match orchestrator."""

    @abstractmethod
    def new_game(
        self,
        opponent_level: str | OpponentLevel | None = None,
        player_side: str | Color = "w",
        time_control: TimeControl | None = None,
        starting_fen: str | None = None,
    ) -> SessionSnapshot:
        """Reset and start a match."""

    @abstractmethod
    def apply_player_move(
        self, from_square: str, to_square: str, promotion: str | None = None
    ) -> MoveResult:
        """Apply the human player's move."""

    @abstractmethod
    def request_opponent_move(self) -> None:
        """Ask the search process for the opponent's move."""

    @abstractmethod
    def resign(self) -> None:
        """The human player resigns."""

    @abstractmethod
    def offer_draw(self, on_result: Callable[[bool], None] | None = None) -> None:
        """Offer a draw; *on_result* receives the opponent's answer."""

    @abstractmethod
    def get_state(self) -> SessionSnapshot:
        """Current snapshot; no side effects."""

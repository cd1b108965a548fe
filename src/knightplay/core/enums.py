"""Core enumerations for the match domain."""

from __future__ import annotations

from enum import IntEnum, StrEnum, auto

import chess


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    @property
    def letter(self) -> str:
        """FEN-style side letter (``w`` / ``b``)."""
        return "w" if self is Color.WHITE else "b"

    @classmethod
    def from_chess(cls, turn: chess.Color) -> Color:
        return cls.WHITE if turn == chess.WHITE else cls.BLACK

    @classmethod
    def parse(cls, value: str | Color) -> Color:
        """Accept ``w``/``white``/``b``/``black`` (any case)."""
        if isinstance(value, Color):
            return value
        text = value.strip().lower()
        if text in ("w", "white"):
            return cls.WHITE
        if text in ("b", "black"):
            return cls.BLACK
        raise ValueError(f"Unknown side: {value!r}")

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Chess piece types, numbered like python-chess."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6

    @property
    def symbol(self) -> str:
        return chess.piece_symbol(self.value)

    @classmethod
    def from_symbol(cls, symbol: str) -> PieceType:
        try:
            return cls(chess.PIECE_SYMBOLS.index(symbol.lower()))
        except ValueError:
            raise ValueError(f"Unknown piece symbol: {symbol!r}") from None


class LifecycleState(IntEnum):
    """Session state machine: IDLE -> ACTIVE -> ENDED."""

    IDLE = auto()
    ACTIVE = auto()
    ENDED = auto()


class Outcome(StrEnum):
    """Match result from the human player's point of view."""

    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"


class EndReason(StrEnum):
    """Why a match ended."""

    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    REPETITION = "repetition"
    INSUFFICIENT_MATERIAL = "insufficient"
    FIFTY_MOVE = "fifty_move"
    TIMEOUT = "timeout"
    RESIGNATION = "resignation"
    AGREEMENT = "agreement"

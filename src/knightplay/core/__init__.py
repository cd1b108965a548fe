"""Core domain layer — enums, move records and the rules authority.

Quick start::

    from knightplay.core import ChessRules

    rules = ChessRules()
    pos = rules.initial_position()
    result = rules.apply_move(pos, "e2", "e4")
    print(result.move.san)
"""

from knightplay.core.enums import (
    Color,
    EndReason,
    LifecycleState,
    Outcome,
    PieceType,
)
from knightplay.core.move import Move, parse_uci_move
from knightplay.core.rules import ApplyResult, ChessRules, IRulesAuthority, Position

__all__ = [
    # Enums
    "Color",
    "EndReason",
    "LifecycleState",
    "Outcome",
    "PieceType",
    # Domain objects
    "ApplyResult",
    "ChessRules",
    "IRulesAuthority",
    "Move",
    "Position",
    "parse_uci_move",
]

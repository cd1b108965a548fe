"""Rules authority: move legality, move application and terminal detection.

The session controller only talks to :class:`IRulesAuthority`; the concrete
:class:`ChessRules` delegates all chess knowledge to python-chess.  Positions
are ``chess.Board`` objects carrying their move stack, so repetition checks
see the whole game.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

import chess

from knightplay.core.enums import Color, PieceType
from knightplay.core.move import Move

Position = chess.Board


@dataclass(frozen=True, slots=True)
class ApplyResult:
    """Outcome of :meth:`IRulesAuthority.apply_move`."""

    success: bool
    move: Move | None = None
    position: Position | None = None

    @classmethod
    def rejected(cls) -> ApplyResult:
        return cls(success=False)


class IRulesAuthority(ABC):
    """Interface for the chess rules collaborator."""

    @abstractmethod
    def initial_position(self, fen: str | None = None) -> Position:
        """Build a position from *fen* (standard start when ``None``)."""

    @abstractmethod
    def fen(self, position: Position) -> str: ...

    @abstractmethod
    def side_to_move(self, position: Position) -> Color: ...

    @abstractmethod
    def apply_move(
        self,
        position: Position,
        from_square: str,
        to_square: str,
        promotion: str | None = None,
    ) -> ApplyResult:
        """Apply a move without mutating *position*."""

    @abstractmethod
    def legal_moves(self, position: Position, square: str | None = None) -> list[str]:
        """Legal moves as UCI strings, optionally only those from *square*."""

    @abstractmethod
    def needs_promotion(self, position: Position, from_square: str, to_square: str) -> bool: ...

    @abstractmethod
    def is_check(self, position: Position) -> bool: ...

    @abstractmethod
    def is_checkmate(self, position: Position) -> bool: ...

    @abstractmethod
    def is_stalemate(self, position: Position) -> bool: ...

    @abstractmethod
    def is_threefold_repetition(self, position: Position) -> bool: ...

    @abstractmethod
    def is_insufficient_material(self, position: Position) -> bool: ...

    @abstractmethod
    def is_fifty_moves(self, position: Position) -> bool: ...

    def is_draw(self, position: Position) -> bool:
        return (
            self.is_stalemate(position)
            or self.is_threefold_repetition(position)
            or self.is_insufficient_material(position)
            or self.is_fifty_moves(position)
        )

    def is_game_over(self, position: Position) -> bool:
        return self.is_checkmate(position) or self.is_draw(position)


class ChessRules(IRulesAuthority):
    """python-chess backed rules authority."""

    __slots__ = ()

    def initial_position(self, fen: str | None = None) -> Position:
        if fen is None:
            return chess.Board()
        return chess.Board(fen)

    def fen(self, position: Position) -> str:
        return position.fen()

    def side_to_move(self, position: Position) -> Color:
        return Color.from_chess(position.turn)

    def apply_move(
        self,
        position: Position,
        from_square: str,
        to_square: str,
        promotion: str | None = None,
    ) -> ApplyResult:
        try:
            from_sq = chess.parse_square(from_square)
            to_sq = chess.parse_square(to_square)
        except ValueError:
            return ApplyResult.rejected()

        promo_type: PieceType | None = None
        if promotion:
            try:
                promo_type = PieceType.from_symbol(promotion)
            except ValueError:
                return ApplyResult.rejected()
        elif self.needs_promotion(position, from_square, to_square):
            promo_type = PieceType.QUEEN

        candidate = chess.Move(
            from_sq, to_sq, promotion=int(promo_type) if promo_type else None
        )
        if candidate not in position.legal_moves:
            # A promotion letter on a non-promoting move is ignored, not fatal.
            plain = chess.Move(from_sq, to_sq)
            if promo_type is None or plain not in position.legal_moves:
                return ApplyResult.rejected()
            candidate = plain

        piece_type = position.piece_type_at(from_sq)
        if position.is_en_passant(candidate):
            captured: int | None = chess.PAWN
        else:
            captured = position.piece_type_at(to_sq)
        san = position.san(candidate)
        side = Color.from_chess(position.turn)

        after = position.copy(stack=True)
        after.push(candidate)

        move = Move(
            side=side,
            from_square=chess.square_name(candidate.from_square),
            to_square=chess.square_name(candidate.to_square),
            piece=PieceType(piece_type),
            san=san,
            fen_after=after.fen(),
            captured=PieceType(captured) if captured else None,
            promotion=PieceType(candidate.promotion) if candidate.promotion else None,
        )
        return ApplyResult(success=True, move=move, position=after)

    def legal_moves(self, position: Position, square: str | None = None) -> list[str]:
        if square is None:
            return [m.uci() for m in position.legal_moves]
        try:
            from_sq = chess.parse_square(square)
        except ValueError:
            return []
        return [m.uci() for m in position.legal_moves if m.from_square == from_sq]

    def needs_promotion(self, position: Position, from_square: str, to_square: str) -> bool:
        try:
            from_sq = chess.parse_square(from_square)
            to_sq = chess.parse_square(to_square)
        except ValueError:
            return False
        piece = position.piece_at(from_sq)
        if piece is None or piece.piece_type != chess.PAWN:
            return False
        last_rank = 7 if piece.color == chess.WHITE else 0
        return chess.square_rank(to_sq) == last_rank

    def is_check(self, position: Position) -> bool:
        return position.is_check()

    def is_checkmate(self, position: Position) -> bool:
        return position.is_checkmate()

    def is_stalemate(self, position: Position) -> bool:
        return position.is_stalemate()

    def is_threefold_repetition(self, position: Position) -> bool:
        return position.is_repetition(3)

    def is_insufficient_material(self, position: Position) -> bool:
        return position.is_insufficient_material()

    def is_fifty_moves(self, position: Position) -> bool:
        return position.is_fifty_moves()

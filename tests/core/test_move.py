"""Tests for Move records, UCI token parsing and enums."""

import dataclasses

import pytest

from knightplay.core.enums import Color, PieceType
from knightplay.core.move import Move, parse_uci_move


class TestMove:
    def test_is_immutable(self) -> None:
        move = Move(Color.WHITE, "e2", "e4", PieceType.PAWN, "e4", "fen")
        with pytest.raises(dataclasses.FrozenInstanceError):
            move.san = "d4"  # type: ignore[misc]

    def test_uci_with_promotion(self) -> None:
        move = Move(
            Color.WHITE, "a7", "a8", PieceType.PAWN, "a8=R", "fen", promotion=PieceType.ROOK
        )
        assert str(move) == "a7a8r"


class TestParseUciMove:
    def test_plain(self) -> None:
        assert parse_uci_move("e2e4") == ("e2", "e4", None)

    def test_promotion(self) -> None:
        assert parse_uci_move("b7b8q") == ("b7", "b8", "q")

    @pytest.mark.parametrize("token", ["", "e2", "e2e9", "i2e4", "e7e8k", "(none)"])
    def test_malformed(self, token: str) -> None:
        assert parse_uci_move(token) is None


class TestColor:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [("w", Color.WHITE), ("White", Color.WHITE), ("b", Color.BLACK), ("BLACK", Color.BLACK)],
    )
    def test_parse(self, text: str, expected: Color) -> None:
        assert Color.parse(text) == expected

    def test_parse_unknown(self) -> None:
        with pytest.raises(ValueError):
            Color.parse("green")

    def test_opposite_and_letter(self) -> None:
        assert Color.WHITE.opposite == Color.BLACK
        assert Color.BLACK.letter == "b"
        assert str(Color.WHITE) == "white"


class TestPieceType:
    def test_symbol_round_trip(self) -> None:
        assert PieceType.from_symbol("N") == PieceType.KNIGHT
        assert PieceType.QUEEN.symbol == "q"

    def test_unknown_symbol(self) -> None:
        with pytest.raises(ValueError):
            PieceType.from_symbol("x")

"""Move value object and UCI token parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass

from knightplay.core.enums import Color, PieceType

_UCI_MOVE_RE = re.compile(r"^([a-h][1-8])([a-h][1-8])([qrbn]?)$")


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable record of one applied ply."""

    side: Color
    from_square: str
    to_square: str
    piece: PieceType
    san: str
    fen_after: str
    captured: PieceType | None = None
    promotion: PieceType | None = None

    def __str__(self) -> str:
        return self.uci

    @property
    def uci(self) -> str:
        """UCI long-algebraic notation."""
        base = f"{self.from_square}{self.to_square}"
        if self.promotion is not None:
            base += self.promotion.symbol
        return base

    @property
    def is_capture(self) -> bool:
        return self.captured is not None


def parse_uci_move(token: str) -> tuple[str, str, str | None] | None:
    """Split ``e7e8q`` into ``("e7", "e8", "q")``; ``None`` if malformed."""
    match = _UCI_MOVE_RE.match(token.strip())
    if match is None:
        return None
    from_sq, to_sq, promo = match.groups()
    return from_sq, to_sq, promo or None

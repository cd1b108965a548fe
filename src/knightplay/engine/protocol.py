"""UCI text protocol: command builders and response parsers.

Protocol flow used by the adapter::

    -> uci / isready            <- uciok / readyok
    -> ucinewgame / isready
    -> setoption name Skill Level value 3
    -> position fen <fen>
    -> go depth 4               <- info depth 4 score cp 25 ...
                                <- bestmove e7e5
"""

from __future__ import annotations

import re

UCI = "uci"
IS_READY = "isready"
NEW_GAME = "ucinewgame"
STOP = "stop"
QUIT = "quit"

UCI_OK = "uciok"
READY_OK = "readyok"

MIN_SKILL = 0
MAX_SKILL = 20

# Forced-mate scores collapse to this magnitude (in pawns).
MATE_SCORE = 100.0

_BESTMOVE_RE = re.compile(r"^bestmove\s+([a-h][1-8][a-h][1-8][qrbn]?)(?:\s|$)")
_SCORE_CP_RE = re.compile(r"\bscore cp (-?\d+)")
_SCORE_MATE_RE = re.compile(r"\bscore mate (-?\d+)")


# ── Commands ─────────────────────────────────────────────────────────────────


def set_skill(skill: int) -> str:
    skill = max(MIN_SKILL, min(MAX_SKILL, int(skill)))
    return f"setoption name Skill Level value {skill}"


def set_position(fen: str) -> str:
    return f"position fen {fen}"


def search(depth: int) -> str:
    return f"go depth {max(1, int(depth))}"


# ── Responses ────────────────────────────────────────────────────────────────


def is_ready_token(line: str) -> bool:
    return line in (UCI_OK, READY_OK)


def is_bestmove_line(line: str) -> bool:
    return line.startswith("bestmove")


def parse_bestmove(line: str) -> str | None:
    """Return the move token of a ``bestmove`` line, or ``None`` if malformed."""
    match = _BESTMOVE_RE.match(line)
    return match.group(1) if match else None


def parse_score(line: str) -> float | None:
    """Score in pawns from an ``info`` line (side-to-move relative)."""
    match = _SCORE_CP_RE.search(line)
    if match:
        return int(match.group(1)) / 100
    match = _SCORE_MATE_RE.search(line)
    if match:
        return MATE_SCORE if int(match.group(1)) > 0 else -MATE_SCORE
    return None

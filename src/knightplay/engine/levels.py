"""Opponent strength tiers."""

from __future__ import annotations

import logging
from dataclasses import dataclass

_LOGGER = logging.getLogger(__name__)

DEFAULT_LEVEL = "casual"


@dataclass(frozen=True, slots=True)
class OpponentLevel:
    """Named difficulty tier mapped to engine skill and search depth."""

    key: str
    name: str
    skill: int
    depth: int
    rating: int
    description: str


BOT_LEVELS: dict[str, OpponentLevel] = {
    level.key: level
    for level in (
        OpponentLevel("rookie", "Rookie", 0, 1, 400, "Complete beginner"),
        OpponentLevel("beginner", "Beginner", 1, 2, 800, "Learning the basics"),
        OpponentLevel("novice", "Novice", 1, 2, 800, "Complete beginner"),
        OpponentLevel("casual", "Casual", 3, 4, 1200, "Beginner-friendly"),
        OpponentLevel("intermediate", "Intermediate", 8, 8, 1500, "Club player"),
        OpponentLevel("advanced", "Advanced", 12, 12, 1800, "Strong amateur"),
        OpponentLevel("master", "Master", 17, 15, 2200, "Expert level"),
        OpponentLevel("gm", "GM", 18, 16, 2800, "Grandmaster strength"),
        OpponentLevel("expert", "Expert", 18, 16, 2400, "Near-master"),
        OpponentLevel("grandmaster", "Grandmaster", 20, 18, 2800, "Maximum strength"),
        OpponentLevel("engine", "Engine", 20, 20, 3200, "Perfect play"),
    )
}


def resolve_level(key: str | OpponentLevel | None) -> OpponentLevel:
    """Look up a tier by identifier; unknown identifiers get the default."""
    if isinstance(key, OpponentLevel):
        return key
    if key is not None:
        level = BOT_LEVELS.get(key.strip().lower())
        if level is not None:
            return level
        _LOGGER.warning("Unknown opponent level %r, using %r", key, DEFAULT_LEVEL)
    return BOT_LEVELS[DEFAULT_LEVEL]

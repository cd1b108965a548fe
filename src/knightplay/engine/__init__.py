"""Search process package: UCI protocol, process channel and adapter."""

from knightplay.engine.adapter import SearchProcessAdapter
from knightplay.engine.channel import IProcessChannel, QProcessChannel
from knightplay.engine.levels import BOT_LEVELS, DEFAULT_LEVEL, OpponentLevel, resolve_level

__all__ = [
    "BOT_LEVELS",
    "DEFAULT_LEVEL",
    "IProcessChannel",
    "OpponentLevel",
    "QProcessChannel",
    "SearchProcessAdapter",
    "resolve_level",
]

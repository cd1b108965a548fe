"""knightplay — human vs engine chess match sessions."""

__version__ = "0.1.0"

"""Runtime settings and search-engine discovery."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from pathlib import Path

ENGINE_PATH_ENV = "KNIGHTPLAY_ENGINE"

_COMMON_ENGINE_PATHS: tuple[Path, ...] = (
    # Linux
    Path("/usr/games/stockfish"),
    Path("/usr/bin/stockfish"),
    Path("/usr/local/bin/stockfish"),
    # macOS (brew)
    Path("/opt/homebrew/bin/stockfish"),
    # Windows
    Path("C:/Program Files/Stockfish/stockfish.exe"),
)


@dataclass(frozen=True)
class EngineSettings:
    """Search process settings."""

    engine_path: str | None = None
    handshake_timeout_ms: int = 5000
    eval_depth: int = 8
    eval_timeout_ms: int = 5000
    move_timeout_ms: int = 30000


@dataclass(frozen=True)
class SessionSettings:
    """Match behaviour settings."""

    # Human-like pause before the opponent replies (min, max)
    reply_delay_ms: tuple[int, int] = (600, 1500)
    first_move_delay_ms: int = 500
    # Retry interval while the shared search slot is held by another request
    busy_retry_ms: int = 100

    # Draw offers
    draw_accept_threshold: float = 0.5  # pawns, opponent's point of view
    draw_fallback_min_plies: int = 30

    default_level: str = "casual"


def find_engine_binary(explicit: str | None = None) -> str | None:
    """Resolve the search engine binary.

    Priority:
    1. *explicit* path
    2. ``KNIGHTPLAY_ENGINE`` env var
    3. ``stockfish`` on ``PATH``
    4. Common OS install locations

    Returns ``None`` when nothing is found; callers then run without a
    search process.
    """
    for candidate in (explicit, os.environ.get(ENGINE_PATH_ENV)):
        if candidate and Path(candidate).is_file():
            return str(candidate)

    on_path = shutil.which("stockfish")
    if on_path:
        return on_path

    for path in _COMMON_ENGINE_PATHS:
        if path.is_file():
            return str(path)
    return None

"""Game management layer — session controller, clock, events, snapshots.

Quick start::

    from knightplay.game import SessionController, TimeControl

    ctrl = SessionController()
    ctrl.on_game_over(lambda info: print(info.result, info.reason))
    ctrl.new_game("casual", "w", TimeControl.rapid_10m())
    ctrl.apply_player_move("e2", "e4")
"""

from knightplay.game.clock import Clock
from knightplay.game.events import SessionEvents
from knightplay.game.interfaces import IClock, ISessionController, TimeControl
from knightplay.game.session import SessionController
from knightplay.game.state import GameOverInfo, MoveResult, PositionInfo, SessionSnapshot

__all__ = [
    # Interfaces
    "IClock",
    "ISessionController",
    "TimeControl",
    # Concrete
    "Clock",
    "GameOverInfo",
    "MoveResult",
    "PositionInfo",
    "SessionController",
    "SessionEvents",
    "SessionSnapshot",
]

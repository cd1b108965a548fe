"""Console bootstrap: play a match against the engine from a terminal."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable

from knightplay.config import EngineSettings, find_engine_binary
from knightplay.core.enums import Color, Outcome
from knightplay.core.move import parse_uci_move
from knightplay.engine.levels import BOT_LEVELS, DEFAULT_LEVEL
from knightplay.game.interfaces import TimeControl
from knightplay.game.session import SessionController
from knightplay.game.state import GameOverInfo, SessionSnapshot

_LOGGER = logging.getLogger(__name__)

_HELP = "Commands: <move> (e2e4, e7e8q) | moves [square] | clock | fen | draw | resign | quit"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="knightplay", description="Play chess against a UCI engine."
    )
    parser.add_argument(
        "--level", default=DEFAULT_LEVEL, help=f"one of: {', '.join(BOT_LEVELS)}"
    )
    parser.add_argument("--side", default="w", choices=("w", "b", "white", "black", "random"))
    parser.add_argument("--minutes", type=int, default=10, help="initial time per side")
    parser.add_argument("--increment", type=int, default=0, help="seconds added per move")
    parser.add_argument("--engine", default=None, help="path to a UCI engine binary")
    parser.add_argument("--fen", default=None, help="starting position")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def format_clocks(clocks: dict[Color, int]) -> str:
    def fmt(seconds: int) -> str:
        return f"{seconds // 60}:{seconds % 60:02d}"

    return f"white {fmt(clocks[Color.WHITE])}  black {fmt(clocks[Color.BLACK])}"


class ConsoleMatch:
    """Translates text commands into session calls and prints events."""

    __slots__ = ("_controller", "_write", "_on_finished")

    def __init__(
        self,
        controller: SessionController,
        write: Callable[[str], None] = print,
        on_finished: Callable[[], None] | None = None,
    ) -> None:
        self._controller = controller
        self._write = write
        self._on_finished = on_finished
        controller.on_move(self._print_move)
        controller.on_game_over(self._print_game_over)

    def handle_line(self, line: str) -> bool:
        """Process one command; ``False`` means the user asked to quit."""
        command, _, arg = line.strip().partition(" ")
        command = command.lower()
        state = self._controller.get_state()

        if not command:
            return True
        if command in ("quit", "exit"):
            return False
        if command == "help":
            self._write(_HELP)
        elif command == "moves":
            self._write(" ".join(self._controller.legal_moves(arg.strip() or None)))
        elif command == "clock":
            self._write(format_clocks(state.clocks))
        elif command == "fen":
            self._write(state.position.fen)
        elif command == "resign":
            self._controller.resign()
        elif command == "draw":
            self._controller.offer_draw(self._print_draw_answer)
        else:
            self._play(command)
        return True

    def _play(self, token: str) -> None:
        parsed = parse_uci_move(token)
        if parsed is None:
            self._write(f"Unknown command {token!r}. {_HELP}")
            return
        result = self._controller.apply_player_move(*parsed)
        if not result.valid:
            self._write(f"Illegal move: {token}")

    def _print_move(self, state: SessionSnapshot) -> None:
        move = state.move_history[-1]
        number = (len(state.move_history) + 1) // 2
        prefix = f"{number}." if move.side == Color.WHITE else f"{number}..."
        self._write(f"{prefix} {move.san}    ({format_clocks(state.clocks)})")

    def _print_draw_answer(self, accepted: bool) -> None:
        self._write("Draw accepted." if accepted else "Draw declined.")

    def _print_game_over(self, info: GameOverInfo) -> None:
        if info.result == Outcome.DRAW:
            self._write(f"Game drawn ({info.reason}).")
        else:
            self._write(f"You {'won' if info.result == Outcome.WIN else 'lost'} ({info.reason}).")
        if self._on_finished is not None:
            self._on_finished()


def run_console(argv: list[str] | None = None) -> int:
    """Create the Qt core application and run a console match."""
    from PyQt6.QtCore import QCoreApplication, QSocketNotifier, QTimer

    from knightplay.engine.adapter import SearchProcessAdapter
    from knightplay.engine.channel import QProcessChannel

    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    app = QCoreApplication(sys.argv if argv is None else ["knightplay", *argv])
    app.setApplicationName("knightplay")

    settings = EngineSettings(engine_path=args.engine)
    engine_path = find_engine_binary(settings.engine_path)
    if engine_path is None:
        _LOGGER.warning("No engine binary found; the opponent will play random moves")
    channel = QProcessChannel(engine_path, parent=app) if engine_path else None

    with SearchProcessAdapter(channel, settings=settings, parent=app) as adapter:
        controller = SessionController(adapter, parent=app)
        match = ConsoleMatch(controller)

        def start() -> None:
            controller.on_process_ready(None)
            try:
                state = controller.new_game(
                    args.level,
                    args.side,
                    TimeControl(args.minutes * 60, args.increment),
                    args.fen,
                )
            except ValueError as exc:
                print(f"Cannot start game: {exc}")
                QTimer.singleShot(0, app.quit)
                return
            print(f"You play {state.player_side} against {state.opponent_level.name}.")
            print(_HELP)

        def read_stdin() -> None:
            line = sys.stdin.readline()
            if not line or not match.handle_line(line):
                app.quit()

        notifier = QSocketNotifier(sys.stdin.fileno(), QSocketNotifier.Type.Read, app)
        notifier.activated.connect(lambda *_: read_stdin())
        controller.on_process_ready(start)

        code = app.exec()
        controller.close()
    return code

"""Tests for the console front end."""

from __future__ import annotations

import random
from collections.abc import Iterator

import pytest

from knightplay.bootstrap import ConsoleMatch, build_parser, format_clocks
from knightplay.config import SessionSettings
from knightplay.core.enums import Color, LifecycleState
from knightplay.game.session import SessionController

SLOW = SessionSettings(reply_delay_ms=(60_000, 60_000), first_move_delay_ms=60_000)


@pytest.fixture
def controller() -> Iterator[SessionController]:
    ctrl = SessionController(settings=SLOW, rng=random.Random(3))
    ctrl.new_game("casual", "w")
    yield ctrl
    ctrl.close()


@pytest.fixture
def output() -> list[str]:
    return []


@pytest.fixture
def match(controller: SessionController, output: list[str]) -> ConsoleMatch:
    return ConsoleMatch(controller, write=output.append)


class TestConsoleMatch:
    def test_move_is_printed(self, match: ConsoleMatch, output: list[str]) -> None:
        assert match.handle_line("e2e4\n")
        assert output[-1].startswith("1. e4")

    def test_illegal_move(self, match: ConsoleMatch, output: list[str]) -> None:
        match.handle_line("e2e5")
        assert output == ["Illegal move: e2e5"]

    def test_unknown_command(self, match: ConsoleMatch, output: list[str]) -> None:
        match.handle_line("castle")
        assert output[-1].startswith("Unknown command 'castle'")

    def test_queries(self, match: ConsoleMatch, output: list[str]) -> None:
        match.handle_line("moves g1")
        match.handle_line("clock")
        match.handle_line("fen")
        assert output[0] in ("g1f3 g1h3", "g1h3 g1f3")
        assert output[1] == "white 10:00  black 10:00"
        assert output[2].startswith("rnbqkbnr/pppppppp")

    def test_resign(
        self, match: ConsoleMatch, controller: SessionController, output: list[str]
    ) -> None:
        match.handle_line("resign")
        assert controller.lifecycle == LifecycleState.ENDED
        assert output[-1] == "You lost (resignation)."

    def test_draw_offer_declined_early(self, match: ConsoleMatch, output: list[str]) -> None:
        match.handle_line("draw")
        assert output == ["Draw declined."]

    def test_quit(self, match: ConsoleMatch) -> None:
        assert not match.handle_line("quit")
        assert match.handle_line("")


class TestCli:
    def test_defaults(self) -> None:
        args = build_parser().parse_args([])
        assert args.level == "casual"
        assert args.side == "w"
        assert args.minutes == 10

    def test_options(self) -> None:
        args = build_parser().parse_args(["--side", "random", "--minutes", "3", "--increment", "2"])
        assert (args.side, args.minutes, args.increment) == ("random", 3, 2)

    def test_format_clocks(self) -> None:
        assert format_clocks({Color.WHITE: 65, Color.BLACK: 5}) == "white 1:05  black 0:05"

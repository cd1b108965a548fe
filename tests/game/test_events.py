"""Tests for SessionEvents slots."""

from knightplay.core.enums import Color, EndReason, Outcome
from knightplay.game.events import SessionEvents
from knightplay.game.state import GameOverInfo


class TestSlots:
    def test_new_registration_replaces_old(self) -> None:
        events = SessionEvents()
        first: list[GameOverInfo] = []
        second: list[GameOverInfo] = []
        events.on_game_over(first.append)
        events.on_game_over(second.append)

        info = GameOverInfo(Outcome.DRAW, EndReason.AGREEMENT)
        events.emit_game_over(info)
        assert first == []
        assert second == [info]

    def test_none_clears_slot(self) -> None:
        events = SessionEvents()
        ticks: list[dict[Color, int]] = []
        events.on_clock_tick(ticks.append)
        events.on_clock_tick(None)
        events.emit_clock_tick({Color.WHITE: 1, Color.BLACK: 2})
        assert ticks == []

    def test_emit_without_subscriber(self) -> None:
        events = SessionEvents()
        events.emit_clock_tick({Color.WHITE: 1, Color.BLACK: 1})
        events.emit_game_over(GameOverInfo(Outcome.WIN, EndReason.TIMEOUT, Color.WHITE))


class TestProcessReady:
    def test_fires_on_readiness(self) -> None:
        events = SessionEvents()
        calls: list[bool] = []
        events.on_process_ready(lambda: calls.append(True))
        assert calls == []
        events.emit_process_ready()
        assert calls == [True]
        assert events.process_ready

    def test_catch_up_after_readiness(self) -> None:
        events = SessionEvents()
        events.emit_process_ready()
        calls: list[bool] = []
        events.on_process_ready(lambda: calls.append(True))
        assert calls == [True]

    def test_catch_up_only_for_ready_event(self) -> None:
        events = SessionEvents()
        events.emit_game_over(GameOverInfo(Outcome.LOSS, EndReason.RESIGNATION, Color.BLACK))
        late: list[GameOverInfo] = []
        events.on_game_over(late.append)
        assert late == []

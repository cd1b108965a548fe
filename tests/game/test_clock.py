"""Tests for Clock."""

from PyQt6.QtTest import QTest

from knightplay.core.enums import Color
from knightplay.game.clock import Clock
from knightplay.game.interfaces import TimeControl


class _Turn:
    """Mutable side-to-move source."""

    def __init__(self, color: Color = Color.WHITE) -> None:
        self.color = color

    def __call__(self) -> Color:
        return self.color


def _make(seconds: int = 300, increment: int = 0, turn: _Turn | None = None, **kw) -> Clock:
    return Clock(TimeControl(seconds, increment), turn or _Turn(), **kw)


class TestClockBasics:
    def test_initial_remaining(self) -> None:
        clock = _make()
        assert clock.remaining(Color.WHITE) == 300
        assert clock.remaining(Color.BLACK) == 300

    def test_not_running_initially(self) -> None:
        clock = _make()
        assert not clock.is_running

    def test_tick_ignored_while_stopped(self) -> None:
        clock = _make()
        clock.tick()
        assert clock.remaining(Color.WHITE) == 300

    def test_tick_decrements_side_to_move_only(self) -> None:
        turn = _Turn(Color.BLACK)
        clock = _make(turn=turn)
        clock.start()
        clock.tick()
        clock.tick()
        assert clock.remaining(Color.BLACK) == 298
        assert clock.remaining(Color.WHITE) == 300

    def test_follows_turn_changes(self) -> None:
        turn = _Turn()
        clock = _make(turn=turn)
        clock.start()
        clock.tick()
        turn.color = Color.BLACK
        clock.tick()
        assert clock.snapshot() == {Color.WHITE: 299, Color.BLACK: 299}

    def test_stop_is_idempotent_and_keeps_time(self) -> None:
        clock = _make()
        clock.start()
        clock.tick()
        clock.stop()
        clock.stop()
        assert not clock.is_running
        assert clock.remaining(Color.WHITE) == 299

    def test_timer_drives_ticks(self) -> None:
        ticks: list[dict[Color, int]] = []
        clock = _make(on_tick=ticks.append)
        clock.start()
        QTest.qWait(1150)
        clock.stop()
        assert len(ticks) == 1
        assert ticks[0][Color.WHITE] == 299

    def test_tick_callback_gets_copy(self) -> None:
        ticks: list[dict[Color, int]] = []
        clock = _make(on_tick=ticks.append)
        clock.start()
        clock.tick()
        ticks[0][Color.WHITE] = 0
        assert clock.remaining(Color.WHITE) == 299


class TestClockIncrement:
    def test_increment_adds_up(self) -> None:
        clock = _make(10, 2)
        clock.add_increment(Color.WHITE)
        clock.add_increment(Color.WHITE)
        assert clock.remaining(Color.WHITE) == 14
        assert clock.remaining(Color.BLACK) == 10


class TestClockTimeout:
    def test_reaching_zero_flags_once(self) -> None:
        flags: list[Color] = []
        clock = _make(2, on_timeout=flags.append)
        clock.start()
        clock.tick()
        clock.tick()
        assert flags == [Color.WHITE]
        assert clock.flagged == Color.WHITE
        assert not clock.is_running

        clock.tick()
        clock.start()
        clock.tick()
        assert flags == [Color.WHITE]
        assert clock.remaining(Color.WHITE) == 0

    def test_never_negative(self) -> None:
        clock = _make(1)
        clock.start()
        for _ in range(5):
            clock.tick()
        assert clock.remaining(Color.WHITE) == 0

    def test_zero_time_control_flags_on_first_tick(self) -> None:
        flags: list[Color] = []
        clock = _make(0, on_timeout=flags.append)
        clock.start()
        clock.tick()
        assert flags == [Color.WHITE]


class TestTimeControl:
    def test_presets(self) -> None:
        assert TimeControl.blitz_3m2s() == TimeControl(180, 2)
        assert str(TimeControl.rapid_15m10s()) == "15+10"

    def test_negative_rejected(self) -> None:
        import pytest

        with pytest.raises(ValueError):
            TimeControl(-1, 0)


class TestClockReset:
    def test_reset_refills_and_clears_flag(self) -> None:
        flags: list[Color] = []
        clock = _make(1, on_timeout=flags.append)
        clock.start()
        clock.tick()
        assert clock.flagged == Color.WHITE

        clock.reset(TimeControl(120, 3))
        assert clock.flagged is None
        assert not clock.is_running
        assert clock.snapshot() == {Color.WHITE: 120, Color.BLACK: 120}
        assert clock.time_control == TimeControl(120, 3)

        clock.start()
        assert clock.is_running

    def test_reset_keeps_time_control(self) -> None:
        clock = _make(30)
        clock.start()
        clock.tick()
        clock.reset()
        assert clock.remaining(Color.WHITE) == 30

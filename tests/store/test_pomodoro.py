"""Tests for the pomodoro timer state machine."""

from unittest.mock import MagicMock

import pytest

from studysync.core.pomodoro import PomodoroTimer, SessionType


class TestPomodoroTimer:
    def test_defaults(self):
        """25 minutes of work, 5 of break, stopped."""
        timer = PomodoroTimer()

        assert timer.session_type == SessionType.WORK
        assert timer.is_active is False
        assert timer.remaining_seconds == 25 * 60
        assert timer.display == "25:00"

    def test_invalid_durations(self):
        with pytest.raises(ValueError):
            PomodoroTimer(work_minutes=0)
        with pytest.raises(ValueError):
            PomodoroTimer(break_minutes=0)

    def test_tick_ignored_while_paused(self):
        timer = PomodoroTimer(work_minutes=1)

        assert timer.tick(10) is False
        assert timer.remaining_seconds == 60

    def test_toggle_and_tick(self):
        timer = PomodoroTimer(work_minutes=1)

        assert timer.toggle() is True
        timer.tick(15)

        assert timer.remaining_seconds == 45
        assert timer.display == "00:45"
        assert timer.elapsed_seconds == 15
        assert timer.progress == 25.0

        assert timer.toggle() is False
        timer.tick(15)
        assert timer.remaining_seconds == 45

    def test_work_completion_fires_callback_and_switches(self):
        """Finishing work calls back once and moves to a stopped break."""
        callback = MagicMock()
        timer = PomodoroTimer(work_minutes=1, break_minutes=2, on_session_complete=callback)
        timer.toggle()

        assert timer.tick(60) is True

        callback.assert_called_once_with()
        assert timer.session_type == SessionType.BREAK
        assert timer.is_active is False
        assert timer.remaining_seconds == 120
        assert timer.completed_work_sessions == 1

    def test_break_completion_returns_to_work(self):
        """Finishing a break does not fire the callback."""
        callback = MagicMock()
        timer = PomodoroTimer(work_minutes=1, break_minutes=1, on_session_complete=callback)
        timer.toggle()
        timer.tick(60)
        callback.reset_mock()

        timer.toggle()
        assert timer.tick(60) is True

        callback.assert_not_called()
        assert timer.session_type == SessionType.WORK
        assert timer.remaining_seconds == 60

    def test_overshoot_clamps(self):
        """A tick longer than the remaining time still finishes cleanly."""
        timer = PomodoroTimer(work_minutes=1)
        timer.toggle()

        assert timer.tick(500) is True
        assert timer.session_type == SessionType.BREAK

    def test_reset(self):
        timer = PomodoroTimer(work_minutes=1)
        timer.toggle()
        timer.tick(30)

        timer.reset()

        assert timer.is_active is False
        assert timer.remaining_seconds == 60
        assert timer.session_type == SessionType.WORK

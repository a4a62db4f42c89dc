"""Focus/break timer.

Clock-independent state machine: callers drive it with ``tick()``.
A finished work session fires ``on_session_complete`` and switches to a
break; a finished break switches back to work. Either way the timer stops
and waits for the next ``toggle()``.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_WORK_MINUTES = 25
DEFAULT_BREAK_MINUTES = 5


class SessionType(str, Enum):
    WORK = "work"
    BREAK = "break"


class PomodoroTimer:
    """Work/break countdown."""

    def __init__(
        self,
        work_minutes: int = DEFAULT_WORK_MINUTES,
        break_minutes: int = DEFAULT_BREAK_MINUTES,
        on_session_complete: Callable[[], None] | None = None,
    ):
        if work_minutes < 1 or break_minutes < 1:
            raise ValueError("Timer durations must be at least 1 minute")

        self.work_minutes = work_minutes
        self.break_minutes = break_minutes
        self.on_session_complete = on_session_complete

        self.session_type = SessionType.WORK
        self.is_active = False
        self.remaining_seconds = self.total_seconds
        self.completed_work_sessions = 0

    @property
    def total_seconds(self) -> int:
        """Full length of the current session."""
        minutes = self.work_minutes if self.session_type == SessionType.WORK else self.break_minutes
        return minutes * 60

    @property
    def elapsed_seconds(self) -> int:
        return self.total_seconds - self.remaining_seconds

    @property
    def progress(self) -> float:
        """Elapsed percentage of the current session."""
        return self.elapsed_seconds / self.total_seconds * 100

    @property
    def display(self) -> str:
        minutes, seconds = divmod(self.remaining_seconds, 60)
        return f"{minutes:02d}:{seconds:02d}"

    def toggle(self) -> bool:
        """Start or pause. Returns the new active flag."""
        self.is_active = not self.is_active
        return self.is_active

    def reset(self) -> None:
        """Stop and restore the full duration of the current session."""
        self.is_active = False
        self.remaining_seconds = self.total_seconds

    def tick(self, seconds: int = 1) -> bool:
        """Advance the countdown.

        Args:
            seconds: Seconds elapsed since the previous tick

        Returns:
            True if the current session finished on this tick
        """
        if not self.is_active:
            return False

        self.remaining_seconds = max(0, self.remaining_seconds - seconds)
        if self.remaining_seconds > 0:
            return False

        finished = self.session_type
        if finished == SessionType.WORK:
            self.completed_work_sessions += 1
            if self.on_session_complete is not None:
                self.on_session_complete()
            self.session_type = SessionType.BREAK
        else:
            self.session_type = SessionType.WORK

        logger.info("pomodoro_session_finished", session_type=finished.value)
        self.reset()
        return True

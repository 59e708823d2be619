"""In-progress workout state machine.

    NotStarted → Active ⇄ Paused → Finished

Elapsed time is always recomputed from timestamps, never accumulated by
ticks, so a caller may poll ``elapsed_active_seconds`` at any cadence
without drift. The session owns no timer; every operation accepts an
explicit ``now`` and falls back to the injected clock.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from enum import Enum

from companionfit.errors import InvalidSessionState
from companionfit.models import Exercise, Workout, utcnow

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class SessionState(str, Enum):
    NOT_STARTED = "NotStarted"
    ACTIVE = "Active"
    PAUSED = "Paused"
    FINISHED = "Finished"


class WorkoutSession:
    """Tracks one workout from start to finish. Not reusable."""

    def __init__(self, clock: Clock = utcnow) -> None:
        self.clock = clock
        self.state = SessionState.NOT_STARTED
        self.start_time: datetime | None = None
        self.pause_start_time: datetime | None = None
        self.paused_duration = 0.0
        self._exercises: list[Exercise] = []
        self._workout: Workout | None = None

    @property
    def exercises(self) -> tuple[Exercise, ...]:
        return tuple(self._exercises)

    @property
    def is_paused(self) -> bool:
        return self.state == SessionState.PAUSED

    def _require(self, operation: str, *allowed: SessionState) -> None:
        if self.state not in allowed:
            raise InvalidSessionState(operation=operation, state=self.state.value)

    def start(self, now: datetime | None = None) -> None:
        self._require("start", SessionState.NOT_STARTED)
        self.start_time = now or self.clock()
        self.pause_start_time = None
        self.paused_duration = 0.0
        self._exercises = []
        self.state = SessionState.ACTIVE
        logger.debug("Workout session started at %s", self.start_time.isoformat())

    def add_exercise(self, exercise: Exercise) -> None:
        self._require("add an exercise to", SessionState.ACTIVE, SessionState.PAUSED)
        self._exercises.append(exercise)

    def pause(self, now: datetime | None = None) -> None:
        if self.state == SessionState.PAUSED:
            return
        self._require("pause", SessionState.ACTIVE)
        self.pause_start_time = now or self.clock()
        self.state = SessionState.PAUSED

    def resume(self, now: datetime | None = None) -> None:
        if self.state == SessionState.ACTIVE:
            return
        self._require("resume", SessionState.PAUSED)
        now = now or self.clock()
        self.paused_duration += (now - self.pause_start_time).total_seconds()
        self.pause_start_time = None
        self.state = SessionState.ACTIVE

    def elapsed_active_seconds(self, now: datetime | None = None) -> float:
        """Wall-clock time since start minus every paused interval.

        Zero before the session starts. Once finished, the value frozen into
        the workout is returned.
        """
        if self.state == SessionState.NOT_STARTED:
            return 0.0
        if self.state == SessionState.FINISHED:
            return self._workout.total_duration

        now = now or self.clock()
        elapsed = (now - self.start_time).total_seconds() - self.paused_duration
        if self.state == SessionState.PAUSED:
            elapsed -= (now - self.pause_start_time).total_seconds()
        return max(0.0, elapsed)

    def finish(self, now: datetime | None = None, *, notes: str | None = None) -> Workout:
        self._require("finish", SessionState.ACTIVE, SessionState.PAUSED)
        now = now or self.clock()
        workout = Workout(
            date=self.start_time,
            exercises=tuple(self._exercises),
            total_duration=self.elapsed_active_seconds(now),
            notes=notes,
        )
        self._workout = workout
        self.state = SessionState.FINISHED
        logger.info(
            "Workout session finished: %d exercises, %.0fs active",
            len(workout.exercises), workout.total_duration,
        )
        return workout

"""Application service — owns the current user and its gateways.

Every mutating call saves through the injected store straight away. Store
and health failures are logged and collected in ``last_errors``; they never
raise and never undo the in-memory user.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from uuid import UUID

from companionfit import progression
from companionfit.companions import create_starter
from companionfit.errors import CompanionFitError, HealthSyncError, PersistenceError
from companionfit.health import HealthDataSink
from companionfit.models import Companion, User, Workout, utcnow
from companionfit.progression import WorkoutOutcome
from companionfit.session import Clock, WorkoutSession
from companionfit.store import UserStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceReport:
    operation: str
    error: CompanionFitError

    @property
    def message(self) -> str:
        return str(self.error)


class CompanionFitService:
    def __init__(
        self,
        store: UserStore,
        *,
        health: HealthDataSink | None = None,
        rng: random.Random | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self.store = store
        self.health = health
        self.rng = rng or random.Random()
        self.clock = clock
        self.current_user: User | None = None
        self.last_errors: list[ServiceReport] = []

    def _report(self, operation: str, error: CompanionFitError) -> None:
        logger.warning(
            "%s failed: %s", operation, error,
            extra={"companionfit_operation": operation},
        )
        self.last_errors.append(ServiceReport(operation=operation, error=error))

    def _require_user(self, operation: str) -> User | None:
        self.last_errors = []
        if self.current_user is None:
            logger.warning("%s ignored: no current user", operation)
        return self.current_user

    def _save(self) -> bool:
        if self.current_user is None:
            return False
        try:
            self.store.save(self.current_user)
        except PersistenceError as exc:
            self._report("save", exc)
            return False
        return True

    def load(self) -> User | None:
        self.last_errors = []
        try:
            self.current_user = self.store.load()
        except PersistenceError as exc:
            self._report("load", exc)
        return self.current_user

    def create_user(self, username: str, trainer_name: str) -> User:
        self.last_errors = []
        self.current_user = progression.create_user(username, trainer_name)
        logger.info("Created user %s (%s)", self.current_user.id, self.current_user.username)
        self._save()
        return self.current_user

    def select_starter_companion(self, key: str) -> Companion | None:
        user = self._require_user("select_starter_companion")
        if user is None:
            return None
        companion = create_starter(key, rng=self.rng)
        progression.add_companion(user, companion)
        self._save()
        return companion

    def set_active_companion(self, companion_id: UUID) -> None:
        user = self._require_user("set_active_companion")
        if user is None:
            return
        progression.set_active_companion(user, companion_id)
        self._save()

    def update_companion_nickname(self, companion_id: UUID, nickname: str | None) -> bool:
        user = self._require_user("update_companion_nickname")
        if user is None:
            return False
        updated = progression.update_companion_nickname(user, companion_id, nickname)
        if updated:
            self._save()
        return updated

    def begin_workout(self) -> WorkoutSession:
        """Start a fresh session; sessions are never reused."""
        session = WorkoutSession(clock=self.clock)
        session.start()
        return session

    def finish_workout(self, session: WorkoutSession, *, notes: str | None = None) -> WorkoutOutcome | None:
        return self.complete_workout(session.finish(notes=notes))

    def complete_workout(self, workout: Workout) -> WorkoutOutcome | None:
        user = self._require_user("complete_workout")
        if user is None:
            return None
        outcome = progression.complete_workout(user, workout, rng=self.rng, now=self.clock())
        self._save()

        if self.health is not None:
            try:
                self.health.commit_workout(outcome.workout)
            except HealthSyncError as exc:
                self._report("commit_workout", exc)
        return outcome

    def todays_steps(self) -> float | None:
        self.last_errors = []
        if self.health is None:
            return None
        try:
            return self.health.todays_steps()
        except HealthSyncError as exc:
            self._report("todays_steps", exc)
            return None

    def latest_heart_rate(self) -> float | None:
        self.last_errors = []
        if self.health is None:
            return None
        try:
            return self.health.latest_heart_rate()
        except HealthSyncError as exc:
            self._report("latest_heart_rate", exc)
            return None

    def reset_user(self) -> None:
        self.last_errors = []
        self.current_user = None
        try:
            self.store.clear()
        except PersistenceError as exc:
            self._report("clear", exc)

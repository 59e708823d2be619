"""User aggregate operations — the orchestration root of the engine.

``complete_workout`` sequences XP calculation, user leveling, companion
growth and badge evaluation as one logical transaction against a user.
Callers must not interleave other mutations of the same user with it.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field, replace
from datetime import datetime
from uuid import UUID

from companionfit.badges import evaluate_badges
from companionfit.companions import GrowthReport, grow
from companionfit.errors import NegativeExperienceError
from companionfit.experience import workout_xp
from companionfit.leveling import user_level_for
from companionfit.models import Badge, Companion, User, Workout

logger = logging.getLogger(__name__)


def create_user(username: str, trainer_name: str) -> User:
    return User(username=username.strip(), trainer_name=trainer_name.strip())


def add_companion(user: User, companion: Companion) -> None:
    """Add a companion; the first one added becomes active."""
    user.companions.append(companion)
    if user.active_companion_id is None:
        user.active_companion_id = companion.id


def set_active_companion(user: User, companion_id: UUID) -> None:
    # Stored as given: a dangling id is tolerated and resolves to no companion.
    user.active_companion_id = companion_id


def update_companion_nickname(user: User, companion_id: UUID, nickname: str | None) -> bool:
    """Rename a companion. Returns False when the id does not resolve."""
    companion = user.find_companion(companion_id)
    if companion is None:
        return False
    companion.nickname = (nickname or "").strip() or None
    return True


@dataclass(frozen=True)
class WorkoutOutcome:
    user: User
    workout: Workout
    gained_xp: int
    user_level_ups: int
    companion_growth: GrowthReport | None = None
    new_badges: list[Badge] = field(default_factory=list)


def complete_workout(
    user: User,
    workout: Workout,
    *,
    rng: random.Random,
    now: datetime | None = None,
) -> WorkoutOutcome:
    """Commit a finished workout to the user's history and credit progression.

    An empty exercise list or an active companion id that does not resolve
    are both valid inputs with no XP effect on companions.
    """
    gained_xp = workout_xp(workout.exercises)
    if gained_xp < 0:
        raise NegativeExperienceError(gained_xp)

    stamped = replace(workout, companion_used=user.active_companion_id)
    user.workouts.append(stamped)
    user.total_experience += gained_xp

    previous_level = user.level
    user.level = max(user.level, user_level_for(user.total_experience))

    growth = None
    companion = user.active_companion
    if companion is not None:
        growth = grow(companion, gained_xp, rng=rng)
    elif user.active_companion_id is not None:
        logger.debug(
            "Active companion %s not found for user %s; skipping companion XP",
            user.active_companion_id, user.id,
        )

    new_badges = evaluate_badges(user, now=now)

    logger.info(
        "Workout %s completed: +%d XP, user level %d, %d new badges",
        stamped.id, gained_xp, user.level, len(new_badges),
        extra={"companionfit_user_id": str(user.id), "companionfit_xp": gained_xp},
    )

    return WorkoutOutcome(
        user=user,
        workout=stamped,
        gained_xp=gained_xp,
        user_level_ups=user.level - previous_level,
        companion_growth=growth,
        new_badges=new_badges,
    )

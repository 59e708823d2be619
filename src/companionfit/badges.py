"""Milestone badges evaluated over a user's full history.

Every rule runs on every workout completion. A badge type is awarded at
most once per user, so re-evaluating the same state never adds anything.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from companionfit.models import Badge, BadgeType, User, utcnow

logger = logging.getLogger(__name__)

WEEK_STREAK_WORKOUTS = 7
MONTH_STREAK_WORKOUTS = 30
FIRST_EVOLUTION_LEVEL = 10
STRONG_LIFTER_KG = 10_000
MARATHONER_KM = 100


def total_weight_lifted(user: User) -> float:
    return sum(
        exercise.weight
        for workout in user.workouts
        for exercise in workout.exercises
        if exercise.weight is not None
    )


def total_distance(user: User) -> float:
    return sum(
        exercise.distance
        for workout in user.workouts
        for exercise in workout.exercises
        if exercise.distance is not None
    )


# Evaluated in this order; rules are independent and additive only.
BADGE_RULES: tuple[tuple[BadgeType, Callable[[User], bool]], ...] = (
    (BadgeType.WEEK_STREAK, lambda u: len(u.workouts) >= WEEK_STREAK_WORKOUTS),
    (BadgeType.MONTH_STREAK, lambda u: len(u.workouts) >= MONTH_STREAK_WORKOUTS),
    (
        BadgeType.FIRST_EVOLUTION,
        lambda u: any(c.level >= FIRST_EVOLUTION_LEVEL for c in u.companions),
    ),
    (BadgeType.STRONG_LIFTER, lambda u: total_weight_lifted(u) >= STRONG_LIFTER_KG),
    (BadgeType.MARATHONER, lambda u: total_distance(u) >= MARATHONER_KM),
)


def evaluate_badges(user: User, *, now: datetime | None = None) -> list[Badge]:
    """Append every newly qualified badge to ``user.badges``.

    Returns only the badges awarded by this call.
    """
    earned_at = now or utcnow()
    awarded: list[Badge] = []
    for badge_type, qualifies in BADGE_RULES:
        if user.has_badge(badge_type) or not qualifies(user):
            continue
        badge = Badge(type=badge_type, earned_at=earned_at)
        user.badges.append(badge)
        awarded.append(badge)
        logger.info("User %s earned badge %s", user.id, badge_type.value)
    return awarded

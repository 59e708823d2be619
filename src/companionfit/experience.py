"""Experience points earned from logged exercises."""

from __future__ import annotations

import math
from collections.abc import Iterable

from companionfit.models import Exercise

BASE_EXERCISE_XP = 10
XP_PER_REP = 2  # per set × rep
KG_PER_XP = 10
XP_PER_MINUTE = 5
XP_PER_KM = 10


def compute_xp(exercise: Exercise) -> int:
    """XP for a single exercise.

    Absent attributes contribute nothing before the category multiplier
    is applied; the final product is floored.
    """
    xp = BASE_EXERCISE_XP

    if exercise.sets is not None and exercise.reps is not None:
        xp += exercise.sets * exercise.reps * XP_PER_REP
    if exercise.weight is not None:
        xp += math.floor(exercise.weight / KG_PER_XP)
    if exercise.duration is not None:
        xp += math.floor(exercise.duration / 60) * XP_PER_MINUTE
    if exercise.distance is not None:
        xp += math.floor(exercise.distance * XP_PER_KM)

    return math.floor(xp * exercise.type.experience_multiplier)


def workout_xp(exercises: Iterable[Exercise]) -> int:
    return sum(compute_xp(exercise) for exercise in exercises)

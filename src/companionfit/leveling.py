"""Level/experience arithmetic shared by companions and the user aggregate."""

from __future__ import annotations

from dataclasses import dataclass

from companionfit.errors import NegativeExperienceError

XP_PER_LEVEL_STEP = 100
USER_XP_PER_LEVEL = 1000


def experience_for_next_level(level: int) -> int:
    return level * XP_PER_LEVEL_STEP


@dataclass(frozen=True)
class LevelResult:
    level: int
    experience: int
    level_ups: int


def apply_experience(level: int, experience: int, gained_xp: int) -> LevelResult:
    """Credit XP and apply every level-up it pays for.

    The threshold is recomputed after each level-up, so a single large grant
    can cross several levels. The remainder carries over.

    Raises:
        NegativeExperienceError: if ``gained_xp`` is negative.
    """
    if gained_xp < 0:
        raise NegativeExperienceError(gained_xp)
    if level < 1:
        raise ValueError(f"level must be >= 1, got {level}")

    experience += gained_xp
    level_ups = 0
    while experience >= experience_for_next_level(level):
        experience -= experience_for_next_level(level)
        level += 1
        level_ups += 1

    return LevelResult(level=level, experience=experience, level_ups=level_ups)


def user_level_for(total_experience: int) -> int:
    return total_experience // USER_XP_PER_LEVEL + 1

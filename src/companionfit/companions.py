"""Companion creation, stat growth and evolution.

All randomness flows through an injected ``random.Random`` so a seeded
generator reproduces exact stat rolls.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from companionfit.leveling import apply_experience
from companionfit.models import Companion, CompanionStats, CompanionType

logger = logging.getLogger(__name__)

BASE_STAT_VALUE = 50
BASE_STAT_SPREAD = 10  # base stats are rolled in [50 - 10, 50 + 10]
STAT_GROWTH_RANGE = (2, 5)  # per stat, per level gained, inclusive


class StatRoller:
    """Draws base stats and per-level growth from a seedable source."""

    def __init__(self, rng: random.Random) -> None:
        self.rng = rng

    def roll_base_stats(self) -> CompanionStats:
        def roll() -> int:
            return BASE_STAT_VALUE + self.rng.randint(-BASE_STAT_SPREAD, BASE_STAT_SPREAD)

        return CompanionStats(hp=roll(), attack=roll(), defense=roll(), speed=roll())

    def roll_growth(self) -> CompanionStats:
        low, high = STAT_GROWTH_RANGE
        return CompanionStats(
            hp=self.rng.randint(low, high),
            attack=self.rng.randint(low, high),
            defense=self.rng.randint(low, high),
            speed=self.rng.randint(low, high),
        )


def create_companion(
    name: str,
    type: CompanionType,
    *,
    rng: random.Random,
    evolution_level: int | None = None,
    evolved_form: str | None = None,
) -> Companion:
    base_stats = StatRoller(rng).roll_base_stats()
    return Companion(
        name=name,
        type=type,
        base_stats=base_stats,
        current_stats=base_stats.copy(),
        evolution_level=evolution_level,
        evolved_form=evolved_form,
    )


@dataclass(frozen=True)
class GrowthReport:
    """What a single experience grant did to a companion."""

    level_ups: int
    evolved_from: str | None = None

    @property
    def evolved(self) -> bool:
        return self.evolved_from is not None


def can_evolve(companion: Companion) -> bool:
    return (
        companion.evolution_level is not None
        and companion.evolved_form is not None
        and companion.level >= companion.evolution_level
    )


def gain_experience(companion: Companion, amount: int, *, rng: random.Random) -> Companion:
    """Credit XP to a companion in place and return it."""
    grow(companion, amount, rng=rng)
    return companion


def grow(companion: Companion, amount: int, *, rng: random.Random) -> GrowthReport:
    """Credit XP, roll stat growth per level gained, then check evolution once.

    Evolution is evaluated against the final level reached, not each
    intermediate level.
    """
    result = apply_experience(companion.level, companion.experience, amount)
    companion.level = result.level
    companion.experience = result.experience

    roller = StatRoller(rng)
    stats = companion.current_stats
    for _ in range(result.level_ups):
        growth = roller.roll_growth()
        stats.hp += growth.hp
        stats.attack += growth.attack
        stats.defense += growth.defense
        stats.speed += growth.speed

    evolved_from = None
    if can_evolve(companion):
        evolved_from = companion.name
        companion.name = companion.evolved_form
        companion.evolved_form = None
        logger.info(
            "Companion %s evolved from %s into %s at level %d",
            companion.id, evolved_from, companion.name, companion.level,
        )

    return GrowthReport(level_ups=result.level_ups, evolved_from=evolved_from)


@dataclass(frozen=True)
class StarterTemplate:
    key: str
    name: str
    type: CompanionType
    evolution_level: int
    evolved_form: str


STARTER_COMPANIONS: dict[str, StarterTemplate] = {
    t.key: t
    for t in (
        StarterTemplate("embercub", "Embercub", CompanionType.FLAME, 16, "Blazelion"),
        StarterTemplate("aquapup", "Aquapup", CompanionType.AQUA, 16, "Tidalwolf"),
        StarterTemplate("leafling", "Leafling", CompanionType.NATURE, 16, "Verdantbear"),
        StarterTemplate("sparkkit", "Sparkkit", CompanionType.STORM, 20, "Thunderlynx"),
        StarterTemplate("brawlpaw", "Brawlpaw", CompanionType.WARRIOR, 28, "Ironbeast"),
        StarterTemplate("mindling", "Mindling", CompanionType.MYSTIC, 16, "Psyfox"),
        StarterTemplate("pebblecub", "Pebblecub", CompanionType.EARTH, 25, "Boulderbear"),
        StarterTemplate("breezeling", "Breezeling", CompanionType.WIND, 18, "Galehawk"),
    )
}


def create_starter(key: str, *, rng: random.Random) -> Companion:
    """Instantiate a starter companion by catalog key (case-insensitive)."""
    template = STARTER_COMPANIONS.get(key.strip().lower())
    if template is None:
        known = ", ".join(STARTER_COMPANIONS)
        raise KeyError(f"Unknown starter {key!r}. Expected one of: {known}")
    return create_companion(
        template.name,
        template.type,
        rng=rng,
        evolution_level=template.evolution_level,
        evolved_form=template.evolved_form,
    )

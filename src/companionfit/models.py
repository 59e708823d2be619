"""Core data models for companions, workouts, badges and the user aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID, uuid4


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExerciseType(str, Enum):
    STRENGTH = "Strength"
    CARDIO = "Cardio"
    FLEXIBILITY = "Flexibility"
    SPORTS = "Sports"
    OTHER = "Other"

    @property
    def experience_multiplier(self) -> float:
        return _EXPERIENCE_MULTIPLIERS[self]


_EXPERIENCE_MULTIPLIERS: dict[ExerciseType, float] = {
    ExerciseType.STRENGTH: 1.5,
    ExerciseType.CARDIO: 1.2,
    ExerciseType.FLEXIBILITY: 1.0,
    ExerciseType.SPORTS: 1.3,
    ExerciseType.OTHER: 1.0,
}


@dataclass(frozen=True)
class Exercise:
    """One logged movement. Never mutated once appended to a workout."""

    name: str
    type: ExerciseType
    sets: int | None = None
    reps: int | None = None
    weight: float | None = None  # kg
    duration: float | None = None  # seconds
    distance: float | None = None  # km
    notes: str | None = None
    id: UUID = field(default_factory=uuid4)


@dataclass(frozen=True)
class Workout:
    """A finalized workout. Appended to history, never edited."""

    date: datetime
    exercises: tuple[Exercise, ...] = ()
    total_duration: float = 0.0  # active seconds, pauses excluded
    notes: str | None = None
    companion_used: UUID | None = None
    id: UUID = field(default_factory=uuid4)

    @property
    def total_experience(self) -> int:
        from companionfit.experience import workout_xp

        return workout_xp(self.exercises)


class CompanionType(str, Enum):
    FLAME = "Flame"
    AQUA = "Aqua"
    NATURE = "Nature"
    STORM = "Storm"
    WARRIOR = "Warrior"
    MYSTIC = "Mystic"
    EARTH = "Earth"
    WIND = "Wind"

    @property
    def color(self) -> str:
        """Signature display color as a hex string."""
        return _COMPANION_COLORS[self]


_COMPANION_COLORS: dict[CompanionType, str] = {
    CompanionType.FLAME: "#FF4F42",
    CompanionType.AQUA: "#3399FF",
    CompanionType.NATURE: "#4DD973",
    CompanionType.STORM: "#FFCC00",
    CompanionType.WARRIOR: "#FF7333",
    CompanionType.MYSTIC: "#D966F2",
    CompanionType.EARTH: "#8C7359",
    CompanionType.WIND: "#66BFFF",
}


@dataclass
class CompanionStats:
    hp: int
    attack: int
    defense: int
    speed: int

    def copy(self) -> CompanionStats:
        return CompanionStats(
            hp=self.hp, attack=self.attack, defense=self.defense, speed=self.speed,
        )


@dataclass
class Companion:
    """A training companion that levels up and evolves through workouts.

    ``experience`` always stays in ``[0, experience_for_next_level())``.
    ``base_stats`` is fixed at creation; ``current_stats`` only grows.
    Once evolved, ``evolved_form`` is cleared so evolution fires at most once.
    """

    name: str
    type: CompanionType
    base_stats: CompanionStats
    current_stats: CompanionStats
    level: int = 1
    experience: int = 0
    nickname: str | None = None
    evolution_level: int | None = None
    evolved_form: str | None = None
    id: UUID = field(default_factory=uuid4)

    def experience_for_next_level(self) -> int:
        from companionfit.leveling import experience_for_next_level

        return experience_for_next_level(self.level)

    @property
    def display_name(self) -> str:
        return self.nickname or self.name


class BadgeType(str, Enum):
    WEEK_STREAK = "WeekStreak"
    MONTH_STREAK = "MonthStreak"
    FIRST_EVOLUTION = "FirstEvolution"
    STRONG_LIFTER = "StrongLifter"
    MARATHONER = "Marathoner"

    @property
    def title(self) -> str:
        return _BADGE_COPY[self][0]

    @property
    def description(self) -> str:
        return _BADGE_COPY[self][1]

    @property
    def icon(self) -> str:
        return _BADGE_COPY[self][2]


# type → (title, description, icon)
_BADGE_COPY: dict[BadgeType, tuple[str, str, str]] = {
    BadgeType.WEEK_STREAK: ("Week Warrior", "Complete 7 workouts", "calendar.badge.clock"),
    BadgeType.MONTH_STREAK: ("Monthly Master", "Complete 30 workouts", "calendar.badge.plus"),
    BadgeType.FIRST_EVOLUTION: ("Evolution Expert", "Evolve your first Companion", "sparkles"),
    BadgeType.STRONG_LIFTER: (
        "Strong Trainer", "Lift 10,000 kg total", "figure.strengthtraining.traditional",
    ),
    BadgeType.MARATHONER: ("Distance Champion", "Run 100 km total", "figure.run"),
}


@dataclass(frozen=True)
class Badge:
    type: BadgeType
    earned_at: datetime = field(default_factory=utcnow)
    id: UUID = field(default_factory=uuid4)


@dataclass
class User:
    """The unit of persistence: profile, companions, history and badges.

    ``workouts`` and ``badges`` are append-only. ``level`` and
    ``total_experience`` are only ever changed by completing a workout.
    ``active_companion_id`` is a weak reference and may dangle.
    """

    username: str
    trainer_name: str
    level: int = 1
    total_experience: int = 0
    companions: list[Companion] = field(default_factory=list)
    active_companion_id: UUID | None = None
    workouts: list[Workout] = field(default_factory=list)
    badges: list[Badge] = field(default_factory=list)
    friends: list[UUID] = field(default_factory=list)
    join_date: datetime = field(default_factory=utcnow)
    id: UUID = field(default_factory=uuid4)

    def find_companion(self, companion_id: UUID | None) -> Companion | None:
        if companion_id is None:
            return None
        for companion in self.companions:
            if companion.id == companion_id:
                return companion
        return None

    @property
    def active_companion(self) -> Companion | None:
        return self.find_companion(self.active_companion_id)

    def has_badge(self, badge_type: BadgeType) -> bool:
        return any(badge.type == badge_type for badge in self.badges)

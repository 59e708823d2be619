"""Tests for the versioned user document format."""

import json
import random
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from companionfit.companions import create_starter
from companionfit.models import Exercise, ExerciseType, User, Workout
from companionfit.progression import add_companion, complete_workout, create_user, set_active_companion
from companionfit.serialization import SCHEMA_VERSION_V1, dump_user, dumps_user, load_user, loads_user

START = datetime(2025, 10, 1, 6, 30, 15, 123456, tzinfo=timezone.utc)


def _rich_user() -> User:
    rng = random.Random(11)
    user = create_user("ash", "Ash Ketchum")
    user.join_date = START
    add_companion(user, create_starter("embercub", rng=rng))
    add_companion(user, create_starter("breezeling", rng=rng))
    user.companions[1].nickname = "Gusty"
    user.friends.extend([uuid.uuid4(), uuid.uuid4()])

    for day in range(8):
        workout = Workout(
            date=START + timedelta(days=day),
            exercises=(
                Exercise(name="Bench Press", type=ExerciseType.STRENGTH, sets=3, reps=10, weight=82.5),
                Exercise(name="Running", type=ExerciseType.CARDIO, distance=5.3, duration=1712.25, notes="easy"),
            ),
            total_duration=2400.5,
            notes=f"day {day}",
        )
        complete_workout(user, workout, rng=rng, now=START + timedelta(days=day, hours=1))
    return user


def test_round_trip_preserves_every_field():
    user = _rich_user()
    restored = loads_user(dumps_user(user))
    assert restored == user


def test_dict_round_trip():
    user = _rich_user()
    assert load_user(dump_user(user)) == user


def test_round_trip_preserves_order_and_ids():
    user = _rich_user()
    restored = load_user(json.loads(json.dumps(dump_user(user))))
    assert [w.id for w in restored.workouts] == [w.id for w in user.workouts]
    assert [b.id for b in restored.badges] == [b.id for b in user.badges]
    assert [c.id for c in restored.companions] == [c.id for c in user.companions]
    assert restored.workouts[0].exercises[0].weight == 82.5
    assert restored.workouts[0].date == START
    assert restored.companions[1].nickname == "Gusty"


def test_dangling_active_companion_round_trips():
    user = create_user("ash", "Ash")
    missing = uuid.uuid4()
    set_active_companion(user, missing)
    assert loads_user(dumps_user(user)).active_companion_id == missing


def test_document_is_versioned():
    payload = dump_user(create_user("ash", "Ash"))
    assert payload["schema_version"] == SCHEMA_VERSION_V1
    assert payload["user"]["username"] == "ash"


def test_enums_serialized_by_value():
    payload = dump_user(_rich_user())
    user = payload["user"]
    assert user["companions"][0]["type"] == "Flame"
    assert user["workouts"][0]["exercises"][0]["type"] == "Strength"
    assert user["badges"][0]["type"] == "WeekStreak"


def test_unknown_schema_version_rejected():
    payload = dump_user(create_user("ash", "Ash"))
    payload["schema_version"] = "companionfit.user.v0"
    with pytest.raises(ValidationError):
        load_user(payload)


def test_malformed_payload_rejected():
    with pytest.raises(ValidationError):
        loads_user('{"schema_version": "companionfit.user.v1", "user": {"username": 3}}')

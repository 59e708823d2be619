"""Tests for user persistence gateways."""

import os
import random
import uuid
from datetime import datetime, timezone

import pytest

from companionfit.companions import create_starter
from companionfit.errors import PersistenceError
from companionfit.models import Exercise, ExerciseType, Workout
from companionfit.progression import add_companion, complete_workout, create_user
from companionfit.store import InMemoryUserStore, JsonFileUserStore, PostgresUserStore

DATABASE_URL = os.environ.get("DATABASE_URL", "")
NOW = datetime(2025, 10, 1, 9, 0, tzinfo=timezone.utc)


def _user():
    user = create_user("ash", "Ash")
    add_companion(user, create_starter("mindling", rng=random.Random(4)))
    workout = Workout(
        date=NOW,
        exercises=(Exercise(name="Yoga", type=ExerciseType.FLEXIBILITY, duration=1800),),
        total_duration=1800.0,
    )
    complete_workout(user, workout, rng=random.Random(4), now=NOW)
    return user


class TestInMemoryStore:
    def test_empty_store_loads_none(self):
        assert InMemoryUserStore().load() is None

    def test_save_then_load_returns_equal_copy(self):
        store = InMemoryUserStore()
        user = _user()
        store.save(user)
        loaded = store.load()
        assert loaded == user
        assert loaded is not user
        assert store.saves == 1

    def test_clear(self):
        store = InMemoryUserStore()
        store.save(_user())
        store.clear()
        assert store.load() is None


class TestJsonFileStore:
    def test_missing_file_loads_none(self, tmp_path):
        assert JsonFileUserStore(tmp_path / "user.json").load() is None

    def test_round_trip(self, tmp_path):
        store = JsonFileUserStore(tmp_path / "nested" / "user.json")
        user = _user()
        store.save(user)
        assert store.load() == user

    def test_save_overwrites_without_leftovers(self, tmp_path):
        path = tmp_path / "user.json"
        store = JsonFileUserStore(path)
        user = _user()
        store.save(user)
        user.friends.append(uuid.uuid4())
        store.save(user)
        assert store.load().friends == user.friends
        assert sorted(p.name for p in tmp_path.iterdir()) == ["user.json"]

    def test_corrupt_file_raises_persistence_error(self, tmp_path):
        path = tmp_path / "user.json"
        path.write_text("{not json")
        with pytest.raises(PersistenceError) as excinfo:
            JsonFileUserStore(path).load()
        assert excinfo.value.operation == "load"

    def test_invalid_utf8_raises_persistence_error(self, tmp_path):
        path = tmp_path / "user.json"
        path.write_bytes(b"\xff\xfe\x00garbage")
        with pytest.raises(PersistenceError) as excinfo:
            JsonFileUserStore(path).load()
        assert excinfo.value.operation == "load"

    def test_unwritable_location_raises_persistence_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        store = JsonFileUserStore(blocker / "user.json")
        with pytest.raises(PersistenceError) as excinfo:
            store.save(_user())
        assert excinfo.value.operation == "save"

    def test_serialization_failure_raises_persistence_error(self, tmp_path, monkeypatch):
        def broken(user):
            raise ValueError("unserializable")

        monkeypatch.setattr("companionfit.store.dumps_user", broken)
        path = tmp_path / "user.json"
        with pytest.raises(PersistenceError) as excinfo:
            JsonFileUserStore(path).save(_user())
        assert excinfo.value.operation == "save"
        assert list(tmp_path.iterdir()) == []

    def test_clear(self, tmp_path):
        path = tmp_path / "user.json"
        store = JsonFileUserStore(path)
        store.save(_user())
        store.clear()
        assert not path.exists()
        store.clear()


def test_postgres_connection_failure_is_persistence_error():
    store = PostgresUserStore("postgresql://nobody@127.0.0.1:1/none?connect_timeout=1")
    with pytest.raises(PersistenceError):
        store.load()


@pytest.mark.skipif(not DATABASE_URL, reason="DATABASE_URL not set")
class TestPostgresStore:
    @pytest.fixture
    def store(self):
        s = PostgresUserStore(DATABASE_URL, user_key=f"test-{uuid.uuid4()}")
        s.ensure_schema()
        yield s
        s.clear()

    def test_missing_key_loads_none(self, store):
        assert store.load() is None

    def test_round_trip(self, store):
        user = _user()
        store.save(user)
        assert store.load() == user

    def test_upsert(self, store):
        user = _user()
        store.save(user)
        user.friends.append(uuid.uuid4())
        store.save(user)
        assert store.load() == user

"""Persistence gateways for the user aggregate.

The engine only needs ``load() -> User | None`` and ``save(user)``. Every
backend raises PersistenceError on failure and never retries; the caller
keeps the in-memory user as the source of truth.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

import psycopg
from psycopg.types.json import Jsonb
from pydantic import ValidationError

from companionfit.errors import PersistenceError
from companionfit.models import User
from companionfit.serialization import dump_user, dumps_user, load_user, loads_user

logger = logging.getLogger(__name__)


class UserStore(Protocol):
    def load(self) -> User | None: ...

    def save(self, user: User) -> None: ...

    def clear(self) -> None: ...


class InMemoryUserStore:
    """Keeps the serialized document in memory; round-trips like a real store."""

    def __init__(self) -> None:
        self._raw: str | None = None
        self.saves = 0

    def load(self) -> User | None:
        if self._raw is None:
            return None
        return loads_user(self._raw)

    def save(self, user: User) -> None:
        self._raw = dumps_user(user)
        self.saves += 1

    def clear(self) -> None:
        self._raw = None


class JsonFileUserStore:
    """Stores the user document as a JSON file, replaced atomically on save."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    def load(self) -> User | None:
        if not self.path.exists():
            return None
        try:
            return loads_user(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError) as exc:
            raise PersistenceError(operation="load", message=f"{self.path}: {exc}") from exc

    def save(self, user: User) -> None:
        try:
            payload = dumps_user(user)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", dir=self.path.parent,
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except (OSError, ValueError) as exc:
            raise PersistenceError(operation="save", message=f"{self.path}: {exc}") from exc
        logger.debug("Saved user %s to %s", user.id, self.path)

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            raise PersistenceError(operation="clear", message=f"{self.path}: {exc}") from exc


_CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS companionfit_users (
    user_key TEXT PRIMARY KEY,
    document JSONB NOT NULL,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
)
"""


class PostgresUserStore:
    """One JSONB user document per ``user_key`` in PostgreSQL."""

    def __init__(self, database_url: str, user_key: str = "current_user") -> None:
        self.database_url = database_url
        self.user_key = user_key

    def _connect(self) -> psycopg.Connection:
        return psycopg.connect(self.database_url)

    def ensure_schema(self) -> None:
        try:
            with self._connect() as conn:
                conn.execute(_CREATE_TABLE_SQL)
        except psycopg.Error as exc:
            raise PersistenceError(operation="ensure_schema", message=str(exc)) from exc

    def load(self) -> User | None:
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT document FROM companionfit_users WHERE user_key = %s",
                    (self.user_key,),
                ).fetchone()
        except psycopg.Error as exc:
            raise PersistenceError(operation="load", message=str(exc)) from exc

        if row is None:
            return None
        document = row[0]
        if isinstance(document, str):
            document = json.loads(document)
        try:
            return load_user(document)
        except ValidationError as exc:
            raise PersistenceError(operation="load", message=str(exc)) from exc

    def save(self, user: User) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO companionfit_users (user_key, document, updated_at)
                    VALUES (%s, %s, now())
                    ON CONFLICT (user_key)
                    DO UPDATE SET document = EXCLUDED.document, updated_at = now()
                    """,
                    (self.user_key, Jsonb(dump_user(user))),
                )
        except psycopg.Error as exc:
            raise PersistenceError(operation="save", message=str(exc)) from exc

    def clear(self) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    "DELETE FROM companionfit_users WHERE user_key = %s",
                    (self.user_key,),
                )
        except psycopg.Error as exc:
            raise PersistenceError(operation="clear", message=str(exc)) from exc

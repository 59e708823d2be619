from __future__ import annotations

from pathlib import Path

import pytest

from companionfit.config import Config

_VARS = (
    "COMPANIONFIT_STORE",
    "COMPANIONFIT_DATA_PATH",
    "DATABASE_URL",
    "COMPANIONFIT_HEALTH_URL",
    "COMPANIONFIT_HEALTH_API_KEY",
    "COMPANIONFIT_LOG_FORMAT",
    "COMPANIONFIT_SEED",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    cfg = Config.from_env()
    assert cfg.store == "file"
    assert cfg.data_path == Path("~/.companionfit/user.json").expanduser()
    assert cfg.database_url is None
    assert cfg.health_url is None
    assert cfg.log_format == "text"
    assert cfg.seed is None


def test_postgres_requires_database_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COMPANIONFIT_STORE", "postgres")
    with pytest.raises(RuntimeError, match="DATABASE_URL must be set"):
        Config.from_env()


def test_postgres_store(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COMPANIONFIT_STORE", "Postgres")
    monkeypatch.setenv("DATABASE_URL", "postgresql://app@db/companionfit")
    cfg = Config.from_env()
    assert cfg.store == "postgres"
    assert cfg.database_url == "postgresql://app@db/companionfit"


def test_unknown_store_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COMPANIONFIT_STORE", "redis")
    with pytest.raises(RuntimeError, match="COMPANIONFIT_STORE"):
        Config.from_env()


def test_health_url_requires_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COMPANIONFIT_HEALTH_URL", "https://health.example.com")
    with pytest.raises(RuntimeError, match="COMPANIONFIT_HEALTH_API_KEY"):
        Config.from_env()


def test_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("COMPANIONFIT_DATA_PATH", str(tmp_path / "me.json"))
    monkeypatch.setenv("COMPANIONFIT_LOG_FORMAT", "json")
    monkeypatch.setenv("COMPANIONFIT_SEED", "42")
    cfg = Config.from_env()
    assert cfg.data_path == tmp_path / "me.json"
    assert cfg.log_format == "json"
    assert cfg.seed == 42

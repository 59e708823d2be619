import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_DATA_PATH = "~/.companionfit/user.json"


@dataclass(frozen=True)
class Config:
    store: str = "file"
    data_path: Path = Path(DEFAULT_DATA_PATH).expanduser()
    database_url: str | None = None
    health_url: str | None = None
    health_api_key: str | None = None
    log_format: str = "text"
    seed: int | None = None

    @classmethod
    def from_env(cls) -> "Config":
        store = os.environ.get("COMPANIONFIT_STORE", "file").strip().lower()
        if store not in ("file", "postgres"):
            raise RuntimeError(f"COMPANIONFIT_STORE must be 'file' or 'postgres', got {store!r}")

        database_url = os.environ.get("DATABASE_URL") or None
        if store == "postgres" and not database_url:
            raise RuntimeError("DATABASE_URL must be set when COMPANIONFIT_STORE=postgres")

        health_url = os.environ.get("COMPANIONFIT_HEALTH_URL") or None
        health_api_key = os.environ.get("COMPANIONFIT_HEALTH_API_KEY") or None
        if health_url and not health_api_key:
            raise RuntimeError("COMPANIONFIT_HEALTH_API_KEY must be set with COMPANIONFIT_HEALTH_URL")

        seed = os.environ.get("COMPANIONFIT_SEED")

        return cls(
            store=store,
            data_path=Path(os.environ.get("COMPANIONFIT_DATA_PATH", DEFAULT_DATA_PATH)).expanduser(),
            database_url=database_url,
            health_url=health_url,
            health_api_key=health_api_key,
            log_format=os.environ.get("COMPANIONFIT_LOG_FORMAT", "text"),
            seed=int(seed) if seed else None,
        )

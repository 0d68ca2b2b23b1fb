"""Environment-driven settings. .env is loaded from the repo root or the current directory."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy.engine import URL

_REPO_ROOT = Path(__file__).resolve().parent.parent.parent.parent


def load_env() -> None:
    """Load the first .env found (repo root, then cwd). Existing env vars win."""
    for path in (_REPO_ROOT / ".env", Path.cwd() / ".env"):
        if path.exists():
            load_dotenv(path)
            break


def _int(env: dict, key: str, default: int) -> int:
    raw = (env.get(key) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None


def _float(env: dict, key: str, default: float) -> float:
    raw = (env.get(key) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}") from None


def _bool(env: dict, key: str, default: bool = False) -> bool:
    raw = (env.get(key) or "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    database_url: str
    table_name: str = "contacts"
    pool_size: int = 10
    pool_timeout: float = 30.0
    query_timeout: float = 10.0
    probe_attempts: int = 3
    probe_delay: float = 3.0
    create_schema: bool = False
    api_key: str | None = None
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: dict | None = None) -> "Settings":
        """Read settings from env (os.environ by default).

        DATABASE_URL wins; otherwise a MySQL URL is assembled from DB_HOST, DB_PORT,
        DB_USER, DB_PASSWORD and DB_NAME.
        """
        env = dict(os.environ if env is None else env)
        database_url = (env.get("DATABASE_URL") or "").strip()
        if not database_url:
            database_url = URL.create(
                "mysql+pymysql",
                username=(env.get("DB_USER") or "root").strip(),
                password=env.get("DB_PASSWORD") or None,
                host=(env.get("DB_HOST") or "localhost").strip(),
                port=_int(env, "DB_PORT", 3306),
                database=(env.get("DB_NAME") or "contacts").strip(),
                query={"charset": "utf8mb4"},
            ).render_as_string(hide_password=False)
        return cls(
            database_url=database_url,
            table_name=(env.get("DB_TABLE") or "contacts").strip(),
            pool_size=_int(env, "DB_POOL_SIZE", 10),
            pool_timeout=_float(env, "DB_POOL_TIMEOUT", 30.0),
            query_timeout=_float(env, "DB_QUERY_TIMEOUT", 10.0),
            probe_attempts=_int(env, "DB_PROBE_ATTEMPTS", 3),
            probe_delay=_float(env, "DB_PROBE_DELAY", 3.0),
            create_schema=_bool(env, "DB_CREATE_SCHEMA"),
            api_key=(env.get("API_KEY") or "").strip() or None,
            host=(env.get("HOST") or "0.0.0.0").strip(),
            port=_int(env, "PORT", 3000),
            log_level=(env.get("LOG_LEVEL") or "INFO").strip().upper(),
        )


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str) -> None:
    """Root logging setup from Settings.log_level. Safe to call again: the level always applies."""
    logging.basicConfig(format=LOG_FORMAT, level=level)
    logging.getLogger().setLevel(level)

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


# -------------------------
# Load .env automatically
# -------------------------
def load_env(env_path: Optional[Path] = None) -> None:
    if env_path is None:
        env_path = Path(__file__).resolve().parents[1] / ".env"  # project root
    if not env_path.exists():
        return
    for line in env_path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        k, v = line.split("=", 1)
        os.environ.setdefault(k.strip(), v.strip())


load_env()


def env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class AppConfig:
    environment: str
    log_level: str


@dataclass(frozen=True)
class DBConfig:
    database_url: str


def get_app_config() -> AppConfig:
    return AppConfig(
        environment=os.getenv("APP_ENV", "development").strip().lower(),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
    )


def get_db_config() -> DBConfig:
    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set. Put it in .env or export it.")
    return DBConfig(database_url=url)


def history_enabled() -> bool:
    return bool(os.getenv("DATABASE_URL"))

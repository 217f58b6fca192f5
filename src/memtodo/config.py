# src/memtodo/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- Tests construct Settings (or a SimpleNamespace) directly instead of reading env.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

ENV_PREFIX = "MEMTODO"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv() -> None:
    """Load .env from the working directory (if present) without overriding real env vars."""
    load_dotenv(find_dotenv(usecwd=True), override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    storage_path: Path

    # ---- Persistence ----
    persist: bool

    # ---- Auth redirects ----
    login_redirect: str
    logout_redirect: str

    # ---- Console ----
    default_page_size: int

    @staticmethod
    def from_env() -> Settings:
        _load_dotenv()

        app_name = _env(_k("APP_NAME"), "memtodo").strip() or "memtodo"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/memtodo"))
        storage_path = _env_path(_k("STORAGE_PATH"), data_dir / "storage.json")

        persist = _env_bool(_k("PERSIST"), True)

        login_redirect = _env(_k("LOGIN_REDIRECT"), "/dashboard")
        logout_redirect = _env(_k("LOGOUT_REDIRECT"), "/login")

        default_page_size = max(1, _env_int(_k("PAGE_SIZE"), 10))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            storage_path=storage_path,
            persist=persist,
            login_redirect=login_redirect,
            logout_redirect=logout_redirect,
            default_page_size=default_page_size,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()

# src/taskdeck/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time (the session token lives in its own file).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKDECK"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


# Real environment variables win over .env entries.
load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


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

    # ---- Remote service ----
    api_base_url: str

    # ---- Global switches ----
    console_enabled: bool
    fetch_on_start: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    token_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskdeck").strip() or "taskdeck"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        # Trailing slash would double up with the leading slash of endpoint paths.
        api_base_url = _env(_k("API_BASE_URL"), "http://localhost:8080/api").strip().rstrip("/")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)
        fetch_on_start = _env_bool(_k("FETCH_ON_START"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskdeck"))
        token_path = _env_path(_k("TOKEN_PATH"), data_dir / "session.json")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            api_base_url=api_base_url,
            console_enabled=console_enabled,
            fetch_on_start=fetch_on_start,
            data_dir=data_dir,
            token_path=token_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS

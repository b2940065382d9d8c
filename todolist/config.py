"""Settings loaded from environment variables (+ optional .env).

Every variable uses the ``TODOLIST_`` prefix, e.g. ``TODOLIST_PORT=8080``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

ENV_PREFIX = "TODOLIST"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None or v.strip() == "" else v.strip()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
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


@dataclass(frozen=True, slots=True)
class Settings:
    app_name: str = "todolist"
    host: str = "127.0.0.1"
    port: int = 5000
    log_level: str = "INFO"

    # Seed personal/work/shopping lists into a fresh store
    seed_default_lists: bool = True

    # Where CLI client commands send requests
    api_url: str = "http://127.0.0.1:5000"

    @staticmethod
    def from_env() -> "Settings":
        load_dotenv(find_dotenv(usecwd=True), override=False)

        host = _env(_k("HOST"), "127.0.0.1")
        port = _env_int(_k("PORT"), 5000)

        return Settings(
            app_name=_env(_k("APP_NAME"), "todolist"),
            host=host,
            port=port,
            log_level=_env(_k("LOG_LEVEL"), "INFO").upper(),
            seed_default_lists=_env_bool(_k("SEED_DEFAULT_LISTS"), True),
            api_url=_env(_k("API_URL"), f"http://{host}:{port}"),
        )


def get_settings() -> Settings:
    return Settings.from_env()


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging once, early in process start."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
